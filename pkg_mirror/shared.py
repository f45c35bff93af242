from dataclasses import dataclass, field
from urllib.parse import urlsplit

MAVEN_CENTRAL = "https://repo.maven.apache.org/maven2"
GOOGLE_MAVEN = "https://dl.google.com/dl/android/maven2"
GRADLE_PLUGIN_PORTAL = "https://plugins.gradle.org/m2"


@dataclass
class GradleMirror:
    # Empty means "not mirrored"; the upstream URL is used as-is.
    maven: str = ""
    android: str = ""
    plugins: str = ""

    @property
    def upstreams(self) -> dict[str, str]:
        return {
            MAVEN_CENTRAL: self.maven or MAVEN_CENTRAL,
            GOOGLE_MAVEN: self.android or GOOGLE_MAVEN,
            GRADLE_PLUGIN_PORTAL: self.plugins or GRADLE_PLUGIN_PORTAL,
        }


@dataclass
class MavenMirror:
    id: str
    url: str
    name: str = ""
    mirror_of: str = "*"


@dataclass
class PipMirror:
    url: str
    host: str = field(init=False)

    def __post_init__(self):
        self.host = urlsplit(self.url).netloc


@dataclass
class NpmMirror:
    url: str


@dataclass
class DockerMirror:
    url: str


@dataclass
class CargoMirror:
    # Source name used for `replace-with`, e.g. "rsproxy".
    name: str
    url: str
