import re
from pathlib import Path
from typing import Any, Dict, Optional

from ..jinja import render_template
from ..managers import PackageManager, env_dir, home_dir, read_config, write_config
from ..shared import GOOGLE_MAVEN, GRADLE_PLUGIN_PORTAL, MAVEN_CENTRAL, GradleMirror
from .mirror import MirrorTable

ENV_NAME = "GRADLE_USER_HOME"
SCRIPT_NAME = "init.gradle.kts"

MAPPING_LINE = re.compile(
    r'^\s*"(?P<upstream>[^"]+)"\s+to\s+"(?P<mirror>(?:[^"\\]|\\.)*)"'
)
KOTLIN_ESCAPE = re.compile(r"\\(.)")


def render_init_script(mirror: GradleMirror) -> str:
    # Validates the mirrors form a usable table before anything is written.
    table = MirrorTable.from_mirror(mirror)
    return render_template(
        SCRIPT_NAME,
        maven=table[MAVEN_CENTRAL],
        android=table[GOOGLE_MAVEN],
        plugins=table[GRADLE_PLUGIN_PORTAL],
    )


def kotlin_unescape(value: str) -> str:
    return KOTLIN_ESCAPE.sub(
        lambda m: "\n" if m.group(1) == "n" else m.group(1), value
    )


def parse_init_script(script: str) -> GradleMirror:
    """Recover the mirrors from a rendered script.

    An upstream mapped to itself was rendered from an unset mirror and reads
    back as "".
    """
    found = {}
    for line in script.splitlines():
        match = MAPPING_LINE.match(line)
        if match:
            upstream = match.group("upstream")
            mirror = kotlin_unescape(match.group("mirror"))
            found[upstream] = "" if mirror == upstream else mirror

    return GradleMirror(
        maven=found.get(MAVEN_CENTRAL, ""),
        android=found.get(GOOGLE_MAVEN, ""),
        plugins=found.get(GRADLE_PLUGIN_PORTAL, ""),
    )


class GradlePackageManager(PackageManager[GradleMirror]):
    name = "gradle"

    @property
    def profile_path(self) -> Path:
        return env_dir(ENV_NAME, home_dir() / ".gradle") / SCRIPT_NAME

    def mirror_from_value(self, value: Dict[str, Any]) -> GradleMirror:
        return GradleMirror(
            maven=value.get("maven") or "",
            android=value.get("android") or "",
            plugins=value.get("plugins") or "",
        )

    def new_config(self, mirror: GradleMirror) -> str:
        return render_init_script(mirror)

    def current_mirror(self) -> Optional[GradleMirror]:
        script = read_config(self.profile_path)
        if script is None:
            return None
        return parse_init_script(script)

    def reset_mirrors(self) -> None:
        write_config(self.profile_path, "")

    def mirror_urls(self, mirror: GradleMirror) -> list[str]:
        return [url for url in (mirror.maven, mirror.android, mirror.plugins) if url]
