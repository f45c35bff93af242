import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from .managers import MirrorConfigError, PackageManager, read_config, write_config
from .shared import DockerMirror

ENV_NAME = "DOCKER_DAEMON_CONFIG"
DEFAULT_DAEMON_CONFIG = Path("/etc/docker/daemon.json")
REGISTRY_MIRRORS = "registry-mirrors"


class DockerPackageManager(PackageManager[DockerMirror]):
    """Registry mirrors of the Docker daemon.

    The daemon config is usually root-owned; ``DOCKER_DAEMON_CONFIG`` points
    at another file, e.g. a rootless daemon's ``~/.config/docker/daemon.json``.
    """

    name = "docker"

    @property
    def profile_path(self) -> Path:
        return Path(os.environ.get(ENV_NAME) or DEFAULT_DAEMON_CONFIG)

    def mirror_from_value(self, value: Dict[str, Any]) -> DockerMirror:
        return DockerMirror(url=value["url"])

    def daemon_config(self) -> Dict[str, Any]:
        text = read_config(self.profile_path)
        if not text or not text.strip():
            return {}
        try:
            config = json.loads(text)
        except ValueError as exc:
            raise MirrorConfigError(
                f"{self.profile_path} is not valid JSON: {exc}"
            ) from exc
        if not isinstance(config, dict):
            raise MirrorConfigError(f"{self.profile_path} must hold a JSON object")
        return config

    @staticmethod
    def dump(config: Dict[str, Any]) -> str:
        if not config:
            return ""
        return json.dumps(config, indent=2) + "\n"

    def new_config(self, mirror: DockerMirror) -> str:
        config = self.daemon_config()
        others = [url for url in config.get(REGISTRY_MIRRORS) or [] if url != mirror.url]
        config[REGISTRY_MIRRORS] = [mirror.url] + others
        return self.dump(config)

    def current_mirror(self) -> Optional[DockerMirror]:
        mirrors = self.daemon_config().get(REGISTRY_MIRRORS) or []
        if not mirrors:
            return None
        return DockerMirror(url=mirrors[0])

    def remove_mirror(self, mirror: DockerMirror) -> None:
        if not self.profile_path.exists():
            return
        config = self.daemon_config()
        mirrors = [url for url in config.get(REGISTRY_MIRRORS) or [] if url != mirror.url]
        if mirrors:
            config[REGISTRY_MIRRORS] = mirrors
        else:
            config.pop(REGISTRY_MIRRORS, None)
        write_config(self.profile_path, self.dump(config))

    def reset_mirrors(self) -> None:
        if not self.profile_path.exists():
            return
        config = self.daemon_config()
        config.pop(REGISTRY_MIRRORS, None)
        write_config(self.profile_path, self.dump(config))
