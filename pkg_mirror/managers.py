import logging
import os
from pathlib import Path
from typing import Any, Dict, Generic, Optional, TypeVar

LOG = logging.getLogger("pkg-mirror")

M = TypeVar("M")


class MirrorConfigError(RuntimeError):
    pass


def home_dir() -> Path:
    return Path(os.path.expanduser("~"))


def env_dir(env_name: str, default: Path) -> Path:
    value = os.environ.get(env_name)
    if value:
        return Path(value)
    return default


def read_config(path: Path) -> Optional[str]:
    if not path.exists():
        return None
    return path.read_text()


def write_config(path: Path, content: str) -> None:
    """Write a profile, creating its directory; empty content removes the file."""
    if not content:
        if path.exists():
            LOG.info("Removing %s", path)
            path.unlink()
        return

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    LOG.info("Wrote %s", path)


class PackageManager(Generic[M]):
    name: str = ""

    @property
    def profile_path(self) -> Path:
        raise NotImplementedError()

    def mirror_from_value(self, value: Dict[str, Any]) -> M:
        raise NotImplementedError()

    def new_config(self, mirror: M) -> str:
        raise NotImplementedError()

    def current_mirror(self) -> Optional[M]:
        raise NotImplementedError()

    def reset_mirrors(self) -> None:
        raise NotImplementedError()

    def set_mirror(self, mirror: M) -> None:
        write_config(self.profile_path, self.new_config(mirror))

    def remove_mirror(self, mirror: M) -> None:
        if self.current_mirror() == mirror:
            self.reset_mirrors()

    def mirror_urls(self, mirror: M) -> list[str]:
        return [mirror.url]
