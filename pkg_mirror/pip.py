import configparser
import io
from pathlib import Path
from typing import Any, Dict, Optional

from .managers import (
    MirrorConfigError,
    PackageManager,
    home_dir,
    read_config,
    write_config,
)
from .shared import PipMirror


class PipPackageManager(PackageManager[PipMirror]):
    name = "pip"

    @property
    def profile_path(self) -> Path:
        return home_dir() / ".pip" / "pip.conf"

    def mirror_from_value(self, value: Dict[str, Any]) -> PipMirror:
        return PipMirror(url=value["url"])

    def parser(self) -> configparser.ConfigParser:
        parser = configparser.ConfigParser(interpolation=None)
        text = read_config(self.profile_path)
        if text is not None:
            try:
                parser.read_string(text, source=str(self.profile_path))
            except configparser.Error as exc:
                raise MirrorConfigError(
                    f"{self.profile_path} is not a valid pip config: {exc}"
                ) from exc
        return parser

    @staticmethod
    def dump(parser: configparser.ConfigParser) -> str:
        out = io.StringIO()
        parser.write(out)
        text = out.getvalue()
        return text if text.strip() else ""

    def new_config(self, mirror: PipMirror) -> str:
        parser = self.parser()
        for section in ("global", "install"):
            if not parser.has_section(section):
                parser.add_section(section)
        parser.set("global", "index-url", mirror.url)
        parser.set("install", "trusted-host", mirror.host)
        return self.dump(parser)

    def current_mirror(self) -> Optional[PipMirror]:
        parser = self.parser()
        url = parser.get("global", "index-url", fallback="")
        if not url:
            return None
        return PipMirror(url=url)

    def reset_mirrors(self) -> None:
        if not self.profile_path.exists():
            return
        parser = self.parser()
        for section, option in (("global", "index-url"), ("install", "trusted-host")):
            if not parser.has_section(section):
                continue
            parser.remove_option(section, option)
            if not parser.items(section, raw=True):
                parser.remove_section(section)
        write_config(self.profile_path, self.dump(parser))
