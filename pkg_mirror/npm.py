from pathlib import Path
from typing import Any, Dict, Optional

from .managers import PackageManager, home_dir, read_config, write_config
from .shared import NpmMirror

REGISTRY = "registry="


class NpmPackageManager(PackageManager[NpmMirror]):
    name = "npm"

    @property
    def profile_path(self) -> Path:
        return home_dir() / ".npmrc"

    def mirror_from_value(self, value: Dict[str, Any]) -> NpmMirror:
        return NpmMirror(url=value["url"])

    def lines(self) -> list[str]:
        return (read_config(self.profile_path) or "").splitlines()

    def new_config(self, mirror: NpmMirror) -> str:
        out = []
        replaced = False
        for line in self.lines():
            if line.startswith(REGISTRY):
                if replaced:
                    continue
                line = REGISTRY + mirror.url
                replaced = True
            out.append(line)
        if not replaced:
            out.append(REGISTRY + mirror.url)
        return "\n".join(out) + "\n"

    def current_mirror(self) -> Optional[NpmMirror]:
        for line in self.lines():
            if line.startswith(REGISTRY):
                return NpmMirror(url=line[len(REGISTRY) :].strip())
        return None

    def remove_mirror(self, mirror: NpmMirror) -> None:
        if not self.profile_path.exists():
            return
        kept = [line for line in self.lines() if line.strip() != REGISTRY + mirror.url]
        write_config(self.profile_path, "\n".join(kept) + "\n" if kept else "")

    def reset_mirrors(self) -> None:
        if not self.profile_path.exists():
            return
        kept = [line for line in self.lines() if not line.startswith(REGISTRY)]
        write_config(self.profile_path, "\n".join(kept) + "\n" if kept else "")
