from pathlib import Path
from typing import Any, Dict, Optional

import tomlkit
from tomlkit.exceptions import ParseError
from tomlkit.toml_document import TOMLDocument

from .managers import (
    MirrorConfigError,
    PackageManager,
    env_dir,
    home_dir,
    read_config,
    write_config,
)
from .shared import CargoMirror

ENV_NAME = "CARGO_HOME"
CRATES_IO = "crates-io"
REPLACE_WITH = "replace-with"
SPARSE = "sparse+"


def super_table(doc, key: str):
    table = doc.get(key)
    if table is None:
        table = tomlkit.table(is_super_table=True)
        doc[key] = table
    return table


def drop_if_empty(doc, key: str) -> None:
    if key in doc and not doc[key]:
        del doc[key]


class CargoPackageManager(PackageManager[CargoMirror]):
    """Source replacement for crates.io in ``$CARGO_HOME/config.toml``.

    Edits go through tomlkit so comments and layout of the rest of the file
    are kept.
    """

    name = "cargo"

    @property
    def profile_path(self) -> Path:
        return env_dir(ENV_NAME, home_dir() / ".cargo") / "config.toml"

    def mirror_from_value(self, value: Dict[str, Any]) -> CargoMirror:
        return CargoMirror(name=value["name"], url=value["url"])

    def mirror_urls(self, mirror: CargoMirror) -> list[str]:
        url = mirror.url
        if url.startswith(SPARSE):
            url = url[len(SPARSE) :]
        return [url]

    def document(self) -> TOMLDocument:
        text = read_config(self.profile_path)
        if text is None:
            return tomlkit.document()
        try:
            return tomlkit.parse(text)
        except ParseError as exc:
            raise MirrorConfigError(
                f"{self.profile_path} is not valid TOML: {exc}"
            ) from exc

    def new_config(self, mirror: CargoMirror) -> str:
        doc = self.document()
        source = super_table(doc, "source")

        crates_io = source.get(CRATES_IO)
        if crates_io is None:
            crates_io = tomlkit.table()
            source[CRATES_IO] = crates_io
        crates_io[REPLACE_WITH] = mirror.name

        replacement = tomlkit.table()
        replacement["registry"] = mirror.url
        source[mirror.name] = replacement

        registry = tomlkit.table()
        registry["index"] = mirror.url
        super_table(doc, "registries")[mirror.name] = registry

        return tomlkit.dumps(doc)

    def current_mirror(self) -> Optional[CargoMirror]:
        if not self.profile_path.exists():
            return None
        doc = self.document()
        source = doc.get("source") or {}
        name = (source.get(CRATES_IO) or {}).get(REPLACE_WITH)
        if not name:
            return None

        url = (source.get(name) or {}).get("registry") or (
            (doc.get("registries") or {}).get(name) or {}
        ).get("index")
        if not url:
            return None
        return CargoMirror(name=str(name), url=str(url))

    def forget(self, doc, name: str) -> None:
        for key in ("source", "registries"):
            table = doc.get(key)
            if table is not None and name in table:
                del table[name]

    def save(self, doc) -> None:
        source = doc.get("source")
        if source is not None:
            drop_if_empty(source, CRATES_IO)
        drop_if_empty(doc, "source")
        drop_if_empty(doc, "registries")
        text = tomlkit.dumps(doc)
        write_config(self.profile_path, text if text.strip() else "")

    def remove_mirror(self, mirror: CargoMirror) -> None:
        current = self.current_mirror()
        if current is not None and current.name == mirror.name:
            self.reset_mirrors()
            return
        if not self.profile_path.exists():
            return
        doc = self.document()
        self.forget(doc, mirror.name)
        self.save(doc)

    def reset_mirrors(self) -> None:
        if not self.profile_path.exists():
            return
        doc = self.document()
        crates_io = (doc.get("source") or {}).get(CRATES_IO)
        if crates_io is not None and REPLACE_WITH in crates_io:
            self.forget(doc, str(crates_io[REPLACE_WITH]))
            del crates_io[REPLACE_WITH]
        self.save(doc)
