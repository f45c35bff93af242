import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Dict, Optional

from .jinja import render_template
from .managers import (
    MirrorConfigError,
    PackageManager,
    env_dir,
    home_dir,
    read_config,
    write_config,
)
from .shared import MavenMirror

ENV_NAME = "M2_HOME"
XSI = "http://www.w3.org/2001/XMLSchema-instance"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'

# Declaration, doctype, comments and whitespace before the root element.
PROLOG = re.compile(r"(?:\s+|<\?.*?\?>|<!--.*?-->|<!DOCTYPE[^>]*>)*", re.DOTALL)


def namespace_of(root: ET.Element) -> str:
    if root.tag.startswith("{"):
        return root.tag[1 : root.tag.index("}")]
    return ""


def trailing_comments(text: str) -> str:
    end = len(text.rstrip())
    while text[:end].endswith("-->"):
        start = text.rfind("<!--", 0, end)
        if start < 0:
            break
        end = len(text[:start].rstrip())
    return text[end:]


class SettingsDocument:
    """An existing settings.xml, edited in place through ElementTree."""

    def __init__(self, text: str, path: Path):
        parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
        try:
            self.root = ET.fromstring(text, parser=parser)
        except ET.ParseError as exc:
            raise MirrorConfigError(f"{path} is not valid XML: {exc}") from exc

        self.namespace = namespace_of(self.root)

        # ElementTree drops whatever sits outside the root element
        # (declaration, licence header comments); keep it verbatim.
        self.prolog = PROLOG.match(text).group(0)
        self.epilog = trailing_comments(text)

    def tag(self, name: str) -> str:
        if self.namespace:
            return "{%s}%s" % (self.namespace, name)
        return name

    @property
    def mirrors_element(self) -> Optional[ET.Element]:
        return self.root.find(self.tag("mirrors"))

    def ensure_mirrors_element(self) -> ET.Element:
        mirrors = self.mirrors_element
        if mirrors is None:
            mirrors = ET.SubElement(self.root, self.tag("mirrors"))
        return mirrors

    def mirrors(self) -> list[MavenMirror]:
        out = []
        element = self.mirrors_element
        if element is None:
            return out
        for mirror in element.findall(self.tag("mirror")):
            out.append(
                MavenMirror(
                    id=mirror.findtext(self.tag("id"), ""),
                    name=mirror.findtext(self.tag("name"), ""),
                    mirror_of=mirror.findtext(self.tag("mirrorOf"), ""),
                    url=mirror.findtext(self.tag("url"), ""),
                )
            )
        return out

    def put_first(self, mirror: MavenMirror) -> None:
        mirrors = self.ensure_mirrors_element()
        for existing in mirrors.findall(self.tag("mirror")):
            if existing.findtext(self.tag("id")) == mirror.id:
                mirrors.remove(existing)

        element = ET.Element(self.tag("mirror"))
        for name, value in (
            ("id", mirror.id),
            ("name", mirror.name),
            ("mirrorOf", mirror.mirror_of),
            ("url", mirror.url),
        ):
            ET.SubElement(element, self.tag(name)).text = value
        mirrors.insert(0, element)

    def clear(self) -> None:
        mirrors = self.mirrors_element
        if mirrors is not None:
            for child in list(mirrors):
                mirrors.remove(child)

    def serialize(self) -> str:
        if self.namespace:
            ET.register_namespace("", self.namespace)
        ET.register_namespace("xsi", XSI)
        ET.indent(self.root, space="  ")
        body = ET.tostring(self.root, encoding="unicode")
        return (self.prolog or XML_DECLARATION) + body + (self.epilog or "\n")


class MavenPackageManager(PackageManager[MavenMirror]):
    name = "maven"

    @property
    def profile_path(self) -> Path:
        return env_dir(ENV_NAME, home_dir() / ".m2") / "settings.xml"

    def mirror_from_value(self, value: Dict[str, Any]) -> MavenMirror:
        return MavenMirror(
            id=value["id"],
            url=value["url"],
            name=value.get("name") or value["id"],
            mirror_of=value.get("mirrorOf") or "*",
        )

    def document(self) -> Optional[SettingsDocument]:
        text = read_config(self.profile_path)
        if text is None:
            return None
        return SettingsDocument(text, self.profile_path)

    def new_config(self, mirror: MavenMirror) -> str:
        doc = self.document()
        if doc is None:
            return render_template("settings.xml", mirror=mirror)

        doc.put_first(mirror)
        return doc.serialize()

    def current_mirror(self) -> Optional[MavenMirror]:
        doc = self.document()
        if doc is None:
            return None
        mirrors = doc.mirrors()
        return mirrors[0] if mirrors else None

    def remove_mirror(self, mirror: MavenMirror) -> None:
        doc = self.document()
        if doc is None:
            return
        kept = [m for m in doc.mirrors() if m.id != mirror.id]
        doc.clear()
        for m in reversed(kept):
            doc.put_first(m)
        write_config(self.profile_path, doc.serialize())

    def reset_mirrors(self) -> None:
        doc = self.document()
        if doc is None:
            return
        doc.clear()
        write_config(self.profile_path, doc.serialize())
