import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Iterable, Optional

from ..shared import GradleMirror
from .model import Gradle, Project, RepositoryHandler, Settings

LOG = logging.getLogger("pkg-mirror")


def normalize_url(url: str) -> str:
    # Exactly one trailing slash; no scheme or case folding.
    if url.endswith("/"):
        return url[:-1]
    return url


class MirrorTable(Mapping):
    """Read-only mapping of upstream URL (no trailing slash) to mirror URL."""

    def __init__(self, mappings: Mapping[str, str]):
        table = {normalize_url(key): value for key, value in mappings.items()}
        for key, value in table.items():
            target = normalize_url(value)
            if target != key and target in table:
                raise ValueError(
                    f"Mirror for {key} is {value}, which is itself mirrored; "
                    "mirror URLs must not be upstream repository URLs."
                )
        self._table = MappingProxyType(table)

    @classmethod
    def from_mirror(cls, mirror: GradleMirror) -> "MirrorTable":
        return cls(mirror.upstreams)

    def lookup(self, url: str) -> Optional[str]:
        return self._table.get(normalize_url(url))

    def __getitem__(self, key: str) -> str:
        return self._table[key]

    def __iter__(self):
        return iter(self._table)

    def __len__(self):
        return len(self._table)


def mirror_repository(repository, table: MirrorTable) -> None:
    if not repository.has_url:
        return

    mirror = table.lookup(repository.url)
    if mirror is None:
        return

    LOG.info("Repository[%s] is mirrored to %s", repository.url, mirror)
    repository.url = mirror


def apply_mirrors(declarations: Iterable, table: MirrorTable) -> None:
    for repository in declarations:
        mirror_repository(repository, table)


def enable_mirror(repositories: RepositoryHandler, table: MirrorTable) -> None:
    repositories.all(lambda repository: mirror_repository(repository, table))


def register_mirrors(gradle: Gradle, table: MirrorTable) -> None:
    """Attach mirror redirection to the four repository scopes of a build."""

    def on_project(project: Project):
        enable_mirror(project.buildscript.repositories, table)
        enable_mirror(project.repositories, table)

    def on_settings(settings: Settings):
        enable_mirror(settings.plugin_management.repositories, table)
        enable_mirror(settings.dependency_resolution_management.repositories, table)

    gradle.all_projects(on_project)
    gradle.before_settings(on_settings)
