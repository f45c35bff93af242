"""A small model of the parts of Gradle an init script touches.

Only what mirror redirection needs is modelled: repository handlers at
each scope, the settings and project objects holding them, and the two
lifecycle hooks (``beforeSettings`` and ``allprojects``) exposed by the
``gradle`` object of an init script.
"""
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional


@dataclass
class MavenRepository:
    url: str
    name: str = "maven"

    has_url = True


@dataclass
class FlatDirRepository:
    dirs: List[str] = field(default_factory=list)
    name: str = "flatDir"

    has_url = False


class RepositoryHandler:
    """Live, ordered collection of repository declarations.

    Like Gradle's handler, an action passed to ``all`` is applied to the
    repositories already present and to every repository added later.
    """

    def __init__(self, repositories=None):
        self._repositories = []
        self._actions: List[Callable] = []
        for repo in repositories or []:
            self.add(repo)

    def add(self, repository):
        self._repositories.append(repository)
        for action in self._actions:
            action(repository)
        return repository

    def maven(self, url: str, name: str = "maven") -> MavenRepository:
        return self.add(MavenRepository(url=url, name=name))

    def maven_central(self) -> MavenRepository:
        return self.maven("https://repo.maven.apache.org/maven2/", "MavenRepo")

    def google(self) -> MavenRepository:
        return self.maven("https://dl.google.com/dl/android/maven2/", "Google")

    def gradle_plugin_portal(self) -> MavenRepository:
        return self.maven("https://plugins.gradle.org/m2", "Gradle Central Plugin Repository")

    def flat_dir(self, *dirs: str) -> FlatDirRepository:
        return self.add(FlatDirRepository(dirs=list(dirs)))

    def all(self, action: Callable) -> None:
        self._actions.append(action)
        for repo in list(self._repositories):
            action(repo)

    def __iter__(self) -> Iterator:
        return iter(self._repositories)

    def __len__(self):
        return len(self._repositories)

    @property
    def urls(self) -> List[Optional[str]]:
        return [repo.url if repo.has_url else None for repo in self._repositories]


@dataclass
class ScriptHandler:
    repositories: RepositoryHandler = field(default_factory=RepositoryHandler)


@dataclass
class PluginManagement:
    repositories: RepositoryHandler = field(default_factory=RepositoryHandler)


@dataclass
class DependencyResolutionManagement:
    repositories: RepositoryHandler = field(default_factory=RepositoryHandler)


@dataclass
class Settings:
    plugin_management: PluginManagement = field(default_factory=PluginManagement)
    dependency_resolution_management: DependencyResolutionManagement = field(
        default_factory=DependencyResolutionManagement
    )


@dataclass
class Project:
    name: str
    buildscript: ScriptHandler = field(default_factory=ScriptHandler)
    repositories: RepositoryHandler = field(default_factory=RepositoryHandler)


class Gradle:
    """Host side of an init script: registers hooks and fires them on evaluate."""

    def __init__(self):
        self._before_settings: List[Callable[[Settings], None]] = []
        self._all_projects: List[Callable[[Project], None]] = []

    def before_settings(self, action: Callable[[Settings], None]) -> None:
        self._before_settings.append(action)

    def all_projects(self, action: Callable[[Project], None]) -> None:
        self._all_projects.append(action)

    def evaluate(self, settings: Settings, projects: List[Project]) -> None:
        for action in self._before_settings:
            action(settings)
        for project in projects:
            for action in self._all_projects:
                action(project)
