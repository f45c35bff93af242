#!/usr/bin/env python3
import argparse
import logging
import sys
from typing import Optional

from jsonschema.exceptions import ValidationError

from .cargo import CargoPackageManager
from .catalogue import catalogue_entries, entry_value
from .conf import Config
from .docker import DockerPackageManager
from .gradle import GradlePackageManager
from .managers import PackageManager
from .maven import MavenPackageManager
from .npm import NpmPackageManager
from .pip import PipPackageManager
from .probe import MirrorProbe
from .tui import pick_mirror

LOG = logging.getLogger("pkg-mirror")

DEFAULT_CONF = ".pkg-mirror.yaml"

# (flags, dest, help, required) of the `<manager> set` options.
SET_OPTIONS = {
    "gradle": [
        (("--maven", "-m"), "maven", "Mirror of the Maven Central repository", False),
        (("--android", "-a"), "android", "Mirror of the Google (Android) repository", False),
        (("--plugins", "-p"), "plugins", "Mirror of the Gradle plugin portal", False),
    ],
    "maven": [
        (("--id", "-i"), "id", "Id of the mirror", True),
        (("--name", "-n"), "name", "Name of the mirror", False),
        (("--mirror-of", "-m"), "mirrorOf", "Repositories this mirror replaces", False),
        (("--url", "-u"), "url", "URL of the mirror", True),
    ],
    "pip": [(("--url", "-u"), "url", "URL of the package index mirror", True)],
    "npm": [(("--url", "-u"), "url", "URL of the registry mirror", True)],
    "docker": [(("--url", "-u"), "url", "URL of the registry mirror", True)],
    "cargo": [
        (("--name", "-n"), "name", "Source name used for replace-with", True),
        (("--url", "-u"), "url", "Index URL, optionally sparse+https://...", True),
    ],
}


class PkgMirror:
    def __init__(self):
        self.args: Optional[argparse.Namespace] = None
        self._config: Optional[Config] = None
        self.managers: list[PackageManager] = [
            GradlePackageManager(),
            MavenPackageManager(),
            PipPackageManager(),
            NpmPackageManager(),
            DockerPackageManager(),
            CargoPackageManager(),
        ]

    @property
    def parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="pkg-mirror", description="Configure package manager mirrors"
        )
        parser.set_defaults(func=self.no_command)

        parser.add_argument(
            "--conf",
            "-c",
            type=str,
            default=None,
            help=f"Path to configuration file for pkg-mirror (default: {DEFAULT_CONF})",
        )
        subparsers = parser.add_subparsers()

        validate_config = subparsers.add_parser(
            "validate-config", help="Validate a pkg-mirror configuration file"
        )
        validate_config.set_defaults(func=self.validate_config)

        config = subparsers.add_parser(
            "config", help="Apply the configured mirror of every package manager"
        )
        config.set_defaults(func=self.apply_config)

        list_ = subparsers.add_parser(
            "list", help="Show the current mirror of every package manager"
        )
        list_.set_defaults(func=self.list_mirrors)

        reset = subparsers.add_parser(
            "reset", help="Remove mirrors from every package manager"
        )
        reset.set_defaults(func=self.reset_all)

        check = subparsers.add_parser(
            "check", help="Check that configured mirrors are reachable"
        )
        check.set_defaults(func=self.check)

        for manager in self.managers:
            self.add_manager_parser(subparsers, manager)

        return parser

    def add_manager_parser(self, subparsers, manager: PackageManager):
        parser = subparsers.add_parser(
            manager.name, help=f"Configure the {manager.name} mirror"
        )
        parser.set_defaults(func=self.no_action, manager=manager)
        actions = parser.add_subparsers()

        set_ = actions.add_parser("set", help="Use the mirror given by options")
        for flags, dest, help_text, required in SET_OPTIONS[manager.name]:
            set_.add_argument(*flags, dest=dest, help=help_text, required=required)
        set_.set_defaults(func=self.manager_set)

        select = actions.add_parser(
            "select", help="Pick one of the well-known public mirrors"
        )
        select.set_defaults(func=self.manager_select)

        default = actions.add_parser("default", help="Use the configured mirror")
        default.set_defaults(func=self.manager_default)

        reset = actions.add_parser("reset", help="Remove the mirror")
        reset.set_defaults(func=self.manager_reset)

        get = actions.add_parser("get", help="Show the current mirror")
        get.set_defaults(func=self.manager_get)

        if manager.name == "gradle":
            render = actions.add_parser(
                "render", help="Print the init script for the configured mirror"
            )
            render.set_defaults(func=self.gradle_render)

    @property
    def config(self) -> Config:
        if not self._config:
            # Built-in defaults are fine unless a config file was asked for.
            self._config = Config.from_file(
                self.args.conf or DEFAULT_CONF, missing_ok=self.args.conf is None
            )
            self.ensure_valid(self._config, self.args.conf or DEFAULT_CONF)
        return self._config

    def ensure_valid(self, config: Config, source: str):
        try:
            config.validate()
        except ValidationError as ex:
            LOG.error(
                "%s: configuration error\n  Path: %s\n  Object: %s\n  Cause: %s",
                source,
                ".".join([str(p) for p in ex.absolute_path]) or "<top level of config>",
                ex.instance,
                ex.message,
            )
            sys.exit(80)

    def configured_mirror(self, manager: PackageManager):
        return manager.mirror_from_value(self.config.mirror_value(manager.name))

    def validate_config(self):
        conf = self.args.conf or DEFAULT_CONF
        self.ensure_valid(Config.from_file(conf), conf)
        LOG.info("%s is a valid configuration file.", conf)

    def apply_config(self):
        for manager in self.managers:
            manager.set_mirror(self.configured_mirror(manager))
            LOG.info("%s mirror config updated", manager.name)

    def list_mirrors(self):
        for manager in self.managers:
            print(f"{manager.name}: {self.describe(manager.current_mirror())}")

    def reset_all(self):
        for manager in self.managers:
            manager.reset_mirrors()
            LOG.info("%s mirror has been reset", manager.name)

    def check(self):
        probe = MirrorProbe()
        failed = 0

        for manager in self.managers:
            mirror = self.configured_mirror(manager)
            for result in probe.probe_all(manager.mirror_urls(mirror)):
                if result.reachable:
                    LOG.info(
                        "%s: %s OK (%s, %sms)",
                        manager.name,
                        result.url,
                        result.status_code,
                        result.elapsed_ms,
                    )
                else:
                    failed += 1
                    LOG.warning(
                        "%s: %s unreachable: %s",
                        manager.name,
                        result.url,
                        result.error or result.status_code,
                    )

        if failed:
            LOG.error("%s mirror(s) could not be reached.", failed)
            sys.exit(81)

    def manager_set(self):
        manager = self.args.manager
        value = {
            dest: getattr(self.args, dest)
            for (_, dest, _, _) in SET_OPTIONS[manager.name]
            if getattr(self.args, dest)
        }
        # Same rules as the config file, so nothing unusable is written.
        self.ensure_valid(Config({manager.name: value}), "command line")
        manager.set_mirror(manager.mirror_from_value(value))
        LOG.info("%s mirror config updated", manager.name)

    def manager_select(self):
        manager = self.args.manager
        entries = catalogue_entries(manager.name)
        index = pick_mirror(manager.name, entries)
        if index is None:
            LOG.info("No %s mirror selected.", manager.name)
            return

        entry = entries[index]
        manager.set_mirror(manager.mirror_from_value(entry_value(entry)))
        LOG.info("%s mirror set to %s", manager.name, entry["title"])

    def manager_default(self):
        manager = self.args.manager
        manager.set_mirror(self.configured_mirror(manager))
        LOG.info("%s mirror config updated", manager.name)

    def manager_reset(self):
        self.args.manager.reset_mirrors()
        LOG.info("%s mirror has been reset", self.args.manager.name)

    def manager_get(self):
        print(self.describe(self.args.manager.current_mirror()))

    def gradle_render(self):
        manager = self.args.manager
        print(manager.new_config(self.configured_mirror(manager)), end="")

    @staticmethod
    def describe(mirror) -> str:
        if mirror is None:
            return "<no mirror configured>"
        return repr(mirror)

    def no_command(self):
        LOG.error("Must specify a command (try `--help').")
        sys.exit(72)

    def no_action(self):
        LOG.error(
            "Must specify an action for %s (try `--help').", self.args.manager.name
        )
        sys.exit(72)

    def run(self, args):
        logging.basicConfig(level=logging.WARNING, format="%(message)s")
        LOG.setLevel(logging.INFO)
        self.args = self.parser.parse_args(args)
        self.args.func()


def entrypoint():
    PkgMirror().run(sys.argv[1:])
