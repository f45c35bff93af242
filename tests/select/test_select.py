import asyncio
import sys

import jsonschema
import pytest

from pkg_mirror import cmd
from pkg_mirror.catalogue import catalogue_entries, entry_value, load_catalogue
from pkg_mirror.conf import Config
from pkg_mirror.tui import MirrorPicker, describe_entry


def test_catalogue_covers_every_manager():
    catalogue = load_catalogue()

    for manager in cmd.PkgMirror().managers:
        assert catalogue[manager.name], manager.name


@pytest.mark.parametrize("name", sorted(load_catalogue()))
def test_catalogue_entries_are_valid_config(name):
    """Every built-in mirror passes the same checks as a config file."""
    for entry in catalogue_entries(name):
        assert entry["title"]
        Config({name: entry_value(entry)}).validate()


def test_describe_entry():
    entry = {"title": "USTC", "url": "https://mirrors.ustc.edu.cn/pypi/simple"}

    assert describe_entry(entry) == "USTC  https://mirrors.ustc.edu.cn/pypi/simple"


def test_select_sets_chosen_mirror(tmpdir, monkeypatch, fake_home, caplog):
    monkeypatch.chdir(str(tmpdir))
    monkeypatch.setattr(sys, "argv", ["", "pip", "select"])
    offered = []

    def fake_pick(manager_name, entries):
        offered.append((manager_name, [e["title"] for e in entries]))
        return 1

    monkeypatch.setattr(cmd, "pick_mirror", fake_pick)

    cmd.entrypoint()

    assert offered == [("pip", [e["title"] for e in catalogue_entries("pip")])]
    expected = catalogue_entries("pip")[1]["url"]
    assert f"index-url = {expected}" in (fake_home / ".pip" / "pip.conf").read_text()
    assert "pip mirror set to Tsinghua TUNA" in caplog.text


def test_select_cancelled(tmpdir, monkeypatch, fake_home, caplog):
    monkeypatch.chdir(str(tmpdir))
    monkeypatch.setattr(sys, "argv", ["", "npm", "select"])
    monkeypatch.setattr(cmd, "pick_mirror", lambda *_: None)

    cmd.entrypoint()

    assert "No npm mirror selected." in caplog.text
    assert not (fake_home / ".npmrc").exists()


def run_picker(*keys):
    async def drive():
        app = MirrorPicker("pip", catalogue_entries("pip"))
        async with app.run_test() as pilot:
            await pilot.press(*keys)
            await pilot.pause()
        return app.return_value

    return asyncio.run(drive())


def test_picker_returns_highlighted_index():
    assert run_picker("down", "enter") == 1


def test_picker_escape_returns_nothing():
    assert run_picker("escape") is None
