import sys
import textwrap

import pytest

from pkg_mirror.cmd import entrypoint


def test_no_config(tmpdir, monkeypatch):
    """validate-config should fail if config file doesn't exist"""
    monkeypatch.setattr(sys, "argv", ["", "validate-config"])
    monkeypatch.chdir(str(tmpdir))
    with pytest.raises(FileNotFoundError):
        entrypoint()


def test_bad_fields_in_config(tmpdir, monkeypatch, caplog):
    """validate-config should fail if config contains unknown fields."""
    monkeypatch.setattr(sys, "argv", ["", "validate-config"])
    monkeypatch.chdir(str(tmpdir))
    tmpdir.join(".pkg-mirror.yaml").write("apt:\n  url: https://mirrors.ustc.edu.cn/debian\n")
    with pytest.raises(SystemExit) as excinfo:
        entrypoint()

    assert excinfo.value.code == 80
    assert "Path: <top level of config>" in caplog.text
    assert "'apt' was unexpected" in caplog.text


def test_deep_error(tmpdir, monkeypatch, caplog):
    """validate-config should point at the exact field that is wrong."""
    monkeypatch.setattr(sys, "argv", ["", "validate-config"])
    monkeypatch.chdir(str(tmpdir))
    tmpdir.join(".pkg-mirror.yaml").write(
        textwrap.dedent(
            """
            maven:
              id: corp
              # missing scheme
              url: nexus.example/repository/public
            """
        )
    )
    with pytest.raises(SystemExit) as excinfo:
        entrypoint()

    assert excinfo.value.code == 80
    assert "Path: maven.url" in caplog.text
    assert "Object: nexus.example/repository/public" in caplog.text


def test_gradle_mirror_is_upstream(tmpdir, monkeypatch, caplog):
    """A gradle mirror may not point at another upstream repository."""
    monkeypatch.setattr(sys, "argv", ["", "validate-config"])
    monkeypatch.chdir(str(tmpdir))
    tmpdir.join(".pkg-mirror.yaml").write(
        textwrap.dedent(
            """
            gradle:
              maven: https://plugins.gradle.org/m2/
            """
        )
    )
    with pytest.raises(SystemExit) as excinfo:
        entrypoint()

    assert excinfo.value.code == 80
    assert "Path: gradle" in caplog.text
    assert "is itself mirrored" in caplog.text


def test_commands_refuse_invalid_config(tmpdir, monkeypatch, fake_home, caplog):
    """Commands using the config validate it first and write nothing."""
    monkeypatch.setattr(sys, "argv", ["", "config"])
    monkeypatch.chdir(str(tmpdir))
    tmpdir.join(".pkg-mirror.yaml").write("npm: {}\n")
    with pytest.raises(SystemExit) as excinfo:
        entrypoint()

    assert excinfo.value.code == 80
    assert "'url' is a required property" in caplog.text
    assert not (fake_home / ".npmrc").exists()
