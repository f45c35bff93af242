import sys
import textwrap

import pytest

from pkg_mirror.cmd import entrypoint


def run(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", [""] + list(args))
    entrypoint()


def test_gradle_set_get_reset(tmpdir, monkeypatch, fake_home, capsys):
    monkeypatch.chdir(str(tmpdir))
    script = fake_home / ".gradle" / "init.gradle.kts"

    run(monkeypatch, "gradle", "set", "-m", "https://mirror.example/central")
    assert script.exists()
    assert '"https://repo.maven.apache.org/maven2" to "https://mirror.example/central"' in (
        script.read_text()
    )

    capsys.readouterr()
    run(monkeypatch, "gradle", "get")
    out = capsys.readouterr().out
    assert "maven='https://mirror.example/central'" in out
    assert "plugins=''" in out

    run(monkeypatch, "gradle", "reset")
    assert not script.exists()


def test_gradle_render_uses_config(tmpdir, monkeypatch, fake_home, capsys):
    monkeypatch.chdir(str(tmpdir))
    tmpdir.join(".pkg-mirror.yaml").write(
        textwrap.dedent(
            """
            gradle:
              maven: https://mirror.example/central
              plugins: https://mirror.example/plugins
            """
        )
    )

    run(monkeypatch, "gradle", "render")

    out = capsys.readouterr().out
    assert '"https://plugins.gradle.org/m2" to "https://mirror.example/plugins"' in out
    assert (
        '"https://dl.google.com/dl/android/maven2" to '
        '"https://dl.google.com/dl/android/maven2"'
    ) in out
    # render never writes the script
    assert not (fake_home / ".gradle" / "init.gradle.kts").exists()


def test_maven_set(tmpdir, monkeypatch, fake_home):
    monkeypatch.chdir(str(tmpdir))

    run(
        monkeypatch,
        "maven",
        "set",
        "--id",
        "corp",
        "--url",
        "https://nexus.example/public",
        "--mirror-of",
        "central",
    )

    text = (fake_home / ".m2" / "settings.xml").read_text()
    assert "<id>corp</id>" in text
    assert "<name>corp</name>" in text
    assert "<mirrorOf>central</mirrorOf>" in text


def test_default_uses_builtin_mirror(tmpdir, monkeypatch, fake_home):
    """Without a config file the built-in mirror is applied."""
    monkeypatch.chdir(str(tmpdir))

    run(monkeypatch, "npm", "default")

    assert (fake_home / ".npmrc").read_text() == "registry=https://registry.npmmirror.com\n"


def test_config_list_reset(tmpdir, monkeypatch, fake_home, capsys, caplog):
    monkeypatch.chdir(str(tmpdir))
    tmpdir.join(".pkg-mirror.yaml").write(
        textwrap.dedent(
            """
            pip:
              url: https://pypi.example/simple
            npm:
              url: https://npm.example
            """
        )
    )

    run(monkeypatch, "config")

    assert "gradle mirror config updated" in caplog.text
    assert (fake_home / ".gradle" / "init.gradle.kts").exists()
    assert (fake_home / ".m2" / "settings.xml").exists()
    assert "index-url = https://pypi.example/simple" in (
        fake_home / ".pip" / "pip.conf"
    ).read_text()

    capsys.readouterr()
    run(monkeypatch, "list")
    out = capsys.readouterr().out
    assert "npm: NpmMirror(url='https://npm.example')" in out
    assert "maven: MavenMirror(id='aliyun'" in out

    run(monkeypatch, "reset")

    capsys.readouterr()
    run(monkeypatch, "list")
    out = capsys.readouterr().out
    for name in ("gradle", "maven", "pip", "npm", "docker", "cargo"):
        assert f"{name}: <no mirror configured>" in out


def test_gradle_set_rejects_upstream_mirror(tmpdir, monkeypatch, fake_home, caplog):
    """A mirror that is another upstream is reported, not a traceback."""
    monkeypatch.chdir(str(tmpdir))

    with pytest.raises(SystemExit) as excinfo:
        run(monkeypatch, "gradle", "set", "-m", "https://plugins.gradle.org/m2")

    assert excinfo.value.code == 80
    assert "command line: configuration error" in caplog.text
    assert "Path: gradle" in caplog.text
    assert not (fake_home / ".gradle" / "init.gradle.kts").exists()


def test_set_rejects_bad_url(tmpdir, monkeypatch, fake_home, caplog):
    """Values given to `set` obey the same URL rule as the config file."""
    monkeypatch.chdir(str(tmpdir))

    with pytest.raises(SystemExit) as excinfo:
        run(monkeypatch, "gradle", "set", "-m", 'https://m.example/"repo"')

    assert excinfo.value.code == 80
    assert "Path: gradle.maven" in caplog.text
    assert not (fake_home / ".gradle" / "init.gradle.kts").exists()


def test_docker_and_cargo_set(tmpdir, monkeypatch, fake_home, capsys):
    monkeypatch.chdir(str(tmpdir))

    run(monkeypatch, "docker", "set", "-u", "https://docker.example")
    run(
        monkeypatch,
        "cargo",
        "set",
        "-n",
        "rsproxy",
        "-u",
        "sparse+https://rsproxy.cn/index/",
    )

    capsys.readouterr()
    run(monkeypatch, "list")
    out = capsys.readouterr().out
    assert "docker: DockerMirror(url='https://docker.example')" in out
    assert (
        "cargo: CargoMirror(name='rsproxy', url='sparse+https://rsproxy.cn/index/')"
    ) in out
