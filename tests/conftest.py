import pytest
import requests_mock


@pytest.fixture(autouse=True)
def requests_mocker():
    # This is autouse to protect tests against accidentally doing real
    # requests without it being noticed.
    with requests_mock.Mocker() as m:
        yield m


@pytest.fixture(autouse=True)
def fake_home(tmp_path, monkeypatch):
    # Profiles are written below HOME; never touch the real one.
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("GRADLE_USER_HOME", raising=False)
    monkeypatch.delenv("M2_HOME", raising=False)
    monkeypatch.delenv("CARGO_HOME", raising=False)
    monkeypatch.setenv("DOCKER_DAEMON_CONFIG", str(home / "docker" / "daemon.json"))
    return home
