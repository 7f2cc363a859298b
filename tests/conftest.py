"""Shared fixtures: isolate tests from the real environment, config dir and keyring."""

import pytest

from jenkins_cli import config
from jenkins_cli.log import configure_logging


@pytest.fixture(autouse=True)
def clean_env(tmp_path, monkeypatch):
    # setenv first so variables loaded from a .env file are removed again on teardown
    for var in ("JENKINS_URL", "JENKINS_HOST", "JENKINS_TOKEN", "JENKINS_USER", "JENKINS_CLI_DEBUG"):
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def quiet_logging():
    yield
    configure_logging()


@pytest.fixture(autouse=True)
def config_dir(tmp_path, monkeypatch):
    path = tmp_path / "jenkins-cli"
    monkeypatch.setattr(config, "get_config_dir", lambda: path)
    return path


@pytest.fixture(autouse=True)
def fake_keyring(monkeypatch):
    store = {}

    def set_password(service, username, password):
        store[(service, username)] = password

    def get_password(service, username):
        return store.get((service, username))

    monkeypatch.setattr("keyring.set_password", set_password)
    monkeypatch.setattr("keyring.get_password", get_password)
    return store
