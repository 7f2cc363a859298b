"""Persistent connection configuration.

The Jenkins URL and username live in a small JSON file under the per-user
config directory. The API token is kept out of that file and stored in the
OS keyring instead, keyed by the normalized URL.
"""

import json
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import click
import keyring
from keyring.errors import KeyringError

from .errors import (
    ConfigCorruptError,
    ConfigNotFoundError,
    ConfigWriteError,
    CredentialStoreError,
    TokenNotFoundError,
)
from .log import debug_log
from .normalize import normalize_url

APP_NAME = "jenkins-cli"
SERVICE_NAME = "jenkins-cli"
CONFIG_FILE = "config.json"


@dataclass
class ConnectionConfig:
    """Connection details stored in the config file."""
    url: str
    username: str = ""


def get_config_dir() -> Path:
    """Return the per-user configuration directory for jenkins-cli."""
    return Path(click.get_app_dir(APP_NAME))


def get_config_path(config_dir: Optional[Path] = None) -> Path:
    if config_dir is None:
        config_dir = get_config_dir()
    return Path(config_dir) / CONFIG_FILE


def save_config(url: str, username: str = "", config_dir: Optional[Path] = None) -> ConnectionConfig:
    """Save the Jenkins URL and username to the config file.

    The URL is normalized before it is written. The file is replaced
    atomically and is readable by the owner only.

    Args:
        url: Jenkins URL, with or without scheme and trailing slash
        username: Jenkins username, may be empty
        config_dir: Directory to write to, defaults to the user config dir

    Returns:
        The ConnectionConfig that was written

    Raises:
        ConfigWriteError: If the directory or file cannot be written
    """
    config = ConnectionConfig(url=normalize_url(url), username=username)
    config_path = get_config_path(config_dir)

    try:
        config_path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigWriteError(f"failed to create config directory: {e}") from e

    record = {"url": config.url}
    if config.username:
        record["username"] = config.username

    try:
        fd, tmp_name = tempfile.mkstemp(dir=config_path.parent, prefix=".config-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(record, f, indent=2)
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, config_path)
        except BaseException:
            os.unlink(tmp_name)
            raise
    except OSError as e:
        raise ConfigWriteError(f"failed to write config file: {e}") from e

    debug_log(f"Saved config to {config_path}")
    return config


def load_config(config_dir: Optional[Path] = None) -> ConnectionConfig:
    """Load the Jenkins URL and username from the config file.

    Raises:
        ConfigNotFoundError: If no config file exists
        ConfigCorruptError: If the file cannot be read or parsed
    """
    config_path = get_config_path(config_dir)
    try:
        data = config_path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigNotFoundError(f"config file not found: {config_path}") from e
    except OSError as e:
        raise ConfigCorruptError(f"failed to read config file: {e}") from e

    try:
        record = json.loads(data)
    except ValueError as e:
        raise ConfigCorruptError(f"failed to parse config file: {e}") from e

    if not isinstance(record, dict) or not isinstance(record.get("url"), str):
        raise ConfigCorruptError(f"failed to parse config file: missing 'url' in {config_path}")

    username = record.get("username") or ""
    if not isinstance(username, str):
        raise ConfigCorruptError(f"failed to parse config file: 'username' must be a string in {config_path}")

    debug_log(f"Loaded config from {config_path}")
    return ConnectionConfig(url=record["url"], username=username)


def save_token(url: str, token: str) -> None:
    """Save the API token to the keyring under the given URL.

    Raises:
        CredentialStoreError: If the keyring backend fails
    """
    try:
        keyring.set_password(SERVICE_NAME, url, token)
    except KeyringError as e:
        raise CredentialStoreError(f"failed to save token to keyring: {e}") from e


def load_token(url: str) -> str:
    """Load the API token stored for the given URL.

    The URL must be the exact string used with save_token.

    Raises:
        TokenNotFoundError: If no token is stored for the URL
        CredentialStoreError: If the keyring backend fails
    """
    try:
        token = keyring.get_password(SERVICE_NAME, url)
    except KeyringError as e:
        raise CredentialStoreError(f"failed to read token from keyring: {e}") from e
    if not token:
        raise TokenNotFoundError(f"no token stored for {url}")
    return token
