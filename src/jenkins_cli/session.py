"""Resolve the Jenkins URL, username and token used for a command.

Each value comes from the first source that provides it, in this order:

1. explicit command-line option
2. environment variable
3. config file / OS keyring
4. built-in default (username only)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Mapping, Optional

from .config import ConnectionConfig, load_config, load_token
from .errors import ConfigError, ConfigNotFoundError, CredentialStoreError, TokenNotFoundError
from .log import debug_log
from .normalize import normalize_url

ENV_URL = "JENKINS_URL"
ENV_HOST = "JENKINS_HOST"
ENV_TOKEN = "JENKINS_TOKEN"
ENV_USER = "JENKINS_USER"

DEFAULT_USERNAME = "admin"

Provider = Callable[[], Optional[str]]


@dataclass(frozen=True)
class Session:
    """Fully resolved connection details for a single invocation."""
    url: str
    username: str
    token: str

    def __repr__(self):
        return f"Session(url={self.url!r}, username={self.username!r}, token='***')"


def first_present(providers: Iterable[Provider]) -> Optional[str]:
    """Return the first non-empty value produced by the providers.

    Providers are called lazily, in order, and later ones are not called
    once a value has been found.
    """
    for provider in providers:
        value = provider()
        if value:
            return value
    return None


class _StoredConnection:
    """Lazily reads the config file the first time the URL is asked for."""

    def __init__(self, config_dir: Optional[Path] = None):
        self._config_dir = config_dir
        self.config: Optional[ConnectionConfig] = None

    def url(self) -> Optional[str]:
        try:
            self.config = load_config(self._config_dir)
        except ConfigNotFoundError:
            debug_log("No config file found")
            return None
        return self.config.url

    def username(self) -> Optional[str]:
        # Only set when the URL itself came from the config file.
        if self.config is None:
            return None
        return self.config.username


def _keyring_token(url: str) -> str:
    try:
        return load_token(url)
    except (TokenNotFoundError, CredentialStoreError) as e:
        raise ConfigError("token not found, please run 'jenkins configure <url>' first") from e


def resolve_session(
    url: Optional[str] = None,
    username: Optional[str] = None,
    token: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    config_dir: Optional[Path] = None,
) -> Session:
    """Build the Session for this invocation.

    Args:
        url: URL given on the command line
        username: Username given on the command line
        token: Token given explicitly by the caller
        environ: Environment to read overrides from, defaults to os.environ
        config_dir: Config directory, defaults to the user config dir

    Returns:
        Session with non-empty url, username and token

    Raises:
        ConfigError: If no URL or no token can be found
        ConfigCorruptError: If the config file exists but cannot be parsed
    """
    if environ is None:
        environ = os.environ
    stored = _StoredConnection(config_dir)

    resolved_url = first_present([
        lambda: url,
        lambda: environ.get(ENV_URL),
        lambda: environ.get(ENV_HOST),
        stored.url,
    ])
    resolved_url = normalize_url(resolved_url or "")
    if not resolved_url:
        raise ConfigError(
            "Jenkins URL must be configured (use 'jenkins configure <url>' or set JENKINS_URL env var)"
        )

    resolved_token = first_present([
        lambda: token,
        lambda: environ.get(ENV_TOKEN),
        lambda: _keyring_token(resolved_url),
    ])
    if not resolved_token:
        raise ConfigError("token is required")

    resolved_username = first_present([
        lambda: username,
        lambda: environ.get(ENV_USER),
        stored.username,
        lambda: DEFAULT_USERNAME,
    ])

    debug_log(f"JENKINS_URL: {resolved_url}")
    debug_log(f"JENKINS_USER: {resolved_username}")
    debug_log("JENKINS_TOKEN: Set")
    return Session(url=resolved_url, username=resolved_username, token=resolved_token)
