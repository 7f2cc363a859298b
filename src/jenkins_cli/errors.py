"""Exceptions raised by jenkins-cli."""

from typing import Optional


class JenkinsCliError(Exception):
    """Base exception for jenkins-cli errors."""
    pass


class ConfigError(JenkinsCliError):
    """The connection is not configured (run `jenkins configure` first)."""
    pass


class ConfigNotFoundError(ConfigError):
    """The config file does not exist."""
    pass


class ConfigCorruptError(ConfigError):
    """The config file exists but cannot be parsed."""
    pass


class TokenNotFoundError(ConfigError):
    """No token is stored in the keyring for the connection URL."""
    pass


class ConfigWriteError(JenkinsCliError):
    """The config directory or file could not be written."""
    pass


class CredentialStoreError(JenkinsCliError):
    """The keyring backend failed."""
    pass


class JenkinsRequestError(JenkinsCliError):
    """The HTTP request to Jenkins could not be completed."""
    pass


class JenkinsAPIError(JenkinsCliError):
    """Jenkins answered with a non-success status code."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ResponseDecodeError(JenkinsCliError):
    """A Jenkins response body was not valid JSON."""
    pass
