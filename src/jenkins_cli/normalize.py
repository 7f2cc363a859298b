"""Canonical forms for user-supplied Jenkins hosts, paths and URLs.

``normalize_url`` gives the form stored in the config file and used by every
command. ``normalize_host``, ``normalize_path`` and ``format_host_url`` build
the same kind of base URL from a bare host and an optional context path, for
callers that hold the two parts separately.

All functions here are pure and accept any string, including the empty
string.
"""

HTTP_PREFIX = "http://"
HTTPS_PREFIX = "https://"


def _strip_prefix(value: str, prefix: str) -> str:
    if value.startswith(prefix):
        return value[len(prefix):]
    return value


def normalize_host(host: str) -> str:
    """Strip a protocol prefix and a trailing slash from a hostname.

    ``https://jenkins.example.com/`` becomes ``jenkins.example.com``.
    """
    host = _strip_prefix(host, HTTPS_PREFIX)
    host = _strip_prefix(host, HTTP_PREFIX)
    if host.endswith("/"):
        host = host[:-1]
    return host


def normalize_path(path: str) -> str:
    """Strip leading and trailing slashes, keeping inner ones."""
    return path.strip("/")


def format_host_url(host: str, path: str = "") -> str:
    """Build an ``https://`` base URL from a host and an optional path."""
    host = normalize_host(host)
    path = normalize_path(path)

    url = HTTPS_PREFIX + host
    if path:
        url = f"{url}/{path}"
    return url


def normalize_url(url: str) -> str:
    """Normalize a full Jenkins URL.

    Trailing slashes are removed and ``https://`` is prepended when no
    scheme is given. An explicit ``http://`` is kept as-is. A value with
    nothing after the scheme normalizes to the empty string.
    """
    if url.startswith(HTTPS_PREFIX):
        scheme, rest = HTTPS_PREFIX, url[len(HTTPS_PREFIX):]
    elif url.startswith(HTTP_PREFIX):
        scheme, rest = HTTP_PREFIX, url[len(HTTP_PREFIX):]
    else:
        scheme, rest = HTTPS_PREFIX, url

    rest = rest.rstrip("/")
    if not rest:
        return ""
    return scheme + rest
