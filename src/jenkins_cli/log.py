"""Logging helpers.

Everything goes to stderr: stdout carries command output and, in
``mcp-server`` mode, the MCP stdio transport.
"""

import logging
import sys

logger = logging.getLogger("jenkins_cli")


_handler = logging.StreamHandler(sys.stderr)
_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
logger.addHandler(_handler)


def configure_logging(debug: bool = False) -> None:
    """Point the package logger at the current stderr and set its level."""
    _handler.setStream(sys.stderr)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)


def debug_log(message):
    """Log debug messages to stderr for debugging purposes."""
    logger.debug(message)
