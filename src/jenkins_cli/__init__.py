"""jenkins-cli - a command-line client and MCP stdio server for Jenkins."""

__version__ = "0.1.0"
