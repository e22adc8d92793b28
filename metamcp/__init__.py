"""Logging, connection state and error handling for Model Context Protocol servers."""

__version__ = "0.1.0"