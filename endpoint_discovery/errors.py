"""Exceptions raised by an endpoint discovery pass."""

from __future__ import annotations

from typing import Optional


class DiscoveryError(Exception):
    """Base class for errors that abort a discovery pass."""


class FileSystemError(DiscoveryError):
    """A folder could not be enumerated or a file could not be read."""

    def __init__(self, path: str, cause: Optional[BaseException] = None):
        self.path = path
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Cannot read {path}{detail}")


class ParseError(DiscoveryError):
    """An endpoint file could not be parsed into a node tree."""

    def __init__(self, file_path: str, message: str):
        self.file_path = file_path
        super().__init__(f"{file_path}: {message}")


class DuplicateEndpointError(DiscoveryError):
    """Two files resolved to the same path and verb."""

    def __init__(self, path: str, verb: str):
        self.path = path
        self.verb = verb
        super().__init__(f"Duplicate endpoint {verb.upper()} {path}")


class DiscoveryCancelled(DiscoveryError):
    """The pass was cancelled or ran past its deadline."""
