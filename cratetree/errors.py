from __future__ import annotations


class CrateTreeError(Exception):
    """Base class for errors that abort a run."""


class ConfigError(CrateTreeError, ValueError):
    pass


class FormatError(CrateTreeError, ValueError):
    def __init__(self, line_number: int, line: str) -> None:
        super().__init__(f"Malformed line {line_number}: {line!r} (expected 'name: dep dep ...')")
        self.line_number = line_number
        self.line = line


class RegistryError(CrateTreeError):
    """Any failure talking to the package registry."""


class RequestError(RegistryError):
    pass


class ResponseError(RegistryError):
    pass


class NotFoundError(RegistryError):
    pass
