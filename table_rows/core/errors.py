from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TableError(Exception):
    """Coded failure raised by the loader, the engines and the Table.

    code is stable and meant for callers to match on; message is for people.
    file and path locate the offending document and field when known.
    """

    code: str
    message: str
    file: Optional[str] = None
    path: Optional[str] = None

    @property
    def location(self) -> str:
        return ":".join(p for p in (self.file, self.path) if p) or "<table>"

    def __str__(self) -> str:
        return f"{self.location}: {self.code}: {self.message}"


class TableLoadError(TableError):
    """The document could not be read or has a malformed field."""


class ConfigurationError(TableError):
    """Columns, options or a dispatched action refer to something invalid."""
