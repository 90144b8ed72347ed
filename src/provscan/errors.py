"""Fatal error conditions raised by provscan."""

from __future__ import annotations

from pathlib import Path


class ProvscanError(Exception):
    """Base class for provscan errors."""


class PrivilegeRequiredError(ProvscanError):
    """Raised when the process lacks the privileges to read the tracking database."""

    def __init__(self) -> None:
        super().__init__("provscan must be run as root")


class DatabaseError(ProvscanError):
    """Raised when the provenance tracking database cannot be loaded."""

    def __init__(self, db_path: Path | None, reason: str) -> None:
        self.db_path = db_path
        self.reason = reason
        super().__init__(f"Cannot load provenance database {db_path}: {reason}")


class MalformedTagError(ProvscanError):
    """Raised when an attribute blob is too short to carry a provenance key."""

    def __init__(self, length: int) -> None:
        self.length = length
        super().__init__(f"Provenance attribute too short ({length} bytes)")
