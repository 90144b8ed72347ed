"""Core provscan data models."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

UNKNOWN_CREATOR = "N/A"


@dataclass(frozen=True, slots=True)
class ProvenanceRecord:
    """One row of the system provenance tracking table."""

    pk: int
    url: str
    bundle_id: Optional[str]
    cdhash: Optional[str]
    team_identifier: Optional[str]
    signing_identifier: Optional[str]
    flags: Optional[int]
    timestamp: int
    link_pk: Optional[int]


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Provenance resolved for a single filesystem entry."""

    file_path: Path
    creator: str
    pk: str
    timestamp: Optional[int] = None
    bundle_id: Optional[str] = None
    team_identifier: Optional[str] = None
    signing_identifier: Optional[str] = None

    @property
    def resolved(self) -> bool:
        return self.creator != UNKNOWN_CREATOR
