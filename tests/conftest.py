"""Shared fixtures for provscan tests."""

from __future__ import annotations

import errno
import sqlite3
from pathlib import Path
from typing import Callable, Dict, Iterable, Union

import pytest

from provscan.models import ProvenanceRecord

CHROME_PK = 0xBE88813A6CA05A0B - (1 << 64)

CHROME_RECORD = ProvenanceRecord(
    pk=CHROME_PK,
    url="/Applications/Google Chrome.app",
    bundle_id="com.google.Chrome",
    cdhash=None,
    team_identifier="EQHXZ8M8AV",
    signing_identifier=None,
    flags=None,
    timestamp=1732247128,
    link_pk=None,
)

SCHEMA = """
    CREATE TABLE provenance_tracking (
        pk INTEGER PRIMARY KEY,
        url TEXT NOT NULL,
        bundle_id TEXT,
        cdhash TEXT,
        team_identifier TEXT,
        signing_identifier TEXT,
        flags INTEGER,
        timestamp INTEGER NOT NULL,
        link_pk INTEGER
    )
"""


def write_tracking_db(db_path: Path, records: Iterable[ProvenanceRecord]) -> Path:
    conn = sqlite3.connect(db_path)
    try:
        conn.execute(SCHEMA)
        conn.executemany(
            "INSERT INTO provenance_tracking VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            [
                (
                    r.pk,
                    r.url,
                    r.bundle_id,
                    r.cdhash,
                    r.team_identifier,
                    r.signing_identifier,
                    r.flags,
                    r.timestamp,
                    r.link_pk,
                )
                for r in records
            ],
        )
        conn.commit()
    finally:
        conn.close()
    return db_path


@pytest.fixture
def tracking_db(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a provenance_tracking database under tmp_path."""

    def _build(records: Iterable[ProvenanceRecord] = (CHROME_RECORD,), name: str = "ExecPolicy") -> Path:
        return write_tracking_db(tmp_path / name, records)

    return _build


TagValue = Union[bytes, OSError]


class FakeAttributes:
    """In-memory stand-in for the extended attribute API."""

    def __init__(self, tags: Dict[Path, TagValue] | None = None) -> None:
        self.tags: Dict[Path, TagValue] = dict(tags or {})
        self.calls: list[tuple[Path, str]] = []

    def __call__(self, path: Path, name: str) -> bytes:
        self.calls.append((Path(path), name))
        value = self.tags.get(Path(path))
        if value is None:
            raise OSError(errno.ENODATA, "No data available", str(path))
        if isinstance(value, OSError):
            raise value
        return value

    def getxattr(self, path: str, name: str, symlink: bool = False) -> bytes:
        return self(Path(path), name)


@pytest.fixture
def fake_attributes() -> FakeAttributes:
    return FakeAttributes()
