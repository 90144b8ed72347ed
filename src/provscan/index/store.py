"""Read-only, in-memory index of the system provenance tracking table."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import closing
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Iterator, List, Mapping, Optional

from provscan.errors import DatabaseError
from provscan.models import ProvenanceRecord

LOGGER = logging.getLogger(__name__)

TRACKING_TABLE = "provenance_tracking"

_SELECT_ROWS = f"""
    SELECT pk, url, bundle_id, cdhash, team_identifier, signing_identifier,
           flags, timestamp, link_pk
    FROM {TRACKING_TABLE}
"""


def _record_from_row(row: sqlite3.Row) -> ProvenanceRecord:
    if row["pk"] is None or row["url"] is None or row["timestamp"] is None:
        raise ValueError(f"row with pk={row['pk']!r} is missing a required column")
    return ProvenanceRecord(
        pk=row["pk"],
        url=row["url"],
        bundle_id=row["bundle_id"],
        cdhash=row["cdhash"],
        team_identifier=row["team_identifier"],
        signing_identifier=row["signing_identifier"],
        flags=row["flags"],
        timestamp=row["timestamp"],
        link_pk=row["link_pk"],
    )


class ProvenanceStore:
    """Immutable mapping from provenance key to tracking record.

    The store is built once and never mutated afterwards, so a single instance
    can be shared between scanner threads.
    """

    __slots__ = ("_records", "_db_path")

    def __init__(self, records: Mapping[int, ProvenanceRecord], *, db_path: Path | None = None) -> None:
        self._records = MappingProxyType(dict(records))
        self._db_path = db_path

    @classmethod
    def load(cls, db_path: Path) -> "ProvenanceStore":
        """Read every row of the tracking table from ``db_path``."""
        db_path = Path(db_path)
        if not db_path.is_file():
            raise DatabaseError(db_path, "database file not found")

        records: dict[int, ProvenanceRecord] = {}
        try:
            conn = sqlite3.connect(f"{db_path.resolve().as_uri()}?mode=ro", uri=True)
        except sqlite3.Error as exc:
            raise DatabaseError(db_path, str(exc)) from exc

        with closing(conn):
            conn.row_factory = sqlite3.Row
            try:
                for row in conn.execute(_SELECT_ROWS):
                    record = _record_from_row(row)
                    records[record.pk] = record
            except (sqlite3.Error, ValueError) as exc:
                raise DatabaseError(db_path, str(exc)) from exc

        LOGGER.debug("Loaded %d provenance records from %s", len(records), db_path)
        return cls(records, db_path=db_path)

    @classmethod
    def from_records(cls, records: Iterable[ProvenanceRecord]) -> "ProvenanceStore":
        return cls({record.pk: record for record in records})

    @property
    def db_path(self) -> Path | None:
        return self._db_path

    def lookup(self, key: int) -> Optional[ProvenanceRecord]:
        return self._records.get(key)

    def chain(self, key: int) -> List[ProvenanceRecord]:
        """Follow ``link_pk`` references starting at ``key``.

        Stops at the first missing record or when a key repeats.
        """
        chain: List[ProvenanceRecord] = []
        seen: set[int] = set()
        current: Optional[int] = key
        while current is not None and current not in seen:
            record = self._records.get(current)
            if record is None:
                break
            seen.add(current)
            chain.append(record)
            current = record.link_pk
        return chain

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key: object) -> bool:
        return key in self._records

    def __iter__(self) -> Iterator[int]:
        return iter(self._records)
