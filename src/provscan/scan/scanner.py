"""Correlates filesystem entries with provenance records."""

from __future__ import annotations

import logging
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from itertools import islice
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional, Union

from provscan.index.store import ProvenanceStore
from provscan.models import UNKNOWN_CREATOR, ScanResult
from provscan.tags.decoder import TAG_ATTRIBUTE, format_key
from provscan.tags.reader import (
    AttributeReader,
    KeyFound,
    TagAbsent,
    TagAccessError,
    TagMalformed,
    TagProblem,
    access_error,
    inspect_tag,
    read_attribute,
)
from provscan.utils.files import iter_entries

LOGGER = logging.getLogger(__name__)

ScanOutcome = Union[ScanResult, TagAbsent, TagMalformed, TagAccessError]
ErrorObserver = Callable[[Path, TagProblem], None]


def log_scan_error(path: Path, problem: TagProblem) -> None:
    LOGGER.warning("Error scanning %s: %s", path, problem)


@dataclass(slots=True)
class ScanStats:
    resolved: int = 0
    unknown: int = 0
    absent: int = 0
    malformed: int = 0
    failed: int = 0

    def increment(self, outcome: ScanOutcome) -> None:
        if isinstance(outcome, ScanResult):
            if outcome.resolved:
                self.resolved += 1
            else:
                self.unknown += 1
        elif isinstance(outcome, TagAbsent):
            self.absent += 1
        elif isinstance(outcome, TagMalformed):
            self.malformed += 1
        else:
            self.failed += 1

    @property
    def results(self) -> int:
        return self.resolved + self.unknown


class Scanner:
    """Runs the read, decode and lookup pipeline over files and trees."""

    def __init__(
        self,
        store: ProvenanceStore,
        *,
        attribute: str = TAG_ATTRIBUTE,
        reader: AttributeReader = read_attribute,
        on_error: Optional[ErrorObserver] = None,
        workers: int = 1,
    ) -> None:
        if workers < 1:
            raise ValueError("workers must be at least 1")
        self.store = store
        self.attribute = attribute
        self.reader = reader
        self.on_error = on_error or log_scan_error
        self.workers = workers
        self.stats = ScanStats()

    def scan_one(self, path: Path) -> ScanOutcome:
        """Resolve the provenance of a single entry.

        Returns a :class:`ScanResult`, or the tag problem that prevented one.
        A key with no matching record still yields a result, with the creator
        set to ``UNKNOWN_CREATOR``.
        """
        reading = inspect_tag(path, name=self.attribute, reader=self.reader)
        if not isinstance(reading, KeyFound):
            return reading

        pk = format_key(reading.key)
        record = self.store.lookup(reading.key)
        if record is None:
            return ScanResult(file_path=path, creator=UNKNOWN_CREATOR, pk=pk)

        if record.link_pk is not None and LOGGER.isEnabledFor(logging.DEBUG):
            chain = " -> ".join(item.url for item in self.store.chain(reading.key))
            LOGGER.debug("%s provenance chain: %s", path, chain)

        return ScanResult(
            file_path=path,
            creator=record.url,
            pk=pk,
            timestamp=record.timestamp,
            bundle_id=record.bundle_id,
            team_identifier=record.team_identifier,
            signing_identifier=record.signing_identifier,
        )

    def scan_tree(self, root: Path) -> Iterator[ScanResult]:
        """Scan every entry below ``root``, yielding resolved results.

        Untagged entries are skipped silently. Any other problem is passed to
        the error observer and the walk continues.
        """
        self.stats = ScanStats()
        entries = iter_entries(root, on_error=self._on_walk_error)
        for path, outcome in self._outcomes(entries):
            self.stats.increment(outcome)
            if isinstance(outcome, ScanResult):
                yield outcome
            elif not isinstance(outcome, TagAbsent):
                self.on_error(path, outcome)

    def _scan_entry(self, path: Path) -> ScanOutcome:
        try:
            return self.scan_one(path)
        except Exception as exc:
            LOGGER.debug("Unexpected failure scanning %s", path, exc_info=True)
            return TagAccessError(code=None, message=f"{type(exc).__name__}: {exc}")

    def _on_walk_error(self, exc: OSError) -> None:
        self.stats.failed += 1
        self.on_error(Path(exc.filename or ""), access_error(exc))

    def _outcomes(self, entries: Iterable[Path]) -> Iterator[tuple[Path, ScanOutcome]]:
        if self.workers == 1:
            for path in entries:
                yield path, self._scan_entry(path)
            return

        # Keep a bounded window of futures in flight and drain it in
        # submission order so results follow enumeration order.
        window = self.workers * 4
        entries = iter(entries)
        pending: deque[tuple[Path, Future[ScanOutcome]]] = deque()
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            for path in islice(entries, window):
                pending.append((path, executor.submit(self._scan_entry, path)))
            while pending:
                path, future = pending.popleft()
                for next_path in islice(entries, 1):
                    pending.append((next_path, executor.submit(self._scan_entry, next_path)))
                yield path, future.result()
