"""Utility helpers for walking the filesystem."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Iterator, Optional

WalkErrorHandler = Callable[[OSError], None]


def iter_entries(root: Path, on_error: Optional[WalkErrorHandler] = None) -> Iterator[Path]:
    """Yield every entry below ``root``, directories included.

    ``root`` itself is not yielded. Symbolic links are yielded but never
    descended into. Names are sorted within each directory so the order is
    stable across runs.
    """
    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error, followlinks=False):
        dirnames.sort()
        base = Path(dirpath)
        for name in sorted(dirnames + filenames):
            yield base / name
