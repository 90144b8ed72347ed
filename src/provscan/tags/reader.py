"""Reading provenance tags from the filesystem."""

from __future__ import annotations

import errno
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Union

import xattr

from provscan.errors import MalformedTagError
from provscan.tags.decoder import TAG_ATTRIBUTE, decode_key

# macOS reports a missing attribute as ENOATTR, Linux as ENODATA.
ABSENT_ERRNOS = frozenset({getattr(errno, "ENOATTR", errno.ENODATA), errno.ENODATA})

AttributeReader = Callable[[Path, str], bytes]


def read_attribute(path: Path, name: str) -> bytes:
    """Return the raw value of extended attribute ``name`` on ``path``.

    Symbolic links are not followed; the attribute of the link itself is read.
    """
    return xattr.getxattr(os.fspath(path), name, symlink=True)


@dataclass(frozen=True, slots=True)
class KeyFound:
    key: int


@dataclass(frozen=True, slots=True)
class TagAbsent:
    """The entry carries no provenance attribute."""


@dataclass(frozen=True, slots=True)
class TagMalformed:
    length: int

    def __str__(self) -> str:
        return f"malformed provenance attribute ({self.length} bytes)"


@dataclass(frozen=True, slots=True)
class TagAccessError:
    code: int | None
    message: str

    def __str__(self) -> str:
        return f"cannot read provenance attribute: {self.message} (errno {self.code})"


TagProblem = Union[TagAbsent, TagMalformed, TagAccessError]
TagReading = Union[KeyFound, TagAbsent, TagMalformed, TagAccessError]


def access_error(exc: OSError) -> TagAccessError:
    return TagAccessError(code=exc.errno, message=exc.strerror or str(exc))


def inspect_tag(
    path: Path,
    *,
    name: str = TAG_ATTRIBUTE,
    reader: AttributeReader = read_attribute,
) -> TagReading:
    """Read and decode the provenance tag of ``path``.

    Every outcome is returned as one of the reading variants; OS errors and
    short blobs never propagate.
    """
    try:
        blob = reader(path, name)
    except OSError as exc:
        if exc.errno in ABSENT_ERRNOS:
            return TagAbsent()
        return access_error(exc)

    try:
        return KeyFound(decode_key(blob))
    except MalformedTagError as exc:
        return TagMalformed(exc.length)
