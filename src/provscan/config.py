"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from provscan.tags.decoder import TAG_ATTRIBUTE

DEFAULT_DB_PATH = Path("/private/var/db/SystemPolicyConfiguration/ExecPolicy")


@dataclass(slots=True)
class AppConfig:
    db_path: Path | None = None
    attribute: str = TAG_ATTRIBUTE
    workers: int = 1

    def __post_init__(self) -> None:
        if self.db_path is None:
            self.db_path = DEFAULT_DB_PATH
        if self.workers < 1:
            raise ValueError("workers must be at least 1")

    def resolve_db_path(self, base_dir: Path | None = None) -> Path:
        if Path(self.db_path).is_absolute() or base_dir is None:
            return Path(self.db_path)
        return base_dir / self.db_path
