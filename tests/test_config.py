"""Tests for application configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from provscan.config import DEFAULT_DB_PATH, AppConfig


class TestAppConfig:
    """Test AppConfig dataclass."""

    def test_default_config(self) -> None:
        """Should create config with default values."""
        config = AppConfig()

        assert config.db_path == Path("/private/var/db/SystemPolicyConfiguration/ExecPolicy")
        assert config.db_path == DEFAULT_DB_PATH
        assert config.attribute == "com.apple.provenance"
        assert config.workers == 1

    def test_custom_config(self) -> None:
        config = AppConfig(db_path=Path("/custom/ExecPolicy"), attribute="user.prov", workers=8)

        assert config.db_path == Path("/custom/ExecPolicy")
        assert config.attribute == "user.prov"
        assert config.workers == 8

    def test_rejects_zero_workers(self) -> None:
        with pytest.raises(ValueError):
            AppConfig(workers=0)

    def test_resolve_db_path_absolute(self) -> None:
        config = AppConfig(db_path=Path("/absolute/ExecPolicy"))

        assert config.resolve_db_path(Path("/base")) == Path("/absolute/ExecPolicy")

    def test_resolve_db_path_relative_no_base(self) -> None:
        config = AppConfig(db_path=Path("relative/ExecPolicy"))

        assert config.resolve_db_path(base_dir=None) == Path("relative/ExecPolicy")

    def test_resolve_db_path_relative_with_base(self) -> None:
        config = AppConfig(db_path=Path("relative/ExecPolicy"))

        assert config.resolve_db_path(base_dir=Path("/base")) == Path("/base/relative/ExecPolicy")

    def test_resolve_db_path_default(self) -> None:
        assert AppConfig().resolve_db_path(Path("/project")) == DEFAULT_DB_PATH
