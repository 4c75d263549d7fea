"""Data storage configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .errors import ConfigurationError

APP_DIR_NAME: Final[str] = "erpcore"
DEFAULT_DB_FILENAME: Final[str] = "erpcore.db"

ISOLATION_LEVELS: Final[frozenset[str]] = frozenset(
    {
        "AUTOCOMMIT",
        "READ UNCOMMITTED",
        "READ COMMITTED",
        "REPEATABLE READ",
        "SERIALIZABLE",
    }
)
_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
_FALSY: Final[frozenset[str]] = frozenset({"0", "false", "no", "off", ""})


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def ensure_data_dir(self) -> Path:
        data_dir = self.resolve_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def database_path(self, *, ensure: bool = True) -> Path:
        base = self.ensure_data_dir() if ensure else self.resolve_data_dir()
        return base / self.database_filename

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.database_path()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str
    isolation_level: str | None = None
    echo: bool = False


def _default_data_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def _isolation_level_from_env() -> str | None:
    raw = os.getenv("ERPCORE_ISOLATION_LEVEL")
    if raw is None or not raw.strip():
        return None
    level = raw.strip().upper().replace("_", " ")
    if level not in ISOLATION_LEVELS:
        raise ConfigurationError(
            f"Unsupported ERPCORE_ISOLATION_LEVEL {raw!r}; "
            f"expected one of {', '.join(sorted(ISOLATION_LEVELS))}"
        )
    return level


def _echo_from_env() -> bool:
    raw = (os.getenv("ERPCORE_SQL_ECHO") or "").strip().lower()
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    raise ConfigurationError(f"ERPCORE_SQL_ECHO must be a boolean flag, got {raw!r}")


def get_storage_config() -> StorageConfig:
    env_dir = os.getenv("ERPCORE_DATA_DIR")
    data_dir = Path(env_dir) if env_dir else _default_data_dir()
    return StorageConfig(data_dir=data_dir)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    isolation_level = _isolation_level_from_env()
    echo = _echo_from_env()
    env_uri = os.getenv("DATABASE_URI")
    if env_uri:
        return DatabaseConfig(uri=env_uri, isolation_level=isolation_level, echo=echo)
    storage_config = storage or get_storage_config()
    return DatabaseConfig(
        uri=storage_config.database_uri(),
        isolation_level=isolation_level,
        echo=echo,
    )
