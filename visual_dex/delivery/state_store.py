"""
Key-value State Store for Visual DeX.

Provides portable persistence for:
- Learning profile (one JSON blob)
- Today's missions together with their day identity (one JSON blob)
- Photo quota and progress totals
- UI preferences (language, welcome flag)

Backends:
- InMemoryStore: tests and throwaway sessions
- JsonFileStore: one <key>.json file per key under ~/.visual_dex (default)
- SqlStore: SQLAlchemy Core table `kv_store`, SQLite unless a URL is given

StateRepository sits on top and turns blobs into typed entities. A missing,
unreadable or corrupt blob loads as the entity's default value.
"""

from __future__ import annotations

import json
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Protocol

from loguru import logger
from sqlalchemy import Column, MetaData, String, Table, Text, create_engine, delete, insert, select, update
from sqlalchemy.engine import Engine

from visual_dex.learning import LearningProfile
from visual_dex.missions import Mission, ProgressTotals, QuotaState

# =============================================================================
# Store Keys
# =============================================================================

LEARNING_KEY = "learningData"
MISSIONS_KEY = "dailyMissions"
QUOTA_KEY = "photoQuota"
PROGRESS_KEY = "userProgress"
LANGUAGE_KEY = "appLanguage"
WELCOME_KEY = "hasSeenWelcome"

ALL_KEYS = (LEARNING_KEY, MISSIONS_KEY, QUOTA_KEY, PROGRESS_KEY, LANGUAGE_KEY, WELCOME_KEY)

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


# =============================================================================
# Backends
# =============================================================================


class KeyValueStore(Protocol):
    """String-keyed storage of JSON strings."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class InMemoryStore:
    """Dict-backed store."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStore:
    """
    One file per key in a directory.

    Writes go to a temp file in the same directory and are swapped in with
    os.replace, so a crash never leaves a half-written blob behind.
    """

    DEFAULT_DIR = Path.home() / ".visual_dex"

    def __init__(self, directory: Path | None = None):
        self.directory = Path(directory or self.DEFAULT_DIR)
        self.directory.mkdir(parents=True, exist_ok=True)
        logger.debug(f"JsonFileStore initialized at {self.directory}")

    def _path(self, key: str) -> Path:
        if not _KEY_RE.match(key):
            raise ValueError(f"Invalid store key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
            os.replace(tmp_name, path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


metadata = MetaData()

kv_store_table = Table(
    "kv_store",
    metadata,
    Column("key", String(64), primary_key=True),
    Column("value", Text, nullable=False),
)


class SqlStore:
    """Single-table store on any SQLAlchemy database."""

    def __init__(self, database_url: str | None = None, engine: Engine | None = None):
        """
        Initialize the SQL store.

        Args:
            database_url: SQLAlchemy URL (ignored when engine is given)
            engine: Pre-built engine
        """
        if engine is None:
            if not database_url:
                raise ValueError("SqlStore needs a database_url or an engine")
            engine = create_engine(database_url, pool_pre_ping=True)
        self.engine = engine
        metadata.create_all(self.engine)
        logger.debug(f"SqlStore initialized on {self.engine.url}")

    def get(self, key: str) -> str | None:
        with self.engine.connect() as conn:
            row = conn.execute(
                select(kv_store_table.c.value).where(kv_store_table.c.key == key)
            ).first()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        with self.engine.begin() as conn:
            result = conn.execute(
                update(kv_store_table).where(kv_store_table.c.key == key).values(value=value)
            )
            if result.rowcount == 0:
                conn.execute(insert(kv_store_table).values(key=key, value=value))

    def remove(self, key: str) -> None:
        with self.engine.begin() as conn:
            conn.execute(delete(kv_store_table).where(kv_store_table.c.key == key))


def build_store(settings: Any) -> KeyValueStore:
    """Create the backend selected in settings."""
    if settings.store_backend == "sql":
        if not settings.database_url:
            Path(settings.data_dir).mkdir(parents=True, exist_ok=True)
        return SqlStore(settings.get_database_url())
    return JsonFileStore(Path(settings.data_dir))


# =============================================================================
# Typed Repository
# =============================================================================


class StateRepository:
    """
    Typed access to the persisted entities.

    Every load returns a usable value: corrupt or unreadable data is logged
    and replaced by the default.
    """

    def __init__(self, store: KeyValueStore, default_language: str = "en"):
        self.store = store
        self.default_language = default_language

    def _read(self, key: str) -> Any | None:
        try:
            raw = self.store.get(key)
        except Exception as e:  # Intentionally broad - any backend failure degrades to default
            logger.warning(f"Could not read '{key}' from store: {e}")
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            logger.warning(f"Corrupt blob under '{key}', using default: {e}")
            return None

    def _write(self, key: str, value: Any) -> None:
        self.store.set(key, json.dumps(value, ensure_ascii=False))

    # -------------------------------------------------------------------------
    # Learning profile
    # -------------------------------------------------------------------------

    def load_learning(self) -> LearningProfile:
        data = self._read(LEARNING_KEY)
        if not isinstance(data, dict):
            if data is not None:
                logger.warning(f"Unexpected shape for '{LEARNING_KEY}', starting fresh")
            return LearningProfile()
        return LearningProfile.from_dict(data)

    def save_learning(self, profile: LearningProfile) -> None:
        self._write(LEARNING_KEY, profile.to_dict())

    def clear_learning(self) -> None:
        self.store.remove(LEARNING_KEY)

    # -------------------------------------------------------------------------
    # Missions
    # -------------------------------------------------------------------------

    def load_missions(self) -> tuple[list[Mission], str | None]:
        """Stored batch and the day it belongs to ([], None if absent)."""
        data = self._read(MISSIONS_KEY)
        if data is None:
            return [], None
        try:
            missions = [Mission.from_dict(item) for item in data["missions"]]
            day = data["day"]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Corrupt mission batch, regenerating: {e}")
            return [], None
        return missions, day

    def save_missions(self, missions: list[Mission], day: str) -> None:
        self._write(MISSIONS_KEY, {"day": day, "missions": [m.to_dict() for m in missions]})

    # -------------------------------------------------------------------------
    # Quota and progress
    # -------------------------------------------------------------------------

    def load_quota(self) -> QuotaState:
        data = self._read(QUOTA_KEY)
        if data is None:
            return QuotaState()
        try:
            return QuotaState.from_dict(data)
        except (AttributeError, TypeError, ValueError) as e:
            logger.warning(f"Corrupt quota state, resetting: {e}")
            return QuotaState()

    def save_quota(self, state: QuotaState) -> None:
        self._write(QUOTA_KEY, state.to_dict())

    def load_progress(self) -> ProgressTotals:
        data = self._read(PROGRESS_KEY)
        if data is None:
            return ProgressTotals()
        try:
            return ProgressTotals.from_dict(data)
        except (AttributeError, TypeError, ValueError) as e:
            logger.warning(f"Corrupt progress totals, resetting: {e}")
            return ProgressTotals()

    def save_progress(self, totals: ProgressTotals) -> None:
        self._write(PROGRESS_KEY, totals.to_dict())

    # -------------------------------------------------------------------------
    # Preferences
    # -------------------------------------------------------------------------

    def load_language(self) -> str:
        data = self._read(LANGUAGE_KEY)
        if data in ("en", "es"):
            return data
        return self.default_language

    def save_language(self, language: str) -> None:
        self._write(LANGUAGE_KEY, language)

    def load_welcome_seen(self) -> bool:
        return self._read(WELCOME_KEY) is True

    def save_welcome_seen(self, seen: bool = True) -> None:
        self._write(WELCOME_KEY, seen)
