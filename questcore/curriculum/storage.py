"""
Curriculum state persistence.

The whole curriculum state is one JSON blob under a versioned key in a
key-value store.

Versions:
- v1 (legacy): cursor map + placement grade
- v2 (current): v1 + per-level records

Loading tries v2, then v1 (upgraded in memory with empty records), then falls
back to a fresh state. Saving always writes v2 only. Unknown subjects, unknown
level ids and invalid records are dropped rather than failing the load.
"""

from __future__ import annotations

from typing import Any, Protocol

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from sqlalchemy.exc import SQLAlchemyError

from questcore.core.exceptions import PersistenceError
from questcore.core.subjects import CurriculumGrade, CurriculumSubject
from questcore.curriculum.catalog import CurriculumCatalog
from questcore.curriculum.models import CurriculumState, LevelRecord
from questcore.db.database import Database
from questcore.db.models import KeyValueEntry

CURRENT_KEY = "curriculum.progress.state.v2"
LEGACY_KEY = "curriculum.progress.state.v1"


# =============================================================================
# Key-value stores
# =============================================================================


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class InMemoryKeyValueStore:
    """Dictionary-backed store for tests and ephemeral sessions."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.entries: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.entries.get(key)

    def set(self, key: str, value: str) -> None:
        self.entries[key] = value


class SqlKeyValueStore:
    """Stores blobs in the kv_entries table."""

    def __init__(self, database: Database):
        self.database = database

    def get(self, key: str) -> str | None:
        try:
            with self.database.session_scope() as session:
                entry = session.get(KeyValueEntry, key)
                return entry.value if entry else None
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not read {key}: {e}") from e

    def set(self, key: str, value: str) -> None:
        try:
            with self.database.session_scope() as session:
                session.merge(KeyValueEntry(key=key, value=value))
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not write {key}: {e}") from e


# =============================================================================
# Stored blob schemas
# =============================================================================


class StoredLevelRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    attempts: int = Field(default=0, ge=0)
    best_completed_quest_count: int = Field(default=0, ge=0, alias="bestCompletedQuestCount")
    assisted_unlock: bool = Field(default=False, alias="assistedUnlock")


class StoredStateV1(BaseModel):
    """Legacy blob: cursor map and placement grade only."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    highest_unlocked_index: dict[str, Any] = Field(default_factory=dict, alias="highestUnlockedIndex")
    placement_grade_raw: str | None = Field(default=None, alias="placementGradeRaw")


class StoredStateV2(StoredStateV1):
    """Current blob: adds level records keyed by subject, then level id."""

    level_records: dict[str, Any] = Field(default_factory=dict, alias="levelRecords")


# =============================================================================
# Repository
# =============================================================================


class CurriculumRepository:
    """Load/save CurriculumState with legacy migration."""

    def __init__(self, store: KeyValueStore, catalog: CurriculumCatalog):
        self.store = store
        self.catalog = catalog

    def load(self) -> CurriculumState:
        """
        Load the stored state.

        Raises:
            PersistenceError: if the key-value store itself cannot be read
        """
        current = self._parse(CURRENT_KEY, StoredStateV2)
        if current is not None:
            return self._to_state(current, current.level_records)

        legacy = self._parse(LEGACY_KEY, StoredStateV1)
        if legacy is not None:
            logger.info("Upgrading legacy curriculum state (v1 -> v2)")
            return self._to_state(legacy, {})

        return CurriculumState.initial(self.catalog.subjects)

    def save(self, state: CurriculumState) -> None:
        """
        Write the state under the current key.

        Raises:
            PersistenceError: if the write fails
        """
        stored = StoredStateV2(
            highest_unlocked_index={s.value: i for s, i in state.highest_unlocked_index.items()},
            placement_grade_raw=state.placement_grade.value if state.placement_grade else None,
            level_records={
                subject.value: {
                    level_id: StoredLevelRecord(
                        attempts=record.attempts,
                        best_completed_quest_count=record.best_completed_quest_count,
                        assisted_unlock=record.assisted_unlock,
                    ).model_dump(by_alias=True)
                    for level_id, record in records.items()
                }
                for subject, records in state.level_records.items()
            },
        )
        self.store.set(CURRENT_KEY, stored.model_dump_json(by_alias=True))

    def _parse(self, key: str, model: type[StoredStateV1]) -> StoredStateV1 | None:
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            return model.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Ignoring unreadable curriculum state under {key}: {e.error_count()} errors")
            return None

    def _to_state(self, stored: StoredStateV1, raw_records: dict[str, Any]) -> CurriculumState:
        state = CurriculumState.initial(self.catalog.subjects)

        for key, value in stored.highest_unlocked_index.items():
            subject = _subject_or_none(key)
            if subject is None or subject not in state.highest_unlocked_index:
                logger.debug(f"Ignoring cursor for unknown subject {key!r}")
                continue
            if not isinstance(value, int) or isinstance(value, bool):
                logger.warning(f"Ignoring non-integer cursor for {key}: {value!r}")
                continue
            state.highest_unlocked_index[subject] = min(max(0, value), len(self.catalog.levels(subject)))

        if stored.placement_grade_raw is not None:
            try:
                state.placement_grade = CurriculumGrade(stored.placement_grade_raw)
            except ValueError:
                logger.warning(f"Ignoring unknown placement grade {stored.placement_grade_raw!r}")

        for key, records in raw_records.items():
            subject = _subject_or_none(key)
            if subject is None or subject not in state.level_records:
                logger.debug(f"Ignoring level records for unknown subject {key!r}")
                continue
            if not isinstance(records, dict):
                logger.warning(f"Dropping malformed level records for {key}")
                continue
            for level_id, payload in records.items():
                if not self.catalog.has_level(subject, level_id):
                    logger.warning(f"Dropping record for unknown level id {level_id!r} ({key})")
                    continue
                try:
                    parsed = StoredLevelRecord.model_validate(payload)
                except ValidationError:
                    logger.warning(f"Dropping malformed record for {level_id}")
                    continue
                state.level_records[subject][level_id] = LevelRecord(
                    attempts=parsed.attempts,
                    best_completed_quest_count=parsed.best_completed_quest_count,
                    assisted_unlock=parsed.assisted_unlock,
                )
        return state


def _subject_or_none(raw: str) -> CurriculumSubject | None:
    try:
        return CurriculumSubject(raw)
    except ValueError:
        return None
