"""Curriculum levels, reference catalog, persistence and progression."""

from .catalog import CurriculumCatalog, reference_catalog
from .models import (
    CurriculumLevel,
    CurriculumQuest,
    CurriculumState,
    LevelRecord,
    LevelStatus,
    OverallProgress,
)
from .progression import CurriculumProgressionEngine
from .storage import (
    CurriculumRepository,
    InMemoryKeyValueStore,
    KeyValueStore,
    SqlKeyValueStore,
)

__all__ = [
    "CurriculumCatalog",
    "reference_catalog",
    "CurriculumLevel",
    "CurriculumQuest",
    "CurriculumState",
    "LevelRecord",
    "LevelStatus",
    "OverallProgress",
    "CurriculumProgressionEngine",
    "CurriculumRepository",
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "SqlKeyValueStore",
]
