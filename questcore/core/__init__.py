"""
Core Module - Shared domain models and interfaces.

Components:
- skills: Skill graph (catalog, learning path, grade and difficulty bands)
- subjects: Practice subjects, curriculum subjects and grades
- mastery: Elo-style proficiency model (MasteryEngine)
- events: Per-store state change notifications
- exceptions: Error taxonomy (PersistenceError)
"""

from questcore.core.events import ChangeNotifier, StateChanged
from questcore.core.exceptions import PersistenceError, QuestCoreError
from questcore.core.mastery import MasteryConfig, MasteryEngine
from questcore.core.skills import (
    LEARNING_PATH,
    MASTERY_THRESHOLD,
    GradeBand,
    Skill,
    validate_learning_path,
)
from questcore.core.subjects import CurriculumGrade, CurriculumSubject, LearningSubject

__all__ = [
    # Skills
    "GradeBand",
    "Skill",
    "LEARNING_PATH",
    "MASTERY_THRESHOLD",
    "validate_learning_path",
    # Subjects
    "LearningSubject",
    "CurriculumSubject",
    "CurriculumGrade",
    # Mastery
    "MasteryConfig",
    "MasteryEngine",
    # Events
    "ChangeNotifier",
    "StateChanged",
    # Errors
    "QuestCoreError",
    "PersistenceError",
]
