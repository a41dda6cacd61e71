"""
Curriculum Progression Engine.

Per subject, a single cursor (highest_unlocked_index) defines every level's
status: levels before it are completed, the level at it is current, later
levels are locked. Once the cursor passes the end, the whole path is completed.

The cursor only moves forward, through mark_level_completed(), except for an
explicit placement or reset.

Level records track attempts, the best quest count reached, and whether an
assisted unlock was ever granted. They drive the assisted-unlock offer: a
relief valve for learners who keep falling just short of the requirement.
"""

from __future__ import annotations

from dataclasses import replace

from loguru import logger

from config import Settings, get_settings
from questcore.core.events import ChangeNotifier, StateChanged
from questcore.core.subjects import CurriculumGrade, CurriculumSubject
from questcore.curriculum.catalog import CurriculumCatalog
from questcore.curriculum.models import (
    CurriculumLevel,
    CurriculumState,
    LevelRecord,
    LevelStatus,
    OverallProgress,
)
from questcore.curriculum.storage import CurriculumRepository


class CurriculumProgressionEngine:
    """
    Level unlock state machine across all curriculum subjects.

    Not thread-safe: a multi-threaded host must serialize all calls.
    """

    def __init__(
        self,
        catalog: CurriculumCatalog,
        repository: CurriculumRepository,
        settings: Settings | None = None,
    ):
        self.catalog = catalog
        self.repository = repository
        self.settings = settings or get_settings()
        self.changes = ChangeNotifier()
        self._state: CurriculumState = repository.load()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def placement_grade(self) -> CurriculumGrade | None:
        return self._state.placement_grade

    def cursor(self, subject: CurriculumSubject) -> int:
        return self._state.cursor(subject)

    def status(self, level: CurriculumLevel, subject: CurriculumSubject) -> LevelStatus:
        """Derive a level's status from the subject cursor. Unknown levels are locked."""
        levels = self.catalog.levels(subject)
        index = self.catalog.index_of(level, subject)
        if index is None:
            return LevelStatus.LOCKED
        cursor = self._state.cursor(subject)
        if cursor >= len(levels) or index < cursor:
            return LevelStatus.COMPLETED
        if index == cursor:
            return LevelStatus.CURRENT
        return LevelStatus.LOCKED

    def record(self, level: CurriculumLevel, subject: CurriculumSubject) -> LevelRecord:
        """The level's record, or an empty one if it was never attempted."""
        stored = self._state.level_records.get(subject, {}).get(level.id)
        return replace(stored) if stored else LevelRecord()

    def current_level(self, subject: CurriculumSubject) -> CurriculumLevel | None:
        levels = self.catalog.levels(subject)
        cursor = self._state.cursor(subject)
        return levels[cursor] if cursor < len(levels) else None

    def levels_needing_review(self, subject: CurriculumSubject) -> list[CurriculumLevel]:
        """Levels passed with an assisted unlock, in path order."""
        records = self._state.level_records.get(subject, {})
        return [
            level
            for level in self.catalog.levels(subject)
            if level.id in records and records[level.id].assisted_unlock
        ]

    def should_offer_assisted_unlock(
        self,
        level: CurriculumLevel,
        subject: CurriculumSubject,
        pending_completed_quests: int,
    ) -> bool:
        """
        Decide whether to offer an assisted unlock for the attempt in progress.

        All must hold:
        - the level is the current one
        - no assisted unlock was granted for it yet
        - attempts so far plus this one reach the minimum (3)
        - best quest count, including this attempt, is at least
          max(1, quests_required_for_mastery - 1)
        - this attempt on its own still falls short of the requirement
        """
        if self.status(level, subject) is not LevelStatus.CURRENT:
            return False

        record = self.record(level, subject)
        if record.assisted_unlock:
            return False

        required = level.quests_required_for_mastery
        attempts = record.attempts + 1
        best = max(record.best_completed_quest_count, pending_completed_quests)
        near_miss_threshold = max(1, required - 1)

        return (
            attempts >= self.settings.assisted_unlock_min_attempts
            and best >= near_miss_threshold
            and pending_completed_quests < required
        )

    def overall_progress(self) -> OverallProgress:
        """
        Fold per-subject progress into one gamified level number.

        completed_levels is the sum of cursors; progress_to_next is the best
        fraction of quests reached on any subject's current level.
        """
        completed = 0
        total = 0
        fractions: list[float] = []
        for subject in self.catalog.subjects:
            levels = self.catalog.levels(subject)
            cursor = min(self._state.cursor(subject), len(levels))
            completed += cursor
            total += len(levels)
            if cursor < len(levels):
                level = levels[cursor]
                best = self.record(level, subject).best_completed_quest_count
                fractions.append(best / level.quests_required_for_mastery)

        if fractions:
            progress_to_next = max(fractions)
        else:
            progress_to_next = 1.0 if total > 0 else 0.0

        return OverallProgress(
            level_number=min(completed + 1, max(total, 1)),
            progress_to_next=progress_to_next,
            completed_levels=completed,
            total_levels=total,
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def mark_level_completed(
        self,
        level: CurriculumLevel,
        subject: CurriculumSubject,
        completed_quests: int,
        assisted: bool = False,
    ) -> bool:
        """
        Record a finished attempt and advance past the level.

        The cursor moves to index + 1 only when it sits at or before the level,
        so replaying an already-passed level never moves it back.

        Returns:
            True if the cursor advanced

        Raises:
            PersistenceError: if the state could not be saved (nothing changed)
        """
        index = self.catalog.index_of(level, subject)
        if index is None:
            logger.warning(f"Level {level.id} is not on the {subject.value} path; ignoring completion")
            return False

        working = self._state.copy()
        working.record_for(subject, level.id).register_attempt(completed_quests, assisted)

        cursor = working.cursor(subject)
        advanced = False
        if cursor <= index:
            next_index = min(index + 1, len(self.catalog.levels(subject)))
            advanced = next_index != cursor
            working.highest_unlocked_index[subject] = next_index

        self._commit(working, "level_completed", subject)
        logger.info(
            f"Completed {level.id} ({completed_quests} quests{', assisted' if assisted else ''}); "
            f"{subject.value} cursor at {working.cursor(subject)}"
        )
        return advanced

    def record_incomplete_attempt(
        self,
        level: CurriculumLevel,
        subject: CurriculumSubject,
        completed_quests: int,
    ) -> None:
        """Record an attempt the learner left before finishing. Never advances."""
        if self.catalog.index_of(level, subject) is None:
            logger.warning(f"Level {level.id} is not on the {subject.value} path; ignoring attempt")
            return

        working = self._state.copy()
        working.record_for(subject, level.id).register_attempt(completed_quests)
        self._commit(working, "attempt_recorded", subject)
        logger.debug(f"Incomplete attempt on {level.id}: {completed_quests} quests")

    def apply_placement(self, grade: CurriculumGrade) -> None:
        """Start every subject at its first level for the grade (or the start) with fresh records."""
        working = self._state.copy()
        working.placement_grade = grade
        for subject in self.catalog.subjects:
            levels = self.catalog.levels(subject)
            target = self.catalog.index_of_first_level(grade, subject) or 0
            working.highest_unlocked_index[subject] = min(target, len(levels))
            working.level_records[subject] = {}

        self._commit(working, "placement_applied", None)
        logger.info(f"Applied curriculum placement at {grade.value}")

    def reset_progress(self) -> None:
        """Zero every cursor, clear all records and the placement grade."""
        self._commit(CurriculumState.initial(self.catalog.subjects), "reset", None)
        logger.info("Curriculum progress reset")

    def reset_subject(self, subject: CurriculumSubject) -> None:
        working = self._state.copy()
        working.highest_unlocked_index[subject] = 0
        working.level_records[subject] = {}
        self._commit(working, "subject_reset", subject)
        logger.info(f"Curriculum progress reset for {subject.value}")

    def _commit(self, working: CurriculumState, action: str, subject: CurriculumSubject | None) -> None:
        self.repository.save(working)
        self._state = working
        self.changes.notify(
            StateChanged(source="curriculum", action=action, subject=subject.value if subject else None)
        )
