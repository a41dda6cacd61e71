"""
Progress Store.

Owns per-subject practice counters and per-skill proficiency/streak records.
State is loaded once at construction and written back after every mutation.

Mutations are atomic: they run against a working copy of the state, the copy is
persisted, and only then does it replace the in-memory state. A PersistenceError
therefore leaves the store exactly as it was.
"""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime

from loguru import logger

from config import Settings, get_settings
from questcore.core.events import ChangeNotifier, StateChanged
from questcore.core.mastery import MasteryConfig, MasteryEngine
from questcore.core.skills import LEARNING_PATH, Skill
from questcore.core.subjects import LearningSubject
from questcore.learning.placement import PlacementProfile, seed_proficiencies
from questcore.learning.problem import ProblemResult
from questcore.progress.records import ProgressSnapshot, SkillProgress, SubjectProgress
from questcore.progress.reporting import AchievementReporter, SessionReport
from questcore.progress.repository import ProgressRepository


def _subject_id(subject: LearningSubject | str) -> str:
    """Subject id for storage keys; raw string ids pass through unchanged."""
    return subject.value if isinstance(subject, LearningSubject) else str(subject)


class ProgressStore:
    """
    Subject and skill progress for practice sessions.

    Not thread-safe: a multi-threaded host must serialize all calls.
    """

    def __init__(
        self,
        repository: ProgressRepository,
        reporter: AchievementReporter,
        mastery_engine: MasteryEngine | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.repository = repository
        self.reporter = reporter
        self.mastery_engine = mastery_engine or MasteryEngine(MasteryConfig.from_settings(self.settings))
        self.changes = ChangeNotifier()

        self._state: ProgressSnapshot = repository.load()
        self._recent_prompts: dict[Skill, OrderedDict[str, None]] = {}

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def subject_progress(
        self, subject: LearningSubject | str, now: datetime | None = None
    ) -> SubjectProgress:
        """Copy of the subject record (defaults if unseen), with the daily reset applied against now."""
        subject_id = _subject_id(subject)
        stored = self._state.subjects.get(subject_id)
        progress = replace(stored) if stored else SubjectProgress(subject_id=subject_id)
        progress.reset_daily_count_if_needed(now or datetime.now())
        return progress

    def skill_progress(self, skill: Skill, subject: LearningSubject | str) -> SkillProgress:
        """Copy of the skill record, or a default one (proficiency 0, streak 0)."""
        subject_id = _subject_id(subject)
        stored = self._state.skills.get((skill.value, subject_id))
        return replace(stored) if stored else SkillProgress(skill_id=skill.value, subject_id=subject_id)

    def proficiency(self, skill: Skill, subject: LearningSubject | str) -> float:
        key = (skill.value, _subject_id(subject))
        record = self._state.skills.get(key)
        return record.proficiency if record else 0.0

    def can_start_exercise(
        self,
        subject: LearningSubject | str,
        now: datetime | None = None,
        unlimited: bool = False,
    ) -> bool:
        """
        Check whether a new session may start today.

        Args:
            subject: Practice subject
            now: Reference time for the daily reset (defaults to now)
            unlimited: Set by the purchase layer to lift the daily limit

        Returns:
            True if unlimited or today's session count is under the free limit
        """
        if unlimited:
            return True
        progress = self.subject_progress(subject, now)
        return progress.daily_exercise_count < self.settings.daily_free_sessions

    def focus_skill(self, subject: LearningSubject | str) -> Skill:
        """Earliest not-yet-mastered skill on the learning path."""
        return self.mastery_engine.next_focus_skill(lambda skill: self.proficiency(skill, subject))

    def focus_skill_proficiency(self, subject: LearningSubject | str) -> float:
        return self.proficiency(self.focus_skill(subject), subject)

    def recent_prompts(self, skill: Skill) -> set[str]:
        """Prompts seen for this skill since the process started."""
        return set(self._recent_prompts.get(skill, ()))

    def skill_records(self, subject: LearningSubject | str) -> list[SkillProgress]:
        """Skill records for a subject in learning-path order (defaults for unseen skills)."""
        subject_id = _subject_id(subject)
        records = []
        for skill in LEARNING_PATH:
            record = self._state.skills.get((skill.value, subject_id))
            records.append(replace(record) if record else SkillProgress(skill_id=skill.value, subject_id=subject_id))
        return records

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def record_session(
        self,
        subject: LearningSubject | str,
        results: Iterable[ProblemResult],
        now: datetime | None = None,
    ) -> SessionReport:
        """
        Record a finished session.

        Updates the subject counters, then each answered skill's proficiency,
        streak and review time. All changes commit together or not at all.

        Returns:
            The SessionReport also handed to the achievement reporter

        Raises:
            PersistenceError: if the state could not be saved (nothing changed)
        """
        now = now or datetime.now()
        results = list(results)
        subject_id = _subject_id(subject)
        threshold = self.mastery_engine.mastery_threshold

        working = self._state.copy()
        progress = working.subject(subject_id)
        progress.reset_daily_count_if_needed(now)
        progress.daily_exercise_count += 1
        progress.total_sessions += 1
        progress.total_correct_answers += sum(1 for r in results if r.is_correct)
        progress.last_exercise_date = now

        starting: dict[Skill, float] = {}
        for result in results:
            skill = result.problem.skill
            record = working.skill(skill.value, subject_id)
            starting.setdefault(skill, record.proficiency)
            record.proficiency = self.mastery_engine.updated_proficiency(
                record.proficiency, result.is_correct, result.problem.difficulty
            )
            record.streak = record.streak + 1 if result.is_correct else 0
            record.last_reviewed = now

        newly_mastered = tuple(
            skill
            for skill, prior in starting.items()
            if prior < threshold <= working.skill(skill.value, subject_id).proficiency
        )

        self.repository.save(working)
        self._state = working

        for result in results:
            self._remember_prompt(result.problem.skill, result.problem.prompt)

        correct = sum(1 for r in results if r.is_correct)
        logger.info(
            f"Recorded {subject_id} session: {correct}/{len(results)} correct, "
            f"total_sessions={progress.total_sessions}"
        )
        if newly_mastered:
            logger.info(f"Newly mastered: {', '.join(s.value for s in newly_mastered)}")

        report = SessionReport(
            subject=subject_id,
            total_sessions=progress.total_sessions,
            total_correct_answers=progress.total_correct_answers,
            newly_mastered_skills=newly_mastered,
        )
        self.changes.notify(StateChanged(source="progress", action="session_recorded", subject=subject_id))
        try:
            self.reporter.record_session(report)
        except Exception as e:  # session already committed
            logger.warning(f"Achievement reporter failed for {subject_id}: {e}")
        return report

    def apply_placement(self, profile: PlacementProfile, subject: LearningSubject | str) -> dict[Skill, float]:
        """
        Overwrite every skill's proficiency with its placement seed.

        Returns:
            The seeds that were written

        Raises:
            PersistenceError: if the state could not be saved (nothing changed)
        """
        subject_id = _subject_id(subject)
        seeds = seed_proficiencies(profile, self.mastery_engine)

        working = self._state.copy()
        for skill, seed in seeds.items():
            working.skill(skill.value, subject_id).proficiency = seed

        self.repository.save(working)
        self._state = working

        logger.info(
            f"Applied placement {profile.grade_band.value} to {subject_id} "
            f"({len(profile.focus_skills)} focus skills)"
        )
        self.changes.notify(StateChanged(source="progress", action="placement_applied", subject=subject_id))
        return seeds

    def _remember_prompt(self, skill: Skill, prompt: str) -> None:
        prompts = self._recent_prompts.setdefault(skill, OrderedDict())
        prompts.pop(prompt, None)
        prompts[prompt] = None
        while len(prompts) > self.settings.recent_prompt_limit:
            prompts.popitem(last=False)
