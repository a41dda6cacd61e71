"""
Progress repositories.

A repository loads and saves a whole ProgressSnapshot. Saves are all-or-nothing:
either every record in the snapshot is written or none is.
"""

from __future__ import annotations

from typing import Protocol

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from questcore.core.exceptions import PersistenceError
from questcore.db.database import Database
from questcore.db.models import SkillProgressRow, SubjectProgressRow
from questcore.progress.records import ProgressSnapshot, SkillProgress, SubjectProgress


class ProgressRepository(Protocol):
    def load(self) -> ProgressSnapshot: ...

    def save(self, snapshot: ProgressSnapshot) -> None: ...


class InMemoryProgressRepository:
    """Keeps snapshots in memory. Used for tests and ephemeral sessions."""

    def __init__(self, snapshot: ProgressSnapshot | None = None):
        self._snapshot = snapshot.copy() if snapshot else ProgressSnapshot()
        self.save_count = 0

    def load(self) -> ProgressSnapshot:
        return self._snapshot.copy()

    def save(self, snapshot: ProgressSnapshot) -> None:
        self._snapshot = snapshot.copy()
        self.save_count += 1


class SqlProgressRepository:
    """Stores progress in the subject_progress and skill_progress tables."""

    def __init__(self, database: Database):
        self.database = database

    def load(self) -> ProgressSnapshot:
        snapshot = ProgressSnapshot()
        try:
            with self.database.session_scope() as session:
                for row in session.scalars(select(SubjectProgressRow)):
                    snapshot.subjects[row.subject_id] = SubjectProgress(
                        subject_id=row.subject_id,
                        daily_exercise_count=row.daily_exercise_count or 0,
                        total_sessions=row.total_sessions or 0,
                        total_correct_answers=row.total_correct_answers or 0,
                        last_exercise_date=row.last_exercise_date,
                    )
                for row in session.scalars(select(SkillProgressRow)):
                    snapshot.skills[(row.skill_id, row.subject_id)] = SkillProgress(
                        skill_id=row.skill_id,
                        subject_id=row.subject_id,
                        proficiency=row.proficiency or 0.0,
                        streak=row.streak or 0,
                        last_reviewed=row.last_reviewed,
                    )
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not load progress: {e}") from e

        logger.debug(
            f"Loaded progress: {len(snapshot.subjects)} subjects, {len(snapshot.skills)} skill records"
        )
        return snapshot

    def save(self, snapshot: ProgressSnapshot) -> None:
        try:
            with self.database.session_scope() as session:
                for record in snapshot.subjects.values():
                    session.merge(
                        SubjectProgressRow(
                            subject_id=record.subject_id,
                            daily_exercise_count=record.daily_exercise_count,
                            total_sessions=record.total_sessions,
                            total_correct_answers=record.total_correct_answers,
                            last_exercise_date=record.last_exercise_date,
                        )
                    )
                for record in snapshot.skills.values():
                    session.merge(
                        SkillProgressRow(
                            skill_id=record.skill_id,
                            subject_id=record.subject_id,
                            proficiency=record.proficiency,
                            streak=record.streak,
                            last_reviewed=record.last_reviewed,
                        )
                    )
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not save progress: {e}") from e
