"""
Achievement reporting seam.

The Progress Store emits one SessionReport per recorded session to a reporter
injected at construction. How the report is consumed (achievements,
leaderboards) is outside the engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from loguru import logger

from questcore.core.skills import Skill


@dataclass(frozen=True)
class SessionReport:
    """Summary handed to the achievement reporter after a session is committed."""

    subject: str
    total_sessions: int
    total_correct_answers: int
    newly_mastered_skills: tuple[Skill, ...] = ()


class AchievementReporter(Protocol):
    """Anything that can receive session reports."""

    def record_session(self, report: SessionReport) -> None: ...


class NullAchievementReporter:
    """Reporter for hosts without an achievement system."""

    def record_session(self, report: SessionReport) -> None:
        return None


class LoggingAchievementReporter:
    """Reporter that writes each report to the log."""

    def record_session(self, report: SessionReport) -> None:
        mastered = ", ".join(skill.value for skill in report.newly_mastered_skills) or "none"
        logger.info(
            f"Session report [{report.subject}]: sessions={report.total_sessions} "
            f"correct={report.total_correct_answers} newly_mastered={mastered}"
        )
