"""
Exercise Session Planner.

Composes the engine for one practice session:
1. Ask the Progress Store for the focus skill and its proficiency
2. Ask the Problem Generator for problems at that proficiency
3. Reject prompts the learner saw recently or already got this session

Each problem gets a bounded number of attempts; when every attempt collides,
the last candidate is kept so a session always has the requested length.
"""

from __future__ import annotations

import random
from collections.abc import Iterable
from dataclasses import dataclass, field

from loguru import logger

from config import get_settings
from questcore.core.skills import Skill
from questcore.core.subjects import LearningSubject
from questcore.learning.problem import Problem
from questcore.learning.problem_generator import ProblemGenerator
from questcore.progress.store import ProgressStore


@dataclass
class PlannerConfig:
    """Configuration for session planning."""
    problem_count: int = 5
    max_attempts: int = 15

    @classmethod
    def from_settings(cls, settings) -> PlannerConfig:
        return cls(
            problem_count=settings.session_problem_count,
            max_attempts=settings.dedup_max_attempts,
        )


@dataclass
class PlannedSession:
    """Problems chosen for one session."""
    subject: str
    skill: Skill
    proficiency: float
    problems: list[Problem] = field(default_factory=list)
    duplicates_kept: int = 0  # problems accepted after exhausting attempts

    @property
    def prompts(self) -> list[str]:
        return [p.prompt for p in self.problems]


def pick_unique_problems(
    generator: ProblemGenerator,
    skill: Skill,
    proficiency: float,
    disallowed: Iterable[str],
    problem_count: int,
    max_attempts: int,
    rng: random.Random | None = None,
) -> tuple[list[Problem], int]:
    """
    Draw problems whose prompts avoid the disallowed set and each other.

    Returns:
        (problems, number of problems kept despite a duplicate prompt)
    """
    seen = set(disallowed)
    chosen: list[Problem] = []
    kept_duplicates = 0

    for _ in range(problem_count):
        candidate = generator.generate_problem(skill, proficiency, rng)
        attempts = 1
        while candidate.prompt in seen and attempts < max_attempts:
            candidate = generator.generate_problem(skill, proficiency, rng)
            attempts += 1
        if candidate.prompt in seen:
            kept_duplicates += 1
        seen.add(candidate.prompt)
        chosen.append(candidate)

    return chosen, kept_duplicates


class ExerciseSessionPlanner:
    """Plans practice sessions from the learner's current progress."""

    def __init__(
        self,
        store: ProgressStore,
        generator: ProblemGenerator | None = None,
        config: PlannerConfig | None = None,
    ):
        self.store = store
        self.generator = generator or ProblemGenerator(store.mastery_engine)
        self.config = config or PlannerConfig.from_settings(get_settings())

    def plan(
        self,
        subject: LearningSubject | str = LearningSubject.MATH,
        skill: Skill | None = None,
        rng: random.Random | None = None,
    ) -> PlannedSession:
        """
        Plan a session for the focus skill (or an explicitly chosen skill).

        Args:
            subject: Practice subject
            skill: Override the focus skill
            rng: Random source for this session

        Returns:
            PlannedSession with config.problem_count problems
        """
        skill = skill or self.store.focus_skill(subject)
        proficiency = self.store.proficiency(skill, subject)
        problems, kept = pick_unique_problems(
            self.generator,
            skill,
            proficiency,
            disallowed=self.store.recent_prompts(skill),
            problem_count=self.config.problem_count,
            max_attempts=self.config.max_attempts,
            rng=rng,
        )
        if kept:
            logger.debug(f"Kept {kept} repeated prompts for {skill.value} after {self.config.max_attempts} attempts")

        subject_id = subject.value if isinstance(subject, LearningSubject) else subject
        return PlannedSession(
            subject=subject_id,
            skill=skill,
            proficiency=proficiency,
            problems=problems,
            duplicates_kept=kept,
        )
