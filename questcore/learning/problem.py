"""Exercise value objects. Problems live for one session and are never persisted."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from questcore.core.skills import Skill


@dataclass(frozen=True)
class Problem:
    """A concrete exercise with an exact integer answer."""

    id: UUID
    prompt: str
    correct_answer: int
    skill: Skill
    difficulty: float

    def check(self, answer: int | None) -> bool:
        return answer == self.correct_answer


@dataclass(frozen=True)
class ProblemResult:
    """A learner's answer to a problem."""

    problem: Problem
    is_correct: bool

    @classmethod
    def from_answer(cls, problem: Problem, answer: int | None) -> ProblemResult:
        """Grade an answer; a missing answer counts as incorrect."""
        return cls(problem=problem, is_correct=problem.check(answer))
