"""
Mastery Engine.

Turns (proficiency, correctness, difficulty) observations into updated
proficiency, derives target difficulty, and picks the next focus skill.

Design:
- MasteryConfig: Tunable parameters (mastery threshold, K-factor, scale bounds)
- MasteryEngine: Pure, stateless calculations over those parameters
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass

from questcore.core.skills import (
    LEARNING_PATH,
    MASTERY_THRESHOLD,
    MAX_DIFFICULTY,
    MAX_PROFICIENCY,
    MIN_DIFFICULTY,
    MIN_PROFICIENCY,
    Skill,
)

DEFAULT_K_FACTOR = 0.2


@dataclass(frozen=True)
class MasteryConfig:
    """Parameters of the proficiency model."""

    mastery_threshold: float = MASTERY_THRESHOLD
    k_factor: float = DEFAULT_K_FACTOR  # child-friendly pacing
    min_proficiency: float = MIN_PROFICIENCY
    max_proficiency: float = MAX_PROFICIENCY
    min_difficulty: float = MIN_DIFFICULTY
    max_difficulty: float = MAX_DIFFICULTY

    @classmethod
    def from_settings(cls, settings) -> MasteryConfig:
        """Build from the application Settings."""
        return cls(mastery_threshold=settings.mastery_threshold, k_factor=settings.elo_k_factor)


class MasteryEngine:
    """
    Elo-style proficiency model.

    Proficiency lives on [-2.5, 2.5] with 0 as average; difficulty lives on
    [0, 1.5]. The two scales only meet through target_difficulty().
    """

    def __init__(self, config: MasteryConfig | None = None):
        self.config = config or MasteryConfig()

    @property
    def mastery_threshold(self) -> float:
        return self.config.mastery_threshold

    def is_mastered(self, proficiency: float) -> bool:
        """Check if a proficiency value counts as mastered."""
        return proficiency >= self.config.mastery_threshold

    def clamp_proficiency(self, proficiency: float) -> float:
        return min(self.config.max_proficiency, max(self.config.min_proficiency, proficiency))

    def next_focus_skill(
        self,
        proficiency_lookup: Callable[[Skill], float],
        path: tuple[Skill, ...] = LEARNING_PATH,
    ) -> Skill:
        """
        Return the first skill on the learning path that is not yet mastered.

        Falls back to the last skill on the path once everything is mastered.
        """
        for skill in path:
            if not self.is_mastered(proficiency_lookup(skill)):
                return skill
        return path[-1]

    def expected_success(self, proficiency: float, difficulty: float) -> float:
        """
        Logistic probability of a correct answer.

        Formula: expected = 1 / (1 + e^-(proficiency - difficulty))
        """
        return 1.0 / (1.0 + math.exp(-(proficiency - difficulty)))

    def updated_proficiency(self, current: float, correct: bool, difficulty: float) -> float:
        """
        Apply one Elo update to a stored proficiency.

        Formula: new = current + K * (actual - expected), clamped to the proficiency scale.

        Args:
            current: Proficiency before the answer
            correct: Whether the answer was correct
            difficulty: Difficulty the problem was generated at

        Returns:
            Updated proficiency
        """
        expected = self.expected_success(current, difficulty)
        actual = 1.0 if correct else 0.0
        return self.clamp_proficiency(current + self.config.k_factor * (actual - expected))

    def target_difficulty(self, proficiency: float) -> float:
        """Linearly remap proficiency [-2.5, 2.5] onto difficulty [0, 1.5]."""
        cfg = self.config
        normalized = self.clamp_proficiency(proficiency)
        t = (normalized - cfg.min_proficiency) / (cfg.max_proficiency - cfg.min_proficiency)
        return cfg.min_difficulty + t * (cfg.max_difficulty - cfg.min_difficulty)
