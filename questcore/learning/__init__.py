"""
Learning: problem generation and placement.

- problem: Problem and ProblemResult value objects
- problem_generator: Skill templates over an injectable random source
- placement: Grade-band placement seeding
"""

from questcore.learning.placement import PlacementProfile, grade_band_for, seed_proficiencies
from questcore.learning.problem import Problem, ProblemResult
from questcore.learning.problem_generator import ProblemGenerator

__all__ = [
    "Problem",
    "ProblemResult",
    "ProblemGenerator",
    "PlacementProfile",
    "grade_band_for",
    "seed_proficiencies",
]
