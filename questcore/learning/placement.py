"""
Placement Seeder.

Maps a chosen grade band to initial proficiency seeds for every skill, so a
new learner does not have to grind through content below their grade.

Seeds by grade band relative to the placement:
- below grade: comfortably above the mastery threshold (skip trivial content)
- at grade: the midpoint (0)
- above grade: below the midpoint, lower the further away (room to climb)
"""

from __future__ import annotations

from dataclasses import dataclass, field

from questcore.core.mastery import MasteryEngine
from questcore.core.skills import LEARNING_PATH, GradeBand, Skill
from questcore.core.subjects import CurriculumGrade

MIDPOINT = 0.0
BELOW_GRADE_MARGIN = 0.5  # added to the mastery threshold
ABOVE_GRADE_STEP = 0.5  # subtracted per band above placement
ABOVE_GRADE_FLOOR = -1.0
FOCUS_NUDGE = 0.3  # focus skills start at least this far above the midpoint


@dataclass(frozen=True)
class PlacementProfile:
    """One-shot placement input from the placement UI."""

    grade_band: GradeBand
    focus_skills: frozenset[Skill] = field(default_factory=frozenset)


def grade_band_for(grade: CurriculumGrade) -> GradeBand:
    """Map a curriculum grade onto the nearest skill grade band."""
    if grade is CurriculumGrade.PRE_K:
        return GradeBand.KINDERGARTEN
    if grade is CurriculumGrade.GRADE6:
        return GradeBand.GRADE5
    return GradeBand(grade.value)


def seed_for(skill: Skill, grade_band: GradeBand, engine: MasteryEngine) -> float:
    """Seed proficiency for one skill relative to the placement grade band."""
    distance = skill.grade_band.rank - grade_band.rank
    if distance < 0:
        return engine.clamp_proficiency(engine.mastery_threshold + BELOW_GRADE_MARGIN)
    if distance == 0:
        return MIDPOINT
    return max(ABOVE_GRADE_FLOOR, MIDPOINT - ABOVE_GRADE_STEP * distance)


def seed_proficiencies(
    profile: PlacementProfile,
    engine: MasteryEngine | None = None,
    path: tuple[Skill, ...] = LEARNING_PATH,
) -> dict[Skill, float]:
    """
    Compute seed proficiencies for every skill on the path.

    Focus skills are nudged up to at least MIDPOINT + FOCUS_NUDGE; seeds that
    are already higher are left alone.
    """
    engine = engine or MasteryEngine()
    seeds = {skill: seed_for(skill, profile.grade_band, engine) for skill in path}
    floor = MIDPOINT + FOCUS_NUDGE
    for skill in profile.focus_skills:
        if skill in seeds and seeds[skill] < floor:
            seeds[skill] = floor
    return seeds
