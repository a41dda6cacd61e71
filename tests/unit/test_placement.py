"""
Unit tests for placement seeding.

Seeds depend only on where each skill's grade band sits relative to the
placement band.
"""

import pytest

from questcore.core.skills import LEARNING_PATH, GradeBand, Skill
from questcore.core.subjects import CurriculumGrade
from questcore.learning.placement import PlacementProfile, grade_band_for, seed_proficiencies


class TestSeedProficiencies:
    """Tests for per-band seeds."""

    def test_every_skill_seeded(self):
        seeds = seed_proficiencies(PlacementProfile(GradeBand.GRADE2))
        assert set(seeds) == set(LEARNING_PATH)

    def test_below_grade_skills_start_mastered(self, mastery_engine):
        seeds = seed_proficiencies(PlacementProfile(GradeBand.GRADE2), mastery_engine)
        assert seeds[Skill.COUNTING] == pytest.approx(1.5)
        assert seeds[Skill.ADDITION_WITHIN_10] == pytest.approx(1.5)
        assert mastery_engine.is_mastered(seeds[Skill.PLACE_VALUE_TENS_ONES])

    def test_at_grade_skills_start_at_midpoint(self):
        seeds = seed_proficiencies(PlacementProfile(GradeBand.GRADE2))
        assert seeds[Skill.ADDITION_WITHIN_20] == 0.0

    def test_above_grade_skills_start_lower_with_distance(self):
        seeds = seed_proficiencies(PlacementProfile(GradeBand.GRADE2))
        assert seeds[Skill.FRACTIONS_UNIT] == pytest.approx(-0.5)  # grade 3
        assert seeds[Skill.MULTI_DIGIT_ADDITION] == pytest.approx(-1.0)  # grade 4

    def test_above_grade_floor(self):
        seeds = seed_proficiencies(PlacementProfile(GradeBand.KINDERGARTEN))
        assert seeds[Skill.DIVISION_WITH_REMAINDER] == pytest.approx(-1.0)  # five bands up

    def test_focus_skill_nudged_up(self):
        profile = PlacementProfile(GradeBand.GRADE2, frozenset({Skill.ADDITION_WITHIN_20, Skill.FRACTIONS_UNIT}))
        seeds = seed_proficiencies(profile)
        assert seeds[Skill.ADDITION_WITHIN_20] == pytest.approx(0.3)
        assert seeds[Skill.FRACTIONS_UNIT] == pytest.approx(0.3)

    def test_focus_never_lowers_a_seed(self):
        profile = PlacementProfile(GradeBand.GRADE2, frozenset({Skill.COUNTING}))
        assert seed_proficiencies(profile)[Skill.COUNTING] == pytest.approx(1.5)

    def test_focus_skill_after_placement_is_first_at_grade_gap(self, mastery_engine):
        seeds = seed_proficiencies(PlacementProfile(GradeBand.GRADE2), mastery_engine)
        assert mastery_engine.next_focus_skill(seeds.__getitem__) is Skill.ADDITION_WITHIN_20


class TestGradeBandFor:
    @pytest.mark.parametrize(
        "grade,band",
        [
            (CurriculumGrade.PRE_K, GradeBand.KINDERGARTEN),
            (CurriculumGrade.KINDERGARTEN, GradeBand.KINDERGARTEN),
            (CurriculumGrade.GRADE3, GradeBand.GRADE3),
            (CurriculumGrade.GRADE6, GradeBand.GRADE5),
        ],
    )
    def test_mapping(self, grade, band):
        assert grade_band_for(grade) is band
