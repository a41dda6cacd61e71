"""
Unit tests for MasteryEngine.

Tests:
- Elo update formula and clamping
- Target difficulty mapping
- Focus skill selection along the learning path
"""

import math

import pytest

from config import Settings
from questcore.core.mastery import MasteryConfig, MasteryEngine
from questcore.core.skills import LEARNING_PATH, Skill


class TestEloUpdate:
    """Tests for the proficiency update."""

    def test_expected_success_is_half_when_matched(self, mastery_engine):
        assert mastery_engine.expected_success(0.5, 0.5) == pytest.approx(0.5)

    def test_correct_answer_increases_proficiency(self, mastery_engine):
        expected = 1 / (1 + math.exp(0.75))
        updated = mastery_engine.updated_proficiency(0.0, True, 0.75)
        assert updated == pytest.approx(0.2 * (1 - expected))
        assert updated > 0.0

    def test_incorrect_answer_decreases_proficiency(self, mastery_engine):
        expected = 1 / (1 + math.exp(0.75))
        updated = mastery_engine.updated_proficiency(0.0, False, 0.75)
        assert updated == pytest.approx(-0.2 * expected)

    @pytest.mark.parametrize("proficiency", [-2.5, -1.2, 0.0, 0.7, 1.4, 2.4])
    @pytest.mark.parametrize("difficulty", [0.0, 0.5, 1.0, 1.5])
    def test_correct_always_beats_incorrect(self, mastery_engine, proficiency, difficulty):
        correct = mastery_engine.updated_proficiency(proficiency, True, difficulty)
        incorrect = mastery_engine.updated_proficiency(proficiency, False, difficulty)
        assert correct > incorrect

    def test_easy_miss_costs_more_than_hard_miss(self, mastery_engine):
        easy_miss = mastery_engine.updated_proficiency(1.0, False, 0.0)
        hard_miss = mastery_engine.updated_proficiency(1.0, False, 1.5)
        assert easy_miss < hard_miss

    def test_upper_clamp(self, mastery_engine):
        assert mastery_engine.updated_proficiency(2.5, True, 0.0) == 2.5

    def test_lower_clamp(self, mastery_engine):
        assert mastery_engine.updated_proficiency(-2.5, False, 1.5) == -2.5

    def test_k_factor_from_settings(self):
        engine = MasteryEngine(MasteryConfig.from_settings(Settings(_env_file=None, elo_k_factor=0.4)))
        assert engine.updated_proficiency(0.0, True, 0.0) == pytest.approx(0.2)


class TestTargetDifficulty:
    @pytest.mark.parametrize(
        "proficiency,difficulty",
        [(-2.5, 0.0), (0.0, 0.75), (2.5, 1.5), (1.0, 1.05)],
    )
    def test_linear_mapping(self, mastery_engine, proficiency, difficulty):
        assert mastery_engine.target_difficulty(proficiency) == pytest.approx(difficulty)

    def test_out_of_range_proficiency_is_clamped(self, mastery_engine):
        assert mastery_engine.target_difficulty(10.0) == pytest.approx(1.5)
        assert mastery_engine.target_difficulty(-10.0) == pytest.approx(0.0)


class TestMastery:
    def test_threshold_is_inclusive(self, mastery_engine):
        assert mastery_engine.is_mastered(1.0)
        assert not mastery_engine.is_mastered(0.999)

    def test_custom_threshold(self):
        engine = MasteryEngine(MasteryConfig(mastery_threshold=1.5))
        assert not engine.is_mastered(1.2)


class TestFocusSkill:
    """Tests for next_focus_skill."""

    def test_fresh_learner_starts_with_counting(self, mastery_engine):
        assert mastery_engine.next_focus_skill(lambda skill: 0.0) is Skill.COUNTING

    def test_skips_mastered_prefix(self, mastery_engine):
        mastered = {Skill.COUNTING, Skill.NUMBER_COMPARISON}
        focus = mastery_engine.next_focus_skill(lambda skill: 2.0 if skill in mastered else 0.0)
        assert focus is Skill.PLACE_VALUE_TENS_ONES

    def test_earliest_gap_wins_over_later_progress(self, mastery_engine):
        proficiency = {skill: 2.0 for skill in LEARNING_PATH}
        proficiency[Skill.SUBTRACTION_WITHIN_10] = 0.2
        proficiency[Skill.FRACTIONS_UNIT] = -1.0
        assert mastery_engine.next_focus_skill(proficiency.__getitem__) is Skill.SUBTRACTION_WITHIN_10

    def test_everything_mastered_returns_last_skill(self, mastery_engine):
        assert mastery_engine.next_focus_skill(lambda skill: 2.5) is LEARNING_PATH[-1]
