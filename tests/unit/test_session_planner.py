"""
Unit tests for ExerciseSessionPlanner and the prompt deduplication helper.
"""

import random
from uuid import uuid4

import pytest

from questcore.core.skills import Skill
from questcore.core.subjects import LearningSubject
from questcore.learning.problem import Problem, ProblemResult
from questcore.study import ExerciseSessionPlanner, PlannerConfig, pick_unique_problems


class ScriptedGenerator:
    """Returns problems with prompts from a fixed script, repeating the last one."""

    def __init__(self, prompts):
        self.prompts = list(prompts)
        self.calls = 0

    def generate_problem(self, skill, proficiency, rng=None):
        prompt = self.prompts[min(self.calls, len(self.prompts) - 1)]
        self.calls += 1
        return Problem(id=uuid4(), prompt=prompt, correct_answer=1, skill=skill, difficulty=0.5)


class TestPickUniqueProblems:
    def test_skips_disallowed_prompts(self):
        generator = ScriptedGenerator(["a", "a", "b", "c"])
        problems, kept = pick_unique_problems(
            generator, Skill.COUNTING, 0.0, disallowed={"a"}, problem_count=2, max_attempts=15
        )
        assert [p.prompt for p in problems] == ["b", "c"]
        assert kept == 0

    def test_no_repeats_within_session(self):
        generator = ScriptedGenerator(["a", "a", "b"] + ["c"] * 5)
        problems, _ = pick_unique_problems(
            generator, Skill.COUNTING, 0.0, disallowed=set(), problem_count=3, max_attempts=15
        )
        assert [p.prompt for p in problems] == ["a", "b", "c"]

    def test_keeps_duplicate_after_max_attempts(self):
        generator = ScriptedGenerator(["a"])
        problems, kept = pick_unique_problems(
            generator, Skill.COUNTING, 0.0, disallowed={"a"}, problem_count=2, max_attempts=15
        )
        assert [p.prompt for p in problems] == ["a", "a"]
        assert kept == 2
        assert generator.calls == 30

    def test_zero_problems(self):
        problems, kept = pick_unique_problems(
            ScriptedGenerator(["a"]), Skill.COUNTING, 0.0, disallowed=(), problem_count=0, max_attempts=15
        )
        assert problems == []
        assert kept == 0


class TestExerciseSessionPlanner:
    """Tests for planning against a progress store."""

    @pytest.fixture
    def planner(self, progress_store):
        return ExerciseSessionPlanner(progress_store, config=PlannerConfig(problem_count=5, max_attempts=15))

    def test_plans_focus_skill(self, planner):
        session = planner.plan(LearningSubject.MATH, rng=random.Random(1))
        assert session.skill is Skill.COUNTING
        assert session.proficiency == 0.0
        assert len(session.problems) == 5
        assert session.subject == "math"

    def test_explicit_skill_override(self, planner):
        session = planner.plan(skill=Skill.MULTIPLICATION_FACTS_TO_10, rng=random.Random(1))
        assert session.skill is Skill.MULTIPLICATION_FACTS_TO_10
        assert all(p.skill is Skill.MULTIPLICATION_FACTS_TO_10 for p in session.problems)

    def test_prompts_unique_within_session(self, planner):
        session = planner.plan(skill=Skill.MULTI_DIGIT_ADDITION, rng=random.Random(2))
        assert len(set(session.prompts)) == len(session.prompts)

    def test_avoids_recently_seen_prompts(self, planner, progress_store, now):
        first = planner.plan(skill=Skill.MULTI_DIGIT_ADDITION, rng=random.Random(3))
        results = [ProblemResult.from_answer(p, p.correct_answer) for p in first.problems]
        progress_store.record_session(LearningSubject.MATH, results, now)

        second = planner.plan(skill=Skill.MULTI_DIGIT_ADDITION, rng=random.Random(3))
        assert not set(first.prompts) & set(second.prompts)

    def test_same_seed_reproduces_plan(self, planner):
        first = planner.plan(rng=random.Random(9))
        second = planner.plan(rng=random.Random(9))
        assert first.prompts == second.prompts

    def test_config_from_settings(self, settings):
        config = PlannerConfig.from_settings(settings)
        assert config.problem_count == 5
        assert config.max_attempts == 15
