"""
Problem Generator.

Produces concrete math exercises for a skill at a difficulty derived from the
learner's proficiency. Each skill has a template that interpolates its operand
range linearly between an easy base and a hard ceiling, samples operands
uniformly from an injected random source, and computes the exact integer answer
from the sampled operands.

The generator never deduplicates; see questcore.study.session_planner.
"""

from __future__ import annotations

import random
import uuid
from collections.abc import Callable

from loguru import logger

from questcore.core.mastery import MasteryEngine
from questcore.core.skills import Skill
from questcore.learning.problem import Problem

# (name, sides), ordered from most to least familiar
SHAPES: tuple[tuple[str, int], ...] = (
    ("triangle", 3),
    ("square", 4),
    ("rectangle", 4),
    ("pentagon", 5),
    ("hexagon", 6),
    ("octagon", 8),
)

# Template signature: (rng, t) -> (prompt, answer), t in [0, 1] across the skill's difficulty band
Template = Callable[[random.Random, float], tuple[str, int]]


def scaled(base: int, ceiling: int, t: float) -> int:
    """Interpolate linearly from base (t=0) to ceiling (t=1), rounded and clamped."""
    value = round(base + (ceiling - base) * t)
    return min(max(base, ceiling), max(min(base, ceiling), value))


def _plural(count: int, word: str, plural: str | None = None) -> str:
    if count == 1:
        return f"1 {word}"
    return f"{count} {plural or word + 's'}"


# =============================================================================
# Templates
# =============================================================================


def _counting(rng: random.Random, t: float) -> tuple[str, int]:
    n = rng.randint(1, scaled(5, 10, t))
    return f"Count the stars: {'★' * n}", n


def _number_comparison(rng: random.Random, t: float) -> tuple[str, int]:
    hi = scaled(10, 50, t)
    a = rng.randint(1, hi)
    b = rng.randint(1, hi - 1)
    if b >= a:
        b += 1
    return f"Which number is bigger: {a} or {b}?", max(a, b)


def _place_value(rng: random.Random, t: float) -> tuple[str, int]:
    n = rng.randint(10, scaled(20, 99, t))
    return f"How many tens are in {n}?", n // 10


def _addition_within_10(rng: random.Random, t: float) -> tuple[str, int]:
    hi = scaled(5, 10, t)
    a = rng.randint(1, hi)
    b = rng.randint(0, hi - a)
    return f"{a} + {b} = ?", a + b


def _addition_within_20(rng: random.Random, t: float) -> tuple[str, int]:
    hi = scaled(10, 20, t)
    a = rng.randint(5, hi - 1)
    b = rng.randint(1, hi - a)
    return f"{a} + {b} = ?", a + b


def _addition_with_regrouping(rng: random.Random, t: float) -> tuple[str, int]:
    tens_cap = scaled(2, 8, t)
    a_ones = rng.randint(1, 9)
    b_ones = rng.randint(10 - a_ones, 9)  # ones always carry
    a_tens = rng.randint(1, tens_cap)
    b_tens = rng.randint(0, tens_cap - a_tens)
    a = a_tens * 10 + a_ones
    b = b_tens * 10 + b_ones
    return f"{a} + {b} = ?", a + b


def _multi_digit_addition(rng: random.Random, t: float) -> tuple[str, int]:
    hi = scaled(199, 999, t)
    a = rng.randint(100, hi)
    b = rng.randint(100, hi)
    return f"{a} + {b} = ?", a + b


def _subtraction_within_10(rng: random.Random, t: float) -> tuple[str, int]:
    a = rng.randint(2, scaled(5, 10, t))
    b = rng.randint(0, a)
    return f"{a} − {b} = ?", a - b


def _subtraction_within_20(rng: random.Random, t: float) -> tuple[str, int]:
    a = rng.randint(6, scaled(12, 20, t))
    b = rng.randint(1, a)
    return f"{a} − {b} = ?", a - b


def _subtraction_with_regrouping(rng: random.Random, t: float) -> tuple[str, int]:
    a_tens = rng.randint(2, scaled(3, 9, t))
    a_ones = rng.randint(0, 8)
    b_ones = rng.randint(a_ones + 1, 9)  # ones always borrow
    b_tens = rng.randint(0, a_tens - 1)
    a = a_tens * 10 + a_ones
    b = b_tens * 10 + b_ones
    return f"{a} − {b} = ?", a - b


def _multi_digit_subtraction(rng: random.Random, t: float) -> tuple[str, int]:
    a = rng.randint(200, scaled(300, 999, t))
    b = rng.randint(100, a)
    return f"{a} − {b} = ?", a - b


def _multiplication_facts_to_5(rng: random.Random, t: float) -> tuple[str, int]:
    multiplier = rng.randint(2, 5)
    multiplicand = rng.randint(2, scaled(3, 10, t))
    return f"{multiplier} × {multiplicand} = ?", multiplier * multiplicand


def _multiplication_facts_to_10(rng: random.Random, t: float) -> tuple[str, int]:
    a = rng.randint(2, scaled(5, 10, t))
    b = rng.randint(2, 10)
    return f"{a} × {b} = ?", a * b


def _multi_digit_times_single_digit(rng: random.Random, t: float) -> tuple[str, int]:
    a = rng.randint(10, scaled(30, 999, t))
    b = rng.randint(2, 9)
    return f"{a} × {b} = ?", a * b


def _division_facts_to_5(rng: random.Random, t: float) -> tuple[str, int]:
    divisor = rng.randint(2, 5)
    quotient = rng.randint(1, scaled(3, 10, t))
    return f"{divisor * quotient} ÷ {divisor} = ?", quotient


def _division_facts_to_10(rng: random.Random, t: float) -> tuple[str, int]:
    divisor = rng.randint(2, scaled(5, 10, t))
    quotient = rng.randint(1, 10)
    return f"{divisor * quotient} ÷ {divisor} = ?", quotient


def _division_with_remainder(rng: random.Random, t: float) -> tuple[str, int]:
    divisor = rng.randint(2, scaled(4, 9, t))
    quotient = rng.randint(1, scaled(3, 9, t))
    remainder = rng.randint(1, divisor - 1)
    dividend = divisor * quotient + remainder
    return f"What is the remainder when {dividend} is divided by {divisor}?", remainder


def _fractions_unit(rng: random.Random, t: float) -> tuple[str, int]:
    n = rng.randint(2, scaled(4, 12, t))
    return f"A pizza is cut into {n} equal slices. One slice is 1/? of the pizza.", n


def _fractions_equivalent(rng: random.Random, t: float) -> tuple[str, int]:
    denominator = rng.randint(2, scaled(4, 10, t))
    numerator = rng.randint(1, denominator - 1)
    factor = rng.randint(2, scaled(2, 5, t))
    return f"{numerator}/{denominator} = ?/{denominator * factor}", numerator * factor


def _fractions_compare(rng: random.Random, t: float) -> tuple[str, int]:
    denominator = rng.randint(3, scaled(5, 12, t))
    a = rng.randint(1, denominator - 1)
    b = rng.randint(1, denominator - 2)
    if b >= a:
        b += 1
    prompt = f"Which is greater: {a}/{denominator} or {b}/{denominator}? Type its numerator."
    return prompt, max(a, b)


def _fractions_add_subtract(rng: random.Random, t: float) -> tuple[str, int]:
    denominator = rng.randint(3, scaled(5, 12, t))
    if rng.random() < 0.5:
        a = rng.randint(1, denominator - 1)
        b = rng.randint(1, denominator - a)
        return f"{a}/{denominator} + {b}/{denominator} = ?/{denominator}", a + b
    a = rng.randint(2, denominator)
    b = rng.randint(1, a - 1)
    return f"{a}/{denominator} − {b}/{denominator} = ?/{denominator}", a - b


def _time_read_hour_half(rng: random.Random, t: float) -> tuple[str, int]:
    hour = rng.randint(1, 12)
    if rng.random() < t:
        return f"It is half past {hour}. What hour will it be in 30 minutes?", hour % 12 + 1
    return f"The long hand points to 12 and the short hand points to {hour}. What hour is it?", hour


def _money_coin_values(rng: random.Random, t: float) -> tuple[str, int]:
    coins = scaled(2, 8, t)
    dimes = rng.randint(0, coins)
    nickels = rng.randint(0, coins - dimes)
    pennies = coins - dimes - nickels
    parts = [
        _plural(count, word, plural)
        for count, word, plural in (
            (dimes, "dime", None),
            (nickels, "nickel", None),
            (pennies, "penny", "pennies"),
        )
        if count
    ]
    listed = parts[0] if len(parts) == 1 else ", ".join(parts[:-1]) + f" and {parts[-1]}"
    return f"{listed} make how many cents?", dimes * 10 + nickels * 5 + pennies


def _shapes_basic(rng: random.Random, t: float) -> tuple[str, int]:
    name, sides = rng.choice(SHAPES[: scaled(3, len(SHAPES), t)])
    return f"How many sides does a {name} have?", sides


def _area_perimeter(rng: random.Random, t: float) -> tuple[str, int]:
    width = rng.randint(2, scaled(5, 12, t))
    height = rng.randint(2, scaled(5, 12, t))
    if rng.random() < 0.5:
        return f"A rectangle is {width} by {height}. What is its area?", width * height
    return f"A rectangle is {width} by {height}. What is its perimeter?", 2 * (width + height)


TEMPLATES: dict[Skill, Template] = {
    Skill.COUNTING: _counting,
    Skill.NUMBER_COMPARISON: _number_comparison,
    Skill.PLACE_VALUE_TENS_ONES: _place_value,
    Skill.ADDITION_WITHIN_10: _addition_within_10,
    Skill.ADDITION_WITHIN_20: _addition_within_20,
    Skill.ADDITION_WITH_REGROUPING: _addition_with_regrouping,
    Skill.MULTI_DIGIT_ADDITION: _multi_digit_addition,
    Skill.SUBTRACTION_WITHIN_10: _subtraction_within_10,
    Skill.SUBTRACTION_WITHIN_20: _subtraction_within_20,
    Skill.SUBTRACTION_WITH_REGROUPING: _subtraction_with_regrouping,
    Skill.MULTI_DIGIT_SUBTRACTION: _multi_digit_subtraction,
    Skill.MULTIPLICATION_FACTS_TO_5: _multiplication_facts_to_5,
    Skill.MULTIPLICATION_FACTS_TO_10: _multiplication_facts_to_10,
    Skill.MULTI_DIGIT_TIMES_SINGLE_DIGIT: _multi_digit_times_single_digit,
    Skill.DIVISION_FACTS_TO_5: _division_facts_to_5,
    Skill.DIVISION_FACTS_TO_10: _division_facts_to_10,
    Skill.DIVISION_WITH_REMAINDER: _division_with_remainder,
    Skill.FRACTIONS_UNIT: _fractions_unit,
    Skill.FRACTIONS_EQUIVALENT: _fractions_equivalent,
    Skill.FRACTIONS_COMPARE_LIKE_DENOMINATORS: _fractions_compare,
    Skill.FRACTIONS_ADD_SUBTRACT_LIKE_DENOMINATORS: _fractions_add_subtract,
    Skill.TIME_READ_HOUR_HALF: _time_read_hour_half,
    Skill.MONEY_COIN_VALUES: _money_coin_values,
    Skill.SHAPES_BASIC: _shapes_basic,
    Skill.AREA_PERIMETER_RECTANGLES: _area_perimeter,
}


# =============================================================================
# Generator
# =============================================================================


class ProblemGenerator:
    """
    Generate problems for a skill from a proficiency value.

    The random source is injectable so sessions can be reproduced from a seed;
    a per-call rng overrides the one given at construction.
    """

    def __init__(
        self,
        mastery_engine: MasteryEngine | None = None,
        rng: random.Random | None = None,
    ):
        self.mastery_engine = mastery_engine or MasteryEngine()
        self.rng = rng or random.Random()

    def generation_difficulty(self, skill: Skill, proficiency: float) -> float:
        """Target difficulty for the proficiency, clamped into the skill's difficulty band."""
        lo, hi = skill.difficulty_bounds
        target = self.mastery_engine.target_difficulty(proficiency)
        return min(hi, max(lo, target))

    def generate_problem(
        self,
        skill: Skill,
        proficiency: float,
        rng: random.Random | None = None,
    ) -> Problem:
        rng = rng or self.rng
        difficulty = self.generation_difficulty(skill, proficiency)
        lo, hi = skill.difficulty_bounds
        t = (difficulty - lo) / (hi - lo) if hi > lo else 0.0

        prompt, answer = TEMPLATES[skill](rng, t)
        problem = Problem(
            id=uuid.UUID(int=rng.getrandbits(128), version=4),
            prompt=prompt,
            correct_answer=answer,
            skill=skill,
            difficulty=difficulty,
        )
        logger.debug(f"Generated {skill.value} problem at difficulty {difficulty:.2f}: {prompt}")
        return problem

    def generate_session(
        self,
        skill: Skill,
        proficiency: float,
        problem_count: int = 5,
        rng: random.Random | None = None,
    ) -> list[Problem]:
        """Sample problem_count independent problems. No deduplication is applied."""
        return [self.generate_problem(skill, proficiency, rng) for _ in range(problem_count)]
