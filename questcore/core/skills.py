"""
Skill Graph.

Static definition of the math skills, their fixed learning path, prerequisite
ordering, grade bands and difficulty bands.

Design:
- GradeBand: Enum for the K-5 grade bands skills belong to
- Skill: Enum of every skill in the catalog
- SkillInfo: Static metadata for a skill (name, prerequisites, bands)
- LEARNING_PATH: The fixed, total order skills are learned in
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# Proficiency scale shared by the mastery engine and the stores
MIN_PROFICIENCY = -2.5
MAX_PROFICIENCY = 2.5
MASTERY_THRESHOLD = 1.0

# Difficulty scale problems are generated on
MIN_DIFFICULTY = 0.0
MAX_DIFFICULTY = 1.5


class GradeBand(str, Enum):
    """Grade band a skill is normally taught in."""

    KINDERGARTEN = "kindergarten"
    GRADE1 = "grade1"
    GRADE2 = "grade2"
    GRADE3 = "grade3"
    GRADE4 = "grade4"
    GRADE5 = "grade5"

    @property
    def rank(self) -> int:
        """Position of the band, kindergarten = 0."""
        return list(GradeBand).index(self)

    @property
    def display_name(self) -> str:
        if self is GradeBand.KINDERGARTEN:
            return "Kindergarten"
        return f"Grade {self.value[-1]}"


class Skill(str, Enum):
    """Math skills in catalog order."""

    # Early number sense
    COUNTING = "counting"
    NUMBER_COMPARISON = "number_comparison"
    PLACE_VALUE_TENS_ONES = "place_value_tens_ones"

    # Addition
    ADDITION_WITHIN_10 = "addition_within_10"
    ADDITION_WITHIN_20 = "addition_within_20"
    ADDITION_WITH_REGROUPING = "addition_with_regrouping"
    MULTI_DIGIT_ADDITION = "multi_digit_addition"

    # Subtraction
    SUBTRACTION_WITHIN_10 = "subtraction_within_10"
    SUBTRACTION_WITHIN_20 = "subtraction_within_20"
    SUBTRACTION_WITH_REGROUPING = "subtraction_with_regrouping"
    MULTI_DIGIT_SUBTRACTION = "multi_digit_subtraction"

    # Multiplication
    MULTIPLICATION_FACTS_TO_5 = "multiplication_facts_to_5"
    MULTIPLICATION_FACTS_TO_10 = "multiplication_facts_to_10"
    MULTI_DIGIT_TIMES_SINGLE_DIGIT = "multi_digit_times_single_digit"

    # Division
    DIVISION_FACTS_TO_5 = "division_facts_to_5"
    DIVISION_FACTS_TO_10 = "division_facts_to_10"
    DIVISION_WITH_REMAINDER = "division_with_remainder"

    # Fractions
    FRACTIONS_UNIT = "fractions_unit"
    FRACTIONS_EQUIVALENT = "fractions_equivalent"
    FRACTIONS_COMPARE_LIKE_DENOMINATORS = "fractions_compare_like_denominators"
    FRACTIONS_ADD_SUBTRACT_LIKE_DENOMINATORS = "fractions_add_subtract_like_denominators"

    # Measurement & geometry starters
    TIME_READ_HOUR_HALF = "time_read_hour_half"
    MONEY_COIN_VALUES = "money_coin_values"
    SHAPES_BASIC = "shapes_basic"
    AREA_PERIMETER_RECTANGLES = "area_perimeter_rectangles"

    @property
    def info(self) -> SkillInfo:
        return SKILL_CATALOG[self]

    @property
    def display_name(self) -> str:
        return self.info.display_name

    @property
    def description(self) -> str:
        return self.info.description

    @property
    def prerequisites(self) -> tuple[Skill, ...]:
        return self.info.prerequisites

    @property
    def prerequisite(self) -> Skill | None:
        """The immediate prerequisite: the latest one on the learning path, if any."""
        if not self.info.prerequisites:
            return None
        return max(self.info.prerequisites, key=path_position)

    @property
    def grade_band(self) -> GradeBand:
        return self.info.grade_band

    @property
    def difficulty_bounds(self) -> tuple[float, float]:
        return self.info.difficulty_bounds


@dataclass(frozen=True)
class SkillInfo:
    """Static metadata for one skill."""

    display_name: str
    description: str
    prerequisites: tuple[Skill, ...]
    grade_band: GradeBand
    difficulty_bounds: tuple[float, float]  # sub-range of MIN_DIFFICULTY..MAX_DIFFICULTY


# Difficulty bands: tighter for early skills, broader for advanced ones
_EARLY = (0.0, 0.6)
_BASIC = (0.0, 0.8)
_CORE = (0.2, 1.0)
_STRETCH = (0.4, 1.2)
_ADVANCED = (0.6, 1.5)

_K = GradeBand.KINDERGARTEN
_G1 = GradeBand.GRADE1
_G2 = GradeBand.GRADE2
_G3 = GradeBand.GRADE3
_G4 = GradeBand.GRADE4
_G5 = GradeBand.GRADE5

SKILL_CATALOG: dict[Skill, SkillInfo] = {
    Skill.COUNTING: SkillInfo(
        "Counting", "Count objects and identify totals.", (), _K, _EARLY
    ),
    Skill.NUMBER_COMPARISON: SkillInfo(
        "Compare Numbers", "Compare numbers using <, >, =.", (Skill.COUNTING,), _K, _EARLY
    ),
    Skill.PLACE_VALUE_TENS_ONES: SkillInfo(
        "Place Value (Tens/Ones)", "Understand tens and ones.", (Skill.NUMBER_COMPARISON,), _G1, _BASIC
    ),
    Skill.ADDITION_WITHIN_10: SkillInfo(
        "Addition to 10", "Add two numbers with sums up to 10.", (Skill.COUNTING,), _G1, _BASIC
    ),
    Skill.ADDITION_WITHIN_20: SkillInfo(
        "Addition to 20", "Add two numbers with sums up to 20.", (Skill.ADDITION_WITHIN_10,), _G2, _CORE
    ),
    Skill.ADDITION_WITH_REGROUPING: SkillInfo(
        "Addition (Regrouping)",
        "Add with regrouping (carrying).",
        (Skill.ADDITION_WITHIN_20, Skill.PLACE_VALUE_TENS_ONES),
        _G2,
        _STRETCH,
    ),
    Skill.MULTI_DIGIT_ADDITION: SkillInfo(
        "Multi-digit Addition", "Add multi-digit numbers.", (Skill.ADDITION_WITH_REGROUPING,), _G4, _ADVANCED
    ),
    Skill.SUBTRACTION_WITHIN_10: SkillInfo(
        "Subtraction to 10", "Subtract within 10, no negatives.", (Skill.COUNTING,), _G1, _BASIC
    ),
    Skill.SUBTRACTION_WITHIN_20: SkillInfo(
        "Subtraction to 20", "Subtract within 20, no negatives.", (Skill.SUBTRACTION_WITHIN_10,), _G2, _CORE
    ),
    Skill.SUBTRACTION_WITH_REGROUPING: SkillInfo(
        "Subtraction (Regrouping)",
        "Subtract with regrouping (borrowing).",
        (Skill.SUBTRACTION_WITHIN_20, Skill.PLACE_VALUE_TENS_ONES),
        _G2,
        _STRETCH,
    ),
    Skill.MULTI_DIGIT_SUBTRACTION: SkillInfo(
        "Multi-digit Subtraction",
        "Subtract multi-digit numbers.",
        (Skill.SUBTRACTION_WITH_REGROUPING,),
        _G4,
        _ADVANCED,
    ),
    Skill.MULTIPLICATION_FACTS_TO_5: SkillInfo(
        "Multiplication Facts ×5",
        "Multiply numbers with factors up to 5.",
        (Skill.ADDITION_WITHIN_20,),
        _G3,
        _CORE,
    ),
    Skill.MULTIPLICATION_FACTS_TO_10: SkillInfo(
        "Multiplication Facts ×10",
        "Multiply numbers with factors up to 10.",
        (Skill.MULTIPLICATION_FACTS_TO_5,),
        _G4,
        _STRETCH,
    ),
    Skill.MULTI_DIGIT_TIMES_SINGLE_DIGIT: SkillInfo(
        "Multi-digit × Single-digit",
        "Multiply multi-digit by single-digit.",
        (Skill.MULTIPLICATION_FACTS_TO_10, Skill.PLACE_VALUE_TENS_ONES),
        _G5,
        _ADVANCED,
    ),
    Skill.DIVISION_FACTS_TO_5: SkillInfo(
        "Division Facts ÷5",
        "Divide numbers with divisors up to 5.",
        (Skill.MULTIPLICATION_FACTS_TO_5,),
        _G3,
        _CORE,
    ),
    Skill.DIVISION_FACTS_TO_10: SkillInfo(
        "Division Facts ÷10",
        "Divide numbers with divisors up to 10.",
        (Skill.DIVISION_FACTS_TO_5,),
        _G4,
        _STRETCH,
    ),
    Skill.DIVISION_WITH_REMAINDER: SkillInfo(
        "Division w/ Remainder", "Divide with remainders.", (Skill.DIVISION_FACTS_TO_10,), _G5, _ADVANCED
    ),
    Skill.FRACTIONS_UNIT: SkillInfo(
        "Unit Fractions", "Understand unit fractions (1/n).", (Skill.NUMBER_COMPARISON,), _G3, _CORE
    ),
    Skill.FRACTIONS_EQUIVALENT: SkillInfo(
        "Equivalent Fractions", "Find equivalent fractions.", (Skill.FRACTIONS_UNIT,), _G4, _STRETCH
    ),
    Skill.FRACTIONS_COMPARE_LIKE_DENOMINATORS: SkillInfo(
        "Compare Fractions (Like Denoms)",
        "Compare fractions with like denominators.",
        (Skill.FRACTIONS_UNIT,),
        _G4,
        _STRETCH,
    ),
    Skill.FRACTIONS_ADD_SUBTRACT_LIKE_DENOMINATORS: SkillInfo(
        "Add/Sub Fractions (Like Denoms)",
        "Add/subtract fractions with like denominators.",
        (Skill.FRACTIONS_EQUIVALENT,),
        _G5,
        _ADVANCED,
    ),
    Skill.TIME_READ_HOUR_HALF: SkillInfo(
        "Read Time (Hour/Half)",
        "Read analog clocks to hour/half-hour.",
        (Skill.NUMBER_COMPARISON,),
        _K,
        _EARLY,
    ),
    Skill.MONEY_COIN_VALUES: SkillInfo(
        "Money: Coin Values", "Identify coin values and simple sums.", (Skill.ADDITION_WITHIN_10,), _G1, _BASIC
    ),
    Skill.SHAPES_BASIC: SkillInfo(
        "Basic Shapes", "Recognize and name basic shapes.", (), _K, _EARLY
    ),
    Skill.AREA_PERIMETER_RECTANGLES: SkillInfo(
        "Area/Perimeter (Rectangles)",
        "Compute area/perimeter of rectangles.",
        (Skill.ADDITION_WITHIN_20,),
        _G3,
        _ADVANCED,
    ),
}

LEARNING_PATH: tuple[Skill, ...] = (
    # Foundations
    Skill.COUNTING,
    Skill.NUMBER_COMPARISON,
    Skill.PLACE_VALUE_TENS_ONES,
    # Addition/subtraction basics
    Skill.ADDITION_WITHIN_10,
    Skill.SUBTRACTION_WITHIN_10,
    Skill.ADDITION_WITHIN_20,
    Skill.SUBTRACTION_WITHIN_20,
    Skill.ADDITION_WITH_REGROUPING,
    Skill.SUBTRACTION_WITH_REGROUPING,
    Skill.MULTI_DIGIT_ADDITION,
    Skill.MULTI_DIGIT_SUBTRACTION,
    # Multiplication/division
    Skill.MULTIPLICATION_FACTS_TO_5,
    Skill.DIVISION_FACTS_TO_5,
    Skill.MULTIPLICATION_FACTS_TO_10,
    Skill.DIVISION_FACTS_TO_10,
    Skill.MULTI_DIGIT_TIMES_SINGLE_DIGIT,
    Skill.DIVISION_WITH_REMAINDER,
    # Fractions
    Skill.FRACTIONS_UNIT,
    Skill.FRACTIONS_EQUIVALENT,
    Skill.FRACTIONS_COMPARE_LIKE_DENOMINATORS,
    Skill.FRACTIONS_ADD_SUBTRACT_LIKE_DENOMINATORS,
    # Measurement/geometry samplers
    Skill.TIME_READ_HOUR_HALF,
    Skill.MONEY_COIN_VALUES,
    Skill.SHAPES_BASIC,
    Skill.AREA_PERIMETER_RECTANGLES,
)

_PATH_INDEX = {skill: i for i, skill in enumerate(LEARNING_PATH)}


def path_position(skill: Skill) -> int:
    """Index of a skill on the learning path."""
    return _PATH_INDEX[skill]


def validate_learning_path(
    path: tuple[Skill, ...] = LEARNING_PATH,
    catalog: dict[Skill, SkillInfo] = SKILL_CATALOG,
) -> list[str]:
    """
    Check the learning path against the catalog.

    Returns:
        List of problems found (empty when the path is valid): every skill must
        appear exactly once and every prerequisite must precede its skill.
    """
    problems: list[str] = []
    seen: dict[Skill, int] = {}
    for i, skill in enumerate(path):
        if skill in seen:
            problems.append(f"{skill.value} appears more than once")
        seen.setdefault(skill, i)

    for skill in catalog:
        if skill not in seen:
            problems.append(f"{skill.value} is missing from the learning path")

    for skill, position in seen.items():
        for prereq in catalog[skill].prerequisites:
            if prereq not in seen:
                problems.append(f"{skill.value} requires {prereq.value}, which is not on the path")
            elif seen[prereq] >= position:
                problems.append(f"{skill.value} precedes its prerequisite {prereq.value}")
    return problems
