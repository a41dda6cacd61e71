"""Subjects and curriculum grades."""

from __future__ import annotations

from enum import Enum


class LearningSubject(str, Enum):
    """Subjects with adaptive practice sessions."""

    MATH = "math"

    @property
    def display_name(self) -> str:
        return self.value.title()


class CurriculumSubject(str, Enum):
    """Subjects with a leveled curriculum path."""

    MATH = "math"
    LANGUAGE = "language"
    SCIENCE = "science"
    VALUES = "values"

    @property
    def display_name(self) -> str:
        return {
            CurriculumSubject.MATH: "Math",
            CurriculumSubject.LANGUAGE: "Language",
            CurriculumSubject.SCIENCE: "Science",
            CurriculumSubject.VALUES: "Social & Values",
        }[self]


class CurriculumGrade(str, Enum):
    """Grades the curriculum catalog is organized by."""

    PRE_K = "preK"
    KINDERGARTEN = "kindergarten"
    GRADE1 = "grade1"
    GRADE2 = "grade2"
    GRADE3 = "grade3"
    GRADE4 = "grade4"
    GRADE5 = "grade5"
    GRADE6 = "grade6"

    @property
    def display_name(self) -> str:
        if self is CurriculumGrade.PRE_K:
            return "Pre-K"
        if self is CurriculumGrade.KINDERGARTEN:
            return "Kindergarten"
        return f"Grade {self.value[-1]}"
