"""Letter grades derived from a severity histogram.

LOW (and any other label besides CRITICAL/HIGH/MEDIUM) is informational and
never influences the grade.
"""

from __future__ import annotations

from enum import Enum
from typing import Mapping


class Grade(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"


# (grade, max critical, max high, max medium), checked top-down
GRADE_THRESHOLDS: tuple[tuple[Grade, int, int, int], ...] = (
    (Grade.A, 0, 2, 5),
    (Grade.B, 0, 5, 10),
    (Grade.C, 2, 8, 15),
)


def calculate_grade(severity_count: Mapping[str, int]) -> Grade:
    critical = severity_count.get("CRITICAL", 0)
    high = severity_count.get("HIGH", 0)
    medium = severity_count.get("MEDIUM", 0)
    for grade, max_critical, max_high, max_medium in GRADE_THRESHOLDS:
        if critical <= max_critical and high <= max_high and medium <= max_medium:
            return grade
    return Grade.D
