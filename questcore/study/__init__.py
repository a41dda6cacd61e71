"""Study: session planning on top of the progress store and problem generator."""

from questcore.study.session_planner import (
    ExerciseSessionPlanner,
    PlannedSession,
    PlannerConfig,
    pick_unique_problems,
)

__all__ = [
    "ExerciseSessionPlanner",
    "PlannedSession",
    "PlannerConfig",
    "pick_unique_problems",
]
