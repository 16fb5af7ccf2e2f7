from .exercise import Exercise, MeasurementUnit, new_id, now_ms
from .plan import WorkoutPlan
from .weight import WeightEntry
from .llm_io import (
    Difficulty,
    FailureReason,
    PlanGenerationRequest,
    GeneratedExercise,
    GeneratedPlan,
    GenerationFailure,
)

__all__ = [
    "Exercise",
    "MeasurementUnit",
    "new_id",
    "now_ms",
    "WorkoutPlan",
    "WeightEntry",
    "Difficulty",
    "FailureReason",
    "PlanGenerationRequest",
    "GeneratedExercise",
    "GeneratedPlan",
    "GenerationFailure",
]
