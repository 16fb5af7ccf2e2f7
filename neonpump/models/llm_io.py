from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


Difficulty = Literal["Beginner", "Intermediate", "Advanced"]

FailureReason = Literal[
    "missing_credential",
    "invalid_request",
    "service_error",
    "invalid_response",
    "in_flight",
]


class PlanGenerationRequest(BaseModel):
    focus: str = Field(..., min_length=1)
    difficulty: Difficulty = "Intermediate"

    @field_validator("focus", mode="before")
    @classmethod
    def _strip_focus(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v


class GeneratedExercise(BaseModel):
    """One exercise exactly as the model is asked to return it (no id, no unit)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field(..., min_length=1, description="Name of the exercise")
    sets: int = Field(..., ge=1, description="Number of sets")
    reps: int = Field(..., ge=1, description="Number of repetitions per set")
    weight: float = Field(..., ge=0, allow_inf_nan=False, description="Recommended starting weight in kg")
    tutorial_url: Optional[str] = Field(None, description="Placeholder image URL or tutorial link")
    notes: Optional[str] = Field(None, description="Short tip on form")


class GeneratedPlan(BaseModel):
    name: str = Field(..., description="A cool, 80s action movie style name for the workout plan")
    description: str = Field(..., description="A short, hype-filled description")
    exercises: List[GeneratedExercise]


class GenerationFailure(BaseModel):
    reason: FailureReason
    detail: str = ""
