from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict

from pydantic import ValidationError

from neonpump.config import Settings, get_settings
from neonpump.llm import chat_json, LLMConfigurationError, LLMError
from neonpump.models import (
    Exercise,
    GeneratedPlan,
    GenerationFailure,
    MeasurementUnit,
    PlanGenerationRequest,
    WorkoutPlan,
)

logger = logging.getLogger(__name__)

PROMPTS_DIR = Path(__file__).resolve().parents[1] / "prompts"

ChatFn = Callable[..., Dict[str, Any]]


def _load_prompt(name: str) -> str:
    return (PROMPTS_DIR / name).read_text(encoding="utf-8")


def build_instruction(req: PlanGenerationRequest) -> str:
    return (
        f"Create a workout plan focusing on {req.focus}. "
        f"Difficulty level: {req.difficulty}."
    )


def to_workout_plan(generated: GeneratedPlan) -> WorkoutPlan:
    """Assign fresh ids and a creation time; every exercise is recorded in kg."""
    exercises = [
        Exercise(
            name=ex.name,
            sets=ex.sets,
            reps=ex.reps,
            weight=ex.weight,
            unit=MeasurementUnit.KG,
            tutorial_url=ex.tutorial_url,
            notes=ex.notes,
        )
        for ex in generated.exercises
    ]
    return WorkoutPlan(
        name=generated.name,
        description=generated.description,
        exercises=exercises,
    )


class PlanGenerator:
    def __init__(self, settings: Settings | None = None, chat: ChatFn | None = None) -> None:
        self.settings = settings or get_settings()
        self.chat = chat or chat_json

    @property
    def enabled(self) -> bool:
        return bool(self.settings.GROQ_API_KEY)

    def generate(self, focus: str, difficulty: str = "Intermediate") -> WorkoutPlan | GenerationFailure:
        """Ask the LLM for a plan. Failures are returned, never raised."""
        if not self.enabled:
            logger.warning("GROQ_API_KEY not set; cannot generate a plan.")
            return GenerationFailure(reason="missing_credential", detail="GROQ_API_KEY is not set.")

        try:
            req = PlanGenerationRequest(focus=focus, difficulty=difficulty)  # type: ignore[arg-type]
        except ValidationError as e:
            return GenerationFailure(reason="invalid_request", detail=str(e))

        try:
            resp = self.chat(
                schema=GeneratedPlan.model_json_schema(),
                system=_load_prompt("generate_plan.md"),
                user=build_instruction(req),
                settings=self.settings,
            )
        except LLMConfigurationError as e:
            logger.warning("Plan generation not configured: %s", e)
            return GenerationFailure(reason="missing_credential", detail=str(e))
        except LLMError as e:
            logger.warning("Plan generation failed: %s", e)
            return GenerationFailure(reason="service_error", detail=str(e))
        except Exception as e:
            logger.exception("Plan generation call raised unexpectedly")
            return GenerationFailure(reason="service_error", detail=str(e))

        try:
            generated = GeneratedPlan.model_validate(resp)
            plan = to_workout_plan(generated)
        except ValidationError as e:
            logger.warning("Plan generation returned an unusable response: %s", e)
            return GenerationFailure(reason="invalid_response", detail=str(e))

        logger.info("Generated plan %r with %d exercises", plan.name, len(plan.exercises))
        return plan


def generate_workout_plan(focus: str, difficulty: str = "Intermediate") -> WorkoutPlan | GenerationFailure:
    return PlanGenerator().generate(focus, difficulty)
