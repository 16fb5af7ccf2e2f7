from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, List, Optional

from pydantic import ValidationError

from neonpump.config import Settings, get_settings
from neonpump.models import (
    Exercise,
    GenerationFailure,
    MeasurementUnit,
    WeightEntry,
    WorkoutPlan,
)
from neonpump.services.persistence import PlanPersistence
from neonpump.services.plan_generator import PlanGenerator
from neonpump.services.storage import FileKeyValueStore
from neonpump.services.weight_log import sorted_history

logger = logging.getLogger(__name__)

# Plain decimal notation only; float() would also take "1_000", "infinity" or a bool.
WEIGHT_PATTERN = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")

DRAFT_NAME = "New Workout Plan"
DRAFT_DESCRIPTION = "Describe your routine..."

EDITABLE_EXERCISE_FIELDS = {"name", "sets", "reps", "weight", "unit", "tutorial_url", "notes"}
_FIELD_ALIASES = {"tutorialUrl": "tutorial_url"}
_OPTIONAL_TEXT_FIELDS = {"tutorial_url", "notes"}


def parse_weight(raw: Any) -> Optional[float]:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        try:
            return float(raw)
        except OverflowError:
            return None
    if isinstance(raw, str) and WEIGHT_PATTERN.fullmatch(raw.strip()):
        return float(raw)
    return None


@dataclass
class AppState:
    plans: List[WorkoutPlan] = field(default_factory=list)
    weight_log: List[WeightEntry] = field(default_factory=list)
    draft: WorkoutPlan | None = None
    is_generating: bool = False
    load_problems: List[str] = field(default_factory=list)


class AppController:
    """Owns the in-memory collections and persists after every committed mutation.

    Draft edits stay in memory until `save_draft()`.
    """

    def __init__(self, persistence: PlanPersistence, generator: PlanGenerator | None = None,
                 state: AppState | None = None) -> None:
        self.persistence = persistence
        self.generator = generator
        self.state = state or AppState()

    @classmethod
    def load(cls, persistence: PlanPersistence, generator: PlanGenerator | None = None) -> "AppController":
        loaded = persistence.load()
        state = AppState(
            plans=loaded.plans,
            weight_log=loaded.weight_log,
            load_problems=list(loaded.problems),
        )
        return cls(persistence, generator, state)

    # ----- read access -----

    @property
    def plans(self) -> List[WorkoutPlan]:
        return self.state.plans

    @property
    def weight_log(self) -> List[WeightEntry]:
        return self.state.weight_log

    @property
    def draft(self) -> WorkoutPlan | None:
        return self.state.draft

    @property
    def is_generating(self) -> bool:
        return self.state.is_generating

    def get_plan(self, plan_id: str) -> WorkoutPlan | None:
        return next((p for p in self.state.plans if p.id == plan_id), None)

    def weight_history(self, newest_first: bool = True) -> List[WeightEntry]:
        return sorted_history(self.state.weight_log, newest_first=newest_first)

    # ----- plan editing flow -----

    def create_draft_plan(self) -> WorkoutPlan:
        self.state.draft = WorkoutPlan(name=DRAFT_NAME, description=DRAFT_DESCRIPTION)
        return self.state.draft

    def begin_edit(self, plan: WorkoutPlan) -> WorkoutPlan:
        self.state.draft = plan.model_copy(deep=True)
        return self.state.draft

    def update_draft_details(self, name: str | None = None, description: str | None = None) -> WorkoutPlan | None:
        draft = self.state.draft
        if draft is None:
            return None
        if name is not None:
            draft.name = name
        if description is not None:
            draft.description = description
        return draft

    def save_draft(self) -> WorkoutPlan | None:
        """Upsert the draft by id, clear it and persist plans."""
        draft = self.state.draft
        if draft is None:
            return None
        for i, existing in enumerate(self.state.plans):
            if existing.id == draft.id:
                self.state.plans[i] = draft
                break
        else:
            self.state.plans.append(draft)
        self.state.draft = None
        self._persist_plans()
        return draft

    def discard_draft(self) -> None:
        self.state.draft = None

    def delete_plan(self, plan_id: str, confirmed: bool = False) -> bool:
        if not confirmed:
            logger.debug("Delete of plan %s ignored: not confirmed", plan_id)
            return False
        remaining = [p for p in self.state.plans if p.id != plan_id]
        if len(remaining) == len(self.state.plans):
            return False
        self.state.plans = remaining
        self._persist_plans()
        return True

    def add_exercise_to_draft(self) -> Exercise | None:
        draft = self.state.draft
        if draft is None:
            return None
        exercise = Exercise(name="New Exercise", sets=3, reps=10, weight=0, unit=MeasurementUnit.KG)
        draft.exercises.append(exercise)
        return exercise

    def update_exercise_field(self, exercise_id: str, field_name: str, value: Any) -> Exercise | None:
        """Replace one field of a draft exercise.

        Returns the updated exercise, or None when there is no draft, no
        matching exercise, or the value breaks the field's contract.
        """
        name = _FIELD_ALIASES.get(field_name, field_name)
        if name not in EDITABLE_EXERCISE_FIELDS:
            raise ValueError(f"Exercise field {field_name!r} is not editable.")
        draft = self.state.draft
        if draft is None:
            return None
        if name in _OPTIONAL_TEXT_FIELDS and value == "":
            value = None

        for i, ex in enumerate(draft.exercises):
            if ex.id != exercise_id:
                continue
            data = ex.model_dump()
            data[name] = value
            try:
                updated = Exercise.model_validate(data)
            except ValidationError:
                logger.info("Rejected %s=%r for exercise %s", name, value, exercise_id)
                return None
            draft.exercises[i] = updated
            return updated
        return None

    def remove_exercise_from_draft(self, exercise_id: str) -> bool:
        draft = self.state.draft
        if draft is None:
            return False
        before = len(draft.exercises)
        draft.exercises = [ex for ex in draft.exercises if ex.id != exercise_id]
        return len(draft.exercises) != before

    # ----- generation -----

    def ingest_generated_plan(self, plan: WorkoutPlan) -> WorkoutPlan:
        self.state.plans.append(plan)
        self._persist_plans()
        return plan

    def generate_plan(self, focus: str, difficulty: str = "Intermediate") -> WorkoutPlan | GenerationFailure:
        if self.state.is_generating:
            logger.info("Generation request ignored: another one is in flight")
            return GenerationFailure(reason="in_flight", detail="A plan is already being generated.")
        generator = self.generator or PlanGenerator()
        self.state.is_generating = True
        try:
            result = generator.generate(focus, difficulty)
        finally:
            self.state.is_generating = False
        if isinstance(result, WorkoutPlan):
            self.ingest_generated_plan(result)
        return result

    # ----- weight log -----

    def log_weight(self, raw_input: Any) -> WeightEntry | None:
        """Append a kg entry; returns None (and changes nothing) for invalid input."""
        weight = parse_weight(raw_input)
        if weight is None:
            logger.debug("Ignored weight input %r: not a number", raw_input)
            return None
        if not math.isfinite(weight) or weight <= 0:
            logger.debug("Ignored weight input %r: not a positive number", raw_input)
            return None
        entry = WeightEntry(weight=weight, unit=MeasurementUnit.KG)
        self.state.weight_log.append(entry)
        self.persistence.save_weight_log(self.state.weight_log)
        return entry

    def _persist_plans(self) -> None:
        self.persistence.save_plans(self.state.plans)


def build_controller(settings: Optional[Settings] = None) -> AppController:
    settings = settings or get_settings()
    persistence = PlanPersistence(
        FileKeyValueStore(settings.DATA_DIR),
        plans_key=settings.PLANS_KEY,
        weight_log_key=settings.WEIGHT_LOG_KEY,
    )
    return AppController.load(persistence, PlanGenerator(settings))
