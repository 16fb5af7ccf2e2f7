"""
Snapshot persistence for plans and the weight log.

Each collection lives under its own key as a JSON array of objects using the
camelCase field names (`tutorialUrl`, `createdAt`). Writes always replace the
whole collection.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from neonpump.models import WeightEntry, WorkoutPlan
from .storage import KeyValueStore

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

CORRUPT_SUFFIX = ".corrupt"


@dataclass
class LoadedState:
    plans: List[WorkoutPlan] = field(default_factory=list)
    weight_log: List[WeightEntry] = field(default_factory=list)
    problems: List[str] = field(default_factory=list)

    def __iter__(self) -> Iterator[list]:
        # Allows `plans, weight_log = persistence.load()`
        yield self.plans
        yield self.weight_log


def encode_collection(items: Sequence[BaseModel]) -> str:
    return json.dumps(
        [item.model_dump(mode="json", by_alias=True, exclude_none=True) for item in items],
        ensure_ascii=False,
        indent=2,
    )


class PlanPersistence:
    def __init__(self, store: KeyValueStore, plans_key: str = "neon_plans",
                 weight_log_key: str = "neon_weight_log") -> None:
        self.store = store
        self.plans_key = plans_key
        self.weight_log_key = weight_log_key

    def load(self) -> LoadedState:
        """
        Read both collections.

        A missing key yields an empty collection. An unreadable blob is backed
        up under `<key>.corrupt` and also yields an empty collection; entries
        that fail validation are dropped one by one.
        """
        state = LoadedState()
        state.plans = self._load_collection(self.plans_key, WorkoutPlan, state.problems)
        state.weight_log = self._load_collection(self.weight_log_key, WeightEntry, state.problems)
        return state

    def save_plans(self, plans: Sequence[WorkoutPlan]) -> None:
        self.store.set(self.plans_key, encode_collection(plans))

    def save_weight_log(self, entries: Sequence[WeightEntry]) -> None:
        self.store.set(self.weight_log_key, encode_collection(entries))

    def _load_collection(self, key: str, model: Type[M], problems: List[str]) -> List[M]:
        try:
            text = self.store.get(key)
        except UnicodeDecodeError as e:
            raw_text = e.object.decode("utf-8", errors="backslashreplace")
            self._quarantine(key, raw_text, f"not valid UTF-8 ({e.reason} at byte {e.start})", problems)
            return []
        if text is None:
            return []

        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            self._quarantine(key, text, f"not valid JSON ({e})", problems)
            return []
        if not isinstance(raw, list):
            self._quarantine(key, text, f"expected a JSON array, got {type(raw).__name__}", problems)
            return []

        items: List[M] = []
        for index, entry in enumerate(raw):
            try:
                items.append(model.model_validate(entry))
            except ValidationError as e:
                msg = f"{key}[{index}] dropped: {e.error_count()} validation error(s)"
                logger.warning("%s\n%s", msg, e)
                problems.append(msg)
        return items

    def _quarantine(self, key: str, text: str, reason: str, problems: List[str]) -> None:
        backup_key = key + CORRUPT_SUFFIX
        self.store.set(backup_key, text)
        msg = f"{key}: {reason}; original saved under '{backup_key}', starting empty"
        logger.error(msg)
        problems.append(msg)
