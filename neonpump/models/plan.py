from __future__ import annotations

from typing import List

from pydantic import Field

from .exercise import Exercise, StoredModel, new_id, now_ms


class WorkoutPlan(StoredModel):
    id: str = Field(default_factory=new_id)
    name: str
    description: str = ""
    exercises: List[Exercise] = Field(default_factory=list)
    created_at: int = Field(default_factory=now_ms, description="Epoch milliseconds, set once")
