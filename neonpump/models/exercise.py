from __future__ import annotations

import time
import uuid
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class MeasurementUnit(str, Enum):
    KG = "kg"
    LBS = "lbs"


def new_id() -> str:
    return str(uuid.uuid4())


def now_ms() -> int:
    """Current UTC time as epoch milliseconds."""
    return int(time.time() * 1000)


class StoredModel(BaseModel):
    """Base for persisted entities: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Exercise(StoredModel):
    id: str = Field(default_factory=new_id)
    name: str = Field(..., min_length=1)
    sets: int = Field(..., ge=1)
    reps: int = Field(..., ge=1)
    weight: float = Field(..., ge=0, allow_inf_nan=False)
    unit: MeasurementUnit = MeasurementUnit.KG
    tutorial_url: Optional[str] = Field(None, description="Image URL or external tutorial link")
    notes: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "id": "5b0c4f1e-8d1e-4a51-9a4a-0c1f3e7d2b11",
                    "name": "Bench Press",
                    "sets": 4,
                    "reps": 8,
                    "weight": 60,
                    "unit": "kg",
                    "tutorialUrl": "https://picsum.photos/200/300?random=7",
                    "notes": "Keep your shoulder blades pinned.",
                }
            ]
        }
    }
