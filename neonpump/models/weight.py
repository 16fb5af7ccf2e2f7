from __future__ import annotations

from pydantic import Field

from .exercise import MeasurementUnit, StoredModel, new_id, now_ms


class WeightEntry(StoredModel):
    id: str = Field(default_factory=new_id)
    date: int = Field(default_factory=now_ms, description="Epoch milliseconds")
    weight: float = Field(..., gt=0, allow_inf_nan=False)
    unit: MeasurementUnit = MeasurementUnit.KG
