from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Sequence

from neonpump.models import MeasurementUnit, WeightEntry


def sorted_history(entries: Sequence[WeightEntry], newest_first: bool = False) -> List[WeightEntry]:
    return sorted(entries, key=lambda e: e.date, reverse=newest_first)


def entry_datetime(entry: WeightEntry) -> datetime:
    return datetime.fromtimestamp(entry.date / 1000)


def chart_series(entries: Sequence[WeightEntry], unit: MeasurementUnit = MeasurementUnit.KG) -> List[Dict[str, object]]:
    """Chronological points for the tracker chart.

    Only entries recorded in `unit` are included; kg and lbs are never mixed.
    """
    points: List[Dict[str, object]] = []
    for entry in sorted_history(entries):
        if entry.unit != unit:
            continue
        when = entry_datetime(entry)
        points.append({
            "date": when,
            "label": when.strftime("%b %d"),
            "weight": entry.weight,
        })
    return points
