from .storage import KeyValueStore, FileKeyValueStore, MemoryKeyValueStore
from .persistence import PlanPersistence, LoadedState
from .plan_generator import PlanGenerator, generate_workout_plan
from .export import to_csv, to_markdown, to_pdf, weight_log_to_csv
from .weight_log import sorted_history, chart_series

__all__ = [
    "KeyValueStore",
    "FileKeyValueStore",
    "MemoryKeyValueStore",
    "PlanPersistence",
    "LoadedState",
    "PlanGenerator",
    "generate_workout_plan",
    "to_csv",
    "to_markdown",
    "to_pdf",
    "weight_log_to_csv",
    "sorted_history",
    "chart_series",
]
