"""Local-first workout planner with AI-generated plans and a bodyweight log."""

__version__ = "0.1.0"
