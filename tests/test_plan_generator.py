from __future__ import annotations

import functools
from types import SimpleNamespace
from typing import Any, Dict, List

from neonpump.config import Settings
from neonpump.llm import LLMError, chat_json
from neonpump.models import GenerationFailure, MeasurementUnit, WorkoutPlan
from neonpump.services.plan_generator import PlanGenerator

IRON_FURY = {
    "name": "Iron Fury",
    "description": "Pump up the volume, commando!",
    "exercises": [{"name": "Bench Press", "sets": 4, "reps": 8, "weight": 60}],
}


def build_settings(api_key: str | None = "test-key") -> Settings:
    return Settings(GROQ_API_KEY=api_key, GROQ_MODEL="test-model", _env_file=None)  # type: ignore[call-arg]


class StubChat:
    def __init__(self, response: Any = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def __call__(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


class FakeGroq:
    """Mimics `client.chat.completions.create` returning fixed content."""

    def __init__(self, content: str) -> None:
        self.requests: List[Dict[str, Any]] = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))
        self.content = content

    def _create(self, **kwargs: Any) -> Any:
        self.requests.append(kwargs)
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def test_generate_maps_response_to_plan() -> None:
    chat = StubChat(IRON_FURY)
    result = PlanGenerator(build_settings(), chat=chat).generate("Chest & Triceps", "Intermediate")

    assert isinstance(result, WorkoutPlan), f"Expected a plan, got {result!r}"
    assert result.name == "Iron Fury"
    assert len(result.exercises) == 1
    ex = result.exercises[0]
    assert ex.name == "Bench Press" and ex.sets == 4 and ex.reps == 8 and ex.weight == 60
    assert ex.unit is MeasurementUnit.KG
    assert result.id and ex.id and result.id != ex.id
    assert result.created_at > 0


def test_generate_sends_focus_difficulty_and_schema() -> None:
    chat = StubChat(IRON_FURY)
    PlanGenerator(build_settings(), chat=chat).generate("Leg Day Destruction", "Advanced")

    assert len(chat.calls) == 1
    call = chat.calls[0]
    assert "Leg Day Destruction" in call["user"] and "Advanced" in call["user"]
    assert "80s action movie" in call["system"]
    schema = call["schema"]
    assert set(schema["required"]) == {"name", "description", "exercises"}
    exercise_schema = schema["$defs"]["GeneratedExercise"]
    assert set(exercise_schema["required"]) == {"name", "sets", "reps", "weight"}
    assert "tutorialUrl" in exercise_schema["properties"]


def test_generated_units_are_forced_to_kg() -> None:
    response = {
        "name": "Hard Target",
        "description": "...",
        "exercises": [
            {"name": "Deadlift", "sets": 3, "reps": 5, "weight": 225, "unit": "lbs", "id": "from-model"},
            {"name": "Plank", "sets": 3, "reps": 1, "weight": 0, "notes": "Squeeze", "tutorialUrl": "https://picsum.photos/200/300?random=2"},
        ],
    }
    result = PlanGenerator(build_settings(), chat=StubChat(response)).generate("Back", "Beginner")

    assert isinstance(result, WorkoutPlan)
    assert all(ex.unit is MeasurementUnit.KG for ex in result.exercises)
    assert result.exercises[0].id != "from-model"
    assert result.exercises[1].notes == "Squeeze"
    assert result.exercises[1].tutorial_url == "https://picsum.photos/200/300?random=2"


def test_missing_credential_fails_without_calling_service() -> None:
    chat = StubChat(IRON_FURY)
    result = PlanGenerator(build_settings(api_key=None), chat=chat).generate("Arms", "Beginner")

    assert isinstance(result, GenerationFailure)
    assert result.reason == "missing_credential"
    assert chat.calls == [], "No network attempt should be made without a key"


def test_empty_focus_is_rejected_before_calling_service() -> None:
    chat = StubChat(IRON_FURY)
    result = PlanGenerator(build_settings(), chat=chat).generate("   ", "Beginner")

    assert isinstance(result, GenerationFailure) and result.reason == "invalid_request"
    assert chat.calls == []


def test_unknown_difficulty_is_rejected() -> None:
    result = PlanGenerator(build_settings(), chat=StubChat(IRON_FURY)).generate("Arms", "Nightmare")
    assert isinstance(result, GenerationFailure) and result.reason == "invalid_request"


def test_service_error_becomes_failure() -> None:
    chat = StubChat(error=LLMError("503 from upstream"))
    result = PlanGenerator(build_settings(), chat=chat).generate("Shoulders", "Intermediate")

    assert isinstance(result, GenerationFailure)
    assert result.reason == "service_error"
    assert "503" in result.detail


def test_incomplete_response_becomes_failure() -> None:
    incomplete = {"name": "Half Plan", "exercises": [{"name": "Row", "sets": 3}]}
    result = PlanGenerator(build_settings(), chat=StubChat(incomplete)).generate("Back", "Beginner")

    assert isinstance(result, GenerationFailure)
    assert result.reason == "invalid_response"


def test_malformed_json_from_client_becomes_failure() -> None:
    fake = FakeGroq("{this is not json")
    chat = functools.partial(chat_json, client=fake)
    result = PlanGenerator(build_settings(), chat=chat).generate("Chest", "Beginner")

    assert isinstance(result, GenerationFailure)
    assert result.reason == "service_error"
    assert len(fake.requests) == 2, "chat_json retries once before giving up"


def test_chat_json_sends_closed_strict_schema() -> None:
    fake = FakeGroq('{"name": "Iron Fury", "description": "...", "exercises": []}')
    chat = functools.partial(chat_json, client=fake)
    result = PlanGenerator(build_settings(), chat=chat).generate("Chest", "Beginner")

    assert isinstance(result, WorkoutPlan) and result.exercises == []
    request = fake.requests[0]
    assert request["model"] == "test-model"
    assert request["temperature"] == 0.7
    json_schema = request["response_format"]["json_schema"]
    assert json_schema["strict"] is True
    assert json_schema["schema"]["additionalProperties"] is False
    assert json_schema["schema"]["$defs"]["GeneratedExercise"]["additionalProperties"] is False


def test_non_finite_weight_in_response_becomes_failure() -> None:
    fake = FakeGroq('{"name": "X", "description": "...", "exercises": '
                    '[{"name": "Row", "sets": 3, "reps": 8, "weight": 1e400}]}')
    chat = functools.partial(chat_json, client=fake)
    result = PlanGenerator(build_settings(), chat=chat).generate("Back", "Beginner")

    assert isinstance(result, GenerationFailure), f"Expected a failure, got {result!r}"
    assert result.reason == "invalid_response"


def test_unexpected_client_exception_becomes_failure() -> None:
    chat = StubChat(error=ConnectionError("socket reset"))
    result = PlanGenerator(build_settings(), chat=chat).generate("Legs", "Advanced")

    assert isinstance(result, GenerationFailure)
    assert result.reason == "service_error"
    assert "socket reset" in result.detail
