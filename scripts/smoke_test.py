from __future__ import annotations

from neonpump.config import configure_logging, get_settings
from neonpump.controller import AppController
from neonpump.models import WorkoutPlan
from neonpump.services.export import to_csv, to_markdown
from neonpump.services.persistence import PlanPersistence
from neonpump.services.plan_generator import PlanGenerator
from neonpump.services.storage import MemoryKeyValueStore


def main() -> None:
    settings = get_settings()
    configure_logging(settings)

    store = MemoryKeyValueStore()
    ctrl = AppController.load(PlanPersistence(store), PlanGenerator(settings))

    # Manual plan through the draft flow
    ctrl.create_draft_plan()
    ctrl.update_draft_details(name="Smoke Test Plan", description="Manual draft")
    ex = ctrl.add_exercise_to_draft()
    assert ex is not None
    ctrl.update_exercise_field(ex.id, "name", "Push-up")
    plan = ctrl.save_draft()
    assert plan is not None and len(ctrl.plans) == 1, "Draft save failed"

    assert ctrl.log_weight("80.5") is not None, "Weight logging failed"
    assert ctrl.log_weight("abc") is None

    reloaded = AppController.load(PlanPersistence(store))
    assert [p.id for p in reloaded.plans] == [plan.id], "Reload lost the saved plan"

    assert to_csv(plan) and to_markdown(plan)

    # AI path only when a key is configured
    if settings.GROQ_API_KEY:
        result = ctrl.generate_plan("Chest & Triceps", "Intermediate")
        if isinstance(result, WorkoutPlan):
            print(f"AI plan: {result.name} ({len(result.exercises)} exercises)")
        else:
            print(f"AI generation failed: {result.reason} {result.detail}")

    print(f"SMOKE OK — plans={len(ctrl.plans)} weight_entries={len(ctrl.weight_log)}")


if __name__ == "__main__":
    main()
