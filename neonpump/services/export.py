from __future__ import annotations

import csv
import io
from typing import List, Sequence

from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from neonpump.models import Exercise, WeightEntry, WorkoutPlan
from .weight_log import entry_datetime, sorted_history


def _exercise_line(i: int, ex: Exercise) -> str:
    return f"{i}. {ex.name} - {ex.sets} x {ex.reps} @ {ex.weight:g} {ex.unit.value}"


def to_csv(plan: WorkoutPlan) -> bytes:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow([
        "position",
        "exercise_id",
        "exercise_name",
        "sets",
        "reps",
        "weight",
        "unit",
        "tutorial_url",
        "notes",
    ])
    for i, ex in enumerate(plan.exercises, start=1):
        writer.writerow([
            i,
            ex.id,
            ex.name,
            ex.sets,
            ex.reps,
            f"{ex.weight:g}",
            ex.unit.value,
            ex.tutorial_url or "",
            ex.notes or "",
        ])
    return output.getvalue().encode("utf-8")


def to_markdown(plan: WorkoutPlan) -> str:
    lines: List[str] = []
    lines.append(f"# {plan.name}\n")
    if plan.description:
        lines.append(f"_{plan.description}_\n")
    for i, ex in enumerate(plan.exercises, start=1):
        title = f"[{ex.name}]({ex.tutorial_url})" if ex.tutorial_url else ex.name
        lines.append(f"{i}. {title} - {ex.sets} x {ex.reps} @ {ex.weight:g} {ex.unit.value}")
        if ex.notes:
            lines.append(f"   - {ex.notes}")
    return "\n".join(lines) + "\n"


def weight_log_to_csv(entries: Sequence[WeightEntry]) -> bytes:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["date", "weight", "unit"])
    for entry in sorted_history(entries):
        writer.writerow([
            entry_datetime(entry).strftime("%Y-%m-%d %H:%M"),
            f"{entry.weight:g}",
            entry.unit.value,
        ])
    return output.getvalue().encode("utf-8")


def to_pdf(plan: WorkoutPlan) -> bytes:
    """Render a single-column PDF of the plan with reportlab."""
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=letter)
    width, height = letter

    margin = 36
    x = margin
    y = height - margin

    def new_page() -> float:
        c.showPage()
        c.setFont("Helvetica", 10)
        return height - margin

    c.setFont("Helvetica-Bold", 16)
    c.drawString(x, y, plan.name)
    y -= 20

    c.setFont("Helvetica-Oblique", 10)
    max_chars = 95
    for start in range(0, len(plan.description), max_chars):
        c.drawString(x, y, plan.description[start:start + max_chars])
        y -= 14
    y -= 8

    c.setFont("Helvetica", 10)
    for i, ex in enumerate(plan.exercises, start=1):
        if y < margin + 40:
            y = new_page()
        c.drawString(x, y, _exercise_line(i, ex))
        y -= 14
        if ex.notes:
            # wrap long lines manually (simple)
            for start in range(0, len(ex.notes), max_chars):
                if y < margin + 24:
                    y = new_page()
                c.drawString(x + 12, y, ex.notes[start:start + max_chars])
                y -= 14
        y -= 4

    c.showPage()
    c.save()
    pdf_bytes = buffer.getvalue()
    buffer.close()
    return pdf_bytes
