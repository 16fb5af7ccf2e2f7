from __future__ import annotations

# Ensure the repository root is on sys.path so that absolute imports like `neonpump.*` work
# when Streamlit runs this file from within the neonpump/ directory on cloud runtimes.
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from datetime import datetime
from typing import List

import streamlit as st

from neonpump.config import configure_logging, get_settings
from neonpump.controller import AppController, build_controller
from neonpump.markup import header_html, tip_html
from neonpump.models import MeasurementUnit, WorkoutPlan
from neonpump.services.weight_log import chart_series, entry_datetime
import neonpump.llm.groq_client as groq_debug

st.set_page_config(page_title="NeonPump 85", page_icon="🏋️", layout="wide")
settings = get_settings()
configure_logging(settings)

st.markdown("""
<style>
h1, h2, h3 { font-family: 'VT323', monospace; letter-spacing: .04em; }
.neon-title{ color:#00ffff; text-shadow:0 0 8px #00ffff; margin-bottom:0; }
.neon-sub{ color:#ff00ff; text-transform:uppercase; letter-spacing:.2em; font-size:.9rem; }
.stat{ border:1px solid #333; padding:.3rem .6rem; text-align:center; }
.stat b{ display:block; font-size:1.2rem; }
.tip{ border-left:2px solid #ff00ff; padding-left:.6rem; color:#9ca3af; font-style:italic; }
</style>
""", unsafe_allow_html=True)

VIEWS = ["Dashboard", "Cyber Coach", "Plan Editor", "Plan Viewer", "Body Stats"]
DIFFICULTIES = ["Beginner", "Intermediate", "Advanced"]


def get_controller() -> AppController:
    if "controller" not in st.session_state:
        st.session_state["controller"] = build_controller(settings)
    return st.session_state["controller"]


def go(view: str, plan_id: str | None = None) -> None:
    st.session_state["view"] = view
    if plan_id is not None:
        st.session_state["active_plan_id"] = plan_id
    st.rerun()


def header(title: str, subtitle: str) -> None:
    st.markdown(header_html(title, subtitle), unsafe_allow_html=True)
    st.write("")


ctrl = get_controller()
if "view" not in st.session_state:
    st.session_state["view"] = "Dashboard"

for problem in ctrl.state.load_problems:
    st.warning(f"Some saved data could not be read: {problem}")

with st.sidebar:
    st.header("NeonPump 85")
    nav = st.radio("Go to", ["Dashboard", "Body Stats"],
                   index=1 if st.session_state["view"] == "Body Stats" else 0)
    if nav == "Body Stats" and st.session_state["view"] != "Body Stats":
        go("Body Stats")
    if nav == "Dashboard" and st.session_state["view"] == "Body Stats":
        go("Dashboard")
    st.caption("AI: " + ("🧠 Groq " + settings.GROQ_MODEL if settings.GROQ_API_KEY else "offline (no GROQ_API_KEY)"))


def render_dashboard() -> None:
    header("NeonPump 85", "Forge your legacy")
    c1, c2 = st.columns(2)
    if c1.button("➕ Create Plan", use_container_width=True, type="primary"):
        ctrl.create_draft_plan()
        go("Plan Editor")
    if c2.button("✨ AI Generate", use_container_width=True):
        go("Cyber Coach")

    st.subheader("Your diskettes (plans)")
    if not ctrl.plans:
        st.info("No plans found. Insert coin to start.")
        return
    for plan in list(ctrl.plans):
        with st.container(border=True):
            left, view_col, edit_col, del_col = st.columns([8, 1, 1, 1])
            with left:
                st.markdown(f"### {plan.name}")
                st.caption(f"{len(plan.exercises)} Exercises")
            if view_col.button("▶️", key=f"view-{plan.id}", help="View"):
                go("Plan Viewer", plan.id)
            if edit_col.button("✏️", key=f"edit-{plan.id}", help="Edit"):
                ctrl.begin_edit(plan)
                go("Plan Editor")
            with del_col:
                with st.popover("🗑️"):
                    st.write("Delete this radical plan?")
                    if st.button("Delete", key=f"del-{plan.id}", type="primary"):
                        ctrl.delete_plan(plan.id, confirmed=True)
                        st.toast("Plan deleted.")
                        st.rerun()


def render_ai_form() -> None:
    header("Cyber Coach", "AI powered routines")
    with st.form("ai-form"):
        focus = st.text_input("Target Muscle / Goal", placeholder="e.g. Chest & Triceps, Leg Day Destruction")
        level = st.radio("Intensity Level", DIFFICULTIES, index=1, horizontal=True)
        cancel_col, submit_col = st.columns([1, 3])
        cancelled = cancel_col.form_submit_button("Cancel")
        submitted = submit_col.form_submit_button(
            "Computing..." if ctrl.is_generating else "Generate Plan",
            disabled=ctrl.is_generating,
            type="primary",
        )
    if cancelled:
        go("Dashboard")
    if submitted:
        if not focus.strip():
            st.error("Tell the Cyber Coach what to focus on.")
            return
        with st.spinner("Computing…"):
            result = ctrl.generate_plan(focus, level)
        if isinstance(result, WorkoutPlan):
            st.toast(f"{result.name} loaded.")
            go("Dashboard")
        else:
            st.error("Failed to contact the cyber-mainframe. Try again.")
            st.caption(f"{result.reason}: {result.detail}")


def render_editor() -> None:
    draft = ctrl.draft
    if draft is None:
        st.info("Nothing to edit.")
        if st.button("⬅️ Back"):
            go("Dashboard")
        return

    back_col, title_col = st.columns([1, 10])
    if back_col.button("⬅️", help="Discard changes"):
        ctrl.discard_draft()
        go("Dashboard")
    title_col.subheader("Plan Editor")

    name = st.text_input("Plan Name", value=draft.name, key=f"name-{draft.id}")
    description = st.text_area("Description", value=draft.description, height=80, key=f"desc-{draft.id}")
    ctrl.update_draft_details(name=name, description=description)

    for ex in list(draft.exercises):
        with st.container(border=True):
            top_l, top_r, top_x = st.columns([5, 5, 1])
            new_name = top_l.text_input("Exercise", value=ex.name, key=f"exname-{ex.id}")
            new_url = top_r.text_input("Image/Video URL", value=ex.tutorial_url or "",
                                       placeholder="https://...", key=f"exurl-{ex.id}")
            if top_x.button("🗑️", key=f"exdel-{ex.id}"):
                ctrl.remove_exercise_from_draft(ex.id)
                st.rerun()
            s_col, r_col, w_col, u_col = st.columns(4)
            new_sets = s_col.number_input("Sets", min_value=1, value=ex.sets, step=1, key=f"exsets-{ex.id}")
            new_reps = r_col.number_input("Reps", min_value=1, value=ex.reps, step=1, key=f"exreps-{ex.id}")
            new_weight = w_col.number_input("Weight", min_value=0.0, value=float(ex.weight), step=2.5,
                                            key=f"exweight-{ex.id}")
            units = [u.value for u in MeasurementUnit]
            new_unit = u_col.selectbox("Unit", units, index=units.index(ex.unit.value), key=f"exunit-{ex.id}")
            new_notes = st.text_input("Notes", value=ex.notes or "", key=f"exnotes-{ex.id}")

            changes = {
                "name": new_name,
                "tutorial_url": new_url,
                "sets": int(new_sets),
                "reps": int(new_reps),
                "weight": float(new_weight),
                "unit": new_unit,
                "notes": new_notes,
            }
            for field_name, value in changes.items():
                current = getattr(ex, field_name)
                if isinstance(current, MeasurementUnit):
                    current = current.value
                elif current is None:
                    current = ""
                if current != value:
                    if ctrl.update_exercise_field(ex.id, field_name, value) is None:
                        st.caption(f"⚠️ Invalid {field_name.replace('_', ' ')} ignored.")

    add_col, save_col = st.columns(2)
    if add_col.button("➕ Add Exercise", use_container_width=True):
        ctrl.add_exercise_to_draft()
        st.rerun()
    if save_col.button("💾 Save Plan", use_container_width=True, type="primary"):
        ctrl.save_draft()
        st.toast("Plan saved.")
        go("Dashboard")


def render_plan_viewer() -> None:
    plan = ctrl.get_plan(st.session_state.get("active_plan_id") or "")
    if st.button("⬅️ Back"):
        go("Dashboard")
    if plan is None:
        st.info("Plan not found")
        return

    header(plan.name, plan.description)
    for i, ex in enumerate(plan.exercises, start=1):
        with st.container(border=True):
            media_col, body_col = st.columns([1, 4])
            with media_col:
                if ex.tutorial_url:
                    st.image(ex.tutorial_url, use_container_width=True)
                    query = (ex.name + " exercise tutorial").replace(" ", "+")
                    st.link_button("▶️ Tutorial", f"https://www.youtube.com/results?search_query={query}")
            with body_col:
                st.markdown(f"### {i}. {ex.name}")
                s, r, w = st.columns(3)
                s.markdown(f"<div class='stat'>Sets<b>{ex.sets}</b></div>", unsafe_allow_html=True)
                r.markdown(f"<div class='stat'>Reps<b>{ex.reps}</b></div>", unsafe_allow_html=True)
                w.markdown(f"<div class='stat'>Weight<b>{ex.weight:g} {ex.unit.value}</b></div>",
                           unsafe_allow_html=True)
                if ex.notes:
                    st.markdown(tip_html(ex.notes), unsafe_allow_html=True)


def render_weight_tracker() -> None:
    header("Body Stats", "Tracking hardware")
    with st.container(border=True):
        points = chart_series(ctrl.weight_log)
        if not points:
            st.info("NO DATA LOGGED YET")
        else:
            st.line_chart({"weight (kg)": [p["weight"] for p in points]}, height=280)
            st.caption(" · ".join(str(p["label"]) for p in points[-8:]))

        with st.form("weight-form", clear_on_submit=True):
            in_col, btn_col = st.columns([4, 1])
            raw = in_col.text_input("Current Weight (kg)", placeholder="0.0")
            logged = btn_col.form_submit_button("LOG", type="primary")
        if logged:
            if ctrl.log_weight(raw) is None:
                st.caption("Enter a positive number.")
            else:
                st.rerun()

    st.subheader("History Log")
    rows: List[str] = []
    for entry in ctrl.weight_history(newest_first=True):
        when: datetime = entry_datetime(entry)
        rows.append(f"- {when:%Y-%m-%d %H:%M} — **{entry.weight:g} {entry.unit.value}**")
    if rows:
        st.markdown("\n".join(rows))


view = st.session_state["view"]
if view == "Dashboard":
    render_dashboard()
elif view == "Cyber Coach":
    render_ai_form()
elif view == "Plan Editor":
    render_editor()
elif view == "Plan Viewer":
    render_plan_viewer()
elif view == "Body Stats":
    render_weight_tracker()


# AI Insight: show when there was an LLM request this session
if groq_debug.LAST_REQUEST:
    with st.expander("AI Insight", expanded=False):
        st.markdown(f"**Model:** `{groq_debug.LAST_USED_MODEL or 'unknown'}`")
        ts = groq_debug.LAST_REQUEST.get("ts")
        if ts:
            st.markdown(f"**Requested at:** {ts} (UTC)")
        st.markdown("**System prompt:**")
        st.code(groq_debug.LAST_REQUEST.get("system", ""))
        st.markdown("**User instruction:**")
        st.code(groq_debug.LAST_REQUEST.get("user", ""))
        if groq_debug.LAST_RESPONSE_TEXT:
            st.markdown("**Raw response:**")
            st.code(groq_debug.LAST_RESPONSE_TEXT, language="json")
