from __future__ import annotations

import streamlit as st

from neonpump.controller import build_controller
from neonpump.services.export import to_csv, to_markdown, to_pdf, weight_log_to_csv

st.set_page_config(page_title="Export", page_icon="📤")

st.title("Export")

ctrl = st.session_state.get("controller")
if ctrl is None:
    ctrl = build_controller()
    st.session_state["controller"] = ctrl

if not ctrl.plans:
    st.info("No plans saved yet. Create or generate one on the main page first.")
else:
    names = {p.id: p.name for p in ctrl.plans}
    plan_id = st.selectbox("Plan", list(names), format_func=lambda pid: names[pid])
    plan = ctrl.get_plan(plan_id)
    if plan is not None:
        slug = "".join(ch if ch.isalnum() else "_" for ch in plan.name.lower()).strip("_") or "plan"
        st.download_button("Download CSV", data=to_csv(plan), file_name=f"{slug}.csv", mime="text/csv")
        st.download_button("Download Markdown", data=to_markdown(plan), file_name=f"{slug}.md", mime="text/markdown")
        st.download_button("Download PDF", data=to_pdf(plan), file_name=f"{slug}.pdf", mime="application/pdf")

st.subheader("Weight log")
if ctrl.weight_log:
    st.download_button("Download weight log CSV", data=weight_log_to_csv(ctrl.weight_log),
                       file_name="weight_log.csv", mime="text/csv")
else:
    st.caption("No weight entries logged yet.")
