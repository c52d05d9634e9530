# app.py
import logging
import os
from typing import List

import pandas as pd
import streamlit as st

from roi_wizard.config import TrainingCostMode, load_config
from roi_wizard.currency import Currency, format_money, format_months, format_percent, symbol
from roi_wizard.engine import adoption_sensitivity, roi_summary, value_breakdown
from roi_wizard.inputs import (
    STEP_LABELS,
    Department,
    FieldError,
    Step,
    overridden_fields,
    suggested_hours_per_week,
)
from roi_wizard.presets import PRESET_NOTES, Preset, apply_preset
from roi_wizard.priorities import PRIORITIES, Priority
from roi_wizard.wizard import WizardController

logging.basicConfig(level=os.getenv("ROI_LOG_LEVEL", "WARNING").upper())

# --------------------------------------------------------------------------------------
# Page setup
# --------------------------------------------------------------------------------------
st.set_page_config(
    page_title="AI Training ROI Calculator",
    page_icon="📈",
    layout="wide",
)

# ======================================================================================
# CONSTANTS
# ======================================================================================

CONFIG = load_config()

NEXT_STEPS = [
    "Map top 3 workflows → ship prompt templates & QA/guardrails within 2 weeks.",
    "Launch “AI Champions” cohort; set quarterly ROI reviews; track usage to correlate with retention.",
    "Set competency coverage target to 60% and measure weekly AI-in-task usage.",
]

FIELD_LABELS = {
    "hours_per_week": "hours saved per week",
    "adoption_rate": "adoption rate",
    "confidence_discount": "confidence",
}

# ======================================================================================
# STATE
# ======================================================================================
def init_state():
    ss = st.session_state
    ss.setdefault("wizard", WizardController(CONFIG))

init_state()


def wizard() -> WizardController:
    return st.session_state.wizard

# ======================================================================================
# HELPERS
# ======================================================================================

def stepper():
    wiz = wizard()
    active = wiz.current_step
    cols = st.columns(len(Step))
    for step, c in zip(Step, cols):
        with c:
            style = (
                "background:#eef6ff;border:1px solid #cde;"
                if step == active else "background:#f7f7f9;border:1px solid #eee;"
            )
            done = "✓ " if step in wiz.state.completed_steps else ""
            st.markdown(
                f"<div style='{style};padding:8px 10px;border-radius:10px;text-align:center;min-height:52px'>"
                f"{done}{int(step)}. {STEP_LABELS[step]}</div>",
                unsafe_allow_html=True,
            )

def nudge(text: str, variant="info"):
    if variant == "warn":
        st.warning(text)
    elif variant == "success":
        st.success(text)
    elif variant == "error":
        st.error(text)
    else:
        st.info(text)

def show_errors(reasons: List[FieldError]):
    for err in reasons:
        nudge(err.message, "error")

def actions(next_label: str = "Continue →", back_label: str = "← Back"):
    wiz = wizard()
    c1, _, c2 = st.columns([0.2, 0.6, 0.2])
    with c1:
        if st.button(back_label, disabled=wiz.current_step == Step.TEAM_AND_COST):
            wiz.back()
            st.rerun()
    with c2:
        if st.button(next_label, type="primary"):
            res = wiz.next()
            if res.valid:
                st.rerun()
            show_errors(res.reasons)

def money_label(text: str) -> str:
    return f"{text} ({symbol(wizard().aggregate.currency)})"

# ======================================================================================
# SCREENS
# ======================================================================================

def screen_team():
    stepper()
    wiz = wizard()
    agg = wiz.aggregate
    st.header("1) Team & cost")
    c1, c2, c3 = st.columns(3)
    with c1:
        depts = list(Department)
        dept = st.selectbox("Department", depts, index=depts.index(agg.department), format_func=lambda d: d.value)
    with c2:
        team = st.number_input("Employees in scope", min_value=1, step=1, value=int(agg.team_size))
    with c3:
        currencies = list(Currency)
        cur = st.radio("Currency", currencies, index=currencies.index(agg.currency),
                       format_func=lambda c: c.value, horizontal=True)
    if cur != agg.currency:
        wiz.set_currency(cur)
        st.rerun()

    salary = st.number_input(money_label("Average annual salary"), min_value=0.0, step=1000.0,
                             value=float(agg.avg_salary))
    wiz.update(department=dept, team_size=int(team), avg_salary=float(salary))

    if CONFIG.training_cost_mode is TrainingCostMode.PER_HEAD:
        st.caption(f"Training budget: {format_money(CONFIG.training_cost_value, agg.currency)} per employee.")
    else:
        st.caption(f"Training budget: {format_money(CONFIG.training_cost_value, agg.currency)} flat.")

    st.divider()
    actions()

def screen_assumptions():
    stepper()
    wiz = wizard()
    agg = wiz.aggregate
    st.header("2) Assumptions")
    st.caption("Pick a preset to fill adoption, hours saved and confidence. You can fine-tune them afterwards.")
    cols = st.columns(len(Preset))
    for p, c in zip(Preset, cols):
        with c:
            d = apply_preset(p)
            active = "**(selected)**" if agg.preset == p else ""
            st.markdown(f"#### {p.value} {active}")
            st.write(PRESET_NOTES[p])
            st.write(f"- Adoption: **{format_percent(d.adoption_rate)}**")
            st.write(f"- Hours saved: **{d.hours_saved_per_week:g} h/week**")
            st.write(f"- Confidence: **{format_percent(d.confidence_discount)}**")
            if st.button(f"Use {p.value}", key=f"preset_{p.name}"):
                wiz.choose_preset(p)
                st.rerun()

    conf = st.slider("Confidence in the estimate", 0.0, 1.0, value=float(agg.confidence_discount), step=0.05)
    wiz.update(confidence_discount=conf)

    custom = overridden_fields(agg)
    if custom:
        nudge("Customised: " + ", ".join(FIELD_LABELS.get(f, f) for f in custom)
              + f". Re-select {agg.preset.value} to restore its defaults.")

    st.divider()
    actions()

def screen_usage():
    stepper()
    wiz = wizard()
    agg = wiz.aggregate
    st.header("3) Usage")
    c1, c2 = st.columns([0.55, 0.45])
    with c1:
        hours = st.number_input("Hours saved per employee per week (target)", min_value=0.0, max_value=168.0,
                                step=0.1, value=float(agg.hours_per_week))
        adoption = st.slider("Adoption rate", 0.0, 1.0, value=float(agg.adoption_rate), step=0.05)
    with c2:
        maturity = st.slider("AI maturity (1 = early, 10 = embedded)", 1, 10, value=int(agg.maturity))
        st.markdown(
            f"Suggested baseline productivity gain: **{suggested_hours_per_week(maturity):.1f} h/week per employee** "
            f"at maturity level {maturity}."
        )
    wiz.update(hours_per_week=hours, adoption_rate=adoption, maturity=maturity)

    st.divider()
    actions()

def screen_priorities():
    stepper()
    wiz = wizard()
    agg = wiz.aggregate
    st.header("4) Priorities")
    cols = st.columns(len(Priority))
    for p, c in zip(Priority, cols):
        meta = PRIORITIES[p]
        with c:
            checked = st.checkbox(meta["label"], value=p in agg.selected_priorities, key=f"prio_{p.name}")
            st.caption(meta["note"])
        if checked != (p in agg.selected_priorities):
            wiz.toggle_priority(p, checked)
    if not agg.selected_priorities:
        nudge("Pick at least one priority to continue.", "warn")

    st.divider()
    actions()

def screen_benefits():
    stepper()
    wiz = wizard()
    agg = wiz.aggregate
    st.header("5) Configure benefits")
    selected = agg.selected_priorities
    if Priority.THROUGHPUT in selected:
        st.markdown("#### Throughput")
        st.write(f"Uses **{agg.hours_per_week:g} h/week** per employee at **{format_percent(agg.adoption_rate)}** adoption.")
    if Priority.RETENTION in selected:
        st.markdown("#### Retention")
        c1, c2 = st.columns(2)
        with c1:
            turnover = st.number_input("Current annual employee turnover (%)", min_value=0.0, max_value=100.0,
                                       value=float(agg.annual_turnover_rate) * 100)
        with c2:
            improvement = st.number_input("Expected improvement (relative reduction in churn, %)", min_value=0.0,
                                          max_value=100.0, value=float(agg.retention_improvement) * 100)
        wiz.update(annual_turnover_rate=turnover / 100, retention_improvement=improvement / 100)
    if Priority.UPSKILLING in selected:
        st.markdown("#### Upskilling")
        c1, c2 = st.columns(2)
        with c1:
            coverage = st.number_input("Competency coverage target (%)", min_value=0.0, max_value=100.0,
                                       value=float(agg.upskilling_coverage) * 100)
        with c2:
            weekly = st.number_input("Weekly hours saved per competent employee", min_value=0.0, max_value=168.0,
                                     step=0.1, value=float(agg.upskilling_hours_per_week))
        wiz.update(upskilling_coverage=coverage / 100, upskilling_hours_per_week=weekly)

    st.divider()
    actions(next_label="See results →")

def screen_results():
    stepper()
    wiz = wizard()
    agg = wiz.aggregate
    kpis = wiz.result()
    st.header("Results")
    if kpis is None:
        nudge("Some inputs are no longer valid. Go back and correct them.", "error")
        if st.button("← Back"):
            wiz.back()
            st.rerun()
        return
    st.caption(f"{agg.department.value} · {int(agg.team_size):,} employees · {agg.preset.value} preset")

    summary = roi_summary(agg, CONFIG)
    c1, c2, c3, c4 = st.columns(4)
    with c1:
        st.metric("Annual savings (time)", format_money(kpis.annual_savings_amount, kpis.currency))
        st.metric("Total annual value", format_money(summary.total_value, kpis.currency))
    with c2:
        st.metric("Hours saved / year", f"{kpis.hours_saved_per_year:,.0f}")
        st.metric("Total hours saved (est.)", f"{summary.total_hours:,.0f}")
    with c3:
        st.metric("Payback", format_months(kpis.payback_months))
        roi = "not applicable" if summary.roi_multiple is None else f"{summary.roi_multiple:.1f}×"
        st.metric("Annual ROI", roi)
    with c4:
        st.metric("Retention impact", format_percent(kpis.retention_impact_score))
        st.metric("Training cost", format_money(kpis.training_cost, kpis.currency))
    if not kpis.payback_applicable:
        nudge("No time savings at these inputs, so the training cost is never paid back.", "warn")

    st.markdown("### Breakdown by priority")
    df = value_breakdown(agg, CONFIG)
    table = pd.DataFrame({
        "Priority": df["title"],
        "Note": df["note"],
        "Hours saved": df["hours"].map(lambda h: "—" if pd.isna(h) else f"{h:,.0f} h"),
        "Annual value": df["value"].map(lambda v: format_money(v, kpis.currency)),
    })
    st.dataframe(table, hide_index=True, use_container_width=True)

    with st.expander("Sensitivity to adoption"):
        sens = adoption_sensitivity(agg, CONFIG)
        st.dataframe(
            pd.DataFrame({
                "Adoption": sens["adoption_rate"].map(format_percent),
                "Hours / year": sens["hours_saved_per_year"].map(lambda h: f"{h:,.0f}"),
                "Annual savings": sens["annual_savings"].map(lambda v: format_money(v, kpis.currency)),
                "Payback": sens["payback_months"].map(lambda m: format_months(None if pd.isna(m) else m)),
            }),
            hide_index=True,
            use_container_width=True,
        )

    st.markdown("### Next steps")
    for n in NEXT_STEPS:
        st.markdown(f"- {n}")

    st.divider()
    c1, _, c2 = st.columns([0.2, 0.6, 0.2])
    with c1:
        if st.button("← Back"):
            wiz.back()
            st.rerun()
    with c2:
        if st.button("Start over", type="primary"):
            wiz.restart()
            st.rerun()

# ======================================================================================
# ROUTER
# ======================================================================================
SCREENS = {
    Step.TEAM_AND_COST: screen_team,
    Step.ASSUMPTIONS: screen_assumptions,
    Step.USAGE: screen_usage,
    Step.PRIORITIES: screen_priorities,
    Step.BENEFITS: screen_benefits,
    Step.SUMMARY: screen_results,
}

def router():
    SCREENS.get(wizard().current_step, screen_team)()

# ======================================================================================
# RUN
# ======================================================================================
router()
