"""3-Bet Shove Calculator — Streamlit Dashboard.

Single-page dashboard around the shove EV model:
  Sidebar        — stack, sizing, ranges, equities, mode, table size, antes
  Seat pickers   — legal raiser / hero seats only (click again to deselect)
  Metrics        — every derived metric plus the headline result
  Tabs           — EV vs equity curve, stack × calling-range lookup,
                   static heat map, hero seat comparison

Run:
    PYTHONPATH=. streamlit run app.py
"""

from __future__ import annotations

import contextlib
import io

import matplotlib

matplotlib.use("Agg")  # must be set before any other matplotlib imports

import pandas as pd
import streamlit as st

from src.analysis.heat_maps import plot_scenario_ev_heatmap
from src.analysis.plotly_lookup import build_equity_curve_figure, build_ev_lookup_figure
from src.analysis.sensitivity import break_even_equity, compare_hero_seats
from src.analysis.shove_report import print_metrics, print_scenario
from src.engine.ev_model import CalcMode
from src.engine.scenario import DEFAULT_SCENARIO, ShoveCalculator
from src.engine.seats import MAX_PLAYERS, MIN_PLAYERS

# ─── Page config ──────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="3-Bet Shove Calculator",
    page_icon="♠️",
    layout="wide",
)

if "calculator" not in st.session_state:
    st.session_state["calculator"] = ShoveCalculator(DEFAULT_SCENARIO)

calc: ShoveCalculator = st.session_state["calculator"]
defaults = DEFAULT_SCENARIO.params

# ─── Sidebar controls ─────────────────────────────────────────────────────────

with st.sidebar:
    st.title("♠️ 3-Bet Shove Calculator")
    st.markdown("---")

    mode_label = st.radio(
        "Calculation mode",
        options=[m.value for m in CalcMode],
        format_func=lambda v: "EV of shove" if v == CalcMode.EV.value else "Minimum equity",
        horizontal=True,
        key="calc_mode",
    )

    st.markdown("---")
    player_count = st.slider(
        "Players at table",
        min_value=MIN_PLAYERS,
        max_value=MAX_PLAYERS,
        value=DEFAULT_SCENARIO.config.player_count,
        key="player_count",
    )
    ante_pct = st.number_input(
        "Ante (% of bb per player)",
        min_value=0.0,
        max_value=100.0,
        value=DEFAULT_SCENARIO.config.ante_percentage,
        step=2.5,
        key="ante_percentage",
    )

    st.markdown("---")
    stack = st.number_input(
        "Effective stack (bb)", min_value=1.0, value=defaults.stack, step=1.0, key="stack"
    )
    raise_size = st.number_input(
        "Open size (bb)", min_value=0.0, value=defaults.raise_size, step=0.1, key="raise_size"
    )
    rfi_pct = st.slider(
        "Raiser RFI range (%)", 0.0, 100.0, defaults.rfi_percentage, 0.5, key="rfi_percentage"
    )
    calling_pct = st.slider(
        "Calling range vs shove (%)",
        0.0,
        100.0,
        defaults.calling_range_percentage,
        0.5,
        key="calling_range_percentage",
    )
    if calling_pct > rfi_pct:
        st.caption(f"Calling range capped at the RFI range ({rfi_pct:g}%).")

    equity = st.slider("Equity vs calling range (%)", 0.0, 100.0, defaults.equity, 0.5, key="equity")
    equity_cc = st.slider(
        "Equity vs cold-caller (%)",
        0.0,
        100.0,
        defaults.equity_vs_cold_caller,
        0.5,
        key="equity_vs_cold_caller",
    )
    target_ev = st.number_input(
        "Target EV (bb)",
        value=defaults.target_ev,
        step=0.1,
        key="target_ev",
        disabled=mode_label != CalcMode.MIN_EQUITY.value,
    )

calc.update(
    calc_mode=mode_label,
    player_count=player_count,
    ante_percentage=ante_pct,
    stack=stack,
    raise_size=raise_size,
    rfi_percentage=rfi_pct,
    calling_range_percentage=calling_pct,
    equity=equity,
    equity_vs_cold_caller=equity_cc,
    target_ev=target_ev,
)

# ─── Seat pickers ─────────────────────────────────────────────────────────────


def _seat_buttons(label: str, seats, selected, on_click, key_prefix: str) -> None:
    st.subheader(label)
    if not seats:
        st.info("Pick a raiser seat first.")
        return
    cols = st.columns(len(seats))
    for col, seat in zip(cols, seats):
        col.button(
            str(seat),
            key=f"{key_prefix}_{seat.name}",
            type="primary" if seat is selected else "secondary",
            on_click=on_click,
            args=(seat,),
            use_container_width=True,
        )


view = calc.view()
st.header("Seats")
_seat_buttons(
    "Raiser (RFI)",
    view.available_rfi_seats,
    view.params.rfi_position,
    calc.select_rfi,
    "rfi",
)
_seat_buttons(
    "Hero (shover)",
    view.available_hero_seats,
    view.params.hero_position,
    calc.select_hero,
    "hero",
)

# ─── Metrics ──────────────────────────────────────────────────────────────────

view = calc.view()
metrics = view.metrics

st.markdown("---")
st.header("Result")
if not view.has_result:
    st.warning("Select both a raiser seat and a hero seat to evaluate the shove.")

col1, col2, col3, col4 = st.columns(4)
# Held metrics may be from the other mode.
headline_current = metrics.calc_mode is view.params.calc_mode
if view.params.calc_mode is CalcMode.EV:
    col1.metric("Shove EV", f"{metrics.result_value:+.2f} bb" if headline_current else "—")
else:
    col1.metric("Minimum equity", f"{metrics.result_value:.2f}%" if headline_current else "—")
col2.metric("P(win uncontested)", f"{metrics.total_fold_prob * 100:.1f}%")
col3.metric("P(bust out)", f"{metrics.bustout_prob * 100:.1f}%")
col4.metric("P(cold call)", f"{metrics.prob_cold_call * 100:.2f}%")

col1, col2, col3, col4 = st.columns(4)
col1.metric("Pot on fold", f"{metrics.pot_on_fold:.2f} bb")
col2.metric("Dead blinds", f"{metrics.dead_blinds:.1f} bb")
col3.metric("Players to act", f"{metrics.players_to_act}")
col4.metric("Antes in pot", f"{metrics.total_antes:.2f} bb")

# ─── Tabs ─────────────────────────────────────────────────────────────────────

tab1, tab2, tab3, tab4 = st.tabs(
    [
        "EV vs Equity",
        "Stack × Calling Range",
        "Hero Seat Comparison",
        "Text Report",
    ]
)

with tab1:
    if view.has_result:
        threshold = break_even_equity(view.config, view.params)
        st.caption(f"Break-even equity vs the calling range: **{threshold:.2f}%**")
        st.plotly_chart(build_equity_curve_figure(view.config, view.params), use_container_width=True)
    else:
        st.info("Select both seats to see the equity curve.")

with tab2:
    if view.has_result:
        st.plotly_chart(build_ev_lookup_figure(view.config, view.params), use_container_width=True)
        st.markdown("---")
        st.pyplot(plot_scenario_ev_heatmap(view.config, view.params, show=False))
    else:
        st.info("Select both seats to see the EV lookup.")

with tab3:
    rows = compare_hero_seats(view.config, view.params)
    if rows:
        df = pd.DataFrame(
            [
                {
                    "Seat": str(r.seat),
                    "Players to act": r.players_to_act,
                    "P(cold call)": f"{r.prob_cold_call * 100:.2f}%",
                    "P(win uncontested)": f"{r.total_fold_prob * 100:.1f}%",
                    "EV (bb)": f"{r.ev:+.2f}",
                    "Break-even equity": f"{r.break_even_equity:.2f}%",
                }
                for r in rows
            ]
        )
        st.dataframe(df, use_container_width=True, hide_index=True)
    else:
        st.info("Select a raiser seat to compare hero seats.")

with tab4:
    buf = io.StringIO()
    with contextlib.redirect_stdout(buf):
        print_scenario(calc.scenario)
        print()
        print_metrics(calc.scenario.metrics())
    st.code(buf.getvalue(), language=None)
