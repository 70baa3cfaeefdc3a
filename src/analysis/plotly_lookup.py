"""Interactive Plotly figures for the shove calculator.

Three public functions:

    build_equity_curve_figure(config, params)
        — EV of the shove across hero equity, with the break-even point marked.
    build_ev_lookup_figure(config, params)
        — stack × calling-range EV heat map; hover shows EV, fold% and bust%.
    save_lookup_html(fig, path)
        — Export any figure to a self-contained HTML file.

Figures are in-memory go.Figure objects; the dashboard embeds them with
``st.plotly_chart`` and ``fig.show()`` opens them in a browser.
"""

from __future__ import annotations

import dataclasses
import math

import numpy as np
import plotly.graph_objects as go

from src.analysis.sensitivity import (
    DEFAULT_CALLING_RANGES,
    DEFAULT_EQUITIES,
    DEFAULT_STACKS,
    break_even_equity,
    build_ev_grid,
    ev_by_equity,
)
from src.engine.ev_model import ScenarioParameters, TableConfiguration, compute_metrics

# Diverging scale: red = losing shove, yellow ≈ break-even, green = winning.
_EV_COLORSCALE: str = "RdYlGn"


# ─── Hover text builder ───────────────────────────────────────────────────────


def _build_grid_hover(
    config: TableConfiguration,
    params: ScenarioParameters,
    grid: np.ndarray,
    stacks: np.ndarray,
    calling_ranges: np.ndarray,
) -> list[list[str]]:
    """Return a hover-string matrix matching *grid* (empty for NaN cells)."""
    rows: list[list[str]] = []
    for r, stack in enumerate(stacks):
        row: list[str] = []
        for c, calling in enumerate(calling_ranges):
            val = grid[r, c]
            if np.isnan(val):
                row.append("")
                continue
            metrics = compute_metrics(
                config,
                dataclasses.replace(
                    params, stack=float(stack), calling_range_percentage=float(calling)
                ),
            )
            lines = [
                f"Stack: <b>{stack:g} bb</b>",
                f"Calling range: {calling:g}%",
                f"EV: <b>{val:+.2f} bb</b>",
            ]
            if metrics is not None:
                lines.append(f"Fold%: {metrics.total_fold_prob * 100:.1f}%")
                lines.append(f"Bust%: {metrics.bustout_prob * 100:.1f}%")
            row.append("<br>".join(lines))
        rows.append(row)
    return rows


# ─── Public figure builders ───────────────────────────────────────────────────


def build_equity_curve_figure(
    config: TableConfiguration,
    params: ScenarioParameters,
    equities: np.ndarray | None = None,
) -> go.Figure:
    """Line chart of shove EV versus hero equity against the calling range.

    Adds a marker at the scenario's own equity and, when the raiser ever calls
    and the threshold lies inside the sweep, a vertical line at the
    break-even equity.

    Returns:
        go.Figure with the EV curve as its first trace and the current
        scenario marker as its second.
    """
    if equities is None:
        equities = DEFAULT_EQUITIES
    evs = ev_by_equity(config, params, equities)
    current = ev_by_equity(config, params, np.array([params.equity]))[0]
    threshold = break_even_equity(config, params)
    metrics = compute_metrics(config, params)
    # With no raiser calls the EV is flat in equity, so there is no break-even point.
    raiser_calls = metrics is not None and metrics.p_raiser_calls > 0.0

    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=list(equities),
            y=evs.tolist(),
            mode="lines",
            name="Shove EV",
            hovertemplate="Equity: %{x:.0f}%<br>EV: %{y:+.2f} bb<extra></extra>",
        )
    )
    fig.add_trace(
        go.Scatter(
            x=[params.equity],
            y=[current],
            mode="markers",
            marker={"size": 11, "color": "#d62728"},
            name="Current equity",
            hovertemplate="Equity: %{x:.1f}%<br>EV: %{y:+.2f} bb<extra></extra>",
        )
    )
    fig.add_hline(y=0.0, line_dash="dot", line_color="grey")
    if raiser_calls and not math.isnan(threshold) and float(equities[0]) <= threshold <= float(equities[-1]):
        fig.add_vline(
            x=threshold,
            line_dash="dash",
            line_color="#2ca02c",
            annotation_text=f"break-even {threshold:.1f}%",
        )

    fig.update_layout(
        title_text=f"Shove EV vs equity — {params.hero_position} over {params.rfi_position}",
        title_font_size=15,
        height=420,
        width=780,
    )
    fig.update_xaxes(title_text="Equity vs calling range (%)")
    fig.update_yaxes(title_text="EV (bb)")
    return fig


def build_ev_lookup_figure(
    config: TableConfiguration,
    params: ScenarioParameters,
    stacks: np.ndarray | None = None,
    calling_ranges: np.ndarray | None = None,
) -> go.Figure:
    """Interactive stack × calling-range EV heat map.

    NaN cells (calling range wider than the RFI range) render blank.

    Returns:
        go.Figure with a single go.Heatmap trace.
    """
    if stacks is None:
        stacks = DEFAULT_STACKS
    if calling_ranges is None:
        calling_ranges = DEFAULT_CALLING_RANGES

    grid = build_ev_grid(config, params, stacks, calling_ranges)
    hover = _build_grid_hover(config, params, grid, stacks, calling_ranges)

    finite = grid[np.isfinite(grid)]
    bound = max(float(np.max(np.abs(finite))) if finite.size else 1.0, 1e-6)

    z = [[None if np.isnan(v) else v for v in row] for row in grid.tolist()]
    fig = go.Figure(
        go.Heatmap(
            z=z,
            x=[f"{c:g}%" for c in calling_ranges],
            y=[f"{s:g}" for s in stacks],
            colorscale=_EV_COLORSCALE,
            zmin=-bound,
            zmax=bound,
            text=hover,
            hovertemplate="%{text}<extra></extra>",
            colorbar={"title": "EV (bb)"},
            name="EV",
        )
    )
    fig.update_layout(
        title_text="Shove EV lookup — stack × calling range",
        title_font_size=15,
        height=460,
        width=780,
    )
    fig.update_xaxes(title_text="Raiser calling range")
    fig.update_yaxes(title_text="Effective stack (bb)")
    return fig


# ─── HTML export ───────────────────────────────────────────────────────────────


def save_lookup_html(fig: go.Figure, path: str) -> None:
    """Save a Plotly figure to a self-contained HTML file (Plotly JS via CDN)."""
    fig.write_html(path, include_plotlyjs="cdn")


# ─── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    from src.engine.scenario import DEFAULT_SCENARIO

    print("Building interactive shove figures …")
    curve_fig = build_equity_curve_figure(DEFAULT_SCENARIO.config, DEFAULT_SCENARIO.params)
    grid_fig = build_ev_lookup_figure(DEFAULT_SCENARIO.config, DEFAULT_SCENARIO.params)

    save_lookup_html(curve_fig, "shove_equity_curve.html")
    save_lookup_html(grid_fig, "shove_ev_lookup.html")
    print("Saved: shove_equity_curve.html, shove_ev_lookup.html")
