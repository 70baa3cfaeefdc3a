"""EV heat maps for the shove calculator.

One data builder and two plot functions:

    build_ev_heatmap_data(config, params, ...)  — (grid, stacks, calling_ranges)
    plot_ev_heatmap(grid, stacks, calling_ranges, title, ...) — matplotlib figure
    plot_scenario_ev_heatmap(config, params, ...) — convenience wrapper

Matrix convention:
    Shape  : (len(stacks), len(calling_ranges))
             rows = effective stack (bb), cols = raiser calling range (%)
    Values : shove EV in big blinds; np.nan where calling range > RFI %
"""

from __future__ import annotations

import matplotlib
import matplotlib.axes
import matplotlib.colors
import matplotlib.figure
import matplotlib.image
import matplotlib.pyplot as plt
import numpy as np

from src.analysis.sensitivity import DEFAULT_CALLING_RANGES, DEFAULT_STACKS, build_ev_grid
from src.engine.ev_model import ScenarioParameters, TableConfiguration

_NAN_COLOR: str = "#cccccc"


# ─── Colormap ─────────────────────────────────────────────────────────────────


def _make_diverging_cmap() -> matplotlib.colors.Colormap:
    """RdYlGn gradient: red = losing shove, green = winning shove, grey = n/a."""
    cmap = matplotlib.colormaps["RdYlGn"].copy()
    cmap.set_bad(color=_NAN_COLOR)
    return cmap


_EV_CMAP: matplotlib.colors.Colormap = _make_diverging_cmap()


# ─── Data builder ─────────────────────────────────────────────────────────────


def build_ev_heatmap_data(
    config: TableConfiguration,
    params: ScenarioParameters,
    stacks: np.ndarray | None = None,
    calling_ranges: np.ndarray | None = None,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Return (grid, stacks, calling_ranges) ready for plotting."""
    stacks = DEFAULT_STACKS if stacks is None else np.asarray(stacks, dtype=np.float64)
    calling_ranges = (
        DEFAULT_CALLING_RANGES
        if calling_ranges is None
        else np.asarray(calling_ranges, dtype=np.float64)
    )
    grid = build_ev_grid(config, params, stacks, calling_ranges)
    return grid, stacks, calling_ranges


def _symmetric_norm(grid: np.ndarray) -> matplotlib.colors.TwoSlopeNorm:
    """Norm centred on 0 bb so break-even cells are always yellow."""
    finite = grid[np.isfinite(grid)]
    bound = float(np.max(np.abs(finite))) if finite.size else 1.0
    bound = max(bound, 1e-6)
    return matplotlib.colors.TwoSlopeNorm(vmin=-bound, vcenter=0.0, vmax=bound)


# ─── Rendering helper ─────────────────────────────────────────────────────────


def _render_panel(
    ax: matplotlib.axes.Axes,
    grid: np.ndarray,
    stacks: np.ndarray,
    calling_ranges: np.ndarray,
) -> matplotlib.image.AxesImage:
    """Render the EV grid onto *ax* with per-cell annotations."""
    masked = np.ma.masked_invalid(grid)
    im = ax.imshow(masked, cmap=_EV_CMAP, norm=_symmetric_norm(grid), aspect="auto")

    ax.set_xticks(range(len(calling_ranges)))
    ax.set_xticklabels([f"{c:g}%" for c in calling_ranges], fontsize=9)
    ax.set_yticks(range(len(stacks)))
    ax.set_yticklabels([f"{s:g}" for s in stacks], fontsize=9)

    for r in range(grid.shape[0]):
        for c in range(grid.shape[1]):
            val = grid[r, c]
            if np.isnan(val):
                continue
            ax.text(
                c,
                r,
                f"{val:+.1f}",
                ha="center",
                va="center",
                fontsize=8,
                color="black",
            )

    return im


# ─── Public plot functions ────────────────────────────────────────────────────


def plot_ev_heatmap(
    grid: np.ndarray,
    stacks: np.ndarray,
    calling_ranges: np.ndarray,
    title: str,
    *,
    show: bool = True,
    save_path: str | None = None,
) -> matplotlib.figure.Figure:
    """Plot a stack × calling-range EV heat map.

    Args:
        grid:           (len(stacks), len(calling_ranges)) EV matrix; NaN = n/a.
        stacks:         Row values (bb).
        calling_ranges: Column values (%).
        title:          Figure title.
        show:           If True, call plt.show() after rendering.
        save_path:      If not None, save the figure to this path before showing.

    Returns:
        matplotlib.figure.Figure.
    """
    fig, ax = plt.subplots(figsize=(9, 5))
    fig.suptitle(title, fontsize=13, fontweight="bold")

    im = _render_panel(ax, grid, stacks, calling_ranges)
    ax.set_xlabel("Raiser calling range", fontsize=9)
    ax.set_ylabel("Effective stack (bb)", fontsize=9)
    plt.colorbar(im, ax=ax, label="EV (bb)", fraction=0.046, pad=0.04)

    plt.tight_layout()

    if save_path is not None:
        fig.savefig(save_path, bbox_inches="tight", dpi=120)
    if show:
        plt.show()

    return fig


def plot_scenario_ev_heatmap(
    config: TableConfiguration,
    params: ScenarioParameters,
    *,
    show: bool = True,
    save_path: str | None = None,
) -> matplotlib.figure.Figure:
    """Convenience: build the default grid for a scenario and plot it."""
    grid, stacks, calling_ranges = build_ev_heatmap_data(config, params)
    title = (
        f"Shove EV  ({params.hero_position} vs {params.rfi_position} open, "
        f"RFI {params.rfi_percentage:g}%, equity {params.equity:g}%)"
    )
    return plot_ev_heatmap(
        grid,
        stacks,
        calling_ranges,
        title,
        show=show,
        save_path=save_path,
    )


if __name__ == "__main__":
    matplotlib.use("Agg")

    from src.engine.scenario import DEFAULT_SCENARIO

    print("Generating shove EV heat map …")
    plot_scenario_ev_heatmap(
        DEFAULT_SCENARIO.config,
        DEFAULT_SCENARIO.params,
        show=False,
        save_path="shove_ev_heatmap.png",
    )
    print("Saved: shove_ev_heatmap.png")
