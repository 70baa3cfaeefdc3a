"""Sensitivity analysis for the shove EV model.

Four public functions re-evaluate the closed-form model over a range of
inputs, holding everything else in the scenario fixed:

    break_even_equity(config, params)    — equity needed for EV = 0
    ev_by_equity(config, params, ...)    — EV curve over hero equity
    build_ev_grid(config, params, ...)   — EV matrix over stack × calling range
    compare_hero_seats(config, params)   — EV / fold% / break-even per hero seat

All functions require both seats to be set; they return NaN (or an empty
list) otherwise, mirroring the model's "no result" state.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass

import numpy as np

from src.engine.ev_model import (
    CalcMode,
    ScenarioParameters,
    TableConfiguration,
    compute_metrics,
)
from src.engine.positions import available_hero_seats
from src.engine.seats import Seat

# ─── Sweep defaults ───────────────────────────────────────────────────────────

DEFAULT_EQUITIES: np.ndarray = np.linspace(0.0, 100.0, 101)
DEFAULT_STACKS: np.ndarray = np.arange(10.0, 45.0, 5.0)
DEFAULT_CALLING_RANGES: np.ndarray = np.arange(2.0, 22.0, 2.0)


# ─── Dataclasses ──────────────────────────────────────────────────────────────


@dataclass
class SeatComparison:
    """Shove outcome for one hero seat behind a fixed raiser.

    Attributes:
        seat:              Hero seat evaluated.
        players_to_act:    Players left to act behind hero.
        prob_cold_call:    Chance somebody behind cold-calls.
        total_fold_prob:   Chance the shove wins the pot uncontested.
        ev:                EV of the shove (big blinds) at the scenario equity.
        break_even_equity: Equity (%) against the raiser's range for EV = 0.
    """

    seat: Seat
    players_to_act: int
    prob_cold_call: float
    total_fold_prob: float
    ev: float
    break_even_equity: float


# ─── Computation functions ────────────────────────────────────────────────────


def _ev(config: TableConfiguration, params: ScenarioParameters) -> float:
    metrics = compute_metrics(config, dataclasses.replace(params, calc_mode=CalcMode.EV))
    return float("nan") if metrics is None else metrics.result_value


def break_even_equity(config: TableConfiguration, params: ScenarioParameters) -> float:
    """Minimum equity (%) against the raiser's calling range for a 0 bb shove.

    Returns 0.0 when the raiser never calls (the shove needs no equity) and
    NaN when a seat is unset.
    """
    metrics = compute_metrics(
        config,
        dataclasses.replace(params, calc_mode=CalcMode.MIN_EQUITY, target_ev=0.0),
    )
    return float("nan") if metrics is None else metrics.result_value


def ev_by_equity(
    config: TableConfiguration,
    params: ScenarioParameters,
    equities: np.ndarray | None = None,
) -> np.ndarray:
    """EV of the shove (bb) at each equity in *equities* (percent).

    Args:
        config:   Table configuration.
        params:   Scenario; its own ``equity`` is ignored.
        equities: 1-D array of equities in [0, 100]. Defaults to 0..100 step 1.

    Returns:
        1-D float64 array, same length as *equities*.
    """
    if equities is None:
        equities = DEFAULT_EQUITIES
    return np.array(
        [_ev(config, dataclasses.replace(params, equity=float(e))) for e in equities],
        dtype=np.float64,
    )


def build_ev_grid(
    config: TableConfiguration,
    params: ScenarioParameters,
    stacks: np.ndarray | None = None,
    calling_ranges: np.ndarray | None = None,
) -> np.ndarray:
    """EV matrix over effective stack × raiser calling range.

    Cells whose calling range exceeds the raiser's RFI frequency are NaN,
    since the calling range can never be wider than the opening range.

    Args:
        config:         Table configuration.
        params:         Scenario; ``stack`` and ``calling_range_percentage``
                        are overridden per cell.
        stacks:         Row values (bb). Defaults to 10..40 step 5.
        calling_ranges: Column values (%). Defaults to 2..20 step 2.

    Returns:
        (len(stacks), len(calling_ranges)) float64 array.
    """
    if stacks is None:
        stacks = DEFAULT_STACKS
    if calling_ranges is None:
        calling_ranges = DEFAULT_CALLING_RANGES

    grid = np.full((len(stacks), len(calling_ranges)), np.nan)
    for r, stack in enumerate(stacks):
        for c, calling in enumerate(calling_ranges):
            if calling > params.rfi_percentage:
                continue
            cell = dataclasses.replace(
                params, stack=float(stack), calling_range_percentage=float(calling)
            )
            grid[r, c] = _ev(config, cell)
    return grid


def compare_hero_seats(
    config: TableConfiguration,
    params: ScenarioParameters,
) -> list[SeatComparison]:
    """Evaluate the shove from every legal hero seat behind the raiser.

    Returns:
        One SeatComparison per seat in acting order; empty if the raiser
        seat is unset.
    """
    rows: list[SeatComparison] = []
    for seat in available_hero_seats(config.player_count, params.rfi_position):
        seat_params = dataclasses.replace(params, hero_position=seat, calc_mode=CalcMode.EV)
        metrics = compute_metrics(config, seat_params)
        if metrics is None:
            continue
        rows.append(
            SeatComparison(
                seat=seat,
                players_to_act=metrics.players_to_act,
                prob_cold_call=metrics.prob_cold_call,
                total_fold_prob=metrics.total_fold_prob,
                ev=metrics.result_value,
                break_even_equity=break_even_equity(config, seat_params),
            )
        )
    return rows
