"""
Scenario snapshots and the parameter-update channel.

A Scenario is an immutable (TableConfiguration, ScenarioParameters) pair.
Every update goes through apply_update(), which:

    1. validates and normalises the changed fields (labels → enums),
    2. clamps the calling range down to the raise frequency,
    3. re-runs position derivation so both seats stay legal,

and returns a new Scenario.  ShoveCalculator wraps one snapshot per session
and recomputes the metrics after each update.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from dataclasses import dataclass

from .ev_model import (
    CalcMode,
    DerivedMetrics,
    ScenarioParameters,
    TableConfiguration,
    compute_metrics,
)
from .positions import PositionState, derive_positions, select_or_clear
from .seats import MAX_PLAYERS, MIN_PLAYERS, Seat

logger = logging.getLogger(__name__)

_TABLE_FIELDS: frozenset[str] = frozenset({"player_count", "ante_percentage"})
_PARAM_FIELDS: frozenset[str] = frozenset(
    f.name for f in dataclasses.fields(ScenarioParameters)
)
_PERCENT_FIELDS: frozenset[str] = frozenset(
    {"rfi_percentage", "calling_range_percentage", "equity", "equity_vs_cold_caller"}
)


# ─── Snapshot ─────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Scenario:
    config: TableConfiguration
    params: ScenarioParameters

    @property
    def positions(self) -> PositionState:
        return derive_positions(
            self.config.player_count,
            self.params.rfi_position,
            self.params.hero_position,
        )

    def metrics(self) -> DerivedMetrics | None:
        return compute_metrics(self.config, self.params)


DEFAULT_SCENARIO: Scenario = Scenario(
    config=TableConfiguration(player_count=9, ante_percentage=12.5),
    params=ScenarioParameters(
        stack=20.0,
        raise_size=2.2,
        rfi_percentage=30.0,
        calling_range_percentage=8.0,
        equity=51.0,
        equity_vs_cold_caller=35.0,
        target_ev=0.0,
        calc_mode=CalcMode.EV,
        rfi_position=Seat.HJ,
        hero_position=Seat.BB,
    ),
)


# ─── Validation helpers ───────────────────────────────────────────────────────

def _coerce_seat(value: Seat | str | None) -> Seat | None:
    if value is None or isinstance(value, Seat):
        return value
    return Seat.from_label(value)


def _coerce_mode(value: CalcMode | str) -> CalcMode:
    if isinstance(value, CalcMode):
        return value
    return CalcMode.from_label(value)


def _validate(name: str, value) -> object:
    """Return the normalised value for one field or raise ValueError."""
    if name == "player_count":
        if isinstance(value, bool) or not math.isfinite(value) or int(value) != value:
            raise ValueError(f"player_count must be an integer; got {value!r}")
        value = int(value)
        if not MIN_PLAYERS <= value <= MAX_PLAYERS:
            raise ValueError(
                f"player_count must be between {MIN_PLAYERS} and {MAX_PLAYERS}; got {value}"
            )
        return value
    if name in ("rfi_position", "hero_position"):
        return _coerce_seat(value)
    if name == "calc_mode":
        return _coerce_mode(value)

    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"{name} must be a finite number; got {value}")
    if name in _PERCENT_FIELDS and not 0.0 <= value <= 100.0:
        raise ValueError(f"{name} must be between 0 and 100; got {value}")
    if name == "stack" and value <= 0.0:
        raise ValueError(f"stack must be positive; got {value}")
    if name in ("raise_size", "ante_percentage") and value < 0.0:
        raise ValueError(f"{name} must be non-negative; got {value}")
    return value


# ─── Update channel ───────────────────────────────────────────────────────────

def apply_update(scenario: Scenario, **changes) -> Scenario:
    """Return a new Scenario with *changes* applied and invariants restored.

    Accepts any TableConfiguration or ScenarioParameters field by name.  Seat
    and mode fields also accept their string labels (``"UTG+1"``,
    ``"MinEquity"``).

    Raises:
        ValueError: For an unknown field or an out-of-domain value.  The
                    input scenario is never modified.
    """
    table_changes: dict[str, object] = {}
    param_changes: dict[str, object] = {}
    for name, value in changes.items():
        if name in _TABLE_FIELDS:
            target = table_changes
        elif name in _PARAM_FIELDS:
            target = param_changes
        else:
            logger.warning("Rejected update to unknown field %r", name)
            raise ValueError(f"Unknown scenario field: {name!r}")
        try:
            target[name] = _validate(name, value)
        except (TypeError, ValueError) as exc:
            logger.warning("Rejected update %s=%r: %s", name, value, exc)
            raise ValueError(str(exc)) from exc

    config = dataclasses.replace(scenario.config, **table_changes)
    params = dataclasses.replace(scenario.params, **param_changes)

    if params.calling_range_percentage > params.rfi_percentage:
        logger.debug(
            "Calling range %.2f%% clamped to RFI %.2f%%",
            params.calling_range_percentage, params.rfi_percentage,
        )
        params = dataclasses.replace(params, calling_range_percentage=params.rfi_percentage)

    positions = derive_positions(config.player_count, params.rfi_position, params.hero_position)
    if (positions.rfi_position, positions.hero_position) != (params.rfi_position, params.hero_position):
        params = dataclasses.replace(
            params,
            rfi_position=positions.rfi_position,
            hero_position=positions.hero_position,
        )

    return Scenario(config=config, params=params)


# ─── Session ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class CalculatorView:
    """Read surface handed to the presentation layer."""
    config: TableConfiguration
    params: ScenarioParameters
    metrics: DerivedMetrics
    available_rfi_seats: tuple[Seat, ...]
    available_hero_seats: tuple[Seat, ...]
    has_result: bool


class ShoveCalculator:
    """One user session: the current snapshot plus its derived metrics.

    Every setter replaces the snapshot and recomputes from scratch (position
    derivation, then the EV model).  While either seat is unset the last
    metrics are held; before any result exists they are all zero.
    """

    def __init__(self, scenario: Scenario = DEFAULT_SCENARIO) -> None:
        self._scenario = apply_update(scenario)
        self._metrics = DerivedMetrics.zero(self._scenario.params.calc_mode)
        self._recompute()

    # ── Read surface ──────────────────────────────────────────────────────────

    @property
    def scenario(self) -> Scenario:
        return self._scenario

    @property
    def positions(self) -> PositionState:
        return self._scenario.positions

    @property
    def metrics(self) -> DerivedMetrics:
        return self._metrics

    def view(self) -> CalculatorView:
        positions = self.positions
        return CalculatorView(
            config=self._scenario.config,
            params=self._scenario.params,
            metrics=self._metrics,
            available_rfi_seats=positions.available_rfi_seats,
            available_hero_seats=positions.available_hero_seats,
            has_result=positions.is_complete,
        )

    # ── Updates ───────────────────────────────────────────────────────────────

    def update(self, **changes) -> DerivedMetrics:
        """Apply *changes* (see apply_update) and return the fresh metrics."""
        self._scenario = apply_update(self._scenario, **changes)
        self._recompute()
        return self._metrics

    def set_stack(self, value: float) -> DerivedMetrics:
        return self.update(stack=value)

    def set_raise_size(self, value: float) -> DerivedMetrics:
        return self.update(raise_size=value)

    def set_rfi_percentage(self, value: float) -> DerivedMetrics:
        return self.update(rfi_percentage=value)

    def set_calling_range_percentage(self, value: float) -> DerivedMetrics:
        return self.update(calling_range_percentage=value)

    def set_equity(self, value: float) -> DerivedMetrics:
        return self.update(equity=value)

    def set_equity_vs_cold_caller(self, value: float) -> DerivedMetrics:
        return self.update(equity_vs_cold_caller=value)

    def set_target_ev(self, value: float) -> DerivedMetrics:
        return self.update(target_ev=value)

    def set_calc_mode(self, mode: CalcMode | str) -> DerivedMetrics:
        return self.update(calc_mode=mode)

    def set_player_count(self, value: int) -> DerivedMetrics:
        return self.update(player_count=value)

    def set_ante_percentage(self, value: float) -> DerivedMetrics:
        return self.update(ante_percentage=value)

    def select_rfi(self, seat: Seat | str) -> DerivedMetrics:
        """Select the raiser seat, or clear it if it is already selected."""
        seat = _coerce_seat(seat)
        return self.update(rfi_position=select_or_clear(self._scenario.params.rfi_position, seat))

    def select_hero(self, seat: Seat | str) -> DerivedMetrics:
        """Select the hero seat, or clear it if it is already selected."""
        seat = _coerce_seat(seat)
        return self.update(hero_position=select_or_clear(self._scenario.params.hero_position, seat))

    def _recompute(self) -> None:
        metrics = self._scenario.metrics()
        if metrics is None:
            return
        self._metrics = metrics
