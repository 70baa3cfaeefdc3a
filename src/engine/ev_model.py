"""
Closed-form EV model for a preflop 3-bet shove over a single raiser.

Two calculation modes share one derivation:

    EV         — expected value of the shove in big blinds, given hero's
                 equity against the raiser's calling range.
    MinEquity  — the equity (percent) against the raiser's calling range that
                 makes the shove worth exactly ``target_ev`` big blinds.

Outcome tree (from hero's perspective, hero shoves for ``stack``):

    no cold call (1 - pcc) ─┬─ raiser folds  → win potOnFold
                            └─ raiser calls  → equity * potIfRaiserCalls - stack
    cold call    (pcc)     ──  cold-caller   → eqCC * potIfColdCallerCalls - stack

The cold-call chance treats each player left to act behind hero as an
independent 3% caller.  The model never raises: a zero raise frequency is a
full fold, and a non-positive MinEquity denominator yields 0.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .seats import Seat, active_seats, seat_index

# Per-player chance that someone left to act cold-calls the shove.
COLD_CALL_PROBABILITY: float = 0.03


# ─── Enumerations ─────────────────────────────────────────────────────────────

class CalcMode(Enum):
    EV = "EV"
    MIN_EQUITY = "MinEquity"

    @classmethod
    def from_label(cls, label: str) -> "CalcMode":
        """Parse ``'EV'`` or ``'MinEquity'`` (case-insensitive).

        Raises:
            ValueError: For any other label.
        """
        if not isinstance(label, str):
            raise ValueError(f"Unknown calculation mode: {label!r}")
        wanted = label.strip().lower()
        for mode in cls:
            if mode.value.lower() == wanted or mode.name.lower() == wanted:
                return mode
        raise ValueError(f"Unknown calculation mode: {label!r}")


# ─── Inputs / outputs ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TableConfiguration:
    player_count: int = 9
    ante_percentage: float = 12.5   # % of one big blind posted by every player


@dataclass(frozen=True)
class ScenarioParameters:
    """Everything about the hand except the table itself.

    Percentages are on a 0–100 scale; stack, raise size and target EV are in
    big blinds.
    """
    stack: float = 20.0
    raise_size: float = 2.2
    rfi_percentage: float = 30.0
    calling_range_percentage: float = 8.0
    equity: float = 51.0
    equity_vs_cold_caller: float = 35.0
    target_ev: float = 0.0
    calc_mode: CalcMode = CalcMode.EV
    rfi_position: Seat | None = None
    hero_position: Seat | None = None


@dataclass(frozen=True)
class DerivedMetrics:
    """Every number the model derives for one scenario.

    The first seven fields are the headline metrics; the rest are the
    intermediate terms they are built from, kept for reporting.
    """
    dead_blinds: float
    pot_on_fold: float
    players_to_act: int
    prob_cold_call: float
    total_fold_prob: float
    bustout_prob: float
    result_value: float
    calc_mode: CalcMode = CalcMode.EV
    total_antes: float = 0.0
    p_raiser_folds: float = 0.0
    p_raiser_calls: float = 0.0
    pot_if_raiser_calls: float = 0.0
    pot_if_cold_caller_calls: float = 0.0
    ev_fold: float = 0.0
    ev_raiser_call: float = 0.0
    ev_cold_call: float = 0.0

    @classmethod
    def zero(cls, calc_mode: CalcMode = CalcMode.EV) -> "DerivedMetrics":
        """Idle metrics shown before both seats have been chosen."""
        return cls(
            dead_blinds=0.0,
            pot_on_fold=0.0,
            players_to_act=0,
            prob_cold_call=0.0,
            total_fold_prob=0.0,
            bustout_prob=0.0,
            result_value=0.0,
            calc_mode=calc_mode,
        )


# ─── Model steps ──────────────────────────────────────────────────────────────

def players_to_act(player_count: int, hero_position: Seat) -> int:
    """Players between hero and the big blind who could still cold-call.

    Counted as index(BB) - index(hero) within the active seats when hero acts
    before BB, else 0.
    """
    seats = active_seats(player_count)
    hero_idx = seat_index(seats, hero_position)
    bb_idx = seats.index(Seat.BB)
    if hero_idx is None or hero_idx >= bb_idx:
        return 0
    return bb_idx - hero_idx


def cold_call_probability(n_players: int, p: float = COLD_CALL_PROBABILITY) -> float:
    """P(at least one of *n_players* independent players cold-calls)."""
    return 1.0 - (1.0 - p) ** n_players


def dead_blinds(rfi_position: Seat, hero_position: Seat) -> float:
    """Blind money in the pot that neither hero nor the raiser owns.

    +0.5 when neither player is the small blind; +1.0 when hero is not the
    big blind.
    """
    dead = 0.0
    if rfi_position is not Seat.SB and hero_position is not Seat.SB:
        dead += 0.5
    if hero_position is not Seat.BB:
        dead += 1.0
    return dead


def raiser_fold_call_split(rfi_fraction: float, calling_fraction: float) -> tuple[float, float]:
    """Return (P(raiser folds), P(raiser calls)) given the raiser opened.

    A zero raise frequency is treated as a certain fold.
    """
    if rfi_fraction > 0:
        return (rfi_fraction - calling_fraction) / rfi_fraction, calling_fraction / rfi_fraction
    return 1.0, 0.0


# ─── Core function ────────────────────────────────────────────────────────────

def compute_metrics(
    config: TableConfiguration,
    params: ScenarioParameters,
) -> DerivedMetrics | None:
    """Evaluate the shove for one scenario.

    Args:
        config: Table size and ante structure.
        params: Stack, sizing, ranges, equities, mode and the two seats.
                Seats must already be validated by derive_positions().

    Returns:
        DerivedMetrics, or None when either seat is unset (no result).
    """
    if params.rfi_position is None or params.hero_position is None:
        return None

    calling_range = min(params.calling_range_percentage, params.rfi_percentage)
    rfi_fraction = params.rfi_percentage / 100.0
    calling_fraction = calling_range / 100.0
    equity = params.equity / 100.0
    equity_cc = params.equity_vs_cold_caller / 100.0
    stack = params.stack

    n_to_act = players_to_act(config.player_count, params.hero_position)
    pcc = cold_call_probability(n_to_act)
    no_cc = 1.0 - pcc

    total_antes = (config.ante_percentage / 100.0) * config.player_count
    dead = dead_blinds(params.rfi_position, params.hero_position)

    p_folds, p_calls = raiser_fold_call_split(rfi_fraction, calling_fraction)

    total_fold_prob = no_cc * p_folds
    bustout_prob = no_cc * p_calls * (1.0 - equity) + pcc * (1.0 - equity_cc)

    pot_on_fold = params.raise_size + total_antes + dead
    pot_if_raiser_calls = 2.0 * stack + total_antes + dead
    pot_if_cold_caller_calls = 2.0 * stack + params.raise_size + total_antes

    ev_fold = pot_on_fold
    ev_raiser_call = equity * pot_if_raiser_calls - stack
    ev_cold_call = equity_cc * pot_if_cold_caller_calls - stack

    if params.calc_mode is CalcMode.EV:
        result = (
            no_cc * p_folds * ev_fold
            + no_cc * p_calls * ev_raiser_call
            + pcc * ev_cold_call
        )
    else:
        # Solve the EV equation for the raiser-call equity, other terms fixed.
        term1 = params.target_ev - no_cc * p_folds * ev_fold - pcc * ev_cold_call
        term2 = no_cc * p_calls
        if term2 > 0 and pot_if_raiser_calls > 0:
            result = 100.0 * ((term1 / term2 + stack) / pot_if_raiser_calls)
        else:
            result = 0.0

    return DerivedMetrics(
        dead_blinds=dead,
        pot_on_fold=pot_on_fold,
        players_to_act=n_to_act,
        prob_cold_call=pcc,
        total_fold_prob=total_fold_prob,
        bustout_prob=bustout_prob,
        result_value=result,
        calc_mode=params.calc_mode,
        total_antes=total_antes,
        p_raiser_folds=p_folds,
        p_raiser_calls=p_calls,
        pot_if_raiser_calls=pot_if_raiser_calls,
        pot_if_cold_caller_calls=pot_if_cold_caller_calls,
        ev_fold=ev_fold,
        ev_raiser_call=ev_raiser_call,
        ev_cold_call=ev_cold_call,
    )
