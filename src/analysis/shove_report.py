"""Text report for a single shove scenario.

Four public functions format a scenario and its metrics into plain-text
tables for terminal use:

    print_scenario(scenario)          — table, seats, sizing and ranges
    print_metrics(metrics)            — every derived metric + branch EVs
    print_seat_comparison(scenario)   — EV and break-even equity per hero seat
    print_break_even(scenario)        — one-line break-even equity

Usage (default scenario):
    PYTHONPATH=. python -m src.analysis.shove_report
"""

from __future__ import annotations

from src.analysis.sensitivity import break_even_equity, compare_hero_seats
from src.engine.ev_model import CalcMode, DerivedMetrics
from src.engine.scenario import Scenario


def print_scenario(scenario: Scenario) -> None:
    """Print the scenario inputs."""
    config, params = scenario.config, scenario.params
    positions = scenario.positions

    print("=" * 56)
    print("3-Bet Shove Scenario")
    print("=" * 56)
    print(f"  Players:           {config.player_count}  (ante {config.ante_percentage:g}% bb)")
    print(f"  Raiser seat:       {params.rfi_position or '—'}")
    print(f"  Hero seat:         {params.hero_position or '—'}")
    print(f"  Legal raiser seats: {', '.join(str(s) for s in positions.available_rfi_seats)}")
    print(f"  Legal hero seats:   {', '.join(str(s) for s in positions.available_hero_seats) or '—'}")
    print(f"  Effective stack:   {params.stack:g} bb")
    print(f"  Open size:         {params.raise_size:g} bb")
    print(f"  RFI range:         {params.rfi_percentage:g}%")
    print(f"  Calling range:     {params.calling_range_percentage:g}%")
    print(f"  Equity vs caller:  {params.equity:g}%")
    print(f"  Equity vs cold:    {params.equity_vs_cold_caller:g}%")
    print(f"  Mode:              {params.calc_mode.value}")
    if params.calc_mode is CalcMode.MIN_EQUITY:
        print(f"  Target EV:         {params.target_ev:+g} bb")


def print_metrics(metrics: DerivedMetrics | None) -> None:
    """Print the derived metrics, or a placeholder when there is no result."""
    print("=" * 56)
    print("Derived Metrics")
    print("=" * 56)
    if metrics is None:
        print("  Select both a raiser seat and a hero seat.")
        return

    print(f"  Antes in pot:       {metrics.total_antes:.3f} bb")
    print(f"  Dead blinds:        {metrics.dead_blinds:.1f} bb")
    print(f"  Pot on fold:        {metrics.pot_on_fold:.3f} bb")
    print(f"  Players to act:     {metrics.players_to_act}")
    print(f"  P(cold call):       {metrics.prob_cold_call * 100:.2f}%")
    print(f"  P(raiser folds):    {metrics.p_raiser_folds * 100:.2f}%  (given no cold call)")
    print(f"  P(win uncontested): {metrics.total_fold_prob * 100:.2f}%")
    print(f"  P(bust out):        {metrics.bustout_prob * 100:.2f}%")
    print()
    print("  Branch EVs:")
    print(f"    Everyone folds    {metrics.ev_fold:+.3f} bb")
    print(f"    Raiser calls      {metrics.ev_raiser_call:+.3f} bb  (pot {metrics.pot_if_raiser_calls:.2f})")
    print(f"    Cold call         {metrics.ev_cold_call:+.3f} bb  (pot {metrics.pot_if_cold_caller_calls:.2f})")
    print()
    if metrics.calc_mode is CalcMode.EV:
        verdict = "SHOVE" if metrics.result_value > 0 else "FOLD"
        print(f"  Shove EV:           {metrics.result_value:+.3f} bb  → {verdict}")
    else:
        print(f"  Minimum equity:     {metrics.result_value:.2f}%")


def print_seat_comparison(scenario: Scenario) -> None:
    """Print EV, fold% and break-even equity for each legal hero seat."""
    rows = compare_hero_seats(scenario.config, scenario.params)

    print("=" * 56)
    print(f"Hero Seat Comparison  (raiser {scenario.params.rfi_position or '—'})")
    print("=" * 56)
    if not rows:
        print("  No legal hero seats.")
        return

    print(f"  {'Seat':<6} {'To act':>6} {'P(cc)':>7} {'Fold%':>7} {'EV':>8} {'Min eq':>8}")
    print(f"  {'─' * 6} {'─' * 6} {'─' * 7} {'─' * 7} {'─' * 8} {'─' * 8}")
    for row in rows:
        print(
            f"  {str(row.seat):<6} {row.players_to_act:>6d} "
            f"{row.prob_cold_call * 100:>6.2f}% {row.total_fold_prob * 100:>6.2f}% "
            f"{row.ev:>+8.3f} {row.break_even_equity:>7.2f}%"
        )


def print_break_even(scenario: Scenario) -> None:
    """One-line break-even equity summary."""
    threshold = break_even_equity(scenario.config, scenario.params)
    print(f"Break-even equity vs calling range: {threshold:.2f}%")


if __name__ == "__main__":
    from src.engine.scenario import DEFAULT_SCENARIO

    print_scenario(DEFAULT_SCENARIO)
    print()
    print_metrics(DEFAULT_SCENARIO.metrics())
    print()
    print_break_even(DEFAULT_SCENARIO)
    print()
    print_seat_comparison(DEFAULT_SCENARIO)
