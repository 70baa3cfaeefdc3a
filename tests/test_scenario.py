"""Tests for src/engine/scenario.py — update channel and calculator session."""

from __future__ import annotations

import logging

import pytest

from src.engine.ev_model import CalcMode, DerivedMetrics, TableConfiguration
from src.engine.scenario import (
    DEFAULT_SCENARIO,
    CalculatorView,
    Scenario,
    ShoveCalculator,
    apply_update,
)
from src.engine.seats import Seat
from tests.conftest import scenario


class TestApplyUpdate:
    def test_returns_new_snapshot(self, default_scenario):
        updated = apply_update(default_scenario, stack=30)
        assert isinstance(updated, Scenario)
        assert updated.params.stack == 30.0
        assert default_scenario.params.stack == 20.0

    def test_table_and_params_routed(self):
        s = scenario(player_count=6, ante_percentage=10, equity=40)
        assert s.config.player_count == 6
        assert s.config.ante_percentage == 10.0
        assert s.params.equity == 40.0

    def test_calling_range_clamped_on_update(self):
        s = scenario(calling_range_percentage=50)
        assert s.params.calling_range_percentage == s.params.rfi_percentage

    def test_lowering_rfi_clamps_calling_range(self):
        s = scenario(rfi_percentage=5)
        assert s.params.calling_range_percentage == 5.0

    def test_clamp_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="src.engine.scenario"):
            scenario(rfi_percentage=5)
        assert any("clamped" in r.getMessage() for r in caplog.records)

    def test_seat_labels_parsed(self):
        s = scenario(rfi_position="co", hero_position="BTN")
        assert s.params.rfi_position is Seat.CO
        assert s.params.hero_position is Seat.BTN

    def test_mode_label_parsed(self):
        assert scenario(calc_mode="MinEquity").params.calc_mode is CalcMode.MIN_EQUITY

    def test_table_shrink_corrects_positions(self):
        s = scenario(player_count=2)
        assert s.params.rfi_position is Seat.SB
        assert s.params.hero_position is Seat.BB

    def test_hero_before_raiser_corrected(self):
        s = scenario(rfi_position=Seat.CO, hero_position=Seat.HJ)
        assert s.params.hero_position is Seat.BTN

    def test_no_changes_is_identity(self, default_scenario):
        assert apply_update(default_scenario) == default_scenario

    @pytest.mark.parametrize(
        "field, value",
        [
            ("player_count", 1),
            ("player_count", 10),
            ("player_count", 6.5),
            ("player_count", float("inf")),
            ("equity", 101),
            ("rfi_percentage", -1),
            ("stack", 0),
            ("raise_size", -2),
            ("ante_percentage", -0.5),
            ("rfi_position", "DEALER"),
            ("calc_mode", "ICM"),
            ("stack", None),
            ("rfi_position", 5),
            ("hero_position", ["BB"]),
            ("calc_mode", 3),
        ],
    )
    def test_invalid_values_raise(self, default_scenario, field, value):
        with pytest.raises(ValueError):
            apply_update(default_scenario, **{field: value})

    @pytest.mark.parametrize("field", ["stack", "raise_size", "ante_percentage", "target_ev", "equity"])
    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_values_raise(self, default_scenario, field, value):
        with pytest.raises(ValueError, match="finite"):
            apply_update(default_scenario, **{field: value})

    def test_unknown_field_raises(self, default_scenario):
        with pytest.raises(ValueError, match="Unknown scenario field"):
            apply_update(default_scenario, blinds=2)

    def test_rejection_logged(self, default_scenario, caplog):
        with caplog.at_level(logging.WARNING, logger="src.engine.scenario"):
            with pytest.raises(ValueError):
                apply_update(default_scenario, equity=150)
        assert any("Rejected" in r.getMessage() for r in caplog.records)


class TestShoveCalculator:
    def test_initial_metrics_match_scenario(self, calculator):
        assert calculator.metrics == DEFAULT_SCENARIO.metrics()

    def test_setter_recomputes(self, calculator):
        before = calculator.metrics.result_value
        after = calculator.set_equity(70).result_value
        assert after > before

    def test_every_setter(self, calculator):
        calculator.set_stack(25)
        calculator.set_raise_size(2.5)
        calculator.set_rfi_percentage(25)
        calculator.set_calling_range_percentage(6)
        calculator.set_equity(55)
        calculator.set_equity_vs_cold_caller(30)
        calculator.set_target_ev(1.0)
        calculator.set_ante_percentage(10)
        calculator.set_player_count(8)
        p = calculator.scenario.params
        assert (p.stack, p.raise_size, p.rfi_percentage) == (25.0, 2.5, 25.0)
        assert (p.calling_range_percentage, p.equity, p.equity_vs_cold_caller) == (6.0, 55.0, 30.0)
        assert p.target_ev == 1.0
        assert calculator.scenario.config == TableConfiguration(player_count=8, ante_percentage=10.0)

    def test_calling_range_never_exceeds_rfi(self, calculator):
        calculator.set_calling_range_percentage(90)
        assert calculator.scenario.params.calling_range_percentage <= calculator.scenario.params.rfi_percentage
        calculator.set_rfi_percentage(3)
        assert calculator.scenario.params.calling_range_percentage == 3.0

    def test_mode_switch(self, calculator):
        ev = calculator.metrics.result_value
        calculator.set_target_ev(ev)
        metrics = calculator.set_calc_mode("MinEquity")
        assert metrics.calc_mode is CalcMode.MIN_EQUITY
        assert metrics.result_value == pytest.approx(51.0)

    def test_failed_update_leaves_state(self, calculator):
        before = calculator.scenario
        with pytest.raises(ValueError):
            calculator.set_player_count(12)
        assert calculator.scenario == before

    def test_non_finite_target_ev_leaves_state(self, calculator):
        before = calculator.scenario
        held = calculator.metrics
        with pytest.raises(ValueError):
            calculator.set_target_ev(float("nan"))
        assert calculator.scenario == before
        assert calculator.metrics == held

    def test_select_same_hero_clears_and_holds_metrics(self, calculator):
        held = calculator.metrics
        calculator.select_hero(Seat.BB)
        assert calculator.scenario.params.hero_position is None
        assert calculator.metrics == held
        assert not calculator.view().has_result

    def test_held_metrics_ignore_later_changes(self, calculator):
        held = calculator.metrics
        calculator.select_hero(Seat.BB)
        calculator.set_stack(40)
        assert calculator.metrics == held

    def test_reselect_hero_resumes(self, calculator):
        calculator.select_hero(Seat.BB)
        metrics = calculator.select_hero("CO")
        assert calculator.scenario.params.hero_position is Seat.CO
        assert metrics.players_to_act == 3

    def test_select_rfi_clears_hero(self, calculator):
        calculator.select_rfi(Seat.HJ)
        assert calculator.scenario.params.rfi_position is None
        assert calculator.scenario.params.hero_position is None

    def test_select_rfi_after_hero_moves_hero(self, calculator):
        calculator.select_hero(Seat.BB)   # clear
        calculator.select_hero(Seat.CO)
        calculator.select_rfi(Seat.BTN)
        assert calculator.scenario.params.hero_position is Seat.SB

    def test_start_without_seats_is_zero(self):
        empty = apply_update(DEFAULT_SCENARIO, rfi_position=None)
        calc = ShoveCalculator(empty)
        assert calc.metrics == DerivedMetrics.zero()
        assert not calc.view().has_result

    def test_view(self, calculator):
        view = calculator.view()
        assert isinstance(view, CalculatorView)
        assert view.has_result
        assert view.available_rfi_seats[-1] is Seat.SB
        assert view.available_hero_seats == (Seat.CO, Seat.BTN, Seat.SB, Seat.BB)
        assert view.metrics == calculator.metrics

    def test_heads_up_view(self, calculator):
        calculator.set_player_count(2)
        view = calculator.view()
        assert view.available_rfi_seats == (Seat.SB,)
        assert view.available_hero_seats == (Seat.BB,)
        assert view.params.rfi_position is Seat.SB
        assert view.params.hero_position is Seat.BB
