"""Tests for src/analysis/sensitivity.py — sweeps over the shove EV model."""

from __future__ import annotations

import dataclasses
import math

import numpy as np
import pytest

from src.analysis.sensitivity import (
    DEFAULT_CALLING_RANGES,
    DEFAULT_EQUITIES,
    DEFAULT_STACKS,
    SeatComparison,
    break_even_equity,
    build_ev_grid,
    compare_hero_seats,
    ev_by_equity,
)
from src.engine.seats import Seat
from tests.conftest import scenario


class TestBreakEvenEquity:
    def test_default_scenario(self, default_scenario):
        expected = 100 * ((-(22 / 30) * 3.825) / (8 / 30) + 20) / 41.625
        assert break_even_equity(default_scenario.config, default_scenario.params) == pytest.approx(expected)
        assert expected == pytest.approx(22.78, abs=0.01)

    def test_ev_is_zero_at_break_even(self, default_scenario):
        threshold = break_even_equity(default_scenario.config, default_scenario.params)
        ev = ev_by_equity(default_scenario.config, default_scenario.params, np.array([threshold]))
        assert ev[0] == pytest.approx(0.0, abs=1e-9)

    def test_ignores_scenario_mode_and_target(self):
        s = scenario(calc_mode="MinEquity", target_ev=5.0)
        base = scenario()
        assert break_even_equity(s.config, s.params) == pytest.approx(
            break_even_equity(base.config, base.params)
        )

    def test_unset_seat_is_nan(self):
        s = scenario(rfi_position=None)
        assert math.isnan(break_even_equity(s.config, s.params))


class TestEvByEquity:
    def test_default_length(self, default_scenario):
        evs = ev_by_equity(default_scenario.config, default_scenario.params)
        assert evs.shape == DEFAULT_EQUITIES.shape

    def test_increasing_in_equity(self, default_scenario):
        evs = ev_by_equity(default_scenario.config, default_scenario.params)
        assert np.all(np.diff(evs) > 0)

    def test_matches_model_at_scenario_equity(self, default_scenario):
        evs = ev_by_equity(default_scenario.config, default_scenario.params, np.array([51.0]))
        assert evs[0] == pytest.approx(default_scenario.metrics().result_value)

    def test_flat_when_raiser_never_calls(self):
        s = scenario(calling_range_percentage=0)
        evs = ev_by_equity(s.config, s.params)
        assert np.allclose(evs, evs[0])


class TestBuildEvGrid:
    def test_default_shape(self, default_scenario):
        grid = build_ev_grid(default_scenario.config, default_scenario.params)
        assert grid.shape == (len(DEFAULT_STACKS), len(DEFAULT_CALLING_RANGES))

    def test_nan_where_calling_exceeds_rfi(self):
        s = scenario(rfi_percentage=10, calling_range_percentage=4)
        grid = build_ev_grid(s.config, s.params)
        for c, calling in enumerate(DEFAULT_CALLING_RANGES):
            column = grid[:, c]
            if calling > 10:
                assert np.all(np.isnan(column))
            else:
                assert np.all(np.isfinite(column))

    def test_cell_matches_model(self, default_scenario):
        grid = build_ev_grid(
            default_scenario.config, default_scenario.params, np.array([20.0]), np.array([8.0])
        )
        assert grid[0, 0] == pytest.approx(default_scenario.metrics().result_value)

    def test_unset_seat_all_nan(self):
        s = scenario(hero_position=None)
        assert np.all(np.isnan(build_ev_grid(s.config, s.params)))


class TestCompareHeroSeats:
    def test_one_row_per_legal_seat(self, default_scenario):
        rows = compare_hero_seats(default_scenario.config, default_scenario.params)
        assert [r.seat for r in rows] == [Seat.CO, Seat.BTN, Seat.SB, Seat.BB]
        assert all(isinstance(r, SeatComparison) for r in rows)

    def test_big_blind_row_matches_model(self, default_scenario):
        rows = compare_hero_seats(default_scenario.config, default_scenario.params)
        bb = rows[-1]
        assert bb.ev == pytest.approx(default_scenario.metrics().result_value)
        assert bb.players_to_act == 0

    def test_players_to_act_decreasing(self, default_scenario):
        rows = compare_hero_seats(default_scenario.config, default_scenario.params)
        counts = [r.players_to_act for r in rows]
        assert counts == sorted(counts, reverse=True)

    def test_ignores_min_equity_mode(self):
        s = scenario(calc_mode="MinEquity")
        base = scenario()
        assert [r.ev for r in compare_hero_seats(s.config, s.params)] == pytest.approx(
            [r.ev for r in compare_hero_seats(base.config, base.params)]
        )

    def test_unset_raiser_empty(self):
        s = scenario(rfi_position=None)
        assert compare_hero_seats(s.config, s.params) == []

    def test_heads_up_single_row(self):
        s = scenario(player_count=2)
        rows = compare_hero_seats(s.config, s.params)
        assert [r.seat for r in rows] == [Seat.BB]

    def test_hero_seat_ignored(self, default_scenario):
        params = dataclasses.replace(default_scenario.params, hero_position=None)
        assert len(compare_hero_seats(default_scenario.config, params)) == 4
