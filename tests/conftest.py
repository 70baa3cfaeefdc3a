"""
Shared pytest fixtures for the shove calculator tests.

Provides a scenario() helper for building snapshots from keyword overrides of
the default scenario.
"""

from __future__ import annotations

import pytest

from src.engine.scenario import DEFAULT_SCENARIO, Scenario, ShoveCalculator, apply_update


def scenario(**changes) -> Scenario:
    """Build a validated Scenario from the defaults plus *changes*.

    Examples:
        >>> scenario(player_count=6, rfi_position='CO', hero_position='BTN')
    """
    return apply_update(DEFAULT_SCENARIO, **changes)


@pytest.fixture
def default_scenario() -> Scenario:
    """The dashboard's default scenario (9-handed, HJ open, hero in BB)."""
    return DEFAULT_SCENARIO


@pytest.fixture
def calculator() -> ShoveCalculator:
    """A fresh calculator session on the default scenario."""
    return ShoveCalculator()
