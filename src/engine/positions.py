"""
Position derivation: which seats may raise first and which may shove behind.

Rules (applied in order by derive_positions):
    1. Active seats   = last ``player_count`` seats of the canonical order.
    2. RFI seats      = {SB} heads-up, otherwise every active seat except BB.
    3. Stale raiser   → second-to-last RFI seat (last one if only one exists).
    4. Hero seats     = active seats strictly after the raiser.
    5. Stale hero     → earliest hero seat, or unset when none exist.

An unset selection is a legitimate state (the user deselected a seat) and is
left alone; only a set-but-illegal selection is corrected.  Running the
derivation on its own output changes nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .seats import Seat, active_seats, seat_index

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PositionState:
    """Seat availability plus the (possibly corrected) selections."""
    player_count: int
    available_rfi_seats: tuple[Seat, ...]
    available_hero_seats: tuple[Seat, ...]
    rfi_position: Seat | None
    hero_position: Seat | None

    @property
    def is_complete(self) -> bool:
        return self.rfi_position is not None and self.hero_position is not None


def available_rfi_seats(player_count: int) -> tuple[Seat, ...]:
    """Seats that may hold the initial raiser."""
    if player_count == 2:
        return (Seat.SB,)
    return tuple(s for s in active_seats(player_count) if s is not Seat.BB)


def available_hero_seats(player_count: int, rfi_position: Seat | None) -> tuple[Seat, ...]:
    """Seats acting strictly after *rfi_position*; empty when it is unset or absent."""
    seats = active_seats(player_count)
    idx = seat_index(seats, rfi_position)
    if idx is None:
        return ()
    return seats[idx + 1:]


def _default_rfi(rfi_seats: tuple[Seat, ...]) -> Seat:
    # Late-but-not-last seat (CO at a full table) rather than the final one.
    if len(rfi_seats) >= 2:
        return rfi_seats[-2]
    return rfi_seats[-1]


def derive_positions(
    player_count: int,
    rfi_position: Seat | None,
    hero_position: Seat | None,
) -> PositionState:
    """Compute legal seats and correct stale selections.

    Args:
        player_count:  Number of players at the table (2–9).
        rfi_position:  Current raiser seat, or None if unset.
        hero_position: Current hero seat, or None if unset.

    Returns:
        PositionState with both availability sets and corrected selections.

    Raises:
        ValueError: If player_count is outside [2, 9].
    """
    rfi_seats = available_rfi_seats(player_count)

    if rfi_position is not None and rfi_position not in rfi_seats:
        corrected = _default_rfi(rfi_seats)
        logger.debug(
            "Raiser seat %s not legal at %d-handed; reassigned to %s",
            rfi_position, player_count, corrected,
        )
        rfi_position = corrected

    hero_seats = available_hero_seats(player_count, rfi_position)

    if hero_position is not None and hero_position not in hero_seats:
        corrected_hero = hero_seats[0] if hero_seats else None
        logger.debug(
            "Hero seat %s not behind raiser %s; reassigned to %s",
            hero_position, rfi_position, corrected_hero,
        )
        hero_position = corrected_hero

    return PositionState(
        player_count=player_count,
        available_rfi_seats=rfi_seats,
        available_hero_seats=hero_seats,
        rfi_position=rfi_position,
        hero_position=hero_position,
    )


def select_or_clear(current: Seat | None, seat: Seat) -> Seat | None:
    """Toggle a seat selection: picking the selected seat again clears it."""
    return None if current is seat else seat
