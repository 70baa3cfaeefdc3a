"""
Seat labels and the canonical preflop action order.

Seats run from earliest to latest action and always end in the big blind:

    UTG → UTG+1 → MP → LJ → HJ → CO → BTN → SB → BB

A table with N players uses the last N seats of that order, so every derived
seat set in the engine is a contiguous suffix of CANONICAL_SEAT_ORDER.
"""

from __future__ import annotations

from enum import Enum

MIN_PLAYERS: int = 2
MAX_PLAYERS: int = 9


class Seat(Enum):
    UTG = "UTG"
    UTG1 = "UTG+1"
    MP = "MP"
    LJ = "LJ"
    HJ = "HJ"
    CO = "CO"
    BTN = "BTN"
    SB = "SB"
    BB = "BB"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def from_label(cls, label: str) -> "Seat":
        """Parse a seat label such as ``'utg+1'`` or ``'BTN'``.

        Raises:
            ValueError: If the label does not name a seat.
        """
        if not isinstance(label, str):
            raise ValueError(f"Unknown seat label: {label!r}")
        wanted = label.strip().upper()
        for seat in cls:
            if seat.value == wanted:
                return seat
        raise ValueError(f"Unknown seat label: {label!r}")

    def __str__(self) -> str:
        return self.value


CANONICAL_SEAT_ORDER: tuple[Seat, ...] = (
    Seat.UTG,
    Seat.UTG1,
    Seat.MP,
    Seat.LJ,
    Seat.HJ,
    Seat.CO,
    Seat.BTN,
    Seat.SB,
    Seat.BB,
)


def active_seats(player_count: int) -> tuple[Seat, ...]:
    """Return the seats in play for a table of *player_count* players.

    The earliest ``9 - player_count`` seats are dropped; BB is always kept.

    Raises:
        ValueError: If player_count is outside [2, 9].
    """
    if not MIN_PLAYERS <= player_count <= MAX_PLAYERS:
        raise ValueError(
            f"player_count must be between {MIN_PLAYERS} and {MAX_PLAYERS}; got {player_count}"
        )
    return CANONICAL_SEAT_ORDER[len(CANONICAL_SEAT_ORDER) - player_count:]


def seat_index(seats: tuple[Seat, ...], seat: Seat | None) -> int | None:
    """Index of *seat* within *seats*, or None when unset or absent."""
    if seat is None or seat not in seats:
        return None
    return seats.index(seat)
