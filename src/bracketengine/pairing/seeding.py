"""Seeding helpers for elimination brackets."""

# Bracket Engine
# Copyright (C) 2025  Bracket Engine developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from typing import List, Sequence

from bracketengine.exceptions import InvalidInputException
from bracketengine.type_hints import SeededSlots


def is_power_of_two(value: int) -> bool:
    return value >= 1 and value & (value - 1) == 0


def bracket_size(player_count: int) -> int:
    """Return the smallest power of two >= ``player_count``."""
    size = 1
    while size < player_count:
        size *= 2
    return size


def _seed_layout(size: int) -> List[int]:
    """Seed indices listed in bracket position order.

    Each seed of the half-size layout is followed by its mirror seed, so
    every first-round pair sums to ``size - 1`` (1 vs N, 2 vs N-1, ...).
    """
    if size == 2:
        return [0, 1]
    layout: List[int] = []
    for seed in _seed_layout(size // 2):
        layout.extend((seed, size - 1 - seed))
    return layout


def seed_order(size: int) -> List[int]:
    """Bracket position of each seed.

    ``seed_order(size)[i]`` is the position (0-based) where the player with
    seed ``i + 1`` is placed. Positions ``2k`` and ``2k + 1`` meet in
    first-round match ``k``.

    Raises
    ------
    InvalidInputException
        If ``size`` is not a power of two >= 2.
    """
    if size < 2 or not is_power_of_two(size):
        raise InvalidInputException(
            f"Bracket size must be a power of two >= 2, got {size}"
        )
    order = [0] * size
    for position, seed in enumerate(_seed_layout(size)):
        order[seed] = position
    return order


def distribute_byes(
    players: Sequence[str], size: int, order: Sequence[int]
) -> SeededSlots:
    """Place players into bracket positions; unfilled positions are byes."""
    slots: SeededSlots = [None] * size
    for index, player in enumerate(players[:size]):
        slots[order[index]] = player
    return slots
