import pytest

from bracketengine.exceptions import InvalidInputException
from bracketengine.pairing.seeding import (
    bracket_size,
    distribute_byes,
    is_power_of_two,
    seed_order,
)


def _first_round_pairs(size):
    order = seed_order(size)
    seed_at = {position: seed for seed, position in enumerate(order)}
    return [(seed_at[2 * k], seed_at[2 * k + 1]) for k in range(size // 2)]


def test_bracket_size_rounds_up_to_power_of_two():
    assert bracket_size(2) == 2
    assert bracket_size(3) == 4
    assert bracket_size(8) == 8
    assert bracket_size(9) == 16
    assert bracket_size(33) == 64


def test_is_power_of_two():
    assert [n for n in range(0, 20) if is_power_of_two(n)] == [1, 2, 4, 8, 16]


@pytest.mark.parametrize("size", [2, 4, 8, 16, 32, 64])
def test_first_round_pairs_mirror_seeds(size):
    for high, low in _first_round_pairs(size):
        assert high + low == size - 1


@pytest.mark.parametrize("size", [2, 4, 8, 16, 32, 64])
def test_seed_order_is_a_permutation(size):
    assert sorted(seed_order(size)) == list(range(size))


def test_top_two_seeds_are_in_opposite_halves():
    order = seed_order(16)
    assert order[0] < 8 <= order[1]


def test_eight_player_layout():
    assert _first_round_pairs(8) == [(0, 7), (3, 4), (1, 6), (2, 5)]


@pytest.mark.parametrize("size", [0, 1, 3, 6, 12])
def test_seed_order_rejects_non_power_of_two(size):
    with pytest.raises(InvalidInputException):
        seed_order(size)


def test_byes_go_to_top_seeds():
    players = ["P1", "P2", "P3", "P4", "P5"]
    slots = distribute_byes(players, 8, seed_order(8))
    pairs = [(slots[i], slots[i + 1]) for i in range(0, 8, 2)]

    byes = {p for p in (a or b for a, b in pairs if a is None or b is None)}
    assert byes == {"P1", "P2", "P3"}
    assert ("P4", "P5") in pairs
