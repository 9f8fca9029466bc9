import random

import pytest

from bracketengine.exceptions import InvalidPlayerListException
from bracketengine.models.enums import MatchStatus, Slot, TournamentStage
from bracketengine.pairing import single_elimination
from bracketengine.pairing.advancement import index_by_id, propagate_result


def _players(count):
    return [f"P{i}" for i in range(1, count + 1)]


def _round(matches, number):
    return sorted(
        (m for m in matches if m.round_number == number), key=lambda m: m.match_number
    )


def _win(match, winner, by_id):
    match.winner = winner
    match.status = MatchStatus.COMPLETE
    propagate_result(match, by_id)


def test_eight_player_bracket():
    matches = single_elimination.generate_bracket(_players(8))

    assert len(matches) == 7
    assert [len(_round(matches, r)) for r in (1, 2, 3)] == [4, 2, 1]
    first = _round(matches, 1)
    assert (first[0].player1, first[0].player2) == ("P1", "P8")
    assert (first[1].player1, first[1].player2) == ("P4", "P5")
    assert all(m.status is MatchStatus.PENDING for m in matches)


def test_every_match_but_the_final_links_forward():
    matches = single_elimination.generate_bracket(_players(16))
    by_id = index_by_id(matches)
    final = _round(matches, 4)[0]

    assert final.next_match_id is None
    for match in matches:
        if match is final:
            continue
        target = by_id[match.next_match_id]
        assert target.round_number == match.round_number + 1
        assert target.match_number == match.match_number // 2
        assert match.next_match_slot is Slot.for_index(match.match_number)


def test_three_players_top_seed_gets_a_bye():
    matches = single_elimination.generate_bracket(_players(3))
    first = _round(matches, 1)
    final = _round(matches, 2)[0]

    assert len(matches) == 3
    assert first[0].is_bye and first[0].is_complete
    assert first[0].winner == "P1"
    assert (first[1].player1, first[1].player2) == ("P2", "P3")
    assert final.player1 == "P1"
    assert final.player2 is None


def test_byes_cascade_only_one_round():
    matches = single_elimination.generate_bracket(_players(5))
    second = _round(matches, 2)

    assert sum(1 for m in _round(matches, 1) if m.is_bye) == 3
    # P1 waits for the winner of P4 vs P5; P2 and P3 already meet
    assert (second[0].player1, second[0].player2) == ("P1", None)
    assert (second[1].player1, second[1].player2) == ("P2", "P3")
    assert not any(m.is_complete for m in second)


def test_results_advance_to_the_final():
    matches = single_elimination.generate_bracket(_players(4))
    by_id = index_by_id(matches)
    semi1, semi2 = _round(matches, 1)
    final = _round(matches, 2)[0]

    _win(semi1, "P4", by_id)
    _win(semi2, "P2", by_id)

    assert (final.player1, final.player2) == ("P4", "P2")


def test_stage_tag_is_applied():
    matches = single_elimination.generate_bracket(
        _players(4), stage=TournamentStage.FINALS
    )
    assert all(m.stage is TournamentStage.FINALS for m in matches)


def test_shuffle_is_reproducible():
    first = single_elimination.generate_bracket(
        _players(8), shuffle=True, rng=random.Random(3)
    )
    second = single_elimination.generate_bracket(
        _players(8), shuffle=True, rng=random.Random(3)
    )
    assert [m.players for m in first] == [m.players for m in second]
    seeded = [p for m in _round(first, 1) for p in m.present_players]
    assert sorted(seeded) == sorted(_players(8))


@pytest.mark.parametrize(
    "players",
    [["P1"], [], ["P1", "P1"], ["P1", "  "], ["P1", "BYE"]],
)
def test_invalid_player_lists_are_rejected(players):
    with pytest.raises(InvalidPlayerListException):
        single_elimination.generate_bracket(players)
