import random

import pytest

from bracketengine.constants import BYE
from bracketengine.exceptions import NoPairingAvailableException
from bracketengine.models.enums import MatchStatus, TournamentStatus, TournamentType
from bracketengine.models.tournament.match import Match
from bracketengine.models.tournament.standings import SwissStanding
from bracketengine.models.tournament.tournament import Tournament
from bracketengine.pairing import swiss


def _players(count):
    return [f"P{i}" for i in range(1, count + 1)]


def _pairs(matches):
    return {frozenset(m.present_players) for m in matches if m.is_ready}


def _play_round(tournament, rng):
    new_matches = []
    for match in tournament.assignable_matches():
        new_matches += tournament.apply_result(
            match.id, rng.choice(match.present_players)
        )
    return new_matches


@pytest.mark.parametrize(
    "count,rounds", [(2, 1), (3, 2), (4, 2), (8, 3), (9, 4), (16, 4), (17, 5)]
)
def test_number_of_rounds(count, rounds):
    assert swiss.number_of_rounds(count) == rounds


def test_first_round_pairs_in_order_with_trailing_bye():
    matches = swiss.generate_first_round(_players(5))

    assert [m.players for m in matches] == [
        ("P1", "P2"),
        ("P3", "P4"),
        ("P5", None),
    ]
    bye = matches[-1]
    assert bye.is_bye
    assert bye.status is MatchStatus.COMPLETE
    assert bye.winner == "P5"


def test_record_result_tracks_opponents_and_byes():
    standings = {s.player_name: s for s in swiss.initial_standings(_players(3))}
    played = Match(1, 0, "P1", "P2")
    played.winner = "P2"
    bye = Match(1, 1, "P3")
    bye.resolve_as_bye()

    swiss.record_result(standings, played)
    swiss.record_result(standings, bye)

    assert standings["P2"].wins == 1
    assert standings["P1"].losses == 1
    assert standings["P1"].has_played("P2")
    assert standings["P3"].opponents_played == [BYE]
    assert standings["P3"].has_received_bye


def test_buchholz_sums_opponent_points():
    standings = [
        SwissStanding("A", wins=2, opponents_played=["B", "C"]),
        SwissStanding("B", wins=1, losses=1, opponents_played=["A", BYE]),
        SwissStanding("C", losses=2, opponents_played=["A", "B"]),
    ]
    swiss.calculate_buchholz(standings)

    assert standings[0].buchholz_score == 1.0
    # Bye is worth half of the field's average points (3 points / 3 players)
    assert standings[1].buchholz_score == pytest.approx(2.0 + 0.5)
    assert standings[2].buchholz_score == 3.0


def test_ranking_uses_points_then_buchholz():
    standings = [
        SwissStanding("A", wins=1, buchholz_score=1.0),
        SwissStanding("B", wins=2, buchholz_score=0.0),
        SwissStanding("C", wins=1, buchholz_score=2.0),
    ]
    assert [s.player_name for s in swiss.rank_standings(standings)] == ["B", "C", "A"]


def test_bye_goes_to_lowest_ranked_player_without_one():
    standings = [
        SwissStanding("A", wins=1, opponents_played=["B"]),
        SwissStanding("B", losses=1, opponents_played=["A"]),
        SwissStanding("C", wins=1, opponents_played=[BYE]),
    ]
    matches = swiss.generate_round(standings, 2)

    assert matches[-1].is_bye
    assert matches[-1].winner == "B"
    assert matches[0].players == ("A", "C")


def test_bye_moves_up_when_the_lowest_player_forces_a_rematch():
    # Without E the field leaves D facing only past opponents, so the bye
    # moves up from E to D.
    standings = [
        SwissStanding("A", wins=1, opponents_played=["D"]),
        SwissStanding("B", wins=1, opponents_played=["D"]),
        SwissStanding("C", wins=1, opponents_played=["D"]),
        SwissStanding("D", losses=3, opponents_played=["A", "B", "C"]),
        SwissStanding("E"),
    ]
    matches = swiss.generate_round(standings, 4)

    assert matches[-1].is_bye
    assert matches[-1].winner == "D"
    assert _pairs(matches) == {frozenset("AB"), frozenset("CE")}


def test_every_player_has_had_a_bye():
    standings = [
        SwissStanding(name, wins=1, opponents_played=[BYE]) for name in "ABC"
    ]
    with pytest.raises(NoPairingAvailableException):
        swiss.generate_round(standings, 2)


def test_rematch_fallback_still_pairs_everyone():
    standings = [
        SwissStanding("A", wins=1, opponents_played=["B"]),
        SwissStanding("B", losses=1, opponents_played=["A"]),
    ]
    matches = swiss.generate_round(standings, 2)
    assert [m.players for m in matches] == [("A", "B")]


@pytest.mark.parametrize("count,seed", [(6, 1), (8, 2), (9, 3), (12, 4), (16, 5)])
def test_full_event_has_no_rematches(count, seed):
    rng = random.Random(seed)
    tournament = Tournament.create("Swiss", _players(count), TournamentType.SWISS)
    while not tournament.is_complete:
        _play_round(tournament, rng)

    rounds = {m.round_number for m in tournament.matches}
    assert rounds == set(range(1, swiss.number_of_rounds(count) + 1))
    played = [frozenset(m.players) for m in tournament.matches if m.is_ready]
    assert len(played) == len(set(played))
    assert tournament.status is TournamentStatus.COMPLETE
    assert tournament.winner == tournament.standings()[0].player_name


def test_next_round_waits_for_the_current_one():
    tournament = Tournament.create("Swiss", _players(4), TournamentType.SWISS)
    first, second = tournament.assignable_matches()

    assert tournament.apply_result(first.id, first.player1) == []
    new_round = tournament.apply_result(second.id, second.player1)

    assert len(new_round) == 2
    assert tournament.current_swiss_round == 2
    assert _pairs(new_round).isdisjoint(_pairs([first, second]))


def test_odd_field_never_gives_two_byes_to_one_player():
    rng = random.Random(11)
    tournament = Tournament.create("Swiss", _players(7), TournamentType.SWISS)
    while not tournament.is_complete:
        _play_round(tournament, rng)

    bye_winners = [m.winner for m in tournament.matches if m.is_bye]
    assert len(bye_winners) == swiss.number_of_rounds(7)
    assert len(bye_winners) == len(set(bye_winners))
