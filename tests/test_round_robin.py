import random
from collections import Counter
from itertools import combinations

import pytest

from bracketengine.exceptions import (
    InvalidConfigurationException,
    InvalidPlayerListException,
)
from bracketengine.models.enums import TournamentStage, TournamentType
from bracketengine.models.tournament.match import Match
from bracketengine.models.tournament.tournament import Tournament
from bracketengine.models.tournament.tournament_config import StageConfig
from bracketengine.pairing import round_robin


def _players(count):
    return [f"P{i}" for i in range(1, count + 1)]


def _result(player1, player2, winner, score1, score2):
    match = Match(1, 0, player1, player2)
    match.winner = winner
    match.player1_score = score1
    match.player2_score = score2
    return match


def _play_all(tournament, pick):
    new_matches = []
    while not tournament.is_complete:
        ready = tournament.assignable_matches()
        assert ready, "tournament stalled"
        match = ready[0]
        score = (3, 1) if pick(match) == match.player1 else (1, 3)
        new_matches += tournament.apply_result(match.id, pick(match), *score)
    return new_matches


@pytest.mark.parametrize("count", range(2, 10))
def test_every_pair_meets_exactly_once(count):
    matches = round_robin.generate_schedule(_players(count))
    pairs = [frozenset(m.players) for m in matches]

    assert len(matches) == count * (count - 1) // 2
    assert set(pairs) == {frozenset(p) for p in combinations(_players(count), 2)}


@pytest.mark.parametrize("count", range(2, 10))
def test_nobody_plays_twice_in_a_round(count):
    matches = round_robin.generate_schedule(_players(count))
    rounds = {m.round_number for m in matches}

    assert rounds == set(range(1, round_robin.number_of_rounds(count) + 1))
    for number in rounds:
        in_round = [p for m in matches if m.round_number == number for p in m.players]
        assert len(in_round) == len(set(in_round))


def test_odd_field_sits_one_player_out_per_round():
    matches = round_robin.generate_schedule(_players(5))
    for number in range(1, 6):
        in_round = [m for m in matches if m.round_number == number]
        assert len(in_round) == 2
        assert [m.match_number for m in in_round] == [0, 1]


def test_first_round_pairs_ends_of_the_list():
    matches = round_robin.generate_schedule(_players(4))
    first = [m.players for m in matches if m.round_number == 1]
    assert first == [("P1", "P4"), ("P2", "P3")]


def test_standings_rank_wins_then_point_differential():
    standings = {s.player_name: s for s in round_robin.initial_standings("ABC")}
    round_robin.record_result(standings, _result("A", "B", "A", 5, 4))
    round_robin.record_result(standings, _result("B", "C", "B", 5, 0))
    round_robin.record_result(standings, _result("C", "A", "C", 5, 1))

    ranked = round_robin.rank_standings(list(standings.values()))

    assert [s.wins for s in ranked] == [1, 1, 1]
    assert [s.player_name for s in ranked] == ["B", "C", "A"]
    assert ranked[0].point_differential == 4
    assert standings["A"].points_for == 6
    assert standings["A"].points_against == 9


def test_split_groups_gives_group_a_the_smaller_half():
    group_a, group_b = round_robin.split_groups(_players(7))
    assert group_a == ["P1", "P2", "P3"]
    assert group_b == ["P4", "P5", "P6", "P7"]


def test_split_groups_needs_four_players():
    with pytest.raises(InvalidPlayerListException):
        round_robin.split_groups(_players(3))


def test_group_matches_stay_inside_their_group():
    group_a, group_b, matches = round_robin.generate_groups(_players(8))

    stages = Counter(m.stage for m in matches)
    assert stages == {TournamentStage.GROUP_A: 6, TournamentStage.GROUP_B: 6}
    for match in matches:
        roster = group_a if match.stage is TournamentStage.GROUP_A else group_b
        assert set(match.players) <= set(roster)


def test_qualifiers_alternate_between_groups():
    seeded = round_robin.interleave_qualifiers(["A1", "A2", "A3"], ["B1", "B2"], 2)
    assert seeded == ["A1", "B1", "A2", "B2"]


def test_finals_must_be_an_elimination_format():
    with pytest.raises(InvalidConfigurationException):
        round_robin.generate_finals(_players(4), TournamentType.SWISS)


def test_group_finals_are_seeded_cross_group():
    matches = round_robin.generate_group_finals(
        ["A1", "A2"], ["B1", "B2"], 4, TournamentType.SINGLE_ELIMINATION
    )
    first = [m.players for m in matches if m.round_number == 1]

    assert all(m.stage is TournamentStage.FINALS for m in matches)
    assert first == [("A1", "B2"), ("B1", "A2")]


def test_group_round_robin_runs_through_finals():
    tournament = Tournament.create(
        "Groups",
        _players(8),
        TournamentType.GROUP_ROUND_ROBIN,
        stage_config=StageConfig(finals_size=4),
    )
    finals = _play_all(tournament, lambda m: min(m.players))

    assert tournament.current_stage is TournamentStage.FINALS
    assert len(finals) == 3
    assert {p for m in finals if m.round_number == 1 for p in m.players} == {
        "P1",
        "P2",
        "P5",
        "P6",
    }
    assert tournament.winner == "P1"


def test_multi_stage_round_robin_feeds_double_elimination_finals():
    rng = random.Random(9)
    tournament = Tournament.create(
        "League",
        _players(6),
        TournamentType.ROUND_ROBIN,
        stage_config=StageConfig(
            is_multi_stage=True,
            finals_type=TournamentType.DOUBLE_ELIMINATION,
            finals_size=4,
        ),
    )
    finals = _play_all(tournament, lambda m: rng.choice(m.players))

    assert len(finals) == 7
    assert tournament.is_complete
    assert tournament.winner in tournament.roster_for_stage(TournamentStage.FINALS)


def test_plain_round_robin_winner_tops_the_table():
    tournament = Tournament.create("League", _players(4), TournamentType.ROUND_ROBIN)
    _play_all(tournament, lambda m: min(m.players))

    assert tournament.winner == "P1"
    assert [s.wins for s in tournament.standings()] == [3, 2, 1, 0]
