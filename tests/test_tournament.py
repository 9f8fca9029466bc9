import pytest

from bracketengine.exceptions import (
    IllegalTransitionException,
    InvalidConfigurationException,
    InvalidPlayerListException,
    InvalidResultException,
    InvalidRoomCodeException,
    MatchNotFoundException,
    MatchNotReadyException,
)
from bracketengine.models.enums import (
    BestOf,
    Generation,
    MatchStatus,
    MatchType,
    Slot,
    TournamentStage,
    TournamentStatus,
    TournamentType,
    WinCondition,
)
from bracketengine.models.tournament.match import HistoryEntry
from bracketengine.models.tournament.tournament import Tournament
from bracketengine.models.tournament.tournament_config import (
    StageConfig,
    TournamentConfig,
)


def _players(count):
    return [f"P{i}" for i in range(1, count + 1)]


def _first_ready(tournament):
    return tournament.assignable_matches()[0]


def test_create_generates_the_first_stage():
    tournament = Tournament.create("Cup", _players(8), room_code="847-291")

    assert tournament.room_code == "847291"
    assert tournament.status is TournamentStatus.NOT_STARTED
    assert tournament.progress == (0, 7)
    assert tournament.current_round == 1
    assert len(tournament.assignable_matches()) == 4


def test_create_generates_a_room_code():
    tournament = Tournament.create("Cup", _players(4))
    assert len(tournament.room_code) == 6
    assert tournament.room_code.isdigit()


@pytest.mark.parametrize(
    "kwargs,error",
    [
        ({"players": ["P1"]}, InvalidPlayerListException),
        ({"room_code": "12345"}, InvalidRoomCodeException),
        (
            {"stage_config": StageConfig(is_multi_stage=True)},
            InvalidConfigurationException,
        ),
        (
            {
                "tournament_type": TournamentType.SWISS,
                "stage_config": StageConfig(is_multi_stage=True, finals_size=16),
            },
            InvalidConfigurationException,
        ),
        (
            {
                "tournament_type": TournamentType.ROUND_ROBIN,
                "stage_config": StageConfig(
                    is_multi_stage=True, finals_type=TournamentType.SWISS
                ),
            },
            InvalidConfigurationException,
        ),
        (
            {
                "tournament_type": TournamentType.GROUP_ROUND_ROBIN,
                "players": _players(3),
            },
            InvalidPlayerListException,
        ),
        (
            {"config": TournamentConfig(match_type=MatchType.POINTS_3)},
            InvalidConfigurationException,
        ),
    ],
)
def test_invalid_setups_are_rejected(kwargs, error):
    arguments = {"name": "Cup", "players": _players(8)}
    arguments.update(kwargs)
    with pytest.raises(error):
        Tournament.create(**arguments)


def test_own_finish_only_for_generations_that_have_it():
    assert TournamentConfig(Generation.X, own_finish_enabled=True).own_finish_enabled
    burst = TournamentConfig(
        Generation.BURST, MatchType.POINTS_3, own_finish_enabled=True
    )
    assert not burst.own_finish_enabled


def test_lifecycle_transitions():
    tournament = Tournament.create("Cup", _players(4))
    match = _first_ready(tournament)

    with pytest.raises(IllegalTransitionException):
        tournament.start_match(match.id)

    tournament.assign_match(match.id, "board-1")
    assert match.status is MatchStatus.ASSIGNED
    assert tournament.status is TournamentStatus.IN_PROGRESS
    with pytest.raises(IllegalTransitionException):
        tournament.assign_match(match.id, "board-2")

    tournament.start_match(match.id)
    tournament.mark_awaiting_approval(match.id)
    assert match.status is MatchStatus.AWAITING_APPROVAL

    tournament.reopen_match(match.id)
    assert match.status is MatchStatus.ASSIGNED
    assert match.assigned_device_id == "board-1"

    tournament.unassign_match(match.id)
    assert match.status is MatchStatus.PENDING
    assert match.assigned_device_id is None


def test_match_without_both_players_cannot_be_assigned():
    tournament = Tournament.create("Cup", _players(4))
    final = tournament.matches_in_round(2)[0]

    with pytest.raises(MatchNotReadyException):
        tournament.assign_match(final.id, "board-1")
    with pytest.raises(MatchNotReadyException):
        tournament.apply_result(final.id, "P1")


def test_unknown_match():
    tournament = Tournament.create("Cup", _players(4))
    with pytest.raises(MatchNotFoundException):
        tournament.get_match("missing")
    assert tournament.find_match("missing") is None


def test_results_must_name_a_player_and_be_non_negative():
    tournament = Tournament.create("Cup", _players(4))
    match = _first_ready(tournament)

    with pytest.raises(InvalidResultException):
        tournament.apply_result(match.id, "P9")
    with pytest.raises(InvalidResultException):
        tournament.apply_result(match.id, match.player1, -1, 0)
    assert match.status is MatchStatus.PENDING


def test_completed_match_cannot_be_recorded_again():
    tournament = Tournament.create("Cup", _players(4))
    match = _first_ready(tournament)
    tournament.apply_result(match.id, match.player1, 4, 2)

    with pytest.raises(IllegalTransitionException):
        tournament.apply_result(match.id, match.player2)


def test_single_elimination_completes_with_a_champion():
    tournament = Tournament.create("Cup", _players(4))
    while not tournament.is_complete:
        match = _first_ready(tournament)
        tournament.apply_result(match.id, match.player2, 2, 4)

    assert tournament.winner == "P3"
    assert tournament.progress == (3, 3)
    assert tournament.current_round == 2


def test_match_configuration_uses_finals_overrides():
    tournament = Tournament.create(
        "Groups",
        _players(8),
        TournamentType.GROUP_ROUND_ROBIN,
        config=TournamentConfig(
            Generation.X, MatchType.POINTS_4, BestOf.NONE, own_finish_enabled=True
        ),
        stage_config=StageConfig(
            finals_size=4,
            finals_match_type=MatchType.POINTS_7,
            finals_best_of=BestOf.BEST_OF_3,
        ),
    )
    group_match = tournament.matches_in_stage(TournamentStage.GROUP_A)[0]
    group_config = tournament.match_configuration(group_match.id)
    assert group_config.match_type is MatchType.POINTS_4
    assert group_config.best_of is BestOf.NONE
    assert group_config.player1_name == group_match.player1

    while not tournament.is_in_finals:
        match = _first_ready(tournament)
        tournament.apply_result(match.id, match.player1)

    final = max(
        tournament.matches_in_stage(TournamentStage.FINALS),
        key=lambda m: m.round_number,
    )
    finals_config = tournament.match_configuration(final.id)
    assert finals_config.match_type is MatchType.POINTS_7
    assert finals_config.best_of is BestOf.BEST_OF_3
    assert finals_config.own_finish_enabled
    assert finals_config.player1_name == "TBD"


def test_group_standings_only_rank_their_group():
    tournament = Tournament.create(
        "Groups",
        _players(6),
        TournamentType.GROUP_ROUND_ROBIN,
        stage_config=StageConfig(finals_size=2),
    )
    standings = tournament.group_standings(TournamentStage.GROUP_B)
    names = [s.player_name for s in standings]

    assert sorted(names) == tournament.group_b_players
    assert tournament.group_standings(TournamentStage.MAIN) == []


def test_round_trip_preserves_state():
    tournament = Tournament.create(
        "Cup", _players(6), TournamentType.DOUBLE_ELIMINATION, room_code="123456"
    )
    match = _first_ready(tournament)
    history = [
        HistoryEntry(Slot.PLAYER1, WinCondition.XTREME, 3, 0),
        HistoryEntry(Slot.PLAYER2, WinCondition.OWN_FINISH, 4, 0),
    ]
    tournament.apply_result(match.id, match.player1, 4, 0, history=history)
    tournament.assign_match(_first_ready(tournament).id, "board-1")

    restored = Tournament.from_dict(tournament.to_dict())

    assert restored.to_dict() == tournament.to_dict()
    restored_history = restored.get_match(match.id).history
    assert restored_history[1].condition is WinCondition.OWN_FINISH
    assert restored.created_at == tournament.created_at


def test_round_trip_keeps_swiss_progress():
    tournament = Tournament.create("Swiss", _players(5), TournamentType.SWISS)
    for match in tournament.assignable_matches():
        tournament.apply_result(match.id, match.player1)

    restored = Tournament.from_dict(tournament.to_dict())

    assert restored.current_swiss_round == 2
    assert [s.to_dict() for s in restored.standings()] == [
        s.to_dict() for s in tournament.standings()
    ]
