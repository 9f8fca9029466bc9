from datetime import timedelta

import pytest

from bracketengine.controllers.operation_result import ErrorKind
from bracketengine.controllers.tournament_manager import EventKind, TournamentManager
from bracketengine.models.enums import (
    MatchStatus,
    ScoreboardStatus,
    TournamentStage,
    TournamentType,
)
from bracketengine.models.tournament.match import utc_now
from bracketengine.models.tournament.submission import PendingScoreSubmission
from bracketengine.models.tournament.tournament import Tournament
from bracketengine.models.tournament.tournament_config import StageConfig


def _players(count):
    return [f"P{i}" for i in range(1, count + 1)]


def _manager(count=4, tournament_type=TournamentType.SINGLE_ELIMINATION, **kwargs):
    events = []
    tournament = Tournament.create("Cup", _players(count), tournament_type, **kwargs)
    manager = TournamentManager(tournament, events.append)
    manager.register_device("board-1", "Board 1")
    manager.register_device("board-2", "Board 2")
    return manager, events


def _kinds(events):
    return [e.kind for e in events]


def _submission(match, device_id="board-1", winner=None, scores=(4, 2)):
    return PendingScoreSubmission(
        match_id=match.id,
        device_id=device_id,
        winner=winner or match.player1,
        player1_final_score=scores[0],
        player2_final_score=scores[1],
    )


def _submit(manager, device_id="board-1"):
    match = manager.assignable_matches[0]
    assert manager.assign_match(match.id, device_id)
    assert manager.start_match(match.id)
    assert manager.receive_submission(_submission(match, device_id))
    return match


def test_assign_occupies_the_device():
    manager, events = _manager()
    match = manager.assignable_matches[0]

    result = manager.assign_match(match.id, "board-1")

    assert result.is_success
    assert result.match is match
    assert match.status is MatchStatus.ASSIGNED
    assert manager.get_device("board-1").current_match_id == match.id
    assert [d.id for d in manager.available_devices] == ["board-2"]
    assert _kinds(events) == [EventKind.MATCH_ASSIGNED]


def test_busy_device_cannot_take_a_second_match():
    manager, _ = _manager()
    first, second = manager.assignable_matches[:2]
    manager.assign_match(first.id, "board-1")

    result = manager.assign_match(second.id, "board-1")

    assert not result
    assert result.error_kind is ErrorKind.ILLEGAL_TRANSITION
    assert second.status is MatchStatus.PENDING


def test_failures_are_categorised():
    manager, _ = _manager()
    match = manager.assignable_matches[0]

    assert manager.assign_match("missing", "board-1").error_kind is ErrorKind.NOT_FOUND
    assert manager.assign_match(match.id, "ghost").error_kind is ErrorKind.NOT_FOUND
    assert manager.register_device("  ").error_kind is ErrorKind.INVALID_INPUT
    assert manager.approve(match.id).error_kind is ErrorKind.NOT_FOUND


def test_submission_must_come_from_the_assigned_device():
    manager, _ = _manager()
    match = manager.assignable_matches[0]
    manager.assign_match(match.id, "board-1")

    result = manager.receive_submission(_submission(match, "board-2"))

    assert result.error_kind is ErrorKind.ILLEGAL_TRANSITION
    assert match.status is MatchStatus.ASSIGNED
    assert not manager.has_pending_submissions


def test_invalid_submission_is_rejected_up_front():
    manager, _ = _manager()
    match = manager.assignable_matches[0]
    manager.assign_match(match.id, "board-1")

    result = manager.receive_submission(_submission(match, winner="Nobody"))

    assert result.error_kind is ErrorKind.INVALID_INPUT
    assert match.status is MatchStatus.ASSIGNED


def test_approve_commits_and_frees_the_device():
    manager, events = _manager()
    match = _submit(manager)
    device = manager.get_device("board-1")
    assert match.status is MatchStatus.AWAITING_APPROVAL
    assert device.status is ScoreboardStatus.AWAITING_APPROVAL

    result = manager.approve(match.id)

    assert result
    assert match.status is MatchStatus.COMPLETE
    assert match.winner == match.player1
    assert (match.player1_score, match.player2_score) == (4, 2)
    assert device.is_available
    assert not manager.has_pending_submissions
    assert _kinds(events)[-2:] == [EventKind.SCORE_SUBMITTED, EventKind.SCORE_APPROVED]


def test_reject_returns_the_match_to_its_device():
    manager, events = _manager()
    match = _submit(manager)

    result = manager.reject(match.id, "wrong winner")

    assert result
    assert match.status is MatchStatus.ASSIGNED
    assert match.assigned_device_id == "board-1"
    assert manager.get_device("board-1").status is ScoreboardStatus.MATCH_ASSIGNED
    assert manager.get_submission(match.id) is None
    assert events[-1].kind is EventKind.SCORE_REJECTED
    assert events[-1].reason == "wrong winner"

    assert manager.receive_submission(_submission(match))
    assert manager.approve(match.id)


def test_approve_and_reject_are_exclusive():
    manager, _ = _manager()
    match = _submit(manager)

    assert manager.approve(match.id)
    assert manager.reject(match.id).error_kind is ErrorKind.NOT_FOUND
    assert manager.approve(match.id).error_kind is ErrorKind.NOT_FOUND

    other = _submit(manager, "board-2")
    assert manager.reject(other.id)
    assert manager.approve(other.id).error_kind is ErrorKind.NOT_FOUND
    assert other.status is MatchStatus.ASSIGNED


def test_resubmission_replaces_the_queued_score():
    manager, _ = _manager()
    match = _submit(manager)

    corrected = _submission(match, winner=match.player2, scores=(1, 4))
    assert manager.receive_submission(corrected)

    assert len(manager.pending_submissions) == 1
    manager.approve(match.id)
    assert match.winner == match.player2


def test_removing_a_device_returns_its_match_to_pending():
    manager, events = _manager()
    match = manager.assignable_matches[0]
    manager.assign_match(match.id, "board-1")
    manager.start_match(match.id)

    assert manager.remove_device("board-1")

    assert match.status is MatchStatus.PENDING
    assert match.assigned_device_id is None
    assert "board-1" not in manager.devices
    assert events[-1].kind is EventKind.MATCH_UNASSIGNED
    assert match in manager.assignable_matches


def test_removed_device_keeps_a_submitted_score():
    manager, _ = _manager()
    match = _submit(manager)

    manager.remove_device("board-1")

    assert match.status is MatchStatus.AWAITING_APPROVAL
    assert manager.approve(match.id)


def test_unassign_releases_the_device():
    manager, _ = _manager()
    match = manager.assignable_matches[0]
    manager.assign_match(match.id, "board-1")

    assert manager.unassign_match(match.id)
    assert manager.get_device("board-1").is_available
    assert manager.unassign_match(match.id).error_kind is ErrorKind.ILLEGAL_TRANSITION


def test_stale_devices_are_pruned():
    manager, _ = _manager()
    now = utc_now()
    manager.heartbeat("board-1", now)
    manager.heartbeat("board-2", now - timedelta(seconds=120))

    assert manager.prune_stale_devices(now) == ["board-2"]
    assert list(manager.devices) == ["board-1"]


def test_events_announce_new_rounds_and_completion():
    manager, events = _manager(4, TournamentType.SWISS)
    for _ in range(2):
        _submit(manager, "board-1")
        _submit(manager, "board-2")
        for submission in manager.pending_submissions:
            manager.approve(submission.match_id)

    kinds = _kinds(events)
    assert kinds.count(EventKind.ROUND_GENERATED) == 1
    assert kinds[-1] is EventKind.TOURNAMENT_COMPLETE
    assert manager.tournament.is_complete


def test_finals_generation_is_announced():
    manager, events = _manager(
        4,
        TournamentType.ROUND_ROBIN,
        stage_config=StageConfig(is_multi_stage=True, finals_size=2),
    )
    results = []
    while not manager.tournament.is_in_finals:
        _submit(manager)
        results.append(manager.approve(manager.pending_submissions[0].match_id))

    assert results[-1].new_matches
    assert all(m.stage is TournamentStage.FINALS for m in results[-1].new_matches)
    assert events[-1].kind is EventKind.FINALS_GENERATED


def test_round_trip_keeps_devices_and_pending_scores():
    manager, _ = _manager()
    match = _submit(manager)

    restored = TournamentManager.from_dict(manager.to_dict())

    assert restored.to_dict() == manager.to_dict()
    assert restored.get_submission(match.id).winner == match.player1
    assert restored.approve(match.id)


@pytest.mark.parametrize("count", [3, 5, 8])
def test_manager_drives_elimination_to_completion(count):
    manager, events = _manager(count, TournamentType.DOUBLE_ELIMINATION)
    while not manager.tournament.is_complete:
        _submit(manager)
        manager.approve(manager.pending_submissions[0].match_id)

    assert manager.tournament.winner == "P1"
    assert _kinds(events).count(EventKind.TOURNAMENT_COMPLETE) == 1
