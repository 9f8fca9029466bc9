"""Tournament manager: device assignment and score approval.

One manager owns one tournament for the lifetime of a session. Callers must
serialize every call onto a single owner; nothing here locks.
"""

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

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from bracketengine.constants import DEVICE_TIMEOUT_SECONDS
from bracketengine.controllers.operation_result import OperationResult
from bracketengine.exceptions import (
    BracketEngineException,
    DeviceBusyException,
    DeviceNotFoundException,
    IllegalTransitionException,
    InvalidInputException,
    SubmissionNotFoundException,
)
from bracketengine.models.enums import MatchStatus, ScoreboardStatus, TournamentStage
from bracketengine.models.tournament.match import Match, utc_now
from bracketengine.models.tournament.submission import (
    ConnectedScoreboard,
    PendingScoreSubmission,
)
from bracketengine.models.tournament.tournament import Tournament
from bracketengine.utils import setup_logger

logger = setup_logger(__name__)


class EventKind(Enum):
    MATCH_ASSIGNED = "match_assigned"
    MATCH_UNASSIGNED = "match_unassigned"
    SCORE_SUBMITTED = "score_submitted"
    SCORE_APPROVED = "score_approved"
    SCORE_REJECTED = "score_rejected"
    ROUND_GENERATED = "round_generated"
    FINALS_GENERATED = "finals_generated"
    TOURNAMENT_COMPLETE = "tournament_complete"


@dataclass(frozen=True)
class ManagerEvent:
    """Notification for whoever relays state to scoreboards and operators."""

    kind: EventKind
    match_id: Optional[str] = None
    device_id: Optional[str] = None
    reason: Optional[str] = None


EventListener = Callable[[ManagerEvent], None]


class TournamentManager:
    """Stateful orchestrator above a single tournament.

    Owns the tournament, the connected scoreboard devices and the queue of
    score submissions waiting for approval. Every operation returns an
    :class:`OperationResult`; failures leave all state untouched.
    """

    def __init__(
        self, tournament: Tournament, listener: Optional[EventListener] = None
    ) -> None:
        self.tournament = tournament
        self.listener = listener
        self.devices: Dict[str, ConnectedScoreboard] = {}
        self._pending: Dict[str, PendingScoreSubmission] = {}

    # ========== Helpers ==========

    def _emit(
        self,
        kind: EventKind,
        match_id: Optional[str] = None,
        device_id: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> None:
        if self.listener is not None:
            self.listener(ManagerEvent(kind, match_id, device_id, reason))

    def _failure(self, action: str, error: BracketEngineException) -> OperationResult:
        logger.warning(f"Cannot {action}: {error}")
        return OperationResult.failure(error)

    def get_device(self, device_id: str) -> ConnectedScoreboard:
        device = self.devices.get(device_id)
        if device is None:
            raise DeviceNotFoundException(f"Device {device_id} is not connected")
        return device

    # ========== Queries ==========

    @property
    def assignable_matches(self) -> List[Match]:
        return self.tournament.assignable_matches()

    @property
    def available_devices(self) -> List[ConnectedScoreboard]:
        return [d for d in self.devices.values() if d.is_available]

    @property
    def pending_submissions(self) -> List[PendingScoreSubmission]:
        return list(self._pending.values())

    @property
    def has_pending_submissions(self) -> bool:
        return bool(self._pending)

    def get_submission(self, match_id: str) -> Optional[PendingScoreSubmission]:
        return self._pending.get(match_id)

    # ========== Devices ==========

    def register_device(
        self,
        device_id: str,
        device_name: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> OperationResult:
        """Add a scoreboard, or refresh the name and last-seen of a known one."""
        device_id = (device_id or "").strip()
        if not device_id:
            return self._failure(
                "register device", InvalidInputException("Device id is required")
            )

        seen = now or utc_now()
        device = self.devices.get(device_id)
        if device is None:
            self.devices[device_id] = ConnectedScoreboard(
                id=device_id, device_name=device_name or device_id, last_seen=seen
            )
            logger.info(f"Scoreboard {device_id} connected")
        else:
            device.device_name = device_name or device.device_name
            device.last_seen = seen
        return OperationResult.success(f"Device {device_id} registered")

    def remove_device(self, device_id: str) -> OperationResult:
        """Disconnect a scoreboard, returning its unfinished match to pending.

        A match already awaiting approval keeps its queued submission.
        """
        try:
            self.get_device(device_id)
        except BracketEngineException as e:
            return self._failure("remove device", e)

        for match in self.tournament.matches:
            if match.assigned_device_id == device_id and match.status in (
                MatchStatus.ASSIGNED,
                MatchStatus.IN_PROGRESS,
            ):
                self.tournament.unassign_match(match.id)
                logger.info(f"Match {match.display_name} returned to pending")
                self._emit(EventKind.MATCH_UNASSIGNED, match.id, device_id)

        del self.devices[device_id]
        logger.info(f"Scoreboard {device_id} removed")
        return OperationResult.success(f"Device {device_id} removed")

    def heartbeat(
        self, device_id: str, now: Optional[datetime] = None
    ) -> OperationResult:
        try:
            device = self.get_device(device_id)
        except BracketEngineException as e:
            return self._failure("record heartbeat", e)
        device.last_seen = now or utc_now()
        return OperationResult.success()

    def prune_stale_devices(
        self,
        now: Optional[datetime] = None,
        timeout: float = DEVICE_TIMEOUT_SECONDS,
    ) -> List[str]:
        """Remove devices unseen for longer than ``timeout`` seconds.

        Returns:
            Ids of the removed devices
        """
        now = now or utc_now()
        stale = [
            device_id
            for device_id, device in self.devices.items()
            if (now - device.last_seen).total_seconds() > timeout
        ]
        for device_id in stale:
            logger.warning(f"Scoreboard {device_id} timed out")
            self.remove_device(device_id)
        return stale

    # ========== Match Assignment ==========

    def assign_match(self, match_id: str, device_id: str) -> OperationResult:
        """Hand a ready, pending match to an idle scoreboard."""
        try:
            device = self.get_device(device_id)
            if not device.is_available:
                raise DeviceBusyException(
                    f"Device {device_id} is busy with match {device.current_match_id}"
                )
            match = self.tournament.assign_match(match_id, device_id)
        except BracketEngineException as e:
            return self._failure(f"assign match {match_id}", e)

        device.status = ScoreboardStatus.MATCH_ASSIGNED
        device.current_match_id = match_id
        logger.info(f"Assigned {match.display_name} to {device.device_name}")
        self._emit(EventKind.MATCH_ASSIGNED, match_id, device_id)
        return OperationResult.success(f"Assigned {match.display_name}", match)

    def unassign_match(self, match_id: str) -> OperationResult:
        try:
            match = self.tournament.get_match(match_id)
            device_id = match.assigned_device_id
            self.tournament.unassign_match(match_id)
        except BracketEngineException as e:
            return self._failure(f"unassign match {match_id}", e)

        device = self.devices.get(device_id) if device_id else None
        if device is not None:
            device.release()
        logger.info(f"Unassigned {match.display_name}")
        self._emit(EventKind.MATCH_UNASSIGNED, match_id, device_id)
        return OperationResult.success(f"Unassigned {match.display_name}", match)

    def start_match(self, match_id: str) -> OperationResult:
        """The assigned scoreboard has begun scoring."""
        try:
            match = self.tournament.start_match(match_id)
        except BracketEngineException as e:
            return self._failure(f"start match {match_id}", e)

        device = self.devices.get(match.assigned_device_id or "")
        if device is not None:
            device.status = ScoreboardStatus.SCORING
        return OperationResult.success(f"Started {match.display_name}", match)

    # ========== Score Management ==========

    def receive_submission(self, submission: PendingScoreSubmission) -> OperationResult:
        """Queue a reported result for approval.

        A second submission for a match already awaiting approval replaces
        the queued one.
        """
        try:
            match = self.tournament.get_match(submission.match_id)
            replacing = match.status is MatchStatus.AWAITING_APPROVAL
            if not replacing and not match.status.accepts_submission:
                raise IllegalTransitionException(
                    f"Match {match.display_name} is {match.status.value} and cannot "
                    "accept a score"
                )
            if match.assigned_device_id != submission.device_id:
                raise IllegalTransitionException(
                    f"Device {submission.device_id} is not assigned to "
                    f"{match.display_name}"
                )
            self.tournament.result_recorder.validate_result(
                match,
                submission.winner,
                submission.player1_final_score,
                submission.player2_final_score,
                submission.player1_set_wins,
                submission.player2_set_wins,
            )
            if not replacing:
                self.tournament.mark_awaiting_approval(match.id)
        except BracketEngineException as e:
            return self._failure(f"accept score for {submission.match_id}", e)

        self._pending[match.id] = submission
        device = self.devices.get(submission.device_id)
        if device is not None:
            device.status = ScoreboardStatus.AWAITING_APPROVAL
        logger.info(
            f"Score for {match.display_name} awaiting approval: "
            f"{submission.winner} wins {submission.player1_final_score}-"
            f"{submission.player2_final_score}"
        )
        self._emit(EventKind.SCORE_SUBMITTED, match.id, submission.device_id)
        return OperationResult.success(
            f"Score received for {match.display_name}", match
        )

    def approve(self, match_id: str) -> OperationResult:
        """Commit the queued result and advance the tournament."""
        try:
            submission = self._pending.get(match_id)
            if submission is None:
                raise SubmissionNotFoundException(
                    f"No submission is waiting for match {match_id}"
                )
            match = self.tournament.get_match(match_id)
            if match.status is not MatchStatus.AWAITING_APPROVAL:
                raise IllegalTransitionException(
                    f"Match {match.display_name} is {match.status.value}, not "
                    "awaiting approval"
                )
            new_matches = self.tournament.apply_result(
                match_id,
                submission.winner,
                submission.player1_final_score,
                submission.player2_final_score,
                submission.player1_set_wins,
                submission.player2_set_wins,
                submission.match_history,
            )
        except BracketEngineException as e:
            return self._failure(f"approve score for {match_id}", e)

        del self._pending[match_id]
        device = self.devices.get(submission.device_id)
        if device is not None:
            device.release()
        logger.info(f"Approved score for {match.display_name}")
        self._emit(EventKind.SCORE_APPROVED, match_id, submission.device_id)

        if new_matches:
            finals = any(m.stage is TournamentStage.FINALS for m in new_matches)
            self._emit(
                EventKind.FINALS_GENERATED if finals else EventKind.ROUND_GENERATED
            )
        if self.tournament.is_complete:
            self._emit(EventKind.TOURNAMENT_COMPLETE)

        return OperationResult.success(
            f"Approved {match.display_name}", match, new_matches
        )

    def reject(self, match_id: str, reason: Optional[str] = None) -> OperationResult:
        """Discard the queued result; the device keeps the match and may resend."""
        try:
            submission = self._pending.get(match_id)
            if submission is None:
                raise SubmissionNotFoundException(
                    f"No submission is waiting for match {match_id}"
                )
            match = self.tournament.reopen_match(match_id)
        except BracketEngineException as e:
            return self._failure(f"reject score for {match_id}", e)

        del self._pending[match_id]
        device = self.devices.get(submission.device_id)
        if device is not None:
            device.status = ScoreboardStatus.MATCH_ASSIGNED
        logger.info(
            f"Rejected score for {match.display_name}"
            + (f": {reason}" if reason else "")
        )
        self._emit(EventKind.SCORE_REJECTED, match_id, submission.device_id, reason)
        return OperationResult.success(f"Rejected {match.display_name}", match)

    # ========== Serialization ==========

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tournament": self.tournament.to_dict(),
            "devices": [d.to_dict() for d in self.devices.values()],
            "pending_submissions": [s.to_dict() for s in self._pending.values()],
        }

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], listener: Optional[EventListener] = None
    ) -> "TournamentManager":
        manager = cls(Tournament.from_dict(data["tournament"]), listener)
        for device_data in data.get("devices", []):
            device = ConnectedScoreboard.from_dict(device_data)
            manager.devices[device.id] = device
        for submission_data in data.get("pending_submissions", []):
            submission = PendingScoreSubmission.from_dict(submission_data)
            manager._pending[submission.match_id] = submission
        return manager
