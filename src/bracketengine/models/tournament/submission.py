"""Remote score submissions and the scoreboard devices that send them."""

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

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from dateutil.parser import isoparse

from bracketengine.models.enums import ScoreboardStatus
from bracketengine.models.tournament.match import HistoryEntry, utc_now


@dataclass
class PendingScoreSubmission:
    """An unconfirmed result reported by a scoreboard device.

    Attributes
    ----------
    match_id : str
        Match the result is for.
    device_id : str
        Reporting device.
    winner : str
        Declared winner; must be one of the match's players.
    player1_final_score, player2_final_score : int
        Final game scores.
    player1_set_wins, player2_set_wins : int
        Final set wins.
    match_history : list of HistoryEntry
        Ordered scoring events.
    submitted_at : datetime
        When the submission was received.
    """

    match_id: str
    device_id: str
    winner: str
    player1_final_score: int = 0
    player2_final_score: int = 0
    player1_set_wins: int = 0
    player2_set_wins: int = 0
    match_history: List[HistoryEntry] = field(default_factory=list)
    submitted_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "match_id": self.match_id,
            "device_id": self.device_id,
            "winner": self.winner,
            "player1_final_score": self.player1_final_score,
            "player2_final_score": self.player2_final_score,
            "player1_set_wins": self.player1_set_wins,
            "player2_set_wins": self.player2_set_wins,
            "match_history": [entry.to_dict() for entry in self.match_history],
            "submitted_at": self.submitted_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PendingScoreSubmission":
        return cls(
            match_id=data["match_id"],
            device_id=data["device_id"],
            winner=data["winner"],
            player1_final_score=data.get("player1_final_score", 0),
            player2_final_score=data.get("player2_final_score", 0),
            player1_set_wins=data.get("player1_set_wins", 0),
            player2_set_wins=data.get("player2_set_wins", 0),
            match_history=[
                HistoryEntry.from_dict(h) for h in data.get("match_history", [])
            ],
            submitted_at=isoparse(data["submitted_at"]),
        )


@dataclass
class ConnectedScoreboard:
    """A scoreboard device connected to the tournament room."""

    id: str
    device_name: str
    status: ScoreboardStatus = ScoreboardStatus.IDLE
    current_match_id: Optional[str] = None
    last_seen: datetime = field(default_factory=utc_now)

    @property
    def is_available(self) -> bool:
        return self.status is ScoreboardStatus.IDLE and self.current_match_id is None

    def release(self) -> None:
        self.status = ScoreboardStatus.IDLE
        self.current_match_id = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "device_name": self.device_name,
            "status": self.status.value,
            "current_match_id": self.current_match_id,
            "last_seen": self.last_seen.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConnectedScoreboard":
        return cls(
            id=data["id"],
            device_name=data.get("device_name", data["id"]),
            status=ScoreboardStatus(data.get("status", ScoreboardStatus.IDLE.value)),
            current_match_id=data.get("current_match_id"),
            last_seen=isoparse(data["last_seen"]),
        )
