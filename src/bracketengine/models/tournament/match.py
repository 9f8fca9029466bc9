"""Match data classes."""

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

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from dateutil.parser import isoparse

from bracketengine.models.enums import (
    BracketType,
    MatchStatus,
    Slot,
    TournamentStage,
    WinCondition,
)


def new_id() -> str:
    """Return a fresh match/tournament identifier."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _optional_slot(value: Optional[str]) -> Optional[Slot]:
    return Slot(value) if value is not None else None


@dataclass
class HistoryEntry:
    """A single scoring event reported by the external match scorer.

    Attributes
    ----------
    player : Slot
        Slot of the player the event refers to.
    condition : WinCondition
        Finish type that produced the points.
    score1_after, score2_after : int
        Running scores after the event.
    set1_wins_after, set2_wins_after : int
        Running set wins after the event.
    timestamp : datetime
        When the event was recorded.
    is_warning, is_penalty, is_game_divider : bool
        Event flags.
    game_number : int
        Game (set) the event belongs to.
    """

    player: Slot
    condition: WinCondition
    score1_after: int
    score2_after: int
    set1_wins_after: int = 0
    set2_wins_after: int = 0
    timestamp: datetime = field(default_factory=utc_now)
    is_warning: bool = False
    is_penalty: bool = False
    is_game_divider: bool = False
    game_number: int = 1
    id: str = field(default_factory=new_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "player": self.player.value,
            "condition": self.condition.value,
            "score1_after": self.score1_after,
            "score2_after": self.score2_after,
            "set1_wins_after": self.set1_wins_after,
            "set2_wins_after": self.set2_wins_after,
            "timestamp": self.timestamp.isoformat(),
            "is_warning": self.is_warning,
            "is_penalty": self.is_penalty,
            "is_game_divider": self.is_game_divider,
            "game_number": self.game_number,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HistoryEntry":
        return cls(
            id=data["id"],
            player=Slot(data["player"]),
            condition=WinCondition(data["condition"]),
            score1_after=data["score1_after"],
            score2_after=data["score2_after"],
            set1_wins_after=data.get("set1_wins_after", 0),
            set2_wins_after=data.get("set2_wins_after", 0),
            timestamp=isoparse(data["timestamp"]),
            is_warning=data.get("is_warning", False),
            is_penalty=data.get("is_penalty", False),
            is_game_divider=data.get("is_game_divider", False),
            game_number=data.get("game_number", 1),
        )


@dataclass
class Match:
    """A single match within a tournament.

    Matches reference each other only by identifier: ``next_match_id`` is
    where the winner advances, ``loser_next_match_id`` where the loser of a
    winners-bracket match drops to. Both come with the slot they fill.

    Attributes
    ----------
    round_number : int
        Round number (1-indexed) within the match's bracket/stage.
    match_number : int
        Position within the round (0-indexed).
    player1, player2 : str or None
        Player names; None until known.
    status : MatchStatus
        Lifecycle state.
    winner : str or None
        Winner name once complete. A completed match with no players at
        all is void and has no winner.
    """

    round_number: int
    match_number: int
    player1: Optional[str] = None
    player2: Optional[str] = None
    id: str = field(default_factory=new_id)
    player1_score: int = 0
    player2_score: int = 0
    player1_set_wins: int = 0
    player2_set_wins: int = 0
    status: MatchStatus = MatchStatus.PENDING
    assigned_device_id: Optional[str] = None
    winner: Optional[str] = None
    history: List[HistoryEntry] = field(default_factory=list)
    next_match_id: Optional[str] = None
    next_match_slot: Optional[Slot] = None
    stage: TournamentStage = TournamentStage.MAIN
    bracket_type: BracketType = BracketType.WINNERS
    is_grand_final: bool = False
    is_grand_final_reset: bool = False
    loser_next_match_id: Optional[str] = None
    loser_next_match_slot: Optional[Slot] = None

    # ========== Slots ==========

    def player_in(self, slot: Slot) -> Optional[str]:
        return self.player1 if slot is Slot.PLAYER1 else self.player2

    def set_player(self, slot: Slot, name: Optional[str]) -> None:
        if slot is Slot.PLAYER1:
            self.player1 = name
        else:
            self.player2 = name

    @property
    def players(self) -> Tuple[Optional[str], Optional[str]]:
        return (self.player1, self.player2)

    @property
    def present_players(self) -> List[str]:
        return [p for p in self.players if p is not None]

    # ========== State ==========

    @property
    def is_ready(self) -> bool:
        """Both players are known."""
        return self.player1 is not None and self.player2 is not None

    @property
    def is_bye(self) -> bool:
        """Exactly one player and no opponent."""
        return len(self.present_players) == 1

    @property
    def is_complete(self) -> bool:
        return self.status is MatchStatus.COMPLETE

    @property
    def is_void(self) -> bool:
        """Completed without any participant."""
        return self.is_complete and not self.present_players

    @property
    def loser(self) -> Optional[str]:
        """The loser of a completed match; None for byes and void matches."""
        if self.winner is None:
            return None
        if self.player1 == self.winner:
            return self.player2
        return self.player1

    @property
    def display_name(self) -> str:
        return f"R{self.round_number} M{self.match_number + 1}"

    @property
    def score_display(self) -> str:
        return f"{self.player1_score} - {self.player2_score}"

    def resolve_as_bye(self) -> None:
        """Complete the match without play, advancing the sole player if any."""
        present = self.present_players
        self.winner = present[0] if len(present) == 1 else None
        self.status = MatchStatus.COMPLETE
        self.assigned_device_id = None

    # ========== Serialization ==========

    def to_dict(self) -> Dict[str, Any]:
        """Serialize match to dictionary."""
        return {
            "id": self.id,
            "round_number": self.round_number,
            "match_number": self.match_number,
            "player1": self.player1,
            "player2": self.player2,
            "player1_score": self.player1_score,
            "player2_score": self.player2_score,
            "player1_set_wins": self.player1_set_wins,
            "player2_set_wins": self.player2_set_wins,
            "status": self.status.value,
            "assigned_device_id": self.assigned_device_id,
            "winner": self.winner,
            "history": [entry.to_dict() for entry in self.history],
            "next_match_id": self.next_match_id,
            "next_match_slot": self.next_match_slot.value
            if self.next_match_slot
            else None,
            "stage": self.stage.value,
            "bracket_type": self.bracket_type.value,
            "is_grand_final": self.is_grand_final,
            "is_grand_final_reset": self.is_grand_final_reset,
            "loser_next_match_id": self.loser_next_match_id,
            "loser_next_match_slot": self.loser_next_match_slot.value
            if self.loser_next_match_slot
            else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Match":
        """Deserialize match from dictionary."""
        return cls(
            id=data["id"],
            round_number=data["round_number"],
            match_number=data["match_number"],
            player1=data.get("player1"),
            player2=data.get("player2"),
            player1_score=data.get("player1_score", 0),
            player2_score=data.get("player2_score", 0),
            player1_set_wins=data.get("player1_set_wins", 0),
            player2_set_wins=data.get("player2_set_wins", 0),
            status=MatchStatus(data.get("status", MatchStatus.PENDING.value)),
            assigned_device_id=data.get("assigned_device_id"),
            winner=data.get("winner"),
            history=[HistoryEntry.from_dict(h) for h in data.get("history", [])],
            next_match_id=data.get("next_match_id"),
            next_match_slot=_optional_slot(data.get("next_match_slot")),
            stage=TournamentStage(data.get("stage", TournamentStage.MAIN.value)),
            bracket_type=BracketType(
                data.get("bracket_type", BracketType.WINNERS.value)
            ),
            is_grand_final=data.get("is_grand_final", False),
            is_grand_final_reset=data.get("is_grand_final_reset", False),
            loser_next_match_id=data.get("loser_next_match_id"),
            loser_next_match_slot=_optional_slot(data.get("loser_next_match_slot")),
        )
