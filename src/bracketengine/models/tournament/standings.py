"""Per-player standings for Swiss and round robin formats."""

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
from typing import Any, Dict, List

from bracketengine.constants import BYE, DRAW_POINTS, WIN_POINTS


@dataclass
class SwissStanding:
    """Swiss record of one player.

    Attributes
    ----------
    player_name : str
        Player the record belongs to.
    wins, losses, draws : int
        Results so far; a bye counts as a win.
    opponents_played : list of str
        Opponents in round order, ``BYE`` for a bye round.
    buchholz_score : float
        Tiebreak: sum of the current points of every opponent faced.
    """

    player_name: str
    wins: int = 0
    losses: int = 0
    draws: int = 0
    opponents_played: List[str] = field(default_factory=list)
    buchholz_score: float = 0.0

    @property
    def points(self) -> float:
        return self.wins * WIN_POINTS + self.draws * DRAW_POINTS

    @property
    def has_received_bye(self) -> bool:
        return BYE in self.opponents_played

    def has_played(self, opponent: str) -> bool:
        return opponent in self.opponents_played

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_name": self.player_name,
            "wins": self.wins,
            "losses": self.losses,
            "draws": self.draws,
            "opponents_played": list(self.opponents_played),
            "buchholz_score": self.buchholz_score,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SwissStanding":
        return cls(
            player_name=data["player_name"],
            wins=data.get("wins", 0),
            losses=data.get("losses", 0),
            draws=data.get("draws", 0),
            opponents_played=list(data.get("opponents_played", [])),
            buchholz_score=data.get("buchholz_score", 0.0),
        )


@dataclass
class RoundRobinStanding:
    """Round robin record of one player."""

    player_name: str
    wins: int = 0
    losses: int = 0
    points_for: int = 0
    points_against: int = 0

    @property
    def point_differential(self) -> int:
        return self.points_for - self.points_against

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_name": self.player_name,
            "wins": self.wins,
            "losses": self.losses,
            "points_for": self.points_for,
            "points_against": self.points_against,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RoundRobinStanding":
        return cls(
            player_name=data["player_name"],
            wins=data.get("wins", 0),
            losses=data.get("losses", 0),
            points_for=data.get("points_for", 0),
            points_against=data.get("points_against", 0),
        )
