"""Tournament configuration data classes."""

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
from typing import Any, Dict, Optional

from bracketengine.constants import DEFAULT_FINALS_SIZE
from bracketengine.models.enums import BestOf, Generation, MatchType, TournamentType


@dataclass
class TournamentConfig:
    """Point-scoring configuration handed to the external match scorer.

    Attributes
    ----------
    generation : Generation
        Rule set being played.
    match_type : MatchType
        Point target of a game.
    best_of : BestOf
        Series length.
    own_finish_enabled : bool
        Own-finish scoring; only honoured by generations that support it.
    """

    generation: Generation = Generation.X
    match_type: MatchType = MatchType.POINTS_4
    best_of: BestOf = BestOf.NONE
    own_finish_enabled: bool = False

    def __post_init__(self) -> None:
        # Own finish only exists in generations that define it
        if not self.generation.supports_own_finish:
            self.own_finish_enabled = False

    def to_dict(self) -> Dict[str, Any]:
        """Serialize configuration to dictionary."""
        return {
            "generation": self.generation.value,
            "match_type": self.match_type.value,
            "best_of": self.best_of.value,
            "own_finish_enabled": self.own_finish_enabled,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TournamentConfig":
        """Deserialize configuration from dictionary."""
        return cls(
            generation=Generation(data.get("generation", Generation.X.value)),
            match_type=MatchType(data.get("match_type", MatchType.POINTS_4.value)),
            best_of=BestOf(data.get("best_of", BestOf.NONE.value)),
            own_finish_enabled=data.get("own_finish_enabled", False),
        )


@dataclass
class StageConfig:
    """Multi-stage configuration.

    Attributes
    ----------
    is_multi_stage : bool
        Swiss / round robin events feed a finals bracket when set. Group
        round robin always has a finals stage.
    finals_type : TournamentType
        Single or double elimination.
    finals_size : int
        Number of finalists.
    finals_match_type, finals_best_of : optional
        Finals-only scoring overrides; None means the tournament default.
    """

    is_multi_stage: bool = False
    finals_type: TournamentType = TournamentType.SINGLE_ELIMINATION
    finals_size: int = DEFAULT_FINALS_SIZE
    finals_match_type: Optional[MatchType] = None
    finals_best_of: Optional[BestOf] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_multi_stage": self.is_multi_stage,
            "finals_type": self.finals_type.value,
            "finals_size": self.finals_size,
            "finals_match_type": self.finals_match_type.value
            if self.finals_match_type
            else None,
            "finals_best_of": self.finals_best_of.value
            if self.finals_best_of
            else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StageConfig":
        match_type = data.get("finals_match_type")
        best_of = data.get("finals_best_of")
        return cls(
            is_multi_stage=data.get("is_multi_stage", False),
            finals_type=TournamentType(
                data.get("finals_type", TournamentType.SINGLE_ELIMINATION.value)
            ),
            finals_size=data.get("finals_size", DEFAULT_FINALS_SIZE),
            finals_match_type=MatchType(match_type) if match_type else None,
            finals_best_of=BestOf(best_of) if best_of else None,
        )


@dataclass(frozen=True)
class MatchConfiguration:
    """Effective scoring setup for one match, as sent to a scoreboard."""

    generation: Generation
    match_type: MatchType
    best_of: BestOf
    own_finish_enabled: bool
    player1_name: str
    player2_name: str
