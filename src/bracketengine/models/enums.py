"""Enumerations shared by the tournament models."""

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

from enum import Enum
from typing import List


class TournamentType(Enum):
    """Tournament formats."""

    SINGLE_ELIMINATION = "single"
    DOUBLE_ELIMINATION = "double"
    SWISS = "swiss"
    ROUND_ROBIN = "roundRobin"
    GROUP_ROUND_ROBIN = "groupRR"

    @property
    def display_name(self) -> str:
        return {
            TournamentType.SINGLE_ELIMINATION: "Single Elimination",
            TournamentType.DOUBLE_ELIMINATION: "Double Elimination",
            TournamentType.SWISS: "Swiss",
            TournamentType.ROUND_ROBIN: "Round Robin",
            TournamentType.GROUP_ROUND_ROBIN: "Group Round Robin",
        }[self]

    @property
    def is_elimination(self) -> bool:
        """Whether this format is an elimination bracket."""
        return self in (
            TournamentType.SINGLE_ELIMINATION,
            TournamentType.DOUBLE_ELIMINATION,
        )

    @property
    def valid_for_finals(self) -> bool:
        """Only elimination brackets can serve as a finals stage."""
        return self.is_elimination

    @property
    def requires_dynamic_pairing(self) -> bool:
        return self is TournamentType.SWISS


class TournamentStatus(Enum):
    NOT_STARTED = "notStarted"
    IN_PROGRESS = "inProgress"
    COMPLETE = "complete"


class MatchStatus(Enum):
    """Lifecycle of a single match.

    pending -> assigned -> inProgress -> awaitingApproval -> complete,
    with awaitingApproval -> assigned on rejection and assigned -> pending
    on unassignment.
    """

    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_PROGRESS = "inProgress"
    AWAITING_APPROVAL = "awaiting"
    COMPLETE = "complete"

    @property
    def accepts_submission(self) -> bool:
        return self in (MatchStatus.ASSIGNED, MatchStatus.IN_PROGRESS)


class TournamentStage(Enum):
    """Partition of matches within one tournament."""

    MAIN = "main"
    GROUP_A = "group1"
    GROUP_B = "group2"
    FINALS = "finals"

    @property
    def display_name(self) -> str:
        return {
            TournamentStage.MAIN: "Main",
            TournamentStage.GROUP_A: "Group A",
            TournamentStage.GROUP_B: "Group B",
            TournamentStage.FINALS: "Finals",
        }[self]


class BracketType(Enum):
    """Bracket side of a double elimination match."""

    WINNERS = "winners"
    LOSERS = "losers"
    GRAND_FINAL = "grandFinal"


class Slot(Enum):
    """One of the two player positions of a match."""

    PLAYER1 = "player1"
    PLAYER2 = "player2"

    @classmethod
    def for_index(cls, index: int) -> "Slot":
        """Slot fed by the match at ``index`` within its round."""
        return cls.PLAYER1 if index % 2 == 0 else cls.PLAYER2


class ScoreboardStatus(Enum):
    IDLE = "idle"
    MATCH_ASSIGNED = "assigned"
    SCORING = "scoring"
    AWAITING_APPROVAL = "awaiting"


# ========== Scoring configuration ==========


class Generation(Enum):
    """Rule set the external match scorer plays by."""

    X = "x"
    BURST = "burst"
    METAL_FIGHT = "mfb-zero-g"
    PLASTICS = "plastics-hms"

    @property
    def supports_own_finish(self) -> bool:
        return self is Generation.X

    @property
    def default_match_type(self) -> "MatchType":
        return MatchType.POINTS_4 if self is Generation.X else MatchType.POINTS_3


class MatchType(Enum):
    """Point target of a single game."""

    POINTS_3 = "3pts"
    POINTS_4 = "4pts"
    POINTS_5 = "5pts"
    POINTS_7 = "7pts"
    NO_LIMIT = "nolimit"

    @classmethod
    def available_for(cls, generation: Generation) -> List["MatchType"]:
        if generation is Generation.X:
            return [cls.POINTS_4, cls.POINTS_5, cls.POINTS_7, cls.NO_LIMIT]
        return [cls.POINTS_3, cls.POINTS_4, cls.POINTS_5, cls.NO_LIMIT]


class BestOf(Enum):
    NONE = "none"
    BEST_OF_3 = "bo3"
    BEST_OF_5 = "bo5"


class WinCondition(Enum):
    """Finish type recorded in a match history entry."""

    XTREME = "xtreme"
    BURST = "burst"
    OVER = "over"
    SPIN = "spin"
    PENALTY = "penalty"
    OWN_FINISH = "own"
