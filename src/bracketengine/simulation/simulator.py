"""Random tournament simulator.

Plays a whole tournament through a :class:`TournamentManager` the way a room
of scoreboards would: idle devices take assignable matches, start them,
report random results, and the operator approves (or occasionally rejects)
each report.
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

import random
from dataclasses import dataclass, field
from typing import Optional

from bracketengine.controllers.tournament_manager import TournamentManager
from bracketengine.exceptions import (
    IllegalTransitionException,
    InvalidConfigurationException,
)
from bracketengine.models.enums import MatchStatus, TournamentType
from bracketengine.models.tournament.match import Match
from bracketengine.models.tournament.submission import PendingScoreSubmission
from bracketengine.models.tournament.tournament import Tournament
from bracketengine.models.tournament.tournament_config import StageConfig
from bracketengine.type_hints import PlayerList
from bracketengine.utils import setup_logger

logger = setup_logger(__name__)


@dataclass
class SimulationConfig:
    """Configuration for the tournament simulator."""

    tournament_type: TournamentType = TournamentType.SINGLE_ELIMINATION
    num_players: int = 8
    seed: Optional[int] = None
    shuffle: bool = False
    stage_config: StageConfig = field(default_factory=StageConfig)
    num_devices: int = 2
    reject_rate: float = 0.0
    max_score: int = 5
    max_steps: int = 10000

    def __post_init__(self) -> None:
        if not 0.0 <= self.reject_rate < 1.0:
            raise InvalidConfigurationException(
                f"Reject rate must be in [0, 1), got {self.reject_rate}"
            )
        if self.num_devices < 1:
            raise InvalidConfigurationException("At least one device is required")
        if self.max_score < 1:
            raise InvalidConfigurationException("Max score must be at least 1")


class TournamentSimulator:
    """Drives a tournament to completion with random results."""

    def __init__(self, config: SimulationConfig):
        self.config = config
        self.random = (
            random.Random(config.seed) if config.seed is not None else random.Random()
        )
        self.submissions = 0
        self.rejections = 0

    def create_players(self) -> PlayerList:
        return [f"Blader-{i + 1:03d}" for i in range(self.config.num_players)]

    def create_manager(self) -> TournamentManager:
        tournament = Tournament.create(
            name=f"Simulated {self.config.tournament_type.display_name}",
            players=self.create_players(),
            tournament_type=self.config.tournament_type,
            stage_config=self.config.stage_config,
            shuffle=self.config.shuffle,
            rng=self.random,
        )
        manager = TournamentManager(tournament)
        for i in range(self.config.num_devices):
            manager.register_device(f"scoreboard-{i + 1}", f"Scoreboard {i + 1}")
        return manager

    def simulate_submission(self, match: Match) -> PendingScoreSubmission:
        """Random result for a ready match, reported by its device."""
        winner = self.random.choice(match.present_players)
        winner_score = self.random.randint(1, self.config.max_score)
        loser_score = self.random.randint(0, winner_score - 1)
        if winner == match.player1:
            scores = (winner_score, loser_score)
        else:
            scores = (loser_score, winner_score)
        return PendingScoreSubmission(
            match_id=match.id,
            device_id=match.assigned_device_id or "",
            winner=winner,
            player1_final_score=scores[0],
            player2_final_score=scores[1],
        )

    def step(self, manager: TournamentManager) -> bool:
        """Advance every match by one lifecycle step.

        Returns:
            True if anything changed
        """
        progressed = False
        for device, match in zip(manager.available_devices, manager.assignable_matches):
            progressed |= bool(manager.assign_match(match.id, device.id))

        for match in list(manager.tournament.matches):
            if match.status is MatchStatus.ASSIGNED:
                progressed |= bool(manager.start_match(match.id))
            elif match.status is MatchStatus.IN_PROGRESS:
                self.submissions += 1
                progressed |= bool(
                    manager.receive_submission(self.simulate_submission(match))
                )
            elif match.status is MatchStatus.AWAITING_APPROVAL:
                if self.random.random() < self.config.reject_rate:
                    self.rejections += 1
                    progressed |= bool(manager.reject(match.id, "simulated rejection"))
                else:
                    progressed |= bool(manager.approve(match.id))
        return progressed

    def run(self, manager: Optional[TournamentManager] = None) -> TournamentManager:
        """Play until the tournament is complete.

        Raises:
            IllegalTransitionException: If the tournament stops making
                progress before it completes
        """
        manager = manager or self.create_manager()
        steps = 0
        while not manager.tournament.is_complete:
            if steps >= self.config.max_steps or not self.step(manager):
                raise IllegalTransitionException(
                    f"Simulation stalled after {steps} steps "
                    f"({manager.tournament.progress[0]} of "
                    f"{manager.tournament.progress[1]} matches complete)"
                )
            steps += 1

        logger.info(
            f"Simulated {manager.tournament.name}: winner {manager.tournament.winner}, "
            f"{self.submissions} submissions, {self.rejections} rejected"
        )
        return manager
