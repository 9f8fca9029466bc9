"""Standings ranking and qualifier selection."""

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

from typing import TYPE_CHECKING, List, Optional, Sequence, Union

from bracketengine.models.enums import TournamentStage, TournamentType
from bracketengine.models.tournament.standings import RoundRobinStanding, SwissStanding
from bracketengine.pairing import round_robin, swiss
from bracketengine.utils import setup_logger

if TYPE_CHECKING:
    from bracketengine.models.tournament.tournament import Tournament

logger = setup_logger(__name__)

Standing = Union[SwissStanding, RoundRobinStanding]


class TiebreakCalculator:
    """Ranks players within a stage.

    Swiss standings are ordered by points then Buchholz, round robin
    standings by wins then point differential. Ties keep roster order.
    """

    def calculate_buchholz(self, standings: Sequence[SwissStanding]) -> None:
        swiss.calculate_buchholz(standings)

    def ranked_standings(
        self, tournament: "Tournament", stage: Optional[TournamentStage] = None
    ) -> List[Standing]:
        """Ranked standings for a non-elimination stage.

        Args:
            tournament: Tournament to rank
            stage: Stage to rank; defaults to the main stage, group stages
                only rank their own roster

        Returns:
            Ranked standings, empty for elimination stages
        """
        stage = stage or TournamentStage.MAIN
        stage_format = tournament.format_for_stage(stage)

        if stage_format is TournamentType.SWISS:
            self.calculate_buchholz(tournament.swiss_standings)
            return list(swiss.rank_standings(tournament.swiss_standings))

        if stage_format is TournamentType.ROUND_ROBIN:
            roster = tournament.roster_for_stage(stage)
            standings = [
                s for s in tournament.round_robin_standings if s.player_name in roster
            ]
            return list(round_robin.rank_standings(standings))

        return []

    def ranked_players(
        self, tournament: "Tournament", stage: Optional[TournamentStage] = None
    ) -> List[str]:
        return [s.player_name for s in self.ranked_standings(tournament, stage)]

    def top_players(
        self,
        tournament: "Tournament",
        count: int,
        stage: Optional[TournamentStage] = None,
    ) -> List[str]:
        """Names of the ``count`` best players of a stage, best first."""
        qualifiers = self.ranked_players(tournament, stage)[:count]
        logger.debug(f"Top {count} of {stage or TournamentStage.MAIN}: {qualifiers}")
        return qualifiers
