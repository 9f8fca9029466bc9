"""Round and stage progression for tournaments.

Elimination brackets are generated whole, so progression only concerns
dynamically paired Swiss rounds and the finals stage that follows a Swiss,
round robin or group round robin stage.
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

from typing import TYPE_CHECKING, List

from bracketengine.exceptions import NoPairingAvailableException
from bracketengine.models.enums import TournamentStage, TournamentType
from bracketengine.models.tournament.match import Match
from bracketengine.pairing import round_robin, swiss
from bracketengine.utils import setup_logger

from .tiebreak_calculator import TiebreakCalculator

if TYPE_CHECKING:
    from bracketengine.models.tournament.tournament import Tournament

logger = setup_logger(__name__)


class RoundManager:
    """Manages round progression and stage transitions.

    This class is responsible for:
    - Pairing the next Swiss round once the current one is resolved
    - Seeding the finals of a multi-stage Swiss or round robin event
    - Seeding the group round robin finals from both groups
    """

    def __init__(self, tiebreak_calculator: TiebreakCalculator):
        self.tiebreak_calculator = tiebreak_calculator

    def can_advance(self, tournament: "Tournament") -> bool:
        """Whether the current state allows another round or stage."""
        if tournament.current_stage is TournamentStage.FINALS:
            return False

        tournament_type = tournament.tournament_type
        if tournament_type is TournamentType.SWISS:
            if not tournament.is_current_swiss_round_complete:
                return False
            return (
                tournament.current_swiss_round < tournament.total_swiss_rounds
                or tournament.stage_config.is_multi_stage
            )
        if tournament_type is TournamentType.ROUND_ROBIN:
            return tournament.stage_config.is_multi_stage and (
                tournament.is_stage_complete(TournamentStage.MAIN)
            )
        if tournament_type is TournamentType.GROUP_ROUND_ROBIN:
            return tournament.are_groups_complete
        return False

    def advance(self, tournament: "Tournament") -> List[Match]:
        """Generate whatever the tournament is ready for.

        Returns:
            The newly added matches, empty if nothing was generated
        """
        if not self.can_advance(tournament):
            return []

        if tournament.tournament_type is TournamentType.GROUP_ROUND_ROBIN:
            return self.create_group_finals(tournament)
        if (
            tournament.tournament_type.requires_dynamic_pairing
            and tournament.current_swiss_round < tournament.total_swiss_rounds
        ):
            return self.create_next_swiss_round(tournament)
        return self.create_multi_stage_finals(tournament)

    def create_next_swiss_round(self, tournament: "Tournament") -> List[Match]:
        round_number = tournament.current_swiss_round + 1
        self.tiebreak_calculator.calculate_buchholz(tournament.swiss_standings)
        try:
            matches = swiss.generate_round(tournament.swiss_standings, round_number)
        except NoPairingAvailableException as e:
            logger.error(f"Cannot pair Swiss round {round_number}: {e}")
            return []

        tournament.current_swiss_round = round_number
        tournament.add_matches(matches)
        index = tournament.swiss_standings_index()
        for match in matches:
            if match.is_complete:
                swiss.record_result(index, match)
        self.tiebreak_calculator.calculate_buchholz(tournament.swiss_standings)

        logger.info(
            f"Swiss round {round_number} of {tournament.total_swiss_rounds} paired"
        )
        return matches

    def create_multi_stage_finals(self, tournament: "Tournament") -> List[Match]:
        stage_config = tournament.stage_config
        qualifiers = self.tiebreak_calculator.top_players(
            tournament, stage_config.finals_size
        )
        matches = round_robin.generate_finals(qualifiers, stage_config.finals_type)
        self._enter_finals(tournament, matches)
        return matches

    def create_group_finals(self, tournament: "Tournament") -> List[Match]:
        stage_config = tournament.stage_config
        ranked = self.tiebreak_calculator.ranked_players
        matches = round_robin.generate_group_finals(
            ranked(tournament, TournamentStage.GROUP_A),
            ranked(tournament, TournamentStage.GROUP_B),
            stage_config.finals_size,
            stage_config.finals_type,
        )
        self._enter_finals(tournament, matches)
        return matches

    def _enter_finals(self, tournament: "Tournament", matches: List[Match]) -> None:
        tournament.current_stage = TournamentStage.FINALS
        tournament.add_matches(matches)
        finalists = sorted({p for m in matches for p in m.present_players})
        logger.info(
            f"Finals stage started with {len(finalists)} players: "
            f"{', '.join(finalists)}"
        )
