"""Result recording and validation for tournaments.

This module applies authoritative match results and pushes their
consequences through the bracket or standings of the match's stage.
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

from typing import TYPE_CHECKING, List, Optional

from bracketengine.exceptions import (
    IllegalTransitionException,
    InvalidResultException,
    MatchNotReadyException,
)
from bracketengine.models.enums import MatchStatus, TournamentType
from bracketengine.models.tournament.match import HistoryEntry, Match
from bracketengine.pairing import round_robin, swiss
from bracketengine.pairing.advancement import (
    propagate_result,
    resolve_grand_final,
    settle_walkovers,
)
from bracketengine.utils import setup_logger

if TYPE_CHECKING:
    from bracketengine.models.tournament.tournament import Tournament

logger = setup_logger(__name__)


class ResultRecorder:
    """Handles recording and validating match results.

    This class is responsible for:
    - Rejecting results that do not fit the match
    - Completing the match with its final score line
    - Advancing winners and losers through elimination brackets
    - Updating Swiss and round robin standings
    """

    def validate_result(
        self,
        match: Match,
        winner: str,
        player1_score: int = 0,
        player2_score: int = 0,
        player1_set_wins: int = 0,
        player2_set_wins: int = 0,
    ) -> None:
        """Check a result against the match without changing anything.

        Raises:
            IllegalTransitionException: If the match is already complete
            MatchNotReadyException: If the match is missing a player
            InvalidResultException: If the winner or scores are invalid
        """
        if match.is_complete:
            raise IllegalTransitionException(
                f"Match {match.display_name} is already complete"
            )
        if not match.is_ready:
            raise MatchNotReadyException(
                f"Match {match.display_name} does not have both players yet"
            )
        if winner not in match.players:
            raise InvalidResultException(
                f"Winner '{winner}' is not playing in {match.display_name}"
            )
        if min(player1_score, player2_score, player1_set_wins, player2_set_wins) < 0:
            raise InvalidResultException("Scores and set wins cannot be negative")

    def record_result(
        self,
        tournament: "Tournament",
        match_id: str,
        winner: str,
        player1_score: int = 0,
        player2_score: int = 0,
        player1_set_wins: int = 0,
        player2_set_wins: int = 0,
        history: Optional[List[HistoryEntry]] = None,
    ) -> Match:
        """Complete a match and propagate its result.

        Args:
            tournament: Tournament owning the match
            match_id: Match to complete
            winner: Winner name, one of the match's players
            player1_score, player2_score: Final scores
            player1_set_wins, player2_set_wins: Final set wins
            history: Ordered scoring events

        Returns:
            The completed match

        Raises:
            MatchNotFoundException: If the match does not exist
            IllegalTransitionException: If the result cannot be applied
            InvalidResultException: If the result is invalid
        """
        match = tournament.get_match(match_id)
        self.validate_result(
            match,
            winner,
            player1_score,
            player2_score,
            player1_set_wins,
            player2_set_wins,
        )

        match.player1_score = player1_score
        match.player2_score = player2_score
        match.player1_set_wins = player1_set_wins
        match.player2_set_wins = player2_set_wins
        match.history = list(history or [])
        match.winner = winner
        match.status = MatchStatus.COMPLETE
        match.assigned_device_id = None
        logger.info(
            f"Recorded {match.display_name} ({match.stage.value}): {match.player1} "
            f"{match.score_display} {match.player2}, winner {winner}"
        )

        self._apply_consequences(tournament, match)
        return match

    def _apply_consequences(self, tournament: "Tournament", match: Match) -> None:
        stage_format = tournament.format_for_stage(match.stage)

        if stage_format is TournamentType.SWISS:
            swiss.record_result(tournament.swiss_standings_index(), match)
            swiss.calculate_buchholz(tournament.swiss_standings)
        elif stage_format is TournamentType.ROUND_ROBIN:
            round_robin.record_result(tournament.round_robin_standings_index(), match)
        else:
            self._advance_bracket(tournament, match)

    def _advance_bracket(self, tournament: "Tournament", match: Match) -> None:
        by_id = tournament.match_index()
        if match.is_grand_final:
            resolve_grand_final(match, by_id)
        else:
            propagate_result(match, by_id)

        resolved = settle_walkovers(tournament.matches_in_stage(match.stage))
        if resolved:
            logger.debug(
                f"{len(resolved)} matches resolved without play after "
                f"{match.display_name}"
            )
