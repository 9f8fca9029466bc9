"""Main Tournament class - orchestrates all tournament operations.

The tournament owns every match of every stage in a flat arena keyed by
match id. Generators produce whole stages; the specialized managers apply
results and decide when the next round or stage is due.
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
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from dateutil.parser import isoparse

from bracketengine.constants import (
    MIN_GROUP_ROUND_ROBIN_PLAYERS,
    MIN_PLAYERS,
    TBD_PLAYER,
)
from bracketengine.controllers.tournament import (
    ResultRecorder,
    RoundManager,
    TiebreakCalculator,
)
from bracketengine.exceptions import (
    IllegalTransitionException,
    MatchNotFoundException,
    MatchNotReadyException,
)
from bracketengine.models.enums import (
    BracketType,
    MatchStatus,
    TournamentStage,
    TournamentStatus,
    TournamentType,
)
from bracketengine.pairing import (
    double_elimination,
    round_robin,
    single_elimination,
    swiss,
)
from bracketengine.utils import setup_logger
from bracketengine.utils.validation import (
    generate_room_code,
    validate_player_names,
    validate_room_code_strict,
    validate_scoring_config,
    validate_stage_config,
)

from .match import HistoryEntry, Match, new_id, utc_now
from .standings import RoundRobinStanding, SwissStanding
from .tournament_config import MatchConfiguration, StageConfig, TournamentConfig

logger = setup_logger(__name__)

GROUP_STAGES = (TournamentStage.GROUP_A, TournamentStage.GROUP_B)


class Tournament:
    """Main tournament aggregate.

    This class coordinates all tournament operations through specialized managers:
    - ResultRecorder: applies results and propagates them
    - RoundManager: pairs Swiss rounds and creates finals stages
    - TiebreakCalculator: ranks standings

    Use :meth:`create` to build a tournament with its first stage generated;
    the constructor alone produces an empty shell (used when loading).
    """

    def __init__(
        self,
        name: str,
        tournament_type: TournamentType,
        players: Sequence[str],
        config: Optional[TournamentConfig] = None,
        stage_config: Optional[StageConfig] = None,
        room_code: str = "",
        tournament_id: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> None:
        self.id = tournament_id or new_id()
        self.name = name
        self.room_code = room_code
        self.tournament_type = tournament_type
        self.config = config or TournamentConfig()
        self.stage_config = stage_config or StageConfig()
        self.players: List[str] = list(players)
        self.created_at = created_at or utc_now()

        self.status = TournamentStatus.NOT_STARTED
        self.current_stage = TournamentStage.MAIN
        self.matches: List[Match] = []
        self.group_a_players: List[str] = []
        self.group_b_players: List[str] = []
        self.swiss_standings: List[SwissStanding] = []
        self.current_swiss_round = 1
        self.round_robin_standings: List[RoundRobinStanding] = []

        # Specialized managers
        self.tiebreak_calculator = TiebreakCalculator()
        self.round_manager = RoundManager(self.tiebreak_calculator)
        self.result_recorder = ResultRecorder()

    # ========== Construction ==========

    @classmethod
    def create(
        cls,
        name: str,
        players: Sequence[str],
        tournament_type: TournamentType = TournamentType.SINGLE_ELIMINATION,
        config: Optional[TournamentConfig] = None,
        stage_config: Optional[StageConfig] = None,
        room_code: Optional[str] = None,
        shuffle: bool = False,
        rng: Optional[random.Random] = None,
    ) -> "Tournament":
        """Validate the setup and generate the first stage.

        Args:
            name: Tournament name
            players: Player names in seed order
            tournament_type: Format of the main stage
            config: Scoring configuration
            stage_config: Finals configuration (group round robin and
                multi-stage Swiss / round robin)
            room_code: Six-digit room code; generated when omitted
            shuffle: Randomize seeding / group assignment
            rng: Source of randomness

        Raises:
            InvalidInputException: If any part of the setup is invalid;
                nothing is created in that case
        """
        config = config or TournamentConfig()
        stage_config = stage_config or StageConfig()
        validate_scoring_config(config, stage_config)
        minimum = (
            MIN_GROUP_ROUND_ROBIN_PLAYERS
            if tournament_type is TournamentType.GROUP_ROUND_ROBIN
            else MIN_PLAYERS
        )
        names = validate_player_names(players, minimum)
        validate_stage_config(tournament_type, stage_config, len(names))
        if room_code is None:
            room_code = generate_room_code(rng)
        else:
            room_code = validate_room_code_strict(room_code)

        tournament = cls(
            name=name.strip() or "Tournament",
            tournament_type=tournament_type,
            players=names,
            config=config,
            stage_config=stage_config,
            room_code=room_code,
        )
        tournament._generate_main_stage(shuffle, rng)
        logger.info(
            f"Created {tournament_type.display_name} tournament '{tournament.name}' "
            f"with {len(names)} players and {len(tournament.matches)} matches"
        )
        return tournament

    def _generate_main_stage(self, shuffle: bool, rng: Optional[random.Random]) -> None:
        tournament_type = self.tournament_type

        if tournament_type is TournamentType.SINGLE_ELIMINATION:
            matches = single_elimination.generate_bracket(self.players, shuffle, rng)
        elif tournament_type is TournamentType.DOUBLE_ELIMINATION:
            matches = double_elimination.generate_bracket(self.players, shuffle, rng)
        elif tournament_type is TournamentType.SWISS:
            matches = swiss.generate_first_round(self.players, shuffle, rng)
            self.swiss_standings = swiss.initial_standings(self.players)
            index = self.swiss_standings_index()
            for match in matches:
                if match.is_complete:
                    swiss.record_result(index, match)
            swiss.calculate_buchholz(self.swiss_standings)
        elif tournament_type is TournamentType.ROUND_ROBIN:
            matches = round_robin.generate_schedule(self.players, shuffle, rng)
            self.round_robin_standings = round_robin.initial_standings(self.players)
        else:
            group_a, group_b, matches = round_robin.generate_groups(
                self.players, shuffle, rng
            )
            self.group_a_players = group_a
            self.group_b_players = group_b
            self.round_robin_standings = round_robin.initial_standings(
                group_a + group_b
            )

        self.matches = matches

    # ========== Lookup ==========

    def match_index(self) -> Dict[str, Match]:
        return {match.id: match for match in self.matches}

    def find_match(self, match_id: str) -> Optional[Match]:
        return next((m for m in self.matches if m.id == match_id), None)

    def get_match(self, match_id: str) -> Match:
        """Get a match by id.

        Raises:
            MatchNotFoundException: If no match has this id
        """
        match = self.find_match(match_id)
        if match is None:
            raise MatchNotFoundException(f"Match {match_id} not found")
        return match

    def add_matches(self, matches: Sequence[Match]) -> None:
        self.matches.extend(matches)

    def swiss_standings_index(self) -> Dict[str, SwissStanding]:
        return {s.player_name: s for s in self.swiss_standings}

    def round_robin_standings_index(self) -> Dict[str, RoundRobinStanding]:
        return {s.player_name: s for s in self.round_robin_standings}

    # ========== Stages ==========

    @property
    def has_finals(self) -> bool:
        return (
            self.tournament_type is TournamentType.GROUP_ROUND_ROBIN
            or self.stage_config.is_multi_stage
        )

    @property
    def is_in_finals(self) -> bool:
        return self.current_stage is TournamentStage.FINALS

    def format_for_stage(self, stage: TournamentStage) -> TournamentType:
        """The format that governs matches of ``stage``."""
        if stage is TournamentStage.FINALS:
            return self.stage_config.finals_type
        if stage in GROUP_STAGES:
            return TournamentType.ROUND_ROBIN
        return self.tournament_type

    def roster_for_stage(self, stage: TournamentStage) -> List[str]:
        if stage is TournamentStage.GROUP_A:
            return list(self.group_a_players)
        if stage is TournamentStage.GROUP_B:
            return list(self.group_b_players)
        if stage is TournamentStage.FINALS:
            finals = self.matches_in_stage(stage)
            return sorted({p for m in finals for p in m.present_players})
        return list(self.players)

    def matches_in_stage(self, stage: TournamentStage) -> List[Match]:
        return [m for m in self.matches if m.stage is stage]

    def is_stage_complete(self, stage: TournamentStage) -> bool:
        stage_matches = self.matches_in_stage(stage)
        return bool(stage_matches) and all(m.is_complete for m in stage_matches)

    @property
    def are_groups_complete(self) -> bool:
        if self.tournament_type is not TournamentType.GROUP_ROUND_ROBIN:
            return False
        return all(self.is_stage_complete(stage) for stage in GROUP_STAGES)

    @property
    def total_swiss_rounds(self) -> int:
        return swiss.number_of_rounds(len(self.players))

    @property
    def is_current_swiss_round_complete(self) -> bool:
        if self.tournament_type is not TournamentType.SWISS:
            return False
        round_matches = self.matches_in_round(
            self.current_swiss_round, stage=TournamentStage.MAIN
        )
        return bool(round_matches) and all(m.is_complete for m in round_matches)

    # ========== Queries ==========

    def matches_in_round(
        self,
        round_number: int,
        stage: Optional[TournamentStage] = None,
        bracket_type: Optional[BracketType] = None,
    ) -> List[Match]:
        """Matches of one round ordered by match number."""
        selected = [
            m
            for m in self.matches
            if m.round_number == round_number
            and (stage is None or m.stage is stage)
            and (bracket_type is None or m.bracket_type is bracket_type)
        ]
        return sorted(selected, key=lambda m: m.match_number)

    @property
    def current_round(self) -> int:
        """Lowest round of the current stage that still has unfinished matches."""
        stage_matches = self.matches_in_stage(self.current_stage)
        if not stage_matches:
            return 0
        open_rounds = [m.round_number for m in stage_matches if not m.is_complete]
        if open_rounds:
            return min(open_rounds)
        return max(m.round_number for m in stage_matches)

    @property
    def progress(self) -> Tuple[int, int]:
        """(completed matches, total matches)."""
        return sum(1 for m in self.matches if m.is_complete), len(self.matches)

    @property
    def is_complete(self) -> bool:
        return self.status is TournamentStatus.COMPLETE

    @property
    def winner(self) -> Optional[str]:
        """The champion once the tournament is complete."""
        if not self.is_complete:
            return None

        stage = TournamentStage.FINALS if self.has_finals else TournamentStage.MAIN
        stage_format = self.format_for_stage(stage)
        stage_matches = self.matches_in_stage(stage)

        if stage_format is TournamentType.DOUBLE_ELIMINATION:
            reset = next((m for m in stage_matches if m.is_grand_final_reset), None)
            return reset.winner if reset else None
        if stage_format is TournamentType.SINGLE_ELIMINATION:
            final = max(stage_matches, key=lambda m: m.round_number, default=None)
            return final.winner if final else None

        ranked = self.tiebreak_calculator.ranked_players(self, stage)
        return ranked[0] if ranked else None

    def standings(self, stage: Optional[TournamentStage] = None) -> List[Any]:
        """Ranked standings of a Swiss or round robin stage."""
        return self.tiebreak_calculator.ranked_standings(self, stage)

    def group_standings(self, stage: TournamentStage) -> List[RoundRobinStanding]:
        if stage not in GROUP_STAGES:
            return []
        return self.tiebreak_calculator.ranked_standings(self, stage)

    def assignable_matches(self) -> List[Match]:
        """Pending, fully populated matches not held by any device."""
        return [
            m
            for m in self.matches
            if m.status is MatchStatus.PENDING
            and m.is_ready
            and m.assigned_device_id is None
        ]

    def match_configuration(self, match_id: str) -> MatchConfiguration:
        """Effective scoring setup of a match.

        Finals matches use the finals overrides when configured; generation
        and own finish are shared by every stage.
        """
        match = self.get_match(match_id)
        is_finals = match.stage is TournamentStage.FINALS
        match_type = self.config.match_type
        best_of = self.config.best_of
        if is_finals and self.stage_config.finals_match_type is not None:
            match_type = self.stage_config.finals_match_type
        if is_finals and self.stage_config.finals_best_of is not None:
            best_of = self.stage_config.finals_best_of

        return MatchConfiguration(
            generation=self.config.generation,
            match_type=match_type,
            best_of=best_of,
            own_finish_enabled=self.config.own_finish_enabled,
            player1_name=match.player1 or TBD_PLAYER,
            player2_name=match.player2 or TBD_PLAYER,
        )

    # ========== Match Lifecycle ==========

    def _mark_started(self) -> None:
        if self.status is TournamentStatus.NOT_STARTED:
            self.status = TournamentStatus.IN_PROGRESS
            logger.info(f"Tournament '{self.name}' started")

    def assign_match(self, match_id: str, device_id: str) -> Match:
        """pending -> assigned.

        Raises:
            MatchNotFoundException: If the match does not exist
            IllegalTransitionException: If the match is not pending
            MatchNotReadyException: If a player slot is still empty
        """
        match = self.get_match(match_id)
        if match.status is not MatchStatus.PENDING or match.assigned_device_id:
            raise IllegalTransitionException(
                f"Match {match.display_name} is {match.status.value}, not pending"
            )
        if not match.is_ready:
            raise MatchNotReadyException(
                f"Match {match.display_name} does not have both players yet"
            )
        match.status = MatchStatus.ASSIGNED
        match.assigned_device_id = device_id
        self._mark_started()
        return match

    def start_match(self, match_id: str) -> Match:
        """assigned -> in progress."""
        match = self.get_match(match_id)
        if match.status is not MatchStatus.ASSIGNED:
            raise IllegalTransitionException(
                f"Match {match.display_name} is {match.status.value}, not assigned"
            )
        match.status = MatchStatus.IN_PROGRESS
        return match

    def unassign_match(self, match_id: str) -> Match:
        """assigned / in progress -> pending."""
        match = self.get_match(match_id)
        if match.status not in (MatchStatus.ASSIGNED, MatchStatus.IN_PROGRESS):
            raise IllegalTransitionException(
                f"Match {match.display_name} is {match.status.value} and cannot be "
                "unassigned"
            )
        match.status = MatchStatus.PENDING
        match.assigned_device_id = None
        return match

    def mark_awaiting_approval(self, match_id: str) -> Match:
        """assigned / in progress -> awaiting approval."""
        match = self.get_match(match_id)
        if not match.status.accepts_submission:
            raise IllegalTransitionException(
                f"Match {match.display_name} is {match.status.value} and cannot "
                "accept a score"
            )
        match.status = MatchStatus.AWAITING_APPROVAL
        return match

    def reopen_match(self, match_id: str) -> Match:
        """awaiting approval -> assigned, after a rejected score."""
        match = self.get_match(match_id)
        if match.status is not MatchStatus.AWAITING_APPROVAL:
            raise IllegalTransitionException(
                f"Match {match.display_name} is {match.status.value}, not awaiting "
                "approval"
            )
        match.status = MatchStatus.ASSIGNED
        return match

    def apply_result(
        self,
        match_id: str,
        winner: str,
        player1_score: int = 0,
        player2_score: int = 0,
        player1_set_wins: int = 0,
        player2_set_wins: int = 0,
        history: Optional[List[HistoryEntry]] = None,
    ) -> List[Match]:
        """Make a result authoritative and advance the tournament.

        Returns:
            Matches generated as a consequence (next Swiss round or finals)

        Raises:
            MatchNotFoundException: If the match does not exist
            IllegalTransitionException: If the match cannot take a result
            InvalidResultException: If the result is invalid
        """
        self.result_recorder.record_result(
            self,
            match_id,
            winner,
            player1_score,
            player2_score,
            player1_set_wins,
            player2_set_wins,
            history,
        )
        self._mark_started()

        new_matches = self.round_manager.advance(self)
        self._update_completion()
        return new_matches

    def _update_completion(self) -> None:
        if self.is_complete:
            return
        finished = all(m.is_complete for m in self.matches)
        if finished and not self.round_manager.can_advance(self):
            self.status = TournamentStatus.COMPLETE
            logger.info(f"Tournament '{self.name}' complete, winner: {self.winner}")

    # ========== Serialization ==========

    def to_dict(self) -> Dict[str, Any]:
        """Serialize tournament to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "room_code": self.room_code,
            "created_at": self.created_at.isoformat(),
            "tournament_type": self.tournament_type.value,
            "config": self.config.to_dict(),
            "stage_config": self.stage_config.to_dict(),
            "current_stage": self.current_stage.value,
            "status": self.status.value,
            "players": list(self.players),
            "group_a_players": list(self.group_a_players),
            "group_b_players": list(self.group_b_players),
            "current_swiss_round": self.current_swiss_round,
            "swiss_standings": [s.to_dict() for s in self.swiss_standings],
            "round_robin_standings": [s.to_dict() for s in self.round_robin_standings],
            "matches": [m.to_dict() for m in self.matches],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Tournament":
        """Deserialize tournament from dictionary."""
        tournament = cls(
            name=data["name"],
            tournament_type=TournamentType(data["tournament_type"]),
            players=data.get("players", []),
            config=TournamentConfig.from_dict(data.get("config", {})),
            stage_config=StageConfig.from_dict(data.get("stage_config", {})),
            room_code=data.get("room_code", ""),
            tournament_id=data["id"],
            created_at=isoparse(data["created_at"]),
        )
        tournament.current_stage = TournamentStage(
            data.get("current_stage", TournamentStage.MAIN.value)
        )
        tournament.status = TournamentStatus(
            data.get("status", TournamentStatus.NOT_STARTED.value)
        )
        tournament.group_a_players = list(data.get("group_a_players", []))
        tournament.group_b_players = list(data.get("group_b_players", []))
        tournament.current_swiss_round = data.get("current_swiss_round", 1)
        tournament.swiss_standings = [
            SwissStanding.from_dict(s) for s in data.get("swiss_standings", [])
        ]
        tournament.round_robin_standings = [
            RoundRobinStanding.from_dict(s)
            for s in data.get("round_robin_standings", [])
        ]
        tournament.matches = [Match.from_dict(m) for m in data.get("matches", [])]

        logger.info(f"Loaded tournament: {tournament.name}")
        return tournament
