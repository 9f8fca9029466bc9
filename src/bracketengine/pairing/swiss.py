"""Swiss System Pairing.

Round 1 pairs consecutive players of the (optionally shuffled) list. Later
rounds are paired dynamically from live standings: players are ranked by
points then Buchholz and each one, in rank order, meets the highest-ranked
opponent still free that they have not already played.
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

import math
import random
from typing import Dict, FrozenSet, List, Optional, Sequence, Set, Tuple

from bracketengine.constants import BYE, BYE_BUCHHOLZ_FACTOR
from bracketengine.exceptions import NoPairingAvailableException
from bracketengine.models.enums import TournamentStage
from bracketengine.models.tournament.match import Match
from bracketengine.models.tournament.standings import SwissStanding
from bracketengine.pairing.single_elimination import prepare_players
from bracketengine.utils import setup_logger

logger = setup_logger(__name__)

StandingPair = Tuple[SwissStanding, SwissStanding]


def number_of_rounds(player_count: int) -> int:
    """Rounds needed to separate a single winner: ``ceil(log2(n))``."""
    if player_count < 2:
        return 1
    return math.ceil(math.log2(player_count))


def initial_standings(players: Sequence[str]) -> List[SwissStanding]:
    return [SwissStanding(player_name=name) for name in players]


def _bye_match(
    round_number: int, match_number: int, player: str, stage: TournamentStage
) -> Match:
    match = Match(
        round_number=round_number,
        match_number=match_number,
        player1=player,
        stage=stage,
    )
    match.resolve_as_bye()
    return match


def generate_first_round(
    players: Sequence[str],
    shuffle: bool = False,
    rng: Optional[random.Random] = None,
    stage: TournamentStage = TournamentStage.MAIN,
) -> List[Match]:
    """Pair consecutive players; an odd last player gets a completed bye.

    Raises
    ------
    InvalidPlayerListException
        If fewer than two valid players are given.
    """
    ordered = prepare_players(players, shuffle, rng)
    matches = [
        Match(
            round_number=1,
            match_number=i // 2,
            player1=ordered[i],
            player2=ordered[i + 1],
            stage=stage,
        )
        for i in range(0, len(ordered) - 1, 2)
    ]
    if len(ordered) % 2 == 1:
        matches.append(_bye_match(1, len(matches), ordered[-1], stage))

    logger.info(
        f"Generated Swiss round 1: {len(ordered)} players, {len(matches)} matches"
    )
    return matches


# ========== Standings ==========


def record_result(standings: Dict[str, SwissStanding], match: Match) -> None:
    """Add a completed match to the standings of both players.

    Byes count as a win against ``BYE``; void matches are ignored.
    """
    if match.winner is None:
        return

    winner = standings[match.winner]
    if match.is_bye:
        winner.wins += 1
        winner.opponents_played.append(BYE)
        return

    loser = standings[match.loser]
    winner.wins += 1
    loser.losses += 1
    winner.opponents_played.append(loser.player_name)
    loser.opponents_played.append(winner.player_name)


def calculate_buchholz(standings: Sequence[SwissStanding]) -> None:
    """Recompute every player's Buchholz score in place.

    A bye is worth half the average points of the field.
    """
    if not standings:
        return
    points = {s.player_name: s.points for s in standings}
    bye_value = sum(points.values()) / len(points) * BYE_BUCHHOLZ_FACTOR

    for standing in standings:
        standing.buchholz_score = sum(
            bye_value if opponent == BYE else points.get(opponent, 0.0)
            for opponent in standing.opponents_played
        )


def rank_standings(standings: Sequence[SwissStanding]) -> List[SwissStanding]:
    """Sort by points then Buchholz, both descending; ties keep their order."""
    return sorted(standings, key=lambda s: (-s.points, -s.buchholz_score))


# ========== Pairing ==========


def _pair_without_rematches(pool: List[SwissStanding]) -> Optional[List[StandingPair]]:
    """Depth-first search for a rematch-free pairing, greedy choice first."""
    failed: Set[FrozenSet[str]] = set()

    def search(remaining: List[SwissStanding]) -> Optional[List[StandingPair]]:
        if not remaining:
            return []
        key = frozenset(s.player_name for s in remaining)
        if key in failed:
            return None

        first, rest = remaining[0], remaining[1:]
        for index, opponent in enumerate(rest):
            if first.has_played(opponent.player_name):
                continue
            tail = search(rest[:index] + rest[index + 1 :])
            if tail is not None:
                return [(first, opponent)] + tail

        failed.add(key)
        return None

    return search(pool)


def _greedy_pairs(pool: List[SwissStanding]) -> List[StandingPair]:
    """Rank-order pairing that prefers new opponents but allows rematches."""
    unpaired = list(pool)
    pairs: List[StandingPair] = []
    while len(unpaired) >= 2:
        first = unpaired.pop(0)
        opponent = next(
            (o for o in unpaired if not first.has_played(o.player_name)), unpaired[0]
        )
        unpaired.remove(opponent)
        pairs.append((first, opponent))
    return pairs


def _choose_pairing(
    ranked: List[SwissStanding],
) -> Tuple[List[StandingPair], Optional[SwissStanding]]:
    if len(ranked) % 2 == 0:
        candidates: List[Optional[SwissStanding]] = [None]
    else:
        candidates = [s for s in reversed(ranked) if not s.has_received_bye]
        if not candidates:
            raise NoPairingAvailableException(
                "Every player has already received a bye"
            )

    # Lowest-ranked eligible bye first; move up only if it forces a rematch
    for bye in candidates:
        pool = [s for s in ranked if s is not bye]
        pairs = _pair_without_rematches(pool)
        if pairs is not None:
            return pairs, bye

    bye = candidates[0]
    logger.warning("No rematch-free pairing exists; allowing rematches")
    return _greedy_pairs([s for s in ranked if s is not bye]), bye


def generate_round(
    standings: Sequence[SwissStanding],
    round_number: int,
    stage: TournamentStage = TournamentStage.MAIN,
) -> List[Match]:
    """Pair the next round from the current standings.

    Parameters
    ----------
    standings : sequence of SwissStanding
        Current standings; Buchholz scores should be up to date.
    round_number : int
        Round to create (1-indexed).
    stage : TournamentStage
        Stage tag applied to every match.

    Returns
    -------
    list of Match
        Pairings in rank order; a bye match, when needed, comes last and is
        already complete.

    Raises
    ------
    NoPairingAvailableException
        If the field is odd and every player has already had a bye.
    """
    ranked = rank_standings(standings)
    pairs, bye = _choose_pairing(ranked)

    matches = [
        Match(
            round_number=round_number,
            match_number=i,
            player1=first.player_name,
            player2=second.player_name,
            stage=stage,
        )
        for i, (first, second) in enumerate(pairs)
    ]
    if bye is not None:
        matches.append(_bye_match(round_number, len(matches), bye.player_name, stage))
        logger.debug(f"Round {round_number} bye: {bye.player_name}")

    logger.info(f"Generated Swiss round {round_number}: {len(matches)} matches")
    return matches
