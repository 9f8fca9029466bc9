"""Round Robin and Group Round Robin scheduling."""

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
from typing import Dict, List, Optional, Sequence, Tuple

from bracketengine.constants import MIN_GROUP_ROUND_ROBIN_PLAYERS
from bracketengine.exceptions import InvalidConfigurationException
from bracketengine.models.enums import TournamentStage, TournamentType
from bracketengine.models.tournament.match import Match
from bracketengine.models.tournament.standings import RoundRobinStanding
from bracketengine.pairing import double_elimination, single_elimination
from bracketengine.pairing.single_elimination import prepare_players
from bracketengine.type_hints import MaybePlayer
from bracketengine.utils import setup_logger

logger = setup_logger(__name__)


def number_of_rounds(player_count: int) -> int:
    """Rounds of a full schedule, counting the bye slot for odd fields."""
    slots = player_count + player_count % 2
    return max(slots - 1, 0)


def build_schedule(
    players: Sequence[str], stage: TournamentStage = TournamentStage.MAIN
) -> List[Match]:
    """Circle method over an already validated player list.

    The first player stays fixed while the others rotate one position per
    round; position ``i`` meets position ``n - 1 - i``.
    """
    slots: List[MaybePlayer] = list(players)
    if len(slots) % 2 == 1:
        slots.append(None)
    size = len(slots)

    matches: List[Match] = []
    for round_index in range(size - 1):
        match_number = 0
        for i in range(size // 2):
            home, away = slots[i], slots[size - 1 - i]
            if home is None or away is None:
                continue
            matches.append(
                Match(
                    round_number=round_index + 1,
                    match_number=match_number,
                    player1=home,
                    player2=away,
                    stage=stage,
                )
            )
            match_number += 1
        slots = [slots[0], slots[-1]] + slots[1:-1]
    return matches


def generate_schedule(
    players: Sequence[str],
    shuffle: bool = False,
    rng: Optional[random.Random] = None,
    stage: TournamentStage = TournamentStage.MAIN,
) -> List[Match]:
    """Generate every pairing of a round robin, ``n(n-1)/2`` matches.

    Raises
    ------
    InvalidPlayerListException
        If fewer than two valid players are given.
    """
    ordered = prepare_players(players, shuffle, rng)
    matches = build_schedule(ordered, stage)
    logger.info(
        f"Generated round robin: {len(ordered)} players, "
        f"{number_of_rounds(len(ordered))} rounds, {len(matches)} matches"
    )
    return matches


# ========== Standings ==========


def initial_standings(players: Sequence[str]) -> List[RoundRobinStanding]:
    return [RoundRobinStanding(player_name=name) for name in players]


def record_result(standings: Dict[str, RoundRobinStanding], match: Match) -> None:
    """Add a completed match's result and score line to both players."""
    if match.winner is None or not match.is_ready:
        return

    first = standings[match.player1]
    second = standings[match.player2]
    first.points_for += match.player1_score
    first.points_against += match.player2_score
    second.points_for += match.player2_score
    second.points_against += match.player1_score

    if match.winner == match.player1:
        first.wins += 1
        second.losses += 1
    else:
        second.wins += 1
        first.losses += 1


def rank_standings(
    standings: Sequence[RoundRobinStanding],
) -> List[RoundRobinStanding]:
    """Sort by wins then point differential; ties keep roster order."""
    return sorted(standings, key=lambda s: (-s.wins, -s.point_differential))


# ========== Groups ==========


def split_groups(
    players: Sequence[str],
    shuffle: bool = False,
    rng: Optional[random.Random] = None,
) -> Tuple[List[str], List[str]]:
    """Bisect the field; group A gets the smaller half of an odd field.

    Raises
    ------
    InvalidPlayerListException
        If fewer than four valid players are given.
    """
    ordered = prepare_players(players, shuffle, rng, MIN_GROUP_ROUND_ROBIN_PLAYERS)
    half = len(ordered) // 2
    return ordered[:half], ordered[half:]


def generate_groups(
    players: Sequence[str],
    shuffle: bool = False,
    rng: Optional[random.Random] = None,
) -> Tuple[List[str], List[str], List[Match]]:
    """Split the field and schedule an independent round robin per group.

    Returns
    -------
    tuple
        ``(group_a, group_b, matches)`` where matches carry the
        ``GROUP_A`` / ``GROUP_B`` stage tags.
    """
    group_a, group_b = split_groups(players, shuffle, rng)
    matches = build_schedule(group_a, TournamentStage.GROUP_A)
    matches += build_schedule(group_b, TournamentStage.GROUP_B)
    logger.info(
        f"Generated group round robin: groups of {len(group_a)} and "
        f"{len(group_b)}, {len(matches)} matches"
    )
    return group_a, group_b, matches


def interleave_qualifiers(
    group_a_ranked: Sequence[str], group_b_ranked: Sequence[str], per_group: int
) -> List[str]:
    """Seed finalists as A1, B1, A2, B2, ..."""
    seeded: List[str] = []
    for index in range(per_group):
        for ranked in (group_a_ranked, group_b_ranked):
            if index < len(ranked):
                seeded.append(ranked[index])
    return seeded


def generate_finals(
    seeded_players: Sequence[str], finals_type: TournamentType
) -> List[Match]:
    """Feed seeded finalists into an elimination bracket tagged ``FINALS``.

    Raises
    ------
    InvalidConfigurationException
        If ``finals_type`` is not an elimination format.
    """
    if finals_type is TournamentType.SINGLE_ELIMINATION:
        generator = single_elimination.generate_bracket
    elif finals_type is TournamentType.DOUBLE_ELIMINATION:
        generator = double_elimination.generate_bracket
    else:
        raise InvalidConfigurationException(
            f"{finals_type.display_name} cannot be used for finals"
        )
    matches = generator(seeded_players, stage=TournamentStage.FINALS)
    logger.info(
        f"Generated {finals_type.display_name} finals for "
        f"{len(seeded_players)} players"
    )
    return matches


def generate_group_finals(
    group_a_ranked: Sequence[str],
    group_b_ranked: Sequence[str],
    finals_size: int,
    finals_type: TournamentType,
) -> List[Match]:
    """Take ``finals_size // 2`` qualifiers per group and build the finals."""
    seeded = interleave_qualifiers(group_a_ranked, group_b_ranked, finals_size // 2)
    return generate_finals(seeded, finals_type)
