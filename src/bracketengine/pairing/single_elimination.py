"""Single Elimination Bracket Generator."""

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
from typing import List, Optional, Sequence

from bracketengine.constants import MIN_PLAYERS
from bracketengine.models.enums import BracketType, Slot, TournamentStage
from bracketengine.models.tournament.match import Match
from bracketengine.pairing.advancement import settle_walkovers
from bracketengine.pairing.seeding import bracket_size, distribute_byes, seed_order
from bracketengine.utils import setup_logger
from bracketengine.utils.validation import validate_player_names

logger = setup_logger(__name__)


def prepare_players(
    players: Sequence[str],
    shuffle: bool = False,
    rng: Optional[random.Random] = None,
    minimum: int = MIN_PLAYERS,
) -> List[str]:
    """Validate the player list and apply the optional shuffle."""
    ordered = validate_player_names(players, minimum)
    if shuffle:
        (rng or random.Random()).shuffle(ordered)
    return ordered


def build_rounds(
    players: Sequence[str], stage: TournamentStage = TournamentStage.MAIN
) -> List[List[Match]]:
    """Create the linked rounds of a seeded bracket without resolving byes.

    ``players`` must already be validated and in seed order.
    """
    size = bracket_size(len(players))
    slots = distribute_byes(players, size, seed_order(size))

    rounds: List[List[Match]] = []
    match_count = size // 2
    round_number = 1
    while match_count >= 1:
        rounds.append(
            [
                Match(
                    round_number=round_number,
                    match_number=i,
                    stage=stage,
                    bracket_type=BracketType.WINNERS,
                )
                for i in range(match_count)
            ]
        )
        match_count //= 2
        round_number += 1

    # Winner of match k feeds match k // 2 of the next round
    for current, following in zip(rounds, rounds[1:]):
        for match in current:
            target = following[match.match_number // 2]
            match.next_match_id = target.id
            match.next_match_slot = Slot.for_index(match.match_number)

    for match in rounds[0]:
        match.player1 = slots[2 * match.match_number]
        match.player2 = slots[2 * match.match_number + 1]

    return rounds


def generate_bracket(
    players: Sequence[str],
    shuffle: bool = False,
    rng: Optional[random.Random] = None,
    stage: TournamentStage = TournamentStage.MAIN,
) -> List[Match]:
    """Generate a complete single elimination bracket.

    Parameters
    ----------
    players : sequence of str
        Player names in seed order (index 0 is the top seed).
    shuffle : bool
        Randomize the seed order first.
    rng : random.Random, optional
        Source of randomness for the shuffle.
    stage : TournamentStage
        Stage tag applied to every match.

    Returns
    -------
    list of Match
        Every match of the bracket, round by round. Round-1 byes are already
        complete and their winners sit in round 2.

    Raises
    ------
    InvalidPlayerListException
        If fewer than two valid players are given.
    """
    ordered = prepare_players(players, shuffle, rng)
    rounds = build_rounds(ordered, stage)
    matches = [match for round_matches in rounds for match in round_matches]

    byes = settle_walkovers(matches)
    logger.info(
        f"Generated single elimination bracket: {len(ordered)} players, "
        f"{len(rounds)} rounds, {len(matches)} matches, {len(byes)} byes"
    )
    return matches
