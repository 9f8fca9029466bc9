"""Double Elimination Bracket Generator.

The winners bracket is a plain single elimination tree. Its losers drop into
a losers bracket that alternates two kinds of rounds:

* major rounds, where each losers-bracket survivor (slot ``player1``) meets a
  fresh drop-in from the winners bracket (slot ``player2``), and
* minor rounds, where survivors only play each other and the field halves.

The two champions meet in the grand final. If the losers-bracket champion
wins it, the reset match decides the event.
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
from typing import List, Optional, Sequence

from bracketengine.models.enums import BracketType, Slot, TournamentStage
from bracketengine.models.tournament.match import Match
from bracketengine.pairing.advancement import settle_walkovers
from bracketengine.pairing.single_elimination import build_rounds, prepare_players
from bracketengine.utils import setup_logger

logger = setup_logger(__name__)


def expected_match_count(size: int) -> int:
    """Matches in a double elimination bracket of ``size`` slots."""
    return (size - 1) + (size - 2) + 2


def _losers_round(round_number: int, count: int, stage: TournamentStage) -> List[Match]:
    return [
        Match(
            round_number=round_number,
            match_number=i,
            stage=stage,
            bracket_type=BracketType.LOSERS,
        )
        for i in range(count)
    ]


def _link_winner(source: Match, target: Match, slot: Slot) -> None:
    source.next_match_id = target.id
    source.next_match_slot = slot


def _link_loser(source: Match, target: Match, slot: Slot) -> None:
    source.loser_next_match_id = target.id
    source.loser_next_match_slot = slot


def build_losers_bracket(
    winners_rounds: List[List[Match]], stage: TournamentStage = TournamentStage.MAIN
) -> List[List[Match]]:
    """Create the losers bracket and wire every winners-bracket drop-in.

    Returns the losers rounds in play order; empty for a two-player bracket.
    """
    if len(winners_rounds) < 2:
        return []

    losers_rounds: List[List[Match]] = []
    round_number = 1

    # Round-1 losers meet each other pairwise
    first = _losers_round(round_number, len(winners_rounds[0]) // 2, stage)
    for match in winners_rounds[0]:
        _link_loser(
            match, first[match.match_number // 2], Slot.for_index(match.match_number)
        )
    losers_rounds.append(first)
    survivors = first

    for drop_round in winners_rounds[1:]:
        round_number += 1
        major = _losers_round(round_number, len(survivors), stage)
        for survivor, target in zip(survivors, major):
            _link_winner(survivor, target, Slot.PLAYER1)
        # Reversed drop-in order keeps recent opponents apart
        for match, target in zip(drop_round, reversed(major)):
            _link_loser(match, target, Slot.PLAYER2)
        losers_rounds.append(major)
        survivors = major

        if len(survivors) > 1:
            round_number += 1
            minor = _losers_round(round_number, len(survivors) // 2, stage)
            for survivor in survivors:
                _link_winner(
                    survivor,
                    minor[survivor.match_number // 2],
                    Slot.for_index(survivor.match_number),
                )
            losers_rounds.append(minor)
            survivors = minor

    return losers_rounds


def generate_bracket(
    players: Sequence[str],
    shuffle: bool = False,
    rng: Optional[random.Random] = None,
    stage: TournamentStage = TournamentStage.MAIN,
) -> List[Match]:
    """Generate a complete double elimination bracket.

    Returns winners-bracket matches, then losers-bracket matches, then the
    grand final and its reset. Round-1 byes and losers-bracket matches left
    without players by them are already resolved.

    Raises
    ------
    InvalidPlayerListException
        If fewer than two valid players are given.
    """
    ordered = prepare_players(players, shuffle, rng)
    winners_rounds = build_rounds(ordered, stage)
    losers_rounds = build_losers_bracket(winners_rounds, stage)

    winners_final = winners_rounds[-1][0]
    final_round = len(winners_rounds) + len(losers_rounds) + 1
    grand_final = Match(
        round_number=final_round,
        match_number=0,
        stage=stage,
        bracket_type=BracketType.GRAND_FINAL,
        is_grand_final=True,
    )
    reset = Match(
        round_number=final_round + 1,
        match_number=0,
        stage=stage,
        bracket_type=BracketType.GRAND_FINAL,
        is_grand_final_reset=True,
    )

    _link_winner(winners_final, grand_final, Slot.PLAYER1)
    if losers_rounds:
        _link_winner(losers_rounds[-1][0], grand_final, Slot.PLAYER2)
    else:
        _link_loser(winners_final, grand_final, Slot.PLAYER2)
    # No slot: the reset is filled by resolve_grand_final, not by propagation
    grand_final.next_match_id = reset.id

    matches = [m for r in winners_rounds for m in r]
    matches += [m for r in losers_rounds for m in r]
    matches += [grand_final, reset]

    resolved = settle_walkovers(matches)
    logger.info(
        f"Generated double elimination bracket: {len(ordered)} players, "
        f"{len(winners_rounds)} winners rounds, {len(losers_rounds)} losers rounds, "
        f"{len(matches)} matches, {len(resolved)} resolved without play"
    )
    return matches
