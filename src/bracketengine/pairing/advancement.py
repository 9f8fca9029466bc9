"""Winner/loser advancement through a linked set of elimination matches.

Matches point at each other by identifier only, so every helper here works
on a flat list (or an id index built from it) and never holds references
between matches.
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

from typing import Dict, Iterable, List, Tuple

from bracketengine.models.enums import BracketType, MatchStatus, Slot
from bracketengine.models.tournament.match import Match
from bracketengine.utils import setup_logger

logger = setup_logger(__name__)

FeederIndex = Dict[Tuple[str, Slot], Match]


def index_by_id(matches: Iterable[Match]) -> Dict[str, Match]:
    return {match.id: match for match in matches}


def feeder_index(matches: Iterable[Match]) -> FeederIndex:
    """Map (target match id, slot) to the match that fills it."""
    feeders: FeederIndex = {}
    for match in matches:
        if match.next_match_id and match.next_match_slot:
            feeders[(match.next_match_id, match.next_match_slot)] = match
        if match.loser_next_match_id and match.loser_next_match_slot:
            feeders[(match.loser_next_match_id, match.loser_next_match_slot)] = match
    return feeders


def propagate_result(match: Match, by_id: Dict[str, Match]) -> None:
    """Deliver the winner (and loser, for drop-in edges) downstream.

    Byes deliver no loser and void matches deliver nobody at all; the
    target slot simply stays empty and is picked up by walkover settling.
    """
    if match.next_match_id and match.next_match_slot:
        target = by_id.get(match.next_match_id)
        if target is not None and match.winner is not None:
            target.set_player(match.next_match_slot, match.winner)
            logger.debug(
                f"{match.winner} advances from {match.display_name} to "
                f"{target.display_name} ({match.next_match_slot.value})"
            )

    if match.loser_next_match_id and match.loser_next_match_slot:
        target = by_id.get(match.loser_next_match_id)
        loser = match.loser
        if target is not None and loser is not None:
            target.set_player(match.loser_next_match_slot, loser)
            logger.debug(
                f"{loser} drops from {match.display_name} to "
                f"{target.display_name} ({match.loser_next_match_slot.value})"
            )


def _slot_is_settled(match: Match, slot: Slot, feeders: FeederIndex) -> bool:
    if match.player_in(slot) is not None:
        return True
    feeder = feeders.get((match.id, slot))
    return feeder is None or feeder.is_complete


def settle_walkovers(matches: List[Match]) -> List[Match]:
    """Auto-resolve matches that can never receive a second player.

    A pending, unassigned match is resolved once each of its empty slots has
    no feeder or a completed feeder. With one player it becomes a bye won by
    that player; with none it becomes void. Repeats until nothing changes.

    Returns
    -------
    list of Match
        Matches resolved by this call, in resolution order.
    """
    by_id = index_by_id(matches)
    feeders = feeder_index(matches)
    resolved: List[Match] = []

    changed = True
    while changed:
        changed = False
        for match in matches:
            if (
                match.status is not MatchStatus.PENDING
                or match.assigned_device_id is not None
                or match.bracket_type is BracketType.GRAND_FINAL
                or match.is_ready
            ):
                continue
            if all(_slot_is_settled(match, slot, feeders) for slot in Slot):
                match.resolve_as_bye()
                propagate_result(match, by_id)
                resolved.append(match)
                changed = True
                if match.winner is not None:
                    logger.debug(f"Bye: {match.winner} in {match.display_name}")
                else:
                    logger.debug(f"Void match {match.display_name}")
    return resolved


def resolve_grand_final(grand_final: Match, by_id: Dict[str, Match]) -> None:
    """Fill or close the reset match after the grand final.

    The losers-bracket champion sits in slot player2; only their win forces a
    reset. Otherwise the reset completes unplayed with the same winner.
    """
    reset = by_id.get(grand_final.next_match_id) if grand_final.next_match_id else None
    if reset is None or grand_final.winner is None:
        return

    if grand_final.winner == grand_final.player2:
        reset.player1 = grand_final.player1
        reset.player2 = grand_final.player2
        logger.info(
            f"Grand final won from the losers bracket by {grand_final.winner}; "
            "reset match required"
        )
    else:
        reset.player1 = grand_final.winner
        reset.player2 = None
        reset.resolve_as_bye()
        logger.info(
            f"Grand final won by {grand_final.winner}; reset match not needed"
        )
