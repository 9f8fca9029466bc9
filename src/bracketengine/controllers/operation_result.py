"""Per-call outcome reported by the tournament manager."""

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

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from bracketengine.exceptions import (
    BracketEngineException,
    InvalidInputException,
    NotFoundException,
)
from bracketengine.models.tournament.match import Match


class ErrorKind(Enum):
    INVALID_INPUT = "invalid_input"
    ILLEGAL_TRANSITION = "illegal_transition"
    NOT_FOUND = "not_found"

    @classmethod
    def for_exception(cls, error: BracketEngineException) -> "ErrorKind":
        if isinstance(error, InvalidInputException):
            return cls.INVALID_INPUT
        if isinstance(error, NotFoundException):
            return cls.NOT_FOUND
        # Illegal transitions, and pairing dead ends reached mid-tournament
        return cls.ILLEGAL_TRANSITION


@dataclass
class OperationResult:
    """Outcome of a manager operation.

    Truthy on success, so callers can write ``if manager.approve(...):``.

    Attributes
    ----------
    is_success : bool
        Whether the operation was applied.
    error_kind : ErrorKind or None
        Failure category; None on success.
    message : str
        Human-readable detail, suitable for surfacing to an operator.
    match : Match or None
        The match the operation acted on, when there is one.
    new_matches : list of Match
        Matches generated as a consequence (Swiss round, finals).
    """

    is_success: bool
    error_kind: Optional[ErrorKind] = None
    message: str = ""
    match: Optional[Match] = None
    new_matches: List[Match] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.is_success

    @classmethod
    def success(
        cls,
        message: str = "",
        match: Optional[Match] = None,
        new_matches: Optional[List[Match]] = None,
    ) -> "OperationResult":
        return cls(True, None, message, match, list(new_matches or []))

    @classmethod
    def failure(cls, error: BracketEngineException) -> "OperationResult":
        return cls(False, ErrorKind.for_exception(error), str(error))
