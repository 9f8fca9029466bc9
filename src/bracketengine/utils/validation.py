"""Validation utilities for Bracket Engine.

This module provides reusable validation functions with consistent error handling.
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
import re
from collections import Counter
from typing import Iterable, List, Optional

from bracketengine.constants import (
    BYE,
    MIN_GROUP_ROUND_ROBIN_PLAYERS,
    MIN_PLAYERS,
    ROOM_CODE_LENGTH,
    VALID_FINALS_SIZES,
)
from bracketengine.exceptions import (
    InvalidConfigurationException,
    InvalidPlayerListException,
    InvalidRoomCodeException,
)
from bracketengine.models.enums import MatchType, TournamentType
from bracketengine.models.tournament.tournament_config import (
    StageConfig,
    TournamentConfig,
)

ROOM_CODE_PATTERN = re.compile(rf"^[0-9]{{{ROOM_CODE_LENGTH}}}$")


class ValidationResult:
    """Result of a validation operation.

    Attributes:
        is_valid: Whether the validation passed
        error_message: Human-readable error message if invalid
        sanitized_value: Cleaned/normalized value if valid
    """

    def __init__(
        self,
        is_valid: bool,
        error_message: Optional[str] = None,
        sanitized_value: Optional[str] = None,
    ):
        self.is_valid = is_valid
        self.error_message = error_message
        self.sanitized_value = sanitized_value

    def __bool__(self) -> bool:
        """Allow using result in boolean context: if result: ..."""
        return self.is_valid

    def __repr__(self) -> str:
        if self.is_valid:
            return f"ValidationResult(VALID, {self.sanitized_value!r})"
        return f"ValidationResult(INVALID, {self.error_message!r})"


# ========== Room Code Validation ==========


def validate_room_code(code: Optional[str]) -> ValidationResult:
    """Validate a tournament room code.

    Args:
        code: Room code to validate; surrounding whitespace and a single
            readability dash ("847-291") are accepted

    Returns:
        ValidationResult with the bare six digits as sanitized value

    Example:
        >>> bool(validate_room_code("847-291"))
        True
    """
    if code is None or not code.strip():
        return ValidationResult(False, "Room code is required")

    cleaned = code.strip().replace("-", "")
    if not ROOM_CODE_PATTERN.match(cleaned):
        return ValidationResult(
            False, f"Room code must be exactly {ROOM_CODE_LENGTH} digits"
        )
    return ValidationResult(True, sanitized_value=cleaned)


def validate_room_code_strict(code: Optional[str]) -> str:
    """Validate a room code and raise exception if invalid.

    Raises:
        InvalidRoomCodeException: If the code is invalid
    """
    result = validate_room_code(code)
    if not result:
        raise InvalidRoomCodeException(result.error_message)
    return result.sanitized_value


def generate_room_code(rng: Optional[random.Random] = None) -> str:
    """Generate a random zero-padded room code."""
    rng = rng or random.Random()
    return f"{rng.randint(0, 10**ROOM_CODE_LENGTH - 1):0{ROOM_CODE_LENGTH}d}"


def format_room_code(code: str) -> str:
    """Format a (partial) code for display, e.g. "847291" -> "847-291"."""
    digits = "".join(ch for ch in code if ch.isdigit())
    half = ROOM_CODE_LENGTH // 2
    if len(digits) <= half:
        return digits
    return f"{digits[:half]}-{digits[half:ROOM_CODE_LENGTH]}"


# ========== Player List Validation ==========


def validate_player_names(
    players: Iterable[str], minimum: int = MIN_PLAYERS
) -> List[str]:
    """Normalize a player list and raise exception if unusable.

    Names are stripped; empty names, duplicates and the reserved bye marker
    are rejected.

    Raises:
        InvalidPlayerListException: If the list is invalid
    """
    names = [str(p).strip() for p in players]
    if any(not name for name in names):
        raise InvalidPlayerListException("Player names cannot be empty")
    if BYE in names:
        raise InvalidPlayerListException(f"'{BYE}' is reserved and cannot be a player")

    duplicates = sorted(name for name, count in Counter(names).items() if count > 1)
    if duplicates:
        raise InvalidPlayerListException(
            f"Duplicate player names: {', '.join(duplicates)}"
        )
    if len(names) < minimum:
        raise InvalidPlayerListException(
            f"At least {minimum} players are required, got {len(names)}"
        )
    return names


# ========== Stage Validation ==========


def validate_stage_config(
    tournament_type: TournamentType, stage_config: StageConfig, player_count: int
) -> None:
    """Check a stage configuration against the format and player count.

    Raises:
        InvalidConfigurationException: If the configuration is invalid
        InvalidPlayerListException: If there are too few players for groups
    """
    has_finals = (
        tournament_type is TournamentType.GROUP_ROUND_ROBIN
        or stage_config.is_multi_stage
    )
    if tournament_type is TournamentType.GROUP_ROUND_ROBIN:
        if player_count < MIN_GROUP_ROUND_ROBIN_PLAYERS:
            raise InvalidPlayerListException(
                f"Group round robin needs at least {MIN_GROUP_ROUND_ROBIN_PLAYERS} "
                f"players, got {player_count}"
            )
    elif stage_config.is_multi_stage and tournament_type.is_elimination:
        raise InvalidConfigurationException(
            f"{tournament_type.display_name} cannot have a separate finals stage"
        )

    if not has_finals:
        return

    if not stage_config.finals_type.valid_for_finals:
        raise InvalidConfigurationException(
            f"{stage_config.finals_type.display_name} cannot be used for finals"
        )
    if stage_config.finals_size not in VALID_FINALS_SIZES:
        raise InvalidConfigurationException(
            f"Finals size must be one of {list(VALID_FINALS_SIZES)}, "
            f"got {stage_config.finals_size}"
        )
    if stage_config.finals_size > player_count:
        raise InvalidConfigurationException(
            f"Finals size {stage_config.finals_size} exceeds player count "
            f"{player_count}"
        )


def validate_scoring_config(
    config: TournamentConfig, stage_config: StageConfig
) -> None:
    """Check that every match type is playable under the chosen generation.

    Raises:
        InvalidConfigurationException: If a match type is not offered by the
            generation
    """
    available = MatchType.available_for(config.generation)
    for match_type in (config.match_type, stage_config.finals_match_type):
        if match_type is not None and match_type not in available:
            raise InvalidConfigurationException(
                f"{match_type.value} is not available for generation "
                f"{config.generation.value}"
            )
