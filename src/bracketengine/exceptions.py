"""Exceptions for use in Bracket Engine"""

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


# ========== Base Application Exception ==========


class BracketEngineException(Exception):
    """Base exception for all Bracket Engine errors.

    All custom exceptions in the engine inherit from this class, so callers
    can catch every engine-specific error with a single except clause.
    """

    pass


# ========== Invalid Input Exceptions ==========


class InvalidInputException(BracketEngineException):
    """Base exception for input rejected before anything is generated."""

    pass


class InvalidPlayerListException(InvalidInputException):
    """Raised when the player list is too short or contains bad names."""

    pass


class InvalidConfigurationException(InvalidInputException):
    """Raised when tournament or stage configuration is invalid."""

    pass


class InvalidRoomCodeException(InvalidInputException):
    """Raised when a room code is not six numeric digits."""

    pass


class InvalidResultException(InvalidInputException):
    """Raised when a reported result does not fit its match."""

    pass


# ========== Illegal Transition Exceptions ==========


class IllegalTransitionException(BracketEngineException):
    """Raised when an operation is not allowed in the current state."""

    pass


class MatchNotReadyException(IllegalTransitionException):
    """Raised when assigning a match whose players are not both known."""

    pass


class DeviceBusyException(IllegalTransitionException):
    """Raised when a device is already scoring another match."""

    pass


# ========== Not Found Exceptions ==========


class NotFoundException(BracketEngineException):
    """Base exception for unknown identifiers."""

    pass


class MatchNotFoundException(NotFoundException):
    """Raised when a requested match cannot be found."""

    pass


class DeviceNotFoundException(NotFoundException):
    """Raised when a requested scoreboard device cannot be found."""

    pass


class SubmissionNotFoundException(NotFoundException):
    """Raised when no score submission is queued for a match."""

    pass


# ========== Pairing Exceptions ==========


class PairingException(BracketEngineException):
    """Base exception for pairing-related errors."""

    pass


class NoPairingAvailableException(PairingException):
    """Raised when no valid pairing can be generated."""

    pass


# ========== Persistence Exceptions ==========


class PersistenceException(BracketEngineException):
    """Base exception for snapshot save/load errors."""

    pass


class SnapshotLoadException(PersistenceException):
    """Raised when a snapshot file cannot be read or decoded."""

    pass
