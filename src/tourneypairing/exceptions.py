"""Exceptions for use in Tourney Pairing"""

# Tourney Pairing
# Copyright (C) 2025  Tourney Pairing developers
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


class TourneyPairingException(Exception):
    """Base exception for all Tourney Pairing errors.

    All custom exceptions in the package inherit from this class.
    This enables catching all engine-specific errors with a single except clause.
    """

    pass


# ========== Pairing Exceptions ==========


class PairingException(TourneyPairingException):
    """Base exception for pairing-related errors."""

    pass


class InsufficientPlayersException(PairingException):
    """Raised when fewer than two eligible competitors are available to pair."""

    def __init__(self, eligible: int, division: str = "") -> None:
        where = f" in division '{division}'" if division else ""
        super().__init__(
            f"At least 2 eligible competitors are required{where}, got {eligible}"
        )
        self.eligible = eligible
        self.division = division


class UnsupportedFieldSizeException(PairingException):
    """Raised when a round robin is requested for an unsupported field size."""

    def __init__(self, size: int, minimum: int, maximum: int) -> None:
        super().__init__(
            f"Round robin supports {minimum}-{maximum} competitors, got {size}"
        )
        self.size = size


class NoValidPairingFoundException(PairingException):
    """Raised when no valid pairing can be generated."""

    pass


# ========== Tournament Exceptions ==========


class TournamentException(TourneyPairingException):
    """Base exception for tournament-related errors."""

    pass


class TournamentNotFoundException(TournamentException):
    """Raised when a tournament is not present in the store."""

    pass


class TournamentStateException(TournamentException):
    """Raised when a round is in an invalid state for the requested operation."""

    pass


# ========== Storage Exceptions ==========


class StorageException(TourneyPairingException):
    """Base exception for schedule storage errors."""

    pass


class ConcurrentPairingConflictException(StorageException):
    """Raised when an optimistic write loses the race to another writer.

    The caller should reload the tournament and retry.
    """

    def __init__(self, tournament_id: str, expected: int, actual: int) -> None:
        super().__init__(
            f"Tournament '{tournament_id}' changed while pairing "
            f"(expected version {expected}, found {actual})"
        )
        self.tournament_id = tournament_id
        self.expected_version = expected
        self.actual_version = actual


# ========== Result Exceptions ==========


class ResultException(TourneyPairingException):
    """Base exception for result recording errors."""

    pass


class InvalidResultException(ResultException):
    """Raised when a result is invalid (unknown players, unpaired round...)."""

    pass


class DuplicateResultException(ResultException):
    """Raised when attempting to record a result that already exists."""

    pass


# ========== Configuration Exceptions ==========


class ConfigurationException(TourneyPairingException):
    """Base exception for configuration errors."""

    pass


class InvalidConfigurationException(ConfigurationException):
    """Raised when configuration data is invalid."""

    pass
