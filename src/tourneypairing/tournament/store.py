"""Schedule storage with optimistic concurrency.

Pairing is computed outside any lock from a loaded snapshot; the write
then succeeds only if the stored version is still the one the snapshot
was read at.
"""

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

import json
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from tourneypairing.constants import SAVE_FILE_EXTENSION
from tourneypairing.exceptions import (
    ConcurrentPairingConflictException,
    StorageException,
    TournamentNotFoundException,
)
from tourneypairing.models.game_result import GameResult
from tourneypairing.models.pairing import Pairing
from tourneypairing.models.snapshot import TournamentSnapshot
from tourneypairing.type_hints import Status
from tourneypairing.utils import setup_logger

logger = setup_logger(__name__)


class ScheduleStore(ABC):
    """Storage boundary of the engine.

    Subclasses only read and write whole snapshots; the base class provides
    the version-checked operations on top, all under one lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

    @abstractmethod
    def _read(self, tournament_id: str) -> Optional[TournamentSnapshot]:
        """Stored snapshot, None when the tournament does not exist."""

    @abstractmethod
    def _write(self, snapshot: TournamentSnapshot) -> None:
        """Persist a snapshot, replacing the stored one."""

    def exists(self, tournament_id: str) -> bool:
        with self._lock:
            return self._read(tournament_id) is not None

    def load(self, tournament_id: str) -> TournamentSnapshot:
        """Load a private copy of a tournament.

        Raises:
            TournamentNotFoundException: No tournament with that id
        """
        with self._lock:
            snapshot = self._read(tournament_id)
        if snapshot is None:
            raise TournamentNotFoundException(
                f"Tournament '{tournament_id}' not found"
            )
        return snapshot

    def create(self, snapshot: TournamentSnapshot) -> None:
        """Store a tournament as given, replacing any stored copy."""
        with self._lock:
            self._write(snapshot)
        logger.info("Stored tournament '%s'", snapshot.tournament_id)

    def commit_round(
        self,
        tournament_id: str,
        round_number: int,
        pairings: List[Pairing],
        results: List[GameResult],
        expected_version: int,
    ) -> int:
        """Store a round's pairings and its generated results atomically.

        Returns:
            The new version

        Raises:
            ConcurrentPairingConflictException: The stored version moved on,
                or the round was committed by someone else
        """

        def apply(snapshot: TournamentSnapshot) -> None:
            if round_number in snapshot.schedule:
                raise ConcurrentPairingConflictException(
                    tournament_id, expected_version, snapshot.version
                )
            snapshot.schedule[round_number] = list(pairings)
            snapshot.results.extend(results)
            snapshot.current_round = max(snapshot.schedule)

        return self._mutate(tournament_id, expected_version, apply)

    def remove_round(
        self, tournament_id: str, round_number: int, expected_version: int
    ) -> int:
        """Drop a round and the results the engine generated for it."""

        def apply(snapshot: TournamentSnapshot) -> None:
            snapshot.schedule.pop(round_number, None)
            snapshot.results = [
                r
                for r in snapshot.results
                if not (r.round == round_number and r.auto_generated)
            ]
            snapshot.current_round = snapshot.latest_paired_round

        return self._mutate(tournament_id, expected_version, apply)

    def add_results(
        self,
        tournament_id: str,
        results: List[GameResult],
        expected_version: Optional[int] = None,
    ) -> int:
        """Append results; with ``expected_version`` the write is checked."""

        def apply(snapshot: TournamentSnapshot) -> None:
            snapshot.results.extend(results)

        return self._mutate(tournament_id, expected_version, apply)

    def set_status(
        self,
        tournament_id: str,
        competitor_id: str,
        status: Status,
        expected_version: Optional[int] = None,
    ) -> int:
        """Pause, withdraw or reactivate a competitor."""

        def apply(snapshot: TournamentSnapshot) -> None:
            for index, competitor in enumerate(snapshot.competitors):
                if competitor.id == competitor_id:
                    snapshot.competitors[index] = competitor.with_record(status=status)
                    return
            raise TournamentNotFoundException(
                f"Competitor '{competitor_id}' not found in '{tournament_id}'"
            )

        version = self._mutate(tournament_id, expected_version, apply)
        logger.info("Competitor %s is now %s", competitor_id, status)
        return version

    def _mutate(
        self,
        tournament_id: str,
        expected_version: Optional[int],
        apply: Callable[[TournamentSnapshot], None],
    ) -> int:
        with self._lock:
            snapshot = self._read(tournament_id)
            if snapshot is None:
                raise TournamentNotFoundException(
                    f"Tournament '{tournament_id}' not found"
                )
            if expected_version is not None and snapshot.version != expected_version:
                logger.warning(
                    "Version conflict on '%s': expected %d, found %d",
                    tournament_id,
                    expected_version,
                    snapshot.version,
                )
                raise ConcurrentPairingConflictException(
                    tournament_id, expected_version, snapshot.version
                )
            apply(snapshot)
            snapshot.version += 1
            self._write(snapshot)
            return snapshot.version


class InMemoryScheduleStore(ScheduleStore):
    """Keeps serialized snapshots in a dict, so callers never share objects."""

    def __init__(self) -> None:
        super().__init__()
        self._data: Dict[str, dict] = {}

    def _read(self, tournament_id: str) -> Optional[TournamentSnapshot]:
        data = self._data.get(tournament_id)
        return TournamentSnapshot.from_dict(data) if data is not None else None

    def _write(self, snapshot: TournamentSnapshot) -> None:
        self._data[snapshot.tournament_id] = snapshot.to_dict()


class JsonFileScheduleStore(ScheduleStore):
    """One JSON file per tournament in a directory.

    Files are named ``<tournament_id>.json`` and replaced atomically on
    every write.
    """

    def __init__(self, directory: Union[str, Path]) -> None:
        super().__init__()
        self.directory = Path(directory)

    def path_for(self, tournament_id: str) -> Path:
        return self.directory / f"{tournament_id}{SAVE_FILE_EXTENSION}"

    def _read(self, tournament_id: str) -> Optional[TournamentSnapshot]:
        path = self.path_for(tournament_id)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageException(f"Cannot read {path}: {e}") from e
        data.setdefault("tournament_id", tournament_id)
        return TournamentSnapshot.from_dict(data)

    def _write(self, snapshot: TournamentSnapshot) -> None:
        path = self.path_for(snapshot.tournament_id)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(
                dir=self.directory, prefix=f".{path.stem}-", suffix=".tmp"
            )
        except OSError as e:
            raise StorageException(f"Cannot write {path}: {e}") from e
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(snapshot.to_dict(), f, indent=2)
            os.replace(temp_path, path)
        except OSError as e:
            Path(temp_path).unlink(missing_ok=True)
            raise StorageException(f"Cannot write {path}: {e}") from e
        except Exception:
            # Unserializable snapshot: the stored file is left untouched
            Path(temp_path).unlink(missing_ok=True)
            raise
