"""Result recording and validation for tournaments.

This module handles recording game results with proper validation and error checking.
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

from dataclasses import replace
from typing import List, Optional

from tourneypairing.constants import MODE_LEAGUE
from tourneypairing.exceptions import DuplicateResultException, InvalidResultException
from tourneypairing.models.game_result import GameResult, Match
from tourneypairing.models.pairing import Pairing
from tourneypairing.models.snapshot import TournamentSnapshot
from tourneypairing.tournament.store import ScheduleStore
from tourneypairing.utils import setup_logger

logger = setup_logger(__name__)


class ResultRecorder:
    """Handles recording and validating game results.

    This class is responsible for:
    - Checking that the result belongs to a paired game of the round
    - Capping the spread at the tournament's ``max_spread``
    - Preventing duplicate results (one game per pairing outside leagues)
    - Attaching league games to their match and refusing games once the
      match is decided
    """

    def __init__(self, store: ScheduleStore) -> None:
        self.store = store

    def record_result(self, tournament_id: str, result: GameResult) -> GameResult:
        """Validate and store one game result.

        Args:
            tournament_id: Tournament the result belongs to
            result: Entered result

        Returns:
            The result as stored (spread possibly capped)

        Raises:
            InvalidResultException: Unknown competitors, unpaired round, or
                the competitors were not paired together
            DuplicateResultException: The game or match already has a result
            ConcurrentPairingConflictException: The tournament changed while
                the result was validated
        """
        snapshot = self.store.load(tournament_id)
        self._validate_entry(snapshot, result)
        pairing = self._find_pairing(snapshot, result)
        self._check_duplicate(snapshot, pairing, result)

        stored = self._cap_spread(snapshot, result)
        self.store.add_results(
            tournament_id, [stored], expected_version=snapshot.version
        )
        logger.info(
            "Recorded round %d: %s %d - %d %s",
            stored.round,
            stored.player1_id,
            stored.score1,
            stored.score2,
            stored.player2_id,
        )
        return stored

    def record_round_results(
        self, tournament_id: str, results: List[GameResult]
    ) -> List[GameResult]:
        """Record several results, stopping at the first invalid one."""
        return [self.record_result(tournament_id, result) for result in results]

    def match_for(self, snapshot: TournamentSnapshot, pairing: Pairing) -> Match:
        """League match of a pairing built from the recorded games."""
        pair = frozenset(pairing.competitor_ids)
        games = [
            r
            for r in snapshot.results_for_round(pairing.round)
            if r.pair_key == pair
        ]
        return Match(
            round=pairing.round,
            player1_id=pairing.player1,
            player2_id=pairing.player2,
            games_per_match=snapshot.config.pairing_config_for(
                pairing.round
            ).games_per_match,
            results=games,
        )

    def _validate_entry(self, snapshot: TournamentSnapshot, result: GameResult) -> None:
        if result.player2_id is None:
            raise InvalidResultException(
                "Byes and penalties are generated when the round is paired"
            )
        competitors = snapshot.competitor_map()
        for competitor_id in (result.player1_id, result.player2_id):
            if competitor_id not in competitors:
                logger.error("Unknown competitor in result: %s", competitor_id)
                raise InvalidResultException(f"Unknown competitor '{competitor_id}'")
        if result.player1_id == result.player2_id:
            raise InvalidResultException("A competitor cannot play themselves")
        if result.score1 < 0 or result.score2 < 0:
            raise InvalidResultException("Scores cannot be negative")
        if result.round not in snapshot.schedule:
            raise InvalidResultException(f"Round {result.round} has not been paired")

    def _find_pairing(
        self, snapshot: TournamentSnapshot, result: GameResult
    ) -> Pairing:
        for pairing in snapshot.schedule[result.round]:
            if pairing.is_bye:
                continue
            if {pairing.player1, pairing.player2} == {
                result.player1_id,
                result.player2_id,
            }:
                return pairing
        raise InvalidResultException(
            f"{result.player1_id} and {result.player2_id} were not paired "
            f"in round {result.round}"
        )

    def _check_duplicate(
        self, snapshot: TournamentSnapshot, pairing: Pairing, result: GameResult
    ) -> None:
        pair = frozenset(pairing.competitor_ids)
        existing = [
            r for r in snapshot.results_for_round(result.round) if r.pair_key == pair
        ]
        if not existing:
            return
        if snapshot.config.standings_mode != MODE_LEAGUE:
            raise DuplicateResultException(
                f"Result already recorded for {pairing.player1} vs "
                f"{pairing.player2} in round {result.round}"
            )
        match = self.match_for(snapshot, pairing)
        decided = match.is_complete or any(r.is_forfeit for r in existing)
        if decided or len(existing) >= match.games_per_match:
            raise DuplicateResultException(
                f"Match {pairing.player1} vs {pairing.player2} in round "
                f"{result.round} is already decided"
            )

    def _cap_spread(
        self, snapshot: TournamentSnapshot, result: GameResult
    ) -> GameResult:
        max_spread: Optional[int] = snapshot.config.max_spread
        if not max_spread or abs(result.score1 - result.score2) <= max_spread:
            return result
        logger.info("Spread capped at %d", max_spread)
        if result.score1 > result.score2:
            return replace(result, score2=result.score1 - max_spread)
        return replace(result, score1=result.score2 - max_spread)
