"""Synthetic results for byes, forfeits and absences."""

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

from typing import Iterable, List

from tourneypairing.constants import BYE_SPREAD, FORFEIT_SPREAD
from tourneypairing.models.competitor import Competitor
from tourneypairing.models.game_result import GameResult
from tourneypairing.models.pairing import Pairing
from tourneypairing.utils import setup_logger

logger = setup_logger(__name__)


class ForfeitResolver:
    """Generates the results the engine settles on its own.

    * A paused or withdrawn competitor who was paired (round robin keeps
      everyone on the schedule) forfeits: the opponent wins by
      ``forfeit_spread``.
    * A paused competitor left out of the pairing takes a penalty loss by
      ``forfeit_spread`` with no opponent.
    * Two absent competitors paired together both take the penalty (only
      paused ones; withdrawn competitors no longer collect results).
    * An active competitor with a bye wins by ``bye_spread``.

    Every generated result is flagged ``auto_generated``.
    """

    def __init__(
        self, forfeit_spread: int = FORFEIT_SPREAD, bye_spread: int = BYE_SPREAD
    ) -> None:
        self.forfeit_spread = forfeit_spread
        self.bye_spread = bye_spread

    def resolve(
        self,
        round_number: int,
        pairings: List[Pairing],
        roster: Iterable[Competitor],
    ) -> List[GameResult]:
        """Forfeit and penalty results for one committed round."""
        roster = {c.id: c for c in roster}
        seated = {cid for p in pairings for cid in p.competitor_ids}
        generated: List[GameResult] = []

        for pairing in pairings:
            present = [
                cid
                for cid in pairing.competitor_ids
                if cid in roster and roster[cid].is_active
            ]
            absent = [
                roster[cid]
                for cid in pairing.competitor_ids
                if cid in roster and not roster[cid].is_active
            ]
            if not absent:
                continue
            if pairing.is_bye or not present:
                for competitor in absent:
                    if competitor.is_paused:
                        generated.append(self.penalty(round_number, competitor.id))
                continue
            generated.append(
                GameResult(
                    round=round_number,
                    player1_id=present[0],
                    player2_id=absent[0].id,
                    score1=self.forfeit_spread,
                    score2=0,
                    is_forfeit=True,
                    auto_generated=True,
                )
            )
            logger.info(
                "Round %d: %s wins by forfeit against %s (%s)",
                round_number,
                present[0],
                absent[0].id,
                absent[0].status,
            )

        for competitor in roster.values():
            if competitor.is_paused and competitor.id not in seated:
                generated.append(self.penalty(round_number, competitor.id))
        return generated

    def bye_awards(
        self,
        round_number: int,
        pairings: List[Pairing],
        roster: Iterable[Competitor],
    ) -> List[GameResult]:
        """Bye wins for active competitors sitting out the round."""
        active = {c.id for c in roster if c.is_active}
        return [
            GameResult(
                round=round_number,
                player1_id=p.player1,
                player2_id=None,
                score1=self.bye_spread,
                score2=0,
                is_bye=True,
                auto_generated=True,
            )
            for p in pairings
            if p.is_bye and p.player1 in active
        ]

    def penalty(self, round_number: int, competitor_id: str) -> GameResult:
        logger.info("Round %d: penalty loss for absent %s", round_number, competitor_id)
        return GameResult(
            round=round_number,
            player1_id=competitor_id,
            player2_id=None,
            score1=0,
            score2=self.forfeit_spread,
            is_forfeit=True,
            auto_generated=True,
        )
