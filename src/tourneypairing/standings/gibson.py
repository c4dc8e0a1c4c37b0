"""Gibson rule: detect competitors whose prize placement is decided."""

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

from typing import List, Optional, Sequence

from tourneypairing.constants import MODE_INDIVIDUAL, MODE_LEAGUE
from tourneypairing.exceptions import InvalidConfigurationException
from tourneypairing.models.competitor import Competitor
from tourneypairing.utils import setup_logger

logger = setup_logger(__name__)


class GibsonDetector:
    """Flags clinched competitors given a ranking and the rounds remaining.

    A competitor can gain at most one win per round, so a competitor placed
    within the prizes has clinched when even winning every remaining round
    would not let the first competitor outside the prizes catch up.

    Args:
        prize_count: Number of prize positions
        mode: Standings mode; league events compare match wins
    """

    def __init__(self, prize_count: Optional[int], mode: str = MODE_INDIVIDUAL) -> None:
        if prize_count is None or prize_count < 1:
            raise InvalidConfigurationException(
                "Gibson rule requires a prize_count of at least 1"
            )
        self.prize_count = prize_count
        self.mode = mode

    def score(self, competitor: Competitor) -> float:
        if self.mode == MODE_LEAGUE:
            return float(competitor.match_wins)
        return competitor.score

    def clinched(
        self, ranked: Sequence[Competitor], rounds_remaining: int
    ) -> List[Competitor]:
        """Competitors whose prize placement cannot change, in rank order.

        Args:
            ranked: Competitors sorted best first
            rounds_remaining: Rounds whose results are not in the ranking,
                including the one about to be paired

        Returns:
            The clinched competitors; empty when the field does not extend
            past the prize positions
        """
        if len(ranked) <= self.prize_count:
            return []
        chaser_score = self.score(ranked[self.prize_count])
        locked = [
            c
            for c in ranked[: self.prize_count]
            if self.score(c) - chaser_score > rounds_remaining
        ]
        if locked:
            logger.info(
                "Gibson rule: %d competitor(s) clinched with %d round(s) left: %s",
                len(locked),
                rounds_remaining,
                ", ".join(c.id for c in locked),
            )
        return locked

    def is_contender(
        self,
        competitor: Competitor,
        ranked: Sequence[Competitor],
        rounds_remaining: int,
    ) -> bool:
        """Whether a competitor can still reach a prize position."""
        if len(ranked) <= self.prize_count:
            return True
        cutoff = self.score(ranked[self.prize_count - 1])
        return self.score(competitor) + rounds_remaining >= cutoff
