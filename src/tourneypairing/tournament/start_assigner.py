"""First-move assignment."""

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

from collections import Counter
from typing import Dict, List, Mapping, Optional

from tourneypairing.constants import UNSEEDED
from tourneypairing.models.pairing import Pairing
from tourneypairing.type_hints import Schedule
from tourneypairing.utils import setup_logger

logger = setup_logger(__name__)


class StartAssigner:
    """Decides which side of each pairing moves first.

    The side with fewer starts so far moves first; on equal counts the
    better-ranked side does. Byes have no start.
    """

    def assign(
        self,
        pairings: List[Pairing],
        start_counts: Mapping[str, int],
        ranks: Optional[Mapping[str, int]] = None,
    ) -> List[Pairing]:
        """Set ``starts`` on every non-bye pairing.

        Args:
            pairings: Pairings of one round
            start_counts: Starts of each competitor in previous rounds
            ranks: Current rank of each competitor, lower is better

        Returns:
            New pairings with ``starts`` set (None for byes)
        """
        ranks = ranks or {}
        assigned = []
        for pairing in pairings:
            if pairing.is_bye:
                assigned.append(pairing.with_changes(starts=None))
                continue
            first = (
                start_counts.get(pairing.player1, 0),
                ranks.get(pairing.player1, UNSEEDED),
            )
            second = (
                start_counts.get(pairing.player2, 0),
                ranks.get(pairing.player2, UNSEEDED),
            )
            starts = 1 if first <= second else 2
            assigned.append(pairing.with_changes(starts=starts))
        return assigned

    @staticmethod
    def count_starts(
        schedule: Schedule, before_round: Optional[int] = None
    ) -> Dict[str, int]:
        """Count starts per competitor over the committed schedule."""
        counts: Counter = Counter()
        for round_number, pairings in schedule.items():
            if before_round is not None and round_number >= before_round:
                continue
            for pairing in pairings:
                starter = pairing.starter_id
                if starter is not None:
                    counts[starter] += 1
        return dict(counts)
