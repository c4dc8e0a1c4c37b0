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

"""
Round Robin Scheduling

Every competitor meets every other competitor once per cycle. The schedule
is built with the circle method: the first competitor stays in place while
the others rotate one seat per round. Odd fields get a phantom slot, and
whoever is drawn against it has the bye, so an odd field of N plays N rounds
and an even field N - 1.

Extra cycles repeat the first cycle with sides flipped.

Example:
    >>> schedule = generate_round_robin_schedule(competitors)
    >>> len(schedule)
    7
"""

from typing import Dict, Iterable, List, Optional, Set

from tourneypairing.constants import (
    ALGO_ROUND_ROBIN,
    ROUND_ROBIN_MAX_FIELD,
    ROUND_ROBIN_MIN_FIELD,
)
from tourneypairing.exceptions import UnsupportedFieldSizeException
from tourneypairing.models.competitor import Competitor
from tourneypairing.models.pairing import Pairing, bye_pairing
from tourneypairing.pairing.base import PairingContext, PairingStrategy
from tourneypairing.type_hints import Schedule
from tourneypairing.utils import setup_logger

logger = setup_logger(__name__)


def seed_order(competitors: Iterable[Competitor]) -> List[Competitor]:
    """Competitors sorted by seed, id breaking ties."""
    return sorted(competitors, key=lambda c: (c.seed, c.id))


class RoundRobinScheduler(PairingStrategy):
    """Fixed all-play-all schedule.

    As a pairing strategy it rebuilds the whole schedule over every
    registered competitor of the division, whatever their status, so the
    schedule stays the same for the whole event. Paused and withdrawn
    competitors keep their seats; their games are settled by forfeit.
    """

    name = ALGO_ROUND_ROBIN

    def generate_schedule(
        self,
        competitors: Iterable[Competitor],
        cycles: int = 1,
        first_round: int = 1,
        division: Optional[str] = None,
    ) -> Schedule:
        """
        Build the complete schedule.

        Args:
            competitors: Field of the round robin, in seed order
            cycles: Number of times each pair meets
            first_round: Round number of the first scheduled round
            division: Division written on the pairings, defaults to the
                first competitor's division

        Returns:
            Pairings keyed by round number, byes last within a round

        Raises:
            UnsupportedFieldSizeException: Field outside 2-15 competitors
        """
        field = list(competitors)
        size = len(field)
        if not ROUND_ROBIN_MIN_FIELD <= size <= ROUND_ROBIN_MAX_FIELD:
            logger.error("Invalid field size for round robin: %d", size)
            raise UnsupportedFieldSizeException(
                size, ROUND_ROBIN_MIN_FIELD, ROUND_ROBIN_MAX_FIELD
            )
        if division is None:
            division = field[0].division

        slots: List[Optional[str]] = [c.id for c in field]
        if size % 2:
            slots.append(None)
        slot_count = len(slots)
        rounds_per_cycle = slot_count - 1

        schedule: Schedule = {}
        round_number = first_round
        for cycle in range(max(cycles, 1)):
            seats = list(slots)
            for round_index in range(rounds_per_cycle):
                games: List[Pairing] = []
                byes: List[Pairing] = []
                for table in range(slot_count // 2):
                    first, second = seats[table], seats[slot_count - 1 - table]
                    # The fixed seat alternates sides from round to round
                    if table == 0 and round_index % 2:
                        first, second = second, first
                    if cycle % 2:
                        first, second = second, first
                    if first is None or second is None:
                        byes.append(
                            bye_pairing(round_number, first or second, division)
                        )
                        continue
                    games.append(
                        Pairing(
                            round=round_number,
                            player1=first,
                            player2=second,
                            division=division,
                        )
                    )
                schedule[round_number] = games + byes
                seats = [seats[0], seats[-1]] + seats[1:-1]
                round_number += 1

        logger.info(
            "Round robin schedule: %d competitors, %d round(s) over %d cycle(s)",
            size,
            len(schedule),
            max(cycles, 1),
        )
        return schedule

    def expected_ids(self, context: PairingContext) -> Set[str]:
        return {c.id for c in context.ranked}

    def pair(self, context: PairingContext) -> List[Pairing]:
        field = seed_order(context.ranked)
        schedule = self.generate_schedule(
            field, cycles=context.round_robin_cycles, division=context.division
        )
        scheduled_round = (context.round_number - 1) % len(schedule) + 1
        if scheduled_round != context.round_number:
            logger.info(
                "Round %d repeats scheduled round %d",
                context.round_number,
                scheduled_round,
            )
        return [
            p.with_changes(round=context.round_number)
            for p in schedule[scheduled_round]
        ]


def generate_round_robin_schedule(
    competitors: Iterable[Competitor],
    cycles: int = 1,
    division: Optional[str] = None,
) -> Dict[int, List[Pairing]]:
    """Complete round robin schedule of a field, ordered by seed.

    Args:
        competitors: Field of the round robin (2-15 competitors)
        cycles: Number of times each pair meets
        division: Only schedule competitors of this division

    Returns:
        Pairings keyed by round number starting at 1
    """
    field = seed_order(
        c for c in competitors if division is None or c.division == division
    )
    return RoundRobinScheduler().generate_schedule(
        field, cycles=cycles, division=division
    )
