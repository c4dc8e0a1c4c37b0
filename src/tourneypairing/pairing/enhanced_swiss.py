"""Swiss pairing with the Gibson rule."""

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

from typing import List, Optional, Set

from tourneypairing.constants import ALGO_ENHANCED_SWISS
from tourneypairing.models.competitor import Competitor
from tourneypairing.models.pairing import Pairing
from tourneypairing.pairing.base import PairingContext
from tourneypairing.pairing.swiss import SwissPairer, pair_by_rank, select_bye
from tourneypairing.standings.gibson import GibsonDetector
from tourneypairing.type_hints import IdPair
from tourneypairing.utils import setup_logger

logger = setup_logger(__name__)


class EnhancedSwissPairer(SwissPairer):
    """Swiss pairing that keeps clinched competitors away from the race.

    Competitors whose prize placement is decided are paired among
    themselves first. When their number is odd, the last one plays the
    highest-ranked competitor who can no longer reach a prize, so that the
    clinched result cannot decide the remaining prizes. Everyone else is
    paired by the Swiss core. Without the Gibson rule enabled this is plain
    Swiss pairing.
    """

    name = ALGO_ENHANCED_SWISS

    def pair(self, context: PairingContext) -> List[Pairing]:
        config = context.config
        if not config.gibson_rule_enabled:
            return super().pair(context)

        detector = GibsonDetector(config.prize_count, context.mode)
        eligible = context.eligible()
        self.require_two(context, len(eligible))

        clinched = [
            c
            for c in detector.clinched(context.ranked, context.rounds_remaining)
            if c.is_active
        ]
        if not clinched:
            return super().pair(context)

        clinched_ids = {c.id for c in clinched}
        ids = [c.id for c in eligible]
        byes = []
        if len(ids) % 2:
            # The bye never goes to a clinched competitor while others remain
            pool = [i for i in ids if i not in clinched_ids] or ids
            bye_id = select_bye(
                pool, context.history, context.round_number, context.ratings()
            )
            ids.remove(bye_id)
            byes.append(bye_id)
            clinched_ids.discard(bye_id)

        locked = [i for i in ids if i in clinched_ids]
        pairs: List[IdPair] = []
        rematches: Set[frozenset] = set()

        if len(locked) % 2:
            odd_one = locked.pop()
            others = [i for i in ids if i not in clinched_ids]
            opponent = self._gibson_opponent(
                odd_one, others, eligible, detector, context
            )
            pairs.append((odd_one, opponent))
            if context.history.has_played(odd_one, opponent):
                rematches.add(frozenset({odd_one, opponent}))
            logger.info(
                "Round %d (%s): Gibson pairing %s vs %s",
                context.round_number,
                context.division,
                odd_one,
                opponent,
            )
            ids.remove(opponent)

        if locked:
            locked_pairs, locked_rematches = pair_by_rank(
                locked, context.history, config.allow_rematches
            )
            pairs = locked_pairs + pairs
            rematches |= locked_rematches

        rest = [i for i in ids if i not in clinched_ids]
        rest_pairs, rest_rematches = pair_by_rank(
            rest, context.history, config.allow_rematches
        )
        pairs.extend(rest_pairs)
        rematches |= rest_rematches

        return self.build_pairings(
            context, pairs, byes, rematches, gibson_ids={c.id for c in clinched}
        )

    @staticmethod
    def _gibson_opponent(
        clinched_id: str,
        candidates: List[str],
        eligible: List[Competitor],
        detector: GibsonDetector,
        context: PairingContext,
    ) -> str:
        """Highest-ranked non-contender, else highest-ranked non-prize place."""
        by_id = {c.id: c for c in eligible}
        place = {c.id: index + 1 for index, c in enumerate(context.ranked)}
        ordered = [by_id[i] for i in candidates]

        def first(predicate) -> Optional[str]:
            fresh = [
                c.id
                for c in ordered
                if predicate(c) and not context.history.has_played(clinched_id, c.id)
            ]
            if fresh:
                return fresh[0]
            matching = [c.id for c in ordered if predicate(c)]
            return matching[0] if matching else None

        non_contender = first(
            lambda c: not detector.is_contender(
                c, context.ranked, context.rounds_remaining
            )
        )
        if non_contender is not None:
            return non_contender
        outside_prizes = first(
            lambda c: place[c.id] > detector.prize_count
        )
        if outside_prizes is not None:
            return outside_prizes
        return ordered[0].id
