"""Random pairing."""

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

import random
from typing import List

from tourneypairing.constants import ALGO_RANDOM
from tourneypairing.models.pairing import Pairing
from tourneypairing.pairing.base import PairingContext, PairingStrategy
from tourneypairing.pairing.swiss import pair_by_rank, select_bye
from tourneypairing.utils import setup_logger

logger = setup_logger(__name__)


class RandomPairer(PairingStrategy):
    """Pair the active field in random order, still avoiding rematches.

    The bye follows the usual rule (lowest-ranked competitor without a
    bye); the others are shuffled and handed to the Swiss core. With
    ``random_seed`` set, round ``n`` is shuffled with ``random_seed + n`` so
    the event is reproducible while rounds still differ.
    """

    name = ALGO_RANDOM

    def pair(self, context: PairingContext) -> List[Pairing]:
        ids = [c.id for c in context.eligible()]
        self.require_two(context, len(ids))

        byes = []
        if len(ids) % 2:
            bye_id = select_bye(
                ids, context.history, context.round_number, context.ratings()
            )
            ids.remove(bye_id)
            byes.append(bye_id)

        seed = context.config.random_seed
        rng = random.Random(None if seed is None else seed + context.round_number)
        rng.shuffle(ids)
        logger.debug("Round %d: shuffled order %s", context.round_number, ids)

        pairs, rematches = pair_by_rank(
            ids, context.history, context.config.allow_rematches
        )
        return self.build_pairings(context, pairs, byes, rematches)
