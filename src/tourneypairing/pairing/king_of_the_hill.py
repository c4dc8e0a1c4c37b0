"""King of the hill pairing."""

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

from typing import List

from tourneypairing.constants import ALGO_KING_OF_THE_HILL
from tourneypairing.models.pairing import Pairing
from tourneypairing.pairing.base import PairingContext, PairingStrategy
from tourneypairing.utils import setup_logger

logger = setup_logger(__name__)


class KingOfTheHillPairer(PairingStrategy):
    """Pair strictly by rank: 1v2, 3v4, ...

    The bottom competitor sits out on odd fields. Rematches are never
    avoided, only noted on the pairing.
    """

    name = ALGO_KING_OF_THE_HILL

    def pair(self, context: PairingContext) -> List[Pairing]:
        ids = [c.id for c in context.eligible()]
        self.require_two(context, len(ids))

        byes = [ids.pop()] if len(ids) % 2 else []
        pairs = [(ids[i], ids[i + 1]) for i in range(0, len(ids), 2)]
        rematches = {frozenset(p) for p in pairs if context.history.has_played(*p)}
        if rematches:
            logger.debug(
                "Round %d (%s): %d rematch(es) in king of the hill pairing",
                context.round_number,
                context.division,
                len(rematches),
            )
        return self.build_pairings(context, pairs, byes, rematches)
