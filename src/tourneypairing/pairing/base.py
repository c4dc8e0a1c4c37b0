"""Common interface of the pairing strategies."""

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

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Set

from tourneypairing.constants import MODE_INDIVIDUAL
from tourneypairing.exceptions import InsufficientPlayersException
from tourneypairing.models.competitor import Competitor
from tourneypairing.models.config import PairingConfiguration
from tourneypairing.models.pairing import Pairing, bye_pairing
from tourneypairing.models.team import Team
from tourneypairing.standings.matchup_history import MatchupHistory
from tourneypairing.type_hints import IdPair


@dataclass
class PairingContext:
    """Everything a strategy needs to pair one division for one round.

    Attributes:
        round_number: Round being paired (1-indexed)
        division: Division being paired
        ranked: Every competitor of the division, best first, ranked as of
            the configured base round (paused and withdrawn included)
        history: Matchup history of the rounds already played
        config: Pairing settings of this round
        total_rounds: Rounds in the tournament
        mode: Standings mode of the tournament
        teams: Ranked teams with members in this division (team events)
        team_history: Team-level matchup history (team events)
        round_robin_cycles: Times each pair meets in a round robin
        base_round: Round the ranking was taken after, None for the round
            before the one being paired
    """

    round_number: int
    division: str
    ranked: List[Competitor]
    history: MatchupHistory
    config: PairingConfiguration
    total_rounds: int
    mode: str = MODE_INDIVIDUAL
    teams: List[Team] = field(default_factory=list)
    team_history: Optional[MatchupHistory] = None
    round_robin_cycles: int = 1
    base_round: Optional[int] = None

    @property
    def rounds_remaining(self) -> int:
        """Rounds whose results are not in the ranking yet.

        Counts the round being paired and any earlier round still in play
        when the ranking lags behind.
        """
        ranked_through = self.round_number - 1
        if self.base_round is not None:
            ranked_through = min(self.base_round, ranked_through)
        return max(self.total_rounds - ranked_through, 0)

    def eligible(self) -> List[Competitor]:
        """Active competitors in rank order."""
        return [c for c in self.ranked if c.is_active]

    def ratings(self) -> dict:
        return {c.id: c.rating for c in self.ranked}


class PairingStrategy(ABC):
    """A pairing algorithm, selected by name through the registry.

    Implementations are pure: the same context always yields the same
    pairings (the random pairer only when seeded). Pairings come back
    without tables or starts; the orchestrator assigns those.
    """

    name: str = ""

    @abstractmethod
    def pair(self, context: PairingContext) -> List[Pairing]:
        """Pair one division for one round.

        Args:
            context: Ranked division, history and settings

        Returns:
            Pairings for the round, byes last

        Raises:
            InsufficientPlayersException: Fewer than two eligible competitors
        """

    def expected_ids(self, context: PairingContext) -> Set[str]:
        """Ids that must each appear exactly once in the result."""
        return {c.id for c in context.eligible()}

    @staticmethod
    def require_two(context: PairingContext, count: int) -> None:
        if count < 2:
            raise InsufficientPlayersException(count, context.division)

    @staticmethod
    def build_pairings(
        context: PairingContext,
        pairs: List[IdPair],
        bye_ids: List[str],
        rematches: Optional[Set[frozenset]] = None,
        gibson_ids: Optional[Set[str]] = None,
    ) -> List[Pairing]:
        """Turn id pairs and bye ids into Pairing records."""
        rematches = rematches or set()
        gibson_ids = gibson_ids or set()
        pairings = []
        for player1, player2 in pairs:
            is_rematch = frozenset({player1, player2}) in rematches
            pairings.append(
                Pairing(
                    round=context.round_number,
                    player1=player1,
                    player2=player2,
                    division=context.division,
                    is_gibson=player1 in gibson_ids or player2 in gibson_ids,
                    note="rematch" if is_rematch else None,
                )
            )
        for competitor_id in bye_ids:
            pairings.append(
                bye_pairing(context.round_number, competitor_id, context.division)
            )
        return pairings
