"""Pairing data class."""

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

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional

from tourneypairing.constants import BYE, DEFAULT_DIVISION
from tourneypairing.type_hints import StartSide


@dataclass(frozen=True)
class Pairing:
    """One table of one round.

    Attributes
    ----------
    round : int
        Round number (1-indexed).
    player1 : str
        ID of the first competitor.
    player2 : str
        ID of the second competitor, or the ``BYE`` sentinel.
    table : int or None
        Table number, None for byes.
    division : str
        Division the pairing belongs to.
    starts : int or None
        1 if player1 moves first, 2 if player2 does, None for byes.
    is_gibson : bool
        Pairing involves a competitor whose prize place is clinched.
    note : str or None
        Free-form annotation, e.g. for forced rematches.
    """

    round: int
    player1: str
    player2: str
    table: Optional[int] = None
    division: str = DEFAULT_DIVISION
    starts: Optional[StartSide] = None
    is_gibson: bool = False
    note: Optional[str] = None

    @property
    def is_bye(self) -> bool:
        return self.player2 == BYE

    @property
    def competitor_ids(self) -> List[str]:
        """Real competitor ids seated at this pairing."""
        if self.is_bye:
            return [self.player1]
        return [self.player1, self.player2]

    @property
    def starter_id(self) -> Optional[str]:
        if self.starts == 1:
            return self.player1
        if self.starts == 2:
            return self.player2
        return None

    def opponent_of(self, competitor_id: str) -> Optional[str]:
        """Opponent of the given competitor, None for a bye."""
        if self.is_bye:
            return None
        if competitor_id == self.player1:
            return self.player2
        if competitor_id == self.player2:
            return self.player1
        return None

    def involves(self, competitor_id: str) -> bool:
        return competitor_id in (self.player1, self.player2)

    def with_changes(self, **changes: Any) -> "Pairing":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize pairing to dictionary."""
        return {
            "round": self.round,
            "table": self.table,
            "player1": self.player1,
            "player2": self.player2,
            "division": self.division,
            "starts": self.starts,
            "is_gibson": self.is_gibson,
            "note": self.note,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Pairing":
        """Deserialize pairing from dictionary."""
        return cls(
            round=int(data["round"]),
            player1=str(data["player1"]),
            player2=str(data["player2"]),
            table=data.get("table"),
            division=data.get("division") or DEFAULT_DIVISION,
            starts=data.get("starts"),
            is_gibson=data.get("is_gibson", False),
            note=data.get("note"),
        )


def bye_pairing(round_number: int, competitor_id: str, division: str) -> Pairing:
    """Build the bye pairing of a competitor."""
    return Pairing(
        round=round_number, player1=competitor_id, player2=BYE, division=division
    )
