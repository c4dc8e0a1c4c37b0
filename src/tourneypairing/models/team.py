"""Team data model."""

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

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from tourneypairing.constants import UNSEEDED


@dataclass
class Team:
    """A team of competitors playing board-aligned matches.

    Attributes
    ----------
    id : str
        Unique identifier.
    name : str
        Display name.
    seed : int
        Team seed, the final standings tie-break.
    member_ids : list of str
        Competitor ids in board order (first board first).
    wins, losses, ties : int
        Team match record, computed from member results.
    spread : int
        Board games won minus board games lost.
    rank : int or None
        Current team rank.
    """

    id: str
    name: str
    seed: int = UNSEEDED
    member_ids: List[str] = field(default_factory=list)
    wins: int = 0
    losses: int = 0
    ties: int = 0
    spread: int = 0
    rank: Optional[int] = None

    @property
    def score(self) -> float:
        return self.wins + 0.5 * self.ties

    def with_record(self, **changes: Any) -> "Team":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize team to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "seed": self.seed,
            "member_ids": list(self.member_ids),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Team":
        """Deserialize team from dictionary."""
        return cls(
            id=str(data["id"]),
            name=data.get("name", str(data["id"])),
            seed=int(data["seed"]) if data.get("seed") is not None else UNSEEDED,
            member_ids=[str(m) for m in data.get("member_ids", [])],
        )
