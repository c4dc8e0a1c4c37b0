"""Competitor data model."""

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
from typing import Any, Dict, Optional

from tourneypairing.constants import (
    COMPETITOR_STATUSES,
    DEFAULT_DIVISION,
    STATUS_ACTIVE,
    STATUS_PAUSED,
    STATUS_WITHDRAWN,
    UNSEEDED,
)
from tourneypairing.exceptions import InvalidConfigurationException
from tourneypairing.type_hints import Status


@dataclass
class Competitor:
    """A registered competitor and their running record.

    Attributes
    ----------
    id : str
        Unique identifier.
    name : str
        Display name.
    rating : int
        Rating at registration, 0 when unrated.
    division : str
        Division the competitor is paired and ranked in.
    seed : int
        Original seed, the final standings tie-break (lower is better).
    status : str
        One of ``active``, ``paused`` or ``withdrawn``. Competitors are never
        removed mid-event, they are soft-disabled through this field.
    team_id : str or None
        Team the competitor plays for in team events.
    wins, losses, ties : int
        Game record, recomputed from results by the standings calculator.
    spread : int
        Cumulative point differential.
    match_wins : int
        League matches won (league mode only).
    rank : int or None
        Current rank, set by the standings calculator.
    """

    id: str
    name: str
    rating: int = 0
    division: str = DEFAULT_DIVISION
    seed: int = UNSEEDED
    status: Status = STATUS_ACTIVE
    team_id: Optional[str] = None
    wins: int = 0
    losses: int = 0
    ties: int = 0
    spread: int = 0
    match_wins: int = 0
    match_losses: int = 0
    rank: Optional[int] = None

    def __post_init__(self) -> None:
        if self.status not in COMPETITOR_STATUSES:
            raise InvalidConfigurationException(
                f"Unknown status '{self.status}' for competitor {self.id}"
            )

    @property
    def score(self) -> float:
        """Game score, a tie counting as half a win."""
        return self.wins + 0.5 * self.ties

    @property
    def games_played(self) -> int:
        return self.wins + self.losses + self.ties

    @property
    def is_active(self) -> bool:
        return self.status == STATUS_ACTIVE

    @property
    def is_paused(self) -> bool:
        return self.status == STATUS_PAUSED

    @property
    def is_withdrawn(self) -> bool:
        return self.status == STATUS_WITHDRAWN

    def with_record(self, **changes: Any) -> "Competitor":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def reset_record(self) -> "Competitor":
        """Return a copy with an empty record and no rank."""
        return replace(
            self,
            wins=0,
            losses=0,
            ties=0,
            spread=0,
            match_wins=0,
            match_losses=0,
            rank=None,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize competitor to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "rating": self.rating,
            "division": self.division,
            "seed": self.seed,
            "status": self.status,
            "team_id": self.team_id,
            "wins": self.wins,
            "losses": self.losses,
            "ties": self.ties,
            "spread": self.spread,
            "match_wins": self.match_wins,
            "match_losses": self.match_losses,
            "rank": self.rank,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Competitor":
        """Deserialize competitor from dictionary."""
        return cls(
            id=str(data["id"]),
            name=data.get("name", str(data["id"])),
            rating=int(data.get("rating") or 0),
            division=data.get("division") or DEFAULT_DIVISION,
            seed=int(data["seed"]) if data.get("seed") is not None else UNSEEDED,
            status=data.get("status", STATUS_ACTIVE),
            team_id=data.get("team_id"),
            wins=data.get("wins", 0),
            losses=data.get("losses", 0),
            ties=data.get("ties", 0),
            spread=data.get("spread", 0),
            match_wins=data.get("match_wins", 0),
            match_losses=data.get("match_losses", 0),
            rank=data.get("rank"),
        )

    def __str__(self) -> str:
        return f"{self.name} ({self.id})"
