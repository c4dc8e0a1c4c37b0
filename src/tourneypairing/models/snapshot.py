"""Tournament snapshot: everything the engine reads from storage."""

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

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from tourneypairing.models.competitor import Competitor
from tourneypairing.models.config import TournamentConfig
from tourneypairing.models.game_result import GameResult
from tourneypairing.models.pairing import Pairing
from tourneypairing.models.team import Team


@dataclass
class TournamentSnapshot:
    """Container for the stored state of one tournament.

    Attributes
    ----------
    tournament_id : str
        Identifier used by the schedule store.
    config : TournamentConfig
        Tournament settings.
    competitors : list of Competitor
        Full roster, including paused and withdrawn competitors.
    teams : list of Team
        Teams (team events only).
    results : list of GameResult
        Every recorded or generated result.
    schedule : dict of int to list of Pairing
        Committed pairings keyed by round number.
    current_round : int
        Latest paired round, 0 before the first pairing.
    version : int
        Optimistic concurrency token, bumped on every write.
    """

    tournament_id: str
    config: TournamentConfig
    competitors: List[Competitor] = field(default_factory=list)
    teams: List[Team] = field(default_factory=list)
    results: List[GameResult] = field(default_factory=list)
    schedule: Dict[int, List[Pairing]] = field(default_factory=dict)
    current_round: int = 0
    version: int = 0

    def competitor_map(self) -> Dict[str, Competitor]:
        return {c.id: c for c in self.competitors}

    def get_competitor(self, competitor_id: str) -> Optional[Competitor]:
        return self.competitor_map().get(competitor_id)

    def results_for_round(self, round_number: int) -> List[GameResult]:
        return [r for r in self.results if r.round == round_number]

    def results_before(self, round_number: int) -> List[GameResult]:
        return [r for r in self.results if r.round < round_number]

    @property
    def latest_paired_round(self) -> int:
        return max(self.schedule) if self.schedule else 0

    def to_dict(self) -> Dict[str, Any]:
        """Serialize snapshot to dictionary."""
        return {
            "tournament_id": self.tournament_id,
            "config": self.config.to_dict(),
            "competitors": [c.to_dict() for c in self.competitors],
            "teams": [t.to_dict() for t in self.teams],
            "results": [r.to_dict() for r in self.results],
            "schedule": {
                str(round_number): [p.to_dict() for p in pairings]
                for round_number, pairings in sorted(self.schedule.items())
            },
            "current_round": self.current_round,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TournamentSnapshot":
        """Deserialize snapshot from dictionary."""
        return cls(
            tournament_id=str(data["tournament_id"]),
            config=TournamentConfig.from_dict(data["config"]),
            competitors=[Competitor.from_dict(c) for c in data.get("competitors", [])],
            teams=[Team.from_dict(t) for t in data.get("teams", [])],
            results=[GameResult.from_dict(r) for r in data.get("results", [])],
            schedule={
                int(round_number): [Pairing.from_dict(p) for p in pairings]
                for round_number, pairings in data.get("schedule", {}).items()
            },
            current_round=data.get("current_round", 0),
            version=data.get("version", 0),
        )
