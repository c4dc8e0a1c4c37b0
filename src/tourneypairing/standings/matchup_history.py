"""Matchup history: which competitors have already met."""

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
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple

from tourneypairing.models.game_result import GameResult
from tourneypairing.models.pairing import Pairing


@dataclass
class MatchupHistory:
    """
    Tracks historical pairings to prevent repeat matches.

    Both orderings of every pair are stored so lookups never need to
    normalise the key. Byes and absences never form a pair.

    Attributes
    ----------
    meetings : dict of (str, str) to list of int
        Rounds in which the two ids met, stored under both orderings.
    bye_recipients : set of str
        Ids that already received a bye.
    """

    meetings: Dict[Tuple[str, str], List[int]] = field(default_factory=dict)
    bye_recipients: Set[str] = field(default_factory=set)

    def add_pairing(self, player1_id: str, player2_id: str, round_number: int) -> None:
        """Record that two competitors met in a round."""
        if player1_id == player2_id:
            return
        for key in ((player1_id, player2_id), (player2_id, player1_id)):
            rounds = self.meetings.setdefault(key, [])
            if round_number not in rounds:
                rounds.append(round_number)

    def add_bye(self, competitor_id: str) -> None:
        self.bye_recipients.add(competitor_id)

    def has_played(self, player1_id: str, player2_id: str) -> bool:
        """Check if two competitors have previously played each other."""
        return (player1_id, player2_id) in self.meetings

    def times_played(self, player1_id: str, player2_id: str) -> int:
        return len(self.meetings.get((player1_id, player2_id), ()))

    def last_played_round(self, player1_id: str, player2_id: str) -> Optional[int]:
        rounds = self.meetings.get((player1_id, player2_id))
        return max(rounds) if rounds else None

    def has_had_bye(self, competitor_id: str) -> bool:
        return competitor_id in self.bye_recipients

    def opponents_of(self, competitor_id: str) -> Set[str]:
        return {b for (a, b) in self.meetings if a == competitor_id}

    def __len__(self) -> int:
        """Number of distinct unordered pairs played."""
        return len(self.meetings) // 2

    @classmethod
    def from_results(
        cls, results: Iterable[GameResult], up_to_round: Optional[int] = None
    ) -> "MatchupHistory":
        """Build history from results, optionally bounded to a round.

        Args:
            results: Game results in any order.
            up_to_round: Ignore results of later rounds when given.

        Returns:
            The populated history.
        """
        history = cls()
        for result in results:
            if up_to_round is not None and result.round > up_to_round:
                continue
            if result.player2_id is None:
                if result.is_bye:
                    history.add_bye(result.player1_id)
                continue
            history.add_pairing(result.player1_id, result.player2_id, result.round)
        return history

    @classmethod
    def for_teams(
        cls,
        results: Iterable[GameResult],
        team_of: Mapping[str, str],
        up_to_round: Optional[int] = None,
    ) -> "MatchupHistory":
        """Build a team-level history from member results.

        Args:
            results: Game results between individual members.
            team_of: Competitor id to team id.
            up_to_round: Ignore results of later rounds when given.

        Returns:
            History whose ids are team ids. A round in which every result of a
            team's members is a bye counts as a team bye.
        """
        history = cls()
        byes_by_round: Dict[int, Set[str]] = {}
        played_by_round: Dict[int, Set[str]] = {}
        for result in results:
            if up_to_round is not None and result.round > up_to_round:
                continue
            team1 = team_of.get(result.player1_id)
            if team1 is None:
                continue
            if result.player2_id is None:
                if result.is_bye:
                    byes_by_round.setdefault(result.round, set()).add(team1)
                continue
            team2 = team_of.get(result.player2_id)
            if team2 is None or team2 == team1:
                continue
            played_by_round.setdefault(result.round, set()).update((team1, team2))
            history.add_pairing(team1, team2, result.round)
        for round_number, teams in byes_by_round.items():
            for team_id in teams - played_by_round.get(round_number, set()):
                history.add_bye(team_id)
        return history

    def add_schedule(
        self,
        schedule: Mapping[int, Iterable[Pairing]],
        before_round: Optional[int] = None,
        team_of: Optional[Mapping[str, str]] = None,
    ) -> None:
        """Add committed pairings, including rounds without results yet.

        Args:
            schedule: Pairings keyed by round number.
            before_round: Ignore this round and later ones when given.
            team_of: Competitor id to team id; pairs and byes are then
                recorded for teams, and a team only has a bye in a round
                where none of its members played.
        """
        for round_number, pairings in schedule.items():
            if before_round is not None and round_number >= before_round:
                continue
            played: Set[str] = set()
            byes: Set[str] = set()
            for pairing in pairings:
                ids = [
                    team_of.get(cid) if team_of is not None else cid
                    for cid in pairing.competitor_ids
                ]
                if None in ids:
                    continue
                if pairing.is_bye:
                    byes.add(ids[0])
                    continue
                if ids[0] == ids[1]:
                    continue
                played.update(ids)
                self.add_pairing(ids[0], ids[1], round_number)
            for bye_id in byes - played:
                self.add_bye(bye_id)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize matchup history to dictionary."""
        return {
            "meetings": [
                {"pair": [a, b], "rounds": sorted(rounds)}
                for (a, b), rounds in self.meetings.items()
                if a < b
            ],
            "bye_recipients": sorted(self.bye_recipients),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchupHistory":
        """Deserialize matchup history from dictionary."""
        history = cls(bye_recipients=set(data.get("bye_recipients", [])))
        for entry in data.get("meetings", []):
            a, b = (str(x) for x in entry["pair"])
            for round_number in entry.get("rounds", []):
                history.add_pairing(a, b, int(round_number))
        return history
