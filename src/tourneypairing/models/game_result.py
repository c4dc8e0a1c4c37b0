"""Game result and league match data classes."""

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
from typing import Any, Dict, FrozenSet, List, Optional


@dataclass(frozen=True)
class GameResult:
    """Represents the result of a single game.

    A result without ``player2_id`` is a bye or an absence and only
    counts for player1.

    Attributes
    ----------
    round : int
        Round the game belongs to.
    player1_id : str
        ID of the first player.
    player2_id : str or None
        ID of the second player, None for byes and penalties.
    score1, score2 : int
        Points scored by each side.
    is_forfeit : bool
        Result decided by forfeit or absence penalty.
    is_bye : bool
        Result awarded for a bye.
    match_id : str or None
        League match this game belongs to.
    auto_generated : bool
        Result synthesized by the engine rather than reported.
    """

    round: int
    player1_id: str
    player2_id: Optional[str]
    score1: int
    score2: int
    is_forfeit: bool = False
    is_bye: bool = False
    match_id: Optional[str] = None
    auto_generated: bool = False

    @property
    def has_opponent(self) -> bool:
        return self.player2_id is not None

    @property
    def pair_key(self) -> Optional[FrozenSet[str]]:
        """Unordered key of the two players, None without an opponent."""
        if self.player2_id is None:
            return None
        return frozenset({self.player1_id, self.player2_id})

    def involves(self, competitor_id: str) -> bool:
        return competitor_id in (self.player1_id, self.player2_id)

    def score_for(self, competitor_id: str) -> int:
        return self.score1 if competitor_id == self.player1_id else self.score2

    def opponent_score_for(self, competitor_id: str) -> int:
        return self.score2 if competitor_id == self.player1_id else self.score1

    def winner_id(self) -> Optional[str]:
        """Winner of the game, None for a tie or a lost bye/penalty."""
        if self.score1 > self.score2:
            return self.player1_id
        if self.score2 > self.score1:
            return self.player2_id
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize game result to dictionary."""
        return {
            "round": self.round,
            "player1_id": self.player1_id,
            "player2_id": self.player2_id,
            "score1": self.score1,
            "score2": self.score2,
            "is_forfeit": self.is_forfeit,
            "is_bye": self.is_bye,
            "match_id": self.match_id,
            "auto_generated": self.auto_generated,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameResult":
        """Deserialize game result from dictionary."""
        player2 = data.get("player2_id")
        return cls(
            round=int(data["round"]),
            player1_id=str(data["player1_id"]),
            player2_id=str(player2) if player2 is not None else None,
            score1=data.get("score1", 0),
            score2=data.get("score2", 0),
            is_forfeit=data.get("is_forfeit", False),
            is_bye=data.get("is_bye", False),
            match_id=data.get("match_id"),
            auto_generated=data.get("auto_generated", False),
        )


def match_key(result: GameResult) -> Optional[tuple]:
    """Key grouping the games of one league match.

    Results carrying a ``match_id`` group by it; otherwise games between the
    same pair in the same round form the match.
    """
    if result.player2_id is None:
        return None
    if result.match_id is not None:
        return ("id", result.match_id)
    return ("round", result.round, result.pair_key)


@dataclass
class Match:
    """A best-of-N series between a fixed pair for one round (league mode).

    Attributes
    ----------
    round : int
        Round the match is played in.
    player1_id, player2_id : str
        The two sides.
    games_per_match : int
        N in "best of N".
    match_id : str or None
        External match identifier.
    results : list of GameResult
        Games played so far.
    """

    round: int
    player1_id: str
    player2_id: str
    games_per_match: int
    match_id: Optional[str] = None
    results: List[GameResult] = field(default_factory=list)

    @property
    def wins_needed(self) -> int:
        """Strict majority of the games, ceil(N/2) for odd N."""
        return self.games_per_match // 2 + 1

    def game_wins(self, competitor_id: str) -> int:
        return sum(1 for r in self.results if r.winner_id() == competitor_id)

    @property
    def winner_id(self) -> Optional[str]:
        for side in (self.player1_id, self.player2_id):
            if self.game_wins(side) >= self.wins_needed:
                return side
        return None

    @property
    def is_complete(self) -> bool:
        return self.winner_id is not None

    def add_result(self, result: GameResult) -> None:
        self.results.append(result)

    @classmethod
    def from_results(
        cls, results: List[GameResult], games_per_match: int
    ) -> "Match":
        """Build a match from games that share a match key."""
        first = results[0]
        match = cls(
            round=first.round,
            player1_id=first.player1_id,
            player2_id=first.player2_id,
            games_per_match=games_per_match,
            match_id=first.match_id,
        )
        for result in results:
            match.add_result(result)
        return match
