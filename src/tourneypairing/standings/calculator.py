"""Standings calculation for tournaments.

This module folds result history into per-competitor records and produces
a strict, deterministic ranking. Every pairing strategy ranks through it.
"""

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

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from tourneypairing.constants import (
    DEFAULT_GAMES_PER_MATCH,
    MODE_INDIVIDUAL,
    MODE_LEAGUE,
)
from tourneypairing.models.competitor import Competitor
from tourneypairing.models.game_result import GameResult, Match, match_key
from tourneypairing.models.team import Team
from tourneypairing.utils import setup_logger

logger = setup_logger(__name__)


@dataclass
class RankedRoster:
    """Competitors in rank order, with the warnings raised while ranking.

    Attributes:
        competitors: Copies of the roster entries with records and ranks set
        warnings: Messages for results that were skipped
        mode: Standings mode used for the ranking
    """

    competitors: List[Competitor]
    warnings: List[str] = field(default_factory=list)
    mode: str = MODE_INDIVIDUAL

    def __iter__(self) -> Iterator[Competitor]:
        return iter(self.competitors)

    def __len__(self) -> int:
        return len(self.competitors)

    def __getitem__(self, index: int) -> Competitor:
        return self.competitors[index]

    def by_id(self) -> Dict[str, Competitor]:
        return {c.id: c for c in self.competitors}

    def rank_of(self, competitor_id: str) -> Optional[int]:
        competitor = self.by_id().get(competitor_id)
        return competitor.rank if competitor else None

    def ids(self) -> List[str]:
        return [c.id for c in self.competitors]

    def in_division(self, division: str) -> List[Competitor]:
        """Competitors of one division, still in overall rank order."""
        return [c for c in self.competitors if c.division == division]


def standings_sort_key(competitor: Competitor, mode: str) -> Tuple:
    """Sort key producing the ranking order (best first).

    Match wins (league only), then game score, then spread, then seed, then
    id so that no two competitors ever compare equal.
    """
    match_wins = competitor.match_wins if mode == MODE_LEAGUE else 0
    return (
        -match_wins,
        -competitor.score,
        -competitor.spread,
        competitor.seed,
        competitor.id,
    )


class StandingsCalculator:
    """Folds game results into records and ranks the field.

    The calculator is a pure read-only fold: it never mutates the roster or
    the results it is given, so it can be called repeatedly and from any
    thread.
    """

    def __init__(
        self,
        mode: str = MODE_INDIVIDUAL,
        games_per_match: int = DEFAULT_GAMES_PER_MATCH,
    ) -> None:
        self.mode = mode
        self.games_per_match = games_per_match

    def compute(
        self,
        roster: Iterable[Competitor],
        results: Iterable[GameResult],
        as_of_round: Optional[int] = None,
    ) -> RankedRoster:
        """Compute records and ranks.

        Args:
            roster: Every registered competitor
            results: Result history in any order
            as_of_round: Only count results up to and including this round

        Returns:
            RankedRoster with fresh copies of the competitors
        """
        competitors = {c.id: c.reset_record() for c in roster}
        warnings: List[str] = []
        counted: List[GameResult] = []

        for result in results:
            if as_of_round is not None and result.round > as_of_round:
                continue
            problem = self._validate(result, competitors)
            if problem:
                logger.warning("Skipping result: %s", problem)
                warnings.append(problem)
                continue
            counted.append(result)
            self._accumulate(result, competitors)

        if self.mode == MODE_LEAGUE:
            self._apply_match_wins(counted, competitors)

        ranked = sorted(
            competitors.values(), key=lambda c: standings_sort_key(c, self.mode)
        )
        for index, competitor in enumerate(ranked):
            competitor.rank = index + 1

        logger.debug(
            "Ranked %d competitors from %d results (as of round %s)",
            len(ranked),
            len(counted),
            as_of_round,
        )
        return RankedRoster(competitors=ranked, warnings=warnings, mode=self.mode)

    def _validate(
        self, result: GameResult, competitors: Dict[str, Competitor]
    ) -> Optional[str]:
        """Describe why a result cannot be counted, None when it can."""
        if result.player1_id not in competitors:
            return (
                f"round {result.round}: unknown competitor '{result.player1_id}'"
            )
        if result.player2_id is not None:
            if result.player2_id not in competitors:
                return (
                    f"round {result.round}: unknown competitor "
                    f"'{result.player2_id}'"
                )
            if result.player2_id == result.player1_id:
                return (
                    f"round {result.round}: competitor '{result.player1_id}' "
                    "paired with themselves"
                )
        return None

    def _accumulate(
        self, result: GameResult, competitors: Dict[str, Competitor]
    ) -> None:
        first = competitors[result.player1_id]
        margin = result.score1 - result.score2
        first.spread += margin
        if result.player2_id is None:
            # Bye or absence: only the competitor themselves is credited
            _record_outcome(first, margin)
            return
        second = competitors[result.player2_id]
        second.spread -= margin
        _record_outcome(first, margin)
        _record_outcome(second, -margin)

    def _apply_match_wins(
        self, results: List[GameResult], competitors: Dict[str, Competitor]
    ) -> None:
        """Credit match wins from games grouped into league matches."""
        grouped: Dict[tuple, List[GameResult]] = defaultdict(list)
        for result in results:
            key = match_key(result)
            if key is None:
                holder = competitors[result.player1_id]
                if result.is_bye:
                    holder.match_wins += 1
                elif result.is_forfeit:
                    holder.match_losses += 1
                continue
            grouped[key].append(result)

        for games in grouped.values():
            match = Match.from_results(games, self.games_per_match)
            forfeits = [g for g in games if g.is_forfeit and g.winner_id()]
            # A forfeited game decides the whole match
            winner = forfeits[0].winner_id() if forfeits else match.winner_id
            if winner is None:
                continue
            loser = match.player2_id if winner == match.player1_id else match.player1_id
            competitors[winner].match_wins += 1
            competitors[loser].match_losses += 1


def _record_outcome(competitor: Competitor, margin: int) -> None:
    if margin > 0:
        competitor.wins += 1
    elif margin < 0:
        competitor.losses += 1
    else:
        competitor.ties += 1


def compute_standings(
    roster: Iterable[Competitor],
    results: Iterable[GameResult],
    mode: str = MODE_INDIVIDUAL,
    as_of_round: Optional[int] = None,
    games_per_match: int = DEFAULT_GAMES_PER_MATCH,
) -> RankedRoster:
    """Compute the ranked roster, see ``StandingsCalculator.compute``."""
    calculator = StandingsCalculator(mode=mode, games_per_match=games_per_match)
    return calculator.compute(roster, results, as_of_round=as_of_round)


def compute_team_standings(
    teams: Iterable[Team],
    roster: Iterable[Competitor],
    results: Iterable[GameResult],
    as_of_round: Optional[int] = None,
) -> List[Team]:
    """Rank teams from their members' game results.

    In every round the games between members of two teams form one team
    match: the team whose members won more games wins it, equal game wins
    tie it. A round where a team's members only received byes counts as a
    team bye, which is a win.

    Args:
        teams: Registered teams
        roster: Every registered competitor
        results: Result history in any order
        as_of_round: Only count results up to and including this round

    Returns:
        Copies of the teams with records and ranks set, best first
    """
    teams = list(teams)
    ranked = {t.id: t.with_record(wins=0, losses=0, ties=0, spread=0) for t in teams}
    team_of = team_lookup(teams, roster)

    # (round, team_a, team_b) with team_a < team_b -> board wins of each side
    board_wins: Dict[Tuple[int, str, str], Dict[str, int]] = defaultdict(
        lambda: defaultdict(int)
    )
    bye_rounds: Dict[str, set] = defaultdict(set)
    played_rounds: Dict[str, set] = defaultdict(set)

    for result in results:
        if as_of_round is not None and result.round > as_of_round:
            continue
        team1 = team_of.get(result.player1_id)
        if team1 is None:
            continue
        if result.player2_id is None:
            if result.is_bye:
                bye_rounds[team1].add(result.round)
            continue
        team2 = team_of.get(result.player2_id)
        if team2 is None or team2 == team1:
            continue
        key = (result.round,) + tuple(sorted((team1, team2)))
        played_rounds[team1].add(result.round)
        played_rounds[team2].add(result.round)
        winner = result.winner_id()
        if winner is not None:
            board_wins[key][team_of[winner]] += 1

    for (round_number, team_a, team_b), wins in board_wins.items():
        a_wins, b_wins = wins[team_a], wins[team_b]
        ranked[team_a].spread += a_wins - b_wins
        ranked[team_b].spread += b_wins - a_wins
        if a_wins > b_wins:
            ranked[team_a].wins += 1
            ranked[team_b].losses += 1
        elif b_wins > a_wins:
            ranked[team_b].wins += 1
            ranked[team_a].losses += 1
        else:
            ranked[team_a].ties += 1
            ranked[team_b].ties += 1

    # Team matches whose boards were all drawn never reach board_wins
    for team_id, rounds in played_rounds.items():
        for round_number in rounds:
            if not any(
                key[0] == round_number and team_id in key[1:] for key in board_wins
            ):
                ranked[team_id].ties += 1

    for team_id, rounds in bye_rounds.items():
        ranked[team_id].wins += len(rounds - played_rounds[team_id])

    ordered = sorted(
        ranked.values(), key=lambda t: (-t.score, -t.spread, t.seed, t.id)
    )
    for index, team in enumerate(ordered):
        team.rank = index + 1
    return ordered


def team_lookup(teams: Iterable[Team], roster: Iterable[Competitor]) -> Dict[str, str]:
    """Map competitor id to team id.

    Board lists win over the ``team_id`` written on a competitor.
    """
    teams = list(teams)
    known = {t.id for t in teams}
    team_of = {c.id: c.team_id for c in roster if c.team_id in known}
    for team in teams:
        for member_id in team.member_ids:
            team_of[member_id] = team.id
    return team_of
