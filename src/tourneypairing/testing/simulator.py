"""Random event simulator.

Builds a roster, pairs every round through the orchestrator, plays the
games with random scores and checks the pairing invariants after each
round. Seeded runs are fully reproducible.
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

import math
import random
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from tourneypairing.constants import (
    ALGO_SWISS,
    ALGO_TEAM_SWISS,
    DEFAULT_GAMES_PER_MATCH,
    STATUS_ACTIVE,
    STATUS_PAUSED,
    TYPE_INDIVIDUAL,
    TYPE_LEAGUE,
    TYPE_TEAM,
)
from tourneypairing.models import (
    Competitor,
    GameResult,
    Pairing,
    Team,
    TournamentConfig,
    TournamentSnapshot,
)
from tourneypairing.tournament.orchestrator import PairingOrchestrator
from tourneypairing.tournament.result_recorder import ResultRecorder
from tourneypairing.tournament.store import InMemoryScheduleStore, ScheduleStore
from tourneypairing.utils import setup_logger

logger = setup_logger(__name__)


class RatingDistribution(Enum):
    """Rating distribution patterns for generated rosters."""

    UNIFORM = "uniform"
    NORMAL = "normal"
    CLUB = "club"
    UNRATED = "unrated"


class ResultPattern(Enum):
    """How game scores are generated."""

    REALISTIC = "realistic"
    RANDOM = "random"


@dataclass
class SimulationConfig:
    """Configuration for the event simulator."""

    num_competitors: int
    num_rounds: int
    algorithm: str = ALGO_SWISS
    tournament_type: str = TYPE_INDIVIDUAL
    rating_distribution: RatingDistribution = RatingDistribution.NORMAL
    rating_range: Tuple[int, int] = (800, 2000)
    result_pattern: ResultPattern = ResultPattern.REALISTIC
    seed: Optional[int] = None
    divisions: List[str] = field(default_factory=list)
    team_size: int = 4
    games_per_match: int = DEFAULT_GAMES_PER_MATCH
    gibson_rule_enabled: bool = False
    prize_count: Optional[int] = None
    # Percent chance per round that an active competitor pauses
    pause_rate: float = 0.0
    tie_percentage: int = 3
    tournament_id: str = "simulated"


class CompetitorFactory:
    """Factory for creating rosters (and teams for team events)."""

    def __init__(self, config: SimulationConfig, rng: random.Random):
        self.config = config
        self.random = rng

    def create_competitors(self) -> List[Competitor]:
        competitors = []
        divisions = self.config.divisions or [None]
        for i in range(self.config.num_competitors):
            rating = self._generate_rating()
            division = divisions[i % len(divisions)]
            competitor = Competitor(
                id=f"C{i + 1:03d}",
                name=f"Competitor {i + 1}",
                rating=rating,
                seed=i + 1,
            )
            if division is not None:
                competitor = competitor.with_record(division=division)
            competitors.append(competitor)
        logger.info(
            "Created %d competitors with %s distribution",
            len(competitors),
            self.config.rating_distribution.value,
        )
        return competitors

    def create_teams(
        self, competitors: List[Competitor]
    ) -> Tuple[List[Team], List[Competitor]]:
        """Split the roster into teams of ``team_size`` in seed order."""
        teams = []
        members = []
        size = max(self.config.team_size, 1)
        for start in range(0, len(competitors), size):
            number = start // size + 1
            team_id = f"T{number:02d}"
            chunk = competitors[start : start + size]
            teams.append(
                Team(
                    id=team_id,
                    name=f"Team {number}",
                    seed=number,
                    member_ids=[c.id for c in chunk],
                )
            )
            members.extend(c.with_record(team_id=team_id) for c in chunk)
        return teams, members

    def _generate_rating(self) -> int:
        min_rating, max_rating = self.config.rating_range
        distribution = self.config.rating_distribution
        if distribution == RatingDistribution.UNRATED:
            return 0
        if distribution == RatingDistribution.UNIFORM:
            return self.random.randint(min_rating, max_rating)
        if distribution == RatingDistribution.CLUB:
            base = self.random.choice([1000, 1200, 1400, 1600, 1800])
            return self.random.randint(base - 100, base + 100)
        mean = (min_rating + max_rating) / 2
        std_dev = (max_rating - min_rating) / 6
        rating = int(self.random.gauss(mean, std_dev))
        return max(min_rating, min(max_rating, rating))


class ScoreSimulator:
    """Simulates game scores between two competitors."""

    def __init__(self, config: SimulationConfig, rng: random.Random):
        self.config = config
        self.random = rng

    def simulate_game(self, first: Competitor, second: Competitor) -> Tuple[int, int]:
        """Return the scores of both sides."""
        base = self.random.randint(300, 450)
        if self.random.randint(1, 100) <= self.config.tie_percentage:
            return base, base
        margin = self.random.randint(1, 150)
        if self.config.result_pattern == ResultPattern.RANDOM:
            first_wins = self.random.random() < 0.5
        else:
            first_wins = self.random.random() < self._expected(first, second)
        if first_wins:
            return base + margin, base
        return base, base + margin

    @staticmethod
    def _expected(first: Competitor, second: Competitor) -> float:
        """Elo expectation of the first side."""
        return 1.0 / (1.0 + math.pow(10, (second.rating - first.rating) / 400.0))


@dataclass
class SimulationReport:
    """Outcome of a simulated event."""

    snapshot: TournamentSnapshot
    violations: List[str] = field(default_factory=list)
    rounds_paired: int = 0

    @property
    def ok(self) -> bool:
        return not self.violations


def check_round_invariants(
    snapshot: TournamentSnapshot, round_number: int, strict_byes: bool = True
) -> List[str]:
    """Describe every pairing invariant a committed round breaks.

    Args:
        snapshot: Tournament after the round was committed
        round_number: Round to check
        strict_byes: Require at most one bye per division

    Returns:
        Human readable violations, empty when the round is valid
    """
    problems = []
    pairings: List[Pairing] = snapshot.schedule.get(round_number, [])
    seats = Counter(cid for p in pairings for cid in p.competitor_ids)
    for competitor_id, count in seats.items():
        if count > 1:
            problems.append(
                f"round {round_number}: {competitor_id} seated {count} times"
            )
    for pairing in pairings:
        if not pairing.is_bye and pairing.player1 == pairing.player2:
            problems.append(f"round {round_number}: {pairing.player1} plays self")
        if pairing.is_bye and pairing.table is not None:
            problems.append(f"round {round_number}: bye has table {pairing.table}")
        if not pairing.is_bye and pairing.starts not in (1, 2):
            problems.append(
                f"round {round_number}: table {pairing.table} has no starter"
            )
    if strict_byes:
        byes = Counter(p.division for p in pairings if p.is_bye)
        for division, count in byes.items():
            if count > 1:
                problems.append(
                    f"round {round_number}: {count} byes in division {division}"
                )
    tables = [p.table for p in pairings if not p.is_bye]
    if len(tables) != len(set(tables)):
        problems.append(f"round {round_number}: table numbers repeat")
    return problems


class EventSimulator:
    """Runs a complete event through the engine with random results."""

    def __init__(
        self, config: SimulationConfig, store: Optional[ScheduleStore] = None
    ):
        self.config = config
        self.random = (
            random.Random(config.seed) if config.seed is not None else random.Random()
        )
        self.factory = CompetitorFactory(config, self.random)
        self.scores = ScoreSimulator(config, self.random)
        self.store = store or InMemoryScheduleStore()
        self.orchestrator = PairingOrchestrator(self.store)
        self.recorder = ResultRecorder(self.store)

    def create_event(self) -> TournamentSnapshot:
        competitors = self.factory.create_competitors()
        teams: List[Team] = []
        if self.config.tournament_type == TYPE_TEAM:
            teams, competitors = self.factory.create_teams(competitors)
        algorithm = self.config.algorithm
        if self.config.tournament_type == TYPE_TEAM:
            algorithm = ALGO_TEAM_SWISS
        snapshot = TournamentSnapshot(
            tournament_id=self.config.tournament_id,
            config=TournamentConfig(
                name=f"Simulated {algorithm} event",
                total_rounds=self.config.num_rounds,
                tournament_type=self.config.tournament_type,
                pairing_system=algorithm,
                games_per_match=self.config.games_per_match,
                gibson_rule_enabled=self.config.gibson_rule_enabled,
                prize_count=self.config.prize_count,
                divisions=list(self.config.divisions),
            ),
            competitors=competitors,
            teams=teams,
        )
        self.store.create(snapshot)
        return snapshot

    def run(self) -> SimulationReport:
        """Create the event and play every round."""
        logger.info(
            "Simulating %s: %d competitors, %d rounds",
            self.config.algorithm,
            self.config.num_competitors,
            self.config.num_rounds,
        )
        self.create_event()
        tournament_id = self.config.tournament_id
        report = SimulationReport(snapshot=self.store.load(tournament_id))

        for round_number in range(1, self.config.num_rounds + 1):
            self._apply_pauses()
            outcome = self.orchestrator.pair_round(tournament_id, round_number)
            snapshot = self.store.load(tournament_id)
            report.violations.extend(
                check_round_invariants(
                    snapshot,
                    round_number,
                    strict_byes=self.config.tournament_type != TYPE_TEAM,
                )
            )
            self._play_round(snapshot, outcome.pairings)
            report.rounds_paired = round_number

        report.snapshot = self.store.load(tournament_id)
        if report.violations:
            logger.warning("Simulation found %d violation(s)", len(report.violations))
        logger.info("Simulation complete")
        return report

    def _apply_pauses(self) -> None:
        if self.config.pause_rate <= 0:
            return
        snapshot = self.store.load(self.config.tournament_id)
        for competitor in snapshot.competitors:
            roll = self.random.random() * 100
            if competitor.is_paused:
                self.store.set_status(
                    snapshot.tournament_id, competitor.id, STATUS_ACTIVE
                )
            elif competitor.is_active and roll < self.config.pause_rate:
                self.store.set_status(
                    snapshot.tournament_id, competitor.id, STATUS_PAUSED
                )

    def _play_round(
        self, snapshot: TournamentSnapshot, pairings: List[Pairing]
    ) -> None:
        competitors: Dict[str, Competitor] = snapshot.competitor_map()
        settled = {
            r.pair_key
            for r in snapshot.results_for_round(pairings[0].round if pairings else 0)
            if r.pair_key is not None
        }
        league = self.config.tournament_type == TYPE_LEAGUE
        for pairing in pairings:
            if pairing.is_bye or frozenset(pairing.competitor_ids) in settled:
                continue
            first = competitors[pairing.player1]
            second = competitors[pairing.player2]
            games = self.config.games_per_match if league else 1
            wins_needed = games // 2 + 1
            tally = Counter()
            for _ in range(games):
                score1, score2 = self.scores.simulate_game(first, second)
                self.recorder.record_result(
                    snapshot.tournament_id,
                    GameResult(
                        round=pairing.round,
                        player1_id=first.id,
                        player2_id=second.id,
                        score1=score1,
                        score2=score2,
                    ),
                )
                if score1 != score2:
                    tally[first.id if score1 > score2 else second.id] += 1
                if max(tally.values(), default=0) >= wins_needed:
                    break


def create_small_event(
    num_competitors: int = 8, seed: Optional[int] = None, **overrides
) -> EventSimulator:
    """Create a small Swiss event for testing."""
    config = SimulationConfig(
        num_competitors=num_competitors,
        num_rounds=max(3, num_competitors // 2),
        seed=seed,
        **overrides,
    )
    return EventSimulator(config)


def create_league_event(
    num_competitors: int = 6, seed: Optional[int] = None, games_per_match: int = 5
) -> EventSimulator:
    """Create a league event of short matches."""
    config = SimulationConfig(
        num_competitors=num_competitors,
        num_rounds=max(2, num_competitors - 1),
        tournament_type=TYPE_LEAGUE,
        games_per_match=games_per_match,
        seed=seed,
    )
    return EventSimulator(config)
