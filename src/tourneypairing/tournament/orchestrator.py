"""Round pairing, unpairing and round state for stored tournaments.

This module coordinates standings, pairing strategies, start and table
assignment and the schedule store.
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

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional

from tourneypairing.constants import ALGO_TEAM_SWISS, MODE_LEAGUE
from tourneypairing.exceptions import (
    InvalidConfigurationException,
    NoValidPairingFoundException,
    TournamentStateException,
)
from tourneypairing.models.competitor import Competitor
from tourneypairing.models.game_result import GameResult, Match
from tourneypairing.models.pairing import Pairing
from tourneypairing.models.snapshot import TournamentSnapshot
from tourneypairing.models.team import Team
from tourneypairing.pairing import (
    PairingContext,
    PairingStrategy,
    create_pairing_strategy,
)
from tourneypairing.standings import (
    MatchupHistory,
    RankedRoster,
    compute_standings,
    compute_team_standings,
    team_lookup,
)
from tourneypairing.tournament.forfeit_resolver import ForfeitResolver
from tourneypairing.tournament.start_assigner import StartAssigner
from tourneypairing.tournament.store import ScheduleStore
from tourneypairing.utils import setup_logger

logger = setup_logger(__name__)


class RoundState(Enum):
    """Life cycle of a round."""

    UNPAIRED = "unpaired"
    PAIRED = "paired"
    IN_PROGRESS = "in_progress"
    LOCKED = "locked"


@dataclass
class RoundOutcome:
    """What ``pair_round`` committed.

    Attributes:
        round_number: Round that was paired
        pairings: Pairings with tables and starts, byes last
        generated_results: Bye, forfeit and penalty results stored with it
        current_round: Latest paired round of the tournament
        version: Store version after the commit
    """

    round_number: int
    pairings: List[Pairing]
    generated_results: List[GameResult] = field(default_factory=list)
    current_round: int = 0
    version: int = 0

    def to_dict(self) -> Dict:
        return {
            "round": self.round_number,
            "pairings": [p.to_dict() for p in self.pairings],
            "generated_results": [r.to_dict() for r in self.generated_results],
            "current_round": self.current_round,
            "version": self.version,
        }


def assign_tables(
    pairings: List[Pairing], reserved_tables: Optional[Mapping[str, int]] = None
) -> List[Pairing]:
    """Number tables sequentially across divisions.

    Competitors with a reserved table keep it; other pairings take the
    lowest free numbers in order. Byes get no table.
    """
    reserved_tables = reserved_tables or {}
    fixed: Dict[int, int] = {}
    taken = set()
    for index, pairing in enumerate(pairings):
        if pairing.is_bye:
            continue
        for competitor_id in pairing.competitor_ids:
            table = reserved_tables.get(competitor_id)
            if table is not None and table not in taken:
                fixed[index] = table
                taken.add(table)
                break

    numbered = []
    next_table = 1
    for index, pairing in enumerate(pairings):
        if pairing.is_bye:
            numbered.append(pairing.with_changes(table=None))
            continue
        table = fixed.get(index)
        if table is None:
            while next_table in taken:
                next_table += 1
            table = next_table
            taken.add(table)
        numbered.append(pairing.with_changes(table=table))
    return numbered


class PairingOrchestrator:
    """Top-level entry point for pairing rounds of stored tournaments.

    This class is responsible for:
    - Ranking each division as of the configured base round
    - Running the configured pairing strategy per division
    - Assigning starts and tables
    - Committing the round with its generated results (version-checked)
    - Unpairing the latest round and reporting round state
    """

    def __init__(
        self, store: ScheduleStore, start_assigner: Optional[StartAssigner] = None
    ) -> None:
        self.store = store
        self.start_assigner = start_assigner or StartAssigner()

    def pair_round(
        self, tournament_id: str, round_number: Optional[int] = None
    ) -> RoundOutcome:
        """Pair and commit a round.

        Args:
            tournament_id: Tournament to pair
            round_number: Round to pair, defaults to the next unpaired round

        Returns:
            RoundOutcome with the committed pairings and generated results

        Raises:
            TournamentStateException: Round already paired or out of order
            InvalidConfigurationException: Invalid settings or round beyond
                the configured total
            InsufficientPlayersException: A division cannot be paired
            ConcurrentPairingConflictException: The tournament changed while
                the round was being computed
        """
        snapshot = self.store.load(tournament_id)
        config = snapshot.config
        config.validate()

        latest = snapshot.latest_paired_round
        if round_number is None:
            round_number = latest + 1
        if round_number in snapshot.schedule:
            raise TournamentStateException(f"Round {round_number} is already paired")
        if round_number != latest + 1:
            raise TournamentStateException(
                f"Round {round_number} cannot be paired before round {latest + 1}"
            )
        if round_number > config.total_rounds:
            raise InvalidConfigurationException(
                f"Round {round_number} exceeds the {config.total_rounds} "
                "configured round(s)"
            )

        logger.info(
            "Pairing round %d of '%s' (%s)",
            round_number,
            tournament_id,
            config.pairing_config_for(round_number).algorithm,
        )
        pairings = self.build_round(snapshot, round_number)

        resolver = ForfeitResolver(
            forfeit_spread=config.forfeit_spread, bye_spread=config.bye_spread
        )
        generated = resolver.resolve(
            round_number, pairings, snapshot.competitors
        ) + resolver.bye_awards(round_number, pairings, snapshot.competitors)

        version = self.store.commit_round(
            tournament_id,
            round_number,
            pairings,
            generated,
            expected_version=snapshot.version,
        )
        logger.info(
            "Committed round %d: %d pairing(s), %d generated result(s)",
            round_number,
            len(pairings),
            len(generated),
        )
        return RoundOutcome(
            round_number=round_number,
            pairings=pairings,
            generated_results=generated,
            current_round=round_number,
            version=version,
        )

    def build_round(
        self, snapshot: TournamentSnapshot, round_number: int
    ) -> List[Pairing]:
        """Compute the pairings of a round without storing anything."""
        config = snapshot.config
        pairing_config = config.pairing_config_for(round_number)
        base_round = pairing_config.base_round
        if base_round is None or base_round >= round_number:
            base_round = round_number - 1

        ranked = self.standings(snapshot, as_of_round=base_round)
        self._check_unknown_divisions(snapshot, ranked)
        prior_results = snapshot.results_before(round_number)
        history = MatchupHistory.from_results(prior_results)
        # Rounds still in play have pairings but no results yet
        history.add_schedule(snapshot.schedule, before_round=round_number)
        strategy = create_pairing_strategy(pairing_config.algorithm)

        team_history = None
        ranked_teams = []
        if config.is_team_event:
            team_of = team_lookup(snapshot.teams, snapshot.competitors)
            team_history = MatchupHistory.for_teams(prior_results, team_of)
            team_history.add_schedule(
                snapshot.schedule, before_round=round_number, team_of=team_of
            )
            ranked_teams = compute_team_standings(
                snapshot.teams, snapshot.competitors, snapshot.results, base_round
            )

        pairings: List[Pairing] = []
        for division in config.division_names():
            members = (
                ranked.in_division(division) if config.divisions else list(ranked)
            )
            if not members or not any(c.is_active for c in members):
                logger.info("Round %d: nothing to pair in %s", round_number, division)
                continue
            context = PairingContext(
                round_number=round_number,
                division=division,
                ranked=members,
                history=history,
                config=pairing_config,
                total_rounds=config.total_rounds,
                mode=config.standings_mode,
                teams=[t for t in ranked_teams if self._members(t, members)],
                team_history=team_history,
                round_robin_cycles=config.round_robin_cycles,
                base_round=base_round,
            )
            division_pairings = strategy.pair(context)
            self._check_division(strategy, context, division_pairings)
            pairings.extend(division_pairings)

        start_counts = self.start_assigner.count_starts(
            snapshot.schedule, before_round=round_number
        )
        ranks = {c.id: c.rank for c in ranked}
        pairings = self.start_assigner.assign(pairings, start_counts, ranks)
        return assign_tables(pairings, config.reserved_tables)

    def standings(
        self, snapshot: TournamentSnapshot, as_of_round: Optional[int] = None
    ) -> RankedRoster:
        config = snapshot.config
        games_per_match = config.games_per_match
        if as_of_round:
            games_per_match = config.pairing_config_for(as_of_round).games_per_match
        return compute_standings(
            snapshot.competitors,
            snapshot.results,
            mode=config.standings_mode,
            as_of_round=as_of_round,
            games_per_match=games_per_match,
        )

    def unpair_round(
        self, tournament_id: str, round_number: Optional[int] = None
    ) -> int:
        """Remove the latest paired round.

        Only allowed while no result other than the generated byes and
        forfeits has been recorded for it.

        Returns:
            The store version after the removal

        Raises:
            TournamentStateException: Round not paired, not the latest, or
                results were recorded
        """
        snapshot = self.store.load(tournament_id)
        latest = snapshot.latest_paired_round
        if round_number is None:
            round_number = latest
        if round_number not in snapshot.schedule:
            raise TournamentStateException(f"Round {round_number} is not paired")
        if round_number != latest:
            raise TournamentStateException(
                f"Only the latest paired round ({latest}) can be unpaired"
            )
        recorded = [
            r for r in snapshot.results_for_round(round_number) if not r.auto_generated
        ]
        if recorded:
            raise TournamentStateException(
                f"Round {round_number} has {len(recorded)} recorded result(s) "
                "and cannot be unpaired"
            )
        version = self.store.remove_round(
            tournament_id, round_number, expected_version=snapshot.version
        )
        logger.info("Unpaired round %d of '%s'", round_number, tournament_id)
        return version

    def round_state(self, tournament_id: str, round_number: int) -> RoundState:
        """Current state of a round."""
        snapshot = self.store.load(tournament_id)
        return self.state_of(snapshot, round_number)

    @staticmethod
    def state_of(snapshot: TournamentSnapshot, round_number: int) -> RoundState:
        if round_number not in snapshot.schedule:
            return RoundState.UNPAIRED
        results = snapshot.results_for_round(round_number)
        games = [p for p in snapshot.schedule[round_number] if not p.is_bye]
        if games and all(_is_settled(snapshot, p, results) for p in games):
            return RoundState.LOCKED
        if any(not r.auto_generated for r in results):
            return RoundState.IN_PROGRESS
        return RoundState.PAIRED

    @staticmethod
    def _members(team: Team, members: List[Competitor]) -> List[str]:
        """Members of a team within a division, in board order."""
        ids = {c.id for c in members}
        listed = [m for m in team.member_ids if m in ids]
        return listed + [
            c.id for c in members if c.team_id == team.id and c.id not in listed
        ]

    @staticmethod
    def _check_division(
        strategy: PairingStrategy, context: PairingContext, pairings: List[Pairing]
    ) -> None:
        """Every expected competitor exactly once, at most one bye."""
        seen = Counter(cid for p in pairings for cid in p.competitor_ids)
        expected = strategy.expected_ids(context)
        doubled = sorted(cid for cid, count in seen.items() if count > 1)
        missing = sorted(expected - set(seen))
        unexpected = sorted(set(seen) - expected)
        byes = sum(1 for p in pairings if p.is_bye)
        too_many_byes = strategy.name != ALGO_TEAM_SWISS and byes > 1
        if doubled or missing or unexpected or too_many_byes:
            raise NoValidPairingFoundException(
                f"Invalid pairing for {context.division} in round "
                f"{context.round_number}: doubled={doubled} missing={missing} "
                f"unexpected={unexpected} byes={byes}"
            )

    @staticmethod
    def _check_unknown_divisions(
        snapshot: TournamentSnapshot, ranked: RankedRoster
    ) -> None:
        divisions = snapshot.config.divisions
        if not divisions:
            return
        stray = sorted(
            c.id for c in ranked if c.is_active and c.division not in divisions
        )
        if stray:
            raise InvalidConfigurationException(
                "Competitors in undeclared divisions: " + ", ".join(stray)
            )


def _is_settled(
    snapshot: TournamentSnapshot, pairing: Pairing, results: List[GameResult]
) -> bool:
    pair = frozenset(pairing.competitor_ids)
    games = [r for r in results if r.pair_key == pair]
    if not games:
        return False
    if snapshot.config.standings_mode != MODE_LEAGUE:
        return True
    if any(r.is_forfeit for r in games):
        return True
    match = Match(
        round=pairing.round,
        player1_id=pairing.player1,
        player2_id=pairing.player2,
        games_per_match=snapshot.config.pairing_config_for(
            pairing.round
        ).games_per_match,
        results=games,
    )
    return match.is_complete
