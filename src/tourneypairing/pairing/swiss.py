"""Swiss pairing: nearest rank with rematch avoidance."""

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

from typing import List, Mapping, Optional, Sequence, Set, Tuple

from tourneypairing.constants import ALGO_SWISS, MAX_BACKTRACK_STEPS
from tourneypairing.exceptions import NoValidPairingFoundException
from tourneypairing.models.pairing import Pairing
from tourneypairing.pairing.base import PairingContext, PairingStrategy
from tourneypairing.standings.matchup_history import MatchupHistory
from tourneypairing.type_hints import IdPair, RankedIds
from tourneypairing.utils import setup_logger

logger = setup_logger(__name__)


class _SearchBudgetExceeded(Exception):
    pass


def select_bye(
    ranked_ids: RankedIds,
    history: MatchupHistory,
    round_number: int,
    ratings: Optional[Mapping[str, int]] = None,
) -> str:
    """Pick the bye recipient of an odd field.

    The lowest-ranked competitor who has not had a bye gets it. In the first
    round rated competitors are preferred, so an unrated late entry does not
    push a rated player out of the field. When everyone has had a bye the
    lowest-ranked competitor gets another.

    Args:
        ranked_ids: Ids in rank order, best first
        history: Matchup history of the previous rounds
        round_number: Round being paired
        ratings: Ratings keyed by id, used in round one

    Returns:
        Id receiving the bye
    """
    if not ranked_ids:
        raise NoValidPairingFoundException("Cannot assign a bye in an empty field")
    candidates = [i for i in reversed(ranked_ids) if not history.has_had_bye(i)]
    if round_number == 1 and ratings:
        rated = [i for i in candidates if ratings.get(i, 0) > 0]
        if rated:
            candidates = rated
    if candidates:
        return candidates[0]
    logger.debug("Every competitor already had a bye, reusing the last one")
    return ranked_ids[-1]


def pair_by_rank(
    ranked_ids: RankedIds,
    history: MatchupHistory,
    allow_rematches: bool = False,
    max_steps: int = MAX_BACKTRACK_STEPS,
) -> Tuple[List[IdPair], Set[frozenset]]:
    """Pair an even list of ids top-down, avoiding rematches.

    Each id is paired with the nearest unpaired id it has not met. A bounded
    backtracking search looks for a completion without any rematch; only
    when none exists (or the search budget runs out) are rematches used, the
    least disruptive first: fewest meetings, then oldest meeting, then
    nearest rank.

    Args:
        ranked_ids: Ids in rank order, even count
        history: Matchup history of the previous rounds
        allow_rematches: Ignore history and pair strictly by rank
        max_steps: Search budget of the backtracking search

    Returns:
        The pairs in rank order and the set of pairs that are rematches

    Raises:
        NoValidPairingFoundException: The number of ids is odd
    """
    if len(ranked_ids) % 2:
        raise NoValidPairingFoundException(
            f"Cannot pair an odd number of competitors ({len(ranked_ids)})"
        )
    ids = list(ranked_ids)
    if allow_rematches:
        pairs = [(ids[i], ids[i + 1]) for i in range(0, len(ids), 2)]
        return pairs, {frozenset(p) for p in pairs if history.has_played(*p)}

    try:
        pairs = _search_without_rematches(ids, history, max_steps)
    except _SearchBudgetExceeded:
        logger.warning(
            "Rematch-free search gave up after %d steps on %d competitors",
            max_steps,
            len(ids),
        )
        pairs = None
    if pairs is not None:
        return pairs, set()
    return _pair_with_least_rematches(ids, history)


def _search_without_rematches(
    ids: List[str], history: MatchupHistory, max_steps: int
) -> Optional[List[IdPair]]:
    pairs: List[IdPair] = []
    steps = 0

    def solve(remaining: List[str]) -> bool:
        nonlocal steps
        if not remaining:
            return True
        steps += 1
        if steps > max_steps:
            raise _SearchBudgetExceeded()
        if not _everyone_has_a_partner(remaining, history):
            return False
        head, rest = remaining[0], remaining[1:]
        for index, candidate in enumerate(rest):
            if history.has_played(head, candidate):
                continue
            pairs.append((head, candidate))
            if solve(rest[:index] + rest[index + 1 :]):
                return True
            pairs.pop()
        return False

    return pairs if solve(ids) else None


def _everyone_has_a_partner(remaining: Sequence[str], history: MatchupHistory) -> bool:
    return all(
        any(other != i and not history.has_played(i, other) for other in remaining)
        for i in remaining
    )


def _pair_with_least_rematches(
    ids: List[str], history: MatchupHistory
) -> Tuple[List[IdPair], Set[frozenset]]:
    remaining = list(ids)
    pairs: List[IdPair] = []
    rematches: Set[frozenset] = set()
    while remaining:
        head = remaining.pop(0)
        index = next(
            (i for i, c in enumerate(remaining) if not history.has_played(head, c)),
            None,
        )
        if index is None:
            index = min(
                range(len(remaining)),
                key=lambda i: (
                    history.times_played(head, remaining[i]),
                    history.last_played_round(head, remaining[i]) or 0,
                    i,
                ),
            )
            rematches.add(frozenset({head, remaining[index]}))
            logger.info(
                "Forced rematch: %s vs %s (met %d time(s) before)",
                head,
                remaining[index],
                history.times_played(head, remaining[index]),
            )
        pairs.append((head, remaining.pop(index)))
    return pairs, rematches


class SwissPairer(PairingStrategy):
    """Standard Swiss pairing over the ranked, active field."""

    name = ALGO_SWISS

    def pair(self, context: PairingContext) -> List[Pairing]:
        eligible = context.eligible()
        self.require_two(context, len(eligible))
        ids = [c.id for c in eligible]

        byes = []
        if len(ids) % 2:
            bye_id = select_bye(
                ids, context.history, context.round_number, context.ratings()
            )
            ids.remove(bye_id)
            byes.append(bye_id)
            logger.info(
                "Round %d (%s): bye to %s",
                context.round_number,
                context.division,
                bye_id,
            )

        pairs, rematches = pair_by_rank(
            ids, context.history, context.config.allow_rematches
        )
        return self.build_pairings(context, pairs, byes, rematches)
