"""Builders shared by the test modules."""

from tourneypairing.models import Competitor, GameResult, PairingConfiguration
from tourneypairing.pairing import PairingContext
from tourneypairing.standings import MatchupHistory, compute_standings


def make_competitors(count, division="Open", rating=0, **fields):
    """Competitors "1".."count" seeded in id order."""
    return [
        Competitor(
            id=str(i),
            name=f"Player {i}",
            rating=rating,
            seed=i,
            division=division,
            **fields,
        )
        for i in range(1, count + 1)
    ]


def game(round_number, player1, player2, score1=400, score2=350, **fields):
    return GameResult(
        round=round_number,
        player1_id=player1,
        player2_id=player2,
        score1=score1,
        score2=score2,
        **fields,
    )


def history_of(*pairs):
    """History in which each (a, b) pair met once, in round order."""
    history = MatchupHistory()
    for round_number, (a, b) in enumerate(pairs, start=1):
        history.add_pairing(a, b, round_number)
    return history


def context_for(
    competitors,
    round_number=1,
    results=(),
    history=None,
    total_rounds=5,
    **config,
):
    ranked = compute_standings(competitors, list(results), as_of_round=round_number - 1)
    return PairingContext(
        round_number=round_number,
        division="Open",
        ranked=list(ranked),
        history=history or MatchupHistory.from_results(results),
        config=PairingConfiguration(**config),
        total_rounds=total_rounds,
    )


def pairs_of(pairings):
    return [
        frozenset((p.player1, p.player2)) for p in pairings if not p.is_bye
    ]


def byes_of(pairings):
    return [p.player1 for p in pairings if p.is_bye]
