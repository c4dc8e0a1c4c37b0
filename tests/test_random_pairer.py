from helpers import byes_of, context_for, game, make_competitors, pairs_of
from tourneypairing.pairing import RandomPairer


def _seated(pairings):
    return sorted(i for p in pairings for i in p.competitor_ids)


def test_seeded_pairing_is_reproducible():
    competitors = make_competitors(10)

    first = RandomPairer().pair(context_for(competitors, random_seed=7))
    second = RandomPairer().pair(context_for(competitors, random_seed=7))

    assert first == second


def test_everyone_is_seated_once():
    competitors = make_competitors(9)

    pairings = RandomPairer().pair(context_for(competitors, random_seed=3))

    assert _seated(pairings) == sorted(c.id for c in competitors)
    assert len(byes_of(pairings)) == 1


def test_rematches_are_avoided():
    results = [game(1, "1", "2"), game(1, "3", "4")]
    context = context_for(
        make_competitors(4), round_number=2, results=results, random_seed=11
    )

    pairings = RandomPairer().pair(context)

    assert frozenset({"1", "2"}) not in pairs_of(pairings)
    assert frozenset({"3", "4"}) not in pairs_of(pairings)


def test_bye_goes_to_lowest_ranked():
    results = [game(1, "1", "2"), game(1, "3", "4")]
    context = context_for(
        make_competitors(5), round_number=2, results=results, random_seed=1
    )

    assert byes_of(RandomPairer().pair(context)) == ["4"]
