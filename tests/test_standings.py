import pytest

from helpers import game, make_competitors
from tourneypairing.exceptions import InvalidConfigurationException
from tourneypairing.models import Competitor, GameResult, Team
from tourneypairing.standings import (
    GibsonDetector,
    compute_standings,
    compute_team_standings,
)


def test_records_and_spread_are_accumulated():
    competitors = make_competitors(3)
    results = [
        game(1, "1", "2", 400, 300),
        game(2, "1", "3", 350, 350),
        game(2, "2", "3", 390, 410),
    ]
    ranked = compute_standings(competitors, results).by_id()

    assert (ranked["1"].wins, ranked["1"].losses, ranked["1"].ties) == (1, 0, 1)
    assert ranked["1"].spread == 100
    assert (ranked["2"].wins, ranked["2"].losses) == (0, 2)
    assert ranked["2"].spread == -120
    assert ranked["3"].spread == 20
    assert ranked["3"].score == 1.5


def test_ranking_order_is_score_then_spread_then_seed():
    competitors = make_competitors(4)
    results = [
        game(1, "4", "1", 500, 300),
        game(1, "3", "2", 410, 400),
    ]
    ranked = compute_standings(competitors, results)

    assert ranked.ids() == ["4", "3", "2", "1"]
    assert [c.rank for c in ranked] == [1, 2, 3, 4]


def test_identical_records_follow_seed_order_regardless_of_insertion():
    competitors = [
        Competitor(id="b", name="B", seed=2),
        Competitor(id="a", name="A", seed=1),
        Competitor(id="c", name="C", seed=3),
        Competitor(id="d", name="D", seed=4),
    ]
    results = [game(1, "a", "c", 400, 300), game(1, "b", "d", 400, 300)]

    forward = compute_standings(competitors, results).ids()
    backward = compute_standings(list(reversed(competitors)), list(reversed(results)))

    assert forward == ["a", "b", "c", "d"]
    assert backward.ids() == forward


def test_as_of_round_ignores_later_results():
    competitors = make_competitors(2)
    results = [game(1, "1", "2", 400, 300), game(2, "2", "1", 500, 300)]

    after_one = compute_standings(competitors, results, as_of_round=1)
    after_two = compute_standings(competitors, results)

    assert after_one.ids() == ["1", "2"]
    assert after_two.ids() == ["2", "1"]


def test_unknown_competitors_are_skipped_with_a_warning():
    competitors = make_competitors(2)
    results = [game(1, "1", "ghost", 400, 300), game(1, "1", "2", 400, 300)]

    ranked = compute_standings(competitors, results)

    assert len(ranked.warnings) == 1
    assert "ghost" in ranked.warnings[0]
    assert ranked.by_id()["1"].wins == 1


def test_roster_is_not_mutated():
    competitors = make_competitors(2)
    compute_standings(competitors, [game(1, "1", "2")])

    assert competitors[0].wins == 0
    assert competitors[0].rank is None


def test_bye_and_penalty_count_for_the_competitor_alone():
    competitors = make_competitors(2)
    results = [
        GameResult(1, "1", None, 50, 0, is_bye=True),
        GameResult(1, "2", None, 0, 50, is_forfeit=True),
    ]
    ranked = compute_standings(competitors, results).by_id()

    assert (ranked["1"].wins, ranked["1"].spread) == (1, 50)
    assert (ranked["2"].losses, ranked["2"].spread) == (1, -50)
    assert ranked["1"].games_played == ranked["2"].games_played == 1


def test_league_ranks_by_match_wins_first():
    competitors = make_competitors(4)
    results = [
        # 1 beats 2 two games to one in a best of three
        game(1, "1", "2", 400, 300),
        game(1, "1", "2", 300, 400),
        game(1, "1", "2", 400, 390),
        # 3 beats 4 with a huge spread but only after losing a game
        game(1, "3", "4", 600, 200),
        game(1, "3", "4", 200, 210),
        game(1, "3", "4", 600, 200),
    ]
    ranked = compute_standings(competitors, results, mode="league", games_per_match=3)

    by_id = ranked.by_id()
    assert by_id["1"].match_wins == 1
    assert by_id["3"].match_wins == 1
    assert by_id["2"].match_losses == 1
    assert ranked.ids() == ["3", "1", "2", "4"]


def test_league_incomplete_match_awards_nothing():
    competitors = make_competitors(2)
    results = [game(1, "1", "2", 400, 300)]

    ranked = compute_standings(competitors, results, mode="league", games_per_match=3)

    assert ranked.by_id()["1"].match_wins == 0


def test_league_bye_counts_as_a_match_win():
    competitors = make_competitors(2)
    results = [GameResult(1, "2", None, 50, 0, is_bye=True)]

    ranked = compute_standings(competitors, results, mode="league")

    assert ranked.by_id()["2"].match_wins == 1
    assert ranked.ids() == ["2", "1"]


def test_league_forfeit_decides_the_match():
    competitors = make_competitors(2)
    results = [game(1, "1", "2", 50, 0, is_forfeit=True, auto_generated=True)]

    ranked = compute_standings(competitors, results, mode="league")

    assert ranked.by_id()["1"].match_wins == 1


def test_team_standings_from_board_results():
    teams = [
        Team(id="A", name="A", seed=1, member_ids=["a1", "a2"]),
        Team(id="B", name="B", seed=2, member_ids=["b1", "b2"]),
    ]
    roster = [
        Competitor(id=m, name=m, team_id=m[0].upper()) for m in ("a1", "a2", "b1", "b2")
    ]
    results = [game(1, "a1", "b1", 300, 400), game(1, "a2", "b2", 300, 400)]

    ranked = compute_team_standings(teams, roster, results)

    assert [t.id for t in ranked] == ["B", "A"]
    assert (ranked[0].wins, ranked[1].losses) == (1, 1)
    assert ranked[0].spread == 2


def test_team_match_with_all_draws_is_a_tie():
    teams = [
        Team(id="A", name="A", seed=1, member_ids=["a1"]),
        Team(id="B", name="B", seed=2, member_ids=["b1"]),
    ]
    roster = [Competitor(id="a1", name="a1"), Competitor(id="b1", name="b1")]

    ranked = compute_team_standings(teams, roster, [game(1, "a1", "b1", 300, 300)])

    assert [t.ties for t in ranked] == [1, 1]
    assert [t.id for t in ranked] == ["A", "B"]


def test_gibson_detector_flags_unreachable_leader():
    competitors = make_competitors(4)
    results = [
        game(1, "1", "2"),
        game(1, "3", "4"),
        game(2, "1", "3"),
        game(2, "2", "4"),
        game(3, "1", "4"),
        game(3, "2", "3"),
    ]
    ranked = list(compute_standings(competitors, results))
    detector = GibsonDetector(prize_count=1)

    # Leader on 3 wins, next best on 2: one round left cannot close the gap
    assert [c.id for c in detector.clinched(ranked, rounds_remaining=0)] == ["1"]
    assert detector.clinched(ranked, rounds_remaining=1) == []


@pytest.mark.parametrize("prize_count", [None, 0, -2])
def test_gibson_detector_requires_prize_count(prize_count):
    with pytest.raises(InvalidConfigurationException):
        GibsonDetector(prize_count=prize_count)


def test_gibson_contender_check():
    competitors = make_competitors(3, wins=0)
    ranked = [
        competitors[0].with_record(wins=5),
        competitors[1].with_record(wins=3),
        competitors[2].with_record(wins=0),
    ]
    detector = GibsonDetector(prize_count=2)

    assert detector.is_contender(ranked[2], ranked, rounds_remaining=3)
    assert not detector.is_contender(ranked[2], ranked, rounds_remaining=2)
