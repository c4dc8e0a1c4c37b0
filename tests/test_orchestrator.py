from collections import Counter

import pytest

from helpers import game, make_competitors
from tourneypairing.exceptions import (
    ConcurrentPairingConflictException,
    InvalidConfigurationException,
    TournamentStateException,
)
from tourneypairing.models import Pairing, TournamentConfig, TournamentSnapshot
from tourneypairing.tournament import (
    PairingOrchestrator,
    ResultRecorder,
    RoundState,
    assign_tables,
)


def _create(store, competitors, tournament_id="event", total_rounds=3, **config):
    store.create(
        TournamentSnapshot(
            tournament_id=tournament_id,
            config=TournamentConfig(name="Event", total_rounds=total_rounds, **config),
            competitors=competitors,
        )
    )
    return tournament_id


def _seated(pairings):
    return Counter(i for p in pairings for i in p.competitor_ids)


def test_pair_round_seats_everyone_once(store, swiss_event):
    outcome = PairingOrchestrator(store).pair_round(swiss_event)

    assert outcome.round_number == 1
    assert outcome.current_round == 1
    assert _seated(outcome.pairings) == Counter(str(i) for i in range(1, 7))
    assert [p.table for p in outcome.pairings] == [1, 2, 3]
    assert all(p.starts in (1, 2) for p in outcome.pairings)

    snapshot = store.load(swiss_event)
    assert snapshot.schedule[1] == outcome.pairings
    assert snapshot.version == outcome.version


def test_rounds_are_paired_in_order(store, swiss_event):
    orchestrator = PairingOrchestrator(store)

    with pytest.raises(TournamentStateException):
        orchestrator.pair_round(swiss_event, 2)

    orchestrator.pair_round(swiss_event, 1)
    with pytest.raises(TournamentStateException):
        orchestrator.pair_round(swiss_event, 1)


def test_round_beyond_total_is_rejected(store):
    event = _create(store, make_competitors(2), total_rounds=1)
    orchestrator = PairingOrchestrator(store)
    orchestrator.pair_round(event)

    with pytest.raises(InvalidConfigurationException):
        orchestrator.pair_round(event)


def test_paused_competitor_takes_penalty_under_swiss(store, swiss_event):
    orchestrator = PairingOrchestrator(store)
    for round_number in (1, 2):
        orchestrator.pair_round(swiss_event, round_number)
    store.set_status(swiss_event, "3", "paused")

    outcome = orchestrator.pair_round(swiss_event, 3)

    assert "3" not in _seated(outcome.pairings)
    assert sum(1 for p in outcome.pairings if p.is_bye) == 1
    penalties = [r for r in outcome.generated_results if r.player1_id == "3"]
    assert len(penalties) == 1
    assert penalties[0].player2_id is None
    assert penalties[0].is_forfeit
    assert penalties[0].score2 > penalties[0].score1
    byes = [r for r in outcome.generated_results if r.is_bye]
    assert len(byes) == 1


def test_paused_competitor_forfeits_under_round_robin(store, round_robin_event):
    store.set_status(round_robin_event, "2", "paused")

    outcome = PairingOrchestrator(store).pair_round(round_robin_event)

    assert _seated(outcome.pairings) == Counter(["1", "2", "3", "4"])
    opponent = next(p for p in outcome.pairings if p.involves("2")).opponent_of("2")
    assert [(r.player1_id, r.player2_id) for r in outcome.generated_results] == [
        (opponent, "2")
    ]
    assert outcome.generated_results[0].is_forfeit


def test_withdrawn_competitor_is_never_paired(store, swiss_event):
    store.set_status(swiss_event, "6", "withdrawn")

    outcome = PairingOrchestrator(store).pair_round(swiss_event)

    assert "6" not in _seated(outcome.pairings)
    assert [r.player1_id for r in outcome.generated_results] == [
        p.player1 for p in outcome.pairings if p.is_bye
    ]


def test_unpair_latest_round(store, swiss_event):
    orchestrator = PairingOrchestrator(store)
    orchestrator.pair_round(swiss_event)

    orchestrator.unpair_round(swiss_event)

    snapshot = store.load(swiss_event)
    assert snapshot.schedule == {}
    assert snapshot.current_round == 0
    assert orchestrator.round_state(swiss_event, 1) == RoundState.UNPAIRED


def test_unpair_removes_generated_results(store):
    event = _create(store, make_competitors(3))
    orchestrator = PairingOrchestrator(store)
    outcome = orchestrator.pair_round(event)
    assert outcome.generated_results

    orchestrator.unpair_round(event)

    assert store.load(event).results == []


def test_unpair_refused_after_recorded_result(store, swiss_event):
    orchestrator = PairingOrchestrator(store)
    outcome = orchestrator.pair_round(swiss_event)
    first = outcome.pairings[0]
    ResultRecorder(store).record_result(
        swiss_event, game(1, first.player1, first.player2)
    )

    with pytest.raises(TournamentStateException):
        orchestrator.unpair_round(swiss_event)
    assert 1 in store.load(swiss_event).schedule


def test_only_latest_round_can_be_unpaired(store, swiss_event):
    orchestrator = PairingOrchestrator(store)
    orchestrator.pair_round(swiss_event)
    orchestrator.pair_round(swiss_event)

    with pytest.raises(TournamentStateException):
        orchestrator.unpair_round(swiss_event, 1)


def test_stale_snapshot_cannot_commit(store, swiss_event):
    orchestrator = PairingOrchestrator(store)
    snapshot = store.load(swiss_event)
    pairings = orchestrator.build_round(snapshot, 1)

    # Someone else pairs the round first
    orchestrator.pair_round(swiss_event)

    with pytest.raises(ConcurrentPairingConflictException):
        store.commit_round(
            swiss_event, 1, pairings, [], expected_version=snapshot.version
        )


def test_round_state_life_cycle(store, swiss_event):
    orchestrator = PairingOrchestrator(store)
    recorder = ResultRecorder(store)
    assert orchestrator.round_state(swiss_event, 1) == RoundState.UNPAIRED

    outcome = orchestrator.pair_round(swiss_event)
    assert orchestrator.round_state(swiss_event, 1) == RoundState.PAIRED

    first, *rest = outcome.pairings
    recorder.record_result(swiss_event, game(1, first.player1, first.player2))
    assert orchestrator.round_state(swiss_event, 1) == RoundState.IN_PROGRESS

    for pairing in rest:
        recorder.record_result(swiss_event, game(1, pairing.player1, pairing.player2))
    assert orchestrator.round_state(swiss_event, 1) == RoundState.LOCKED


def test_base_round_ranks_on_older_results(store):
    event = _create(
        store,
        make_competitors(4),
        pairing_system="king_of_the_hill",
        round_settings={3: {"base_round": 1}},
    )
    orchestrator = PairingOrchestrator(store)
    recorder = ResultRecorder(store)

    orchestrator.pair_round(event)
    recorder.record_round_results(
        event, [game(1, "2", "1", 400, 300), game(1, "4", "3", 400, 350)]
    )
    orchestrator.pair_round(event)
    recorder.record_round_results(
        event, [game(2, "1", "3", 400, 100), game(2, "2", "4", 410, 400)]
    )

    outcome = orchestrator.pair_round(event)

    pairs = {frozenset(p.competitor_ids) for p in outcome.pairings}
    assert pairs == {frozenset({"2", "4"}), frozenset({"1", "3"})}


def test_divisions_are_paired_separately(store):
    competitors = make_competitors(4) + [
        c.with_record(id=f"r{c.id}", division="Reserve") for c in make_competitors(4)
    ]
    event = _create(store, competitors, divisions=["Open", "Reserve"])

    outcome = PairingOrchestrator(store).pair_round(event)

    for pairing in outcome.pairings:
        divisions = {
            "Reserve" if cid.startswith("r") else "Open"
            for cid in pairing.competitor_ids
        }
        assert divisions == {pairing.division}
    assert [p.table for p in outcome.pairings] == [1, 2, 3, 4]


def test_undeclared_division_is_rejected(store):
    competitors = make_competitors(3) + make_competitors(1, division="Junior")
    competitors[-1] = competitors[-1].with_record(id="j1")
    event = _create(store, competitors, divisions=["Open"])

    with pytest.raises(InvalidConfigurationException):
        PairingOrchestrator(store).pair_round(event)


def test_reserved_tables(store, swiss_event):
    snapshot = store.load(swiss_event)
    snapshot.config.reserved_tables = {"5": 10}
    store.create(snapshot)

    outcome = PairingOrchestrator(store).pair_round(swiss_event)

    reserved = next(p for p in outcome.pairings if p.involves("5"))
    assert reserved.table == 10
    assert sorted(p.table for p in outcome.pairings) == [1, 2, 10]


def test_assign_tables_skips_byes_and_taken_numbers():
    pairings = [
        Pairing(round=1, player1="a", player2="b"),
        Pairing(round=1, player1="c", player2="d"),
        Pairing(round=1, player1="e", player2="BYE"),
    ]

    tables = assign_tables(pairings, {"d": 1})

    assert [p.table for p in tables] == [2, 1, None]


def test_team_event_pairs_boards(store, team_event):
    outcome = PairingOrchestrator(store).pair_round(team_event)

    games = [(p.player1, p.player2) for p in outcome.pairings if not p.is_bye]
    byes = [p.player1 for p in outcome.pairings if p.is_bye]
    assert sorted(frozenset(g) for g in games) == sorted(
        [frozenset({"A1", "B1"}), frozenset({"A2", "B2"})]
    )
    assert byes == ["C1", "C2"]
    assert sorted(r.player1_id for r in outcome.generated_results) == ["C1", "C2"]


def test_two_competitors_alternate_starts(store):
    event = _create(store, make_competitors(2), total_rounds=4)
    orchestrator = PairingOrchestrator(store)

    starters = []
    for _ in range(4):
        outcome = orchestrator.pair_round(event)
        starters.append(outcome.pairings[0].starter_id)

    assert sorted(starters) == ["1", "1", "2", "2"]
    assert starters[0] != starters[1]


def test_round_in_play_counts_as_played(store):
    event = _create(store, make_competitors(4))
    orchestrator = PairingOrchestrator(store)

    first = orchestrator.pair_round(event)
    second = orchestrator.pair_round(event)

    first_pairs = {frozenset(p.competitor_ids) for p in first.pairings}
    second_pairs = {frozenset(p.competitor_ids) for p in second.pairings}
    assert not first_pairs & second_pairs
    assert all(p.note is None for p in second.pairings)


def test_gibson_waits_for_rounds_in_play(store):
    event = _create(
        store,
        make_competitors(4),
        total_rounds=5,
        pairing_system="king_of_the_hill",
        gibson_rule_enabled=True,
        prize_count=1,
        round_settings={5: {"algorithm": "enhanced_swiss", "base_round": 3}},
    )
    orchestrator = PairingOrchestrator(store)
    recorder = ResultRecorder(store)
    wins = Counter()
    for round_number in (1, 2, 3):
        outcome = orchestrator.pair_round(event, round_number)
        for pairing in outcome.pairings:
            pair = pairing.competitor_ids
            # "1" wins everything, elsewhere the competitor behind wins
            winner = "1" if "1" in pair else min(pair, key=lambda i: (wins[i], i))
            loser = pairing.opponent_of(winner)
            wins[winner] += 1
            recorder.record_result(event, game(round_number, winner, loser))
    assert wins["1"] == 3 and max(wins[i] for i in "234") == 1

    # Round 4 stays open, so a two-win lead is not safe yet
    orchestrator.pair_round(event, 4)
    outcome = orchestrator.pair_round(event, 5)

    assert not any(p.is_gibson for p in outcome.pairings)
