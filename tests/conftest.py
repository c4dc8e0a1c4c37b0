import pytest

from helpers import make_competitors
from tourneypairing.models import Competitor, Team, TournamentConfig, TournamentSnapshot
from tourneypairing.tournament import InMemoryScheduleStore


@pytest.fixture
def store():
    return InMemoryScheduleStore()


@pytest.fixture
def swiss_event(store):
    """Six-competitor Swiss event stored under id "club"."""
    snapshot = TournamentSnapshot(
        tournament_id="club",
        config=TournamentConfig(name="Club night", total_rounds=4),
        competitors=make_competitors(6, rating=1500),
    )
    store.create(snapshot)
    return "club"


@pytest.fixture
def round_robin_event(store):
    """Four-competitor round robin stored under id "rr"."""
    snapshot = TournamentSnapshot(
        tournament_id="rr",
        config=TournamentConfig(
            name="All play all", total_rounds=3, pairing_system="round_robin"
        ),
        competitors=make_competitors(4),
    )
    store.create(snapshot)
    return "rr"


@pytest.fixture
def team_event(store):
    """Three teams of two stored under id "teams"."""
    competitors = []
    teams = []
    for number, team_id in enumerate(["A", "B", "C"], start=1):
        members = [f"{team_id}{board}" for board in (1, 2)]
        teams.append(
            Team(id=team_id, name=f"Team {team_id}", seed=number, member_ids=members)
        )
        competitors.extend(
            Competitor(id=m, name=m, seed=number * 10 + board, team_id=team_id)
            for board, m in enumerate(members, start=1)
        )
    snapshot = TournamentSnapshot(
        tournament_id="teams",
        config=TournamentConfig(
            name="Team cup",
            total_rounds=3,
            tournament_type="team",
            pairing_system="team_swiss",
        ),
        competitors=competitors,
        teams=teams,
    )
    store.create(snapshot)
    return "teams"
