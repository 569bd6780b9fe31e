"""
Pytest fixtures for Team Planner tests.
"""

from datetime import datetime, timedelta, timezone

import pytest

from ..dex import load_reference
from ..dex.models import ReferenceData
from ..engine_core.reducer import Reducer
from ..engine_core.state import AppState, Team, TeamSlot
from ..persistence.adapter import PersistenceAdapter
from ..persistence.storage import MemoryStorage
from ..session.history import MemoryNavigation
from ..session.planner import TeamPlanner

START = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class TickingClock:
    """Clock that advances one minute per reading."""

    def __init__(self, start: datetime = START):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now = current + timedelta(minutes=1)
        return current


def make_team(
    team_id: int,
    game_id: str,
    *members,
    name: str = "Team",
    choices=None,
    updated_at: datetime = START,
) -> Team:
    """Members are species ids or (species_id, form_index) pairs."""
    slots = tuple(
        TeamSlot(*m) if isinstance(m, tuple) else TeamSlot(m) for m in members
    )
    if choices is None:
        choices = (0,) * len(slots)
    return Team(
        id=team_id,
        game_id=game_id,
        name=name,
        slots=slots,
        ability_choice=tuple(choices),
        created_at=START,
        updated_at=updated_at,
    )


@pytest.fixture
def reference() -> ReferenceData:
    """Bundled reference data."""
    return load_reference()


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def reducer(reference, clock) -> Reducer:
    return Reducer(reference, clock)


@pytest.fixture
def loaded_state() -> AppState:
    """State after an empty collection has been loaded."""
    return AppState(saved_teams=())


@pytest.fixture
def saved_teams() -> tuple[Team, ...]:
    """Two saved teams for different games."""
    return (
        make_team(1, "x-y", 6, 130, 35, name="Kalos Starters", choices=(0, 0, 0)),
        make_team(
            2, "ruby-sapphire", 143, 94, name="Hoenn Walls", choices=(1, 0),
            updated_at=START + timedelta(days=1),
        ),
    )


@pytest.fixture
def state_with_teams(saved_teams) -> AppState:
    return AppState(saved_teams=saved_teams)


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def adapter(storage, reference) -> PersistenceAdapter:
    return PersistenceAdapter(storage, reference)


@pytest.fixture
def navigation() -> MemoryNavigation:
    return MemoryNavigation()


@pytest.fixture
def planner(reference, storage, navigation, clock) -> TeamPlanner:
    """Started planner with an empty store."""
    planner = TeamPlanner(reference, storage, navigation, clock)
    planner.start("")
    return planner
