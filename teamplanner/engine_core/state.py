"""
App State - Value records for teams and the application-wide state.

Design principles:
- Immutable: records are frozen, every change builds a new value
- Serializable: teams round-trip through storage and export files
- Comparable: two states are equal when their contents are equal
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

PARTY_SIZE = 6
DEFAULT_TEAM_NAME = "New Team"
DEFAULT_GAME_ID = "national"


class View(Enum):
    """The screens the application can show."""
    HOME = "home"
    GAMES = "games"
    PLANNER = "planner"
    COMPARE = "compare"


@dataclass(frozen=True)
class TeamSlot:
    """A roster entry: one species in one form."""
    species_id: int
    form_index: int = 0


@dataclass(frozen=True)
class Team:
    """
    A named roster for one game.

    Invariants:
    - at most PARTY_SIZE slots, no (species, form) pair twice
    - len(ability_choice) == len(slots)
    """
    id: int
    game_id: str
    created_at: datetime
    updated_at: datetime
    name: str = DEFAULT_TEAM_NAME
    slots: tuple[TeamSlot, ...] = ()
    ability_choice: tuple[int, ...] = ()

    @property
    def is_full(self) -> bool:
        return len(self.slots) >= PARTY_SIZE

    def index_of(self, slot: TeamSlot) -> int | None:
        """Position of a slot in the roster, or None."""
        for i, member in enumerate(self.slots):
            if member == slot:
                return i
        return None

    def contains(self, slot: TeamSlot) -> bool:
        return self.index_of(slot) is not None

    def _copy_with(self, **kwargs) -> Team:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)


@dataclass(frozen=True)
class AppState:
    """
    Complete application state at a point in time.

    `saved_teams` is None until storage has been read, which is a
    different condition from a loaded but empty collection.
    """
    view: View = View.HOME
    current_team: Team | None = None
    saved_teams: tuple[Team, ...] | None = None
    is_dirty: bool = False

    @property
    def is_loaded(self) -> bool:
        return self.saved_teams is not None

    def get_saved_team(self, team_id: int) -> Team | None:
        """Get a saved team by ID."""
        for team in self.saved_teams or ():
            if team.id == team_id:
                return team
        return None

    def next_team_id(self) -> int:
        """One past the highest saved team id."""
        return max((team.id for team in self.saved_teams or ()), default=0) + 1

    def _copy_with(self, **kwargs) -> AppState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)


@dataclass(frozen=True)
class HistoryEntry:
    """
    Snapshot pushed to the navigation stack.

    `updated` records whether the team had unsaved changes.
    """
    view: View
    team: Team | None = None
    updated: bool = False
