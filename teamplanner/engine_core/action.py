"""
Action System - Typed actions and reducer results.

Every state change flows through one of these actions. Each action kind is
its own record carrying only the fields it needs, and the set is closed:
the reducer has exactly one handler per ActionType.

Action groups:
- Navigation (home, game list, compare view, game selection, history replay)
- Collection (load, save, save as new, new, select, delete, import, export)
- Editing (rename, toggle species, reorder, cycle ability)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from .state import AppState, HistoryEntry, Team, TeamSlot


class ActionType(Enum):
    """Types of actions in the system."""
    # Navigation
    GO_HOME = "go_home"
    SHOW_GAMES = "show_games"
    SHOW_COMPARE = "show_compare"
    SELECT_GAME = "select_game"
    RESTORE_HISTORY_STATE = "restore_history_state"

    # Team collection
    LOAD_TEAMS = "load_teams"
    SAVE_CURRENT_TEAM = "save_current_team"
    SAVE_AS_NEW_TEAM = "save_as_new_team"
    NEW_TEAM = "new_team"
    SELECT_TEAM = "select_team"
    DELETE_TEAM = "delete_team"
    IMPORT_TEAMS = "import_teams"
    EXPORT_TEAMS = "export_teams"

    # Current team editing
    RENAME_TEAM = "rename_team"
    TOGGLE_SPECIES = "toggle_species"
    REORDER_TEAM = "reorder_team"
    CYCLE_ABILITY = "cycle_ability"


class HistoryMode(Enum):
    """How a transition is mirrored onto the navigation stack."""
    NONE = "none"
    PUSH = "push"  # Push unless the URL segment is unchanged
    FORCE_PUSH = "force_push"  # Push even when the URL segment is unchanged


@dataclass(frozen=True)
class GoHome:
    """Return to the landing page."""

    @property
    def action_type(self) -> ActionType:
        return ActionType.GO_HOME


@dataclass(frozen=True)
class ShowGames:
    """Switch to the game selector."""

    @property
    def action_type(self) -> ActionType:
        return ActionType.SHOW_GAMES


@dataclass(frozen=True)
class ShowCompare:
    """Switch to the team comparison view."""

    @property
    def action_type(self) -> ActionType:
        return ActionType.SHOW_COMPARE


@dataclass(frozen=True)
class SelectGame:
    """
    Start a fresh team for a game and open the planner.

    Examples:
        SelectGame(game_id="x-y")
    """
    game_id: str

    @property
    def action_type(self) -> ActionType:
        return ActionType.SELECT_GAME


@dataclass(frozen=True)
class RestoreHistoryState:
    """
    Replay a navigation entry (back/forward).

    `entry` is None when the navigation payload could not be parsed.
    """
    entry: HistoryEntry | None

    @property
    def action_type(self) -> ActionType:
        return ActionType.RESTORE_HISTORY_STATE


@dataclass(frozen=True)
class LoadTeams:
    """Store the team collection read from durable storage at startup."""
    teams: tuple[Team, ...]

    @property
    def action_type(self) -> ActionType:
        return ActionType.LOAD_TEAMS


@dataclass(frozen=True)
class SaveCurrentTeam:
    """Overwrite (or insert) the saved copy of the current team."""

    @property
    def action_type(self) -> ActionType:
        return ActionType.SAVE_CURRENT_TEAM


@dataclass(frozen=True)
class SaveAsNewTeam:
    """Save the current team under a freshly minted id."""

    @property
    def action_type(self) -> ActionType:
        return ActionType.SAVE_AS_NEW_TEAM


@dataclass(frozen=True)
class NewTeam:
    """Replace the current team with an empty one for the same game."""

    @property
    def action_type(self) -> ActionType:
        return ActionType.NEW_TEAM


@dataclass(frozen=True)
class SelectTeam:
    """
    Open a saved team in the planner.

    Omitting `team_id` reopens the current team.
    """
    team_id: int | None = None

    @property
    def action_type(self) -> ActionType:
        return ActionType.SELECT_TEAM


@dataclass(frozen=True)
class DeleteTeam:
    """Remove a team from the saved collection."""
    team_id: int

    @property
    def action_type(self) -> ActionType:
        return ActionType.DELETE_TEAM


@dataclass(frozen=True)
class ImportTeams:
    """
    Replace the saved collection with validated imported teams.

    Validation happens before dispatch; see PersistenceAdapter.validate_import.
    """
    teams: tuple[Team, ...]

    @property
    def action_type(self) -> ActionType:
        return ActionType.IMPORT_TEAMS


@dataclass(frozen=True)
class ExportTeams:
    """Snapshot the saved collection for export. State is unchanged."""

    @property
    def action_type(self) -> ActionType:
        return ActionType.EXPORT_TEAMS


@dataclass(frozen=True)
class RenameTeam:
    """Set the current team's name."""
    name: str

    @property
    def action_type(self) -> ActionType:
        return ActionType.RENAME_TEAM


@dataclass(frozen=True)
class ToggleSpecies:
    """
    Add a species to the current team, or remove it if already present.

    Examples:
        ToggleSpecies(species_id=6)
        ToggleSpecies(species_id=26, form_index=1)  # Alolan Raichu
    """
    species_id: int
    form_index: int = 0

    @property
    def action_type(self) -> ActionType:
        return ActionType.TOGGLE_SPECIES

    @property
    def slot(self) -> TeamSlot:
        return TeamSlot(self.species_id, self.form_index)


@dataclass(frozen=True)
class ReorderTeam:
    """
    Permute the current team.

    `order[i]` is the old index of the member that moves to position i.
    """
    order: tuple[int, ...]

    @property
    def action_type(self) -> ActionType:
        return ActionType.REORDER_TEAM


@dataclass(frozen=True)
class CycleAbility:
    """Advance a team member to its next populated ability slot."""
    slot: TeamSlot

    @property
    def action_type(self) -> ActionType:
        return ActionType.CYCLE_ABILITY


Action = Union[
    GoHome,
    ShowGames,
    ShowCompare,
    SelectGame,
    RestoreHistoryState,
    LoadTeams,
    SaveCurrentTeam,
    SaveAsNewTeam,
    NewTeam,
    SelectTeam,
    DeleteTeam,
    ImportTeams,
    ExportTeams,
    RenameTeam,
    ToggleSpecies,
    ReorderTeam,
    CycleAbility,
]


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether the action took effect
    - The next state (the unchanged input state when it did not)
    - The guard that stopped it, if any
    - Side effects for the dispatcher (history mode, export snapshot)
    """
    success: bool
    new_state: AppState
    error: str | None = None
    error_code: str | None = None

    # Printed by the CLI and logged by the dispatcher
    state_changes: list[str] = field(default_factory=list)

    # For the dispatcher
    history: HistoryMode = HistoryMode.NONE
    export: tuple[Team, ...] | None = None

    @classmethod
    def unchanged(cls, state: AppState, error: str, error_code: str) -> ActionResult:
        """Create a no-op result that keeps the current state."""
        return cls(success=False, new_state=state, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: AppState,
        changes: list[str] | None = None,
        history: HistoryMode = HistoryMode.NONE,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            state_changes=changes or [],
            history=history,
        )
