"""
Reducer - Applies actions to the application state.

The reducer is the single point of state mutation.
All state changes must go through Reducer.apply().

Design principles:
- Pure function: (state, action) -> new_state
- Guards return the unchanged state with an error code, they never raise
- The current time comes from an injected clock
- Side effects (history, storage) are described in the ActionResult and
  carried out by the dispatcher
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable
import logging

from ..dex.models import Game, ReferenceData
from .action import (
    Action, ActionResult, ActionType, HistoryMode,
    CycleAbility, DeleteTeam, ImportTeams, LoadTeams, RenameTeam, ReorderTeam,
    RestoreHistoryState, SelectGame, SelectTeam, ToggleSpecies,
)
from .resolver import NUM_ABILITY_SLOTS, DataResolver, ReferenceLookupError
from .state import DEFAULT_GAME_ID, AppState, Team, View

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Reducer:
    """
    Reducer applies actions to the application state.

    Stateless - all state is in AppState.
    Reference data provides games and ability slots for validation.
    """
    reference: ReferenceData
    clock: Clock = utc_now
    resolver: DataResolver = field(init=False, repr=False)

    def __post_init__(self):
        self.resolver = DataResolver(self.reference)

    def apply(self, state: AppState, action: Action) -> ActionResult:
        """
        Apply an action to the application state.

        Returns ActionResult with the new state, or the unchanged state and
        an error code when a guard stops the action.
        """
        action_type = getattr(action, "action_type", None)
        handler = self._get_handler(action_type)
        if handler is None:
            raise TypeError(f"No handler for action: {action!r}")
        return handler(state, action)

    def _get_handler(self, action_type: ActionType | None):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.GO_HOME: self._handle_go_home,
            ActionType.SHOW_GAMES: self._handle_show_games,
            ActionType.SHOW_COMPARE: self._handle_show_compare,
            ActionType.SELECT_GAME: self._handle_select_game,
            ActionType.RESTORE_HISTORY_STATE: self._handle_restore_history_state,
            ActionType.LOAD_TEAMS: self._handle_load_teams,
            ActionType.SAVE_CURRENT_TEAM: self._handle_save_current_team,
            ActionType.SAVE_AS_NEW_TEAM: self._handle_save_as_new_team,
            ActionType.NEW_TEAM: self._handle_new_team,
            ActionType.SELECT_TEAM: self._handle_select_team,
            ActionType.DELETE_TEAM: self._handle_delete_team,
            ActionType.IMPORT_TEAMS: self._handle_import_teams,
            ActionType.EXPORT_TEAMS: self._handle_export_teams,
            ActionType.RENAME_TEAM: self._handle_rename_team,
            ActionType.TOGGLE_SPECIES: self._handle_toggle_species,
            ActionType.REORDER_TEAM: self._handle_reorder_team,
            ActionType.CYCLE_ABILITY: self._handle_cycle_ability,
        }
        return handlers.get(action_type)

    # -- Navigation --------------------------------------------------------

    def _handle_go_home(self, state: AppState, action: Action) -> ActionResult:
        return ActionResult.success_with_state(
            state._copy_with(view=View.HOME),
            changes=["Showing home"],
            history=HistoryMode.PUSH,
        )

    def _handle_show_games(self, state: AppState, action: Action) -> ActionResult:
        return ActionResult.success_with_state(
            state._copy_with(view=View.GAMES),
            changes=["Showing games"],
            history=HistoryMode.PUSH,
        )

    def _handle_show_compare(self, state: AppState, action: Action) -> ActionResult:
        return ActionResult.success_with_state(
            state._copy_with(view=View.COMPARE),
            changes=["Showing team comparison"],
            history=HistoryMode.PUSH,
        )

    def _handle_select_game(self, state: AppState, action: SelectGame) -> ActionResult:
        """Start a fresh team for the game and open the planner."""
        game = self.reference.get_game(action.game_id)
        if game is None:
            return self._guard(state, f"Unknown game: {action.game_id}", "GAME_NOT_FOUND")

        team = self._empty_team(state, game.id)
        new_state = state._copy_with(view=View.PLANNER, current_team=team, is_dirty=False)
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Started a new team for {game.name}"],
            history=HistoryMode.PUSH,
        )

    def _handle_restore_history_state(
        self, state: AppState, action: RestoreHistoryState
    ) -> ActionResult:
        """
        Set view and current team from a navigation entry.

        An unparseable entry, or a planner entry without a team, falls back
        to the home view with no current team.
        """
        entry = action.entry
        if entry is None or (entry.view == View.PLANNER and entry.team is None):
            logger.debug("Malformed history entry %r, returning home", entry)
            new_state = state._copy_with(view=View.HOME, current_team=None, is_dirty=False)
            return ActionResult.success_with_state(new_state, changes=["Restored home"])

        new_state = state._copy_with(
            view=entry.view,
            current_team=entry.team,
            is_dirty=entry.updated,
        )
        return ActionResult.success_with_state(
            new_state, changes=[f"Restored {entry.view.value}"]
        )

    # -- Team collection ---------------------------------------------------

    def _handle_load_teams(self, state: AppState, action: LoadTeams) -> ActionResult:
        teams = tuple(action.teams)
        return ActionResult.success_with_state(
            state._copy_with(saved_teams=teams),
            changes=[f"Loaded {len(teams)} saved teams"],
        )

    def _handle_save_current_team(self, state: AppState, action: Action) -> ActionResult:
        """Replace the saved copy of the current team by id, or append it."""
        if not state.is_loaded:
            return self._guard(state, "Saved teams not loaded yet", "NOT_LOADED")
        if state.current_team is None:
            return self._guard(state, "No current team", "NO_TEAM")

        team = state.current_team._copy_with(updated_at=self.clock())
        saved = list(state.saved_teams)
        for i, existing in enumerate(saved):
            if existing.id == team.id:
                saved[i] = team
                break
        else:
            saved.append(team)

        new_state = state._copy_with(
            current_team=team,
            saved_teams=tuple(saved),
            is_dirty=False,
        )
        logger.info("Saved team %s (%s)", team.id, team.name)
        return ActionResult.success_with_state(new_state, changes=[f"Saved {team.name}"])

    def _handle_save_as_new_team(self, state: AppState, action: Action) -> ActionResult:
        """Append a copy of the current team under a new id and make it current."""
        if not state.is_loaded:
            return self._guard(state, "Saved teams not loaded yet", "NOT_LOADED")
        if state.current_team is None:
            return self._guard(state, "No current team", "NO_TEAM")

        now = self.clock()
        team = state.current_team._copy_with(
            id=state.next_team_id(),
            created_at=now,
            updated_at=now,
        )
        new_state = state._copy_with(
            current_team=team,
            saved_teams=state.saved_teams + (team,),
            is_dirty=False,
        )
        logger.info("Saved team %s (%s) as new", team.id, team.name)
        return ActionResult.success_with_state(
            new_state, changes=[f"Saved {team.name} as a new team"]
        )

    def _handle_new_team(self, state: AppState, action: Action) -> ActionResult:
        """
        Replace the current team with an empty one.

        The game is the current team's, else the most recently updated saved
        team's, else the national dex.
        """
        if state.current_team is not None:
            game_id = state.current_team.game_id
        elif state.saved_teams:
            game_id = max(state.saved_teams, key=lambda t: t.updated_at).game_id
        else:
            game_id = DEFAULT_GAME_ID

        team = self._empty_team(state, game_id)
        new_state = state._copy_with(view=View.PLANNER, current_team=team, is_dirty=False)
        return ActionResult.success_with_state(
            new_state,
            changes=["Started a new team"],
            history=HistoryMode.FORCE_PUSH,
        )

    def _handle_select_team(self, state: AppState, action: SelectTeam) -> ActionResult:
        """
        Open a team in the planner.

        Omitting the id, or naming the current team, reopens the working
        copy with its unsaved changes.
        """
        current = state.current_team
        if action.team_id is None or (current is not None and current.id == action.team_id):
            if current is None:
                return self._guard(state, "No current team", "NO_TEAM")
            return ActionResult.success_with_state(
                state._copy_with(view=View.PLANNER),
                changes=[f"Opened {current.name}"],
                history=HistoryMode.PUSH,
            )

        team = state.get_saved_team(action.team_id)
        if team is None:
            return self._guard(state, f"Unknown team: {action.team_id}", "TEAM_NOT_FOUND")

        new_state = state._copy_with(view=View.PLANNER, current_team=team, is_dirty=False)
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Opened {team.name}"],
            history=HistoryMode.PUSH,
        )

    def _handle_delete_team(self, state: AppState, action: DeleteTeam) -> ActionResult:
        """Remove a saved team. The current team becomes unsaved if it was deleted."""
        if not state.is_loaded:
            return self._guard(state, "Saved teams not loaded yet", "NOT_LOADED")

        team = state.get_saved_team(action.team_id)
        if team is None:
            return self._guard(state, f"Unknown team: {action.team_id}", "TEAM_NOT_FOUND")

        saved = tuple(t for t in state.saved_teams if t.id != action.team_id)
        is_dirty = state.is_dirty
        if state.current_team is not None and state.current_team.id == action.team_id:
            is_dirty = True

        logger.info("Deleted team %s (%s)", team.id, team.name)
        return ActionResult.success_with_state(
            state._copy_with(saved_teams=saved, is_dirty=is_dirty),
            changes=[f"Deleted {team.name}"],
        )

    def _handle_import_teams(self, state: AppState, action: ImportTeams) -> ActionResult:
        teams = tuple(action.teams)
        new_state = state._copy_with(
            view=View.HOME,
            current_team=None,
            saved_teams=teams,
            is_dirty=False,
        )
        logger.info("Imported %d teams", len(teams))
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Imported {len(teams)} teams"],
            history=HistoryMode.PUSH,
        )

    def _handle_export_teams(self, state: AppState, action: Action) -> ActionResult:
        if not state.is_loaded:
            return self._guard(state, "Saved teams not loaded yet", "NOT_LOADED")
        result = ActionResult.success_with_state(
            state, changes=[f"Exported {len(state.saved_teams)} teams"]
        )
        result.export = state.saved_teams
        return result

    # -- Current team editing ----------------------------------------------

    def _handle_rename_team(self, state: AppState, action: RenameTeam) -> ActionResult:
        team = state.current_team
        if team is None:
            return self._guard(state, "No current team", "NO_TEAM")
        if team.name == action.name:
            return ActionResult.success_with_state(state)

        return self._edit(state, team._copy_with(name=action.name), f"Renamed to {action.name}")

    def _handle_toggle_species(self, state: AppState, action: ToggleSpecies) -> ActionResult:
        """
        Remove a member if present, else append it.

        The ability choice at the same index goes with it. A new member
        starts on its first populated ability slot.
        """
        team = state.current_team
        if team is None:
            return self._guard(state, "No current team", "NO_TEAM")

        slot = action.slot
        if not self.reference.has_form(slot.species_id, slot.form_index):
            raise ReferenceLookupError(
                f"Unknown species form: {slot.species_id}/{slot.form_index}"
            )

        index = team.index_of(slot)
        if index is not None:
            new_team = team._copy_with(
                slots=team.slots[:index] + team.slots[index + 1:],
                ability_choice=team.ability_choice[:index] + team.ability_choice[index + 1:],
            )
            return self._edit(state, new_team, f"Removed {slot.species_id}")

        if team.is_full:
            return self._guard(state, "Team is full", "AT_CAPACITY")

        generation = self._game_for(team).generation
        choice = self.resolver.first_ability_choice(slot.species_id, slot.form_index, generation)
        new_team = team._copy_with(
            slots=team.slots + (slot,),
            ability_choice=team.ability_choice + (choice,),
        )
        return self._edit(state, new_team, f"Added {slot.species_id}")

    def _handle_reorder_team(self, state: AppState, action: ReorderTeam) -> ActionResult:
        """Permute slots and ability choices in lockstep."""
        team = state.current_team
        if team is None:
            return self._guard(state, "No current team", "NO_TEAM")

        order = list(action.order)
        if sorted(order) != list(range(len(team.slots))):
            return self._guard(state, f"Not a permutation of the team: {order}", "BAD_ORDER")
        if order == sorted(order):
            return ActionResult.success_with_state(state)

        new_team = team._copy_with(
            slots=tuple(team.slots[i] for i in order),
            ability_choice=tuple(team.ability_choice[i] for i in order),
        )
        return self._edit(state, new_team, "Reordered team")

    def _handle_cycle_ability(self, state: AppState, action: CycleAbility) -> ActionResult:
        """
        Advance a member to the next populated ability slot.

        Tries at most three slots; when none is populated the choice stays.
        """
        team = state.current_team
        if team is None:
            return self._guard(state, "No current team", "NO_TEAM")

        game = self._game_for(team)
        if not game.has_abilities:
            return self._guard(state, f"{game.name} has no abilities", "ABILITIES_DISABLED")

        index = team.index_of(action.slot)
        if index is None:
            return self._guard(state, f"Not on the team: {action.slot}", "SLOT_NOT_FOUND")

        slots = self.resolver.resolve_ability_slots(
            action.slot.species_id, action.slot.form_index, game.generation
        )
        current = team.ability_choice[index]
        for step in range(1, NUM_ABILITY_SLOTS + 1):
            candidate = (current + step) % NUM_ABILITY_SLOTS
            if slots[candidate] is not None:
                break
        else:
            logger.warning(
                "No ability slot populated for species %s form %s in generation %s",
                action.slot.species_id, action.slot.form_index, game.generation,
            )
            return ActionResult.success_with_state(state)

        if candidate == current:
            return ActionResult.success_with_state(state)

        choices = list(team.ability_choice)
        choices[index] = candidate
        new_team = team._copy_with(ability_choice=tuple(choices))
        return self._edit(state, new_team, f"Ability set to {slots[candidate]}")

    # -- Helpers -----------------------------------------------------------

    def _edit(self, state: AppState, team: Team, change: str) -> ActionResult:
        return ActionResult.success_with_state(
            state._copy_with(current_team=team, is_dirty=True),
            changes=[change],
        )

    def _empty_team(self, state: AppState, game_id: str) -> Team:
        now = self.clock()
        return Team(
            id=state.next_team_id(),
            game_id=game_id,
            created_at=now,
            updated_at=now,
        )

    def _game_for(self, team: Team) -> Game:
        game = self.reference.get_game(team.game_id)
        if game is None:
            raise ReferenceLookupError(f"Unknown game id: {team.game_id}")
        return game

    def _guard(self, state: AppState, message: str, error_code: str) -> ActionResult:
        logger.debug("Action ignored (%s): %s", error_code, message)
        return ActionResult.unchanged(state, message, error_code)


def apply_action(
    reference: ReferenceData,
    state: AppState,
    action: Action,
    clock: Clock = utc_now,
) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer(reference, clock)
    return reducer.apply(state, action)
