"""
Tests for the reducer (state transitions).

Tests:
- Navigation and history effects
- Team collection actions
- Current team editing
- Guards leave state untouched
"""

import logging
from collections import Counter
from dataclasses import replace

import pytest

from ..dex.models import FormRecord, GenerationValue, SpeciesRecord
from ..dex.types import t
from ..engine_core.action import (
    CycleAbility, DeleteTeam, ExportTeams, GoHome, HistoryMode, ImportTeams, LoadTeams,
    NewTeam, RenameTeam, ReorderTeam, RestoreHistoryState, SaveAsNewTeam, SaveCurrentTeam,
    SelectGame, SelectTeam, ShowCompare, ShowGames, ToggleSpecies,
)
from ..engine_core.reducer import Reducer, apply_action
from ..engine_core.resolver import DataResolver, ReferenceLookupError
from ..engine_core.state import AppState, HistoryEntry, TeamSlot, View
from .conftest import START, make_team


def planner_state(team, saved=(), dirty=False):
    return AppState(view=View.PLANNER, current_team=team, saved_teams=tuple(saved), is_dirty=dirty)


def apply_all(reducer, state, *actions):
    for action in actions:
        state = reducer.apply(state, action).new_state
    return state


class TestNavigation:
    """Tests for view switching."""

    @pytest.mark.parametrize("action,view", [
        (GoHome(), View.HOME),
        (ShowGames(), View.GAMES),
        (ShowCompare(), View.COMPARE),
    ])
    def test_view_actions(self, reducer, loaded_state, action, view):
        """View actions switch view and push history."""
        result = reducer.apply(loaded_state, action)
        assert result.success
        assert result.new_state.view == view
        assert result.history == HistoryMode.PUSH

    def test_select_game(self, reducer, loaded_state):
        """Selecting a game starts a fresh team in the planner."""
        result = reducer.apply(loaded_state, SelectGame("x-y"))

        assert result.success
        state = result.new_state
        assert state.view == View.PLANNER
        assert state.current_team.game_id == "x-y"
        assert state.current_team.id == 1
        assert state.current_team.slots == ()
        assert state.current_team.created_at == START
        assert not state.is_dirty
        assert result.history == HistoryMode.PUSH

    def test_select_game_id_follows_saved(self, reducer, state_with_teams):
        """The new team's id is one past the highest saved id."""
        result = reducer.apply(state_with_teams, SelectGame("x-y"))
        assert result.new_state.current_team.id == 3

    def test_select_unknown_game(self, reducer, loaded_state):
        """An unknown game id is a no-op."""
        state = loaded_state._copy_with(view=View.GAMES)
        result = reducer.apply(state, SelectGame("pokemon-snap"))

        assert not result.success
        assert result.error_code == "GAME_NOT_FOUND"
        assert result.new_state is state
        assert result.history == HistoryMode.NONE


class TestRestoreHistoryState:
    """Tests for replaying navigation entries."""

    def test_restore_entry(self, reducer, loaded_state):
        """View, team and dirty flag come from the entry."""
        team = make_team(4, "x-y", 6)
        entry = HistoryEntry(view=View.PLANNER, team=team, updated=True)
        result = reducer.apply(loaded_state, RestoreHistoryState(entry))

        assert result.new_state.view == View.PLANNER
        assert result.new_state.current_team == team
        assert result.new_state.is_dirty
        assert result.history == HistoryMode.NONE

    def test_missing_entry_goes_home(self, reducer, loaded_state):
        """An unreadable entry falls back to home with no team."""
        state = planner_state(make_team(1, "x-y", 6), dirty=True)
        result = reducer.apply(state, RestoreHistoryState(None))

        assert result.new_state.view == View.HOME
        assert result.new_state.current_team is None
        assert not result.new_state.is_dirty

    def test_planner_entry_without_team_goes_home(self, reducer, loaded_state):
        """A planner entry must carry a team."""
        entry = HistoryEntry(view=View.PLANNER, team=None)
        result = reducer.apply(loaded_state, RestoreHistoryState(entry))
        assert result.new_state.view == View.HOME

    def test_restore_keeps_saved_teams(self, reducer, state_with_teams):
        """History never changes the saved collection."""
        entry = HistoryEntry(view=View.GAMES)
        result = reducer.apply(state_with_teams, RestoreHistoryState(entry))
        assert result.new_state.saved_teams == state_with_teams.saved_teams


class TestToggleSpecies:
    """Tests for adding and removing team members."""

    def test_add_member(self, reducer, loaded_state):
        """A new member is appended with its first ability."""
        state = reducer.apply(loaded_state, SelectGame("ruby-sapphire")).new_state
        result = reducer.apply(state, ToggleSpecies(6))

        team = result.new_state.current_team
        assert team.slots == (TeamSlot(6),)
        assert team.ability_choice == (0,)
        assert result.new_state.is_dirty

    def test_added_member_types(self, reducer, reference, loaded_state):
        """A generation 3 team adding species 6 gets a Fire/Flying member."""
        state = apply_all(reducer, loaded_state, SelectGame("ruby-sapphire"), ToggleSpecies(6))
        slot = state.current_team.slots[0]
        types = DataResolver(reference).resolve_types(slot.species_id, slot.form_index, 3)
        assert [reference.types[x].name for x in types] == ["fire", "flying"]

    def test_remove_member(self, reducer):
        """Toggling a member off drops its ability choice at the same index."""
        state = planner_state(make_team(1, "x-y", 6, 130, 35, choices=(0, 2, 1)))
        result = reducer.apply(state, ToggleSpecies(130))

        team = result.new_state.current_team
        assert team.slots == (TeamSlot(6), TeamSlot(35))
        assert team.ability_choice == (0, 1)

    def test_forms_are_distinct_members(self, reducer):
        """Alolan Raichu and Raichu can share a team."""
        state = planner_state(make_team(1, "sun-moon", 26))
        result = reducer.apply(state, ToggleSpecies(26, 1))
        assert result.new_state.current_team.slots == (TeamSlot(26), TeamSlot(26, 1))

    def test_toggle_twice_restores_slots(self, reducer):
        """Adding then removing the same member restores the roster."""
        team = make_team(1, "x-y", 6, 130)
        state = apply_all(reducer, planner_state(team), ToggleSpecies(35), ToggleSpecies(35))
        assert state.current_team.slots == team.slots
        assert state.current_team.ability_choice == team.ability_choice

    def test_capacity(self, reducer):
        """A seventh member is refused."""
        state = planner_state(make_team(1, "x-y", 1, 3, 4, 6, 7, 9))
        result = reducer.apply(state, ToggleSpecies(25))

        assert not result.success
        assert result.error_code == "AT_CAPACITY"
        assert result.new_state is state

    def test_full_team_can_remove(self, reducer):
        """Removing from a full team still works."""
        state = planner_state(make_team(1, "x-y", 1, 3, 4, 6, 7, 9))
        result = reducer.apply(state, ToggleSpecies(4))
        assert len(result.new_state.current_team.slots) == 5

    def test_never_exceeds_six(self, reducer, loaded_state):
        """Toggling many species never yields more than six slots."""
        state = reducer.apply(loaded_state, SelectGame("national")).new_state
        for species_id in (1, 3, 4, 6, 7, 9, 25, 26, 35, 37, 6, 38, 39):
            state = reducer.apply(state, ToggleSpecies(species_id)).new_state
            assert len(state.current_team.slots) <= 6
            assert len(state.current_team.ability_choice) == len(state.current_team.slots)

    def test_no_team(self, reducer, loaded_state):
        """Toggling without a current team is a no-op."""
        result = reducer.apply(loaded_state, ToggleSpecies(6))
        assert result.error_code == "NO_TEAM"
        assert result.new_state is loaded_state

    def test_unknown_species_raises(self, reducer):
        """Species must come from the reference tables."""
        state = planner_state(make_team(1, "x-y"))
        with pytest.raises(ReferenceLookupError):
            reducer.apply(state, ToggleSpecies(9999))


class TestReorderTeam:
    """Tests for reordering the roster."""

    def test_reorder(self, reducer):
        """Slots and ability choices move together."""
        state = planner_state(make_team(1, "x-y", 6, 130, 35, choices=(0, 2, 1)))
        result = reducer.apply(state, ReorderTeam((2, 0, 1)))

        team = result.new_state.current_team
        assert team.slots == (TeamSlot(35), TeamSlot(6), TeamSlot(130))
        assert team.ability_choice == (1, 0, 2)
        assert result.new_state.is_dirty

    def test_reorder_is_permutation(self, reducer):
        """The multisets of slots and choices are unchanged."""
        team = make_team(1, "x-y", 6, 130, 35, 143, choices=(0, 2, 1, 1))
        result = reducer.apply(planner_state(team), ReorderTeam((3, 1, 0, 2)))

        new_team = result.new_state.current_team
        assert Counter(new_team.slots) == Counter(team.slots)
        assert Counter(new_team.ability_choice) == Counter(team.ability_choice)
        assert new_team.slots != team.slots

    def test_identity_order_is_not_an_edit(self, reducer):
        """Keeping the order leaves the team clean."""
        state = planner_state(make_team(1, "x-y", 6, 130))
        result = reducer.apply(state, ReorderTeam((0, 1)))
        assert result.success
        assert not result.new_state.is_dirty

    @pytest.mark.parametrize("order", [(0, 0, 1), (0, 1), (0, 1, 2, 3), (1, 2, 3)])
    def test_malformed_order(self, reducer, order):
        """Anything but a permutation of the slot indexes is a no-op."""
        state = planner_state(make_team(1, "x-y", 6, 130, 35))
        result = reducer.apply(state, ReorderTeam(order))

        assert not result.success
        assert result.error_code == "BAD_ORDER"
        assert result.new_state is state


class TestCycleAbility:
    """Tests for cycling a member's ability."""

    def test_cycle_skips_empty_slots(self, reducer):
        """Charizard has no second ability; cycling goes 0 -> 2 -> 0."""
        state = planner_state(make_team(1, "black-white", 6))
        state = reducer.apply(state, CycleAbility(TeamSlot(6))).new_state
        assert state.current_team.ability_choice == (2,)
        assert state.is_dirty

        state = reducer.apply(state, CycleAbility(TeamSlot(6))).new_state
        assert state.current_team.ability_choice == (0,)

    def test_cycle_through_all_slots(self, reducer):
        """Snorlax cycles through all three slots."""
        state = planner_state(make_team(1, "x-y", 143))
        choices = []
        for _ in range(3):
            state = reducer.apply(state, CycleAbility(TeamSlot(143))).new_state
            choices.append(state.current_team.ability_choice[0])
        assert choices == [1, 2, 0]

    def test_single_ability_does_not_change(self, reducer):
        """With only one populated slot, the choice stays put."""
        state = planner_state(make_team(1, "ruby-sapphire", 6))
        result = reducer.apply(state, CycleAbility(TeamSlot(6)))

        assert result.success
        assert result.new_state.current_team.ability_choice == (0,)
        assert not result.new_state.is_dirty

    def test_game_without_abilities(self, reducer, loaded_state):
        """Cycling in a game without abilities is a no-op."""
        state = apply_all(reducer, loaded_state, SelectGame("red-blue"), ToggleSpecies(6))
        result = reducer.apply(state, CycleAbility(TeamSlot(6)))

        assert not result.success
        assert result.error_code == "ABILITIES_DISABLED"
        assert result.new_state is state

    def test_later_game_without_abilities(self, reducer, loaded_state):
        """Let's Go is generation 7 but has no abilities."""
        state = apply_all(reducer, loaded_state, SelectGame("lets-go"), ToggleSpecies(6))
        result = reducer.apply(state, CycleAbility(TeamSlot(6)))

        assert result.error_code == "ABILITIES_DISABLED"
        assert result.new_state is state

    def test_generation_3_game_flagged_without_abilities(self, reference, clock, loaded_state):
        """The game flag decides, not the generation."""
        games = tuple(
            replace(game, has_abilities=False) if game.id == "ruby-sapphire" else game
            for game in reference.games
        )
        reducer = Reducer(replace(reference, games=games), clock)

        state = apply_all(reducer, loaded_state, SelectGame("ruby-sapphire"), ToggleSpecies(6))
        assert state.current_team.slots == (TeamSlot(6),)
        assert DataResolver(reference).resolve_form(6, 0, 3).types == t("fire", "flying")

        result = reducer.apply(state, CycleAbility(TeamSlot(6)))
        assert not result.success
        assert result.error_code == "ABILITIES_DISABLED"
        assert result.new_state is state

    def test_slot_not_on_team(self, reducer):
        """Cycling a member that is not on the team is a no-op."""
        state = planner_state(make_team(1, "x-y", 6))
        result = reducer.apply(state, CycleAbility(TeamSlot(130)))
        assert result.error_code == "SLOT_NOT_FOUND"
        assert result.new_state is state

    def test_no_populated_slot_terminates(self, reference, clock, caplog):
        """A form with no abilities at all leaves the choice and logs a warning."""
        blank = SpeciesRecord(
            id=9000,
            name="Missingno",
            forms=(FormRecord(name="", types=(GenerationValue(1, t("normal")),), abilities=(None, None, None)),),
        )
        patched = replace(reference, species={**reference.species, 9000: blank})
        reducer = Reducer(patched, clock)

        state = planner_state(make_team(1, "x-y", 9000))
        with caplog.at_level(logging.WARNING):
            result = reducer.apply(state, CycleAbility(TeamSlot(9000)))

        assert result.new_state is state
        assert "No ability slot populated" in caplog.text


class TestRenameTeam:
    """Tests for renaming the current team."""

    def test_rename(self, reducer):
        """Renaming sets the name and marks the team dirty."""
        state = planner_state(make_team(1, "x-y", 6))
        result = reducer.apply(state, RenameTeam("Sun Team"))
        assert result.new_state.current_team.name == "Sun Team"
        assert result.new_state.is_dirty

    def test_same_name(self, reducer):
        """Renaming to the current name is not an edit."""
        state = planner_state(make_team(1, "x-y", 6, name="Team"))
        result = reducer.apply(state, RenameTeam("Team"))
        assert not result.new_state.is_dirty

    def test_no_team(self, reducer, loaded_state):
        """Renaming without a current team is a no-op."""
        assert reducer.apply(loaded_state, RenameTeam("X")).error_code == "NO_TEAM"


class TestSaveCurrentTeam:
    """Tests for saving the current team."""

    def test_insert(self, reducer, clock):
        """An unsaved team is appended and stamped."""
        team = make_team(3, "x-y", 6)
        state = planner_state(team, saved=(make_team(1, "x-y"),), dirty=True)
        result = reducer.apply(state, SaveCurrentTeam())

        new_state = result.new_state
        assert [t.id for t in new_state.saved_teams] == [1, 3]
        assert new_state.current_team.updated_at == START
        assert new_state.saved_teams[1] == new_state.current_team
        assert not new_state.is_dirty

    def test_replace_in_place(self, reducer, saved_teams):
        """A saved team is overwritten at its position."""
        edited = saved_teams[0]._copy_with(name="Renamed")
        state = planner_state(edited, saved=saved_teams, dirty=True)
        result = reducer.apply(state, SaveCurrentTeam())

        saved = result.new_state.saved_teams
        assert [t.id for t in saved] == [1, 2]
        assert saved[0].name == "Renamed"
        assert saved[1] == saved_teams[1]

    def test_not_loaded(self, reducer):
        """Saving before storage has been read is a no-op."""
        state = AppState(view=View.PLANNER, current_team=make_team(1, "x-y"))
        result = reducer.apply(state, SaveCurrentTeam())
        assert result.error_code == "NOT_LOADED"
        assert result.new_state is state

    def test_no_team(self, reducer, loaded_state):
        """Saving with no current team is a no-op."""
        assert reducer.apply(loaded_state, SaveCurrentTeam()).error_code == "NO_TEAM"


class TestSaveAsNewTeam:
    """Tests for saving a copy under a new id."""

    def test_save_as_new(self, reducer, saved_teams):
        """The copy gets the next id and becomes current."""
        state = planner_state(saved_teams[0]._copy_with(name="Copy"), saved=saved_teams, dirty=True)
        result = reducer.apply(state, SaveAsNewTeam())

        new_state = result.new_state
        assert [t.id for t in new_state.saved_teams] == [1, 2, 3]
        assert new_state.current_team.id == 3
        assert new_state.current_team.name == "Copy"
        assert new_state.saved_teams[0].name == "Kalos Starters"
        assert not new_state.is_dirty

    def test_not_loaded(self, reducer):
        """Saving before storage has been read is a no-op."""
        state = AppState(current_team=make_team(1, "x-y"))
        assert reducer.apply(state, SaveAsNewTeam()).error_code == "NOT_LOADED"


class TestNewTeam:
    """Tests for starting an empty team."""

    def test_same_game(self, reducer, saved_teams):
        """The new team keeps the current team's game."""
        state = planner_state(make_team(3, "sun-moon", 6), saved=saved_teams, dirty=True)
        result = reducer.apply(state, NewTeam())

        team = result.new_state.current_team
        assert team.game_id == "sun-moon"
        assert team.slots == ()
        assert team.id == 3
        assert not result.new_state.is_dirty
        assert result.history == HistoryMode.FORCE_PUSH

    def test_last_used_game(self, reducer, state_with_teams):
        """Without a current team, the most recently updated saved team's game is used."""
        result = reducer.apply(state_with_teams, NewTeam())
        assert result.new_state.current_team.game_id == "ruby-sapphire"
        assert result.new_state.view == View.PLANNER

    def test_default_game(self, reducer, loaded_state):
        """With nothing to go on, the national dex is used."""
        result = reducer.apply(loaded_state, NewTeam())
        assert result.new_state.current_team.game_id == "national"


class TestSelectTeam:
    """Tests for opening saved teams."""

    def test_select_saved(self, reducer, state_with_teams, saved_teams):
        """A saved team becomes current in the planner."""
        result = reducer.apply(state_with_teams, SelectTeam(2))

        assert result.new_state.current_team == saved_teams[1]
        assert result.new_state.view == View.PLANNER
        assert not result.new_state.is_dirty
        assert result.history == HistoryMode.PUSH

    def test_select_unknown(self, reducer, state_with_teams):
        """An unknown id is a no-op."""
        result = reducer.apply(state_with_teams, SelectTeam(42))
        assert result.error_code == "TEAM_NOT_FOUND"
        assert result.new_state is state_with_teams

    def test_reselect_current(self, reducer, saved_teams):
        """Omitting the id reopens the working copy with its edits."""
        edited = saved_teams[0]._copy_with(name="Edited")
        state = AppState(view=View.COMPARE, current_team=edited, saved_teams=saved_teams, is_dirty=True)
        result = reducer.apply(state, SelectTeam())

        assert result.new_state.view == View.PLANNER
        assert result.new_state.current_team == edited
        assert result.new_state.is_dirty

    def test_select_current_id_keeps_edits(self, reducer, saved_teams):
        """Selecting the current team's id does not discard edits."""
        edited = saved_teams[0]._copy_with(name="Edited")
        state = AppState(view=View.HOME, current_team=edited, saved_teams=saved_teams, is_dirty=True)
        result = reducer.apply(state, SelectTeam(1))
        assert result.new_state.current_team.name == "Edited"

    def test_reselect_without_team(self, reducer, loaded_state):
        """Reopening with no current team is a no-op."""
        assert reducer.apply(loaded_state, SelectTeam()).error_code == "NO_TEAM"


class TestDeleteTeam:
    """Tests for deleting saved teams."""

    def test_delete(self, reducer, state_with_teams):
        """The team is removed from the collection."""
        result = reducer.apply(state_with_teams, DeleteTeam(1))
        assert [t.id for t in result.new_state.saved_teams] == [2]

    def test_delete_reports_change(self, reducer, state_with_teams, saved_teams):
        """A delete describes itself; a refused delete reports nothing."""
        result = reducer.apply(state_with_teams, DeleteTeam(1))
        assert result.state_changes == [f"Deleted {saved_teams[0].name}"]
        assert reducer.apply(state_with_teams, DeleteTeam(42)).state_changes == []

    def test_delete_unknown_leaves_collection_identical(self, reducer, state_with_teams, saved_teams):
        """Deleting an id that is not saved changes nothing."""
        result = reducer.apply(state_with_teams, DeleteTeam(42))

        assert not result.success
        assert result.error_code == "TEAM_NOT_FOUND"
        assert result.new_state.saved_teams == saved_teams
        assert result.new_state is state_with_teams

    def test_delete_current_marks_dirty(self, reducer, saved_teams):
        """Deleting the current team's saved copy leaves it unsaved."""
        state = planner_state(saved_teams[0], saved=saved_teams)
        result = reducer.apply(state, DeleteTeam(1))
        assert result.new_state.current_team == saved_teams[0]
        assert result.new_state.is_dirty

    def test_not_loaded(self, reducer):
        """Deleting before storage has been read is a no-op."""
        assert reducer.apply(AppState(), DeleteTeam(1)).error_code == "NOT_LOADED"


class TestCollectionActions:
    """Tests for load, import and export."""

    def test_load(self, reducer, saved_teams):
        """Loading leaves the not-loaded state."""
        result = reducer.apply(AppState(), LoadTeams(saved_teams))
        assert result.new_state.is_loaded
        assert result.new_state.saved_teams == saved_teams

    def test_load_empty(self, reducer):
        """An empty collection is loaded, not missing."""
        result = reducer.apply(AppState(), LoadTeams(()))
        assert result.new_state.saved_teams == ()
        assert result.new_state.is_loaded

    def test_import_replaces_collection(self, reducer, saved_teams):
        """Importing replaces the collection and goes home."""
        state = planner_state(make_team(9, "x-y", 6), saved=(make_team(9, "x-y"),), dirty=True)
        result = reducer.apply(state, ImportTeams(saved_teams))

        new_state = result.new_state
        assert new_state.saved_teams == saved_teams
        assert new_state.current_team is None
        assert new_state.view == View.HOME
        assert not new_state.is_dirty
        assert result.history == HistoryMode.PUSH

    def test_export(self, reducer, state_with_teams, saved_teams):
        """Exporting returns the collection and leaves state alone."""
        result = reducer.apply(state_with_teams, ExportTeams())
        assert result.success
        assert result.export == saved_teams
        assert result.new_state is state_with_teams

    def test_export_not_loaded(self, reducer):
        """Exporting before storage has been read is a no-op."""
        result = reducer.apply(AppState(), ExportTeams())
        assert result.error_code == "NOT_LOADED"
        assert result.export is None


class TestReducerContract:
    """Tests for properties of every transition."""

    def test_unknown_action_raises(self, reducer, loaded_state):
        """Objects outside the action union are programming errors."""
        with pytest.raises(TypeError):
            reducer.apply(loaded_state, "select_game")

    def test_apply_action_helper(self, reference, loaded_state):
        """apply_action builds a reducer and applies the action."""
        result = apply_action(reference, loaded_state, SelectGame("x-y"), clock=lambda: START)
        assert result.new_state.current_team.created_at == START

    def test_input_state_not_mutated(self, reducer, state_with_teams, saved_teams):
        """Transitions build new state values."""
        before = state_with_teams
        apply_all(reducer, before, SelectGame("x-y"), ToggleSpecies(6), SaveCurrentTeam(), DeleteTeam(1))
        assert before.saved_teams == saved_teams
        assert before.current_team is None

    def test_ability_choices_stay_valid(self, reducer, reference, loaded_state):
        """Every chosen ability slot is populated after every transition."""
        resolver = DataResolver(reference)
        actions = [
            SelectGame("x-y"),
            ToggleSpecies(6), ToggleSpecies(35), ToggleSpecies(94), ToggleSpecies(479, 1),
            ToggleSpecies(423, 1), ToggleSpecies(143),
            CycleAbility(TeamSlot(6)), CycleAbility(TeamSlot(35)), CycleAbility(TeamSlot(143)),
            ReorderTeam((5, 4, 3, 2, 1, 0)),
            CycleAbility(TeamSlot(423, 1)), CycleAbility(TeamSlot(35)), CycleAbility(TeamSlot(94)),
            ToggleSpecies(35), CycleAbility(TeamSlot(143)), SaveCurrentTeam(), RenameTeam("Mixed"),
        ]
        state = loaded_state
        for action in actions:
            state = reducer.apply(state, action).new_state
            team = state.current_team
            for slot, choice in zip(team.slots, team.ability_choice):
                slots = resolver.resolve_ability_slots(slot.species_id, slot.form_index, 6)
                assert slots[choice] is not None
