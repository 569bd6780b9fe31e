"""
Team Planner - Serial dispatcher wiring the reducer to its ports.

One action completes (new state, storage write, history entry) before the
next one starts:

1. The reducer computes the next AppState
2. If the saved collection changed, the whole collection is written
3. If the transition is externally visible, navigation history is updated

The planner is the only holder of mutable state.
"""

from __future__ import annotations
from pathlib import Path
from typing import Any
import logging

from ..dex import load_reference
from ..dex.models import ReferenceData
from ..engine_core.action import (
    Action, ActionResult, ExportTeams, ImportTeams, LoadTeams, NewTeam,
    RestoreHistoryState, SelectGame, SelectTeam,
)
from ..engine_core.coverage import CoverageCalculator, CoverageReport
from ..engine_core.reducer import Clock, Reducer, utc_now
from ..engine_core.state import AppState
from ..persistence.adapter import EXPORT_FILENAME, PersistenceAdapter
from ..persistence.storage import MemoryStorage, StoragePort
from .history import (
    HistorySynchronizer, MemoryNavigation, NavigationPort, action_for_path, entry_from_payload,
)

logger = logging.getLogger(__name__)


class TeamPlanner:
    """
    Holds the application state and dispatches actions.

    Usage:
        planner = TeamPlanner(storage=FileStorage())
        planner.start()
        planner.dispatch(SelectGame("x-y"))
        planner.dispatch(ToggleSpecies(6))
        planner.dispatch(SaveCurrentTeam())
    """

    def __init__(
        self,
        reference: ReferenceData | None = None,
        storage: StoragePort | None = None,
        navigation: NavigationPort | None = None,
        clock: Clock = utc_now,
    ):
        self.reference = reference if reference is not None else load_reference()
        self.storage = storage if storage is not None else MemoryStorage()
        self.navigation = navigation if navigation is not None else MemoryNavigation()
        self.clock = clock

        self.reducer = Reducer(self.reference, clock)
        self.persistence = PersistenceAdapter(self.storage, self.reference)
        self.history = HistorySynchronizer(self.navigation)
        self.calculator = CoverageCalculator(self.reference)

        self.state = AppState()

    def start(self, path: str | None = None) -> AppState:
        """
        Load saved teams and open the screen for a URL path.

        A missing or unreadable store loads an empty collection. The path
        defaults to the navigation stack's current one.
        """
        teams = self.persistence.load()
        self._apply(LoadTeams(teams if teams is not None else ()))

        if path is None:
            path = self.navigation.current_path()
        self._apply(action_for_path(path, self.reference))
        self.history.initial(self.state)
        return self.state

    def dispatch(self, action: Action) -> ActionResult:
        """Apply an action and carry out its storage and history effects."""
        before = self.state
        result = self._apply(action)
        self.history.record(before, self.state, result.history)
        return result

    def requires_confirmation(self, action: Action) -> bool:
        """Check whether an action would discard unsaved changes."""
        if not self.state.is_dirty:
            return False
        if isinstance(action, (NewTeam, SelectGame, ImportTeams)):
            return True
        if isinstance(action, SelectTeam) and action.team_id is not None:
            current = self.state.current_team
            return current is None or current.id != action.team_id
        return False

    def pop_state(self, payload: Any) -> ActionResult:
        """Replay a navigation entry after back/forward navigation."""
        return self.dispatch(RestoreHistoryState(entry_from_payload(payload)))

    def import_text(self, text: str | bytes) -> ActionResult:
        """
        Replace the saved collection with an export file's teams.

        Raises ImportValidationError without touching state when the file
        is rejected.
        """
        teams = self.persistence.validate_import(text)
        return self.dispatch(ImportTeams(teams))

    def import_file(self, path: str | Path) -> ActionResult:
        return self.import_text(Path(path).read_bytes())

    def export_json(self) -> str | None:
        """Serialize the saved collection, or None before it has loaded."""
        result = self.dispatch(ExportTeams())
        if result.export is None:
            return None
        logger.info("Exported %d teams", len(result.export))
        return self.persistence.export_json(result.export, saved_at=self.clock())

    def export_file(self, path: str | Path | None = None) -> Path | None:
        """Write the export file, named after the application by default."""
        text = self.export_json()
        if text is None:
            return None
        target = Path(path) if path is not None else Path(EXPORT_FILENAME)
        target.write_text(text, encoding="utf-8")
        return target

    def coverage(self, compare_team_id: int | None = None) -> CoverageReport | None:
        """Coverage of the current team, optionally against a saved team."""
        team = self.state.current_team
        if team is None:
            return None
        compare = None
        if compare_team_id is not None:
            compare = self.state.get_saved_team(compare_team_id)
        return self.calculator.analyze(team, compare)

    def _apply(self, action: Action) -> ActionResult:
        before = self.state
        result = self.reducer.apply(before, action)
        self.state = result.new_state
        for change in result.state_changes:
            logger.debug(change)

        saved = self.state.saved_teams
        if (
            not isinstance(action, LoadTeams)
            and saved is not None
            and saved != before.saved_teams
        ):
            self.persistence.save(saved)
        return result
