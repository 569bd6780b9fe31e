"""
History Synchronizer - Mirrors view/team transitions onto a navigation stack.

Invariant: the rendered view and current team can always be rebuilt from
the entry at the top of the stack.

On every externally visible transition the synchronizer:
1. Replaces the current entry with a snapshot of the state before it, so
   going back restores the previous screen exactly
2. Pushes an entry for the state after it, unless the URL segment did not
   change (then the current entry is replaced with the new state instead)

Entries travel as plain payload dicts, the way a browser stores them; a
payload that does not parse replays as the home view.
"""

from __future__ import annotations
from typing import Any, Protocol
import logging

from pydantic import BaseModel, ValidationError

from ..dex.models import ReferenceData
from ..engine_core.action import (
    Action, GoHome, HistoryMode, SelectGame, ShowCompare, ShowGames,
)
from ..engine_core.state import AppState, HistoryEntry, Team, View
from ..persistence.schemas import TeamRecord

logger = logging.getLogger(__name__)

GAMES_SEGMENT = "games"
COMPARE_SEGMENT = "compare"


class HistoryPayload(BaseModel):
    """A navigation entry as stored on the stack."""
    view: View
    team: TeamRecord | None = None
    updated: bool = False


class NavigationPort(Protocol):
    """A navigation stack addressed by URL path segment."""

    def current_path(self) -> str:
        ...

    def replace(self, path: str, payload: dict[str, Any]) -> None:
        """Overwrite the current entry."""
        ...

    def push(self, path: str, payload: dict[str, Any]) -> None:
        """Add an entry after the current one, dropping any forward entries."""
        ...


class MemoryNavigation:
    """
    In-process navigation stack with back/forward.

    Usage:
        nav = MemoryNavigation()
        nav.push("games", payload)
        if nav.back():
            planner.pop_state(nav.current_payload())
    """

    def __init__(self, path: str = ""):
        self.entries: list[tuple[str, dict[str, Any] | None]] = [(path, None)]
        self.index = 0

    def current_path(self) -> str:
        return self.entries[self.index][0]

    def current_payload(self) -> dict[str, Any] | None:
        return self.entries[self.index][1]

    def replace(self, path: str, payload: dict[str, Any]) -> None:
        self.entries[self.index] = (path, payload)

    def push(self, path: str, payload: dict[str, Any]) -> None:
        del self.entries[self.index + 1:]
        self.entries.append((path, payload))
        self.index += 1

    def back(self) -> bool:
        if self.index == 0:
            return False
        self.index -= 1
        return True

    def forward(self) -> bool:
        if self.index >= len(self.entries) - 1:
            return False
        self.index += 1
        return True


def url_segment(view: View, team: Team | None = None) -> str:
    """
    URL path segment of a view.

    Home is empty, the planner is addressed by the team's game id.
    """
    if view == View.GAMES:
        return GAMES_SEGMENT
    if view == View.COMPARE:
        return COMPARE_SEGMENT
    if view == View.PLANNER and team is not None:
        return team.game_id
    return ""


def action_for_path(path: str, reference: ReferenceData) -> Action:
    """Route a URL path segment to the action that opens it."""
    segment = path.strip("/")
    if segment == GAMES_SEGMENT:
        return ShowGames()
    if segment == COMPARE_SEGMENT:
        return ShowCompare()
    if segment and reference.get_game(segment) is not None:
        return SelectGame(segment)
    return GoHome()


def snapshot(state: AppState) -> HistoryEntry:
    return HistoryEntry(view=state.view, team=state.current_team, updated=state.is_dirty)


def entry_to_payload(entry: HistoryEntry) -> dict[str, Any]:
    payload = HistoryPayload(
        view=entry.view,
        team=TeamRecord.from_team(entry.team) if entry.team is not None else None,
        updated=entry.updated,
    )
    return payload.model_dump(mode="json")


def entry_from_payload(payload: Any) -> HistoryEntry | None:
    """Parse a stored payload; None when it is missing or malformed."""
    if payload is None:
        return None
    try:
        parsed = HistoryPayload.model_validate(payload)
    except ValidationError as e:
        logger.debug("Unreadable history payload: %s", e)
        return None
    return HistoryEntry(
        view=parsed.view,
        team=parsed.team.to_team() if parsed.team is not None else None,
        updated=parsed.updated,
    )


class HistorySynchronizer:
    """Writes reducer transitions to a NavigationPort."""

    def __init__(self, navigation: NavigationPort):
        self.navigation = navigation

    def initial(self, state: AppState) -> None:
        """Make the current entry describe the state after startup."""
        self._replace(state)

    def record(self, before: AppState, after: AppState, mode: HistoryMode) -> None:
        """Mirror one transition onto the stack."""
        if mode == HistoryMode.NONE:
            return

        self._replace(before)
        path = url_segment(after.view, after.current_team)
        if mode == HistoryMode.PUSH and path == url_segment(before.view, before.current_team):
            self._replace(after)
            return

        self.navigation.push(path, entry_to_payload(snapshot(after)))
        logger.debug("Pushed history entry /%s", path)

    def _replace(self, state: AppState) -> None:
        path = url_segment(state.view, state.current_team)
        self.navigation.replace(path, entry_to_payload(snapshot(state)))
