"""
Session Module - The running planner and its navigation history.

A session holds the one mutable AppState:
- Loaded from storage at startup
- Advanced by dispatching actions
- Written back whenever the saved collection changes
- Mirrored onto the navigation stack
"""

from .history import (
    HistorySynchronizer,
    MemoryNavigation,
    NavigationPort,
    action_for_path,
    entry_from_payload,
    url_segment,
)
from .planner import TeamPlanner

__all__ = [
    "HistorySynchronizer",
    "MemoryNavigation",
    "NavigationPort",
    "action_for_path",
    "entry_from_payload",
    "url_segment",
    "TeamPlanner",
]
