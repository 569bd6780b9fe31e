"""
Engine Core - Deterministic team state management and type math.

The engine is the runtime that:
1. Resolves species data as it was in a generation
2. Looks up type effectiveness per generation
3. Derives per-type team coverage
4. Applies actions to AppState via the reducer
"""

from .state import AppState, HistoryEntry, Team, TeamSlot, View
from .action import Action, ActionResult, ActionType, HistoryMode
from .reducer import Reducer, apply_action
from .resolver import DataResolver, ReferenceLookupError, SpeciesForm
from .type_chart import TypeChart
from .coverage import CoverageCalculator, CoverageReport, Highlight, TypeCoverage
from .filters import SpeciesFilter, visible_species

__all__ = [
    "AppState",
    "HistoryEntry",
    "Team",
    "TeamSlot",
    "View",
    "Action",
    "ActionResult",
    "ActionType",
    "HistoryMode",
    "Reducer",
    "apply_action",
    "DataResolver",
    "ReferenceLookupError",
    "SpeciesForm",
    "TypeChart",
    "CoverageCalculator",
    "CoverageReport",
    "Highlight",
    "TypeCoverage",
    "SpeciesFilter",
    "visible_species",
]
