"""
Dex - Bundled, read-only reference tables.

This package contains:
- The type list and every historical type chart revision
- Ability definitions and their defensive modifiers
- Species and forms with generation-tagged types
- The legacy ability table
- Pokédexes, games and versions

The species table is a sample (a few dozen species chosen to exercise
type changes, forms, legacy abilities and version exclusives), so each
pokédex lists only the bundled species. Extending it means adding records
to species.py and their entries to the pokédexes in games.py.
"""

from functools import lru_cache

from .models import (
    Ability,
    DefenseModifier,
    FormRecord,
    Game,
    GenerationValue,
    LegacyAbility,
    Pokedex,
    ReferenceData,
    SpeciesRecord,
    TypeInfo,
    Version,
    select_for_generation,
)


@lru_cache(maxsize=1)
def load_reference() -> ReferenceData:
    """Build the bundled reference data (once per process)."""
    from .abilities import ABILITIES
    from .games import GAMES, POKEDEXES
    from .species import LEGACY_ABILITIES, SPECIES
    from .types import TYPES, build_type_chart

    return ReferenceData(
        types=TYPES,
        type_chart=build_type_chart(),
        abilities=ABILITIES,
        species=SPECIES,
        legacy_abilities=LEGACY_ABILITIES,
        pokedexes=POKEDEXES,
        games=GAMES,
    )


__all__ = [
    "Ability",
    "DefenseModifier",
    "FormRecord",
    "Game",
    "GenerationValue",
    "LegacyAbility",
    "Pokedex",
    "ReferenceData",
    "SpeciesRecord",
    "TypeInfo",
    "Version",
    "select_for_generation",
    "load_reference",
]
