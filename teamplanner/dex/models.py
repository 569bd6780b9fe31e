"""
Reference Models - Record types for the bundled, read-only reference tables.

Species attributes, the type chart and some abilities changed over the
nine generations. Anything time-varying is stored as an ordered list of
GenerationValue entries, each valid from its generation forward:

    [GenerationValue(1, ("normal",)), GenerationValue(6, ("fairy",))]

select_for_generation() picks the entry that applies to a generation.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Generic, Sequence, TypeVar

T = TypeVar("T")

# Type ids are indexes into the type list, ability ids are string keys
TypeId = int
AbilityId = str

NUM_GENERATIONS = 9


@dataclass(frozen=True)
class GenerationValue(Generic[T]):
    """A value that applies from `generation` forward."""
    generation: int
    value: T


def select_for_generation(entries: Sequence[GenerationValue[T]], generation: int) -> T:
    """
    Pick the value that applies in a generation.

    Entries are authored oldest first; the last entry whose generation does
    not exceed the requested one wins. A generation older than every entry
    falls back to the earliest entry.
    """
    if not entries:
        raise ValueError("No generation entries to select from")

    selected = entries[0]
    for entry in entries:
        if entry.generation <= generation:
            selected = entry
    return selected.value


@dataclass(frozen=True)
class TypeInfo:
    """An elemental type and the generation it was introduced in."""
    id: TypeId
    name: str
    min_generation: int = 1


@dataclass(frozen=True)
class DefenseModifier:
    """
    Damage multiplier an ability applies to incoming attacks of some types.

    `min_generation` is the first generation the modifier applies in
    (Lightning Rod only grants its immunity from generation 5).
    """
    types: tuple[TypeId, ...]
    multiplier: float
    min_generation: int | None = None


@dataclass(frozen=True)
class Ability:
    """An ability definition."""
    id: AbilityId
    name: str
    defense: DefenseModifier | None = None


@dataclass(frozen=True)
class LegacyAbility:
    """
    Override for one ability slot in older generations.

    Applies while the requested generation is <= `max_generation`.
    `ability` may be None when the slot did not exist yet.
    """
    species_id: int
    form_index: int
    slot: int
    ability: AbilityId | None
    max_generation: int


@dataclass(frozen=True)
class FormRecord:
    """
    One form of a species. Form 0 is the base species.

    `abilities` holds the current three slots [first, second, hidden];
    older slot contents live in the legacy ability table.
    """
    name: str
    types: tuple[GenerationValue[tuple[TypeId, ...]], ...]
    abilities: tuple[AbilityId | None, AbilityId | None, AbilityId | None]


@dataclass(frozen=True)
class SpeciesRecord:
    """A species and its forms."""
    id: int
    name: str
    forms: tuple[FormRecord, ...]


@dataclass(frozen=True)
class Version:
    """
    A version of a game, optionally restricting the selectable species.

    - blacklist: species ids missing from this version
    - formlist: (species_id, form_index) pairs missing from this version
    - limit: only the first `limit` entries of each pokédex are available
    """
    name: str
    blacklist: tuple[int, ...] = ()
    formlist: tuple[tuple[int, int], ...] = ()
    limit: int | None = None


@dataclass(frozen=True)
class Pokedex:
    """An ordered regional pokédex of (species_id, form_index) entries."""
    id: str
    name: str
    entries: tuple[tuple[int, int], ...]


@dataclass(frozen=True)
class Game:
    """A game (or pair of paired versions) the planner can build teams for."""
    id: str
    name: str
    generation: int
    pokedexes: tuple[str, ...]
    has_abilities: bool
    versions: tuple[Version, ...] = ()


@dataclass
class ReferenceData:
    """
    Complete set of reference tables.

    This is the only source of species, type, ability and game data;
    everything else reads it through the resolver and type chart engine.
    """
    types: tuple[TypeInfo, ...]
    type_chart: dict[TypeId, tuple[GenerationValue[tuple[float, ...]], ...]]
    abilities: dict[AbilityId, Ability]
    species: dict[int, SpeciesRecord]
    legacy_abilities: tuple[LegacyAbility, ...] = ()
    pokedexes: dict[str, Pokedex] = field(default_factory=dict)
    games: tuple[Game, ...] = ()
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def num_types(self) -> int:
        return len(self.types)

    def get_game(self, game_id: str) -> Game | None:
        """Get game by ID."""
        for game in self.games:
            if game.id == game_id:
                return game
        return None

    def get_pokedex(self, pokedex_id: str) -> Pokedex | None:
        return self.pokedexes.get(pokedex_id)

    def get_species(self, species_id: int) -> SpeciesRecord | None:
        return self.species.get(species_id)

    def get_ability(self, ability_id: AbilityId | None) -> Ability | None:
        if ability_id is None:
            return None
        return self.abilities.get(ability_id)

    def has_form(self, species_id: int, form_index: int) -> bool:
        """Check that a (species, form) pair exists in the tables."""
        species = self.species.get(species_id)
        if species is None:
            return False
        return 0 <= form_index < len(species.forms)

    def type_id(self, name: str) -> TypeId | None:
        """Look up a type id by (case-insensitive) name."""
        lowered = name.lower()
        for info in self.types:
            if info.name == lowered:
                return info.id
        return None
