"""
Generational Data Resolver - Species attributes as they were in a generation.

Species types and ability slots changed across the nine generations.
The resolver turns a (species, form, generation) triple into the concrete
SpeciesForm that applied in that generation:

1. Select the form (form 0 when unspecified or out of range)
2. Pick the form's type entry in force for the generation
3. Start from the form's current ability slots, then overlay legacy
   records whose generation ceiling covers the requested generation
4. Blank out slots that did not exist yet (no abilities before
   generation 3, no hidden abilities before generation 5)

Species ids must come from the reference tables; an unknown species id is
a programming error and raises ReferenceLookupError.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from ..dex.models import AbilityId, Ability, Game, ReferenceData, TypeId, select_for_generation

logger = logging.getLogger(__name__)

ABILITY_GENERATION = 3
HIDDEN_ABILITY_GENERATION = 5
HIDDEN_ABILITY_SLOT = 2
NUM_ABILITY_SLOTS = 3

IMAGE_EXT = ".png"
POKEMON_ART_LOCATION = "/images/pokemon/art/"
POKEMON_SPRITE_LOCATION = "/images/pokemon/sprite/"


class ReferenceLookupError(LookupError):
    """Raised when an id that must come from the reference tables is unknown."""


@dataclass(frozen=True)
class SpeciesForm:
    """
    A species form resolved for one generation.

    `ability_slots` always has three entries; empty slots are None.
    """
    species_id: int
    form_index: int
    name: str
    form_name: str
    types: tuple[TypeId, ...]
    ability_slots: tuple[AbilityId | None, ...]
    sprite_ref: str
    art_ref: str

    @property
    def display_name(self) -> str:
        if self.form_name:
            return f"{self.name} ({self.form_name})"
        return self.name


def _image_name(species_id: int, form_index: int) -> str:
    if form_index:
        return f"{species_id}-{form_index}{IMAGE_EXT}"
    return f"{species_id}{IMAGE_EXT}"


def pokemon_sprite_url(species_id: int, form_index: int = 0) -> str:
    return POKEMON_SPRITE_LOCATION + _image_name(species_id, form_index)


def pokemon_art_url(species_id: int, form_index: int = 0) -> str:
    return POKEMON_ART_LOCATION + _image_name(species_id, form_index)


class DataResolver:
    """
    Resolves generation-dependent species data from the reference tables.

    Usage:
        resolver = DataResolver(load_reference())
        form = resolver.resolve_form(35, 0, generation=5)   # Normal type
        form = resolver.resolve_form(35, 0, generation=6)   # Fairy type
    """

    def __init__(self, reference: ReferenceData):
        self.reference = reference

    def resolve_form(
        self,
        species_id: int,
        form_index: int | None,
        generation: int,
    ) -> SpeciesForm:
        """Resolve name, types, ability slots and images for a generation."""
        species = self.reference.get_species(species_id)
        if species is None:
            raise ReferenceLookupError(f"Unknown species id: {species_id}")

        index = self._form_index(species_id, form_index, len(species.forms))
        form = species.forms[index]

        return SpeciesForm(
            species_id=species_id,
            form_index=index,
            name=species.name,
            form_name=form.name,
            types=select_for_generation(form.types, generation),
            ability_slots=self.resolve_ability_slots(species_id, index, generation),
            sprite_ref=pokemon_sprite_url(species_id, index),
            art_ref=pokemon_art_url(species_id, index),
        )

    def resolve_types(self, species_id: int, form_index: int | None, generation: int) -> tuple[TypeId, ...]:
        return self.resolve_form(species_id, form_index, generation).types

    def resolve_ability_slots(
        self,
        species_id: int,
        form_index: int | None,
        generation: int,
    ) -> tuple[AbilityId | None, ...]:
        """
        Get the three ability slots [first, second, hidden] for a generation.

        Legacy records replace a single slot while the generation is at or
        below their ceiling. Missing slots stay None.
        """
        species = self.reference.get_species(species_id)
        if species is None:
            raise ReferenceLookupError(f"Unknown species id: {species_id}")

        index = self._form_index(species_id, form_index, len(species.forms))
        slots = list(species.forms[index].abilities)

        for legacy in self.reference.legacy_abilities:
            if legacy.species_id != species_id or legacy.form_index != index:
                continue
            if legacy.max_generation >= generation:
                slots[legacy.slot] = legacy.ability

        if generation < ABILITY_GENERATION:
            return (None,) * NUM_ABILITY_SLOTS
        if generation < HIDDEN_ABILITY_GENERATION:
            slots[HIDDEN_ABILITY_SLOT] = None

        return tuple(slots)

    def resolve_ability(
        self,
        species_id: int,
        form_index: int | None,
        generation: int,
        choice: int,
    ) -> Ability | None:
        """Get the ability in a chosen slot, or None for an empty slot."""
        slots = self.resolve_ability_slots(species_id, form_index, generation)
        if not 0 <= choice < len(slots):
            return None
        return self.reference.get_ability(slots[choice])

    def first_ability_choice(self, species_id: int, form_index: int | None, generation: int) -> int:
        """Index of the first populated ability slot (0 when none are)."""
        slots = self.resolve_ability_slots(species_id, form_index, generation)
        for index, ability in enumerate(slots):
            if ability is not None:
                return index
        return 0

    def get_game(self, game_id: str) -> Game | None:
        return self.reference.get_game(game_id)

    def _form_index(self, species_id: int, form_index: int | None, num_forms: int) -> int:
        if form_index is None:
            return 0
        if not 0 <= form_index < num_forms:
            logger.debug(
                "Form %s out of range for species %s, using base form",
                form_index, species_id,
            )
            return 0
        return form_index
