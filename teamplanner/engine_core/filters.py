"""
Species Filters - Narrow the species selector for a game.

Filters are transient view state: they never enter AppState and never
touch navigation history.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Iterable

from ..dex.models import Game, Pokedex, ReferenceData, TypeId, Version
from .resolver import DataResolver, SpeciesForm
from .state import TeamSlot


@dataclass(frozen=True)
class SpeciesFilter:
    """
    Selector filter: per-type visibility, a name fragment and a version.

    Usage:
        f = SpeciesFilter.for_reference(reference)
        f = f.only_type(fire).with_name("char")
    """
    types: tuple[bool, ...]
    name: str = ""
    version: int | None = None

    @classmethod
    def for_reference(cls, reference: ReferenceData) -> SpeciesFilter:
        """Filter with every type visible."""
        return cls(types=(True,) * reference.num_types)

    def toggle_type(self, type_id: TypeId) -> SpeciesFilter:
        flags = list(self.types)
        flags[type_id] = not flags[type_id]
        return replace(self, types=tuple(flags))

    def only_type(self, type_id: TypeId) -> SpeciesFilter:
        return replace(self, types=tuple(i == type_id for i in range(len(self.types))))

    def toggle_all(self) -> SpeciesFilter:
        """Show every type if any is hidden, else hide them all."""
        show = not all(self.types)
        return replace(self, types=(show,) * len(self.types))

    def with_name(self, text: str) -> SpeciesFilter:
        return replace(self, name=text)

    def with_version(self, index: int | None) -> SpeciesFilter:
        return replace(self, version=index)

    def shows_type(self, type_id: TypeId) -> bool:
        return self.types[type_id]


@dataclass(frozen=True)
class SpeciesEntry:
    """A selectable species form and whether it is already on the team."""
    form: SpeciesForm
    selected: bool = False

    @property
    def slot(self) -> TeamSlot:
        return TeamSlot(self.form.species_id, self.form.form_index)


@dataclass(frozen=True)
class PokedexGroup:
    """The visible entries of one pokédex."""
    pokedex: Pokedex
    entries: tuple[SpeciesEntry, ...]


def _matches_name(form: SpeciesForm, fragment: str) -> bool:
    if not fragment:
        return True
    fragment = fragment.lower()
    return fragment in form.name.lower() or fragment in form.form_name.lower()


def _version_for(game: Game, index: int | None) -> Version | None:
    if index is None or not 0 <= index < len(game.versions):
        return None
    return game.versions[index]


def visible_species(
    reference: ReferenceData,
    game: Game,
    species_filter: SpeciesFilter,
    selected_slots: Iterable[TeamSlot] = (),
) -> list[PokedexGroup]:
    """
    Get the selectable species of a game after filtering, per pokédex in order.

    An entry is visible when it is under the version's index cutoff, is not
    blacklisted by the version, has a visible type in the game's generation
    and matches the name fragment.
    """
    resolver = DataResolver(reference)
    version = _version_for(game, species_filter.version)
    selected = set(selected_slots)

    groups = []
    for pokedex_id in game.pokedexes:
        pokedex = reference.get_pokedex(pokedex_id)
        if pokedex is None:
            continue

        entries = pokedex.entries
        if version is not None and version.limit is not None:
            entries = entries[:version.limit]

        visible = []
        for species_id, form_index in entries:
            if version is not None:
                if species_id in version.blacklist:
                    continue
                if (species_id, form_index) in version.formlist:
                    continue

            form = resolver.resolve_form(species_id, form_index, game.generation)
            if not any(species_filter.shows_type(t) for t in form.types):
                continue
            if not _matches_name(form, species_filter.name):
                continue

            slot = TeamSlot(species_id, form_index)
            visible.append(SpeciesEntry(form=form, selected=slot in selected))

        groups.append(PokedexGroup(pokedex=pokedex, entries=tuple(visible)))
    return groups
