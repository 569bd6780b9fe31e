"""
Type Chart Engine - Generation-aware type effectiveness.

For a generation and an attacking type, the engine selects the chart
revision in force (the latest vector tagged at or before the generation)
and multiplies the lookups for every defending type, so dual types
compound: 2x * 2x = 4x, 2x * 0.5x = 1x.

Pure and deterministic: identical inputs always give identical output,
which lets coverage results be memoized.
"""

from __future__ import annotations
from typing import Iterable

from ..dex.models import GenerationValue, ReferenceData, TypeId, TypeInfo, select_for_generation


class TypeChart:
    """
    Type effectiveness lookups over the bundled chart revisions.

    Usage:
        chart = TypeChart.from_reference(load_reference())
        chart.offense_multiplier(3, fire, [grass, steel])  # 4.0
    """

    def __init__(
        self,
        types: tuple[TypeInfo, ...],
        entries: dict[TypeId, tuple[GenerationValue[tuple[float, ...]], ...]],
    ):
        self.types = types
        self._entries = entries
        self._vectors: dict[tuple[int, TypeId], tuple[float, ...]] = {}

    @classmethod
    def from_reference(cls, reference: ReferenceData) -> TypeChart:
        return cls(reference.types, reference.type_chart)

    @property
    def num_types(self) -> int:
        return len(self.types)

    def type_valid_in_generation(self, type_id: TypeId, generation: int) -> bool:
        """Check the type exists in a generation (Dark/Steel from 2, Fairy from 6)."""
        return self.types[type_id].min_generation <= generation

    def valid_types(self, generation: int) -> list[TypeId]:
        """All types that exist in a generation, in chart order."""
        return [
            info.id for info in self.types
            if self.type_valid_in_generation(info.id, generation)
        ]

    def type_name(self, type_id: TypeId) -> str:
        return self.types[type_id].name

    def effectiveness(self, generation: int, attacking: TypeId) -> tuple[float, ...]:
        """
        Get the multiplier vector of an attacking type against every type.

        The vector tagged with the largest generation not exceeding
        `generation` is in force.
        """
        key = (generation, attacking)
        vector = self._vectors.get(key)
        if vector is None:
            vector = select_for_generation(self._entries[attacking], generation)
            self._vectors[key] = vector
        return vector

    def offense_multiplier(
        self,
        generation: int,
        attacking: TypeId,
        defending: Iterable[TypeId],
    ) -> float:
        """Damage multiplier of an attacking type against a set of defending types."""
        vector = self.effectiveness(generation, attacking)
        multiplier = 1.0
        for type_id in defending:
            multiplier *= vector[type_id]
        return multiplier
