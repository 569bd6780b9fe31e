"""
Types - The 18 elemental types and the historical type charts.

The current (generation 6+) matchups are authored per attacking type.
Matchups that differed in older generations are listed in
HISTORICAL_MATCHUPS; build_type_chart() folds both into one ordered list
of effectiveness vectors per attacking type, each valid from a
generation forward.

Chart revisions:
- Generation 1: Ghost could not hit Psychic, Bug and Poison were super
  effective against each other, Ice was neutral against Fire
- Generation 2: Dark and Steel introduced
- Generation 6: Fairy introduced, Steel lost its Ghost and Dark resistances
"""

from .models import GenerationValue, TypeId, TypeInfo, select_for_generation

TYPES: tuple[TypeInfo, ...] = (
    TypeInfo(0, "normal"),
    TypeInfo(1, "fighting"),
    TypeInfo(2, "flying"),
    TypeInfo(3, "poison"),
    TypeInfo(4, "ground"),
    TypeInfo(5, "rock"),
    TypeInfo(6, "bug"),
    TypeInfo(7, "ghost"),
    TypeInfo(8, "steel", min_generation=2),
    TypeInfo(9, "fire"),
    TypeInfo(10, "water"),
    TypeInfo(11, "grass"),
    TypeInfo(12, "electric"),
    TypeInfo(13, "psychic"),
    TypeInfo(14, "ice"),
    TypeInfo(15, "dragon"),
    TypeInfo(16, "dark", min_generation=2),
    TypeInfo(17, "fairy", min_generation=6),
)

TYPE_IDS: dict[str, TypeId] = {t.name: t.id for t in TYPES}


def t(*names: str) -> tuple[TypeId, ...]:
    """Type names to a tuple of type ids."""
    return tuple(TYPE_IDS[name] for name in names)


# attacking type -> (super effective against, not very effective against, no effect on)
CURRENT_MATCHUPS: dict[str, tuple[tuple[str, ...], tuple[str, ...], tuple[str, ...]]] = {
    "normal": ((), ("rock", "steel"), ("ghost",)),
    "fighting": (
        ("normal", "rock", "steel", "ice", "dark"),
        ("flying", "poison", "bug", "psychic", "fairy"),
        ("ghost",),
    ),
    "flying": (("fighting", "bug", "grass"), ("rock", "steel", "electric"), ()),
    "poison": (("grass", "fairy"), ("poison", "ground", "rock", "ghost"), ("steel",)),
    "ground": (("poison", "rock", "steel", "fire", "electric"), ("bug", "grass"), ("flying",)),
    "rock": (("flying", "bug", "fire", "ice"), ("fighting", "ground", "steel"), ()),
    "bug": (
        ("grass", "psychic", "dark"),
        ("fighting", "flying", "poison", "ghost", "steel", "fire", "fairy"),
        (),
    ),
    "ghost": (("ghost", "psychic"), ("dark",), ("normal",)),
    "steel": (("rock", "ice", "fairy"), ("steel", "fire", "water", "electric"), ()),
    "fire": (("bug", "steel", "grass", "ice"), ("rock", "fire", "water", "dragon"), ()),
    "water": (("ground", "rock", "fire"), ("water", "grass", "dragon"), ()),
    "grass": (
        ("ground", "rock", "water"),
        ("flying", "poison", "bug", "steel", "fire", "grass", "dragon"),
        (),
    ),
    "electric": (("flying", "water"), ("grass", "electric", "dragon"), ("ground",)),
    "psychic": (("fighting", "poison"), ("steel", "psychic"), ("dark",)),
    "ice": (("flying", "ground", "grass", "dragon"), ("steel", "fire", "water", "ice"), ()),
    "dragon": (("dragon",), ("steel",), ("fairy",)),
    "dark": (("ghost", "psychic"), ("fighting", "dark", "fairy"), ()),
    "fairy": (("fighting", "dragon", "dark"), ("poison", "steel", "fire"), ()),
}

# (attacking, defending) -> multipliers that applied before the current chart
HISTORICAL_MATCHUPS: dict[tuple[str, str], tuple[GenerationValue[float], ...]] = {
    ("ghost", "psychic"): (GenerationValue(1, 0.0), GenerationValue(2, 2.0)),
    ("bug", "poison"): (GenerationValue(1, 2.0), GenerationValue(2, 0.5)),
    ("poison", "bug"): (GenerationValue(1, 2.0), GenerationValue(2, 1.0)),
    ("ice", "fire"): (GenerationValue(1, 1.0), GenerationValue(2, 0.5)),
    ("ghost", "steel"): (GenerationValue(2, 0.5), GenerationValue(6, 1.0)),
    ("dark", "steel"): (GenerationValue(2, 0.5), GenerationValue(6, 1.0)),
}


def _current_vector(attacking: str) -> list[float]:
    super_effective, not_very_effective, no_effect = CURRENT_MATCHUPS[attacking]
    vector = [1.0] * len(TYPES)
    for name in super_effective:
        vector[TYPE_IDS[name]] = 2.0
    for name in not_very_effective:
        vector[TYPE_IDS[name]] = 0.5
    for name in no_effect:
        vector[TYPE_IDS[name]] = 0.0
    return vector


def build_type_chart() -> dict[TypeId, tuple[GenerationValue[tuple[float, ...]], ...]]:
    """
    Build the generation-tagged effectiveness vectors for every attacking type.

    A new vector is emitted at every generation where one of the attacking
    type's historical matchups changes.
    """
    chart: dict[TypeId, tuple[GenerationValue[tuple[float, ...]], ...]] = {}

    for info in TYPES:
        current = _current_vector(info.name)
        overrides = {
            TYPE_IDS[defending]: entries
            for (attacking, defending), entries in HISTORICAL_MATCHUPS.items()
            if attacking == info.name
        }
        breakpoints = sorted({1} | {e.generation for entries in overrides.values() for e in entries})

        entries: list[GenerationValue[tuple[float, ...]]] = []
        for generation in breakpoints:
            vector = current.copy()
            for defending, history in overrides.items():
                vector[defending] = select_for_generation(history, generation)
            if entries and entries[-1].value == tuple(vector):
                continue
            entries.append(GenerationValue(generation, tuple(vector)))

        chart[info.id] = tuple(entries)

    return chart
