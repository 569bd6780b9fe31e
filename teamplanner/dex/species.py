"""
Species - Species, forms and legacy ability data.

This module contains a curated subset of the national dex covering every
generational rule the planner deals with:
- Type changes (Clefairy and friends becoming Fairy in generation 6,
  Magnemite gaining Steel in generation 2, Rotom appliance forms)
- Regional forms (Alolan Raichu, Vulpix and Ninetales)
- Abilities that were added or replaced in later generations
"""

from .models import FormRecord, GenerationValue, LegacyAbility, SpeciesRecord
from .types import t


def _types(*history: tuple[int, str]) -> tuple[GenerationValue, ...]:
    """[(generation, "fire/flying"), ...] to generation-tagged type tuples."""
    return tuple(GenerationValue(gen, t(*names.split("/"))) for gen, names in history)


def _form(name: str, types: str | tuple, first=None, second=None, hidden=None) -> FormRecord:
    history = _types((1, types)) if isinstance(types, str) else _types(*types)
    return FormRecord(name=name, types=history, abilities=(first, second, hidden))


def _species(species_id: int, name: str, *forms: FormRecord) -> SpeciesRecord:
    return SpeciesRecord(id=species_id, name=name, forms=tuple(forms))


_FAIRY_GEN = 6

SPECIES_LIST = [
    _species(1, "Bulbasaur", _form("", "grass/poison", "overgrow", None, "chlorophyll")),
    _species(3, "Venusaur", _form("", "grass/poison", "overgrow", None, "chlorophyll")),
    _species(4, "Charmander", _form("", "fire", "blaze", None, "solar-power")),
    _species(6, "Charizard", _form("", "fire/flying", "blaze", None, "solar-power")),
    _species(7, "Squirtle", _form("", "water", "torrent", None, "rain-dish")),
    _species(9, "Blastoise", _form("", "water", "torrent", None, "rain-dish")),
    _species(25, "Pikachu", _form("", "electric", "static", None, "lightning-rod")),
    _species(
        26, "Raichu",
        _form("", "electric", "static", None, "lightning-rod"),
        _form("Alolan", "electric/psychic", "surge-surfer"),
    ),
    _species(
        35, "Clefairy",
        _form("", ((1, "normal"), (_FAIRY_GEN, "fairy")), "cute-charm", "magic-guard", "friend-guard"),
    ),
    _species(
        37, "Vulpix",
        _form("", "fire", "flash-fire", None, "drought"),
        _form("Alolan", "ice", "snow-cloak", None, "snow-warning"),
    ),
    _species(
        38, "Ninetales",
        _form("", "fire", "flash-fire", None, "drought"),
        _form("Alolan", "ice/fairy", "snow-cloak", None, "snow-warning"),
    ),
    _species(
        39, "Jigglypuff",
        _form("", ((1, "normal"), (_FAIRY_GEN, "normal/fairy")), "cute-charm", "competitive", "friend-guard"),
    ),
    _species(81, "Magnemite", _form("", ((1, "electric"), (2, "electric/steel")), "magnet-pull", "sturdy", "analytic")),
    _species(82, "Magneton", _form("", ((1, "electric"), (2, "electric/steel")), "magnet-pull", "sturdy", "analytic")),
    _species(92, "Gastly", _form("", "ghost/poison", "levitate")),
    _species(94, "Gengar", _form("", "ghost/poison", "cursed-body")),
    _species(
        122, "Mr. Mime",
        _form("", ((1, "psychic"), (_FAIRY_GEN, "psychic/fairy")), "soundproof", "filter", "technician"),
    ),
    _species(130, "Gyarados", _form("", "water/flying", "intimidate", None, "moxie")),
    _species(131, "Lapras", _form("", "water/ice", "water-absorb", "shell-armor", "hydration")),
    _species(134, "Vaporeon", _form("", "water", "water-absorb", None, "hydration")),
    _species(135, "Jolteon", _form("", "electric", "volt-absorb", None, "quick-feet")),
    _species(143, "Snorlax", _form("", "normal", "immunity", "thick-fat", "gluttony")),
    _species(149, "Dragonite", _form("", "dragon/flying", "inner-focus", None, "multiscale")),
    _species(150, "Mewtwo", _form("", "psychic", "pressure", None, "unnerve")),
    _species(169, "Crobat", _form("", "poison/flying", "inner-focus", None, "infiltrator")),
    _species(
        176, "Togetic",
        _form("", ((2, "normal/flying"), (_FAIRY_GEN, "fairy/flying")), "hustle", "serene-grace", "super-luck"),
    ),
    _species(181, "Ampharos", _form("", "electric", "static", None, "plus")),
    _species(195, "Quagsire", _form("", "water/ground", "damp", "water-absorb", "unaware")),
    _species(197, "Umbreon", _form("", "dark", "synchronize", None, "inner-focus")),
    _species(208, "Steelix", _form("", "steel/ground", "rock-head", "sturdy", "sheer-force")),
    _species(212, "Scizor", _form("", "bug/steel", "swarm", "technician", "light-metal")),
    _species(248, "Tyranitar", _form("", "rock/dark", "sand-stream", None, "unnerve")),
    _species(254, "Sceptile", _form("", "grass", "overgrow", None, "unburden")),
    _species(257, "Blaziken", _form("", "fire/fighting", "blaze", None, "speed-boost")),
    _species(260, "Swampert", _form("", "water/ground", "torrent", None, "damp")),
    _species(
        282, "Gardevoir",
        _form("", ((3, "psychic"), (_FAIRY_GEN, "psychic/fairy")), "synchronize", "trace", "telepathy"),
    ),
    _species(
        303, "Mawile",
        _form("", ((3, "steel"), (_FAIRY_GEN, "steel/fairy")), "hyper-cutter", "intimidate", "sheer-force"),
    ),
    _species(324, "Torkoal", _form("", "fire", "white-smoke", "drought", "shell-armor")),
    _species(330, "Flygon", _form("", "ground/dragon", "levitate")),
    _species(350, "Milotic", _form("", "water", "marvel-scale", "competitive", "cute-charm")),
    _species(373, "Salamence", _form("", "dragon/flying", "intimidate", None, "moxie")),
    _species(376, "Metagross", _form("", "steel/psychic", "clear-body", None, "light-metal")),
    _species(407, "Roserade", _form("", "grass/poison", "natural-cure", "poison-point", "technician")),
    _species(
        423, "Gastrodon",
        _form("West Sea", "water/ground", "sticky-hold", "storm-drain", "sand-force"),
        _form("East Sea", "water/ground", "sticky-hold", "storm-drain", "sand-force"),
    ),
    _species(445, "Garchomp", _form("", "dragon/ground", "sand-veil", None, "rough-skin")),
    _species(448, "Lucario", _form("", "fighting/steel", "steadfast", "inner-focus", "justified")),
    _species(461, "Weavile", _form("", "dark/ice", "pressure", None, "pickpocket")),
    _species(462, "Magnezone", _form("", "electric/steel", "magnet-pull", "sturdy", "analytic")),
    _species(
        468, "Togekiss",
        _form("", ((4, "normal/flying"), (_FAIRY_GEN, "fairy/flying")), "hustle", "serene-grace", "super-luck"),
    ),
    # Appliance forms kept Rotom's Electric/Ghost typing until generation 5
    _species(
        479, "Rotom",
        _form("", "electric/ghost", "levitate"),
        _form("Heat", ((4, "electric/ghost"), (5, "electric/fire")), "levitate"),
        _form("Wash", ((4, "electric/ghost"), (5, "electric/water")), "levitate"),
        _form("Frost", ((4, "electric/ghost"), (5, "electric/ice")), "levitate"),
        _form("Fan", ((4, "electric/ghost"), (5, "electric/flying")), "levitate"),
        _form("Mow", ((4, "electric/ghost"), (5, "electric/grass")), "levitate"),
    ),
    _species(530, "Excadrill", _form("", "ground/steel", "sand-rush", "sand-force", "mold-breaker")),
    _species(598, "Ferrothorn", _form("", "grass/steel", "iron-barbs", None, "anticipation")),
    _species(609, "Chandelure", _form("", "ghost/fire", "flash-fire", "flame-body", "infiltrator")),
    _species(635, "Hydreigon", _form("", "dark/dragon", "levitate")),
    _species(658, "Greninja", _form("", "water/dark", "torrent", None, "protean")),
    _species(681, "Aegislash", _form("", "steel/ghost", "stance-change")),
    _species(700, "Sylveon", _form("", "fairy", "cute-charm", None, "pixilate")),
    _species(778, "Mimikyu", _form("", "ghost/fairy", "disguise")),
    _species(784, "Kommo-o", _form("", "dragon/fighting", "bulletproof", "soundproof", "overcoat")),
    _species(785, "Tapu Koko", _form("", "electric/fairy", "electric-surge", None, "telepathy")),
    _species(812, "Rillaboom", _form("", "grass", "overgrow", None, "grassy-surge")),
    _species(823, "Corviknight", _form("", "flying/steel", "pressure", "unnerve", "mirror-armor")),
    _species(887, "Dragapult", _form("", "dragon/ghost", "clear-body", "infiltrator", "cursed-body")),
    _species(908, "Meowscarada", _form("", "grass/dark", "overgrow", None, "protean")),
    _species(934, "Garganacl", _form("", "rock", "purifying-salt", "sturdy", "clear-body")),
    _species(983, "Kingambit", _form("", "dark/steel", "defiant", "supreme-overlord", "pressure")),
    _species(1000, "Gholdengo", _form("", "steel/ghost", "good-as-gold")),
]

SPECIES: dict[int, SpeciesRecord] = {s.id: s for s in SPECIES_LIST}

# Slots whose contents differed in older generations
LEGACY_ABILITIES: tuple[LegacyAbility, ...] = (
    # Gengar lost Levitate in generation 7
    LegacyAbility(94, 0, 0, "levitate", max_generation=6),
    # Second abilities introduced after the species
    LegacyAbility(35, 0, 1, None, max_generation=3),
    LegacyAbility(122, 0, 1, None, max_generation=3),
    LegacyAbility(212, 0, 1, None, max_generation=3),
    LegacyAbility(39, 0, 1, None, max_generation=5),
    LegacyAbility(350, 0, 1, None, max_generation=5),
    LegacyAbility(324, 0, 1, None, max_generation=6),
)
