"""
Games - Pokédexes, games and versions.

Each game lists the regional pokédexes its teams draw from. Versions
restrict the selectable species further: exclusives through a species
blacklist or form blacklist, pre-DLC rosters through an index cutoff.
"""

from .models import Game, Pokedex, Version
from .species import SPECIES


def _dex(pokedex_id: str, name: str, *entries: int | tuple[int, int]) -> Pokedex:
    """Entries are species ids, or (species_id, form_index) for alternate forms."""
    return Pokedex(
        id=pokedex_id,
        name=name,
        entries=tuple(e if isinstance(e, tuple) else (e, 0) for e in entries),
    )


ROTOM_APPLIANCES = tuple((479, form) for form in range(1, 6))

POKEDEX_LIST = [
    _dex(
        "national", "National",
        *[(s.id, form) for s in SPECIES.values() for form in range(len(s.forms))],
    ),
    _dex(
        "kanto", "Kanto",
        1, 3, 4, 6, 7, 9, 25, 26, 35, 37, 38, 39, 81, 82, 92, 94,
        122, 130, 131, 134, 135, 143, 149, 150,
    ),
    _dex(
        "johto", "Johto",
        25, 26, 92, 94, 35, 39, 176, 169, 181, 81, 82, 122, 130, 195,
        197, 212, 208, 37, 38, 131, 143, 248, 149,
    ),
    _dex(
        "hoenn", "Hoenn",
        254, 257, 260, 25, 26, 282, 303, 81, 82, 324, 330, 39,
        37, 38, 350, 130, 169, 373, 376,
    ),
    _dex(
        "sinnoh", "Sinnoh",
        407, 25, 26, 35, 39, 92, 94, 122, 130, 169, 176, 468, 195,
        423, (423, 1), 208, 212, 143, 445, 448, 461, 81, 82, 462,
        479, *ROTOM_APPLIANCES,
    ),
    _dex(
        "unova", "Unova",
        530, 598, 609, 635,
    ),
    _dex(
        "kalos", "Kalos",
        658, 1, 3, 4, 6, 7, 9, 25, 26, 35, 39, 700, 681, 92, 94, 122,
        130, 131, 134, 135, 143, 149, 169, 176, 468, 181, 195, 197,
        208, 212, 248, 282, 303, 330, 350, 373, 376, 407, 445, 448,
        461, 81, 82, 462, 479, *ROTOM_APPLIANCES,
    ),
    _dex(
        "alola", "Alola",
        785, (26, 1), 25, (37, 1), (38, 1), 35, 39, 81, 82, 462, 92, 94,
        130, 131, 143, 149, 169, 176, 468, 197, 212, 248, 282, 303, 350,
        373, 376, 445, 448, 479, 778, 784,
    ),
    _dex(
        "galar", "Galar",
        812, 823, 25, 26, 35, 37, 38, 122, 130, 131, 143, 169, 208, 212,
        248, 350, 423, (423, 1), 448, 468, 479, *ROTOM_APPLIANCES, 530,
        598, 609, 635, 681, 700, 778, 784, 887,
        # Expansion pass
        149, 373, 376, 445, 3, 6, 9,
    ),
    _dex(
        "paldea", "Paldea",
        908, 934, 983, 1000, 25, 26, 130, 181, 197, 212, 350, 373, 445,
        448, 461, 462, 479, *ROTOM_APPLIANCES, 609, 635, 658, 700, 778,
        784, 823, 887,
    ),
]

POKEDEXES: dict[str, Pokedex] = {p.id: p for p in POKEDEX_LIST}

GAMES: tuple[Game, ...] = (
    Game(
        id="national", name="National Dex", generation=9,
        pokedexes=("national",), has_abilities=True,
    ),
    Game(
        id="red-blue", name="Red, Blue & Yellow", generation=1,
        pokedexes=("kanto",), has_abilities=False,
        versions=(
            Version("Red", blacklist=(37, 38)),
            Version("Blue"),
            Version("Yellow"),
        ),
    ),
    Game(
        id="gold-silver", name="Gold, Silver & Crystal", generation=2,
        pokedexes=("johto",), has_abilities=False,
        versions=(Version("Gold"), Version("Silver"), Version("Crystal")),
    ),
    Game(
        id="ruby-sapphire", name="Ruby, Sapphire & Emerald", generation=3,
        pokedexes=("hoenn",), has_abilities=True,
        versions=(
            Version("Ruby"),
            Version("Sapphire", blacklist=(303,)),
            Version("Emerald"),
        ),
    ),
    Game(
        id="firered-leafgreen", name="FireRed & LeafGreen", generation=3,
        pokedexes=("kanto",), has_abilities=True,
        versions=(Version("FireRed", blacklist=(37, 38)), Version("LeafGreen")),
    ),
    Game(
        id="diamond-pearl", name="Diamond, Pearl & Platinum", generation=4,
        pokedexes=("sinnoh",), has_abilities=True,
        versions=(
            Version("Diamond", formlist=ROTOM_APPLIANCES),
            Version("Pearl", formlist=ROTOM_APPLIANCES),
            Version("Platinum"),
        ),
    ),
    Game(
        id="black-white", name="Black & White", generation=5,
        pokedexes=("unova",), has_abilities=True,
    ),
    Game(
        id="x-y", name="X & Y", generation=6,
        pokedexes=("kalos",), has_abilities=True,
    ),
    Game(
        id="sun-moon", name="Sun & Moon", generation=7,
        pokedexes=("alola",), has_abilities=True,
        versions=(
            Version("Sun", formlist=((37, 1), (38, 1))),
            Version("Moon"),
        ),
    ),
    Game(
        id="lets-go", name="Let's Go, Pikachu! & Let's Go, Eevee!", generation=7,
        pokedexes=("kanto",), has_abilities=False,
        versions=(Version("Let's Go, Pikachu!"), Version("Let's Go, Eevee!")),
    ),
    Game(
        id="sword-shield", name="Sword & Shield", generation=8,
        pokedexes=("galar",), has_abilities=True,
        versions=(
            Version("Sword", blacklist=(248,)),
            Version("Shield", blacklist=(635,)),
            Version("Base Game", limit=len(POKEDEXES["galar"].entries) - 7),
        ),
    ),
    Game(
        id="scarlet-violet", name="Scarlet & Violet", generation=9,
        pokedexes=("paldea",), has_abilities=True,
    ),
)
