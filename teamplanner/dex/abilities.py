"""
Abilities - Ability definitions and their defensive type modifiers.

Only abilities that change incoming type damage carry a DefenseModifier;
everything else is a plain name entry used for display.
"""

from .models import Ability, AbilityId, DefenseModifier
from .types import t


def _ability(ability_id: str, defense: DefenseModifier | None = None) -> Ability:
    return Ability(
        id=ability_id,
        name=ability_id.replace("-", " ").title(),
        defense=defense,
    )


_DEFENSIVE = [
    _ability("levitate", DefenseModifier(t("ground"), 0.0)),
    _ability("flash-fire", DefenseModifier(t("fire"), 0.0)),
    _ability("water-absorb", DefenseModifier(t("water"), 0.0)),
    _ability("volt-absorb", DefenseModifier(t("electric"), 0.0)),
    _ability("thick-fat", DefenseModifier(t("fire", "ice"), 0.5)),
    _ability("purifying-salt", DefenseModifier(t("ghost"), 0.5)),
    # Redirection abilities only grant immunity from generation 5
    _ability("lightning-rod", DefenseModifier(t("electric"), 0.0, min_generation=5)),
    _ability("storm-drain", DefenseModifier(t("water"), 0.0, min_generation=5)),
]

_PLAIN = [
    "analytic", "anticipation", "blaze", "bulletproof", "chlorophyll",
    "clear-body", "competitive", "cursed-body", "cute-charm", "damp",
    "defiant", "disguise", "drought", "electric-surge", "filter",
    "flame-body", "friend-guard", "gluttony", "good-as-gold", "grassy-surge",
    "hustle", "hydration", "hyper-cutter", "immunity", "infiltrator",
    "inner-focus", "intimidate", "iron-barbs", "justified", "light-metal",
    "magic-guard", "magnet-pull", "marvel-scale", "mirror-armor",
    "mold-breaker", "moxie", "multiscale", "natural-cure", "overcoat",
    "overgrow", "pickpocket", "pixilate", "plus", "poison-point", "pressure",
    "protean", "quick-feet", "rain-dish", "rock-head", "rough-skin",
    "sand-force", "sand-rush", "sand-stream", "sand-veil", "serene-grace",
    "sheer-force", "shell-armor", "snow-cloak", "snow-warning", "solar-power",
    "soundproof", "speed-boost", "stance-change", "static", "steadfast",
    "sticky-hold", "sturdy", "super-luck", "supreme-overlord", "surge-surfer",
    "swarm", "synchronize", "technician", "telepathy", "torrent", "trace",
    "unaware", "unburden", "unnerve", "white-smoke",
]

ABILITIES: dict[AbilityId, Ability] = {
    ability.id: ability
    for ability in _DEFENSIVE + [_ability(name) for name in _PLAIN]
}
