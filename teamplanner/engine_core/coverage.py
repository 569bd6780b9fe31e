"""
Coverage Calculator - Per-type offensive and defensive coverage of a team.

For every type valid in the team's generation:
- Offense: members whose own types hit the type for more than 1x
  (advantaged) or less than 1x (disadvantaged)
- Defense: members that resist the type (below 1x after their ability)
  or are weak to it (above 1x)

Comparing two teams highlights the types where the first team's
differential (advantaged minus disadvantaged) beats the second's.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

from ..dex.models import Ability, Game, ReferenceData, TypeId
from .resolver import DataResolver, ReferenceLookupError, SpeciesForm
from .state import Team, TeamSlot
from .type_chart import TypeChart

# Best same-type multiplier starts here, so a member with only resisted
# attacks is never counted as neutral
OFFENSE_FLOOR = 0.5


class Highlight(Enum):
    """How a coverage row is drawn."""
    NEUTRAL = "neutral"
    WEAKNESS = "weakness"
    FAVORABLE = "favorable"


@dataclass(frozen=True)
class TypeCoverage:
    """
    Coverage of one team against one type.

    Member tuples keep roster order.
    """
    type_id: TypeId
    offense_advantage: tuple[TeamSlot, ...] = ()
    offense_disadvantage: tuple[TeamSlot, ...] = ()
    defense_advantage: tuple[TeamSlot, ...] = ()
    defense_weakness: tuple[TeamSlot, ...] = ()

    @property
    def offense_differential(self) -> int:
        return len(self.offense_advantage) - len(self.offense_disadvantage)

    @property
    def defense_differential(self) -> int:
        return len(self.defense_advantage) - len(self.defense_weakness)


@dataclass(frozen=True)
class CoverageRow:
    """One type in a coverage report, with the compared team's coverage if any."""
    type_id: TypeId
    type_name: str
    coverage: TypeCoverage
    compare: TypeCoverage | None
    offense_highlight: Highlight
    defense_highlight: Highlight


@dataclass(frozen=True)
class CoverageReport:
    """Coverage rows for a team, in type chart order."""
    team: Team
    compare_team: Team | None
    generation: int
    rows: tuple[CoverageRow, ...]

    def row(self, type_id: TypeId) -> CoverageRow | None:
        for row in self.rows:
            if row.type_id == type_id:
                return row
        return None


def highlight(differential: int, compare_differential: int | None) -> Highlight:
    """
    Classify a differential.

    Against another team: FAVORABLE only when strictly better.
    Alone: WEAKNESS when negative.
    """
    if compare_differential is None:
        return Highlight.WEAKNESS if differential < 0 else Highlight.NEUTRAL
    if differential > compare_differential:
        return Highlight.FAVORABLE
    return Highlight.NEUTRAL


class CoverageCalculator:
    """
    Derives coverage display data from teams.

    Usage:
        calculator = CoverageCalculator(load_reference())
        report = calculator.analyze(team)
        report = calculator.analyze(team, compare_team=other)
    """

    def __init__(self, reference: ReferenceData):
        self.reference = reference
        self.chart = TypeChart.from_reference(reference)
        self.resolver = DataResolver(reference)

    def offense_multiplier(self, generation: int, form: SpeciesForm, candidate: TypeId) -> float:
        """Best multiplier of a member's own types against a candidate type."""
        best = OFFENSE_FLOOR
        for member_type in form.types:
            best = max(best, self.chart.offense_multiplier(generation, member_type, [candidate]))
        return best

    def defense_multiplier(
        self,
        game: Game,
        form: SpeciesForm,
        ability: Ability | None,
        candidate: TypeId,
    ) -> float:
        """Multiplier of a candidate type attacking a member, after its ability."""
        generation = game.generation
        multiplier = self.chart.offense_multiplier(generation, candidate, form.types)

        if ability is None or ability.defense is None or not game.has_abilities:
            return multiplier
        modifier = ability.defense
        if candidate not in modifier.types:
            return multiplier
        if modifier.min_generation is not None and modifier.min_generation > generation:
            return multiplier
        return multiplier * modifier.multiplier

    def party_coverage(
        self,
        team: Team,
        types: list[TypeId] | None = None,
        game: Game | None = None,
    ) -> dict[TypeId, TypeCoverage]:
        """
        Coverage of a team against each type.

        The team is evaluated under game, its own game by default. Types
        default to every type valid in that game's generation.
        """
        if game is None:
            game = self._game_for(team)
        generation = game.generation
        if types is None:
            types = self.chart.valid_types(generation)

        members = []
        for slot, choice in zip(team.slots, team.ability_choice):
            form = self.resolver.resolve_form(slot.species_id, slot.form_index, generation)
            ability = None
            if game.has_abilities:
                ability = self.resolver.resolve_ability(
                    slot.species_id, slot.form_index, generation, choice
                )
            members.append((slot, form, ability))

        coverage = {}
        for candidate in types:
            offense_advantage, offense_disadvantage = [], []
            defense_advantage, defense_weakness = [], []

            for slot, form, ability in members:
                offense = self.offense_multiplier(generation, form, candidate)
                if offense > 1:
                    offense_advantage.append(slot)
                elif offense < 1:
                    offense_disadvantage.append(slot)

                defense = self.defense_multiplier(game, form, ability, candidate)
                if defense < 1:
                    defense_advantage.append(slot)
                elif defense > 1:
                    defense_weakness.append(slot)

            coverage[candidate] = TypeCoverage(
                type_id=candidate,
                offense_advantage=tuple(offense_advantage),
                offense_disadvantage=tuple(offense_disadvantage),
                defense_advantage=tuple(defense_advantage),
                defense_weakness=tuple(defense_weakness),
            )
        return coverage

    def analyze(self, team: Team, compare_team: Team | None = None) -> CoverageReport:
        """
        Build the coverage report for a team, optionally against another.

        Both teams are evaluated under the first team's game, and rows follow
        the types valid in its generation.
        """
        game = self._game_for(team)
        generation = game.generation
        types = self.chart.valid_types(generation)
        coverage = self.party_coverage(team, types, game)
        compare = None
        if compare_team is not None:
            compare = self.party_coverage(compare_team, types, game)

        rows = []
        for type_id in types:
            mine = coverage[type_id]
            theirs = compare[type_id] if compare is not None else None
            rows.append(CoverageRow(
                type_id=type_id,
                type_name=self.chart.type_name(type_id),
                coverage=mine,
                compare=theirs,
                offense_highlight=highlight(
                    mine.offense_differential,
                    theirs.offense_differential if theirs is not None else None,
                ),
                defense_highlight=highlight(
                    mine.defense_differential,
                    theirs.defense_differential if theirs is not None else None,
                ),
            ))

        return CoverageReport(
            team=team,
            compare_team=compare_team,
            generation=generation,
            rows=tuple(rows),
        )

    def _game_for(self, team: Team) -> Game:
        game = self.reference.get_game(team.game_id)
        if game is None:
            raise ReferenceLookupError(f"Unknown game id: {team.game_id}")
        return game
