"""
Team Planner CLI - Command-line front end for the planner.

Usage:
    teamplanner games                              List games
    teamplanner dex <game> [--type T] [--name N]   List selectable species
    teamplanner teams                              List saved teams
    teamplanner create <game> <name> <species>...  Build and save a team
    teamplanner show <team_id>                     Show a saved team
    teamplanner coverage <team_id> [--compare ID]  Type coverage of a team
    teamplanner delete <team_id>                   Delete a saved team
    teamplanner export [-o FILE]                   Write the export file
    teamplanner import <file>                      Replace teams from a file

Species are given as ids, with an optional form index: 6, 26:1.
"""

import argparse
import logging
import os
import sys

from .engine_core.action import DeleteTeam, RenameTeam, SaveCurrentTeam, SelectGame, SelectTeam, ToggleSpecies
from .engine_core.coverage import Highlight
from .engine_core.filters import SpeciesFilter, visible_species
from .engine_core.resolver import DataResolver, ReferenceLookupError
from .persistence.adapter import ImportValidationError
from .persistence.storage import FileStorage
from .session.planner import TeamPlanner

TEAMPLANNER_LOG_LEVEL = os.getenv("TEAMPLANNER_LOG_LEVEL", "WARNING")

HIGHLIGHT_MARKS = {
    Highlight.NEUTRAL: " ",
    Highlight.WEAKNESS: "!",
    Highlight.FAVORABLE: "+",
}


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Team Planner - Generation-aware Pokémon team builder",
        prog="teamplanner",
    )
    parser.add_argument("--data-dir", help="Directory for saved teams")
    parser.add_argument("--log-level", default=TEAMPLANNER_LOG_LEVEL, help="Logging level")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("games", help="List games")

    dex_parser = subparsers.add_parser("dex", help="List selectable species for a game")
    dex_parser.add_argument("game", help="Game id")
    dex_parser.add_argument("--version", type=int, help="Version index within the game")
    dex_parser.add_argument("--type", help="Only show species of this type")
    dex_parser.add_argument("--name", default="", help="Name fragment")

    subparsers.add_parser("teams", help="List saved teams")

    create_parser = subparsers.add_parser("create", help="Build and save a team")
    create_parser.add_argument("game", help="Game id")
    create_parser.add_argument("name", help="Team name")
    create_parser.add_argument("species", nargs="+", help="Species id, optionally id:form")

    show_parser = subparsers.add_parser("show", help="Show a saved team")
    show_parser.add_argument("team_id", type=int)

    coverage_parser = subparsers.add_parser("coverage", help="Type coverage of a saved team")
    coverage_parser.add_argument("team_id", type=int)
    coverage_parser.add_argument("--compare", type=int, help="Saved team to compare against")

    delete_parser = subparsers.add_parser("delete", help="Delete a saved team")
    delete_parser.add_argument("team_id", type=int)

    export_parser = subparsers.add_parser("export", help="Write all teams to an export file")
    export_parser.add_argument("--output", "-o", help="Output file")

    import_parser = subparsers.add_parser("import", help="Replace all teams from an export file")
    import_parser.add_argument("file", help="Path to export file")

    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper())

    commands = {
        "games": cmd_games,
        "dex": cmd_dex,
        "teams": cmd_teams,
        "create": cmd_create,
        "show": cmd_show,
        "coverage": cmd_coverage,
        "delete": cmd_delete,
        "export": cmd_export,
        "import": cmd_import,
    }
    command = commands.get(args.command)
    if command is None:
        parser.print_help()
        sys.exit(1)

    planner = TeamPlanner(storage=FileStorage(args.data_dir))
    planner.start("")
    command(planner, args)


def fail(message):
    print(f"Error: {message}")
    sys.exit(1)


def print_changes(result):
    for change in result.state_changes:
        print(change)


def parse_species(token):
    """Parse "6" or "26:1" into (species_id, form_index)."""
    species, _, form = token.partition(":")
    try:
        return int(species), int(form or 0)
    except ValueError:
        fail(f"Not a species id: {token}")


def game_label(planner, game_id):
    game = planner.reference.get_game(game_id)
    return game.name if game else game_id


def type_names(planner, type_ids):
    return "/".join(planner.reference.types[t].name for t in type_ids)


def cmd_games(planner, args):
    """List games."""
    for game in planner.reference.games:
        print(f"{game.id:<20} gen {game.generation}  {game.name}")
        for index, version in enumerate(game.versions):
            print(f"{'':<20}   [{index}] {version.name}")


def cmd_dex(planner, args):
    """List selectable species for a game."""
    game = planner.reference.get_game(args.game)
    if game is None:
        fail(f"Unknown game: {args.game}")

    species_filter = SpeciesFilter.for_reference(planner.reference)
    if args.type:
        type_id = planner.reference.type_id(args.type)
        if type_id is None:
            fail(f"Unknown type: {args.type}")
        species_filter = species_filter.only_type(type_id)
    species_filter = species_filter.with_name(args.name).with_version(args.version)

    for group in visible_species(planner.reference, game, species_filter):
        if not group.entries:
            continue
        print(f"== {group.pokedex.name} ==")
        for entry in group.entries:
            form = entry.form
            ref = f"{form.species_id}:{form.form_index}" if form.form_index else str(form.species_id)
            print(f"  {ref:<7} {form.display_name:<28} {type_names(planner, form.types)}")


def cmd_teams(planner, args):
    """List saved teams."""
    teams = planner.state.saved_teams or ()
    if not teams:
        print("No saved teams")
        return
    for team in teams:
        print(f"{team.id:>3}  {team.name:<24} {game_label(planner, team.game_id):<28} "
              f"{len(team.slots)} members")


def cmd_create(planner, args):
    """Build and save a team."""
    result = planner.dispatch(SelectGame(args.game))
    if not result.success:
        fail(result.error)
    planner.dispatch(RenameTeam(args.name))

    for token in args.species:
        species_id, form_index = parse_species(token)
        try:
            result = planner.dispatch(ToggleSpecies(species_id, form_index))
        except ReferenceLookupError as e:
            fail(str(e))
        if not result.success:
            fail(result.error)

    planner.dispatch(SaveCurrentTeam())
    team = planner.state.current_team
    print(f"Saved team {team.id}: {team.name}")


def _open_team(planner, team_id):
    result = planner.dispatch(SelectTeam(team_id))
    if not result.success:
        fail(result.error)
    return planner.state.current_team


def cmd_show(planner, args):
    """Show a saved team."""
    team = _open_team(planner, args.team_id)
    game = planner.reference.get_game(team.game_id)
    resolver = DataResolver(planner.reference)

    print(f"{team.name} ({game.name})")
    for slot, choice in zip(team.slots, team.ability_choice):
        form = resolver.resolve_form(slot.species_id, slot.form_index, game.generation)
        line = f"  {form.display_name:<28} {type_names(planner, form.types):<18}"
        if game.has_abilities:
            ability = resolver.resolve_ability(
                slot.species_id, slot.form_index, game.generation, choice
            )
            if ability is not None:
                line += f" {ability.name}"
        print(line.rstrip())


def cmd_coverage(planner, args):
    """Type coverage of a saved team."""
    compare = None
    if args.compare is not None:
        compare = planner.state.get_saved_team(args.compare)
        if compare is None:
            fail(f"Unknown team: {args.compare}")

    _open_team(planner, args.team_id)
    report = planner.coverage(args.compare)

    print(f"{'type':<10} {'offense':>8}   {'defense':>8}")
    for row in report.rows:
        mine = row.coverage
        line = (
            f"{row.type_name:<10} "
            f"{mine.offense_differential:>+8}{HIGHLIGHT_MARKS[row.offense_highlight]}  "
            f"{mine.defense_differential:>+8}{HIGHLIGHT_MARKS[row.defense_highlight]}"
        )
        if row.compare is not None:
            line += (
                f"   vs {row.compare.offense_differential:>+3} "
                f"{row.compare.defense_differential:>+3}"
            )
        print(line)


def cmd_delete(planner, args):
    """Delete a saved team."""
    result = planner.dispatch(DeleteTeam(args.team_id))
    if not result.success:
        fail(result.error)
    print_changes(result)


def cmd_export(planner, args):
    """Write all teams to an export file."""
    path = planner.export_file(args.output)
    print(f"Exported {len(planner.state.saved_teams)} teams to {path}")


def cmd_import(planner, args):
    """Replace all teams from an export file."""
    try:
        result = planner.import_file(args.file)
    except FileNotFoundError:
        fail(f"File not found: {args.file}")
    except ImportValidationError as e:
        fail(str(e))
    print_changes(result)


if __name__ == "__main__":
    main()
