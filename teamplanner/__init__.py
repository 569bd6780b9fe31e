"""
Team Planner - Generation-aware Pokémon team building engine.

Assemble rosters of up to six Pokémon from a specific game, inspect their
offensive and defensive type coverage, keep multiple named teams across
sessions and move the whole collection between machines as a file.

The engine provides:
- Generation-aware species, type and ability resolution
- A type chart engine covering every historical chart revision
- Party coverage analysis and two-team comparison
- A pure team state machine driven by tagged actions
- Durable storage, import/export and navigation history
"""

__version__ = "0.1.0"

# Tag written to (and required from) every export envelope
SCHEMA_VERSION = "1.0"
