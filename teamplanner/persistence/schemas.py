"""
Pydantic Schemas for Persistence - Stored and exported record shapes.

These models define the exact contract of the durable store and the
export file. Timestamps are ISO-8601 strings on disk; naive timestamps
are read as UTC.

Stored team:
    {"id": 1, "game": "x-y", "name": "Rain", "slots": [{"species": 6, "form": 0}],
     "abilities": [0], "created": "...", "updated": "..."}

Export envelope:
    {"meta": {"version": "1.0", "saved": "..."}, "teams": [...]}
"""

from __future__ import annotations
from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator

from ..engine_core.state import DEFAULT_TEAM_NAME, Team, TeamSlot


class SlotRecord(BaseModel):
    """A roster entry as stored."""
    species: int
    form: int = 0


class TeamRecord(BaseModel):
    """A team as stored and exported."""
    id: int
    game: str
    name: str = DEFAULT_TEAM_NAME
    slots: list[SlotRecord] = Field(default_factory=list)
    abilities: list[int] = Field(default_factory=list)
    created: datetime
    updated: datetime

    @field_validator("created", "updated")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @classmethod
    def from_team(cls, team: Team) -> TeamRecord:
        return cls(
            id=team.id,
            game=team.game_id,
            name=team.name,
            slots=[SlotRecord(species=s.species_id, form=s.form_index) for s in team.slots],
            abilities=list(team.ability_choice),
            created=team.created_at,
            updated=team.updated_at,
        )

    def to_team(self) -> Team:
        return Team(
            id=self.id,
            game_id=self.game,
            name=self.name,
            slots=tuple(TeamSlot(s.species, s.form) for s in self.slots),
            ability_choice=tuple(self.abilities),
            created_at=self.created,
            updated_at=self.updated,
        )


class EnvelopeMeta(BaseModel):
    """Export envelope header."""
    version: str
    saved: datetime


class SaveEnvelope(BaseModel):
    """The export/import unit: every saved team plus a version header."""
    meta: EnvelopeMeta
    teams: list[TeamRecord] = Field(default_factory=list)
