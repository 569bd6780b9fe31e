"""
Persistence Adapter - Reads, writes, exports and validates team collections.

The durable store holds the whole collection under one key and is always
overwritten in full. Exports wrap the collection in a SaveEnvelope tagged
with the schema version; imports must carry the same tag and pass every
structural check before anything is replaced (all or nothing).

Error Types:
- EnvelopeFormatError: not JSON, or not shaped like an envelope
- SchemaVersionMismatch: envelope written by another schema version
- TeamValidationError: one team is defective (names the team and defect)
"""

from __future__ import annotations
from datetime import datetime
from typing import Any, Iterable
import json
import logging

from pydantic import TypeAdapter, ValidationError

from .. import SCHEMA_VERSION
from ..dex.models import ReferenceData
from ..engine_core.resolver import NUM_ABILITY_SLOTS, DataResolver
from ..engine_core.state import PARTY_SIZE, Team
from .schemas import EnvelopeMeta, SaveEnvelope, TeamRecord
from .storage import StoragePort

logger = logging.getLogger(__name__)

STORAGE_KEY = "teams"
EXPORT_FILENAME = "pokemon-team-planner.json"

_TEAM_LIST = TypeAdapter(list[TeamRecord])


class ImportValidationError(ValueError):
    """Base class for rejected imports."""


class EnvelopeFormatError(ImportValidationError):
    """The import is not a readable save envelope."""


class SchemaVersionMismatch(ImportValidationError):
    """The envelope was written by a different schema version."""

    def __init__(self, found: str, expected: str = SCHEMA_VERSION):
        self.found = found
        self.expected = expected
        super().__init__(f"Save file version {found!r} does not match {expected!r}")


class TeamValidationError(ImportValidationError):
    """A team in the envelope is defective."""

    def __init__(self, team: str, defect: str):
        self.team = team
        self.defect = defect
        super().__init__(f"Team {team}: {defect}")


def _team_label(index: int, item: Any) -> str:
    if isinstance(item, dict) and isinstance(item.get("name"), str):
        return f'#{index + 1} "{item["name"]}"'
    return f"#{index + 1}"


def _describe(error: ValidationError) -> str:
    """First pydantic error as a short defect."""
    detail = error.errors()[0]
    location = ".".join(str(part) for part in detail["loc"])
    if detail["type"] == "missing":
        return f"missing required field '{location}'"
    return f"{location}: {detail['msg']}"


class PersistenceAdapter:
    """
    Moves team collections between AppState and durable storage or files.

    Usage:
        adapter = PersistenceAdapter(FileStorage(), load_reference())
        teams = adapter.load()           # None on first run
        adapter.save(teams)
        text = adapter.export_json(teams, saved_at=now)
        teams = adapter.validate_import(text)
    """

    def __init__(self, storage: StoragePort, reference: ReferenceData):
        self.storage = storage
        self.reference = reference
        self.resolver = DataResolver(reference)

    def load(self) -> tuple[Team, ...] | None:
        """
        Read the saved collection.

        Returns None when nothing was ever saved. An unreadable or corrupt
        record is logged and also reported as None.
        """
        try:
            raw = self.storage.read(STORAGE_KEY)
        except (OSError, ValueError) as e:
            logger.warning("Could not read saved teams: %s", e)
            return None
        if raw is None:
            return None

        try:
            records = _TEAM_LIST.validate_python(json.loads(raw))
        except ValueError as e:
            logger.warning("Ignoring corrupt saved teams: %s", e)
            return None
        return tuple(record.to_team() for record in records)

    def save(self, teams: Iterable[Team]) -> None:
        """Overwrite the stored collection."""
        records = [TeamRecord.from_team(team).model_dump(mode="json") for team in teams]
        self.storage.write(STORAGE_KEY, json.dumps(records, indent=2))
        logger.info("Saved %d teams", len(records))

    def export_envelope(self, teams: Iterable[Team], saved_at: datetime) -> SaveEnvelope:
        return SaveEnvelope(
            meta=EnvelopeMeta(version=SCHEMA_VERSION, saved=saved_at),
            teams=[TeamRecord.from_team(team) for team in teams],
        )

    def export_json(self, teams: Iterable[Team], saved_at: datetime) -> str:
        """Serialize the collection as an export file."""
        return self.export_envelope(teams, saved_at).model_dump_json(indent=2)

    def validate_import(self, raw: str | bytes | dict[str, Any]) -> tuple[Team, ...]:
        """
        Parse and check an import file.

        Raises ImportValidationError (or a subclass) on the first defect;
        nothing is returned unless every team passes.
        """
        if isinstance(raw, (str, bytes)):
            try:
                raw = json.loads(raw)
            except ValueError as e:
                raise EnvelopeFormatError(f"Save file is not valid JSON: {e}") from e

        if not isinstance(raw, dict):
            raise EnvelopeFormatError("Save file is not an object")
        if not isinstance(raw.get("meta"), dict):
            raise EnvelopeFormatError("Save file has no 'meta' header")
        if not isinstance(raw.get("teams"), list):
            raise EnvelopeFormatError("Save file has no 'teams' list")

        if "version" not in raw["meta"]:
            raise EnvelopeFormatError("Save file header has no version")
        version = raw["meta"]["version"]
        if version != SCHEMA_VERSION:
            raise SchemaVersionMismatch(str(version))
        try:
            EnvelopeMeta.model_validate(raw["meta"])
        except ValidationError as e:
            raise EnvelopeFormatError(f"Save file header is invalid: {_describe(e)}") from e

        teams = []
        seen_ids = set()
        for index, item in enumerate(raw["teams"]):
            label = _team_label(index, item)
            if not isinstance(item, dict):
                raise TeamValidationError(label, "not an object")
            try:
                record = TeamRecord.model_validate(item)
            except ValidationError as e:
                raise TeamValidationError(label, _describe(e)) from e

            if record.id in seen_ids:
                raise TeamValidationError(label, f"duplicate team id {record.id}")
            seen_ids.add(record.id)

            self._check_team(label, record)
            teams.append(record.to_team())

        logger.info("Validated %d imported teams", len(teams))
        return tuple(teams)

    def _check_team(self, label: str, record: TeamRecord) -> None:
        """Check references to the reference tables and roster invariants."""
        game = self.reference.get_game(record.game)
        if game is None:
            raise TeamValidationError(label, f"unknown game '{record.game}'")

        if len(record.slots) > PARTY_SIZE:
            raise TeamValidationError(
                label, f"{len(record.slots)} slots, at most {PARTY_SIZE} allowed"
            )

        seen = set()
        for position, slot in enumerate(record.slots):
            if not self.reference.has_form(slot.species, slot.form):
                raise TeamValidationError(
                    label,
                    f"slot {position + 1} references unknown species {slot.species} form {slot.form}",
                )
            key = (slot.species, slot.form)
            if key in seen:
                raise TeamValidationError(
                    label, f"species {slot.species} form {slot.form} appears twice"
                )
            seen.add(key)

        if len(record.abilities) != len(record.slots):
            raise TeamValidationError(
                label,
                f"{len(record.abilities)} ability choices for {len(record.slots)} slots",
            )

        for position, (slot, choice) in enumerate(zip(record.slots, record.abilities)):
            if not 0 <= choice < NUM_ABILITY_SLOTS:
                raise TeamValidationError(
                    label, f"slot {position + 1} ability choice {choice} out of range"
                )
            if not game.has_abilities:
                continue
            slots = self.resolver.resolve_ability_slots(slot.species, slot.form, game.generation)
            if slots[choice] is None:
                raise TeamValidationError(
                    label, f"slot {position + 1} ability choice {choice} is an empty slot"
                )
