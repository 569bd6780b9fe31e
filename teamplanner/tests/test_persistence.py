"""
Tests for the persistence adapter.

Tests:
- Durable storage load/save
- Export envelope shape and round trip
- Every import defect is rejected with a named error
"""

import json
import logging
from datetime import timezone

import pytest

from .. import SCHEMA_VERSION
from ..persistence.adapter import (
    STORAGE_KEY,
    EnvelopeFormatError,
    ImportValidationError,
    SchemaVersionMismatch,
    TeamValidationError,
)
from ..persistence.schemas import TeamRecord
from ..persistence.storage import FileStorage, MemoryStorage
from .conftest import START, make_team


def team_dict(**overrides):
    data = {
        "id": 1,
        "game": "x-y",
        "name": "Rain",
        "slots": [{"species": 130, "form": 0}, {"species": 6, "form": 0}],
        "abilities": [0, 2],
        "created": "2024-05-01T12:00:00+00:00",
        "updated": "2024-05-02T12:00:00+00:00",
    }
    data.update(overrides)
    return data


def envelope(*teams, version=SCHEMA_VERSION):
    return {
        "meta": {"version": version, "saved": "2024-05-03T00:00:00+00:00"},
        "teams": list(teams),
    }


class TestStorage:
    """Tests for reading and writing the saved collection."""

    def test_load_first_run(self, adapter):
        """Nothing stored yet loads as None."""
        assert adapter.load() is None

    def test_save_then_load(self, adapter, saved_teams, storage):
        """Saved teams load back equal."""
        adapter.save(saved_teams)
        assert STORAGE_KEY in storage.records
        assert adapter.load() == saved_teams

    def test_save_empty(self, adapter):
        """An empty collection loads as empty, not None."""
        adapter.save(())
        assert adapter.load() == ()

    def test_stored_format(self, adapter, saved_teams, storage):
        """Teams are stored with ISO timestamps and short keys."""
        adapter.save(saved_teams[:1])
        stored = json.loads(storage.records[STORAGE_KEY])
        assert stored[0]["game"] == "x-y"
        assert stored[0]["slots"][0] == {"species": 6, "form": 0}
        assert stored[0]["abilities"] == [0, 0, 0]
        assert stored[0]["created"].startswith("2024-05-01T12:00:00")

    def test_corrupt_record(self, reference, caplog):
        """A corrupt record is logged and treated as nothing saved."""
        from ..persistence.adapter import PersistenceAdapter

        adapter = PersistenceAdapter(MemoryStorage({STORAGE_KEY: "{not json"}), reference)
        with caplog.at_level(logging.WARNING):
            assert adapter.load() is None
        assert "corrupt" in caplog.text

    def test_unreadable_store(self, reference, caplog):
        """A store that cannot be read is treated as nothing saved."""
        from ..persistence.adapter import PersistenceAdapter

        class BrokenStorage:
            def read(self, key):
                raise OSError("disk gone")

            def write(self, key, data):
                raise OSError("disk gone")

        adapter = PersistenceAdapter(BrokenStorage(), reference)
        assert adapter.load() is None

    def test_undecodable_file(self, reference, tmp_path, caplog):
        """A stored file that is not UTF-8 is treated as nothing saved."""
        from ..persistence.adapter import PersistenceAdapter

        (tmp_path / f"{STORAGE_KEY}.json").write_bytes(b"\xff\xfe\x00garbage")
        adapter = PersistenceAdapter(FileStorage(tmp_path), reference)

        with caplog.at_level(logging.WARNING):
            assert adapter.load() is None
        assert "Could not read saved teams" in caplog.text

    def test_file_storage(self, tmp_path):
        """FileStorage keeps one JSON file per key."""
        storage = FileStorage(tmp_path / "data")
        assert storage.read("teams") is None

        storage.write("teams", "[]")
        assert (tmp_path / "data" / "teams.json").read_text() == "[]"
        assert storage.read("teams") == "[]"


class TestExport:
    """Tests for the export envelope."""

    def test_envelope_shape(self, adapter, saved_teams):
        """The export carries the schema version and save time."""
        data = json.loads(adapter.export_json(saved_teams, saved_at=START))
        assert data["meta"]["version"] == SCHEMA_VERSION
        assert data["meta"]["saved"].startswith("2024-05-01T12:00:00")
        assert [t["id"] for t in data["teams"]] == [1, 2]

    def test_round_trip(self, adapter, saved_teams):
        """Importing an export gives back the same teams."""
        text = adapter.export_json(saved_teams, saved_at=START)
        assert adapter.validate_import(text) == saved_teams

    def test_round_trip_empty(self, adapter):
        """An empty collection round-trips."""
        assert adapter.validate_import(adapter.export_json((), saved_at=START)) == ()

    def test_record_round_trip(self, saved_teams):
        """TeamRecord converts to and from Team without loss."""
        for team in saved_teams:
            assert TeamRecord.from_team(team).to_team() == team


class TestImportValidation:
    """Tests for rejected imports."""

    def test_valid_import(self, adapter):
        """A well-formed envelope imports."""
        teams = adapter.validate_import(envelope(team_dict()))
        assert len(teams) == 1
        assert teams[0].name == "Rain"
        assert teams[0].updated_at.tzinfo is not None

    def test_naive_timestamps_are_utc(self, adapter):
        """Timestamps without an offset are read as UTC."""
        teams = adapter.validate_import(envelope(team_dict(created="2024-05-01T12:00:00")))
        assert teams[0].created_at == START
        assert teams[0].created_at.tzinfo == timezone.utc

    def test_version_mismatch(self, adapter):
        """Another schema version is rejected."""
        with pytest.raises(SchemaVersionMismatch) as exc:
            adapter.validate_import(envelope(team_dict(), version="0.9"))
        assert exc.value.found == "0.9"
        assert exc.value.expected == SCHEMA_VERSION

    @pytest.mark.parametrize("raw", [
        "not json",
        "[]",
        json.dumps({"teams": []}),
        json.dumps({"meta": {"version": SCHEMA_VERSION, "saved": "2024-05-01"}}),
        json.dumps({"meta": {"saved": "2024-05-01"}, "teams": []}),
        json.dumps({"meta": {"version": SCHEMA_VERSION, "saved": "whenever"}, "teams": []}),
    ])
    def test_bad_envelope(self, adapter, raw):
        """Files that are not envelopes are rejected."""
        with pytest.raises(EnvelopeFormatError):
            adapter.validate_import(raw)

    @pytest.mark.parametrize("team,defect", [
        ({k: v for k, v in team_dict().items() if k != "game"}, "game"),
        (team_dict(game="pokemon-snap"), "unknown game"),
        (team_dict(created="yesterday"), "created"),
        (team_dict(slots=[{"species": 9999, "form": 0}], abilities=[0]), "unknown species 9999"),
        (team_dict(slots=[{"species": 6, "form": 3}], abilities=[0]), "form 3"),
        (team_dict(abilities=[0]), "1 ability choices for 2 slots"),
        (team_dict(slots=[{"species": s, "form": 0} for s in (1, 3, 4, 6, 7, 9, 25)],
                   abilities=[0] * 7), "at most 6"),
        (team_dict(slots=[{"species": 6, "form": 0}, {"species": 6, "form": 0}]), "appears twice"),
        (team_dict(abilities=[0, 1]), "empty slot"),
        (team_dict(abilities=[0, 4]), "out of range"),
        ("a team", "not an object"),
    ])
    def test_team_defects(self, adapter, team, defect):
        """Each defect is reported against the offending team."""
        with pytest.raises(TeamValidationError) as exc:
            adapter.validate_import(envelope(team))
        assert defect in exc.value.defect
        assert exc.value.team.startswith("#1")

    def test_error_names_team(self, adapter):
        """The message points at the second team by position and name."""
        bad = team_dict(id=2, name="Broken", game="nowhere")
        with pytest.raises(TeamValidationError) as exc:
            adapter.validate_import(envelope(team_dict(), bad))
        assert exc.value.team == '#2 "Broken"'
        assert "Broken" in str(exc.value)

    def test_duplicate_team_ids(self, adapter):
        """Two teams with the same id are rejected."""
        with pytest.raises(TeamValidationError) as exc:
            adapter.validate_import(envelope(team_dict(), team_dict(name="Again")))
        assert "duplicate team id" in exc.value.defect

    def test_games_without_abilities_skip_slot_check(self, adapter):
        """Generation 1 teams only need choices in range."""
        team = team_dict(game="red-blue", abilities=[0, 1])
        teams = adapter.validate_import(envelope(team))
        assert teams[0].ability_choice == (0, 1)

    def test_all_errors_share_base_class(self, adapter):
        """Callers can catch every rejection with one class."""
        with pytest.raises(ImportValidationError):
            adapter.validate_import(envelope(team_dict(), version="2.0"))
