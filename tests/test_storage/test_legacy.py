"""Tests for src/watchpet/storage/legacy.py."""
from __future__ import annotations

import pytest

from watchpet.storage.legacy import is_legacy_record, migrate_legacy

LEGACY = {
    "id": "pet-old",
    "name": "Rex",
    "type": "dog",
    "colorKey": "rot",
    "level": 3,
    "lastFed": 1767225600000,
    "lastUpdated": "2026-01-02T00:00:00Z",
    "episodesWatched": 40,
    "isAlive": True,
    "accessories": [],
}


class TestIsLegacyRecord:
    @pytest.mark.parametrize("raw, expected", [
        (LEGACY, True),
        ({"pet-1": {"name": "A"}, "pet-2": {"name": "B"}}, False),
        ({}, False),
        (None, False),
        ("garbage", False),
    ])
    def test_detection(self, raw, expected):
        assert is_legacy_record(raw) is expected


class TestMigrateLegacy:
    def test_converts_keys(self):
        pets, pet_id = migrate_legacy(LEGACY, "u1")
        assert pet_id == "pet-old"
        doc = pets["pet-old"]
        assert doc["species"] == "dog"
        assert doc["color"] == "rot"
        assert doc["last_fed"] == 1767225600000
        assert doc["last_status_update"] == "2026-01-02T00:00:00Z"
        assert doc["episodes_watched"] == 40
        assert doc["is_alive"] is True
        assert doc["user_id"] == "u1"
        assert "type" not in doc

    def test_missing_id_derived_from_user(self):
        raw = {k: v for k, v in LEGACY.items() if k != "id"}
        pets, pet_id = migrate_legacy(raw, "u9")
        assert pet_id == "pet-u9"
        assert pets["pet-u9"]["id"] == "pet-u9"

    def test_current_key_wins(self):
        raw = {"species": "cat", "type": "dog", "hunger": 5}
        pets, pet_id = migrate_legacy(raw, "u1")
        assert pets[pet_id]["species"] == "cat"

    def test_keyed_data_unchanged(self):
        keyed = {"pet-1": {"name": "A"}}
        assert migrate_legacy(keyed, "u1") == (keyed, None)

    def test_empty(self):
        assert migrate_legacy(None, "u1") == ({}, None)

    def test_input_not_modified(self):
        raw = dict(LEGACY)
        migrate_legacy(raw, "u1")
        assert raw == LEGACY
