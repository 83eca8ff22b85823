"""Tests for src/watchpet/app.py."""
from __future__ import annotations

from watchpet.app import PetApp, load_config


def test_load_config_missing_file(tmp_path):
    assert load_config(tmp_path / "nope.toml") == {}


def test_load_config_reads_tables(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('[pet]\nmax_pets = 3\n\n[storage]\nmax_retries = 1\n')
    config = load_config(path)
    assert config["pet"]["max_pets"] == 3


def test_app_wires_manager(tmp_path):
    app = PetApp(
        config={"pet": {"max_pets": 3}, "storage": {"db_path": str(tmp_path / "a.db")}},
    )
    try:
        assert app.pet_config.max_pets == 3
        pet = app.manager.create_companion("u1", "Pixel", "cat")
        assert app.manager.get_active_companion("u1") == pet.id
        assert (tmp_path / "a.db").exists()
    finally:
        app.close()


def test_db_path_override(tmp_path):
    app = PetApp(config={}, db_path=str(tmp_path / "override.db"))
    try:
        assert app.store.dump() == {}
        assert app.db.db_path == str(tmp_path / "override.db")
    finally:
        app.close()
