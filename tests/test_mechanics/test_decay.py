"""Tests for src/watchpet/mechanics/decay.py."""
from __future__ import annotations

from datetime import timedelta

import pytest

from watchpet.mechanics.decay import decay_stats, materialize, repair_record
from watchpet.models.pet import DeathCause


class TestDecayStats:
    def test_ten_hours(self, config):
        result = decay_stats(20, 60, 10, config)
        assert result["hunger"] == 35      # 20 + floor(15)
        assert result["happiness"] == 50   # 60 - 10

    def test_partial_hours_floor(self, config):
        result = decay_stats(20, 60, 1.9, config)
        assert result["hunger"] == 22      # floor(2.85)
        assert result["happiness"] == 59   # floor(1.9)

    def test_clamped(self, config):
        result = decay_stats(95, 3, 48, config)
        assert result["hunger"] == 100
        assert result["happiness"] == 0

    def test_high_hunger_penalty_stacks(self, config):
        # 78 + 3 = 81 > 80 -> decay of 2 plus flat penalty of 3
        result = decay_stats(78, 60, 2, config)
        assert result["hunger"] == 81
        assert result["happiness"] == 55

    def test_no_penalty_at_threshold(self, config):
        result = decay_stats(77, 60, 2, config)
        assert result["hunger"] == 80
        assert result["happiness"] == 58


class TestMaterialize:
    def test_debounce_returns_same_object(self, pet_factory, now, config):
        pet = pet_factory(last_status_update=now - timedelta(seconds=59))
        assert materialize(pet, now, config) is pet

    def test_debounce_twice_identical(self, pet_factory, now, config):
        pet = pet_factory(last_status_update=now - timedelta(hours=3))
        first = materialize(pet, now, config)
        second = materialize(first, now + timedelta(seconds=30), config)
        assert second is first
        assert second.last_status_update == now

    def test_updates_timestamp(self, pet_factory, now, config):
        pet = pet_factory(last_status_update=now - timedelta(hours=2))
        result = materialize(pet, now, config)
        assert result.last_status_update == now
        assert result.hunger == 53
        assert result.happiness == 73

    @pytest.mark.parametrize("minutes", [1, 59, 61, 600, 5000])
    @pytest.mark.parametrize("hunger, happiness", [(0, 100), (50, 50), (79, 30), (99, 1)])
    def test_monotonic_and_bounded(self, pet_factory, now, config, minutes, hunger, happiness):
        pet = pet_factory(
            hunger=hunger, happiness=happiness,
            last_status_update=now - timedelta(minutes=minutes),
        )
        result = materialize(pet, now, config)
        assert result.hunger >= hunger
        assert result.happiness <= happiness
        assert 0 <= result.hunger <= 100
        assert 0 <= result.happiness <= 100

    def test_dead_pet_never_decays(self, pet_factory, now, config):
        pet = pet_factory(
            is_alive=False, death_cause=DeathCause.SADNESS, death_time=now,
            last_status_update=now - timedelta(days=3),
        )
        assert materialize(pet, now, config) is pet

    def test_starvation_scenario(self, pet_factory, now, config):
        pet = pet_factory(
            hunger=90, happiness=90,
            last_fed=now - timedelta(hours=40),
            last_status_update=now - timedelta(hours=40),
        )
        result = materialize(pet, now, config)
        assert result.hunger == 100
        assert result.is_alive is False
        assert result.death_cause == DeathCause.HUNGER
        assert result.death_time == now


class TestRepairRecord:
    def _raw(self, **overrides) -> dict:
        base = {
            "id": "pet-1",
            "hunger": 40,
            "happiness": 60,
            "created_at": "2026-01-01T00:00:00Z",
            "last_fed": "2026-03-10T08:00:00Z",
            "last_status_update": "2026-03-10T09:00:00Z",
        }
        base.update(overrides)
        return base

    def test_valid_record_parsed(self, now, config):
        record = repair_record(self._raw(), now, config)
        assert record["last_fed"].hour == 8
        assert record["hunger"] == 40

    def test_bad_timestamp_becomes_now(self, now, config, caplog):
        record = repair_record(self._raw(last_fed="not a date"), now, config)
        assert record["last_fed"] == now
        assert "invalid last_fed" in caplog.text

    def test_missing_status_update_uses_created_at(self, now, config):
        raw = self._raw()
        del raw["last_status_update"]
        record = repair_record(raw, now, config)
        assert record["last_status_update"] == record["created_at"]

    def test_legacy_keys(self, now, config):
        raw = {"hunger": 10, "lastFed": 1767225600000, "createdAt": "2026-01-01", "lastUpdated": "bad"}
        record = repair_record(raw, now, config)
        assert "lastFed" not in record
        assert record["last_fed"].year == 2026
        assert record["last_status_update"] == record["created_at"]

    @pytest.mark.parametrize("bad", [float("nan"), "abc", None, float("inf")])
    def test_non_numeric_stats_reset(self, now, config, bad):
        record = repair_record(self._raw(hunger=bad, happiness=bad), now, config)
        assert record["hunger"] == config.initial_hunger
        assert record["happiness"] == config.initial_happiness

    def test_input_not_modified(self, now, config):
        raw = self._raw(last_fed="garbage")
        repair_record(raw, now, config)
        assert raw["last_fed"] == "garbage"
