"""Tests for src/watchpet/mechanics/death.py."""
from __future__ import annotations

from datetime import timedelta

import pytest

from watchpet.mechanics.death import death_cause, evaluate_death, revive
from watchpet.models.pet import DeathCause


class TestDeathCause:
    @pytest.mark.parametrize("hunger, happiness, days_unfed, expected", [
        (100, 50, 0, DeathCause.HUNGER),
        (100, 0, 0, DeathCause.HUNGER),      # both fatal: hunger wins
        (100, 0, 10, DeathCause.HUNGER),
        (99, 0, 0, DeathCause.SADNESS),
        (99, 0, 10, DeathCause.SADNESS),
        (99, 1, 7, DeathCause.NEGLECT),
        (10, 90, 7, DeathCause.NEGLECT),
        (99, 1, 6.9, None),
        (50, 50, 0, None),
    ])
    def test_precedence(self, now, config, hunger, happiness, days_unfed, expected):
        last_fed = now - timedelta(days=days_unfed)
        assert death_cause(hunger, happiness, last_fed, now, config) == expected


class TestEvaluateDeath:
    def test_marks_dead(self, pet_factory, now, config):
        pet = pet_factory(hunger=100)
        dead = evaluate_death(pet, now, config)
        assert dead.is_alive is False
        assert dead.death_cause == DeathCause.HUNGER
        assert dead.death_time == now
        assert pet.is_alive is True

    def test_survivor_unchanged(self, pet_factory, now, config):
        pet = pet_factory()
        assert evaluate_death(pet, now, config) is pet

    def test_already_dead_unchanged(self, pet_factory, now, config):
        pet = pet_factory(is_alive=False, hunger=100, death_cause=DeathCause.SADNESS)
        assert evaluate_death(pet, now, config).death_cause == DeathCause.SADNESS


class TestRevive:
    def _dead(self, pet_factory, now, **overrides):
        return pet_factory(
            is_alive=False, death_time=now - timedelta(days=1),
            death_cause=DeathCause.NEGLECT, hunger=100, happiness=0, **overrides,
        )

    @pytest.mark.parametrize("level, experience, expected_level, expected_xp", [
        (1, 40, 1, 40),
        (2, 150, 1, 0),
        (3, 10, 2, 100),
        (5, 499, 4, 300),
    ])
    def test_level_penalty(self, pet_factory, now, config, level, experience, expected_level, expected_xp):
        pet = self._dead(pet_factory, now, level=level, experience=experience)
        revived = revive(pet, now, config)
        assert revived.level == expected_level
        assert revived.experience == expected_xp

    def test_restores_stats(self, pet_factory, now, config):
        pet = self._dead(pet_factory, now, revive_count=2)
        revived = revive(pet, now, config)
        assert revived.is_alive is True
        assert revived.hunger == config.revival_hunger
        assert revived.happiness == config.revival_happiness
        assert revived.last_fed == now
        assert revived.revive_count == 3
        assert revived.death_time is None
        assert revived.death_cause is None

    def test_revived_pet_does_not_decay_for_time_dead(self, pet_factory, now, config):
        from watchpet.mechanics.decay import materialize

        pet = self._dead(pet_factory, now, last_status_update=now - timedelta(days=5))
        revived = revive(pet, now, config)
        later = materialize(revived, now + timedelta(hours=1), config)
        assert later.is_alive is True
        assert later.hunger == config.revival_hunger + 1

    def test_alive_is_noop(self, pet_factory, now, config):
        pet = pet_factory(level=4)
        assert revive(pet, now, config) is pet
