"""Death and revival rules — pure calculations, no I/O.

A pet dies from the first matching cause, checked in this order:
  1. hunger at or above the starvation threshold  -> "hunger"
  2. happiness at or below the sadness threshold  -> "sadness"
  3. not fed for ``neglect_days``                 -> "neglect"

Death is terminal until an explicit revive, which costs one level.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta

from watchpet.models.config import DEFAULT_CONFIG, PetConfig
from watchpet.models.pet import DeathCause, Pet

logger = logging.getLogger(__name__)


def death_cause(
    hunger: int,
    happiness: int,
    last_fed: datetime,
    now: datetime,
    config: PetConfig = DEFAULT_CONFIG,
) -> DeathCause | None:
    """Return the cause of death for these stats, or None if the pet survives."""
    if hunger >= config.hunger_death_threshold:
        return DeathCause.HUNGER
    if happiness <= config.happiness_death_threshold:
        return DeathCause.SADNESS
    if now - last_fed >= timedelta(days=config.neglect_days):
        return DeathCause.NEGLECT
    return None


def evaluate_death(pet: Pet, now: datetime, config: PetConfig = DEFAULT_CONFIG) -> Pet:
    """Transition a living pet to dead if its current stats are fatal."""
    if not pet.is_alive:
        return pet
    cause = death_cause(pet.hunger, pet.happiness, pet.last_fed, now, config)
    if cause is None:
        return pet
    logger.info("Pet %s died of %s", pet.id, cause.value)
    return pet.model_copy(update={
        "is_alive": False,
        "death_time": now,
        "death_cause": cause,
    })


def revive(pet: Pet, now: datetime, config: PetConfig = DEFAULT_CONFIG) -> Pet:
    """Bring a dead pet back. Reviving a living pet changes nothing.

    Costs one level (never below 1); experience lands exactly on the
    boundary ``(new_level - 1) * xp_per_level`` of the level below.
    """
    if pet.is_alive:
        return pet

    level = pet.level
    experience = pet.experience
    if level > 1:
        level -= 1
        experience = (level - 1) * config.xp_per_level

    logger.info("Pet %s revived (level %d -> %d)", pet.id, pet.level, level)
    return pet.model_copy(update={
        "is_alive": True,
        "hunger": config.revival_hunger,
        "happiness": config.revival_happiness,
        "last_fed": now,
        "last_status_update": now,
        "revive_count": pet.revive_count + 1,
        "level": level,
        "experience": experience,
        "death_time": None,
        "death_cause": None,
    })
