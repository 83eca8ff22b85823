"""Time-based stat decay — pure calculations, no I/O.

Nothing ticks in the background. Pending decay is applied ("materialized")
whenever a pet is read or acted on, based on the time since the last
materialization:

  hunger    += floor(hours * hunger_per_hour)     (100 = starving)
  happiness -= floor(hours * happiness_per_hour)
  happiness -= high_hunger_penalty                 when hunger > high_hunger_threshold

Both stats stay within 0-100. Dead pets never decay.
"""
from __future__ import annotations

import logging
import math
from datetime import datetime

from watchpet.mechanics.death import evaluate_death
from watchpet.models.config import DEFAULT_CONFIG, PetConfig
from watchpet.models.pet import Pet
from watchpet.utils import clamp, is_finite_number, parse_timestamp

logger = logging.getLogger(__name__)

# (current key, *legacy keys)
_TIMESTAMP_KEYS = (
    ("created_at", "createdAt"),
    ("last_fed", "lastFed"),
    ("last_status_update", "lastStatusUpdate", "lastUpdated"),
)
_STAT_KEYS = ("hunger", "happiness")


def decay_stats(
    hunger: float,
    happiness: float,
    hours_elapsed: float,
    config: PetConfig = DEFAULT_CONFIG,
) -> dict[str, int]:
    """Apply ``hours_elapsed`` worth of decay to a pair of stats."""
    new_hunger = clamp(int(hunger + math.floor(hours_elapsed * config.hunger_per_hour)))
    new_happiness = clamp(int(happiness - math.floor(hours_elapsed * config.happiness_per_hour)))

    # Starving hurts twice: regular decay and a flat penalty stack.
    if new_hunger > config.high_hunger_threshold:
        new_happiness = clamp(new_happiness - config.high_hunger_penalty)

    return {"hunger": new_hunger, "happiness": new_happiness}


def _finite_or(value, default: int) -> int:
    if not is_finite_number(value):
        logger.warning("Non-numeric pet stat %r, resetting to %d", value, default)
        return default
    return int(value)


def materialize(pet: Pet, now: datetime, config: PetConfig = DEFAULT_CONFIG) -> Pet:
    """Bring a pet's stats up to ``now`` and check whether it died.

    Returns the same object when nothing changed (dead pet, or last
    materialization less than ``debounce_seconds`` ago).
    """
    if not pet.is_alive:
        return pet

    elapsed = (now - pet.last_status_update).total_seconds()
    if elapsed < config.debounce_seconds:
        return pet

    stats = decay_stats(pet.hunger, pet.happiness, elapsed / 3600, config)
    decayed = pet.model_copy(update={
        "hunger": _finite_or(stats["hunger"], config.initial_hunger),
        "happiness": _finite_or(stats["happiness"], config.initial_happiness),
        "last_status_update": now,
    })
    return evaluate_death(decayed, now, config)


def repair_record(raw: dict, now: datetime, config: PetConfig = DEFAULT_CONFIG) -> dict:
    """Fix unparseable timestamps and non-numeric stats in a stored pet record.

    Bad timestamps become ``now`` (a missing ``last_status_update`` falls back
    to ``created_at`` first); bad stats become the configured initial values.
    Returns a new dict; the input is not modified.
    """
    record = dict(raw)
    pet_id = record.get("id", "?")

    for key, *legacy in _TIMESTAMP_KEYS:
        value = None
        for name in (key, *legacy):
            if name in record:
                candidate = record.pop(name)
                if value is None:
                    value = candidate
        parsed = parse_timestamp(value)
        if parsed is None:
            if key == "last_status_update" and isinstance(record.get("created_at"), datetime):
                parsed = record["created_at"]
                if value is not None:
                    logger.warning("Pet %s: invalid %s %r, using created_at", pet_id, key, value)
            else:
                parsed = now
                logger.warning("Pet %s: invalid %s %r, using current time", pet_id, key, value)
        record[key] = parsed

    defaults = {"hunger": config.initial_hunger, "happiness": config.initial_happiness}
    for key in _STAT_KEYS:
        if key in record:
            record[key] = clamp(_finite_or(record[key], defaults[key]))

    return record
