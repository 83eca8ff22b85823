"""Streak shield: a pet spends XP and happiness to save a broken watch streak.

Pure calculation: every precondition is checked against the given snapshots
before anything is changed, and a rejection returns both records untouched.
Preconditions, first failure wins:
  1. the pet exists and is alive
  2. spendable XP covers the price
  3. no shield was used within the cooldown
  4. the streak is in its grace window (shieldable)
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from watchpet.mechanics.leveling import spend_xp, spendable_xp
from watchpet.mechanics.streak import StreakStatus, streak_status
from watchpet.models.config import DEFAULT_CONFIG, PetConfig
from watchpet.models.pet import Pet, WatchStreak
from watchpet.utils import clamp


class ShieldRejection(str, Enum):
    NOT_FOUND = "not_found"
    NOT_ALIVE = "not_alive"
    INSUFFICIENT_RESOURCES = "insufficient_resources"
    COOLDOWN = "cooldown"
    NOT_ELIGIBLE = "not_eligible"


@dataclass
class ShieldResult:
    success: bool
    reason: ShieldRejection | None = None
    pet: Pet | None = None
    streak: WatchStreak | None = None

    @classmethod
    def rejected(cls, reason: ShieldRejection, pet: Pet | None = None,
                 streak: WatchStreak | None = None) -> ShieldResult:
        return cls(success=False, reason=reason, pet=pet, streak=streak)


def check_shield(
    pet: Pet | None,
    streak: WatchStreak | None,
    now: datetime,
    config: PetConfig = DEFAULT_CONFIG,
) -> ShieldRejection | None:
    """Return the first failed precondition, or None if the shield may be used."""
    if pet is None:
        return ShieldRejection.NOT_FOUND
    if not pet.is_alive:
        return ShieldRejection.NOT_ALIVE
    if spendable_xp(pet, config) < config.shield_xp_cost:
        return ShieldRejection.INSUFFICIENT_RESOURCES
    if streak is None:
        return ShieldRejection.NOT_FOUND
    last_used = streak.last_shield_used_date
    if last_used is not None and now - last_used < timedelta(days=config.shield_cooldown_days):
        return ShieldRejection.COOLDOWN
    status = streak_status(streak.last_watch_date, now.date(), config.max_missed_days)
    if status is not StreakStatus.SHIELDABLE:
        return ShieldRejection.NOT_ELIGIBLE
    return None


def activate_shield(
    pet: Pet | None,
    streak: WatchStreak | None,
    now: datetime,
    config: PetConfig = DEFAULT_CONFIG,
) -> ShieldResult:
    reason = check_shield(pet, streak, now, config)
    if reason is not None:
        return ShieldResult.rejected(reason, pet, streak)

    level, experience = spend_xp(pet.level, pet.experience, config.shield_xp_cost, config)
    paid = pet.model_copy(update={
        "level": level,
        "experience": experience,
        "happiness": clamp(pet.happiness - config.shield_happiness_cost),
    })
    rescued = streak.model_copy(update={
        "last_watch_date": (now - timedelta(days=1)).date().isoformat(),
        "last_shield_used_date": now,
        "shield_used_count": streak.shield_used_count + 1,
    })
    return ShieldResult(success=True, pet=paid, streak=rescued)
