"""Cosmetic unlocks — pure calculations, no I/O.

Every rule is checked independently and only ever adds: an accessory,
color or pattern is granted once and never taken away.
"""
from __future__ import annotations

import logging
from datetime import datetime

from watchpet.models.config import DEFAULT_CONFIG, PetConfig
from watchpet.models.pet import BASE_COLORS, Accessory, AccessoryId, Pet

logger = logging.getLogger(__name__)


def earned_accessories(pet: Pet, now: datetime, config: PetConfig = DEFAULT_CONFIG) -> list[AccessoryId]:
    earned = []
    if pet.level >= config.crown_level:
        earned.append(AccessoryId.CROWN)
    if now.month == config.winter_month:
        earned.append(AccessoryId.SANTA_HAT)
    if now.month in config.summer_months:
        earned.append(AccessoryId.SUNGLASSES)
    return earned


def earned_colors(pet: Pet, config: PetConfig = DEFAULT_CONFIG) -> list[str]:
    thresholds = (
        ("silver", config.silver_series),
        ("gold", config.gold_series),
        ("rainbow", config.rainbow_series),
    )
    return [color for color, needed in thresholds if pet.total_series_watched >= needed]


def earned_patterns(pet: Pet, config: PetConfig = DEFAULT_CONFIG) -> list[str]:
    if pet.episodes_watched >= config.galaxy_episodes:
        return ["galaxy"]
    return []


def evaluate_unlocks(pet: Pet, now: datetime, config: PetConfig = DEFAULT_CONFIG) -> Pet:
    """Grant everything the pet qualifies for and does not own yet."""
    owned = pet.owned_accessory_ids
    new_accessories = [a for a in earned_accessories(pet, now, config) if a not in owned]
    new_colors = [c for c in earned_colors(pet, config) if c not in pet.unlocked_colors]
    new_patterns = [p for p in earned_patterns(pet, config) if p not in pet.unlocked_patterns]

    granted = len(new_accessories) + len(new_colors) + len(new_patterns)
    if not granted:
        return pet

    logger.info(
        "Pet %s unlocked accessories=%s colors=%s patterns=%s",
        pet.id, [a.value for a in new_accessories], new_colors, new_patterns,
    )
    return pet.model_copy(update={
        "accessories": pet.accessories + [Accessory.from_catalog(a) for a in new_accessories],
        "unlocked_colors": pet.unlocked_colors + new_colors,
        "unlocked_patterns": pet.unlocked_patterns + new_patterns,
        "achievement_points": pet.achievement_points + granted * config.achievement_points_per_unlock,
    })


def toggle_accessory(pet: Pet, accessory_id: AccessoryId) -> Pet | None:
    """Flip ``equipped`` on an owned accessory. Returns None if not owned."""
    if accessory_id not in pet.owned_accessory_ids:
        return None
    accessories = [
        a.model_copy(update={"equipped": not a.equipped}) if a.id == accessory_id else a
        for a in pet.accessories
    ]
    return pet.model_copy(update={"accessories": accessories})


def color_available(pet: Pet, color: str) -> bool:
    return color in BASE_COLORS or color in pet.unlocked_colors
