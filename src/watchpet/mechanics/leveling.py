"""XP and level-up mechanics — pure math, no I/O.

Experience is banked per level: a pet at level L holds 0 <= xp < L * xp_per_level,
so each level costs more than the one before. Overflow is resolved on every
grant, which may cross several levels at once.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable

from watchpet.mechanics.genres import default_matcher
from watchpet.mechanics.unlocks import evaluate_unlocks
from watchpet.models.config import DEFAULT_CONFIG, PetConfig
from watchpet.models.pet import Pet

logger = logging.getLogger(__name__)

GenreComparator = Callable[[str | None, Iterable[str]], bool]


def level_cost(level: int, config: PetConfig = DEFAULT_CONFIG) -> int:
    """XP needed to finish ``level`` and reach the next one."""
    return max(level, 1) * config.xp_per_level


def resolve_overflow(level: int, experience: int, config: PetConfig = DEFAULT_CONFIG) -> tuple[int, int]:
    """Convert banked experience into levels. Returns ``(level, experience)``."""
    while experience >= level_cost(level, config):
        experience -= level_cost(level, config)
        level += 1
    return level, experience


def grant_xp(pet: Pet, amount: int, now: datetime, config: PetConfig = DEFAULT_CONFIG) -> Pet:
    """Add experience; a level-up fully restores the pet and checks unlocks."""
    if amount <= 0:
        return pet
    level, experience = resolve_overflow(pet.level, pet.experience + amount, config)
    updated = pet.model_copy(update={"level": level, "experience": experience})
    if level > pet.level:
        logger.info("Pet %s leveled up %d -> %d", pet.id, pet.level, level)
        updated = updated.model_copy(update={"happiness": 100, "hunger": 0})
        updated = evaluate_unlocks(updated, now, config)
    return updated


def spendable_xp(pet: Pet, config: PetConfig = DEFAULT_CONFIG) -> int:
    """Experience value a pet can pay with (for the streak shield)."""
    return (pet.level - 1) * config.xp_per_level + pet.experience


def spend_xp(level: int, experience: int, cost: int, config: PetConfig = DEFAULT_CONFIG) -> tuple[int, int]:
    """Pay ``cost`` from the current bank, borrowing from lower levels.

    Each level given up refunds that level's own cost, mirroring
    :func:`resolve_overflow` in reverse. Level never drops below 1 and
    experience never below 0.
    """
    experience -= cost
    while experience < 0 and level > 1:
        level -= 1
        experience += level_cost(level, config)
    return level, max(experience, 0)


def is_healthy(pet: Pet, config: PetConfig = DEFAULT_CONFIG) -> bool:
    return (
        pet.hunger < config.healthy_hunger_threshold
        and pet.happiness > config.healthy_happiness_threshold
    )


def episode_xp(
    pet: Pet,
    genres: Iterable[str],
    config: PetConfig = DEFAULT_CONFIG,
    matcher: GenreComparator = default_matcher,
) -> tuple[int, int]:
    """XP and happiness bonus earned for one watched episode.

    The genre bonus replaces the base amount; the healthy multiplier is
    applied afterwards to whatever amount resulted.
    """
    amount = config.base_xp_per_episode
    happiness_bonus = 0
    if matcher(pet.favorite_genre, list(genres)):
        amount = config.genre_match_xp
        happiness_bonus = config.genre_match_happiness
    if is_healthy(pet, config):
        amount = int(amount * config.healthy_multiplier)
    return amount, happiness_bonus
