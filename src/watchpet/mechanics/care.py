"""Pet creation and care actions — pure calculations, no I/O.

Actions on a dead pet return it unchanged.
"""
from __future__ import annotations

import random
from datetime import datetime
from typing import Iterable

from watchpet.mechanics.genres import default_matcher
from watchpet.mechanics.leveling import GenreComparator, episode_xp, grant_xp
from watchpet.mechanics.unlocks import evaluate_unlocks
from watchpet.models.config import DEFAULT_CONFIG, PetConfig
from watchpet.models.pet import (
    BASE_COLORS,
    BASE_PATTERNS,
    EYE_COLORS,
    GENRE_FAVORITES,
    PERSONALITIES,
    SIZES,
    Pet,
    Species,
)
from watchpet.utils import clamp


def create_pet(
    user_id: str,
    name: str,
    species: Species,
    now: datetime,
    config: PetConfig = DEFAULT_CONFIG,
    rng: random.Random | None = None,
) -> Pet:
    """Create a fresh level-1 pet with randomized looks and a favorite genre."""
    rng = rng or random.Random()
    return Pet(
        user_id=user_id,
        name=name,
        species=species,
        color=rng.choice(sorted(BASE_COLORS)),
        hunger=config.initial_hunger,
        happiness=config.initial_happiness,
        last_fed=now,
        last_status_update=now,
        created_at=now,
        favorite_genre=rng.choice(GENRE_FAVORITES),
        pattern=rng.choice(BASE_PATTERNS),
        eye_color=rng.choice(EYE_COLORS),
        personality=rng.choice(PERSONALITIES),
        size=rng.choice(SIZES),
    )


def feed(pet: Pet, now: datetime, config: PetConfig = DEFAULT_CONFIG) -> Pet:
    if not pet.is_alive:
        return pet
    return pet.model_copy(update={
        "hunger": clamp(pet.hunger - config.feed_hunger),
        "happiness": clamp(pet.happiness + config.feed_happiness),
        "last_fed": now,
    })


def play(pet: Pet, config: PetConfig = DEFAULT_CONFIG) -> Pet:
    if not pet.is_alive:
        return pet
    # Playing makes hungry.
    return pet.model_copy(update={
        "happiness": clamp(pet.happiness + config.play_happiness),
        "hunger": clamp(pet.hunger + config.play_hunger),
    })


def watch_episode(
    pet: Pet,
    genres: Iterable[str],
    now: datetime,
    config: PetConfig = DEFAULT_CONFIG,
    matcher: GenreComparator = default_matcher,
) -> Pet:
    """Count one watched episode and award its XP."""
    if not pet.is_alive:
        return pet
    amount, happiness_bonus = episode_xp(pet, genres, config, matcher)
    counted = pet.model_copy(update={
        "episodes_watched": pet.episodes_watched + 1,
        "happiness": clamp(pet.happiness + happiness_bonus),
    })
    return grant_xp(counted, amount, now, config)


def complete_series(pet: Pet, now: datetime, config: PetConfig = DEFAULT_CONFIG) -> Pet:
    if not pet.is_alive:
        return pet
    counted = pet.model_copy(update={"total_series_watched": pet.total_series_watched + 1})
    return evaluate_unlocks(counted, now, config)
