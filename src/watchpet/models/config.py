from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PetConfig(BaseModel):
    """Tunable constants for the pet simulation (the ``[pet]`` config table)."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    # Leveling
    xp_per_level: int = Field(100, gt=0)
    base_xp_per_episode: int = 10
    genre_match_xp: int = 25
    genre_match_happiness: int = 5
    healthy_multiplier: float = 1.5
    healthy_hunger_threshold: int = 30
    healthy_happiness_threshold: int = 70

    # Decay
    hunger_per_hour: float = 1.5
    happiness_per_hour: float = 1.0
    high_hunger_threshold: int = 80
    high_hunger_penalty: int = 3
    debounce_seconds: int = 60
    initial_hunger: int = 50
    initial_happiness: int = 75

    # Death / revival
    hunger_death_threshold: int = 100
    happiness_death_threshold: int = 0
    neglect_days: float = 7
    revival_hunger: int = 30
    revival_happiness: int = 80

    # Care actions
    feed_hunger: int = 30
    feed_happiness: int = 10
    play_happiness: int = 20
    play_hunger: int = 10

    # Unlocks
    crown_level: int = 10
    winter_month: int = Field(12, ge=1, le=12)
    summer_months: tuple[int, ...] = (6, 7, 8)
    silver_series: int = 25
    gold_series: int = 50
    rainbow_series: int = 100
    galaxy_episodes: int = 200
    achievement_points_per_unlock: int = 10

    # Streak shield
    shield_xp_cost: int = Field(100, gt=0)
    shield_happiness_cost: int = 20
    shield_cooldown_days: float = 7
    max_missed_days: int = Field(2, ge=1)

    # Multi-pet
    max_pets: int = Field(2, ge=1)
    second_pet_level: int = 5
    max_conflict_retries: int = 3

    @model_validator(mode="after")
    def _check_series_thresholds(self) -> PetConfig:
        if not self.silver_series < self.gold_series < self.rainbow_series:
            raise ValueError("series unlock thresholds must be strictly increasing")
        return self


class StorageConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    db_path: str = "saves/watchpet.db"
    busy_timeout: float = 5.0
    max_retries: int = Field(3, ge=0)
    retry_backoff: float = 0.05


DEFAULT_CONFIG = PetConfig()
