from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import NamedTuple, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Species(str, Enum):
    CAT = "cat"
    DOG = "dog"
    BIRD = "bird"
    DRAGON = "dragon"
    FOX = "fox"


class DeathCause(str, Enum):
    HUNGER = "hunger"
    SADNESS = "sadness"
    NEGLECT = "neglect"


class AccessoryKind(str, Enum):
    HAT = "hat"
    GLASSES = "glasses"
    COLLAR = "collar"
    BOW = "bow"
    SCARF = "scarf"
    CROWN = "crown"
    BANDANA = "bandana"


class AccessoryId(str, Enum):
    SANTA_HAT = "santaHat"
    SUNGLASSES = "sunglasses"
    PARTY_HAT = "partyHat"
    BOW = "bow"
    CROWN = "crown"
    SCARF = "scarf"
    COLLAR = "collar"
    BANDANA = "bandana"


class AccessoryInfo(NamedTuple):
    kind: AccessoryKind
    name: str
    icon: str


ACCESSORY_CATALOG: dict[AccessoryId, AccessoryInfo] = {
    AccessoryId.SANTA_HAT: AccessoryInfo(AccessoryKind.HAT, "Santa Hat", "🎅"),
    AccessoryId.SUNGLASSES: AccessoryInfo(AccessoryKind.GLASSES, "Sunglasses", "🕶️"),
    AccessoryId.PARTY_HAT: AccessoryInfo(AccessoryKind.HAT, "Party Hat", "🎉"),
    AccessoryId.BOW: AccessoryInfo(AccessoryKind.BOW, "Bow", "🎀"),
    AccessoryId.CROWN: AccessoryInfo(AccessoryKind.CROWN, "Crown", "👑"),
    AccessoryId.SCARF: AccessoryInfo(AccessoryKind.SCARF, "Scarf", "🧣"),
    AccessoryId.COLLAR: AccessoryInfo(AccessoryKind.COLLAR, "Collar", "📿"),
    AccessoryId.BANDANA: AccessoryInfo(AccessoryKind.BANDANA, "Bandana", "🔻"),
}

BASE_COLORS: dict[str, str] = {
    "rot": "#FF6B6B",
    "blau": "#4ECDC4",
    "gruen": "#95E77E",
    "lila": "#B794F6",
    "gelb": "#FFD93D",
    "rosa": "#FF6BCB",
    "orange": "#FFA500",
    "tuerkis": "#00D4FF",
}

SPECIAL_COLORS: dict[str, str] = {
    "silver": "#C0C0C0",
    "gold": "#FFD700",
    "rainbow": "rainbow",
}

BASE_PATTERNS = ("spots", "stripes", "plain", "patches")
SPECIAL_PATTERNS = ("galaxy",)
EYE_COLORS = ("#000000", "#0066CC", "#00AA00", "#8B4513", "#FFD700", "#FF0000")
PERSONALITIES = ("lazy", "playful", "brave", "shy", "smart")
SIZES = ("tiny", "small", "normal", "big", "chonky")

GENRE_FAVORITES = (
    "Action & Adventure",
    "Comedy",
    "Drama",
    "Crime",
    "Sci-Fi & Fantasy",
    "Mystery",
    "Animation",
    "Documentary",
    "Family",
    "Western",
)

SPECIES_ICONS: dict[Species, str] = {
    Species.CAT: "🐱",
    Species.DOG: "🐶",
    Species.BIRD: "🐦",
    Species.DRAGON: "🐲",
    Species.FOX: "🦊",
}


def _dedupe(values: list) -> list:
    seen = set()
    out = []
    for value in values:
        key = value.id if isinstance(value, Accessory) else value
        if key in seen:
            continue
        seen.add(key)
        out.append(value)
    return out


class Accessory(BaseModel):
    id: AccessoryId
    type: AccessoryKind
    equipped: bool = False

    @classmethod
    def from_catalog(cls, accessory_id: AccessoryId) -> Accessory:
        return cls(id=accessory_id, type=ACCESSORY_CATALOG[accessory_id].kind)

    @property
    def info(self) -> AccessoryInfo:
        return ACCESSORY_CATALOG[self.id]


def _alias(*names: str) -> AliasChoices:
    return AliasChoices(*names)


class Pet(BaseModel):
    """A user's companion.

    Reads accept both the current snake_case document and the old
    camelCase single-pet record.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: f"pet-{uuid.uuid4().hex[:12]}")
    user_id: str = Field(validation_alias=_alias("user_id", "userId"))
    name: str = "Pet"
    species: Species = Field(validation_alias=_alias("species", "type"))
    color: str = Field("blau", validation_alias=_alias("color", "colorKey"))
    level: int = Field(1, ge=1)
    experience: int = Field(0, ge=0)
    hunger: int = 50
    happiness: int = 75
    last_fed: datetime = Field(validation_alias=_alias("last_fed", "lastFed"))
    last_status_update: datetime = Field(
        validation_alias=_alias("last_status_update", "lastStatusUpdate", "lastUpdated"),
    )
    episodes_watched: int = Field(0, validation_alias=_alias("episodes_watched", "episodesWatched"))
    total_series_watched: int = Field(
        0, validation_alias=_alias("total_series_watched", "totalSeriesWatched"),
    )
    achievement_points: int = Field(
        0, validation_alias=_alias("achievement_points", "achievementPoints"),
    )
    is_alive: bool = Field(True, validation_alias=_alias("is_alive", "isAlive"))
    death_time: Optional[datetime] = Field(None, validation_alias=_alias("death_time", "deathTime"))
    death_cause: Optional[DeathCause] = Field(
        None, validation_alias=_alias("death_cause", "deathCause"),
    )
    revive_count: int = Field(0, validation_alias=_alias("revive_count", "reviveCount"))
    favorite_genre: Optional[str] = Field(
        None, validation_alias=_alias("favorite_genre", "favoriteGenre"),
    )
    accessories: list[Accessory] = Field(default_factory=list)
    unlocked_colors: list[str] = Field(
        default_factory=list, validation_alias=_alias("unlocked_colors", "unlockedColors"),
    )
    unlocked_patterns: list[str] = Field(
        default_factory=list, validation_alias=_alias("unlocked_patterns", "unlockedPatterns"),
    )
    pattern: Optional[str] = None
    eye_color: Optional[str] = Field(None, validation_alias=_alias("eye_color", "eyeColor"))
    personality: Optional[str] = None
    size: Optional[str] = None
    created_at: datetime = Field(validation_alias=_alias("created_at", "createdAt"))
    version: int = 0

    @field_validator("accessories", "unlocked_colors", "unlocked_patterns", mode="after")
    @classmethod
    def _unique(cls, values: list) -> list:
        return _dedupe(values)

    @field_validator("accessories", mode="before")
    @classmethod
    def _known_accessories(cls, values):
        if not isinstance(values, list):
            return []
        known = {a.value for a in AccessoryId}
        return [
            v for v in values
            if isinstance(v, Accessory) or (isinstance(v, dict) and v.get("id") in known)
        ]

    @property
    def owned_accessory_ids(self) -> set[AccessoryId]:
        return {a.id for a in self.accessories}

    def to_document(self) -> dict:
        """Serialize for the keyed store (snake_case, no null fields)."""
        return self.model_dump(mode="json", exclude_none=True)


class StreakRun(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    start_date: str
    end_date: str
    length: int


class WatchStreak(BaseModel):
    """The watch-streak record owned by the media-tracking side.

    Persisted with camelCase keys since other writers share the document.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    current_streak: int = 0
    longest_streak: int = 0
    last_watch_date: str = ""
    streaks: list[StreakRun] = Field(default_factory=list)
    last_shield_used_date: Optional[datetime] = None
    shield_used_count: int = 0

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
