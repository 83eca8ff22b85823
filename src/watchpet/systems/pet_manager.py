"""Pet manager — the entry point for every pet action.

Each action follows the same cycle: read the stored document, apply pending
decay, apply the action, then write back only the fields that changed in a
single conditional update. A write that loses a race against another writer
(``StaleWriteError``) re-runs the whole cycle from a fresh read.
"""
from __future__ import annotations

import logging
import random
from datetime import datetime
from typing import Callable, Iterable

from pydantic import ValidationError

from watchpet.errors import InvalidActionError, PetNotFoundError, StaleWriteError, StoreError
from watchpet.mechanics import care
from watchpet.mechanics.death import revive
from watchpet.mechanics.decay import materialize, repair_record
from watchpet.mechanics.genres import default_matcher
from watchpet.mechanics.leveling import GenreComparator
from watchpet.mechanics.mood import Mood, calculate_mood
from watchpet.mechanics.shield import ShieldResult, activate_shield
from watchpet.mechanics.unlocks import color_available, toggle_accessory
from watchpet.models.config import DEFAULT_CONFIG, PetConfig
from watchpet.models.pet import AccessoryId, Pet, Species
from watchpet.storage.repos.pet_repo import PetRepo
from watchpet.storage.repos.streak_repo import StreakRepo
from watchpet.utils import utcnow

logger = logging.getLogger(__name__)

Transform = Callable[[Pet, datetime], Pet]


def _unchanged(pet: Pet, now: datetime) -> Pet:
    return pet


def changed_fields(stored: dict, pet: Pet) -> dict:
    """Fields of ``pet`` that differ from the stored document.

    Model fields missing from ``pet``'s document map to None (delete).
    """
    doc = pet.to_document()
    doc.pop("version", None)
    changes = {key: value for key, value in doc.items() if stored.get(key) != value}
    for key in Pet.model_fields:
        if key in stored and key not in doc and key != "version":
            changes[key] = None
    return changes


class PetManager:
    """Owns a user's pets, the active-pet pointer and the streak shield."""

    def __init__(
        self,
        pets: PetRepo,
        streaks: StreakRepo,
        config: PetConfig = DEFAULT_CONFIG,
        clock: Callable[[], datetime] = utcnow,
        rng: random.Random | None = None,
        genre_matcher: GenreComparator = default_matcher,
    ) -> None:
        self.pets = pets
        self.streaks = streaks
        self.config = config
        self.clock = clock
        self.rng = rng or random.Random()
        self.genre_matcher = genre_matcher
        # Fast path only; the migration itself is idempotent.
        self._migrated: set[str] = set()

    # -- Internals --

    def _ensure_migrated(self, user_id: str) -> None:
        if user_id in self._migrated:
            return
        self.pets.migrate_legacy(user_id)
        self._migrated.add(user_id)

    def _parse(self, doc: dict, now: datetime) -> Pet | None:
        try:
            return Pet.model_validate(repair_record(doc, now, self.config))
        except ValidationError as exc:
            logger.error("Unreadable pet document %s: %s", doc.get("id", "?"), exc)
            return None

    def _apply(
        self,
        user_id: str,
        pet_id: str,
        transform: Transform = _unchanged,
        stored: dict | None = None,
    ) -> Pet:
        """Read, materialize, transform and conditionally write one pet."""
        self._ensure_migrated(user_id)
        attempts = self.config.max_conflict_retries + 1
        for attempt in range(attempts):
            now = self.clock()
            if stored is None:
                stored = self.pets.get(user_id, pet_id)
            pet = self._parse(stored, now) if stored is not None else None
            if pet is None:
                raise PetNotFoundError(user_id, pet_id)

            result = transform(materialize(pet, now, self.config), now)
            changes = changed_fields(stored, result)
            if not changes:
                return result
            try:
                written = self.pets.update(user_id, pet_id, changes, expected_version=pet.version)
            except StaleWriteError:
                if attempt == attempts - 1:
                    raise
                logger.debug("Pet %s changed underneath us, retrying", pet_id)
                stored = None
                continue
            return result.model_copy(update={"version": written["version"]})
        raise AssertionError("unreachable")

    def _pet_ids(self, user_id: str) -> list[str]:
        self._ensure_migrated(user_id)
        return sorted(self.pets.get_all(user_id))

    # -- Reads --

    def list_companions(self, user_id: str) -> list[Pet]:
        """All pets of a user, oldest first, with decay applied."""
        self._ensure_migrated(user_id)
        result = []
        for pet_id, doc in sorted(self.pets.get_all(user_id).items()):
            try:
                result.append(self._apply(user_id, pet_id, stored=doc))
            except PetNotFoundError:
                continue
        return sorted(result, key=lambda p: (p.created_at, p.id))

    def get_companion(self, user_id: str, pet_id: str) -> Pet | None:
        try:
            return self._apply(user_id, pet_id)
        except PetNotFoundError:
            return None

    def get_mood(self, user_id: str, pet_id: str) -> Mood:
        pet = self._apply(user_id, pet_id)
        return calculate_mood(pet, self.clock())

    # -- Lifecycle --

    def create_companion(self, user_id: str, name: str, species: Species | str) -> Pet:
        try:
            species = Species(species)
        except ValueError:
            raise InvalidActionError(f"Unknown species {species!r}") from None

        self._ensure_migrated(user_id)
        now = self.clock()
        existing = [
            pet for pet in (self._parse(doc, now) for doc in self.pets.get_all(user_id).values())
            if pet is not None
        ]
        if len(existing) >= self.config.max_pets:
            raise InvalidActionError(f"You can have at most {self.config.max_pets} pets")
        if existing and not any(p.level >= self.config.second_pet_level for p in existing):
            raise InvalidActionError(
                f"A pet must reach level {self.config.second_pet_level} before you can adopt another"
            )

        pet = care.create_pet(user_id, name, species, now, self.config, self.rng)
        self.pets.create(user_id, pet.id, pet.to_document())
        active = self.pets.get_active(user_id)
        if active is None or active not in {p.id for p in existing}:
            self.pets.set_active(user_id, pet.id)
        logger.info("User %s adopted %s %s (%s)", user_id, species.value, pet.id, name)
        return pet

    def delete_companion(self, user_id: str, pet_id: str) -> None:
        remaining = self._pet_ids(user_id)
        if pet_id not in remaining:
            raise PetNotFoundError(user_id, pet_id)
        self.pets.delete(user_id, pet_id)
        remaining.remove(pet_id)

        if self.pets.get_active(user_id) == pet_id:
            fallback = self._oldest(user_id, remaining)
            self.pets.set_active(user_id, fallback)
        logger.info("User %s released pet %s", user_id, pet_id)

    def _oldest(self, user_id: str, pet_ids: list[str]) -> str | None:
        now = self.clock()
        docs = [doc for doc in (self.pets.get(user_id, pid) for pid in pet_ids) if doc is not None]
        pets = [pet for pet in (self._parse(doc, now) for doc in docs) if pet is not None]
        if not pets:
            return None
        return min(pets, key=lambda p: (p.created_at, p.id)).id

    # -- Care --

    def feed(self, user_id: str, pet_id: str) -> Pet:
        return self._apply(user_id, pet_id, lambda pet, now: care.feed(pet, now, self.config))

    def play(self, user_id: str, pet_id: str) -> Pet:
        return self._apply(user_id, pet_id, lambda pet, now: care.play(pet, self.config))

    def revive(self, user_id: str, pet_id: str) -> Pet:
        return self._apply(user_id, pet_id, lambda pet, now: revive(pet, now, self.config))

    # -- Watch activity --

    def record_episode_watched(self, user_id: str, pet_id: str, genres: Iterable[str] = ()) -> Pet:
        genres = list(genres)
        return self._apply(
            user_id, pet_id,
            lambda pet, now: care.watch_episode(pet, genres, now, self.config, self.genre_matcher),
        )

    def record_episode_watched_all(self, user_id: str, genres: Iterable[str] = ()) -> list[Pet]:
        """Apply one watched episode to every pet of the user.

        Dead pets come back unchanged; unreadable or vanished pets are skipped.
        """
        genres = list(genres)
        result = []
        for pet_id in self._pet_ids(user_id):
            try:
                result.append(self.record_episode_watched(user_id, pet_id, genres))
            except PetNotFoundError:
                continue
        return result

    def record_series_completed(self, user_id: str, pet_id: str) -> Pet:
        return self._apply(
            user_id, pet_id, lambda pet, now: care.complete_series(pet, now, self.config),
        )

    # -- Active pet --

    def set_active_companion(self, user_id: str, pet_id: str) -> None:
        if pet_id not in self._pet_ids(user_id):
            raise PetNotFoundError(user_id, pet_id)
        self.pets.set_active(user_id, pet_id)

    def get_active_companion(self, user_id: str) -> str | None:
        self._ensure_migrated(user_id)
        return self.pets.get_active(user_id)

    # -- Cosmetics --

    def toggle_accessory(self, user_id: str, pet_id: str, accessory_id: AccessoryId | str) -> Pet:
        try:
            accessory = AccessoryId(accessory_id)
        except ValueError:
            raise InvalidActionError(f"Unknown accessory {accessory_id!r}") from None

        def _toggle(pet: Pet, now: datetime) -> Pet:
            toggled = toggle_accessory(pet, accessory)
            if toggled is None:
                raise InvalidActionError(f"{pet.name} has not unlocked {accessory.value}")
            return toggled

        return self._apply(user_id, pet_id, _toggle)

    def change_color(self, user_id: str, pet_id: str, color: str) -> Pet:
        def _recolor(pet: Pet, now: datetime) -> Pet:
            if not color_available(pet, color):
                raise InvalidActionError(f"Color {color!r} is not available for {pet.name}")
            return pet.model_copy(update={"color": color})

        return self._apply(user_id, pet_id, _recolor)

    # -- Streak shield --

    def activate_streak_shield(self, user_id: str, pet_id: str, now: datetime | None = None) -> ShieldResult:
        """Spend pet XP and happiness to rescue this year's watch streak.

        Rejections return a result with a reason and write nothing.
        """
        self._ensure_migrated(user_id)
        attempts = self.config.max_conflict_retries + 1
        for attempt in range(attempts):
            when = now or self.clock()
            stored = self.pets.get(user_id, pet_id)
            pet = self._parse(stored, when) if stored is not None else None
            if pet is not None:
                pet = materialize(pet, when, self.config)
            streak = self.streaks.get(user_id, when.year)

            result = activate_shield(pet, streak, when, self.config)
            if not result.success:
                logger.info("Shield for %s/%s rejected: %s", user_id, pet_id, result.reason.value)
                return result

            try:
                written = self.pets.update(
                    user_id, pet_id, changed_fields(stored, result.pet), expected_version=pet.version,
                )
            except StaleWriteError:
                if attempt == attempts - 1:
                    raise
                logger.debug("Pet %s changed during shield activation, retrying", pet_id)
                continue

            try:
                self.streaks.save_shield_use(user_id, when.year, result.streak)
            except StoreError:
                logger.error(
                    "Shield paid by pet %s but streak write for %s failed", pet_id, user_id,
                )
                raise
            logger.info("User %s shielded their streak with pet %s", user_id, pet_id)
            result.pet = result.pet.model_copy(update={"version": written["version"]})
            return result
        raise AssertionError("unreachable")
