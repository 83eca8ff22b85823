"""Repository for the yearly watch-streak record."""
from __future__ import annotations

from datetime import date

from watchpet.mechanics.streak import record_watch_day
from watchpet.models.pet import WatchStreak
from watchpet.storage.keyed_store import KeyedStore


class StreakRepo:
    def __init__(self, store: KeyedStore) -> None:
        self.store = store

    @staticmethod
    def _path(user_id: str, year: int) -> str:
        return f"{user_id}/wrapped/{year}/streak"

    def get(self, user_id: str, year: int) -> WatchStreak | None:
        doc = self.store.get(self._path(user_id, year))
        if not isinstance(doc, dict):
            return None
        return WatchStreak.model_validate(doc)

    def save_shield_use(self, user_id: str, year: int, streak: WatchStreak) -> None:
        """Write only the fields the shield changes."""
        doc = streak.to_document()
        self.store.update(self._path(user_id, year), {
            "lastWatchDate": doc["lastWatchDate"],
            "lastShieldUsedDate": doc.get("lastShieldUsedDate"),
            "shieldUsedCount": doc["shieldUsedCount"],
        })

    def record_watch(self, user_id: str, today: date) -> WatchStreak:
        """Count ``today`` as a watched day on this year's streak."""
        current = self.get(user_id, today.year) or WatchStreak()
        updated = record_watch_day(current, today)
        if updated is not current:
            self.store.set(self._path(user_id, today.year), updated.to_document())
        return updated
