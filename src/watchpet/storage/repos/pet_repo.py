"""Repository for pet documents and the per-user active-pet pointer."""
from __future__ import annotations

import logging

from watchpet.storage.keyed_store import KeyedStore
from watchpet.storage.legacy import is_legacy_record, migrate_legacy

logger = logging.getLogger(__name__)


class PetRepo:
    def __init__(self, store: KeyedStore) -> None:
        self.store = store

    @staticmethod
    def _user_path(user_id: str) -> str:
        return f"pets/{user_id}"

    @classmethod
    def _pet_path(cls, user_id: str, pet_id: str) -> str:
        return f"{cls._user_path(user_id)}/{pet_id}"

    @staticmethod
    def _active_path(user_id: str) -> str:
        return f"activePet/{user_id}"

    def get_all(self, user_id: str) -> dict[str, dict]:
        """All pet documents for a user, keyed by pet ID."""
        raw = self.store.get(self._user_path(user_id))
        if not isinstance(raw, dict) or is_legacy_record(raw):
            return {}
        return {pet_id: doc for pet_id, doc in raw.items() if isinstance(doc, dict)}

    def get(self, user_id: str, pet_id: str) -> dict | None:
        doc = self.store.get(self._pet_path(user_id, pet_id))
        return doc if isinstance(doc, dict) else None

    def create(self, user_id: str, pet_id: str, doc: dict) -> None:
        self.store.set(self._pet_path(user_id, pet_id), doc)

    def update(self, user_id: str, pet_id: str, fields: dict, expected_version: int) -> dict:
        """Conditional multi-field write; raises StaleWriteError on a version mismatch."""
        return self.store.update(self._pet_path(user_id, pet_id), fields, expected_version)

    def delete(self, user_id: str, pet_id: str) -> None:
        self.store.remove(self._pet_path(user_id, pet_id))

    # -- Active pointer --

    def get_active(self, user_id: str) -> str | None:
        doc = self.store.get(self._active_path(user_id))
        if isinstance(doc, dict):
            return doc.get("petId")
        return None

    def set_active(self, user_id: str, pet_id: str | None) -> None:
        if pet_id is None:
            self.store.remove(self._active_path(user_id))
        else:
            self.store.set(self._active_path(user_id), {"petId": pet_id})

    # -- Legacy layout --

    def migrate_legacy(self, user_id: str) -> str | None:
        """Rewrite an old single-pet record into the keyed layout.

        Safe to run any number of times: keyed data is left untouched.
        Returns the migrated pet ID, or None when there was nothing to do.
        """
        path = self._user_path(user_id)
        raw = self.store.get(path)
        pets, migrated_id = migrate_legacy(raw, user_id)
        if migrated_id is None:
            return None

        # Children first: until the bare record is gone, a rerun redoes this.
        for pet_id, doc in pets.items():
            self.store.set(self._pet_path(user_id, pet_id), doc)
        self.store.remove(path, recursive=False)
        active = self.get_active(user_id)
        if active is None or active not in self.get_all(user_id):
            self.set_active(user_id, migrated_id)
        logger.info("Migrated legacy pet %s for user %s", migrated_id, user_id)
        return migrated_id
