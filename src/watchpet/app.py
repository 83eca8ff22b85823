"""Application bootstrap: wires config, storage and the pet manager together."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from watchpet.models.config import PetConfig, StorageConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config.toml"


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load config.toml (project root by default). Missing file means defaults."""
    import tomllib

    config_path = path or DEFAULT_CONFIG_PATH
    if config_path.exists():
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    logger.debug("No config file at %s, using defaults", config_path)
    return {}


class PetApp:
    """Lazily builds the storage stack and the pet manager from config."""

    def __init__(self, config: dict[str, Any] | None = None, db_path: str | None = None):
        self.config = config if config is not None else load_config()
        self.db_path_override = db_path

        self._db = None
        self._store = None
        self._manager = None
        self._streaks = None

    @property
    def pet_config(self) -> PetConfig:
        return PetConfig.model_validate(self.config.get("pet", {}))

    @property
    def storage_config(self) -> StorageConfig:
        return StorageConfig.model_validate(self.config.get("storage", {}))

    @property
    def db(self):
        if self._db is None:
            from watchpet.storage.database import Database

            storage = self.storage_config
            self._db = Database(self.db_path_override or storage.db_path, timeout=storage.busy_timeout)
            self._db.initialize()
        return self._db

    @property
    def store(self):
        if self._store is None:
            from watchpet.storage.keyed_store import KeyedStore

            storage = self.storage_config
            self._store = KeyedStore(
                self.db, max_retries=storage.max_retries, retry_backoff=storage.retry_backoff,
            )
        return self._store

    @property
    def streaks(self):
        if self._streaks is None:
            from watchpet.storage.repos.streak_repo import StreakRepo

            self._streaks = StreakRepo(self.store)
        return self._streaks

    @property
    def manager(self):
        if self._manager is None:
            from watchpet.storage.repos.pet_repo import PetRepo
            from watchpet.systems.pet_manager import PetManager

            self._manager = PetManager(PetRepo(self.store), self.streaks, config=self.pet_config)
        return self._manager

    def close(self) -> None:
        if self._db is not None:
            self._db.close()
            self._db = None
