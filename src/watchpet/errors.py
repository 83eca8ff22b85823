"""Exception types raised by the pet manager and storage layer."""
from __future__ import annotations


class PetError(Exception):
    """Base class for all watchpet errors."""


class PetNotFoundError(PetError):
    def __init__(self, user_id: str, pet_id: str | None = None) -> None:
        self.user_id = user_id
        self.pet_id = pet_id
        what = f"pet {pet_id!r}" if pet_id else "any pet"
        super().__init__(f"User {user_id!r} has no {what}")


class InvalidActionError(PetError):
    """The pet is in a state that does not allow the requested change."""


class StoreError(PetError):
    """Base class for persistence failures."""


class StoreFailure(StoreError):
    """A store call kept failing after all retries."""


class StoreTimeout(StoreFailure):
    """The store stayed locked/busy for every retry attempt."""


class StaleWriteError(StoreError):
    """A conditional write found a newer version than the one that was read."""

    def __init__(self, path: str, expected: int, actual: int) -> None:
        self.path = path
        self.expected = expected
        self.actual = actual
        super().__init__(f"Stale write to {path}: expected version {expected}, found {actual}")
