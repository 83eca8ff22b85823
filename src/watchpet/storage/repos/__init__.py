from __future__ import annotations

from watchpet.storage.repos.pet_repo import PetRepo
from watchpet.storage.repos.streak_repo import StreakRepo

__all__ = [
    "PetRepo",
    "StreakRepo",
]
