"""Conversion of the old single-pet record into the per-pet keyed layout.

Old layout:  pets/{user} -> {"id": "pet-1", "type": "cat", "lastFed": ...}
New layout:  pets/{user} -> {"pet-1": {"id": "pet-1", "species": "cat", "last_fed": ...}}
"""
from __future__ import annotations

from typing import Any

from pydantic.alias_generators import to_snake

# Old keys that do not map onto their new name by plain camel -> snake.
_RENAMED_KEYS = {
    "type": "species",
    "colorKey": "color",
    "lastUpdated": "last_status_update",
    "lastStatusUpdate": "last_status_update",
}


def is_legacy_record(raw: Any) -> bool:
    """A keyed map only holds pet documents; a bare record holds scalars too."""
    if not isinstance(raw, dict) or not raw:
        return False
    return any(not isinstance(value, dict) for value in raw.values())


def _legacy_key(key: str) -> str:
    return _RENAMED_KEYS.get(key) or to_snake(key)


def migrate_legacy(raw: Any, user_id: str) -> tuple[dict[str, dict], str | None]:
    """Return ``(pets_by_id, migrated_id)``.

    Already-keyed (or empty) data comes back unchanged with ``None``.
    """
    if not is_legacy_record(raw):
        return (raw if isinstance(raw, dict) else {}), None

    doc: dict[str, Any] = {}
    for key, value in raw.items():
        new_key = _legacy_key(key)
        # A current-style key wins over its legacy spelling.
        if new_key in doc and key != new_key:
            continue
        doc[new_key] = value
    pet_id = str(doc.get("id") or f"pet-{user_id}")
    doc["id"] = pet_id
    doc.setdefault("user_id", user_id)
    return {pet_id: doc}, pet_id
