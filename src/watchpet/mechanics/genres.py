"""Genre comparison for the favorite-genre XP bonus.

Catalog providers name genres differently ("Sci-Fi & Fantasy" on one side,
"Science Fiction" on the other), so names are compared through an alias
table: two names match when they share a genre family.
"""
from __future__ import annotations

import re
from typing import Iterable, Mapping

DEFAULT_GENRE_ALIASES: dict[str, tuple[str, ...]] = {
    "action & adventure": ("action", "adventure", "action and adventure"),
    "sci-fi & fantasy": ("science fiction", "sci-fi", "scifi", "fantasy", "sci-fi and fantasy"),
    "war & politics": ("war", "politics", "war and politics"),
    "comedy": ("sitcom", "comedies"),
    "crime": ("thriller", "detective"),
    "mystery": ("suspense",),
    "animation": ("anime", "animated", "cartoon"),
    "documentary": ("documentaries", "docuseries"),
    "family": ("kids", "children"),
    "western": ("westerns",),
    "drama": ("dramas",),
}

_SPACE = re.compile(r"\s+")


def normalize_genre(name: str) -> str:
    return _SPACE.sub(" ", (name or "").strip().lower())


class GenreMatcher:
    """Alias-aware genre comparator. Matching is symmetric."""

    def __init__(self, aliases: Mapping[str, Iterable[str]] | None = None) -> None:
        table = DEFAULT_GENRE_ALIASES if aliases is None else aliases
        self._families: dict[str, set[str]] = {}
        for canonical, names in table.items():
            key = normalize_genre(canonical)
            for name in (canonical, *names):
                self._families.setdefault(normalize_genre(name), set()).add(key)

    def families(self, name: str) -> set[str]:
        norm = normalize_genre(name)
        found = set(self._families.get(norm, ()))
        found.add(norm)
        return found

    def matches(self, favorite: str | None, genres: Iterable[str]) -> bool:
        """True when any of ``genres`` counts as the ``favorite`` genre."""
        if not favorite:
            return False
        fav = normalize_genre(favorite)
        fav_families = self.families(favorite)
        for genre in genres:
            norm = normalize_genre(genre)
            if not norm:
                continue
            if norm == fav or norm in fav or fav in norm:
                return True
            if fav_families & self.families(genre):
                return True
        return False

    __call__ = matches


default_matcher = GenreMatcher()
