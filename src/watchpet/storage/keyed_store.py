"""Path-keyed JSON document store on top of SQLite.

Documents live at slash-separated paths (``pets/u1/pet-abc``). Reading a
path that has no document of its own returns its descendants as a nested
dict, so ``get("pets/u1")`` yields ``{"pet-abc": {...}, ...}``.

Every public call is a single transaction. Transient SQLite errors are
retried with exponential backoff before surfacing as :class:`StoreFailure`
(or :class:`StoreTimeout` when the database stayed locked).
"""
from __future__ import annotations

import json
import logging
import sqlite3
import time
from typing import Any, Callable, TypeVar

from watchpet.errors import StaleWriteError, StoreFailure, StoreTimeout
from watchpet.storage.database import Database
from watchpet.utils import safe_json

logger = logging.getLogger(__name__)

T = TypeVar("T")

VERSION_FIELD = "version"


def _norm(path: str) -> str:
    return "/".join(seg for seg in path.split("/") if seg)


def _children_range(path: str) -> tuple[str, str]:
    # "/" sorts directly before "0", so [p/, p0) covers every descendant.
    return f"{path}/", f"{path}0"


class KeyedStore:
    def __init__(
        self,
        db: Database,
        max_retries: int = 3,
        retry_backoff: float = 0.05,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.db = db
        self.max_retries = max_retries
        self.retry_backoff = retry_backoff
        self._sleep = sleep

    def _run(self, op: str, path: str, fn: Callable[[sqlite3.Connection], T]) -> T:
        last_exc: sqlite3.OperationalError | None = None
        for attempt in range(self.max_retries + 1):
            try:
                with self.db.get_connection() as conn:
                    return fn(conn)
            except sqlite3.OperationalError as exc:
                last_exc = exc
                if attempt < self.max_retries:
                    delay = self.retry_backoff * (2 ** attempt)
                    logger.debug("%s %s failed (%s), retrying in %.2fs", op, path, exc, delay)
                    self._sleep(delay)
            except sqlite3.Error as exc:
                raise StoreFailure(f"{op} {path} failed: {exc}") from exc

        message = f"{op} {path} failed after {self.max_retries + 1} attempts: {last_exc}"
        logger.error(message)
        text = str(last_exc).lower()
        if "locked" in text or "busy" in text:
            raise StoreTimeout(message) from last_exc
        raise StoreFailure(message) from last_exc

    @staticmethod
    def _read_doc(conn: sqlite3.Connection, path: str) -> Any | None:
        row = conn.execute("SELECT value FROM nodes WHERE path = ?", (path,)).fetchone()
        if row is None:
            return None
        try:
            return json.loads(row["value"])
        except json.JSONDecodeError:
            logger.warning("Corrupt document at %s, treating it as empty", path)
            return {}

    @staticmethod
    def _write_doc(conn: sqlite3.Connection, path: str, value: Any) -> None:
        conn.execute(
            "INSERT INTO nodes (path, value) VALUES (?, ?) "
            "ON CONFLICT(path) DO UPDATE SET value = excluded.value",
            (path, json.dumps(value)),
        )

    # -- Public interface --

    def get(self, path: str) -> Any | None:
        """Return the document at ``path``, its assembled descendants, or None."""
        path = _norm(path)

        def _get(conn: sqlite3.Connection) -> Any | None:
            doc = self._read_doc(conn, path)
            if doc is not None:
                return doc
            low, high = _children_range(path)
            rows = conn.execute(
                "SELECT path, value FROM nodes WHERE path >= ? AND path < ? ORDER BY path",
                (low, high),
            ).fetchall()
            if not rows:
                return None
            tree: dict[str, Any] = {}
            for row in rows:
                segments = row["path"][len(low):].split("/")
                node = tree
                for seg in segments[:-1]:
                    child = node.get(seg)
                    if not isinstance(child, dict):
                        child = node[seg] = {}
                    node = child
                node[segments[-1]] = safe_json(row["value"], None)
            return tree

        return self._run("get", path, _get)

    def set(self, path: str, value: Any) -> None:
        """Replace the document at ``path``."""
        path = _norm(path)
        self._run("set", path, lambda conn: self._write_doc(conn, path, value))

    def update(self, path: str, fields: dict[str, Any], expected_version: int | None = None) -> dict:
        """Merge ``fields`` into the document at ``path``; ``None`` values delete keys.

        With ``expected_version`` the write only happens if the stored
        document still exists and carries that version, and bumps it by one.
        A missing document is reported with version -1.
        Returns the merged document.
        """
        path = _norm(path)

        def _update(conn: sqlite3.Connection) -> dict:
            current = self._read_doc(conn, path)
            merged = dict(current) if isinstance(current, dict) else {}
            if expected_version is not None:
                if current is None:
                    raise StaleWriteError(path, expected_version, -1)
                actual = merged.get(VERSION_FIELD, 0)
                if actual != expected_version:
                    raise StaleWriteError(path, expected_version, actual)
            for key, value in fields.items():
                if value is None:
                    merged.pop(key, None)
                else:
                    merged[key] = value
            if expected_version is not None:
                merged[VERSION_FIELD] = expected_version + 1
            self._write_doc(conn, path, merged)
            return merged

        return self._run("update", path, _update)

    def remove(self, path: str, recursive: bool = True) -> None:
        """Delete the document at ``path`` and, unless told otherwise, everything below it."""
        path = _norm(path)
        low, high = _children_range(path)

        def _remove(conn: sqlite3.Connection) -> None:
            if recursive:
                conn.execute(
                    "DELETE FROM nodes WHERE path = ? OR (path >= ? AND path < ?)",
                    (path, low, high),
                )
            else:
                conn.execute("DELETE FROM nodes WHERE path = ?", (path,))

        self._run("remove", path, _remove)

    def dump(self) -> dict[str, Any]:
        """Every stored document keyed by path (for backups and tests)."""
        def _dump(conn: sqlite3.Connection) -> dict[str, Any]:
            rows = conn.execute("SELECT path, value FROM nodes ORDER BY path").fetchall()
            return {row["path"]: safe_json(row["value"], None) for row in rows}

        return self._run("dump", "/", _dump)
