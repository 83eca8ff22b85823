"""Tests for src/watchpet/storage/repos/streak_repo.py."""
from __future__ import annotations

from datetime import date

from watchpet.models.pet import WatchStreak


class TestStreakRepo:
    def test_missing(self, streak_repo):
        assert streak_repo.get("u1", 2026) is None

    def test_reads_camel_case_document(self, streak_repo, store):
        store.set("u1/wrapped/2026/streak", {
            "currentStreak": 4, "longestStreak": 9, "lastWatchDate": "2026-03-08",
            "topShow": "kept by another writer",
        })
        streak = streak_repo.get("u1", 2026)
        assert streak.current_streak == 4
        assert streak.longest_streak == 9

    def test_shield_write_touches_only_its_fields(self, streak_repo, store, now):
        store.set("u1/wrapped/2026/streak", {
            "currentStreak": 4, "lastWatchDate": "2026-03-08", "topShow": "Dark",
        })
        streak = WatchStreak(current_streak=99, last_watch_date="2026-03-09",
                             last_shield_used_date=now, shield_used_count=1)
        streak_repo.save_shield_use("u1", 2026, streak)
        doc = store.get("u1/wrapped/2026/streak")
        assert doc["currentStreak"] == 4
        assert doc["topShow"] == "Dark"
        assert doc["lastWatchDate"] == "2026-03-09"
        assert doc["shieldUsedCount"] == 1
        assert doc["lastShieldUsedDate"].startswith("2026-03-10")

    def test_record_watch(self, streak_repo):
        streak_repo.record_watch("u1", date(2026, 3, 9))
        streak = streak_repo.record_watch("u1", date(2026, 3, 10))
        assert streak.current_streak == 2
        assert streak_repo.get("u1", 2026).current_streak == 2
