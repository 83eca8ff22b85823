"""Watch-streak classification and day bookkeeping — pure, no I/O.

Status by days since the last watched day:
  0                       -> active
  1                       -> at_risk (watch today to keep it)
  2 .. max_missed_days+1  -> shieldable (a pet can still rescue it)
  more, or never watched  -> lost
"""
from __future__ import annotations

from datetime import date, timedelta
from enum import Enum

from watchpet.models.pet import StreakRun, WatchStreak

MAX_STREAK_HISTORY = 20


class StreakStatus(str, Enum):
    ACTIVE = "active"
    AT_RISK = "at_risk"
    SHIELDABLE = "shieldable"
    LOST = "lost"


def _parse_day(value: str) -> date | None:
    try:
        return date.fromisoformat(value[:10])
    except (TypeError, ValueError):
        return None


def days_since_watch(last_watch_date: str, today: date) -> int | None:
    last = _parse_day(last_watch_date)
    if last is None:
        return None
    return (today - last).days


def streak_status(last_watch_date: str, today: date, max_missed_days: int = 2) -> StreakStatus:
    days = days_since_watch(last_watch_date, today)
    if days is None:
        return StreakStatus.LOST
    if days <= 0:
        return StreakStatus.ACTIVE
    if days == 1:
        return StreakStatus.AT_RISK
    if days <= max_missed_days + 1:
        return StreakStatus.SHIELDABLE
    return StreakStatus.LOST


def record_watch_day(streak: WatchStreak, today: date) -> WatchStreak:
    """Count ``today`` as a watched day. Watching twice on one day is a no-op."""
    today_str = today.isoformat()
    last = streak.last_watch_date
    if last == today_str:
        return streak

    current = streak.current_streak
    longest = streak.longest_streak
    history = list(streak.streaks)

    if last == (today - timedelta(days=1)).isoformat():
        current += 1
    elif last:
        ended = _parse_day(last)
        if current > 1 and ended is not None:
            start = ended - timedelta(days=current - 1)
            history.append(StreakRun(start_date=start.isoformat(), end_date=last, length=current))
            history = history[-MAX_STREAK_HISTORY:]
        current = 1
    else:
        current = 1

    return streak.model_copy(update={
        "current_streak": current,
        "longest_streak": max(longest, current),
        "last_watch_date": today_str,
        "streaks": history,
    })
