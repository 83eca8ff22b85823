"""Pet mood, derived for display only and never stored."""
from __future__ import annotations

from datetime import datetime
from enum import Enum

from watchpet.models.pet import Pet


class Mood(str, Enum):
    HAPPY = "happy"
    SAD = "sad"
    EXCITED = "excited"
    SLEEPY = "sleepy"
    HUNGRY = "hungry"
    PLAYFUL = "playful"
    FESTIVE = "festive"
    SCARED = "scared"
    LOVED = "loved"


MOOD_EMOJI: dict[Mood, str] = {
    Mood.HAPPY: "😊",
    Mood.SAD: "😢",
    Mood.EXCITED: "🤗",
    Mood.SLEEPY: "😴",
    Mood.HUNGRY: "🤤",
    Mood.PLAYFUL: "😄",
    Mood.FESTIVE: "🎉",
    Mood.SCARED: "😨",
    Mood.LOVED: "🥰",
}

# (start_hour, end_hour_exclusive, mood); anything else is sleepy
_DAY_PERIODS = [
    (6, 10, Mood.SLEEPY),
    (10, 14, Mood.PLAYFUL),
    (14, 17, Mood.HAPPY),
    (17, 20, Mood.EXCITED),  # prime time
    (20, 23, Mood.LOVED),
]


def mood_by_time_of_day(now: datetime) -> Mood:
    for start, end, mood in _DAY_PERIODS:
        if start <= now.hour < end:
            return mood
    return Mood.SLEEPY


def mood_by_holiday(now: datetime) -> Mood | None:
    month, day = now.month, now.day
    if month == 12 and 20 <= day <= 26:
        return Mood.FESTIVE
    if (month == 12 and day == 31) or (month == 1 and day == 1):
        return Mood.EXCITED
    if month == 2 and day == 14:
        return Mood.LOVED
    if month == 10 and day == 31:
        return Mood.SCARED
    if month == 4 and 1 <= day <= 10:
        return Mood.PLAYFUL
    return None


def calculate_mood(pet: Pet, now: datetime) -> Mood:
    """Death, then critical needs, then holidays, then time of day."""
    if not pet.is_alive:
        return Mood.SAD
    if pet.hunger > 80:
        return Mood.HUNGRY
    if pet.happiness < 20:
        return Mood.SAD
    holiday = mood_by_holiday(now)
    if holiday is not None:
        return holiday
    if pet.happiness > 80:
        return Mood.LOVED
    return mood_by_time_of_day(now)
