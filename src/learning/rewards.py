"""
Reward and streak policy.

Pure functions only: the session engine feeds them its terminal state, the activity
recorder feeds them the profile it just read.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

QUIZ_BASE_POINTS = 10
QUIZ_PERFECT_BONUS = 5
FLASHCARDS_POINTS = 5
COMIC_POINTS = 15
BRIEF_POINTS = 8

GAME_BASE_POINTS = 10
GAME_TIME_DIVISOR = 3
GAME_STREAK_CAP = 5
# Nominal per-item maximum used by the accuracy display.
GAME_ITEM_NOMINAL = 15


def quiz_points(correct: int, total: int) -> int:
    return QUIZ_BASE_POINTS + (QUIZ_PERFECT_BONUS if correct == total else 0)


def game_item_points(time_left: int, streak_before: int) -> int:
    """Points for one correctly answered game item."""
    return GAME_BASE_POINTS + max(time_left, 0) // GAME_TIME_DIVISOR + min(max(streak_before, 0), GAME_STREAK_CAP)


def game_accuracy(score: int, items: int) -> int:
    """
    Reward-weighted "accuracy" shown on the game results screen.
    Not a correct/incorrect ratio: score over items * 15, rounded half up.
    """
    if items <= 0:
        return 0
    return math.floor(100 * score / (items * GAME_ITEM_NOMINAL) + 0.5)


def next_streak_days(last_activity: Optional[date], today: date, current: int) -> int:
    """Day-granularity streak: +1 after yesterday, unchanged for today, otherwise restart at 1."""
    if last_activity == today - timedelta(days=1):
        return current + 1
    if last_activity == today:
        return current
    return 1


@dataclass(frozen=True)
class ProfileUpdate:
    total_points: int
    current_streak: int
    longest_streak: int
    last_activity_date: date


def apply_completion(
    *,
    total_points: int,
    current_streak: int,
    longest_streak: int,
    last_activity_date: Optional[date],
    points: int,
    today: date,
) -> ProfileUpdate:
    """Points and streak derived from the same read of the profile."""
    streak = next_streak_days(last_activity_date, today, current_streak or 0)
    return ProfileUpdate(
        total_points=(total_points or 0) + points,
        current_streak=streak,
        longest_streak=max(longest_streak or 0, streak),
        last_activity_date=today,
    )
