"""
Streak-based review interval policy.

A correct answer extends the streak and grows the interval along a fixed
table (1, 3, 7 days, then doubling from 7, capped at 30). An incorrect answer
resets the streak and brings the card back tomorrow.
"""
from __future__ import annotations

from datetime import date, timedelta

from studydeck.models.flashcard import Flashcard, ReviewUpdate

MAX_INTERVAL_DAYS = 30
_STEP_INTERVALS = {1: 1, 2: 3, 3: 7}


def next_interval(streak: int, was_correct: bool) -> tuple[int, int]:
    """
    Compute the streak and interval that follow an answer.

    Returns (new_streak, interval_days).
    """
    if streak < 0:
        raise ValueError(f"streak must be non-negative, got {streak}")

    if not was_correct:
        return 0, 1

    new_streak = streak + 1
    if new_streak in _STEP_INTERVALS:
        return new_streak, _STEP_INTERVALS[new_streak]
    return new_streak, min(MAX_INTERVAL_DAYS, 7 * 2 ** (new_streak - 3))


def next_review_date(today: date, interval_days: int) -> date:
    return today + timedelta(days=interval_days)


def schedule_answer(
    card: Flashcard, was_correct: bool, today: date
) -> tuple[ReviewUpdate, int]:
    """
    Build the store update for answering ``card``.

    Returns (update, interval_days). Does not touch ``card``.
    """
    new_streak, interval_days = next_interval(card.correct_streak, was_correct)
    update = ReviewUpdate(
        correct_streak=new_streak,
        review_count=card.review_count + 1,
        next_review=next_review_date(today, interval_days),
    )
    return update, interval_days
