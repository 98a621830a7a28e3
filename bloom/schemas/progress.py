"""
Progress schemas for Bloom.

Progress is owned by the server. The client reads completion records and
aggregate stats, and submits deltas; it never merges or reconciles them.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from .base import WireModel, decode_record

PROGRESS_IDENTITY = ("id", "lesson_id")


class UserProgress(WireModel):
    """Completion record; at most one per (user, lesson)."""
    id: str
    user_id: str = ""
    lesson_id: str
    completed: bool = False
    score: Optional[int] = None
    completed_at: Optional[datetime] = None


class ProgressUpdate(WireModel):
    """Body of an update-progress request."""
    lesson_id: str = Field(alias="lessonId")
    completed: bool = True
    score: Optional[int] = None


class Streak(WireModel):
    current_streak: int = Field(default=0, alias="currentStreak")
    longest_streak: int = Field(default=0, alias="longestStreak")
    last_activity_date: Optional[str] = Field(default=None, alias="lastActivityDate")


class UserStats(WireModel):
    streak: Optional[Streak] = None
    energy: int = Field(ge=0)
    completed_lessons: int = Field(default=0, alias="completedLessons")
    total_score: int = Field(default=0, alias="totalScore")


def decode_progress(raw: Any) -> UserProgress:
    return decode_record(UserProgress, raw, PROGRESS_IDENTITY)


def decode_stats(raw: Any) -> UserStats:
    return decode_record(UserStats, raw, ())
