"""
Display stats derived from server-reported aggregates.

Streak continuity and energy regeneration are computed by the server; the
client only projects the last values it received.
"""

from dataclasses import dataclass
from typing import Optional

from bloom.schemas import CourseWithLevels, UserStats

from .navigator import ProgressRecords, completed_lesson_ids

# Shown until the first successful stats fetch
DEFAULT_ENERGY = 5


@dataclass(frozen=True)
class DisplayStats:
    streak_count: int = 0
    energy: int = DEFAULT_ENERGY


def derive_display_stats(stats: Optional[UserStats]) -> DisplayStats:
    """Project raw stats to the values the UI shows; None means the fetch failed."""
    if stats is None:
        return DisplayStats()
    streak_count = stats.streak.current_streak if stats.streak else 0
    return DisplayStats(streak_count=streak_count, energy=stats.energy)


def course_completion(course: Optional[CourseWithLevels], progress: ProgressRecords) -> dict:
    """
    Get completion statistics for one course.

    Args:
        course: Course with its level tree
        progress: Completion records

    Returns:
        Dictionary with completion stats
    """
    lesson_ids = [lesson.id for lesson in course.iter_lessons()] if course else []
    completed = completed_lesson_ids(progress)
    done = sum(1 for lesson_id in lesson_ids if lesson_id in completed)
    total = len(lesson_ids)

    return {
        "total_lessons": total,
        "completed": done,
        "not_started": total - done,
        "completion_percent": round(done / total * 100, 1) if total > 0 else 0,
    }
