"""
Bloom Classroom - Runtime components for progressing through courses.

This module provides:
- Navigator: lesson lock state and course navigation
- Stats: display values derived from server aggregates
- LessonPlayer: position within a lesson's content
- Loaders: gateway-backed loading for each view
"""

from .navigator import (
    CourseNavigator,
    LockState,
    NavigationLesson,
    NavigationLevel,
    index_progress,
    completed_lesson_ids,
    apply_progress_update,
    find_predecessor,
    lock_state,
    next_actionable_lesson,
)

from .stats import (
    DisplayStats,
    DEFAULT_ENERGY,
    derive_display_stats,
    course_completion,
)

from .player import LessonPlayer

from .loader import (
    CourseDetail,
    LessonSession,
    Catalog,
    HomeFeed,
    load_course_detail,
    load_lesson,
    complete_lesson,
    spend_energy,
    refresh_stats,
    load_catalog,
    load_home,
)

__all__ = [
    # Navigator
    "CourseNavigator",
    "LockState",
    "NavigationLesson",
    "NavigationLevel",
    "index_progress",
    "completed_lesson_ids",
    "apply_progress_update",
    "find_predecessor",
    "lock_state",
    "next_actionable_lesson",
    # Stats
    "DisplayStats",
    "DEFAULT_ENERGY",
    "derive_display_stats",
    "course_completion",
    # Player
    "LessonPlayer",
    # Loader
    "CourseDetail",
    "LessonSession",
    "Catalog",
    "HomeFeed",
    "load_course_detail",
    "load_lesson",
    "complete_lesson",
    "spend_energy",
    "refresh_stats",
    "load_catalog",
    "load_home",
]
