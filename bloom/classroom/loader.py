"""
Session loaders - Fetch what a view needs through the API gateway.

Provides:
- Course detail: course tree, progress snapshot, display stats
- Lesson playback session
- Catalog (categories and their courses) and the home feed
- Fire-and-forget progress and energy writes

Primary content (courses, lessons) failing to load propagates as FetchError.
Progress and stats are best-effort: a learner who is signed out, or whose
progress call fails, sees the course as if they had not started it.
"""

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import Optional, TypeVar

from bloom.api import ApiGateway, FetchError
from bloom.schemas import Category, Course, CourseWithLevels, UserProgress

from .navigator import CourseNavigator, LockState
from .player import LessonPlayer
from .stats import DisplayStats, derive_display_stats

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class CourseDetail:
    """Everything the course detail view shows."""
    course: CourseWithLevels
    navigator: CourseNavigator
    stats: DisplayStats = field(default_factory=DisplayStats)

    @property
    def next_lesson_id(self) -> Optional[str]:
        return self.navigator.get_next_actionable_lesson_id()

    def lock_state(self, level_index: int, lesson_index: int) -> LockState:
        return self.navigator.lock_state_at(level_index, lesson_index)


@dataclass
class LessonSession:
    player: LessonPlayer
    energy: int


@dataclass
class Catalog:
    categories: list[Category]
    selected_category: Optional[Category]
    courses: list[Course]


@dataclass
class HomeFeed:
    recommended_courses: list[Course]
    selected_course: Optional[CourseWithLevels]

    @property
    def first_lesson_id(self) -> Optional[str]:
        return self.selected_course.first_lesson_id if self.selected_course else None


async def _soft_fetch(call: Awaitable[T], what: str) -> Optional[T]:
    """Await a best-effort call; FetchError is logged and becomes None."""
    try:
        return await call
    except FetchError as e:
        logger.warning("%s not available: %s", what, e)
        return None


# -----------------------------------------------------------------------------
# Course detail
# -----------------------------------------------------------------------------

async def load_course_detail(gateway: ApiGateway, course_id: str) -> CourseDetail:
    """
    Load a course with the learner's progress and stats.

    Raises:
        FetchError: If the course itself cannot be loaded
    """
    course = await gateway.get_course(course_id)

    progress, stats = await asyncio.gather(
        _soft_fetch(gateway.get_course_progress(course_id), "Progress"),
        _soft_fetch(gateway.get_user_stats(), "Stats"),
    )

    return CourseDetail(
        course=course,
        navigator=CourseNavigator(course, progress or []),
        stats=derive_display_stats(stats),
    )


# -----------------------------------------------------------------------------
# Lesson playback
# -----------------------------------------------------------------------------

async def load_lesson(gateway: ApiGateway, lesson_id: str) -> LessonSession:
    """
    Load a lesson for playback.

    Raises:
        FetchError: If the lesson itself cannot be loaded
    """
    lesson = await gateway.get_lesson(lesson_id)
    stats = await _soft_fetch(gateway.get_user_stats(), "Stats")
    return LessonSession(
        player=LessonPlayer(lesson),
        energy=derive_display_stats(stats).energy,
    )


async def complete_lesson(gateway: ApiGateway, lesson_id: str, score: Optional[int] = 100) -> Optional[UserProgress]:
    """Mark a lesson completed. Returns the server's record, or None if the write failed."""
    return await _soft_fetch(
        gateway.update_progress(lesson_id, completed=True, score=score),
        f"Progress update for {lesson_id}",
    )


async def spend_energy(gateway: ApiGateway, amount: int = 1) -> Optional[int]:
    """Consume energy. Returns the server's new value, or None if the write failed."""
    return await _soft_fetch(gateway.consume_energy(amount), "Energy")


async def refresh_stats(gateway: ApiGateway) -> DisplayStats:
    """Re-read stats after a write; defaults if they cannot be fetched."""
    return derive_display_stats(await _soft_fetch(gateway.get_user_stats(), "Stats"))


# -----------------------------------------------------------------------------
# Catalog and home
# -----------------------------------------------------------------------------

async def load_catalog(gateway: ApiGateway, category_id: Optional[str] = None) -> Catalog:
    """
    Load categories and the courses of the selected one (the first by default).

    Raises:
        FetchError: If categories or courses cannot be loaded
    """
    categories, courses = await asyncio.gather(
        gateway.get_categories(),
        gateway.get_courses(),
    )
    categories = sorted(categories, key=lambda category: category.order_index)

    selected = None
    if category_id is not None:
        selected = next((c for c in categories if c.id == category_id), None)
    elif categories:
        selected = categories[0]

    if selected is None:
        if category_id is not None:
            logger.warning("Unknown category %s", category_id)
        courses = []
    else:
        courses = [course for course in courses if course.category_id == selected.id]
    courses = sorted(courses, key=lambda course: course.order_index)

    return Catalog(categories=categories, selected_category=selected, courses=courses)


async def load_home(gateway: ApiGateway, selected_index: int = 0) -> HomeFeed:
    """
    Load recommended courses, then the level tree of the selected one.

    Raises:
        FetchError: If either call fails
    """
    recommended = await gateway.get_recommended_courses()
    selected = None
    if 0 <= selected_index < len(recommended):
        selected = await gateway.get_course(recommended[selected_index].id)
    return HomeFeed(recommended_courses=recommended, selected_course=selected)
