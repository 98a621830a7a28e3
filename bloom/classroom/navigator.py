"""
Navigator - Lesson unlocking, next-lesson selection, and navigation.

Provides:
- Per-lesson lock state from server-reported progress
- The next actionable lesson in a course
- Next/previous lesson navigation
- Course tree with status indicators

Unlocking is a strict chain: each lesson's only prerequisite is the lesson
before it in course order (the last lesson of the previous level for the
first lesson of a level). The first lesson of the course is always open.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from bloom.schemas import CourseWithLevels, Lesson, Level, UserProgress

logger = logging.getLogger(__name__)

ProgressRecords = Union[Iterable[UserProgress], Mapping[str, UserProgress], None]


class LockState(str, Enum):
    """Lesson lock state for UI display."""
    LOCKED = "locked"        # Predecessor not completed
    UNLOCKED = "unlocked"    # Can start
    COMPLETED = "completed"  # Finished


@dataclass
class NavigationLesson:
    """Lesson with navigation metadata."""
    lesson: Lesson
    level_index: int
    lesson_index: int
    state: LockState
    is_current: bool


@dataclass
class NavigationLevel:
    """Level with lessons and navigation metadata."""
    level: Level
    lessons: list[NavigationLesson]
    completed_count: int
    total_count: int


# -----------------------------------------------------------------------------
# Progress snapshots
# -----------------------------------------------------------------------------

def index_progress(progress: ProgressRecords) -> dict[str, UserProgress]:
    """Key records by lesson id; a later record for a lesson supersedes an earlier one."""
    if progress is None:
        return {}
    if isinstance(progress, Mapping):
        return dict(progress)
    index = {}
    for record in progress:
        index[record.lesson_id] = record
    return index


def completed_lesson_ids(progress: ProgressRecords) -> set[str]:
    return {
        lesson_id for lesson_id, record in index_progress(progress).items()
        if record.completed
    }


def apply_progress_update(progress: ProgressRecords, record: UserProgress) -> list[UserProgress]:
    """Return a new record list with `record` replacing any record for the same lesson."""
    index = index_progress(progress)
    index[record.lesson_id] = record
    return list(index.values())


# -----------------------------------------------------------------------------
# Chain walk
# -----------------------------------------------------------------------------

def find_predecessor(course: CourseWithLevels, level_index: int, lesson_index: int) -> Optional[Lesson]:
    """
    The lesson that must be completed before (level_index, lesson_index) opens.

    Returns None for the first lesson of the course, and for the first lesson
    of a level that follows an empty level.
    """
    if lesson_index > 0:
        return course.levels[level_index].lessons[lesson_index - 1]
    if level_index > 0:
        previous_level = course.levels[level_index - 1]
        if previous_level.lessons:
            return previous_level.lessons[-1]
        logger.warning(
            "Level %s has no lessons; lessons after it stay locked",
            previous_level.id,
        )
    return None


def _chain_state(
    course: Optional[CourseWithLevels],
    completed: set[str],
    level_index: int,
    lesson_index: int,
) -> LockState:
    if course is None:
        logger.warning("Lock state requested without a course")
        return LockState.LOCKED
    if not 0 <= level_index < len(course.levels):
        return LockState.LOCKED

    lessons = course.levels[level_index].lessons
    if not lessons:
        logger.warning("Level %s has no lessons", course.levels[level_index].id)
        return LockState.LOCKED
    if not 0 <= lesson_index < len(lessons):
        return LockState.LOCKED

    # If completed, it's completed
    if lessons[lesson_index].id in completed:
        return LockState.COMPLETED

    # The first lesson of the course is always open
    if level_index == 0 and lesson_index == 0:
        return LockState.UNLOCKED

    # A predecessor's state is COMPLETED exactly when its record is
    predecessor = find_predecessor(course, level_index, lesson_index)
    if predecessor is not None and predecessor.id in completed:
        return LockState.UNLOCKED
    return LockState.LOCKED


def lock_state(
    course: Optional[CourseWithLevels],
    progress: ProgressRecords,
    level_index: int,
    lesson_index: int,
) -> LockState:
    """
    Lock state of the lesson at (level_index, lesson_index).

    A completed record always reads as COMPLETED; the predecessor only
    decides between LOCKED and UNLOCKED.

    Anything that prevents finding a valid predecessor (no course, an empty
    level, an out-of-range position) yields LOCKED rather than an error.
    """
    return _chain_state(course, completed_lesson_ids(progress), level_index, lesson_index)


def next_actionable_lesson(course: Optional[CourseWithLevels], progress: ProgressRecords) -> Optional[str]:
    """
    ID of the first lesson in course order that is not completed.

    When every lesson is completed, the course's first lesson (review loop).
    None for a missing course or a course with no lessons.
    """
    if course is None:
        return None
    completed = completed_lesson_ids(progress)
    for lesson in course.iter_lessons():
        if lesson.id not in completed:
            return lesson.id
    return course.first_lesson_id


# -----------------------------------------------------------------------------
# Navigator
# -----------------------------------------------------------------------------

class CourseNavigator:
    """
    Navigate through one course with lock checking.

    Combines a decoded course (content) with one progress snapshot (user
    state). Both are owned by the viewing session that fetched them.
    """

    def __init__(self, course: Optional[CourseWithLevels], progress: ProgressRecords = None):
        """
        Initialize navigator.

        Args:
            course: Course with its level tree, or None if it failed to load
            progress: Completion records for this course (list or dict by lesson id)
        """
        self.course = course
        self._progress = index_progress(progress)
        self._lesson_order: list[str] = []
        self._positions: dict[str, tuple[int, int]] = {}
        self._refresh_lesson_order()

    def _refresh_lesson_order(self):
        """Build ordered list of lesson IDs and their (level, lesson) positions."""
        self._lesson_order = []
        self._positions = {}
        if self.course is None:
            return
        for level_index, level in enumerate(self.course.levels):
            for lesson_index, lesson in enumerate(level.lessons):
                self._lesson_order.append(lesson.id)
                self._positions[lesson.id] = (level_index, lesson_index)

    @property
    def total_lessons(self) -> int:
        """Total number of lessons."""
        return len(self._lesson_order)

    @property
    def progress(self) -> list[UserProgress]:
        """Current progress records, one per lesson."""
        return list(self._progress.values())

    # -------------------------------------------------------------------------
    # Progress
    # -------------------------------------------------------------------------

    def completed_lesson_ids(self) -> set[str]:
        return completed_lesson_ids(self._progress)

    def is_lesson_completed(self, lesson_id: str) -> bool:
        record = self._progress.get(lesson_id)
        return bool(record and record.completed)

    def apply_progress(self, record: UserProgress):
        """Fold a record returned by the server into the snapshot (replaces, never appends)."""
        self._progress = index_progress(apply_progress_update(self._progress, record))

    # -------------------------------------------------------------------------
    # Lock state
    # -------------------------------------------------------------------------

    def get_position(self, lesson_id: str) -> Optional[tuple[int, int]]:
        """(level_index, lesson_index) of a lesson, or None if not in this course."""
        return self._positions.get(lesson_id)

    def lock_state_at(self, level_index: int, lesson_index: int) -> LockState:
        return _chain_state(self.course, self.completed_lesson_ids(), level_index, lesson_index)

    def get_lock_state(self, lesson_id: str) -> LockState:
        """Lock state by lesson ID; lessons outside the course are LOCKED."""
        position = self.get_position(lesson_id)
        if position is None:
            return LockState.LOCKED
        return self.lock_state_at(*position)

    def is_lesson_available(self, lesson_id: str) -> bool:
        """Check if a lesson can be opened."""
        return self.get_lock_state(lesson_id) != LockState.LOCKED

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def get_first_lesson_id(self) -> Optional[str]:
        """Get the ID of the first lesson."""
        return self._lesson_order[0] if self._lesson_order else None

    def get_next_lesson_id(self, current_id: str) -> Optional[str]:
        """Get the ID of the next lesson in course order."""
        if current_id not in self._positions:
            return None
        current_idx = self._lesson_order.index(current_id)
        if current_idx + 1 >= len(self._lesson_order):
            return None
        return self._lesson_order[current_idx + 1]

    def get_previous_lesson_id(self, current_id: str) -> Optional[str]:
        """Get the ID of the previous lesson in course order."""
        if current_id not in self._positions:
            return None
        current_idx = self._lesson_order.index(current_id)
        if current_idx <= 0:
            return None
        return self._lesson_order[current_idx - 1]

    def get_next_actionable_lesson_id(self) -> Optional[str]:
        """First incomplete lesson, or the first lesson once everything is done."""
        return next_actionable_lesson(self.course, self._progress)

    # -------------------------------------------------------------------------
    # Course Tree
    # -------------------------------------------------------------------------

    def navigation_tree(self) -> list[NavigationLevel]:
        """
        Get the full course tree with navigation metadata.

        Returns list of levels with lessons, each annotated with:
        - Lock state
        - Whether it is the next actionable lesson
        """
        if self.course is None:
            return []

        completed = self.completed_lesson_ids()
        current_id = self.get_next_actionable_lesson_id()

        tree = []
        for level_index, level in enumerate(self.course.levels):
            nav_lessons = []
            completed_count = 0
            for lesson_index, lesson in enumerate(level.lessons):
                state = _chain_state(self.course, completed, level_index, lesson_index)
                if state == LockState.COMPLETED:
                    completed_count += 1
                nav_lessons.append(NavigationLesson(
                    lesson=lesson,
                    level_index=level_index,
                    lesson_index=lesson_index,
                    state=state,
                    is_current=lesson.id == current_id,
                ))

            tree.append(NavigationLevel(
                level=level,
                lessons=nav_lessons,
                completed_count=completed_count,
                total_count=len(level.lessons),
            ))

        return tree

    def get_status_indicator(self, lesson_id: str) -> str:
        """
        Get status indicator for list display.

        Returns:
            ✓ for completed
            → for the next actionable lesson
            ○ for unlocked
            ◌ for locked
        """
        state = self.get_lock_state(lesson_id)
        if state == LockState.COMPLETED:
            return "✓"
        if lesson_id == self.get_next_actionable_lesson_id() and state == LockState.UNLOCKED:
            return "→"
        if state == LockState.UNLOCKED:
            return "○"
        return "◌"

    # -------------------------------------------------------------------------
    # Progress Summary
    # -------------------------------------------------------------------------

    def progress_summary(self) -> dict:
        """Get progress summary for display."""
        completed = self.completed_lesson_ids()
        done = sum(1 for lesson_id in self._lesson_order if lesson_id in completed)

        level_stats = []
        for nav_level in self.navigation_tree():
            level_stats.append({
                "id": nav_level.level.id,
                "title": nav_level.level.title,
                "completed": nav_level.completed_count,
                "total": nav_level.total_count,
            })

        return {
            "total_lessons": self.total_lessons,
            "completed": done,
            "levels": level_stats,
            "next_lesson_id": self.get_next_actionable_lesson_id(),
        }
