"""
Course catalogue schemas for Bloom.

Defines Pydantic models for the read-only reference data a learner browses:
- Categories
- Courses, with or without their level tree
- Levels holding ordered lessons
"""

from typing import Any, Iterator, Optional

from pydantic import model_validator

from .base import WireModel, decode_record
from .lesson import Lesson

CATEGORY_IDENTITY = ("id", "order_index")
COURSE_IDENTITY = ("id", "category_id", "order_index")
LEVEL_IDENTITY = ("id", "course_id", "order_index")


class Category(WireModel):
    id: str
    name: str = ""
    slug: str = ""
    icon_url: Optional[str] = None
    order_index: int


class Course(WireModel):
    id: str
    category_id: str
    title: str = ""
    description: Optional[str] = None
    icon_url: Optional[str] = None
    theme_color: Optional[str] = None  # semantic token, resolved by the UI
    lesson_count: int = 0
    exercise_count: int = 0
    is_recommended: bool = False
    collaborators: Optional[list[str]] = None
    order_index: int


class Level(WireModel):
    """A group of lessons, kept sorted by order_index."""
    id: str
    course_id: str
    title: str = ""
    order_index: int
    lessons: list[Lesson] = []

    @model_validator(mode="after")
    def order_lessons(self):
        self.lessons.sort(key=lambda lesson: lesson.order_index)
        return self


class CourseWithLevels(Course):
    """A course with its level tree, levels kept sorted by order_index."""
    levels: list[Level] = []

    @model_validator(mode="after")
    def order_levels(self):
        self.levels.sort(key=lambda level: level.order_index)
        return self

    def iter_lessons(self) -> Iterator[Lesson]:
        """Yield every lesson in course order."""
        for level in self.levels:
            yield from level.lessons

    @property
    def first_lesson_id(self) -> Optional[str]:
        first = next(self.iter_lessons(), None)
        return first.id if first else None


def decode_category(raw: Any) -> Category:
    return decode_record(Category, raw, CATEGORY_IDENTITY)


def decode_course(raw: Any) -> Course:
    return decode_record(Course, raw, COURSE_IDENTITY)


def decode_course_with_levels(raw: Any) -> CourseWithLevels:
    return decode_record(CourseWithLevels, raw, COURSE_IDENTITY)
