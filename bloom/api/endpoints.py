"""
API endpoint table.

Paths are relative to the gateway base URL (which already includes `/api`).
"""

from dataclasses import dataclass
from urllib.parse import quote


@dataclass(frozen=True)
class Endpoint:
    path: str
    method: str = "GET"
    requires_auth: bool = False

    @property
    def label(self) -> str:
        return f"{self.method} {self.path}"


def _segment(value: str) -> str:
    return quote(str(value), safe="")


# Courses
CATEGORIES = Endpoint("/courses/categories")
COURSES = Endpoint("/courses")
RECOMMENDED_COURSES = Endpoint("/courses/recommended")


def course(course_id: str) -> Endpoint:
    return Endpoint(f"/courses/{_segment(course_id)}")


def lesson(lesson_id: str) -> Endpoint:
    return Endpoint(f"/courses/lessons/{_segment(lesson_id)}")


def level_lessons(level_id: str) -> Endpoint:
    return Endpoint(f"/courses/levels/{_segment(level_id)}/lessons")


# Progress
USER_STATS = Endpoint("/progress/stats", requires_auth=True)
UPDATE_PROGRESS = Endpoint("/progress/update", method="POST", requires_auth=True)
CONSUME_ENERGY = Endpoint("/progress/energy/consume", method="POST", requires_auth=True)


def course_progress(course_id: str) -> Endpoint:
    return Endpoint(f"/progress/course/{_segment(course_id)}", requires_auth=True)


def lesson_progress(lesson_id: str) -> Endpoint:
    return Endpoint(f"/progress/lesson/{_segment(lesson_id)}", requires_auth=True)
