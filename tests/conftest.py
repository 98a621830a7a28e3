"""Shared fixtures: API payloads shaped like the server's responses."""

import pytest

from bloom.schemas import (
    UserProgress,
    decode_course_with_levels,
    decode_lesson,
)


def make_course_payload(level_lessons: list[list[str]], course_id: str = "course_1") -> dict:
    """Course payload with one level per entry and the given lesson ids in order."""
    levels = []
    for level_idx, lesson_ids in enumerate(level_lessons):
        level_id = f"level_{level_idx + 1}"
        levels.append({
            "id": level_id,
            "course_id": course_id,
            "title": f"Level {level_idx + 1}",
            "order_index": level_idx,
            "lessons": [
                {
                    "id": lesson_id,
                    "level_id": level_id,
                    "title": lesson_id.replace("_", " ").title(),
                    "type": "lesson",
                    "order_index": lesson_idx,
                }
                for lesson_idx, lesson_id in enumerate(lesson_ids)
            ],
        })
    return {
        "id": course_id,
        "category_id": "cat_math",
        "title": "Foundational Math",
        "description": "Numbers, fractions and beyond",
        "theme_color": "blue",
        "lesson_count": sum(len(ids) for ids in level_lessons),
        "exercise_count": 0,
        "is_recommended": True,
        "order_index": 0,
        "levels": levels,
    }


def make_progress(*lesson_ids: str, completed: bool = True) -> list[UserProgress]:
    return [
        UserProgress(id=f"p_{lesson_id}", user_id="user_1", lesson_id=lesson_id, completed=completed)
        for lesson_id in lesson_ids
    ]


@pytest.fixture
def course_payload():
    """Two levels: [l1, l2], [l3]."""
    return make_course_payload([["l1", "l2"], ["l3"]])


@pytest.fixture
def course(course_payload):
    return decode_course_with_levels(course_payload)


@pytest.fixture
def lesson_payload():
    return {
        "id": "l1",
        "level_id": "level_1",
        "title": "Fractions",
        "icon_url": None,
        "type": "lesson",
        "order_index": 0,
        "content": [
            {
                "id": "c1",
                "lesson_id": "l1",
                "order_index": 0,
                "content_type": "page",
                "content_data": {
                    "type": "page",
                    "blocks": [
                        {"type": "heading", "level": 1, "segments": [{"text": "What is a fraction?"}]},
                        {"type": "paragraph", "segments": [
                            {"text": "A fraction is "},
                            {"text": "part", "bold": True, "color": "accent"},
                            {"text": " of a whole."},
                        ]},
                        {"type": "math", "latex": "\\frac{1}{2}", "caption": "One half"},
                    ],
                },
            },
            {
                "id": "c2",
                "lesson_id": "l1",
                "order_index": 1,
                "content_type": "question",
                "content_data": {
                    "type": "question",
                    "question": "Which is larger?",
                    "options": ["1/2", "1/3"],
                    "correctIndex": 0,
                    "explanation": "Halves are bigger than thirds.",
                },
            },
            {
                "id": "c3",
                "lesson_id": "l1",
                "order_index": 2,
                "content_type": "text",
                "content_data": {"type": "text", "text": "Well done!"},
            },
        ],
    }


@pytest.fixture
def lesson(lesson_payload):
    return decode_lesson(lesson_payload)
