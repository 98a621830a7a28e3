"""
Lesson content schemas for Bloom.

Defines Pydantic models for:
- Lessons and their ordered content sequence
- Content payloads (rich pages, questions, legacy text/image/interactive)
- The decoders that turn API JSON into these models

The block-based page is the canonical format. The flat text/image/interactive
payloads are kept as legacy variants so older lessons still open.
"""

import logging
from collections.abc import Mapping
from typing import Any, Literal, Optional, Union

from pydantic import Field, ValidationError, field_validator

from .base import WireModel, decode_record
from .blocks import BLOCK_CLASSES, ContentBlock, block_plain_text, decode_blocks
from .errors import DecodeError, require_identity
from .segments import TextSegment, flatten, segments_or_text

logger = logging.getLogger(__name__)

LESSON_IDENTITY = ("id", "level_id", "order_index")
CONTENT_IDENTITY = ("id", "lesson_id", "order_index")


# -----------------------------------------------------------------------------
# Content payloads
# -----------------------------------------------------------------------------

class PageContent(WireModel):
    """A rich page composed of blocks."""
    type: Literal["page"] = "page"
    blocks: list[ContentBlock]

    @field_validator("blocks", mode="before")
    @classmethod
    def decode_each_block(cls, v):
        return decode_blocks(v)


class QuestionContent(WireModel):
    """
    Multiple-choice question. The plain strings are always present; the
    *_segments fields carry the optional rich form.
    """
    type: Literal["question"] = "question"
    question: str
    question_segments: Optional[list[TextSegment]] = Field(default=None, alias="questionSegments")
    options: list[str]
    option_segments: Optional[list[list[TextSegment]]] = Field(default=None, alias="optionSegments")
    correct_index: int = Field(alias="correctIndex")
    explanation: Optional[str] = None
    explanation_segments: Optional[list[TextSegment]] = Field(default=None, alias="explanationSegments")

    def is_correct(self, option_index: int) -> bool:
        return option_index == self.correct_index

    def rich_question(self) -> list[TextSegment]:
        return segments_or_text(self.question_segments, self.question)

    def rich_option(self, option_index: int) -> list[TextSegment]:
        rich = None
        if self.option_segments and option_index < len(self.option_segments):
            rich = self.option_segments[option_index]
        plain = self.options[option_index] if option_index < len(self.options) else None
        return segments_or_text(rich, plain)

    def rich_explanation(self) -> list[TextSegment]:
        return segments_or_text(self.explanation_segments, self.explanation)


class TextFormatting(WireModel):
    bold: Optional[bool] = None
    superscript: Optional[bool] = None


class TextContent(WireModel):
    """Legacy flat text slide. Also the placeholder for undecodable payloads."""
    type: Literal["text"] = "text"
    text: str
    formatting: Optional[TextFormatting] = None


class LegacyImageContent(WireModel):
    type: Literal["image"] = "image"
    url: str
    caption: Optional[str] = None


class LegacyInteractiveContent(WireModel):
    type: Literal["interactive"] = "interactive"
    component_id: str = Field(alias="componentId")
    props: Optional[dict[str, str]] = None


ContentData = Union[
    PageContent,
    QuestionContent,
    TextContent,
    LegacyImageContent,
    LegacyInteractiveContent,
]

# Trial order resolves payloads that would fit more than one shape
CONTENT_CANDIDATES: tuple[tuple[str, type[WireModel]], ...] = (
    ("page", PageContent),
    ("question", QuestionContent),
    ("text", TextContent),
    ("image", LegacyImageContent),
    ("interactive", LegacyInteractiveContent),
)

CONTENT_CLASSES = tuple(candidate for _, candidate in CONTENT_CANDIDATES)


def empty_text_content() -> TextContent:
    return TextContent(text="")


def decode_content_data(raw: Any) -> ContentData:
    """
    Decode a content payload by ordered probing.

    The first candidate whose literal matches the payload's embedded `type`
    and whose shape validates wins. Never raises: anything else becomes an
    empty text payload.
    """
    if isinstance(raw, CONTENT_CLASSES):
        return raw
    if isinstance(raw, Mapping):
        embedded_type = raw.get("type")
        for literal, candidate in CONTENT_CANDIDATES:
            if embedded_type != literal:
                continue
            try:
                return candidate.model_validate(dict(raw))
            except ValidationError as exc:
                logger.warning(
                    "Content payload of type %r does not fit its shape (%d error(s))",
                    literal, exc.error_count(),
                )
    logger.debug("Unrecognised content payload replaced by empty text")
    return empty_text_content()


def encode_content_data(data: ContentData) -> dict[str, Any]:
    """Serialise a content payload back to its wire JSON."""
    return data.to_wire()


def plain_text(item: Union[ContentData, ContentBlock]) -> str:
    """Plain-text rendering of a content payload or a single block."""
    if isinstance(item, BLOCK_CLASSES):
        return block_plain_text(item)
    if isinstance(item, PageContent):
        parts = (block_plain_text(block) for block in item.blocks)
        return "\n".join(part for part in parts if part)
    if isinstance(item, QuestionContent):
        lines = [flatten(item.rich_question())]
        lines.extend(flatten(item.rich_option(i)) for i in range(len(item.options)))
        return "\n".join(lines)
    if isinstance(item, TextContent):
        return item.text
    if isinstance(item, LegacyImageContent):
        return item.caption or ""
    return ""


# -----------------------------------------------------------------------------
# Lessons
# -----------------------------------------------------------------------------

class LessonContent(WireModel):
    """One slide of a lesson."""
    id: str
    lesson_id: str
    order_index: int
    content_type: str = "text"
    content_data: ContentData = Field(default_factory=empty_text_content)

    @field_validator("content_data", mode="before")
    @classmethod
    def decode_payload(cls, v):
        return decode_content_data(v)

    @property
    def is_question(self) -> bool:
        return isinstance(self.content_data, QuestionContent)


class Lesson(WireModel):
    id: str
    level_id: str
    title: str = ""
    icon_url: Optional[str] = None
    kind: str = Field(default="", alias="type")  # "exercise" or a lesson kind
    order_index: int

    @property
    def is_exercise(self) -> bool:
        return self.kind == "exercise"


class LessonWithContent(Lesson):
    content: list[LessonContent] = []

    @property
    def content_count(self) -> int:
        return len(self.content)


def decode_lesson_summary(raw: Any) -> Lesson:
    """Decode a lesson without its content (level listings)."""
    return decode_record(Lesson, raw, LESSON_IDENTITY)


def placeholder_content(lesson_id: str, position: int) -> LessonContent:
    """Stand-in for a content item that could not be decoded."""
    return LessonContent(
        id=f"{lesson_id}:placeholder:{position}",
        lesson_id=lesson_id,
        order_index=position,
        content_type="text",
        content_data=empty_text_content(),
    )


def decode_lesson_content(raw: Any) -> LessonContent:
    """
    Decode one content item.

    Raises:
        MissingIdentityError: If id, lesson_id or order_index is absent
        DecodeError: If the item is not an object or its identity fields have the wrong type
    """
    if not isinstance(raw, Mapping):
        raise DecodeError("LessonContent payload must be a JSON object")
    require_identity(raw, CONTENT_IDENTITY, "LessonContent")
    try:
        return LessonContent.model_validate(dict(raw))
    except ValidationError as exc:
        raise DecodeError(f"Malformed LessonContent {raw.get('id')!r}: {exc.error_count()} error(s)") from exc


def decode_lesson(raw: Any) -> LessonWithContent:
    """
    Decode a lesson with its content sequence.

    Broken content items are replaced by placeholders so one bad slide never
    loses the lesson.

    Raises:
        MissingIdentityError: If the lesson's id, level_id or order_index is absent
        DecodeError: If the payload is not an object or a lesson field has the wrong type
    """
    if not isinstance(raw, Mapping):
        raise DecodeError("Lesson payload must be a JSON object")
    require_identity(raw, LESSON_IDENTITY, "Lesson")
    lesson_id = str(raw["id"])

    items = raw.get("content")
    if not isinstance(items, list):
        items = []

    content = []
    for position, item in enumerate(items):
        try:
            content.append(decode_lesson_content(item))
        except DecodeError as exc:
            logger.warning("Lesson %s item %d replaced by placeholder: %s", lesson_id, position, exc)
            content.append(placeholder_content(lesson_id, position))

    fields = {key: value for key, value in raw.items() if key != "content"}
    try:
        return LessonWithContent.model_validate({**fields, "content": content})
    except ValidationError as exc:
        raise DecodeError(f"Malformed Lesson {lesson_id!r}: {exc.error_count()} error(s)") from exc
