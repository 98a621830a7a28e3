"""
Bloom Schemas - Pydantic models for the learning client core.

This module exports all schema classes for:
- Segments: inline rich text runs
- Blocks: the closed set of page blocks
- Lesson: lessons, content payloads and their decoders
- Course: categories, courses, levels
- Progress: completion records and aggregate stats
- User: account decode targets
"""

# Errors
from .errors import (
    DecodeError,
    MissingIdentityError,
    require_identity,
)

# Segment schemas
from .segments import (
    TextSegment,
    SEGMENT_COLORS,
    flatten,
    segments_or_text,
)

# Block schemas
from .blocks import (
    HeadingBlock,
    ParagraphBlock,
    ImageBlock,
    MathBlock,
    CalloutBlock,
    BulletListBlock,
    AnimationBlock,
    InteractiveBlock,
    SpacerBlock,
    DividerBlock,
    ContentBlock,
    BLOCK_TYPES,
    decode_block,
    encode_block,
    block_plain_text,
)

# Lesson schemas
from .lesson import (
    PageContent,
    QuestionContent,
    TextFormatting,
    TextContent,
    LegacyImageContent,
    LegacyInteractiveContent,
    ContentData,
    CONTENT_CANDIDATES,
    LessonContent,
    Lesson,
    LessonWithContent,
    decode_content_data,
    encode_content_data,
    decode_lesson_content,
    decode_lesson,
    decode_lesson_summary,
    plain_text,
)

# Course schemas
from .course import (
    Category,
    Course,
    Level,
    CourseWithLevels,
    decode_category,
    decode_course,
    decode_course_with_levels,
)

# Progress schemas
from .progress import (
    UserProgress,
    ProgressUpdate,
    Streak,
    UserStats,
    decode_progress,
    decode_stats,
)

# User schemas
from .user import (
    User,
    AuthResponse,
    decode_user,
)

__all__ = [
    # Errors
    'DecodeError',
    'MissingIdentityError',
    'require_identity',
    # Segments
    'TextSegment',
    'SEGMENT_COLORS',
    'flatten',
    'segments_or_text',
    # Blocks
    'HeadingBlock',
    'ParagraphBlock',
    'ImageBlock',
    'MathBlock',
    'CalloutBlock',
    'BulletListBlock',
    'AnimationBlock',
    'InteractiveBlock',
    'SpacerBlock',
    'DividerBlock',
    'ContentBlock',
    'BLOCK_TYPES',
    'decode_block',
    'encode_block',
    'block_plain_text',
    # Lesson
    'PageContent',
    'QuestionContent',
    'TextFormatting',
    'TextContent',
    'LegacyImageContent',
    'LegacyInteractiveContent',
    'ContentData',
    'CONTENT_CANDIDATES',
    'LessonContent',
    'Lesson',
    'LessonWithContent',
    'decode_content_data',
    'encode_content_data',
    'decode_lesson_content',
    'decode_lesson',
    'decode_lesson_summary',
    'plain_text',
    # Course
    'Category',
    'Course',
    'Level',
    'CourseWithLevels',
    'decode_category',
    'decode_course',
    'decode_course_with_levels',
    # Progress
    'UserProgress',
    'ProgressUpdate',
    'Streak',
    'UserStats',
    'decode_progress',
    'decode_stats',
    # User
    'User',
    'AuthResponse',
    'decode_user',
]
