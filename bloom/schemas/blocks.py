"""
Content block schemas for Bloom lesson pages.

A page is an ordered list of blocks. Each block names its kind in a `type`
field and blocks are mutually exclusive, so decoding is a single dispatch on
that field. Anything the dispatch cannot place becomes a divider, which
renders as a visually inert rule:

- unknown or missing `type`
- a non-object payload
- a known `type` whose fields do not fit its shape
"""

import logging
from collections.abc import Mapping
from typing import Any, Literal, Optional, Union

from pydantic import Field, ValidationError

from .base import WireModel
from .segments import TextSegment, flatten

logger = logging.getLogger(__name__)

IMAGE_STYLES = ("full", "inline", "icon")
CALLOUT_STYLES = ("info", "tip", "warning", "example")
SPACER_SIZES = ("sm", "md", "lg")


# -----------------------------------------------------------------------------
# Block types
# -----------------------------------------------------------------------------

class HeadingBlock(WireModel):
    type: Literal["heading"] = "heading"
    segments: list[TextSegment]
    level: Optional[int] = None


class ParagraphBlock(WireModel):
    type: Literal["paragraph"] = "paragraph"
    segments: list[TextSegment]


class ImageBlock(WireModel):
    type: Literal["image"] = "image"
    src: str
    alt: Optional[str] = None
    caption: Optional[str] = None
    style: Optional[str] = None  # one of IMAGE_STYLES


class MathBlock(WireModel):
    type: Literal["math"] = "math"
    latex: str
    caption: Optional[str] = None


class CalloutBlock(WireModel):
    type: Literal["callout"] = "callout"
    style: str  # one of CALLOUT_STYLES
    title: Optional[str] = None
    segments: list[TextSegment]


class BulletListBlock(WireModel):
    """Each item is its own list of segments."""
    type: Literal["bulletList"] = "bulletList"
    items: list[list[TextSegment]]


class AnimationBlock(WireModel):
    type: Literal["animation"] = "animation"
    src: str
    autoplay: Optional[bool] = None
    loop: Optional[bool] = None
    caption: Optional[str] = None


class InteractiveBlock(WireModel):
    """Embedded widget; props are passed to the component untouched."""
    type: Literal["interactive"] = "interactive"
    component_id: str = Field(alias="componentId")
    props: Optional[dict[str, Any]] = None


class SpacerBlock(WireModel):
    type: Literal["spacer"] = "spacer"
    size: Optional[str] = None  # one of SPACER_SIZES


class DividerBlock(WireModel):
    type: Literal["divider"] = "divider"


ContentBlock = Union[
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
]

BLOCK_TYPES: dict[str, type[WireModel]] = {
    "heading": HeadingBlock,
    "paragraph": ParagraphBlock,
    "image": ImageBlock,
    "math": MathBlock,
    "callout": CalloutBlock,
    "bulletList": BulletListBlock,
    "animation": AnimationBlock,
    "interactive": InteractiveBlock,
    "spacer": SpacerBlock,
    "divider": DividerBlock,
}

BLOCK_CLASSES = tuple(BLOCK_TYPES.values())


# -----------------------------------------------------------------------------
# Decoding and encoding
# -----------------------------------------------------------------------------

def decode_block(raw: Any) -> ContentBlock:
    """Decode one block payload. Never raises."""
    if isinstance(raw, BLOCK_CLASSES):
        return raw
    if not isinstance(raw, Mapping):
        logger.debug("Non-object block payload %r decoded as divider", type(raw).__name__)
        return DividerBlock()

    block_type = raw.get("type")
    block_cls = BLOCK_TYPES.get(block_type) if isinstance(block_type, str) else None
    if block_cls is None:
        logger.debug("Unknown block type %r decoded as divider", block_type)
        return DividerBlock()

    try:
        return block_cls.model_validate(dict(raw))
    except ValidationError as exc:
        logger.warning("Malformed %s block decoded as divider (%d error(s))", block_type, exc.error_count())
        return DividerBlock()


def decode_blocks(raw: Any) -> Any:
    """Decode a list of block payloads; non-lists are passed through for validation to reject."""
    if not isinstance(raw, list):
        return raw
    return [decode_block(item) for item in raw]


def encode_block(block: ContentBlock) -> dict[str, Any]:
    """Serialise a block back to its wire JSON."""
    return block.to_wire()


def block_plain_text(block: ContentBlock) -> str:
    """Plain-text rendering of a block for accessibility and search."""
    if isinstance(block, (HeadingBlock, ParagraphBlock)):
        return flatten(block.segments)
    if isinstance(block, CalloutBlock):
        body = flatten(block.segments)
        return f"{block.title}\n{body}" if block.title else body
    if isinstance(block, BulletListBlock):
        return "\n".join(flatten(item) for item in block.items)
    if isinstance(block, ImageBlock):
        return block.alt or block.caption or ""
    if isinstance(block, MathBlock):
        return block.caption or block.latex
    if isinstance(block, AnimationBlock):
        return block.caption or ""
    return ""
