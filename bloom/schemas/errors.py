"""Decode errors raised by the Bloom content schemas."""

from collections.abc import Iterable, Mapping
from typing import Any


class DecodeError(ValueError):
    """A payload could not be turned into a model."""


class MissingIdentityError(DecodeError):
    """
    A payload lacks one of the fields that identify or order it
    (id, parent id, order_index).

    Attributes:
        model: Name of the model being decoded
        missing: Wire names of the absent fields
    """

    def __init__(self, model: str, missing: list[str]):
        self.model = model
        self.missing = missing
        super().__init__(f"{model} payload is missing identity field(s): {', '.join(missing)}")


def require_identity(payload: Mapping[str, Any], fields: Iterable[str], model: str) -> None:
    """Raise MissingIdentityError if any of `fields` is absent or null."""
    missing = [name for name in fields if payload.get(name) is None]
    if missing:
        raise MissingIdentityError(model, missing)
