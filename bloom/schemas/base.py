"""
Shared base for Bloom wire models.

Every model keeps unknown-but-present fields so that payloads authored by a
newer server survive a decode/encode cycle, and serialises back under the
wire names (snake_case for reference data, camelCase inside content).
"""

import logging
from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    SerializationInfo,
    SerializerFunctionWrapHandler,
    ValidationError,
    model_serializer,
)

from .errors import DecodeError, require_identity

logger = logging.getLogger(__name__)

M = TypeVar("M", bound="WireModel")


class WireModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    @model_serializer(mode="wrap")
    def keep_null_extras(self, handler: SerializerFunctionWrapHandler, info: SerializationInfo):
        data = handler(self)
        # exclude_none is meant for unset optional fields; unknown fields go back as received
        if info.exclude_none and self.__pydantic_extra__ and isinstance(data, dict):
            for key, value in self.__pydantic_extra__.items():
                if value is None:
                    data[key] = None
        return data

    def to_wire(self) -> dict[str, Any]:
        """Serialise to the JSON shape the API speaks."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


def decode_record(model: type[M], raw: Any, identity: tuple[str, ...]) -> M:
    """
    Decode a reference-data record.

    Args:
        model: Target model class
        raw: Parsed JSON value
        identity: Wire fields that must be present

    Raises:
        MissingIdentityError: If an identity field is absent
        DecodeError: If the payload is not an object or has the wrong shape
    """
    if not isinstance(raw, Mapping):
        raise DecodeError(f"{model.__name__} payload must be a JSON object")
    require_identity(raw, identity, model.__name__)
    try:
        return model.model_validate(dict(raw))
    except ValidationError as exc:
        logger.debug("Rejected %s payload: %s", model.__name__, exc)
        raise DecodeError(
            f"Malformed {model.__name__} {raw.get('id')!r}: {exc.error_count()} error(s)"
        ) from exc
