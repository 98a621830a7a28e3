"""
Bloom API - Async gateway to the course and progress service.

This module provides:
- ApiGateway: read courses/lessons/progress, write progress and energy
- FetchError and its subclasses for every failure mode
"""

from .client import ApiGateway
from .endpoints import Endpoint
from .exceptions import (
    FetchError,
    HTTPStatusError,
    UnauthorizedError,
    InvalidResponseError,
    ResponseDecodeError,
    NetworkError,
)

__all__ = [
    "ApiGateway",
    "Endpoint",
    "FetchError",
    "HTTPStatusError",
    "UnauthorizedError",
    "InvalidResponseError",
    "ResponseDecodeError",
    "NetworkError",
]
