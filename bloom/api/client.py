"""Async HTTP client for the Bloom API.

Every response is wrapped in an envelope:

    {"success": true, "data": {...}, "error": {"message": "..."}}

The gateway unwraps it, picks the payload key for the call ("course",
"progress", ...), and decodes it into the schema models. Failures of any
kind surface as FetchError subclasses; deciding which of them are fatal is
left to the caller.

Example:
    gateway = ApiGateway(base_url="http://localhost:3000/api", token=token)
    course = await gateway.get_course("course-1")
    progress = await gateway.get_course_progress("course-1")
"""

import asyncio
import json
import logging
from typing import Any, Callable, Optional, TypeVar

import aiohttp

from bloom.config import DEFAULT_API_URL, Settings
from bloom.schemas import (
    Category,
    Course,
    CourseWithLevels,
    DecodeError,
    Lesson,
    LessonWithContent,
    ProgressUpdate,
    UserProgress,
    UserStats,
    decode_category,
    decode_course,
    decode_course_with_levels,
    decode_lesson,
    decode_lesson_summary,
    decode_progress,
    decode_stats,
)

from . import endpoints
from .endpoints import Endpoint
from .exceptions import (
    HTTPStatusError,
    InvalidResponseError,
    NetworkError,
    ResponseDecodeError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ApiGateway:
    """Async HTTP client for the Bloom API.

    Attributes:
        base_url: Base URL of the API, including the `/api` prefix.
        token: Bearer token for calls that require auth, if signed in.
        timeout: Request timeout.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        token: Optional[str] = None,
        timeout: int = 30,
    ):
        """Initialize the gateway.

        Args:
            base_url: Base URL of the API, including the `/api` prefix.
            token: Bearer token for calls that require auth.
            timeout: Request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ApiGateway":
        return cls(
            base_url=settings.api_url,
            token=settings.api_token,
            timeout=settings.api_timeout,
        )

    def _get_headers(self, endpoint: Endpoint) -> dict[str, str]:
        """Get headers for a request.

        Raises:
            UnauthorizedError: If the endpoint requires auth and there is no token.
        """
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if endpoint.requires_auth:
            if not self.token:
                raise UnauthorizedError(endpoint=endpoint.label)
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    async def request(
        self,
        endpoint: Endpoint,
        body: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, str]] = None,
    ) -> Any:
        """Perform a call and return the unwrapped `data` of the envelope.

        Raises:
            UnauthorizedError: On a missing token or a 401.
            HTTPStatusError: On status >= 400 or `success: false`.
            InvalidResponseError: If the body is not a JSON envelope.
            NetworkError: If the request does not complete.
        """
        headers = self._get_headers(endpoint)
        url = f"{self.base_url}{endpoint.path}"
        logger.debug("%s %s", endpoint.method, url)

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.request(
                    endpoint.method,
                    url,
                    json=body,
                    params=params,
                    headers=headers,
                ) as response:
                    status = response.status
                    text = await response.text()
        except asyncio.TimeoutError as e:
            raise NetworkError("Request timed out", endpoint=endpoint.label) from e
        except aiohttp.ClientError as e:
            raise NetworkError(f"Network error: {e}", endpoint=endpoint.label) from e

        return self._unwrap(endpoint, status, text)

    def _unwrap(self, endpoint: Endpoint, status: int, text: str) -> Any:
        if status == 401:
            raise UnauthorizedError(endpoint=endpoint.label)

        try:
            envelope = json.loads(text) if text else None
        except ValueError:
            envelope = None

        if status >= 400:
            raise HTTPStatusError.from_envelope(
                envelope, status, "Request failed", body=text, endpoint=endpoint.label,
            )

        if not isinstance(envelope, dict):
            raise InvalidResponseError("Invalid response from server", endpoint=endpoint.label)

        data = envelope.get("data")
        if not envelope.get("success") or data is None:
            raise HTTPStatusError.from_envelope(
                envelope, status, "Unknown error", body=text, endpoint=endpoint.label,
            )
        return data

    @staticmethod
    def _payload(data: Any, key: str) -> Any:
        if not isinstance(data, dict) or key not in data:
            raise InvalidResponseError(f"Response is missing '{key}'")
        return data[key]

    @staticmethod
    def _decode(decoder: Callable[[Any], T], raw: Any) -> T:
        try:
            return decoder(raw)
        except DecodeError as e:
            raise ResponseDecodeError(f"Failed to decode response: {e}") from e

    def _decode_list(self, decoder: Callable[[Any], T], raw: Any) -> list[T]:
        if not isinstance(raw, list):
            raise ResponseDecodeError("Failed to decode response: expected a list")
        return [self._decode(decoder, item) for item in raw]

    # -------------------------------------------------------------------------
    # Courses
    # -------------------------------------------------------------------------

    async def get_categories(self) -> list[Category]:
        data = await self.request(endpoints.CATEGORIES)
        return self._decode_list(decode_category, self._payload(data, "categories"))

    async def get_courses(self, category_id: Optional[str] = None) -> list[Course]:
        """List courses, asking the server to filter by category when one is given."""
        params = {"category_id": category_id} if category_id else None
        data = await self.request(endpoints.COURSES, params=params)
        return self._decode_list(decode_course, self._payload(data, "courses"))

    async def get_recommended_courses(self) -> list[Course]:
        data = await self.request(endpoints.RECOMMENDED_COURSES)
        return self._decode_list(decode_course, self._payload(data, "courses"))

    async def get_course(self, course_id: str) -> CourseWithLevels:
        data = await self.request(endpoints.course(course_id))
        return self._decode(decode_course_with_levels, self._payload(data, "course"))

    async def get_lesson(self, lesson_id: str) -> LessonWithContent:
        data = await self.request(endpoints.lesson(lesson_id))
        return self._decode(decode_lesson, self._payload(data, "lesson"))

    async def get_level_lessons(self, level_id: str) -> list[Lesson]:
        data = await self.request(endpoints.level_lessons(level_id))
        return self._decode_list(decode_lesson_summary, self._payload(data, "lessons"))

    # -------------------------------------------------------------------------
    # Progress
    # -------------------------------------------------------------------------

    async def get_user_stats(self) -> UserStats:
        data = await self.request(endpoints.USER_STATS)
        return self._decode(decode_stats, self._payload(data, "stats"))

    async def get_course_progress(self, course_id: str) -> list[UserProgress]:
        data = await self.request(endpoints.course_progress(course_id))
        return self._decode_list(decode_progress, self._payload(data, "progress"))

    async def get_lesson_progress(self, lesson_id: str) -> Optional[UserProgress]:
        """Progress for one lesson; None if the learner has no record for it."""
        data = await self.request(endpoints.lesson_progress(lesson_id))
        raw = data.get("progress") if isinstance(data, dict) else None
        if raw is None:
            return None
        return self._decode(decode_progress, raw)

    async def update_progress(self, lesson_id: str, completed: bool, score: Optional[int] = None) -> UserProgress:
        """Submit a progress delta; returns the record as the server now holds it."""
        update = ProgressUpdate(lesson_id=lesson_id, completed=completed, score=score)
        data = await self.request(endpoints.UPDATE_PROGRESS, body=update.to_wire())
        record = self._decode(decode_progress, self._payload(data, "progress"))
        logger.info("Progress updated: lesson=%s, completed=%s", lesson_id, record.completed)
        return record

    async def consume_energy(self, amount: int = 1) -> int:
        """Spend energy; returns the server's new energy value."""
        data = await self.request(endpoints.CONSUME_ENERGY, body={"amount": amount})
        energy = self._payload(data, "energy")
        if not isinstance(energy, int) or isinstance(energy, bool):
            raise ResponseDecodeError("Failed to decode response: energy must be an integer")
        return energy
