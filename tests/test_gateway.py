"""
API gateway tests for Bloom.

Runs the gateway against an in-process aiohttp server standing in for the API.
"""

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from bloom.api import (
    ApiGateway,
    FetchError,
    HTTPStatusError,
    InvalidResponseError,
    NetworkError,
    ResponseDecodeError,
    UnauthorizedError,
    endpoints,
)
from bloom.config import Settings
from bloom.schemas import PageContent

from conftest import make_course_payload


def envelope(**data):
    return {"success": True, "data": data}


def reply(body, status=200, seen=None):
    """Handler answering with `body`; records each request's JSON body and headers in `seen`."""
    async def handler(request):
        if seen is not None:
            seen.append({
                "json": await request.json() if request.can_read_body else None,
                "headers": dict(request.headers),
                "query": dict(request.query),
            })
        if isinstance(body, str):
            return web.Response(text=body, status=status)
        return web.json_response(body, status=status)
    return handler


@pytest_asyncio.fixture
async def serve():
    """Start a fake API with the given routes and return a gateway pointed at it."""
    servers = []

    async def start(routes, token="test-token"):
        app = web.Application()
        for method, path, handler in routes:
            app.router.add_route(method, f"/api{path}", handler)
        server = TestServer(app)
        await server.start_server()
        servers.append(server)
        return ApiGateway(base_url=str(server.make_url("/api")), token=token, timeout=5)

    yield start

    for server in servers:
        await server.close()


class TestEndpoints:
    def test_ids_are_quoted(self):
        assert endpoints.course("a/b c").path == "/courses/a%2Fb%20c"

    def test_auth_flags(self):
        assert not endpoints.COURSES.requires_auth
        assert endpoints.USER_STATS.requires_auth
        assert endpoints.UPDATE_PROGRESS.method == "POST"
        assert endpoints.course_progress("c1").requires_auth


class TestGatewayReads:
    @pytest.mark.asyncio
    async def test_get_course(self, serve):
        payload = make_course_payload([["l1", "l2"], ["l3"]])
        gateway = await serve([("GET", "/courses/course_1", reply(envelope(course=payload)))])

        course = await gateway.get_course("course_1")

        assert course.id == "course_1"
        assert [lesson.id for lesson in course.iter_lessons()] == ["l1", "l2", "l3"]

    @pytest.mark.asyncio
    async def test_get_lesson(self, serve, lesson_payload):
        gateway = await serve([("GET", "/courses/lessons/l1", reply(envelope(lesson=lesson_payload)))])

        lesson = await gateway.get_lesson("l1")

        assert lesson.content_count == 3
        assert isinstance(lesson.content[0].content_data, PageContent)

    @pytest.mark.asyncio
    async def test_get_courses_passes_category(self, serve):
        seen = []
        course = {"id": "c1", "category_id": "cat_math", "order_index": 0}
        gateway = await serve([("GET", "/courses", reply(envelope(courses=[course]), seen=seen))])

        courses = await gateway.get_courses("cat_math")

        assert [c.id for c in courses] == ["c1"]
        assert seen[0]["query"] == {"category_id": "cat_math"}

    @pytest.mark.asyncio
    async def test_public_calls_send_no_token(self, serve):
        seen = []
        gateway = await serve(
            [("GET", "/courses/categories", reply(envelope(categories=[]), seen=seen))],
            token=None,
        )

        assert await gateway.get_categories() == []
        assert "Authorization" not in seen[0]["headers"]

    @pytest.mark.asyncio
    async def test_get_level_lessons(self, serve):
        lessons = [{"id": "l1", "level_id": "lv", "order_index": 0, "type": "exercise"}]
        gateway = await serve([("GET", "/courses/levels/lv/lessons", reply(envelope(lessons=lessons)))])

        result = await gateway.get_level_lessons("lv")

        assert result[0].is_exercise

    @pytest.mark.asyncio
    async def test_get_stats_sends_token(self, serve):
        seen = []
        stats = {"streak": {"currentStreak": 3}, "energy": 4, "completedLessons": 1, "totalScore": 100}
        gateway = await serve([("GET", "/progress/stats", reply(envelope(stats=stats), seen=seen))])

        result = await gateway.get_user_stats()

        assert result.streak.current_streak == 3
        assert seen[0]["headers"]["Authorization"] == "Bearer test-token"

    @pytest.mark.asyncio
    async def test_get_course_progress(self, serve):
        records = [{"id": "p1", "user_id": "u1", "lesson_id": "l1", "completed": True}]
        gateway = await serve([("GET", "/progress/course/course_1", reply(envelope(progress=records)))])

        progress = await gateway.get_course_progress("course_1")

        assert progress[0].lesson_id == "l1"
        assert progress[0].completed

    @pytest.mark.asyncio
    async def test_lesson_progress_absent(self, serve):
        gateway = await serve([("GET", "/progress/lesson/l1", reply(envelope(progress=None)))])
        assert await gateway.get_lesson_progress("l1") is None


class TestGatewayWrites:
    @pytest.mark.asyncio
    async def test_update_progress(self, serve):
        seen = []
        record = {"id": "p1", "user_id": "u1", "lesson_id": "l1", "completed": True, "score": 100}
        gateway = await serve([("POST", "/progress/update", reply(envelope(progress=record), seen=seen))])

        result = await gateway.update_progress("l1", completed=True, score=100)

        assert result.score == 100
        assert seen[0]["json"] == {"lessonId": "l1", "completed": True, "score": 100}

    @pytest.mark.asyncio
    async def test_consume_energy(self, serve):
        seen = []
        gateway = await serve([("POST", "/progress/energy/consume", reply(envelope(energy=3), seen=seen))])

        assert await gateway.consume_energy(2) == 3
        assert seen[0]["json"] == {"amount": 2}

    @pytest.mark.asyncio
    async def test_consume_energy_rejects_non_integer(self, serve):
        gateway = await serve([("POST", "/progress/energy/consume", reply(envelope(energy=True)))])

        with pytest.raises(ResponseDecodeError):
            await gateway.consume_energy()


class TestGatewayErrors:
    @pytest.mark.asyncio
    async def test_missing_token_fails_before_request(self):
        gateway = ApiGateway(base_url="http://127.0.0.1:1/api", token=None)

        with pytest.raises(UnauthorizedError) as exc_info:
            await gateway.get_user_stats()
        assert exc_info.value.status_code == 401
        assert exc_info.value.endpoint == "GET /progress/stats"

    @pytest.mark.asyncio
    async def test_401(self, serve):
        gateway = await serve([("GET", "/progress/stats", reply({"success": False}, status=401))])

        with pytest.raises(UnauthorizedError):
            await gateway.get_user_stats()

    @pytest.mark.asyncio
    async def test_http_error_carries_server_message(self, serve):
        body = {"success": False, "error": {"message": "Course not found"}}
        gateway = await serve([("GET", "/courses/missing", reply(body, status=404))])

        with pytest.raises(HTTPStatusError) as exc_info:
            await gateway.get_course("missing")
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Course not found"
        assert exc_info.value.endpoint == "GET /courses/missing"
        assert str(exc_info.value) == "HTTP 404: Course not found (GET /courses/missing)"

    @pytest.mark.asyncio
    async def test_http_error_without_message(self, serve):
        gateway = await serve([("GET", "/courses/c1", reply("Bad gateway", status=502))])

        with pytest.raises(HTTPStatusError) as exc_info:
            await gateway.get_course("c1")
        assert exc_info.value.message == "Request failed"

    @pytest.mark.asyncio
    async def test_unsuccessful_envelope(self, serve):
        gateway = await serve([("GET", "/courses/c1", reply({"success": False}))])

        with pytest.raises(HTTPStatusError) as exc_info:
            await gateway.get_course("c1")
        assert exc_info.value.message == "Unknown error"

    @pytest.mark.asyncio
    async def test_non_json_body(self, serve):
        gateway = await serve([("GET", "/courses/c1", reply("<html>hello</html>"))])

        with pytest.raises(InvalidResponseError):
            await gateway.get_course("c1")

    @pytest.mark.asyncio
    async def test_missing_payload_key(self, serve):
        gateway = await serve([("GET", "/courses/c1", reply(envelope(other={})))])

        with pytest.raises(InvalidResponseError):
            await gateway.get_course("c1")

    @pytest.mark.asyncio
    async def test_undecodable_payload(self, serve):
        course = {"id": "c1", "title": "No category", "order_index": 0}
        gateway = await serve([("GET", "/courses/c1", reply(envelope(course=course)))])

        with pytest.raises(ResponseDecodeError):
            await gateway.get_course("c1")

    @pytest.mark.asyncio
    async def test_stats_without_energy_fail_to_decode(self, serve):
        stats = {"streak": {"currentStreak": 3}, "completedLessons": 1, "totalScore": 100}
        gateway = await serve([("GET", "/progress/stats", reply(envelope(stats=stats)))])

        with pytest.raises(ResponseDecodeError):
            await gateway.get_user_stats()

    @pytest.mark.asyncio
    async def test_connection_refused(self):
        # Nothing listens on port 1
        gateway = ApiGateway(base_url="http://127.0.0.1:1/api", timeout=5)

        with pytest.raises(NetworkError):
            await gateway.get_categories()


class TestFromSettings:
    def test_from_settings(self):
        settings = Settings(api_url="http://api.example.com/api/", api_timeout=12, api_token="abc")
        gateway = ApiGateway.from_settings(settings)
        assert gateway.base_url == "http://api.example.com/api"
        assert gateway.token == "abc"
        assert gateway.timeout.total == 12


class TestExceptions:
    def test_envelope_message_used(self):
        error = HTTPStatusError.from_envelope(
            {"success": False, "error": {"message": "Out of energy"}}, 403, "Request failed",
        )
        assert error.message == "Out of energy"
        assert str(error) == "HTTP 403: Out of energy"

    def test_fallback_without_envelope_message(self):
        for envelope in (None, "text", {"success": False}, {"error": {"message": 42}}):
            assert HTTPStatusError.from_envelope(envelope, 500, "Request failed").message == "Request failed"

    def test_unauthorized_default(self):
        error = UnauthorizedError(endpoint="POST /progress/update")
        assert error.status_code == 401
        assert error.message == "You are not authorized. Please log in again."
        assert isinstance(error, FetchError)

    def test_plain_fetch_error(self):
        assert str(NetworkError("offline")) == "offline"
        assert str(NetworkError("offline", endpoint="GET /courses")) == "offline (GET /courses)"
