"""Display stats tests for Bloom."""

from bloom.classroom import DEFAULT_ENERGY, DisplayStats, course_completion, derive_display_stats
from bloom.schemas import decode_stats

from conftest import make_progress


class TestDisplayStats:
    def test_defaults_when_missing(self):
        stats = derive_display_stats(None)
        assert stats == DisplayStats(streak_count=0, energy=DEFAULT_ENERGY)
        assert stats.energy == 5

    def test_from_server_stats(self):
        stats = decode_stats({
            "streak": {"currentStreak": 7, "longestStreak": 10},
            "energy": 2,
            "completedLessons": 4,
            "totalScore": 400,
        })
        assert derive_display_stats(stats) == DisplayStats(streak_count=7, energy=2)

    def test_missing_streak_is_zero(self):
        assert derive_display_stats(decode_stats({"energy": 0})) == DisplayStats(streak_count=0, energy=0)


class TestCourseCompletion:
    def test_partial(self, course):
        result = course_completion(course, make_progress("l1"))
        assert result == {
            "total_lessons": 3,
            "completed": 1,
            "not_started": 2,
            "completion_percent": 33.3,
        }

    def test_ignores_records_outside_course(self, course):
        result = course_completion(course, make_progress("l1", "other_course_lesson"))
        assert result["completed"] == 1

    def test_no_course(self):
        result = course_completion(None, [])
        assert result["total_lessons"] == 0
        assert result["completion_percent"] == 0
