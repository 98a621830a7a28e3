#!/usr/bin/env python3
"""
course_report.py - Print a course's lesson lock states for one learner.

Fetches the course tree and the learner's progress from the API and lists
every lesson with its lock state, marking the next lesson to take.

Usage:
  python scripts/course_report.py COURSE_ID
  python scripts/course_report.py COURSE_ID --api-url http://localhost:3000/api --token TOKEN
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from bloom.api import ApiGateway, FetchError
from bloom.classroom import course_completion, load_course_detail
from bloom.config import load_settings

logger = logging.getLogger(__name__)


async def report(gateway: ApiGateway, course_id: str) -> int:
    try:
        detail = await load_course_detail(gateway, course_id)
    except FetchError as e:
        logger.error(f"Could not load course {course_id}: {e}")
        return 1

    logger.info(f"Course: {detail.course.title} ({detail.course.id})")
    logger.info(f"Streak: {detail.stats.streak_count}  Energy: {detail.stats.energy}")

    for nav_level in detail.navigator.navigation_tree():
        logger.info(
            f"\n{nav_level.level.title} "
            f"[{nav_level.completed_count}/{nav_level.total_count}]"
        )
        for nav_lesson in nav_level.lessons:
            marker = detail.navigator.get_status_indicator(nav_lesson.lesson.id)
            kind = " (exercise)" if nav_lesson.lesson.is_exercise else ""
            logger.info(f"  {marker} {nav_lesson.lesson.title}{kind} - {nav_lesson.state.value}")

    stats = course_completion(detail.course, detail.navigator.progress)
    logger.info("\n" + "=" * 50)
    logger.info(f"Completed: {stats['completed']}/{stats['total_lessons']} ({stats['completion_percent']}%)")
    logger.info(f"Next lesson: {detail.next_lesson_id}")
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Print lesson lock states for a course"
    )
    parser.add_argument("course_id", help="Course to report on")
    parser.add_argument(
        "--api-url",
        default=None,
        help="API base URL (default: BLOOM_API_URL or http://localhost:3000/api)"
    )
    parser.add_argument(
        "--token",
        default=None,
        help="Bearer token (default: BLOOM_API_TOKEN); without one progress is skipped"
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Path to .env file (default: project root)"
    )

    args = parser.parse_args()
    settings = load_settings(args.env_file)
    if args.api_url:
        settings.api_url = args.api_url
    if args.token:
        settings.api_token = args.token

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s"
    )

    gateway = ApiGateway.from_settings(settings)
    sys.exit(asyncio.run(report(gateway, args.course_id)))


if __name__ == "__main__":
    main()
