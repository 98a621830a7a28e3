"""
LessonPlayer - Step a learner through one lesson's content sequence.

The content sequence is immutable once fetched; the position within it and
whether the current question has been answered are the only state kept here.
"""

from typing import Optional

from bloom.schemas import LessonContent, LessonWithContent, QuestionContent


class LessonPlayer:
    def __init__(self, lesson: LessonWithContent):
        self.lesson = lesson
        self.current_index = 0
        self.answered_correctly = False

    @property
    def current_content(self) -> Optional[LessonContent]:
        if self.current_index < len(self.lesson.content):
            return self.lesson.content[self.current_index]
        return None

    @property
    def is_last_content(self) -> bool:
        return self.current_index >= len(self.lesson.content) - 1

    @property
    def progress(self) -> float:
        """Fraction of the lesson reached, counting the current slide."""
        if not self.lesson.content:
            return 0.0
        return (self.current_index + 1) / len(self.lesson.content)

    @property
    def can_continue(self) -> bool:
        """Questions block until answered correctly; other slides never block."""
        content = self.current_content
        if content is None:
            return False
        if isinstance(content.content_data, QuestionContent):
            return self.answered_correctly
        return True

    def answer(self, option_index: int) -> bool:
        """
        Record an answer to the current question.

        Returns whether it was correct; always False on a non-question slide.
        """
        content = self.current_content
        if content is None or not isinstance(content.content_data, QuestionContent):
            return False
        self.answered_correctly = content.content_data.is_correct(option_index)
        return self.answered_correctly

    def advance(self) -> bool:
        """Move to the next slide. Returns False (and stays put) on the last one."""
        if self.is_last_content:
            return False
        self.current_index += 1
        self.answered_correctly = False
        return True
