import asyncio
import logging
from collections import defaultdict

from pydantic import ValidationError as PydanticValidationError

from triviet.ai.client import LLMClient
from triviet.ai.prompts import build_learning_plan_prompt, build_lesson_prompt, build_review_lesson_prompt
from triviet.exceptions import ValidationError
from triviet.learning_paths.schemas import (
    LearningPathResponse,
    LearningPlan,
    Lesson,
    LessonContent,
    LessonResponse,
    ReviewScope,
    StoredLearningPath,
    StudentGoal,
    Subject,
)
from triviet.storage.base import AbstractStorage
from triviet.storage.exceptions import StorageFileNotFoundError


logger = logging.getLogger(__name__)

# Reads and writes of one saved path never interleave
_path_locks: defaultdict[tuple[int, Subject], asyncio.Lock] = defaultdict(asyncio.Lock)


def _storage_key(grade: int, subject: Subject) -> str:
    return f"learning_path_{grade}_{subject.value}.json"


class LearningPathService:
    """Multi-lesson learning paths with saved progress, one per grade and subject.

    A stored path always has at least one lesson and an index inside the
    plan; anything else found in storage is ignored and the caller starts
    over with an empty path.
    """

    def __init__(self, storage: AbstractStorage, llm_client: LLMClient | None = None) -> None:
        self._storage = storage
        self._llm_client = llm_client

    @property
    def llm_client(self) -> LLMClient:
        if self._llm_client is None:
            self._llm_client = LLMClient()
        return self._llm_client

    async def load(self, grade: int, subject: Subject) -> LearningPathResponse:
        stored = await self._read(grade, subject)
        if stored is None:
            return LearningPathResponse(grade=grade, subject=subject)
        return LearningPathResponse(grade=grade, subject=subject, plan=stored.plan, current_index=stored.current_index)

    async def generate_plan(
        self,
        grade: int,
        subject: Subject,
        goal: StudentGoal,
        language: str,
    ) -> LearningPathResponse:
        """Replace any saved path with a freshly generated plan starting at the first lesson."""
        async with _path_locks[grade, subject]:
            await self._storage.delete(_storage_key(grade, subject))

            logger.info("Generating learning plan for grade %d %s (%s)", grade, subject.value, goal.value)
            prompt = build_learning_plan_prompt(grade, subject.value, goal.value, language)
            result = await self.llm_client.get_completion(
                messages=[{"role": "user", "content": prompt}],
                response_model=LearningPlan,
            )

            topics = [topic.strip() for topic in result.plan if topic.strip()]
            if not topics:
                msg = "Failed to generate a valid plan"
                raise ValidationError(msg)

            stored = StoredLearningPath(plan=[Lesson(topic=topic) for topic in topics], current_index=0)
            await self._write(grade, subject, stored)
            return LearningPathResponse(grade=grade, subject=subject, plan=stored.plan, current_index=0)

    async def complete_current(self, grade: int, subject: Subject) -> LearningPathResponse:
        """Mark the current lesson completed and move on, staying on the last lesson once reached."""
        async with _path_locks[grade, subject]:
            stored = await self._read(grade, subject)
            if stored is None:
                msg = f"No learning path for grade {grade} {subject.value}"
                raise ValidationError(msg)

            plan = [lesson.model_copy() for lesson in stored.plan]
            index = stored.current_index
            plan[index].completed = True
            if index < len(plan) - 1:
                index += 1

            updated = StoredLearningPath(plan=plan, current_index=index)
            await self._write(grade, subject, updated)
            return LearningPathResponse(grade=grade, subject=subject, plan=plan, current_index=index)

    async def reset(self, grade: int, subject: Subject) -> None:
        async with _path_locks[grade, subject]:
            await self._storage.delete(_storage_key(grade, subject))

    async def generate_lesson(
        self,
        grade: int,
        subject: Subject,
        goal: StudentGoal,
        language: str,
        review: ReviewScope | None = None,
    ) -> LessonResponse:
        """Write the lesson for the current topic, or a review lesson over ``review``.

        Review lessons do not need a saved path and leave progress untouched.
        """
        topic = None
        if review is None:
            stored = await self._read(grade, subject)
            if stored is None:
                msg = f"No learning path for grade {grade} {subject.value}"
                raise ValidationError(msg)
            topic = stored.plan[stored.current_index].topic
            logger.info("Generating lesson '%s' for grade %d %s", topic, grade, subject.value)
            prompt = build_lesson_prompt(grade, subject.value, goal.value, topic, language)
        else:
            logger.info("Generating %s review lesson for grade %d %s", review.value, grade, subject.value)
            prompt = build_review_lesson_prompt(grade, subject.value, goal.value, review.value, language)

        content = await self.llm_client.get_completion(
            messages=[{"role": "user", "content": prompt}],
            response_model=LessonContent,
        )
        if not content.markdown_content.strip():
            msg = "Failed to generate lesson content"
            raise ValidationError(msg)

        return LessonResponse(
            markdown_content=content.markdown_content,
            word_content=content.word_content,
            topic=topic,
            review=review,
        )

    async def _read(self, grade: int, subject: Subject) -> StoredLearningPath | None:
        try:
            raw = await self._storage.download(_storage_key(grade, subject))
        except StorageFileNotFoundError:
            return None

        try:
            stored = StoredLearningPath.model_validate_json(raw)
        except PydanticValidationError:
            logger.exception("Failed to load learning path for grade %d %s", grade, subject.value)
            return None
        if stored.current_index >= len(stored.plan):
            logger.warning("Discarding learning path with out-of-range index %d", stored.current_index)
            return None
        return stored

    async def _write(self, grade: int, subject: Subject, stored: StoredLearningPath) -> None:
        payload = stored.model_dump_json(by_alias=True).encode("utf-8")
        await self._storage.upload(payload, _storage_key(grade, subject))
