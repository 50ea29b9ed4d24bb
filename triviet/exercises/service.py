import logging

from triviet.ai.client import LLMClient
from triviet.ai.prompts import build_exam_prompt, build_similar_exercises_prompt
from triviet.exceptions import ValidationError
from triviet.exercises.schemas import (
    ExamRequest,
    ExerciseDocument,
    ExerciseResponse,
    SimilarExercisesRequest,
)
from triviet.library.schemas import LibraryItemCreate, LibraryItemType, UserRole
from triviet.library.service import LibraryService


logger = logging.getLogger(__name__)

_ITEM_LABELS = {
    LibraryItemType.EXAM: "Đề kiểm tra",
    LibraryItemType.REVIEW_EXERCISES: "Bài tập ôn tập",
    LibraryItemType.SIMILAR_EXERCISES: "Bài tập tương tự",
}


class ExerciseService:
    """Exams, review exercise sets and similar exercises, optionally saved to the library."""

    def __init__(self, library: LibraryService, llm_client: LLMClient | None = None) -> None:
        self._library = library
        self._llm_client = llm_client

    @property
    def llm_client(self) -> LLMClient:
        if self._llm_client is None:
            self._llm_client = LLMClient()
        return self._llm_client

    async def generate_exam(self, data: ExamRequest) -> ExerciseResponse:
        """Teachers get an exam, students a review exercise set on the same settings."""
        for_teacher = data.role == UserRole.TEACHER
        item_type = LibraryItemType.EXAM if for_teacher else LibraryItemType.REVIEW_EXERCISES
        logger.info(
            "Generating %s for grade %d %s on '%s'", item_type.value, data.grade, data.subject.value, data.topic
        )
        prompt = build_exam_prompt(
            grade=data.grade,
            subject=data.subject.value,
            topic=data.topic,
            language=data.language,
            multiple_choice=data.multiple_choice.model_dump(),
            essay=data.essay.model_dump(),
            for_teacher=for_teacher,
            duration=data.duration_minutes,
            textbook=data.textbook,
        )
        document = await self._generate(prompt)
        return await self._respond(data.role, item_type, data.topic, document, save=data.save_to_library)

    async def generate_similar(self, data: SimilarExercisesRequest) -> ExerciseResponse:
        if not data.question.strip():
            msg = "Question text is empty"
            raise ValidationError(msg)
        logger.info("Generating similar exercises for a %d character question", len(data.question))
        prompt = build_similar_exercises_prompt(data.question, data.language, data.source_name)
        document = await self._generate(prompt)
        name = data.source_name or " ".join(data.question.split())[:80]
        return await self._respond(
            data.role, LibraryItemType.SIMILAR_EXERCISES, name, document, save=data.save_to_library
        )

    async def _generate(self, prompt: str) -> ExerciseDocument:
        document = await self.llm_client.get_completion(
            messages=[{"role": "user", "content": prompt}],
            response_model=ExerciseDocument,
        )
        if not document.markdown_content.strip():
            msg = "Failed to generate exercise content"
            raise ValidationError(msg)
        return document

    async def _respond(
        self,
        role: UserRole,
        item_type: LibraryItemType,
        name: str,
        document: ExerciseDocument,
        *,
        save: bool,
    ) -> ExerciseResponse:
        library_item_id = None
        if save:
            item = await self._library.add_item(
                role,
                LibraryItemCreate(
                    name=f"{_ITEM_LABELS[item_type]}: {name}"[:300],
                    type=item_type,
                    content=document.markdown_content,
                ),
            )
            library_item_id = item.id

        return ExerciseResponse(
            markdown_content=document.markdown_content,
            word_content=document.word_content,
            item_type=item_type,
            library_item_id=library_item_id,
        )
