import pydantic
import pytest

from triviet.ai.errors import AITimeoutError
from triviet.exceptions import StorageQuotaExceededError, ValidationError
from triviet.exercises.schemas import ExamRequest, ExerciseDocument, QuestionCounts, SimilarExercisesRequest
from triviet.exercises.service import ExerciseService
from triviet.library.schemas import LibraryItemType, UserRole
from triviet.library.service import LibraryService


EXAM = ExerciseDocument(
    markdown_content="## I. TRẮC NGHIỆM\n**Câu 1.** Vận tốc $v = v_0 + at$ ...\n## II. TỰ LUẬN",
    word_content="## I. TRẮC NGHIỆM\nCâu 1. Vận tốc v=v_0+at ...",
)


def _exam_request(**overrides) -> ExamRequest:
    data = {
        "role": "teacher",
        "grade": 10,
        "subject": "physics",
        "topic": "Chuyển động thẳng biến đổi đều",
        "multipleChoice": {"recognition": 4, "comprehension": 4},
        "essay": {"comprehension": 1, "application": 1},
    }
    data.update(overrides)
    return ExamRequest.model_validate(data)


class TestExamRequest:
    def test_needs_at_least_one_question(self) -> None:
        with pytest.raises(pydantic.ValidationError, match="At least one"):
            _exam_request(multipleChoice={}, essay={})

    def test_question_totals(self) -> None:
        request = _exam_request()

        assert request.multiple_choice.total == 8
        assert request.essay.total == 2
        assert request.duration_minutes == 45
        assert QuestionCounts().total == 0


class TestExerciseService:
    @pytest.mark.asyncio
    async def test_teacher_gets_exam(self, exercise_service, mock_llm_client) -> None:
        mock_llm_client.get_completion.return_value = EXAM
        request = _exam_request(durationMinutes=15, textbook="Kết nối tri thức")

        result = await exercise_service.generate_exam(request)

        assert result.item_type == LibraryItemType.EXAM
        assert result.markdown_content == EXAM.markdown_content
        assert result.word_content == EXAM.word_content
        assert result.library_item_id is None

        kwargs = mock_llm_client.get_completion.await_args.kwargs
        assert kwargs["response_model"] is ExerciseDocument
        prompt = kwargs["messages"][0]["content"]
        assert "expert physics teacher" in prompt
        assert "Duration: 15 minutes" in prompt
        assert '"Kết nối tri thức"' in prompt
        assert '"I. MULTIPLE CHOICE" and "II. ESSAY"' in prompt
        assert "Total Questions: 8" in prompt
        assert "Application: 1 questions" in prompt

    @pytest.mark.asyncio
    async def test_student_gets_review_exercises(self, exercise_service, mock_llm_client) -> None:
        mock_llm_client.get_completion.return_value = EXAM

        result = await exercise_service.generate_exam(_exam_request(role="student", multipleChoice={}))

        assert result.item_type == LibraryItemType.REVIEW_EXERCISES
        prompt = mock_llm_client.get_completion.await_args.kwargs["messages"][0]["content"]
        assert "set of practice exercises" in prompt
        assert "Duration" not in prompt
        # Without multiple choice the essay section is the first one
        assert '"I. ESSAY"' in prompt
        assert "Multiple Choice Section Details" not in prompt

    @pytest.mark.asyncio
    async def test_saved_to_library(self, exercise_service, library_service, mock_llm_client) -> None:
        mock_llm_client.get_completion.return_value = EXAM

        result = await exercise_service.generate_exam(_exam_request(saveToLibrary=True))

        item = await library_service.get_item(UserRole.TEACHER, result.library_item_id)
        assert item.type == LibraryItemType.EXAM
        assert item.name == "Đề kiểm tra: Chuyển động thẳng biến đổi đều"
        assert item.content == EXAM.markdown_content
        items, _ = await library_service.list_items(UserRole.STUDENT)
        assert items == []

    @pytest.mark.asyncio
    async def test_full_library_keeps_nothing(self, storage, mock_llm_client) -> None:
        library = LibraryService(storage, limit_bytes=64)
        service = ExerciseService(library, llm_client=mock_llm_client)
        mock_llm_client.get_completion.return_value = EXAM

        with pytest.raises(StorageQuotaExceededError):
            await service.generate_exam(_exam_request(saveToLibrary=True))

        items, usage = await library.list_items(UserRole.TEACHER)
        assert items == []
        assert usage.used == 0

    @pytest.mark.asyncio
    async def test_similar_exercises(self, exercise_service, library_service, mock_llm_client) -> None:
        mock_llm_client.get_completion.return_value = EXAM
        request = SimilarExercisesRequest(
            question="Giải phương trình $x^2 - 5x + 6 = 0$.\nTrình bày lời giải.",
            save_to_library=True,
        )

        result = await exercise_service.generate_similar(request)

        assert result.item_type == LibraryItemType.SIMILAR_EXERCISES
        item = await library_service.get_item(UserRole.STUDENT, result.library_item_id)
        assert item.name == "Bài tập tương tự: Giải phương trình $x^2 - 5x + 6 = 0$. Trình bày lời giải."
        prompt = mock_llm_client.get_completion.await_args.kwargs["messages"][0]["content"]
        assert "$x^2 - 5x + 6 = 0$" in prompt
        assert '"untitled"' in prompt
        assert "## Similar practice exercises" in prompt

    @pytest.mark.asyncio
    async def test_similar_exercises_named_after_source(
        self, exercise_service, library_service, mock_llm_client
    ) -> None:
        mock_llm_client.get_completion.return_value = EXAM
        request = SimilarExercisesRequest(
            role=UserRole.TEACHER,
            question="Tính $\\int_0^1 x\\,dx$",
            source_name="de_thi_12.png",
            save_to_library=True,
        )

        result = await exercise_service.generate_similar(request)

        item = await library_service.get_item(UserRole.TEACHER, result.library_item_id)
        assert item.name == "Bài tập tương tự: de_thi_12.png"

    @pytest.mark.asyncio
    async def test_blank_question_rejected(self, exercise_service, mock_llm_client) -> None:
        with pytest.raises(ValidationError, match="empty"):
            await exercise_service.generate_similar(SimilarExercisesRequest(question="   \n "))

        mock_llm_client.get_completion.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_blank_document_rejected(self, exercise_service, library_service, mock_llm_client) -> None:
        mock_llm_client.get_completion.return_value = ExerciseDocument(markdown_content="", word_content="")

        with pytest.raises(ValidationError, match="exercise content"):
            await exercise_service.generate_exam(_exam_request(saveToLibrary=True))

        items, _ = await library_service.list_items(UserRole.TEACHER)
        assert items == []

    @pytest.mark.asyncio
    async def test_ai_failure_saves_nothing(self, exercise_service, library_service, mock_llm_client) -> None:
        mock_llm_client.get_completion.side_effect = AITimeoutError("slow")

        with pytest.raises(AITimeoutError):
            await exercise_service.generate_exam(_exam_request(saveToLibrary=True))

        items, _ = await library_service.list_items(UserRole.TEACHER)
        assert items == []
