from fastapi import APIRouter, status

from triviet.learning_paths.dependencies import GradeParam, LearningPathServiceDep
from triviet.learning_paths.schemas import (
    GenerateLessonRequest,
    GeneratePlanRequest,
    LearningPathResponse,
    LessonResponse,
    Subject,
)


router = APIRouter(prefix="/api/v1/learning-paths", tags=["learning-paths"])


@router.get("/{grade}/{subject}", summary="Get saved learning path")  # type: ignore[misc]
async def get_learning_path(
    grade: GradeParam,
    subject: Subject,
    service: LearningPathServiceDep,
) -> LearningPathResponse:
    """Get the saved plan and progress; empty if none was generated yet."""
    return await service.load(grade, subject)


@router.post(
    "/{grade}/{subject}/plan",
    status_code=status.HTTP_201_CREATED,
    summary="Generate a new learning plan",
    responses={503: {"description": "AI provider unavailable"}},
)  # type: ignore[misc]
async def generate_learning_plan(
    grade: GradeParam,
    subject: Subject,
    data: GeneratePlanRequest,
    service: LearningPathServiceDep,
) -> LearningPathResponse:
    """Discard saved progress and generate a new plan."""
    return await service.generate_plan(grade, subject, data.goal, data.language)


@router.post(
    "/{grade}/{subject}/complete",
    responses={400: {"description": "No learning path to advance"}},
)  # type: ignore[misc]
async def complete_current_lesson(
    grade: GradeParam,
    subject: Subject,
    service: LearningPathServiceDep,
) -> LearningPathResponse:
    """Mark the current lesson completed and advance to the next one."""
    return await service.complete_current(grade, subject)


@router.delete(
    "/{grade}/{subject}",
    status_code=status.HTTP_204_NO_CONTENT,
)  # type: ignore[misc]
async def reset_learning_path(
    grade: GradeParam,
    subject: Subject,
    service: LearningPathServiceDep,
) -> None:
    """Delete the saved learning path."""
    await service.reset(grade, subject)


@router.post(
    "/{grade}/{subject}/lesson",
    summary="Generate lesson content",
    responses={
        400: {"description": "No learning path to take the current topic from"},
        503: {"description": "AI provider unavailable"},
    },
)  # type: ignore[misc]
async def generate_lesson(
    grade: GradeParam,
    subject: Subject,
    data: GenerateLessonRequest,
    service: LearningPathServiceDep,
) -> LessonResponse:
    """Generate the lesson for the current topic, or a review lesson when ``review`` is given."""
    return await service.generate_lesson(grade, subject, data.goal, data.language, review=data.review)
