from fastapi import APIRouter

from triviet.exercises.dependencies import ExerciseServiceDep
from triviet.exercises.schemas import ExamRequest, ExerciseResponse, SimilarExercisesRequest


router = APIRouter(prefix="/api/v1/exercises", tags=["exercises"])


@router.post(
    "/exam",
    summary="Generate an exam or review exercises",
    responses={
        413: {"description": "Library storage limit exceeded while saving"},
        503: {"description": "AI provider unavailable"},
    },
)  # type: ignore[misc]
async def generate_exam(data: ExamRequest, service: ExerciseServiceDep) -> ExerciseResponse:
    """Generate an exam for teachers or a review exercise set for students.

    With ``saveToLibrary`` the Markdown is also saved to the role's library.
    """
    return await service.generate_exam(data)


@router.post(
    "/similar",
    summary="Analyse a question and generate similar exercises",
    responses={
        413: {"description": "Library storage limit exceeded while saving"},
        503: {"description": "AI provider unavailable"},
    },
)  # type: ignore[misc]
async def generate_similar_exercises(data: SimilarExercisesRequest, service: ExerciseServiceDep) -> ExerciseResponse:
    """Explain the given question and write new ones that test the same concepts."""
    return await service.generate_similar(data)
