from typing import Annotated

from fastapi import Depends

from triviet.exercises.service import ExerciseService
from triviet.library.router import LibraryServiceDep


def get_exercise_service(library: LibraryServiceDep) -> ExerciseService:
    return ExerciseService(library)


ExerciseServiceDep = Annotated[ExerciseService, Depends(get_exercise_service)]
