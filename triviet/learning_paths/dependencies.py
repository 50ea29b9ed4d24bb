from typing import Annotated

from fastapi import Depends, Path

from triviet.learning_paths.service import LearningPathService
from triviet.storage import get_storage_provider


# Vietnamese general education runs from grade 1 to grade 12
GradeParam = Annotated[int, Path(ge=1, le=12, description="School grade")]


def get_learning_path_service() -> LearningPathService:
    return LearningPathService(get_storage_provider())


LearningPathServiceDep = Annotated[LearningPathService, Depends(get_learning_path_service)]
