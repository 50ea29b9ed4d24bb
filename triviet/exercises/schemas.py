from enum import Enum

from pydantic import BaseModel as PydanticBaseModel, Field, model_validator

from triviet.learning_paths.schemas import Subject
from triviet.library.schemas import LibraryItemType, UserRole


class DifficultyLevel(str, Enum):
    RECOGNITION = "recognition"
    COMPREHENSION = "comprehension"
    APPLICATION = "application"


class QuestionCounts(PydanticBaseModel):
    """Number of questions at each difficulty level."""

    recognition: int = Field(0, ge=0, le=50)
    comprehension: int = Field(0, ge=0, le=50)
    application: int = Field(0, ge=0, le=50)

    @property
    def total(self) -> int:
        return self.recognition + self.comprehension + self.application


class ExerciseDocument(PydanticBaseModel):
    """Structured AI output: an exam or exercise set, for the web and for Microsoft Word."""

    model_config = {"populate_by_name": True}

    markdown_content: str = Field(..., alias="markdownContent", description="Markdown with LaTeX math")
    word_content: str = Field(..., alias="wordContent", description="Same document with UnicodeMath equations")


class ExamRequest(PydanticBaseModel):
    """An exam for teachers, a review exercise set for students."""

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {
                "role": "teacher",
                "grade": 10,
                "subject": "physics",
                "topic": "Chuyển động thẳng biến đổi đều",
                "durationMinutes": 45,
                "multipleChoice": {"recognition": 4, "comprehension": 4},
                "essay": {"recognition": 1, "comprehension": 1},
            },
        },
    }

    role: UserRole
    grade: int = Field(..., ge=1, le=12)
    subject: Subject
    topic: str = Field(..., min_length=1, max_length=300)
    textbook: str | None = Field(None, max_length=200)
    duration_minutes: int = Field(45, ge=5, le=180, alias="durationMinutes")
    multiple_choice: QuestionCounts = Field(default_factory=QuestionCounts, alias="multipleChoice")
    essay: QuestionCounts = Field(default_factory=QuestionCounts)
    language: str = Field("Tiếng Việt", min_length=1, max_length=50)
    save_to_library: bool = Field(False, alias="saveToLibrary")

    @model_validator(mode="after")
    def check_has_questions(self) -> "ExamRequest":
        if self.multiple_choice.total + self.essay.total == 0:
            msg = "At least one multiple choice or essay question is required"
            raise ValueError(msg)
        return self


class SimilarExercisesRequest(PydanticBaseModel):
    """A question to analyse and generate similar practice exercises for."""

    model_config = {"populate_by_name": True}

    role: UserRole = UserRole.STUDENT
    question: str = Field(..., min_length=1, max_length=20_000)
    source_name: str | None = Field(None, max_length=255, alias="sourceName")
    language: str = Field("Tiếng Việt", min_length=1, max_length=50)
    save_to_library: bool = Field(False, alias="saveToLibrary")


class ExerciseResponse(ExerciseDocument):
    item_type: LibraryItemType = Field(..., alias="itemType")
    library_item_id: str | None = Field(None, alias="libraryItemId", description="Set when the document was saved")
