from enum import Enum

from pydantic import BaseModel as PydanticBaseModel, Field


class Subject(str, Enum):
    MATH = "math"
    LITERATURE = "literature"
    PHYSICS = "physics"
    CHEMISTRY = "chemistry"
    BIOLOGY = "biology"
    HISTORY = "history"
    GEOGRAPHY = "geography"
    ENGLISH = "english"
    TECHNOLOGY = "technology"
    CIVIC_EDUCATION = "civic_education"
    INFORMATICS = "informatics"


class StudentGoal(str, Enum):
    GOOD = "good_student"
    EXCELLENT = "excellent_student"
    OUTSTANDING = "outstanding_student"


class Lesson(PydanticBaseModel):
    topic: str = Field(..., min_length=1)
    completed: bool = False


class LearningPlan(PydanticBaseModel):
    """Structured AI output: ordered lesson topics."""

    plan: list[str]


class StoredLearningPath(PydanticBaseModel):
    """On-disk shape of a saved learning path."""

    model_config = {"populate_by_name": True}

    plan: list[Lesson] = Field(..., min_length=1, alias="savedPlan")
    current_index: int = Field(..., ge=0, alias="savedIndex")


class LearningPathResponse(PydanticBaseModel):
    model_config = {"populate_by_name": True}

    grade: int
    subject: Subject
    plan: list[Lesson] = Field(default_factory=list)
    current_index: int = Field(0, alias="currentIndex")


class GeneratePlanRequest(PydanticBaseModel):
    goal: StudentGoal = StudentGoal.GOOD
    language: str = Field("Tiếng Việt", min_length=1, max_length=50)


class ReviewScope(str, Enum):
    NUMBERS = "numbers"
    GEOMETRY = "geometry"
    BOTH = "both"


class LessonContent(PydanticBaseModel):
    """Structured AI output: one lesson, for the web and for Microsoft Word."""

    model_config = {"populate_by_name": True}

    markdown_content: str = Field(..., alias="markdownContent", description="Markdown with LaTeX math")
    word_content: str = Field(..., alias="wordContent", description="Same lesson with UnicodeMath equations")


class GenerateLessonRequest(PydanticBaseModel):
    """Lesson for the current topic, or a review lesson when ``review`` is set."""

    goal: StudentGoal = StudentGoal.GOOD
    language: str = Field("Tiếng Việt", min_length=1, max_length=50)
    review: ReviewScope | None = None


class LessonResponse(LessonContent):
    topic: str | None = Field(None, description="Lesson topic; absent for review lessons")
    review: ReviewScope | None = None
