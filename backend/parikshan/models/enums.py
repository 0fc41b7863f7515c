import enum

from sqlalchemy import Enum


class TestStatus(str, enum.Enum):
    PENDING = "pending"
    QUESTIONS_GENERATED = "questions_generated"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    SUBMITTED = "submitted"


class QuestionType(str, enum.Enum):
    FORCED_CHOICE = "forced_choice"
    SJT = "sjt"
    LIKERT_SCALE = "likert_scale"
    TRUE_FALSE = "true_false"
    OPEN_ENDED = "open_ended"
    MCQ = "mcq"


class DifficultyLevel(str, enum.Enum):
    EASY = "easy"
    MODERATE = "moderate"
    HARD = "hard"


def pg_enum(enum_cls, name: str) -> Enum:
    """Map onto the existing Postgres enum type, storing lowercase values."""
    return Enum(
        enum_cls,
        name=name,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )
