from .role import Role, ADMIN_ROLE, CANDIDATE_ROLE
from .company import Company
from .profile import Profile
from .candidate import Candidate
from .section import Section
from .question import Question, QuestionTemplate
from .answer import Answer
from .evaluation import Evaluation
from .test_library import TestLibraryItem
from .test_session import TestSession, TestSessionStatus
from .submission_log import TestSubmissionLog
from .contact_request import ContactRequest
from .enums import TestStatus, QuestionType, DifficultyLevel

__all__ = [
    "Role",
    "ADMIN_ROLE",
    "CANDIDATE_ROLE",
    "Company",
    "Profile",
    "Candidate",
    "Section",
    "Question",
    "QuestionTemplate",
    "Answer",
    "Evaluation",
    "TestLibraryItem",
    "TestSession",
    "TestSessionStatus",
    "TestSubmissionLog",
    "ContactRequest",
    "TestStatus",
    "QuestionType",
    "DifficultyLevel",
]
