from .profile import ProfileResponse
from .company import CompanyOnboard, CompanyResponse
from .candidate import CandidateCreateRequest, CandidateProfileUpdate, CandidateResponse, CandidateStats
from .question import QuestionResponse, SectionResponse
from .evaluation import EvaluationResultIn, EvaluationResponse
from .submission import (
    ResetAssessmentRequest,
    SubmissionStateResponse,
    SubmitAssessmentRequest,
    SubmitAssessmentResponse,
)
from .answer import SaveAnswerRequest
from .contact import ContactRequestCreate, ContactRequestResponse

__all__ = [
    "ProfileResponse",
    "CompanyOnboard",
    "CompanyResponse",
    "CandidateCreateRequest",
    "CandidateProfileUpdate",
    "CandidateResponse",
    "CandidateStats",
    "QuestionResponse",
    "SectionResponse",
    "EvaluationResultIn",
    "EvaluationResponse",
    "ResetAssessmentRequest",
    "SubmissionStateResponse",
    "SubmitAssessmentRequest",
    "SubmitAssessmentResponse",
    "SaveAnswerRequest",
    "ContactRequestCreate",
    "ContactRequestResponse",
]
