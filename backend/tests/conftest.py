import os
# Point settings at SQLite before the app (and its engine) is imported
os.environ["DATABASE_URL"] = "sqlite:///./parikshan_test.db"
os.environ["DEPLOYMENT_ENV"] = "test"
# Callback secret and candidate notification hook stay off unless a test opts in
os.environ["N8N_CALLBACK_SECRET"] = ""
os.environ["N8N_CANDIDATE_WEBHOOK_URL"] = ""

import uuid
from types import SimpleNamespace

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from parikshan import models
from parikshan.components.submissions.procedures import (
    Eligibility,
    ProcedureError,
    ResetOutcome,
    SubmitOutcome,
    get_procedures,
)
from parikshan.components.webhooks.client import WebhookClient, get_webhook_client
from parikshan.main import app
from parikshan.platform.database import Base, get_db
from parikshan.platform.middleware import _rate_limit_store
from parikshan.platform.security import create_access_token

SQLALCHEMY_DATABASE_URL = "sqlite:///./parikshan_test.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# SQLite ignores FOREIGN KEY constraints unless asked
@event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


# ---------------------------------------------------------------------------
# Stored procedures live in Supabase Postgres; tests drive a stand-in.
# ---------------------------------------------------------------------------

class FakeProcedures:
    """Records calls and returns configurable procedure results."""

    def __init__(self):
        self.eligibility = Eligibility(
            can_submit=True,
            reason="Eligible for submission",
            current_status="in_progress",
            submission_count=0,
        )
        self.submit_success = True
        self.submit_message = "Assessment submitted successfully"
        self.reset_outcome = ResetOutcome(success=True, message="Assessment reset successfully")
        self.failing: set[str] = set()
        self.calls: list[tuple] = []

    def check_submission_eligibility(self, candidate_id):
        self.calls.append(("check_submission_eligibility", candidate_id))
        if "check_submission_eligibility" in self.failing:
            raise ProcedureError("relation does not exist")
        return self.eligibility

    def submit_assessment(self, candidate_id, submission_metadata):
        self.calls.append(("submit_assessment", candidate_id, submission_metadata))
        if "submit_assessment" in self.failing:
            raise ProcedureError("relation does not exist")
        if not self.submit_success:
            return SubmitOutcome(success=False, message=self.submit_message, submission_id=None)
        # The real procedure writes the submission log row
        db = TestingSessionLocal()
        try:
            log = models.TestSubmissionLog(
                candidate_id=candidate_id,
                submission_attempt=self.eligibility.submission_count + 1,
                submission_metadata=submission_metadata,
            )
            db.add(log)
            db.commit()
            submission_id = log.id
        finally:
            db.close()
        return SubmitOutcome(success=True, message=self.submit_message, submission_id=submission_id)

    def reset_candidate_assessment(self, candidate_id, admin_user_id, reset_reason):
        self.calls.append(("reset_candidate_assessment", candidate_id, admin_user_id, reset_reason))
        if "reset_candidate_assessment" in self.failing:
            raise ProcedureError("relation does not exist")
        return self.reset_outcome


class WebhookRecorder:
    """httpx mock transport that records outbound webhook requests."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.responses: list = []
        self.sleeps: list[float] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        if self.responses:
            item = self.responses.pop(0)
            if isinstance(item, Exception):
                raise item
            return item
        return httpx.Response(200, text='{"status":"received"}')

    def client(self, **kwargs) -> WebhookClient:
        return WebhookClient(transport=httpx.MockTransport(self.handler), sleep=self.sleeps.append, **kwargs)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture(scope="function")
def db():
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    yield db
    db.close()
    Base.metadata.drop_all(bind=engine)

@pytest.fixture(scope="function")
def session_factory():
    return TestingSessionLocal

@pytest.fixture(scope="function")
def procedures():
    return FakeProcedures()

@pytest.fixture(scope="function")
def webhooks():
    return WebhookRecorder()

@pytest.fixture(scope="function")
def client(db, procedures, webhooks):
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_procedures] = lambda: procedures
    app.dependency_overrides[get_webhook_client] = lambda: webhooks.client()
    Base.metadata.create_all(bind=engine)
    # Rate-limit windows are process-global
    _rate_limit_store.clear()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    _rate_limit_store.clear()
    Base.metadata.drop_all(bind=engine)


def bearer(user_id: str, email: str = "") -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id, email)}"}


@pytest.fixture(scope="function")
def auth_headers():
    return bearer


@pytest.fixture(scope="function")
def seed(db):
    """One company with an admin, a candidate with a login, and a timed section."""
    admin_role = models.Role(name=models.ADMIN_ROLE, description="Company administrator")
    candidate_role = models.Role(name=models.CANDIDATE_ROLE, description="Assessment taker")
    company = models.Company(name="Acme Corp", industry="Technology", email="admin@acme.test")
    db.add_all([admin_role, candidate_role, company])
    db.flush()

    admin_id = str(uuid.uuid4())
    candidate_user_id = str(uuid.uuid4())
    admin = models.Profile(
        id=admin_id,
        email="admin@acme.test",
        full_name="Asha Admin",
        role_id=admin_role.id,
        company_id=company.id,
    )
    candidate_profile = models.Profile(
        id=candidate_user_id,
        email="ravi@example.com",
        full_name="Ravi Kumar",
        role_id=candidate_role.id,
    )
    candidate = models.Candidate(
        company_id=company.id,
        user_id=candidate_user_id,
        email="ravi@example.com",
        full_name="Ravi Kumar",
        phone="+91 98765 43210",
        test_status=models.TestStatus.QUESTIONS_GENERATED,
    )
    section = models.Section(
        name="Cognitive Ability",
        description="Reasoning under time pressure",
        display_order=1,
        time_limit_minutes=20,
    )
    db.add_all([admin, candidate_profile, candidate, section])
    db.commit()

    return SimpleNamespace(
        company_id=company.id,
        admin_role_id=admin_role.id,
        candidate_role_id=candidate_role.id,
        admin_id=admin_id,
        candidate_user_id=candidate_user_id,
        candidate_id=candidate.id,
        section_id=section.id,
        admin_headers=bearer(admin_id, "admin@acme.test"),
        candidate_headers=bearer(candidate_user_id, "ravi@example.com"),
    )


@pytest.fixture(scope="function")
def make_question(db):
    def _make(candidate_id: str, company_id: str, section_id: str, number: int = 1, **overrides):
        question = models.Question(
            candidate_id=candidate_id,
            company_id=company_id,
            section_id=section_id,
            question_number=number,
            question_text=overrides.pop("question_text", f"Question {number}"),
            question_type=overrides.pop("question_type", models.QuestionType.MCQ),
            options=overrides.pop("options", ["A", "B", "C", "D"]),
            **overrides,
        )
        db.add(question)
        db.commit()
        return question.id

    return _make
