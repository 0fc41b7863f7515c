from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from parikshan import models
from parikshan.components.submissions.procedures import AssessmentProcedures, ProcedureError
from parikshan.components.submissions.service import DEFAULT_RESET_REASON


def _reset(client, seed, headers=None, **overrides):
    payload = {"candidate_id": seed.candidate_id, "admin_user_id": seed.admin_id}
    payload.update(overrides)
    return client.post("/api/reset-candidate-assessment", json=payload, headers=headers or seed.admin_headers)


class TestResetEndpoint:
    def test_admin_reset_uses_default_reason(self, client, seed, procedures):
        resp = _reset(client, seed)
        assert resp.status_code == 200, resp.text
        assert resp.json() == {
            "success": True,
            "message": "Assessment reset successfully",
            "candidate_id": seed.candidate_id,
            "reset_by": seed.admin_id,
            "reset_reason": DEFAULT_RESET_REASON,
        }
        assert procedures.calls == [
            ("reset_candidate_assessment", seed.candidate_id, seed.admin_id, "Admin reset for re-evaluation")
        ]

    def test_custom_reason_is_passed_through(self, client, seed, procedures):
        resp = _reset(client, seed, reset_reason="Network outage during test")
        assert resp.status_code == 200
        assert procedures.calls[0][3] == "Network outage during test"

    def test_missing_ids(self, client, seed):
        resp = _reset(client, seed, admin_user_id=None)
        assert resp.status_code == 400

    def test_candidate_cannot_reset(self, client, seed, procedures):
        resp = _reset(client, seed, headers=seed.candidate_headers, admin_user_id=seed.candidate_user_id)
        assert resp.status_code == 403
        assert resp.json() == {"error": "Admin access required"}
        assert procedures.calls == []

    def test_admin_id_must_match_caller(self, client, seed, procedures):
        resp = _reset(client, seed, headers=seed.candidate_headers)
        assert resp.status_code == 403
        assert procedures.calls == []

    def test_candidate_of_other_company_is_not_found(self, client, seed, db, procedures):
        other = models.Company(name="Globex", industry="Retail", email="ops@globex.test")
        db.add(other)
        db.flush()
        outsider = models.Candidate(company_id=other.id, email="x@globex.test", full_name="X Person")
        db.add(outsider)
        db.commit()

        resp = _reset(client, seed, candidate_id=outsider.id)
        assert resp.status_code == 404
        assert procedures.calls == []

    def test_rpc_error(self, client, seed, procedures):
        procedures.failing.add("reset_candidate_assessment")
        resp = _reset(client, seed)
        assert resp.status_code == 500
        assert resp.json()["error"] == "Failed to reset assessment"

    def test_rpc_rejection_is_bad_request(self, client, seed, procedures):
        procedures.reset_outcome = procedures.reset_outcome.__class__(success=False, message="Nothing to reset")
        resp = _reset(client, seed)
        assert resp.status_code == 400
        assert resp.json()["error"] == "Nothing to reset"


def _session_returning(row):
    session = MagicMock()
    session.execute.return_value.mappings.return_value.first.return_value = row
    return session


class TestAssessmentProcedures:
    def test_eligibility_row_is_mapped(self):
        session = _session_returning(
            {"can_submit": True, "reason": "Eligible", "current_status": "in_progress", "submission_count": None}
        )
        result = AssessmentProcedures(session).check_submission_eligibility("c-1")

        assert result.can_submit is True
        assert result.submission_count == 0
        statement, params = session.execute.call_args.args
        assert "check_submission_eligibility" in str(statement)
        assert params == {"candidate_uuid": "c-1"}

    def test_submit_sends_metadata_as_json_and_commits(self):
        session = _session_returning({"success": True, "message": "ok", "submission_id": "s-1"})
        result = AssessmentProcedures(session).submit_assessment("c-1", {"submitted_via": "web_portal"})

        assert result.submission_id == "s-1"
        _, params = session.execute.call_args.args
        assert params["submission_metadata"] == '{"submitted_via": "web_portal"}'
        session.commit.assert_called_once()

    def test_empty_result_raises(self):
        session = _session_returning(None)
        with pytest.raises(ProcedureError):
            AssessmentProcedures(session).reset_candidate_assessment("c-1", "a-1", "reason")

    def test_database_error_rolls_back(self):
        session = MagicMock()
        session.execute.side_effect = OperationalError("SELECT", {}, Exception("function does not exist"))
        with pytest.raises(ProcedureError):
            AssessmentProcedures(session).check_submission_eligibility("c-1")
        session.rollback.assert_called_once()
