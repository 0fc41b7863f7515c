import pytest

from parikshan import models


def test_admin_lists_company_candidates_newest_first(client, seed, db):
    db.add(models.Candidate(company_id=seed.company_id, email="meera@example.com", full_name="Meera Iyer"))
    db.commit()

    resp = client.get("/api/candidates", headers=seed.admin_headers)
    assert resp.status_code == 200
    emails = {c["email"] for c in resp.json()}
    assert emails == {"ravi@example.com", "meera@example.com"}


def test_candidate_list_requires_admin(client, seed):
    resp = client.get("/api/candidates", headers=seed.candidate_headers)
    assert resp.status_code == 403
    assert resp.json() == {"error": "Admin access required"}


def test_invalid_token_is_unauthorized(client, seed):
    resp = client.get("/api/candidates", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid or expired token"}


def test_unknown_profile_is_forbidden(client, seed, auth_headers):
    resp = client.get("/api/profiles/me", headers=auth_headers("2f0e5a4c-0000-4000-8000-000000000000"))
    assert resp.status_code == 403
    assert resp.json() == {"error": "Profile not found"}


def test_stats(client, seed, db):
    db.add_all(
        [
            models.Candidate(
                company_id=seed.company_id,
                email=f"done{i}@example.com",
                full_name=f"Done {i}",
                test_status=models.TestStatus.COMPLETED,
            )
            for i in range(2)
        ]
    )
    db.commit()

    resp = client.get("/api/candidates/stats", headers=seed.admin_headers)
    assert resp.status_code == 200
    assert resp.json() == {"total": 3, "completed": 2, "completion_rate": 67}


def test_stats_for_empty_company(client, seed, db):
    db.query(models.Candidate).delete()
    db.commit()
    resp = client.get("/api/candidates/stats", headers=seed.admin_headers)
    assert resp.json() == {"total": 0, "completed": 0, "completion_rate": 0}


def test_candidate_reads_and_updates_own_record(client, seed):
    me = client.get("/api/candidates/me", headers=seed.candidate_headers)
    assert me.status_code == 200
    assert me.json()["id"] == seed.candidate_id
    assert me.json()["test_status"] == "questions_generated"

    upd = client.patch(
        "/api/candidates/me",
        json={"full_name": "Ravi K.", "phone": "  ", "profile_data": {"experience_years": 4}},
        headers=seed.candidate_headers,
    )
    assert upd.status_code == 200
    body = upd.json()
    assert body["full_name"] == "Ravi K."
    assert body["phone"] is None
    assert body["profile_data"] == {"experience_years": 4}


@pytest.mark.parametrize("full_name", [None, "", "   "])
def test_full_name_cannot_be_cleared(client, seed, db, full_name):
    resp = client.patch("/api/candidates/me", json={"full_name": full_name}, headers=seed.candidate_headers)
    assert resp.status_code == 422
    assert resp.json()["error"] == "Invalid request"
    db.expire_all()
    assert db.get(models.Candidate, seed.candidate_id).full_name == "Ravi Kumar"


def test_phone_only_update_keeps_name(client, seed):
    resp = client.patch("/api/candidates/me", json={"phone": "+91 98765 43210"}, headers=seed.candidate_headers)
    assert resp.status_code == 200
    assert resp.json()["full_name"] == "Ravi Kumar"
    assert resp.json()["phone"] == "+91 98765 43210"


def test_profile_data_must_be_an_object(client, seed):
    resp = client.patch("/api/candidates/me", json={"profile_data": ["a"]}, headers=seed.candidate_headers)
    assert resp.status_code == 422


def test_admin_deletes_candidate(client, seed, db):
    resp = client.delete(f"/api/candidates/{seed.candidate_id}", headers=seed.admin_headers)
    assert resp.status_code == 204
    assert db.query(models.Candidate).count() == 0


def test_admin_cannot_delete_other_company_candidate(client, seed, db, auth_headers):
    other = models.Company(name="Globex", industry="Retail", email="ops@globex.test")
    db.add(other)
    db.flush()
    other_admin = models.Profile(
        id="9d6f1c2e-1111-4000-8000-000000000001",
        email="ops@globex.test",
        role_id=seed.admin_role_id,
        company_id=other.id,
    )
    db.add(other_admin)
    db.commit()

    resp = client.delete(f"/api/candidates/{seed.candidate_id}", headers=auth_headers(other_admin.id))
    assert resp.status_code == 404


def test_candidate_questions_are_ordered_and_filterable(client, seed, db, make_question):
    second_section = models.Section(name="Personality", display_order=2)
    db.add(second_section)
    db.commit()
    make_question(seed.candidate_id, seed.company_id, seed.section_id, number=2)
    make_question(seed.candidate_id, seed.company_id, seed.section_id, number=1, metadata_={"trait": "logic"})
    make_question(seed.candidate_id, seed.company_id, second_section.id, number=1)

    resp = client.get(f"/api/candidates/{seed.candidate_id}/questions", headers=seed.candidate_headers)
    assert resp.status_code == 200
    assert len(resp.json()) == 3

    resp = client.get(
        f"/api/candidates/{seed.candidate_id}/questions",
        params={"section_id": seed.section_id},
        headers=seed.admin_headers,
    )
    questions = resp.json()
    assert [q["question_number"] for q in questions] == [1, 2]
    assert questions[0]["metadata"] == {"trait": "logic"}
    assert questions[0]["question_type"] == "mcq"


def test_evaluations_for_company(client, seed, db):
    db.add(models.Evaluation(candidate_id=seed.candidate_id, total_score=72.0, evaluation_status="completed"))
    db.commit()

    resp = client.get("/api/evaluations", headers=seed.admin_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert len(body) == 1
    assert body[0]["total_score"] == 72.0
