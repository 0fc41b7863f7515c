import uuid

from parikshan import models


def test_profile_me_includes_role(client, seed):
    resp = client.get("/api/profiles/me", headers=seed.admin_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] == seed.admin_id
    assert body["role_name"] == "admin"
    assert body["company_id"] == seed.company_id


def test_company_me(client, seed):
    resp = client.get("/api/companies/me", headers=seed.admin_headers)
    assert resp.status_code == 200
    assert resp.json()["name"] == "Acme Corp"


def test_company_me_without_company(client, seed, db, auth_headers):
    admin_id = str(uuid.uuid4())
    db.add(models.Profile(id=admin_id, email="fresh@newco.test", role_id=seed.admin_role_id))
    db.commit()

    resp = client.get("/api/companies/me", headers=auth_headers(admin_id))
    assert resp.status_code == 404
    assert resp.json() == {"error": "Company not found"}


def test_onboard_creates_and_links_company(client, seed, db, auth_headers):
    admin_id = str(uuid.uuid4())
    db.add(models.Profile(id=admin_id, email="fresh@newco.test", role_id=seed.admin_role_id))
    db.commit()
    headers = auth_headers(admin_id)

    resp = client.post("/api/companies/onboard", json={"name": "NewCo", "industry": "Healthcare"}, headers=headers)
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["email"] == "fresh@newco.test"
    assert body["industry"] == "Healthcare"

    db.expire_all()
    profile = db.query(models.Profile).filter(models.Profile.id == admin_id).first()
    assert profile.company_id == body["id"]

    again = client.post("/api/companies/onboard", json={"name": "NewCo Ltd", "industry": "Healthcare"}, headers=headers)
    assert again.status_code == 201
    assert again.json()["id"] == body["id"]
    assert db.query(models.Company).filter(models.Company.email == "fresh@newco.test").count() == 1


def test_onboard_requires_name_and_industry(client, seed):
    resp = client.post("/api/companies/onboard", json={"name": "", "industry": "Tech"}, headers=seed.admin_headers)
    assert resp.status_code == 422

    resp = client.post("/api/companies/onboard", json={"name": "   ", "industry": "Tech"}, headers=seed.admin_headers)
    assert resp.status_code == 400


def test_onboard_requires_admin(client, seed):
    resp = client.post(
        "/api/companies/onboard",
        json={"name": "Side Hustle", "industry": "Retail"},
        headers=seed.candidate_headers,
    )
    assert resp.status_code == 403
