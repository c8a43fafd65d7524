def register(client, **body):
    return client.post("/api/v1/auth/register", json=body)


def test_register_login_and_me(client):
    res = register(client, email="Jin@Example.com", password="secret123")
    assert res.status_code == 201
    user_id = res.get_json()["user_id"]

    res = client.post("/api/v1/auth/login", json={"email": "jin@example.com", "password": "secret123"})
    assert res.status_code == 200
    body = res.get_json()
    assert body["user"]["user_id"] == user_id
    token = body["access_token"]

    res = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 200
    assert res.get_json()["email"] == "jin@example.com"


def test_register_validation(client):
    assert register(client, email="", password="secret123").status_code == 400
    assert register(client, email="not-an-email", password="secret123").status_code == 400
    assert register(client, email="a@b.co", password="123").status_code == 400


def test_register_duplicate_email(client, make_patient):
    make_patient(email="taken@example.com")
    res = register(client, email="taken@example.com", password="secret123")
    assert res.status_code == 409


def test_register_claims_clinic_enrollment(client, make_patient):
    enrolled = make_patient(clinic_id="C001", patient_code="C001-0001")
    res = register(client, email="p1@example.com", password="secret123", patient_code="C001-0001")
    assert res.status_code == 201
    assert res.get_json()["user_id"] == enrolled.user_id

    res = register(client, email="p2@example.com", password="secret123", patient_code="C001-0001")
    assert res.status_code == 409


def test_register_unknown_patient_code(client):
    res = register(client, email="p@example.com", password="secret123", patient_code="C009-0001")
    assert res.status_code == 404


def test_login_rejects_bad_credentials(client, make_patient):
    make_patient(email="jin@example.com", password="secret123")
    res = client.post("/api/v1/auth/login", json={"email": "jin@example.com", "password": "wrong-pass"})
    assert res.status_code == 401
    assert res.get_json()["success"] is False

    res = client.post("/api/v1/auth/login", json={"email": "nobody@example.com", "password": "secret123"})
    assert res.status_code == 401


def test_me_requires_token(client):
    res = client.get("/api/v1/auth/me")
    assert res.status_code == 401
    assert res.get_json()["success"] is False


def test_me_rejects_garbage_token(client):
    res = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 422
