from datetime import datetime, timedelta

import pytest

from app.extensions import db
from app.helpers import utcnow
from app.models import ShareToken


def create_share(client, headers, **body):
    res = client.post("/api/v1/share", json=body, headers=headers)
    assert res.status_code == 201
    return res.get_json()["token"]


def lifetime(token):
    return datetime.fromisoformat(token["expires_at"]) - datetime.fromisoformat(token["created_at"])


@pytest.mark.parametrize("body,expected", [
    ({}, timedelta(minutes=10)),
    ({"expires_minutes": 1440}, timedelta(hours=24)),
    ({"expires_minutes": 60}, timedelta(minutes=10)),
])
def test_create_share_expiry(client, make_patient, auth_headers, body, expected):
    patient = make_patient(email="jin@example.com")
    token = create_share(client, auth_headers(patient), **body)
    assert len(token["token"]) == 32
    assert token["revoked_at"] is None
    assert lifetime(token) == expected


def test_create_share_requires_auth(client):
    assert client.post("/api/v1/share", json={}).status_code == 401


def test_list_shares_only_own_newest_first(client, make_patient, auth_headers):
    patient = make_patient(email="jin@example.com")
    other = make_patient(email="other@example.com")
    first = create_share(client, auth_headers(patient))
    second = create_share(client, auth_headers(patient), expires_minutes=1440)
    create_share(client, auth_headers(other))

    res = client.get("/api/v1/share", headers=auth_headers(patient))
    assert res.status_code == 200
    assert [t["token"] for t in res.get_json()["tokens"]] == [second["token"], first["token"]]


def test_shared_report_is_public(client, make_patient, auth_headers, add_daily):
    patient = make_patient(email="jin@example.com")
    add_daily(patient, days_ago=1, nausea_level=3)
    add_daily(patient, days_ago=20)
    token = create_share(client, auth_headers(patient))

    res = client.get(f"/api/v1/share/{token['token']}")
    assert res.status_code == 200
    body = res.get_json()
    assert body["expires_at"] == token["expires_at"]
    assert body["report"]["user_id"] == patient.user_id
    assert body["report"]["period_days"] == 14
    assert body["report"]["stats"]["records_count"] == 1


def test_shared_report_unknown_token(client):
    assert client.get("/api/v1/share/does-not-exist").status_code == 404


def test_expired_share_is_gone(client, make_patient):
    patient = make_patient(email="jin@example.com")
    share = ShareToken(patient_id=patient.id, expires_at=utcnow() - timedelta(minutes=1))
    db.session.add(share)
    db.session.commit()

    res = client.get(f"/api/v1/share/{share.token}")
    assert res.status_code == 410


def test_revoke_share(client, make_patient, auth_headers):
    owner = make_patient(email="jin@example.com")
    stranger = make_patient(email="other@example.com")
    token = create_share(client, auth_headers(owner), expires_minutes=1440)
    url = f"/api/v1/share/{token['token']}"

    assert client.delete(url, headers=auth_headers(stranger)).status_code == 403
    assert client.get(url).status_code == 200

    assert client.delete(url, headers=auth_headers(owner)).status_code == 200
    assert client.get(url).status_code == 410
    assert client.delete(url, headers=auth_headers(owner)).status_code == 200

    listed = client.get("/api/v1/share", headers=auth_headers(owner)).get_json()["tokens"]
    assert listed[0]["revoked_at"] is not None


def test_revoke_unknown_share(client, make_patient, auth_headers):
    patient = make_patient(email="jin@example.com")
    assert client.delete("/api/v1/share/nope", headers=auth_headers(patient)).status_code == 404


def test_revoke_requires_auth(client):
    assert client.delete("/api/v1/share/whatever").status_code == 401
