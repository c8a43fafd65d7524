# tests/conftest.py
from datetime import timedelta

import pytest
from flask_jwt_extended import create_access_token

from app import create_app
from app.extensions import db
from app.helpers import utcnow
from app.models import Patient, DailyLog, WeeklyLog

CLINIC_ID = "C001"
CLINIC_TOKEN = "clinic-token-c001"
OTHER_CLINIC_ID = "C002"
OTHER_CLINIC_TOKEN = "clinic-token-c002"


@pytest.fixture
def app():
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "JWT_SECRET_KEY": "test-secret-key-that-is-long-enough-for-hs256",
        "CLINIC_TOKEN_MAP": {CLINIC_ID: CLINIC_TOKEN, OTHER_CLINIC_ID: OTHER_CLINIC_TOKEN},
    })
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_patient(app):
    def _make(email=None, password="secret123", **fields):
        patient = Patient(email=email, **fields)
        if email:
            patient.set_password(password)
        db.session.add(patient)
        db.session.commit()
        return patient
    return _make


@pytest.fixture
def auth_headers(app):
    def _headers(patient):
        token = create_access_token(identity=str(patient.id))
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def clinic_headers():
    return {"x-clinic-token": CLINIC_TOKEN}


@pytest.fixture
def add_daily(app):
    def _add(patient, days_ago=0, medication_taken=True, nausea_level=0, vomiting=False, **fields):
        log = DailyLog(
            patient_id=patient.id,
            timestamp=utcnow() - timedelta(days=days_ago, hours=1),
            medication_taken=medication_taken,
            nausea_level=nausea_level,
            vomiting=vomiting,
            **fields,
        )
        db.session.add(log)
        db.session.commit()
        return log
    return _add


@pytest.fixture
def add_weekly(app):
    def _add(patient, days_ago=0, weight_kg=80.0, **fields):
        log = WeeklyLog(
            patient_id=patient.id,
            timestamp=utcnow() - timedelta(days=days_ago, hours=1),
            weight_kg=weight_kg,
            **fields,
        )
        db.session.add(log)
        db.session.commit()
        return log
    return _add
