# app/controllers/__init__.py
from flask_jwt_extended import get_jwt_identity
from app.extensions import db
from app.models import Patient


def current_patient():
    """Patient behind the JWT identity, or None."""
    try:
        patient_id = int(get_jwt_identity())
    except (ValueError, TypeError):
        return None
    return db.session.get(Patient, patient_id)
