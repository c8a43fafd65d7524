import re
from flask import current_app, jsonify, request
from sqlalchemy.exc import IntegrityError
from flask_jwt_extended import create_access_token, jwt_required
from app.extensions import db
from app.models import Patient
from app.controllers import current_patient

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6


def register():
    data = request.get_json() or {}
    email = (data.get("email") or "").lower().strip()
    password = data.get("password") or ""
    patient_code = (data.get("patient_code") or "").strip()

    if not email or not password:
        return jsonify({"success": False, "message": "Email and password required"}), 400
    if not EMAIL_RE.match(email):
        return jsonify({"success": False, "message": "Invalid email address"}), 400
    if len(password) < MIN_PASSWORD_LENGTH:
        return jsonify({"success": False, "message": "Password too short"}), 400

    if patient_code:
        # claim a clinic enrollment instead of creating a fresh identity
        patient = Patient.query.filter_by(patient_code=patient_code).first()
        if not patient:
            return jsonify({"success": False, "message": "Unknown patient code"}), 404
        if patient.email:
            return jsonify({"success": False, "message": "Patient code already registered"}), 409
        patient.email = email
    else:
        patient = Patient(email=email, consent=bool(data.get("consent", True)))

    patient.set_password(password)
    try:
        db.session.add(patient)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return jsonify({"success": False, "message": "Email already exists"}), 409

    current_app.logger.info(f"Patient registered: {patient.user_id}")
    return jsonify({"success": True, "message": "Patient registered", "user_id": patient.user_id}), 201


def login():
    data = request.get_json() or {}
    email = (data.get("email") or "").lower().strip()
    password = data.get("password")

    if not email or not password:
        return jsonify({"message": "Email and password required", "success": False}), 400

    patient = Patient.query.filter_by(email=email).first()
    if not patient or not patient.check_password(password):
        return jsonify({"message": "Invalid credentials", "success": False}), 401

    access_token = create_access_token(identity=str(patient.id))

    return jsonify({
        "message": "Login successful",
        "success": True,
        "user": {
            "user_id": patient.user_id,
            "email": patient.email,
            "patient_code": patient.patient_code,
        },
        "access_token": access_token
    }), 200


@jwt_required()
def me():
    patient = current_patient()
    if not patient:
        return jsonify({"success": False, "message": "Patient not found"}), 404

    return jsonify({
        "success": True,
        "user_id": patient.user_id,
        "email": patient.email,
        "consent": bool(patient.consent),
        "clinic_id": patient.clinic_id,
        "patient_code": patient.patient_code,
    }), 200
