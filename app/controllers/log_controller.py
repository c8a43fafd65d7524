# app/controllers/log_controller.py
from datetime import timedelta
from flask import current_app, jsonify, request
from flask_jwt_extended import jwt_required
from app.extensions import db
from app.models import DailyLog, WeeklyLog
from app.controllers import current_patient
from app.helpers import api_response, clamp_int, utcnow
from app.services.normalizers import (
    NormalizationError,
    normalize_daily_payload,
    normalize_weekly_payload,
)

DEFAULT_HISTORY_DAYS = 30
MAX_HISTORY_DAYS = 90


def _save(log, kind):
    try:
        db.session.add(log)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Failed to save {kind} log")
        return jsonify({"success": False, "message": f"Error saving {kind} log", "error": str(e)}), 500

    current_app.logger.info(f"{kind.capitalize()} log saved for patient_id={log.patient_id}")
    return jsonify({"success": True, "message": f"{kind.capitalize()} log saved", "log": log.to_dict()}), 201


@jwt_required()
def create_daily_log():
    patient = current_patient()
    if not patient:
        return jsonify({"success": False, "message": "Patient not found"}), 404

    data = request.get_json() or {}
    try:
        entry = normalize_daily_payload(data, utcnow())
    except NormalizationError as e:
        return jsonify({"success": False, "message": str(e)}), 400

    return _save(DailyLog(patient_id=patient.id, source="app", **entry), "daily")


@jwt_required()
def create_weekly_log():
    patient = current_patient()
    if not patient:
        return jsonify({"success": False, "message": "Patient not found"}), 404

    data = request.get_json() or {}
    try:
        entry = normalize_weekly_payload(data, utcnow())
    except NormalizationError as e:
        return jsonify({"success": False, "message": str(e)}), 400

    return _save(WeeklyLog(patient_id=patient.id, source="app", **entry), "weekly")


@jwt_required()
def get_history():
    patient = current_patient()
    if not patient:
        return jsonify({"success": False, "message": "Patient not found"}), 404

    days = clamp_int(request.args.get("days"), DEFAULT_HISTORY_DAYS, 1, MAX_HISTORY_DAYS)
    since = utcnow() - timedelta(days=days)

    return api_response(True, "History loaded", {
        "days": days,
        "daily_logs": [log.to_dict() for log in DailyLog.for_patient(patient.id, since)],
        "weekly_logs": [log.to_dict() for log in WeeklyLog.for_patient(patient.id, since)],
    })
