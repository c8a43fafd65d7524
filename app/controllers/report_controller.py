# app/controllers/report_controller.py
from datetime import timedelta
from flask import current_app, jsonify, request
from flask_jwt_extended import jwt_required
from app.models import DailyLog, WeeklyLog
from app.controllers import current_patient
from app.helpers import api_response, utcnow
from app.services.report_engine import patient_period, patient_report
from app.services.status_engine import compute_status


def _entries(patient_id, since):
    daily = [log.to_entry() for log in DailyLog.for_patient(patient_id, since)]
    weekly = [log.to_entry() for log in WeeklyLog.for_patient(patient_id, since)]
    return daily, weekly


@jwt_required()
def get_report():
    patient = current_patient()
    if not patient:
        return jsonify({"success": False, "message": "Patient not found"}), 404

    now = utcnow()
    days = patient_period(request.args.get("days"))
    daily, weekly = _entries(patient.id, now - timedelta(days=days))

    report = patient_report(patient.user_id, daily, weekly, now, days)
    return api_response(True, "Report generated", report)


@jwt_required()
def get_status():
    patient = current_patient()
    if not patient:
        return jsonify({"success": False, "message": "Patient not found"}), 404

    now = utcnow()
    window_days = current_app.config["SIGNAL_WINDOW_DAYS"]
    window_weeks = current_app.config["WEEKLY_WINDOW_WEEKS"]
    # all logs: days_since_last_* looks past the window
    daily, weekly = _entries(patient.id, None)

    status = compute_status(daily, weekly, now, window_days, window_weeks)
    return api_response(True, "Status computed", status)
