# app/controllers/clinic_controller.py
from datetime import timedelta
from collections import defaultdict
from flask import current_app, jsonify, request
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from app.extensions import db
from app.models import Patient, DailyLog, WeeklyLog
from app.helpers import utcnow
from app.utils.clinic_auth import clinic_token_required
from app.services.normalizers import (
    STATUS_CHOICES,
    normalize_daily_row,
    normalize_patient_row,
    normalize_weekly_row,
    patient_code_of,
)
from app.services.report_engine import clinic_report, clinic_weeks
from app.services.status_engine import compute_status

SIGNAL_COLORS = ("red", "yellow", "green")
GENERATED_CODE_ATTEMPTS = 5


def _clinic_patients(clinic_id):
    wanted = clinic_id.strip().upper()
    candidates = Patient.query.filter(or_(
        func.upper(Patient.clinic_id) == wanted,
        func.upper(Patient.patient_code).like(wanted + "-%"),
    )).order_by(Patient.patient_code).all()
    return [p for p in candidates if p.in_clinic(clinic_id)]


def _logs_by_patient(model, patient_ids, since):
    grouped = defaultdict(list)
    if not patient_ids:
        return grouped
    rows = model.query.filter(model.patient_id.in_(patient_ids), model.timestamp >= since).all()
    for row in rows:
        grouped[row.patient_id].append(row.to_entry())
    return grouped


@clinic_token_required
def list_patients(clinic_id):
    patients = [p.to_dict() for p in _clinic_patients(clinic_id) if p.patient_code]
    return jsonify({"success": True, "clinic_id": clinic_id, "patients": patients}), 200


@clinic_token_required
def enroll_patient(clinic_id):
    data = request.get_json() or {}
    wanted = clinic_id.strip().upper()

    # patients are always enrolled into the clinic named in the URL
    body_clinic = str(data.get("clinic_id") or "").strip()
    if body_clinic and body_clinic.upper() != wanted:
        return jsonify({"success": False, "message": "clinic_id does not match this clinic"}), 400

    supplied_code = patient_code_of(data)
    if supplied_code and not supplied_code.upper().startswith(wanted + "-"):
        return jsonify({"success": False, "message": f"Patient code must start with {wanted}-"}), 400

    # a supplied code is tried once; generated codes are redrawn on collision
    attempts = 1 if supplied_code else GENERATED_CODE_ATTEMPTS
    patient = None
    for _ in range(attempts):
        candidate = Patient(**normalize_patient_row(data, clinic_id))
        try:
            db.session.add(candidate)
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            current_app.logger.info(f"Patient code {candidate.patient_code} already taken in clinic {clinic_id}")
            continue
        patient = candidate
        break

    if patient is None:
        return jsonify({"success": False, "message": "Patient code already exists"}), 409

    current_app.logger.info(f"Patient {patient.patient_code} enrolled in clinic {clinic_id}")
    return jsonify({"success": True, "message": "Patient enrolled", "patient": patient.to_dict()}), 201


@clinic_token_required
def get_dashboard(clinic_id):
    weeks = clinic_weeks(request.args.get("weeks"))
    status_filter = (request.args.get("status") or "").strip().lower()
    color_filter = (request.args.get("color") or "").strip().lower()
    if status_filter and status_filter not in STATUS_CHOICES:
        return jsonify({"success": False, "message": f"Unknown status filter: {status_filter}"}), 400
    if color_filter and color_filter not in SIGNAL_COLORS:
        return jsonify({"success": False, "message": f"Unknown color filter: {color_filter}"}), 400

    now = utcnow()
    since = now - timedelta(weeks=weeks)

    in_clinic = _clinic_patients(clinic_id)
    selected = [p for p in in_clinic if not status_filter or p.status == status_filter]

    ids = [p.id for p in selected]
    daily = _logs_by_patient(DailyLog, ids, since)
    weekly = _logs_by_patient(WeeklyLog, ids, since)

    rows = []
    for p in selected:
        row = p.to_dict()
        row["computed_status"] = compute_status(
            daily[p.id], weekly[p.id], now,
            current_app.config["SIGNAL_WINDOW_DAYS"], current_app.config["WEEKLY_WINDOW_WEEKS"],
        )
        rows.append(row)

    summary = {color: sum(1 for r in rows if r["computed_status"]["signal_color"] == color) for color in SIGNAL_COLORS}
    summary.update({status: sum(1 for p in in_clinic if p.status == status) for status in STATUS_CHOICES})

    shown = [r for r in rows if not color_filter or r["computed_status"]["signal_color"] == color_filter]

    return jsonify({
        "success": True,
        "clinic_id": clinic_id,
        "weeks": weeks,
        "patients": shown,
        "total": len(shown),
        "summary": summary,
    }), 200


@clinic_token_required
def get_patient_report(clinic_id, patient_code):
    patient = Patient.query.filter_by(patient_code=patient_code.strip()).first()
    if not patient:
        return jsonify({"success": False, "message": "Patient not found"}), 404
    if not patient.in_clinic(clinic_id):
        return jsonify({"success": False, "message": "Patient does not belong to this clinic"}), 401

    now = utcnow()
    weeks = clinic_weeks(request.args.get("weeks"))
    since = now - timedelta(weeks=weeks)
    daily = [log.to_entry() for log in DailyLog.for_patient(patient.id, since)]
    weekly = [log.to_entry() for log in WeeklyLog.for_patient(patient.id, since)]

    report = clinic_report(patient.to_dict(), daily, weekly, now, weeks)
    return jsonify({"success": True, **report}), 200


@clinic_token_required
def import_responses(clinic_id):
    """
    Bulk import of intake-form rows.
    Body: { "daily": [row, ...], "weekly": [row, ...] }
    Rows carry a patient_code (or 환자코드) and are matched to this clinic's patients.
    """
    data = request.get_json() or {}
    daily_rows = data.get("daily") or []
    weekly_rows = data.get("weekly") or []
    if not isinstance(daily_rows, list) or not isinstance(weekly_rows, list):
        return jsonify({"success": False, "message": "daily and weekly must be lists"}), 422

    by_code = {p.patient_code: p for p in _clinic_patients(clinic_id) if p.patient_code}
    counts = {"daily_imported": 0, "weekly_imported": 0, "skipped": 0, "unknown_patient": 0}

    batches = ((daily_rows, normalize_daily_row, DailyLog, "daily_imported"),
               (weekly_rows, normalize_weekly_row, WeeklyLog, "weekly_imported"))
    try:
        for rows, normalize, model, counter in batches:
            for row in rows:
                if not isinstance(row, dict):
                    counts["skipped"] += 1
                    continue
                patient = by_code.get(patient_code_of(row))
                if patient is None:
                    counts["unknown_patient"] += 1
                    continue
                entry = normalize(row)
                if entry is None:
                    counts["skipped"] += 1
                    continue
                db.session.add(model(patient_id=patient.id, source="import", **entry))
                counts[counter] += 1
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Response import failed for clinic {clinic_id}")
        return jsonify({"success": False, "message": "Error importing responses", "error": str(e)}), 500

    current_app.logger.info(f"Imported responses for clinic {clinic_id}: {counts}")
    return jsonify({"success": True, "message": "Responses imported", "counts": counts}), 201
