# app/controllers/share_controller.py
from datetime import timedelta
from flask import current_app, jsonify, request
from flask_jwt_extended import jwt_required
from app.extensions import db
from app.models import DailyLog, WeeklyLog, ShareToken
from app.controllers import current_patient
from app.helpers import utcnow
from app.services.report_engine import patient_report

SHORT_SHARE_MINUTES = 10
LONG_SHARE_MINUTES = 1440
SHARED_REPORT_DAYS = 14
SHARED_LOOKBACK_DAYS = 30


def share_minutes(raw):
    # only 10 minutes or 24 hours
    return LONG_SHARE_MINUTES if raw == LONG_SHARE_MINUTES else SHORT_SHARE_MINUTES


@jwt_required()
def create_share():
    patient = current_patient()
    if not patient:
        return jsonify({"success": False, "message": "Patient not found"}), 404

    data = request.get_json(silent=True) or {}
    now = utcnow()
    share = ShareToken(
        patient_id=patient.id,
        expires_at=now + timedelta(minutes=share_minutes(data.get("expires_minutes"))),
        created_at=now,
    )
    try:
        db.session.add(share)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception("Failed to create share token")
        return jsonify({"success": False, "message": "Error creating share link", "error": str(e)}), 500

    current_app.logger.info(f"Share link created for patient_id={patient.id}, expires {share.expires_at}")
    return jsonify({"success": True, "message": "Share link created", "token": share.to_dict()}), 201


@jwt_required()
def list_shares():
    patient = current_patient()
    if not patient:
        return jsonify({"success": False, "message": "Patient not found"}), 404

    tokens = (ShareToken.query
              .filter_by(patient_id=patient.id)
              .order_by(ShareToken.created_at.desc(), ShareToken.id.desc())
              .all())
    return jsonify({"success": True, "tokens": [t.to_dict() for t in tokens]}), 200


def get_shared_report(token):
    """Public read: anyone holding a live link sees the 14-day report."""
    share = ShareToken.query.filter_by(token=token).first()
    if not share:
        return jsonify({"success": False, "message": "Invalid share link"}), 404

    now = utcnow()
    if share.revoked_at is not None:
        return jsonify({"success": False, "message": "Share link was revoked"}), 410
    if share.is_expired(now):
        return jsonify({"success": False, "message": "Share link has expired"}), 410

    since = now - timedelta(days=SHARED_LOOKBACK_DAYS)
    daily = [log.to_entry() for log in DailyLog.for_patient(share.patient_id, since)]
    weekly = [log.to_entry() for log in WeeklyLog.for_patient(share.patient_id, since)]
    report = patient_report(share.patient.user_id, daily, weekly, now, SHARED_REPORT_DAYS)

    return jsonify({"success": True, "report": report, "expires_at": share.to_dict()["expires_at"]}), 200


@jwt_required()
def revoke_share(token):
    patient = current_patient()
    if not patient:
        return jsonify({"success": False, "message": "Patient not found"}), 404

    share = ShareToken.query.filter_by(token=token).first()
    if not share:
        return jsonify({"success": False, "message": "Share link not found"}), 404
    if share.patient_id != patient.id:
        return jsonify({"success": False, "message": "Not allowed to revoke this share link"}), 403

    if share.revoked_at is None:
        share.revoked_at = utcnow()
        db.session.commit()
        current_app.logger.info(f"Share link revoked for patient_id={patient.id}")
    return jsonify({"success": True, "message": "Share link revoked"}), 200
