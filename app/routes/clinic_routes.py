# app/routes/clinic_routes.py
from flask import Blueprint
from app.controllers import clinic_controller

clinic_bp = Blueprint("clinic", __name__, url_prefix="/api/v1/clinics/<clinic_id>")

clinic_bp.route("/patients", methods=["GET"])(clinic_controller.list_patients)
clinic_bp.route("/patients", methods=["POST"])(clinic_controller.enroll_patient)
clinic_bp.route("/dashboard", methods=["GET"])(clinic_controller.get_dashboard)
clinic_bp.route("/patients/<patient_code>/report", methods=["GET"])(clinic_controller.get_patient_report)
clinic_bp.route("/responses/import", methods=["POST"])(clinic_controller.import_responses)
