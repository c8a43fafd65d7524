# app/routes/report_routes.py
from flask import Blueprint
from app.controllers import report_controller

report_bp = Blueprint("report", __name__, url_prefix="/api/v1/report")

report_bp.route("", methods=["GET"])(report_controller.get_report)
report_bp.route("/status", methods=["GET"])(report_controller.get_status)
