# app/routes/roadmap_routes.py
from flask import Blueprint
from app.controllers import roadmap_controller

roadmap_bp = Blueprint("roadmap", __name__, url_prefix="/api/v1/roadmap")

roadmap_bp.route("/plan", methods=["POST"])(roadmap_controller.create_plan)
roadmap_bp.route("/weekly-report", methods=["GET"])(roadmap_controller.get_weekly_report)
