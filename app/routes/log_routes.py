# app/routes/log_routes.py
from flask import Blueprint
from app.controllers import log_controller

logs_bp = Blueprint("logs", __name__, url_prefix="/api/v1/logs")

logs_bp.route("/daily", methods=["POST"])(log_controller.create_daily_log)
logs_bp.route("/weekly", methods=["POST"])(log_controller.create_weekly_log)
logs_bp.route("/history", methods=["GET"])(log_controller.get_history)
