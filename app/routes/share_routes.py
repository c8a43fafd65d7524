# app/routes/share_routes.py
from flask import Blueprint
from app.controllers import share_controller

share_bp = Blueprint("share", __name__, url_prefix="/api/v1/share")

share_bp.route("", methods=["POST"])(share_controller.create_share)
share_bp.route("", methods=["GET"])(share_controller.list_shares)
share_bp.route("/<token>", methods=["GET"])(share_controller.get_shared_report)
share_bp.route("/<token>", methods=["DELETE"])(share_controller.revoke_share)
