# app/utils/clinic_auth.py
"""
Static token-map authentication for clinic dashboards.
CLINIC_TOKEN_MAP maps clinic_id -> token.
"""
import hmac
from functools import wraps
from flask import current_app, jsonify, request


def read_clinic_token():
    # x-clinic-token > Authorization: Bearer > ?token=
    header_token = (request.headers.get("x-clinic-token") or "").strip()
    if header_token:
        return header_token

    auth_header = request.headers.get("Authorization") or ""
    if auth_header.startswith("Bearer "):
        bearer = auth_header[7:].strip()
        if bearer:
            return bearer

    return (request.args.get("token") or "").strip() or None


def authenticate_clinic(clinic_id):
    """Returns an error message, or None when the request may act for clinic_id."""
    token = read_clinic_token()
    clinic_id = (clinic_id or "").strip()
    if not token or not clinic_id:
        return "Missing token or clinic_id"

    token_map = current_app.config.get("CLINIC_TOKEN_MAP") or {}
    if not token_map:
        return "Token map not configured"

    expected = token_map.get(clinic_id)
    # compare_digest rejects non-ASCII str; compare bytes
    if not expected or not hmac.compare_digest(str(expected).encode("utf-8"), token.encode("utf-8")):
        return "Invalid token for clinic"
    return None


def clinic_token_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        error = authenticate_clinic(kwargs.get("clinic_id"))
        if error:
            current_app.logger.info(f"Clinic auth rejected for {kwargs.get('clinic_id')}: {error}")
            return jsonify({"success": False, "message": error}), 401
        return fn(*args, **kwargs)
    return wrapper
