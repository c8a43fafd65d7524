# app/controllers/roadmap_controller.py
import math
from flask import jsonify, request
from app.helpers import api_response
from app.services.roadmap_engine import DRUG_METRICS, generate_roadmap
from app.services.strategy_engine import build_weekly_report

REQUIRED_TEXT = [
    "user_name", "user_gender", "exercise", "muscle_mass",
    "budget", "main_concern", "resolution",
    "drug_status", "drug_type", "current_dose",
]


def _number(raw):
    try:
        n = float(raw)
    except (TypeError, ValueError):
        return None
    return n if math.isfinite(n) else None


def create_plan():
    data = request.get_json() or {}

    drug_type = (data.get("drug_type") or "").upper()
    age = _number(data.get("age"))
    weight = _number(data.get("current_weight"))

    missing = []
    if drug_type not in DRUG_METRICS:
        missing.append("drug_type")
    if age is None or not 10 <= age <= 120:
        missing.append("age")
    if weight is None or weight <= 0:
        missing.append("current_weight")
    if missing:
        return jsonify({"success": False, "message": "Invalid input", "missing": missing}), 400

    plan = generate_roadmap(
        drug_type,
        int(age),
        weight,
        gender=(data.get("gender") or "female").lower(),
        muscle_status=(data.get("muscle_status") or "normal").lower(),
    )
    return api_response(True, "Roadmap generated", plan)


def get_weekly_report():
    args = request.args
    missing = [field for field in REQUIRED_TEXT if not (args.get(field) or "").strip()]

    user_age = _number(args.get("user_age"))
    if user_age is None or not 10 <= user_age <= 120:
        missing.append("user_age")
    current_week = _number(args.get("current_week"))
    if current_week is None or current_week < 0:
        missing.append("current_week")
    current_weight = _number(args.get("current_weight"))
    if current_weight is None or current_weight <= 0:
        missing.append("current_weight")
    target_weight = _number(args.get("target_weight"))
    if target_weight is None or target_weight <= 0:
        missing.append("target_weight")

    drug_status = (args.get("drug_status") or "").upper()
    if args.get("drug_type") == "NONE":
        missing.append("drug_type(NONE_not_allowed)")

    if drug_status == "ON":
        if not (args.get("start_date") or "").strip():
            missing.append("start_date")
        start_weight = _number(args.get("start_weight_before_drug"))
        if start_weight is None or start_weight <= 0:
            missing.append("start_weight_before_drug")

    if missing:
        return jsonify({"success": False, "message": "Missing or invalid input", "missing": missing}), 400

    height_cm = _number(args.get("height_cm"))
    start_bmi = None
    if height_cm and height_cm > 0:
        base_weight = _number(args.get("start_weight_before_drug")) or current_weight
        start_bmi = base_weight / (height_cm / 100) ** 2

    user_data = {
        "user_name": args.get("user_name").strip(),
        "drug_status": drug_status,
        "user_age": int(user_age),
        "current_week": int(current_week),
        "current_weight": current_weight,
        "target_weight": target_weight,
        "muscle_mass": args.get("muscle_mass").strip().lower(),
        "budget": args.get("budget").strip().lower(),
    }
    report = build_weekly_report(
        user_data,
        last_weight=_number(args.get("last_weight")),
        start_bmi=start_bmi,
        stage_title=(args.get("stage_title") or "").strip() or None,
    )
    return api_response(True, "Weekly report generated", report)
