# app/services/normalizers.py
"""
Boundary normalization: raw JSON bodies and spreadsheet/form rows become the
strict entry dicts the status engine works on. Everything loosely typed is
handled here, once, so handlers and engines never guess at field names.
"""

import math
import random
from datetime import datetime, timezone

from app.services.status_engine import round_half_up

YES_VALUES = {"true", "yes", "y", "1", "예"}

APPETITE_CHOICES = ("decreased", "maintained", "increased")
EXERCISE_CHOICES = ("none", "1x", "2-3x", "4x+")
STATUS_CHOICES = ("active", "paused", "discharged")
WEEKDAYS = ("MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN")

# Korean labels used by the intake forms
APPETITE_ALIASES = {"감소": "decreased", "유지": "maintained", "증가": "increased"}
EXERCISE_ALIASES = {"없음": "none", "주1회": "1x", "주2-3회": "2-3x", "주4회이상": "4x+"}
STATUS_ALIASES = {"활성": "active", "중단": "paused", "종료": "discharged"}

MIN_WEIGHT_KG = 20
MAX_WEIGHT_KG = 400

TIMESTAMP_KEYS = ("timestamp", "Timestamp", "created_at", "createdTime")
PATIENT_CODE_KEYS = ("patient_code", "환자코드")
STATUS_KEYS = ("status", "Status", "Select", "select", "STATUS", "상태", "patient_status")

DAILY_KEYS = {
    "medication_taken": ("medication_taken", "오늘 투약했나요?"),
    "nausea_level": ("nausea_level", "오심 정도 (0-10)"),
    "vomiting": ("vomiting", "구토 여부"),
    "dizziness": ("dizziness", "어지럼증 여부"),
    "abdominal_discomfort": ("abdominal_discomfort", "복부 불편감"),
    "overall_condition": ("overall_condition", "오늘 전반적 컨디션 (0-10)"),
    "weight_kg": ("weight_kg", "체중(kg)"),
}

WEEKLY_KEYS = {
    "weight_kg": ("weight_kg", "체중(kg)"),
    "body_fat_percent": ("body_fat_percent", "체지방률(%)"),
    "appetite_change": ("appetite_change", "식욕/포만감 변화"),
    "exercise_frequency": ("exercise_frequency", "운동 빈도"),
}

_TIMESTAMP_FORMATS = ("%Y/%m/%d %H:%M:%S", "%Y/%m/%d", "%Y-%m-%d %H:%M:%S", "%Y-%m-%d")


class NormalizationError(ValueError):
    """A request body that cannot be mapped onto a log entry."""


def s(v) -> str:
    return "" if v is None else str(v).strip()


def pick(row, *keys):
    """First present, non-empty value among the field-name aliases."""
    for key in keys:
        value = row.get(key)
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        return value
    return None


def to_bool(v) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return v != 0
    return s(v).lower() in YES_VALUES


def to_num(v, fallback=0):
    if isinstance(v, bool) or v is None:
        return fallback
    try:
        n = float(v)
    except (TypeError, ValueError):
        return fallback
    return n if math.isfinite(n) else fallback


def optional_num(v):
    return to_num(v, None)


def clamp_level(v) -> int:
    return int(max(0, min(10, round_half_up(to_num(v, 0)))))


def parse_timestamp(v):
    """Naive UTC datetime, or None when the value is not a timestamp."""
    if isinstance(v, datetime):
        dt = v
    else:
        raw = s(v)
        if not raw:
            return None
        try:
            dt = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            dt = None
            for fmt in _TIMESTAMP_FORMATS:
                try:
                    dt = datetime.strptime(raw, fmt)
                    break
                except ValueError:
                    continue
            if dt is None:
                return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def normalize_appetite(v) -> str:
    raw = s(v)
    if raw.lower() in APPETITE_CHOICES:
        return raw.lower()
    return APPETITE_ALIASES.get(raw, "maintained")


def normalize_exercise(v) -> str:
    raw = s(v)
    if raw.lower() in EXERCISE_CHOICES:
        return raw.lower()
    return EXERCISE_ALIASES.get(raw.replace(" ", ""), "none")


def normalize_status(v) -> str:
    raw = s(v)
    if raw.lower() in STATUS_CHOICES:
        return raw.lower()
    return STATUS_ALIASES.get(raw, "active")


def patient_status(row) -> str:
    return normalize_status(pick(row, *STATUS_KEYS))


def normalize_weekly_day(v) -> str:
    day = s(v).upper()
    return day if day in WEEKDAYS else "MON"


def patient_code_of(row) -> str:
    return s(pick(row, *PATIENT_CODE_KEYS))


def _optional_bool(row, keys):
    value = pick(row, *keys)
    return None if value is None else to_bool(value)


def normalize_daily_row(row):
    """Spreadsheet/form row -> daily entry, or None when it has no usable timestamp."""
    timestamp = parse_timestamp(pick(row, *TIMESTAMP_KEYS))
    if timestamp is None:
        return None

    condition = pick(row, *DAILY_KEYS["overall_condition"])
    weight = optional_num(pick(row, *DAILY_KEYS["weight_kg"]))
    return {
        "timestamp": timestamp,
        "medication_taken": to_bool(pick(row, *DAILY_KEYS["medication_taken"])),
        "nausea_level": clamp_level(pick(row, *DAILY_KEYS["nausea_level"])),
        "vomiting": to_bool(pick(row, *DAILY_KEYS["vomiting"])),
        "dizziness": _optional_bool(row, DAILY_KEYS["dizziness"]),
        "abdominal_discomfort": _optional_bool(row, DAILY_KEYS["abdominal_discomfort"]),
        "overall_condition": None if condition is None else clamp_level(condition),
        "weight_kg": weight if weight and weight > 0 else None,
    }


def normalize_weekly_row(row):
    """Spreadsheet/form row -> weekly entry, or None without a timestamp or plausible weight."""
    timestamp = parse_timestamp(pick(row, *TIMESTAMP_KEYS))
    if timestamp is None:
        return None

    weight = to_num(pick(row, *WEEKLY_KEYS["weight_kg"]), 0)
    if not MIN_WEIGHT_KG <= weight <= MAX_WEIGHT_KG:
        return None

    return {
        "timestamp": timestamp,
        "weight_kg": weight,
        "body_fat_percent": optional_num(pick(row, *WEEKLY_KEYS["body_fat_percent"])),
        "appetite_change": normalize_appetite(pick(row, *WEEKLY_KEYS["appetite_change"])),
        "exercise_frequency": normalize_exercise(pick(row, *WEEKLY_KEYS["exercise_frequency"])),
    }


def normalize_daily_payload(body, now):
    """Patient app body -> daily entry stamped with now."""
    if not isinstance(body.get("medication_taken"), bool):
        raise NormalizationError("medication_taken must be true or false")

    nausea = body.get("nausea_level")
    level = clamp_level(nausea) if isinstance(nausea, (int, float)) and not isinstance(nausea, bool) else 0

    weight = optional_num(body.get("weight_kg"))
    condition = body.get("overall_condition")
    return {
        "timestamp": now,
        "medication_taken": body["medication_taken"],
        "nausea_level": level,
        "vomiting": bool(body.get("vomiting")),
        "dizziness": None if body.get("dizziness") is None else bool(body.get("dizziness")),
        "abdominal_discomfort": None if body.get("abdominal_discomfort") is None else bool(body.get("abdominal_discomfort")),
        "overall_condition": None if condition is None else clamp_level(condition),
        "weight_kg": weight if weight and weight > 0 else None,
    }


def normalize_weekly_payload(body, now):
    """Patient app body -> weekly entry stamped with now."""
    weight = to_num(body.get("weight_kg"), None)
    if weight is None or not MIN_WEIGHT_KG <= weight <= MAX_WEIGHT_KG:
        raise NormalizationError(f"weight_kg must be a number between {MIN_WEIGHT_KG} and {MAX_WEIGHT_KG}")

    return {
        "timestamp": now,
        "weight_kg": weight,
        "body_fat_percent": optional_num(body.get("body_fat_percent")),
        "appetite_change": normalize_appetite(body.get("appetite_change")),
        "exercise_frequency": normalize_exercise(body.get("exercise_frequency")),
    }


def generate_patient_code(clinic_id: str) -> str:
    return f"{s(clinic_id).upper()}-{random.randint(0, 9999):04d}"


def normalize_patient_row(row, clinic_id: str):
    """Clinic enrollment payload -> Patient column values."""
    code = patient_code_of(row) or generate_patient_code(clinic_id)
    return {
        "clinic_id": s(clinic_id),
        "patient_code": code,
        "name_or_initial": s(row.get("name_or_initial")) or None,
        "phone": s(row.get("phone")) or None,
        "weekly_day": normalize_weekly_day(row.get("weekly_day")),
        "consent": to_bool(row.get("consent")),
        "status": patient_status(row),
    }
