# app/services/report_engine.py
"""
Period reports for patients (14/30 days) and clinics (1-26 weeks), built on
top of the status engine.
"""

from datetime import datetime, timedelta
from typing import Dict, List, Optional

from app.services.status_engine import (
    classify_signal,
    compute_status,
    compute_weekly_delta,
    filter_window,
    percent,
    round_half_up,
)

PATIENT_PERIODS = (14, 30)
DEFAULT_PATIENT_PERIOD = 14
DEFAULT_CLINIC_WEEKS = 4
MAX_CLINIC_WEEKS = 26


def _average(values: List[float]) -> Optional[float]:
    if not values:
        return None
    return round_half_up(sum(values) / len(values), 1)


def _serialize(entry: Dict) -> Dict:
    out = dict(entry)
    out["timestamp"] = entry["timestamp"].isoformat()
    return out


def build_chart_data(daily: List[Dict], weekly: List[Dict]) -> List[Dict]:
    points: Dict[str, Dict] = {}
    for e in sorted(daily, key=lambda e: e["timestamp"]):
        day = e["timestamp"].date().isoformat()
        points[day] = {
            "date": day,
            "nausea_level": e.get("nausea_level"),
            "medication_taken": e.get("medication_taken"),
            "vomiting": e.get("vomiting"),
            "overall_condition": e.get("overall_condition"),
            "weight_kg": e.get("weight_kg"),
        }
    # weekly weigh-ins win over a same-day daily weight
    for w in sorted(weekly, key=lambda e: e["timestamp"]):
        day = w["timestamp"].date().isoformat()
        point = points.setdefault(day, {"date": day})
        point["weight_kg"] = w.get("weight_kg")
        if w.get("body_fat_percent") is not None:
            point["body_fat_percent"] = w["body_fat_percent"]
    return [points[day] for day in sorted(points)]


def build_report(daily_logs: List[Dict], weekly_logs: List[Dict], now: datetime, period_days: int) -> Dict:
    daily = sorted(filter_window(daily_logs, now, period_days), key=lambda e: e["timestamp"])
    weekly = sorted(filter_window(weekly_logs, now, period_days), key=lambda e: e["timestamp"])

    # the signal always looks at the trailing week, whatever the period
    color, reasons = classify_signal(filter_window(daily_logs, now, 7))

    taken = sum(1 for e in daily if e.get("medication_taken"))
    delta = compute_weekly_delta(weekly, now, weeks_for(period_days))

    stats = {
        "total_days": period_days,
        "records_count": len(daily),
        "adherence_rate": percent(taken, len(daily)),
        "avg_nausea": _average([int(e.get("nausea_level") or 0) for e in daily]) or 0,
        "avg_condition": _average([e["overall_condition"] for e in daily if e.get("overall_condition") is not None]),
        "max_nausea": max((int(e.get("nausea_level") or 0) for e in daily), default=0),
        "vomiting_count": sum(1 for e in daily if e.get("vomiting")),
        "missed_medication": len(daily) - taken,
        "weight_start": delta["weight_start"],
        "weight_latest": delta["weight_latest"],
        "weight_change": delta["weight_change"],
        "weight_change_percent": delta["weight_change_percent"],
    }

    return {
        "period_days": period_days,
        "period_start": (now - timedelta(days=period_days)).isoformat(),
        "period_end": now.isoformat(),
        "signal": {"color": color, "reasons": reasons},
        "stats": stats,
        "chart_data": build_chart_data(daily, weekly),
        "daily_logs": [_serialize(e) for e in daily],
        "weekly_logs": [_serialize(e) for e in weekly],
    }


def weeks_for(period_days: int) -> int:
    # compute_weekly_delta takes whole weeks; round up so the period is covered
    return -(-period_days // 7)


def patient_period(raw) -> int:
    try:
        days = int(raw)
    except (TypeError, ValueError):
        return DEFAULT_PATIENT_PERIOD
    return days if days in PATIENT_PERIODS else DEFAULT_PATIENT_PERIOD


def clinic_weeks(raw) -> int:
    try:
        weeks = int(raw)
    except (TypeError, ValueError):
        return DEFAULT_CLINIC_WEEKS
    return max(1, min(MAX_CLINIC_WEEKS, weeks))


def patient_report(user_id: str, daily_logs: List[Dict], weekly_logs: List[Dict], now: datetime, period_days=DEFAULT_PATIENT_PERIOD) -> Dict:
    report = build_report(daily_logs, weekly_logs, now, patient_period(period_days))
    report["user_id"] = user_id
    return report


def clinic_report(patient: Dict, daily_logs: List[Dict], weekly_logs: List[Dict], now: datetime, weeks=DEFAULT_CLINIC_WEEKS) -> Dict:
    weeks = clinic_weeks(weeks)
    report = build_report(daily_logs, weekly_logs, now, weeks * 7)
    report["period_weeks"] = weeks
    report["patient"] = patient
    report["computed_status"] = compute_status(daily_logs, weekly_logs, now, window_weeks=weeks)
    return report
