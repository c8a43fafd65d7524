# app/services/status_engine.py
"""
Patient status aggregation and signal classification.

Works on normalized log entries (plain dicts with a naive-UTC datetime under
"timestamp"), as produced by DailyLog.to_entry / WeeklyLog.to_entry or the
normalizers. Every function here is pure: callers pass "now" in.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)

SIGNAL_RED = "red"
SIGNAL_YELLOW = "yellow"
SIGNAL_GREEN = "green"

SEVERE_NAUSEA = 8
MODERATE_NAUSEA = 5
MODERATE_NAUSEA_DAYS = 2
MISSED_DOSES_RED = 2

REASON_NO_DATA = "no data in the last 7 days"
REASON_VOMITING = "vomiting occurred"
REASON_SEVERE_NAUSEA = "severe nausea (≥8/10)"
REASON_MISSED_DOSES = "multiple missed doses"
REASON_MODERATE_NAUSEA_DAYS = "moderate nausea on 2+ days"
REASON_MODERATE_NAUSEA = "moderate nausea (≥5/10)"
REASON_ONE_MISSED_DOSE = "one missed dose"
REASON_CAUTION = "caution"
REASON_STABLE = "stable"


def round_half_up(x: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(x * factor + 0.5) / factor


def percent(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    return int(round_half_up(100 * part / whole))


def filter_window(entries: Iterable[Dict], now: datetime, window_days: int) -> List[Dict]:
    since = now - timedelta(days=window_days)
    return [e for e in entries if e.get("timestamp") is not None and since <= e["timestamp"] <= now]


def _nausea(entry: Dict) -> int:
    return int(entry.get("nausea_level") or 0)


def compute_window(logs: Iterable[Dict], now: datetime, window_days: int = 7) -> Dict:
    """Adherence and symptom statistics for the trailing window."""
    window = filter_window(logs, now, window_days)
    total = len(window)
    taken = sum(1 for e in window if e.get("medication_taken"))
    return {
        "window_days": window_days,
        "total": total,
        "taken": taken,
        "adherence_rate": percent(taken, total),
        "missed": total - taken,
        "max_nausea": max((_nausea(e) for e in window), default=0),
        "vomiting_count": sum(1 for e in window if e.get("vomiting")),
    }


def classify_signal(filtered: List[Dict]) -> Tuple[str, List[str]]:
    """
    Returns:
      color: "red" | "yellow" | "green"
      reasons: non-empty list of human-readable notes

    Red conditions dominate; every red condition that holds is listed.
    """
    if not filtered:
        return SIGNAL_YELLOW, [REASON_NO_DATA]

    levels = [_nausea(e) for e in filtered]
    max_nausea = max(levels)
    missed = sum(1 for e in filtered if not e.get("medication_taken"))

    reasons: List[str] = []
    if any(e.get("vomiting") for e in filtered):
        reasons.append(REASON_VOMITING)
    if max_nausea >= SEVERE_NAUSEA:
        reasons.append(REASON_SEVERE_NAUSEA)
    if missed >= MISSED_DOSES_RED:
        reasons.append(REASON_MISSED_DOSES)
    if reasons:
        return SIGNAL_RED, reasons

    moderate_days = len({e["timestamp"].date() for e in filtered if _nausea(e) >= MODERATE_NAUSEA})
    if moderate_days >= MODERATE_NAUSEA_DAYS or max_nausea >= MODERATE_NAUSEA or missed == 1:
        if moderate_days >= MODERATE_NAUSEA_DAYS:
            reasons.append(REASON_MODERATE_NAUSEA_DAYS)
        elif max_nausea >= MODERATE_NAUSEA:
            reasons.append(REASON_MODERATE_NAUSEA)
        if missed == 1:
            reasons.append(REASON_ONE_MISSED_DOSE)
        if not reasons:
            reasons.append(REASON_CAUTION)
        return SIGNAL_YELLOW, reasons

    return SIGNAL_GREEN, [REASON_STABLE]


def compute_weekly_delta(weekly_logs: Iterable[Dict], now: datetime, window_weeks: int = 4) -> Dict:
    """
    Weight change across the weekly entries of the window (latest minus
    earliest). Change and percent stay None below two usable entries so that
    "no data" never reads as "no change".
    """
    window = filter_window(weekly_logs, now, window_weeks * 7)
    weighed = sorted(
        (e for e in window if (e.get("weight_kg") or 0) > 0),
        key=lambda e: e["timestamp"],
    )

    result = {
        "count": len(weighed),
        "weight_start": weighed[0]["weight_kg"] if weighed else None,
        "weight_latest": weighed[-1]["weight_kg"] if weighed else None,
        "weight_change": None,
        "weight_change_percent": None,
    }
    if len(weighed) >= 2:
        start = weighed[0]["weight_kg"]
        change = weighed[-1]["weight_kg"] - start
        result["weight_change"] = round_half_up(change, 1)
        result["weight_change_percent"] = round_half_up(change / start * 100, 1)
    return result


def latest_timestamp(entries: Iterable[Dict], now: datetime) -> Optional[datetime]:
    stamps = [e["timestamp"] for e in entries if e.get("timestamp") is not None and e["timestamp"] <= now]
    return max(stamps, default=None)


def days_since(timestamp: Optional[datetime], now: datetime) -> Optional[int]:
    if timestamp is None:
        return None
    return math.floor((now - timestamp).total_seconds() / 86400)


def compute_status(
    daily_logs: List[Dict],
    weekly_logs: List[Dict],
    now: datetime,
    window_days: int = 7,
    window_weeks: int = 4,
) -> Dict:
    """ComputedStatus for one patient; recomputed per request, never stored."""
    stats = compute_window(daily_logs, now, window_days)
    color, reasons = classify_signal(filter_window(daily_logs, now, window_days))
    delta = compute_weekly_delta(weekly_logs, now, window_weeks)

    last_daily = latest_timestamp(daily_logs, now)
    last_weekly = latest_timestamp(weekly_logs, now)

    logger.debug("status computed: %s %s (%d daily in window)", color, reasons, stats["total"])

    return {
        "signal_color": color,
        "signal_reasons": reasons,
        "adherence_rate": stats["adherence_rate"],
        "max_nausea": stats["max_nausea"],
        "vomiting_count": stats["vomiting_count"],
        "missed_medication_count": stats["missed"],
        "records_in_window": stats["total"],
        "last_daily_at": last_daily.isoformat() if last_daily else None,
        "last_weekly_at": last_weekly.isoformat() if last_weekly else None,
        "days_since_last_daily": days_since(last_daily, now),
        "days_since_last_weekly": days_since(last_weekly, now),
        "weight_change": delta["weight_change"],
        "weight_change_percent": delta["weight_change_percent"],
    }
