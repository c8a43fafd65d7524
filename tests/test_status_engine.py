from datetime import datetime, timedelta
from itertools import product

import pytest

from app.services.status_engine import (
    classify_signal,
    compute_status,
    compute_weekly_delta,
    compute_window,
    days_since,
    filter_window,
)

NOW = datetime(2026, 3, 10, 12, 0, 0)


def daily(days_ago, medication_taken=True, nausea_level=0, vomiting=False, hours=1):
    return {
        "timestamp": NOW - timedelta(days=days_ago, hours=hours),
        "medication_taken": medication_taken,
        "nausea_level": nausea_level,
        "vomiting": vomiting,
    }


def weekly(days_ago, weight_kg):
    return {"timestamp": NOW - timedelta(days=days_ago, hours=1), "weight_kg": weight_kg}


def week_of_logs(**overrides):
    """Seven nominal days; overrides map day index -> field dict."""
    logs = [daily(i, nausea_level=2) for i in range(7)]
    for index, fields in overrides.items():
        logs[int(index.lstrip("d"))].update(fields)
    return logs


def test_empty_window_is_caution_not_green():
    assert classify_signal([]) == ("yellow", ["no data in the last 7 days"])


def test_only_stale_logs_count_as_no_data():
    logs = [daily(9), daily(12, vomiting=True)]
    status = compute_status(logs, [], NOW)
    assert status["signal_color"] == "yellow"
    assert status["signal_reasons"] == ["no data in the last 7 days"]
    assert status["adherence_rate"] == 0
    assert status["days_since_last_daily"] == 9


def test_red_via_vomiting():
    logs = week_of_logs(d3={"vomiting": True})
    stats = compute_window(logs, NOW, 7)
    assert classify_signal(filter_window(logs, NOW, 7)) == ("red", ["vomiting occurred"])
    assert stats["missed"] == 0
    assert stats["adherence_rate"] == 100


def test_yellow_via_single_missed_dose():
    logs = week_of_logs(d2={"medication_taken": False, "nausea_level": 4})
    color, reasons = classify_signal(logs)
    stats = compute_window(logs, NOW, 7)
    assert color == "yellow"
    assert reasons == ["one missed dose"]
    assert stats["missed"] == 1
    assert stats["adherence_rate"] == 86


def test_green_when_stable():
    logs = [daily(i, nausea_level=3) for i in range(7)]
    assert classify_signal(logs) == ("green", ["stable"])
    assert compute_window(logs, NOW, 7)["adherence_rate"] == 100


def test_severe_nausea_suppresses_moderate_reason():
    logs = week_of_logs(d0={"nausea_level": 9}, d1={"nausea_level": 6}, d2={"nausea_level": 5})
    color, reasons = classify_signal(logs)
    assert color == "red"
    assert reasons == ["severe nausea (≥8/10)"]


def test_all_red_reasons_listed_in_order():
    logs = week_of_logs(
        d0={"nausea_level": 8},
        d1={"medication_taken": False},
        d4={"medication_taken": False, "vomiting": True},
    )
    color, reasons = classify_signal(logs)
    assert color == "red"
    assert reasons == ["vomiting occurred", "severe nausea (≥8/10)", "multiple missed doses"]


def test_two_missed_doses_is_red():
    logs = week_of_logs(d0={"medication_taken": False}, d5={"medication_taken": False})
    assert classify_signal(logs) == ("red", ["multiple missed doses"])


def test_moderate_nausea_on_two_days():
    logs = week_of_logs(d0={"nausea_level": 5}, d3={"nausea_level": 7})
    assert classify_signal(logs) == ("yellow", ["moderate nausea on 2+ days"])


def test_single_moderate_nausea_day():
    logs = week_of_logs(d6={"nausea_level": 5})
    assert classify_signal(logs) == ("yellow", ["moderate nausea (≥5/10)"])


def test_moderate_nausea_and_missed_dose_both_reported():
    logs = week_of_logs(d0={"nausea_level": 6}, d1={"medication_taken": False})
    assert classify_signal(logs) == ("yellow", ["moderate nausea (≥5/10)", "one missed dose"])


def test_missing_nausea_counts_as_zero():
    logs = [{"timestamp": NOW - timedelta(hours=2), "medication_taken": True}]
    assert classify_signal(logs) == ("green", ["stable"])


def test_signal_is_total_over_small_inputs():
    for taken, level, vomit in product((True, False), (0, 4, 5, 8, 10), (True, False)):
        for size in (1, 2, 3):
            logs = [daily(i, medication_taken=taken, nausea_level=level, vomiting=vomit) for i in range(size)]
            color, reasons = classify_signal(logs)
            assert color in ("red", "yellow", "green")
            assert reasons
            if vomit or level >= 8 or (not taken and size >= 2):
                assert color == "red"


def test_window_bounds_exclude_old_and_future_entries():
    logs = [daily(0), daily(6, hours=23), daily(7, hours=1), daily(-1)]
    window = filter_window(logs, NOW, 7)
    assert len(window) == 2


@pytest.mark.parametrize("taken,total,expected", [(0, 0, 0), (6, 7, 86), (1, 8, 13), (1, 3, 33), (2, 3, 67)])
def test_adherence_rate(taken, total, expected):
    logs = [daily(i % 7, medication_taken=i < taken, hours=i + 1) for i in range(total)]
    stats = compute_window(logs, NOW, 7)
    assert stats["adherence_rate"] == expected
    assert stats["missed"] == total - taken


def test_empty_window_statistics_are_zero():
    assert compute_window([], NOW, 7) == {
        "window_days": 7,
        "total": 0,
        "taken": 0,
        "adherence_rate": 0,
        "missed": 0,
        "max_nausea": 0,
        "vomiting_count": 0,
    }


def test_vomiting_count_and_max_nausea():
    logs = [daily(0, vomiting=True, nausea_level=3), daily(1, vomiting=True, nausea_level=7), daily(2)]
    stats = compute_window(logs, NOW, 7)
    assert stats["vomiting_count"] == 2
    assert stats["max_nausea"] == 7


def test_weight_delta_absent_with_single_entry():
    delta = compute_weekly_delta([weekly(3, 82.0)], NOW, 4)
    assert delta["weight_change"] is None
    assert delta["weight_change_percent"] is None
    assert delta["weight_latest"] == 82.0


def test_weight_delta_zero_with_equal_entries():
    delta = compute_weekly_delta([weekly(10, 82.0), weekly(3, 82.0)], NOW, 4)
    assert delta["weight_change"] == 0
    assert delta["weight_change"] is not None


def test_weight_delta_uses_latest_minus_earliest():
    logs = [weekly(3, 78.0), weekly(24, 80.0), weekly(17, 79.5), weekly(40, 90.0)]
    delta = compute_weekly_delta(logs, NOW, 4)
    assert delta["count"] == 3
    assert delta["weight_start"] == 80.0
    assert delta["weight_change"] == -2.0
    assert delta["weight_change_percent"] == -2.5


def test_days_since():
    assert days_since(None, NOW) is None
    assert days_since(NOW - timedelta(days=2, hours=12), NOW) == 2
    assert days_since(NOW - timedelta(hours=3), NOW) == 0


def test_compute_status_shape():
    logs = week_of_logs(d1={"medication_taken": False})
    status = compute_status(logs, [weekly(20, 85.0), weekly(6, 83.5)], NOW)
    assert status["signal_color"] == "yellow"
    assert status["missed_medication_count"] == 1
    assert status["adherence_rate"] == 86
    assert status["max_nausea"] == 2
    assert status["vomiting_count"] == 0
    assert status["days_since_last_daily"] == 0
    assert status["days_since_last_weekly"] == 6
    assert status["weight_change"] == -1.5


def test_compute_status_is_order_independent():
    logs = week_of_logs(d2={"nausea_level": 6})
    weights = [weekly(20, 85.0), weekly(6, 83.5)]
    assert compute_status(logs, weights, NOW) == compute_status(list(reversed(logs)), list(reversed(weights)), NOW)


def test_moderate_nausea_days_are_calendar_days():
    same_day = [daily(1, nausea_level=5, hours=1), daily(1, nausea_level=6, hours=5), daily(3)]
    assert classify_signal(same_day) == ("yellow", ["moderate nausea (≥5/10)"])

    two_days = [daily(1, nausea_level=5), daily(2, nausea_level=6)]
    assert classify_signal(two_days) == ("yellow", ["moderate nausea on 2+ days"])
