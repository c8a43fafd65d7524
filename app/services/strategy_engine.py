# app/services/strategy_engine.py
"""
Weekly coaching strategy: picks SAFE / BALANCED / AGGRESSIVE for the coming
week and the matching content blocks.
"""

import logging
from typing import Dict, Optional, Tuple

logger = logging.getLogger(__name__)

SAFE = "SAFE"
BALANCED = "BALANCED"
AGGRESSIVE = "AGGRESSIVE"

DEFAULT_AGE = 35

STRATEGY_LABELS = {
    SAFE: "Muscle defense",
    BALANCED: "Metabolic balance",
    AGGRESSIVE: "Loss acceleration",
}


def clamp(n: float, low: float, high: float) -> float:
    return min(high, max(low, n))


def weekly_loss_pct(current_weight: float, last_weight: Optional[float]) -> Optional[float]:
    if last_weight is None or last_weight <= 0:
        return None
    return clamp((last_weight - current_weight) / last_weight * 100, -10, 10)


def compute_muscle_capital_risk(
    age: Optional[int],
    start_bmi: Optional[float],
    muscle_mass: str,
    loss_pct: Optional[float],
) -> str:
    score = 0

    age = age if age is not None else DEFAULT_AGE
    if age >= 60:
        score += 2
    elif age >= 45:
        score += 1

    if muscle_mass == "below":
        score += 2
    elif muscle_mass == "unknown":
        score += 1

    if start_bmi is not None and start_bmi < 30:
        score += 1

    if loss_pct is not None:
        if loss_pct >= 1.5:
            score += 2
        elif loss_pct >= 1.0:
            score += 1

    if score >= 5:
        return "high"
    if score >= 3:
        return "medium"
    return "low"


def decide_strategy_type(
    drug_status: str,
    age: Optional[int],
    current_week: int,
    loss_pct: Optional[float],
) -> Tuple[str, bool]:
    # stopping the drug forces a SAFE exit month
    if drug_status == "OFF":
        return SAFE, True

    age = age if age is not None else DEFAULT_AGE
    if age >= 60:
        return SAFE, False

    # first four weeks are adaptation; no aggressive mode
    if current_week <= 4:
        return BALANCED, False

    if loss_pct is not None and loss_pct >= 1.5:
        return (SAFE if age >= 45 else BALANCED), False

    return AGGRESSIVE, False


def _safe_content(budget: str, risk: str, drug_status: str) -> Dict:
    intro = "Losing muscle is selling your capital. This week the goal is protecting muscle and habits, not the scale."
    if drug_status == "OFF":
        intro += " The first month after stopping is the window for preventing rebound; holding steady counts as success."

    return {
        "header": {
            "title": "Safe mode",
            "subtitle": "Rebound defense after stopping" if drug_status == "OFF" else "Muscle capital defense",
            "coach_intro": intro,
        },
        "this_week": {
            "summary": "Lock in protein and strength work first and keep the loss rate from running too fast.",
            "missions": [
                {"label": "Meals", "detail": "Leucine switch: 1 scoop whey, or 2 eggs + 2 whites"},
                {"label": "Training", "detail": "Large-muscle resistance work 3x/week (squat, lunge, hinge)"},
                {"label": "Daily life", "detail": "2L water and fixed meal times"},
            ],
        },
        "nutrition": {
            "title": "Nutrition guide",
            "bullets": [
                "Protein: 1.2-1.5 g per kg body weight",
                "Reach 2.5-3.0 g leucine per meal",
                "Use tofu and other low-calorie volume foods for fullness",
            ],
            "examples": ["Breakfast: whey shake", "Lunch: chicken or fish with vegetables", "Dinner: tofu-based, light on broth"],
        },
        "training": {
            "title": "Training guide",
            "bullets": [
                "Weight strength over cardio (about 80% strength)",
                "Aim for muscle fatigue rather than breathlessness",
                "Rest a day between sessions",
            ],
            "examples": ["Squat 10 x 3", "Lunge 10 x 2", "Wall or knee push-up 8 x 2"],
        },
        "roi": {
            "title": "This week's return",
            "message": (
                "Protecting muscle costs nothing extra and gives you a baseline to return to once the drug stops."
                if budget == "economy"
                else "Today's protein and strength routine is rebound insurance; protecting capital lowers long-term cost."
            ),
        },
        "next_week": {
            "preview": (
                "Stay in Safe next week and split protein across 3-4 meals."
                if risk == "high"
                else "Next week, raise daily steps by about 20% and check how well you hold."
            ),
        },
    }


def _balanced_content(budget: str) -> Dict:
    return {
        "header": {
            "title": "Balanced mode",
            "subtitle": "Sustainable loss without burnout",
            "coach_intro": "You're on a stable track. This week is about making habits solid without overdoing it.",
        },
        "this_week": {
            "summary": "Balance strength and cardio; fix meal order and hydration.",
            "missions": [
                {"label": "Meals", "detail": "Vegetables, then protein, then carbs"},
                {"label": "Training", "detail": "Strength 2x + interval walking 2x (30 min)"},
                {"label": "Daily life", "detail": "20% more activity than usual (stairs, walking)"},
            ],
        },
        "nutrition": {
            "title": "Nutrition guide",
            "bullets": [
                "At least 20 g protein per meal",
                "Switch carbs to whole grains or oats (half portion)",
                "Use low-sodium fermented foods",
            ],
            "examples": ["Half bowl whole grains + fish or tofu", "Salad + chicken", "Snack: Greek yogurt or boiled egg"],
        },
        "training": {
            "title": "Training guide",
            "bullets": ["Full-body strength twice a week", "Moderate-intensity intervals for fat burn"],
            "examples": ["Full-body strength 20 min", "Interval walk 30 min", "7,000-9,000 steps a day"],
        },
        "roi": {
            "title": "This week's return",
            "message": "Sustainability saves more than speed; steady habits keep appetite control after the drug stops.",
        },
        "next_week": {
            "preview": "Next week, read changes against the weekly average weight and switch to Safe if needed.",
        },
    }


def _aggressive_content(budget: str) -> Dict:
    return {
        "header": {
            "title": "Aggressive mode",
            "subtitle": "Short-term plateau breaker",
            "coach_intro": "A short mode for breaking a plateau. Do not ignore fatigue, nausea, or worse sleep.",
        },
        "this_week": {
            "summary": "Raise everyday activity (NEAT) rather than workout intensity.",
            "missions": [
                {"label": "Meals", "detail": "Keep protein at 30-40% of intake"},
                {"label": "Training", "detail": "NEAT +30% (10k steps, standing work, chores)"},
                {"label": "Maintain", "detail": "At least one strength session to keep the muscle signal"},
            ],
        },
        "nutrition": {
            "title": "Nutrition guide",
            "bullets": [
                "Spend half the food budget on eggs, frozen chicken, and whey" if budget != "premium"
                else "Prioritize lean protein sources at every meal",
                "Limit fried and spicy food and alcohol to avoid GI side effects",
                "Add volume with cabbage and konjac; avoid extreme restriction",
            ],
            "examples": ["Eggs + tofu", "Chicken salad", "Cabbage/konjac volume meal"],
        },
        "training": {
            "title": "Training guide",
            "bullets": [
                "Move all day instead of training longer",
                "Drop back to Balanced as soon as energy dips",
            ],
            "examples": ["10,000 steps a day", "Three short walks", "Full-body strength 15 min once"],
        },
        "roi": {
            "title": "This week's return",
            "message": "A speed week, but losing muscle raises the cost after stopping, so protein still comes first.",
        },
        "next_week": {
            "preview": "Next week, check fatigue and sleep and switch to Safe or Balanced if needed.",
        },
    }


def build_weekly_report(
    user_data: Dict,
    last_weight: Optional[float] = None,
    start_bmi: Optional[float] = None,
    stage_title: Optional[str] = None,
) -> Dict:
    loss_pct = weekly_loss_pct(user_data["current_weight"], last_weight)

    strategy, is_exit_mode = decide_strategy_type(
        user_data["drug_status"], user_data.get("user_age"), user_data["current_week"], loss_pct
    )
    risk = compute_muscle_capital_risk(user_data.get("user_age"), start_bmi, user_data.get("muscle_mass"), loss_pct)

    logger.debug("weekly strategy %s (exit=%s, risk=%s)", strategy, is_exit_mode, risk)

    budget = user_data.get("budget")
    if strategy == SAFE:
        content = _safe_content(budget, risk, user_data["drug_status"])
    elif strategy == BALANCED:
        content = _balanced_content(budget)
    else:
        content = _aggressive_content(budget)

    if stage_title:
        content["header"]["subtitle"] = f"Current stage: {stage_title} · {content['header']['subtitle']}"

    return {
        "strategy": strategy,
        "strategy_name": STRATEGY_LABELS[strategy],
        "is_exit_mode": is_exit_mode,
        "muscle_capital_risk": risk,
        "weekly_loss_pct": None if loss_pct is None else round(loss_pct, 2),
        **content,
    }
