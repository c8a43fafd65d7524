# app/services/roadmap_engine.py
"""
Titration roadmap: a week-by-week dose schedule for the selected GLP-1 drug.
Reference only; actual dosing always follows the prescribing clinician.
"""

import logging
from typing import Dict, List

logger = logging.getLogger(__name__)

DRUG_METRICS = {
    "SEMAGLUTIDE": {
        "name": "Semaglutide",
        "unit": "mg",
        "steps": [0.25, 0.5, 1.0, 1.7, 2.4],
        "maintenance_dose": 1.7,
    },
    "TIRZEPATIDE": {
        "name": "Tirzepatide",
        "unit": "mg",
        "steps": [2.5, 5.0, 7.5, 10.0, 12.5, 15.0],
        "maintenance_dose": 10.0,
    },
}

ROADMAP = {
    # older patients get a longer adaptation period per dose step
    "senior_age": 65,
    "interval_weeks": 4,
    "senior_interval_weeks": 6,
    # protein g per kg body weight
    "protein_per_kg": 1.2,
    "protein_per_kg_low_muscle": 1.5,
}

DISCLAIMER = (
    "This roadmap is a reference built from published titration schedules. "
    "Actual dosing must follow your prescribing clinician."
)

TITRATION = {
    "phase": "Titration",
    "strategy": "Body adaptation and fat-loss focus",
    "supplements": ["High-protein meals", "Multivitamin"],
}

MAINTENANCE = {
    "phase": "Maintenance",
    "strategy": "Metabolic stabilization and muscle preservation",
    "supplements": ["HMB 3g (essential)", "Berberine", "Soluble fiber"],
}


def _format_dose(dose: float, unit: str) -> str:
    return f"{dose:g}{unit}"


def generate_roadmap(
    drug_type: str,
    age: int,
    current_weight: float,
    gender: str = "female",
    muscle_status: str = "normal",
) -> Dict:
    config = DRUG_METRICS.get((drug_type or "").upper())
    if config is None:
        raise ValueError(f"Unsupported drug type: {drug_type}")

    interval = ROADMAP["senior_interval_weeks"] if age >= ROADMAP["senior_age"] else ROADMAP["interval_weeks"]
    low_muscle = (muscle_status or "").lower() == "low"

    schedule: List[Dict] = []
    for index, dose in enumerate(config["steps"]):
        block = MAINTENANCE if dose >= config["maintenance_dose"] else TITRATION
        supplements = list(block["supplements"])
        if low_muscle and block is TITRATION:
            supplements.append("Resistance training 3x/week")
        schedule.append({
            "week": index * interval + 1,
            "dose": _format_dose(dose, config["unit"]),
            "phase": block["phase"],
            "strategy": block["strategy"],
            "supplements": supplements,
        })

    per_kg = ROADMAP["protein_per_kg_low_muscle"] if low_muscle else ROADMAP["protein_per_kg"]
    logger.debug("roadmap for %s: %d steps every %d weeks", config["name"], len(schedule), interval)

    return {
        "drug_name": config["name"],
        "gender": gender,
        "interval_weeks": interval,
        "roadmap": schedule,
        "total_duration_weeks": schedule[-1]["week"] + interval - 1,
        "protein_target_g": round(current_weight * per_kg),
        "disclaimer": DISCLAIMER,
    }
