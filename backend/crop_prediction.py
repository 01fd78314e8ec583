"""
KrishiSetu - Crop Prediction Engine
Rule-based crop suggestion from temperature, humidity, rainfall, soil pH and NPK readings.
Each crop has a fixed eligibility window and a hand-tuned confidence formula; the top 3
eligible crops are returned. Deterministic, no model files, no external API.
"""

import math
from typing import Any, Callable, Dict, List, Optional, Tuple

from logger import get_logger

logger = get_logger(__name__)

ICON_DIR = "/assets/generated"
MAX_RESULTS = 3

# (min, max) inclusive; None means unbounded on that side
Range = Tuple[Optional[float], Optional[float]]


def _crop_icon(crop: str) -> str:
    return f"{ICON_DIR}/{crop.lower()}-icon.dim_128x128.png"


# --- Crop Rules ---
# Evaluated in list order; that order is also the tie-break when confidences are equal.
# Each rule has: crop name, eligibility ranges per reading, confidence cap,
# raw confidence formula, and the justification shown to the farmer.

CROP_RULES: List[Dict[str, Any]] = [
    {
        "crop": "Rice",
        "ranges": {
            "temperature": (20, 35),
            "humidity": (60, None),
            "rainfall": (150, None),
            "ph": (5.5, 7.0),
        },
        "cap": 95,
        "confidence": lambda r: 70 + (r["humidity"] / 100) * 15 + (r["rainfall"] / 500) * 10,
        "reason": "High humidity and rainfall with suitable temperature make this ideal for rice cultivation",
    },
    {
        "crop": "Wheat",
        "ranges": {
            "temperature": (12, 25),
            "humidity": (40, 70),
            "rainfall": (50, 150),
            "ph": (6.0, 7.5),
        },
        "cap": 92,
        "confidence": lambda r: 65 + (r["nitrogen"] / 200) * 15 + (7 - abs(r["ph"] - 6.5)) * 12,
        "reason": "Moderate temperature and rainfall with good nitrogen levels are perfect for wheat",
    },
    {
        "crop": "Corn",
        "ranges": {
            "temperature": (18, 32),
            "humidity": (50, None),
            "rainfall": (80, None),
            "nitrogen": (40, None),
            "phosphorus": (30, None),
        },
        "cap": 90,
        "confidence": lambda r: 68 + (r["nitrogen"] / 200) * 12 + (r["phosphorus"] / 200) * 10,
        "reason": "Good nitrogen and phosphorus levels with adequate rainfall support corn growth",
    },
    {
        "crop": "Cotton",
        "ranges": {
            "temperature": (21, 35),
            "humidity": (50, 80),
            "rainfall": (60, 120),
            "ph": (6.0, 8.0),
            "potassium": (40, None),
        },
        "cap": 88,
        "confidence": lambda r: 65 + (r["potassium"] / 200) * 15 + (r["temperature"] / 50) * 8,
        "reason": "High temperature with good potassium levels create favorable conditions for cotton",
    },
]

# Emitted when no rule matches
FALLBACK_RESULT: Dict[str, Any] = {
    "crop": "Wheat",
    "confidence": 60,
    "reason": "General purpose crop suitable for various conditions",
    "icon": _crop_icon("Wheat"),
}


def _in_range(value: float, bounds: Range) -> bool:
    low, high = bounds
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True


def _round_half_up(value: float) -> int:
    """Round halves up (Python's round() uses banker's rounding)."""
    return int(math.floor(value + 0.5))


def is_eligible(rule: Dict[str, Any], readings: Dict[str, float]) -> bool:
    """True when every reading the rule constrains falls inside its inclusive window."""
    return all(_in_range(readings[field], bounds) for field, bounds in rule["ranges"].items())


def score_crop(rule: Dict[str, Any], readings: Dict[str, float]) -> int:
    """Confidence for an eligible crop: raw formula, clamped to the crop's own cap, then rounded."""
    formula: Callable[[Dict[str, float]], float] = rule["confidence"]
    return _round_half_up(min(rule["cap"], formula(readings)))


def predict_crop(
    temperature: float,
    humidity: float,
    rainfall: float,
    ph: float,
    nitrogen: float,
    phosphorus: float,
    potassium: float,
) -> List[Dict[str, Any]]:
    """
    Suggest up to 3 crops for the given field conditions.

    Args:
        temperature: Air temperature in Celsius
        humidity: Relative humidity percentage
        rainfall: Rainfall in mm
        ph: Soil pH
        nitrogen: Soil nitrogen index (0-200 nominal)
        phosphorus: Soil phosphorus index (0-200 nominal)
        potassium: Soil potassium index (0-200 nominal)

    Returns:
        List of {crop, confidence, reason, icon} sorted by confidence (highest first).
        Never empty: a general-purpose Wheat suggestion is returned when nothing matches.
    """
    readings = {
        "temperature": temperature,
        "humidity": humidity,
        "rainfall": rainfall,
        "ph": ph,
        "nitrogen": nitrogen,
        "phosphorus": phosphorus,
        "potassium": potassium,
    }

    results = []
    for rule in CROP_RULES:
        if not is_eligible(rule, readings):
            continue
        results.append({
            "crop": rule["crop"],
            "confidence": score_crop(rule, readings),
            "reason": rule["reason"],
            "icon": _crop_icon(rule["crop"]),
        })

    # list.sort is stable, so equal confidences keep rule order
    results.sort(key=lambda c: c["confidence"], reverse=True)

    if not results:
        logger.info("No crop rule matched readings %s; using fallback", readings)
        results.append(dict(FALLBACK_RESULT))

    return results[:MAX_RESULTS]
