"""
cwqi_calculator.py
Calculates the CCME Water Quality Index (CWQI) for one category of a sample
from Scope (F1), Frequency (F2) and Amplitude (F3), applies the coliform
override and maps the score onto a rating band.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from data.clean_results import parse_float
from utils.classifier import CategorizedParameter, ComplianceStatus
from utils.parameters import (
    CATEGORY_HEALTH,
    CWQI_SCALE,
    DEFAULT_SETTINGS,
    DETECTED_MARKER,
    LOWEST_RATING,
    NOT_DETECTED_MARKERS,
    NSE_DIVISOR_FAILED_TESTS,
    RATING_BANDS,
    EngineSettings,
)

logger = logging.getLogger(__name__)

FAILED_STATUSES = (ComplianceStatus.EXCEEDS_OBJECTIVE, ComplianceStatus.IN_RANGE_WARNING)


@dataclass(frozen=True)
class Rating:
    name: str
    color: str
    description: str


@dataclass(frozen=True)
class CWQIComponents:
    F1: float
    F2: float
    F3: float


@dataclass(frozen=True)
class CWQIResult:
    score: float
    rating: str
    color: str
    description: str
    total_tests: int
    failed_tests: int
    total_parameters: int
    failed_parameters: int
    coliform_detected: bool
    potential_score: Optional[float]
    components: CWQIComponents
    failed_parameter_names: tuple = ()
    excursions: tuple = ()
    nse: float = 0.0

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "rating": self.rating,
            "color": self.color,
            "description": self.description,
            "totalTests": self.total_tests,
            "failedTests": self.failed_tests,
            "totalParameters": self.total_parameters,
            "failedParameters": self.failed_parameters,
            "coliformDetected": self.coliform_detected,
            "potentialScore": self.potential_score,
            "components": {
                "F1": self.components.F1,
                "F2": self.components.F2,
                "F3": self.components.F3,
            },
            "details": {
                "failedParameterNames": list(self.failed_parameter_names),
                "excursions": list(self.excursions),
                "nse": self.nse,
            },
        }


def round_half_up(value: float, digits: int = 0) -> float:
    """Rounds like the dashboards do (halves go up, not to even)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def get_cwqi_rating(score: float) -> Rating:
    for lower, name, color, description in RATING_BANDS:
        if score >= lower:
            return Rating(name, color, description)
    return Rating(*LOWEST_RATING)


def is_failed(param: CategorizedParameter) -> bool:
    """Reads the already-assigned status; numeric thresholds are never rechecked here."""
    return param.status in FAILED_STATUSES


def calculate_excursion(param: CategorizedParameter, settings: EngineSettings = DEFAULT_SETTINGS):
    """
    How far a failed test sits past its objective, as a non-negative ratio.
    Maximum guidelines: value/objective - 1. Minimum guidelines (dissolved
    oxygen): objective/value - 1. Returns None when it cannot be computed.
    """
    test_value = parse_float(param.result_numeric)
    objective = parse_float(param.objective_value)

    if np.isnan(test_value) or np.isnan(objective) or objective == 0:
        logger.debug("No excursion for %s: value=%r objective=%r",
                     param.parameter_name, param.result_numeric, param.objective_value)
        return None

    if settings.role("minimum_guideline").matches(param.parameter_name):
        if test_value == 0:
            return None
        excursion = (objective / test_value) - 1
    else:
        excursion = (test_value / objective) - 1

    return max(0.0, excursion)


def is_coliform_trigger(param: CategorizedParameter, settings: EngineSettings = DEFAULT_SETTINGS) -> bool:
    if not settings.role("coliform").matches(param.parameter_name):
        return False

    display = param.result_display_value
    if isinstance(display, str) and DETECTED_MARKER in display:
        negated = any(neg in display.lower() for neg in NOT_DETECTED_MARKERS)
        if not (settings.ignore_negated_detection and negated):
            return True

    if param.parameter_category == CATEGORY_HEALTH and param.status is ComplianceStatus.EXCEEDS_OBJECTIVE:
        return True

    value = parse_float(param.result_numeric)
    return bool(np.isfinite(value) and value > 0)


def _score_factors(parameters, settings: EngineSettings):
    names = {p.parameter_name for p in parameters}
    total_parameters = len(names)
    total_tests = len(parameters)

    failed_names = set()
    failed_tests = []
    excursions = []
    for param in parameters:
        if not is_failed(param):
            continue
        failed_names.add(param.parameter_name)
        failed_tests.append(param)
        excursion = calculate_excursion(param, settings)
        if excursion is not None:
            excursions.append(excursion)

    f1 = (len(failed_names) / total_parameters) * 100
    f2 = (len(failed_tests) / total_tests) * 100

    f3 = 0.0
    nse = 0.0
    if excursions:
        divisor = len(failed_tests) if settings.nse_divisor == NSE_DIVISOR_FAILED_TESTS else 1
        # fsum is exact, so the result does not depend on row order
        nse = math.fsum(excursions) / divisor
        f3 = nse / (0.01 * nse + 1)

    raw_score = CWQI_SCALE - math.sqrt((f1 * f1 + f2 * f2 + f3 * f3) / settings.factor_normalizer)
    score = max(0.0, min(float(CWQI_SCALE), round_half_up(raw_score, 1)))

    return {
        "score": score,
        "total_tests": total_tests,
        "failed_tests": len(failed_tests),
        "total_parameters": total_parameters,
        "failed_parameter_names": tuple(sorted(failed_names, key=str)),
        "excursions": tuple(sorted(excursions)),
        "nse": nse,
        "components": CWQIComponents(
            F1=round_half_up(f1, 1),
            F2=round_half_up(f2, 1),
            F3=round_half_up(f3, 3),
        ),
    }


def calculate_cwqi(parameters, settings: EngineSettings = DEFAULT_SETTINGS) -> Optional[CWQIResult]:
    """
    CWQI for one category's parameters. None for an empty category.
    In the health category a detected coliform forces the score to 0 and the
    score without the coliform rows is reported as potential_score.
    """
    parameters = tuple(parameters or ())
    if not parameters:
        return None

    factors = _score_factors(parameters, settings)
    score = factors["score"]

    coliform_detected = any(is_coliform_trigger(p, settings) for p in parameters)
    is_health = any(p.parameter_category == CATEGORY_HEALTH for p in parameters)

    potential_score = None
    if coliform_detected and is_health:
        coliform_role = settings.role("coliform")
        remaining = tuple(p for p in parameters if not coliform_role.matches(p.parameter_name))
        if remaining:
            potential_score = _score_factors(remaining, settings)["score"]
        logger.debug("Coliform detected, health score %.1f overridden to 0 (potential %s)",
                     score, potential_score)
        score = 0.0

    rating = get_cwqi_rating(score)

    return CWQIResult(
        score=score,
        rating=rating.name,
        color=rating.color,
        description=rating.description,
        total_tests=factors["total_tests"],
        failed_tests=factors["failed_tests"],
        total_parameters=factors["total_parameters"],
        failed_parameters=len(factors["failed_parameter_names"]),
        coliform_detected=coliform_detected,
        potential_score=potential_score,
        components=factors["components"],
        failed_parameter_names=factors["failed_parameter_names"],
        excursions=factors["excursions"],
        nse=factors["nse"],
    )
