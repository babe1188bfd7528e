"""
road_salt.py
Road-salt impact check from the chloride to bromide ratio.
Runs beside the CWQI and never changes it.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from data.clean_results import parse_float
from utils.parameters import (
    DEFAULT_SETTINGS,
    ROAD_SALT_DETECTED,
    ROAD_SALT_NOT_DETECTED,
    EngineSettings,
)
from utils.cwqi_calculator import round_half_up

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoadSaltAssessment:
    chloride_level: float
    bromide_level: float
    cl_br_ratio: Optional[int]
    has_contamination: bool
    status: str
    assessment_text: str

    def to_dict(self) -> dict:
        return {
            "chlorideLevel": self.chloride_level,
            "bromideLevel": self.bromide_level,
            "clBrRatio": self.cl_br_ratio,
            "hasContamination": self.has_contamination,
            "status": self.status,
            "assessmentText": self.assessment_text,
        }


def _level(param) -> float:
    value = parse_float(param.result_numeric)
    return 0.0 if np.isnan(value) else float(value)


def _fmt(value: float) -> str:
    return f"{value:g}"


def assess_road_salt(parameters, settings: EngineSettings = DEFAULT_SETTINGS) -> Optional[RoadSaltAssessment]:
    """
    parameters: health + ao + general rows of one sample. The first chloride
    row and the first bromide row are used; None if either is missing.
    """
    chloride_role = settings.role("chloride")
    bromide_role = settings.role("bromide")

    chloride_param = next((p for p in parameters if chloride_role.matches(p.parameter_name)), None)
    bromide_param = next((p for p in parameters if bromide_role.matches(p.parameter_name)), None)
    if chloride_param is None or bromide_param is None:
        return None

    chloride = _level(chloride_param)
    bromide = _level(bromide_param)
    threshold = settings.road_salt_chloride_threshold

    ratio = None
    contaminated = False
    if chloride > threshold and bromide > 0:
        ratio = int(round_half_up(chloride / bromide))
        contaminated = ratio > settings.road_salt_ratio_threshold
        text = f"Chloride: {_fmt(chloride)} mg/L, Bromide: {_fmt(bromide)} mg/L, Cl:Br Ratio: {ratio}"
    elif chloride > threshold:
        contaminated = settings.flag_chloride_without_ratio
        text = (f"Chloride: {_fmt(chloride)} mg/L, Bromide: {_fmt(bromide)} mg/L"
                f" - Cannot calculate ratio (bromide = 0)")
    else:
        text = f"Chloride: {_fmt(chloride)} mg/L (below {_fmt(threshold)} mg/L threshold)"

    logger.debug("Road salt: %s -> contaminated=%s", text, contaminated)

    return RoadSaltAssessment(
        chloride_level=chloride,
        bromide_level=bromide,
        cl_br_ratio=ratio,
        has_contamination=contaminated,
        status=ROAD_SALT_DETECTED if contaminated else ROAD_SALT_NOT_DETECTED,
        assessment_text=text,
    )
