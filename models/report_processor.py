import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

import pandas as pd

from data.clean_results import RawParameterRow, rows_from_dataframe
from utils.classifier import classify_parameters
from utils.cwqi_calculator import CWQIResult, calculate_cwqi, is_failed
from utils.parameters import CATEGORY_AO, CATEGORY_HEALTH, DEFAULT_SETTINGS, EngineSettings
from utils.recommendations import category_summary, generate_recommendations, validate_parameters
from utils.road_salt import RoadSaltAssessment, assess_road_salt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportData:
    sample_info: Optional[dict]
    health_parameters: tuple
    ao_parameters: tuple
    general_parameters: tuple
    bacteriological: tuple
    health_concerns: tuple
    ao_concerns: tuple
    health_cwqi: Optional[CWQIResult]
    ao_cwqi: Optional[CWQIResult]
    road_salt: Optional[RoadSaltAssessment]
    health_insights: Optional[dict] = None
    ao_insights: Optional[dict] = None

    def to_dict(self) -> dict:
        return {
            "sampleInfo": self.sample_info,
            "healthParameters": [p.to_dict() for p in self.health_parameters],
            "aoParameters": [p.to_dict() for p in self.ao_parameters],
            "generalParameters": [p.to_dict() for p in self.general_parameters],
            "bacteriological": [p.to_dict() for p in self.bacteriological],
            "healthConcerns": [p.to_dict() for p in self.health_concerns],
            "aoConcerns": [p.to_dict() for p in self.ao_concerns],
            "healthCWQI": self.health_cwqi.to_dict() if self.health_cwqi else None,
            "aoCWQI": self.ao_cwqi.to_dict() if self.ao_cwqi else None,
            "roadSalt": self.road_salt.to_dict() if self.road_salt else None,
            "healthInsights": self.health_insights,
            "aoInsights": self.ao_insights,
        }


def _insights(parameters, result: Optional[CWQIResult], category: str) -> Optional[dict]:
    """Warnings, recommendations and the dashboard sentence for one scored category."""
    if result is None:
        return None
    warnings = validate_parameters(parameters)
    return {
        "warnings": warnings,
        "recommendations": generate_recommendations(result, warnings),
        "summary": category_summary(result, category),
    }


def _sample_info(first: RawParameterRow, report_date: date) -> dict:
    return {
        "sampleNumber": first.sample_number,
        "collectionDate": first.get("sample_date"),
        "receivedDate": first.get("received_date"),
        "reportDate": report_date.isoformat(),
        "location": first.get("sample_location") or first.get("location"),
        "sample_description": first.get("sample_description") or first.get("description"),
    }


class ReportDataProcessor:
    """Single entry point for report generation, regeneration and dashboards."""

    def __init__(self, settings: EngineSettings = DEFAULT_SETTINGS):
        self.settings = settings

    def process(self, rows, report_date: Optional[date] = None) -> Optional[ReportData]:
        rows = [RawParameterRow.from_mapping(r) for r in (rows or [])]
        if not rows:
            return None

        classified = classify_parameters(rows, self.settings)

        health_concerns = tuple(p for p in classified.health if is_failed(p))
        ao_concerns = tuple(p for p in classified.ao if is_failed(p))

        health_cwqi = calculate_cwqi(classified.health, self.settings)
        ao_cwqi = calculate_cwqi(classified.ao, self.settings)

        road_salt = assess_road_salt(
            classified.health + classified.ao + classified.general, self.settings
        )

        logger.debug(
            "Sample %s: %d health / %d ao / %d general rows, health=%s ao=%s",
            rows[0].sample_number, len(classified.health), len(classified.ao),
            len(classified.general),
            health_cwqi.score if health_cwqi else None,
            ao_cwqi.score if ao_cwqi else None,
        )

        return ReportData(
            sample_info=_sample_info(rows[0], report_date or date.today()),
            health_parameters=classified.health,
            ao_parameters=classified.ao,
            general_parameters=classified.general,
            bacteriological=classified.bacteriological,
            health_concerns=health_concerns,
            ao_concerns=ao_concerns,
            health_cwqi=health_cwqi,
            ao_cwqi=ao_cwqi,
            road_salt=road_salt,
            health_insights=_insights(classified.health, health_cwqi, CATEGORY_HEALTH),
            ao_insights=_insights(classified.ao, ao_cwqi, CATEGORY_AO),
        )

    def process_dataframe(self, df: pd.DataFrame, report_date: Optional[date] = None) -> Optional[ReportData]:
        return self.process(rows_from_dataframe(df), report_date=report_date)


def process_report_data(rows, settings: EngineSettings = DEFAULT_SETTINGS,
                        report_date: Optional[date] = None) -> Optional[ReportData]:
    return ReportDataProcessor(settings).process(rows, report_date=report_date)
