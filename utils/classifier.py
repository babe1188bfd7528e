"""
classifier.py
Splits the raw parameter rows of a sample into health, aesthetic/operational,
general and bacteriological sets and resolves each categorized row's
compliance status into a closed set of variants.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from data.clean_results import RawParameterRow, is_present
from utils.parameters import (
    AO_RANGE_VALUE,
    CATEGORY_AO,
    CATEGORY_HEALTH,
    DEFAULT_SETTINGS,
    EXCEEDS_AO,
    EXCEEDS_MAC,
    MEETS_AO,
    MEETS_MAC,
    PARAMETER_TYPE_AO,
    PARAMETER_TYPE_GENERAL,
    PARAMETER_TYPE_HYBRID,
    PARAMETER_TYPE_MAC,
    WARNING,
    EngineSettings,
)


class ComplianceStatus(Enum):
    MEETS_OBJECTIVE = "meets_objective"
    EXCEEDS_OBJECTIVE = "exceeds_objective"
    IN_RANGE_OK = "in_range_ok"
    IN_RANGE_WARNING = "in_range_warning"
    NOT_APPLICABLE = "not_applicable"


def resolve_status(category: str, compliance_status, overall_status=None) -> ComplianceStatus:
    """Maps the upstream status strings of one category onto ComplianceStatus."""
    if category == CATEGORY_HEALTH:
        if compliance_status == EXCEEDS_MAC:
            return ComplianceStatus.EXCEEDS_OBJECTIVE
        if compliance_status == MEETS_MAC:
            return ComplianceStatus.MEETS_OBJECTIVE
    elif category == CATEGORY_AO:
        if compliance_status == EXCEEDS_AO:
            return ComplianceStatus.EXCEEDS_OBJECTIVE
        if compliance_status == MEETS_AO:
            return ComplianceStatus.MEETS_OBJECTIVE
        if compliance_status == AO_RANGE_VALUE:
            if overall_status == WARNING:
                return ComplianceStatus.IN_RANGE_WARNING
            return ComplianceStatus.IN_RANGE_OK
    return ComplianceStatus.NOT_APPLICABLE


@dataclass(frozen=True)
class CategorizedParameter:
    """A raw row seen through one category's objective."""
    row: RawParameterRow
    parameter_category: str
    objective_value: object
    objective_display: Optional[str]
    compliance_status: Optional[str]
    status: ComplianceStatus
    overall_compliance_status: Optional[str] = None

    @property
    def parameter_name(self):
        return self.row.parameter_name

    @property
    def result_numeric(self):
        return self.row.result_numeric

    @property
    def result_display_value(self):
        return self.row.result_display_value

    @property
    def sample_number(self):
        return self.row.sample_number

    def to_dict(self) -> dict:
        out = self.row.to_dict()
        out.update({
            "objective_value": self.objective_value,
            "objective_display": self.objective_display,
            "compliance_status": self.compliance_status,
            "parameter_category": self.parameter_category,
        })
        if self.parameter_category == CATEGORY_AO:
            out["overall_compliance_status"] = self.overall_compliance_status
        return out


@dataclass(frozen=True)
class ClassifiedParameters:
    health: tuple
    ao: tuple
    general: tuple
    bacteriological: tuple


def _as_health(row: RawParameterRow) -> CategorizedParameter:
    return CategorizedParameter(
        row=row,
        parameter_category=CATEGORY_HEALTH,
        objective_value=row.mac_value,
        objective_display=row.mac_display,
        compliance_status=row.mac_compliance_status,
        status=resolve_status(CATEGORY_HEALTH, row.mac_compliance_status),
    )


def _as_ao(row: RawParameterRow) -> CategorizedParameter:
    return CategorizedParameter(
        row=row,
        parameter_category=CATEGORY_AO,
        objective_value=row.ao_value,
        objective_display=row.ao_display,
        compliance_status=row.ao_compliance_status,
        overall_compliance_status=row.compliance_status,
        status=resolve_status(CATEGORY_AO, row.ao_compliance_status, row.compliance_status),
    )


def classify_parameters(rows, settings: EngineSettings = DEFAULT_SETTINGS) -> ClassifiedParameters:
    """
    A row can land in more than one set: Hybrid rows go to both health and ao,
    and bacteriological rows also sit in their scored category.
    """
    bacteria_role = settings.role("bacteriological")
    health, ao, general, bacteriological = [], [], [], []

    for raw in rows:
        row = RawParameterRow.from_mapping(raw)
        ptype = row.parameter_type

        if ptype in (PARAMETER_TYPE_MAC, PARAMETER_TYPE_HYBRID) and is_present(row.mac_value):
            health.append(_as_health(row))

        if ptype in (PARAMETER_TYPE_AO, PARAMETER_TYPE_HYBRID) and (
            is_present(row.ao_value) or is_present(row.ao_display)
        ):
            ao.append(_as_ao(row))

        if ptype == PARAMETER_TYPE_GENERAL:
            general.append(row)

        if bacteria_role.matches(row.parameter_name):
            bacteriological.append(row)

    return ClassifiedParameters(
        health=tuple(health),
        ao=tuple(ao),
        general=tuple(general),
        bacteriological=tuple(bacteriological),
    )
