"""Tests for the chloride/bromide road-salt assessment."""

import pytest

from conftest import ao_row, general_row
from data.clean_results import RawParameterRow
from utils.parameters import EngineSettings
from utils.road_salt import assess_road_salt


def _rows(chloride, bromide):
    rows = []
    if chloride is not None:
        rows.append(RawParameterRow.from_mapping(general_row("Chloride", value=chloride)))
    if bromide is not None:
        rows.append(RawParameterRow.from_mapping(general_row("Bromide", value=bromide)))
    return rows


def test_high_ratio_flags_contamination():
    result = assess_road_salt(_rows(150, 0.1))
    assert result.cl_br_ratio == 1500
    assert result.has_contamination is True
    assert result.status == "Road Salt Impact Detected"
    assert result.chloride_level == 150
    assert result.bromide_level == 0.1


def test_low_ratio_is_not_contamination():
    result = assess_road_salt(_rows(150, 0.5))
    assert result.cl_br_ratio == 300
    assert result.has_contamination is False
    assert result.status == "No Road Salt Impact"


@pytest.mark.parametrize("bromide", [0.001, 0, 5])
def test_chloride_below_threshold_never_contaminated(bromide):
    result = assess_road_salt(_rows(50, bromide))
    assert result.has_contamination is False
    assert result.cl_br_ratio is None
    assert "below 100 mg/L threshold" in result.assessment_text


def test_chloride_exactly_at_threshold_is_below():
    assert assess_road_salt(_rows(100, 0.01)).has_contamination is False


def test_zero_bromide_cannot_assess_by_default():
    result = assess_road_salt(_rows(180, 0))
    assert result.cl_br_ratio is None
    assert result.has_contamination is False
    assert "Cannot calculate ratio" in result.assessment_text


def test_zero_bromide_flags_when_chloride_alone_is_enough():
    settings = EngineSettings(flag_chloride_without_ratio=True)
    result = assess_road_salt(_rows(180, 0), settings)
    assert result.cl_br_ratio is None
    assert result.has_contamination is True


def test_unparsable_bromide_counts_as_zero():
    result = assess_road_salt(_rows(180, "<0.05"))
    assert result.bromide_level == 0
    assert result.cl_br_ratio is None


@pytest.mark.parametrize("chloride, bromide", [(150, None), (None, 0.1), (None, None)])
def test_missing_parameter_means_unavailable(chloride, bromide):
    assert assess_road_salt(_rows(chloride, bromide)) is None


def test_bromide_named_rows_are_not_taken_as_chloride():
    rows = [
        RawParameterRow.from_mapping(general_row("Bromide (as chloride equivalent)", value=0.1)),
        RawParameterRow.from_mapping(ao_row("Chloride", value=400, ao=250)),
    ]
    result = assess_road_salt(rows)
    assert result.chloride_level == 400
    assert result.cl_br_ratio == 4000


def test_to_dict_keys():
    data = assess_road_salt(_rows(150, 0.1)).to_dict()
    assert data["clBrRatio"] == 1500
    assert data["hasContamination"] is True
    assert set(data) == {
        "chlorideLevel", "bromideLevel", "clBrRatio", "hasContamination", "status", "assessmentText",
    }
