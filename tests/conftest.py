"""Shared row builders for the CWQI engine tests."""

import pytest


def health_row(name, status="MEETS_MAC", value=1.0, mac=5.0, display=None, sample="S-001"):
    return {
        "parameter_name": name,
        "parameter_type": "MAC",
        "result_numeric": value,
        "result_value": str(value),
        "result_display_value": display if display is not None else str(value),
        "result_units": "mg/L",
        "mac_value": mac,
        "mac_display": str(mac),
        "mac_compliance_status": status,
        "ao_value": None,
        "ao_display": None,
        "ao_compliance_status": None,
        "compliance_status": "PASS",
        "sample_number": sample,
    }


def ao_row(name, status="MEETS_AO", value=1.0, ao=5.0, overall="PASS", display=None, sample="S-001"):
    return {
        "parameter_name": name,
        "parameter_type": "AO",
        "result_numeric": value,
        "result_value": str(value),
        "result_display_value": str(value),
        "result_units": "mg/L",
        "mac_value": None,
        "mac_display": None,
        "mac_compliance_status": None,
        "ao_value": ao,
        "ao_display": display if display is not None else (str(ao) if ao is not None else None),
        "ao_compliance_status": status,
        "compliance_status": overall,
        "sample_number": sample,
    }


def general_row(name, value=1.0, sample="S-001"):
    return {
        "parameter_name": name,
        "parameter_type": "GENERAL",
        "result_numeric": value,
        "result_value": str(value),
        "result_display_value": str(value),
        "result_units": "mg/L",
        "mac_value": None,
        "ao_value": None,
        "compliance_status": None,
        "sample_number": sample,
    }


@pytest.fixture
def passing_health_rows():
    return [health_row(f"Metal {i}") for i in range(10)]


@pytest.fixture
def sample_rows():
    """A realistic single sample: health, hybrid, ao, general and bacteria rows."""
    hybrid = health_row("Manganese", status="MEETS_MAC", value=0.03, mac=0.12)
    hybrid.update({
        "parameter_type": "Hybrid",
        "ao_value": 0.02,
        "ao_display": "0.02",
        "ao_compliance_status": "EXCEEDS_AO",
        "compliance_status": "WARNING",
    })
    return [
        health_row("Arsenic", value=0.002, mac=0.01),
        health_row("Lead", value=0.001, mac=0.005),
        health_row("Nitrate", value=12.0, mac=10.0, status="EXCEEDS_MAC"),
        health_row("Total Coliforms", value=0, mac=0, display="Not Detected"),
        hybrid,
        ao_row("Chloride", value=150.0, ao=250.0),
        ao_row("pH", status="AO_RANGE_VALUE", value=8.9, ao=None, overall="WARNING", display="6.5 - 8.5"),
        ao_row("Iron", value=0.1, ao=0.3),
        general_row("Bromide", value=0.1),
        general_row("Hardness", value=180.0),
    ]
