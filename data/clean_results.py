# clean_results.py
import math
import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd

# JavaScript parseFloat semantics: take the leading numeric prefix, ignore the rest
_LEADING_NUMBER = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


# ---------- helpers ----------
def normalize_whitespace(s) -> str:
    if not isinstance(s, str):
        s = "" if s is None else str(s)
    s = re.sub(r"\s+", " ", s.strip())
    return s.replace("\u00A0", " ").strip()


def parse_float(raw) -> float:
    """Leading-number parse of a lab value. Returns nan when nothing parses."""
    if raw is None or isinstance(raw, bool):
        return np.nan
    if isinstance(raw, (int, float, np.integer, np.floating)):
        return float(raw)
    m = _LEADING_NUMBER.match(str(raw).strip())
    if not m:
        return np.nan
    return float(m.group(0))


def is_present(value) -> bool:
    """False for None, NaN and empty strings."""
    if value is None:
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    if isinstance(value, str) and value == "":
        return False
    return True


def _none_if_nan(value):
    if isinstance(value, float) and math.isnan(value):
        return None
    if value is pd.NA or value is pd.NaT:
        return None
    return value


# ---------- row model ----------
@dataclass(frozen=True)
class RawParameterRow:
    """One tested analyte of one sample, as handed over by the data store."""
    parameter_name: Optional[str] = None
    parameter_type: Optional[str] = None
    result_numeric: object = None
    result_value: Optional[str] = None
    result_display_value: Optional[str] = None
    result_units: Optional[str] = None
    mac_value: object = None
    mac_display: Optional[str] = None
    mac_compliance_status: Optional[str] = None
    ao_value: object = None
    ao_display: Optional[str] = None
    ao_compliance_status: Optional[str] = None
    compliance_status: Optional[str] = None
    sample_number: Optional[str] = None
    extras: dict = field(default_factory=dict, compare=False)

    @classmethod
    def from_mapping(cls, row) -> "RawParameterRow":
        if isinstance(row, cls):
            return row
        known = {f.name for f in fields(cls)} - {"extras"}
        values = {k: _none_if_nan(v) for k, v in row.items() if k in known}
        extras = {k: _none_if_nan(v) for k, v in row.items() if k not in known}
        return cls(**values, extras=extras)

    def get(self, key, default=None):
        if key != "extras" and key in self.__dataclass_fields__:
            return getattr(self, key)
        return self.extras.get(key, default)

    def to_dict(self) -> dict:
        out = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "extras"}
        out.update(self.extras)
        return out


def rows_from_dataframe(df: pd.DataFrame) -> list:
    """One RawParameterRow per DataFrame row; NaN cells become None."""
    records = df.to_dict(orient="records")
    return [RawParameterRow.from_mapping(r) for r in records]


def read_results_csv(path) -> pd.DataFrame:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Results CSV not found: {path}")
    df = pd.read_csv(path, encoding="utf-8-sig", dtype={"sample_number": str})
    if "parameter_name" in df.columns:
        df["parameter_name"] = df["parameter_name"].map(
            lambda s: normalize_whitespace(s) if isinstance(s, str) else s
        )
    return df
