"""Tests for the batch score regeneration job."""

import pandas as pd

from conftest import health_row
from data.build_cwqi_scores import SCORE_COLUMNS, compute_scores, main
from models.report_processor import ReportDataProcessor


def _export(sample_rows):
    other = [
        health_row("Lead", sample="S-002"),
        health_row("E. coli", status="EXCEEDS_MAC", value=1, mac=0, display="Detected", sample="S-002"),
    ]
    return pd.DataFrame(sample_rows + other)


def test_compute_scores_one_row_per_sample(sample_rows):
    scores = compute_scores(_export(sample_rows), ReportDataProcessor())

    assert list(scores.columns) == SCORE_COLUMNS
    assert list(scores["sample_number"]) == ["S-001", "S-002"]

    first = scores.iloc[0]
    assert first["health_cwqi"] == 0
    assert first["health_rating"] == "Poor"
    assert bool(first["coliform_detected"]) is True
    assert first["potential_score"] == 73.1
    assert first["road_salt_status"] == "Road Salt Impact Detected"
    assert first["cl_br_ratio"] == 1500

    second = scores.iloc[1]
    assert second["health_cwqi"] == 0
    assert bool(second["coliform_detected"]) is True
    assert second["potential_score"] == 100
    assert pd.isna(second["ao_cwqi"])


def test_main_writes_csv(tmp_path, sample_rows):
    in_path = tmp_path / "test_results.csv"
    out_path = tmp_path / "out" / "scores.csv"
    _export(sample_rows).to_csv(in_path, index=False, encoding="utf-8-sig")

    scores = main([str(in_path), str(out_path)])

    assert out_path.exists()
    written = pd.read_csv(out_path, encoding="utf-8-sig", dtype={"sample_number": str})
    assert list(written["sample_number"]) == ["S-001", "S-002"]
    assert written["health_cwqi"].tolist() == scores["health_cwqi"].tolist()


def test_main_reports_missing_input(tmp_path, capsys):
    assert main([str(tmp_path / "nope.csv")]) is None
    assert "[!] Input missing" in capsys.readouterr().out
