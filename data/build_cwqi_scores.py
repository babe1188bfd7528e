import sys
from pathlib import Path

import pandas as pd

from data.clean_results import read_results_csv, rows_from_dataframe
from models.report_processor import ReportDataProcessor
from utils.settings_loader import load_settings

INPUT_NAME = "test_results.csv"
OUTPUT_NAME = "cwqi_scores.csv"

SCORE_COLUMNS = [
    "sample_number",
    "health_cwqi",
    "health_rating",
    "ao_cwqi",
    "ao_rating",
    "coliform_detected",
    "potential_score",
    "road_salt_status",
    "cl_br_ratio",
]


def find_results_csv(script_path: Path, filename: str = INPUT_NAME) -> Path:
    script_dir = script_path.parent
    candidates = [
        script_dir / filename,
        script_dir / "data" / filename,
        script_dir.parent / "data" / filename,
    ]
    for p in candidates:
        if p.exists():
            return p
    return script_dir / filename


def compute_scores(df: pd.DataFrame, processor: ReportDataProcessor) -> pd.DataFrame:
    """One output row per sample_number."""
    rows = []
    for sample, group in df.groupby("sample_number", dropna=False, sort=True):
        report = processor.process(rows_from_dataframe(group))
        if report is None:
            continue
        health, ao, salt = report.health_cwqi, report.ao_cwqi, report.road_salt
        rows.append({
            "sample_number": sample,
            "health_cwqi": health.score if health else None,
            "health_rating": health.rating if health else None,
            "ao_cwqi": ao.score if ao else None,
            "ao_rating": ao.rating if ao else None,
            "coliform_detected": bool(health and health.coliform_detected),
            "potential_score": health.potential_score if health else None,
            "road_salt_status": salt.status if salt else None,
            "cl_br_ratio": salt.cl_br_ratio if salt else None,
        })
    return pd.DataFrame(rows, columns=SCORE_COLUMNS)


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    script_path = Path(__file__).resolve()

    in_path = Path(argv[0]) if len(argv) > 0 else find_results_csv(script_path)
    out_path = Path(argv[1]) if len(argv) > 1 else in_path.parent / OUTPUT_NAME
    settings_path = argv[2] if len(argv) > 2 else None

    print("[i] Input file   :", in_path)
    if not in_path.exists():
        print("[!] Input missing:", in_path)
        return None

    processor = ReportDataProcessor(load_settings(settings_path))
    raw = read_results_csv(in_path)
    if raw.empty:
        print("[i] No rows to score. Exiting.")
        return None

    scores = compute_scores(raw, processor)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    scores.to_csv(out_path, index=False, encoding="utf-8-sig")

    print(f"Scored samples   : {len(scores)}")
    print(f"Coliform samples : {int(scores['coliform_detected'].sum())}")
    print(f"Scores CSV       : {out_path}")
    return scores


if __name__ == "__main__":
    main()
