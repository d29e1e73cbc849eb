#!/usr/bin/env python3
"""
Export the device sustainability summaries as CSV files.

Runs the same queries as the app against mock data, a local CSV dataset or
Databricks SQL, without the Streamlit UI. Unlike the app, a failing live
source is an error here (no silent fallback to mock data).

Usage:
  python scripts/export_report.py --source mock --out-dir out/ --write-dataset
  python scripts/export_report.py --source local --data-dir data/ --out-dir out/
  python scripts/export_report.py --source databricks --out-dir out/ --reference-year 2025
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import sys
from pathlib import Path
from typing import Callable, Optional, Sequence

APP_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "app"))
if APP_DIR not in sys.path:
    sys.path.insert(0, APP_DIR)

import pandas as pd  # noqa: E402

from config import AppConfig, get_config  # noqa: E402
from data import analysis, mock_data, queries  # noqa: E402
from data.connection import LocalSqlClient, SqlClient  # noqa: E402


logger = logging.getLogger("export_report")

REPORTS: dict[str, tuple[Callable[[AppConfig], str], Optional[Sequence[str]]]] = {
    "totals": (queries.q_sustainability_totals, None),
    "impact_by_age_bucket": (queries.q_impact_by_age_bucket, ["device_age_bucket"]),
    "impact_by_device_type": (queries.q_impact_by_device_type, ["device_type"]),
    "impact_by_region": (queries.q_impact_by_region, ["region"]),
    "impact_by_model_year": (queries.q_impact_by_model_year, ["model_year"]),
}


def build_reports(cfg: AppConfig, source: str) -> dict[str, pd.DataFrame]:
    if source == "mock":
        devices, impact = mock_data.mock_tables()
        base = analysis.build_device_impact(devices, impact, cfg.reference_year)
        return {
            name: analysis.sustainability_totals(base) if dims is None else analysis.impact_by(base, dims)
            for name, (_, dims) in REPORTS.items()
        }

    client = LocalSqlClient(cfg=cfg) if source == "local" else SqlClient(cfg=cfg)
    return {name: client.query(builder(cfg)) for name, (builder, _) in REPORTS.items()}


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    ap.add_argument("--source", choices=["mock", "local", "databricks"], default="mock")
    ap.add_argument("--data-dir", help="Directory with device_data.csv + impact_data.csv (defaults to LOCAL_DATA_DIR)")
    ap.add_argument("--out-dir", required=True)
    ap.add_argument("--reference-year", type=int, help="Year device age is measured from (defaults to REFERENCE_YEAR)")
    ap.add_argument("--write-dataset", action="store_true", help="Also write the mock device_data.csv / impact_data.csv")
    return ap.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    cfg = get_config()
    logging.basicConfig(level=cfg.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    overrides = {}
    if args.reference_year is not None:
        overrides["reference_year"] = args.reference_year
    if args.source == "local":
        overrides["local_data_dir"] = args.data_dir or cfg.local_data_dir
    elif args.source == "databricks":
        overrides["local_data_dir"] = None
    cfg = dataclasses.replace(cfg, **overrides)

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    if args.write_dataset:
        mock_data.write_mock_dataset(out_dir)

    try:
        reports = build_reports(cfg, args.source)
    except Exception as e:
        logger.error("Could not build reports from %s: %s", args.source, e)
        return 1

    for name, df in reports.items():
        path = out_dir / f"{name}.csv"
        df.to_csv(path, index=False)
        logger.info("Wrote %s (%s rows)", path, len(df))

    return 0


if __name__ == "__main__":
    sys.exit(main())
