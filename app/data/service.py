from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

import pandas as pd

from config import AppConfig
from data import analysis
from data import mock_data
from data import queries
from data.connection import get_sql_client


logger = logging.getLogger(__name__)

# The statement-execution API returns every value as a string
NUMERIC_COLUMNS = (
    "model_year",
    "device_age",
    "energy_savings_yr",
    "co2_saved_kg_yr",
    "recycling_rate",
    "has_impact_data",
    "device_count",
    "devices_with_impact",
    "avg_energy_savings_yr",
    "avg_co2_saved_kg_yr",
    "avg_recycling_rate",
    "total_energy_savings_yr",
    "total_co2_saved_tons",
    "avg_device_age",
)


@dataclass(frozen=True)
class DataResult:
    df: pd.DataFrame
    source: str  # "mock" | "databricks_sql" | "local_csv"
    warning: str | None = None


@dataclass(frozen=True)
class GalleryQuery:
    key: str
    title: str
    description: str
    sql: str
    load: Callable[[], DataResult]


def _coerce_numeric(df: pd.DataFrame) -> pd.DataFrame:
    out = df.copy()
    for c in NUMERIC_COLUMNS:
        if c in out.columns:
            out[c] = pd.to_numeric(out[c], errors="coerce")
    return out


def _fallback(
    use_mock: bool,
    fn_live: Callable[[], pd.DataFrame],
    fn_mock: Callable[[], pd.DataFrame],
    live_source: str = "databricks_sql",
) -> DataResult:
    if use_mock:
        return DataResult(df=fn_mock(), source="mock")
    try:
        return DataResult(df=_coerce_numeric(fn_live()), source=live_source)
    except Exception as e:
        logger.warning("Live query against %s failed, using mock data: %s", live_source, e)
        return DataResult(df=fn_mock(), source="mock", warning=f"Fell back to mock data: {type(e).__name__}")


def _mock_device_impact(cfg: AppConfig) -> pd.DataFrame:
    devices, impact = mock_data.mock_tables()
    return analysis.build_device_impact(devices, impact, cfg.reference_year)


def _load(cfg: AppConfig, use_mock: bool, sql_text: str, fn_mock: Callable[[], pd.DataFrame]) -> DataResult:
    client = get_sql_client(cfg)
    return _fallback(
        use_mock,
        fn_live=lambda: client.query(sql_text),
        fn_mock=fn_mock,
        live_source=client.source,
    )


def get_device_impact(cfg: AppConfig, use_mock: bool, limit: int = 5000) -> DataResult:
    return _load(
        cfg,
        use_mock,
        queries.q_device_impact(cfg, limit=limit),
        fn_mock=lambda: _mock_device_impact(cfg).head(limit),
    )


def get_impact_by(cfg: AppConfig, use_mock: bool, dimensions: Sequence[str]) -> DataResult:
    return _load(
        cfg,
        use_mock,
        queries.q_impact_by(cfg, dimensions),
        fn_mock=lambda: analysis.impact_by(_mock_device_impact(cfg), dimensions),
    )


def get_impact_by_age_bucket(cfg: AppConfig, use_mock: bool) -> DataResult:
    return get_impact_by(cfg, use_mock, ["device_age_bucket"])


def get_impact_by_device_type(cfg: AppConfig, use_mock: bool) -> DataResult:
    return get_impact_by(cfg, use_mock, ["device_type"])


def get_impact_by_region(cfg: AppConfig, use_mock: bool) -> DataResult:
    return get_impact_by(cfg, use_mock, ["region"])


def get_impact_by_model_year(cfg: AppConfig, use_mock: bool) -> DataResult:
    return get_impact_by(cfg, use_mock, ["model_year"])


def get_impact_by_bucket_and_type(cfg: AppConfig, use_mock: bool) -> DataResult:
    return get_impact_by(cfg, use_mock, ["device_age_bucket", "device_type"])


def get_sustainability_totals(cfg: AppConfig, use_mock: bool) -> DataResult:
    return _load(
        cfg,
        use_mock,
        queries.q_sustainability_totals(cfg),
        fn_mock=lambda: analysis.sustainability_totals(_mock_device_impact(cfg)),
    )


def gallery(cfg: AppConfig, use_mock: bool) -> list[GalleryQuery]:
    """The showcase queries, in the order they are presented."""
    return [
        GalleryQuery(
            key="device_age",
            title="Device age via LEFT JOIN",
            description=(
                f"Join every device to its impact record and compute age as {cfg.reference_year} - model_year. "
                "Devices with no impact record keep empty metrics."
            ),
            sql=queries.q_device_impact(cfg, limit=50),
            load=lambda: get_device_impact(cfg, use_mock, limit=50),
        ),
        GalleryQuery(
            key="age_bucket",
            title="Impact by age bucket (CTE + CASE)",
            description="Bucket devices into newer (≤3 yrs), mid-age (≤6 yrs) and older (>6 yrs), then average savings per bucket.",
            sql=queries.q_impact_by_age_bucket(cfg),
            load=lambda: get_impact_by_age_bucket(cfg, use_mock),
        ),
        GalleryQuery(
            key="device_type",
            title="Impact by device type",
            description="Average energy savings, CO₂ avoided and recycling rate per device class.",
            sql=queries.q_impact_by_device_type(cfg),
            load=lambda: get_impact_by_device_type(cfg, use_mock),
        ),
        GalleryQuery(
            key="region",
            title="Impact by region",
            description="Where the fleet avoids the most CO₂ (total metric tons = SUM(co2_saved_kg_yr) / 1000).",
            sql=queries.q_impact_by_region(cfg),
            load=lambda: get_impact_by_region(cfg, use_mock),
        ),
        GalleryQuery(
            key="totals",
            title="Fleet totals",
            description="Headline numbers for an ESG summary.",
            sql=queries.q_sustainability_totals(cfg),
            load=lambda: get_sustainability_totals(cfg, use_mock),
        ),
    ]
