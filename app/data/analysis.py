"""
Device/impact analysis in pandas.

Mirrors the SQL in data/queries.py one-for-one so mock mode (and the tests)
produce the same numbers a warehouse would:
- LEFT JOIN device_data -> impact_data on device_id (one row per device)
- device_age = reference_year - model_year
- device_age_bucket: <=3 newer, <=6 mid-age, >6 older, missing age -> unknown
- grouped averages + CO2 totals in metric tons
"""

from __future__ import annotations

from typing import Iterable, Sequence

import pandas as pd

from config import DEFAULT_REFERENCE_YEAR


NEWER_MAX_AGE = 3
MID_AGE_MAX_AGE = 6
AGE_BUCKETS = ("newer", "mid-age", "older", "unknown")

DIMENSIONS = ("device_age_bucket", "device_type", "region", "model_year")

DEVICE_COLUMNS = ("device_id", "model_year", "device_type", "region")
IMPACT_COLUMNS = ("device_id", "energy_savings_yr", "co2_saved_kg_yr", "recycling_rate")

METRIC_COLUMNS = (
    "device_count",
    "avg_energy_savings_yr",
    "avg_co2_saved_kg_yr",
    "avg_recycling_rate",
    "total_co2_saved_tons",
)

KG_PER_TON = 1000.0


class DatasetError(ValueError):
    pass


def device_age(model_year, reference_year: int = DEFAULT_REFERENCE_YEAR):
    """reference_year - model_year on a scalar or a Series. Missing years stay missing."""
    if isinstance(model_year, pd.Series):
        return reference_year - pd.to_numeric(model_year, errors="coerce")
    if model_year is None or pd.isna(model_year):
        return None
    return reference_year - model_year


def age_bucket(age) -> str:
    if age is None or pd.isna(age):
        return "unknown"
    if age <= NEWER_MAX_AGE:
        return "newer"
    if age <= MID_AGE_MAX_AGE:
        return "mid-age"
    return "older"


def _require_columns(df: pd.DataFrame, columns: Iterable[str], table: str) -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise DatasetError(f"{table} is missing columns: {', '.join(missing)}")


def _require_unique_ids(df: pd.DataFrame, table: str) -> None:
    dupes = df.loc[df["device_id"].duplicated(), "device_id"].unique().tolist()
    if dupes:
        shown = ", ".join(str(d) for d in dupes[:5])
        raise DatasetError(f"{table} has duplicate device_id values ({len(dupes)}): {shown}")


def join_device_impact(devices: pd.DataFrame, impact: pd.DataFrame) -> pd.DataFrame:
    """
    LEFT JOIN devices to impact on device_id.

    Every device survives (impact columns NaN when there is no impact row);
    impact rows for unknown devices are dropped. `has_impact_data` is 1/0.
    """
    _require_columns(devices, DEVICE_COLUMNS, "device_data")
    _require_columns(impact, IMPACT_COLUMNS, "impact_data")
    _require_unique_ids(devices, "device_data")
    _require_unique_ids(impact, "impact_data")

    right = impact[list(IMPACT_COLUMNS)].assign(has_impact_data=1)
    joined = devices[list(DEVICE_COLUMNS)].merge(right, on="device_id", how="left")
    joined["has_impact_data"] = joined["has_impact_data"].fillna(0).astype(int)
    # an empty impact_data.csv reads back as object columns
    for col in IMPACT_COLUMNS[1:]:
        joined[col] = pd.to_numeric(joined[col], errors="coerce")
    return joined


def add_age_columns(df: pd.DataFrame, reference_year: int = DEFAULT_REFERENCE_YEAR) -> pd.DataFrame:
    out = df.copy()
    out["device_age"] = device_age(out["model_year"], reference_year)
    out["device_age_bucket"] = out["device_age"].map(age_bucket)
    return out


def build_device_impact(
    devices: pd.DataFrame,
    impact: pd.DataFrame,
    reference_year: int = DEFAULT_REFERENCE_YEAR,
) -> pd.DataFrame:
    joined = join_device_impact(devices, impact)
    out = add_age_columns(joined, reference_year)
    return out.sort_values("device_id", kind="mergesort").reset_index(drop=True)


def validate_dimensions(dimensions: Sequence[str]) -> tuple[str, ...]:
    dims = tuple(dimensions)
    if not dims:
        raise ValueError("At least one grouping dimension is required")
    unknown = [d for d in dims if d not in DIMENSIONS]
    if unknown:
        raise ValueError(f"Unknown dimension(s) {unknown}; expected one of {list(DIMENSIONS)}")
    if len(set(dims)) != len(dims):
        raise ValueError(f"Duplicate dimension in {list(dims)}")
    return dims


def order_groups(df: pd.DataFrame, dimensions: Sequence[str]) -> pd.DataFrame:
    """Bucket order first (newer -> unknown) when bucketed, then the remaining dimensions ascending."""
    work = df.copy()
    keys = []
    if "device_age_bucket" in dimensions:
        rank = {b: i for i, b in enumerate(AGE_BUCKETS)}
        work["_bucket_rank"] = work["device_age_bucket"].map(rank)
        keys.append("_bucket_rank")
    keys += [d for d in dimensions if d != "device_age_bucket"]
    work = work.sort_values(keys, na_position="first", kind="mergesort")
    return work.drop(columns=["_bucket_rank"], errors="ignore").reset_index(drop=True)


def impact_by(df: pd.DataFrame, dimensions: Sequence[str]) -> pd.DataFrame:
    dims = validate_dimensions(dimensions)
    _require_columns(df, dims, "device impact frame")

    grouped = (
        df.groupby(list(dims), dropna=False)
        .agg(
            device_count=("device_id", "size"),
            avg_energy_savings_yr=("energy_savings_yr", "mean"),
            avg_co2_saved_kg_yr=("co2_saved_kg_yr", "mean"),
            avg_recycling_rate=("recycling_rate", "mean"),
            total_co2_saved_kg=("co2_saved_kg_yr", "sum"),
        )
        .reset_index()
    )
    grouped["total_co2_saved_tons"] = grouped.pop("total_co2_saved_kg") / KG_PER_TON
    grouped["device_count"] = grouped["device_count"].astype(int)
    return order_groups(grouped[list(dims) + list(METRIC_COLUMNS)], dims)


def sustainability_totals(df: pd.DataFrame) -> pd.DataFrame:
    row = {
        "device_count": int(len(df)),
        "devices_with_impact": int(df["has_impact_data"].sum()) if len(df) else 0,
        "total_energy_savings_yr": float(df["energy_savings_yr"].sum()),
        "total_co2_saved_tons": float(df["co2_saved_kg_yr"].sum()) / KG_PER_TON,
        "avg_recycling_rate": float(df["recycling_rate"].mean()),
        "avg_device_age": float(df["device_age"].mean()),
    }
    return pd.DataFrame([row])
