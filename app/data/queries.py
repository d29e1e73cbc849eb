from __future__ import annotations

from typing import Sequence

from config import AppConfig
from data.analysis import (
    AGE_BUCKETS,
    MID_AGE_MAX_AGE,
    NEWER_MAX_AGE,
    validate_dimensions,
)


# Written to run unchanged on Databricks SQL and SQLite (local CSV mode).


def _base_ctes(cfg: AppConfig) -> str:
    reference_year = int(cfg.reference_year)
    return f"""
    WITH device_impact AS (
      SELECT
        d.device_id,
        d.model_year,
        d.device_type,
        d.region,
        i.energy_savings_yr,
        i.co2_saved_kg_yr,
        i.recycling_rate,
        CASE WHEN i.device_id IS NULL THEN 0 ELSE 1 END AS has_impact_data,
        {reference_year} - d.model_year AS device_age
      FROM {cfg.fq_schema}.device_data d
      LEFT JOIN {cfg.fq_schema}.impact_data i ON d.device_id = i.device_id
    ),
    bucketed AS (
      SELECT
        device_impact.*,
        CASE
          WHEN device_age IS NULL THEN 'unknown'
          WHEN device_age <= {NEWER_MAX_AGE} THEN 'newer'
          WHEN device_age <= {MID_AGE_MAX_AGE} THEN 'mid-age'
          ELSE 'older'
        END AS device_age_bucket
      FROM device_impact
    )"""


def _bucket_rank_expr() -> str:
    whens = "\n".join(f"        WHEN '{b}' THEN {i}" for i, b in enumerate(AGE_BUCKETS))
    return f"""CASE device_age_bucket
{whens}
      END"""


def q_device_impact(cfg: AppConfig, limit: int = 5000) -> str:
    """Every device with its impact metrics, age and age bucket."""
    return f"""{_base_ctes(cfg)}
    SELECT *
    FROM bucketed
    ORDER BY device_id
    LIMIT {int(limit)}
    """


def q_impact_by(cfg: AppConfig, dimensions: Sequence[str]) -> str:
    dims = validate_dimensions(dimensions)
    dim_list = ", ".join(dims)

    order_by = []
    if "device_age_bucket" in dims:
        order_by.append(_bucket_rank_expr())
    order_by += [d for d in dims if d != "device_age_bucket"]

    return f"""{_base_ctes(cfg)}
    SELECT
      {dim_list},
      COUNT(*) AS device_count,
      AVG(energy_savings_yr) AS avg_energy_savings_yr,
      AVG(co2_saved_kg_yr) AS avg_co2_saved_kg_yr,
      AVG(recycling_rate) AS avg_recycling_rate,
      COALESCE(SUM(co2_saved_kg_yr), 0) / 1000.0 AS total_co2_saved_tons
    FROM bucketed
    GROUP BY {dim_list}
    ORDER BY {", ".join(order_by)}
    """


def q_impact_by_age_bucket(cfg: AppConfig) -> str:
    return q_impact_by(cfg, ["device_age_bucket"])


def q_impact_by_device_type(cfg: AppConfig) -> str:
    return q_impact_by(cfg, ["device_type"])


def q_impact_by_region(cfg: AppConfig) -> str:
    return q_impact_by(cfg, ["region"])


def q_impact_by_model_year(cfg: AppConfig) -> str:
    return q_impact_by(cfg, ["model_year"])


def q_impact_by_bucket_and_type(cfg: AppConfig) -> str:
    return q_impact_by(cfg, ["device_age_bucket", "device_type"])


def q_sustainability_totals(cfg: AppConfig) -> str:
    """Fleet-wide headline numbers (single row)."""
    return f"""{_base_ctes(cfg)}
    SELECT
      COUNT(*) AS device_count,
      COALESCE(SUM(has_impact_data), 0) AS devices_with_impact,
      COALESCE(SUM(energy_savings_yr), 0) AS total_energy_savings_yr,
      COALESCE(SUM(co2_saved_kg_yr), 0) / 1000.0 AS total_co2_saved_tons,
      AVG(recycling_rate) AS avg_recycling_rate,
      AVG(device_age) AS avg_device_age
    FROM bucketed
    """
