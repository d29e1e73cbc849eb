from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


#
# Shared theme tokens
# - Centralized here so components/styles.py and the plotly helpers agree.
#
THEME = {
    # Backgrounds
    "bg_primary": "#F3F5F0",     # page background
    "bg_secondary": "#FFFFFF",   # sidebar / top surfaces
    "bg_card": "#FFFFFF",       # card surface
    # Accents (Moss + Forest)
    "accent_primary": "#2F8F5B",
    "accent_secondary": "#4CAF7A",  # hover
    "forest_900": "#0F2A1D",
    "forest_800": "#1B3B2B",
    # Text + borders
    "text_primary": "#111827",
    "text_secondary": "rgba(17, 24, 39, 0.72)",
    "border_color": "#E2E6DE",
    "grid": "rgba(17, 24, 39, 0.10)",
    "shadow": "0 1px 3px rgba(16,24,40,0.08)",
    "radius_px": 10,
    # Status colors
    "success": "#067647",
    "warning": "#F59E0B",
    "danger": "#B42318",
}

DEFAULT_REFERENCE_YEAR = 2024

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class AppConfig:
    # Databricks SQL (warehouse mode)
    databricks_host: str
    databricks_http_path: str
    databricks_catalog: Optional[str]
    databricks_schema: str

    # Optional auth. If unset, warehouse queries fail and the service falls back to mock data.
    databricks_token: Optional[str]

    # Directory holding device_data.csv + impact_data.csv. When set, live reads go to the local dataset.
    local_data_dir: Optional[str]

    # "Today" for device age (age = reference_year - model_year)
    reference_year: int

    # Defaults
    default_use_mock: bool
    log_level: str = "INFO"

    # Set by Databricks Apps; selects the SDK (OAuth) path before PAT auth
    databricks_app_name: Optional[str] = None

    @property
    def data_mode(self) -> str:
        return "local_csv" if self.local_data_dir else "databricks_sql"

    @property
    def fq_schema(self) -> str:
        # Local mode attaches a single database under the schema name, so no catalog there.
        if self.databricks_catalog and self.data_mode == "databricks_sql":
            return f"`{self.databricks_catalog}`.`{self.databricks_schema}`"
        return f"`{self.databricks_schema}`"

    @property
    def schema_label(self) -> str:
        if self.databricks_catalog and self.data_mode == "databricks_sql":
            return f"{self.databricks_catalog}.{self.databricks_schema}"
        return self.databricks_schema


def _getenv(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name, default)
    if v is None:
        return None
    v = v.strip()
    return v if v else None


def _getenv_int(name: str, default: int) -> int:
    raw = _getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer year, got {raw!r}") from e


def _getenv_log_level(default: str = "INFO") -> str:
    level = (_getenv("LOG_LEVEL") or default).upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {level!r}")
    return level


def get_config() -> AppConfig:
    """
    Centralized config: this is the ONLY place env vars are read.
    - Loads `.env` if present (local dev)
    - Works with Databricks Apps env var injection
    """
    load_dotenv(override=False)

    return AppConfig(
        databricks_host=_getenv("DATABRICKS_HOST") or "",
        databricks_http_path=_getenv("DATABRICKS_HTTP_PATH") or "",
        databricks_catalog=_getenv("DATABRICKS_CATALOG"),
        databricks_schema=_getenv("DATABRICKS_SCHEMA", "intel") or "intel",
        databricks_token=_getenv("DATABRICKS_TOKEN"),
        local_data_dir=_getenv("LOCAL_DATA_DIR"),
        reference_year=_getenv_int("REFERENCE_YEAR", DEFAULT_REFERENCE_YEAR),
        default_use_mock=(_getenv("USE_MOCK_DATA", "true") or "true").lower() == "true",
        log_level=_getenv_log_level(),
        databricks_app_name=_getenv("DATABRICKS_APP_NAME"),
    )
