"""Pytest configuration: offline by default, shared device/impact fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pandas as pd
import pytest

from config import AppConfig


CONFIG_ENV_VARS = (
    "DATABRICKS_HOST",
    "DATABRICKS_HTTP_PATH",
    "DATABRICKS_TOKEN",
    "DATABRICKS_CATALOG",
    "DATABRICKS_SCHEMA",
    "DATABRICKS_APP_NAME",
    "LOCAL_DATA_DIR",
    "REFERENCE_YEAR",
    "USE_MOCK_DATA",
    "LOG_LEVEL",
)


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--databricks",
        action="store_true",
        default=False,
        help="run tests that require a live Databricks SQL warehouse",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "requires_databricks: test queries a live Databricks SQL warehouse "
        "and is skipped unless --databricks is passed",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if config.getoption("--databricks"):
        return
    skip = pytest.mark.skip(reason="requires --databricks to run against a live warehouse")
    for item in items:
        if "requires_databricks" in item.keywords:
            item.add_marker(skip)


@pytest.fixture(autouse=True)
def _clean_env(request: pytest.FixtureRequest, monkeypatch: pytest.MonkeyPatch) -> None:
    if "requires_databricks" in request.keywords:
        return
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_config() -> Callable[..., AppConfig]:
    def _make(**overrides) -> AppConfig:
        base = dict(
            databricks_host="",
            databricks_http_path="",
            databricks_catalog=None,
            databricks_schema="intel",
            databricks_token=None,
            local_data_dir=None,
            reference_year=2024,
            default_use_mock=True,
        )
        base.update(overrides)
        return AppConfig(**base)

    return _make


@pytest.fixture
def devices() -> pd.DataFrame:
    # Ages at 2024: 5 (mid-age), 2 (newer), 8 (older), 3 (newer), 6 (mid-age)
    return pd.DataFrame(
        {
            "device_id": ["DEV-1", "DEV-2", "DEV-3", "DEV-4", "DEV-5"],
            "model_year": [2019, 2022, 2016, 2021, 2018],
            "device_type": ["laptop", "laptop", "desktop", "desktop", "server"],
            "region": ["EMEA", "APAC", "EMEA", "APAC", "EMEA"],
        }
    )


@pytest.fixture
def impact() -> pd.DataFrame:
    # DEV-5 has no impact row; DEV-9 is not a known device
    return pd.DataFrame(
        {
            "device_id": ["DEV-1", "DEV-2", "DEV-3", "DEV-4", "DEV-9"],
            "energy_savings_yr": [40.0, 50.0, 100.0, 110.0, 999.0],
            "co2_saved_kg_yr": [12.0, 20.0, 30.0, 44.0, 999.0],
            "recycling_rate": [0.5, 0.7, 0.9, 0.6, 0.1],
        }
    )


@pytest.fixture
def local_dataset(tmp_path: Path, devices: pd.DataFrame, impact: pd.DataFrame) -> Path:
    data_dir = tmp_path / "dataset"
    data_dir.mkdir()
    devices.to_csv(data_dir / "device_data.csv", index=False)
    impact.to_csv(data_dir / "impact_data.csv", index=False)
    return data_dir
