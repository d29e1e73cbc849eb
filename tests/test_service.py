from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from data import service


def test_mock_mode_returns_mock_source(make_config) -> None:
    res = service.get_impact_by_age_bucket(make_config(), use_mock=True)

    assert res.source == "mock"
    assert res.warning is None
    assert set(res.df["device_age_bucket"]) <= {"newer", "mid-age", "older", "unknown"}
    assert res.df["device_count"].sum() == 400


def test_live_failure_falls_back_to_mock(make_config, caplog: pytest.LogCaptureFixture) -> None:
    res = service.get_sustainability_totals(make_config(), use_mock=False)

    assert res.source == "mock"
    assert res.warning == "Fell back to mock data: DatabricksAuthError"
    assert res.df["device_count"].iloc[0] == 400
    assert any("databricks_sql" in r.getMessage() for r in caplog.records)


def test_local_mode_reads_csv_dataset(make_config, local_dataset: Path) -> None:
    cfg = make_config(local_data_dir=str(local_dataset))
    res = service.get_impact_by_device_type(cfg, use_mock=False)

    assert res.source == "local_csv"
    assert res.warning is None
    assert res.df["device_type"].tolist() == ["desktop", "laptop", "server"]
    assert res.df["total_co2_saved_tons"].tolist() == pytest.approx([0.074, 0.032, 0.0])


def test_local_mode_missing_dataset_falls_back(make_config, tmp_path: Path) -> None:
    res = service.get_device_impact(make_config(local_data_dir=str(tmp_path)), use_mock=False, limit=10)

    assert res.source == "mock"
    assert res.warning == "Fell back to mock data: LocalDataError"
    assert len(res.df) == 10


def test_live_values_are_coerced_to_numbers(make_config, monkeypatch: pytest.MonkeyPatch) -> None:
    class StringClient:
        source = "databricks_sql"

        def query(self, query: str) -> pd.DataFrame:
            # Shape of a statement-execution API response: everything is a string
            return pd.DataFrame(
                [["newer", "2", "80.0", "32.0", "0.65", "0.064"]],
                columns=[
                    "device_age_bucket",
                    "device_count",
                    "avg_energy_savings_yr",
                    "avg_co2_saved_kg_yr",
                    "avg_recycling_rate",
                    "total_co2_saved_tons",
                ],
            )

    monkeypatch.setattr(service, "get_sql_client", lambda cfg: StringClient())
    res = service.get_impact_by_age_bucket(make_config(), use_mock=False)

    assert res.source == "databricks_sql"
    assert res.df["device_count"].iloc[0] == 2
    assert res.df["total_co2_saved_tons"].iloc[0] == pytest.approx(0.064)
    assert res.df["device_age_bucket"].iloc[0] == "newer"


def test_unknown_dimension_is_not_swallowed(make_config) -> None:
    with pytest.raises(ValueError):
        service.get_impact_by(make_config(), use_mock=True, dimensions=["site_city"])


def test_mock_reference_year_shifts_buckets(make_config) -> None:
    now = service.get_impact_by_age_bucket(make_config(reference_year=2024), use_mock=True).df
    later = service.get_impact_by_age_bucket(make_config(reference_year=2030), use_mock=True).df

    newer_now = now.set_index("device_age_bucket")["device_count"].get("newer", 0)
    newer_later = later.set_index("device_age_bucket")["device_count"].get("newer", 0)
    assert newer_later < newer_now


def test_gallery_queries_load(make_config) -> None:
    items = service.gallery(make_config(), use_mock=True)

    assert [q.key for q in items] == ["device_age", "age_bucket", "device_type", "region", "totals"]
    for q in items:
        assert "LEFT JOIN" in q.sql
        res = q.load()
        assert res.source == "mock"
        assert len(res.df) > 0
