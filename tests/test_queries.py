"""The SQL builders must agree with data.analysis when run through SQLite."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from data import analysis, queries
from data.connection import LocalSqlClient
from data.mock_data import write_mock_dataset


TEXT_COLUMNS = ("device_id", "device_type", "region", "device_age_bucket")


def _normalize(df: pd.DataFrame) -> pd.DataFrame:
    out = df.reset_index(drop=True).copy()
    for c in out.columns:
        if c in TEXT_COLUMNS:
            # SQLite hands back None, pandas NaN
            out[c] = out[c].astype(object).where(out[c].notna(), "<null>")
        else:
            out[c] = pd.to_numeric(out[c], errors="coerce").astype(float)
    return out


def _assert_same(sql_df: pd.DataFrame, pandas_df: pd.DataFrame) -> None:
    pd.testing.assert_frame_equal(_normalize(sql_df), _normalize(pandas_df), check_dtype=False, rtol=1e-6)


@pytest.fixture
def mock_dataset(tmp_path: Path) -> Path:
    data_dir = tmp_path / "mock"
    write_mock_dataset(data_dir, n_devices=250)
    return data_dir


def test_queries_target_the_configured_schema(make_config) -> None:
    sql = queries.q_impact_by_age_bucket(make_config(databricks_catalog="main", databricks_schema="intel"))

    assert "`main`.`intel`.device_data d" in sql
    assert "LEFT JOIN `main`.`intel`.impact_data i ON d.device_id = i.device_id" in sql


def test_reference_year_is_interpolated(make_config) -> None:
    sql = queries.q_device_impact(make_config(reference_year=2030))
    assert "2030 - d.model_year AS device_age" in sql


def test_bucket_thresholds_in_case_expression(make_config) -> None:
    sql = queries.q_impact_by_age_bucket(make_config())
    assert "WHEN device_age <= 3 THEN 'newer'" in sql
    assert "WHEN device_age <= 6 THEN 'mid-age'" in sql
    assert "ELSE 'older'" in sql
    assert "COALESCE(SUM(co2_saved_kg_yr), 0) / 1000.0 AS total_co2_saved_tons" in sql


def test_impact_by_rejects_unknown_dimension(make_config) -> None:
    with pytest.raises(ValueError, match="Unknown dimension"):
        queries.q_impact_by(make_config(), ["region; DROP TABLE device_data"])


def test_age_bucket_sql_matches_expected_numbers(make_config, local_dataset: Path) -> None:
    cfg = make_config(local_data_dir=str(local_dataset))
    out = LocalSqlClient(cfg).query(queries.q_impact_by_age_bucket(cfg))

    assert out["device_age_bucket"].tolist() == ["newer", "mid-age", "older"]
    assert out["device_count"].tolist() == [2, 2, 1]
    assert out["avg_energy_savings_yr"].tolist() == pytest.approx([80.0, 40.0, 100.0])
    assert out["total_co2_saved_tons"].tolist() == pytest.approx([0.064, 0.012, 0.030])


def test_device_impact_sql_matches_pandas(make_config, local_dataset: Path, devices, impact) -> None:
    cfg = make_config(local_data_dir=str(local_dataset))
    sql_df = LocalSqlClient(cfg).query(queries.q_device_impact(cfg))

    _assert_same(sql_df, analysis.build_device_impact(devices, impact))


def test_limit_applies_after_ordering(make_config, local_dataset: Path) -> None:
    cfg = make_config(local_data_dir=str(local_dataset))
    out = LocalSqlClient(cfg).query(queries.q_device_impact(cfg, limit=2))
    assert out["device_id"].tolist() == ["DEV-1", "DEV-2"]


@pytest.mark.parametrize(
    "dimensions",
    [
        ["device_age_bucket"],
        ["device_type"],
        ["region"],
        ["model_year"],
        ["device_age_bucket", "device_type"],
        ["region", "device_age_bucket"],
    ],
)
def test_grouped_sql_matches_pandas_on_mock_dataset(make_config, mock_dataset: Path, dimensions) -> None:
    cfg = make_config(local_data_dir=str(mock_dataset))
    client = LocalSqlClient(cfg)
    base = analysis.build_device_impact(client.read_table("device_data"), client.read_table("impact_data"))

    _assert_same(client.query(queries.q_impact_by(cfg, dimensions)), analysis.impact_by(base, dimensions))


def test_totals_sql_matches_pandas_on_mock_dataset(make_config, mock_dataset: Path) -> None:
    cfg = make_config(local_data_dir=str(mock_dataset), reference_year=2026)
    client = LocalSqlClient(cfg)
    base = analysis.build_device_impact(client.read_table("device_data"), client.read_table("impact_data"), 2026)

    _assert_same(client.query(queries.q_sustainability_totals(cfg)), analysis.sustainability_totals(base))


SPARSE_DEVICES = """device_id,model_year,device_type,region
A,2022,laptop,EMEA
B,,laptop,APAC
C,2026,,EMEA
D,2015,desktop,
E,2019,desktop,APAC
F,2022,,
"""

SPARSE_IMPACT = """device_id,energy_savings_yr,co2_saved_kg_yr,recycling_rate
A,40.0,12.0,0.5
C,70.0,25.0,0.8
D,100.0,30.0,
Z,999.0,999.0,0.1
"""

IMPACT_HEADER = "device_id,energy_savings_yr,co2_saved_kg_yr,recycling_rate\n"


@pytest.fixture
def sparse_dataset(tmp_path: Path) -> Path:
    # Missing model_year, device_type and region; a future model year; an orphan impact row
    data_dir = tmp_path / "sparse"
    data_dir.mkdir()
    (data_dir / "device_data.csv").write_text(SPARSE_DEVICES, encoding="utf-8")
    (data_dir / "impact_data.csv").write_text(SPARSE_IMPACT, encoding="utf-8")
    return data_dir


def _pandas_base(client: LocalSqlClient, reference_year: int = 2024) -> pd.DataFrame:
    return analysis.build_device_impact(client.read_table("device_data"), client.read_table("impact_data"), reference_year)


@pytest.mark.parametrize(
    "dimensions",
    [
        ["model_year"],
        ["device_type"],
        ["region", "device_age_bucket"],
        ["device_age_bucket", "region"],
        ["device_age_bucket", "device_type"],
    ],
)
def test_grouped_sql_matches_pandas_with_missing_values(make_config, sparse_dataset: Path, dimensions) -> None:
    cfg = make_config(local_data_dir=str(sparse_dataset))
    client = LocalSqlClient(cfg)

    _assert_same(client.query(queries.q_impact_by(cfg, dimensions)), analysis.impact_by(_pandas_base(client), dimensions))


def test_missing_dimension_values_form_their_own_group(make_config, sparse_dataset: Path) -> None:
    cfg = make_config(local_data_dir=str(sparse_dataset))
    out = LocalSqlClient(cfg).query(queries.q_impact_by(cfg, ["device_type"]))

    assert out["device_type"].isna().tolist() == [True, False, False]
    assert out["device_count"].tolist() == [2, 2, 2]
    # C (future model year) has impact data, F does not
    assert out.loc[0, "total_co2_saved_tons"] == pytest.approx(0.025)


def test_sparse_age_buckets_in_sql(make_config, sparse_dataset: Path) -> None:
    cfg = make_config(local_data_dir=str(sparse_dataset))
    out = LocalSqlClient(cfg).query(queries.q_device_impact(cfg)).set_index("device_id")

    assert out.loc["C", "device_age"] == -2
    assert out.loc["C", "device_age_bucket"] == "newer"
    assert out.loc["B", "device_age_bucket"] == "unknown"
    assert "Z" not in out.index


def test_totals_sql_matches_pandas_with_missing_values(make_config, sparse_dataset: Path) -> None:
    cfg = make_config(local_data_dir=str(sparse_dataset))
    client = LocalSqlClient(cfg)
    sql_df = client.query(queries.q_sustainability_totals(cfg))

    _assert_same(sql_df, analysis.sustainability_totals(_pandas_base(client)))
    assert sql_df.loc[0, "devices_with_impact"] == 3
    assert sql_df.loc[0, "total_co2_saved_tons"] == pytest.approx(0.067)


@pytest.fixture
def no_impact_dataset(tmp_path: Path) -> Path:
    data_dir = tmp_path / "no_impact"
    data_dir.mkdir()
    (data_dir / "device_data.csv").write_text(SPARSE_DEVICES, encoding="utf-8")
    (data_dir / "impact_data.csv").write_text(IMPACT_HEADER, encoding="utf-8")
    return data_dir


def test_empty_impact_table_matches_pandas(make_config, no_impact_dataset: Path) -> None:
    cfg = make_config(local_data_dir=str(no_impact_dataset))
    client = LocalSqlClient(cfg)
    base = _pandas_base(client)

    totals = client.query(queries.q_sustainability_totals(cfg))
    _assert_same(totals, analysis.sustainability_totals(base))
    assert totals.loc[0, "devices_with_impact"] == 0
    assert totals.loc[0, "total_co2_saved_tons"] == 0

    dims = ["device_age_bucket"]
    _assert_same(client.query(queries.q_impact_by(cfg, dims)), analysis.impact_by(base, dims))
