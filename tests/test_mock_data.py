from __future__ import annotations

from pathlib import Path

import pandas as pd

from data.mock_data import DEVICE_TYPES, REGIONS, device_data_mock, mock_tables, write_mock_dataset


def test_mock_tables_are_deterministic() -> None:
    d1, i1 = mock_tables(100)
    d2, i2 = mock_tables(100)

    pd.testing.assert_frame_equal(d1, d2)
    pd.testing.assert_frame_equal(i1, i2)


def test_device_table_shape() -> None:
    devices = device_data_mock(300)

    assert len(devices) == 300
    assert devices["device_id"].is_unique
    assert set(devices["device_type"]) <= set(DEVICE_TYPES)
    assert set(devices["region"]) <= set(REGIONS)
    assert devices["model_year"].between(2012, 2024).all()


def test_some_devices_have_no_impact_row() -> None:
    devices, impact = mock_tables(400)

    assert impact["device_id"].is_unique
    assert set(impact["device_id"]) < set(devices["device_id"])
    assert impact["recycling_rate"].between(0, 1).all()
    assert (impact["co2_saved_kg_yr"] > 0).all()


def test_write_mock_dataset(tmp_path: Path) -> None:
    paths = write_mock_dataset(tmp_path / "data", n_devices=50)

    assert [p.name for p in paths] == ["device_data.csv", "impact_data.csv"]
    assert len(pd.read_csv(paths[0])) == 50
