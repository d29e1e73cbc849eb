from __future__ import annotations

import logging
import random
from pathlib import Path

import pandas as pd
from faker import Faker


logger = logging.getLogger(__name__)

fake = Faker()


REGIONS = ["North America", "EMEA", "APAC", "LATAM"]
DEVICE_TYPES = ["laptop", "desktop", "tablet", "workstation", "server"]

# Rough annual savings (kWh) from power-management features, by device class
_ENERGY_BASE_KWH = {"laptop": 45.0, "desktop": 120.0, "tablet": 12.0, "workstation": 210.0, "server": 640.0}
_GRID_KG_CO2_PER_KWH = {"North America": 0.39, "EMEA": 0.28, "APAC": 0.55, "LATAM": 0.21}

MISSING_IMPACT_SHARE = 0.08


def device_data_mock(n_devices: int = 400, newest_model_year: int = 2024) -> pd.DataFrame:
    random.seed(17)
    Faker.seed(17)
    rows = []
    for i in range(1, n_devices + 1):
        dtype = random.choices(DEVICE_TYPES, weights=[40, 25, 15, 12, 8])[0]
        # Servers and workstations live longer in the fleet
        max_age = 12 if dtype in ("server", "workstation") else 9
        rows.append(
            {
                "device_id": f"DEV-{i:05d}",
                "model_year": newest_model_year - random.randint(0, max_age),
                "device_type": dtype,
                "region": random.choice(REGIONS),
                "serial_number": fake.bothify("??########").upper(),
                "site_city": fake.city(),
            }
        )
    return pd.DataFrame(rows)


def impact_data_mock(devices: pd.DataFrame, newest_model_year: int = 2024) -> pd.DataFrame:
    random.seed(23)
    rows = []
    for d in devices.itertuples(index=False):
        if random.random() < MISSING_IMPACT_SHARE:
            continue  # never reported: exercises the LEFT JOIN
        age = max(0, newest_model_year - int(d.model_year))
        # Newer hardware is more efficient, so it saves more per year
        efficiency = max(0.35, 1.0 - 0.06 * age)
        energy = max(1.0, random.gauss(_ENERGY_BASE_KWH[d.device_type] * efficiency, 0.12 * _ENERGY_BASE_KWH[d.device_type]))
        co2 = energy * _GRID_KG_CO2_PER_KWH[d.region] * random.uniform(0.9, 1.1)
        recycling = max(0.05, min(0.98, random.gauss(0.62 + 0.02 * min(age, 8), 0.08)))
        rows.append(
            {
                "device_id": d.device_id,
                "energy_savings_yr": round(energy, 1),
                "co2_saved_kg_yr": round(co2, 2),
                "recycling_rate": round(recycling, 3),
            }
        )
    return pd.DataFrame(rows, columns=["device_id", "energy_savings_yr", "co2_saved_kg_yr", "recycling_rate"])


def mock_tables(n_devices: int = 400) -> tuple[pd.DataFrame, pd.DataFrame]:
    devices = device_data_mock(n_devices)
    return devices, impact_data_mock(devices)


def write_mock_dataset(out_dir: str | Path, n_devices: int = 400) -> list[Path]:
    """Write device_data.csv + impact_data.csv (LOCAL_DATA_DIR layout)."""
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    devices, impact = mock_tables(n_devices)
    paths = [out / "device_data.csv", out / "impact_data.csv"]
    devices.to_csv(paths[0], index=False)
    impact.to_csv(paths[1], index=False)
    logger.info("Wrote mock dataset (%s devices, %s impact rows) to %s", len(devices), len(impact), out)
    return paths
