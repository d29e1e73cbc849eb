# Databricks notebook source
# MAGIC %md
# MAGIC ## 1) Setup (schema + device/impact tables)
# MAGIC
# MAGIC Creates the two read-only tables the app and `02_device_impact_analysis` query:
# MAGIC - `device_data`: one row per device (`device_id`, `model_year`, `device_type`, `region`)
# MAGIC - `impact_data`: one row per device (`device_id`, `energy_savings_yr`, `co2_saved_kg_yr`, `recycling_rate`)
# MAGIC
# MAGIC Loads the same seeded synthetic data the app uses in mock mode, so numbers match across modes.
# MAGIC Skip the load step if the tables already hold real data.

# COMMAND ----------
dbutils.widgets.text("catalog", "")  # empty = use the workspace default catalog
dbutils.widgets.text("schema", "intel")
dbutils.widgets.text("n_devices", "400")
dbutils.widgets.dropdown("overwrite", "false", ["true", "false"])

catalog = dbutils.widgets.get("catalog").strip()
schema = dbutils.widgets.get("schema").strip()
n_devices = int(dbutils.widgets.get("n_devices"))
overwrite = dbutils.widgets.get("overwrite") == "true"

fq_schema = f"`{catalog}`.`{schema}`" if catalog else f"`{schema}`"
print("Target:", fq_schema)

# COMMAND ----------
if catalog:
    spark.sql(f"USE CATALOG `{catalog}`")
spark.sql(f"CREATE SCHEMA IF NOT EXISTS `{schema}`")

# COMMAND ----------
# MAGIC %md
# MAGIC ### Load synthetic tables

# COMMAND ----------
import os
import sys

# Repo checkout: notebooks/ sits next to app/
sys.path.insert(0, os.path.abspath(os.path.join(os.getcwd(), "..", "app")))

from data.mock_data import mock_tables  # noqa: E402

devices_pdf, impact_pdf = mock_tables(n_devices)

mode = "overwrite" if overwrite else "errorifexists"
for name, pdf in [("device_data", devices_pdf), ("impact_data", impact_pdf)]:
    try:
        spark.createDataFrame(pdf).write.mode(mode).saveAsTable(f"{fq_schema}.`{name}`")
        print(f"Wrote {fq_schema}.{name}: {len(pdf)} rows")
    except Exception as e:
        print(f"WARN: {name} not written (set overwrite=true to replace existing data):", e)

# COMMAND ----------
display(spark.sql(f"SELECT COUNT(*) AS devices FROM {fq_schema}.device_data"))
display(spark.sql(f"SELECT COUNT(*) AS impact_rows FROM {fq_schema}.impact_data"))
