# Databricks notebook source
# MAGIC %md
# MAGIC ## 2) Device age vs. sustainability impact
# MAGIC
# MAGIC **Assumes** `01_setup_tables` ran (or `intel.device_data` / `intel.impact_data` already exist).
# MAGIC
# MAGIC Walkthrough:
# MAGIC - LEFT JOIN devices to their impact record
# MAGIC - device age = 2024 − model_year
# MAGIC - bucket by age (≤3 newer, ≤6 mid-age, >6 older) with a CTE + CASE
# MAGIC - averages per bucket, totals in metric tons

# COMMAND ----------
# MAGIC %md
# MAGIC ### Device age

# COMMAND ----------
# MAGIC %sql
# MAGIC SELECT
# MAGIC   d.device_id,
# MAGIC   d.model_year,
# MAGIC   d.device_type,
# MAGIC   d.region,
# MAGIC   2024 - d.model_year AS device_age,
# MAGIC   i.energy_savings_yr,
# MAGIC   i.co2_saved_kg_yr,
# MAGIC   i.recycling_rate
# MAGIC FROM intel.device_data d
# MAGIC LEFT JOIN intel.impact_data i ON d.device_id = i.device_id
# MAGIC ORDER BY d.device_id
# MAGIC LIMIT 50

# COMMAND ----------
# MAGIC %md
# MAGIC ### Impact by age bucket

# COMMAND ----------
# MAGIC %sql
# MAGIC WITH device_impact AS (
# MAGIC   SELECT
# MAGIC     d.device_id,
# MAGIC     2024 - d.model_year AS device_age,
# MAGIC     i.energy_savings_yr,
# MAGIC     i.co2_saved_kg_yr,
# MAGIC     i.recycling_rate
# MAGIC   FROM intel.device_data d
# MAGIC   LEFT JOIN intel.impact_data i ON d.device_id = i.device_id
# MAGIC ),
# MAGIC bucketed AS (
# MAGIC   SELECT
# MAGIC     *,
# MAGIC     CASE
# MAGIC       WHEN device_age IS NULL THEN 'unknown'
# MAGIC       WHEN device_age <= 3 THEN 'newer'
# MAGIC       WHEN device_age <= 6 THEN 'mid-age'
# MAGIC       ELSE 'older'
# MAGIC     END AS device_age_bucket
# MAGIC   FROM device_impact
# MAGIC )
# MAGIC SELECT
# MAGIC   device_age_bucket,
# MAGIC   COUNT(*) AS device_count,
# MAGIC   AVG(energy_savings_yr) AS avg_energy_savings_yr,
# MAGIC   AVG(co2_saved_kg_yr) AS avg_co2_saved_kg_yr,
# MAGIC   AVG(recycling_rate) AS avg_recycling_rate,
# MAGIC   COALESCE(SUM(co2_saved_kg_yr), 0) / 1000.0 AS total_co2_saved_tons
# MAGIC FROM bucketed
# MAGIC GROUP BY device_age_bucket
# MAGIC ORDER BY CASE device_age_bucket WHEN 'newer' THEN 0 WHEN 'mid-age' THEN 1 WHEN 'older' THEN 2 ELSE 3 END

# COMMAND ----------
# MAGIC %md
# MAGIC ### Impact by device type and region

# COMMAND ----------
# MAGIC %sql
# MAGIC SELECT
# MAGIC   d.device_type,
# MAGIC   d.region,
# MAGIC   COUNT(*) AS device_count,
# MAGIC   AVG(i.energy_savings_yr) AS avg_energy_savings_yr,
# MAGIC   COALESCE(SUM(i.co2_saved_kg_yr), 0) / 1000.0 AS total_co2_saved_tons,
# MAGIC   AVG(i.recycling_rate) AS avg_recycling_rate
# MAGIC FROM intel.device_data d
# MAGIC LEFT JOIN intel.impact_data i ON d.device_id = i.device_id
# MAGIC GROUP BY d.device_type, d.region
# MAGIC ORDER BY total_co2_saved_tons DESC

# COMMAND ----------
# MAGIC %md
# MAGIC ### Fleet totals (ESG summary)

# COMMAND ----------
# MAGIC %sql
# MAGIC SELECT
# MAGIC   COUNT(*) AS device_count,
# MAGIC   COUNT(i.device_id) AS devices_with_impact,
# MAGIC   COALESCE(SUM(i.energy_savings_yr), 0) AS total_energy_savings_yr,
# MAGIC   COALESCE(SUM(i.co2_saved_kg_yr), 0) / 1000.0 AS total_co2_saved_tons,
# MAGIC   AVG(i.recycling_rate) AS avg_recycling_rate
# MAGIC FROM intel.device_data d
# MAGIC LEFT JOIN intel.impact_data i ON d.device_id = i.device_id
