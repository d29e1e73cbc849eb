from __future__ import annotations

import streamlit as st

from components.metrics import bar_chart, line_chart
from components.narrative import render_chart_annotation, render_data_status, render_tab_intro
from config import AppConfig
from data.analysis import AGE_BUCKETS
from data.service import (
    get_impact_by_bucket_and_type,
    get_impact_by_device_type,
    get_impact_by_model_year,
    get_impact_by_region,
)


METRICS = {
    "Avg energy savings (kWh / yr)": "avg_energy_savings_yr",
    "Avg CO₂ avoided (kg / yr)": "avg_co2_saved_kg_yr",
    "Avg recycling rate": "avg_recycling_rate",
    "Total CO₂ avoided (t / yr)": "total_co2_saved_tons",
    "Devices": "device_count",
}


def _y_format(metric: str) -> str | None:
    if metric == "avg_recycling_rate":
        return "percent"
    if metric == "total_co2_saved_tons":
        return "tons"
    return None


def render(cfg: AppConfig, use_mock: bool) -> None:
    st.title("Breakdowns")
    render_tab_intro(
        audience="Audience: sustainability analyst",
        question="Which device classes and regions carry the impact, and how does it move with model year?",
    )

    by_type = get_impact_by_device_type(cfg, use_mock)
    by_region = get_impact_by_region(cfg, use_mock)
    by_year = get_impact_by_model_year(cfg, use_mock)
    matrix = get_impact_by_bucket_and_type(cfg, use_mock)
    render_data_status(by_type, by_region, by_year, matrix)

    label = st.selectbox("Metric", list(METRICS.keys()), index=0)
    metric = METRICS[label]

    tab_type, tab_region, tab_year, tab_matrix = st.tabs(["Device type", "Region", "Model year", "Age × type"])

    with tab_type:
        if len(by_type.df):
            bar_chart(by_type.df, x="device_type", y=metric, title=f"{label} by device type", y_format=_y_format(metric))
            st.dataframe(by_type.df)
        else:
            st.info("No device type data available yet.")

    with tab_region:
        if len(by_region.df):
            bar_chart(by_region.df, x="region", y=metric, title=f"{label} by region", y_format=_y_format(metric))
            st.dataframe(by_region.df)
        else:
            st.info("No region data available yet.")

    with tab_year:
        render_chart_annotation(
            title="What to notice",
            body="Each model year maps to exactly one age, so this is the unbucketed version of the age view: look for where the curve bends around the 3- and 6-year thresholds.",
        )
        df_year = by_year.df.dropna(subset=["model_year"]).sort_values("model_year")
        if len(df_year):
            line_chart(df_year, x="model_year", y=metric, title=f"{label} by model year", y_format=_y_format(metric))
        else:
            st.info("No model year data available yet.")

    with tab_matrix:
        df_m = matrix.df
        if len(df_m):
            bar_chart(
                df_m,
                x="device_age_bucket",
                y=metric,
                color="device_type",
                title=f"{label} by age bucket and device type",
                y_format=_y_format(metric),
                category_order=list(AGE_BUCKETS),
            )
            pivot = df_m.pivot_table(index="device_type", columns="device_age_bucket", values=metric, aggfunc="first")
            st.dataframe(pivot.reindex(columns=[b for b in AGE_BUCKETS if b in pivot.columns]))
        else:
            st.info("No data available yet.")
