from __future__ import annotations

import pandas as pd
import streamlit as st

from components.metrics import Kpi, bar_chart, render_kpi_row
from components.narrative import render_chart_annotation, render_data_status, render_tab_intro, render_takeaway
from config import AppConfig
from data.analysis import AGE_BUCKETS
from data.service import get_impact_by_age_bucket, get_sustainability_totals


def _fmt_pct(x: float) -> str:
    return f"{x*100:.1f}%"


def _value(df: pd.DataFrame, col: str) -> float:
    if col not in df.columns or not len(df):
        return float("nan")
    v = df[col].iloc[0]
    return float(v) if v is not None else float("nan")


def render(cfg: AppConfig, use_mock: bool) -> None:
    st.title("Age Impact")

    render_tab_intro(
        audience="Audience: ESG reporting + IT asset management",
        question="Do newer devices deliver more sustainability impact than the older fleet?",
        context=f"Device age = {cfg.reference_year} − model year. Buckets: newer (≤3 yrs), mid-age (4–6 yrs), older (>6 yrs).",
    )

    totals = get_sustainability_totals(cfg, use_mock)
    by_bucket = get_impact_by_age_bucket(cfg, use_mock)
    render_data_status(totals, by_bucket)

    t = totals.df
    device_count = _value(t, "device_count")
    with_impact = _value(t, "devices_with_impact")
    co2_tons = _value(t, "total_co2_saved_tons")
    energy = _value(t, "total_energy_savings_yr")
    recycling = _value(t, "avg_recycling_rate")
    age = _value(t, "avg_device_age")

    render_kpi_row(
        [
            Kpi("Devices", f"{device_count:,.0f}" if device_count == device_count else "—"),
            Kpi(
                "With impact data",
                _fmt_pct(with_impact / device_count) if device_count and with_impact == with_impact else "—",
                help="Share of devices that have a matching impact record",
            ),
            Kpi("CO₂ avoided / yr", f"{co2_tons:,.1f} t" if co2_tons == co2_tons else "—", help="SUM(co2_saved_kg_yr) / 1000"),
            Kpi("Energy saved / yr", f"{energy:,.0f} kWh" if energy == energy else "—"),
            Kpi("Avg recycling rate", _fmt_pct(recycling) if recycling == recycling else "—"),
            Kpi("Avg device age", f"{age:,.1f} yrs" if age == age else "—"),
        ]
    )

    st.divider()

    df = by_bucket.df.copy()
    if not len(df):
        st.info("No device data available yet.")
        return

    st.subheader("Average savings per device, by age bucket")
    render_chart_annotation(
        title="What to notice",
        body="Compare per-device averages, not totals: a large older fleet can dominate totals while each device saves less.",
    )
    c1, c2 = st.columns(2)
    with c1:
        bar_chart(
            df,
            x="device_age_bucket",
            y="avg_energy_savings_yr",
            title="Avg energy savings (kWh / yr)",
            category_order=list(AGE_BUCKETS),
        )
    with c2:
        bar_chart(
            df,
            x="device_age_bucket",
            y="avg_co2_saved_kg_yr",
            title="Avg CO₂ avoided (kg / yr)",
            category_order=list(AGE_BUCKETS),
        )

    st.subheader("Recycling rate and fleet share")
    c3, c4 = st.columns(2)
    with c3:
        bar_chart(
            df,
            x="device_age_bucket",
            y="avg_recycling_rate",
            title="Avg recycling rate",
            y_format="percent",
            category_order=list(AGE_BUCKETS),
        )
    with c4:
        bar_chart(
            df,
            x="device_age_bucket",
            y="total_co2_saved_tons",
            title="Total CO₂ avoided (t / yr)",
            y_format="tons",
            category_order=list(AGE_BUCKETS),
        )

    with st.expander("Show underlying data"):
        st.dataframe(df)

    render_takeaway(
        title="What this supports",
        body="Use the gap between newer and older buckets to size the sustainability case for a refresh cycle, and the recycling rate to plan end-of-life handling for the older bucket.",
    )
