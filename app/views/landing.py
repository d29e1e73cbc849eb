from __future__ import annotations

import streamlit as st

from components.narrative import render_tab_intro
from config import AppConfig


def _card(css_class: str, title: str, body: str) -> None:
    st.markdown(
        f"""
<div class="{css_class}">
  <div class="{css_class}-title">{title}</div>
  <div class="{css_class}-body">{body}</div>
</div>
        """,
        unsafe_allow_html=True,
    )


def render(cfg: AppConfig, use_mock: bool) -> None:
    render_tab_intro(
        audience="Audience: ESG reporting, IT asset management, and anyone reviewing the analysis",
        question="How does device age relate to energy savings, CO₂ avoided and recycling outcomes?",
        context="This page frames the dataset; use Age Impact for the headline comparison, Breakdowns for slices, and the Query Gallery for the SQL behind every number.",
    )

    # --- Hero ---
    st.markdown(
        """
<div class="hero">
  <div class="hero-title">Device sustainability impact</div>
  <p class="hero-narrative">
    A device inventory joined to per-device impact records.<br/>
    Compute device age, bucket the fleet into newer / mid-age / older, and compare what each bucket saves.
  </p>
</div>
        """,
        unsafe_allow_html=True,
    )

    # --- Dataset cards ---
    st.markdown('<div class="section-title">The dataset</div>', unsafe_allow_html=True)
    c1, c2, c3 = st.columns(3)
    with c1:
        _card(
            "value-card",
            "device_data",
            "One row per device: <code>device_id</code>, <code>model_year</code>, <code>device_type</code>, <code>region</code>.",
        )
    with c2:
        _card(
            "value-card",
            "impact_data",
            "One row per device: <code>energy_savings_yr</code> (kWh), <code>co2_saved_kg_yr</code>, <code>recycling_rate</code>.",
        )
    with c3:
        _card(
            "value-card",
            "Join",
            "LEFT JOIN on <code>device_id</code>: every device is kept, and devices without an impact record show empty metrics.",
        )

    # --- How it works ---
    st.markdown('<div class="section-title">How the analysis works</div>', unsafe_allow_html=True)
    h1, h2, h3 = st.columns(3)
    with h1:
        _card("how-step", "1) Age", f"<code>device_age = {cfg.reference_year} − model_year</code> (e.g. a 2019 model is 5 years old).")
    with h2:
        _card("how-step", "2) Bucket", "CASE on age: ≤3 newer, ≤6 mid-age, otherwise older. Devices without a model year are unknown.")
    with h3:
        _card(
            "how-step",
            "3) Aggregate",
            "Per bucket / type / region: device count, average savings and recycling rate, total CO₂ in metric tons (kg / 1000).",
        )

    # --- Setup/status ---
    st.markdown('<div class="section-title">Connection status</div>', unsafe_allow_html=True)
    s1, s2, s3 = st.columns([1, 1, 2])
    with s1:
        st.markdown("**Data mode**")
        live = "Local CSV" if cfg.data_mode == "local_csv" else "Databricks SQL"
        st.write("Mock" if use_mock else f"{live} (fallback to mock)")
    with s2:
        st.markdown("**Target schema**")
        st.code(cfg.schema_label, language="text")
    with s3:
        st.markdown("**Next steps**")
        st.write(
            "Run `notebooks/01_setup_tables` to create the tables in Databricks, or "
            "`python scripts/export_report.py --source mock --write-dataset --out-dir data/` and set `LOCAL_DATA_DIR=data`. "
            "Then toggle off Mock mode."
        )

    if cfg.data_mode == "databricks_sql" and (not cfg.databricks_host or not cfg.databricks_http_path):
        st.info("Warehouse mode needs `DATABRICKS_HOST` and `DATABRICKS_HTTP_PATH` (or set `LOCAL_DATA_DIR`). Mock mode always works.")
