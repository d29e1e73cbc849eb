from __future__ import annotations

from dataclasses import dataclass

import streamlit as st

from config import AppConfig


@dataclass(frozen=True)
class SidebarState:
    view: str
    use_mock: bool


NAV_ITEMS = [
    ("🏠 Overview", "landing"),
    ("📊 Age Impact", "dashboard"),
    ("🧭 Breakdowns", "breakdowns"),
    ("🧾 Query Gallery", "query_gallery"),
]


def _live_label(cfg: AppConfig) -> str:
    return "local CSV dataset" if cfg.data_mode == "local_csv" else "Databricks SQL"


def render_sidebar(cfg: AppConfig) -> SidebarState:
    with st.sidebar:
        st.markdown("### 🌱 Device Impact")
        st.caption("Device age vs. energy, CO₂ and recycling outcomes")

        labels = [l for l, _ in NAV_ITEMS]
        default_label = st.session_state.get("nav_label", "🏠 Overview")
        idx = labels.index(default_label) if default_label in labels else 0

        label = st.radio(
            "Nav",
            labels,
            index=idx,
            label_visibility="collapsed",
        )
        st.session_state["nav_label"] = label
        view = dict(NAV_ITEMS)[label]

        with st.expander("⚙️ Settings", expanded=False):
            use_mock = st.toggle(
                "Use mock data",
                value=st.session_state.get("use_mock", cfg.default_use_mock),
                help=f"When off, the app queries the {_live_label(cfg)}. Any failure falls back to mock data.",
            )
            st.session_state["use_mock"] = use_mock

            st.markdown("**Target schema**")
            st.code(cfg.schema_label, language="text")
            st.markdown("**Reference year**")
            st.code(str(cfg.reference_year), language="text")
    use_mock = st.session_state.get("use_mock", cfg.default_use_mock)

    return SidebarState(view=view, use_mock=use_mock)
