from __future__ import annotations

import textwrap

import streamlit as st

from components.narrative import render_data_status, render_tab_intro
from config import AppConfig
from data.service import gallery


def render(cfg: AppConfig, use_mock: bool) -> None:
    st.title("Query Gallery")
    render_tab_intro(
        audience="Audience: analysts reviewing the method",
        question="What SQL produces each number, and what does it return?",
        context=f"Queries target `{cfg.schema_label}.device_data` and `{cfg.schema_label}.impact_data`.",
    )

    for q in gallery(cfg, use_mock):
        st.subheader(q.title)
        st.caption(q.description)
        c1, c2 = st.columns([1, 1])
        with c1:
            st.code(textwrap.dedent(q.sql).strip(), language="sql")
        with c2:
            result = q.load()
            render_data_status(result)
            st.dataframe(result.df, use_container_width=True)
        st.divider()
