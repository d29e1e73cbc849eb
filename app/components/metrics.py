from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from config import THEME


@dataclass(frozen=True)
class Kpi:
    label: str
    value: str
    help: Optional[str] = None


def render_kpi_row(kpis: list[Kpi]) -> None:
    for col, k in zip(st.columns(len(kpis)), kpis):
        col.markdown(
            f'<div class="metric-card" title="{k.help or ""}">'
            f'<div class="metric-label">{k.label}</div>'
            f'<div class="metric-value">{k.value}</div>'
            "</div>",
            unsafe_allow_html=True,
        )


# Age buckets and device classes read best in a green-to-grey ramp
COLORWAY = [
    THEME["forest_900"],
    THEME["accent_primary"],
    THEME["accent_secondary"],
    THEME["forest_800"],
    "#8FA89A",
    "#9CA3AF",
]

AXIS_FORMATS = {
    "percent": dict(tickformat=".0%"),
    "tons": dict(ticksuffix=" t", separatethousands=True),
}


def style_figure(fig: go.Figure, x_title: str, y_title: str, y_format: Optional[str] = None) -> go.Figure:
    muted = THEME["text_secondary"]
    fig.update_layout(
        template="plotly_white",
        margin=dict(l=10, r=10, t=44, b=10),
        font=dict(family="DM Sans, system-ui, sans-serif", color=THEME["text_primary"]),
        colorway=COLORWAY,
        legend=dict(orientation="h", yanchor="bottom", y=1.02, x=0, title_text=""),
        title_font=dict(color=THEME["forest_900"], size=16),
    )
    fig.update_xaxes(title_text=x_title.replace("_", " "), color=muted, gridcolor=THEME["grid"])
    fig.update_yaxes(title_text=y_title.replace("_", " "), color=muted, gridcolor=THEME["grid"], zeroline=False)
    fig.update_yaxes(**AXIS_FORMATS.get(y_format or "", {}))
    return fig


def line_chart(
    df: pd.DataFrame,
    x: str,
    y: str,
    color: Optional[str] = None,
    title: str = "",
    y_format: Optional[str] = None,  # "percent" | "tons" | None
) -> None:
    fig = px.line(df, x=x, y=y, color=color, title=title, markers=True)
    fig.update_traces(line=dict(width=2))
    st.plotly_chart(style_figure(fig, x, y, y_format), use_container_width=True)


def bar_chart(
    df: pd.DataFrame,
    x: str,
    y: str,
    color: Optional[str] = None,
    title: str = "",
    y_format: Optional[str] = None,
    category_order: Optional[list[str]] = None,
) -> None:
    fig = px.bar(
        df,
        x=x,
        y=y,
        color=color,
        title=title,
        barmode="group",
        category_orders={x: category_order} if category_order else None,
    )
    st.plotly_chart(style_figure(fig, x, y, y_format), use_container_width=True)
