from __future__ import annotations

import streamlit as st

from data.service import DataResult


def render_tab_intro(audience: str, question: str, context: str | None = None) -> None:
    """Who the view is for, the question it answers, and an optional line of context."""
    st.markdown(
        f"""
<div class="tab-intro">
  <div class="tab-intro-persona">{audience}</div>
  <div class="tab-intro-question">{question}</div>
  {f'<div class="tab-intro-context">{context}</div>' if context else ''}
</div>
        """,
        unsafe_allow_html=True,
    )


def render_chart_annotation(title: str, body: str) -> None:
    st.markdown(
        f"""
<div class="callout callout-annot">
  <div class="callout-title">{title}</div>
  <div class="callout-body">{body}</div>
</div>
        """,
        unsafe_allow_html=True,
    )


def render_takeaway(title: str, body: str) -> None:
    st.markdown(
        f"""
<div class="callout callout-action">
  <div class="callout-title">{title}</div>
  <div class="callout-body">{body}</div>
</div>
        """,
        unsafe_allow_html=True,
    )


def render_data_status(*results: DataResult) -> None:
    """Surface fallback warnings (once each) and where the numbers came from."""
    seen = set()
    for r in results:
        if r.warning and r.warning not in seen:
            st.warning(r.warning)
            seen.add(r.warning)
    sources = sorted({r.source for r in results})
    if sources:
        st.caption(f"Data source: **{', '.join(sources)}**")
