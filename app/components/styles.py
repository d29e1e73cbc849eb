from __future__ import annotations

from typing import Mapping

import streamlit as st

from config import THEME


APP_TITLE = "Device Sustainability Impact Explorer"

FONT_STACK = '"DM Sans", system-ui, -apple-system, Segoe UI, Roboto, Arial, sans-serif'

# Every boxed surface the views render shares one card treatment
CARD_SURFACES = (
    ".app-header",
    ".hero",
    ".value-card",
    ".how-step",
    ".metric-card",
    ".tab-intro",
    ".callout",
    'div[data-testid="stPlotlyChart"]',
)


def _rules(theme: Mapping[str, object]) -> dict[str, dict[str, str]]:
    radius = f'{int(theme["radius_px"])}px'
    muted = str(theme["text_secondary"])
    ink = str(theme["forest_900"])
    return {
        'html, body, [data-testid="stAppViewContainer"]': {
            "background": f'{theme["bg_primary"]} !important',
            "font-family": f"{FONT_STACK} !important",
            "color": f'{theme["text_primary"]} !important',
        },
        '[data-testid="stSidebar"]': {
            "background": f'{theme["bg_secondary"]} !important',
            "border-right": f'1px solid {theme["border_color"]} !important',
        },
        ".block-container": {"padding-top": "0.75rem !important", "padding-bottom": "2rem !important"},
        ", ".join(CARD_SURFACES): {
            "background": str(theme["bg_card"]),
            "border": f'1px solid {theme["border_color"]}',
            "border-radius": radius,
            "box-shadow": str(theme["shadow"]),
            "padding": "12px 14px",
        },
        # header: title block on the left, data-source pill on the right
        ".app-header": {"display": "flex", "align-items": "center", "justify-content": "space-between", "margin": "0 0 14px 0"},
        ".app-header-left": {"display": "flex", "align-items": "center", "gap": "10px"},
        ".app-title": {"font-size": "20px", "font-weight": "700", "color": ink},
        ".app-subtitle": {"font-size": "14px", "color": muted},
        ".pill": {
            "display": "inline-flex",
            "align-items": "center",
            "gap": "6px",
            "border": f'1px solid {theme["border_color"]}',
            "border-radius": "999px",
            "padding": "6px 10px",
            "font-size": "13px",
            "font-weight": "600",
        },
        ".pill .dot": {"width": "8px", "height": "8px", "border-radius": "999px", "background": str(theme["accent_primary"])},
        # landing page
        ".hero": {"margin-bottom": "14px", "border-left": f'6px solid {theme["accent_primary"]}'},
        ".hero-title": {"font-size": "34px", "font-weight": "700", "color": ink, "margin-bottom": "6px"},
        ".hero-narrative": {"font-size": "16px", "color": muted, "line-height": "1.5", "margin": "0"},
        ".section-title": {"font-size": "22px", "font-weight": "600", "color": ink, "margin": "14px 0 10px 0"},
        ".value-card-title, .how-step-title": {"font-size": "15px", "font-weight": "700", "color": ink, "margin-bottom": "6px"},
        ".value-card-body, .how-step-body": {"font-size": "14px", "color": muted, "line-height": "1.5"},
        ".how-step": {"background": str(theme["bg_primary"])},
        # KPI cards
        ".metric-label": {"font-size": "13px", "color": muted, "margin-bottom": "4px"},
        ".metric-value": {"font-size": "24px", "font-weight": "700", "color": ink},
        # view intros + callouts
        ".tab-intro": {"margin": "0 0 14px 0"},
        ".tab-intro-persona": {"font-size": "13px", "font-weight": "600", "color": str(theme["forest_800"])},
        ".tab-intro-question": {"font-size": "18px", "font-weight": "700", "color": ink, "margin": "4px 0"},
        ".tab-intro-context": {"font-size": "14px", "color": muted},
        ".callout": {"margin": "10px 0"},
        ".callout-title": {"font-size": "14px", "font-weight": "700", "color": ink, "margin-bottom": "4px"},
        ".callout-body": {"font-size": "14px", "color": muted, "line-height": "1.5"},
        ".callout-annot": {"border-left": f'4px solid {theme["forest_800"]}'},
        ".callout-action": {"border-left": f'4px solid {theme["accent_primary"]}'},
        # breakdowns tabs
        'button[data-baseweb="tab"][aria-selected="true"]': {
            "color": f'{theme["accent_primary"]} !important',
            "font-weight": "700 !important",
        },
    }


def build_css(theme: Mapping[str, object] = THEME) -> str:
    blocks = []
    for selector, decls in _rules(theme).items():
        body = "\n".join(f"  {prop}: {value};" for prop, value in decls.items())
        blocks.append(f"{selector} {{\n{body}\n}}")
    font = "@import url('https://fonts.googleapis.com/css2?family=DM+Sans:wght@400;500;600;700&display=swap');"
    return "<style>\n" + font + "\n" + "\n".join(blocks) + "\n</style>"


def apply_theme() -> None:
    st.set_page_config(
        page_title=APP_TITLE,
        page_icon="🌱",
        layout="wide",
        initial_sidebar_state="expanded",
    )
    st.markdown(build_css(), unsafe_allow_html=True)
