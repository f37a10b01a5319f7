from pathlib import Path
from typing import Mapping, Optional

import streamlit as st

from taskflow.config import get_config

THEME_FILE = Path(__file__).resolve().parents[1] / "assets" / "taskflow.css"


def column_css(colors: Mapping[str, str]) -> str:
    """CSS overriding the kanban column header colours, one rule per column id."""
    return "\n".join(
        f".tf-column-{column_id} {{ background:{color}; }}" for column_id, color in sorted(colors.items())
    )


def set_theme(
    page_title: str = "Taskflow",
    page_icon: str = "🗂️",
    layout: str = "wide",
    initial_sidebar_state: str = "expanded",
    column_colors: Optional[Mapping[str, str]] = None,
):
    """Configure the Streamlit page and inject the Taskflow stylesheet.

    Column header colours come from ``TASKFLOW_COLOR_*`` unless passed in.
    Safe to call at the top of each page; only the first page_config call of
    a run takes effect, CSS is (re)injected every time.
    """
    try:
        st.set_page_config(
            page_title=page_title,
            page_icon=page_icon,
            layout=layout,
            initial_sidebar_state=initial_sidebar_state,
        )
    except Exception:
        # set_page_config can only be called once; ignore if already set.
        pass

    if column_colors is None:
        column_colors = get_config().column_colors

    try:
        css = THEME_FILE.read_text(encoding="utf-8")
    except FileNotFoundError:
        st.error(f"Theme file not found at {THEME_FILE}. Please check the file path.")
        css = ""
    st.markdown(f"<style>{css}\n{column_css(column_colors)}</style>", unsafe_allow_html=True)
