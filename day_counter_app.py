import asyncio

import streamlit as st

from controller import PICKER_SET, DayCounterController
from logging_setup import setup_logging
from settings import get_settings
from storage import create_store
from utils import EARLIEST_DATE, LATEST_DATE

# ---------- Styles ----------
BADGE_CSS = """
<style>
.day-badge {
    width: 100px; height: 100px; border-radius: 50px;
    background-color: #007BFF; color: #fff;
    display: flex; align-items: center; justify-content: center;
    font-size: 24px; font-weight: 500; margin: 0 auto 30px auto;
}
</style>
"""

# ---------- Setup ----------
settings = get_settings()
setup_logging(settings.log_path, settings.log_level)

st.set_page_config(page_title=settings.ui.title, page_icon="📅", layout="centered")

if "controller" not in st.session_state:
    controller = DayCounterController.from_config(settings, create_store(settings.storage))
    asyncio.run(controller.initialize())
    st.session_state["controller"] = controller

controller = st.session_state["controller"]
controller.refresh()


# ---------- Callbacks ----------
def on_label_click():
    controller.open_picker()


def on_date_change():
    asyncio.run(controller.on_picker_change(PICKER_SET, st.session_state.get("picker")))


def on_done_click():
    controller.close_picker()


def on_reset_click():
    asyncio.run(controller.reset())


# ---------- App ----------
st.title(f"📅 {settings.ui.title}")

st.button(controller.label_text(), key="date_label", on_click=on_label_click)

if controller.picker_visible:
    st.date_input(
        "Start date",
        value=controller.picker_value(),
        min_value=EARLIEST_DATE,
        max_value=LATEST_DATE,
        key="picker",
        on_change=on_date_change,
    )
    if controller.dismiss_policy == "manual":
        st.button("Done", key="picker_done", on_click=on_done_click)

st.markdown(BADGE_CSS, unsafe_allow_html=True)
st.markdown(f'<div class="day-badge">{controller.days_count}</div>', unsafe_allow_html=True)

st.button("Reset", key="reset", on_click=on_reset_click, type="primary")
