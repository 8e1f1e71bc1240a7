"""
Screen tests driving the Streamlit script.
"""

import os
from datetime import date, timedelta

import pytest
from streamlit.testing.v1 import AppTest

from settings import CONFIG_ENV_VAR, STORAGE_PATH_ENV_VAR
from utils import format_date_label

APP_PATH = os.path.join(os.path.dirname(__file__), "..", "day_counter_app.py")
TIMEOUT = 30


@pytest.fixture
def app_env(tmp_path, monkeypatch):
    config = tmp_path / "config.yaml"
    config.write_text(f"log_path: {tmp_path / 'app.log'}\n")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(config))
    monkeypatch.setenv(STORAGE_PATH_ENV_VAR, str(tmp_path / "counter.sqlite"))
    return tmp_path


def _start():
    at = AppTest.from_file(APP_PATH, default_timeout=TIMEOUT)
    at.run()
    return at


def _badge(at):
    for md in at.markdown:
        if 'class="day-badge"' in md.value:
            return md.value
    raise AssertionError("day badge not rendered")


def test_initial_screen(app_env):
    at = _start()

    assert not at.exception
    assert "Day Counter App" in at.title[0].value
    assert at.button(key="date_label").label == "Select Date to Count"
    assert ">0</div>" in _badge(at)
    assert len(at.date_input) == 0


def test_label_opens_picker(app_env):
    at = _start()

    at.button(key="date_label").click().run()

    assert len(at.date_input) == 1
    assert at.date_input(key="picker").value == date.today()


def test_pick_date_updates_count(app_env):
    picked = date.today() - timedelta(days=5)
    at = _start()
    at.button(key="date_label").click().run()

    at.date_input(key="picker").set_value(picked).run()

    assert not at.exception
    assert at.button(key="date_label").label == format_date_label(picked)
    assert ">5</div>" in _badge(at)
    assert len(at.date_input) == 0


def test_date_survives_restart(app_env):
    picked = date.today() - timedelta(days=3)
    at = _start()
    at.button(key="date_label").click().run()
    at.date_input(key="picker").set_value(picked).run()

    restarted = _start()

    assert restarted.button(key="date_label").label == format_date_label(picked)
    assert ">3</div>" in _badge(restarted)


def test_reset(app_env):
    at = _start()
    at.button(key="date_label").click().run()
    at.date_input(key="picker").set_value(date.today() - timedelta(days=2)).run()

    at.button(key="reset").click().run()

    assert at.button(key="date_label").label == "Select Date to Count"
    assert ">0</div>" in _badge(at)

    restarted = _start()
    assert restarted.button(key="date_label").label == "Select Date to Count"


def test_manual_dismiss_shows_done(app_env):
    (app_env / "config.yaml").write_text(
        f"log_path: {app_env / 'app.log'}\npicker:\n  dismiss_policy: manual\n"
    )
    at = _start()
    at.button(key="date_label").click().run()
    at.date_input(key="picker").set_value(date.today() - timedelta(days=1)).run()

    assert len(at.date_input) == 1
    assert ">1</div>" in _badge(at)

    at.button(key="picker_done").click().run()
    assert len(at.date_input) == 0


def test_pick_date_decades_ago(app_env):
    picked = date(2000, 1, 1)
    at = _start()
    at.button(key="date_label").click().run()

    picker = at.date_input(key="picker")
    assert picker.min <= picked
    assert picker.max >= date.today() + timedelta(days=3650)

    picker.set_value(picked).run()

    assert not at.exception
    assert at.button(key="date_label").label == "Sat Jan 01 2000"
    assert f">{(date.today() - picked).days}</div>" in _badge(at)


def test_unusable_storage_keeps_screen_interactive(app_env, monkeypatch):
    blocker = app_env / "blocker"
    blocker.write_text("regular file, not a directory")
    monkeypatch.setenv(STORAGE_PATH_ENV_VAR, str(blocker / "counter.sqlite"))
    at = _start()

    assert not at.exception
    assert at.button(key="date_label").label == "Select Date to Count"

    at.button(key="date_label").click().run()
    at.date_input(key="picker").set_value(date.today() - timedelta(days=4)).run()

    assert not at.exception
    assert ">4</div>" in _badge(at)
