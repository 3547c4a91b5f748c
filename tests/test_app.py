"""Tests for the Streamlit frontend, driven through streamlit's AppTest."""

from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest


APP_PATH = str(Path(__file__).resolve().parent.parent / "app" / "main.py")


@pytest.fixture
def app(monkeypatch, tmp_path):
    """App running on the in-memory store with no remote store."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("USE_REMOTE_STORE", "false")
    monkeypatch.setenv("LOCAL_CACHE_DIR", "")
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.run()
    return at


class TestAddBillPage:
    """Tests for the add-bill form."""

    def test_bill_name_is_escaped_in_confirmation(self, app):
        """User-entered names are shown as text, never rendered as HTML."""
        app.sidebar.radio[0].set_value("➕ Add Bill").run()
        app.text_input[0].input("<b>Broadband</b>")
        app.text_input[1].input("45")
        app.button[0].click().run()

        assert not app.exception
        rendered = "".join(md.value for md in app.markdown)
        assert "&lt;b&gt;Broadband&lt;/b&gt;" in rendered
        assert "<b>Broadband</b>" not in rendered
