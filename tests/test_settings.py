"""Tests for the settings holder."""

from pos_ledger.config import DEFAULT_APP_NAME
from pos_ledger.models import AppSettings
from pos_ledger.settings import SettingsStore


def test_defaults_to_configured_name():
    assert SettingsStore().current() == AppSettings(app_name=DEFAULT_APP_NAME)


def test_rename_notifies():
    changes = []
    store = SettingsStore(on_change=lambda: changes.append(store.current()))

    store.rename("Corner Shop")

    assert changes == [AppSettings(app_name="Corner Shop")]


def test_replace_notifies():
    changes = []
    store = SettingsStore(AppSettings(app_name="A"), on_change=lambda: changes.append("changed"))

    store.replace(AppSettings(app_name="B"))

    assert store.current().app_name == "B"
    assert changes == ["changed"]
