from __future__ import annotations

import pytest
from pydantic import ValidationError

from core.settings import SETTINGS_ENV_VAR, load_settings, read_settings


SAMPLE = """
app:
  name: "Test School"
  debug: true
api:
  base_url: "http://backend.test/api/v1"
ui:
  dialog_close_delay_seconds: 0
rbac:
  page_access:
    Students: ["admin", "librarian"]
"""


def test_bundled_settings(monkeypatch):
    monkeypatch.delenv(SETTINGS_ENV_VAR, raising=False)
    s = read_settings()
    assert s.app.name == "School Administration"
    assert s.api.session_cookie == "token"
    assert s.ui.notification_ttl_seconds == 1.5
    assert s.rbac.read_only_roles == ["librarian"]
    assert s.rbac.page_access["Staff"] == ["admin"]


def test_file_from_env_var(tmp_path, monkeypatch):
    path = tmp_path / "settings.yaml"
    path.write_text(SAMPLE, encoding="utf-8")
    monkeypatch.setenv(SETTINGS_ENV_VAR, str(path))
    s = read_settings()
    assert s.app.name == "Test School"
    assert s.app.debug is True
    assert s.api.base_url == "http://backend.test/api/v1"
    assert s.api.verify_tls is True
    assert s.ui.dialog_close_delay_seconds == 0
    assert s.ui.notification_ttl_seconds == 1.5
    assert s.rbac.roles == ["admin", "staff", "librarian"]


def test_load_settings_is_cached(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text(SAMPLE, encoding="utf-8")
    assert load_settings(str(path)) is load_settings(str(path))


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_settings(tmp_path / "nope.yaml")


def test_invalid_value(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text(SAMPLE.replace("dialog_close_delay_seconds: 0", "dialog_close_delay_seconds: soon"), encoding="utf-8")
    with pytest.raises(ValidationError):
        read_settings(path)
