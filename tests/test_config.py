import json
import logging

from hrm_core.config import AppConfig, load_config, save_config, setup_logging
from hrm_core.constants import THEME


def test_defaults_and_trailing_slash():
    config = AppConfig(api_base_url="https://hrm.example.com//")
    assert config.api_domain == "https://hrm.example.com"
    assert config.token_key == "auth_token"
    assert config.biometric_prompt == "Confirm Attendance"


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(tmp_path / "nope.json")
    assert config == AppConfig()


def test_round_trip_and_theme_merge(tmp_path):
    path = tmp_path / "config.json"
    save_config(AppConfig(app_name="HR"), path)
    data = json.loads(path.read_text(encoding="utf-8"))
    data["theme"] = {"primary": "#000000"}
    data["unknown_key"] = 1
    path.write_text(json.dumps(data), encoding="utf-8")

    config = load_config(path)
    assert config.app_name == "HR"
    assert config.theme["primary"] == "#000000"
    assert config.theme["error"] == THEME["error"]


def test_broken_file_falls_back(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{", encoding="utf-8")
    assert load_config(path).api_base_url == AppConfig().api_base_url


def test_env_override(tmp_path, monkeypatch):
    monkeypatch.setenv("HRM_API_BASE_URL", "https://staging.test/")
    assert load_config(tmp_path / "nope.json").api_domain == "https://staging.test"


def test_setup_logging_is_idempotent(tmp_path, monkeypatch):
    logger = logging.getLogger("hrm")
    monkeypatch.setattr(logger, "_hrm_configured", False, raising=False)
    monkeypatch.setattr(logger, "handlers", [])
    setup_logging(tmp_path / "hrm.log", console=False)
    count = len(logger.handlers)
    setup_logging(tmp_path / "hrm.log", console=False)
    assert len(logger.handlers) == count == 1
    for handler in logger.handlers:
        handler.close()
