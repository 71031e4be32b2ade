"""
Paths, logging setup, config load/save, safe_print.
"""

import os
import json
import sys
import logging
from dataclasses import dataclass, field, asdict
from pathlib import Path

from .constants import THEME, CLIENT_VERSION


# ─── Paths ───────────────────────────────────────────────────────
# One data directory per user. HRM_HOME wins so tests and CI can isolate it.

BASE_DIR = Path(os.environ.get("HRM_HOME") or (Path.home() / ".hrm"))

CONFIG_FILE = BASE_DIR / "config.json"
STORE_FILE = BASE_DIR / "store.json"
LOG_FILE = BASE_DIR / "hrm.log"

DEFAULT_API_BASE_URL = "https://attendance.curelogics.org"


# ─── Safe print (no crash when stdout is gone) ───────────────────

def safe_print(*args, **kwargs):
    try:
        print(*args, **kwargs)
    except Exception:
        pass


# ─── Logging ─────────────────────────────────────────────────────

log = logging.getLogger("hrm")

_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(log_file=None, level=logging.INFO, console=True):
    """Attach file + console handlers to the ``hrm`` logger (idempotent)."""
    log_file = Path(log_file or LOG_FILE)
    if getattr(log, "_hrm_configured", False):
        return log

    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        if log_file.exists() and log_file.stat().st_size > 1_000_000:
            log_file.write_text("")
        file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATEFMT))
        log.addHandler(file_handler)
    except OSError as e:
        safe_print(f"Log file unavailable ({e}); logging to console only")

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATEFMT))
        log.addHandler(console_handler)

    log.setLevel(level)
    log._hrm_configured = True
    return log


# ─── Config ──────────────────────────────────────────────────────

@dataclass
class AppConfig:
    """Load-time constants for the client. Nothing here is negotiated at runtime."""

    api_base_url: str = DEFAULT_API_BASE_URL
    token_key: str = "auth_token"
    refresh_token_key: str = "refresh_token"
    token_expiry_buffer_ms: int = 300000
    biometric_prompt: str = "Confirm Attendance"
    biometric_cancel_text: str = "Cancel"
    app_name: str = "Trusted HRM"
    app_version: str = CLIENT_VERSION
    environment: str = "production"
    biometric_attendance: bool = True
    location_tracking: bool = False
    offline_mode: bool = False
    theme: dict = field(default_factory=lambda: dict(THEME))

    def __post_init__(self):
        self.api_base_url = self.api_base_url.rstrip("/")

    @property
    def api_domain(self):
        return self.api_base_url

    @classmethod
    def from_dict(cls, data):
        known = {f for f in cls.__dataclass_fields__}
        values = {k: v for k, v in (data or {}).items() if k in known}
        if "theme" in values:
            values["theme"] = {**THEME, **(values["theme"] or {})}
        return cls(**values)

    def to_dict(self):
        return asdict(self)


def load_config(path=None):
    """Load config from disk. Missing or broken files fall back to defaults."""
    path = Path(path or CONFIG_FILE)
    data = {}
    if path.exists():
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            log.warning("Config at %s unreadable (%s) — using defaults", path, e)
            data = {}

    env_url = os.environ.get("HRM_API_BASE_URL")
    if env_url:
        data["api_base_url"] = env_url

    return AppConfig.from_dict(data)


def save_config(config, path=None):
    """Save config to disk."""
    path = Path(path or CONFIG_FILE)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2)
    log.info("Config saved to %s", path)
