"""
Persistent key-value store + SessionStorage (tokens, profile, attendance
snapshot, push token, onboarding flag).

JsonFileStore keeps everything in one JSON document, replaced atomically on
each write. Writes only happen on login/logout/profile edits, which the
user serialises, so reads never race a partial file.
"""

import json
import os
import threading
from pathlib import Path

from .config import log, STORE_FILE
from .constants import USER_DATA_KEY, ATTENDANCE_SESSION_KEY, PUSH_TOKEN_KEY, ONBOARDING_KEY
from .errors import StorageError
from .models import AttendanceSession, TokenPair, UserProfile


# ─── Backends ────────────────────────────────────────────────────

class KeyValueStore:
    """String keys → string values. Backends raise StorageError on I/O failure."""

    def get(self, key):
        raise NotImplementedError

    def set(self, key, value):
        raise NotImplementedError

    def remove(self, key):
        raise NotImplementedError

    def multi_remove(self, keys):
        for key in keys:
            self.remove(key)


class MemoryStore(KeyValueStore):
    def __init__(self, initial=None):
        self._data = dict(initial or {})

    def get(self, key):
        return self._data.get(key)

    def set(self, key, value):
        self._data[key] = value

    def remove(self, key):
        self._data.pop(key, None)

    def keys(self):
        return list(self._data)


class JsonFileStore(KeyValueStore):
    def __init__(self, path=None):
        self._path = Path(path or STORE_FILE)
        self._lock = threading.Lock()

    def _read(self):
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as e:
            raise StorageError(f"Cannot read {self._path}: {e}") from e
        return data if isinstance(data, dict) else {}

    def _write(self, data):
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data), encoding="utf-8")
            os.replace(tmp, self._path)
        except OSError as e:
            raise StorageError(f"Cannot write {self._path}: {e}") from e

    def get(self, key):
        with self._lock:
            return self._read().get(key)

    def set(self, key, value):
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def remove(self, key):
        self.multi_remove([key])

    def multi_remove(self, keys):
        with self._lock:
            data = self._read()
            changed = False
            for key in keys:
                if key in data:
                    del data[key]
                    changed = True
            if changed:
                self._write(data)


# ─── SessionStorage ──────────────────────────────────────────────

class SessionStorage:
    """
    Typed access to everything the client persists.

    get_access_token() is lenient (None + log on failure) because every
    outgoing request calls it. The bootstrap reads (is_logged_in,
    is_first_time_user) let StorageError through so the orchestrator can
    fall back to the least-privileged route.
    """

    def __init__(self, store, config):
        self._store = store
        self._token_key = config.token_key
        self._refresh_key = config.refresh_token_key

    # ── Tokens ────────────────────────────────────────────────

    def save_tokens(self, tokens):
        self._store.set(self._token_key, tokens.access_token)
        self._store.set(self._refresh_key, tokens.refresh_token)

    def get_access_token(self):
        try:
            return self._store.get(self._token_key)
        except Exception as e:
            log.error("Error getting access token: %s", e)
            return None

    def get_refresh_token(self):
        try:
            return self._store.get(self._refresh_key)
        except Exception as e:
            log.error("Error getting refresh token: %s", e)
            return None

    def get_tokens(self):
        access = self.get_access_token()
        if not access:
            return None
        return TokenPair(access_token=access, refresh_token=self.get_refresh_token() or "")

    def is_logged_in(self):
        return bool(self._store.get(self._token_key))

    # ── User profile ──────────────────────────────────────────

    def save_user_data(self, user):
        data = user.to_dict() if isinstance(user, UserProfile) else user
        self._store.set(USER_DATA_KEY, json.dumps(data))

    def get_user_data(self):
        try:
            raw = self._store.get(USER_DATA_KEY)
            return UserProfile.from_dict(json.loads(raw)) if raw else None
        except (StorageError, ValueError) as e:
            log.error("Error getting user data: %s", e)
            return None

    def get_user_id(self):
        user = self.get_user_data()
        return user.id if user and user.id else None

    # ── Attendance snapshot ───────────────────────────────────

    def save_attendance_session(self, session):
        self._store.set(ATTENDANCE_SESSION_KEY, json.dumps(session.to_dict()))

    def get_attendance_session(self):
        try:
            raw = self._store.get(ATTENDANCE_SESSION_KEY)
            return AttendanceSession.from_dict(json.loads(raw)) if raw else None
        except (StorageError, ValueError) as e:
            log.error("Error getting attendance session: %s", e)
            return None

    def clear_attendance_session(self):
        self._store.remove(ATTENDANCE_SESSION_KEY)

    # ── Push token ────────────────────────────────────────────

    def save_push_token(self, token):
        self._store.set(PUSH_TOKEN_KEY, token)

    def get_push_token(self):
        try:
            return self._store.get(PUSH_TOKEN_KEY)
        except StorageError as e:
            log.error("Error getting push token: %s", e)
            return None

    def clear_push_token(self):
        self._store.remove(PUSH_TOKEN_KEY)

    # ── Onboarding ────────────────────────────────────────────

    def is_first_time_user(self):
        return not self._store.get(ONBOARDING_KEY)

    def mark_onboarding_seen(self):
        self._store.set(ONBOARDING_KEY, "true")

    # ── Logout ────────────────────────────────────────────────

    def clear_all_data(self):
        """Drop everything tied to the session. The onboarding flag survives."""
        self._store.multi_remove([
            self._token_key,
            self._refresh_key,
            USER_DATA_KEY,
            ATTENDANCE_SESSION_KEY,
            PUSH_TOKEN_KEY,
        ])
