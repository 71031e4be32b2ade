"""
Key-value backends and SessionStorage.
"""

import pytest

from hrm_core.constants import ONBOARDING_KEY, USER_DATA_KEY
from hrm_core.errors import StorageError
from hrm_core.models import AttendanceSession, TokenPair, UserProfile
from hrm_core.storage import JsonFileStore, MemoryStore, SessionStorage

from stubs import BrokenStore


class TestJsonFileStore:
    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "nested" / "store.json"
        JsonFileStore(path).set("auth_token", "abc")
        assert JsonFileStore(path).get("auth_token") == "abc"
        assert not (tmp_path / "nested" / "store.json.tmp").exists()

    def test_missing_file_reads_as_empty(self, tmp_path):
        assert JsonFileStore(tmp_path / "none.json").get("x") is None

    def test_multi_remove(self, tmp_path):
        store = JsonFileStore(tmp_path / "s.json")
        for key in ("a", "b", "c"):
            store.set(key, key.upper())
        store.multi_remove(["a", "b", "zzz"])
        assert store.get("a") is None
        assert store.get("c") == "C"

    def test_corrupt_file_raises_storage_error(self, tmp_path):
        path = tmp_path / "s.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(StorageError):
            JsonFileStore(path).get("a")


class TestSessionStorage:
    def test_tokens(self, storage):
        assert storage.get_tokens() is None
        assert not storage.is_logged_in()
        storage.save_tokens(TokenPair("acc", "ref"))
        assert storage.get_tokens() == TokenPair("acc", "ref")
        assert storage.is_logged_in()

    def test_user_data_from_dict_or_profile(self, storage, user_payload):
        storage.save_user_data(user_payload)
        user = storage.get_user_data()
        assert user.full_name == "Ayesha Khan"
        assert user.custom_schedule[0].start_time == "09:00"
        assert storage.get_user_id() == "u-42"

        storage.save_user_data(UserProfile(id="u-7", employee_id="EMP-7"))
        assert storage.get_user_data().employee_id == "EMP-7"

    def test_corrupt_user_data_is_none(self, store, storage):
        store.set(USER_DATA_KEY, "{broken")
        assert storage.get_user_data() is None
        assert storage.get_user_id() is None

    def test_attendance_snapshot(self, storage):
        snapshot = AttendanceSession(True, "09:05", "2024-03-01T09:05:00", "0h 0m")
        storage.save_attendance_session(snapshot)
        assert storage.get_attendance_session() == snapshot
        storage.clear_attendance_session()
        assert storage.get_attendance_session() is None

    def test_onboarding_flag(self, storage):
        assert storage.is_first_time_user()
        storage.mark_onboarding_seen()
        assert not storage.is_first_time_user()

    def test_clear_all_keeps_onboarding(self, store, storage, user_payload):
        storage.mark_onboarding_seen()
        storage.save_tokens(TokenPair("acc", "ref"))
        storage.save_user_data(user_payload)
        storage.save_attendance_session(AttendanceSession(is_checked_in=True))
        storage.save_push_token("push-1")

        storage.clear_all_data()

        assert store.keys() == [ONBOARDING_KEY]

    def test_lenient_reads_on_broken_store(self, config):
        storage = SessionStorage(BrokenStore(), config)
        assert storage.get_access_token() is None
        assert storage.get_refresh_token() is None
        assert storage.get_user_data() is None
        assert storage.get_push_token() is None

    def test_bootstrap_reads_propagate(self, config):
        storage = SessionStorage(BrokenStore(), config)
        with pytest.raises(StorageError):
            storage.is_logged_in()
        with pytest.raises(StorageError):
            storage.is_first_time_user()

    def test_custom_token_keys(self, config):
        config.token_key = "tok"
        store = MemoryStore()
        SessionStorage(store, config).save_tokens(TokenPair("a", "r"))
        assert store.get("tok") == "a"
