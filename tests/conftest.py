"""
Shared fixtures for the hrm_core test suite.

Nothing here touches the network or the real ~/.hrm directory.
"""

import os
import sys
import tempfile

import pytest

# Ensure the package is importable without installation
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
PKG_DIR = os.path.join(ROOT_DIR, "hrm")
if PKG_DIR not in sys.path:
    sys.path.insert(0, PKG_DIR)

# Override environment BEFORE importing application modules
os.environ["HRM_HOME"] = tempfile.mkdtemp(prefix="hrm-test-")
os.environ.pop("HRM_API_BASE_URL", None)

import requests

from hrm_core.config import AppConfig
from hrm_core.http_client import ClientFactory
from hrm_core.network import NetworkMonitor
from hrm_core.notifier import RecordingNotifier
from hrm_core.storage import MemoryStore, SessionStorage

from stubs import StubAdapter

API = "https://api.test"


@pytest.fixture
def config():
    return AppConfig(api_base_url=API + "/")


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def storage(store, config):
    return SessionStorage(store, config)


@pytest.fixture
def stub():
    return StubAdapter()


@pytest.fixture
def http_session(stub):
    session = requests.Session()
    session.mount("https://", stub)
    yield session
    session.close()


@pytest.fixture
def monitor():
    return NetworkMonitor()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def factory(config, storage, monitor, http_session):
    return ClientFactory(config, storage, network=monitor, session=http_session)


@pytest.fixture
def user_payload():
    return {
        "_id": "u-42",
        "employeeId": "EMP-042",
        "fullName": "Ayesha Khan",
        "officialEmail": "ayesha@company.test",
        "position": "Engineer",
        "role": "employee",
        "profilePhotoUrl": "",
        "scheduleId": "sch-1",
        "customSchedule": [{"day": "Mon", "startTime": "09:00", "endTime": "17:00",
                            "isWorkingDay": True}],
        "createdAt": "2024-01-01T00:00:00Z",
        "updatedAt": "2024-01-02T00:00:00Z",
    }


@pytest.fixture
def login_payload(user_payload):
    return {
        "isSuccess": True,
        "message": "Login successful",
        "data": {
            "token": {"accessToken": "acc-123", "refreshToken": "ref-456"},
            "userObject": user_payload,
        },
    }
