"""
SessionOrchestrator: bootstrap routing, login/logout, route protection.
"""

from unittest.mock import Mock, patch

import pytest
import requests

from hrm_core.api import AuthAPI, PushTokenAPI
from hrm_core.constants import ONBOARDING_KEY, ROUTE_DASHBOARD, ROUTE_LOGIN, ROUTE_WELCOME
from hrm_core.models import TokenPair
from hrm_core.navigation import StackNavigator
from hrm_core.push import PushTokenService
from hrm_core.session import AuthStatus, SessionOrchestrator
from hrm_core.state import SessionState
from hrm_core.storage import SessionStorage

from stubs import BrokenStore, FakePushProvider

LOGIN = "/service/auth/login"
PUSH = "/service/fcm-token"


@pytest.fixture
def navigator():
    return StackNavigator()


@pytest.fixture
def session_state():
    return SessionState()


@pytest.fixture
def provider():
    return FakePushProvider()


@pytest.fixture
def orchestrator(factory, storage, navigator, session_state, provider, notifier):
    push = PushTokenService(provider, PushTokenAPI(factory.client("push")), storage,
                            notifier=notifier, navigator=navigator)
    orch = SessionOrchestrator(storage, navigator, session_state,
                               AuthAPI(factory.client("auth")),
                               push_service=push, notifier=notifier)
    yield orch
    orch.close()


def signed_in(storage, user_payload):
    storage.save_tokens(TokenPair("acc-123", "ref-456"))
    storage.save_user_data(user_payload)


class TestBootstrap:
    def test_token_goes_to_dashboard(self, orchestrator, storage, navigator, session_state,
                                     stub, user_payload):
        signed_in(storage, user_payload)
        stub.add("POST", PUSH, payload={"isSuccess": True})
        assert orchestrator.bootstrap() == ROUTE_DASHBOARD
        assert navigator.routes == [ROUTE_DASHBOARD]
        assert session_state.is_authenticated
        assert orchestrator.status is AuthStatus.AUTHENTICATED
        assert stub.requests_to(PUSH)

    def test_first_launch_goes_to_welcome(self, orchestrator, navigator, session_state):
        assert orchestrator.bootstrap() == ROUTE_WELCOME
        assert navigator.routes == [ROUTE_WELCOME]
        assert not session_state.is_authenticated
        assert orchestrator.status is AuthStatus.ONBOARDING

    def test_returning_user_goes_to_login(self, orchestrator, storage, navigator):
        storage.mark_onboarding_seen()
        assert orchestrator.bootstrap() == ROUTE_LOGIN
        assert navigator.routes == [ROUTE_LOGIN]
        assert orchestrator.status is AuthStatus.UNAUTHENTICATED

    def test_storage_failure_falls_back_to_welcome(self, config, factory):
        navigator, state = StackNavigator(), SessionState()
        storage = SessionStorage(BrokenStore(), config)
        orch = SessionOrchestrator(storage, navigator, state, AuthAPI(factory.client("auth")))
        assert orch.bootstrap() == ROUTE_WELCOME
        assert navigator.routes == [ROUTE_WELCOME]
        assert not state.is_authenticated

    def test_exactly_one_reset(self, orchestrator, storage, navigator, stub, user_payload):
        signed_in(storage, user_payload)
        stub.add("POST", PUSH, payload={"isSuccess": True})
        with patch.object(navigator, "reset", wraps=navigator.reset) as reset:
            orchestrator.bootstrap()
        reset.assert_called_once_with([ROUTE_DASHBOARD])

    def test_complete_onboarding(self, orchestrator, store, navigator):
        orchestrator.bootstrap()
        orchestrator.complete_onboarding()
        assert navigator.current_route() == ROUTE_LOGIN
        assert store.get(ONBOARDING_KEY) == "true"
        assert orchestrator.status is AuthStatus.UNAUTHENTICATED


class TestRouteProtection:
    def test_protected_route_without_session(self, orchestrator, storage, navigator):
        storage.mark_onboarding_seen()
        orchestrator.bootstrap()
        navigator.navigate("Profile")
        assert navigator.routes == [ROUTE_LOGIN]
        assert navigator.go_back() is False

    def test_deep_link_while_signed_out(self, orchestrator, navigator):
        orchestrator.bootstrap()
        navigator.navigate("Notifications", {"id": "n1"})
        assert navigator.routes == [ROUTE_LOGIN]

    def test_public_route_with_session(self, orchestrator, storage, navigator, stub,
                                       user_payload):
        signed_in(storage, user_payload)
        stub.add("POST", PUSH, payload={"isSuccess": True})
        orchestrator.bootstrap()
        navigator.navigate(ROUTE_LOGIN)
        assert navigator.routes == [ROUTE_DASHBOARD]

    def test_consistent_route_is_left_alone(self, orchestrator, navigator, session_state):
        session_state.mark_authenticated()
        navigator.reset([ROUTE_DASHBOARD])
        navigator.navigate("History")
        assert navigator.routes == [ROUTE_DASHBOARD, "History"]
        assert orchestrator.enforce() is None


class TestLogin:
    def test_success(self, orchestrator, storage, navigator, session_state, notifier,
                     stub, login_payload, provider):
        storage.mark_onboarding_seen()
        orchestrator.bootstrap()
        stub.add("POST", LOGIN, payload=login_payload)
        stub.add("POST", PUSH, payload={"isSuccess": True})

        result = orchestrator.login("ayesha@company.test", "secret1")

        assert result.ok
        assert result.data.employee_id == "EMP-042"
        assert storage.get_tokens() == TokenPair("acc-123", "ref-456")
        assert storage.get_user_id() == "u-42"
        assert session_state.is_authenticated
        assert navigator.routes == [ROUTE_DASHBOARD]
        assert navigator.go_back() is False
        assert notifier.last("success") == "Login successful!"
        push_request = stub.requests_to(PUSH)[-1]
        assert push_request.headers["Authorization"] == "Bearer acc-123"

    def test_push_failure_does_not_block(self, factory, storage, navigator, session_state,
                                         notifier, stub, login_payload):
        push = PushTokenService(FakePushProvider(fail=True),
                                PushTokenAPI(factory.client("push")), storage)
        orch = SessionOrchestrator(storage, navigator, session_state,
                                   AuthAPI(factory.client("auth")),
                                   push_service=push, notifier=notifier)
        stub.add("POST", LOGIN, payload=login_payload)
        assert orch.login("ayesha@company.test", "secret1").ok
        assert navigator.routes == [ROUTE_DASHBOARD]
        orch.close()

    def test_push_backend_rejection_does_not_block(self, orchestrator, navigator, stub,
                                                   login_payload):
        stub.add("POST", LOGIN, payload=login_payload)
        stub.add("POST", PUSH, status=500)
        assert orchestrator.login("ayesha@company.test", "secret1").ok
        assert navigator.routes == [ROUTE_DASHBOARD]

    def test_invalid_input_never_hits_network(self, orchestrator, stub, notifier):
        result = orchestrator.login("not-an-email", "123")
        assert result.error.status == 400
        assert result.message == "Please enter a valid email address"
        assert notifier.last("error") == "Please enter a valid email address"
        assert stub.calls == []

    def test_wrong_credentials(self, orchestrator, storage, navigator, session_state,
                               notifier, stub):
        storage.mark_onboarding_seen()
        orchestrator.bootstrap()
        stub.add("POST", LOGIN, status=401, payload={"message": "Invalid credentials"})
        result = orchestrator.login("ayesha@company.test", "wrongpw")
        assert result.message == "Invalid credentials"
        assert not session_state.is_authenticated
        assert navigator.routes == [ROUTE_LOGIN]
        assert storage.get_access_token() is None
        assert notifier.last("error") == "Invalid credentials"

    def test_login_while_offline(self, orchestrator, stub):
        stub.add("POST", LOGIN, exc=requests.ConnectionError("Network Error"))
        result = orchestrator.login("ayesha@company.test", "secret1")
        assert result.error.is_network_error

    def test_malformed_response(self, orchestrator, session_state, stub):
        stub.add("POST", LOGIN, payload={"isSuccess": True, "data": {"userObject": {}}})
        result = orchestrator.login("ayesha@company.test", "secret1")
        assert not result.ok
        assert not session_state.is_authenticated

    def test_flag_is_set_before_navigation(self, orchestrator, navigator, session_state,
                                           stub, login_payload):
        seen = []
        navigator.subscribe(lambda route: seen.append((route, session_state.is_authenticated)))
        stub.add("POST", LOGIN, payload=login_payload)
        stub.add("POST", PUSH, payload={"isSuccess": True})
        orchestrator.login("ayesha@company.test", "secret1")
        assert seen == [(ROUTE_DASHBOARD, True)]


class TestLogout:
    def test_clears_everything(self, orchestrator, storage, store, navigator, session_state,
                               notifier, stub, user_payload, provider):
        storage.mark_onboarding_seen()
        signed_in(storage, user_payload)
        storage.save_push_token("device-token-1")
        stub.add("POST", PUSH, payload={"isSuccess": True})
        stub.add("DELETE", PUSH, payload={"isSuccess": True})
        orchestrator.bootstrap()
        navigator.navigate("Profile")

        orchestrator.logout()

        assert navigator.routes == [ROUTE_LOGIN]
        assert navigator.go_back() is False
        assert not session_state.is_authenticated
        assert storage.get_tokens() is None
        assert storage.get_user_data() is None
        assert storage.get_push_token() is None
        assert store.get(ONBOARDING_KEY) == "true"
        assert stub.requests_to(PUSH)[-1].method == "DELETE"
        assert provider.deleted
        assert notifier.last("success") == "Logged out successfully"

    def test_revoke_failure_does_not_block(self, factory, storage, navigator, session_state,
                                           user_payload):
        push = Mock()
        push.revoke.side_effect = RuntimeError("boom")
        orch = SessionOrchestrator(storage, navigator, session_state,
                                   AuthAPI(factory.client("auth")), push_service=push)
        signed_in(storage, user_payload)
        session_state.mark_authenticated()
        orch.logout()
        push.revoke.assert_called_once()
        assert navigator.routes == [ROUTE_LOGIN]
        assert storage.get_access_token() is None
        orch.close()

    def test_logout_hooks_run_and_failures_are_contained(self, orchestrator, navigator,
                                                         session_state):
        calls = []
        orchestrator.on_logout(Mock(side_effect=RuntimeError("stale")))
        unsubscribe = orchestrator.on_logout(lambda: calls.append("reset"))
        session_state.mark_authenticated()

        orchestrator.logout()
        assert calls == ["reset"]
        assert navigator.routes == [ROUTE_LOGIN]

        unsubscribe()
        orchestrator.logout()
        assert calls == ["reset"]

    def test_protected_route_after_logout(self, orchestrator, navigator, session_state):
        session_state.mark_authenticated()
        orchestrator.logout()
        navigator.navigate(ROUTE_DASHBOARD)
        assert navigator.routes == [ROUTE_LOGIN]
