"""
HrmApp — composition root.

Owns the config, store, reachability monitor, per-domain clients, feature
services, navigator and orchestrator. Screens (or the CLI) talk to the
attributes of one HrmApp instance; nothing else builds these objects.
"""

from .api import AttendanceAPI, AuthAPI, NotificationsAPI, PushTokenAPI, UserAPI
from .attendance import AttendanceService, LeaveService
from .config import log, load_config
from .constants import API_TIMEOUT_UPLOAD
from .http_client import ClientFactory
from .navigation import StackNavigator
from .network import NetworkMonitor
from .notifier import LogNotifier
from .profile import ProfileService
from .push import NullPushProvider, PushTokenService
from .session import AuthStatus, SessionOrchestrator
from .state import SessionState
from .storage import JsonFileStore, SessionStorage


class HrmApp:
    def __init__(self, config=None, store=None, network=None, session=None,
                 biometrics=None, push_provider=None, notifier=None,
                 on_unauthorized=None):
        self.config = config or load_config()
        self.notifier = notifier or LogNotifier(self.config.theme)
        self.storage = SessionStorage(store or JsonFileStore(), self.config)
        self.network = network or NetworkMonitor(probe_url=self.config.api_base_url)
        self.session_state = SessionState()
        self.navigator = StackNavigator()

        self.clients = ClientFactory(
            self.config, self.storage,
            network=self.network, session=session, on_unauthorized=on_unauthorized,
        )
        self.auth_api = AuthAPI(self.clients.client("auth"))
        self.attendance_api = AttendanceAPI(self.clients.client("attendance"))
        self.user_api = UserAPI(self.clients.client("user", timeout=API_TIMEOUT_UPLOAD))
        self.notifications_api = NotificationsAPI(self.clients.client("notifications"))
        self.push_api = PushTokenAPI(self.clients.client("push"))

        self.push = PushTokenService(
            push_provider or NullPushProvider(), self.push_api, self.storage,
            notifier=self.notifier, navigator=self.navigator,
        )
        self.orchestrator = SessionOrchestrator(
            self.storage, self.navigator, self.session_state, self.auth_api,
            push_service=self.push, notifier=self.notifier,
        )
        self.attendance = (
            AttendanceService(self.attendance_api, self.storage, biometrics,
                              self.config, notifier=self.notifier)
            if biometrics is not None else None
        )
        if self.attendance is not None:
            self.orchestrator.on_logout(self.attendance.reset)
        self.leaves = LeaveService(self.attendance_api, self.storage, notifier=self.notifier)
        self.profile = ProfileService(self.user_api, self.auth_api, self.storage,
                                      notifier=self.notifier)

    @property
    def is_authenticated(self):
        return self.session_state.is_authenticated

    def start(self, probe=True):
        """Refresh reachability, pick the entry route, restore the attendance snapshot."""
        if probe:
            state = self.network.refresh()
            log.info("Reachability at start: online=%s", state.is_online)
        route = self.orchestrator.bootstrap()
        if self.attendance is not None and self.orchestrator.status is AuthStatus.AUTHENTICATED:
            self.attendance.restore()
        return route

    def shutdown(self):
        self.orchestrator.close()
        self.clients.session.close()
        log.info("HrmApp shut down.")
