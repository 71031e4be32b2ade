"""
SessionOrchestrator — entry route on cold start, login/logout, and route
protection on every navigation change.

States: BOOTSTRAPPING → AUTHENTICATED | UNAUTHENTICATED | ONBOARDING.
Bootstrap errors land on ONBOARDING (Welcome), the least-privileged route.

Enforcement always uses a full stack reset so the forbidden screen leaves
the history and cannot come back through back navigation.
"""

import enum

from .background import best_effort
from .config import log
from .constants import (
    ROUTE_DASHBOARD, ROUTE_LOGIN, ROUTE_WELCOME, PROTECTED_ROUTES, PUBLIC_ROUTES,
)
from .errors import ErrorReporter
from .models import ApiError, Err, Ok, TokenPair, UserProfile
from . import validators


class AuthStatus(enum.Enum):
    BOOTSTRAPPING = "bootstrapping"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"
    ONBOARDING = "unauthenticated-onboarding"


class SessionOrchestrator:
    def __init__(self, storage, navigator, session_state, auth_api,
                 push_service=None, notifier=None):
        self._storage = storage
        self._navigator = navigator
        self._session = session_state
        self._auth_api = auth_api
        self._push = push_service
        self._notifier = notifier
        self._reporter = ErrorReporter(notifier)
        self.status = AuthStatus.BOOTSTRAPPING
        self._logout_hooks = []
        self._unsubscribe = navigator.subscribe(self.enforce)

    @property
    def is_authenticated(self) -> bool:
        return self._session.is_authenticated

    # ─── Cold start ──────────────────────────────────────────

    def resolve_initial_route(self):
        """Decide the entry screen from persisted state. Never raises."""
        try:
            logged_in = self._storage.is_logged_in()
            first_launch = False if logged_in else self._storage.is_first_time_user()
        except Exception as e:
            log.error("Bootstrap storage read failed: %s — falling back to Welcome", e)
            self._session.clear()
            self.status = AuthStatus.ONBOARDING
            return ROUTE_WELCOME

        if logged_in:
            self._session.mark_authenticated()
            self.status = AuthStatus.AUTHENTICATED
            return ROUTE_DASHBOARD

        self._session.clear()
        if first_launch:
            self.status = AuthStatus.ONBOARDING
            return ROUTE_WELCOME
        self.status = AuthStatus.UNAUTHENTICATED
        return ROUTE_LOGIN

    def bootstrap(self):
        route = self.resolve_initial_route()
        log.info("Bootstrap → %s (%s)", route, self.status.value)
        if self.status is AuthStatus.AUTHENTICATED:
            self._register_push()
        self._navigator.reset([route])
        return route

    def complete_onboarding(self):
        """Welcome screen's "get started": remember it and move to login."""
        try:
            self._storage.mark_onboarding_seen()
        except Exception as e:
            log.warning("Could not persist onboarding flag: %s", e)
        if self.status is AuthStatus.ONBOARDING:
            self.status = AuthStatus.UNAUTHENTICATED
        self._navigator.navigate(ROUTE_LOGIN)

    # ─── Login / logout ──────────────────────────────────────

    def login(self, email, password):
        ok, errors = validators.validate_form([
            (email, validators.email),
            (password, validators.password),
        ])
        if not ok:
            error = ApiError(message=errors[0], status=400)
            self._reporter.show_error(error)
            return Err(error)

        result = self._auth_api.login(email.strip(), password)
        if not result.ok:
            self._reporter.log_error(result.error, "login")
            self._reporter.show_error(result.error)
            return result

        data = result.data or {}
        try:
            tokens = TokenPair.from_dict(data["token"])
            user = UserProfile.from_dict(data.get("userObject") or {})
        except (KeyError, TypeError) as e:
            log.error("Malformed login response: %s", e)
            error = ApiError(message="Unexpected response from server. Please try again.")
            self._reporter.show_error(error)
            return Err(error)

        try:
            self._storage.save_tokens(tokens)
            self._storage.save_user_data(data.get("userObject") or user.to_dict())
        except Exception as e:
            log.error("Could not persist session: %s", e)
            error = ApiError(message="Could not save your session. Please try again.")
            self._reporter.show_error(error)
            return Err(error)

        self._session.mark_authenticated()
        self.status = AuthStatus.AUTHENTICATED
        log.info("Logged in as %s", user.employee_id or user.id)

        self._register_push()

        if self._notifier is not None:
            self._notifier.show_success("Login successful!")
        self._navigator.reset([ROUTE_DASHBOARD])
        return Ok(data=user, message=result.message)

    def logout(self):
        if self._push is not None:
            best_effort("push token revoke", self._push.revoke)

        try:
            self._storage.clear_all_data()
        except Exception as e:
            log.error("Error clearing session data: %s", e)

        # In-memory state held by feature services goes with the stored copy
        for hook in list(self._logout_hooks):
            try:
                hook()
            except Exception as e:
                log.error("Logout hook failed: %s", e)

        self._session.clear()
        self.status = AuthStatus.UNAUTHENTICATED
        log.info("Logged out")

        if self._notifier is not None:
            self._notifier.show_success("Logged out successfully")
        self._navigator.reset([ROUTE_LOGIN])

    def on_logout(self, hook):
        """Run hook() during logout, after storage is cleared. Returns the unsubscribe callable."""
        self._logout_hooks.append(hook)

        def unsubscribe():
            if hook in self._logout_hooks:
                self._logout_hooks.remove(hook)

        return unsubscribe

    def _register_push(self):
        if self._push is not None:
            best_effort("push token registration", self._push.register)

    # ─── Route protection ────────────────────────────────────

    def enforce(self, route=None):
        """
        Runs on every navigation change. Returns the route it reset to, or
        None when the current screen is consistent with the auth flag.
        """
        route = route if route is not None else self._navigator.current_route()
        authenticated = self._session.is_authenticated

        if route in PROTECTED_ROUTES and not authenticated:
            log.warning("Blocked %s without a session → %s", route, ROUTE_LOGIN)
            self._navigator.reset([ROUTE_LOGIN])
            return ROUTE_LOGIN
        if route in PUBLIC_ROUTES and authenticated:
            log.info("Already signed in, leaving %s → %s", route, ROUTE_DASHBOARD)
            self._navigator.reset([ROUTE_DASHBOARD])
            return ROUTE_DASHBOARD
        return None

    def close(self):
        self._unsubscribe()
