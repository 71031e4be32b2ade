"""
Push-notification token lifecycle: fetch from the provider, cache locally,
register with the backend, revoke on logout, route taps to Notifications.

Delivery itself belongs to the platform; PushProvider is the seam.
"""

from .background import best_effort
from .config import log
from .constants import ROUTE_NOTIFICATIONS


class PushProvider:
    """Platform push service (FCM/APNs). Implementations may raise freely."""

    def request_permission(self):
        return True

    def subscribe_token_refresh(self, callback):
        """callback(new_token) whenever the platform rotates the device token."""

    def get_token(self):
        raise NotImplementedError

    def delete_token(self):
        raise NotImplementedError


class NullPushProvider(PushProvider):
    """No push support on this platform (CLI, tests)."""

    def get_token(self):
        return None

    def delete_token(self):
        pass


class PushTokenService:
    def __init__(self, provider, push_api, storage, notifier=None, navigator=None):
        self._provider = provider
        self._api = push_api
        self._storage = storage
        self._notifier = notifier
        self._navigator = navigator
        self._token = None
        provider.subscribe_token_refresh(self.on_token_refresh)

    @property
    def current_token(self):
        return self._token

    def get_token(self):
        if self._token:
            return self._token
        token = self._provider.get_token()
        if token:
            self._token = token
            self._storage.save_push_token(token)
        return token

    def register(self):
        """Send the device token to the backend. Raises on failure; callers wrap it."""
        if not self._provider.request_permission():
            log.info("Push permission denied — skipping token registration")
            return False
        token = self.get_token()
        if not token:
            return False
        user = self._storage.get_user_data()
        if not self._storage.get_access_token() or user is None:
            log.info("No session yet — push token registration deferred")
            return False
        result = self._api.register(token, user)
        if not result.ok:
            raise RuntimeError(f"Push token rejected: {result.message}")
        log.info("Push token registered for %s", user.employee_id or user.id)
        return True

    def on_token_refresh(self, new_token):
        self._token = new_token
        self._storage.save_push_token(new_token)
        return best_effort("push token refresh", self.register)

    def revoke(self):
        """Tell the backend to forget this device, then drop the local token."""
        token = self._token or self._storage.get_push_token()
        try:
            if token:
                result = self._api.revoke(token, self._storage.get_user_id())
                if not result.ok:
                    log.warning("Push token revoke rejected: %s", result.message)
            self._provider.delete_token()
        finally:
            self._token = None
            self._storage.clear_push_token()

    # ─── Incoming messages ───────────────────────────────────

    def handle_foreground(self, title=None, body=None):
        if self._notifier is None:
            return
        self._notifier.show_info(f"{title or 'New Notification'}: {body or ''}")

    def handle_open(self, data=None):
        if self._navigator is not None:
            self._navigator.navigate(ROUTE_NOTIFICATIONS, data)
