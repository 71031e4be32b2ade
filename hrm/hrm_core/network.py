"""
Network reachability — current NetworkState, change subscribers, TCP probe.

The platform reachability source (or refresh()) pushes states in through
update(). Domain clients read is_online() before dispatching and when
classifying a failure, so an explicit offline state wins over whatever
exception the transport happened to raise.
"""

import socket
import threading
from urllib.parse import urlparse

from .config import log
from .constants import PROBE_TIMEOUT
from .models import NetworkState


def probe(server_url, timeout=PROBE_TIMEOUT):
    """
    Quick connectivity check via socket connect to the server's host.
    Only tests whether a TCP connection to the server can be established.
    """
    parsed = urlparse(server_url)
    host = parsed.hostname
    if not host:
        return False
    port = parsed.port or (443 if parsed.scheme == "https" else 80)
    try:
        sock = socket.create_connection((host, port), timeout=timeout)
        sock.close()
        return True
    except OSError:
        return False


class NetworkMonitor:
    def __init__(self, probe_url=None, probe_fn=probe):
        self._state = NetworkState()
        self._listeners = []
        self._lock = threading.Lock()
        self._probe_url = probe_url
        self._probe_fn = probe_fn

    @property
    def state(self):
        return self._state

    def is_online(self):
        """True / False, or None while connectivity is still unknown."""
        return self._state.is_online

    def is_offline(self):
        return self._state.is_online is False

    def subscribe(self, callback):
        """Register a listener; returns the unsubscribe callable."""
        with self._lock:
            self._listeners.append(callback)

        def unsubscribe():
            with self._lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return unsubscribe

    def update(self, state):
        previous = self._state
        self._state = state
        if previous.is_online != state.is_online:
            if state.is_online is False:
                log.warning("Network OFFLINE (type=%s)", state.type)
            elif state.is_online:
                log.info("Network ONLINE (type=%s)", state.type)

        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(state)
            except Exception as e:
                log.error("Network listener failed: %s", e, exc_info=True)

    def refresh(self):
        """Probe the API host and publish the result. Returns the new state."""
        if not self._probe_url:
            return self._state
        reachable = self._probe_fn(self._probe_url)
        state = NetworkState(
            is_connected=reachable,
            is_internet_reachable=reachable,
            type="probe",
        )
        self.update(state)
        return state
