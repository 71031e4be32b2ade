"""
SessionState — the process-wide "is authenticated" flag.

Read synchronously from the navigation listener, outside any request or
screen lifecycle. Writes go through the orchestrator only: it is the sole
caller of mark_authenticated()/clear(), and it flips the flag before the
navigation reset that depends on it.
"""

import threading
from dataclasses import dataclass, field


@dataclass
class SessionState:
    _authenticated: bool = False
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def is_authenticated(self) -> bool:
        return self._authenticated

    def mark_authenticated(self):
        with self._lock:
            self._authenticated = True

    def clear(self):
        with self._lock:
            self._authenticated = False
