"""
Best-effort steps: fire, wait with a timeout, swallow failure, continue.

Push-token registration on login and revocation on logout must never
block or fail the primary flow. Each runs on a short-lived daemon thread;
the caller waits at most `timeout` seconds and then moves on.
"""

import threading

from .config import log
from .constants import BEST_EFFORT_TIMEOUT


def best_effort(label, fn, *args, timeout=BEST_EFFORT_TIMEOUT, **kwargs):
    """Run fn in the background. Returns True only if it finished without raising."""
    outcome = {"ok": False}

    def runner():
        try:
            fn(*args, **kwargs)
            outcome["ok"] = True
        except Exception as e:
            log.warning("%s failed (ignored): %s", label, e)

    worker = threading.Thread(target=runner, name=f"best-effort:{label}", daemon=True)
    worker.start()
    worker.join(timeout)
    if worker.is_alive():
        log.warning("%s still running after %ss — continuing without it", label, timeout)
        return False
    return outcome["ok"]
