"""
StackNavigator — the route stack the orchestrator enforces against.

Listeners fire after every state change (navigate, go_back, reset), which
is where route protection runs. A listener may reset the stack from inside
the callback; the nested notification sees the new route and is a no-op.
"""

from .config import log


class StackNavigator:
    def __init__(self, initial_route=None):
        self._stack = [(initial_route, None)] if initial_route else []
        self._listeners = []

    @property
    def is_ready(self):
        return bool(self._stack)

    @property
    def routes(self):
        return [name for name, _ in self._stack]

    def current_route(self):
        return self._stack[-1][0] if self._stack else None

    def current_params(self):
        return self._stack[-1][1] if self._stack else None

    def subscribe(self, listener):
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self):
        for listener in list(self._listeners):
            listener(self.current_route())

    def navigate(self, name, params=None):
        self._stack.append((name, params))
        log.debug("navigate → %s", name)
        self._notify()

    def go_back(self):
        """Pop one screen. Returns False at the root (nothing to go back to)."""
        if len(self._stack) <= 1:
            return False
        self._stack.pop()
        self._notify()
        return True

    def reset(self, routes):
        """Replace the whole history; earlier screens are unreachable by back."""
        self._stack = [(name, None) for name in routes]
        log.info("Navigation reset → %s", " > ".join(routes))
        self._notify()
