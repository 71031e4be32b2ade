"""
Snackbar sink. The UI plugs in its own Notifier; the defaults log or record.
"""

from .config import log
from .constants import THEME


class Notifier:
    def show(self, level, message):
        raise NotImplementedError

    def show_success(self, message):
        self.show("success", message)

    def show_error(self, message):
        self.show("error", message)

    def show_info(self, message):
        self.show("info", message)

    def show_warning(self, message):
        self.show("warning", message)


class LogNotifier(Notifier):
    """Writes each snackbar to the hrm log, tagged with its theme colour."""

    _COLOURS = {"success": "success", "error": "error", "info": "secondary", "warning": "warning"}

    def __init__(self, theme=None):
        self._theme = theme or THEME

    def show(self, level, message):
        colour = self._theme.get(self._COLOURS.get(level, "primary"), "")
        if level == "error":
            log.error("[snackbar %s] %s", colour, message)
        elif level == "warning":
            log.warning("[snackbar %s] %s", colour, message)
        else:
            log.info("[snackbar %s] %s", colour, message)


class RecordingNotifier(Notifier):
    def __init__(self):
        self.messages = []

    def show(self, level, message):
        self.messages.append((level, message))

    def last(self, level=None):
        for item_level, message in reversed(self.messages):
            if level is None or item_level == level:
                return message
        return None
