"""
Error classifier — maps any raw failure onto the ApiError taxonomy.

Taxonomy: network (no connectivity / no response), timeout, server (5xx),
client (4xx), unexpected. 401 rides on top of "client" as a signal only;
nothing in here logs anybody out.

classify() and should_retry() are pure. ErrorReporter holds the side
effects (snackbar + log) behind a pluggable Notifier.
"""

import socket

import requests

from .config import log
from .constants import (
    MSG_NO_INTERNET, MSG_TIMEOUT, MSG_UNEXPECTED, STATUS_MESSAGES,
    MSG_SERVER_ERROR_GENERIC, MSG_CLIENT_ERROR_GENERIC,
)
from .models import ApiError, Err


class StorageError(Exception):
    """The key-value store backend failed to read or write."""


_NETWORK_MARKERS = ("network error", "network is unreachable", "connection refused",
                    "failed to establish", "name or service not known",
                    "nodename nor servname", "connection aborted", "connection reset")
_TIMEOUT_MARKERS = ("timeout", "timed out")


# ─── Building blocks ─────────────────────────────────────────────

def network_error():
    return ApiError(message=MSG_NO_INTERNET, is_network_error=True)


def timeout_error():
    return ApiError(message=MSG_TIMEOUT, status=408, is_server_error=True, is_timeout=True)


def unexpected_error():
    return ApiError(message=MSG_UNEXPECTED)


def default_message_for_status(status):
    """User-friendly message for an HTTP status with no message in the body."""
    if status in STATUS_MESSAGES:
        return STATUS_MESSAGES[status]
    if status >= 500:
        return MSG_SERVER_ERROR_GENERIC
    return MSG_CLIENT_ERROR_GENERIC


def _response_of(error):
    if isinstance(error, requests.Response):
        return error
    response = getattr(error, "response", None)
    if response is not None and hasattr(response, "status_code"):
        return response
    return None


def _is_transport_failure(error):
    return isinstance(error, (requests.RequestException, OSError))


def _is_timeout(error, response=None):
    if isinstance(error, (requests.Timeout, socket.timeout, TimeoutError)):
        return True
    if response is not None:
        return False
    text = str(error).lower()
    return any(marker in text for marker in _TIMEOUT_MARKERS)


def _is_network_failure(error):
    if _is_timeout(error):
        return False
    if isinstance(error, (requests.ConnectionError, ConnectionError, socket.gaierror)):
        return True
    text = str(error).lower()
    return any(marker in text for marker in _NETWORK_MARKERS)


def message_from_body(response):
    """First non-empty of message / error / msg in a JSON body, else None."""
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    for key in ("message", "error", "msg"):
        value = body.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


def from_response(response):
    status = response.status_code
    message = message_from_body(response) or default_message_for_status(status)
    return ApiError(
        message=message,
        status=status,
        is_server_error=status >= 500,
        is_timeout=status == 408,
    )


# ─── Classification ──────────────────────────────────────────────

def classify(error):
    """
    Normalize a raw failure. Precedence:

    1. No transport info at all (plain application exception) → unexpected.
    2. Transport failure without a response that looks network-level → network.
    3. Timeout (exception type or "timeout" in the message) → timeout, 408.
    4. An HTTP response → body message, else the status table.
    5. Anything else → unexpected.
    """
    if isinstance(error, ApiError):
        return error
    if isinstance(error, Err):
        return error.error

    response = _response_of(error)

    if response is None and not _is_transport_failure(error):
        return unexpected_error()

    if response is None and _is_network_failure(error):
        return network_error()

    if _is_timeout(error, response):
        return timeout_error()

    if response is not None:
        return from_response(response)

    return unexpected_error()


def should_retry(error):
    """True for network, timeout and 5xx failures. 4xx never retries (408 is a timeout)."""
    return classify(error).retryable


# ─── Presentation / observability sink ───────────────────────────

class ErrorReporter:
    """showError / logError. Classification stays pure; this only renders it."""

    def __init__(self, notifier=None, logger=None):
        self._notifier = notifier
        self._log = logger or log

    def show_error(self, error, custom_message=None):
        parsed = classify(error)
        message = custom_message or parsed.message
        if self._notifier is not None:
            self._notifier.show_error(message)
        return parsed

    def log_error(self, error, context=None):
        parsed = classify(error)
        self._log.warning(
            "API error%s: %s (status=%s, network=%s, timeout=%s, server=%s)",
            f" [{context}]" if context else "",
            parsed.message, parsed.status,
            parsed.is_network_error, parsed.is_timeout, parsed.is_server_error,
        )
        return parsed
