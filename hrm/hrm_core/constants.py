"""
Constants: version, timeouts, backend paths, storage keys, routes, messages.
"""

CLIENT_VERSION = "1.0.0"

# ─── Network ─────────────────────────────────────────────────────
API_TIMEOUT_DEFAULT = 15       # Seconds, JSON requests
API_TIMEOUT_UPLOAD = 30        # Multipart uploads get twice the budget
BEST_EFFORT_TIMEOUT = 5        # Push-token register/revoke never waits longer
PROBE_TIMEOUT = 4              # TCP connect used by the reachability probe

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}

# Backend domain base paths (relative to the configured API origin)
AUTH_PATH = "/service/auth"
ATTENDANCE_PATH = "/service/attendance"
USER_PATH = "/service/user"
NOTIFICATIONS_PATH = "/service/notifications"
PUSH_TOKEN_PATH = "/service/fcm-token"

# ─── Local storage keys ──────────────────────────────────────────
USER_DATA_KEY = "user_data"
ATTENDANCE_SESSION_KEY = "attendance_session"
PUSH_TOKEN_KEY = "fcm_token"
ONBOARDING_KEY = "has_seen_onboarding"

# ─── Routes ──────────────────────────────────────────────────────
ROUTE_WELCOME = "Welcome"
ROUTE_LOGIN = "LoginScreen"
ROUTE_DASHBOARD = "Dashboard"
ROUTE_LEAVE_REQUEST = "LeaveRequest"
ROUTE_LEAVE_STATUS = "LeaveStatus"
ROUTE_HISTORY = "History"
ROUTE_NOTIFICATIONS = "Notifications"
ROUTE_PROFILE = "Profile"
ROUTE_SETTINGS = "Settings"

PUBLIC_ROUTES = frozenset({ROUTE_WELCOME, ROUTE_LOGIN})
PROTECTED_ROUTES = frozenset({
    ROUTE_DASHBOARD,
    ROUTE_LEAVE_REQUEST,
    ROUTE_LEAVE_STATUS,
    ROUTE_HISTORY,
    ROUTE_NOTIFICATIONS,
    ROUTE_PROFILE,
    ROUTE_SETTINGS,
    "PrivacyPolicy",
    "SupportPolicy",
    "TermsConditions",
})

# ─── Attendance ──────────────────────────────────────────────────
CHECK_IN = "CHECK_IN"
CHECK_OUT = "CHECK_OUT"

LEAVE_TYPES = [
    "annual leave",
    "sick leave",
    "casual leave",
    "maternity leave",
    "paternity leave",
    "emergency leave",
]

# ─── User-facing messages ────────────────────────────────────────
MSG_NO_INTERNET = "No internet connection. Please check your network and try again."
MSG_TIMEOUT = "Request timed out. The server is taking too long to respond."
MSG_SERVER_UNAVAILABLE = "Server is temporarily unavailable. Please try again later."
MSG_UNEXPECTED = "An unexpected error occurred. Please try again."

STATUS_MESSAGES = {
    400: "Invalid request. Please check your input.",
    401: "Session expired. Please login again.",
    403: "You don't have permission to perform this action.",
    404: "The requested resource was not found.",
    408: "Request timeout. Please try again.",
    429: "Too many requests. Please wait a moment and try again.",
    500: "Server error. Our team has been notified.",
    502: "Bad gateway. The server is temporarily unavailable.",
    503: "Service unavailable. Please try again later.",
    504: "Gateway timeout. The server is not responding.",
}
MSG_SERVER_ERROR_GENERIC = "Server error. Please try again later."
MSG_CLIENT_ERROR_GENERIC = "Something went wrong. Please try again."

# ─── Theme (snackbar colours) ────────────────────────────────────
THEME = {
    "primary":   "#5B4BFF",   # brand purple
    "secondary": "#FF7A00",   # info snackbar
    "success":   "#10B981",   # green
    "error":     "#EF4444",   # red
    "warning":   "#F59E0B",   # amber
}
