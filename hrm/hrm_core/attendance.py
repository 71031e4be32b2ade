"""
Attendance check-in/out behind a biometric gate, the persisted session
snapshot, monthly stats, and leave requests.
"""

from datetime import date, datetime

from .config import log
from .constants import CHECK_IN, CHECK_OUT, LEAVE_TYPES
from .errors import ErrorReporter
from .models import ApiError, AttendancePayload, AttendanceSession, Err, LeavePayload, Ok
from . import validators


class BiometricAuthenticator:
    """Device biometric sensor. Only boolean outcomes cross this seam."""

    def is_available(self):
        """Returns (available, biometry_type or None)."""
        raise NotImplementedError

    def authenticate(self, prompt, cancel_text):
        raise NotImplementedError


def format_worked_time(start, end):
    minutes = max(int((end - start).total_seconds() // 60), 0)
    return f"{minutes // 60}h {minutes % 60}m"


class AttendanceService:
    def __init__(self, attendance_api, storage, biometrics, config,
                 notifier=None, clock=datetime.now):
        self._api = attendance_api
        self._storage = storage
        self._biometrics = biometrics
        self._config = config
        self._notifier = notifier
        self._reporter = ErrorReporter(notifier)
        self._clock = clock
        self.session = AttendanceSession()

    def _fail(self, message):
        if self._notifier is not None:
            self._notifier.show_error(message)
        return Err(ApiError(message=message))

    def restore(self):
        """Reload the snapshot saved before the last restart."""
        self.session = self._storage.get_attendance_session() or AttendanceSession()
        return self.session

    def reset(self):
        """Forget the in-memory snapshot (logout)."""
        self.session = AttendanceSession()

    def toggle(self):
        """Check in when checked out, check out when checked in."""
        available, _ = self._biometrics.is_available()
        if not available:
            return self._fail("Biometrics not available on this device")
        if not self._biometrics.authenticate(self._config.biometric_prompt,
                                             self._config.biometric_cancel_text):
            return self._fail("Biometric authentication failed")

        user = self._storage.get_user_data()
        if user is None:
            return self._fail("User data not found")

        reason = CHECK_OUT if self.session.is_checked_in else CHECK_IN
        result = self._api.create(AttendancePayload(emp_id=user.employee_id, reason=reason))
        if not result.ok:
            self._reporter.log_error(result.error, "attendance")
            self._reporter.show_error(result.error)
            return result

        now = self._clock()
        if reason == CHECK_IN:
            self.session = AttendanceSession(
                is_checked_in=True,
                check_in_time=now.strftime("%H:%M"),
                check_in_timestamp=now.isoformat(),
                worked_time=self.session.worked_time,
            )
            default_message = "Checked In Successfully!"
        else:
            worked = self.session.worked_time
            if self.session.check_in_timestamp:
                worked = format_worked_time(
                    datetime.fromisoformat(self.session.check_in_timestamp), now)
            self.session = AttendanceSession(
                is_checked_in=False,
                check_in_time=self.session.check_in_time,
                check_in_timestamp=None,
                worked_time=worked,
            )
            default_message = "Checked Out Successfully!"

        try:
            self._storage.save_attendance_session(self.session)
        except Exception as e:
            log.error("Could not persist attendance session: %s", e)

        log.info("%s recorded at %s", reason, now.isoformat())
        if self._notifier is not None:
            self._notifier.show_success(result.message or default_message)
        return Ok(data=self.session, message=result.message or default_message)

    def load_stats(self, today=None):
        user = self._storage.get_user_data()
        if user is None:
            return Err(ApiError(message="User data not found"))
        today = today or self._clock()
        return self._api.employee_stats(today.year, today.month, user.id)


# ─── Leave ───────────────────────────────────────────────────────

def leave_days(start, end):
    """Inclusive day count between two dates, order-insensitive."""
    return abs((end - start).days) + 1


def filter_leaves(leaves, status):
    if not status or status.lower() == "all":
        return list(leaves)
    return [leave for leave in leaves if str(leave.get("status", "")).lower() == status.lower()]


class LeaveService:
    def __init__(self, attendance_api, storage, notifier=None):
        self._api = attendance_api
        self._storage = storage
        self._notifier = notifier
        self._reporter = ErrorReporter(notifier)

    def _reject(self, message):
        if self._notifier is not None:
            self._notifier.show_error(message)
        return Err(ApiError(message=message, status=400))

    def submit(self, leave_type, start, end, reason):
        if not leave_type:
            return self._reject("Please select a leave type")
        if leave_type not in LEAVE_TYPES:
            log.warning("Unknown leave type %r sent as-is", leave_type)
        if not isinstance(start, date) or not isinstance(end, date):
            return self._reject("Please select start and end dates")
        ok, error = validators.date_range(start, end)
        if not ok:
            return self._reject(error)
        ok, error = validators.required(reason, "Reason")
        if not ok:
            return self._reject(error)

        user = self._storage.get_user_data()
        if user is None:
            return self._reject("User data not found. Please login again.")

        payload = LeavePayload(
            emp_doc_id=user.id,
            leave_type=leave_type,
            leaves=leave_days(start, end),
            start_date=start.isoformat(),
            end_date=end.isoformat(),
            reason=reason.strip(),
        )
        result = self._api.create_leave(payload)
        if not result.ok:
            self._reporter.show_error(result.error)
            return result
        if self._notifier is not None:
            self._notifier.show_success("Leave request submitted successfully!")
        return result

    def my_leaves(self, status=None):
        user_id = self._storage.get_user_id()
        if not user_id:
            return Err(ApiError(message="User not logged in"))
        result = self._api.get_leaves_by_user(user_id)
        if not result.ok:
            return result
        return Ok(data=filter_leaves(result.data.items, status), message=result.message)
