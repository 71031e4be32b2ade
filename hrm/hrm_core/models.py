"""
Data model: credentials, user profile, attendance snapshot, network state,
normalized API errors, and the Ok/Err result returned by every API call.

Wire payloads are camelCase; attributes are snake_case. Each model owns its
own from_dict/to_dict so no call site unwraps JSON by hand.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional


# ─── Credentials ─────────────────────────────────────────────────

@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str

    @classmethod
    def from_dict(cls, data):
        return cls(
            access_token=data["accessToken"],
            refresh_token=data.get("refreshToken") or "",
        )


# ─── User profile ────────────────────────────────────────────────

_PROFILE_FIELDS = {
    "id": "_id",
    "employee_id": "employeeId",
    "full_name": "fullName",
    "official_email": "officialEmail",
    "personal_email": "personalEmail",
    "contact_number": "contactNumber",
    "emergency_contact_number": "emergencyContactNumber",
    "address": "address",
    "position": "position",
    "role": "role",
    "bank_account": "bankAccount",
    "guardian_name": "guardianName",
    "profile_photo_url": "profilePhotoUrl",
    "is_active": "isActive",
    "schedule_id": "scheduleId",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
}


@dataclass(frozen=True)
class CustomSchedule:
    day: str
    start_time: str
    end_time: str
    is_working_day: bool = True

    @classmethod
    def from_dict(cls, data):
        return cls(
            day=data.get("day", ""),
            start_time=data.get("startTime", ""),
            end_time=data.get("endTime", ""),
            is_working_day=bool(data.get("isWorkingDay", True)),
        )

    def to_dict(self):
        return {
            "day": self.day,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "isWorkingDay": self.is_working_day,
        }


@dataclass(frozen=True)
class UserProfile:
    id: str = ""
    employee_id: str = ""
    full_name: str = ""
    official_email: str = ""
    personal_email: str = ""
    contact_number: str = ""
    emergency_contact_number: str = ""
    address: str = ""
    position: str = ""
    role: str = ""
    bank_account: str = ""
    guardian_name: str = ""
    profile_photo_url: str = ""
    is_active: bool = True
    schedule_id: str = ""
    custom_schedule: tuple = ()
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data):
        values = {}
        for attr, key in _PROFILE_FIELDS.items():
            if key in data and data[key] is not None:
                values[attr] = data[key]
        values["custom_schedule"] = tuple(
            CustomSchedule.from_dict(item) for item in data.get("customSchedule") or []
        )
        return cls(**values)

    def to_dict(self):
        data = {key: getattr(self, attr) for attr, key in _PROFILE_FIELDS.items()}
        data["customSchedule"] = [item.to_dict() for item in self.custom_schedule]
        return data


# ─── Attendance ──────────────────────────────────────────────────

@dataclass
class AttendanceSession:
    """Local mirror of "am I checked in", restored after an app restart."""

    is_checked_in: bool = False
    check_in_time: str = "--:--"
    check_in_timestamp: Optional[str] = None
    worked_time: str = "0h 0m"

    @classmethod
    def from_dict(cls, data):
        return cls(
            is_checked_in=bool(data.get("isCheckedIn", False)),
            check_in_time=data.get("checkInTime") or "--:--",
            check_in_timestamp=data.get("checkInTimestamp"),
            worked_time=data.get("workedTime") or "0h 0m",
        )

    def to_dict(self):
        return {
            "isCheckedIn": self.is_checked_in,
            "checkInTime": self.check_in_time,
            "checkInTimestamp": self.check_in_timestamp,
            "workedTime": self.worked_time,
        }


@dataclass(frozen=True)
class EmployeeStats:
    on_time_days: int = 0
    late_days: int = 0
    on_leave_days: int = 0
    absent_days: int = 0
    employee_id: str = ""
    assigned_schedule: str = ""

    @classmethod
    def from_dict(cls, data):
        return cls(
            on_time_days=int(data.get("onTimeDays") or 0),
            late_days=int(data.get("lateDays") or 0),
            on_leave_days=int(data.get("onLeaveDays") or 0),
            absent_days=int(data.get("absentDays") or 0),
            employee_id=data.get("employeeId") or "",
            assigned_schedule=data.get("assignedSchedule") or "",
        )


@dataclass(frozen=True)
class AttendancePayload:
    emp_id: str
    reason: str

    def to_dict(self):
        return {"empId": self.emp_id, "reason": self.reason}


@dataclass(frozen=True)
class LeavePayload:
    emp_doc_id: str
    leave_type: str
    leaves: int
    start_date: str
    end_date: str
    reason: str
    status: str = "pending"

    def to_dict(self):
        return {
            "empDocId": self.emp_doc_id,
            "leaveType": self.leave_type,
            "leaves": self.leaves,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "reason": self.reason,
            "status": self.status,
        }


@dataclass(frozen=True)
class ReportParams:
    """Pagination window. No count/page_no means "server default page"."""

    year: int
    month: int
    count: Optional[int] = None
    page_no: Optional[int] = None

    def to_params(self):
        params = {"year": self.year, "month": self.month}
        if self.count is not None:
            params["count"] = self.count
        if self.page_no is not None:
            params["pageNo"] = self.page_no
        return params


@dataclass(frozen=True)
class ImageAsset:
    path: str
    mime_type: Optional[str] = None
    file_name: Optional[str] = None


@dataclass(frozen=True)
class Notification:
    id: str
    user_id: str
    title: str
    message: str
    is_read: bool
    created_at: str = ""
    type: str = ""
    data: Any = None

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data.get("_id", ""),
            user_id=data.get("userId", ""),
            title=data.get("title", ""),
            # Backend field is notificationMessage
            message=data.get("notificationMessage") or data.get("message") or "",
            is_read=bool(data.get("isRead", False)),
            created_at=data.get("createdAt", ""),
            type=data.get("type") or "",
            data=data.get("data"),
        )


# ─── Network ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class NetworkState:
    """None means "not known yet" and is different from an explicit False."""

    is_connected: Optional[bool] = None
    is_internet_reachable: Optional[bool] = None
    type: str = "unknown"

    @property
    def is_online(self):
        if self.is_connected is None:
            return None
        return self.is_connected is True and self.is_internet_reachable is not False


# ─── Errors and results ──────────────────────────────────────────

@dataclass(frozen=True)
class ApiError:
    message: str
    status: Optional[int] = None
    is_network_error: bool = False
    is_server_error: bool = False
    is_timeout: bool = False

    @property
    def retryable(self):
        return self.is_network_error or self.is_timeout or self.is_server_error

    @property
    def is_unauthorized(self):
        return self.status == 401

    def to_dict(self):
        data = {
            "message": self.message,
            "isNetworkError": self.is_network_error,
            "isServerError": self.is_server_error,
            "isTimeout": self.is_timeout,
        }
        if self.status is not None:
            data["status"] = self.status
        return data


@dataclass(frozen=True)
class Page:
    items: List[Any] = field(default_factory=list)
    total: int = 0


@dataclass(frozen=True)
class Ok:
    data: Any = None
    message: str = ""

    @property
    def ok(self):
        return True


@dataclass(frozen=True)
class Err:
    error: ApiError

    @property
    def ok(self):
        return False

    @property
    def message(self):
        return self.error.message
