"""
Server API calls — auth, attendance, leave, profile upload, notifications,
push tokens.

Every call returns Ok/Err from DomainClient; nothing here raises on a
failed request. List endpoints follow one envelope,
{isSuccess, message, data: [...], totalCount}, parsed here into Page.
"""

import os
import time

from .config import log
from .constants import API_TIMEOUT_UPLOAD
from .models import ApiError, EmployeeStats, Err, Notification, Ok, Page


def _page(result, item_factory=None):
    if not result.ok:
        return result
    body = result.data if isinstance(result.data, dict) else {}
    items = body.get("data") or []
    if not isinstance(items, list):
        log.warning("List endpoint returned non-list data: %r", type(items).__name__)
        items = []
    if item_factory is not None:
        items = [item_factory(item) for item in items]
    return Ok(data=Page(items=items, total=_count(body.get("totalCount"), len(items))),
              message=result.message)


def _count(value, default=0):
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        log.warning("Non-numeric count %r in response, using %d", value, default)
        return default


def _data(result, factory=None):
    if not result.ok:
        return result
    body = result.data if isinstance(result.data, dict) else {}
    payload = body.get("data")
    if factory is not None and payload is not None:
        payload = factory(payload)
    return Ok(data=payload, message=result.message)


# ─── Auth ────────────────────────────────────────────────────────

class AuthAPI:
    def __init__(self, client):
        self._client = client

    def login(self, email, password):
        """data: {token: {accessToken, refreshToken}, userObject: {...}}"""
        log.info("Login attempt for %s", email)
        return _data(self._client.post("/login", json={"email": email, "password": password}))

    def reset_password(self, new_password, token):
        return _data(self._client.post("/restPassword",
                                       json={"newPassword": new_password, "token": token}))

    def change_password(self, new_password):
        return _data(self._client.post("/changePassword", json={"newPassword": new_password}))

    def forget(self, email):
        return _data(self._client.post("/forget", json={"email": email}))

    def verify_email(self, token):
        return _data(self._client.get("/verify-email", params={"token": token}))

    def verify_otp(self, token):
        return _data(self._client.post("/verifyOtp", json={"token": token}))


# ─── Attendance + leave ──────────────────────────────────────────

class AttendanceAPI:
    def __init__(self, client):
        self._client = client

    def create(self, payload):
        log.info("Creating attendance: %s", payload.reason)
        return _data(self._client.post("/create", json=payload.to_dict()))

    def report(self, params):
        return _page(self._client.get("/report", params=params.to_params()))

    def employee_stats(self, year, month, emp_doc_id):
        result = self._client.get(
            "/employeeStats",
            params={"year": year, "month": month, "empDocId": emp_doc_id},
        )
        return _data(result, EmployeeStats.from_dict)

    def reports_by_employee(self, emp_doc_id, params):
        return _page(self._client.get(f"/reportsByEmployId/{emp_doc_id}",
                                      params=params.to_params()))

    def create_leave(self, payload):
        log.info("Creating leave request: %s (%d days)", payload.leave_type, payload.leaves)
        return _data(self._client.post("/leave-management/create", json=payload.to_dict()))

    def get_leaves(self, params):
        return _page(self._client.get("/leave-management/getLeaves", params=params.to_params()))

    def get_leaves_by_user(self, user_id):
        return _page(self._client.get(f"/leave-management/getAllByUserId/{user_id}"))


# ─── User (profile picture) ──────────────────────────────────────

class UserAPI:
    """Multipart uploads. The client passed in carries the 30s upload timeout."""

    def __init__(self, client):
        self._client = client

    def upload_profile_pic(self, asset):
        file_name = asset.file_name or f"profile_{int(time.time())}.jpg"
        mime_type = asset.mime_type or "image/jpeg"
        try:
            fh = open(asset.path, "rb")
        except OSError as e:
            log.error("Cannot open image %s: %s", asset.path, e)
            return Err(ApiError(message="Could not read the selected image."))

        log.info("Uploading profile picture %s (%d bytes)", file_name, os.path.getsize(asset.path))
        with fh:
            result = self._client.post(
                "/uploadProfilePic",
                files={"file": (file_name, fh, mime_type)},
                timeout=API_TIMEOUT_UPLOAD,
            )
        return _data(result)


# ─── Notifications ───────────────────────────────────────────────

class NotificationsAPI:
    def __init__(self, client):
        self._client = client

    def get_user_notifications(self, user_id):
        return _page(self._client.get(f"/user/{user_id}"), Notification.from_dict)

    def mark_as_read(self, notification_id, user_id):
        return _data(self._client.patch(f"/{notification_id}/read/{user_id}"))

    def get_unread_count(self, user_id):
        result = self._client.get(f"/unread-count/{user_id}")
        if not result.ok:
            return result
        body = result.data if isinstance(result.data, dict) else {}
        # Either {data: {count}} or a bare {data: <count>}
        payload = body.get("data")
        if isinstance(payload, dict):
            payload = payload.get("count")
        return Ok(data=_count(payload), message=result.message)

    def delete_notification(self, notification_id, user_id):
        return _data(self._client.delete(f"/{notification_id}/user/{user_id}"))

    def mark_all_as_read(self, user_id, notifications):
        """Mark every unread notification. Returns (succeeded, failed)."""
        unread = [n for n in notifications if not n.is_read]
        succeeded = 0
        for notification in unread:
            if self.mark_as_read(notification.id, user_id).ok:
                succeeded += 1
        failed = len(unread) - succeeded
        if unread:
            log.info("Marked %d notifications read (%d failed)", succeeded, failed)
        return succeeded, failed


# ─── Push tokens ─────────────────────────────────────────────────

class PushTokenAPI:
    def __init__(self, client):
        self._client = client

    def register(self, push_token, user):
        payload = {"fcmToken": push_token, "userId": user.id, "employeeId": user.employee_id}
        return _data(self._client.post("", json=payload))

    def revoke(self, push_token, user_id=None):
        payload = {"fcmToken": push_token}
        if user_id:
            payload["userId"] = user_id
        return _data(self._client.delete("", json=payload))
