"""
Profile edits: photo upload with cached-profile update, photo-changed
listeners, and password change.
"""

import dataclasses

from .config import log
from .errors import ErrorReporter
from .models import ApiError, Err, Ok


class ProfileService:
    def __init__(self, user_api, auth_api, storage, notifier=None):
        self._user_api = user_api
        self._auth_api = auth_api
        self._storage = storage
        self._notifier = notifier
        self._reporter = ErrorReporter(notifier)
        self._photo_listeners = []

    def on_photo_updated(self, callback):
        self._photo_listeners.append(callback)

        def unsubscribe():
            if callback in self._photo_listeners:
                self._photo_listeners.remove(callback)

        return unsubscribe

    def _emit_photo(self, url):
        for listener in list(self._photo_listeners):
            try:
                listener(url)
            except Exception as e:
                log.error("Photo listener failed: %s", e)

    def update_photo(self, asset):
        result = self._user_api.upload_profile_pic(asset)
        if not result.ok:
            self._reporter.show_error(result.error, "Failed to upload profile picture")
            return result

        url = (result.data or {}).get("profilePhotoUrl") if isinstance(result.data, dict) else None
        user = self._storage.get_user_data()
        if url and user is not None:
            user = dataclasses.replace(user, profile_photo_url=url)
            try:
                self._storage.save_user_data(user)
            except Exception as e:
                log.error("Could not cache new profile photo: %s", e)
            self._emit_photo(url)

        if self._notifier is not None:
            self._notifier.show_success("Profile picture updated successfully!")
        return Ok(data=user, message=result.message)

    def change_password(self, current, new, confirm):
        if not current or not new or not confirm:
            return self._reject("Please fill in all fields")
        if new != confirm:
            return self._reject("New passwords do not match")
        if len(new) < 6:
            return self._reject("New password must be at least 6 characters")

        result = self._auth_api.change_password(new)
        if not result.ok:
            self._reporter.show_error(result.error)
            return result
        if self._notifier is not None:
            self._notifier.show_success(result.message or "Password changed successfully")
        return result

    def _reject(self, message):
        if self._notifier is not None:
            self._notifier.show_error(message)
        return Err(ApiError(message=message, status=400))
