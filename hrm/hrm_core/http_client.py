"""
HTTP session with connection pooling, transport retry, and per-domain clients.

One shared requests.Session; one DomainClient per backend sub-path
(auth, attendance, user, notifications, fcm-token) built by ClientFactory,
so the interceptors below exist exactly once.

  request interceptor  → Bearer token from SessionStorage, never "Bearer None"
  response interceptor → network / timeout / 5xx / 401 classification + logging
"""

import certifi
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import log
from .constants import (
    API_TIMEOUT_DEFAULT, DEFAULT_HEADERS, MSG_SERVER_UNAVAILABLE,
    AUTH_PATH, ATTENDANCE_PATH, USER_PATH, NOTIFICATIONS_PATH, PUSH_TOKEN_PATH,
)
from .errors import classify, network_error
from .models import ApiError, Err, Ok

# Only idempotent reads are replayed at the transport level; a replayed
# POST /create would record a second check-in.
_retry_strategy = Retry(
    total=2,
    backoff_factor=1,                           # Wait 1s, 2s between retries
    status_forcelist=[502, 503, 504],
    allowed_methods=["HEAD", "GET"],
    raise_on_status=False,
)


def create_session():
    """Create a new requests.Session with connection pooling, retry, and SSL."""
    session = requests.Session()
    adapter = HTTPAdapter(
        pool_connections=4,
        pool_maxsize=8,
        max_retries=_retry_strategy,
    )
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.verify = certifi.where()
    return session


class DomainClient:
    """HTTP client scoped to one backend sub-path. Returns Ok/Err, never raises."""

    def __init__(self, session, api_domain, domain_path, storage,
                 network=None, timeout=API_TIMEOUT_DEFAULT, on_unauthorized=None):
        self.base_url = api_domain.rstrip("/") + domain_path
        self.timeout = timeout
        self._session = session
        self._storage = storage
        self._network = network
        self._on_unauthorized = on_unauthorized

    def url(self, path):
        if not path:
            return self.base_url
        return self.base_url + (path if path.startswith("/") else "/" + path)

    # ─── Request interceptor ─────────────────────────────────

    def _auth_headers(self, headers):
        try:
            token = self._storage.get_access_token()
        except Exception as e:
            log.error("Error getting token for request: %s", e)
            token = None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    # ─── Response interceptor (error path) ───────────────────

    def _on_transport_error(self, method, url, exc):
        if self._network is not None and self._network.is_offline():
            log.warning("Network error (offline) %s %s: %s", method, url, exc)
            return network_error()
        error = classify(exc)
        if error.is_timeout:
            log.warning("Timeout %s %s: %s", method, url, exc)
        elif error.is_network_error:
            log.warning("Network error %s %s: %s", method, url, exc)
        else:
            log.error("Request failed %s %s: %s", method, url, exc)
        return error

    def _on_error_response(self, method, url, resp):
        status = resp.status_code
        if status >= 500:
            log.error("Server error %d on %s %s", status, method, url)
            return ApiError(message=MSG_SERVER_UNAVAILABLE, status=status, is_server_error=True)
        if status == 401:
            log.error("Authentication error (401) on %s %s", method, url)
            if self._on_unauthorized is not None:
                try:
                    self._on_unauthorized(url)
                except Exception as e:
                    log.warning("Unauthorized callback failed: %s", e)
        else:
            log.warning("HTTP %d on %s %s — %s", status, method, url, resp.text[:200])
        return classify(resp)

    # ─── Dispatch ────────────────────────────────────────────

    def request(self, method, path="", params=None, json=None, files=None,
                data=None, timeout=None, headers=None):
        """Send one request. Ok(data=<json body>, message) or Err(ApiError)."""
        url = self.url(path)
        method = method.upper()

        if self._network is not None and self._network.is_offline():
            log.warning("Offline — not sending %s %s", method, url)
            return Err(network_error())

        merged = dict(DEFAULT_HEADERS)
        if files is not None:
            # requests writes multipart/form-data with its boundary itself
            merged.pop("Content-Type", None)
        merged.update(headers or {})
        self._auth_headers(merged)

        try:
            resp = self._session.request(
                method, url,
                params=params, json=json, files=files, data=data,
                headers=merged, timeout=timeout or self.timeout,
            )
        except requests.RequestException as e:
            return Err(self._on_transport_error(method, url, e))

        if resp.status_code >= 400:
            return Err(self._on_error_response(method, url, resp))

        try:
            body = resp.json() if resp.content else {}
        except ValueError:
            log.warning("Non-JSON body from %s %s", method, url)
            body = {}

        if isinstance(body, dict) and body.get("isSuccess") is False:
            message = body.get("message") or "Request failed"
            log.info("%s %s rejected: %s", method, url, message)
            return Err(ApiError(message=message, status=resp.status_code))

        message = (body.get("message") or "") if isinstance(body, dict) else ""
        return Ok(data=body, message=message)

    def get(self, path="", **kwargs):
        return self.request("GET", path, **kwargs)

    def post(self, path="", **kwargs):
        return self.request("POST", path, **kwargs)

    def patch(self, path="", **kwargs):
        return self.request("PATCH", path, **kwargs)

    def delete(self, path="", **kwargs):
        return self.request("DELETE", path, **kwargs)


class ClientFactory:
    """Builds the per-domain clients on one shared session."""

    DOMAINS = {
        "auth": AUTH_PATH,
        "attendance": ATTENDANCE_PATH,
        "user": USER_PATH,
        "notifications": NOTIFICATIONS_PATH,
        "push": PUSH_TOKEN_PATH,
    }

    def __init__(self, config, storage, network=None, session=None, on_unauthorized=None):
        self._config = config
        self._storage = storage
        self._network = network
        self._on_unauthorized = on_unauthorized
        self.session = session or create_session()

    def client(self, domain, timeout=API_TIMEOUT_DEFAULT):
        return DomainClient(
            self.session,
            self._config.api_domain,
            self.DOMAINS.get(domain, domain),
            self._storage,
            network=self._network,
            timeout=timeout,
            on_unauthorized=self._on_unauthorized,
        )