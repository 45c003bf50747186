"""
School API Client
Thin wrapper over the remote school REST API. Every call carries the bearer
token of the current user and returns the parsed `{status, data, message}`
envelope; anything else becomes an ApiError.
"""
import logging
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, Optional

import requests
from fastapi import Depends

from schooldesk.config import settings
from schooldesk.errors import ApiError
from schooldesk.models.common import Envelope

logger = logging.getLogger(__name__)

STATUS_MESSAGES = {
    401: "Authentication required",
    403: "Access denied",
    404: "Resource not found",
    500: "Internal server error",
}
NETWORK_ERROR_MESSAGE = "Unable to reach the school API"
# Plain-text error bodies longer than this are page dumps, not messages
MAX_TEXT_MESSAGE = 500


def build_query(params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Drop unset values and render booleans/enums the way the API expects"""
    query = {}
    for key, value in (params or {}).items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        elif isinstance(value, Enum):
            value = value.value
        query[key] = value
    return query


class SchoolApiClient:
    """Request/response helper for the school API (bearer-token auth)."""

    def __init__(
        self,
        http: requests.Session,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        verify: Optional[bool] = None,
    ):
        self.http = http
        self.base_url = (base_url or settings.SCHOOL_API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT_SECONDS
        self.verify = verify if verify is not None else settings.VERIFY_SSL

    def _headers(self, token: Optional[str]) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def request(
        self,
        method: str,
        path: str,
        token: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> Envelope:
        try:
            r = self.http.request(
                method,
                f"{self.base_url}{path}",
                params=build_query(params),
                json=json,
                headers=self._headers(token),
                timeout=self.timeout,
                verify=self.verify,
            )
        except requests.RequestException as e:
            logger.error("School API unreachable: %s %s (%s)", method, path, e)
            raise ApiError(NETWORK_ERROR_MESSAGE, endpoint=path) from e

        # 304 Not Modified is a success without a body
        if r.status_code == 304 and method == "GET":
            return Envelope(status="success", data={}, cached=True)

        if not r.ok:
            raise self._error_from(r, path)

        try:
            payload = r.json()
        except ValueError:
            payload = None
        if not isinstance(payload, dict) or "status" not in payload:
            logger.error("Unexpected response from %s %s", method, path)
            raise ApiError(
                "Unexpected response format from API",
                status_code=r.status_code,
                endpoint=path,
            )

        envelope = Envelope(**payload)
        if not envelope.ok:
            message = envelope.message or "Request failed"
            logger.warning("School API refused %s %s: %s", method, path, message)
            raise ApiError(
                message,
                status_code=r.status_code,
                endpoint=path,
                code=payload.get("code") or payload.get("error_code"),
                details=payload,
            )
        return envelope

    def _error_from(self, r: requests.Response, path: str) -> ApiError:
        message = STATUS_MESSAGES.get(r.status_code, f"HTTP {r.status_code}: {r.reason}")
        code = None
        details = None

        try:
            body = r.json()
        except ValueError:
            text = r.text
            if text and len(text) < MAX_TEXT_MESSAGE:
                message = text
        else:
            if isinstance(body, dict):
                details = body
                upstream = body.get("message") or body.get("error") or body.get("detail")
                if upstream:
                    message = str(upstream)
                code = body.get("code") or body.get("error_code")

        logger.error(
            "School API error: endpoint=%s status=%s message=%s",
            path,
            r.status_code,
            message,
        )
        return ApiError(message, status_code=r.status_code, endpoint=path, code=code, details=details)

    def get(self, path: str, token: Optional[str] = None, params: Optional[Dict[str, Any]] = None) -> Envelope:
        return self.request("GET", path, token=token, params=params)

    def post(self, path: str, data: Any = None, token: Optional[str] = None) -> Envelope:
        return self.request("POST", path, token=token, json=data if data is not None else {})

    def put(self, path: str, data: Any, token: Optional[str] = None) -> Envelope:
        return self.request("PUT", path, token=token, json=data)

    def patch(self, path: str, data: Any, token: Optional[str] = None) -> Envelope:
        return self.request("PATCH", path, token=token, json=data)

    def delete(self, path: str, token: Optional[str] = None) -> Envelope:
        return self.request("DELETE", path, token=token)


@lru_cache()
def get_http_session() -> requests.Session:
    """Connection pool shared by every request to the school API"""
    return requests.Session()


def get_school_api(http: requests.Session = Depends(get_http_session)) -> SchoolApiClient:
    return SchoolApiClient(http)
