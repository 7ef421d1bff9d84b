"""Thin HTTP client for the procurement REST backend.

Every backend response uses the envelope
``{"success": bool, "data": ..., "pagination": {...}, "message": str}``.
"""
import logging
import httpx
from flask import current_app

logger = logging.getLogger(__name__)


class BackendError(RuntimeError):
    """The backend refused a request or could not be reached."""

    def __init__(self, message, status_code=502, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


def _url(path):
    base = current_app.config["BACKEND_API_URL"].rstrip("/")
    return f"{base}/{path.lstrip('/')}"


def _headers():
    headers = {"Accept": "application/json"}
    token = current_app.config.get("BACKEND_API_TOKEN")
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def _clean(params):
    """Drop unset query parameters (empty strings are kept on purpose)."""
    if not params:
        return None
    return {k: v for k, v in params.items() if v is not None}


def _request(method, path, **kwargs):
    """Make a request to the backend and return the decoded envelope."""
    try:
        resp = httpx.request(
            method,
            _url(path),
            headers=_headers(),
            timeout=current_app.config["BACKEND_TIMEOUT"],
            **kwargs,
        )
    except httpx.HTTPError as e:
        logger.error("Backend %s %s failed: %s", method, path, e)
        raise BackendError("Backend service unavailable") from e

    try:
        data = resp.json()
    except ValueError:
        data = None

    if resp.status_code >= 400 or not isinstance(data, dict) or data.get("success") is False:
        message = data.get("message") if isinstance(data, dict) else None
        status = resp.status_code if resp.status_code >= 400 else 502
        logger.error("Backend API error: %s %s -> %s %s", method, path, status, message)
        raise BackendError(message or f"Backend returned HTTP {resp.status_code}", status, data)
    return data


def get(path, params=None):
    return _request("GET", path, params=_clean(params))


def post(path, payload=None):
    return _request("POST", path, json=payload or {})


def put(path, payload=None):
    return _request("PUT", path, json=payload or {})


def patch(path, payload=None):
    return _request("PATCH", path, json=payload or {})


def delete(path):
    return _request("DELETE", path)
