from __future__ import annotations

import logging
from typing import Any, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "SuperCheckout/1.0"


class ExternalServiceError(Exception):
    """Raised when a third-party HTTP service cannot be reached or answers with an error."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Optional[dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload or {}


def build_session(user_agent: str = DEFAULT_USER_AGENT) -> requests.Session:
    session = requests.Session()
    session.headers["User-Agent"] = user_agent or DEFAULT_USER_AGENT
    return session


def decode_json(response: requests.Response) -> Optional[dict]:
    try:
        data = response.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def request_json(session: requests.Session, method: str, url: str, **kwargs: Any) -> dict:
    """
    Perform a JSON API call and return the decoded body.

    Transport failures, non-2xx answers and bodies that are not a JSON object
    are all reported as ``ExternalServiceError``. The decoded body of an error
    answer is kept on the exception so callers can inspect it.
    """
    try:
        response = session.request(method, url, **kwargs)
    except requests.RequestException as exc:
        logger.warning("%s %s failed: %s", method, url, exc)
        raise ExternalServiceError(str(exc) or exc.__class__.__name__) from exc

    body = decode_json(response)
    if not 200 <= response.status_code < 300:
        message = _error_message(body) or f"HTTP {response.status_code}"
        logger.warning("%s %s answered %s: %s", method, url, response.status_code, message)
        raise ExternalServiceError(message, status_code=response.status_code, payload=body)

    if body is None:
        raise ExternalServiceError("Response body is not a JSON object.", status_code=response.status_code)
    return body


def _error_message(body: Optional[dict]) -> str:
    if not body:
        return ""
    error = body.get("error")
    if isinstance(error, dict):
        return str(error.get("message") or error.get("code") or "")
    if error:
        return str(error)
    return str(body.get("message") or "")
