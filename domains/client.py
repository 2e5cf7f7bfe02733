from __future__ import annotations

import logging
from typing import Optional

import requests
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from common.http import build_session, request_json

logger = logging.getLogger(__name__)


class DomainApiClient:
    """Thin client for the hosting API that registers and verifies custom hostnames."""

    def __init__(
        self,
        base_url: str,
        *,
        token: str = "",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        if not base_url:
            raise ImproperlyConfigured("DOMAIN_API_BASE_URL must be configured to manage custom domains.")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or build_session(getattr(settings, "HTTP_USER_AGENT", ""))
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    @classmethod
    def from_settings(cls, session: Optional[requests.Session] = None) -> "DomainApiClient":
        return cls(
            getattr(settings, "DOMAIN_API_BASE_URL", ""),
            token=getattr(settings, "DOMAIN_API_TOKEN", ""),
            timeout=float(getattr(settings, "DOMAIN_API_TIMEOUT", 10)),
            session=session,
        )

    def _url(self, path: str) -> str:
        return f"{self.base_url}/api/domains/{path}"

    def add(self, hostname: str) -> dict:
        logger.info("Registering domain %s with hosting API", hostname)
        return request_json(self.session, "POST", self._url("add"), json={"domain": hostname}, timeout=self.timeout)

    def verify(self, hostname: str) -> dict:
        return request_json(self.session, "GET", self._url("verify"), params={"domain": hostname}, timeout=self.timeout)

    def remove(self, hostname: str) -> dict:
        logger.info("Removing domain %s from hosting API", hostname)
        return request_json(self.session, "DELETE", self._url("remove"), params={"domain": hostname}, timeout=self.timeout)
