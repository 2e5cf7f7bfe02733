import logging
from dataclasses import dataclass
from typing import Optional

import requests
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from common.http import ExternalServiceError, build_session, request_json

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LicenseStatus:
    valid: bool
    message: str = ""

    def as_dict(self) -> dict:
        return {"valid": self.valid, "message": self.message}


def validate_license(key: str, domain: str, *, session: Optional[requests.Session] = None) -> LicenseStatus:
    """
    Ask the licensing server whether ``key`` may run on ``domain``.

    Unreachable servers and error answers count as an invalid license.
    """
    base_url = (getattr(settings, "LICENSE_API_URL", "") or "").rstrip("/")
    if not base_url:
        raise ImproperlyConfigured("LICENSE_API_URL is not configured.")

    session = session or build_session(getattr(settings, "HTTP_USER_AGENT", ""))
    try:
        body = request_json(
            session,
            "POST",
            f"{base_url}/api/licenses/validate",
            json={"key": key, "domain": domain},
            timeout=getattr(settings, "LICENSE_API_TIMEOUT", 10),
        )
    except ExternalServiceError as exc:
        logger.warning("License validation for %s failed: %s", domain, exc)
        return LicenseStatus(valid=False, message=str(exc))

    valid = bool(body.get("valid"))
    message = str(body.get("message") or body.get("error") or "")
    logger.info("License for %s validated: %s", domain, valid)
    return LicenseStatus(valid=valid, message=message)
