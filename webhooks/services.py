from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, List, Optional

import requests
from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder

from common.http import build_session

from .events import DEFAULT_TEST_EVENT, sample_payload
from .models import WebhookConfig, WebhookDirection, WebhookLog, WebhookMethod

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Super-Checkout-Signature"
RESPONSE_BODY_LIMIT = 2000
PREVIEW_LIMIT = 200


def build_headers(config: WebhookConfig) -> Dict[str, str]:
    """Content type first, then the signature, then the merchant's own headers."""
    headers = {"Content-Type": "application/json"}
    if config.secret:
        headers[SIGNATURE_HEADER] = config.secret
    headers.update(config.header_map())
    return headers


def preview_body(body: str, limit: int = PREVIEW_LIMIT) -> str:
    if len(body) <= limit:
        return body
    return body[:limit] + "..."


class WebhookDispatcher:
    """Sends event payloads to merchant endpoints and records every attempt."""

    def __init__(self, *, session: Optional[requests.Session] = None, timeout: Optional[float] = None):
        self.session = session or build_session(getattr(settings, "WEBHOOK_USER_AGENT", ""))
        self.timeout = timeout if timeout is not None else getattr(settings, "WEBHOOK_TIMEOUT_SECONDS", 10)

    def test(self, config: WebhookConfig, event: Optional[str] = None) -> WebhookLog:
        event = event or (config.events[0] if config.events else DEFAULT_TEST_EVENT)
        return self._deliver(config, event, sample_payload(event))

    def dispatch(self, user, event: str, payload: Dict[str, Any]) -> List[WebhookLog]:
        configs = [
            config
            for config in WebhookConfig.objects.filter(user=user, active=True)
            if config.subscribes_to(event)
        ]
        if not configs:
            logger.info("No active webhooks for user %s subscribed to %s", user.pk, event)
            return []

        body = {"event": event, **payload}
        return [self._deliver(config, event, body) for config in configs]

    def _deliver(self, config: WebhookConfig, event: str, payload: Dict[str, Any]) -> WebhookLog:
        # Round-trip through the encoder so decimals and datetimes survive JSONField storage.
        data = json.loads(json.dumps(payload, cls=DjangoJSONEncoder))
        request_kwargs: Dict[str, Any] = {"headers": build_headers(config), "timeout": self.timeout}
        # GET sends only the event name; the payload is kept on the log.
        if config.method == WebhookMethod.GET:
            request_kwargs["params"] = {"event": event}
        else:
            request_kwargs["data"] = json.dumps(data)

        started = time.monotonic()
        try:
            response = self.session.request(config.method, config.url, **request_kwargs)
            status_code = response.status_code
            body = response.text or ""
        except requests.RequestException as exc:
            logger.warning("Webhook %s delivery to %s failed: %s", config.pk, config.url, exc)
            status_code = 0
            body = str(exc)
        duration_ms = int((time.monotonic() - started) * 1000)

        log = WebhookLog.objects.create(
            user=config.user,
            webhook=config,
            direction=WebhookDirection.OUTGOING,
            event=event,
            payload=data,
            response_status=status_code,
            response_body=body[:RESPONSE_BODY_LIMIT],
            duration_ms=duration_ms,
        )
        config.mark_fired(status_code)
        logger.info("Webhook %s fired %s -> %s in %sms", config.pk, event, status_code, duration_ms)
        return log
