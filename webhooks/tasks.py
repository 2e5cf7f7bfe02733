import logging

from celery import shared_task
from django.contrib.auth import get_user_model

from .services import WebhookDispatcher

logger = logging.getLogger(__name__)


@shared_task
def dispatch_webhook_event(user_id: int, event: str, payload: dict):
    User = get_user_model()
    try:
        user = User.objects.get(pk=user_id)
    except User.DoesNotExist:
        logger.warning("Skipping %s webhook: user %s no longer exists", event, user_id)
        return []

    logs = WebhookDispatcher().dispatch(user, event, payload)
    return [log.response_status for log in logs]
