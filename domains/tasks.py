import logging
from typing import Optional

from celery import shared_task
from django.contrib.auth import get_user_model

from .models import Domain
from .services import DomainService

logger = logging.getLogger(__name__)


@shared_task
def verify_domain(domain_id: int) -> str:
    domain = Domain.objects.get(id=domain_id)
    DomainService().verify(domain)
    return domain.status


@shared_task
def verify_pending_domains(user_id: Optional[int] = None) -> dict:
    user = get_user_model().objects.get(id=user_id) if user_id is not None else None
    result = DomainService().verify_pending(user=user)
    logger.info("verify_pending_domains task finished: %s", result.as_dict())
    return result.as_dict()
