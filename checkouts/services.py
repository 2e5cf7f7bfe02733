from __future__ import annotations

import logging
from typing import Any, Dict

from django.db import transaction
from django.utils import timezone

from webhooks.tasks import dispatch_webhook_event

from .models import Order, OrderStatus

logger = logging.getLogger(__name__)

ORDER_STATUS_EVENTS = {
    OrderStatus.PENDING: "pagamento.pendente",
    OrderStatus.PAID: "pagamento.aprovado",
    OrderStatus.FAILED: "pagamento.recusado",
    OrderStatus.REFUNDED: "reembolso.aprovado",
}


def order_event_payload(order: Order) -> Dict[str, Any]:
    checkout = order.checkout
    return {
        "checkout_id": checkout.id,
        "order_id": order.id,
        "amount": str(order.amount),
        "currency": "BRL",
        "payment_method": order.payment_method,
        "status": order.status,
        "customer": {
            "name": order.customer_name,
            "email": order.customer_email,
            "phone": order.customer_phone,
        },
        "items": [{"name": checkout.product.name, "price": str(order.amount), "qty": 1}],
        "created_at": order.created_at.isoformat() if order.created_at else None,
    }


def update_order_status(order: Order, status: str) -> bool:
    """
    Move ``order`` to ``status`` and notify the merchant's webhooks once the
    change is committed. Returns False when the order already had that status.
    """
    if order.status == status:
        return False

    order.status = status
    update_fields = ["status", "updated_at"]
    if status == OrderStatus.PAID and order.paid_at is None:
        order.paid_at = timezone.now()
        update_fields.append("paid_at")
    order.save(update_fields=update_fields)
    logger.info("Order %s moved to %s", order.id, status)

    event = ORDER_STATUS_EVENTS.get(status)
    if event:
        user_id = order.checkout.user_id
        payload = order_event_payload(order)
        transaction.on_commit(lambda: dispatch_webhook_event.delay(user_id, event, payload))
    return True
