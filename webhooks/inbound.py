"""Handlers for events merchants push into the platform."""

import logging

from django.core.exceptions import ObjectDoesNotExist, ValidationError

from checkouts.models import Order, OrderStatus, Product
from checkouts.services import update_order_status
from members.models import AccessGrant, MemberArea

from .events import INCOMING_ACCESS_GRANT, INCOMING_ORDER_UPDATE
from .models import WebhookDirection, WebhookLog

logger = logging.getLogger(__name__)


class UnknownEventError(ValueError):
    pass


def _update_order(user, payload: dict) -> dict:
    status = payload.get("status")
    if status not in OrderStatus.values:
        raise ValidationError({"status": f"Unknown order status: {status!r}."})
    order = Order.objects.select_related("checkout__product").get(
        pk=payload.get("order_id"), checkout__user=user
    )
    changed = update_order_status(order, status)
    return {"order_id": order.pk, "status": order.status, "changed": changed}


def _grant_access(user, payload: dict) -> dict:
    """
    Grant ``email`` access to every member area selling ``product_id``.

    ``member_area_id`` narrows the grant to one area. Without a product the
    area id is required.
    """
    email = (payload.get("email") or "").strip().lower()
    if not email:
        raise ValidationError({"email": "This field is required."})

    product = None
    areas = MemberArea.objects.filter(user=user)
    if payload.get("product_id"):
        product = Product.objects.get(pk=payload["product_id"], user=user)
        areas = areas.filter(contents__products=product).distinct()
    elif not payload.get("member_area_id"):
        raise ValidationError({"product_id": "Send a product_id or a member_area_id."})
    if payload.get("member_area_id"):
        areas = areas.filter(pk=payload["member_area_id"])

    areas = list(areas)
    if not areas:
        raise MemberArea.DoesNotExist("No member area grants access to this product.")

    grants = []
    for area in areas:
        grant, created = AccessGrant.objects.get_or_create(
            member_area=area, email=email, defaults={"product": product}
        )
        grants.append({"grant_id": grant.pk, "member_area_id": area.pk, "created": created})
    return {"email": email, "product_id": product.pk if product else None, "grants": grants}


HANDLERS = {
    INCOMING_ORDER_UPDATE: _update_order,
    INCOMING_ACCESS_GRANT: _grant_access,
}


def handle_incoming(user, payload: dict) -> dict:
    """
    Apply an incoming event for ``user`` and log it.

    Raises ``UnknownEventError`` for events with no handler, ``ValidationError``
    for malformed payloads and ``ObjectDoesNotExist`` when the referenced order,
    member area or product does not belong to the user.
    """
    event = str(payload.get("event") or "")
    log = WebhookLog.objects.create(
        user=user,
        direction=WebhookDirection.INCOMING,
        event=event or "unknown",
        payload=payload,
    )

    handler = HANDLERS.get(event)
    try:
        if handler is None:
            raise UnknownEventError(f"Unsupported event: {event or '<missing>'}.")
        result = handler(user, payload)
    except (ValidationError, ObjectDoesNotExist, ValueError, TypeError) as exc:
        log.response_status = 404 if isinstance(exc, ObjectDoesNotExist) else 400
        log.response_body = str(exc)
        log.save(update_fields=["response_status", "response_body"])
        logger.warning("Incoming %s for user %s rejected: %s", event, user.pk, exc)
        raise

    log.response_status = 200
    log.response_body = str(result)
    log.save(update_fields=["response_status", "response_body"])
    logger.info("Incoming %s for user %s applied", event, user.pk)
    return result
