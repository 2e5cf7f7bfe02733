import json
from decimal import Decimal
from unittest import mock

import requests
from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from checkouts.models import Checkout, Gateway, Order, OrderStatus, Product
from members.models import AccessGrant, Content, MemberArea
from webhooks.events import sample_payload
from webhooks.models import WebhookConfig, WebhookDirection, WebhookLog
from webhooks.services import SIGNATURE_HEADER, WebhookDispatcher, build_headers, preview_body
from webhooks.tasks import dispatch_webhook_event
from webhooks.views import WebhookConfigViewSet


def _session(status_code=200, text="ok", exc=None):
    session = mock.Mock(spec=requests.Session)
    if exc is not None:
        session.request.side_effect = exc
    else:
        session.request.return_value = mock.Mock(status_code=status_code, text=text)
    return session


class WebhookDispatcherTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(
            email="webhook@example.com",
            password="pass1234",
            username="webuser",
        )
        self.config = WebhookConfig.objects.create(
            user=self.user,
            name="CRM",
            url="https://hooks.example.com/crm",
            headers=[{"key": "X-Api-Key", "value": "abc"}, {"key": "  ", "value": "ignored"}],
            events=["checkout.abandonado"],
            secret="s3cret",
        )

    def test_headers_order_and_signature(self):
        headers = build_headers(self.config)

        self.assertEqual(
            list(headers.items()),
            [
                ("Content-Type", "application/json"),
                (SIGNATURE_HEADER, "s3cret"),
                ("X-Api-Key", "abc"),
            ],
        )

    def test_user_headers_override_defaults(self):
        self.config.headers = [{"key": "Content-Type", "value": "application/vnd+json"}]

        self.assertEqual(build_headers(self.config)["Content-Type"], "application/vnd+json")

    def test_no_signature_without_secret(self):
        self.config.secret = ""

        self.assertNotIn(SIGNATURE_HEADER, build_headers(self.config))

    def test_successful_test_delivery(self):
        session = _session(200, '{"received": true}')

        log = WebhookDispatcher(session=session, timeout=3).test(self.config)

        self.assertTrue(log.success)
        self.assertEqual(log.response_status, 200)
        self.assertEqual(log.direction, WebhookDirection.OUTGOING)
        self.assertEqual(log.event, "checkout.abandonado")
        self.assertEqual(log.payload, sample_payload("checkout.abandonado"))
        args, kwargs = session.request.call_args
        self.assertEqual(args, ("POST", "https://hooks.example.com/crm"))
        self.assertEqual(json.loads(kwargs["data"]), sample_payload("checkout.abandonado"))
        self.assertEqual(kwargs["timeout"], 3)
        self.config.refresh_from_db()
        self.assertEqual(self.config.last_status, 200)
        self.assertIsNotNone(self.config.last_fired_at)

    def test_server_error_is_logged_as_failure(self):
        log = WebhookDispatcher(session=_session(500, "Internal Server Error")).test(self.config)

        self.assertFalse(log.success)
        self.assertEqual(log.response_status, 500)
        self.assertEqual(log.response_body, "Internal Server Error")

    def test_network_failure_records_status_zero(self):
        session = _session(exc=requests.ConnectionError("Name or service not known"))

        log = WebhookDispatcher(session=session).test(self.config)

        self.assertFalse(log.success)
        self.assertEqual(log.response_status, 0)
        self.assertIn("Name or service not known", log.response_body)
        self.config.refresh_from_db()
        self.assertEqual(self.config.last_status, 0)

    def test_response_body_is_truncated(self):
        log = WebhookDispatcher(session=_session(200, "x" * 5000)).test(self.config)

        self.assertEqual(len(log.response_body), 2000)
        self.assertEqual(preview_body(log.response_body), "x" * 200 + "...")

    def test_unknown_event_uses_default_payload(self):
        log = WebhookDispatcher(session=_session()).test(self.config, "pix.gerado")

        self.assertEqual(log.event, "pix.gerado")
        self.assertEqual(log.payload["event"], "pagamento.aprovado")

    def test_get_method_sends_no_body(self):
        self.config.method = "GET"
        session = _session()

        log = WebhookDispatcher(session=session).test(self.config)

        _, kwargs = session.request.call_args
        self.assertNotIn("data", kwargs)
        self.assertEqual(kwargs["params"], {"event": "checkout.abandonado"})
        self.assertEqual(log.payload, sample_payload("checkout.abandonado"))

    def test_dispatch_only_reaches_subscribed_active_configs(self):
        WebhookConfig.objects.create(
            user=self.user, name="Inactive", url="https://hooks.example.com/off", events=["pagamento.aprovado"], active=False
        )
        subscribed = WebhookConfig.objects.create(
            user=self.user, name="ERP", url="https://hooks.example.com/erp", events=["pagamento.aprovado"]
        )
        session = _session()

        logs = WebhookDispatcher(session=session).dispatch(
            self.user, "pagamento.aprovado", {"order_id": 7, "amount": Decimal("197.00")}
        )

        self.assertEqual([log.webhook_id for log in logs], [subscribed.id])
        self.assertEqual(session.request.call_count, 1)
        self.assertEqual(logs[0].payload, {"event": "pagamento.aprovado", "order_id": 7, "amount": "197.00"})

    @mock.patch("webhooks.tasks.WebhookDispatcher")
    def test_task_skips_missing_user(self, mock_dispatcher):
        self.assertEqual(dispatch_webhook_event(999999, "pagamento.aprovado", {}), [])
        mock_dispatcher.assert_not_called()


class WebhookAPITests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = get_user_model().objects.create_user(
            email="api@example.com",
            password="pass1234",
            username="api_user",
        )
        self.client.force_authenticate(user=self.user)

    def test_create_config_validates_events(self):
        url = reverse("webhook-config-list")
        payload = {
            "name": "CRM",
            "url": "https://hooks.example.com/crm",
            "method": "POST",
            "headers": [{"key": "X-Token", "value": "1"}, {"key": "", "value": "dropped"}],
            "events": ["pagamento.aprovado", "nao.existe"],
        }

        response = self.client.post(url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        payload["events"] = ["pagamento.aprovado"]
        response = self.client.post(url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        config = WebhookConfig.objects.get()
        self.assertEqual(config.user, self.user)
        self.assertEqual(config.headers, [{"key": "X-Token", "value": "1"}])

    def test_test_action_returns_summary(self):
        config = WebhookConfig.objects.create(user=self.user, name="CRM", url="https://hooks.example.com/crm")
        dispatcher = WebhookDispatcher(session=_session(500, "boom"))

        with mock.patch.object(WebhookConfigViewSet, "get_dispatcher", return_value=dispatcher):
            response = self.client.post(reverse("webhook-config-test", args=[config.id]), {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data["success"])
        self.assertEqual(response.data["status"], 500)
        self.assertEqual(response.data["body"], "boom")
        self.assertEqual(response.data["log"]["event"], "pagamento.aprovado")

    def test_logs_are_owner_scoped_and_filterable(self):
        other = get_user_model().objects.create_user(email="other@example.com", password="x", username="other")
        WebhookLog.objects.create(user=self.user, event="pagamento.aprovado", direction=WebhookDirection.OUTGOING)
        WebhookLog.objects.create(user=self.user, event="pedido.atualizar", direction=WebhookDirection.INCOMING)
        WebhookLog.objects.create(user=other, event="pagamento.aprovado")

        response = self.client.get(reverse("webhook-log-list"), {"direction": "incoming"})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([log["event"] for log in response.data], ["pedido.atualizar"])

    def test_event_catalog(self):
        response = self.client.get(reverse("webhook-config-events"))

        self.assertEqual(len(response.data), 11)
        self.assertIn({"id": "pix.gerado", "label": "Pix Gerado"}, response.data)


class IncomingWebhookTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = get_user_model().objects.create_user(
            email="incoming@example.com",
            password="pass1234",
            username="incoming",
        )
        self.client.force_authenticate(user=self.user)
        self.product = Product.objects.create(user=self.user, name="Curso", price=Decimal("97.00"))
        checkout = Checkout.objects.create(
            user=self.user,
            name="Checkout",
            product=self.product,
            gateway=Gateway.objects.create(user=self.user),
        )
        self.order = Order.objects.create(
            checkout=checkout,
            customer_name="João",
            customer_email="joao@example.com",
            amount=Decimal("97.00"),
        )
        self.area = MemberArea.objects.create(user=self.user, name="Área VIP")
        self.url = reverse("incoming_webhook")

    @mock.patch("checkouts.services.dispatch_webhook_event")
    def test_order_update(self, mock_task):
        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post(
                self.url, {"event": "pedido.atualizar", "order_id": self.order.id, "status": "paid"}, format="json"
            )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, OrderStatus.PAID)
        self.assertIsNotNone(self.order.paid_at)
        mock_task.delay.assert_called_once()
        self.assertEqual(mock_task.delay.call_args[0][:2], (self.user.id, "pagamento.aprovado"))
        log = WebhookLog.objects.get(direction=WebhookDirection.INCOMING)
        self.assertEqual(log.response_status, 200)

    def test_access_grant(self):
        content = Content.objects.create(member_area=self.area, title="Curso completo")
        content.products.add(self.product)
        other_area = MemberArea.objects.create(user=self.user, name="Área Bônus")
        Content.objects.create(member_area=other_area, title="Bônus").products.add(self.product)
        MemberArea.objects.create(user=self.user, name="Sem produto")

        response = self.client.post(
            self.url,
            {"event": "acesso.liberar", "email": "Aluno@Example.com", "product_id": self.product.id},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        grants = AccessGrant.objects.order_by("member_area__name")
        self.assertEqual([g.member_area for g in grants], [other_area, self.area])
        self.assertTrue(all(g.email == "aluno@example.com" and g.product == self.product for g in grants))

    def test_access_grant_narrowed_to_one_area(self):
        Content.objects.create(member_area=self.area, title="Curso").products.add(self.product)
        other_area = MemberArea.objects.create(user=self.user, name="Área Bônus")
        Content.objects.create(member_area=other_area, title="Bônus").products.add(self.product)

        response = self.client.post(
            self.url,
            {
                "event": "acesso.liberar",
                "email": "aluno@example.com",
                "product_id": self.product.id,
                "member_area_id": self.area.id,
            },
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(AccessGrant.objects.get().member_area, self.area)

    def test_access_grant_for_product_without_area(self):
        response = self.client.post(
            self.url,
            {"event": "acesso.liberar", "email": "aluno@example.com", "product_id": self.product.id},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(AccessGrant.objects.exists())

    def test_access_grant_needs_product_or_area(self):
        response = self.client.post(self.url, {"event": "acesso.liberar", "email": "aluno@example.com"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_event(self):
        response = self.client.post(self.url, {"event": "algo.diferente"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(WebhookLog.objects.get().response_status, 400)

    def test_unknown_order(self):
        response = self.client.post(
            self.url, {"event": "pedido.atualizar", "order_id": 999999, "status": "paid"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(WebhookLog.objects.get().response_status, 404)

    def test_invalid_status(self):
        response = self.client.post(
            self.url, {"event": "pedido.atualizar", "order_id": self.order.id, "status": "lost"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
