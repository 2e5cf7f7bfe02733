from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from checkouts.models import Checkout, Gateway, Order, OrderStatus, Product
from checkouts.services import update_order_status
from domains.models import Domain, DomainUsage


class CheckoutAPITests(APITestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(
            email="seller@example.com",
            password="pass1234",
            username="seller",
        )
        self.other = get_user_model().objects.create_user(
            email="other@example.com",
            password="pass1234",
            username="other",
        )
        self.product = Product.objects.create(user=self.user, name="Curso React Pro", price=Decimal("197.00"))
        self.gateway = Gateway.objects.create(user=self.user, private_key="sk_live_123")
        self.client.force_authenticate(user=self.user)

    def test_create_checkout_generates_slug(self):
        response = self.client.post(
            reverse("checkout-list"),
            {"name": "Oferta Especial", "product": self.product.id, "gateway": self.gateway.id},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        checkout = Checkout.objects.get()
        self.assertEqual(checkout.user, self.user)
        self.assertEqual(checkout.slug, "oferta-especial")

    def test_cannot_bind_foreign_domain(self):
        domain = Domain.objects.create(user=self.other, domain="pay.other.com")

        response = self.client.post(
            reverse("checkout-list"),
            {"name": "Oferta", "product": self.product.id, "gateway": self.gateway.id, "domain": domain.id},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("domain", response.data)

    def test_cannot_use_foreign_product(self):
        foreign = Product.objects.create(user=self.other, name="Alheio")

        response = self.client.post(
            reverse("checkout-list"),
            {"name": "Oferta", "product": foreign.id, "gateway": self.gateway.id},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_gateway_private_key_is_write_only(self):
        response = self.client.get(reverse("gateway-detail", args=[self.gateway.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertNotIn("private_key", response.data)

    def test_product_in_use_cannot_be_deleted(self):
        Checkout.objects.create(user=self.user, name="Oferta", product=self.product, gateway=self.gateway)

        response = self.client.delete(reverse("product-detail", args=[self.product.id]))

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_duplicate_slugs_get_suffix(self):
        first = Checkout.objects.create(user=self.user, name="Oferta", product=self.product, gateway=self.gateway)
        second = Checkout.objects.create(user=self.user, name="Oferta", product=self.product, gateway=self.gateway)

        self.assertEqual(first.slug, "oferta")
        self.assertEqual(second.slug, "oferta-1")

    def test_explicit_duplicate_slug_is_rejected(self):
        Checkout.objects.create(user=self.user, name="Oferta", product=self.product, gateway=self.gateway)

        response = self.client.post(
            reverse("checkout-list"),
            {"name": "Outra", "slug": "oferta", "product": self.product.id, "gateway": self.gateway.id},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("slug", response.data)
        self.assertEqual(Checkout.objects.count(), 1)

    def test_patch_to_taken_slug_is_rejected(self):
        Checkout.objects.create(user=self.user, name="Oferta", product=self.product, gateway=self.gateway)
        second = Checkout.objects.create(user=self.user, name="Outra", product=self.product, gateway=self.gateway)
        url = reverse("checkout-detail", args=[second.id])

        taken = self.client.patch(url, {"slug": "oferta"}, format="json")
        unchanged = self.client.patch(url, {"slug": "outra"}, format="json")

        self.assertEqual(taken.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("slug", taken.data)
        self.assertEqual(unchanged.status_code, status.HTTP_200_OK)

    def test_same_slug_allowed_for_other_owner(self):
        other_product = Product.objects.create(user=self.other, name="Alheio")
        Checkout.objects.create(
            user=self.other,
            name="Oferta",
            product=other_product,
            gateway=Gateway.objects.create(user=self.other),
        )

        response = self.client.post(
            reverse("checkout-list"),
            {"name": "Oferta", "slug": "oferta", "product": self.product.id, "gateway": self.gateway.id},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_member_area_domain_cannot_serve_checkout(self):
        domain = Domain.objects.create(user=self.user, domain="membros.example.com", usage=DomainUsage.MEMBER_AREA)

        response = self.client.post(
            reverse("checkout-list"),
            {"name": "Oferta", "product": self.product.id, "gateway": self.gateway.id, "domain": domain.id},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("domain", response.data)

    def test_checkout_domain_is_accepted(self):
        domain = Domain.objects.create(user=self.user, domain="pay.example.com", usage=DomainUsage.CHECKOUT)

        response = self.client.post(
            reverse("checkout-list"),
            {"name": "Oferta", "product": self.product.id, "gateway": self.gateway.id, "domain": domain.id},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["domain_name"], "pay.example.com")


class OrderStatusTests(APITestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(
            email="orders@example.com",
            password="pass1234",
            username="orders",
        )
        product = Product.objects.create(user=self.user, name="Ebook", price=Decimal("47.00"))
        checkout = Checkout.objects.create(
            user=self.user, name="Ebook", product=product, gateway=Gateway.objects.create(user=self.user)
        )
        self.order = Order.objects.create(
            checkout=checkout,
            customer_name="Maria",
            customer_email="maria@example.com",
            amount=Decimal("47.00"),
        )
        self.client.force_authenticate(user=self.user)

    @mock.patch("checkouts.services.dispatch_webhook_event")
    def test_paid_order_enqueues_event_after_commit(self, mock_task):
        with self.captureOnCommitCallbacks(execute=True):
            changed = update_order_status(self.order, OrderStatus.PAID)

        self.assertTrue(changed)
        self.assertIsNotNone(self.order.paid_at)
        user_id, event, payload = mock_task.delay.call_args[0]
        self.assertEqual((user_id, event), (self.user.id, "pagamento.aprovado"))
        self.assertEqual(payload["order_id"], self.order.id)
        self.assertEqual(payload["amount"], "47.00")

    @mock.patch("checkouts.services.dispatch_webhook_event")
    def test_same_status_is_a_noop(self, mock_task):
        with self.captureOnCommitCallbacks(execute=True):
            changed = update_order_status(self.order, OrderStatus.PENDING)

        self.assertFalse(changed)
        mock_task.delay.assert_not_called()

    @mock.patch("checkouts.services.dispatch_webhook_event")
    def test_canceled_order_sends_no_event(self, mock_task):
        with self.captureOnCommitCallbacks(execute=True):
            update_order_status(self.order, OrderStatus.CANCELED)

        mock_task.delay.assert_not_called()

    @mock.patch("checkouts.services.dispatch_webhook_event")
    def test_status_endpoint(self, mock_task):
        response = self.client.post(
            reverse("order-set-status", args=[self.order.id]), {"status": "failed"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["changed"])
        self.assertEqual(response.data["order"]["status"], OrderStatus.FAILED)
