from unittest import mock

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from common.http import ExternalServiceError
from domains.client import DomainApiClient
from domains.models import Domain, DomainStatus
from domains.services import DomainService
from domains.tests.helpers import create_checkout, create_user
from domains.views import DomainViewSet


class DomainAPITests(APITestCase):
    def setUp(self):
        self.user = create_user()
        self.client.force_authenticate(user=self.user)
        self.api = mock.Mock(spec=DomainApiClient)
        self.api.base_url = "https://hosting.example.com"
        patcher = mock.patch.object(DomainViewSet, "get_service", return_value=DomainService(client=self.api))
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_create_domain(self):
        response = self.client.post(reverse("domain-list"), {"domain": "Pay.Example.com"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["domain"], "pay.example.com")
        self.assertEqual(response.data["status"], DomainStatus.PENDING)
        self.api.add.assert_called_once_with("pay.example.com")

    def test_create_rejects_invalid_hostname(self):
        response = self.client.post(reverse("domain-list"), {"domain": "not a host"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Domain.objects.exists())

    def test_create_rejects_duplicate(self):
        Domain.objects.create(user=create_user("other@example.com"), domain="pay.example.com")

        response = self.client.post(reverse("domain-list"), {"domain": "pay.example.com"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_is_owner_scoped(self):
        Domain.objects.create(user=self.user, domain="mine.example.com")
        Domain.objects.create(user=create_user("other@example.com"), domain="theirs.example.com")

        response = self.client.get(reverse("domain-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([d["domain"] for d in response.data], ["mine.example.com"])

    def test_verify_pending_domain_becomes_active(self):
        domain = Domain.objects.create(user=self.user, domain="pay.example.com")
        self.api.verify.return_value = {"verified": True, "misconfigured": False}

        response = self.client.post(reverse("domain-verify", args=[domain.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["verified"])
        self.assertEqual(response.data["domain"]["status"], DomainStatus.ACTIVE)
        domain.refresh_from_db()
        self.assertEqual(domain.status, DomainStatus.ACTIVE)

    def test_verify_failure_reports_error(self):
        domain = Domain.objects.create(user=self.user, domain="pay.example.com")
        self.api.verify.side_effect = ExternalServiceError("Domain not found", status_code=404)

        response = self.client.post(reverse("domain-verify", args=[domain.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data["verified"])
        self.assertEqual(response.data["records"], [])
        domain.refresh_from_db()
        self.assertEqual(domain.status, DomainStatus.ERROR)

    def test_delete_in_use_domain_returns_conflict(self):
        domain = Domain.objects.create(user=self.user, domain="pay.example.com")
        create_checkout(self.user, name="Checkout Principal", domain=domain)

        response = self.client.delete(reverse("domain-detail", args=[domain.id]))

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["usage"]["checkouts"][0]["name"], "Checkout Principal")
        self.assertTrue(Domain.objects.filter(pk=domain.pk).exists())
        self.api.remove.assert_not_called()

    def test_delete_unused_domain(self):
        domain = Domain.objects.create(user=self.user, domain="pay.example.com")

        response = self.client.delete(reverse("domain-detail", args=[domain.id]))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Domain.objects.filter(pk=domain.pk).exists())

    def test_usage_endpoint(self):
        domain = Domain.objects.create(user=self.user, domain="pay.example.com")

        response = self.client.get(reverse("domain-usage", args=[domain.id]))

        self.assertEqual(response.data, {"in_use": False, "checkouts": [], "member_areas": []})

    def test_verify_pending_endpoint(self):
        Domain.objects.create(user=self.user, domain="pay.example.com")
        self.api.verify.return_value = {"verified": False}

        response = self.client.post(reverse("domain-verify-pending"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["pending"], 1)

    def test_other_users_domain_is_not_found(self):
        domain = Domain.objects.create(user=create_user("other@example.com"), domain="pay.example.com")

        response = self.client.post(reverse("domain-verify", args=[domain.id]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
