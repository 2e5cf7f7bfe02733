from unittest import mock

import requests
from django.test import SimpleTestCase, override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from accounts.licensing import LicenseStatus, validate_license
from accounts.models import License, LicenseState, User


class AuthFlowTests(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            email="merchant@example.com",
            password="pass1234",
            username="merchant",
        )

    def test_register_returns_tokens(self):
        response = self.client.post(
            reverse("accounts:register"),
            {"email": "New@Example.com", "password": "S3cure-pass!", "company_name": "Loja"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIn("access", response.data)
        self.assertEqual(response.data["user"]["email"], "new@example.com")
        self.assertTrue(User.objects.filter(email="new@example.com").exists())

    def test_register_rejects_duplicate_email(self):
        response = self.client.post(
            reverse("accounts:register"),
            {"email": "merchant@example.com", "password": "S3cure-pass!"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("email", response.data)

    def test_login_with_valid_credentials(self):
        response = self.client.post(
            reverse("accounts:login"),
            {"email": "merchant@example.com", "password": "pass1234"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("refresh", response.data)

    def test_login_rejects_wrong_password(self):
        response = self.client.post(
            reverse("accounts:login"),
            {"email": "merchant@example.com", "password": "nope"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_requires_authentication(self):
        response = self.client.get(reverse("accounts:me"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

        self.client.force_authenticate(user=self.user)
        response = self.client.get(reverse("accounts:me"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["email"], "merchant@example.com")

    def test_logout_blacklists_refresh_token(self):
        login = self.client.post(
            reverse("accounts:login"),
            {"email": "merchant@example.com", "password": "pass1234"},
            format="json",
        )
        self.client.force_authenticate(user=self.user)

        response = self.client.post(reverse("accounts:logout"), {"refresh": login.data["refresh"]}, format="json")
        self.assertEqual(response.status_code, status.HTTP_205_RESET_CONTENT)

        refresh = self.client.post(reverse("accounts:token_refresh"), {"refresh": login.data["refresh"]}, format="json")
        self.assertEqual(refresh.status_code, status.HTTP_401_UNAUTHORIZED)

    @override_settings(LICENSE_API_URL="https://license.example.com")
    @mock.patch("accounts.views.validate_license")
    def test_license_endpoint(self, mock_validate):
        mock_validate.return_value = LicenseStatus(valid=True, message="ok")
        self.client.force_authenticate(user=self.user)

        response = self.client.post(
            reverse("accounts:license-validate"),
            {"key": "LIC-123", "domain": "pay.example.com"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"valid": True, "message": "ok"})
        mock_validate.assert_called_once_with("LIC-123", "pay.example.com")


@override_settings(LICENSE_API_URL="https://license.example.com/")
class LicenseValidationTests(SimpleTestCase):
    def _session(self, status_code=200, body=None, exc=None):
        session = mock.Mock(spec=requests.Session)
        if exc is not None:
            session.request.side_effect = exc
        else:
            response = mock.Mock(status_code=status_code)
            response.json.return_value = body
            session.request.return_value = response
        return session

    def test_valid_license(self):
        session = self._session(body={"valid": True, "message": "Licença ativa"})

        result = validate_license("LIC-123", "pay.example.com", session=session)

        self.assertTrue(result.valid)
        self.assertEqual(result.message, "Licença ativa")
        args, kwargs = session.request.call_args
        self.assertEqual(args, ("POST", "https://license.example.com/api/licenses/validate"))
        self.assertEqual(kwargs["json"], {"key": "LIC-123", "domain": "pay.example.com"})

    def test_rejected_license(self):
        session = self._session(status_code=403, body={"valid": False, "error": "Domain not allowed"})

        result = validate_license("LIC-123", "other.example.com", session=session)

        self.assertFalse(result.valid)
        self.assertEqual(result.message, "Domain not allowed")

    def test_transport_failure_is_invalid(self):
        session = self._session(exc=requests.ConnectionError("connection refused"))

        result = validate_license("LIC-123", "pay.example.com", session=session)

        self.assertFalse(result.valid)
        self.assertIn("connection refused", result.message)


class LicenseRecordTests(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            email="vendor@example.com",
            password="pass1234",
            username="vendor",
        )
        self.client.force_authenticate(user=self.user)

    def test_issue_license_generates_key(self):
        response = self.client.post(
            reverse("accounts:license-list"),
            {"client_email": "Cliente@Example.com", "client_name": "Cliente", "key": "CHOSEN"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        issued = License.objects.get()
        self.assertEqual(issued.user, self.user)
        self.assertNotEqual(issued.key, "CHOSEN")
        self.assertEqual(len(issued.key), 32)
        self.assertEqual(issued.client_email, "cliente@example.com")
        self.assertEqual((issued.plan, issued.status), ("lifetime", LicenseState.ACTIVE))

    def test_licenses_are_scoped_to_owner(self):
        other = User.objects.create_user(email="rival@example.com", password="pass1234", username="rival")
        foreign = License.objects.create(user=other, client_email="c@example.com")
        License.objects.create(user=self.user, client_email="mine@example.com")

        listing = self.client.get(reverse("accounts:license-list"))
        detail = self.client.get(reverse("accounts:license-detail", args=[foreign.id]))

        self.assertEqual([row["client_email"] for row in listing.data], ["mine@example.com"])
        self.assertEqual(detail.status_code, status.HTTP_404_NOT_FOUND)

    def test_activate_binds_domain(self):
        issued = License.objects.create(user=self.user, client_email="c@example.com")
        url = reverse("accounts:license-activate", args=[issued.id])

        first = self.client.post(url, {"domain": "https://Pay.Example.com/"}, format="json")
        again = self.client.post(url, {"domain": "pay.example.com"}, format="json")
        elsewhere = self.client.post(url, {"domain": "other.example.com"}, format="json")

        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertEqual(first.data["allowed_domain"], "pay.example.com")
        self.assertIsNotNone(first.data["activated_at"])
        self.assertEqual(again.status_code, status.HTTP_200_OK)
        self.assertEqual(elsewhere.status_code, status.HTTP_409_CONFLICT)

    def test_refunded_license_cannot_be_activated(self):
        issued = License.objects.create(user=self.user, client_email="c@example.com", status=LicenseState.REFUNDED)

        response = self.client.post(
            reverse("accounts:license-activate", args=[issued.id]), {"domain": "pay.example.com"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        issued.refresh_from_db()
        self.assertIsNone(issued.activated_at)
