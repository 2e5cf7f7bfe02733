import threading
from unittest import mock

from django.test import TestCase

from common.http import ExternalServiceError
from domains.client import DomainApiClient
from domains.models import Domain, DomainStatus
from domains.services import DomainInUseError, DomainService
from domains.tests.helpers import create_checkout, create_user
from members.models import MemberArea


class DomainServiceTests(TestCase):
    def setUp(self):
        self.user = create_user()
        self.client_mock = mock.Mock(spec=DomainApiClient)
        self.client_mock.base_url = "https://hosting.example.com"
        self.service = DomainService(client=self.client_mock)

    def _domain(self, hostname="pay.example.com", status=DomainStatus.PENDING, user=None):
        return Domain.objects.create(user=user or self.user, domain=hostname, status=status)

    def test_register_creates_pending_domain(self):
        domain = self.service.register(user=self.user, hostname="HTTPS://Pay.Example.com/")

        self.assertEqual(domain.domain, "pay.example.com")
        self.assertEqual(domain.status, DomainStatus.PENDING)
        self.client_mock.add.assert_called_once_with("pay.example.com")

    def test_register_marks_error_when_hosting_api_rejects(self):
        self.client_mock.add.side_effect = ExternalServiceError("forbidden", status_code=403)

        domain = self.service.register(user=self.user, hostname="pay.example.com")

        domain.refresh_from_db()
        self.assertEqual(domain.status, DomainStatus.ERROR)

    def test_verified_domain_becomes_active(self):
        domain = self._domain()
        self.client_mock.verify.return_value = {"verified": True, "misconfigured": False}

        records = self.service.verify(domain)

        self.assertIsNotNone(records)
        domain.refresh_from_db()
        self.assertEqual(domain.status, DomainStatus.ACTIVE)
        self.client_mock.verify.assert_called_once_with("pay.example.com")

    def test_failed_verification_marks_error_and_returns_none(self):
        domain = self._domain()
        self.client_mock.verify.side_effect = ExternalServiceError("timeout")

        self.assertIsNone(self.service.verify(domain))
        domain.refresh_from_db()
        self.assertEqual(domain.status, DomainStatus.ERROR)

    def test_unchanged_outcome_does_not_write_again(self):
        domain = self._domain()
        self.client_mock.verify.return_value = {"verified": True, "misconfigured": False}
        self.service.verify(domain)

        with mock.patch.object(Domain, "save") as mock_save:
            self.service.verify(domain)

        mock_save.assert_not_called()
        self.assertEqual(domain.status, DomainStatus.ACTIVE)

    def test_verify_pending_only_checks_pending_domains(self):
        self._domain("a.example.com")
        self._domain("b.example.com")
        self._domain("live.example.com", status=DomainStatus.ACTIVE)

        def answer(hostname):
            if hostname == "a.example.com":
                return {"verified": True, "misconfigured": False}
            return {"verified": False}

        self.client_mock.verify.side_effect = answer

        result = self.service.verify_pending(max_workers=2)

        self.assertEqual(result.as_dict(), {"active": 1, "pending": 1, "error": 0, "skipped": 0, "total": 2})
        self.assertEqual(self.client_mock.verify.call_count, 2)
        self.assertEqual(Domain.objects.get(domain="a.example.com").status, DomainStatus.ACTIVE)

    def test_verify_pending_scoped_to_user(self):
        other = create_user("other@example.com")
        self._domain("mine.example.com")
        self._domain("theirs.example.com", user=other)
        self.client_mock.verify.return_value = {"verified": False}

        result = self.service.verify_pending(user=self.user)

        self.assertEqual(result.total, 1)
        self.client_mock.verify.assert_called_once_with("mine.example.com")

    def test_cancelled_batch_skips_remaining_checks(self):
        self._domain("a.example.com")
        self._domain("b.example.com")
        cancel_event = threading.Event()
        cancel_event.set()

        result = self.service.verify_pending(cancel_event=cancel_event)

        self.assertEqual(result.skipped, 2)
        self.client_mock.verify.assert_not_called()
        self.assertEqual(Domain.objects.filter(status=DomainStatus.PENDING).count(), 2)

    def test_check_usage_lists_checkouts_and_member_areas(self):
        domain = self._domain()
        create_checkout(self.user, name="Checkout Black Friday", domain=domain)
        MemberArea.objects.create(user=self.user, name="Área VIP", domain=domain)

        report = self.service.check_usage(domain)

        self.assertFalse(report.is_empty)
        self.assertEqual([c["name"] for c in report.checkouts], ["Checkout Black Friday"])
        self.assertEqual([m["name"] for m in report.member_areas], ["Área VIP"])

    def test_delete_in_use_domain_is_refused(self):
        domain = self._domain()
        create_checkout(self.user, domain=domain)

        with self.assertRaises(DomainInUseError) as ctx:
            self.service.delete(domain)

        self.assertEqual(len(ctx.exception.report.checkouts), 1)
        self.client_mock.remove.assert_not_called()
        self.assertTrue(Domain.objects.filter(pk=domain.pk).exists())

    def test_delete_unused_domain(self):
        domain = self._domain()

        self.service.delete(domain)

        self.client_mock.remove.assert_called_once_with("pay.example.com")
        self.assertFalse(Domain.objects.filter(domain="pay.example.com").exists())

    def test_delete_survives_hosting_api_failure(self):
        domain = self._domain()
        self.client_mock.remove.side_effect = ExternalServiceError("gone")

        self.service.delete(domain)

        self.assertFalse(Domain.objects.filter(domain="pay.example.com").exists())
