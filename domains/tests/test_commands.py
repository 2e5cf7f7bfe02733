from io import StringIO
from unittest import mock

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from domains.client import DomainApiClient
from domains.models import Domain, DomainStatus
from domains.services import DomainService
from domains.tests.helpers import create_user


class VerifyPendingDomainsCommandTests(TestCase):
    def setUp(self):
        self.user = create_user()
        self.api = mock.Mock(spec=DomainApiClient)
        self.api.base_url = "https://hosting.example.com"
        patcher = mock.patch(
            "domains.management.commands.verify_pending_domains.DomainService",
            return_value=DomainService(client=self.api),
        )
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_reports_summary(self):
        Domain.objects.create(user=self.user, domain="pay.example.com")
        self.api.verify.return_value = {"verified": True, "misconfigured": False}
        out = StringIO()

        call_command("verify_pending_domains", stdout=out)

        self.assertIn("1 active", out.getvalue())
        self.assertEqual(Domain.objects.get().status, DomainStatus.ACTIVE)

    def test_no_pending_domains(self):
        out = StringIO()

        call_command("verify_pending_domains", stdout=out)

        self.assertIn("No pending domains.", out.getvalue())
        self.api.verify.assert_not_called()

    def test_unknown_user_email(self):
        with self.assertRaises(CommandError):
            call_command("verify_pending_domains", user_email="missing@example.com")
