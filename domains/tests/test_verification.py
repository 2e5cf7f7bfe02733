from django.test import SimpleTestCase, override_settings

from domains.models import DomainStatus
from domains.services import InvalidHostnameError, normalize_hostname
from domains.verification import (
    DnsRecord,
    Misconfigured,
    VerificationFailed,
    Verified,
    fallback_records,
    interpret_verification,
)


class InterpretVerificationTests(SimpleTestCase):
    def test_verified_and_configured_is_active(self):
        outcome = interpret_verification({"verified": True, "misconfigured": False}, "pay.example.com")

        self.assertIsInstance(outcome, Verified)
        self.assertEqual(outcome.status, DomainStatus.ACTIVE)

    def test_verified_but_misconfigured_stays_pending(self):
        outcome = interpret_verification({"verified": True, "misconfigured": True}, "pay.example.com")

        self.assertIsInstance(outcome, Misconfigured)
        self.assertTrue(outcome.verified)
        self.assertEqual(outcome.status, DomainStatus.PENDING)

    def test_unverified_stays_pending(self):
        outcome = interpret_verification({"verified": False}, "pay.example.com")

        self.assertIsInstance(outcome, Misconfigured)
        self.assertEqual(outcome.status, DomainStatus.PENDING)

    def test_error_field_fails(self):
        outcome = interpret_verification({"error": {"code": "not_found", "message": "Domain not found"}})

        self.assertIsInstance(outcome, VerificationFailed)
        self.assertEqual(outcome.message, "Domain not found")
        self.assertEqual(outcome.status, DomainStatus.ERROR)

    def test_plain_error_string_fails(self):
        outcome = interpret_verification({"error": "boom", "verified": True})

        self.assertIsInstance(outcome, VerificationFailed)
        self.assertEqual(outcome.message, "boom")

    def test_missing_payload_fails(self):
        self.assertIsInstance(interpret_verification(None), VerificationFailed)

    def test_records_from_payload(self):
        payload = {
            "verified": False,
            "verification": [
                {"type": "txt", "domain": "_vercel.example.com", "value": "vc-domain-verify=abc"},
                {"type": "CNAME"},
            ],
        }

        outcome = interpret_verification(payload, "pay.example.com")

        self.assertEqual(
            outcome.records,
            [DnsRecord(type="TXT", name="_vercel.example.com", value="vc-domain-verify=abc")],
        )

    def test_fallback_records_when_payload_has_none(self):
        outcome = interpret_verification({"verified": False}, "pay.example.com")

        self.assertEqual(outcome.records, fallback_records("pay.example.com"))


class FallbackRecordsTests(SimpleTestCase):
    def test_subdomain_uses_leading_labels(self):
        records = fallback_records("checkout.loja.example.com")

        self.assertEqual(records[0], DnsRecord(type="CNAME", name="checkout.loja", value="cname.vercel-dns.com"))
        self.assertEqual(records[1], DnsRecord(type="A", name="@", value="76.76.21.21"))

    def test_apex_domain_uses_www(self):
        self.assertEqual(fallback_records("example.com")[0].name, "www")

    @override_settings(DOMAIN_FALLBACK_CNAME_TARGET="edge.example.net", DOMAIN_FALLBACK_A_RECORD="10.0.0.1")
    def test_targets_come_from_settings(self):
        records = fallback_records("pay.example.com")

        self.assertEqual(records[0].value, "edge.example.net")
        self.assertEqual(records[1].value, "10.0.0.1")


class NormalizeHostnameTests(SimpleTestCase):
    def test_strips_scheme_path_and_port(self):
        self.assertEqual(normalize_hostname("https://Pay.Example.com:443/checkout?x=1"), "pay.example.com")

    def test_strips_trailing_dot(self):
        self.assertEqual(normalize_hostname("pay.example.com."), "pay.example.com")

    def test_rejects_invalid_values(self):
        for value in ["", "localhost", "-bad.example.com", "pay_example.com", "192.168.0.1", "a..b.com"]:
            with self.subTest(value=value):
                with self.assertRaises(InvalidHostnameError):
                    normalize_hostname(value)
