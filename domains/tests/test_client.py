from unittest import mock

import requests
from django.core.exceptions import ImproperlyConfigured
from django.test import SimpleTestCase, override_settings

from common.http import ExternalServiceError
from domains.client import DomainApiClient


def _response(status_code=200, body=None):
    response = mock.Mock(status_code=status_code)
    if body is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = body
    return response


class DomainApiClientTests(SimpleTestCase):
    def setUp(self):
        self.session = mock.Mock(spec=requests.Session)
        self.session.headers = {}
        self.client = DomainApiClient("https://app.example.com/", token="tok", timeout=5, session=self.session)

    def test_verify_sends_hostname_as_query(self):
        self.session.request.return_value = _response(body={"verified": True})

        body = self.client.verify("pay.example.com")

        self.assertEqual(body, {"verified": True})
        self.session.request.assert_called_once_with(
            "GET",
            "https://app.example.com/api/domains/verify",
            params={"domain": "pay.example.com"},
            timeout=5,
        )
        self.assertEqual(self.session.headers["Authorization"], "Bearer tok")

    def test_add_posts_json(self):
        self.session.request.return_value = _response(body={"name": "pay.example.com"})

        self.client.add("pay.example.com")

        args, kwargs = self.session.request.call_args
        self.assertEqual(args, ("POST", "https://app.example.com/api/domains/add"))
        self.assertEqual(kwargs["json"], {"domain": "pay.example.com"})

    def test_error_answer_raises_with_message(self):
        self.session.request.return_value = _response(
            status_code=400, body={"error": {"code": "forbidden", "message": "Domain taken"}}
        )

        with self.assertRaises(ExternalServiceError) as ctx:
            self.client.remove("pay.example.com")

        self.assertEqual(str(ctx.exception), "Domain taken")
        self.assertEqual(ctx.exception.status_code, 400)

    def test_transport_error_raises(self):
        self.session.request.side_effect = requests.Timeout("read timed out")

        with self.assertRaises(ExternalServiceError):
            self.client.verify("pay.example.com")

    def test_non_json_body_raises(self):
        self.session.request.return_value = _response(body=None)

        with self.assertRaises(ExternalServiceError):
            self.client.verify("pay.example.com")

    @override_settings(DOMAIN_API_BASE_URL="")
    def test_missing_base_url_is_improperly_configured(self):
        with self.assertRaises(ImproperlyConfigured):
            DomainApiClient.from_settings()
