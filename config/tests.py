from django.core.handlers.wsgi import WSGIHandler
from django.test import SimpleTestCase


class WsgiEntryTests(SimpleTestCase):
    def test_application_is_plain_django_handler(self):
        from config import wsgi

        self.assertIsInstance(wsgi.application, WSGIHandler)
        self.assertEqual(
            [name for name in vars(wsgi) if name.startswith("_") and not name.startswith("__")], []
        )
