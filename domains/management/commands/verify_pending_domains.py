import signal
import threading

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from domains.services import DomainService


class Command(BaseCommand):
    help = "Verify every custom domain still waiting for DNS."

    def add_arguments(self, parser):
        parser.add_argument("--user-email", default="", help="Only verify domains owned by this merchant.")
        parser.add_argument("--max-workers", type=int, default=None, help="Concurrent verification requests.")

    def handle(self, *args, **options):
        user = None
        email = options["user_email"]
        if email:
            try:
                user = get_user_model().objects.get(email=email)
            except get_user_model().DoesNotExist:
                raise CommandError(f"No user with email {email}.")

        cancel_event = threading.Event()
        previous_handler = signal.signal(signal.SIGINT, lambda *_: cancel_event.set())
        try:
            result = DomainService().verify_pending(
                user=user,
                max_workers=options["max_workers"],
                cancel_event=cancel_event,
            )
        finally:
            signal.signal(signal.SIGINT, previous_handler)

        if result.total == 0:
            self.stdout.write("No pending domains.")
            return

        summary = (
            f"{result.active} active, {result.pending} pending, "
            f"{result.error} error, {result.skipped} skipped"
        )
        if result.error:
            self.stdout.write(self.style.WARNING(summary))
        else:
            self.stdout.write(self.style.SUCCESS(summary))
