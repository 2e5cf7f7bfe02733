from __future__ import annotations

import logging
import re
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional

from django.conf import settings
from django.db import transaction

from common.http import ExternalServiceError

from .client import DomainApiClient
from .models import Domain, DomainStatus, DomainType, DomainUsage
from .verification import DnsRecord, VerificationFailed, VerificationOutcome, interpret_verification

logger = logging.getLogger(__name__)

_LABEL_RE = re.compile(r"^(?!-)[a-z0-9-]{1,63}(?<!-)$")


class InvalidHostnameError(ValueError):
    """Raised when a submitted value cannot be used as a custom hostname."""


class DomainInUseError(Exception):
    """Raised when a domain is still referenced by checkouts or member areas."""

    def __init__(self, domain: Domain, report: "DomainUsageReport"):
        super().__init__(f"Domain {domain.domain} is still in use.")
        self.domain = domain
        self.report = report


@dataclass
class DomainUsageReport:
    checkouts: List[Dict] = field(default_factory=list)
    member_areas: List[Dict] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.checkouts and not self.member_areas

    def as_dict(self) -> Dict:
        return asdict(self)


@dataclass
class BatchVerificationResult:
    active: int = 0
    pending: int = 0
    error: int = 0
    skipped: int = 0

    def record(self, status: str) -> None:
        setattr(self, status, getattr(self, status) + 1)

    @property
    def total(self) -> int:
        return self.active + self.pending + self.error + self.skipped

    def as_dict(self) -> Dict[str, int]:
        data = asdict(self)
        data["total"] = self.total
        return data


def normalize_hostname(value: str) -> str:
    hostname = (value or "").strip().lower()
    if "://" in hostname:
        hostname = hostname.split("://", 1)[1]
    hostname = hostname.split("/", 1)[0].split("?", 1)[0]
    hostname = hostname.rsplit("@", 1)[-1].split(":", 1)[0].rstrip(".")

    if not hostname or len(hostname) > 253:
        raise InvalidHostnameError("Enter a valid hostname, e.g. checkout.example.com.")
    labels = hostname.split(".")
    if len(labels) < 2 or not all(_LABEL_RE.match(label) for label in labels):
        raise InvalidHostnameError("Enter a valid hostname, e.g. checkout.example.com.")
    if labels[-1].isdigit():
        raise InvalidHostnameError("IP addresses cannot be used as custom domains.")
    return hostname


class DomainService:
    """Registers, verifies and removes merchant custom domains."""

    def __init__(self, *, client: Optional[DomainApiClient] = None):
        self._client = client

    @property
    def client(self) -> DomainApiClient:
        if self._client is None:
            self._client = DomainApiClient.from_settings()
        return self._client

    # -- registration -----------------------------------------------------

    def register(
        self,
        *,
        user,
        hostname: str,
        usage: str = DomainUsage.CHECKOUT,
        type: str = DomainType.CNAME,
        checkout=None,
        slug: str = "",
    ) -> Domain:
        hostname = normalize_hostname(hostname)
        client = self.client
        domain = Domain.objects.create(
            user=user,
            domain=hostname,
            usage=usage,
            type=type,
            checkout=checkout,
            slug=slug or "",
            status=DomainStatus.PENDING,
        )
        try:
            client.add(hostname)
        except ExternalServiceError as exc:
            logger.warning("Hosting API rejected domain %s: %s", hostname, exc)
            domain.apply_status(DomainStatus.ERROR)
        return domain

    # -- verification -----------------------------------------------------

    def fetch_outcome(self, hostname: str) -> VerificationOutcome:
        """One round trip to the hosting API. Never touches the database."""
        try:
            payload = self.client.verify(hostname)
        except ExternalServiceError as exc:
            return VerificationFailed(str(exc))
        return interpret_verification(payload, hostname)

    def reconcile(self, domain: Domain, outcome: VerificationOutcome) -> bool:
        previous = domain.status
        changed = domain.apply_status(outcome.status)
        if changed:
            logger.info("Domain %s moved from %s to %s", domain.domain, previous, domain.status)
        if isinstance(outcome, VerificationFailed):
            logger.warning("Verification failed for domain %s: %s", domain.domain, outcome.message)
        return changed

    def verify(self, domain: Domain) -> Optional[List[DnsRecord]]:
        """
        Check ``domain`` against the hosting API and persist the resulting status.

        Returns the DNS records the merchant has to configure, or ``None`` when
        the check itself failed.
        """
        outcome = self.fetch_outcome(domain.domain)
        self.reconcile(domain, outcome)
        if isinstance(outcome, VerificationFailed):
            return None
        return outcome.records

    def verify_pending(
        self,
        *,
        user=None,
        max_workers: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> BatchVerificationResult:
        """
        Verify every pending domain once.

        HTTP calls run on a bounded thread pool; status writes happen on the
        calling thread. Setting ``cancel_event`` skips every check that has
        not started yet.
        """
        queryset = Domain.objects.filter(status=DomainStatus.PENDING)
        if user is not None:
            queryset = queryset.filter(user=user)
        domains = list(queryset)

        result = BatchVerificationResult()
        if not domains:
            return result

        cancel_event = cancel_event or threading.Event()
        limit = max_workers or int(getattr(settings, "DOMAIN_VERIFY_MAX_WORKERS", 4))
        workers = max(1, min(limit, len(domains)))
        client = self.client

        def check(hostname: str) -> Optional[VerificationOutcome]:
            if cancel_event.is_set():
                return None
            return self.fetch_outcome(hostname)

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="domain-verify") as executor:
            futures = {executor.submit(check, domain.domain): domain for domain in domains}
            for future in as_completed(futures):
                domain = futures[future]
                outcome = future.result()
                if outcome is None:
                    result.skipped += 1
                    continue
                self.reconcile(domain, outcome)
                result.record(domain.status)

        logger.info(
            "Pending domain verification finished via %s: %s",
            client.base_url,
            result.as_dict(),
        )
        return result

    # -- removal ----------------------------------------------------------

    def check_usage(self, domain: Domain) -> DomainUsageReport:
        return DomainUsageReport(
            checkouts=[{"id": c.id, "name": c.name} for c in domain.checkouts.order_by("name")],
            member_areas=[{"id": m.id, "name": m.name} for m in domain.member_areas.order_by("name")],
        )

    def delete(self, domain: Domain) -> None:
        report = self.check_usage(domain)
        if not report.is_empty:
            raise DomainInUseError(domain, report)

        try:
            self.client.remove(domain.domain)
        except ExternalServiceError as exc:
            logger.warning("Hosting API could not remove domain %s: %s", domain.domain, exc)

        with transaction.atomic():
            domain.delete()
        logger.info("Domain %s deleted", domain.domain)
