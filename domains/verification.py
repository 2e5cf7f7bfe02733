from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Union

from django.conf import settings

from .models import DomainStatus

logger = logging.getLogger(__name__)

RECORD_FIELDS = ("dnsRecords", "verificationChallenges", "verification")


@dataclass(frozen=True)
class DnsRecord:
    type: str
    name: str
    value: str

    def as_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class Verified:
    records: List[DnsRecord] = field(default_factory=list)

    status = DomainStatus.ACTIVE


@dataclass(frozen=True)
class Misconfigured:
    records: List[DnsRecord] = field(default_factory=list)
    verified: bool = False

    status = DomainStatus.PENDING


@dataclass(frozen=True)
class VerificationFailed:
    message: str = ""

    status = DomainStatus.ERROR


VerificationOutcome = Union[Verified, Misconfigured, VerificationFailed]


def fallback_records(hostname: str) -> List[DnsRecord]:
    """
    Records shown when the hosting API does not return any: a CNAME for the
    subdomain part of ``hostname`` and an A record for the apex.
    """
    cname_target = getattr(settings, "DOMAIN_FALLBACK_CNAME_TARGET", "cname.vercel-dns.com")
    a_record = getattr(settings, "DOMAIN_FALLBACK_A_RECORD", "76.76.21.21")

    labels = [label for label in (hostname or "").split(".") if label]
    host = ".".join(labels[:-2]) if len(labels) > 2 else "www"
    return [
        DnsRecord(type="CNAME", name=host, value=cname_target),
        DnsRecord(type="A", name="@", value=a_record),
    ]


def extract_records(payload: Dict[str, Any]) -> List[DnsRecord]:
    for key in RECORD_FIELDS:
        items = payload.get(key)
        if not isinstance(items, list):
            continue
        records = [record for record in (_parse_record(item) for item in items) if record is not None]
        if records:
            return records
    return []


def _parse_record(item: Any) -> Optional[DnsRecord]:
    if not isinstance(item, dict):
        return None
    record_type = str(item.get("type") or "").strip().upper()
    value = str(item.get("value") or "").strip()
    if not record_type or not value:
        logger.debug("Ignoring incomplete DNS record from verification payload: %s", item)
        return None
    name = str(item.get("name") or item.get("domain") or "@").strip()
    return DnsRecord(type=record_type, name=name, value=value)


def interpret_verification(payload: Optional[Dict[str, Any]], hostname: str = "") -> VerificationOutcome:
    """
    Map a decoded verification response onto a verification outcome.

    ``verified`` true and ``misconfigured`` false means the domain is live.
    An ``error`` field means the check failed. Everything else, including a
    verified but misconfigured domain, is still waiting for DNS.
    """
    if not isinstance(payload, dict):
        return VerificationFailed("Empty verification response.")

    error = payload.get("error")
    if error:
        if isinstance(error, dict):
            message = str(error.get("message") or error.get("code") or "Verification failed.")
        else:
            message = str(error)
        return VerificationFailed(message)

    records = extract_records(payload) or fallback_records(hostname)
    verified = payload.get("verified") is True
    misconfigured = bool(payload.get("misconfigured"))

    if verified and not misconfigured:
        return Verified(records=records)
    return Misconfigured(records=records, verified=verified)
