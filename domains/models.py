# domains/models.py

from django.conf import settings
from django.db import models


class DomainStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    ACTIVE = "active", "Active"
    ERROR = "error", "Error"


class DomainUsage(models.TextChoices):
    CHECKOUT = "checkout", "Checkout"
    MEMBER_AREA = "member_area", "Member area"
    SYSTEM = "system", "System"


class DomainType(models.TextChoices):
    CNAME = "cname", "CNAME"
    REDIRECT = "redirect", "Redirect"


class Domain(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="domains")
    domain = models.CharField(max_length=253, unique=True)
    status = models.CharField(max_length=10, choices=DomainStatus.choices, default=DomainStatus.PENDING)
    usage = models.CharField(max_length=20, choices=DomainUsage.choices, default=DomainUsage.CHECKOUT)
    type = models.CharField(max_length=10, choices=DomainType.choices, default=DomainType.CNAME)
    checkout = models.ForeignKey(
        "checkouts.Checkout",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="default_domains",
    )
    slug = models.SlugField(max_length=120, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-created_at",)
        indexes = [
            models.Index(fields=("user", "status"), name="domain_user_status_idx"),
        ]

    def __str__(self):
        return f"{self.domain} ({self.status})"

    def apply_status(self, status: str) -> bool:
        """Persist ``status`` only when it differs from the stored value."""
        if self.status == status:
            return False
        self.status = status
        self.save(update_fields=["status", "updated_at"])
        return True
