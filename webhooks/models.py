# webhooks/models.py
from django.conf import settings
from django.db import models
from django.utils import timezone


class WebhookMethod(models.TextChoices):
    POST = "POST", "POST"
    GET = "GET", "GET"
    PUT = "PUT", "PUT"
    PATCH = "PATCH", "PATCH"


class WebhookDirection(models.TextChoices):
    INCOMING = "incoming", "Incoming"
    OUTGOING = "outgoing", "Outgoing"


class WebhookConfig(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="webhooks")
    name = models.CharField(max_length=120)
    description = models.TextField(blank=True)
    url = models.URLField(max_length=500)
    method = models.CharField(max_length=8, choices=WebhookMethod.choices, default=WebhookMethod.POST)
    headers = models.JSONField(default=list, blank=True)
    events = models.JSONField(default=list, blank=True)
    secret = models.CharField(max_length=255, blank=True)
    active = models.BooleanField(default=True)
    last_fired_at = models.DateTimeField(null=True, blank=True)
    last_status = models.IntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-created_at",)

    def __str__(self):
        return f"{self.name} ({self.method} {self.url})"

    def header_map(self) -> dict:
        headers = {}
        for item in self.headers or []:
            key = str(item.get("key") or "").strip() if isinstance(item, dict) else ""
            if key:
                headers[key] = str(item.get("value") or "")
        return headers

    def subscribes_to(self, event: str) -> bool:
        return event in (self.events or [])

    def mark_fired(self, status_code: int):
        self.last_fired_at = timezone.now()
        self.last_status = status_code
        self.save(update_fields=["last_fired_at", "last_status", "updated_at"])


class WebhookLog(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="webhook_logs")
    webhook = models.ForeignKey(
        WebhookConfig,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="logs",
    )
    direction = models.CharField(max_length=10, choices=WebhookDirection.choices, default=WebhookDirection.OUTGOING)
    event = models.CharField(max_length=120)
    payload = models.JSONField(default=dict, blank=True)
    response_status = models.IntegerField(null=True, blank=True)
    response_body = models.TextField(blank=True)
    duration_ms = models.PositiveIntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"WebhookLog [{self.direction} {self.event}] @ {self.created_at}"

    @property
    def success(self) -> bool:
        return self.response_status is not None and 200 <= self.response_status < 300

    class Meta:
        ordering = ("-created_at",)
        indexes = [
            models.Index(fields=["user", "direction"], name="webhooklog_user_dir_idx"),
        ]
