from django.contrib import admin
from .models import WebhookConfig, WebhookLog


@admin.register(WebhookConfig)
class WebhookConfigAdmin(admin.ModelAdmin):
    list_display = ("name", "user", "method", "url", "active", "last_status", "last_fired_at")
    list_filter = ("method", "active")
    search_fields = ("name", "url", "user__email")
    readonly_fields = ("last_fired_at", "last_status", "created_at", "updated_at")


@admin.register(WebhookLog)
class WebhookLogAdmin(admin.ModelAdmin):
    list_display = ("event", "direction", "webhook", "response_status", "duration_ms", "created_at")
    list_filter = ("direction", "event")
    search_fields = ("event", "webhook__name", "user__email")
    readonly_fields = ("payload", "response_status", "response_body", "duration_ms", "created_at")
    ordering = ("-created_at",)
