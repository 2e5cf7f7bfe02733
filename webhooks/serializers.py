from rest_framework import serializers

from .events import EVENT_IDS
from .models import WebhookConfig, WebhookLog
from .services import preview_body


class HeaderSerializer(serializers.Serializer):
    key = serializers.CharField(max_length=255, allow_blank=True)
    value = serializers.CharField(max_length=2000, allow_blank=True)


class WebhookConfigSerializer(serializers.ModelSerializer):
    headers = serializers.ListField(child=HeaderSerializer(), required=False)
    events = serializers.ListField(child=serializers.CharField(max_length=120), required=False)

    class Meta:
        model = WebhookConfig
        fields = [
            "id",
            "name",
            "description",
            "url",
            "method",
            "headers",
            "events",
            "secret",
            "active",
            "last_fired_at",
            "last_status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ("id", "last_fired_at", "last_status", "created_at", "updated_at")
        extra_kwargs = {"secret": {"write_only": True, "required": False}}

    def validate_headers(self, value):
        # Rows with an empty key are dropped.
        return [dict(item) for item in value if item.get("key", "").strip()]

    def validate_events(self, value):
        unknown = sorted(set(value) - EVENT_IDS)
        if unknown:
            raise serializers.ValidationError(f"Unknown events: {', '.join(unknown)}")
        return list(dict.fromkeys(value))


class WebhookLogSerializer(serializers.ModelSerializer):
    success = serializers.BooleanField(read_only=True)
    webhook_name = serializers.CharField(source="webhook.name", read_only=True, default=None)

    class Meta:
        model = WebhookLog
        fields = [
            "id",
            "webhook",
            "webhook_name",
            "direction",
            "event",
            "payload",
            "response_status",
            "response_body",
            "duration_ms",
            "success",
            "created_at",
        ]
        read_only_fields = fields


class WebhookTestSerializer(serializers.Serializer):
    event = serializers.ChoiceField(choices=sorted(EVENT_IDS), required=False)


def delivery_summary(log: WebhookLog) -> dict:
    return {
        "success": log.success,
        "status": log.response_status,
        "body": preview_body(log.response_body),
        "duration_ms": log.duration_ms,
        "log": WebhookLogSerializer(log).data,
    }
