# webhooks/views.py
from django.core.exceptions import ObjectDoesNotExist, ValidationError
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.response import Response

from .events import AVAILABLE_EVENTS
from .inbound import handle_incoming
from .models import WebhookConfig, WebhookLog
from .serializers import WebhookConfigSerializer, WebhookLogSerializer, WebhookTestSerializer, delivery_summary
from .services import WebhookDispatcher

LOG_LIST_LIMIT = 100


class WebhookConfigViewSet(viewsets.ModelViewSet):
    serializer_class = WebhookConfigSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return WebhookConfig.objects.filter(user=self.request.user)

    def perform_create(self, serializer):
        serializer.save(user=self.request.user)

    def get_dispatcher(self) -> WebhookDispatcher:
        return WebhookDispatcher()

    @action(detail=True, methods=["post"])
    def test(self, request, pk=None):
        config = self.get_object()
        serializer = WebhookTestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        log = self.get_dispatcher().test(config, serializer.validated_data.get("event"))
        return Response(delivery_summary(log))

    @action(detail=False, methods=["get"])
    def events(self, request):
        return Response([{"id": event_id, "label": label} for event_id, label in AVAILABLE_EVENTS])


class WebhookLogViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = WebhookLogSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        queryset = WebhookLog.objects.filter(user=self.request.user).select_related("webhook")
        direction = self.request.query_params.get("direction")
        if direction:
            queryset = queryset.filter(direction=direction)
        webhook_id = self.request.query_params.get("webhook")
        if webhook_id:
            queryset = queryset.filter(webhook_id=webhook_id)
        return queryset

    def list(self, request, *args, **kwargs):
        logs = self.filter_queryset(self.get_queryset())[:LOG_LIST_LIMIT]
        return Response(self.get_serializer(logs, many=True).data)


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated])
def incoming_webhook(request):
    if not isinstance(request.data, dict):
        return Response({"detail": "Expected a JSON object."}, status=status.HTTP_400_BAD_REQUEST)
    try:
        result = handle_incoming(request.user, dict(request.data))
    except ObjectDoesNotExist as exc:
        return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
    except ValidationError as exc:
        return Response({"detail": exc.messages}, status=status.HTTP_400_BAD_REQUEST)
    except (ValueError, TypeError) as exc:
        return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
    return Response(result, status=status.HTTP_200_OK)
