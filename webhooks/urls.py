# webhooks/urls.py
from django.urls import path
from rest_framework.routers import DefaultRouter

from .views import WebhookConfigViewSet, WebhookLogViewSet, incoming_webhook

router = DefaultRouter()
router.register(r"configs", WebhookConfigViewSet, basename="webhook-config")
router.register(r"logs", WebhookLogViewSet, basename="webhook-log")

urlpatterns = [
    path('incoming/', incoming_webhook, name='incoming_webhook'),
] + router.urls
