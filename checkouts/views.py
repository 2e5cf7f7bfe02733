# checkouts/views.py

from django.db.models import ProtectedError
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from .models import Checkout, Gateway, Order, Product
from .serializers import (
    CheckoutSerializer,
    GatewaySerializer,
    OrderSerializer,
    OrderStatusSerializer,
    ProductSerializer,
)
from .services import update_order_status


class OwnedModelViewSet(viewsets.ModelViewSet):
    """Rows are scoped to the requesting user and created on their behalf."""

    permission_classes = [permissions.IsAuthenticated]
    model = None

    def get_queryset(self):
        return self.model.objects.filter(user=self.request.user)

    def perform_create(self, serializer):
        serializer.save(user=self.request.user)

    def destroy(self, request, *args, **kwargs):
        try:
            return super().destroy(request, *args, **kwargs)
        except ProtectedError:
            return Response(
                {"detail": "This record is still referenced and cannot be deleted."},
                status=status.HTTP_409_CONFLICT,
            )


class ProductViewSet(OwnedModelViewSet):
    model = Product
    serializer_class = ProductSerializer


class GatewayViewSet(OwnedModelViewSet):
    model = Gateway
    serializer_class = GatewaySerializer


class CheckoutViewSet(OwnedModelViewSet):
    model = Checkout
    serializer_class = CheckoutSerializer

    def get_queryset(self):
        return super().get_queryset().select_related("product", "gateway", "domain")


class OrderViewSet(viewsets.ModelViewSet):
    serializer_class = OrderSerializer
    permission_classes = [permissions.IsAuthenticated]
    http_method_names = ["get", "post", "head", "options"]

    def get_queryset(self):
        queryset = Order.objects.filter(checkout__user=self.request.user).select_related("checkout__product")
        status_filter = self.request.query_params.get("status")
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        return queryset

    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request, pk=None):
        order = self.get_object()
        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        changed = update_order_status(order, serializer.validated_data["status"])
        return Response({"changed": changed, "order": OrderSerializer(order, context=self.get_serializer_context()).data})
