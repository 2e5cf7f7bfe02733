from rest_framework import serializers

from domains.models import Domain, DomainUsage

from .models import Checkout, Gateway, Order, OrderStatus, Product


class OwnedRelatedField(serializers.PrimaryKeyRelatedField):
    """Primary key field limited to rows owned by the requesting user."""

    def __init__(self, owner_field="user", **kwargs):
        self.owner_field = owner_field
        super().__init__(**kwargs)

    def get_queryset(self):
        queryset = super().get_queryset()
        request = self.context.get("request")
        if request is None or not request.user.is_authenticated:
            return queryset.none()
        return queryset.filter(**{self.owner_field: request.user})


class ProductSerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = ["id", "name", "description", "price", "active", "created_at", "updated_at"]
        read_only_fields = ("id", "created_at", "updated_at")

    def validate_price(self, value):
        if value < 0:
            raise serializers.ValidationError("Price cannot be negative.")
        return value


class GatewaySerializer(serializers.ModelSerializer):
    class Meta:
        model = Gateway
        fields = ["id", "provider", "public_key", "private_key", "webhook_secret", "active", "created_at"]
        read_only_fields = ("id", "created_at")
        extra_kwargs = {
            "private_key": {"write_only": True},
            "webhook_secret": {"write_only": True},
        }


class CheckoutSerializer(serializers.ModelSerializer):
    product = OwnedRelatedField(queryset=Product.objects.all())
    gateway = OwnedRelatedField(queryset=Gateway.objects.all())
    domain = OwnedRelatedField(queryset=Domain.objects.all(), required=False, allow_null=True)
    domain_name = serializers.CharField(source="domain.domain", read_only=True, default=None)

    class Meta:
        model = Checkout
        fields = [
            "id",
            "name",
            "slug",
            "active",
            "product",
            "gateway",
            "domain",
            "domain_name",
            "config",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ("id", "created_at", "updated_at")
        extra_kwargs = {"slug": {"required": False}}

    def validate_slug(self, value):
        request = self.context["request"]
        taken = Checkout.objects.filter(user=request.user, slug=value)
        if self.instance is not None:
            taken = taken.exclude(pk=self.instance.pk)
        if taken.exists():
            raise serializers.ValidationError("You already have a checkout with this slug.")
        return value

    def validate_domain(self, domain):
        if domain is not None and domain.usage != DomainUsage.CHECKOUT:
            raise serializers.ValidationError("This domain is reserved for member areas or the system.")
        return domain


class OrderSerializer(serializers.ModelSerializer):
    checkout = OwnedRelatedField(queryset=Checkout.objects.all())

    class Meta:
        model = Order
        fields = [
            "id",
            "checkout",
            "customer_name",
            "customer_email",
            "customer_phone",
            "amount",
            "status",
            "payment_method",
            "paid_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ("id", "status", "paid_at", "created_at", "updated_at")


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)
