# domains/serializers.py

from rest_framework import serializers

from .models import Domain
from .services import InvalidHostnameError, normalize_hostname


class DomainSerializer(serializers.ModelSerializer):
    class Meta:
        model = Domain
        fields = [
            "id",
            "domain",
            "status",
            "usage",
            "type",
            "checkout",
            "slug",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "status", "created_at", "updated_at"]
        extra_kwargs = {"domain": {"validators": []}}

    def validate_domain(self, value: str) -> str:
        try:
            hostname = normalize_hostname(value)
        except InvalidHostnameError as exc:
            raise serializers.ValidationError(str(exc))

        if self.instance is not None:
            if hostname != self.instance.domain:
                raise serializers.ValidationError("The hostname cannot be changed. Remove the domain and add it again.")
            return hostname

        if Domain.objects.filter(domain=hostname).exists():
            raise serializers.ValidationError("This domain is already registered.")
        return hostname

    def validate_checkout(self, checkout):
        request = self.context.get("request")
        if checkout is not None and request is not None and checkout.user_id != request.user.id:
            raise serializers.ValidationError("Checkout not found.")
        return checkout
