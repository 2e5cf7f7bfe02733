# ----------------------------------
# SERIALIZERS - accounts/serializers.py
# ----------------------------------
from rest_framework import serializers
from django.contrib.auth import get_user_model
from rest_framework.validators import UniqueValidator
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError

from domains.services import InvalidHostnameError, normalize_hostname

from .models import License

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "email", "username", "company_name", "date_joined"]
        read_only_fields = ("id", "email", "date_joined")


class RegisterSerializer(serializers.ModelSerializer):
    email = serializers.EmailField(
        validators=[UniqueValidator(queryset=User.objects.all())]
    )

    class Meta:
        model = User
        fields = ("email", "password", "username", "company_name")
        extra_kwargs = {
            "password": {"write_only": True},
            "username": {"required": False, "allow_blank": True},
            "company_name": {"required": False},
        }

    def validate_password(self, value):
        try:
            validate_password(value)
        except DjangoValidationError as exc:
            raise serializers.ValidationError(exc.messages)
        return value

    def create(self, validated_data):
        email = validated_data["email"].lower()
        username = validated_data.get("username") or email
        return User.objects.create_user(
            username=username,
            email=email,
            password=validated_data["password"],
            company_name=validated_data.get("company_name", ""),
        )


class LicenseValidationSerializer(serializers.Serializer):
    key = serializers.CharField(max_length=255)
    domain = serializers.CharField(max_length=253)


class LicenseSerializer(serializers.ModelSerializer):
    class Meta:
        model = License
        fields = [
            "id",
            "key",
            "client_email",
            "client_name",
            "plan",
            "status",
            "allowed_domain",
            "activated_at",
            "created_at",
        ]
        read_only_fields = ("id", "key", "activated_at", "created_at")

    def validate_client_email(self, value):
        return value.lower()

    def validate_allowed_domain(self, value):
        if not value:
            return value
        try:
            return normalize_hostname(value)
        except InvalidHostnameError as exc:
            raise serializers.ValidationError(str(exc))


class LicenseActivationSerializer(serializers.Serializer):
    domain = serializers.CharField(max_length=253)

    def validate_domain(self, value):
        try:
            return normalize_hostname(value)
        except InvalidHostnameError as exc:
            raise serializers.ValidationError(str(exc))
