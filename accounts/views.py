# accounts/views.py

import logging

from django.contrib.auth import authenticate, get_user_model
from rest_framework import generics, status, viewsets
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from .licensing import validate_license
from .models import License, LicenseState
from .serializers import (
    LicenseActivationSerializer,
    LicenseSerializer,
    LicenseValidationSerializer,
    RegisterSerializer,
    UserSerializer,
)

logger = logging.getLogger(__name__)
User = get_user_model()


def _token_pair(user):
    refresh = RefreshToken.for_user(user)
    return {"access": str(refresh.access_token), "refresh": str(refresh)}


class RegisterView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        user = serializer.save()
        logger.info("Registered merchant %s", user.pk)
        return Response(
            {"user": UserSerializer(user).data, **_token_pair(user)},
            status=status.HTTP_201_CREATED,
        )


class LoginView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        email = (request.data.get("email") or "").lower()
        password = request.data.get("password")

        if not email or not password:
            return Response(
                {"detail": "Email and password required"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        user = authenticate(request, username=email, password=password)
        if not user:
            return Response(
                {"detail": "Invalid credentials"},
                status=status.HTTP_401_UNAUTHORIZED,
            )

        return Response({"user": UserSerializer(user).data, **_token_pair(user)})


class MeView(generics.RetrieveUpdateAPIView):
    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated]

    def get_object(self):
        return self.request.user


class LogoutView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        refresh_token = request.data.get("refresh")
        if not refresh_token:
            return Response({"detail": "Refresh token required"}, status=status.HTTP_400_BAD_REQUEST)
        try:
            RefreshToken(refresh_token).blacklist()
        except TokenError:
            logger.warning("Logout with an invalid refresh token for user %s", request.user.pk)
            return Response({"detail": "Invalid refresh token"}, status=status.HTTP_400_BAD_REQUEST)
        return Response(status=status.HTTP_205_RESET_CONTENT)


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def license_validate(request):
    serializer = LicenseValidationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    result = validate_license(serializer.validated_data["key"], serializer.validated_data["domain"])
    return Response(result.as_dict())


class LicenseViewSet(viewsets.ModelViewSet):
    serializer_class = LicenseSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        queryset = License.objects.filter(user=self.request.user)
        license_status = self.request.query_params.get("status")
        if license_status:
            queryset = queryset.filter(status=license_status)
        return queryset

    def perform_create(self, serializer):
        issued = serializer.save(user=self.request.user)
        logger.info("Issued license %s to %s", issued.pk, issued.client_email)

    @action(detail=True, methods=["post"])
    def activate(self, request, pk=None):
        issued = self.get_object()
        if issued.status != LicenseState.ACTIVE:
            return Response(
                {"detail": f"License is {issued.status} and cannot be activated."},
                status=status.HTTP_409_CONFLICT,
            )
        serializer = LicenseActivationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        domain = serializer.validated_data["domain"]
        if issued.allowed_domain and issued.allowed_domain != domain:
            return Response(
                {"detail": f"License is bound to {issued.allowed_domain}."},
                status=status.HTTP_409_CONFLICT,
            )
        issued.activate(domain)
        return Response(self.get_serializer(issued).data)
