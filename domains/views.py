# domains/views.py

import logging

from django.db.models import ProtectedError
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from .models import Domain
from .serializers import DomainSerializer
from .services import DomainInUseError, DomainService, InvalidHostnameError

logger = logging.getLogger(__name__)


class DomainViewSet(viewsets.ModelViewSet):
    serializer_class = DomainSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return Domain.objects.filter(user=self.request.user)

    def get_service(self) -> DomainService:
        return DomainService()

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        validated = dict(serializer.validated_data)
        hostname = validated.pop("domain")

        try:
            domain = self.get_service().register(user=request.user, hostname=hostname, **validated)
        except InvalidHostnameError as exc:
            return Response({"domain": [str(exc)]}, status=status.HTTP_400_BAD_REQUEST)

        data = self.get_serializer(domain).data
        return Response(data, status=status.HTTP_201_CREATED, headers=self.get_success_headers(data))

    def destroy(self, request, *args, **kwargs):
        domain = self.get_object()
        try:
            self.get_service().delete(domain)
        except DomainInUseError as exc:
            return Response(
                {"detail": "Domain is still in use.", "usage": exc.report.as_dict()},
                status=status.HTTP_409_CONFLICT,
            )
        except ProtectedError:
            # Re-attached between the usage check and the delete.
            report = self.get_service().check_usage(domain)
            return Response(
                {"detail": "Domain is still in use.", "usage": report.as_dict()},
                status=status.HTTP_409_CONFLICT,
            )
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"])
    def verify(self, request, pk=None):
        domain = self.get_object()
        records = self.get_service().verify(domain)
        return Response(
            {
                "domain": self.get_serializer(domain).data,
                "verified": records is not None,
                "records": [record.as_dict() for record in records or []],
            }
        )

    @action(detail=True, methods=["get"])
    def usage(self, request, pk=None):
        domain = self.get_object()
        report = self.get_service().check_usage(domain)
        return Response({"in_use": not report.is_empty, **report.as_dict()})

    @action(detail=False, methods=["post"], url_path="verify-pending")
    def verify_pending(self, request):
        result = self.get_service().verify_pending(user=request.user)
        return Response(result.as_dict())
