from rest_framework import permissions, viewsets

from checkouts.views import OwnedModelViewSet

from .models import AccessGrant, Content, Lesson, MemberArea, Module, Track, TrackItem
from .serializers import (
    AccessGrantSerializer,
    ContentSerializer,
    LessonSerializer,
    MemberAreaSerializer,
    ModuleSerializer,
    TrackItemSerializer,
    TrackSerializer,
)


class MemberAreaViewSet(OwnedModelViewSet):
    model = MemberArea
    serializer_class = MemberAreaSerializer


class NestedOwnedViewSet(viewsets.ModelViewSet):
    """
    Rows owned through a parent chain, e.g. ``module__content__member_area__user``.

    ``parent_param`` names the query parameter (and the FK) used to narrow the
    listing to one parent.
    """

    permission_classes = [permissions.IsAuthenticated]
    model = None
    owner_field = None
    parent_param = None

    def get_queryset(self):
        queryset = self.model.objects.filter(**{self.owner_field: self.request.user})
        parent_id = self.request.query_params.get(self.parent_param)
        if parent_id:
            queryset = queryset.filter(**{f"{self.parent_param}_id": parent_id})
        return queryset


class AccessGrantViewSet(NestedOwnedViewSet):
    model = AccessGrant
    serializer_class = AccessGrantSerializer
    owner_field = "member_area__user"
    parent_param = "member_area"


class ContentViewSet(NestedOwnedViewSet):
    model = Content
    serializer_class = ContentSerializer
    owner_field = "member_area__user"
    parent_param = "member_area"

    def get_queryset(self):
        return super().get_queryset().prefetch_related("products")


class ModuleViewSet(NestedOwnedViewSet):
    model = Module
    serializer_class = ModuleSerializer
    owner_field = "content__member_area__user"
    parent_param = "content"


class LessonViewSet(NestedOwnedViewSet):
    model = Lesson
    serializer_class = LessonSerializer
    owner_field = "module__content__member_area__user"
    parent_param = "module"


class TrackViewSet(NestedOwnedViewSet):
    model = Track
    serializer_class = TrackSerializer
    owner_field = "member_area__user"
    parent_param = "member_area"


class TrackItemViewSet(NestedOwnedViewSet):
    model = TrackItem
    serializer_class = TrackItemSerializer
    owner_field = "track__member_area__user"
    parent_param = "track"
