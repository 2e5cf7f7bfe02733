from rest_framework.routers import DefaultRouter

from .views import (
    AccessGrantViewSet,
    ContentViewSet,
    LessonViewSet,
    MemberAreaViewSet,
    ModuleViewSet,
    TrackItemViewSet,
    TrackViewSet,
)

router = DefaultRouter()
router.register(r"areas", MemberAreaViewSet, basename="member-area")
router.register(r"grants", AccessGrantViewSet, basename="access-grant")
router.register(r"contents", ContentViewSet, basename="content")
router.register(r"modules", ModuleViewSet, basename="module")
router.register(r"lessons", LessonViewSet, basename="lesson")
router.register(r"tracks", TrackViewSet, basename="track")
router.register(r"track-items", TrackItemViewSet, basename="track-item")

urlpatterns = router.urls
