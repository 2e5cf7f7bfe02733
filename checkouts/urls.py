# checkouts/urls.py

from rest_framework.routers import DefaultRouter

from .views import CheckoutViewSet, GatewayViewSet, OrderViewSet, ProductViewSet

router = DefaultRouter()
router.register(r"products", ProductViewSet, basename="product")
router.register(r"gateways", GatewayViewSet, basename="gateway")
router.register(r"checkouts", CheckoutViewSet, basename="checkout")
router.register(r"orders", OrderViewSet, basename="order")

urlpatterns = router.urls
