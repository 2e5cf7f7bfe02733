from django.contrib import admin
from django.urls import path, include
from drf_yasg import openapi
from drf_yasg.views import get_schema_view
from rest_framework import permissions

schema_view = get_schema_view(
    openapi.Info(
        title="Super Checkout API",
        default_version="v1",
        description="Checkouts, domaines personnalisés, zones membres et webhooks marchands.",
    ),
    public=True,
    permission_classes=(permissions.AllowAny,),
)

urlpatterns = [
    path('admin/', admin.site.urls),

    # Authentification, comptes et licences
    path("api/auth/", include(("accounts.urls", "accounts"), namespace="accounts")),

    # Produits, gateways, checkouts et commandes
    path("api/checkouts/", include("checkouts.urls")),

    # Domaines personnalisés
    path("api/", include("domains.urls")),

    # Zones membres
    path("api/members/", include("members.urls")),

    # Webhooks sortants et entrants
    path("api/webhooks/", include("webhooks.urls")),

    # Documentation
    path("api/docs/", schema_view.with_ui("swagger", cache_timeout=0), name="api-docs"),
]
