"""
URL configuration for the Lunaris portal.

REST endpoints live under /api/v1/, the customer GraphQL read API under
/graphql/ and the OpenAPI schema under /api/schema/.
"""

from django.contrib import admin
from django.urls import path
from django.urls import include
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from strawberry.django.views import GraphQLView
from core.graphql.schema import schema
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView, SpectacularRedocView
from apps.dashboards.views import sync_google_sheets


def home_view(request):
    return JsonResponse({
        "message": "Lunaris Portal API",
        "status": "running",
        "endpoints": {
            "admin": "/admin/",
            "api": "/api/v1/",
            "graphql": "/graphql/",
            "docs": "/api/docs/",
            "schema": "/api/schema/"
        }
    })


urlpatterns = [
    path("", home_view, name="home"),
    path("admin/", admin.site.urls),
    path("api/v1/auth/", include("apps.accounts.urls")),
    path("api/v1/sync-google-sheets/", sync_google_sheets, name="sync_google_sheets"),
    path("api/v1/", include("apps.dashboards.urls")),
    path("api/v1/", include("apps.adaccounts.urls")),
    path("api/v1/", include("apps.billing.urls")),
    path("api/v1/", include("apps.strategies.urls")),
    path("api/v1/", include("apps.notifications.urls")),
    path("graphql/", csrf_exempt(GraphQLView.as_view(schema=schema, graphql_ide="graphiql"))),
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('api/redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),
]
