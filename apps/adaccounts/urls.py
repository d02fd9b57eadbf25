from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import AdAccountMappingViewSet, MetaReportViewSet

router = DefaultRouter()
router.register(r'ad-account-mappings', AdAccountMappingViewSet, basename='ad-account-mapping')
router.register(r'meta-reports', MetaReportViewSet, basename='meta-report')

urlpatterns = [
    path('', include(router.urls)),
]
