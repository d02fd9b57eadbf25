from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import CampaignNameMappingViewSet, CampaignRecordViewSet, DashboardViewSet

router = DefaultRouter()
router.register(r'dashboards', DashboardViewSet, basename='dashboard')
router.register(r'campaign-records', CampaignRecordViewSet, basename='campaign-record')
router.register(r'campaign-name-mappings', CampaignNameMappingViewSet, basename='campaign-name-mapping')

urlpatterns = [
    path('', include(router.urls)),
]
