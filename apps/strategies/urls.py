from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import StrategyDocumentViewSet

router = DefaultRouter()
router.register(r'strategies', StrategyDocumentViewSet, basename='strategy')

urlpatterns = [
    path('', include(router.urls)),
]
