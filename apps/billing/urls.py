from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import PaymentRequestViewSet, RechargeViewSet

router = DefaultRouter()
router.register(r'payment-requests', PaymentRequestViewSet, basename='payment-request')
router.register(r'recharges', RechargeViewSet, basename='recharge')

urlpatterns = [
    path('', include(router.urls)),
]
