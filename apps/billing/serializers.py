from decimal import Decimal

from rest_framework import serializers
from apps.dashboards.serializers import ManagedClientField
from .models import PaymentRequest, Recharge


class PaymentRequestSerializer(serializers.ModelSerializer):
    client = ManagedClientField()
    client_name = serializers.CharField(source='client.full_name', read_only=True)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))

    class Meta:
        model = PaymentRequest
        fields = ('id', 'client', 'client_name', 'created_by', 'amount', 'pix_code', 'message',
                  'status', 'client_confirmed_at', 'created_at', 'updated_at')
        read_only_fields = ('created_by', 'client_confirmed_at', 'created_at', 'updated_at')


class RechargeSerializer(serializers.ModelSerializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))

    class Meta:
        model = Recharge
        fields = ('id', 'client', 'amount', 'payment_method', 'status', 'transaction_id',
                  'processed_at', 'created_at')
        read_only_fields = ('client', 'status', 'transaction_id', 'processed_at', 'created_at')


class RechargeDecisionSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[Recharge.STATUS_APPROVED, Recharge.STATUS_REJECTED])
    transaction_id = serializers.CharField(max_length=100, required=False, allow_blank=True)
