import logging

from django.utils import timezone
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.accounts.permissions import IsStaffMember, IsStaffOrReadOnly
from apps.notifications.services import notify
from .models import PaymentRequest, Recharge
from .serializers import PaymentRequestSerializer, RechargeDecisionSerializer, RechargeSerializer

logger = logging.getLogger(__name__)


class PaymentRequestViewSet(viewsets.ModelViewSet):
    """Staff issue PIX charges; clients see their own and confirm they paid."""

    permission_classes = [IsStaffOrReadOnly]
    serializer_class = PaymentRequestSerializer

    def get_queryset(self):
        user = self.request.user
        queryset = PaymentRequest.objects.select_related('client')
        if user.is_staff_member:
            return queryset.filter(client__in=user.visible_clients())
        return queryset.filter(client=user)

    def perform_create(self, serializer):
        payment_request = serializer.save(created_by=self.request.user)
        logger.info(f"Payment request {payment_request.id} issued to client {payment_request.client_id}")
        notify(
            payment_request.client,
            'Nova solicitação de pagamento',
            f'Você recebeu uma cobrança PIX de R$ {payment_request.amount}.',
            type='payment',
            action_url='/payments',
        )

    @action(detail=True, methods=['post'], permission_classes=[IsAuthenticated])
    def confirm(self, request, pk=None):
        payment_request = self.get_object()
        if payment_request.client_id != request.user.pk:
            return Response({'error': 'Only the billed client can confirm a payment'},
                            status=status.HTTP_403_FORBIDDEN)
        if payment_request.status != PaymentRequest.STATUS_PENDING:
            return Response({'error': f'Payment request is already {payment_request.status}'},
                            status=status.HTTP_400_BAD_REQUEST)
        if payment_request.client_confirmed_at is not None:
            return Response({'error': 'Payment was already confirmed'}, status=status.HTTP_400_BAD_REQUEST)

        payment_request.client_confirmed_at = timezone.now()
        payment_request.save(update_fields=['client_confirmed_at', 'updated_at'])
        logger.info(f"Client {request.user.pk} confirmed payment request {payment_request.id}")

        if payment_request.created_by is not None:
            notify(
                payment_request.created_by,
                'Pagamento informado',
                f'{request.user.full_name or request.user.email} informou o pagamento de R$ {payment_request.amount}.',
                type='payment',
                action_url='/admin/payments',
            )
        return Response(self.get_serializer(payment_request).data)


class RechargeViewSet(mixins.ListModelMixin,
                      mixins.CreateModelMixin,
                      mixins.RetrieveModelMixin,
                      viewsets.GenericViewSet):
    """Clients request balance top-ups; staff approve or reject them."""

    serializer_class = RechargeSerializer

    def get_queryset(self):
        user = self.request.user
        queryset = Recharge.objects.select_related('client')
        if user.is_staff_member:
            queryset = queryset.filter(client__in=user.visible_clients())
            status_filter = self.request.query_params.get('status')
            if status_filter:
                queryset = queryset.filter(status=status_filter)
            return queryset
        return queryset.filter(client=user)

    def perform_create(self, serializer):
        recharge = serializer.save(client=self.request.user)
        logger.info(f"Recharge {recharge.id} of {recharge.amount} requested by client {recharge.client_id}")

    @action(detail=True, methods=['post'], permission_classes=[IsStaffMember])
    def process(self, request, pk=None):
        recharge = self.get_object()
        if recharge.status != Recharge.STATUS_PENDING:
            return Response({'error': f'Recharge is already {recharge.status}'},
                            status=status.HTTP_400_BAD_REQUEST)

        serializer = RechargeDecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        recharge.status = serializer.validated_data['status']
        recharge.transaction_id = serializer.validated_data.get('transaction_id', '')
        recharge.processed_at = timezone.now()
        recharge.save(update_fields=['status', 'transaction_id', 'processed_at'])
        logger.info(f"Recharge {recharge.id} {recharge.status} by {request.user.pk}")

        approved = recharge.status == Recharge.STATUS_APPROVED
        notify(
            recharge.client,
            'Recarga aprovada' if approved else 'Recarga recusada',
            f'Sua recarga de R$ {recharge.amount} foi {"aprovada" if approved else "recusada"}.',
            type='recharge',
            action_url='/recharges',
        )
        return Response(RechargeSerializer(recharge).data)
