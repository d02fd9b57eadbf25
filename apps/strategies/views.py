import logging
import time

from django.db import DatabaseError
from google.api_core.exceptions import GoogleAPIError
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response

from apps.accounts.permissions import IsStaffOrReadOnly
from apps.notifications.services import notify
from .models import StrategyDocument
from .serializers import PDF_CONTENT_TYPE, StrategyDocumentSerializer, StrategyUploadSerializer
from .storage import ObjectStorage

logger = logging.getLogger(__name__)


class StrategyDocumentViewSet(mixins.ListModelMixin,
                              mixins.RetrieveModelMixin,
                              mixins.CreateModelMixin,
                              mixins.DestroyModelMixin,
                              viewsets.GenericViewSet):
    permission_classes = [IsStaffOrReadOnly]
    serializer_class = StrategyDocumentSerializer
    parser_classes = [MultiPartParser, FormParser]

    def get_queryset(self):
        user = self.request.user
        queryset = StrategyDocument.objects.select_related('client')
        if user.is_staff_member:
            queryset = queryset.filter(client__in=user.visible_clients())
            client_id = self.request.query_params.get('client')
            if client_id:
                queryset = queryset.filter(client_id=client_id)
            return queryset
        return queryset.filter(client=user)

    def create(self, request, *args, **kwargs):
        serializer = StrategyUploadSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        upload = data['file']
        client = data['client']

        blob_name = f"{client.pk}/{int(time.time() * 1000)}.pdf"
        storage = ObjectStorage.for_strategies()
        try:
            storage.upload(upload.read(), blob_name, content_type=PDF_CONTENT_TYPE)
        except Exception as e:
            logger.error(f"Strategy upload failed for client {client.pk}: {e}")
            return Response({'error': 'File upload failed'}, status=status.HTTP_502_BAD_GATEWAY)

        try:
            document = StrategyDocument.objects.create(
                client=client,
                title=data['title'],
                description=data['description'],
                file_name=upload.name,
                file_size=upload.size,
                file_path=blob_name,
                uploaded_by=request.user,
            )
        except DatabaseError:
            # Do not leave an orphan blob behind
            storage.delete(blob_name)
            raise

        logger.info(f"Strategy {document.id} uploaded for client {client.pk} by {request.user.pk}")
        notify(
            client,
            'Nova estratégia disponível',
            f'A estratégia "{document.title}" foi adicionada à sua conta.',
            type='strategy',
            action_url='/strategies',
        )
        return Response(StrategyDocumentSerializer(document).data, status=status.HTTP_201_CREATED)

    def destroy(self, request, *args, **kwargs):
        document = self.get_object()
        try:
            ObjectStorage.for_strategies().delete(document.file_path)
        except GoogleAPIError as e:
            logger.error(f"Could not delete blob of strategy {document.id}: {e}")
            return Response({'error': 'File deletion failed'}, status=status.HTTP_502_BAD_GATEWAY)

        logger.info(f"Strategy {document.id} deleted by {request.user.pk}")
        document.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['get'])
    def download(self, request, pk=None):
        document = self.get_object()
        try:
            url = ObjectStorage.for_strategies().signed_url(document.file_path, filename=document.file_name)
        except Exception as e:
            logger.error(f"Could not sign download of strategy {document.id}: {e}")
            return Response({'error': 'Download link unavailable'}, status=status.HTTP_502_BAD_GATEWAY)
        return Response({'url': url, 'file_name': document.file_name})
