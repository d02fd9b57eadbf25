# apps/strategies/storage.py
import logging
from datetime import timedelta

from django.conf import settings
from google.api_core import exceptions as gcs_exceptions
from google.cloud import storage
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

logger = logging.getLogger(__name__)

# Transient GCS failures worth another attempt
RETRYABLE = (
    gcs_exceptions.ServiceUnavailable,
    gcs_exceptions.TooManyRequests,
    gcs_exceptions.InternalServerError,
    ConnectionError,
)

storage_retry = retry(
    retry=retry_if_exception_type(RETRYABLE),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=8),
    reraise=True,
)


class ObjectStorage:
    """Thin wrapper over one Google Cloud Storage bucket."""

    def __init__(self, bucket_name, client=None):
        self.client = client or storage.Client(project=settings.GCP_PROJECT_ID)
        self.bucket_name = bucket_name

    @classmethod
    def for_strategies(cls):
        return cls(settings.STRATEGY_BUCKET)

    @classmethod
    def for_avatars(cls):
        return cls(settings.AVATAR_BUCKET)

    @storage_retry
    def upload(self, file_data, blob_name, content_type=None, public=False):
        bucket = self.client.bucket(self.bucket_name)
        blob = bucket.blob(blob_name)

        blob.upload_from_string(file_data, content_type=content_type)
        if public:
            blob.make_public()

        logger.info(f"Uploaded {blob_name} to bucket {self.bucket_name}")
        return blob.public_url

    @storage_retry
    def delete(self, blob_name):
        bucket = self.client.bucket(self.bucket_name)
        try:
            bucket.blob(blob_name).delete()
        except gcs_exceptions.NotFound:
            logger.warning(f"Blob {blob_name} already missing from {self.bucket_name}")

    def signed_url(self, blob_name, filename=None, expiration=None):
        bucket = self.client.bucket(self.bucket_name)
        blob = bucket.blob(blob_name)
        disposition = f'attachment; filename="{filename}"' if filename else None

        return blob.generate_signed_url(
            version="v4",
            expiration=timedelta(seconds=expiration or settings.SIGNED_URL_EXPIRATION),
            method="GET",
            response_disposition=disposition,
        )
