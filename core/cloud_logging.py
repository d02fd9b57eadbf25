from django.conf import settings
from google.cloud import logging as cloud_logging
from google.cloud.logging.handlers import CloudLoggingHandler


def cloud_logging_handler(name='lunaris-portal'):
    """LOGGING handler factory; CloudLoggingHandler needs a client instance."""
    client = cloud_logging.Client(project=settings.GCP_PROJECT_ID)
    return CloudLoggingHandler(client, name=name)
