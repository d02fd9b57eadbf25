from django.conf import settings
from django.db import models


class StrategyDocument(models.Model):
    """Strategy PDF shared with a client; the file itself lives in object storage."""

    client = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='strategies')
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    file_name = models.CharField(max_length=255)
    file_size = models.PositiveIntegerField(default=0)
    file_path = models.CharField(max_length=500, unique=True)
    uploaded_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True,
                                    related_name='uploaded_strategies')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return self.title
