from django.conf import settings
from django.db import models


class MetaReport(models.Model):
    """Row of the externally fed Meta Ads reporting table, keyed by ad account."""

    class Meta:
        indexes = [
            models.Index(fields=['account_id', 'report_type'], name='meta_report_account_type_idx'),
        ]
        ordering = ['-date_start', 'campaign_name']

    account_id = models.CharField(max_length=64, db_index=True)
    campaign_name = models.CharField(max_length=255)
    report_type = models.CharField(max_length=10, blank=True)
    reach = models.BigIntegerField(default=0)
    impressions = models.BigIntegerField(default=0)
    link_clicks = models.BigIntegerField(default=0)
    conversations_started = models.BigIntegerField(default=0)
    amount_spent = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    date_start = models.DateField(null=True, blank=True)
    date_end = models.DateField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)


class AdAccountMapping(models.Model):
    account_id = models.CharField(max_length=64, unique=True)
    client = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='ad_accounts')
    account_name = models.CharField(max_length=150, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.account_name or self.account_id
