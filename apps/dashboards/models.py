from django.conf import settings
from django.db import models


class Dashboard(models.Model):
    """A client's spreadsheet-backed campaign dashboard."""

    client = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='dashboards')
    name = models.CharField(max_length=150)
    sheet_url = models.URLField(max_length=500)
    # Spreadsheet tab gids; blank means the tab is not configured
    daily_tab = models.CharField(max_length=30, blank=True)
    weekly_tab = models.CharField(max_length=30, blank=True)
    monthly_tab = models.CharField(max_length=30, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='+',
    )
    last_synced_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return self.name

    @property
    def tabs(self):
        return {
            'daily': self.daily_tab,
            'weekly': self.weekly_tab,
            'monthly': self.monthly_tab,
        }


class CampaignRecord(models.Model):
    """One campaign row of one report period, replaced wholesale on every sync."""

    class Meta:
        indexes = [
            models.Index(fields=['dashboard', 'report_type'], name='record_dashboard_type_idx'),
            models.Index(fields=['client', 'report_type', 'period_start'], name='record_client_period_idx'),
        ]
        ordering = ['-period_start', 'campaign_name']

    REPORT_TYPE_CHOICES = [
        ('daily', 'Daily'),
        ('weekly', 'Weekly'),
        ('monthly', 'Monthly'),
    ]

    client = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='campaign_records')
    dashboard = models.ForeignKey(Dashboard, on_delete=models.CASCADE, related_name='records')
    campaign_name = models.CharField(max_length=255)
    reach = models.BigIntegerField(default=0)
    impressions = models.BigIntegerField(default=0)
    frequency = models.FloatField(default=0)
    results = models.BigIntegerField(default=0)
    conversations_started = models.BigIntegerField(default=0)
    # Profile visits stand in for link clicks
    link_clicks = models.BigIntegerField(default=0)
    amount_spent = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    cpm = models.FloatField(default=0)
    cpc = models.FloatField(default=0)
    ctr = models.FloatField(default=0)
    cost_per_result = models.FloatField(default=0)
    cost_per_conversation = models.FloatField(default=0)
    report_type = models.CharField(max_length=10, choices=REPORT_TYPE_CHOICES)
    period_start = models.DateField()
    period_end = models.DateField()
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.campaign_name} ({self.report_type} {self.period_start})"


class CampaignNameMapping(models.Model):
    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=['client', 'original_name'],
                name='unique_campaign_name_mapping_per_client'
            )
        ]

    client = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='campaign_name_mappings')
    original_name = models.CharField(max_length=255)
    display_name = models.CharField(max_length=255)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='+',
    )
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.original_name} -> {self.display_name}"
