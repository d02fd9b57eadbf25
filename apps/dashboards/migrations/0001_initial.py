import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Dashboard',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=150)),
                ('sheet_url', models.URLField(max_length=500)),
                ('daily_tab', models.CharField(blank=True, max_length=30)),
                ('weekly_tab', models.CharField(blank=True, max_length=30)),
                ('monthly_tab', models.CharField(blank=True, max_length=30)),
                ('last_synced_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('client', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='dashboards', to=settings.AUTH_USER_MODEL)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='CampaignRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('campaign_name', models.CharField(max_length=255)),
                ('reach', models.BigIntegerField(default=0)),
                ('impressions', models.BigIntegerField(default=0)),
                ('frequency', models.FloatField(default=0)),
                ('results', models.BigIntegerField(default=0)),
                ('conversations_started', models.BigIntegerField(default=0)),
                ('link_clicks', models.BigIntegerField(default=0)),
                ('amount_spent', models.DecimalField(decimal_places=2, default=0, max_digits=14)),
                ('cpm', models.FloatField(default=0)),
                ('cpc', models.FloatField(default=0)),
                ('ctr', models.FloatField(default=0)),
                ('cost_per_result', models.FloatField(default=0)),
                ('cost_per_conversation', models.FloatField(default=0)),
                ('report_type', models.CharField(choices=[('daily', 'Daily'), ('weekly', 'Weekly'), ('monthly', 'Monthly')], max_length=10)),
                ('period_start', models.DateField()),
                ('period_end', models.DateField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('client', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='campaign_records', to=settings.AUTH_USER_MODEL)),
                ('dashboard', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='records', to='dashboards.dashboard')),
            ],
            options={
                'ordering': ['-period_start', 'campaign_name'],
                'indexes': [
                    models.Index(fields=['dashboard', 'report_type'], name='record_dashboard_type_idx'),
                    models.Index(fields=['client', 'report_type', 'period_start'], name='record_client_period_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='CampaignNameMapping',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('original_name', models.CharField(max_length=255)),
                ('display_name', models.CharField(max_length=255)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('client', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='campaign_name_mappings', to=settings.AUTH_USER_MODEL)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'constraints': [
                    models.UniqueConstraint(fields=('client', 'original_name'), name='unique_campaign_name_mapping_per_client'),
                ],
            },
        ),
    ]
