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
            name='MetaReport',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('account_id', models.CharField(db_index=True, max_length=64)),
                ('campaign_name', models.CharField(max_length=255)),
                ('report_type', models.CharField(blank=True, max_length=10)),
                ('reach', models.BigIntegerField(default=0)),
                ('impressions', models.BigIntegerField(default=0)),
                ('link_clicks', models.BigIntegerField(default=0)),
                ('conversations_started', models.BigIntegerField(default=0)),
                ('amount_spent', models.DecimalField(decimal_places=2, default=0, max_digits=14)),
                ('date_start', models.DateField(blank=True, null=True)),
                ('date_end', models.DateField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'ordering': ['-date_start', 'campaign_name'],
                'indexes': [
                    models.Index(fields=['account_id', 'report_type'], name='meta_report_account_type_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='AdAccountMapping',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('account_id', models.CharField(max_length=64, unique=True)),
                ('account_name', models.CharField(blank=True, max_length=150)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('client', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='ad_accounts', to=settings.AUTH_USER_MODEL)),
            ],
        ),
    ]
