#!/usr/bin/env python
"""
Seed a local database with demo portal data: one admin, one moderator,
one client with a dashboard full of campaign rows, and a pending PIX charge.
The client logs in as client@lunaris.test / testpass123 (used by locustfile.py).
"""
import os
import random
import sys
from datetime import timedelta

import django

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'core.settings.local')
django.setup()

from django.utils import timezone

from apps.accounts.models import User
from apps.billing.models import PaymentRequest
from apps.dashboards.models import CampaignRecord, Dashboard
from apps.dashboards.sheets import derive_metrics

PASSWORD = 'testpass123'
CAMPAIGNS = ['Lançamento Verão', 'Remarketing', 'Mensagens WhatsApp', 'Seguidores']


def get_or_create_user(email, role, **fields):
    user, created = User.objects.get_or_create(
        email=email,
        defaults={'username': email, 'role': role, **fields},
    )
    if created:
        user.set_password(PASSWORD)
        user.save()
        print(f"✅ Created {role} {email}")
    return user


def campaign_rows(report_type, days, periods):
    today = timezone.localdate()
    for period in range(periods):
        start = today - timedelta(days=days * (period + 1))
        for name in CAMPAIGNS:
            impressions = random.randint(5_000, 80_000)
            yield derive_metrics({
                'campaign_name': name,
                'report_type': report_type,
                'period_start': start,
                'period_end': start + timedelta(days=days - 1),
                'reach': int(impressions * random.uniform(0.5, 0.9)),
                'impressions': impressions,
                'frequency': round(random.uniform(1.0, 2.5), 2),
                'results': random.randint(10, 300),
                'conversations_started': random.randint(0, 120),
                'link_clicks': random.randint(50, 1_500),
                'amount_spent': round(random.uniform(50, 900), 2),
            })


def create_test_data():
    print("🚀 Creating demo portal data...")

    admin = get_or_create_user('admin@lunaris.test', User.ROLE_ADMIN, full_name='Admin', is_staff=True)
    moderator = get_or_create_user('gestor@lunaris.test', User.ROLE_MODERATOR, full_name='Gestor')
    client = get_or_create_user(
        'client@lunaris.test', User.ROLE_USER, full_name='Cliente Demo', company='Demo Ltda', manager=moderator,
    )

    dashboard, created = Dashboard.objects.get_or_create(
        client=client,
        name='Meta Ads',
        defaults={
            'sheet_url': 'https://docs.google.com/spreadsheets/d/demo-sheet-id/edit',
            'daily_tab': '0',
            'weekly_tab': '1',
            'monthly_tab': '2',
            'created_by': admin,
        }
    )
    if created:
        print(f"✅ Created dashboard {dashboard.name} for {client.email}")

    rows = [
        *campaign_rows('daily', 1, 30),
        *campaign_rows('weekly', 7, 8),
        *campaign_rows('monthly', 30, 3),
    ]
    CampaignRecord.objects.filter(dashboard=dashboard).delete()
    CampaignRecord.objects.bulk_create(
        [CampaignRecord(client=client, dashboard=dashboard, **row) for row in rows],
        batch_size=500,
    )
    dashboard.last_synced_at = timezone.now()
    dashboard.save(update_fields=['last_synced_at', 'updated_at'])
    print(f"📊 Stored {len(rows)} campaign rows")

    PaymentRequest.objects.get_or_create(
        client=client,
        status=PaymentRequest.STATUS_PENDING,
        defaults={'created_by': moderator, 'amount': '1500.00', 'pix_code': '00020126580014BR.GOV.BCB.PIX'},
    )

    print("\n📈 Demo data ready. Log in as client@lunaris.test / testpass123")


if __name__ == '__main__':
    create_test_data()
