from datetime import date
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.test import override_settings
from rest_framework import status
from rest_framework.test import APITestCase

from apps.dashboards.models import CampaignNameMapping, CampaignRecord, Dashboard
from apps.dashboards.tasks import sync_all_dashboards

User = get_user_model()

SHEET_URL = 'https://docs.google.com/spreadsheets/d/sheet123/edit'
CSV = (
    'Campanha,Conversas Iniciadas,Alcance,Impressões,Valor Investido (R$)\n'
    'Campanha X,50,10000,20000,R$ 500,00\n'
).encode('utf-8')


class DashboardAPITestCase(APITestCase):
    def setUp(self):
        cache.clear()
        self.admin = User.objects.create_user(email='admin@example.com', password='testpass123', role=User.ROLE_ADMIN)
        self.moderator = User.objects.create_user(
            email='mod@example.com', password='testpass123', role=User.ROLE_MODERATOR,
        )
        self.customer = User.objects.create_user(
            email='client@example.com', password='testpass123', full_name='Client', manager=self.moderator,
        )
        self.stranger = User.objects.create_user(email='other@example.com', password='testpass123')
        self.dashboard = Dashboard.objects.create(
            client=self.customer, name='Main', sheet_url=SHEET_URL, weekly_tab='0',
        )

    def add_record(self, dashboard=None, **values):
        dashboard = dashboard or self.dashboard
        fields = {
            'campaign_name': 'Campanha X',
            'report_type': 'weekly',
            'period_start': date(2024, 6, 3),
            'period_end': date(2024, 6, 9),
            'conversations_started': 10,
            'amount_spent': 100,
            'impressions': 1000,
            'link_clicks': 20,
        }
        fields.update(values)
        return CampaignRecord.objects.create(client=dashboard.client, dashboard=dashboard, **fields)


class SyncGoogleSheetsViewTest(DashboardAPITestCase):
    url = '/api/v1/sync-google-sheets/'

    def payload(self, **overrides):
        data = {
            'user_id': self.customer.pk,
            'dashboard_id': self.dashboard.pk,
            'sheet_url': SHEET_URL,
            'weekly_tab': '0',
        }
        data.update(overrides)
        return data

    def test_requires_authentication(self):
        response = self.client.post(self.url, self.payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_clients_cannot_sync(self):
        self.client.force_authenticate(user=self.customer)
        response = self.client.post(self.url, self.payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    @mock.patch('apps.dashboards.sheets.requests.get')
    def test_sync_success(self, mock_get):
        mock_get.return_value = mock.Mock(status_code=200, content=CSV)
        self.client.force_authenticate(user=self.moderator)

        response = self.client.post(self.url, self.payload(), format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['total_records'], 1)
        self.assertEqual(response.data['counts']['weekly'], 1)
        self.assertEqual(CampaignRecord.objects.filter(dashboard=self.dashboard).count(), 1)

    @mock.patch('apps.dashboards.sheets.requests.get')
    def test_invalid_url_is_a_client_error(self, mock_get):
        self.client.force_authenticate(user=self.admin)

        response = self.client.post(self.url, self.payload(sheet_url='not a sheet'), format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid Google Sheets URL')
        mock_get.assert_not_called()

    def test_moderator_cannot_reach_unmanaged_dashboard(self):
        foreign = Dashboard.objects.create(client=self.stranger, name='Foreign', sheet_url=SHEET_URL)
        self.client.force_authenticate(user=self.moderator)

        response = self.client.post(
            self.url, self.payload(user_id=self.stranger.pk, dashboard_id=foreign.pk), format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_user_must_own_dashboard(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(self.url, self.payload(user_id=self.stranger.pk), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    @mock.patch('apps.dashboards.views.sync_dashboard')
    def test_unexpected_failure_is_a_server_error(self, mock_sync):
        mock_sync.side_effect = RuntimeError('boom')
        self.client.force_authenticate(user=self.admin)

        response = self.client.post(self.url, self.payload(), format='json')

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data['error'], 'boom')

    @override_settings(SHEETS_EXPORT_URL='https://sheets.test/{sheet_id}/{gid}')
    @mock.patch('apps.dashboards.sheets.requests.get')
    def test_synced_sheet_is_kept_for_nightly_sync(self, mock_get):
        sheets = {
            'https://sheets.test/sheet123/0': 'Campanha,Alcance,Impressões\nOld campaign,5,10\n',
            'https://sheets.test/newsheet/7': 'Campanha,Alcance,Impressões\nNew campaign,8,20\n',
        }
        mock_get.side_effect = lambda url, timeout: mock.Mock(status_code=200, content=sheets[url].encode('utf-8'))
        self.client.force_authenticate(user=self.moderator)

        response = self.client.post(self.url, self.payload(
            sheet_url='https://docs.google.com/spreadsheets/d/newsheet/edit', weekly_tab='7',
        ), format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        self.dashboard.refresh_from_db()
        self.assertEqual(self.dashboard.sheet_url, 'https://docs.google.com/spreadsheets/d/newsheet/edit')
        self.assertEqual(self.dashboard.weekly_tab, '7')

        sync_all_dashboards.delay().get()

        names = CampaignRecord.objects.filter(dashboard=self.dashboard).values_list('campaign_name', flat=True)
        self.assertEqual(list(names), ['New campaign'])


class DashboardViewSetTest(DashboardAPITestCase):
    def test_client_lists_only_own_dashboards(self):
        Dashboard.objects.create(client=self.stranger, name='Foreign', sheet_url=SHEET_URL)
        self.client.force_authenticate(user=self.customer)

        response = self.client.get('/api/v1/dashboards/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item['id'] for item in response.data], [self.dashboard.pk])

    def test_client_cannot_create(self):
        self.client.force_authenticate(user=self.customer)
        response = self.client.post('/api/v1/dashboards/', {
            'client': self.customer.pk, 'name': 'Mine', 'sheet_url': SHEET_URL,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_staff_create_validates_sheet_url(self):
        self.client.force_authenticate(user=self.moderator)

        response = self.client.post('/api/v1/dashboards/', {
            'client': self.customer.pk, 'name': 'Bad', 'sheet_url': 'https://example.com/sheet',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('sheet_url', response.data)

        response = self.client.post('/api/v1/dashboards/', {
            'client': self.customer.pk, 'name': 'Good', 'sheet_url': SHEET_URL, 'daily_tab': '12',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['created_by'], self.moderator.pk)

    def test_moderator_cannot_create_for_unmanaged_client(self):
        self.client.force_authenticate(user=self.moderator)
        response = self.client.post('/api/v1/dashboards/', {
            'client': self.stranger.pk, 'name': 'Nope', 'sheet_url': SHEET_URL,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    @mock.patch('apps.dashboards.sheets.requests.get')
    def test_sync_action(self, mock_get):
        mock_get.return_value = mock.Mock(status_code=200, content=CSV)
        self.client.force_authenticate(user=self.admin)

        response = self.client.post(f'/api/v1/dashboards/{self.dashboard.pk}/sync/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['dashboard_id'], self.dashboard.pk)

    def test_summary(self):
        self.add_record()
        self.add_record(campaign_name='Campanha Y', conversations_started=0, amount_spent=50,
                        impressions=0, link_clicks=0)
        CampaignNameMapping.objects.create(client=self.customer, original_name='Campanha X', display_name='Launch')
        self.client.force_authenticate(user=self.customer)

        response = self.client.get(f'/api/v1/dashboards/{self.dashboard.pk}/summary/', {'report_type': 'weekly'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['totals']['conversations'], 10)
        self.assertEqual(response.data['totals']['spent'], 150.0)
        self.assertEqual(response.data['averages']['cost_per_conversation'], 15.0)
        self.assertEqual(response.data['averages']['ctr'], 2.0)
        self.assertIn('Launch', [campaign['name'] for campaign in response.data['campaigns']])

    def test_summary_of_empty_dashboard(self):
        self.client.force_authenticate(user=self.customer)
        response = self.client.get(f'/api/v1/dashboards/{self.dashboard.pk}/summary/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['totals']['spent'], 0.0)
        self.assertEqual(response.data['averages']['cpc'], 0.0)
        self.assertEqual(response.data['campaigns'], [])


class CampaignRecordViewSetTest(DashboardAPITestCase):
    def test_client_sees_display_names(self):
        self.add_record()
        self.add_record(report_type='daily')
        CampaignNameMapping.objects.create(client=self.customer, original_name='Campanha X', display_name='Launch')
        self.client.force_authenticate(user=self.customer)

        response = self.client.get('/api/v1/campaign-records/', {'report_type': 'weekly'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['campaign_name'], 'Campanha X')
        self.assertEqual(response.data[0]['display_name'], 'Launch')

    def test_client_does_not_see_other_clients_records(self):
        foreign = Dashboard.objects.create(client=self.stranger, name='Foreign', sheet_url=SHEET_URL)
        self.add_record(dashboard=foreign)
        self.client.force_authenticate(user=self.customer)

        response = self.client.get('/api/v1/campaign-records/')
        self.assertEqual(response.data, [])

    def test_rejects_unknown_report_type(self):
        self.client.force_authenticate(user=self.customer)
        response = self.client.get('/api/v1/campaign-records/', {'report_type': 'yearly'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class CampaignNameMappingViewSetTest(DashboardAPITestCase):
    url = '/api/v1/campaign-name-mappings/'

    def test_upsert(self):
        self.client.force_authenticate(user=self.moderator)
        data = {'client': self.customer.pk, 'original_name': 'Campanha X', 'display_name': 'Launch'}

        first = self.client.post(self.url, data, format='json')
        second = self.client.post(self.url, {**data, 'display_name': 'Relaunch'}, format='json')

        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(second.status_code, status.HTTP_200_OK)
        mapping = CampaignNameMapping.objects.get(client=self.customer, original_name='Campanha X')
        self.assertEqual(mapping.display_name, 'Relaunch')

    def test_clients_cannot_rename(self):
        self.client.force_authenticate(user=self.customer)
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_campaigns_lists_distinct_names(self):
        self.add_record()
        self.add_record(report_type='daily')
        self.add_record(campaign_name='Another')
        self.client.force_authenticate(user=self.admin)

        response = self.client.get(f'{self.url}campaigns/', {'client': self.customer.pk})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['campaigns'], ['Another', 'Campanha X'])

    def test_campaigns_of_unmanaged_client(self):
        self.client.force_authenticate(user=self.moderator)
        response = self.client.get(f'{self.url}campaigns/', {'client': self.stranger.pk})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_deleted_mapping_leaves_summary(self):
        self.add_record(campaign_name='A')
        self.add_record(campaign_name='B')
        alpha = CampaignNameMapping.objects.create(client=self.customer, original_name='A', display_name='Alpha')
        CampaignNameMapping.objects.create(client=self.customer, original_name='B', display_name='Beta')
        summary_url = f'/api/v1/dashboards/{self.dashboard.pk}/summary/'
        self.client.force_authenticate(user=self.moderator)

        before = self.client.get(summary_url)
        self.assertEqual(sorted(item['name'] for item in before.data['campaigns']), ['Alpha', 'Beta'])

        response = self.client.delete(f'{self.url}{alpha.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

        after = self.client.get(summary_url)
        self.assertEqual(sorted(item['name'] for item in after.data['campaigns']), ['A', 'Beta'])
