from datetime import date

from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APITestCase

from apps.adaccounts.models import AdAccountMapping, MetaReport

User = get_user_model()


class AdAccountTestCase(APITestCase):
    def setUp(self):
        self.moderator = User.objects.create_user(
            email='mod@example.com', password='testpass123', role=User.ROLE_MODERATOR,
        )
        self.customer = User.objects.create_user(
            email='client@example.com', password='testpass123', full_name='Client', manager=self.moderator,
        )
        self.stranger = User.objects.create_user(email='other@example.com', password='testpass123')

    def report(self, account_id, **values):
        fields = {
            'campaign_name': 'Campaign',
            'report_type': 'weekly',
            'impressions': 1000,
            'amount_spent': '10.00',
            'date_start': date(2024, 6, 3),
        }
        fields.update(values)
        return MetaReport.objects.create(account_id=account_id, **fields)


class AdAccountMappingTest(AdAccountTestCase):
    url = '/api/v1/ad-account-mappings/'

    def test_map_account_to_client(self):
        self.client.force_authenticate(user=self.moderator)
        response = self.client.post(self.url, {
            'account_id': 'act_1', 'client': self.customer.pk, 'account_name': 'Main',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['client_name'], 'Client')

    def test_account_is_mapped_once(self):
        AdAccountMapping.objects.create(account_id='act_1', client=self.customer)
        self.client.force_authenticate(user=self.moderator)

        response = self.client.post(self.url, {'account_id': 'act_1', 'client': self.customer.pk}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_moderator_cannot_map_to_unmanaged_client(self):
        self.client.force_authenticate(user=self.moderator)
        response = self.client.post(self.url, {'account_id': 'act_1', 'client': self.stranger.pk}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unmapped_accounts(self):
        AdAccountMapping.objects.create(account_id='act_1', client=self.customer)
        self.report('act_1')
        self.report('act_2')
        self.report('act_2', campaign_name='Other', report_type='')
        self.report('act_3', report_type='')
        self.client.force_authenticate(user=self.moderator)

        response = self.client.get(f'{self.url}unmapped/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['accounts'], [
            {'account_id': 'act_2', 'campaign_count': 2, 'report_type': 'weekly'},
            {'account_id': 'act_3', 'campaign_count': 1, 'report_type': '-'},
        ])

    def test_clients_cannot_manage_mappings(self):
        self.client.force_authenticate(user=self.customer)
        self.assertEqual(self.client.get(self.url).status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self.client.get(f'{self.url}unmapped/').status_code, status.HTTP_403_FORBIDDEN)


class MetaReportTest(AdAccountTestCase):
    url = '/api/v1/meta-reports/'

    def test_client_sees_reports_of_own_accounts(self):
        AdAccountMapping.objects.create(account_id='act_1', client=self.customer)
        AdAccountMapping.objects.create(account_id='act_9', client=self.stranger)
        own = self.report('act_1')
        self.report('act_9')
        self.report('act_unmapped')
        self.client.force_authenticate(user=self.customer)

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item['id'] for item in response.data], [own.pk])

    def test_report_type_filter(self):
        AdAccountMapping.objects.create(account_id='act_1', client=self.customer)
        self.report('act_1', report_type='daily')
        monthly = self.report('act_1', report_type='monthly')
        self.client.force_authenticate(user=self.customer)

        response = self.client.get(self.url, {'report_type': 'monthly'})
        self.assertEqual([item['id'] for item in response.data], [monthly.pk])

    def test_reports_are_read_only(self):
        self.client.force_authenticate(user=self.moderator)
        response = self.client.post(self.url, {'account_id': 'act_1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
