from io import StringIO
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from django.core.management import call_command
from rest_framework import status
from rest_framework.test import APITestCase
from rest_framework_simplejwt.tokens import RefreshToken

User = get_user_model()


class AuthTestCase(APITestCase):
    def setUp(self):
        self.password = 'testpass123'
        self.admin = User.objects.create_user(email='admin@example.com', password=self.password, role=User.ROLE_ADMIN)
        self.moderator = User.objects.create_user(
            email='mod@example.com', password=self.password, role=User.ROLE_MODERATOR, full_name='Mod',
        )
        self.customer = User.objects.create_user(
            email='client@example.com', password=self.password, full_name='Client', manager=self.moderator,
        )

    def bearer(self, user):
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {RefreshToken.for_user(user).access_token}')


class LoginLogoutTest(AuthTestCase):
    def test_login_returns_tokens_and_profile(self):
        response = self.client.post('/api/v1/auth/login/', {
            'email': 'CLIENT@example.com', 'password': self.password,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['user']['role'], User.ROLE_USER)
        self.assertEqual(response.data['user']['manager_name'], 'Mod')

    def test_login_with_wrong_password(self):
        response = self.client.post('/api/v1/auth/login/', {
            'email': 'client@example.com', 'password': 'wrong',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_logout_blacklists_refresh_token(self):
        refresh = RefreshToken.for_user(self.customer)
        self.bearer(self.customer)

        response = self.client.post('/api/v1/auth/logout/', {'refresh': str(refresh)}, format='json')
        self.assertEqual(response.status_code, status.HTTP_205_RESET_CONTENT)

        response = self.client.post('/api/v1/auth/token/refresh/', {'refresh': str(refresh)}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_logout_with_garbage_token(self):
        self.bearer(self.customer)
        response = self.client.post('/api/v1/auth/logout/', {'refresh': 'garbage'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class ProfileTest(AuthTestCase):
    def test_me(self):
        self.client.force_authenticate(user=self.customer)
        response = self.client.get('/api/v1/auth/me/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['email'], 'client@example.com')

    def test_update_profile_cannot_escalate_role(self):
        self.client.force_authenticate(user=self.customer)
        response = self.client.patch('/api/v1/auth/me/', {
            'phone': '+55 11 99999-0000', 'role': User.ROLE_ADMIN,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.customer.refresh_from_db()
        self.assertEqual(self.customer.phone, '+55 11 99999-0000')
        self.assertEqual(self.customer.role, User.ROLE_USER)

    @mock.patch('apps.strategies.storage.ObjectStorage.for_avatars')
    def test_avatar_upload(self, mock_for_avatars):
        mock_for_avatars.return_value.upload.return_value = 'https://storage.test/avatar.png'
        self.client.force_authenticate(user=self.customer)
        avatar = SimpleUploadedFile('me.png', b'\x89PNG data', content_type='image/png')

        response = self.client.post('/api/v1/auth/me/avatar/', {'avatar': avatar}, format='multipart')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.customer.refresh_from_db()
        self.assertEqual(self.customer.avatar_url, 'https://storage.test/avatar.png')
        blob_name = mock_for_avatars.return_value.upload.call_args[0][1]
        self.assertTrue(blob_name.startswith(f'{self.customer.pk}/'))

    def test_avatar_must_be_an_image(self):
        self.client.force_authenticate(user=self.customer)
        document = SimpleUploadedFile('me.pdf', b'%PDF', content_type='application/pdf')

        response = self.client.post('/api/v1/auth/me/avatar/', {'avatar': document}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class UserManagementTest(AuthTestCase):
    def test_only_admins_manage_users(self):
        self.client.force_authenticate(user=self.moderator)
        response = self.client.get('/api/v1/auth/users/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_create_user(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post('/api/v1/auth/users/', {
            'email': 'new@example.com', 'password': 'newpass123', 'full_name': 'New', 'role': 'moderator',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        user = User.objects.get(email='new@example.com')
        self.assertTrue(user.check_password('newpass123'))
        self.assertTrue(user.is_moderator)

    def test_duplicate_email(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post('/api/v1/auth/users/', {
            'email': 'client@example.com', 'password': 'newpass123',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('already exists', str(response.data['email'][0]))

    def test_duplicate_email_ignores_case(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post('/api/v1/auth/users/', {
            'email': 'Client@Example.com', 'password': 'newpass123',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('already exists', str(response.data['email'][0]))

    def test_change_role(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(f'/api/v1/auth/users/{self.customer.pk}/role/', {'role': 'moderator'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.customer.refresh_from_db()
        self.assertEqual(self.customer.role, User.ROLE_MODERATOR)

    def test_admin_cannot_delete_self(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.delete(f'/api/v1/auth/users/{self.admin.pk}/')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(User.objects.filter(pk=self.admin.pk).exists())

    def test_delete_user(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.delete(f'/api/v1/auth/users/{self.customer.pk}/')

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(User.objects.filter(pk=self.customer.pk).exists())


class ClientManagementTest(AuthTestCase):
    def setUp(self):
        super().setUp()
        self.unmanaged = User.objects.create_user(email='solo@example.com', password=self.password)

    def test_moderator_sees_only_managed_clients(self):
        self.client.force_authenticate(user=self.moderator)
        response = self.client.get('/api/v1/auth/clients/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([client['id'] for client in response.data], [self.customer.pk])

    def test_admin_sees_every_client(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get('/api/v1/auth/clients/')

        self.assertEqual({client['id'] for client in response.data}, {self.customer.pk, self.unmanaged.pk})

    def test_clients_cannot_list_clients(self):
        self.client.force_authenticate(user=self.customer)
        response = self.client.get('/api/v1/auth/clients/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_assign_manager_is_admin_only(self):
        self.client.force_authenticate(user=self.moderator)
        response = self.client.post(f'/api/v1/auth/clients/{self.customer.pk}/manager/',
                                    {'manager': self.moderator.pk}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.admin)
        response = self.client.post(f'/api/v1/auth/clients/{self.unmanaged.pk}/manager/',
                                    {'manager': self.moderator.pk}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.unmanaged.refresh_from_db()
        self.assertEqual(self.unmanaged.manager, self.moderator)

    def test_manager_must_be_staff(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(f'/api/v1/auth/clients/{self.unmanaged.pk}/manager/',
                                    {'manager': self.customer.pk}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_deactivate_client(self):
        self.client.force_authenticate(user=self.moderator)
        response = self.client.post(f'/api/v1/auth/clients/{self.customer.pk}/status/',
                                    {'account_status': 'inactive'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.customer.refresh_from_db()
        self.assertFalse(self.customer.is_account_active)


class DeactivatedAccountMiddlewareTest(AuthTestCase):
    def test_inactive_client_is_blocked(self):
        self.customer.account_status = User.STATUS_INACTIVE
        self.customer.save()
        self.bearer(self.customer)

        response = self.client.get('/api/v1/auth/me/')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.json(), {'error': 'account_deactivated'})

    def test_inactive_client_can_still_log_in_and_out(self):
        self.customer.account_status = User.STATUS_INACTIVE
        self.customer.save()
        self.bearer(self.customer)

        response = self.client.post('/api/v1/auth/logout/', {'refresh': 'garbage'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_active_client_passes(self):
        self.bearer(self.customer)
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_invalid_token_is_left_to_the_view(self):
        self.client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token')
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class CreatePortalUserCommandTest(APITestCase):
    def test_creates_admin(self):
        out = StringIO()
        call_command('create_portal_user', '--email', 'boss@example.com', '--password', 'secret123',
                     '--role', 'admin', '--full-name', 'Boss', stdout=out)

        user = User.objects.get(email='boss@example.com')
        self.assertTrue(user.is_admin)
        self.assertTrue(user.is_staff)
        self.assertEqual(user.full_name, 'Boss')
        self.assertIn('Successfully created', out.getvalue())

    def test_duplicate_email(self):
        User.objects.create_user(email='boss@example.com', password='secret123')
        out = StringIO()
        call_command('create_portal_user', '--email', 'boss@example.com', '--password', 'x', stdout=out)

        self.assertIn('already exists', out.getvalue())
        self.assertEqual(User.objects.filter(email='boss@example.com').count(), 1)


class GraphQLMeTest(AuthTestCase):
    def test_me_query_with_bearer_token(self):
        self.bearer(self.customer)
        response = self.client.post('/graphql/', {'query': '{ me { email role } }'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['data']['me'], {'email': 'client@example.com', 'role': 'user'})
