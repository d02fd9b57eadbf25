from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models


class PortalUserManager(UserManager):
    """Login is by e-mail, so the username is derived from it when omitted."""

    def create_user(self, username=None, email=None, password=None, **extra_fields):
        email = self.normalize_email(email)
        username = username or email
        return super().create_user(username, email, password, **extra_fields)

    def create_superuser(self, username=None, email=None, password=None, **extra_fields):
        email = self.normalize_email(email)
        username = username or email
        extra_fields.setdefault('role', User.ROLE_ADMIN)
        return super().create_superuser(username, email, password, **extra_fields)


class User(AbstractUser):
    ROLE_ADMIN = 'admin'
    ROLE_MODERATOR = 'moderator'
    ROLE_USER = 'user'

    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Admin'),
        (ROLE_MODERATOR, 'Moderator'),
        (ROLE_USER, 'User'),
    ]

    STATUS_ACTIVE = 'active'
    STATUS_INACTIVE = 'inactive'

    STATUS_CHOICES = [
        (STATUS_ACTIVE, 'Active'),
        (STATUS_INACTIVE, 'Inactive'),
    ]

    email = models.EmailField(unique=True)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_USER, db_index=True)

    # Profile
    full_name = models.CharField(max_length=150, blank=True)
    company = models.CharField(max_length=150, blank=True)
    phone = models.CharField(max_length=30, blank=True)
    bio = models.TextField(blank=True)
    avatar_url = models.URLField(max_length=500, blank=True)
    account_status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_ACTIVE)
    manager = models.ForeignKey(
        'self',
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='managed_clients',
    )

    updated_at = models.DateTimeField(auto_now=True)

    objects = PortalUserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['username']

    class Meta:
        ordering = ['full_name', 'email']

    def __str__(self):
        return self.full_name or self.email

    @property
    def is_admin(self):
        return self.role == self.ROLE_ADMIN

    @property
    def is_moderator(self):
        return self.role == self.ROLE_MODERATOR

    @property
    def is_staff_member(self):
        return self.role in (self.ROLE_ADMIN, self.ROLE_MODERATOR)

    @property
    def is_client(self):
        return self.role == self.ROLE_USER

    @property
    def is_account_active(self):
        return self.account_status == self.STATUS_ACTIVE

    def visible_clients(self):
        """Clients this staff member may act on: all for admins, own portfolio for moderators."""
        clients = User.objects.filter(role=self.ROLE_USER)
        if self.is_admin:
            return clients
        if self.is_moderator:
            return clients.filter(manager=self)
        return clients.none()
