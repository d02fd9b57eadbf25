from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model

User = get_user_model()


class Command(BaseCommand):
    help = 'Create a portal user (admin, moderator or client)'

    def add_arguments(self, parser):
        parser.add_argument('--email', type=str, required=True)
        parser.add_argument('--password', type=str, required=True)
        parser.add_argument('--role', type=str, default=User.ROLE_USER,
                            choices=[choice for choice, _ in User.ROLE_CHOICES])
        parser.add_argument('--full-name', type=str, default='')
        parser.add_argument('--company', type=str, default='')

    def handle(self, *args, **options):
        email = options['email']
        role = options['role']

        if User.objects.filter(email__iexact=email).exists():
            self.stdout.write(
                self.style.ERROR(f'User with email {email} already exists')
            )
            return

        User.objects.create_user(
            email=email,
            password=options['password'],
            role=role,
            full_name=options['full_name'],
            company=options['company'],
            is_staff=role == User.ROLE_ADMIN,
        )

        self.stdout.write(
            self.style.SUCCESS(
                f'Successfully created {role} {email}'
            )
        )
