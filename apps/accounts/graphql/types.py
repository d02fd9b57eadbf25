import strawberry_django
from strawberry import auto
from apps.accounts.models import User


@strawberry_django.type(User)
class ProfileType:
    id: auto
    email: auto
    full_name: auto
    company: auto
    phone: auto
    avatar_url: auto
    role: auto
    account_status: auto
