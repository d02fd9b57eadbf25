import strawberry
from strawberry.types import Info
from .auth import resolve_user
from .types import ProfileType


@strawberry.type
class AccountQueries:

    @strawberry.field
    def me(self, info: Info) -> ProfileType:
        return resolve_user(info)
