import strawberry
from apps.dashboards.graphql.queries import DashboardQueries
from apps.accounts.graphql.queries import AccountQueries


@strawberry.type
class Query(DashboardQueries, AccountQueries):
    pass


schema = strawberry.Schema(query=Query)
