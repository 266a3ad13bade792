"""
GraphQL API setup with Strawberry.

Provides the GraphQL endpoint at /graphql over HTTP and WebSocket, with the
GraphiQL interface in dev.

Usage:
    from retro_meeting.graphql import graphql_app
    app.include_router(graphql_app, prefix="/graphql")
"""

from strawberry.fastapi import GraphQLRouter

from ..config import config
from .context import get_context
from .schema import schema

graphql_app = GraphQLRouter(
    schema,
    context_getter=get_context,
    graphql_ide="graphiql" if config.is_dev else None,
)

__all__ = ["graphql_app", "schema"]
