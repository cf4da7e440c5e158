"""GitHub boundary: repository resolution, GraphQL transport, fork queries."""

from .client import GraphQLClient, resolve_token
from .gateway import ForkGateway, fetch_repository_metadata, head_ref_for
from .repository import current_repository, parse_repository

__all__ = [
    "GraphQLClient",
    "resolve_token",
    "ForkGateway",
    "fetch_repository_metadata",
    "head_ref_for",
    "current_repository",
    "parse_repository",
]
