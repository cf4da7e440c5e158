"""Fork queries and response mapping.

``ForkGateway.fetch_page`` issues one paginated ``forks`` query;
``fetch_repository_metadata`` resolves the default branch and fork count
before the interactive loop starts.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Protocol

from ..errors import GatewayError
from ..models import PAGE_SIZE, Fork, ForksPage, RepositoryMetadata, RepositoryRef, SortMode, order_field

logger = logging.getLogger(__name__)

FORKS_QUERY = """
query Forks($owner: String!, $name: String!, $first: Int!, $endCursor: String, $field: RepositoryOrderField!, $headRef: String!) {
  repository(owner: $owner, name: $name) {
    forks(first: $first, after: $endCursor, orderBy: {field: $field, direction: DESC}) {
      nodes {
        nameWithOwner
        stargazerCount
        forkCount
        updatedAt
        url
        defaultBranchRef {
          name
          compare(headRef: $headRef) {
            aheadBy
            behindBy
          }
        }
      }
      pageInfo {
        hasNextPage
        endCursor
      }
      totalCount
    }
  }
}
"""

DEFAULT_BRANCH_QUERY = """
query DefaultBranch($owner: String!, $name: String!) {
  repository(owner: $owner, name: $name) {
    forkCount
    defaultBranchRef {
      name
    }
  }
}
"""


class QueryClient(Protocol):
    def query(self, operation_name: str, query: str, variables: dict[str, Any]) -> dict[str, Any]: ...


def _repository_node(data: dict[str, Any], repository: RepositoryRef) -> dict[str, Any]:
    node = data.get("repository")
    if not isinstance(node, dict):
        raise GatewayError(f"Could not resolve to a Repository with the name '{repository.full_name}'.")
    return node


def _as_int(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return value


def parse_timestamp(value: object) -> datetime:
    """Parse a GraphQL ``DateTime`` into an aware ``datetime``."""
    if not isinstance(value, str) or not value:
        raise GatewayError(f"invalid timestamp: {value!r}")
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise GatewayError(f"invalid timestamp: {value!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def fork_from_node(node: dict[str, Any]) -> Fork:
    """Map one ``forks.nodes`` entry to a ``Fork``.

    ``compare`` runs from the fork's branch to the tracked branch, so the
    fork's own ahead count is the comparison's ``behindBy`` and vice versa.
    """
    branch = node.get("defaultBranchRef") or {}
    compare = branch.get("compare") or {}
    return Fork(
        name_with_owner=str(node.get("nameWithOwner", "")),
        stargazer_count=_as_int(node.get("stargazerCount")),
        fork_count=_as_int(node.get("forkCount")),
        updated_at=parse_timestamp(node.get("updatedAt")),
        url=str(node.get("url", "")),
        ahead_by=_as_int(compare.get("behindBy")),
        behind_by=_as_int(compare.get("aheadBy")),
    )


def forks_page_from_data(data: dict[str, Any], repository: RepositoryRef) -> ForksPage:
    forks = _repository_node(data, repository).get("forks")
    if not isinstance(forks, dict):
        raise GatewayError("Forks response is missing the forks connection")
    page_info = forks.get("pageInfo") or {}
    end_cursor = page_info.get("endCursor")
    return ForksPage(
        forks=tuple(fork_from_node(node) for node in forks.get("nodes") or () if isinstance(node, dict)),
        total_count=_as_int(forks.get("totalCount")),
        end_cursor=end_cursor if isinstance(end_cursor, str) else None,
        has_next_page=bool(page_info.get("hasNextPage")),
    )


class ForkGateway:
    """Paginated fork-list queries for one repository."""

    def __init__(self, client: QueryClient, repository: RepositoryRef, head_ref: str) -> None:
        self.client = client
        self.repository = repository
        self.head_ref = head_ref

    def fetch_page(self, page: int, sort_mode: SortMode, cursor: str | None = None) -> ForksPage:
        """Fetch the forks following ``cursor``.

        ``page`` is only used for bookkeeping; the remote position is carried
        entirely by the cursor.
        """
        variables = {
            "owner": self.repository.owner,
            "name": self.repository.name,
            "first": PAGE_SIZE,
            "endCursor": cursor,
            "field": order_field(sort_mode),
            "headRef": self.head_ref,
        }
        logger.info("fetching forks page=%d sort=%s", page, variables["field"])
        data = self.client.query("Forks", FORKS_QUERY, variables)
        return forks_page_from_data(data, self.repository)


def fetch_repository_metadata(client: QueryClient, repository: RepositoryRef) -> RepositoryMetadata:
    """Resolve the default branch name and total fork count."""
    data = client.query(
        "DefaultBranch",
        DEFAULT_BRANCH_QUERY,
        {"owner": repository.owner, "name": repository.name},
    )
    node = _repository_node(data, repository)
    branch = node.get("defaultBranchRef") or {}
    return RepositoryMetadata(
        default_branch=str(branch.get("name") or ""),
        fork_count=_as_int(node.get("forkCount")),
    )


def head_ref_for(repository: RepositoryRef, default_branch: str) -> str:
    """Return the ``owner:branch`` reference forks are compared against."""
    return f"{repository.owner}:{default_branch}"


__all__ = [
    "FORKS_QUERY",
    "DEFAULT_BRANCH_QUERY",
    "QueryClient",
    "parse_timestamp",
    "fork_from_node",
    "forks_page_from_data",
    "ForkGateway",
    "fetch_repository_metadata",
    "head_ref_for",
]
