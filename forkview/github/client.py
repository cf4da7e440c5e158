"""Minimal GitHub GraphQL client.

Wraps a ``requests.Session`` with token lookup, per-request timeout, and a
bounded retry policy for transient transport failures. Every failure surfaces
as ``GatewayError``.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..errors import AuthenticationError, GatewayError
from ..models import DEFAULT_HOST

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_RETRIES = 2
RETRY_BACKOFF_FACTOR = 0.5
RETRY_STATUS_CODES = (429, 500, 502, 503, 504)
USER_AGENT = "forkview"


def graphql_endpoint(host: str) -> str:
    """Return the GraphQL endpoint URL for ``host``."""
    if host == DEFAULT_HOST:
        return "https://api.github.com/graphql"
    return f"https://{host}/api/graphql"


def _token_from_env(host: str) -> str | None:
    names = ("GH_TOKEN", "GITHUB_TOKEN") if host == DEFAULT_HOST else ("GH_ENTERPRISE_TOKEN", "GITHUB_ENTERPRISE_TOKEN")
    for name in names:
        value = os.environ.get(name, "").strip()
        if value:
            return value
    return None


def _token_from_gh_cli(host: str) -> str | None:
    if shutil.which("gh") is None:
        return None
    try:
        proc = subprocess.run(
            ["gh", "auth", "token", "--hostname", host],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError:
        logger.debug("gh auth token failed to start", exc_info=True)
        return None
    if proc.returncode != 0:
        return None
    token = proc.stdout.strip()
    return token or None


def resolve_token(host: str = DEFAULT_HOST) -> str:
    """Find an API token for ``host`` from the environment or the gh CLI."""
    token = _token_from_env(host) or _token_from_gh_cli(host)
    if token is None:
        raise AuthenticationError(
            f"no GitHub token found for {host}; set GH_TOKEN or run `gh auth login`"
        )
    return token


def build_session(retries: int = DEFAULT_RETRIES) -> requests.Session:
    """Create a session whose adapter retries transient failures with backoff."""
    session = requests.Session()
    retry = Retry(
        total=max(0, retries),
        connect=max(0, retries),
        read=max(0, retries),
        status=max(0, retries),
        backoff_factor=RETRY_BACKOFF_FACTOR,
        status_forcelist=RETRY_STATUS_CODES,
        allowed_methods=frozenset({"POST"}),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class GraphQLClient:
    """Execute GraphQL queries against one GitHub host."""

    def __init__(
        self,
        token: str,
        host: str = DEFAULT_HOST,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        retries: int = DEFAULT_RETRIES,
        session: requests.Session | None = None,
    ) -> None:
        self.host = host
        self.endpoint = graphql_endpoint(host)
        self.timeout = timeout
        self.session = session if session is not None else build_session(retries)
        self.session.headers.update(
            {
                "Authorization": f"bearer {token}",
                "Accept": "application/json",
                "User-Agent": USER_AGENT,
            }
        )

    def query(self, operation_name: str, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """Run ``query`` and return its ``data`` object."""
        payload = {"query": query, "variables": variables, "operationName": operation_name}
        try:
            response = self.session.post(self.endpoint, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            raise GatewayError(f"{operation_name} request failed: {exc}") from exc

        if response.status_code >= 400:
            raise GatewayError(
                f"{operation_name} request failed: HTTP {response.status_code} {_error_detail(response)}".rstrip()
            )
        try:
            body = response.json()
        except ValueError as exc:
            raise GatewayError(f"{operation_name} returned invalid JSON") from exc
        if not isinstance(body, dict):
            raise GatewayError(f"{operation_name} returned an unexpected payload")

        errors = body.get("errors")
        if errors:
            messages = [str(err.get("message", err)) if isinstance(err, dict) else str(err) for err in errors]
            raise GatewayError(f"{operation_name} failed: {'; '.join(messages)}")
        data = body.get("data")
        if not isinstance(data, dict):
            raise GatewayError(f"{operation_name} returned no data")
        return data

    def close(self) -> None:
        self.session.close()


def _error_detail(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return ""
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return f"({body['message']})"
    return ""


__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "DEFAULT_RETRIES",
    "graphql_endpoint",
    "resolve_token",
    "build_session",
    "GraphQLClient",
]
