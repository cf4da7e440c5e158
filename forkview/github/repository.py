"""Repository identifier parsing and current-checkout resolution.

Accepts ``OWNER/REPO``, ``HOST/OWNER/REPO``, and git remote URLs. When no
identifier is given the repository comes from ``GH_REPO`` or from the git
remotes of the working directory.
"""

from __future__ import annotations

import logging
import os
import re
import subprocess
from pathlib import Path
from urllib.parse import urlparse

from ..errors import RepositoryResolutionError
from ..models import DEFAULT_HOST, RepositoryRef

logger = logging.getLogger(__name__)

PREFERRED_REMOTES: tuple[str, ...] = ("upstream", "github", "origin")
_SCP_LIKE_RE = re.compile(r"^(?:[\w.-]+@)?(?P<host>[\w.-]+):(?P<path>[^/].*)$")
_SEGMENT_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


def _normalize_host(host: str) -> str:
    host = host.lower()
    if host.startswith("www."):
        host = host[4:]
    if host == "ssh.github.com":
        return DEFAULT_HOST
    return host


def _from_segments(host: str, path: str, identifier: str) -> RepositoryRef:
    path = path.strip("/")
    if path.endswith(".git"):
        path = path[: -len(".git")]
    parts = path.split("/")
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise RepositoryResolutionError(f'expected the "[HOST/]OWNER/REPO" format, got "{identifier}"')
    owner, name = parts[0], parts[1]
    if not _SEGMENT_RE.match(owner) or not _SEGMENT_RE.match(name):
        raise RepositoryResolutionError(f'invalid repository name "{identifier}"')
    return RepositoryRef(owner=owner, name=name, host=_normalize_host(host))


def _parse_url(text: str) -> RepositoryRef | None:
    if "://" in text:
        parsed = urlparse(text)
        if parsed.scheme not in {"http", "https", "ssh", "git", "git+ssh"} or not parsed.hostname:
            raise RepositoryResolutionError(f'unsupported repository URL "{text}"')
        return _from_segments(parsed.hostname, parsed.path, text)
    match = _SCP_LIKE_RE.match(text)
    if match is not None and "/" in match.group("path"):
        return _from_segments(match.group("host"), match.group("path"), text)
    return None


def parse_repository(text: str, default_host: str | None = None) -> RepositoryRef:
    """Parse a repository identifier into a ``RepositoryRef``.

    Raises ``RepositoryResolutionError`` for malformed identifiers.
    """
    value = (text or "").strip()
    if not value:
        raise RepositoryResolutionError("repository identifier is empty")

    from_url = _parse_url(value)
    if from_url is not None:
        return from_url

    parts = value.split("/")
    if len(parts) == 2:
        host = default_host or os.environ.get("GH_HOST") or DEFAULT_HOST
        return _from_segments(host, value, value)
    if len(parts) == 3:
        return _from_segments(parts[0], "/".join(parts[1:]), value)
    raise RepositoryResolutionError(f'expected the "[HOST/]OWNER/REPO" format, got "{value}"')


def _git_remotes(cwd: Path) -> dict[str, str]:
    """Return fetch URLs keyed by remote name, in ``git remote`` order."""
    try:
        proc = subprocess.run(
            ["git", "remote", "-v"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise RepositoryResolutionError(f"unable to run git: {exc}") from exc
    if proc.returncode != 0:
        detail = proc.stderr.strip() or "not a git repository"
        raise RepositoryResolutionError(detail)

    remotes: dict[str, str] = {}
    for line in proc.stdout.splitlines():
        fields = line.split()
        if len(fields) < 2:
            continue
        if len(fields) >= 3 and fields[2] != "(fetch)":
            continue
        remotes.setdefault(fields[0], fields[1])
    return remotes


def current_repository(cwd: Path | None = None) -> RepositoryRef:
    """Resolve the repository for the current working context."""
    override = os.environ.get("GH_REPO", "").strip()
    if override:
        return parse_repository(override)

    remotes = _git_remotes(cwd or Path.cwd())
    if not remotes:
        raise RepositoryResolutionError("no git remotes found")

    ordered = [name for name in PREFERRED_REMOTES if name in remotes]
    ordered.extend(name for name in remotes if name not in ordered)
    for remote_name in ordered:
        try:
            repository = parse_repository(remotes[remote_name])
        except RepositoryResolutionError:
            logger.debug("skipping unparsable remote %s: %s", remote_name, remotes[remote_name])
            continue
        logger.debug("resolved repository %s from remote %s", repository.full_name, remote_name)
        return repository
    raise RepositoryResolutionError("none of the git remotes point to a known repository")


__all__ = ["PREFERRED_REMOTES", "parse_repository", "current_repository"]
