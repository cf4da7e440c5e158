"""Exception hierarchy shared by the CLI, gateway, and runtime loop.

Startup and remote failures propagate to ``forkview.cli`` which reports them
and exits non-zero. ``BrowserLaunchError`` is the one recoverable failure: the
loop turns it into a transient status message.
"""

from __future__ import annotations


class ForkviewError(Exception):
    """Base class for errors raised by forkview."""


class RepositoryResolutionError(ForkviewError):
    """Repository argument is malformed or the current repository is unknown."""


class AuthenticationError(ForkviewError):
    """No API token could be found for the target host."""


class GatewayError(ForkviewError):
    """Remote query failed at the transport or GraphQL layer."""


class BrowserLaunchError(ForkviewError):
    """Opening a URL in the system browser failed."""


__all__ = [
    "ForkviewError",
    "RepositoryResolutionError",
    "AuthenticationError",
    "GatewayError",
    "BrowserLaunchError",
]
