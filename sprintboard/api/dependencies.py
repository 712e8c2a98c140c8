"""
Request Dependencies

The GitHub token travels with each request as a bearer token and is
turned into a GitHubClient here, so routes never look credentials up
themselves.
"""

from typing import Optional

from fastapi import Depends, Header

from sprintboard.clients.github_client import GitHubClient
from sprintboard.config import settings
from sprintboard.errors import Unauthenticated


def get_github_token(authorization: Optional[str] = Header(None)) -> str:
    """
    Extract the token from ``Authorization: Bearer <token>``.

    Falls back to the configured GITHUB_TOKEN when the header is absent.

    Raises:
        Unauthenticated: If neither is available, or the header is not a
                         bearer token
    """
    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() not in ("bearer", "token") or not token.strip():
            raise Unauthenticated("Not authenticated")
        return token.strip()

    if settings.github_token:
        return settings.github_token

    raise Unauthenticated("Not authenticated")


def get_github_client(token: str = Depends(get_github_token)) -> GitHubClient:
    """A client acting as the calling user."""
    return GitHubClient(token)
