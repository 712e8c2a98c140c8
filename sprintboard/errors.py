"""
Dashboard Errors

Every failure that can reach a caller is one of the exceptions below.
Each carries the HTTP status the API answers with, so the FastAPI
exception handler can turn any of them into ``{"error": message}``.
"""

from sprintboard.clients.github_client import GitHubAPIError


RATE_LIMIT_MARKER = "rate limit exceeded"


class DashboardError(Exception):
    """Base class for errors surfaced to API callers."""
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class Unauthenticated(DashboardError):
    """No usable GitHub token."""
    status_code = 401


class InvalidArgument(DashboardError):
    """Missing or malformed request parameter."""
    status_code = 400


class NotFound(DashboardError):
    """Unknown repository, no active project, no sprint field, or nothing in the sprint."""
    status_code = 404


class RateLimited(DashboardError):
    """GitHub quota exhausted."""
    status_code = 429


class InternalError(DashboardError):
    """Any other upstream failure."""
    status_code = 500


def is_rate_limit_error(error: GitHubAPIError) -> bool:
    return RATE_LIMIT_MARKER in error.message.lower()


def classify_github_error(error: GitHubAPIError, context: str) -> DashboardError:
    """
    Map an upstream error onto the dashboard taxonomy.

    Args:
        error: The error raised by GitHubClient
        context: What we were doing, used as the message for failures
                 the caller can do nothing about (e.g., "Failed to fetch
                 sprint details")

    Returns:
        The DashboardError to raise
    """
    if is_rate_limit_error(error):
        return RateLimited("GitHub API rate limit exceeded. Please try again later.")
    if error.status_code == 401:
        return Unauthenticated("Not authenticated")
    if error.status_code == 404:
        return NotFound(f"{context}: {error.message}")
    return InternalError(context)


def parse_repository(repo: str):
    """
    Split "owner/name" into its two parts.

    Raises:
        InvalidArgument: If the value is empty or not exactly two
                         non-empty segments
    """
    if not repo:
        raise InvalidArgument("Repository parameter is required")
    parts = repo.split("/")
    if len(parts) != 2 or not all(part.strip() for part in parts):
        raise InvalidArgument(f"Invalid repository '{repo}'. Use: owner/name")
    return parts[0].strip(), parts[1].strip()
