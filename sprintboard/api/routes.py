"""
API Routes

This module contains all API endpoints for the sprint dashboard.

Endpoints:
- GET /repositories - Repositories the authenticated user contributed to
- GET /backlog-stats?repo=owner/name - 30-day backlog statistics
- GET /sprint-details?repo=owner/name&sprint=N - Items in sprint N
- GET /sprint-details/export?repo=owner/name&sprint=N&format=markdown|html
  - Sprint items as a table ready for the clipboard

Errors are raised as DashboardError subclasses; the handler registered in
main.py turns them into ``{"error": message}`` responses.
"""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from typing import List, Optional
import logging

from sprintboard.api.dependencies import get_github_client
from sprintboard.clients.github_client import GitHubClient, GitHubAPIError
from sprintboard.errors import (
    DashboardError,
    InternalError,
    NotFound,
    classify_github_error,
    parse_repository,
)
from sprintboard.pyd_models.github_models import BacklogStats, Repository
from sprintboard.pyd_models.project_models import SprintDetails
from sprintboard.services.backlog import fetch_backlog_stats
from sprintboard.services.sprint_resolver import SprintItemResolver
from sprintboard.services.table_exporter import (
    SPRINT_HEADERS,
    ExportFormat,
    render,
    sprint_export_rows,
)

logger = logging.getLogger(__name__)

# Create router
router = APIRouter()


def _upstream_failure(error: GitHubAPIError, context: str) -> DashboardError:
    logger.error(f"❌ GitHub API error: {error}")
    return classify_github_error(error, context)


def _unexpected_failure(error: Exception, context: str) -> DashboardError:
    logger.exception(f"❌ Unexpected error: {error}")
    return InternalError(context)


@router.get("/repositories", response_model=List[Repository])
def list_repositories(client: GitHubClient = Depends(get_github_client)):
    """
    List repositories the authenticated user contributed to.

    Looks up the token's user, then asks GraphQL for the repositories
    they committed or opened pull requests to, most recently updated first.

    **Example:**
    ```
    GET /repositories
    Authorization: Bearer <token>
    ```
    """
    context = "Failed to fetch repositories"
    try:
        user = client.get_authenticated_user()
        logger.info(f"📋 Fetching repositories for {user.login}")
        repositories = client.list_contributed_repositories(user.login)
        logger.info(f"✅ Found {len(repositories)} repositories for {user.login}")
        return repositories

    except GitHubAPIError as e:
        raise _upstream_failure(e, context)
    except DashboardError:
        raise
    except Exception as e:
        raise _unexpected_failure(e, context)


@router.get("/backlog-stats", response_model=BacklogStats)
def backlog_stats(
    repo: Optional[str] = Query(None, description="Repository in 'owner/name' format; an unknown repository returns 404"),
    client: GitHubClient = Depends(get_github_client),
):
    """
    Backlog statistics for the last 30 days.

    **Returns:**
    - **new_pbis**: issues created in the window
    - **labeled_pbis**: new issues with the tracking label (BACKLOG_LABEL)
    - **completed_pbis**: issues closed in the window

    **Example:**
    ```
    GET /backlog-stats?repo=octo-org/dashboard
    ```
    """
    owner, name = parse_repository(repo)
    context = "Failed to fetch backlog statistics"
    logger.info(f"📊 Fetching backlog statistics: {owner}/{name}")

    try:
        return fetch_backlog_stats(client, owner, name)

    except GitHubAPIError as e:
        raise _upstream_failure(e, context)
    except DashboardError:
        raise
    except Exception as e:
        raise _unexpected_failure(e, context)


def _resolve_sprint(client: GitHubClient, repo: Optional[str], sprint: Optional[str], project: Optional[int]) -> SprintDetails:
    owner, name = parse_repository(repo)
    context = "Failed to fetch sprint details"
    logger.info(f"🏃 Fetching sprint details: {owner}/{name} sprint={sprint} project={project}")

    try:
        details = SprintItemResolver(client).resolve(owner, name, sprint, project_number=project)

    except GitHubAPIError as e:
        raise _upstream_failure(e, context)
    except DashboardError:
        raise
    except Exception as e:
        raise _unexpected_failure(e, context)

    if not details.items:
        raise NotFound(f"No items found for {details.sprint} in project '{details.project.title}'")
    return details


@router.get("/sprint-details", response_model=SprintDetails)
def sprint_details(
    repo: Optional[str] = Query(None, description="Repository in 'owner/name' format; an unknown repository returns 404"),
    sprint: Optional[str] = Query(None, description="Sprint number; matches the iteration titled 'Sprint <n>' exactly, whitespace included"),
    project: Optional[int] = Query(None, description="Project number to use instead of the first open project"),
    client: GitHubClient = Depends(get_github_client),
):
    """
    Items assigned to one sprint on the repository's active project.

    **Example:**
    ```
    GET /sprint-details?repo=octo-org/dashboard&sprint=12
    ```
    """
    return _resolve_sprint(client, repo, sprint, project)


@router.get("/sprint-details/export")
def export_sprint_details(
    repo: Optional[str] = Query(None, description="Repository in 'owner/name' format; an unknown repository returns 404"),
    sprint: Optional[str] = Query(None, description="Sprint number"),
    format: ExportFormat = Query(ExportFormat.MARKDOWN, description="'markdown' or 'html'"),
    project: Optional[int] = Query(None, description="Project number to use instead of the first open project"),
    client: GitHubClient = Depends(get_github_client),
):
    """
    Sprint items rendered as a table.

    Markdown comes back as ``text/plain`` for chat, HTML as ``text/html``
    for email; the client puts the body on the clipboard as-is.
    """
    details = _resolve_sprint(client, repo, sprint, project)
    body = render(SPRINT_HEADERS, sprint_export_rows(details.items), format)
    logger.info(f"📋 Exported {details.total_items} item(s) of {details.sprint} as {format.value}")
    return Response(content=body, media_type=format.media_type)
