"""
Sprint Item Resolution

Finds the items of one sprint on a repository's Projects (v2) board:

    projects fetched -> project and sprint field selected -> items paged -> done

Selection follows API response order: the first open project, then its
first field whose name mentions "sprint" or "iteration". An item is in
sprint N iff its value for that field is titled exactly "Sprint N".
"""

import logging
from typing import List, Optional

from sprintboard.clients.github_client import MAX_PAGE_SIZE, GitHubClient
from sprintboard.config import settings
from sprintboard.errors import InvalidArgument, NotFound
from sprintboard.pyd_models.project_models import (
    Project,
    ProjectField,
    ProjectItem,
    ProjectRef,
    SprintDetails,
)

logger = logging.getLogger(__name__)


def sprint_label(sprint: str) -> str:
    """The iteration title a sprint number maps to ("3" -> "Sprint 3")."""
    return f"Sprint {sprint}"


def select_active_project(projects: List[Project], project_number: Optional[int] = None) -> Project:
    """
    Pick the project to read the sprint from.

    Args:
        projects: Projects in API order
        project_number: If given, the open project with this number;
                        otherwise the first open project

    Raises:
        NotFound: If no open project qualifies
    """
    open_projects = [project for project in projects if not project.closed]

    if project_number is not None:
        for project in open_projects:
            if project.number == project_number:
                return project
        raise NotFound(f"No active project with number {project_number} found")

    if not open_projects:
        raise NotFound("No active project found")
    return open_projects[0]


def find_sprint_fields(project: Project) -> List[ProjectField]:
    """Every field whose name mentions "sprint" or "iteration", in order."""
    return [field for field in project.fields if field.looks_like_sprint()]


def item_in_sprint(item: ProjectItem, field_id: str, label: str) -> bool:
    """True if the item's value for ``field_id`` is titled exactly ``label``."""
    value = item.value_for_field_id(field_id)
    return value is not None and value.title == label


class SprintItemResolver:
    """
    Resolves the items of one sprint for a repository.

    Usage:
        resolver = SprintItemResolver(GitHubClient(token))
        details = resolver.resolve("octo-org", "dashboard", "12")
        for item in details.items:
            print(item.content.title)
    """

    def __init__(
        self,
        client: GitHubClient,
        page_size: Optional[int] = None,
        max_pages: Optional[int] = None,
    ):
        self.client = client
        self.page_size = min(page_size or settings.page_size, MAX_PAGE_SIZE)
        self.max_pages = max_pages or settings.max_pages

    def resolve(
        self,
        owner: str,
        repo: str,
        sprint: str,
        project_number: Optional[int] = None,
    ) -> SprintDetails:
        """
        Collect the items assigned to ``sprint``.

        Args:
            owner: Repository owner
            repo: Repository name
            sprint: Sprint number as typed by the user (matched as text)
            project_number: Pin the project instead of taking the first
                            open one

        Returns:
            SprintDetails; ``items`` may be empty

        Raises:
            InvalidArgument: If ``sprint`` is blank
            NotFound: No active project, or no sprint-like field on it
            GitHubAPIError: If any upstream request fails
        """
        if not (sprint or "").strip():
            raise InvalidArgument("Sprint parameter is required")
        label = sprint_label(sprint)

        projects = self.client.list_projects(owner, repo)
        logger.info(f"Found {len(projects)} project(s) for {owner}/{repo}")

        project = select_active_project(projects, project_number)
        logger.info(f"Using project #{project.number} '{project.title}'")

        sprint_fields = find_sprint_fields(project)
        if not sprint_fields:
            raise NotFound("No sprint-related fields found in project")
        sprint_field = sprint_fields[0]
        if len(sprint_fields) > 1:
            logger.info(
                f"Project has {len(sprint_fields)} sprint-like fields "
                f"{[f.name for f in sprint_fields]}, using '{sprint_field.name}'"
            )

        items = self._collect_items(project.id, sprint_field.id, label)
        logger.info(f"✅ {len(items)} item(s) in {label} of '{project.title}'")

        return SprintDetails(
            repository=f"{owner}/{repo}",
            project=ProjectRef(id=project.id, title=project.title, number=project.number),
            sprint=label,
            sprint_field=sprint_field.name,
            sprint_fields=[field.name for field in sprint_fields],
            items=items,
            total_items=len(items),
        )

    def _collect_items(self, project_id: str, field_id: str, label: str) -> List[ProjectItem]:
        matched: List[ProjectItem] = []
        cursor = None
        page_count = 0

        while True:
            page_count += 1
            page = self.client.list_project_items(project_id, after=cursor, first=self.page_size)
            kept = [item for item in page.items if item_in_sprint(item, field_id, label)]
            matched.extend(kept)
            logger.debug(f"Items page {page_count}: {len(page.items)} items, {len(kept)} in {label}")

            if not page.has_next_page:
                break

            if page_count >= self.max_pages:
                logger.warning(
                    f"⚠️  Stopped paging project items after {page_count} pages "
                    f"(MAX_PAGES={self.max_pages}); results are truncated"
                )
                break

            cursor = page.end_cursor

        return matched
