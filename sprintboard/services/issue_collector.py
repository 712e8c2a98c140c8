"""
Issue Collection

Walks the REST issues endpoint page by page and returns every issue
(pull requests dropped) in the order GitHub served them.
"""

import logging
from typing import List, Optional

from sprintboard.clients.github_client import MAX_PAGE_SIZE, GitHubClient
from sprintboard.config import settings
from sprintboard.pyd_models.github_models import GitHubIssue

logger = logging.getLogger(__name__)


class IssueCollector:
    """
    Collects all issues of a repository.

    Paging stops on the first page shorter than ``page_size``. The raw page
    length is used, pull requests included, since the endpoint counts them
    toward the page. ``max_pages`` bounds the loop.

    Usage:
        collector = IssueCollector(GitHubClient(token))
        issues = collector.collect("octo-org", "dashboard", state="all")
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

    def collect(
        self,
        owner: str,
        repo: str,
        state: str = "open",
        sort: Optional[str] = None,
        direction: Optional[str] = None,
        labels: Optional[str] = None,
        since: Optional[str] = None,
    ) -> List[GitHubIssue]:
        """
        Fetch every page of issues for ``owner/repo``.

        Args:
            owner: Repository owner
            repo: Repository name
            state: "open", "closed" or "all"
            sort, direction, labels, since: Forwarded to the endpoint

        Returns:
            Non-pull-request issues in API order

        Raises:
            GitHubAPIError: If any page fails; nothing is returned then
        """
        collected: List[GitHubIssue] = []
        page = 1

        while True:
            batch = self.client.list_issues(
                owner,
                repo,
                state=state,
                sort=sort,
                direction=direction,
                labels=labels,
                since=since,
                page=page,
                per_page=self.page_size,
            )
            collected.extend(issue for issue in batch if not issue.is_pull_request)
            logger.debug(f"{owner}/{repo} issues page {page}: {len(batch)} entries")

            if len(batch) < self.page_size:
                break

            if page >= self.max_pages:
                logger.warning(
                    f"⚠️  Stopped paging {owner}/{repo} issues after {page} pages "
                    f"(MAX_PAGES={self.max_pages}); results are truncated"
                )
                break

            page += 1

        logger.info(f"Collected {len(collected)} issues from {owner}/{repo} in {page} page(s)")
        return collected
