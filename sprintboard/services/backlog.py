"""
Backlog Statistics

Turns a repository's issues into three rolling-window views:
new PBIs, new PBIs carrying the tracking label, and completed PBIs.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from sprintboard.clients.github_client import GitHubClient
from sprintboard.config import settings
from sprintboard.pyd_models.github_models import (
    BacklogStats,
    GitHubIssue,
    IssueBucket,
    IssueSummary,
)
from sprintboard.services.issue_collector import IssueCollector

logger = logging.getLogger(__name__)


def _bucket(issues: List[GitHubIssue]) -> IssueBucket:
    return IssueBucket(
        count=len(issues),
        issues=[
            IssueSummary(
                number=issue.number,
                title=issue.title,
                created_at=issue.created_at,
                closed_at=issue.closed_at,
            )
            for issue in issues
        ],
    )


def build_backlog_stats(
    repository: str,
    issues: Iterable[GitHubIssue],
    now: datetime,
    window_days: int = 30,
    label: str = "YakShaver",
) -> BacklogStats:
    """
    Compute backlog statistics for ``issues``.

    Args:
        repository: "owner/name", echoed in the result
        issues: Issues in display order (usually newest first)
        now: End of the window; must be timezone-aware
        window_days: Window length in days
        label: Label name that marks tracked PBIs (exact match)

    Returns:
        BacklogStats with the three buckets, each in input order
    """
    since = now - timedelta(days=window_days)
    issues = list(issues)

    new_issues = [issue for issue in issues if issue.created_at >= since]
    labeled_issues = [issue for issue in new_issues if issue.has_label(label)]
    completed_issues = [
        issue for issue in issues
        if issue.closed_at is not None and issue.closed_at >= since
    ]

    return BacklogStats(
        repository=repository,
        since=since,
        label=label,
        new_pbis=_bucket(new_issues),
        labeled_pbis=_bucket(labeled_issues),
        completed_pbis=_bucket(completed_issues),
    )


def fetch_backlog_stats(
    client: GitHubClient,
    owner: str,
    repo: str,
    now: Optional[datetime] = None,
    window_days: Optional[int] = None,
    label: Optional[str] = None,
) -> BacklogStats:
    """
    Collect issues for ``owner/repo`` and build its backlog statistics.

    Only issues updated inside the window are requested: anything created
    or closed in the window was necessarily updated in it too.
    """
    now = now or datetime.now(timezone.utc)
    window_days = window_days or settings.backlog_window_days
    label = label or settings.backlog_label
    since = now - timedelta(days=window_days)

    issues = IssueCollector(client).collect(
        owner,
        repo,
        state="all",
        sort="created",
        direction="desc",
        since=since.strftime("%Y-%m-%dT%H:%M:%SZ"),
    )

    stats = build_backlog_stats(f"{owner}/{repo}", issues, now, window_days, label)
    logger.info(
        f"📊 {owner}/{repo}: {stats.new_pbis.count} new, "
        f"{stats.labeled_pbis.count} labeled '{label}', "
        f"{stats.completed_pbis.count} completed since {since.date()}"
    )
    return stats
