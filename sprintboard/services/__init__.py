"""
Services

Paging and correlation logic on top of the GitHub client:
- IssueCollector: every issue of a repository, pull requests dropped
- SprintItemResolver: the items of one sprint on the active project
- backlog: rolling-window backlog statistics
- table_exporter: Markdown / HTML tables for the clipboard
"""

from sprintboard.services.issue_collector import IssueCollector
from sprintboard.services.sprint_resolver import SprintItemResolver
from sprintboard.services.backlog import build_backlog_stats, fetch_backlog_stats
from sprintboard.services.table_exporter import ExportFormat, render

__all__ = [
    "IssueCollector",
    "SprintItemResolver",
    "build_backlog_stats",
    "fetch_backlog_stats",
    "ExportFormat",
    "render",
]
