"""
Data Schemas

This package contains Pydantic models for data validation:
- github_models: Issues, repositories and backlog statistics
- project_models: Projects (v2) boards, fields, items and sprint details
"""

from sprintboard.pyd_models.github_models import (
    GitHubIssue,
    GitHubLabel,
    GitHubUser,
    Repository,
    BacklogStats,
)
from sprintboard.pyd_models.project_models import (
    FieldKind,
    Project,
    ProjectField,
    ProjectItem,
    FieldValue,
    SprintDetails,
)

__all__ = [
    "GitHubIssue",
    "GitHubLabel",
    "GitHubUser",
    "Repository",
    "BacklogStats",
    "FieldKind",
    "Project",
    "ProjectField",
    "ProjectItem",
    "FieldValue",
    "SprintDetails",
]
