"""
Pydantic models for GitHub API responses. These models:
1. Define the structure of data we receive from GitHub
2. Automatically validate and parse JSON responses
3. Provide type hints for better IDE support

Reference: https://docs.github.com/en/rest/issues/issues
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime


class GitHubUser(BaseModel):
    """
    Represents a GitHub user.

    Attributes:
        login: GitHub username
        id: User ID
        avatar_url: URL to user's avatar image
        html_url: URL to user's GitHub profile
    """
    login: str
    id: int
    avatar_url: Optional[str] = None
    html_url: Optional[str] = None

    class Config:
        # Allow extra fields from API response (ignore them)
        extra = "ignore"


class GitHubLabel(BaseModel):
    """
    Represents a GitHub issue label.

    The issues endpoint may return a label either as an object or as a
    bare string; only the name is used downstream.
    """
    name: str = ""
    color: Optional[str] = None

    class Config:
        extra = "ignore"


class GitHubIssue(BaseModel):
    """
    Represents a GitHub issue as returned by the REST issues endpoint.

    The endpoint also returns pull requests; those carry a ``pull_request``
    object and are filtered out by the collector.

    Attributes:
        number: Issue number (e.g., 123)
        title: Issue title
        state: Issue state ("open", "closed")
        labels: List of labels attached to the issue
        created_at: When the issue was created
        closed_at: When the issue was closed (if it was)
        html_url: URL to the issue on GitHub
        pull_request: Present only when the entry is a pull request
    """
    number: int
    title: str
    state: str = "open"
    labels: List[GitHubLabel] = []
    created_at: datetime
    closed_at: Optional[datetime] = None
    html_url: Optional[str] = None
    pull_request: Optional[Dict[str, Any]] = None

    class Config:
        extra = "ignore"

    @field_validator("labels", mode="before")
    @classmethod
    def _coerce_string_labels(cls, value):
        if isinstance(value, list):
            return [{"name": item} if isinstance(item, str) else item for item in value]
        return value

    @property
    def is_pull_request(self) -> bool:
        return self.pull_request is not None

    def get_label_names(self) -> List[str]:
        """Helper method to get just the label names."""
        return [label.name for label in self.labels]

    def has_label(self, name: str) -> bool:
        return name in self.get_label_names()


class Repository(BaseModel):
    """
    A repository the authenticated user contributed to.

    Built from the GraphQL ``repositoriesContributedTo`` connection and
    exposed with REST-style field names.
    """
    id: str
    name: str
    full_name: str
    description: Optional[str] = None
    html_url: str
    updated_at: datetime
    stargazers_count: int = 0
    language: Optional[str] = None

    class Config:
        extra = "ignore"

    @classmethod
    def from_graphql(cls, node: dict) -> "Repository":
        language = node.get("primaryLanguage") or {}
        return cls(
            id=node["id"],
            name=node["name"],
            full_name=node["nameWithOwner"],
            description=node.get("description"),
            html_url=node["url"],
            updated_at=node["updatedAt"],
            stargazers_count=node.get("stargazerCount", 0),
            language=language.get("name"),
        )


class IssueSummary(BaseModel):
    """Slim issue view used in backlog statistics."""
    number: int
    title: str
    created_at: datetime
    closed_at: Optional[datetime] = None

    class Config:
        extra = "ignore"


class IssueBucket(BaseModel):
    """A counted group of issues."""
    count: int = 0
    issues: List[IssueSummary] = []


class BacklogStats(BaseModel):
    """
    Rolling-window backlog statistics for one repository.

    Attributes:
        repository: "owner/name"
        since: Start of the window
        label: Label used for ``labeled_pbis``
        new_pbis: Issues created inside the window
        labeled_pbis: New issues carrying ``label``
        completed_pbis: Issues closed inside the window
    """
    repository: str
    since: datetime
    label: str
    new_pbis: IssueBucket = Field(default_factory=IssueBucket)
    labeled_pbis: IssueBucket = Field(default_factory=IssueBucket)
    completed_pbis: IssueBucket = Field(default_factory=IssueBucket)
