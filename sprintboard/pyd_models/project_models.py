"""
Pydantic models for GitHub Projects (v2) GraphQL data.

Projects v2 are only reachable through GraphQL. Each model has a
``from_graphql`` constructor that takes a raw node from the response and
flattens the ``nodes`` wrappers GraphQL puts around every connection.

Reference: https://docs.github.com/en/issues/planning-and-tracking-with-projects/automating-your-project/using-the-api-to-manage-projects
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from enum import Enum


class FieldKind(str, Enum):
    """Project field kinds, derived from the GraphQL ``__typename``."""
    FIELD = "field"
    SINGLE_SELECT = "single_select"
    ITERATION = "iteration"


_TYPENAME_TO_KIND = {
    "ProjectV2Field": FieldKind.FIELD,
    "ProjectV2SingleSelectField": FieldKind.SINGLE_SELECT,
    "ProjectV2IterationField": FieldKind.ITERATION,
}


def _nodes(connection: Optional[dict]) -> list:
    """Unwrap ``{"nodes": [...]}``, dropping nulls and empty fragments."""
    if not connection:
        return []
    return [node for node in connection.get("nodes") or [] if node]


class FieldOption(BaseModel):
    """An option of a single-select field (e.g., a Status column)."""
    id: str
    name: str

    class Config:
        extra = "ignore"


class Iteration(BaseModel):
    """A configured iteration of an iteration field."""
    id: str
    title: str
    start_date: Optional[str] = None  # YYYY-MM-DD
    duration: Optional[int] = None  # days

    class Config:
        extra = "ignore"


class ProjectField(BaseModel):
    """
    A field definition on a project.

    Attributes:
        id: Field node ID
        name: Display name (e.g., "Status", "Sprint")
        kind: Plain, single-select or iteration
        options: Single-select options, in board order
        iterations: Configured iterations, for iteration fields
    """
    id: str
    name: str
    kind: FieldKind = FieldKind.FIELD
    options: List[FieldOption] = []
    iterations: List[Iteration] = []

    class Config:
        extra = "ignore"

    @classmethod
    def from_graphql(cls, node: dict) -> "ProjectField":
        configuration = node.get("configuration") or {}
        return cls(
            id=node["id"],
            name=node["name"],
            kind=_TYPENAME_TO_KIND.get(node.get("__typename"), FieldKind.FIELD),
            options=node.get("options") or [],
            iterations=[
                Iteration(
                    id=it["id"],
                    title=it["title"],
                    start_date=it.get("startDate"),
                    duration=it.get("duration"),
                )
                for it in configuration.get("iterations") or []
            ],
        )

    def looks_like_sprint(self) -> bool:
        """True if the name mentions "sprint" or "iteration" (any case)."""
        lowered = self.name.lower()
        return "sprint" in lowered or "iteration" in lowered


class Project(BaseModel):
    """
    A Projects (v2) board linked to a repository.

    Attributes:
        id: Project node ID (used for the items query)
        title: Board title
        number: Board number, unique per owner
        closed: Whether the board has been closed
        fields: Field definitions in API order
    """
    id: str
    title: str
    number: int
    closed: bool = False
    fields: List[ProjectField] = []

    class Config:
        extra = "ignore"

    @classmethod
    def from_graphql(cls, node: dict) -> "Project":
        return cls(
            id=node["id"],
            title=node["title"],
            number=node["number"],
            closed=node.get("closed", False),
            fields=[
                ProjectField.from_graphql(field)
                for field in _nodes(node.get("fields"))
                if field.get("id")
            ],
        )


class FieldValue(BaseModel):
    """
    The value one item holds for one field.

    Which attribute is populated depends on the field kind: ``text`` for
    plain text fields, ``name`` for single-select options, ``number`` for
    number fields, ``title`` for iterations and ``date`` for date fields.
    """
    field_id: Optional[str] = None
    field_name: Optional[str] = None
    text: Optional[str] = None
    name: Optional[str] = None
    number: Optional[float] = None
    title: Optional[str] = None
    date: Optional[str] = None

    class Config:
        extra = "ignore"

    @classmethod
    def from_graphql(cls, node: dict) -> "FieldValue":
        field = node.get("field") or {}
        return cls(
            field_id=field.get("id"),
            field_name=field.get("name"),
            text=node.get("text"),
            name=node.get("name"),
            number=node.get("number"),
            title=node.get("title"),
            date=node.get("date"),
        )

    @property
    def display_value(self) -> Optional[str]:
        """First populated value as text: text, option name, number, date."""
        if self.text:
            return self.text
        if self.name:
            return self.name
        if self.number is not None:
            if float(self.number).is_integer():
                return str(int(self.number))
            return str(self.number)
        if self.date:
            return self.date
        return None


class Assignee(BaseModel):
    login: str
    avatar_url: Optional[str] = None


class ItemLabel(BaseModel):
    name: str
    color: Optional[str] = None


class IssueRef(BaseModel):
    """The issue behind a project item."""
    id: Optional[str] = None
    number: int
    title: str
    url: str
    assignees: List[Assignee] = []
    labels: List[ItemLabel] = []

    class Config:
        extra = "ignore"

    @classmethod
    def from_graphql(cls, node: dict) -> "IssueRef":
        return cls(
            id=node.get("id"),
            number=node["number"],
            title=node["title"],
            url=node["url"],
            assignees=[
                Assignee(login=a["login"], avatar_url=a.get("avatarUrl"))
                for a in _nodes(node.get("assignees"))
            ],
            labels=[
                ItemLabel(name=label["name"], color=label.get("color"))
                for label in _nodes(node.get("labels"))
            ],
        )


class ProjectItem(BaseModel):
    """
    An item on a project board.

    Draft issues and pull requests have no issue content; ``content`` is
    None for those.
    """
    id: str
    content: Optional[IssueRef] = None
    field_values: List[FieldValue] = []

    class Config:
        extra = "ignore"

    @classmethod
    def from_graphql(cls, node: dict) -> "ProjectItem":
        content = node.get("content") or {}
        return cls(
            id=node["id"],
            content=IssueRef.from_graphql(content) if content.get("number") is not None else None,
            field_values=[FieldValue.from_graphql(v) for v in _nodes(node.get("fieldValues"))],
        )

    def value_for_field_id(self, field_id: str) -> Optional[FieldValue]:
        """First value bound to the field with this ID."""
        return next((v for v in self.field_values if v.field_id == field_id), None)

    def value_for_field_name(self, field_name: str) -> Optional[FieldValue]:
        """First value bound to a field with this display name."""
        return next((v for v in self.field_values if v.field_name == field_name), None)


class ProjectItemsPage(BaseModel):
    """One page of the items connection plus its cursor."""
    items: List[ProjectItem] = []
    has_next_page: bool = False
    end_cursor: Optional[str] = None


class ProjectRef(BaseModel):
    """Identifies the project a sprint was resolved against."""
    id: str
    title: str
    number: int


class SprintDetails(BaseModel):
    """
    Items assigned to one sprint of the active project.

    Attributes:
        repository: "owner/name"
        project: The project the items were read from
        sprint: The iteration label matched (e.g., "Sprint 3")
        sprint_field: Name of the iteration field used
        sprint_fields: Every sprint-like field name found on the project
        items: Matching items in board order
        total_items: len(items)
    """
    repository: str
    project: ProjectRef
    sprint: str
    sprint_field: str
    sprint_fields: List[str] = []
    items: List[ProjectItem] = Field(default_factory=list)
    total_items: int = 0
