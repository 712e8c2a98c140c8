"""Tests for sprintboard.services.sprint_resolver selection and paging.

    pytest tests/test_sprint_resolver.py -v
"""

import pytest

from sprintboard.clients.github_client import GitHubAPIError
from sprintboard.errors import InvalidArgument, NotFound
from sprintboard.services.sprint_resolver import (
    SprintItemResolver,
    find_sprint_fields,
    item_in_sprint,
    select_active_project,
    sprint_label,
)

from factories import items_page, make_item, make_project


def test_sprint_label_is_literal():
    assert sprint_label("3") == "Sprint 3"
    assert sprint_label("03") == "Sprint 03"


def test_select_first_open_project_in_response_order():
    projects = [
        make_project(project_id="P1", number=1, closed=True),
        make_project(project_id="P2", number=2),
        make_project(project_id="P3", number=3),
    ]
    assert select_active_project(projects).id == "P2"


def test_select_fails_when_every_project_is_closed():
    projects = [make_project(closed=True), make_project(project_id="P2", number=2, closed=True)]
    with pytest.raises(NotFound, match="No active project"):
        select_active_project(projects)


def test_select_fails_without_projects():
    with pytest.raises(NotFound):
        select_active_project([])


def test_select_pinned_project_number():
    projects = [make_project(project_id="P1", number=1), make_project(project_id="P7", number=7)]
    assert select_active_project(projects, project_number=7).id == "P7"


def test_select_pinned_project_must_be_open():
    projects = [make_project(project_id="P1", number=1), make_project(project_id="P7", number=7, closed=True)]
    with pytest.raises(NotFound, match="number 7"):
        select_active_project(projects, project_number=7)


def test_find_sprint_fields_is_case_insensitive_and_ordered():
    project = make_project(fields=[
        {"id": "F1", "name": "Status", "__typename": "ProjectV2SingleSelectField"},
        {"id": "F2", "name": "Current ITERATION", "__typename": "ProjectV2IterationField"},
        {"id": "F3", "name": "sprint goal", "__typename": "ProjectV2Field"},
    ])
    assert [field.id for field in find_sprint_fields(project)] == ["F2", "F3"]


def test_item_in_sprint_requires_exact_title():
    assert item_in_sprint(make_item("a", 1, sprint_title="Sprint 3"), "F_sprint", "Sprint 3")
    assert not item_in_sprint(make_item("b", 2, sprint_title="sprint 3"), "F_sprint", "Sprint 3")
    assert not item_in_sprint(make_item("c", 3, sprint_title="Sprint 03"), "F_sprint", "Sprint 3")
    assert not item_in_sprint(make_item("d", 4, sprint_title=None), "F_sprint", "Sprint 3")


def test_item_in_sprint_ignores_other_fields_with_matching_title():
    item = make_item("a", 1, sprint_title="Sprint 3", sprint_field_id="F_other")
    assert not item_in_sprint(item, "F_sprint", "Sprint 3")


def test_resolve_pages_by_cursor_and_accumulates(mock_client):
    mock_client.list_projects.return_value = [make_project(project_id="PVT_1", title="Team Board")]
    mock_client.list_project_items.side_effect = [
        items_page(
            [make_item("a", 1), make_item("b", 2, sprint_title="Sprint 2"), make_item("c", 3)],
            has_next_page=True,
            end_cursor="cur1",
        ),
        items_page([make_item("d", 4, sprint_title="Sprint 03"), make_item("e", 5)], has_next_page=False),
    ]

    details = SprintItemResolver(mock_client).resolve("octo-org", "dashboard", "3")

    assert [item.id for item in details.items] == ["a", "c", "e"]
    assert details.total_items == 3
    assert details.sprint == "Sprint 3"
    assert details.sprint_field == "Sprint"
    assert details.project.title == "Team Board"
    assert details.repository == "octo-org/dashboard"

    cursors = [call.kwargs["after"] for call in mock_client.list_project_items.call_args_list]
    assert cursors == [None, "cur1"]
    assert all(call.args[0] == "PVT_1" for call in mock_client.list_project_items.call_args_list)


def test_resolve_uses_first_sprint_like_field(mock_client):
    mock_client.list_projects.return_value = [make_project(fields=[
        {"id": "F_iter", "name": "Iteration", "__typename": "ProjectV2IterationField"},
        {"id": "F_sprint", "name": "Sprint", "__typename": "ProjectV2IterationField"},
    ])]
    mock_client.list_project_items.return_value = items_page([
        make_item("a", 1, sprint_field_id="F_sprint"),
        make_item("b", 2, sprint_field_id="F_iter"),
    ])

    details = SprintItemResolver(mock_client).resolve("o", "r", "3")

    assert details.sprint_field == "Iteration"
    assert details.sprint_fields == ["Iteration", "Sprint"]
    assert [item.id for item in details.items] == ["b"]


def test_resolve_without_sprint_field(mock_client):
    mock_client.list_projects.return_value = [make_project(fields=[
        {"id": "F1", "name": "Status", "__typename": "ProjectV2SingleSelectField"},
    ])]

    with pytest.raises(NotFound, match="No sprint-related fields"):
        SprintItemResolver(mock_client).resolve("o", "r", "3")
    mock_client.list_project_items.assert_not_called()


def test_resolve_without_open_project(mock_client):
    mock_client.list_projects.return_value = [make_project(closed=True)]

    with pytest.raises(NotFound):
        SprintItemResolver(mock_client).resolve("o", "r", "3")


def test_resolve_blank_sprint(mock_client):
    with pytest.raises(InvalidArgument):
        SprintItemResolver(mock_client).resolve("o", "r", "  ")
    mock_client.list_projects.assert_not_called()


def test_resolve_matches_sprint_value_verbatim(mock_client):
    mock_client.list_projects.return_value = [make_project()]
    mock_client.list_project_items.return_value = items_page([
        make_item("a", 1, sprint_title="Sprint 3"),
        make_item("b", 2, sprint_title="Sprint  3"),
    ])

    details = SprintItemResolver(mock_client).resolve("o", "r", " 3")

    assert details.sprint == "Sprint  3"
    assert [item.id for item in details.items] == ["b"]


def test_resolve_propagates_upstream_errors(mock_client):
    mock_client.list_projects.return_value = [make_project()]
    mock_client.list_project_items.side_effect = GitHubAPIError(403, "API rate limit exceeded for user")

    with pytest.raises(GitHubAPIError):
        SprintItemResolver(mock_client).resolve("o", "r", "3")


def test_resolve_stops_at_max_pages(mock_client):
    mock_client.list_projects.return_value = [make_project()]
    mock_client.list_project_items.return_value = items_page([make_item("a", 1)], has_next_page=True, end_cursor="c")

    details = SprintItemResolver(mock_client, max_pages=2).resolve("o", "r", "3")

    assert mock_client.list_project_items.call_count == 2
    assert details.total_items == 2
