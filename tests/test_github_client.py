"""Tests for sprintboard.clients.github_client against a mocked transport.

    pytest tests/test_github_client.py -v
"""

import json

import httpx
import pytest

from sprintboard.clients.github_client import GitHubAPIError, GitHubClient
from sprintboard.pyd_models.project_models import FieldKind

from factories import item_node, project_node


def _client(handler):
    return GitHubClient(
        "tok",
        base_url="https://api.example.test",
        graphql_url="https://api.example.test/graphql",
        transport=httpx.MockTransport(handler),
    )


def test_list_issues_sends_auth_and_params():
    seen = {}

    def handler(request):
        seen["request"] = request
        return httpx.Response(200, json=[
            {"number": 1, "title": "A", "created_at": "2026-10-01T00:00:00Z", "labels": ["bug", {"name": "ux"}]},
            {"number": 2, "title": "PR", "created_at": "2026-10-01T00:00:00Z", "pull_request": {"url": "x"}},
        ])

    issues = _client(handler).list_issues(
        "octo-org", "dashboard", state="all", sort="created", direction="desc",
        since="2026-09-17T00:00:00Z", page=2, per_page=500,
    )

    request = seen["request"]
    assert request.url.path == "/repos/octo-org/dashboard/issues"
    assert request.headers["Authorization"] == "Bearer tok"
    assert request.url.params["state"] == "all"
    assert request.url.params["page"] == "2"
    assert request.url.params["per_page"] == "100"
    assert request.url.params["since"] == "2026-09-17T00:00:00Z"
    assert "labels" not in request.url.params

    assert [i.number for i in issues] == [1, 2]
    assert issues[0].get_label_names() == ["bug", "ux"]
    assert not issues[0].is_pull_request
    assert issues[1].is_pull_request


def test_rest_error_raises_with_message():
    def handler(request):
        return httpx.Response(403, json={"message": "API rate limit exceeded for 1.2.3.4"})

    with pytest.raises(GitHubAPIError) as exc_info:
        _client(handler).list_issues("o", "r")

    assert exc_info.value.status_code == 403
    assert "rate limit exceeded" in exc_info.value.message


def test_rest_error_with_non_json_body():
    def handler(request):
        return httpx.Response(502, text="Bad gateway")

    with pytest.raises(GitHubAPIError) as exc_info:
        _client(handler).get_authenticated_user()

    assert exc_info.value.message == "Bad gateway"


def test_transport_failure_becomes_api_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(GitHubAPIError) as exc_info:
        _client(handler).get_authenticated_user()

    assert exc_info.value.status_code == 502


def test_graphql_errors_raise():
    def handler(request):
        return httpx.Response(200, json={
            "data": None,
            "errors": [{"type": "RATE_LIMITED", "message": "API rate limit exceeded for user ID 1."}],
        })

    with pytest.raises(GitHubAPIError) as exc_info:
        _client(handler).list_projects("o", "r")

    assert exc_info.value.status_code == 403
    assert "rate limit exceeded" in exc_info.value.message


def test_list_projects_parses_fields():
    seen = {}

    def handler(request):
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"data": {"repository": {"projectsV2": {"nodes": [
            project_node(project_id="P1", number=1, closed=True),
            project_node(project_id="P2", number=2),
        ]}}}})

    projects = _client(handler).list_projects("octo-org", "dashboard")

    assert seen["body"]["variables"] == {"owner": "octo-org", "name": "dashboard"}
    assert [p.id for p in projects] == ["P1", "P2"]
    assert projects[0].closed and not projects[1].closed
    kinds = [f.kind for f in projects[1].fields]
    assert kinds == [FieldKind.FIELD, FieldKind.SINGLE_SELECT, FieldKind.ITERATION]
    assert projects[1].fields[2].iterations[0].title == "Sprint 3"
    assert projects[1].fields[1].options[1].name == "Done"


def test_list_projects_missing_repository():
    def handler(request):
        return httpx.Response(200, json={"data": {"repository": None}})

    with pytest.raises(GitHubAPIError) as exc_info:
        _client(handler).list_projects("o", "missing")

    assert exc_info.value.status_code == 404


def test_list_project_items_parses_page():
    seen = {}

    def handler(request):
        seen["body"] = json.loads(request.content)
        draft = {"id": "draft", "fieldValues": {"nodes": []}, "content": {}}
        return httpx.Response(200, json={"data": {"node": {"items": {
            "pageInfo": {"hasNextPage": True, "endCursor": "Y3Vy"},
            "nodes": [item_node("a", 1, estimate=5.0), draft],
        }}}})

    page = _client(handler).list_project_items("PVT_1", after="prev")

    assert seen["body"]["variables"] == {"projectId": "PVT_1", "first": 100, "after": "prev"}
    assert page.has_next_page is True
    assert page.end_cursor == "Y3Vy"
    item, draft = page.items
    assert item.content.number == 1
    assert item.content.assignees[0].login == "octocat"
    assert item.value_for_field_id("F_sprint").title == "Sprint 3"
    assert item.value_for_field_name("Estimate").display_value == "5"
    assert draft.content is None


def test_list_contributed_repositories():
    def handler(request):
        return httpx.Response(200, json={"data": {"user": {"repositoriesContributedTo": {"nodes": [{
            "id": "R_1",
            "name": "dashboard",
            "nameWithOwner": "octo-org/dashboard",
            "description": None,
            "url": "https://github.com/octo-org/dashboard",
            "updatedAt": "2026-10-16T08:00:00Z",
            "stargazerCount": 4,
            "primaryLanguage": None,
        }]}}}})

    repos = _client(handler).list_contributed_repositories("octocat")

    assert repos[0].full_name == "octo-org/dashboard"
    assert repos[0].language is None
    assert repos[0].stargazers_count == 4
