"""
GitHub API Client

This client handles all interactions with the GitHub REST and GraphQL APIs.
It uses httpx for HTTP requests and handles authentication,
rate limit awareness and error handling.

Every method makes exactly one upstream request; paging loops live in the
services that call it.

Reference: https://docs.github.com/en/rest
           https://docs.github.com/en/graphql
"""

import httpx
import logging
from typing import List, Optional
from sprintboard.config import settings
from sprintboard.pyd_models.github_models import GitHubIssue, GitHubUser, Repository
from sprintboard.pyd_models.project_models import Project, ProjectItem, ProjectItemsPage

logger = logging.getLogger(__name__)


CONTRIBUTED_REPOSITORIES_QUERY = """
query($username: String!) {
  user(login: $username) {
    repositoriesContributedTo(
      first: 100,
      contributionTypes: [COMMIT, PULL_REQUEST],
      orderBy: { field: UPDATED_AT, direction: DESC }
    ) {
      nodes {
        id
        name
        nameWithOwner
        description
        url
        updatedAt
        stargazerCount
        primaryLanguage {
          name
        }
      }
    }
  }
}
"""

PROJECTS_QUERY = """
query($owner: String!, $name: String!) {
  repository(owner: $owner, name: $name) {
    projectsV2(first: 100) {
      nodes {
        id
        title
        number
        closed
        fields(first: 20) {
          nodes {
            ... on ProjectV2Field {
              id
              name
              __typename
            }
            ... on ProjectV2SingleSelectField {
              id
              name
              __typename
              options {
                id
                name
              }
            }
            ... on ProjectV2IterationField {
              id
              name
              __typename
              configuration {
                iterations {
                  id
                  title
                  startDate
                  duration
                }
              }
            }
          }
        }
      }
    }
  }
}
"""

PROJECT_ITEMS_QUERY = """
query($projectId: ID!, $first: Int!, $after: String) {
  node(id: $projectId) {
    ... on ProjectV2 {
      items(first: $first, after: $after) {
        pageInfo {
          hasNextPage
          endCursor
        }
        nodes {
          id
          fieldValues(first: 20) {
            nodes {
              ... on ProjectV2ItemFieldTextValue {
                field { ... on ProjectV2Field { id name } }
                text
              }
              ... on ProjectV2ItemFieldSingleSelectValue {
                field { ... on ProjectV2SingleSelectField { id name } }
                name
              }
              ... on ProjectV2ItemFieldIterationValue {
                field { ... on ProjectV2IterationField { id name } }
                title
              }
              ... on ProjectV2ItemFieldNumberValue {
                field { ... on ProjectV2Field { id name } }
                number
              }
              ... on ProjectV2ItemFieldDateValue {
                field { ... on ProjectV2Field { id name } }
                date
              }
            }
          }
          content {
            ... on Issue {
              id
              number
              title
              url
              assignees(first: 1) {
                nodes {
                  login
                  avatarUrl
                }
              }
              labels(first: 5) {
                nodes {
                  name
                  color
                }
              }
            }
          }
        }
      }
    }
  }
}
"""

# Largest page GitHub serves for REST and GraphQL connections
MAX_PAGE_SIZE = 100

# GraphQL reports errors with a 200 status; map the error type to the
# status the REST API would have used.
_GRAPHQL_ERROR_STATUS = {
    "RATE_LIMITED": 403,
    "NOT_FOUND": 404,
    "FORBIDDEN": 403,
}


class GitHubAPIError(Exception):
    """Custom exception for GitHub API errors."""
    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"GitHub API Error {status_code}: {message}")


class GitHubClient:
    """
    Client for interacting with GitHub's REST and GraphQL APIs.

    This class provides methods to:
    - Get the authenticated user
    - List one page of issues from a repository
    - List repositories the user contributed to
    - List a repository's Projects (v2) with their fields
    - List one page of a project's items

    Usage:
        client = GitHubClient(token)
        issues = client.list_issues("python", "cpython", state="all", page=2)
        projects = client.list_projects("octo-org", "dashboard")
    """

    def __init__(
        self,
        token: str,
        base_url: Optional[str] = None,
        graphql_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the GitHub client.

        Args:
            token: OAuth or personal access token for the calling user
            base_url: REST API root (defaults to GITHUB_API_URL)
            graphql_url: GraphQL endpoint (defaults to GITHUB_GRAPHQL_URL)
            timeout: Seconds per request (defaults to REQUEST_TIMEOUT)
            transport: Optional httpx transport, mainly for tests
        """
        self.token = token
        self.base_url = (base_url or settings.github_api_url).rstrip("/")
        self.graphql_url = graphql_url or settings.github_graphql_url
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.transport = transport

        # Set up headers for all requests
        self.headers = {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def _send(self, method: str, url: str, params: Optional[dict] = None, json_data: Optional[dict] = None) -> httpx.Response:
        with httpx.Client(transport=self.transport) as client:
            try:
                response = client.request(
                    method=method,
                    url=url,
                    headers=self.headers,
                    params=params,
                    json=json_data,
                    timeout=self.timeout,
                )
            except httpx.HTTPError as e:
                raise GitHubAPIError(502, f"Request to GitHub failed: {e}") from e

        if response.status_code >= 400:
            try:
                error_msg = response.json().get("message", "Unknown error")
            except ValueError:
                error_msg = response.text or "Unknown error"
            raise GitHubAPIError(response.status_code, error_msg)

        # Check rate limit (for monitoring only)
        rate_limit_remaining = response.headers.get("X-RateLimit-Remaining")
        if rate_limit_remaining and rate_limit_remaining.isdigit():
            remaining = int(rate_limit_remaining)
            if remaining < 100:
                logger.warning(f"GitHub API rate limit low: {remaining} requests remaining")

        return response

    def _make_request(self, method: str, endpoint: str, params: Optional[dict] = None):
        """
        Make a REST request to the GitHub API.

        Args:
            method: HTTP method
            endpoint: API endpoint (e.g., "/repos/owner/repo/issues")
            params: Query parameters

        Returns:
            Decoded JSON response

        Raises:
            GitHubAPIError: If the request fails
        """
        response = self._send(method, f"{self.base_url}{endpoint}", params=params)
        return response.json()

    def graphql(self, query: str, variables: dict) -> dict:
        """
        Execute a GraphQL query.

        Returns:
            The ``data`` member of the response

        Raises:
            GitHubAPIError: On HTTP failure or when the response carries
                            an ``errors`` array
        """
        response = self._send(
            "POST",
            self.graphql_url,
            json_data={"query": query, "variables": variables},
        )
        result = response.json()

        errors = result.get("errors")
        if errors:
            message = "; ".join(err.get("message", "Unknown error") for err in errors)
            status = _GRAPHQL_ERROR_STATUS.get(errors[0].get("type"), 502)
            raise GitHubAPIError(status, message)

        return result.get("data") or {}

    def get_authenticated_user(self) -> GitHubUser:
        """Get the user the token belongs to."""
        return GitHubUser(**self._make_request("GET", "/user"))

    def list_issues(
        self,
        owner: str,
        repo: str,
        state: str = "open",
        sort: Optional[str] = None,
        direction: Optional[str] = None,
        labels: Optional[str] = None,
        since: Optional[str] = None,
        page: int = 1,
        per_page: int = 100,
    ) -> List[GitHubIssue]:
        """
        List one page of issues from a GitHub repository.

        Pull requests are NOT filtered out here: the caller needs the raw
        page length to know whether another page exists.

        Args:
            owner: Repository owner
            repo: Repository name
            state: Issue state - "open", "closed", or "all"
            sort: "created", "updated" or "comments"
            direction: "asc" or "desc"
            labels: Comma-separated label names to filter by
            since: ISO 8601 timestamp; only issues updated at or after it
            page: Page number (1-based)
            per_page: Results per page, max 100

        Returns:
            List of GitHubIssue objects, pull requests included
        """
        endpoint = f"/repos/{owner}/{repo}/issues"

        params = {
            "state": state,
            "page": page,
            "per_page": min(per_page, MAX_PAGE_SIZE),
        }
        if sort:
            params["sort"] = sort
        if direction:
            params["direction"] = direction
        if labels:
            params["labels"] = labels
        if since:
            params["since"] = since

        response_data = self._make_request("GET", endpoint, params=params)

        return [GitHubIssue(**issue_data) for issue_data in response_data]

    def list_contributed_repositories(self, username: str) -> List[Repository]:
        """Repositories ``username`` committed or opened pull requests to."""
        data = self.graphql(CONTRIBUTED_REPOSITORIES_QUERY, {"username": username})
        user = data.get("user") or {}
        nodes = (user.get("repositoriesContributedTo") or {}).get("nodes") or []
        return [Repository.from_graphql(node) for node in nodes if node]

    def list_projects(self, owner: str, repo: str) -> List[Project]:
        """
        List a repository's Projects (v2), each with up to 20 fields.

        Raises:
            GitHubAPIError: 404 if the repository does not exist
        """
        data = self.graphql(PROJECTS_QUERY, {"owner": owner, "name": repo})
        repository = data.get("repository")
        if repository is None:
            raise GitHubAPIError(404, f"Repository {owner}/{repo} not found")
        nodes = (repository.get("projectsV2") or {}).get("nodes") or []
        return [Project.from_graphql(node) for node in nodes if node]

    def list_project_items(
        self,
        project_id: str,
        after: Optional[str] = None,
        first: int = 100,
    ) -> ProjectItemsPage:
        """
        Fetch one page of a project's items.

        Args:
            project_id: Project node ID
            after: Cursor from the previous page's ``end_cursor``
            first: Page size, max 100
        """
        data = self.graphql(
            PROJECT_ITEMS_QUERY,
            {"projectId": project_id, "first": min(first, MAX_PAGE_SIZE), "after": after},
        )
        node = data.get("node")
        if node is None:
            raise GitHubAPIError(404, f"Project {project_id} not found")

        items = node.get("items") or {}
        page_info = items.get("pageInfo") or {}
        return ProjectItemsPage(
            items=[ProjectItem.from_graphql(item) for item in items.get("nodes") or [] if item],
            has_next_page=bool(page_info.get("hasNextPage")),
            end_cursor=page_info.get("endCursor"),
        )
