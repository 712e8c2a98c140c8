"""
API Clients

This package contains client classes for external APIs:
- GitHubClient: Interact with the GitHub REST and GraphQL APIs
"""

from sprintboard.clients.github_client import GitHubClient, GitHubAPIError

__all__ = ["GitHubClient", "GitHubAPIError"]
