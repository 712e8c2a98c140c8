"""Shared fixtures for the sprintboard tests."""

from unittest.mock import MagicMock

import pytest

from sprintboard.clients.github_client import GitHubClient


@pytest.fixture
def mock_client():
    return MagicMock(spec=GitHubClient)
