from typing import Any
from unittest.mock import Mock

import pytest

from collector.aggregate import RepositoryAggregator
from collector.requests import GitHubRequester
from collector.trends import TrendsRequester

REPO_PATH = '/repos/octo/widget'


def make_commit(login: str | None, authored_at: str) -> dict[str, Any]:
    """Create a commit object shaped like the one from GitHub API."""
    return {
        'sha': f'{login}-{authored_at}',
        'author': {'login': login} if login else None,
        'commit': {'author': {'name': login or 'Unknown', 'date': authored_at}},
    }


def contributor_pages(*sizes: int):
    """Create a responder returning pages of contributors of the given sizes."""
    def respond(*, page: int, **_: Any) -> list[dict[str, Any]]:
        return [{'login': f'user{page}-{i}'} for i in range(sizes[page - 1])]

    return respond


def make_github(responses: dict[str, Any]) -> GitHubRequester:
    """
    Create a GitHub requester answering from ``responses`` keyed by path.
    Values can be data, exceptions to raise or callables receiving query parameters.
    """
    def request_data(path: str, /, **params: Any) -> Any:
        value = responses[path]
        if isinstance(value, Exception):
            raise value
        if callable(value):
            return value(**params)
        return value

    github = GitHubRequester('test-token')
    github.request_data = Mock(side_effect=request_data)
    return github


@pytest.fixture
def github_responses():
    """Create sample GitHub API responses for the repository octo/widget."""
    return {
        REPO_PATH: {
            'name': 'widget',
            'description': 'A widget',
            'stargazers_count': 42,
            'forks_count': 7,
            'created_at': '2020-01-01T00:00:00Z',
            'updated_at': '2024-05-02T12:30:00Z',
            'homepage': 'https://widget.dev',
        },
        f'{REPO_PATH}/issues': [
            {
                'title': 'Crash on start',
                'user': {'login': 'alice'},
                'html_url': 'https://github.com/octo/widget/issues/2',
            },
            {
                'title': 'Typo in README',
                'user': {'login': 'bob'},
                'html_url': 'https://github.com/octo/widget/issues/1',
            },
        ],
        f'{REPO_PATH}/releases': [{'name': 'v1.0', 'tag_name': 'v1.0.0'}],
        f'{REPO_PATH}/languages': {'JavaScript': 500, 'HTML': 100},
        f'{REPO_PATH}/contributors': contributor_pages(3),
        # Newest first, as GitHub returns them
        f'{REPO_PATH}/commits': [
            make_commit('B', '2024-05-02T09:00:00Z'),
            make_commit(None, '2024-05-01T18:00:00Z'),
            make_commit('A', '2024-05-01T15:00:00Z'),
            make_commit('A', '2024-05-01T08:00:00Z'),
        ],
    }


@pytest.fixture
def timeline_payload():
    """Create a sample payload of the interest-over-time widget."""
    return {
        'default': {
            'timelineData': [
                {'time': '1714521600', 'formattedTime': 'May 1, 2024', 'value': [55]},
                {'time': '1714608000', 'formattedTime': 'May 2, 2024', 'value': [100]},
            ]
        }
    }


@pytest.fixture
def github(github_responses):
    """Create a GitHub requester answering with sample responses."""
    return make_github(github_responses)


@pytest.fixture
def trends(timeline_payload):
    """Create a Google Trends requester answering with the sample timeline."""
    requester = TrendsRequester()
    requester.request_timeline = Mock(return_value=timeline_payload)
    return requester


@pytest.fixture
def aggregator(github, trends):
    """Create RepositoryAggregator instance for testing."""
    return RepositoryAggregator(github, trends)
