from collections.abc import Callable
from logging import getLogger
from typing import Any, Self, TypeVar, final

from common.models import RepositoryIdentifier, RepositoryReport
from .activity import *
from .defaults import *
from .requests import GitHubRequester
from .trends import TrendsRequester

logger = getLogger(__name__)
_T = TypeVar('_T')


class AggregationError(Exception):
    """
    Raised when a piece of data required for a repository report cannot be fetched.
    """
    def __init__(self, operation: str, cause: Exception, /) -> None:
        super().__init__(f'Failed to fetch repository data: {operation}: {cause}')
        self.operation = operation
        self.cause = cause


@final
class RepositoryAggregator:
    """
    A class for building a report about a repository
    from GitHub API and Google Trends data.

    Steps are performed one by one. Failure of any of them aborts the report
    except counting contributors and fetching search interest,
    which degrade to partial or empty data.
    """
    def __init__(self, github: GitHubRequester, trends: TrendsRequester, /) -> None:
        self._github = github
        self._trends = trends

    @classmethod
    def create(
            cls,
            github_token: str,
            /,
            *,
            github_api_url: str = DEFAULT_GITHUB_API_URL,
            github_timeout: float = DEFAULT_GITHUB_TIMEOUT,
            trends_timeout: float = DEFAULT_TRENDS_TIMEOUT,
            ) -> Self:
        """
        Creates an aggregator with new requesters configured by the given parameters.
        """
        github = GitHubRequester(github_token, api_url=github_api_url, timeout=github_timeout)
        trends = TrendsRequester(timeout=trends_timeout)
        return cls(github, trends)

    @staticmethod
    def _require(operation: str, fetch: Callable[..., _T], /, *args: Any) -> _T:
        """
        Calls ``fetch`` with the given arguments and returns its result.
        Any exception is wrapped into :class:`AggregationError` naming the operation.
        """
        try:
            return fetch(*args)
        except Exception as e:
            logger.exception(f'Operation {operation!r} failed')
            raise AggregationError(operation, e) from e

    def _request_commit_records(self, repo: RepositoryIdentifier, /) -> list[CommitRecord]:
        return parse_commits(self._github.request_recent_commits(repo))

    def fetch_report(self, identifier: str, /) -> RepositoryReport:
        """
        Builds a report for the repository with the given identifier of the form ``owner/name``.

        :raises MalformedIdentifierError: If the identifier is malformed.
        :raises AggregationError: If any required data cannot be fetched.
        """
        repo = RepositoryIdentifier.parse(identifier)
        logger.info(f'Fetching data for repository {repo}')

        metadata = self._require('get repository', self._github.request_repo, repo)
        issues = self._require('list open issues', self._github.request_open_issues, repo)
        releases = self._require('list releases', self._github.request_releases, repo)
        languages = self._require('list languages', self._github.request_languages, repo)
        # Best effort: an error stops pagination, the count can be partial
        contributors = self._github.count_contributors(repo)
        commits = self._require('list commits', self._request_commit_records, repo)
        # Best effort: any error results in no points
        topic_interest = self._trends.request_interest_over_time(repo.name)

        report = RepositoryReport(
            repo_name=metadata.name,
            description=metadata.description,
            stars=metadata.stars,
            forks=metadata.forks,
            created_at=metadata.created_at,
            updated_at=metadata.updated_at,
            homepage=metadata.homepage,
            latest_open_issues=issues,
            releases=releases,
            languages=languages,
            contributors=contributors,
            latest_release=releases[0].name if releases else None,
            commits_per_day=count_commits_per_day(commits),
            top_contributors=rank_contributors(commits),
            topic_interest=topic_interest,
            )
        logger.info(f'Report for repository {repo} is ready')
        return report


__all__ = 'AggregationError', 'RepositoryAggregator'
