import json
from http.client import HTTPResponse
from logging import getLogger
from typing import Any, final
from urllib.error import HTTPError
from urllib.parse import quote, urlencode
from urllib.request import Request, urlopen

from common.models import (
    IssueSummary,
    LanguageBreakdown,
    ReleaseSummary,
    RepositoryIdentifier,
    RepositoryMetadata,
    )
from .defaults import *

logger = getLogger(__name__)


def describe_http_error(e: HTTPError, /) -> str:
    """
    Returns a one-line description of the given HTTP error suitable for logging.
    """
    return f'{e.__class__.__name__} {e.code} ({e.reason}) for {e.url!r}'


@final
class GitHubRequester:
    """
    A class for querying GitHub REST API with a single authentication token.
    """
    def __init__(
            self,
            token: str,
            /,
            *,
            api_url: str = DEFAULT_GITHUB_API_URL,
            timeout: float = DEFAULT_GITHUB_TIMEOUT,
            ) -> None:
        if not (isinstance(token, str) and token):
            raise ValueError(f'token must be a non-empty string, got {token!r}')

        self._api_url = api_url.rstrip('/')
        self._timeout = timeout
        self._headers = {
            'Accept':               'application/vnd.github+json',
            'X-GitHub-Api-Version': '2022-11-28',
            'Authorization':        f'Bearer {token}',
            }

    def make_request(self, path: str, /, **params: Any) -> Request:
        """
        Creates a request with default headers for the given path of GitHub API.
        Keyword arguments are added to the URL as query parameters.
        """
        url = f'{self._api_url}{path}'
        if params:
            url = f'{url}?{urlencode(params)}'

        return Request(url, headers=self._headers)

    def request_data(self, path: str, /, **params: Any) -> Any:
        """
        Requests the given path of GitHub API and returns JSON data from the response.
        Returns ``None`` if the response has no content.
        """
        response: HTTPResponse
        with urlopen(self.make_request(path, **params), timeout=self._timeout) as response:
            body = response.read()

        return json.loads(body) if body else None

    @staticmethod
    def _repo_path(repo: RepositoryIdentifier, /) -> str:
        return f"/repos/{quote(repo.owner, safe='')}/{quote(repo.name, safe='')}"

    def request_repo(self, repo: RepositoryIdentifier, /) -> RepositoryMetadata:
        """
        Requests basic information about the repository.
        """
        # Response schema:
        # https://docs.github.com/en/rest/repos/repos?apiVersion=2022-11-28#get-a-repository
        data = self.request_data(self._repo_path(repo))
        return RepositoryMetadata(
            name=data['name'],
            description=data['description'],
            stars=data['stargazers_count'],
            forks=data['forks_count'],
            created_at=data['created_at'],
            updated_at=data['updated_at'],
            homepage=data['homepage'],
            )

    def request_open_issues(
            self,
            repo: RepositoryIdentifier,
            /,
            limit: int = ISSUES_LIMIT,
            ) -> list[IssueSummary]:
        """
        Requests the latest open issues of the repository, newest first.
        """
        # Response schema:
        # https://docs.github.com/en/rest/issues/issues?apiVersion=2022-11-28#list-repository-issues
        # Pull requests are issues too from the point of view of this endpoint.
        data = self.request_data(
            f'{self._repo_path(repo)}/issues',
            state='open',
            per_page=limit,
            )
        return [
            IssueSummary(
                title=issue['title'],
                author=issue['user']['login'],
                url=issue['html_url'],
                )
            for issue in data or ()
            ]

    def request_releases(
            self,
            repo: RepositoryIdentifier,
            /,
            limit: int = RELEASES_LIMIT,
            ) -> list[ReleaseSummary]:
        """
        Requests the latest releases of the repository, most recent first.
        """
        # Response schema:
        # https://docs.github.com/en/rest/releases/releases?apiVersion=2022-11-28#list-releases
        data = self.request_data(f'{self._repo_path(repo)}/releases', per_page=limit)
        # Release name can be null or empty, tag name is always present
        return [
            ReleaseSummary(name=release['name'] or release['tag_name'])
            for release in data or ()
            ]

    def request_languages(self, repo: RepositoryIdentifier, /) -> list[LanguageBreakdown]:
        """
        Requests the number of bytes of code written in each language of the repository.
        """
        # Response schema:
        # https://docs.github.com/en/rest/repos/repos?apiVersion=2022-11-28#list-repository-languages
        data = self.request_data(f'{self._repo_path(repo)}/languages')
        return [
            LanguageBreakdown(language=language, bytes_of_code=size)
            for language, size in (data or {}).items()
            ]

    def count_contributors(
            self,
            repo: RepositoryIdentifier,
            /,
            per_page: int = CONTRIBUTORS_PER_PAGE,
            ) -> int:
        """
        Counts contributors of the repository, anonymous ones included,
        by requesting every page of the contributor list.

        This method never raises on request failures. If a page cannot be fetched,
        the error is logged and the number of contributors counted so far is returned;
        such a number is lower than the real one.
        """
        count = 0
        page = 1
        while True:
            # Response schema:
            # https://docs.github.com/en/rest/repos/repos?apiVersion=2022-11-28#list-repository-contributors
            try:
                data = self.request_data(
                    f'{self._repo_path(repo)}/contributors',
                    per_page=per_page,
                    page=page,
                    anon='true',
                    )
            except HTTPError as e:
                logger.error(
                    f'Stopped counting contributors of {repo} at page {page}: '
                    f'{describe_http_error(e)}'
                    )
                break
            except Exception:
                logger.exception(
                    f'Stopped counting contributors of {repo} at page {page}'
                    )
                break

            # GitHub responds with no content for empty repositories
            page_size = len(data) if data else 0
            count += page_size
            # A short page is the last one
            if page_size < per_page: break

            page += 1

        return count

    def request_recent_commits(
            self,
            repo: RepositoryIdentifier,
            /,
            limit: int = COMMITS_LIMIT,
            ) -> list[dict[str, Any]]:
        """
        Requests the most recent commits of the default branch of the repository
        and returns them as raw commit objects, newest first.
        """
        # Response schema:
        # https://docs.github.com/en/rest/commits/commits?apiVersion=2022-11-28#list-commits
        # Empty repositories respond with 409 Conflict.
        data = self.request_data(f'{self._repo_path(repo)}/commits', per_page=limit)
        return list(data or ())


__all__ = 'describe_http_error', 'GitHubRequester'
