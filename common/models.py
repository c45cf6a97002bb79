from datetime import date, datetime
from typing import Annotated, Self

from pydantic import (
    BaseModel,
    Field,
    NonNegativeInt,
    PositiveInt,
    SerializerFunctionWrapHandler,
    StringConstraints,
    model_serializer,
    )

NonEmptyString = Annotated[str, StringConstraints(min_length=1)]
PopularityType = Annotated[int, Field(ge=0, le=100)]


class MalformedIdentifierError(ValueError):
    """
    Raised when a repository identifier is not of the form ``owner/name``.
    """


class RepositoryIdentifier(BaseModel, frozen=True):
    """
    Model for a repository identifier of the form ``owner/name``.
    """
    owner: NonEmptyString
    name: NonEmptyString

    @classmethod
    def parse(cls, identifier: str, /) -> Self:
        """
        Parses a string of the form ``owner/name``.
        Raises :class:`MalformedIdentifierError` if the string has no separator,
        has more than one separator or any of its parts is empty.
        """
        owner, sep, name = identifier.strip().partition('/')
        if not (sep and owner and name) or '/' in name:
            raise MalformedIdentifierError(
                f"repository identifier must have the form 'owner/name', got {identifier!r}"
                )

        return cls(owner=owner, name=name)

    def __str__(self, /) -> str:
        return f'{self.owner}/{self.name}'


class RepositoryMetadata(BaseModel, frozen=True):
    """
    Model for basic repository data.
    """
    name: str
    description: str | None
    stars: NonNegativeInt
    forks: NonNegativeInt
    created_at: datetime
    updated_at: datetime
    homepage: str | None


class IssueSummary(BaseModel, frozen=True, populate_by_name=True):
    """
    Model for an open issue.
    """
    title: str = Field(alias='issue')
    author: str = Field(alias='user')
    url: str = Field(alias='href')


class ReleaseSummary(BaseModel, frozen=True, populate_by_name=True):
    """
    Model for a release.
    """
    # Display name of the release or its tag name if the display name is empty
    name: str = Field(alias='release')


class LanguageBreakdown(BaseModel, frozen=True, populate_by_name=True):
    language: str
    bytes_of_code: NonNegativeInt = Field(alias='loc')


class DailyCommitCount(BaseModel, frozen=True, populate_by_name=True):
    """
    Model for the number of commits made at a single UTC date.
    """
    date: date
    commit_count: PositiveInt = Field(alias='commits')


class ContributorRanking(BaseModel, frozen=True, populate_by_name=True):
    """
    Model for the number of commits made by a single author.
    """
    author: str
    commit_count: PositiveInt = Field(alias='commits')


class TrendPoint(BaseModel, frozen=True):
    """
    Model for search interest in a single time bucket.
    """
    popularity: PopularityType
    date: date


class RepositoryReport(BaseModel, frozen=True, populate_by_name=True):
    """
    Model for the aggregated repository report.
    """
    repo_name: str = Field(alias='repoName')
    description: str | None
    stars: NonNegativeInt
    forks: NonNegativeInt
    created_at: datetime
    updated_at: datetime
    homepage: str | None
    latest_open_issues: list[IssueSummary]
    releases: list[ReleaseSummary]
    languages: list[LanguageBreakdown]
    # The count can be lower than the real one
    # if pagination over contributors was interrupted by an error
    contributors: NonNegativeInt
    # Omitted from dumps if the repository has no releases
    latest_release: str | None = None
    commits_per_day: list[DailyCommitCount]
    top_contributors: list[ContributorRanking]
    topic_interest: list[TrendPoint]

    @model_serializer(mode='wrap')
    def omit_missing_release(self, handler: SerializerFunctionWrapHandler):
        data = handler(self)
        if self.latest_release is None:
            data.pop('latest_release', None)

        return data


__all__ = (
    'NonEmptyString',
    'MalformedIdentifierError',
    'RepositoryIdentifier',
    'RepositoryMetadata',
    'IssueSummary',
    'ReleaseSummary',
    'LanguageBreakdown',
    'DailyCommitCount',
    'ContributorRanking',
    'TrendPoint',
    'RepositoryReport',
    )
