"""Tests for report models and repository identifier parsing."""

from datetime import date

import pytest

from common.models import (
    DailyCommitCount,
    IssueSummary,
    LanguageBreakdown,
    MalformedIdentifierError,
    ReleaseSummary,
    RepositoryIdentifier,
)


def test_parse_identifier():
    """Test parsing a well-formed identifier."""
    repo = RepositoryIdentifier.parse('octo/widget')

    assert repo.owner == 'octo'
    assert repo.name == 'widget'
    assert str(repo) == 'octo/widget'


def test_parse_identifier_strips_whitespace():
    repo = RepositoryIdentifier.parse('  octo/widget\n')
    assert (repo.owner, repo.name) == ('octo', 'widget')


@pytest.mark.parametrize(
    'identifier',
    ['widget', '', '/', 'octo/', '/widget', 'octo/widget/extra', 'octo//widget'],
)
def test_parse_malformed_identifier(identifier):
    """Test that identifiers without exactly two non-empty parts are rejected."""
    with pytest.raises(MalformedIdentifierError):
        RepositoryIdentifier.parse(identifier)


def test_malformed_identifier_is_value_error():
    with pytest.raises(ValueError):
        RepositoryIdentifier.parse('widget')


def test_serialization_uses_wire_names():
    """Test that models are dumped with the field names of the response."""
    issue = IssueSummary(title='Bug', author='alice', url='https://github.com/o/r/issues/1')
    assert issue.model_dump(by_alias=True) == {
        'issue': 'Bug',
        'user': 'alice',
        'href': 'https://github.com/o/r/issues/1',
    }
    assert ReleaseSummary(name='v1.0').model_dump(by_alias=True) == {'release': 'v1.0'}
    assert LanguageBreakdown(language='Python', bytes_of_code=10).model_dump(by_alias=True) == {
        'language': 'Python',
        'loc': 10,
    }
    assert DailyCommitCount(date=date(2024, 5, 1), commit_count=3).model_dump(
        by_alias=True, mode='json'
    ) == {'date': '2024-05-01', 'commits': 3}
