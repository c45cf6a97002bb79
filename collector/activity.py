from collections import Counter
from collections.abc import Iterable
from datetime import date, datetime, timezone
from typing import Any, NamedTuple

from common.models import ContributorRanking, DailyCommitCount
from .defaults import TOP_CONTRIBUTORS_LIMIT


class CommitRecord(NamedTuple):
    author: str
    date: date


def parse_commit(commit: dict[str, Any], /) -> CommitRecord | None:
    """
    Parses a commit object from GitHub API into the login of its author
    and the UTC date it was authored.
    Returns ``None`` if the commit is not linked to a GitHub account
    or has no author date.
    """
    # Top-level author is the GitHub account, it is null
    # if the email of the commit is not associated with any account.
    account = commit.get('author')
    if not account: return None

    login = account.get('login')
    if not login: return None

    commit_author = commit['commit'].get('author')
    if not commit_author: return None

    commit_dt = commit_author.get('date')
    if not commit_dt: return None

    commit_dt = datetime.fromisoformat(commit_dt)
    if commit_dt.tzinfo is not None:
        commit_dt = commit_dt.astimezone(timezone.utc)

    return CommitRecord(login, commit_dt.date())


def parse_commits(commits: Iterable[dict[str, Any]], /) -> list[CommitRecord]:
    """
    Parses commit objects returned by GitHub API newest first
    and returns records of commits with known authors in chronological order.
    """
    records = [record for commit in commits if (record := parse_commit(commit))]
    records.reverse()
    return records


def count_commits_per_day(records: Iterable[CommitRecord], /) -> list[DailyCommitCount]:
    """
    Counts commits made at each date.
    Dates are listed in the order they first appear in ``records``.
    """
    counts = Counter(record.date for record in records)
    return [DailyCommitCount(date=d, commit_count=n) for d, n in counts.items()]


def rank_contributors(
        records: Iterable[CommitRecord],
        /,
        limit: int = TOP_CONTRIBUTORS_LIMIT,
        ) -> list[ContributorRanking]:
    """
    Returns up to ``limit`` authors with the highest number of commits in descending order.
    Authors with equal numbers keep the order they first appear in ``records``.
    """
    counts = Counter(record.author for record in records)
    return [
        ContributorRanking(author=author, commit_count=n)
        for author, n in counts.most_common(limit)
        ]


__all__ = (
    'CommitRecord',
    'parse_commit',
    'parse_commits',
    'count_commits_per_day',
    'rank_contributors',
    )
