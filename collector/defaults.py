DEFAULT_GITHUB_API_URL = 'https://api.github.com'
"""
A default base URL of GitHub REST API.
"""
DEFAULT_GITHUB_TIMEOUT = 30.0
"""
A default timeout in seconds for a single request to GitHub API.
"""
DEFAULT_TRENDS_TIMEOUT = 5.0
"""
A default timeout in seconds for a single request to Google Trends.
"""
ISSUES_LIMIT = 30
"""
The maximum number of open issues included into a report.
"""
RELEASES_LIMIT = 30
"""
The maximum number of releases included into a report.
"""
COMMITS_LIMIT = 100
"""
The number of the most recent commits analyzed for activity.
"""
CONTRIBUTORS_PER_PAGE = 100
"""
The size of a page requested while counting contributors. GitHub does not allow more.
"""
TOP_CONTRIBUTORS_LIMIT = 10
"""
The maximum number of authors in the ranking of contributors.
"""
TREND_DAYS = 30
"""
The number of trailing days for which search interest is requested.
"""
TREND_LOCALE = 'en-US'
"""
The locale used for Google Trends requests.
"""
TREND_GEO = ''
"""
The geography used for Google Trends requests. Empty string means worldwide.
"""
