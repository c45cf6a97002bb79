import json
from datetime import datetime, timedelta, timezone
from http.client import HTTPResponse
from http.cookiejar import CookieJar
from logging import getLogger
from typing import Any, final
from urllib.error import HTTPError
from urllib.parse import urlencode
from urllib.request import HTTPCookieProcessor, Request, build_opener

from common.models import TrendPoint
from .defaults import *
from .requests import describe_http_error

logger = getLogger(__name__)
TRENDS_URL = 'https://trends.google.com'
EXPLORE_URL = f'{TRENDS_URL}/trends/api/explore'
MULTILINE_URL = f'{TRENDS_URL}/trends/api/widgetdata/multiline'
_user_agent = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) '
    'AppleWebKit/537.36 (KHTML, like Gecko) Chrome/129.0 Safari/537.36'
)


class MalformedTrendsResponse(ValueError):
    """
    Raised when Google Trends responds with data of unexpected shape.
    """


def parse_timeline(payload: Any, /) -> list[TrendPoint]:
    """
    Parses the payload of the interest-over-time widget into :class:`TrendPoint` instances.
    Raises :class:`MalformedTrendsResponse` if the payload has no timeline.
    Raises :class:`pydantic.ValidationError` if a point has an invalid value.
    """
    try:
        timeline = payload['default']['timelineData']
    except (KeyError, TypeError) as e:
        raise MalformedTrendsResponse('response has no timeline data') from e

    if not isinstance(timeline, list):
        raise MalformedTrendsResponse(f'timeline data must be a list, got {timeline!r}')

    points = []
    for item in timeline:
        # Time is a string with the number of seconds since the epoch
        bucket = datetime.fromtimestamp(int(item['time']), timezone.utc)
        points.append(TrendPoint(popularity=item['value'][0], date=bucket.date()))

    return points


@final
class TrendsRequester:
    """
    A class for requesting search interest over time from Google Trends.
    """
    def __init__(
            self,
            /,
            *,
            timeout: float = DEFAULT_TRENDS_TIMEOUT,
            locale: str = TREND_LOCALE,
            geo: str = TREND_GEO,
            ) -> None:
        self._timeout = timeout
        self._locale = locale
        self._geo = geo
        # Google Trends rejects requests without the cookies it sets on its main page
        self._opener = build_opener(HTTPCookieProcessor(CookieJar()))
        self._cookies_set = False

    def _open(self, url: str, /) -> bytes:
        request = Request(url, headers={'User-Agent': _user_agent})
        response: HTTPResponse
        with self._opener.open(request, timeout=self._timeout) as response:
            return response.read()

    def _set_cookies(self, /) -> None:
        if self._cookies_set: return

        self._open(f'{TRENDS_URL}/?geo={self._locale[-2:]}')
        self._cookies_set = True

    def _request_json(self, url: str, /, **params: Any) -> Any:
        """
        Requests the given URL of Google Trends API and returns JSON data from the response.
        """
        body = self._open(f'{url}?{urlencode(params)}').decode()
        # Responses start with a prefix against JSON hijacking, for example )]}',
        start = body.find('{')
        if start < 0:
            raise MalformedTrendsResponse('response contains no JSON object')

        return json.loads(body[start:])

    def request_timeline(self, keyword: str, /, days: int = TREND_DAYS) -> Any:
        """
        Requests raw interest-over-time data for the keyword over the trailing ``days``.
        Raises on any request failure.
        """
        today = datetime.now(timezone.utc).date()
        since = today - timedelta(days=days)
        self._set_cookies()

        explore = self._request_json(
            EXPLORE_URL,
            hl=self._locale,
            tz=0,
            req=json.dumps(
                dict(
                    comparisonItem=[dict(keyword=keyword, geo=self._geo, time=f'{since} {today}')],
                    category=0,
                    property='',
                    )
                ),
            )

        try:
            widget = next(w for w in explore['widgets'] if w.get('id') == 'TIMESERIES')
        except (KeyError, TypeError, StopIteration) as e:
            raise MalformedTrendsResponse('explore response has no time series widget') from e

        return self._request_json(
            MULTILINE_URL,
            hl=self._locale,
            tz=0,
            req=json.dumps(widget['request']),
            token=widget['token'],
            )

    def request_interest_over_time(
            self,
            keyword: str,
            /,
            days: int = TREND_DAYS,
            ) -> list[TrendPoint]:
        """
        Requests search interest for the keyword over the trailing ``days``.

        This method never raises. Any failure, including timeouts
        and responses of unexpected shape, is logged and results in an empty list.
        """
        try:
            return parse_timeline(self.request_timeline(keyword, days))
        except HTTPError as e:
            logger.error(f'Failed to fetch search interest for {keyword!r}: {describe_http_error(e)}')
        except Exception:
            logger.exception(f'Failed to fetch search interest for {keyword!r}')

        return []


__all__ = 'MalformedTrendsResponse', 'parse_timeline', 'TrendsRequester'
