from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from functools import cache
from logging import getLogger
from typing import Annotated

from fastapi import Depends, FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from collector.aggregate import *
from common.logging import init_logging
from common.models import MalformedIdentifierError, RepositoryReport
from server.models import *


@cache
def get_settings() -> Settings:
    """
    Dependency function returning server settings.
    Settings are read from the environment once per process.
    """
    return Settings()


@asynccontextmanager
async def lifespan(_: FastAPI, /) -> AsyncIterator[None]:
    # Actions on startup
    settings = get_settings()
    init_logging(settings.log_level)
    if settings.github_token is None:
        logger.warning(
            'Environmental variable GITHUB_TOKEN is not set, '
            'all requests for repository reports will be rejected'
            )

    logger.info(
        f'Server is ready. '
        f'GitHub API is {settings.github_api_url!r}, '
        f'Google Trends timeout is {settings.trends_timeout} seconds'
        )
    yield


SettingsType = Annotated[Settings, Depends(get_settings)]


def make_aggregator(settings: SettingsType) -> RepositoryAggregator | None:
    """
    Dependency function for creating an instance of :class:`RepositoryAggregator`.
    Returns ``None`` if GitHub token is not configured.
    """
    if settings.github_token is None: return None

    return RepositoryAggregator.create(
        settings.github_token,
        github_api_url=settings.github_api_url,
        github_timeout=settings.github_timeout,
        trends_timeout=settings.trends_timeout,
        )


AggregatorType = Annotated[RepositoryAggregator | None, Depends(make_aggregator)]
app = FastAPI(
    title='Repository Insights API',
    version='1.0.0',
    lifespan=lifespan,
    )
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=['*'],
    allow_headers=['*'],
    )
logger = getLogger(__name__)


def error_response(status_code: int, message: str, /) -> JSONResponse:
    """
    Creates a JSON response with the given status code and error message.
    """
    return JSONResponse(ErrorResponse(error=message).model_dump(), status_code=status_code)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError, /):
    """
    Request validation handler which logs errors caused by request validation in detail.
    """
    errors = []
    for d in exc.errors():
        msg = d['msg']
        loc = '.'.join(str(part) for part in d['loc'])  # some parts can be integers
        errors.append(f'At location {loc!r} {msg[0].lower()}{msg[1:]}')

    err_noun = 'error' if len(errors) == 1 else 'errors'
    err_msgs = '\n  '.join(errors)
    logger.error(f'{len(errors)} validation {err_noun} in the recent request:\n  {err_msgs}')
    return await request_validation_exception_handler(request, exc)


@app.exception_handler(MalformedIdentifierError)
async def malformed_identifier_handler(_: Request, exc: MalformedIdentifierError, /):
    logger.error(f'Rejected the recent request: {exc}')
    return error_response(400, "Repository query must have the form 'owner/name'")


@app.exception_handler(AggregationError)
async def aggregation_error_handler(_: Request, exc: AggregationError, /):
    """
    Converts failures of required steps of report building into responses with code 500.
    """
    logger.error(f'Error fetching repository data: {exc}')
    return error_response(500, str(exc))


@app.exception_handler(Exception)
async def unexpected_error_handler(_: Request, exc: Exception, /):
    """
    Converts any other error into a response with code 500 and a JSON body.
    """
    logger.error('Unexpected error while handling the recent request', exc_info=exc)
    return error_response(500, str(exc))


@app.get('/', response_class=PlainTextResponse)
async def api_root() -> str:
    return 'Repository Insights API is running'


@app.post(
    '/api/reponame',
    response_model=RepositoryReport,
    responses={
        400: {'model': ErrorResponse},
        500: {'model': ErrorResponse},
        },
    )
def api_get_report(
        *,
        aggregator: AggregatorType,
        query: str | None = None,
        ) -> RepositoryReport | JSONResponse:
    """
    Returns the report about the repository specified by ``query`` of the form ``owner/name``.

    The report includes basic statistics, open issues, releases, languages,
    the number of contributors, activity over the latest 100 commits
    and search interest over the last 30 days.
    """
    # Requests to GitHub API are blocking,
    # FastAPI runs this function in a thread pool.
    if aggregator is None:
        return error_response(400, 'GitHub token is required')

    if not query:
        return error_response(400, 'Repository query is required')

    return aggregator.fetch_report(query)


if __name__ == '__main__':
    import uvicorn

    uvicorn.run(app, host=get_settings().host, port=get_settings().port)
