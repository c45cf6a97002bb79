from pydantic import AliasChoices, BaseModel, Field, PositiveFloat, PositiveInt
from pydantic_settings import BaseSettings

from collector.defaults import *
from common.models import NonEmptyString


class Settings(BaseSettings, env_ignore_empty=True, env_file='.env', extra='ignore'):
    """
    Model for holding server settings.
    """
    # Requests for reports are rejected if the token is not set
    github_token: NonEmptyString | None = Field(
        default=None,
        validation_alias=AliasChoices('github_token', 'token'),
        )
    github_api_url: NonEmptyString = DEFAULT_GITHUB_API_URL
    github_timeout: PositiveFloat = DEFAULT_GITHUB_TIMEOUT
    trends_timeout: PositiveFloat = DEFAULT_TRENDS_TIMEOUT
    cors_origins: list[str] = ['*']
    log_level: str = 'INFO'
    host: str = '0.0.0.0'
    port: PositiveInt = 5000


class ErrorResponse(BaseModel, frozen=True):
    """
    Model for the body of an unsuccessful response.
    """
    error: str


__all__ = 'Settings', 'ErrorResponse'
