"""Failure kinds raised by command handlers and the option parser."""

from enum import Enum

from pydantic import BaseModel, Field


class ApiResponse(BaseModel):
    """Response details carried by an API failure."""

    status: int | None = None
    body: str = ''
    headers: dict[str, str] = Field(default_factory=dict)

    @property
    def content_type(self) -> str:
        """Return the content type header, matched case-insensitively."""
        for key, value in self.headers.items():
            if key.lower().replace('_', '-') == 'content-type':
                return value
        return ''


class CommandFailed(RuntimeError):
    """Raised by a command for a local, non-API failure."""


class UnknownCommandError(CommandFailed):
    """Raised when a command name resolves to nothing in the registry."""

    def __init__(self, message: str, *, command: str) -> None:
        super().__init__(message)
        self.command = command


class ProjectError(RuntimeError):
    """Raised when the local project is missing or misconfigured."""


class ApiError(Exception):
    """Base class for failures reported by the remote API client."""

    def __init__(self, message: str = '', *, response: ApiResponse | None = None) -> None:
        super().__init__(message)
        self.response = response

    @property
    def body(self) -> str:
        return self.response.body if self.response is not None else ''


class RequestTimeout(ApiError):
    """Raised when an API request does not complete in time."""


class ErrorWithResponse(ApiError):
    """Raised when the API answers with an error status and a body."""


class AuthenticationFailure(ErrorWithResponse):
    """Raised when the API rejects the current credentials."""


class ResourceNotFound(ErrorWithResponse):
    """Raised when the API reports that a resource does not exist."""


class OptionParseError(ValueError):
    """Base class for errors that make a token stream unparseable."""

    def __init__(self, message: str, *, token: str) -> None:
        super().__init__(message)
        self.token = token


class InvalidOptionError(OptionParseError):
    """Raised for a flag that is not part of the grammar."""


class MissingArgumentError(OptionParseError):
    """Raised when a value-taking flag ends the token stream."""


class NeedlessArgumentError(OptionParseError):
    """Raised when a value is attached to a boolean flag."""


class FailureKind(Enum):
    """Categorized failure conditions, in the order they are matched."""

    AUTHENTICATION = 'authentication'
    NOT_FOUND = 'not_found'
    PROJECT = 'project'
    TIMEOUT = 'timeout'
    API_ERROR = 'api_error'
    UNKNOWN_COMMAND = 'unknown_command'
    COMMAND_FAILED = 'command_failed'
    OPTION_PARSE = 'option_parse'


# Ordered: subclasses must appear before their bases.
FAILURE_TABLE: tuple[tuple[type[BaseException], FailureKind], ...] = (
    (AuthenticationFailure, FailureKind.AUTHENTICATION),
    (ResourceNotFound, FailureKind.NOT_FOUND),
    (ProjectError, FailureKind.PROJECT),
    (RequestTimeout, FailureKind.TIMEOUT),
    (ErrorWithResponse, FailureKind.API_ERROR),
    (UnknownCommandError, FailureKind.UNKNOWN_COMMAND),
    (CommandFailed, FailureKind.COMMAND_FAILED),
    (OptionParseError, FailureKind.OPTION_PARSE),
)


def classify_failure(exc: BaseException) -> FailureKind | None:
    """Return the first failure kind matching ``exc``, or None if unhandled."""
    for exc_type, kind in FAILURE_TABLE:
        if isinstance(exc, exc_type):
            return kind
    return None


__all__ = [
    'FAILURE_TABLE',
    'ApiError',
    'ApiResponse',
    'AuthenticationFailure',
    'CommandFailed',
    'ErrorWithResponse',
    'FailureKind',
    'InvalidOptionError',
    'MissingArgumentError',
    'NeedlessArgumentError',
    'OptionParseError',
    'ProjectError',
    'RequestTimeout',
    'ResourceNotFound',
    'UnknownCommandError',
    'classify_failure',
]
