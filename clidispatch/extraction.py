"""Decode a user-facing message out of an API error response body.

Each strategy returns ``None`` when it does not apply or fails to decode,
and the strategies are tried in order until one produces a message:

1. an XML ``<errors><error>...</error></errors>`` document
2. a JSON ``[[field, message], ...]`` list or ``{"error": message}`` object
3. the raw body, when the response is ``text/plain``
4. the caller's default, else ``Internal server error.``
"""

import json
import xml.etree.ElementTree as ET
from collections.abc import Callable

from clidispatch.errors import ApiResponse
from clidispatch.logging import get_logger

logger = get_logger(__name__)

DEFAULT_ERROR_MESSAGE = 'Internal server error.'

Body = ApiResponse | str | bytes | None
Default = str | Callable[[], str] | None


def body_text(body: Body) -> str:
    """Return the body of ``body`` as text."""
    if body is None:
        return ''
    if isinstance(body, ApiResponse):
        return body.body
    if isinstance(body, bytes):
        return body.decode('utf-8', errors='replace')
    return body


def parse_error_xml(body: Body) -> str | None:
    """Join the text of every ``error`` element under an ``errors`` element."""
    try:
        root = ET.fromstring(body_text(body))
    except (ET.ParseError, ValueError, RecursionError):
        return None

    messages = [error.text or '' for errors in root.iter('errors') for error in errors.findall('error')]
    message = ' / '.join(messages)
    return message or None


def parse_error_json(body: Body) -> str | None:
    """Pull a message out of a JSON list-of-pairs or ``error`` object."""
    try:
        decoded = json.loads(body_text(body))
    except (ValueError, RecursionError):
        return None

    message = None
    if isinstance(decoded, list):
        first = decoded[0] if decoded else None
        if isinstance(first, list) and first:
            message = first[-1]  # [['base', 'message']]
    elif isinstance(decoded, dict):
        message = decoded.get('error')  # {'error': 'message'}

    if message is None or message == '':
        return None
    return message if isinstance(message, str) else str(message)


def parse_error_plain(body: Body) -> str | None:
    """Return the raw body when the response declares ``text/plain``."""
    if not isinstance(body, ApiResponse):
        return None
    if 'text/plain' not in body.content_type:
        return None
    return body.body or None


STRATEGIES: tuple[Callable[[Body], str | None], ...] = (
    parse_error_xml,
    parse_error_json,
    parse_error_plain,
)


def extract_error(body: Body, default: Default = None) -> str:
    """Return the first message any strategy decodes from ``body``.

    Args:
        body: An API response, or its raw body.
        default: Fallback message, or a callable computing it. Only
            evaluated when no strategy matches.

    Returns:
        A non-empty, user-facing message.
    """
    for strategy in STRATEGIES:
        message = strategy(body)
        if message:
            logger.debug('error_message_extracted', strategy=strategy.__name__)
            return message

    if callable(default):
        return default()
    if default:
        return default
    return DEFAULT_ERROR_MESSAGE


__all__ = [
    'DEFAULT_ERROR_MESSAGE',
    'extract_error',
    'parse_error_json',
    'parse_error_plain',
    'parse_error_xml',
]
