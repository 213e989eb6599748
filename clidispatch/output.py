"""User-facing message helpers."""

import difflib
import sys
from collections.abc import Iterable, Sequence

BANG = ' !    '


def format_with_bang(message: str) -> str:
    """Prefix every line of ``message`` with the bang marker."""
    if not message.strip():
        return ''
    return '\n'.join(f'{BANG}{line}' for line in message.split('\n'))


def display_error(message: str) -> None:
    """Write a bang-formatted message to stderr."""
    sys.stderr.write(f'{format_with_bang(message)}\n')


def join_with_and(items: Sequence[str]) -> str:
    """Join items as ``a, b and c``."""
    if len(items) <= 1:
        return ''.join(items)
    return f'{", ".join(items[:-1])} and {items[-1]}'


def join_with_or(items: Sequence[str]) -> str:
    if len(items) <= 1:
        return ''.join(items)
    return f'{", ".join(items[:-1])} or {items[-1]}'


def suggestion(actual: str, possibilities: Iterable[str]) -> str | None:
    """Return a did-you-mean sentence for ``actual``, or None if nothing is close."""
    candidates = sorted(set(possibilities))
    matches = sorted(difflib.get_close_matches(actual, candidates, n=3, cutoff=0.6))
    if not matches:
        return None
    return f'Perhaps you meant {join_with_or([f"`{match}`" for match in matches])}.'


def invalid_arguments_message(arguments: Sequence[str]) -> str:
    """Describe unrecognized arguments, e.g. ``Invalid arguments: "x" and "y"``."""
    quoted = [f'"{argument}"' for argument in arguments]
    noun = 'argument' if len(quoted) == 1 else 'arguments'
    return f'Invalid {noun}: {join_with_and(quoted)}'


__all__ = [
    'BANG',
    'display_error',
    'format_with_bang',
    'invalid_arguments_message',
    'join_with_and',
    'join_with_or',
    'suggestion',
]
