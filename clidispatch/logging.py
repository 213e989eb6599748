import logging

import structlog
import yaml
from rich.console import Console
from rich.syntax import Syntax
from structlog.types import FilteringBoundLogger
from structlog.typing import EventDict

console = Console(stderr=True)

# Type alias for our logger
Logger = FilteringBoundLogger

HIDDEN_PREFIXES = ('_verbose_', '_debug_')


def format_context_yaml(event_dict: EventDict, indent: int = 2) -> str:
    """Format the context dictionary as YAML.

    Args:
        event_dict: The context dictionary to format.
        indent: The number of spaces to use for indentation.

    Returns:
        The formatted YAML string.
    """
    if not event_dict:
        return ''
    context_yaml = yaml.safe_dump(
        event_dict,
        sort_keys=True,
        default_flow_style=False,
    )
    pad = ' ' * indent
    return '\n'.join(f'{pad}{line}' for line in context_yaml.splitlines())


def filter_context_by_prefix(event_dict: EventDict) -> EventDict:
    """Drop context keys that are only shown in verbose mode."""
    return {key: value for key, value in event_dict.items() if not key.startswith(HIDDEN_PREFIXES)}


def strip_prefixes_from_keys(event_dict: EventDict) -> EventDict:
    """Remove visibility prefixes so verbose output reads naturally."""
    stripped: EventDict = {}
    for key, value in event_dict.items():
        for prefix in HIDDEN_PREFIXES:
            if key.startswith(prefix):
                key = key[len(prefix):]  # noqa: PLW2901
                break
        stripped[key] = value
    return stripped


def cli_renderer(
    _logger: Logger,
    method_name: str,
    event_dict: EventDict,
) -> str:
    """Render log messages for CLI output using rich formatting.

    Args:
        _logger: The logger instance.
        method_name: The logging method name (e.g., 'info', 'error').
        event_dict: The event dictionary containing log data.

    Raises:
        structlog.DropEvent: Always, once the event has been printed.
    """
    level = method_name.upper()
    if level == 'EXCEPTION':
        level = 'ERROR'
    event_msg = event_dict.pop('event', '')
    for key in ('timestamp', 'level', 'log_level', 'exc_info'):
        event_dict.pop(key, None)

    verbose_mode = logging.getLogger().level <= logging.DEBUG
    if verbose_mode:
        event_dict = strip_prefixes_from_keys(event_dict)
    else:
        event_dict = filter_context_by_prefix(event_dict)

    context_yaml = format_context_yaml(event_dict)

    level_styles = {
        'INFO': 'blue',
        'WARNING': 'yellow',
        'ERROR': 'red',
        'DEBUG': 'magenta',
        'CRITICAL': 'white on red',
    }
    style = level_styles.get(level, 'bold cyan')
    console.print(f'[bold {style}][{level}][/bold {style}] [{style}]{event_msg}[/{style}]')

    if context_yaml and verbose_mode:
        syntax = Syntax(
            context_yaml,
            'yaml',
            theme='github-dark',
            background_color='default',
            line_numbers=False,
        )
        console.print(syntax)
    raise structlog.DropEvent


def configure_logging(*, verbose: bool = False) -> None:
    """Configure structlog for clidispatch.

    Args:
        verbose: Enable verbose/debug output
    """
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.TimeStamper(fmt='ISO', utc=False),
            structlog.stdlib.add_log_level,
            cli_renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    logging.getLogger().setLevel(logging.DEBUG if verbose else logging.WARNING)


def get_logger(name: str) -> Logger:
    """Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)
