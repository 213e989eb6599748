"""Main CLI entry point for clidispatch."""

import sys
from collections.abc import Callable

from clidispatch import exit_codes
from clidispatch.commands import register_builtin_commands
from clidispatch.config import ConfigError, load_config
from clidispatch.dispatcher import Dispatcher
from clidispatch.logging import configure_logging, get_logger
from clidispatch.models import OptionValue
from clidispatch.output import display_error
from clidispatch.registry import CommandRegistry, default_global_options

logger = get_logger(__name__)


def build_registry(
    *,
    on_project: Callable[[OptionValue], None] | None = None,
    on_remote: Callable[[OptionValue], None] | None = None,
) -> CommandRegistry:
    """Build the registry with the global options and built-in commands."""
    registry = CommandRegistry(default_global_options(on_project=on_project, on_remote=on_remote))
    register_builtin_commands(registry)
    return registry


def main(argv: list[str] | None = None) -> int:
    """Run one command and return its exit code.

    The first argument names the command; with no arguments, help is shown.
    """
    args = list(sys.argv[1:] if argv is None else argv)
    config = load_config()
    configure_logging(verbose=config.verbose)

    dispatcher = Dispatcher(build_registry(), config)
    cmd = args.pop(0).strip() if args else config.help_command
    logger.debug('starting_clidispatch', command=cmd, _verbose_args=args)
    return dispatcher.run(cmd, args)


def cli() -> None:
    """Console-script entry point; turns the result into a process exit."""
    try:
        code = main()
    except ConfigError as exc:
        display_error(str(exc))
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        sys.stderr.write('\n')
        display_error('Command cancelled.')
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001 - top-level CLI guard
        logger.exception('cli_operation_failed', error=str(exc))
        display_error(f'Unexpected error: {exc}')
        sys.exit(exit_codes.GENERAL_ERROR)
    sys.exit(code)


if __name__ == '__main__':
    cli()
