"""Resolve, parse and invoke commands, mapping failures to user-facing output.

The dispatcher is the single error boundary for command handlers. Every
failure a handler raises is classified once (see ``errors.FAILURE_TABLE``)
and routed through ``Dispatcher._failure_handlers``; anything that does not
classify propagates unchanged.
"""

import os
import re
import sys
from collections.abc import Callable, Sequence
from typing import Any

from clidispatch import exit_codes
from clidispatch.config import DispatchConfig
from clidispatch.errors import (
    ApiError,
    FailureKind,
    UnknownCommandError,
    classify_failure,
)
from clidispatch.extraction import extract_error
from clidispatch.logging import get_logger
from clidispatch.models import CommandDescriptor, InvocationState, OptionValue
from clidispatch.output import (
    BANG,
    display_error,
    invalid_arguments_message,
    suggestion,
)
from clidispatch.parsing import parse_arguments
from clidispatch.registry import CommandRegistry

logger = get_logger(__name__)

HELP_FLAGS = ('-h', '--help')
VERSION_FLAGS = ('-v', '--version')
NOT_FOUND_PATTERN = re.compile(r'^([\w\s]+ not found).?$', re.MULTILINE)

FailureHandler = Callable[[str, Any], int]


class Dispatcher:
    """Dispatch one command invocation at a time against a registry."""

    def __init__(
        self,
        registry: CommandRegistry,
        config: DispatchConfig | None = None,
        *,
        credential_check: Callable[[], bool] | None = None,
    ) -> None:
        self.registry = registry
        self.config = config or DispatchConfig()
        self.state = InvocationState()
        self._credential_check = credential_check
        self._failure_handlers: dict[FailureKind, FailureHandler] = {
            FailureKind.AUTHENTICATION: self._on_authentication_failure,
            FailureKind.NOT_FOUND: self._on_not_found,
            FailureKind.PROJECT: self._on_message_failure,
            FailureKind.TIMEOUT: self._on_timeout,
            FailureKind.API_ERROR: self._on_api_error,
            FailureKind.UNKNOWN_COMMAND: self._on_message_failure,
            FailureKind.COMMAND_FAILED: self._on_message_failure,
            FailureKind.OPTION_PARSE: self._on_option_parse_error,
        }

    def credentials_configured(self) -> bool:
        """Report whether an API credential is available right now."""
        if self._credential_check is not None:
            return self._credential_check()
        return bool(os.environ.get(self.config.api_key_env))

    def add_warning(self, message: str) -> None:
        self.state.warnings.append(message)

    def display_warnings(self) -> None:
        """Flush warnings for the current invocation to stderr."""
        if self.state.warnings:
            sys.stderr.write('\n'.join(f'{BANG}{warning}' for warning in self.state.warnings) + '\n')
            self.state.warnings.clear()

    def shift_argument(self) -> str | None:
        """Remove and return the first remaining argument of the invocation."""
        args = self.state.current_args
        if not args:
            return None
        positional_count = len(args) - len(self.state.invalid_arguments)
        argument = args.pop(0)
        if positional_count <= 0:
            # Only unrecognized flags remain; taking one accepts it.
            self.state.invalid_arguments.pop(0)
        return argument

    def validate_arguments(self) -> None:
        """Exit the process if the invocation left unrecognized arguments.

        Prints the offending arguments and the current command's help, then
        calls ``sys.exit`` directly rather than raising a mapped failure.
        """
        invalid = list(self.state.invalid_arguments)
        if not invalid:
            return
        display_error(invalid_arguments_message(invalid))
        if self.state.current_command is not None:
            self.run(self.state.current_command, ['--help'])
        sys.exit(exit_codes.GENERAL_ERROR)

    def _unknown_command(self, cmd: str) -> UnknownCommandError:
        program = self.config.program
        lines = [
            f'`{cmd}` is not a {program} command.',
            suggestion(cmd, self.registry.command_names()),
            f'See `{program} help` for a list of available commands.',
        ]
        logger.debug('unknown_command', command=cmd)
        return UnknownCommandError('\n'.join(line for line in lines if line), command=cmd)

    def prepare_run(
        self,
        cmd: str,
        args: Sequence[str] = (),
    ) -> tuple[CommandDescriptor, list[str], dict[str, OptionValue]]:
        """Resolve ``cmd``, parse ``args`` and record a fresh invocation state.

        Returns:
            The descriptor to invoke, with copies of its positional
            arguments and parsed options.
        """
        args = list(args)
        logger.debug('resolving_command', command=cmd)
        descriptor = self.registry.resolve(cmd)

        if any(flag in args for flag in HELP_FLAGS):
            if not cmd.startswith('-'):
                args.insert(0, cmd)
            logger.debug('redirecting_to_help', command=cmd)
            cmd = self.config.help_command
            descriptor = self.registry.resolve(cmd)

        if descriptor is None and cmd in VERSION_FLAGS:
            cmd = self.config.version_command
            descriptor = self.registry.resolve(cmd)

        if descriptor is None:
            raise self._unknown_command(cmd)

        self.state = InvocationState(current_command=cmd, warnings=self.state.warnings)
        parsed = parse_arguments(self.registry.global_options, descriptor.options, args)
        current_args = [*parsed.args, *parsed.invalid]

        self.state.current_args = current_args
        self.state.current_options = parsed.options
        self.state.invalid_arguments = parsed.invalid
        logger.debug(
            'arguments_parsed',
            command=cmd,
            invalid=parsed.invalid,
            _verbose_args=current_args,
            _verbose_options=parsed.options,
        )
        return descriptor, list(current_args), dict(parsed.options)

    def _execute(self, cmd: str, arguments: Sequence[str]) -> int:
        descriptor, args, options = self.prepare_run(cmd, arguments)
        logger.debug('invoking_command', command=descriptor.name)
        result = descriptor.handler(args, options, self)
        if isinstance(result, int) and not isinstance(result, bool):
            return result
        return exit_codes.SUCCESS

    def run(self, cmd: str, arguments: Sequence[str] = ()) -> int:
        """Dispatch ``cmd`` with ``arguments`` and return a process exit code."""
        return self._run(cmd, list(arguments), login_retry=True)

    def _run(self, cmd: str, arguments: list[str], *, login_retry: bool) -> int:
        previous_state = self.state
        try:
            while True:
                self.state = InvocationState()
                try:
                    return self._execute(cmd, arguments)
                except Exception as exc:
                    kind = classify_failure(exc)
                    if kind is None:
                        raise
                    logger.debug('failure_classified', command=cmd, kind=kind.value)

                    # Checked at failure time, not when the run started.
                    if kind is FailureKind.AUTHENTICATION and login_retry and not self.credentials_configured():
                        sys.stderr.write('Authentication failure\n')
                        logger.debug('retrying_after_login', command=cmd)
                        self._run(self.config.login_command, [], login_retry=False)
                        login_retry = False
                        continue

                    return self._failure_handlers[kind](cmd, exc)
                finally:
                    self.display_warnings()
        finally:
            self.state = previous_state

    def _fail(self, message: str) -> int:
        display_error(message)
        return exit_codes.GENERAL_ERROR

    def _on_authentication_failure(self, _cmd: str, _exc: Exception) -> int:
        return self._fail('Authentication failure')

    def _on_not_found(self, _cmd: str, exc: ApiError) -> int:

        def default() -> str:
            match = NOT_FOUND_PATTERN.search(exc.body)
            if match:
                return match.group(1)
            return str(exc) or 'Resource not found'

        return self._fail(extract_error(exc.response, default))

    def _on_timeout(self, _cmd: str, _exc: Exception) -> int:
        return self._fail(self.config.timeout_message)

    def _on_api_error(self, _cmd: str, exc: ApiError) -> int:
        return self._fail(extract_error(exc.response))

    def _on_message_failure(self, _cmd: str, exc: Exception) -> int:
        return self._fail(str(exc))

    def _on_option_parse_error(self, cmd: str, exc: Exception) -> int:
        logger.debug('option_parse_failed', command=cmd, error=str(exc))
        if self.registry.resolve(cmd) is not None:
            self.run(self.config.help_command, [cmd])
        else:
            self.run(self.config.help_command)
        return exit_codes.GENERAL_ERROR


__all__ = [
    'HELP_FLAGS',
    'VERSION_FLAGS',
    'Dispatcher',
]
