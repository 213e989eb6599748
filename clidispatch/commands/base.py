"""Base class for command handlers."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from clidispatch.config import DispatchConfig
from clidispatch.errors import CommandFailed
from clidispatch.models import OptionValue

if TYPE_CHECKING:
    from clidispatch.dispatcher import Dispatcher


class BaseCommand:
    """A handler built fresh for each invocation.

    Subclasses expose one or more methods taking no arguments; each is
    registered with ``registry.command_handler(SubClass, 'method')``.
    """

    def __init__(
        self,
        args: list[str],
        options: dict[str, OptionValue],
        dispatcher: Dispatcher | None = None,
    ) -> None:
        self.args = args
        self.options = options
        self.dispatcher = dispatcher

    @property
    def config(self) -> DispatchConfig:
        if self.dispatcher is None:
            return DispatchConfig()
        return self.dispatcher.config

    @property
    def project(self) -> str | None:
        value = self.options.get('project')
        return value if isinstance(value, str) else None

    def shift_argument(self) -> str | None:
        """Remove and return the next argument, or None when none are left."""
        if self.dispatcher is not None:
            self.dispatcher.shift_argument()
        return self.args.pop(0) if self.args else None

    def validate_arguments(self) -> None:
        """Exit with usage help if unrecognized flags were passed."""
        if self.dispatcher is not None:
            self.dispatcher.validate_arguments()

    def warn(self, message: str) -> None:
        if self.dispatcher is not None:
            self.dispatcher.add_warning(message)

    def display(self, message: str = '') -> None:
        sys.stdout.write(f'{message}\n')

    def error(self, message: str) -> None:
        raise CommandFailed(message)
