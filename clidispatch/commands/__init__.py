"""Built-in commands available to every clidispatch program."""

from clidispatch.commands.auth import LoginCommand
from clidispatch.commands.base import BaseCommand
from clidispatch.commands.help import HelpCommand
from clidispatch.commands.version import VersionCommand
from clidispatch.models import CommandDescriptor
from clidispatch.registry import CommandRegistry, command_handler


def register_builtin_commands(registry: CommandRegistry) -> None:
    """Register help, version and login on ``registry``."""
    registry.register(
        CommandDescriptor(
            name='help',
            handler=command_handler(HelpCommand, 'index'),
            summary='list commands and display help',
            usage='[COMMAND]',
        ),
    )
    registry.register_alias('-h', 'help')
    registry.register_alias('--help', 'help')

    registry.register(
        CommandDescriptor(
            name='version',
            handler=command_handler(VersionCommand, 'index'),
            summary='display version',
        ),
    )

    registry.register(
        CommandDescriptor(
            name='login',
            handler=command_handler(LoginCommand, 'index'),
            summary='log in with your API key',
        ),
    )


__all__ = [
    'BaseCommand',
    'HelpCommand',
    'LoginCommand',
    'VersionCommand',
    'register_builtin_commands',
]
