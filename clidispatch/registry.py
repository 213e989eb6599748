"""Command registry: commands, aliases, namespaces and global options."""

from collections.abc import Callable
from typing import Any

from clidispatch.logging import get_logger
from clidispatch.models import (
    CommandDescriptor,
    GlobalOptionSpec,
    Handler,
    NamespaceDescriptor,
    OptionValue,
)

logger = get_logger(__name__)


def command_handler(klass: type, method_name: str = 'index') -> Handler:
    """Build a handler that constructs ``klass`` and calls ``method_name``.

    The method is looked up once, here, so a typo fails at registration
    rather than on first dispatch.
    """
    method = getattr(klass, method_name)

    def handler(
        args: list[str],
        options: dict[str, OptionValue],
        dispatcher: Any,
    ) -> Any:
        return method(klass(args, options, dispatcher))

    handler.__qualname__ = f'{klass.__qualname__}.{method_name}'
    return handler


def default_global_options(
    on_project: Callable[[OptionValue], None] | None = None,
    on_remote: Callable[[OptionValue], None] | None = None,
) -> list[GlobalOptionSpec]:
    """Return the global options every command accepts."""
    return [
        GlobalOptionSpec(name='help', flag_forms=('--help', '-h')),
        GlobalOptionSpec(name='project', flag_forms=('--project PROJECT', '-p'), on_parse=on_project),
        GlobalOptionSpec(name='remote', flag_forms=('--remote REMOTE',), on_parse=on_remote),
    ]


class CommandRegistry:
    """Registered commands, built once at startup and resolved many times."""

    def __init__(self, global_options: list[GlobalOptionSpec] | None = None) -> None:
        self.commands: dict[str, CommandDescriptor] = {}
        self.aliases: dict[str, str] = {}
        self.namespaces: dict[str, NamespaceDescriptor] = {}
        self.global_options: list[GlobalOptionSpec] = list(
            default_global_options() if global_options is None else global_options,
        )

    def register(self, descriptor: CommandDescriptor) -> None:
        """Insert ``descriptor``; a later registration under the same name wins."""
        if descriptor.name in self.commands:
            logger.debug('command_overridden', command=descriptor.name)
        self.commands[descriptor.name] = descriptor

    def register_alias(self, alias: str, canonical_name: str) -> None:
        """Map ``alias`` to ``canonical_name``; the target may not exist yet."""
        self.aliases[alias] = canonical_name

    def register_namespace(self, namespace: NamespaceDescriptor) -> None:
        self.namespaces[namespace.name] = namespace

    def register_global_option(self, option: GlobalOptionSpec) -> None:
        self.global_options.append(option)

    def resolve(self, name: str) -> CommandDescriptor | None:
        """Return the descriptor for ``name`` or its alias target, else None."""
        descriptor = self.commands.get(name)
        if descriptor is not None:
            return descriptor
        canonical_name = self.aliases.get(name)
        if canonical_name is None:
            return None
        return self.commands.get(canonical_name)

    def command_names(self) -> list[str]:
        """Return every name a user may type: commands and aliases."""
        return [*self.commands, *self.aliases]

    def aliases_for(self, name: str) -> list[str]:
        return sorted(alias for alias, target in self.aliases.items() if target == name)

    def commands_in(self, namespace: str) -> list[CommandDescriptor]:
        """Return the commands grouped under ``namespace``, sorted by name."""
        return sorted(
            (descriptor for descriptor in self.commands.values() if descriptor.namespace == namespace),
            key=lambda descriptor: descriptor.name,
        )


__all__ = [
    'CommandRegistry',
    'command_handler',
    'default_global_options',
]
