"""List commands and display details for one command or namespace."""

from __future__ import annotations

from typing import TYPE_CHECKING

from clidispatch.commands.base import BaseCommand
from clidispatch.models import CommandDescriptor, GlobalOptionSpec, OptionSpec
from clidispatch.output import suggestion

if TYPE_CHECKING:
    from clidispatch.registry import CommandRegistry


def _table(rows: list[tuple[str, str]]) -> list[str]:
    width = max((len(left) for left, _ in rows), default=0)
    return [f'  {left.ljust(width)}  # {right}' if right else f'  {left}' for left, right in rows]


def _option_usage(option: OptionSpec) -> str:
    short = f'-{option.short_flag}, ' if option.short_flag else '    '
    return f'{short}--{option.long_flag}'


def _global_option_usage(option: GlobalOptionSpec) -> str:
    longs = [form for form in option.flag_forms if form.startswith('--')]
    shorts = [form for form in option.flag_forms if not form.startswith('--')]
    short = f'{shorts[0]}, ' if shorts else '    '
    return f'{short}{", ".join(longs)}'


class HelpCommand(BaseCommand):
    """Render help from the registry the dispatcher resolves against."""

    @property
    def registry(self) -> CommandRegistry:
        if self.dispatcher is None:
            msg = 'help requires a dispatcher'
            raise RuntimeError(msg)
        return self.dispatcher.registry

    def index(self) -> None:
        topic = self.shift_argument()
        self.validate_arguments()

        if topic is None:
            self.summary_for_commands()
            return

        descriptor = self.registry.resolve(topic)
        if descriptor is not None:
            self.help_for_command(descriptor)
        elif topic in self.registry.namespaces or self.registry.commands_in(topic):
            self.help_for_namespace(topic)
        else:
            program = self.config.program
            lines = [
                f'`{topic}` is not a {program} command.',
                suggestion(topic, [*self.registry.command_names(), *self.registry.namespaces]),
                f'See `{program} help` for a list of available commands.',
            ]
            self.error('\n'.join(line for line in lines if line))

    def _top_level_rows(self) -> list[tuple[str, str]]:
        rows: dict[str, str] = {}
        for descriptor in self.registry.commands.values():
            if ':' not in descriptor.name:
                rows[descriptor.name] = descriptor.summary
            else:
                rows.setdefault(descriptor.namespace, '')
        for namespace in self.registry.namespaces.values():
            rows[namespace.name] = namespace.description or rows.get(namespace.name, '')
        return sorted(rows.items())

    def summary_for_commands(self) -> None:
        program = self.config.program
        self.display(f'Usage: {program} COMMAND [--project PROJECT] [command-specific-options]')
        self.display()
        self.display(f'Primary help topics, type "{program} help TOPIC" for more details:')
        self.display()
        for line in _table(self._top_level_rows()):
            self.display(line)
        self.display()

    def help_for_namespace(self, name: str) -> None:
        program = self.config.program
        namespace = self.registry.namespaces.get(name)
        if namespace is not None and namespace.description:
            self.display(namespace.description)
            self.display()
        rows = [(descriptor.name, descriptor.summary) for descriptor in self.registry.commands_in(name)]
        if rows:
            self.display(f'Additional commands, type "{program} help COMMAND" for more details:')
            self.display()
            for line in _table(rows):
                self.display(line)
            self.display()

    def help_for_command(self, descriptor: CommandDescriptor) -> None:
        program = self.config.program
        usage = f'Usage: {program} {descriptor.name}'
        if descriptor.usage:
            usage = f'{usage} {descriptor.usage}'
        self.display(usage)
        self.display()
        if descriptor.summary:
            self.display(descriptor.summary)
            self.display()
        if descriptor.description:
            self.display(descriptor.description)
            self.display()

        aliases = self.registry.aliases_for(descriptor.name)
        if aliases:
            self.display(f'Aliases: {", ".join(aliases)}')
            self.display()

        if descriptor.options:
            self.display(f'{descriptor.name.capitalize()} options:')
            rows = [(_option_usage(option), option.description) for option in descriptor.options.values()]
            for line in _table(rows):
                self.display(line)
            self.display()

        if self.registry.global_options:
            self.display('Global options:')
            for line in _table([(_global_option_usage(option), '') for option in self.registry.global_options]):
                self.display(line)
            self.display()

        subcommands = [other for other in self.registry.commands_in(descriptor.name) if other.name != descriptor.name]
        if subcommands:
            self.display(f'Additional commands, type "{program} help COMMAND" for more details:')
            self.display()
            for line in _table([(other.name, other.summary) for other in subcommands]):
                self.display(line)
            self.display()
