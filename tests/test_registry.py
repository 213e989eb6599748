"""Tests for the command registry."""

import pytest
from pytest_mock import MockerFixture

from clidispatch.commands import BaseCommand
from clidispatch.models import CommandDescriptor, GlobalOptionSpec, NamespaceDescriptor
from clidispatch.registry import CommandRegistry, command_handler, default_global_options


def _noop(args: list[str], options: dict, dispatcher: object) -> None:
    return None


def _descriptor(name: str, summary: str = '') -> CommandDescriptor:
    return CommandDescriptor(name=name, handler=_noop, summary=summary)


class EchoCommand(BaseCommand):
    """Command used to exercise command_handler."""

    def index(self) -> tuple[list[str], dict]:
        return self.args, self.options


class TestCommandRegistry:
    """Tests for registration and resolution."""

    def test_resolve_direct(self) -> None:
        """Test that a registered name resolves to its descriptor."""
        registry = CommandRegistry()
        descriptor = _descriptor('jobs')
        registry.register(descriptor)

        assert registry.resolve('jobs') is descriptor

    def test_alias_registered_before_target(self) -> None:
        """Test that alias resolution is lazy."""
        registry = CommandRegistry()
        registry.register_alias('a', 'b')
        descriptor = _descriptor('b')
        registry.register(descriptor)

        assert registry.resolve('a') is registry.resolve('b')
        assert registry.resolve('a') is descriptor

    def test_alias_to_missing_target(self) -> None:
        """Test that a dangling alias resolves to nothing."""
        registry = CommandRegistry()
        registry.register_alias('a', 'missing')

        assert registry.resolve('a') is None

    def test_unknown_name(self) -> None:
        """Test that an unknown name resolves to nothing."""
        assert CommandRegistry().resolve('nothing') is None

    def test_last_registration_wins(self) -> None:
        """Test that re-registering a name overrides it."""
        registry = CommandRegistry()
        registry.register(_descriptor('jobs', summary='first'))
        registry.register(_descriptor('jobs', summary='second'))

        resolved = registry.resolve('jobs')
        assert resolved is not None
        assert resolved.summary == 'second'

    def test_direct_name_beats_alias(self) -> None:
        """Test that a command named like an alias is found first."""
        registry = CommandRegistry()
        direct = _descriptor('ls')
        registry.register(direct)
        registry.register(_descriptor('list'))
        registry.register_alias('ls', 'list')

        assert registry.resolve('ls') is direct

    def test_command_names_include_aliases(self) -> None:
        """Test that suggestions can draw on aliases."""
        registry = CommandRegistry()
        registry.register(_descriptor('jobs'))
        registry.register_alias('j', 'jobs')

        assert registry.command_names() == ['jobs', 'j']

    def test_aliases_for(self) -> None:
        """Test that aliases are listed per target, sorted."""
        registry = CommandRegistry()
        registry.register_alias('run', 'jobs:run')
        registry.register_alias('r', 'jobs:run')
        registry.register_alias('x', 'other')

        assert registry.aliases_for('jobs:run') == ['r', 'run']

    def test_commands_in_namespace(self) -> None:
        """Test that namespace grouping uses the name prefix."""
        registry = CommandRegistry()
        registry.register_namespace(NamespaceDescriptor(name='jobs', description='manage jobs'))
        for name in ('jobs:stop', 'jobs', 'jobs:run', 'help'):
            registry.register(_descriptor(name))

        assert [d.name for d in registry.commands_in('jobs')] == ['jobs', 'jobs:run', 'jobs:stop']
        assert registry.namespaces['jobs'].description == 'manage jobs'

    def test_default_global_options(self) -> None:
        """Test that the registry starts with help, project and remote."""
        registry = CommandRegistry()

        assert [option.name for option in registry.global_options] == ['help', 'project', 'remote']

    def test_register_global_option(self) -> None:
        """Test that extra global options are appended after the defaults."""
        registry = CommandRegistry()
        registry.register_global_option(GlobalOptionSpec(name='verbose', flag_forms=('--verbose',)))

        assert registry.global_options[-1].name == 'verbose'

    def test_explicit_global_options(self) -> None:
        """Test that a registry can be built with its own global options."""
        options = default_global_options()[:1]

        assert CommandRegistry(options).global_options == options


class TestCommandHandler:
    """Tests for command_handler."""

    def test_constructs_and_invokes(self, mocker: MockerFixture) -> None:
        """Test that the handler builds the class and calls the method."""
        handler = command_handler(EchoCommand, 'index')
        dispatcher = mocker.Mock()

        assert handler(['a'], {'force': True}, dispatcher) == (['a'], {'force': True})

    def test_missing_method_fails_at_registration(self) -> None:
        """Test that a wrong method name is caught immediately."""
        with pytest.raises(AttributeError):
            command_handler(EchoCommand, 'nope')
