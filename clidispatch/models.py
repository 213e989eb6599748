"""Pydantic models for clidispatch."""

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

OptionValue = str | bool
Handler = Callable[[list[str], dict[str, OptionValue], Any], Any]


def _strip_dashes(flag: str) -> str:
    return flag.strip().lstrip('-')


class OptionSpec(BaseModel):
    """A command-specific flag.

    ``long_flag`` may carry a value placeholder (``'polling-interval SECONDS'``),
    in which case the option consumes one value.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    short_flag: str | None = None
    long_flag: str
    description: str = ''

    @field_validator('short_flag')
    @classmethod
    def validate_short_flag(cls, v: str | None) -> str | None:
        """Normalize the short flag to a single bare character."""
        if v is None:
            return None
        parts = _strip_dashes(v).split()
        flag = parts[0] if parts else ''
        if len(flag) != 1:
            msg = f'short flag must be a single character: {v!r}'
            raise ValueError(msg)
        return flag

    @field_validator('long_flag')
    @classmethod
    def validate_long_flag(cls, v: str) -> str:
        """Strip leading dashes from the long flag."""
        flag = ' '.join(_strip_dashes(v).split())
        if not flag:
            msg = 'long flag cannot be empty'
            raise ValueError(msg)
        return flag

    @property
    def takes_value(self) -> bool:
        return len(self.long_flag.split()) > 1

    @property
    def forms(self) -> tuple[str, ...]:
        """Return the flag forms as typed on the command line."""
        forms = [f'--{self.long_flag.split()[0]}']
        if self.short_flag:
            forms.insert(0, f'-{self.short_flag}')
        return tuple(forms)

    @property
    def key(self) -> str:
        """Return the name options are stored under."""
        return self.name.replace('-', '_')


class GlobalOptionSpec(BaseModel):
    """A flag recognized by every command."""

    model_config = ConfigDict(frozen=True)

    name: str
    flag_forms: tuple[str, ...]
    on_parse: Callable[[OptionValue], None] | None = None

    @property
    def takes_value(self) -> bool:
        return any(len(form.split()) > 1 for form in self.flag_forms)

    @property
    def forms(self) -> tuple[str, ...]:
        return tuple(form.split()[0] for form in self.flag_forms)


class NamespaceDescriptor(BaseModel):
    """A group of related commands, shown together in help output."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ''


class CommandDescriptor(BaseModel):
    """A registered command and everything needed to dispatch it."""

    model_config = ConfigDict(frozen=True)

    name: str
    handler: Handler
    options: dict[str, OptionSpec] = Field(default_factory=dict)
    summary: str = ''
    usage: str = ''
    description: str = ''

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate that name is not empty."""
        if not v.strip():
            msg = 'Command name cannot be empty'
            raise ValueError(msg)
        return v.strip()

    @property
    def namespace(self) -> str:
        """Return the namespace part of a ``namespace:command`` name."""
        return self.name.split(':', 1)[0]


class ParsedArguments(BaseModel):
    """The outcome of one parser pass over a token stream."""

    options: dict[str, OptionValue] = Field(default_factory=dict)
    args: list[str] = Field(default_factory=list)
    invalid: list[str] = Field(default_factory=list)
    consumed: list[str] = Field(default_factory=list)


class InvocationState(BaseModel):
    """Mutable record of the invocation currently being dispatched."""

    current_command: str | None = None
    current_args: list[str] = Field(default_factory=list)
    current_options: dict[str, OptionValue] = Field(default_factory=dict)
    invalid_arguments: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
