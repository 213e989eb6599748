"""Single-pass argument parser over the merged global and command grammar."""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass

from clidispatch.errors import (
    InvalidOptionError,
    MissingArgumentError,
    NeedlessArgumentError,
)
from clidispatch.logging import get_logger
from clidispatch.models import (
    GlobalOptionSpec,
    OptionSpec,
    OptionValue,
    ParsedArguments,
)

logger = get_logger(__name__)

END_OF_OPTIONS = '--'

# Claimed before anything else so no option library treats it as a
# built-in version switch; the dispatcher maps a bare --version command.
RESERVED_VERSION_FLAG = '--version'


@dataclass(frozen=True)
class Switch:
    """A flag form bound to the option it sets."""

    key: str
    takes_value: bool
    callback: Callable[[OptionValue], None] | None = None
    reserved: bool = False


Grammar = dict[str, Switch]


def build_grammar(
    global_options: Iterable[GlobalOptionSpec],
    command_options: Mapping[str, OptionSpec],
) -> Grammar:
    """Merge global and command options into one flag table.

    The first registration of a flag form wins, so global forms shadow
    command forms that collide with them.
    """
    grammar: Grammar = {RESERVED_VERSION_FLAG: Switch(key='version', takes_value=False, reserved=True)}

    for option in global_options:
        switch = Switch(key=option.name, takes_value=option.takes_value, callback=option.on_parse)
        for form in option.forms:
            grammar.setdefault(form, switch)

    for option in command_options.values():
        switch = Switch(key=option.key, takes_value=option.takes_value)
        for form in option.forms:
            if form in grammar:
                logger.debug('option_form_shadowed', form=form, option=option.name)
            grammar.setdefault(form, switch)

    return grammar


def _apply(switch: Switch, value: OptionValue, result: ParsedArguments) -> None:
    result.options[switch.key] = value
    if switch.callback is not None:
        switch.callback(value)


def _parse_long(grammar: Grammar, token: str, stream: list[str], index: int, result: ParsedArguments) -> int:
    flag, separator, attached = token.partition('=')
    switch = grammar.get(flag)
    if switch is None:
        msg = f'invalid option: {token}'
        raise InvalidOptionError(msg, token=token)

    if switch.reserved:
        result.invalid.append(token)
        return index

    if not switch.takes_value:
        if separator:
            msg = f'needless argument: {token}'
            raise NeedlessArgumentError(msg, token=token)
        result.consumed.append(token)
        _apply(switch, True, result)
        return index

    if separator:
        result.consumed.append(token)
        _apply(switch, attached, result)
        return index

    if index >= len(stream):
        msg = f'missing argument: {token}'
        raise MissingArgumentError(msg, token=token)
    value = stream[index]
    result.consumed.extend((token, value))
    _apply(switch, value, result)
    return index + 1


def _parse_short(grammar: Grammar, token: str, stream: list[str], index: int, result: ParsedArguments) -> int:
    cluster = token[1:]
    matched: list[tuple[Switch, str | None]] = []

    # Validate the whole cluster before applying any of it.
    for position, char in enumerate(cluster):
        switch = grammar.get(f'-{char}')
        if switch is None:
            msg = f'invalid option: {token}'
            raise InvalidOptionError(msg, token=token)
        if switch.takes_value:
            matched.append((switch, cluster[position + 1:]))
            break
        matched.append((switch, None))

    last_switch, attached = matched[-1]
    value_token: str | None = None
    if last_switch.takes_value and not attached:
        if index >= len(stream):
            msg = f'missing argument: {token}'
            raise MissingArgumentError(msg, token=token)
        value_token = stream[index]
        index += 1

    result.consumed.append(token)
    if value_token is not None:
        result.consumed.append(value_token)

    for switch, value in matched:
        if switch.takes_value:
            _apply(switch, value or value_token or '', result)
        else:
            _apply(switch, True, result)
    return index


def parse_arguments(
    global_options: Iterable[GlobalOptionSpec],
    command_options: Mapping[str, OptionSpec],
    tokens: Iterable[str],
) -> ParsedArguments:
    """Classify every token as a flag, a positional argument or an invalid flag.

    Unknown flags are recorded and scanning continues with the next token.
    Missing or needless flag values raise an ``OptionParseError`` subclass.
    """
    grammar = build_grammar(global_options, command_options)
    stream = list(tokens)
    result = ParsedArguments()
    index = 0

    while index < len(stream):
        token = stream[index]
        index += 1

        if token == END_OF_OPTIONS:
            result.consumed.append(token)
            result.args.extend(stream[index:])
            break

        try:
            if token.startswith('--'):
                index = _parse_long(grammar, token, stream, index, result)
            elif token.startswith('-') and token != '-':
                index = _parse_short(grammar, token, stream, index, result)
            else:
                result.args.append(token)
        except InvalidOptionError as exc:
            logger.debug('invalid_option', token=exc.token)
            result.invalid.append(exc.token)

    return result


__all__ = [
    'RESERVED_VERSION_FLAG',
    'Switch',
    'build_grammar',
    'parse_arguments',
]
