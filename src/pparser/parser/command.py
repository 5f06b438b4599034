# Copyright 2026 PParser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Command trees and the recursive-descent matcher that interprets tokens against them.

A Command owns keyword and positional argument declarations, named
subcommands and aliases. ``Command.match`` walks a token list with a shared
cursor, delegating to a subcommand as soon as one is named, and returns a
ParseResult describing success, a help request, or a parse error.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import TextIO

from pparser.lexer.token import KEYWORD_KINDS, Token, TokenKind
from pparser.parser.arguments import (
    HELP_ARGUMENT_NAME,
    NEGATION_FLAG_PREFIX,
    NEGATION_NAME_PREFIX,
    ArgType,
    ArgumentDef,
    help_argument,
)
from pparser.parser.help import render_error, render_help
from pparser.parser.result import ParseResult, ParseStatus
from pparser.parser.values import ArgValue, ValueKind

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

Handler = Callable[[ParseResult], "int | None"]


class CommandDefinitionError(ValueError):
    """Raised when building a command tree violates a naming invariant."""


class ArgumentError(Exception):
    """Raised inside the matcher when the command line does not fit the declarations.

    ``Command.match`` converts it into a PARSE_ERROR result; it never escapes.
    """


@dataclass
class TokenCursor:
    """Index into a token list shared by every level of a subcommand descent."""

    index: int = 0


class Command:
    """A node in the command tree.

    Every command carries exactly one automatic ``-h/--help`` argument. The
    tree must be fully built before parsing starts; matching only reads it.
    """

    def __init__(
        self,
        name: str,
        help: str = "",
        *,
        aliases: Iterable[str] = (),
        handler: Handler | None = None,
    ) -> None:
        if not name:
            raise CommandDefinitionError("Command name must not be empty.")
        self._name = name
        self._help = help
        self._keyword_args: list[ArgumentDef] = []
        self._positional_args: list[ArgumentDef] = []
        self._subcommands: dict[str, Command] = {}
        self._aliases: list[str] = []
        self._handler = handler
        self._parent: Command | None = None
        self._ensure_help_argument()
        for alias in aliases:
            self.add_alias(alias)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def help(self) -> str:
        return self._help

    @property
    def keyword_args(self) -> Sequence[ArgumentDef]:
        return tuple(self._keyword_args)

    @property
    def positional_args(self) -> Sequence[ArgumentDef]:
        return tuple(self._positional_args)

    @property
    def subcommands(self) -> Mapping[str, Command]:
        return MappingProxyType(self._subcommands)

    @property
    def aliases(self) -> Sequence[str]:
        return tuple(self._aliases)

    @property
    def handler(self) -> Handler | None:
        return self._handler

    @property
    def parent(self) -> Command | None:
        return self._parent

    def __repr__(self) -> str:
        return f"Command({self._name!r})"

    # ------------------------------------------------------------------
    # Builder API
    # ------------------------------------------------------------------

    def add_keyword_arg(
        self,
        name: str,
        short_name: str | None = None,
        long_name: str | None = None,
        help: str = "",
        type: ArgType = ArgType.FLAG,
        required: bool = False,
        default: object = None,
        value_type: ValueKind | None = None,
    ) -> Command:
        """Declare a flag or option and return this command for chaining.

        A FLAG with a default of ``True`` and a long name also gets a
        companion ``--no-<long>`` flag stored as ``no_<name>``.

        Raises:
            CommandDefinitionError: On a reserved or duplicate name, a
                duplicate or malformed flag spelling, or an invalid type.
        """
        if name == HELP_ARGUMENT_NAME:
            raise CommandDefinitionError(
                f"Argument name '{HELP_ARGUMENT_NAME}' is reserved for the automatic help flag."
            )
        if name.startswith(NEGATION_NAME_PREFIX):
            raise CommandDefinitionError(
                f"Argument name '{name}' uses the prefix '{NEGATION_NAME_PREFIX}' reserved for negation flags."
            )
        if long_name is not None and long_name.startswith(NEGATION_FLAG_PREFIX):
            raise CommandDefinitionError(
                f"Option '{long_name}' uses the prefix '{NEGATION_FLAG_PREFIX}' reserved for negation flags."
            )
        if type is ArgType.POSITIONAL:
            raise CommandDefinitionError(f"Keyword argument '{name}' cannot have the positional type.")
        if type is ArgType.FLAG and value_type is not None:
            raise CommandDefinitionError(f"Flag '{name}' cannot declare a value type.")

        default_value = _checked_default(name, type, value_type, default)
        if type is ArgType.FLAG and default_value.is_none():
            default_value = ArgValue.of_bool(False)

        arg = ArgumentDef(
            name=name,
            short_name=short_name,
            long_name=long_name,
            help=help,
            type=type,
            required=required,
            default=default_value,
            value_type=value_type,
        )
        self._register_keyword_arg(arg)

        if type is ArgType.FLAG and default_value.get_bool() is True and long_name is not None:
            self._register_keyword_arg(
                ArgumentDef(
                    name=NEGATION_NAME_PREFIX + name,
                    long_name=NEGATION_FLAG_PREFIX + long_name[2:],
                    help=f"Disable {long_name}",
                    type=ArgType.FLAG,
                    default=ArgValue.of_bool(False),
                    negated_flag_name=name,
                )
            )
        return self

    def add_positional_arg(
        self,
        name: str,
        help: str = "",
        type: ArgType = ArgType.SINGLE,
        required: bool = True,
        default: object = None,
        value_type: ValueKind | None = None,
    ) -> Command:
        """Declare the next positional argument and return this command for chaining.

        Raises:
            CommandDefinitionError: If the type is FLAG or the name is taken.
        """
        if type is ArgType.FLAG:
            raise CommandDefinitionError("Positional arguments cannot be flags.")
        default_value = _checked_default(name, type, value_type, default)
        if any(arg.name == name for arg in self._positional_args):
            raise CommandDefinitionError(f"Positional argument '{name}' already exists.")
        self._positional_args.append(
            ArgumentDef(
                name=name,
                help=help,
                type=type,
                required=required,
                default=default_value,
                value_type=value_type,
            )
        )
        return self

    def add_subcommand(self, command: Command) -> Command:
        """Attach a child command and return the child.

        Raises:
            CommandDefinitionError: If the child's name or aliases collide with
                a sibling's name or aliases, or the child already has a parent.
        """
        if command._parent is not None:
            raise CommandDefinitionError(
                f"Command '{command.name}' is already a subcommand of '{command._parent.name}'."
            )
        taken = self._taken_subcommand_names()
        if command.name in taken:
            raise CommandDefinitionError(f"Subcommand '{command.name}' conflicts with an existing subcommand or alias.")
        for alias in command.aliases:
            if alias in taken:
                raise CommandDefinitionError(
                    f"Alias '{alias}' of subcommand '{command.name}' conflicts with an existing subcommand or alias."
                )
        command._ensure_help_argument()
        command._parent = self
        self._subcommands[command.name] = command
        return command

    def add_alias(self, alias: str) -> Command:
        """Add an alternative name for this command and return the command.

        Raises:
            CommandDefinitionError: If the alias is empty, equals the command's
                own name, repeats an alias, or collides with a sibling.
        """
        if not alias:
            raise CommandDefinitionError("Alias must not be empty.")
        if alias == self._name:
            raise CommandDefinitionError(f"Alias '{alias}' is the command's own name.")
        if alias in self._aliases:
            raise CommandDefinitionError(f"Alias '{alias}' is already defined for '{self._name}'.")
        if self._parent is not None and alias in self._parent._taken_subcommand_names(exclude=self):
            raise CommandDefinitionError(f"Alias '{alias}' conflicts with an existing subcommand or alias.")
        self._aliases.append(alias)
        return self

    def set_handler(self, handler: Handler | None) -> Command:
        self._handler = handler
        return self

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def find_keyword_arg(self, flag_name: str, short: bool) -> ArgumentDef | None:
        """Find the keyword argument spelled ``-flag_name`` or ``--flag_name``."""
        for arg in self._keyword_args:
            if arg.matches_flag(flag_name, short):
                return arg
        return None

    def resolve_subcommand(self, word: str) -> Command | None:
        """Resolve a word to a subcommand by exact name or unique alias.

        Raises:
            ArgumentError: If the word is an alias of more than one subcommand.
        """
        if word in self._subcommands:
            return self._subcommands[word]
        matches = [sub for sub in self._subcommands.values() if word in sub.aliases]
        if len(matches) > 1:
            names = ", ".join(sorted(sub.name for sub in matches))
            raise ArgumentError(f"Ambiguous command '{word}' matches: {names}")
        return matches[0] if matches else None

    def format_help(self, command_path: str | None = None) -> str:
        return render_help(self, command_path)

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    def match(
        self,
        tokens: Sequence[Token],
        cursor: TokenCursor,
        path_prefix: str = "",
        *,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> ParseResult:
        """Match tokens starting at ``cursor`` against this command.

        The cursor is advanced in place so callers see what a subcommand
        consumed. When a subcommand is named the subcommand's result is
        returned unchanged. On a parse error the message and this command's
        help go to ``stderr``; on a help request the help goes to ``stdout``.
        The handler, if any, runs only when the result is still SUCCESS.
        """
        matcher = _Matcher(self, tokens, cursor, path_prefix, stdout, stderr)
        try:
            result = matcher.run()
        except ArgumentError as exc:
            result = matcher.result
            result.status = ParseStatus.PARSE_ERROR
            result.error_message = str(exc)
            result.exit_code = 1
            logger.debug("Parse error in '%s': %s", result.command_path, exc)
            (stderr or sys.stderr).write(render_error(result.error_message, self, result.command_path))
            return result

        if result is matcher.result and result.ok and self._handler is not None:
            exit_code = self._handler(result)
            result.exit_code = 0 if exit_code is None else int(exit_code)
        return result

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _ensure_help_argument(self) -> None:
        if not any(arg.is_help_flag or arg.name == HELP_ARGUMENT_NAME for arg in self._keyword_args):
            self._keyword_args.append(help_argument())

    def _register_keyword_arg(self, arg: ArgumentDef) -> None:
        """Append a keyword argument after the uniqueness and spelling checks."""
        if arg.short_name is None and arg.long_name is None:
            raise CommandDefinitionError(f"Option '{arg.name}' needs a short or a long flag name.")
        if arg.short_name is not None and not _is_short_flag(arg.short_name):
            raise CommandDefinitionError(f"Short flag '{arg.short_name}' must be '-' followed by one character.")
        if arg.long_name is not None and not _is_long_flag(arg.long_name):
            raise CommandDefinitionError(f"Long flag '{arg.long_name}' must be '--' followed by a name.")
        for existing in self._keyword_args:
            if existing.name == arg.name:
                raise CommandDefinitionError(f"Argument '{arg.name}' already exists.")
            for spelling in (arg.short_name, arg.long_name):
                if spelling is not None and spelling in (existing.short_name, existing.long_name):
                    raise CommandDefinitionError(f"Option '{spelling}' is already used by argument '{existing.name}'.")
        self._keyword_args.append(arg)

    def _taken_subcommand_names(self, exclude: Command | None = None) -> set[str]:
        taken: set[str] = set()
        for sub in self._subcommands.values():
            if sub is not exclude:
                taken.add(sub.name)
                taken.update(sub.aliases)
        return taken


def coerce_token(token: Token, expected: ArgType, value_type: ValueKind | None = None) -> ArgValue:
    """Convert a value token into an ArgValue for an argument of the given type.

    Literal tokens keep their native type for SINGLE/POSITIONAL arguments and
    become their source text when a string is expected (MULTIPLE, or a
    STRING value type). String literals are unescaped, identifiers and
    keywords are taken verbatim. Returns a none value when the token cannot
    supply a value of the expected type.
    """
    if expected is ArgType.MULTIPLE or value_type is ValueKind.STRING:
        text = _token_text(token)
        return ArgValue.none() if text is None else ArgValue.of_string(text)

    native = _native_value(token)
    if native.is_none() or value_type is None:
        return native
    if value_type is ValueKind.INT and native.is_int():
        return native
    if value_type is ValueKind.FLOAT and (native.is_float() or native.is_int()):
        return ArgValue.of_float(native.value)
    if value_type is ValueKind.BOOL and native.is_bool():
        return native
    return ArgValue.none()


# ################
# Implementation
# ################


_SCALAR_VALUE_KINDS = (ValueKind.BOOL, ValueKind.INT, ValueKind.FLOAT, ValueKind.STRING)


def _checked_default(name: str, type: ArgType, value_type: ValueKind | None, default: object) -> ArgValue:
    """Validate the value type of an argument and convert its default to match it."""
    if type is ArgType.MULTIPLE and value_type not in (None, ValueKind.STRING):
        raise CommandDefinitionError(f"Argument '{name}' takes multiple values, which are always strings.")
    if value_type is not None and value_type not in _SCALAR_VALUE_KINDS:
        raise CommandDefinitionError(
            f"Argument '{name}' has value type '{value_type.value}'; expected bool, int, float or string."
        )

    try:
        value = ArgValue.from_python(default)
    except TypeError as exc:
        raise CommandDefinitionError(f"Invalid default for argument '{name}': {exc}") from exc
    if value.is_none():
        return value

    if type is ArgType.FLAG:
        expected = ValueKind.BOOL
    elif type is ArgType.MULTIPLE:
        expected = ValueKind.STRING_LIST
    else:
        expected = value_type
    if expected is ValueKind.FLOAT and value.is_int():
        return ArgValue.of_float(value.value)
    if expected is None and value.is_string_list():
        raise CommandDefinitionError(f"Invalid default for argument '{name}': a list needs a MULTIPLE argument.")
    if expected is not None and value.kind is not expected:
        raise CommandDefinitionError(
            f"Invalid default for argument '{name}': expected {expected.value}, got {value.kind.value}."
        )
    return value


def _is_short_flag(spelling: str) -> bool:
    return len(spelling) == 2 and spelling[0] == "-" and spelling[1] != "-"


def _is_long_flag(spelling: str) -> bool:
    return len(spelling) > 2 and spelling.startswith("--") and spelling[2] != "-"


def _token_text(token: Token) -> str | None:
    """The string a value token stands for, or None for punctuation and operators."""
    if token.kind is TokenKind.STRING_LITERAL:
        return token.string_value
    if token.kind is TokenKind.IDENTIFIER:
        return token.name
    if token.kind in (TokenKind.INT_LITERAL, TokenKind.FLOAT_LITERAL, TokenKind.SHORT_FLAG, TokenKind.LONG_FLAG):
        return token.text
    if token.kind is TokenKind.DOUBLE_MINUS:
        return "--"
    if token.kind in KEYWORD_KINDS:
        return token.kind.value
    return None


def _native_value(token: Token) -> ArgValue:
    if token.kind is TokenKind.INT_LITERAL:
        return ArgValue.of_int(token.int_value)
    if token.kind is TokenKind.FLOAT_LITERAL:
        return ArgValue.of_float(token.float_value)
    if token.kind is TokenKind.TRUE:
        return ArgValue.of_bool(True)
    if token.kind is TokenKind.FALSE:
        return ArgValue.of_bool(False)
    text = _token_text(token)
    return ArgValue.none() if text is None else ArgValue.of_string(text)


class _Matcher:
    """Matching state for one command level during one parse."""

    def __init__(
        self,
        command: Command,
        tokens: Sequence[Token],
        cursor: TokenCursor,
        path_prefix: str,
        stdout: TextIO | None,
        stderr: TextIO | None,
    ) -> None:
        self._command = command
        self._tokens = tokens
        self._cursor = cursor
        self._stdout = stdout
        self._stderr = stderr
        self._seen: set[str] = set()
        self._positional_index = 0
        self._options_ended = False
        self.result = ParseResult(
            command_path=path_prefix + command.name,
            positional_names=[arg.name for arg in command.positional_args],
        )
        for arg in command.keyword_args:
            if not arg.is_help_flag:
                self.result.keyword_values[arg.name] = arg.default

    def run(self) -> ParseResult:
        """Consume tokens until the end marker or a subcommand takes over."""
        while not self._at_end():
            token = self._current()
            if not self._options_ended and token.kind is TokenKind.DOUBLE_MINUS:
                self._advance()
                self._options_ended = True
                continue

            if self._is_option(token):
                if self._match_flag(token):
                    return self._request_help()
                continue

            if not self._options_ended and token.kind is TokenKind.IDENTIFIER:
                sub = self._command.resolve_subcommand(token.name)
                if sub is not None:
                    self._advance()
                    logger.debug("Delegating '%s' to subcommand '%s'", self.result.command_path, sub.name)
                    return sub.match(
                        self._tokens,
                        self._cursor,
                        self.result.command_path + " ",
                        stdout=self._stdout,
                        stderr=self._stderr,
                    )

            if self._positional_index < len(self._command.positional_args):
                self._match_positional(token)
                continue

            raise ArgumentError(f"Unexpected argument: {token}")

        self._validate()
        return self.result

    # ------------------------------------------------------------------
    # Token access helpers
    # ------------------------------------------------------------------

    def _at_end(self) -> bool:
        index = self._cursor.index
        return index >= len(self._tokens) or self._tokens[index].kind is TokenKind.EOF

    def _current(self) -> Token:
        return self._tokens[self._cursor.index]

    def _advance(self) -> None:
        self._cursor.index += 1

    def _is_option(self, token: Token) -> bool:
        """Whether a token is a flag or separator rather than a value here."""
        if self._options_ended:
            return False
        return token.is_flag or token.kind is TokenKind.DOUBLE_MINUS

    # ------------------------------------------------------------------
    # Flags
    # ------------------------------------------------------------------

    def _match_flag(self, token: Token) -> bool:
        """Match one flag token (or a short-flag cluster).

        Returns True when the help flag was given.
        """
        name = token.name
        short = token.kind is TokenKind.SHORT_FLAG
        if short and len(name) > 1:
            self._advance()
            for ch in name:
                arg = self._command.find_keyword_arg(ch, short=True)
                if arg is None:
                    raise ArgumentError(f"Unknown option in combined flags: -{ch}")
                if arg.is_help_flag:
                    return True
                if arg.takes_value:
                    raise ArgumentError(f"Option -{ch} requires a value and cannot be combined.")
                self._set_flag(arg)
            return False

        arg = self._command.find_keyword_arg(name, short)
        if arg is None:
            raise ArgumentError(f"Unknown option: {token}")
        if arg.is_help_flag:
            return True

        self._advance()
        if arg.type is ArgType.FLAG:
            self._set_flag(arg)
        elif arg.type is ArgType.SINGLE:
            self.result.keyword_values[arg.name] = self._take_value(arg)
            self._seen.add(arg.name)
        else:
            values = self._take_values(arg)
            previous = self.result.keyword_values[arg.name]
            if arg.name in self._seen and previous.is_string_list():
                values = previous.get_string_list() + values
            self.result.keyword_values[arg.name] = ArgValue.of_list(values)
            self._seen.add(arg.name)
        return False

    def _set_flag(self, arg: ArgumentDef) -> None:
        """Set a boolean flag and keep it consistent with its negation partner."""
        self._seen.add(arg.name)
        self.result.keyword_values[arg.name] = ArgValue.of_bool(True)
        for other in self._command.keyword_args:
            partner = other.name == arg.negated_flag_name or other.negated_flag_name == arg.name
            if partner and other.name in self.result.keyword_values:
                self.result.keyword_values[other.name] = ArgValue.of_bool(False)

    def _take_value(self, arg: ArgumentDef) -> ArgValue:
        """Consume the single value following an option."""
        if self._at_end() or self._is_option(self._current()):
            raise ArgumentError(f"Option {arg.display_name} requires a value.")
        value = coerce_token(self._current(), arg.type, arg.value_type)
        if value.is_none():
            raise ArgumentError(f"Invalid value for option {arg.display_name}: {self._current()}")
        self._advance()
        return value

    def _take_values(self, arg: ArgumentDef) -> list[str]:
        """Consume one or more string values following an option."""
        first = self._take_value(arg)
        values = [first.value]
        values.extend(self._collect_strings())
        return values

    def _collect_strings(self) -> list[str]:
        """Greedily consume value tokens as strings until a flag or the end."""
        values: list[str] = []
        while not self._at_end() and not self._is_option(self._current()):
            text = coerce_token(self._current(), ArgType.MULTIPLE)
            if text.is_none():
                break
            values.append(text.value)
            self._advance()
        return values

    # ------------------------------------------------------------------
    # Positionals
    # ------------------------------------------------------------------

    def _match_positional(self, token: Token) -> None:
        arg = self._command.positional_args[self._positional_index]
        value = coerce_token(token, arg.type, arg.value_type)
        if value.is_none():
            raise ArgumentError(f"Invalid value for positional argument '{arg.name}': {token}")
        self._advance()
        if arg.type is ArgType.MULTIPLE:
            value = ArgValue.of_list([value.value, *self._collect_strings()])
        self.result.positional_values.append(value)
        self._positional_index += 1

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    def _validate(self) -> None:
        """Check required arguments and fill defaults for missing positionals."""
        for arg in self._command.keyword_args:
            if arg.required and not arg.is_help_flag and arg.name not in self._seen:
                raise ArgumentError(f"Missing required option: {arg.display_name}")
        for arg in self._command.positional_args[self._positional_index :]:
            if arg.required:
                raise ArgumentError(f"Missing required positional argument: {arg.name}")
            self.result.positional_values.append(arg.default)

    def _request_help(self) -> ParseResult:
        (self._stdout or sys.stdout).write(render_help(self._command, self.result.command_path))
        self.result.status = ParseStatus.HELP_REQUESTED
        self.result.exit_code = 0
        return self.result
