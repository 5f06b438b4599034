# Copyright 2026 PParser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the pparser command-line interface."""

import logging
import sys
from pathlib import Path

from yachalk import chalk

from pparser.config.definition import CommandConfigError, load_command_definition
from pparser.lexer.errors import LexError
from pparser.lexer.scanner import tokenize
from pparser.lexer.source import Source
from pparser.parser.argument_parser import ArgumentParser, join_argv
from pparser.parser.arguments import ArgType
from pparser.parser.command import Command
from pparser.parser.result import ParseResult

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the pparser CLI."""
    sys.exit(build_parser().run(sys.argv[1:]))


def build_parser() -> ArgumentParser:
    """Build the command tree of the pparser tool itself."""
    parser = ArgumentParser("pparser", "pparser - command-line lexer and argument parser toolkit")
    root = parser.root_command
    root.set_handler(lambda result: _cmd_root(parser))

    tokenize_cmd = root.add_subcommand(Command("tokenize", "Print the tokens of a source file", aliases=["tok"]))
    tokenize_cmd.add_keyword_arg("spans", "-s", "--spans", help="Also print the character span of each token")
    tokenize_cmd.add_keyword_arg("verbose", "-v", "--verbose", help="Enable debug logging")
    tokenize_cmd.add_positional_arg("file", help="Source file to tokenize")
    tokenize_cmd.set_handler(_cmd_tokenize)

    # check subcommand: everything after '--' is parsed against the loaded tree
    check_cmd = root.add_subcommand(
        Command("check", "Parse a command line against a YAML command definition")
    )
    check_cmd.add_keyword_arg("verbose", "-v", "--verbose", help="Enable debug logging")
    check_cmd.add_positional_arg("definition", help="YAML file describing the command tree")
    check_cmd.add_positional_arg(
        "arguments",
        help="Command line to check, given after '--'",
        type=ArgType.MULTIPLE,
        required=False,
        default=[],
    )
    check_cmd.set_handler(_cmd_check)
    return parser


# ################
# Implementation
# ################


def _print_error(message: str) -> None:
    print(f"{chalk.red('Error:')} {message}", file=sys.stderr)


def _configure_logging(result: ParseResult) -> None:
    if result.get_bool("verbose"):
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _cmd_root(parser: ArgumentParser) -> int:
    """Handle a bare 'pparser' invocation."""
    print(parser.format_help(), end="")
    return 0


def _cmd_tokenize(result: ParseResult) -> int:
    """Handle the tokenize subcommand."""
    _configure_logging(result)
    path = Path(result.get_positional_string("file"))
    if not path.is_file():
        _print_error(f"file '{path}' does not exist.")
        return 1

    try:
        source = Source.from_file(path)
        tokens = tokenize(source)
    except OSError as exc:
        _print_error(f"cannot read '{path}': {exc}")
        return 1
    except LexError as exc:
        _print_error(str(exc))
        return 1

    show_spans = result.get_bool("spans")
    for token in tokens:
        location = source.location_at(token.span.start)
        line = f"{location.line}:{location.column}\t{token.kind.name}\t{token}"
        if show_spans:
            line += f"\t[{token.span.start}, {token.span.end})"
        print(line)
    return 0


def _cmd_check(result: ParseResult) -> int:
    """Handle the check subcommand."""
    _configure_logging(result)
    path = Path(result.get_positional_string("definition"))
    try:
        command = load_command_definition(path)
    except CommandConfigError as exc:
        _print_error(str(exc))
        return 1

    arguments = result.get_positional_string_list("arguments") or []
    parsed = ArgumentParser.for_command(command).parse(join_argv(arguments))
    if not parsed.ok:
        return parsed.exit_code

    print(f"Command: {parsed.command_path}")
    for name, value in parsed.keyword_values.items():
        print(f"  {name} = {value.format()}")
    for name, value in zip(parsed.positional_names, parsed.positional_values):
        print(f"  {name} = {value.format()}")
    return 0
