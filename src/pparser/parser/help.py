# Copyright 2026 PParser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Help text rendering for commands.

All content is derived from the command's declared data: name, aliases,
help strings and the required/default/type metadata of its arguments.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pparser.parser.arguments import ArgType, ArgumentDef

if TYPE_CHECKING:
    from pparser.parser.command import Command

# ###############
# Public Interface
# ###############


def render_help(command: Command, command_path: str | None = None) -> str:
    """Render the full help text of a command.

    Args:
        command: The command to describe.
        command_path: Full space-separated path used in the usage line
            (e.g. ``git remote add``); defaults to the command's own name.

    Returns:
        The help text, ending with a newline.
    """
    path = command_path or command.name
    sections = [_usage_line(command, path)]
    if command.help:
        sections.append(command.help)
    if command.positional_args:
        sections.append(_section("Arguments:", [_describe_positional(arg) for arg in command.positional_args]))
    if command.keyword_args:
        sections.append(_section("Options:", [_describe_option(arg) for arg in command.keyword_args]))
    if command.subcommands:
        rows = [_describe_subcommand(sub) for _, sub in sorted(command.subcommands.items())]
        sections.append(
            _section("Commands:", rows) + f"\n\nUse '{path} <command> --help' for more information on a command."
        )
    return "\n\n".join(sections) + "\n"


def render_error(message: str, command: Command, command_path: str | None = None) -> str:
    """Render a parse error followed by the failing command's help."""
    return f"Error: {message}\n\n{render_help(command, command_path)}"


# ################
# Implementation
# ################


def _usage_line(command: Command, path: str) -> str:
    parts = [f"Usage: {path}"]
    if command.keyword_args:
        parts.append("[options]")
    if command.subcommands:
        parts.append("<command>")
    for arg in command.positional_args:
        usage = f"<{arg.name}>" if arg.required else f"[{arg.name}]"
        if arg.type is ArgType.MULTIPLE:
            usage += "..."
        parts.append(usage)
    return " ".join(parts)


def _section(title: str, rows: list[tuple[str, str]]) -> str:
    """Lay out (label, description) rows as an aligned, indented listing."""
    width = max(len(label) for label, _ in rows)
    lines = [title]
    for label, description in rows:
        lines.append(f"  {label.ljust(width)}  {description}".rstrip())
    return "\n".join(lines)


def _describe_positional(arg: ArgumentDef) -> tuple[str, str]:
    description = arg.help
    if not arg.default.is_none():
        description += f" (default: {arg.default.format()})"
    if not arg.required:
        description += " [optional]"
    return arg.name, description.strip()


def _describe_option(arg: ArgumentDef) -> tuple[str, str]:
    description = arg.help
    # A false boolean default is implied for flags and not worth showing.
    if not arg.default.is_none() and arg.default.get_bool() is not False:
        description += f" (default: {arg.default.format()})"
    if arg.required:
        description += " [required]"
    return arg.display_name, description.strip()


def _describe_subcommand(command: Command) -> tuple[str, str]:
    label = command.name
    if command.aliases:
        label += f" ({', '.join(command.aliases)})"
    return label, command.help
