# Copyright 2026 PParser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for help text rendering."""

from pparser.parser import ArgType, Command, render_error, render_help

# ###############
# Helpers
# ###############


def _git() -> Command:
    git = Command("git", "A version control tool")
    git.add_keyword_arg("verbose", "-v", "--verbose", help="Be verbose")
    git.add_subcommand(Command("remote", "Manage remotes"))
    commit = git.add_subcommand(Command("commit", "Record changes", aliases=["ci"]))
    commit.add_keyword_arg("message", "-m", "--message", help="Commit message", type=ArgType.SINGLE, required=True)
    return git


# ###############
# Layout
# ###############


def test_root_help_layout() -> None:
    expected = (
        "Usage: git [options] <command>\n"
        "\n"
        "A version control tool\n"
        "\n"
        "Options:\n"
        "  -h, --help     Show this help message and exit\n"
        "  -v, --verbose  Be verbose\n"
        "\n"
        "Commands:\n"
        "  commit (ci)  Record changes\n"
        "  remote       Manage remotes\n"
        "\n"
        "Use 'git <command> --help' for more information on a command.\n"
    )
    assert render_help(_git()) == expected


def test_command_path_is_used_in_usage() -> None:
    commit = _git().subcommands["commit"]
    text = render_help(commit, "git commit")
    assert text.startswith("Usage: git commit [options]\n\nRecord changes\n")


def test_format_help_defaults_to_own_name() -> None:
    assert _git().subcommands["remote"].format_help().startswith("Usage: remote [options]\n")


def test_required_option_is_marked() -> None:
    text = render_help(_git().subcommands["commit"])
    assert "-m, --message <value>  Commit message [required]" in text


def test_positionals_in_usage_and_listing() -> None:
    cmd = Command("cp", "Copy files")
    cmd.add_positional_arg("src", help="Source file")
    cmd.add_positional_arg("dst", help="Destination", required=False, default="out")
    cmd.add_positional_arg("more", help="More files", type=ArgType.MULTIPLE, required=False, default=[])
    text = render_help(cmd)
    assert text.startswith("Usage: cp [options] <src> [dst] [more]...\n")
    assert "Arguments:\n  src   Source file\n" in text
    assert "  dst   Destination (default: out) [optional]\n" in text
    assert "  more  More files (default: []) [optional]\n" in text


def test_non_false_defaults_are_shown() -> None:
    cmd = Command("push")
    cmd.add_keyword_arg("force", "-f", "--force", help="Force the push", default=True)
    cmd.add_keyword_arg("jobs", "-j", "--jobs", help="Parallel jobs", type=ArgType.SINGLE, default=4)
    cmd.add_keyword_arg("tags", "-t", "--tags", help="Tags", type=ArgType.MULTIPLE)
    text = render_help(cmd)
    assert "Force the push (default: true)" in text
    assert "--no-force" in text
    assert "Disable --force\n" in text
    assert "-j, --jobs <value>" in text
    assert "Parallel jobs (default: 4)" in text
    assert "-t, --tags <value>...  Tags\n" in text


def test_command_without_help_text() -> None:
    assert render_help(Command("bare")) == (
        "Usage: bare [options]\n\nOptions:\n  -h, --help  Show this help message and exit\n"
    )


def test_render_error_prefixes_message() -> None:
    text = render_error("Unknown option: --x", Command("bare"))
    assert text.startswith("Error: Unknown option: --x\n\nUsage: bare [options]\n")
