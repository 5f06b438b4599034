#!/usr/bin/env python3
# Copyright 2026 PParser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run the CI checks locally: format, lint, type check, tests and build.

Options are parsed with pparser itself, e.g. ``tools/ci.py --skip build -x``.
"""

import pathlib
import subprocess
import sys
import time

from yachalk import chalk

from pparser.parser import ArgType, ArgumentParser, ParseResult

# ###############
# Public Interface
# ###############

STEPS: list[tuple[str, str, list[str]]] = [
    ("format", "Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/", "tools/"]),
    ("lint", "Lint", ["uv", "run", "ruff", "check", "src/", "tests/", "tools/"]),
    ("types", "Type check", ["uv", "run", "ty", "check", "src/"]),
    ("tests", "Tests", ["uv", "run", "pytest", "--cov=pparser", "--cov-report=term-missing"]),
    ("build", "Build", ["uv", "build"]),
]


def main(argv: list[str] | None = None) -> int:
    """Parse the CI options, run the selected steps and report results."""
    parser = ArgumentParser("ci", "Run the local CI steps")
    root = parser.root_command
    root.add_keyword_arg(
        "skip",
        long_name="--skip",
        help=f"Steps to skip ({', '.join(key for key, _, _ in STEPS)})",
        type=ArgType.MULTIPLE,
        default=[],
    )
    root.add_keyword_arg("fail_fast", "-x", "--fail-fast", help="Stop after the first failing step")
    root.set_handler(_run_steps)
    return parser.run(sys.argv[1:] if argv is None else argv)


# ################
# Implementation
# ################


def _run_steps(options: ParseResult) -> int:
    skipped = set(options.get_string_list("skip") or [])
    unknown = skipped - {key for key, _, _ in STEPS}
    if unknown:
        print(chalk.red(f"Unknown step(s): {', '.join(sorted(unknown))}"), file=sys.stderr)
        return 2

    results: list[tuple[str, bool, float]] = []
    for key, name, cmd in STEPS:
        if key in skipped:
            continue
        sep = chalk.blue("=" * 60)
        print(f"\n{sep}")
        print(chalk.blue(name))
        print(sep)
        start = time.monotonic()
        proc = subprocess.run(cmd, cwd=_repo_root())
        results.append((name, proc.returncode == 0, time.monotonic() - start))
        if proc.returncode != 0 and options.get_bool("fail_fast"):
            break

    _print_summary(results)
    return 0 if all(passed for _, passed, _ in results) else 1


def _print_summary(results: list[tuple[str, bool, float]]) -> None:
    sep = "=" * 60
    print(f"\n{chalk.blue(sep)}")
    print(chalk.blue("  Summary"))
    print(chalk.blue(sep))
    for name, passed, elapsed in results:
        color = chalk.green if passed else chalk.red
        status = color("PASS" if passed else "FAIL")
        print(color(f"  {status}  {name} ({elapsed:.1f}s)"))
    print()


def _repo_root() -> str:
    return str(pathlib.Path(__file__).parent.parent)


if __name__ == "__main__":
    sys.exit(main())
