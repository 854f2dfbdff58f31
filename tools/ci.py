#!/usr/bin/env python3
# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run all CI checks locally: format, lint, type check, tests, generator smoke runs and build."""

import subprocess
import sys
import tempfile
import time
from pathlib import Path

from yachalk import chalk

DEMO_SPEC = "docs/examples/demo.yaml"

# ###############
# Public Interface
# ###############

STEPS: list[tuple[str, list[str]]] = [
    ("Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/"]),
    ("Lint", ["uv", "run", "ruff", "check", "src/", "tests/"]),
    ("Type check", ["uv", "run", "ty", "check", "src/"]),
    ("Tests", ["uv", "run", "pytest", "--cov=malstubgen", "--cov-report=term-missing"]),
    ("Check demo specification", ["uv", "run", "malstubgen", "check", DEMO_SPEC]),
    ("Build", ["uv", "build"]),
]

SMOKE_LANGUAGES = ("c", "go")


def main() -> int:
    """Run all CI steps and report results."""
    results: list[tuple[str, bool, float]] = []
    root = _repo_root()

    for name, cmd in STEPS:
        results.append(_run_step(name, cmd, root))

    with tempfile.TemporaryDirectory(prefix="malstubgen-ci-") as scratch:
        for language in SMOKE_LANGUAGES:
            destination = Path(scratch) / language
            cmd = ["uv", "run", "malstubgen", "generate", DEMO_SPEC, "--lang", language, "--dest", str(destination)]
            results.append(_run_step(f"Generate demo ({language})", cmd, root))

    sep = "=" * 60
    print(f"\n{chalk.blue(sep)}")
    print(chalk.blue("  Summary"))
    print(chalk.blue(sep))
    for name, passed, elapsed in results:
        status = chalk.green("PASS") if passed else chalk.red("FAIL")
        colour = chalk.green if passed else chalk.red
        print(colour(f"  {status}  {name} ({elapsed:.1f}s)"))

    print()
    return 0 if all(passed for _, passed, _ in results) else 1


# ################
# Implementation
# ################


def _run_step(name: str, cmd: list[str], root: str) -> tuple[str, bool, float]:
    sep = chalk.blue("=" * 60)
    print(f"\n{sep}")
    print(chalk.blue(name))
    print(sep)
    start = time.monotonic()
    proc = subprocess.run(cmd, cwd=root)
    return name, proc.returncode == 0, time.monotonic() - start


def _repo_root() -> str:
    return str(Path(__file__).parent.parent)


if __name__ == "__main__":
    sys.exit(main())
