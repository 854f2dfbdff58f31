# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the malstubgen command-line interface."""

import argparse
import sys
from pathlib import Path

from malstubgen.config import CONFIG_FILE_NAME, GeneratorConfigError, GeneratorOptions, load_generator_config, override_options
from malstubgen.driver import generate
from malstubgen.errors import GeneratorError
from malstubgen.loader import load_specifications
from malstubgen.logging_config import configure_logging
from malstubgen.validation import check_references

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the malstubgen CLI."""
    parser = argparse.ArgumentParser(
        prog="malstubgen",
        description="malstubgen - stub generator for CCSDS MO MAL service specifications",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # generate subcommand
    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate the stubs of MAL areas",
        description="Generate C or Go stubs for every area of the given specification files.",
    )
    _add_specification_arguments(generate_parser)
    generate_parser.add_argument(
        "--lang",
        required=True,
        choices=["c", "go"],
        help="Target language of the generated stubs",
    )
    generate_parser.add_argument(
        "--dest",
        required=True,
        help="Root directory receiving the generated sources",
    )
    generate_parser.add_argument(
        "--config",
        default=None,
        help=f"Generator configuration file (default: {CONFIG_FILE_NAME} in the current directory, if present)",
    )
    generate_parser.add_argument(
        "--generate-com",
        action="store_true",
        default=None,
        help="Also generate the COM area when present",
    )
    generate_parser.add_argument(
        "--transport",
        action="append",
        choices=["malbinary", "malsplitbinary"],
        default=None,
        help="Encoding to generate, may be repeated (default: all encodings)",
    )
    generate_parser.add_argument(
        "--project-name",
        default=None,
        help="Aggregate name of the generated areas",
    )
    generate_parser.add_argument(
        "--go-base-package",
        default=None,
        help="Go import path prefix of the generated areas",
    )

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Check that every type reference resolves",
        description="Load specification files and report the type references that cannot be resolved.",
    )
    _add_specification_arguments(check_parser)

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    configure_logging(args.verbose)
    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _add_specification_arguments(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "specifications",
        nargs="+",
        metavar="SPEC",
        help="Specification files (YAML or JSON), processed in order",
    )
    subparser.add_argument(
        "--reference",
        action="append",
        default=[],
        metavar="FILE",
        help="Specification file known for type resolution only, may be repeated",
    )
    subparser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase logging output (-v progress, -vv debug)",
    )


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    try:
        if args.command == "generate":
            return _cmd_generate(args)
        if args.command == "check":
            return _cmd_check(args)
    except GeneratorError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except GeneratorConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


def _cmd_generate(args: argparse.Namespace) -> int:
    """Handle the generate subcommand."""
    destination = Path(args.dest).resolve()
    options = _load_options(args.config, destination)
    transports = args.transport or []
    options = override_options(
        options,
        generate_com=args.generate_com,
        transport_malbinary=True if "malbinary" in transports else None,
        transport_malsplitbinary=True if "malsplitbinary" in transports else None,
        project_name=args.project_name,
        go_base_package=args.go_base_package,
    )

    specification = load_specifications([Path(path) for path in args.specifications])
    references = load_specifications([Path(path) for path in args.reference]).areas
    report = generate(specification, options, args.lang, references)
    print(f"Generated {len(report.files)} file(s) for {report.area_count} area(s) in {destination}")
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the check subcommand."""
    specification = load_specifications([Path(path) for path in args.specifications])
    references = load_specifications([Path(path) for path in args.reference]).areas

    print(f"Checking {len(specification.areas)} area(s)...")
    result = check_references(specification, references)
    for warning in result.warnings:
        print(f"Warning: {warning.message}")

    if result.has_warnings:
        print(f"Found {len(result.warnings)} unresolved type reference(s).")
        return 0

    print("No issues found.")
    return 0


def _load_options(config: str | None, destination: Path) -> GeneratorOptions:
    """Read the configuration file named on the command line, else the default one if present."""
    if config is not None:
        return load_generator_config(Path(config), destination)
    default = Path.cwd() / CONFIG_FILE_NAME
    if default.exists():
        return load_generator_config(default, destination)
    return GeneratorOptions(destination=destination)
