#!/usr/bin/env python3
"""
Command line entry point for the schema contracts engine.

Usage:
    python -m schemacontracts.run_contracts ownership SUPERGRAPH [--csv PATH]
    python -m schemacontracts.run_contracts reachable SCHEMA [--explain TYPE]
    python -m schemacontracts.run_contracts compile SCHEMA [--include TAG ...]
        [--exclude TAG ...] [--keep-unreachable] [--ownership] [--output PATH]
        [--validate]
    python -m schemacontracts.run_contracts tags SCHEMA
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from graphql import GraphQLError

from schemacontracts.config import ContractsConfig
from schemacontracts.contracts.compiler import compile_contract
from schemacontracts.contracts.rules import ContractRule
from schemacontracts.core.document import SchemaDocument
from schemacontracts.core.errors import SchemaContractsError
from schemacontracts.evaluation.contract_audits import run_contract_audits
from schemacontracts.federation.ownership import (
    extract_ownership,
    ownership_to_dataframe,
    subgraphs_of,
)
from schemacontracts.federation.tags import list_tags
from schemacontracts.graph.reachability import (
    get_reachable_types,
    get_unreachable_types,
    reference_paths,
)

logger = logging.getLogger(__name__)


def _load_document(path: str) -> SchemaDocument:
    return SchemaDocument.from_sdl(Path(path).read_text(encoding="utf-8"))


# =============================================================================
# COMMANDS
# =============================================================================

def cmd_ownership(args: argparse.Namespace) -> int:
    ownership = extract_ownership(_load_document(args.schema))
    ownership_df = ownership_to_dataframe(ownership)

    print(f"Coordinates: {len(ownership)}")
    print(f"Subgraphs: {', '.join(subgraphs_of(ownership))}")
    if args.csv:
        ownership_df.to_csv(args.csv, index=False)
        print(f"Ownership table saved to {args.csv}")
    else:
        for coordinate in sorted(ownership):
            print(f"  {coordinate}: {', '.join(sorted(ownership[coordinate]))}")
    return 0


def cmd_reachable(args: argparse.Namespace) -> int:
    document = _load_document(args.schema)
    reachable = get_reachable_types(document)
    unreachable = get_unreachable_types(document)

    print(f"Reachable types: {len(reachable)}")
    for type_name in sorted(reachable):
        print(f"  {type_name}")
    if unreachable:
        print(f"Unreachable types: {len(unreachable)}")
        for type_name in unreachable:
            print(f"  {type_name}")

    if args.explain:
        paths = reference_paths(document, args.explain)
        if not paths:
            print(f"{args.explain} is not reachable from any root")
        for root, path in sorted(paths.items()):
            print(f"{root}: {' -> '.join(path)}")
    return 0


def cmd_compile(args: argparse.Namespace) -> int:
    document = _load_document(args.schema)
    config = ContractsConfig.from_env()
    rule = ContractRule.from_tags(
        include=args.include,
        exclude=args.exclude,
        remove_unreachable_types=not args.keep_unreachable,
    )
    ownership = extract_ownership(document) if args.ownership else None
    result = compile_contract(
        document,
        rule,
        config=config,
        ownership=ownership,
        contract_name=args.name,
    )
    if not result.ok:
        for error in result.validation.errors:
            print(f"{error.code.value} ({error.field}): {error.message}", file=sys.stderr)
        return 2

    compilation = result.compilation
    if args.output:
        Path(args.output).write_text(compilation.sdl, encoding="utf-8")
        print(f"Contract schema saved to {args.output}")
    else:
        print(compilation.sdl)

    print("\n--- Contract Summary ---", file=sys.stderr)
    for key, value in compilation.to_dict().items():
        print(f"  {key}: {value}", file=sys.stderr)

    if args.validate:
        audits = run_contract_audits(compilation, document, config)
        failed = [audit for audit in audits if not audit.passed]
        for audit in audits:
            status = "PASS" if audit.passed else "FAIL"
            print(f"  [{status}] {audit.gate_id}: {audit.details}", file=sys.stderr)
        if failed:
            return 1
    return 0


def cmd_tags(args: argparse.Namespace) -> int:
    for tag in list_tags(_load_document(args.schema)):
        print(tag)
    return 0


# =============================================================================
# CLI
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Derive contract schemas and inspect GraphQL supergraphs"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    ownership = subparsers.add_parser("ownership", help="Subgraph ownership per coordinate")
    ownership.add_argument("schema", help="Path to a supergraph SDL file")
    ownership.add_argument("--csv", help="Write the ownership table to this CSV path")
    ownership.set_defaults(func=cmd_ownership)

    reachable = subparsers.add_parser("reachable", help="Types reachable from the roots")
    reachable.add_argument("schema", help="Path to an SDL file")
    reachable.add_argument("--explain", metavar="TYPE", help="Show reference paths to TYPE")
    reachable.set_defaults(func=cmd_reachable)

    compile_parser = subparsers.add_parser("compile", help="Compile a contract schema")
    compile_parser.add_argument("schema", help="Path to an SDL file")
    compile_parser.add_argument("--include", nargs="*", metavar="TAG", help="Include tags")
    compile_parser.add_argument("--exclude", nargs="*", metavar="TAG", help="Exclude tags")
    compile_parser.add_argument("--name", help="Contract name shown in the summary")
    compile_parser.add_argument(
        "--keep-unreachable",
        action="store_true",
        help="Do not hide types left unreachable by the tag rule",
    )
    compile_parser.add_argument(
        "--ownership",
        action="store_true",
        help="Read join-spec ownership and report hidden coordinates per subgraph",
    )
    compile_parser.add_argument("--output", help="Write the contract SDL to this path")
    compile_parser.add_argument(
        "--validate",
        action="store_true",
        help="Run post-compilation audits",
    )
    compile_parser.set_defaults(func=cmd_compile)

    tags = subparsers.add_parser("tags", help="List tag names used in a schema")
    tags.add_argument("schema", help="Path to an SDL file")
    tags.set_defaults(func=cmd_tags)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return args.func(args)
    except (SchemaContractsError, GraphQLError) as exc:
        logger.error(str(exc))
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
