from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from .catalog import CatalogError, PackageCatalog
from .logging import configure_logging
from .models import RunConfig
from .pipeline import BootstrapError, BuildOrchestrator
from .runner import TaskRunner

logger = logging.getLogger(__name__)


def _load_catalog(args: argparse.Namespace) -> PackageCatalog:
    if args.catalog:
        return PackageCatalog.from_file(args.catalog)
    return PackageCatalog.default()


def _config_from_args(args: argparse.Namespace) -> RunConfig:
    return RunConfig(
        ldflags=args.ldflags,
        goroot=Path(args.goroot),
        go_binary=args.go,
    )


def cmd_build(args: argparse.Namespace) -> None:
    config = _config_from_args(args)
    orchestrator = BuildOrchestrator(_load_catalog(args), TaskRunner(config), config)
    orchestrator.run()


def cmd_list(args: argparse.Namespace) -> None:
    catalog = _load_catalog(args)
    for tier in catalog.tiers:
        print(f"# {tier.name}")
        for package in tier.packages:
            print(package)
    if catalog.excluded:
        print("# Excluded")
        for entry in catalog.excluded:
            print(f"{entry.package}\t{entry.reason}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Build the Go standard library as libstd.so, then each package against it"
    )
    parser.add_argument(
        "--ldflags",
        default="",
        help="The flags to pass on to the linker.",
    )
    parser.add_argument(
        "--goroot",
        default=os.environ.get("GOROOT", ""),
        help="Root of the Go tree to build from (defaults to $GOROOT).",
    )
    parser.add_argument("--go", default="go", help="Go toolchain binary.")
    parser.add_argument(
        "--catalog",
        default=None,
        help="JSON or YAML file replacing the built-in package order.",
    )
    parser.add_argument("--log-level", default="INFO")
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_cmd = subparsers.add_parser("build", help="Build libstd.so and every cataloged package")
    build_cmd.set_defaults(func=cmd_build)

    list_parser = subparsers.add_parser("list", help="Print the package order")
    list_parser.set_defaults(func=cmd_list)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    try:
        args.func(args)
    except (BootstrapError, CatalogError) as exc:
        logger.critical("%s", exc)
        sys.exit(1)


if __name__ == "__main__":  # pragma: no cover
    main()
