#!/usr/bin/env python3
"""
NameCom Manager - Command Line Interface

Main entry point for the NameCom Manager CLI.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from ..core.manager import NameComManager
from ..core.state import StateStore
from ..errors import NameComError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="NameCom Manager - Declarative name.com DNS, nameserver and DNSSEC management"
    )

    parser.add_argument(
        "--config",
        "-c",
        default="configs/config.yaml",
        help="Configuration file path (default: configs/config.yaml)",
    )

    parser.add_argument(
        "--state",
        "-s",
        default="namecom.state.yaml",
        help="State file path (default: namecom.state.yaml)",
    )

    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    apply_parser = subparsers.add_parser("apply", help="Apply a resources file")
    apply_parser.add_argument(
        "--resources", "-r", required=True, help="YAML file containing desired resources"
    )
    apply_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be changed without making changes",
    )
    apply_parser.add_argument(
        "--output-file",
        "-o",
        help="File to save dry run diff output (only used with --dry-run)",
    )

    import_parser = subparsers.add_parser("import", help="Adopt an existing resource into state")
    import_parser.add_argument("address", help='Resource address, e.g. "namecom_record.www"')
    import_parser.add_argument(
        "id", help='Import id: "zone/id" for records, "zone" for nameservers, "zone/digest" for DNSSEC'
    )

    subparsers.add_parser("destroy", help="Delete every resource in the state file")

    return parser


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "apply":
        if args.output_file and not args.dry_run:
            print("Error: --output-file can only be used with --dry-run")
            sys.exit(1)

        if not Path(args.resources).exists():
            print(f"Error: Resources file '{args.resources}' not found")
            sys.exit(1)

    config = load_config(args.config)
    config_logger(config, args.verbose)

    try:
        manager = NameComManager(config)

        if args.command == "apply":
            success = manager.process(
                args.resources,
                args.state,
                dry_run=args.dry_run,
                output_file=args.output_file if args.dry_run else None,
            )
        elif args.command == "import":
            store = StateStore(args.state)
            state = store.load()
            manager.import_resource(args.address, args.id, state)
            store.save(state)
            print(f"Imported {args.address} from {args.id}")
            success = True
        else:
            store = StateStore(args.state)
            state = store.load()
            success = manager.destroy(state)
            store.save(state)

        if success:
            print("Resource management completed successfully")
            sys.exit(0)
        else:
            print("Resource management failed")
            sys.exit(1)

    except NameComError as e:
        print(f"Error: {e}")
        if args.verbose:
            import traceback

            traceback.print_exc()
        sys.exit(1)


def load_config(config_path: str) -> Dict:
    """Load configuration from YAML file."""
    try:
        with open(config_path, "r") as f:
            config = yaml.safe_load(f) or {}
        logger.info(f"Configuration loaded from {config_path}")
        return config
    except FileNotFoundError:
        logger.warning(f"Config file {config_path} not found, using defaults")
        return get_default_config()
    except yaml.YAMLError as e:
        logger.error(f"Error parsing config file: {e}")
        sys.exit(1)


def get_default_config() -> Dict:
    """Return default configuration; credentials come from the environment."""
    return {
        "dns_providers": {"namecom": {}},
        "default_provider": "namecom",
        "logging": {"level": "INFO", "file": "namecom_manager.log"},
    }


def config_logger(config: Dict, verbose: bool = False):
    """Configure logging."""
    logging_config = config.get("logging", None)
    if logging_config:
        log_level = "DEBUG" if verbose else logging_config.get("level", "INFO")
        log_file = logging_config.get("file", "namecom_manager.log")

        logging.basicConfig(
            level=log_level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            handlers=[
                logging.FileHandler(log_file),
                logging.StreamHandler(sys.stdout),
            ],
        )
        return

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


if __name__ == "__main__":
    main()
