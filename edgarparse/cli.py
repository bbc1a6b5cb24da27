#!/usr/bin/env python3
"""
edgarparse CLI

Usage:
    edgarparse index --year 2023 --quarter 3          # Download and list 10-K/10-Q filings
    edgarparse index --file form.idx --form 10-K      # List filings from a local index
    edgarparse facts instance.xml --cik 320193 [--instant 2023-09-30]
    edgarparse config show|validate                   # Show or validate configuration
"""

import argparse
import sys
import tempfile
from dataclasses import asdict, dataclass
from typing import Optional

from dotenv import load_dotenv
from tabulate import tabulate

load_dotenv()

from .core.exceptions import ConfigurationError, EdgarError
from .ingestion.sec_api import SECClient
from .parsers.index_parser import IndexEntry, iter_index
from .parsers.xbrl_document import XBRLDocument
from .parsers.xbrl_unpacker import xbrl_field
from .utils.config import get_config
from .utils.logger import get_logger, setup_logging

logger = get_logger("edgarparse.cli")


@dataclass
class HeadlineFacts:
    """Cover-page and balance-sheet values printed by the facts command."""
    registrant: str = xbrl_field("dei:EntityRegistrantName", default="")
    fiscal_year: str = xbrl_field("dei:DocumentFiscalYearFocus", default="")
    assets: int = xbrl_field("us-gaap:Assets")
    liabilities: int = xbrl_field("us-gaap:Liabilities")
    equity: int = xbrl_field("us-gaap:StockholdersEquity")
    cash: int = xbrl_field("us-gaap:CashAndCashEquivalentsAtCarryingValue")


INDEX_HEADERS = ["Form", "CIK", "Filed", "Accession", "Company"]


def _entry_row(entry: IndexEntry) -> list:
    return [
        entry.form_type,
        entry.cik_padded,
        entry.date_filed.isoformat(),
        entry.accession_number,
        entry.company_name.rstrip(),
    ]


class EdgarCLI:
    """Command implementations."""

    def __init__(self):
        self.config = get_config()

    def _print_index(self, stream, form_types: list[str], limit: Optional[int]) -> int:
        rows = []
        for entry in iter_index(stream, form_types):
            rows.append(_entry_row(entry))
            if limit is not None and len(rows) >= limit:
                break

        print(tabulate(rows, headers=INDEX_HEADERS, tablefmt="simple", disable_numparse=True))
        print(f"\n{len(rows)} filings")
        return len(rows)

    def cmd_index(self, args):
        """List filings of the retained form types from a full-text index."""
        form_types = args.form or self.config.settings.index.form_types

        if args.file:
            with open(args.file, "rb") as f:
                self._print_index(f, form_types, args.limit)
            return

        with SECClient() as client, tempfile.TemporaryFile() as f:
            client.download_index(f, year=args.year, quarter=args.quarter, current=args.current)
            self._print_index(f, form_types, args.limit)

    def cmd_facts(self, args):
        """Print headline facts of an XBRL instance for one filer."""
        with open(args.instance, "rb") as f:
            document = XBRLDocument.parse(f)

        facts = HeadlineFacts()
        document.unpack(facts, args.cik, instant=args.instant)

        print(tabulate(list(asdict(facts).items()), headers=["Field", "Value"], tablefmt="simple", disable_numparse=True))

    def cmd_config(self, args):
        """Configuration operations."""
        if args.action == "show":
            print(f"Environment: {self.config.environment.value}")
            print(f"Config directory: {self.config.config_dir}")
            print("\nSEC API Config:")
            for key, value in self.config.get_sec_api_config().items():
                print(f"  {key}: {value}")
            print(f"\nRetained form types: {', '.join(self.config.settings.index.form_types)}")

        elif args.action == "validate":
            errors = self.config.validate()
            if errors:
                print("Configuration errors:")
                for error in errors:
                    print(f"  - {error}")
                raise ConfigurationError(
                    f"{len(errors)} configuration error(s)",
                    {"config_dir": str(self.config.config_dir)},
                )
            print("Configuration is valid")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="edgarparse",
        description="Retrieve and decode SEC EDGAR index and XBRL data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--log-level", type=str, default=None, help="Override log level")
    subparsers = parser.add_subparsers(dest="command")

    index_parser = subparsers.add_parser("index", help="List filings from a full-text index")
    source = index_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", type=str, help="Local form.idx file")
    source.add_argument("--year", type=int, help="Index year to download")
    source.add_argument("--current", action="store_true", help="Download the current quarter's index")
    index_parser.add_argument("--quarter", type=int, choices=[1, 2, 3, 4], help="Index quarter to download")
    index_parser.add_argument("--form", action="append", help="Form type to keep (repeatable)")
    index_parser.add_argument("--limit", type=int, default=None, help="Stop after this many filings")

    facts_parser = subparsers.add_parser("facts", help="Print headline facts from an XBRL instance")
    facts_parser.add_argument("instance", type=str, help="XBRL instance file")
    facts_parser.add_argument("--cik", type=int, required=True, help="Filer CIK")
    facts_parser.add_argument("--instant", type=str, default=None, help="Balance-sheet date (YYYY-MM-DD)")

    config_parser = subparsers.add_parser("config", help="Configuration operations")
    config_parser.add_argument("action", choices=["show", "validate"])

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "index" and args.year is not None and args.quarter is None:
        parser.error("--quarter is required with --year")

    setup_logging(log_level=args.log_level)

    cli = EdgarCLI()

    try:
        if args.command == "index":
            cli.cmd_index(args)
        elif args.command == "facts":
            cli.cmd_facts(args)
        elif args.command == "config":
            cli.cmd_config(args)

        return 0

    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        return 130
    except EdgarError as e:
        logger.error(f"Command failed: {e}", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
