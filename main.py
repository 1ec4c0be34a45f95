"""CLI entrypoint: inspect a Notion database or insert JSON records into it."""

from __future__ import annotations

import argparse
import logging
import os
import sys

from dotenv import load_dotenv

from database_id import EXAMPLE_ID, normalize_database_id
from errors import InputFileError, NotFoundError, SchemaFetchError, ValidationError
from inspect_view import render_schema
from models import InsertSummary
from notion_api import ACCESS_HELP_TEXT, fetch_database_schema
from records import load_records
from uploader import insert_records

INSERT_EPILOG = f"""Example: notion-uploader insert --db "{EXAMPLE_ID}" --data "data.json"

The database ID is found in the URL when viewing your database in Notion:
  https://www.notion.so/1d4a5e7fe23180b98df2ddce1ea05ddf?v=...
  -> 1d4a5e7fe23180b98df2ddce1ea05ddf
It can be given with or without dashes, or as the full URL.

You must share your database with your integration ("..." menu -> "Add connections")."""

TROUBLESHOOTING_TIPS = """TIP: If your data isn't visible in Notion:
1. Verify property names match exactly with database columns (case sensitive)
2. Run 'notion-uploader inspect --db "your-db-id"' to see the database structure
3. Try running with --debug flag to see more details about the process"""


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line flags."""
    parser = argparse.ArgumentParser(
        prog="notion-uploader",
        description="Upload data from JSON files to Notion databases.",
    )
    subparsers = parser.add_subparsers(dest="command")

    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Show the columns of a Notion database and a sample record",
        description="Inspect a Notion database to check how JSON data will map onto its columns.",
    )
    _add_common_flags(inspect_parser)

    insert_parser = subparsers.add_parser(
        "insert",
        help="Insert records from a JSON file into a Notion database",
        description="Insert data from a JSON file into a Notion database.",
        epilog=INSERT_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    _add_common_flags(insert_parser)
    insert_parser.add_argument("--data", default="", help="Path to the JSON file")
    insert_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging (raw input, dropped fields, request bodies)",
    )
    insert_parser.add_argument(
        "--fail-on-error",
        action="store_true",
        help="Exit with status 1 when any record fails to insert",
    )
    return parser.parse_args(argv)


def _add_common_flags(parser: argparse.ArgumentParser) -> None:
    # Required flags are checked in main() so that a missing flag exits with status 1.
    parser.add_argument("--db", default="", help="ID or URL of the Notion database")
    parser.add_argument(
        "--api-key",
        default="",
        help="Notion API key (optional, overrides NOTION_API_KEY env var)",
    )
    parser.add_argument(
        "--extended-types",
        action="store_true",
        help="Also write select, multi-select, date, checkbox, URL, email and phone columns",
    )


def resolve_api_key(flag_value: str | None) -> str:
    """Return the API key from the flag, falling back to NOTION_API_KEY."""
    api_key = flag_value or os.getenv("NOTION_API_KEY", "")
    if not api_key:
        raise ValidationError(
            "Notion API key not provided. Set via --api-key flag or NOTION_API_KEY environment variable."
        )
    return api_key


def run_inspect(database_id: str, api_key: str, extended_types: bool = False) -> None:
    print(f"Inspecting database {database_id}...")
    schema = fetch_database_schema(database_id, api_key)
    print()
    print(render_schema(schema, extended_types=extended_types))


def run_insert(
    database_id: str,
    data_path: str,
    api_key: str,
    extended_types: bool = False,
) -> InsertSummary:
    """Load, coerce and submit every record of ``data_path``."""
    # The input is parsed before any network call.
    records = load_records(data_path)
    logging.info("Found %s record(s) to insert into database %s.", len(records), database_id)

    schema = fetch_database_schema(database_id, api_key)
    summary = insert_records(records, schema, api_key=api_key, extended_types=extended_types)

    print(f"\nFinished inserting. {summary.succeeded}/{summary.total} records inserted successfully.")
    if summary.succeeded > 0:
        print()
        print(TROUBLESHOOTING_TIPS)
    else:
        print("No records were successfully inserted. Check the errors above.")
    return summary


def main(argv: list[str] | None = None) -> int:
    """Initialize config and execute the selected command; return the exit status."""
    load_dotenv()
    args = parse_args(argv)
    debug = getattr(args, "debug", False)
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )

    if args.command is None:
        print("Error: a command is required (inspect or insert). Use --help for usage.")
        return 1

    try:
        if args.command == "insert" and not (args.db and args.data):
            raise ValidationError("Both --db (Database ID) and --data (JSON file path) flags are required.")
        if not args.db:
            raise ValidationError("Database ID (--db) is required.")

        database_id = normalize_database_id(args.db)
        api_key = resolve_api_key(args.api_key)

        if args.command == "inspect":
            run_inspect(database_id, api_key, extended_types=args.extended_types)
            return 0

        summary = run_insert(database_id, args.data, api_key, extended_types=args.extended_types)
    except (ValidationError, InputFileError) as exc:
        print(f"Error: {exc}")
        return 1
    except SchemaFetchError as exc:
        print(f"Error accessing database: {exc}")
        if isinstance(exc, NotFoundError):
            print()
            print(ACCESS_HELP_TEXT)
        return 1

    if args.fail_on_error and summary.failed:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
