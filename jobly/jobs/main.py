"""
Jobs CLI - Main Entry Point

Command-line interface for searching and maintaining job postings.

Usage:
    python -m jobly.jobs.main [OPTIONS] COMMAND [ARGS]

Commands:
    search   [--min-salary N] [--has-equity] [--title TEXT]
    create   --set title=TEXT --set companyHandle=HANDLE [--set salary=N] [--set equity=E]
    get      JOB_ID
    update   JOB_ID --set FIELD=VALUE [--set FIELD=VALUE ...]
    remove   JOB_ID

Options:
    --config TEXT   Path to database.yml configuration file
    --verbose       Enable debug logging

Examples:
    # Post a job for company c1 (quote numeric-looking titles: title='"2024"'):
    python -m jobly.jobs.main create --set title="Data Engineer" --set companyHandle=c1 --set salary=90000

    # Jobs paying at least 20000 with equity and "engineer" in the title:
    python -m jobly.jobs.main search --min-salary 20000 --has-equity --title engineer

    # Rename a job and clear its salary (values are parsed as JSON when possible):
    python -m jobly.jobs.main update 42 --set title="Data Engineer" --set salary=null

Exit Codes:
    0: Success
    1: Bad request or not found
    2: Fatal error (database connection, config loading, etc.)
"""

import argparse
import json
import logging
import sys
from typing import Any, Optional

from dotenv import load_dotenv

from jobly.common.db_config import load_database_config
from jobly.common.errors import BadRequestError, JoblyError
from jobly.common.executor import QueryExecutor
from jobly.common.filters import parse_job_filters

from .db_operations import JobsDB

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Search and maintain job postings",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to database.yml configuration file (default: config/database.yml)",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    search = subparsers.add_parser("search", help="List jobs, optionally filtered")
    search.add_argument("--min-salary", dest="min_salary", default=None, help="Minimum salary")
    search.add_argument(
        "--has-equity",
        dest="has_equity",
        action="store_true",
        help="Only jobs with non-zero equity",
    )
    search.add_argument("--title", default=None, help="Case-insensitive title substring")

    create = subparsers.add_parser("create", help="Create a job for a company")
    create.add_argument(
        "--set",
        dest="assignments",
        action="append",
        default=[],
        metavar="FIELD=VALUE",
        help="Job field (title, companyHandle, salary, equity); repeat for several fields",
    )

    get = subparsers.add_parser("get", help="Show one job and its company")
    get.add_argument("job_id", type=int)

    update = subparsers.add_parser("update", help="Update some fields of a job")
    update.add_argument("job_id", type=int)
    update.add_argument(
        "--set",
        dest="assignments",
        action="append",
        default=[],
        metavar="FIELD=VALUE",
        help="Field to update; repeat for several fields (order is kept)",
    )

    remove = subparsers.add_parser("remove", help="Delete a job")
    remove.add_argument("job_id", type=int)

    return parser.parse_args(argv)


def parse_assignments(assignments: list[str]) -> dict[str, Any]:
    """
    Turn `FIELD=VALUE` strings into an ordered update payload.

    Values are decoded as JSON when they parse (`50000` → int, `null` → None)
    and kept as plain strings otherwise.

    Raises:
        BadRequestError: If an assignment has no `=` or an empty field name
    """
    data: dict[str, Any] = {}
    for assignment in assignments:
        field, sep, raw_value = assignment.partition("=")
        field = field.strip()
        if not sep or not field:
            raise BadRequestError(f"Expected FIELD=VALUE, got {assignment!r}")
        try:
            data[field] = json.loads(raw_value)
        except json.JSONDecodeError:
            data[field] = raw_value
    return data


def run_command(args: argparse.Namespace, jobs_db: JobsDB) -> Any:
    """
    Execute one CLI command against the jobs database.

    Returns:
        JSON-serializable result of the command

    Raises:
        JoblyError: For bad requests and missing jobs
        DatabaseError: If the database operation fails
    """
    if args.command == "search":
        params: dict[str, Any] = {}
        if args.min_salary is not None:
            params["minSalary"] = args.min_salary
        if args.has_equity:
            params["hasEquity"] = True
        if args.title is not None:
            params["title"] = args.title
        return {"jobs": jobs_db.find_all(parse_job_filters(params))}

    if args.command == "create":
        return {"job": jobs_db.create(parse_assignments(args.assignments))}

    if args.command == "get":
        return {"job": jobs_db.get(args.job_id)}

    if args.command == "update":
        data = parse_assignments(args.assignments)
        return {"job": jobs_db.update(args.job_id, data)}

    if args.command == "remove":
        jobs_db.remove(args.job_id)
        return {"deleted": args.job_id}

    raise BadRequestError(f"Unknown command: {args.command}")


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the jobs CLI.

    Returns:
        Exit code (0 = success, 1 = bad request / not found, 2 = fatal error)
    """
    load_dotenv()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    args = parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Debug logging enabled")

    try:
        config = load_database_config(args.config)

        with QueryExecutor(config) as executor:
            result = run_command(args, JobsDB(executor))

        print(json.dumps(result, indent=2, default=str))
        return 0

    except JoblyError as e:
        logger.warning(
            "Request failed",
            extra={"error": e.message, "status": e.status},
        )
        print(json.dumps({"error": {"message": e.message, "status": e.status}}))
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        print(f"\nFATAL ERROR: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
