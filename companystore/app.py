import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import __version__
from .company import CompanyRepository
from .database import Database, init_database
from .env import get_database_url, load_env
from .errors import CompanyStoreError
from .logger import get_logger
from .schema import validate_company_update, validate_filters, validate_new_company


def _load_json(path_str: str) -> Dict[str, Any]:
    input_path = Path(path_str)
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    with input_path.open("r", encoding="utf-8") as f:
        return json.load(f)


def _exit_on_errors(errors: List[str]) -> None:
    if errors:
        print("Invalid:")
        for e in errors:
            print(f" - {e}")
        raise SystemExit(2)


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def _repo(args: argparse.Namespace) -> CompanyRepository:
    # main() disposes the handle once the command finishes
    args.db = Database.from_url(args.database_url)
    return CompanyRepository(args.db)


def cmd_init_db(args: argparse.Namespace) -> None:
    engine = init_database(args.database_url)
    engine.dispose()
    print("Database initialized.")


def cmd_create(args: argparse.Namespace) -> None:
    data = _load_json(args.input)
    _exit_on_errors(validate_new_company(data))
    _print_json(_repo(args).create(data))


def cmd_list(args: argparse.Namespace) -> None:
    filters = {
        "name": args.name,
        "minEmployees": args.min_employees,
        "maxEmployees": args.max_employees,
    }
    filters = {k: v for k, v in filters.items() if v is not None}
    _exit_on_errors(validate_filters(filters))
    _print_json(_repo(args).find_all(filters))


def cmd_get(args: argparse.Namespace) -> None:
    _print_json(_repo(args).get(args.handle))


def cmd_update(args: argparse.Namespace) -> None:
    data = _load_json(args.input)
    _exit_on_errors(validate_company_update(data))
    _print_json(_repo(args).update(args.handle, data))


def cmd_remove(args: argparse.Namespace) -> None:
    _repo(args).remove(args.handle)
    _print_json({"deleted": args.handle})


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="companystore", description="Company data access CLI")
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("--database-url", default=get_database_url(), help="SQLAlchemy database URL (default: $DATABASE_URL)")

    subparsers = parser.add_subparsers(dest="command")

    ini = subparsers.add_parser("init-db", help="Create the companies and jobs tables")
    ini.set_defaults(func=cmd_init_db)

    crt = subparsers.add_parser("create", help="Create a company from a JSON file")
    crt.add_argument("--input", required=True, help="Path to company JSON input")
    crt.set_defaults(func=cmd_create)

    lst = subparsers.add_parser("list", help="List companies, optionally filtered")
    lst.add_argument("--name", help="Case-insensitive substring of the company name")
    lst.add_argument("--min-employees", type=int, help="Inclusive lower bound on employee count")
    lst.add_argument("--max-employees", type=int, help="Inclusive upper bound on employee count")
    lst.set_defaults(func=cmd_list)

    get = subparsers.add_parser("get", help="Show a company and its positions")
    get.add_argument("handle", help="Company handle")
    get.set_defaults(func=cmd_get)

    upd = subparsers.add_parser("update", help="Partially update a company from a JSON file")
    upd.add_argument("handle", help="Company handle")
    upd.add_argument("--input", required=True, help="Path to JSON with the fields to change")
    upd.set_defaults(func=cmd_update)

    rem = subparsers.add_parser("remove", help="Delete a company")
    rem.add_argument("handle", help="Company handle")
    rem.set_defaults(func=cmd_remove)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    # Load .env if present (DATABASE_URL, COMPANYSTORE_LOG_LEVEL, etc.)
    load_env()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        try:
            args.func(args)
        except CompanyStoreError as e:
            raise SystemExit(f"Error ({e.status}): {e.message}")
        finally:
            if getattr(args, "db", None) is not None:
                args.db.dispose()
            get_logger().log_metrics_summary(level=logging.DEBUG)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
