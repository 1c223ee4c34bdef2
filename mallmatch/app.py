import argparse
import json
from pathlib import Path

from .env import load_env, get_threshold, get_db_path, get_log_level

from . import __version__
from .database import init_database, get_session
from .logger import get_logger
from .schema import validate_threshold
from .sources import load_brands, load_malls
from .storage import list_malls, get_mall
from pipelines.backfill.full_rebuild import rebuild_mall_records


def _resolve_threshold(args: argparse.Namespace) -> int:
    try:
        if args.threshold is not None:
            return validate_threshold(args.threshold)
        return get_threshold()
    except ValueError as e:
        raise SystemExit(str(e))


def cmd_match(args: argparse.Namespace) -> None:
    threshold = _resolve_threshold(args)
    try:
        brands, report = load_brands(Path(args.brands))
        malls = load_malls(args.malls)
    except ValueError as e:
        raise SystemExit(str(e))

    print(f"Brands mapped: {report['mapped']} (rows={report['rows']}, dropped={report['dropped']})")
    print(f"Malls loaded: {len(malls)}")

    session = None
    if not args.dry_run:
        db_path = Path(args.db)
        init_database(db_path)
        session = get_session(db_path)
    try:
        summary = rebuild_mall_records(
            malls, brands, session=session, threshold=threshold, dry_run=args.dry_run
        )
    finally:
        if session is not None:
            session.close()

    if args.dry_run:
        for mall_key, results in summary["matches"].items():
            print(f"[match] {mall_key}")
            for r in results:
                print(f"  {r.brand_name} ({r.product_id}) <- {r.matched_store_name} [{r.score}]")

    get_logger().log_metrics_summary()
    print(
        f"Done. saved={summary['saved']} skipped={summary['skipped']} "
        f"total={summary['total']} threshold={summary['threshold']}"
    )


def cmd_validate(args: argparse.Namespace) -> None:
    try:
        _, report = load_brands(Path(args.brands))
    except ValueError as e:
        print(f"Invalid: {e}")
        raise SystemExit(2)
    print(f"CSV rows: {report['rows']}")
    print(f"CSV headers: {', '.join(report['headers'])}")
    print(f"Mapped brands: {report['mapped']} (dropped {report['dropped']})")
    print("Sample:")
    for row in report["sample"]:
        print(f" - {row['brand_name']} [{row['product_id']}] variations={row['variations'] or '-'}")


def cmd_list(args: argparse.Namespace) -> None:
    db_path = Path(args.db)
    if not db_path.exists():
        print(f"Database not found: {db_path}")
        return
    session = get_session(db_path)
    try:
        items = list_malls(session)
    finally:
        session.close()
    if not items:
        print("No malls in database.")
        return
    print(f"Found {len(items)} malls in {db_path}:\n")
    for item in items:
        print(f"Key: {item['mallKey']}")
        print(f"  Mall: {item['mallName']}")
        print(f"  City: {item['city']}, {item['state']}")
        print(f"  Products: {item['productsCount']}")
        print()


def cmd_show(args: argparse.Namespace) -> None:
    db_path = Path(args.db)
    if not db_path.exists():
        raise SystemExit(f"Database not found: {db_path}")
    session = get_session(db_path)
    try:
        record = get_mall(session, args.mall_key)
        if record is None:
            raise SystemExit(f"Mall not found: {args.mall_key}")
        print(json.dumps(record.to_dict(), indent=2, ensure_ascii=False))
    finally:
        session.close()


def cmd_serve(args: argparse.Namespace) -> None:
    import uvicorn

    uvicorn.run("mallmatch.api:app", host=args.host, port=args.port)


def main():
    # Load .env if present (MATCH_THRESHOLD, MALLMATCH_DB, LOG_LEVEL)
    load_env()
    get_logger().set_level(get_log_level())
    default_db = str(get_db_path())

    parser = argparse.ArgumentParser(prog="mallmatch", description="Match mall directories against a brand catalog")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")
    mt = subparsers.add_parser("match", help="Match every mall against the brand catalog and store the results")
    mt.add_argument("--malls", required=True, help="Malls JSON file or http(s) URL")
    mt.add_argument("--brands", required=True, help="Brand catalog CSV")
    mt.add_argument("--db", default=default_db, help=f"SQLite database (default: {default_db})")
    mt.add_argument("--threshold", type=int, help="Minimum match score 0-100 (default: MATCH_THRESHOLD or 70)")
    mt.add_argument("--dry-run", action="store_true", help="Print matches without writing to the database")
    mt.set_defaults(func=cmd_match)

    val = subparsers.add_parser("validate", help="Check that a brand catalog CSV maps to usable brands")
    val.add_argument("--brands", required=True, help="Brand catalog CSV")
    val.set_defaults(func=cmd_validate)

    lst = subparsers.add_parser("list", help="List all stored malls")
    lst.add_argument("--db", default=default_db, help=f"SQLite database (default: {default_db})")
    lst.set_defaults(func=cmd_list)

    shw = subparsers.add_parser("show", help="Show one stored mall record as JSON")
    shw.add_argument("--mall-key", required=True, help="Mall key: name|city|state")
    shw.add_argument("--db", default=default_db, help=f"SQLite database (default: {default_db})")
    shw.set_defaults(func=cmd_show)

    srv = subparsers.add_parser("serve", help="Serve stored mall records over HTTP")
    srv.add_argument("--host", default="127.0.0.1", help="Bind host (default: 127.0.0.1)")
    srv.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    srv.set_defaults(func=cmd_serve)

    args = parser.parse_args()

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        args.func(args)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
