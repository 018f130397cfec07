#!/usr/bin/env python3
"""
WorldDB - Table import/export service
=====================================

    python main.py                       serve the API
    python main.py import <folder>       import every table dump in a folder
    python main.py export <table> [-o F] write one table as envelope JSON

See config.py for all environment-variable tunables.
"""

import argparse
import json
import logging
import sys

from flask import Flask, jsonify

import config
from db import init_db, get_session
from api import api_bp


def create_app(db_url: str | None = None) -> Flask:
    """Flask application factory."""

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = config.MAX_PAYLOAD_BYTES

    # ── Initialise database ─────────────────────────────────────────
    init_db(db_url or config.DB_URL)

    # ── Register blueprints ─────────────────────────────────────────
    app.register_blueprint(api_bp)

    # ── Error handlers ──────────────────────────────────────────────
    @app.errorhandler(404)
    def _404(e):
        return jsonify({"error": "not found"}), 404

    @app.errorhandler(500)
    def _500(e):
        return jsonify({"error": "internal server error"}), 500

    return app


def _configure_logging():
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )


def _cmd_serve(_args) -> int:
    print("=" * 56)
    print("  WorldDB - Table import/export")
    print("=" * 56)

    app = create_app()
    print(f"  Database: {config.DB_URL}")
    print(f"\n  http://{config.HOST}:{config.PORT}/api/v1/tables")
    print("=" * 56)

    app.run(host=config.HOST, port=config.PORT, debug=config.DEBUG)
    return 0


def _cmd_import(args) -> int:
    from table_import import import_directory

    init_db(config.DB_URL)
    reports = import_directory(args.folder, caller=args.caller)
    if not reports:
        print(f"  No importable .json/.csv files in {args.folder}")
        return 1

    failed = 0
    for report in reports:
        if report.ok:
            print(f"  {report.source}: {report.inserted} rows into '{report.table}'"
                  + (f" ({report.skipped} skipped)" if report.skipped else ""))
        else:
            failed += 1
            print(f"  {report.source}: FAILED - {report.error}")
    print(f"  Done: {len(reports) - failed}/{len(reports)} tables imported")
    return 1 if failed else 0


def _cmd_export(args) -> int:
    from services.table_service import TableService
    from table_import.errors import UnknownTableError

    init_db(config.DB_URL)
    session = get_session()
    try:
        envelope = TableService.export(session, args.table)
    except UnknownTableError as exc:
        print(f"  {exc}", file=sys.stderr)
        return 1
    finally:
        session.close()

    text = json.dumps(envelope, indent=2)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as fh:
            fh.write(text)
        print(f"  Wrote {len(envelope[0]['rows'])} rows to {args.output}")
    else:
        print(text)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="worlddb", description=__doc__.splitlines()[1])
    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="Run the HTTP API (default)")
    serve.set_defaults(func=_cmd_serve)

    imp = sub.add_parser("import", help="Import every table dump in a folder")
    imp.add_argument("folder", nargs="?", default=str(config.IMPORT_DIR),
                     help="Folder holding <table>.json / <table>.csv files")
    imp.add_argument("--caller", default=None, help="Caller identity recorded in the log")
    imp.set_defaults(func=_cmd_import)

    exp = sub.add_parser("export", help="Write one table as envelope JSON")
    exp.add_argument("table", help="Table name")
    exp.add_argument("-o", "--output", default=None, help="Output file (default: stdout)")
    exp.set_defaults(func=_cmd_export)

    return parser


def main(argv=None) -> int:
    _configure_logging()
    args = build_parser().parse_args(argv)
    if args.command is None:
        return _cmd_serve(args)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
