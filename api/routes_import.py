"""
api.routes_import - /api/v1/import endpoints.

Accepts a table dump via raw request body (JSON envelope), multipart
file upload (.json or .csv), or the two-element argument array
["table", "json payload"].
"""

import json
from pathlib import Path

from flask import request, jsonify

from api import api_bp
from table_import import run_import, csv_to_envelope, TABLES, ImportReport
from table_import.errors import TableImportError


def _caller() -> str | None:
    return request.headers.get("X-Caller-Identity") or None


def _respond(report: ImportReport):
    status = 200 if report.ok else 400
    return jsonify(report.to_dict()), status


@api_bp.route("/import/<table_name>", methods=["POST"])
def api_import_table(table_name: str):
    """
    POST /api/v1/import/<table_name>

    Multipart: field name 'file' (.json or .csv)
    Or: raw envelope JSON as request body.
    """
    if request.content_type and "multipart" in request.content_type:
        f = request.files.get("file")
        if not f:
            return jsonify({"error": "no file in upload"}), 400
        content = f.read()
        if Path(f.filename or "").suffix.lower() == ".csv" and table_name in TABLES:
            try:
                content = csv_to_envelope(content, TABLES[table_name])
            except TableImportError as exc:
                report = ImportReport(table=table_name, source=f.filename)
                report.fail(exc)
                return _respond(report)
    else:
        content = request.get_data()

    if not content:
        return jsonify({"error": "empty body"}), 400

    return _respond(run_import(table_name, content, caller=_caller()))


@api_bp.route("/import", methods=["POST"])
def api_import_args():
    """
    POST /api/v1/import

    Body: ["table_name", "<envelope JSON as a string>"]
    """
    try:
        args = json.loads(request.get_data() or b"null")
    except ValueError:
        return jsonify({"error": "body is not valid JSON"}), 400

    if (
        not isinstance(args, list) or len(args) != 2
        or not all(isinstance(a, str) for a in args)
    ):
        return jsonify({"error": "expected [table_name, json_payload]"}), 400

    table_name, payload = args
    return _respond(run_import(table_name, payload, caller=_caller()))
