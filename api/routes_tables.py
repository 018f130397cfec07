"""
api.routes_tables - /api/v1/tables listing and export endpoints.
"""

from flask import jsonify

from api import api_bp
from db import get_session
from services.table_service import TableService


@api_bp.route("/tables")
def list_tables():
    """GET /api/v1/tables - importable tables with their columns and row counts."""
    session = get_session()
    try:
        return jsonify({"tables": TableService.list_tables(session)})
    finally:
        session.close()


@api_bp.route("/tables/<table_name>/export")
def export_table(table_name: str):
    """GET /api/v1/tables/<table_name>/export - envelope JSON of one table."""
    session = get_session()
    try:
        return jsonify(TableService.export(session, table_name))
    finally:
        session.close()
