"""
services - Business-logic layer sitting between API and DB.
"""

from services.table_service import TableService       # noqa: F401
