"""
table_import - JSON table-dump import pipeline.

Public API:
    run_import(table_name, json_payload, caller=None) → ImportReport
    import_table(session, table_name, json_payload)   → ImportReport (raises)
    import_directory(folder)                           → list[ImportReport]
    csv_to_envelope(raw, spec)                         → envelope JSON text
"""

from table_import.importer import run_import, import_table    # noqa: F401
from table_import.report import ImportReport                  # noqa: F401
from table_import.errors import TableImportError              # noqa: F401
from table_import.tables import TABLES, get_table             # noqa: F401
from table_import.csv_parser import csv_to_envelope           # noqa: F401
from table_import.batch import import_directory, import_file  # noqa: F401
