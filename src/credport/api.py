# src/credport/api.py
"""Entry points for a front end: one function per import/export step."""

from credport.common.exporter import export_csv, export_json
from credport.common.sources import find_source, list_sources
from credport.importers.registry import parse_file
from credport.pipeline.dedup import find_duplicates
from credport.pipeline.service import import_file, plan_import, prepare_import
from credport.pipeline.validator import validate

__all__ = [
    "list_sources", "find_source", "parse_file", "validate", "find_duplicates",
    "plan_import", "prepare_import", "import_file", "export_csv", "export_json",
]
