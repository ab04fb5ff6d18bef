# src/credport/common/exporter.py
import csv
import dataclasses
import io
import json
import logging
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Any

from . import config
from .errors import UnsupportedFormatError
from .models import ExportFormat, ExportOptions, SELECTABLE_EXPORT_FORMATS, StoredCredential

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["site", "username", "password"]
METADATA_COLUMN = "created_at"


class CredentialExporter:
    """Serialises a credential snapshot to CSV or JSON text."""

    def __init__(self, now: Optional[datetime] = None):
        self.timestamp = (now or datetime.now(timezone.utc)).isoformat()

    def export(self, records: Sequence[StoredCredential], options: ExportOptions) -> str:
        """Export dispatcher: validates options, filters the selection, serialises."""
        fmt = self._resolve_format(options)
        if options.password_protected:
            raise UnsupportedFormatError("Password-protected export is not available")

        selected = self._select(records, options.selected_ids)
        logger.info("Exporting %d of %d credentials as %s", len(selected), len(records), fmt.value)
        if fmt is ExportFormat.CSV:
            return self._to_csv(selected, options.include_metadata)
        return self._to_json(selected, options.include_metadata)

    @staticmethod
    def _resolve_format(options: ExportOptions) -> ExportFormat:
        raw = options.format.value if isinstance(options.format, ExportFormat) else str(options.format)
        try:
            fmt = ExportFormat(raw.lower())
        except ValueError:
            raise UnsupportedFormatError(f"Unknown export format: {raw}") from None
        if fmt not in SELECTABLE_EXPORT_FORMATS:
            raise UnsupportedFormatError(f"Export format '{fmt.value}' is reserved and not implemented")
        return fmt

    @staticmethod
    def _select(records: Sequence[StoredCredential], selected_ids) -> List[StoredCredential]:
        if selected_ids is None:
            return list(records)
        wanted = {str(i) for i in selected_ids}
        # Keep the snapshot order, not the selection order
        return [r for r in records if r.id in wanted]

    def _to_csv(self, records: List[StoredCredential], include_metadata: bool) -> str:
        headers = CSV_COLUMNS + ([METADATA_COLUMN] if include_metadata else [])
        buffer = io.StringIO()
        # QUOTE_MINIMAL can leave "\r" unquoted under a "\n" terminator,
        # so rows holding one go through a writer that quotes every field
        writer = csv.writer(buffer, lineterminator="\n")
        quoted_writer = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_ALL)
        writer.writerow(headers)
        for record in records:
            row = [record.site, record.username, record.password]
            if include_metadata:
                row.append(record.created_at)
            if any("\r" in value for value in row):
                quoted_writer.writerow(row)
            else:
                writer.writerow(row)
        return buffer.getvalue()

    def _to_json(self, records: List[StoredCredential], include_metadata: bool) -> str:
        passwords: List[Dict[str, Any]] = []
        for record in records:
            entry = record.credential.to_dict()
            if include_metadata:
                entry = {"id": record.id, **entry, "created_at": record.created_at}
            passwords.append(entry)
        document = {
            "exportedAt": self.timestamp,
            "version": config.EXPORT_VERSION,
            "passwords": passwords,
        }
        return json.dumps(document, indent=2, ensure_ascii=False)


def export_csv(records: Sequence[StoredCredential], options: ExportOptions) -> str:
    return CredentialExporter().export(records, _with_format(options, ExportFormat.CSV))


def export_json(records: Sequence[StoredCredential], options: ExportOptions) -> str:
    return CredentialExporter().export(records, _with_format(options, ExportFormat.JSON))


def _with_format(options: ExportOptions, fmt: ExportFormat) -> ExportOptions:
    return dataclasses.replace(options, format=fmt.value)


def default_export_filename(fmt: str, today: Optional[date] = None) -> str:
    """credport-export-2024-05-01.csv"""
    today = today or date.today()
    return f"{config.EXPORT_FILENAME_PREFIX}-{today.isoformat()}.{fmt}"


def write_export(content: str, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8", newline="")
    logger.info("Export written to %s", path)
    return path
