# src/credport/importers/base.py

import csv
import io
import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Tuple, Union

from credport.common.errors import FormatError
from credport.common.models import CanonicalCredential, ParseResult
from credport.common.urls import extract_domain

logger = logging.getLogger(__name__)

Content = Union[str, bytes]


def read_text(content: Content, label: str) -> str:
    """Decodes raw file content and strips a leading byte-order mark."""
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise FormatError(f"{label}: file is not valid UTF-8 text ({e.reason})") from e
    return content.lstrip("\ufeff")


def load_json(content: Content, label: str, warnings: Optional[List[str]] = None) -> Any:
    """
    Parses JSON text. A key repeated inside one object keeps its first value;
    each repeat is reported in `warnings` when a list is given.
    """
    text = read_text(content, label)
    if not text.strip():
        raise FormatError(f"{label}: file is empty")

    def first_wins(pairs):
        obj = {}
        for key, value in pairs:
            if key in obj:
                if warnings is not None:
                    warnings.append(f"duplicate key '{key}' ignored")
                continue
            obj[key] = value
        return obj

    try:
        return json.loads(text, object_pairs_hook=first_wins)
    except json.JSONDecodeError as e:
        raise FormatError(f"{label}: invalid JSON ({e.msg} at line {e.lineno})") from e


def split_tags(value: Optional[str]) -> Optional[Tuple[str, ...]]:
    if not value:
        return None
    tags = tuple(t.strip() for t in re.split(r"[;,]", value) if t.strip())
    return tags or None


def clean(value: Any) -> Optional[str]:
    """Trimmed string value, None when empty or not a string."""
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


class BaseParser(ABC):
    """Converts one vendor file format into candidate credentials."""

    label = "Import"

    @abstractmethod
    def parse(self, content: Content, extension: str) -> ParseResult:
        """
        Returns the candidates found in `content` and non-fatal warnings.

        Raises FormatError when the content cannot be read as `extension`.
        """


class CsvParser(BaseParser):
    """
    Shared CSV reader. Subclasses declare how vendor columns map onto
    canonical fields:

    - FIELD_ALIASES: canonical field -> column names, highest priority first
    - DISCARDED: columns that are known but deliberately dropped
    - REQUIRED: groups of canonical fields; each group needs one mapped column
    """

    FIELD_ALIASES: Dict[str, Sequence[str]] = {}
    DISCARDED: FrozenSet[str] = frozenset()
    REQUIRED: Sequence[Sequence[str]] = (("password",), ("username",), ("site", "url"))

    def parse(self, content: Content, extension: str) -> ParseResult:
        text = read_text(content, self.label)
        if not text.strip():
            raise FormatError(f"{self.label}: file is empty")

        rows = self._read_rows(text)
        header, body = rows[0], rows[1:]
        warnings: List[str] = []
        columns = self._map_header(header, warnings)
        self._check_required(columns)

        candidates: List[CanonicalCredential] = []
        for row_no, row in enumerate(body, start=1):
            if not any(cell.strip() for cell in row):
                continue
            if len(row) != len(header):
                warnings.append(f"row {row_no}: expected {len(header)} fields, found {len(row)}")
            values = {name: (row[idx] if idx < len(row) else "") for name, idx in columns.items()}
            credential = self.build(values, row_no, warnings)
            if credential is not None:
                candidates.append(credential)

        logger.debug("%s: %d candidates, %d warnings", self.label, len(candidates), len(warnings))
        return ParseResult(candidates, warnings)

    def _read_rows(self, text: str) -> List[List[str]]:
        try:
            rows = list(csv.reader(io.StringIO(text, newline=""), strict=True))
        except csv.Error as e:
            raise FormatError(f"{self.label}: malformed CSV ({e})") from e
        if not rows or not any(cell.strip() for cell in rows[0]):
            raise FormatError(f"{self.label}: missing header row")
        return rows

    def _known_columns(self) -> FrozenSet[str]:
        mapped = {alias for aliases in self.FIELD_ALIASES.values() for alias in aliases}
        return frozenset(mapped) | self.DISCARDED

    def _map_header(self, header: List[str], warnings: List[str]) -> Dict[str, int]:
        known = self._known_columns()
        columns: Dict[str, int] = {}
        for idx, raw in enumerate(header):
            name = raw.strip().lower()
            if name in columns:
                # First occurrence wins
                warnings.append(f"duplicate column '{raw.strip()}' ignored")
                continue
            columns[name] = idx
            if name not in known:
                warnings.append(f"unrecognized field ignored: '{raw.strip()}'")
        return columns

    def _check_required(self, columns: Dict[str, int]) -> None:
        missing = []
        for group in self.REQUIRED:
            if not any(alias in columns for f in group for alias in self.FIELD_ALIASES.get(f, ())):
                missing.append("/".join(group))
        if missing:
            raise FormatError(f"{self.label}: missing required columns: {', '.join(missing)}")

    def field(self, values: Dict[str, str], name: str) -> Optional[str]:
        """First non-empty column among the aliases of `name`."""
        for alias in self.FIELD_ALIASES.get(name, ()):
            raw = values.get(alias)
            if raw is None:
                continue
            # Passwords are kept byte-exact, everything else is trimmed
            value = raw if name == "password" else raw.strip()
            if value:
                return value
        return None

    def build(self, values: Dict[str, str], row_no: int, warnings: List[str]) -> Optional[CanonicalCredential]:
        url = self.field(values, "url")
        return CanonicalCredential(
            site=self.field(values, "site") or extract_domain(url) or "",
            username=self.field(values, "username") or "",
            password=self.field(values, "password") or "",
            notes=self.field(values, "notes"),
            url=url,
            folder=self.field(values, "folder"),
            tags=split_tags(self.field(values, "tags")),
        )
