# src/credport/common/store.py
"""
Credential stores the import core talks to. The core only needs
list/insert/update/delete; persistence details stay here.
"""

import json
import logging
import os
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from .errors import StoreError
from .models import CanonicalCredential, StoredCredential

logger = logging.getLogger(__name__)


class CredentialStore(Protocol):
    def list_all(self) -> List[StoredCredential]:
        """All credentials, most recently created first."""
        ...

    def insert(self, credential: CanonicalCredential) -> str:
        ...

    def update(self, credential_id: str, credential: CanonicalCredential) -> None:
        ...

    def delete(self, credential_id: str) -> None:
        ...


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


class MemoryStore:
    """Keeps credentials in a dict; used by tests and previews."""

    def __init__(self, records: Optional[List[StoredCredential]] = None):
        self._records: Dict[str, StoredCredential] = {r.id: r for r in records or []}

    def list_all(self) -> List[StoredCredential]:
        return sorted(self._records.values(), key=lambda r: r.created_at, reverse=True)

    def insert(self, credential: CanonicalCredential) -> str:
        record_id = uuid.uuid4().hex
        self._records[record_id] = StoredCredential(record_id, credential, _now())
        return record_id

    def update(self, credential_id: str, credential: CanonicalCredential) -> None:
        current = self._records.get(credential_id)
        if current is None:
            raise StoreError(f"no credential with id {credential_id}")
        self._records[credential_id] = StoredCredential(credential_id, credential, current.created_at)

    def delete(self, credential_id: str) -> None:
        if self._records.pop(credential_id, None) is None:
            raise StoreError(f"no credential with id {credential_id}")


class JsonFileStore(MemoryStore):
    """
    Plain JSON file on disk, rewritten on every mutation.

    The file is not encrypted; it backs the terminal front end only.
    """

    VERSION = 1

    def __init__(self, path: Path):
        self.path = Path(path)
        super().__init__(self._load())

    def _load(self) -> List[StoredCredential]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return [StoredCredential.from_dict(entry) for entry in data.get("credentials", [])]
        except (OSError, ValueError, KeyError, AttributeError) as e:
            raise StoreError(f"cannot read credential store {self.path}: {e}") from e

    def _save(self) -> None:
        payload = {
            "version": self.VERSION,
            "credentials": [r.to_dict() for r in self.list_all()],
        }
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(payload, indent=4, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as e:
            raise StoreError(f"cannot write credential store {self.path}: {e}") from e
        logger.debug("Saved %d credentials to %s", len(payload["credentials"]), self.path)

    def _commit(self, snapshot: Dict[str, StoredCredential]) -> None:
        # Memory and disk stay in step: a failed write restores the snapshot
        try:
            self._save()
        except StoreError:
            self._records = snapshot
            raise

    def insert(self, credential: CanonicalCredential) -> str:
        snapshot = dict(self._records)
        record_id = super().insert(credential)
        self._commit(snapshot)
        return record_id

    def update(self, credential_id: str, credential: CanonicalCredential) -> None:
        snapshot = dict(self._records)
        super().update(credential_id, credential)
        self._commit(snapshot)

    def delete(self, credential_id: str) -> None:
        snapshot = dict(self._records)
        super().delete(credential_id)
        self._commit(snapshot)
