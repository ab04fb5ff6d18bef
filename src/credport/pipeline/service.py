# src/credport/pipeline/service.py
"""
Runs a whole import: parse -> validate -> dedup -> merge plan -> store.

Everything before `ImportPreview.apply` is in-memory work, so an import
abandoned before that point leaves the store untouched.
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence

from credport.common.errors import FormatError, SourceNotFoundError, StoreError
from credport.common.models import (
    CanonicalCredential,
    ImportOptions,
    ImportOutcome,
    MergePlan,
    StoredCredential,
)
from credport.common.store import CredentialStore
from credport.importers.base import Content
from credport.importers.registry import parse_file
from . import merge
from .dedup import build_index
from .validator import inspect, validate

logger = logging.getLogger(__name__)


@dataclass
class ImportPreview:
    """Result of the in-memory stages; nothing has been written yet."""
    candidates: List[CanonicalCredential]
    valid: List[CanonicalCredential]
    warnings: List[str]
    plan: MergePlan

    def apply(self, store: CredentialStore) -> ImportOutcome:
        """Hands the plan to the store. Store failures are reported per record."""
        errors: List[str] = []
        imported = 0

        for credential in self.plan.to_insert:
            try:
                store.insert(credential)
                imported += 1
            except StoreError as e:
                logger.warning("Insert failed for %s: %s", credential.site, e)
                errors.append(f"{credential.site}: {e}")

        for update in self.plan.to_update:
            try:
                store.update(update.existing_id, update.credential)
                imported += 1
            except StoreError as e:
                logger.warning("Update failed for %s: %s", update.credential.site, e)
                errors.append(f"{update.credential.site}: {e}")

        logger.info("Import applied: %d imported, %d skipped, %d errors",
                    imported, len(self.plan.to_skip), len(errors))
        return ImportOutcome(
            success=True,
            imported_count=imported,
            skipped_count=len(self.plan.to_skip),
            errors=errors,
            warnings=list(self.warnings),
            duplicates=list(self.plan.duplicates),
        )


def plan_import(
    valid: Sequence[CanonicalCredential],
    existing: Sequence[StoredCredential],
    options: ImportOptions,
) -> MergePlan:
    """Merge plan for already validated candidates against a store snapshot."""
    return merge.plan(valid, build_index(existing), options)


def prepare_import(
    content: Content,
    source_id: str,
    extension: str,
    existing: Sequence[StoredCredential],
    options: ImportOptions,
) -> ImportPreview:
    """
    Parses, validates and plans one file. Raises FormatError when the file
    cannot be read at all.
    """
    candidates, parse_warnings = parse_file(content, source_id, extension)
    valid, _ = validate(candidates, options)
    # Validator findings are reported with the entry they refer to
    field_warnings = [
        f"entry {w.index + 1} ({w.candidate.site or 'no site'}): {w.message}"
        for w in inspect(candidates, options)
    ]
    return ImportPreview(
        candidates=list(candidates),
        valid=valid,
        warnings=list(parse_warnings) + field_warnings,
        plan=plan_import(valid, existing, options),
    )


def import_file(
    content: Content,
    source_id: str,
    extension: str,
    store: CredentialStore,
    options: ImportOptions,
) -> ImportOutcome:
    """
    Full import of one file into `store`. Unreadable files, unknown sources
    and an unreadable store all come back as a failed ImportOutcome.
    """
    try:
        # One snapshot per call; later store changes are not observed
        snapshot = store.list_all()
    except StoreError as e:
        logger.error("Cannot read credential store: %s", e)
        return ImportOutcome.failed(f"cannot read credential store: {e}")
    try:
        preview = prepare_import(content, source_id, extension, snapshot, options)
    except (FormatError, SourceNotFoundError) as e:
        logger.error("Import of %s file from %s failed: %s", extension, source_id, e)
        return ImportOutcome.failed(str(e))
    return preview.apply(store)
