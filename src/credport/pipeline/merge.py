# src/credport/pipeline/merge.py

import logging
from typing import Mapping, Sequence, Set

from credport.common.errors import InvalidOptionsError
from credport.common.models import CanonicalCredential, ImportOptions, MergePlan, PlannedUpdate, StoredCredential
from .dedup import IdentityKey, identity_key

logger = logging.getLogger(__name__)


def plan(
    candidates: Sequence[CanonicalCredential],
    existing_index: Mapping[IdentityKey, StoredCredential],
    options: ImportOptions,
) -> MergePlan:
    """
    Partitions valid candidates into inserts, updates and skips.

    - no existing match                  -> insert
    - match, update_existing             -> update (takes precedence over skip)
    - match, skip_duplicates             -> skip
    - match, both off                    -> insert as an extra entry

    Within one batch the first occurrence of an identity key wins: later
    occurrences are skipped unless both flags are off.
    """
    if not isinstance(options, ImportOptions):
        raise InvalidOptionsError(f"expected ImportOptions, got {type(options).__name__}")

    result = MergePlan()
    planned: Set[IdentityKey] = set()
    dedupe = options.update_existing or options.skip_duplicates

    for candidate in candidates:
        key = identity_key(candidate)
        match = existing_index.get(key)

        if key in planned:
            result.duplicates.append(candidate)
            if dedupe:
                result.to_skip.append(candidate)
            else:
                result.to_insert.append(candidate)
            continue
        planned.add(key)

        if match is None:
            result.to_insert.append(candidate)
            continue

        result.duplicates.append(candidate)
        if options.update_existing:
            result.to_update.append(PlannedUpdate(match.id, candidate))
        elif options.skip_duplicates:
            result.to_skip.append(candidate)
        else:
            result.to_insert.append(candidate)

    logger.debug(
        "Merge plan: %d insert, %d update, %d skip",
        len(result.to_insert), len(result.to_update), len(result.to_skip),
    )
    return result
