# src/credport/pipeline/dedup.py

import logging
from typing import Dict, List, Sequence, Tuple

from credport.common.models import CanonicalCredential, Classification, DuplicateMatch, StoredCredential

logger = logging.getLogger(__name__)

IdentityKey = Tuple[str, str]


def identity_key(credential) -> IdentityKey:
    """Case-insensitive (site, username) pair; works for canonical and stored records."""
    return ((credential.site or "").strip().lower(), (credential.username or "").strip().lower())


def build_index(existing: Sequence[StoredCredential]) -> Dict[IdentityKey, StoredCredential]:
    """
    Indexes a store snapshot by identity key. When several records share a key
    the most recently created one wins; on equal timestamps the first listed stays.
    """
    index: Dict[IdentityKey, StoredCredential] = {}
    for record in existing:
        key = identity_key(record)
        current = index.get(key)
        if current is None or (record.created_at or "") > (current.created_at or ""):
            index[key] = record
    return index


def classify(candidate: CanonicalCredential, match: StoredCredential) -> Classification:
    if candidate.password != match.password:
        return Classification.CONFLICT
    return Classification.DUPLICATE


def find_duplicates(
    candidates: Sequence[CanonicalCredential], existing: Sequence[StoredCredential]
) -> List[DuplicateMatch]:
    """Candidates that already exist in `existing`, in candidate order."""
    index = build_index(existing)
    matches = []
    for candidate in candidates:
        match = index.get(identity_key(candidate))
        if match is not None:
            matches.append(DuplicateMatch(candidate, match, classify(candidate, match)))
    logger.debug("%d of %d candidates match existing credentials", len(matches), len(candidates))
    return matches


def find_batch_duplicates(candidates: Sequence[CanonicalCredential]) -> List[Tuple[int, int]]:
    """(first, later) index pairs of candidates sharing an identity key within one batch."""
    seen: Dict[IdentityKey, List[int]] = {}
    pairs = []
    for j, candidate in enumerate(candidates):
        key = identity_key(candidate)
        for i in seen.get(key, []):
            pairs.append((i, j))
        seen.setdefault(key, []).append(j)
    return sorted(pairs)
