# src/credport/pipeline/validator.py

import dataclasses
import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from credport.common import config
from credport.common.errors import InvalidOptionsError
from credport.common.models import CanonicalCredential, ImportOptions
from credport.common.urls import is_absolute_url

logger = logging.getLogger(__name__)

MISSING_SITE = "missing site"
MISSING_USERNAME = "missing username"
MISSING_PASSWORD = "missing password"


@dataclass(frozen=True)
class FieldWarning:
    """A defect found on one candidate; `fatal` ones exclude the candidate."""
    index: int
    message: str
    candidate: CanonicalCredential
    fatal: bool = False


def inspect(candidates: Sequence[CanonicalCredential], options: ImportOptions) -> List[FieldWarning]:
    """Every defect of every candidate, in candidate order."""
    _check_options(options)
    findings: List[FieldWarning] = []
    for index, candidate in enumerate(candidates):
        missing = []
        if not (candidate.site or "").strip():
            missing.append(MISSING_SITE)
        if not (candidate.username or "").strip():
            missing.append(MISSING_USERNAME)
        if not candidate.password:
            missing.append(MISSING_PASSWORD)
        if missing:
            # A rejected candidate only reports what rejected it
            findings.extend(FieldWarning(index, m, candidate, fatal=True) for m in missing)
            continue

        if len(candidate.password) < config.WEAK_PASSWORD_LENGTH:
            findings.append(FieldWarning(
                index, f"weak password (< {config.WEAK_PASSWORD_LENGTH} characters)", candidate
            ))
        if options.validate_urls and candidate.url and not is_absolute_url(candidate.url):
            findings.append(FieldWarning(index, f"invalid url: {candidate.url}", candidate))
    return findings


def validate(
    candidates: Sequence[CanonicalCredential], options: ImportOptions
) -> Tuple[List[CanonicalCredential], List[str]]:
    """
    Splits candidates into the valid ones and a list of warnings.

    Candidates missing site, username or password are dropped with one
    warning per missing field. Malformed URLs and weak passwords only warn.
    Notes are cleared on every survivor when `options.import_notes` is off.
    """
    findings = inspect(candidates, options)
    rejected = {f.index for f in findings if f.fatal}

    valid: List[CanonicalCredential] = []
    for index, candidate in enumerate(candidates):
        if index in rejected:
            continue
        if not options.import_notes and candidate.notes is not None:
            candidate = dataclasses.replace(candidate, notes=None)
        valid.append(candidate)

    logger.debug("Validated %d candidates: %d valid, %d rejected", len(candidates), len(valid), len(rejected))
    return valid, [f.message for f in findings]


def _check_options(options: ImportOptions) -> None:
    if not isinstance(options, ImportOptions):
        raise InvalidOptionsError(f"expected ImportOptions, got {type(options).__name__}")
