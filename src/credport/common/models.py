# src/credport/common/models.py
from dataclasses import dataclass, asdict, field
from enum import Enum
from typing import Optional, Dict, Any, List, Tuple, FrozenSet

from . import config
from .errors import InvalidOptionsError


@dataclass(frozen=True)
class CanonicalCredential:
    # Required fields: a record without them never gets past validation
    site: str
    username: str
    password: str

    # Optional metadata carried over from the vendor export
    notes: Optional[str] = None
    url: Optional[str] = None
    folder: Optional[str] = None
    tags: Optional[Tuple[str, ...]] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if self.tags is not None:
            data["tags"] = list(self.tags)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CanonicalCredential":
        tags = data.get("tags")
        return cls(
            site=data.get("site") or "",
            username=data.get("username") or "",
            password=data.get("password") or "",
            notes=data.get("notes"),
            url=data.get("url"),
            folder=data.get("folder"),
            tags=tuple(tags) if tags else None,
        )


@dataclass(frozen=True)
class StoredCredential:
    """A credential as handed back by the store, with its identifier."""
    id: str
    credential: CanonicalCredential
    created_at: str = ""

    @property
    def site(self) -> str:
        return self.credential.site

    @property
    def username(self) -> str:
        return self.credential.username

    @property
    def password(self) -> str:
        return self.credential.password

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, **self.credential.to_dict(), "created_at": self.created_at}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoredCredential":
        return cls(
            id=str(data["id"]),
            credential=CanonicalCredential.from_dict(data),
            created_at=data.get("created_at") or "",
        )


@dataclass(frozen=True)
class ImportSource:
    id: str
    name: str
    description: str
    supported_extensions: FrozenSet[str]
    icon: str = ""
    color: str = ""

    def accepts(self, extension: str) -> bool:
        return extension in self.supported_extensions


@dataclass(frozen=True)
class ImportOptions:
    skip_duplicates: bool = config.DEFAULT_SKIP_DUPLICATES
    update_existing: bool = config.DEFAULT_UPDATE_EXISTING
    validate_urls: bool = config.DEFAULT_VALIDATE_URLS
    import_notes: bool = config.DEFAULT_IMPORT_NOTES

    def __post_init__(self):
        for name in ("skip_duplicates", "update_existing", "validate_urls", "import_notes"):
            if not isinstance(getattr(self, name), bool):
                raise InvalidOptionsError(f"ImportOptions.{name} must be a bool")


class ExportFormat(str, Enum):
    CSV = "csv"
    JSON = "json"
    # Declared by the desktop app but never implemented
    ENCRYPTED = "encrypted"
    PDF = "pdf"


SELECTABLE_EXPORT_FORMATS = (ExportFormat.CSV, ExportFormat.JSON)


@dataclass(frozen=True)
class ExportOptions:
    format: str = ExportFormat.CSV.value
    include_metadata: bool = False
    password_protected: bool = False
    # None exports everything
    selected_ids: Optional[FrozenSet[str]] = None


@dataclass(frozen=True)
class ParseResult:
    candidates: List[CanonicalCredential]
    warnings: List[str]

    def __iter__(self):
        # Allows `candidates, warnings = parser.parse(...)`
        return iter((self.candidates, self.warnings))


class Classification(str, Enum):
    NEW = "new"
    DUPLICATE = "duplicate"
    # Same identity key, different password
    CONFLICT = "conflict"


@dataclass(frozen=True)
class DuplicateMatch:
    candidate: CanonicalCredential
    existing: StoredCredential
    classification: Classification


@dataclass(frozen=True)
class PlannedUpdate:
    existing_id: str
    credential: CanonicalCredential


@dataclass
class MergePlan:
    to_insert: List[CanonicalCredential] = field(default_factory=list)
    to_update: List[PlannedUpdate] = field(default_factory=list)
    to_skip: List[CanonicalCredential] = field(default_factory=list)
    # Candidates that matched an existing record or an earlier batch entry
    duplicates: List[CanonicalCredential] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.to_insert) + len(self.to_update) + len(self.to_skip)


@dataclass
class ImportOutcome:
    success: bool
    imported_count: int = 0
    skipped_count: int = 0
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    duplicates: List[CanonicalCredential] = field(default_factory=list)

    @classmethod
    def failed(cls, message: str) -> "ImportOutcome":
        return cls(success=False, errors=[message])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "imported": self.imported_count,
            "skipped": self.skipped_count,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "duplicates": [d.to_dict() for d in self.duplicates],
        }
