"""Data models for postal records, search results and validation verdicts."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict, Any, Tuple


POST_OFFICE_TYPES = (
    "D.P.O.",
    "A.P.O.",
    "F.W.R.P.D.",
    "G.P.O.",
    "W.R.P.D.",
    "E.R.P.D.",
    "M.W.R.P.D.",
)

MAIN_OFFICE_TYPES = ("D.P.O.", "G.P.O.")

# (district, post office, postal code, post office type) as read from the source
RawRecord = Tuple[str, str, str, str]


class MatchType(str, Enum):
    """Why a search result matched the query."""
    EXACT = "exact"
    EXACT_POSTAL = "exact_postal"
    PREFIX = "prefix"
    CONTAINS = "contains"
    POSTAL_CODE = "postal_code"
    FUZZY = "fuzzy"
    ADVANCED_SEARCH = "advanced_search"


class SearchScope(str, Enum):
    """Which record kinds a search covers."""
    ALL = "all"
    DISTRICT = "district"
    POST_OFFICE = "postOffice"

    @property
    def includes_districts(self) -> bool:
        return self in (SearchScope.ALL, SearchScope.DISTRICT)

    @property
    def includes_post_offices(self) -> bool:
        return self in (SearchScope.ALL, SearchScope.POST_OFFICE)


class SortBy(str, Enum):
    RELEVANCE = "relevance"
    NAME = "name"
    DISTRICT = "district"


@dataclass(frozen=True)
class PostOffice:
    """A single post office record."""
    name: str
    postal_code: str
    type: str
    district: str

    @property
    def is_main_office(self) -> bool:
        return self.type in MAIN_OFFICE_TYPES

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "postal_code": self.postal_code,
            "type": self.type,
            "district": self.district,
        }


@dataclass(frozen=True)
class District:
    """A district and its post offices, in source order."""
    name: str
    post_offices: Tuple[PostOffice, ...] = ()

    @property
    def post_office_count(self) -> int:
        return len(self.post_offices)

    @property
    def has_main_office(self) -> bool:
        return any(po.is_main_office for po in self.post_offices)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "post_office_count": self.post_office_count,
            "post_offices": [po.to_dict() for po in self.post_offices],
        }


@dataclass
class SearchResult:
    """Result of a search operation."""
    type: str
    name: str
    relevance: int
    match_type: Optional[MatchType] = None
    district: Optional[str] = None
    postal_code: Optional[str] = None
    office_type: Optional[str] = None
    is_main_office: Optional[bool] = None
    stats: Optional[Dict[str, Any]] = None

    @property
    def dedup_key(self) -> Tuple[str, str, str, str]:
        return (self.type, self.name, self.district or "", self.postal_code or "")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        data = {
            "type": self.type,
            "name": self.name,
            "district": self.district,
            "postal_code": self.postal_code,
            "relevance": self.relevance,
            "match_type": self.match_type.value if self.match_type else None,
        }
        # Extras only appear when a caller asked for them
        if self.office_type is not None:
            data["office_type"] = self.office_type
        if self.is_main_office is not None:
            data["is_main_office"] = self.is_main_office
        if self.stats is not None:
            data["stats"] = self.stats
        return data


@dataclass(frozen=True)
class PostalInfo:
    """Flat view of the post office owning a postal code."""
    postal_code: str
    post_office: str
    district: str
    type: str
    is_main_office: bool

    @classmethod
    def from_post_office(cls, po: PostOffice) -> "PostalInfo":
        return cls(
            postal_code=po.postal_code,
            post_office=po.name,
            district=po.district,
            type=po.type,
            is_main_office=po.is_main_office,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "postal_code": self.postal_code,
            "post_office": self.post_office,
            "district": self.district,
            "type": self.type,
            "is_main_office": self.is_main_office,
        }


@dataclass(frozen=True)
class Statistics:
    total_districts: int
    total_post_offices: int
    average_post_offices_per_district: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_districts": self.total_districts,
            "total_post_offices": self.total_post_offices,
            "average_post_offices_per_district": self.average_post_offices_per_district,
        }


@dataclass
class Completeness:
    """Weighted presence score of the expected address fields."""
    score: int
    present: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)

    @property
    def percentage(self) -> str:
        return f"{self.score}%"

    @property
    def is_complete(self) -> bool:
        return self.score >= 80

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "percentage": self.percentage,
            "present": list(self.present),
            "missing": list(self.missing),
            "is_complete": self.is_complete,
        }


@dataclass
class FieldValidation:
    """Verdict for a single address field."""
    is_valid: bool
    error: Optional[str] = None
    suggestions: List[str] = field(default_factory=list)
    value: Any = None

    def to_dict(self) -> Dict[str, Any]:
        value = self.value.to_dict() if hasattr(self.value, "to_dict") else self.value
        return {
            "is_valid": self.is_valid,
            "error": self.error,
            "suggestions": list(self.suggestions),
            "value": value,
        }


@dataclass
class ValidationResult:
    """Result of validating a whole address."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    completeness: Completeness = field(default_factory=lambda: Completeness(score=0))
    recommendation: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "is_valid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "suggestions": list(self.suggestions),
            "completeness": self.completeness.to_dict(),
            "recommendation": list(self.recommendation),
        }


@dataclass(frozen=True)
class ExportResult:
    """Outcome of an export: either rendered content or an error message."""
    format: str
    content: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None
