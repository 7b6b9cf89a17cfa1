"""Postal code lookups, statistics and suggestions."""
from collections import Counter
from typing import Any, Dict, List, Optional
from nepal_geo.core.export import export_records
from nepal_geo.core.fuzzy import levenshtein_distance
from nepal_geo.core.models import (
    ExportResult,
    FieldValidation,
    PostalInfo,
    PostOffice,
    SearchScope,
)
from nepal_geo.core.normalization import is_postal_code
from nepal_geo.core.search import GeoSearch
from nepal_geo.core.store import DatasetStore
from nepal_geo.core.validator import LocationValidator
from nepal_geo.utils.logging import log_structured


POST_OFFICE_CSV_COLUMNS = {
    "name": "Post Office",
    "postal_code": "Postal Code",
    "district": "District",
    "type": "Type",
}

POSTAL_CODE_LENGTH = 5


class PostalUtils:
    """Read-only helpers over the post offices of a dataset store."""

    def __init__(
        self,
        store: DatasetStore,
        search: Optional[GeoSearch] = None,
        validator: Optional[LocationValidator] = None
    ):
        self.store = store
        self.search = search or GeoSearch(store)
        self.validator = validator or LocationValidator(store)

    def get_postal_info(self, postal_code: str) -> Optional[PostalInfo]:
        """Post office details for a postal code, or None."""
        if not isinstance(postal_code, str):
            return None
        po = self.store.get_post_office_by_code(postal_code.strip())
        return PostalInfo.from_post_office(po) if po else None

    def get_post_offices_by_district(self, district: str) -> List[PostOffice]:
        district_data = self.store.get_district_by_name(district)
        return list(district_data.post_offices) if district_data else []

    def get_total_post_offices(self) -> int:
        return self.store.get_statistics().total_post_offices

    def get_average_post_offices_per_district(self) -> float:
        return self.store.get_statistics().average_post_offices_per_district

    def search_postal_codes(self, query: str) -> List[Dict[str, Any]]:
        """Post offices whose name or postal code matches the query."""
        return [
            {
                "name": r.name,
                "district": r.district,
                "postal_code": r.postal_code,
                "relevance": r.relevance,
            }
            for r in self.search.search(query, SearchScope.POST_OFFICE)
        ]

    def validate_postal_code(self, postal_code: str) -> FieldValidation:
        return self.validator.validate_postal_code(postal_code)

    def is_valid_postal_code(self, postal_code: str) -> bool:
        return self.validate_postal_code(postal_code).is_valid

    def get_post_offices_by_type(self, office_type: str) -> List[PostOffice]:
        if not isinstance(office_type, str) or not office_type:
            return []
        return [po for po in self.store.get_all_post_offices() if po.type == office_type]

    def get_main_post_offices(self) -> List[PostOffice]:
        """District and general post offices."""
        return [po for po in self.store.get_all_post_offices() if po.is_main_office]

    def get_postal_statistics(self) -> Dict[str, Any]:
        """
        Counts by office type and by two-digit postal code prefix.

        Returns:
            Dictionary with total_post_offices, post_office_types,
            code_ranges ({prefix: {count, districts}}) and unique_districts
        """
        post_offices = self.store.get_all_post_offices()
        code_ranges: Dict[str, Dict[str, Any]] = {}

        for po in post_offices:
            prefix = po.postal_code[:2]
            entry = code_ranges.setdefault(prefix, {"count": 0, "districts": []})
            entry["count"] += 1
            if po.district not in entry["districts"]:
                entry["districts"].append(po.district)

        return {
            "total_post_offices": len(post_offices),
            "post_office_types": dict(Counter(po.type for po in post_offices)),
            "code_ranges": code_ranges,
            "unique_districts": len({po.district for po in post_offices}),
        }

    def get_postal_codes_in_range(self, start_code: str, end_code: str) -> List[PostOffice]:
        """Post offices whose code lies in [start_code, end_code] numerically."""
        try:
            start, end = int(start_code), int(end_code)
        except (TypeError, ValueError):
            return []
        if start > end:
            return []

        return [po for po in self.store.get_all_post_offices() if start <= int(po.postal_code) <= end]

    def get_nearest_postal_codes(self, postal_code: str, limit: int = 5) -> List[Dict[str, Any]]:
        """
        Post offices with the numerically closest codes, excluding the code itself.

        Returns:
            List of post office dictionaries with an added "distance"
        """
        try:
            reference = int(postal_code)
        except (TypeError, ValueError):
            return []

        nearest = [
            {**po.to_dict(), "distance": abs(int(po.postal_code) - reference)}
            for po in self.store.get_all_post_offices()
        ]
        nearest = [item for item in nearest if item["distance"] > 0]
        nearest.sort(key=lambda item: item["distance"])
        return nearest[:limit]

    def validate_postal_code_with_suggestions(self, postal_code: str) -> Dict[str, Any]:
        """
        Validate a postal code and propose likely corrections.

        Short numeric codes are offered zero-padded ("4460" -> "04460"),
        existing codes one edit away are offered next, and unknown five-digit
        codes with no close neighbour fall back to the numerically nearest.

        Returns:
            Dictionary with is_valid, postal_code, info (PostalInfo or None),
            message and suggestions
        """
        result = self.validate_postal_code(postal_code)
        code = postal_code.strip() if isinstance(postal_code, str) else postal_code

        if result.is_valid:
            return {
                "is_valid": True,
                "postal_code": code,
                "info": result.value,
                "message": f"Valid postal code for {result.value.post_office}, {result.value.district}",
                "suggestions": [],
            }

        suggestions: List[str] = []
        if isinstance(code, str) and code.isdigit() and code.isascii():
            if len(code) < POSTAL_CODE_LENGTH:
                suggestions.append(code.zfill(POSTAL_CODE_LENGTH))

            suggestions.extend(
                po.postal_code for po in self.store.get_all_post_offices()
                if levenshtein_distance(po.postal_code, code) == 1 and po.postal_code not in suggestions
            )

            if not suggestions and is_postal_code(code):
                suggestions.extend(item["postal_code"] for item in self.get_nearest_postal_codes(code, limit=3))

        return {
            "is_valid": False,
            "postal_code": code,
            "info": None,
            "message": result.error,
            "suggestions": suggestions[:5],
        }

    def export_data(
        self,
        fmt: str = "json",
        district: Optional[str] = None,
        office_type: Optional[str] = None
    ) -> ExportResult:
        """Export post offices, optionally filtered by district and type."""
        if district is not None and not isinstance(district, str):
            log_structured("warning", "export_data rejected input", reason="district must be a string",
                           district=str(district))
            return ExportResult(format=str(fmt), error="District filter must be a string")

        post_offices = self.store.get_all_post_offices()
        if district:
            district_key = district.strip().lower()
            post_offices = [po for po in post_offices if po.district.lower() == district_key]
        if office_type:
            post_offices = [po for po in post_offices if po.type == office_type]

        return export_records(
            [po.to_dict() for po in post_offices],
            fmt,
            csv_columns=POST_OFFICE_CSV_COLUMNS,
        )

    def get_all_postal_codes(self) -> List[str]:
        return [po.postal_code for po in self.store.get_all_post_offices()]
