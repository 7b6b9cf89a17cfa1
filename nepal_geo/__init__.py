"""Lookup, fuzzy search and validation for Nepal's districts and post offices."""
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence
from nepal_geo.core.config import CACHE_PATH, DATA_PATH, SEARCH_LIMIT, SUGGESTION_THRESHOLD
from nepal_geo.core.districts import DistrictUtils
from nepal_geo.core.errors import DataIntegrityError, NepalGeoError
from nepal_geo.core.models import (
    District,
    ExportResult,
    MatchType,
    PostalInfo,
    PostOffice,
    SearchResult,
    SearchScope,
    SortBy,
    Statistics,
    ValidationResult,
)
from nepal_geo.core.postal import PostalUtils
from nepal_geo.core.provinces import get_province
from nepal_geo.core.search import GeoSearch
from nepal_geo.core.store import DatasetStore, load_store
from nepal_geo.core.validator import LocationValidator

__version__ = "1.2.0"

CAPITAL_DISTRICT = "Kathmandu"


class NepalGeoHelper:
    """
    One-stop access to the postal dataset.

    The dataset is loaded once per instance; the district, postal, validator
    and search helpers all share that store.
    """

    def __init__(
        self,
        store: Optional[DatasetStore] = None,
        csv_path: Optional[Path] = None,
        cache_path: Optional[Path] = None
    ):
        """
        Initialize helper.

        Args:
            store: Prebuilt DatasetStore (skips loading)
            csv_path: CSV source path (defaults to the bundled data)
            cache_path: Optional JSON cache path

        Raises:
            DataIntegrityError: If the postal data cannot be loaded
        """
        self.store = store or load_store(csv_path or DATA_PATH, cache_path or CACHE_PATH)
        self.search = GeoSearch(self.store)
        self.validator = LocationValidator(self.store, similarity_threshold=SUGGESTION_THRESHOLD)
        self.districts = DistrictUtils(self.store, self.search)
        self.postal = PostalUtils(self.store, self.search, self.validator)

    def get_districts(self) -> List[District]:
        return self.districts.get_all_districts()

    def get_district(self, name: str) -> Optional[District]:
        """Case-insensitive district lookup."""
        return self.districts.get_district_by_name(name)

    def get_postal_info(self, postal_code: str) -> Optional[PostalInfo]:
        return self.postal.get_postal_info(postal_code)

    def search_locations(self, query: str, **options) -> List[SearchResult]:
        """Search districts, post offices and postal codes (see GeoSearch.search_by_query)."""
        options.setdefault("limit", SEARCH_LIMIT)
        return self.search.search_by_query(query, **options)

    def validate_address(self, address: Mapping[str, Any]) -> ValidationResult:
        return self.validator.validate_address(address)

    def batch_validate(self, addresses: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
        return self.validator.batch_validate(addresses)

    def get_statistics(self) -> Statistics:
        return self.store.get_statistics()

    def get_all_postal_codes(self) -> List[str]:
        return self.postal.get_all_postal_codes()

    def is_valid_postal_code(self, postal_code: str) -> bool:
        return self.postal.is_valid_postal_code(postal_code)

    def validate_postal_code_with_suggestions(self, postal_code: str) -> Dict[str, Any]:
        return self.postal.validate_postal_code_with_suggestions(postal_code)

    def get_districts_by_province(self) -> Dict[str, List[District]]:
        return self.districts.get_districts_by_province()

    def get_district_province(self, district_name: str) -> Optional[str]:
        return self.districts.get_district_province(district_name)

    def get_districts_with_postal_counts(self) -> List[Dict[str, Any]]:
        """Each district with its post office count and main office postal code."""
        rows = []
        for district in self.get_districts():
            main_office = next((po for po in district.post_offices if po.is_main_office), None)
            rows.append({
                "name": district.name,
                "postal_code_count": district.post_office_count,
                "main_postal_code": main_office.postal_code if main_office else None,
            })
        return rows

    def get_district_analytics(self, district_name: str) -> Optional[Dict[str, Any]]:
        """
        Detailed profile of one district.

        Returns:
            Dictionary with the district record, province, is_capital,
            rankings, postal_code_range and office_types; None if unknown
        """
        district = self.get_district(district_name)
        if not district:
            return None

        ranked = self.districts.get_districts_with_most_post_offices(limit=None)
        stats = self.districts.get_district_stats(district.name)

        return {
            **district.to_dict(),
            "province": get_province(district.name),
            "is_capital": district.name == CAPITAL_DISTRICT,
            "rankings": {
                "post_office_count": [d.name for d in ranked].index(district.name) + 1,
                "total_districts": len(ranked),
            },
            "postal_code_range": stats["postal_code_range"],
            "office_types": stats["post_office_types"],
        }


__all__ = [
    "NepalGeoHelper",
    "DatasetStore",
    "load_store",
    "GeoSearch",
    "LocationValidator",
    "DistrictUtils",
    "PostalUtils",
    "District",
    "PostOffice",
    "PostalInfo",
    "SearchResult",
    "SearchScope",
    "SortBy",
    "MatchType",
    "Statistics",
    "ValidationResult",
    "ExportResult",
    "DataIntegrityError",
    "NepalGeoError",
]
