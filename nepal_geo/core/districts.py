"""District lookups and statistics."""
from collections import Counter
from typing import Any, Dict, List, Optional
from nepal_geo.core.export import export_records
from nepal_geo.core.models import District, ExportResult, SearchScope
from nepal_geo.core.provinces import PROVINCE_DISTRICTS, get_province
from nepal_geo.core.search import GeoSearch
from nepal_geo.core.store import DatasetStore


DISTRICT_CSV_COLUMNS = {
    "name": "District Name",
    "post_office_count": "Post Office Count",
    "main_post_office_type": "Main Post Office Type",
}


class DistrictUtils:
    """Read-only helpers over the districts of a dataset store."""

    def __init__(self, store: DatasetStore, search: Optional[GeoSearch] = None):
        self.store = store
        self.search = search or GeoSearch(store)

    def get_all_districts(self) -> List[District]:
        return self.store.get_all_districts()

    def get_district_by_name(self, name: str) -> Optional[District]:
        """Case-insensitive exact lookup; None if unknown."""
        return self.store.get_district_by_name(name)

    def get_total_districts(self) -> int:
        return self.store.get_statistics().total_districts

    def get_district_names(self) -> List[str]:
        return sorted(d.name for d in self.get_all_districts())

    def search_districts(self, query: str) -> List[District]:
        """Districts matching the query, best match first."""
        results = self.search.search(query, SearchScope.DISTRICT)
        districts = (self.get_district_by_name(r.name) for r in results)
        return [d for d in districts if d is not None]

    def get_districts_with_most_post_offices(self, limit: int = 5) -> List[District]:
        return sorted(self.get_all_districts(), key=lambda d: d.post_office_count, reverse=True)[:limit]

    def get_districts_with_least_post_offices(self, limit: int = 5) -> List[District]:
        return sorted(self.get_all_districts(), key=lambda d: d.post_office_count)[:limit]

    def exists(self, name: str) -> bool:
        return self.get_district_by_name(name) is not None

    def get_district_stats(self, district_name: str) -> Optional[Dict[str, Any]]:
        """
        Summary of a district's post offices.

        Returns:
            Dictionary with name, total_post_offices, post_office_types,
            has_main_post_office and postal_code_range, or None if the
            district is unknown
        """
        district = self.get_district_by_name(district_name)
        if not district:
            return None

        return {
            "name": district.name,
            "total_post_offices": district.post_office_count,
            "post_office_types": dict(Counter(po.type for po in district.post_offices)),
            "has_main_post_office": district.has_main_office,
            "postal_code_range": self.get_postal_code_range(district),
        }

    @staticmethod
    def get_postal_code_range(district: District) -> Dict[str, Optional[int]]:
        codes = sorted(int(po.postal_code) for po in district.post_offices)
        return {
            "min": codes[0] if codes else None,
            "max": codes[-1] if codes else None,
            "count": len(codes),
        }

    def get_districts_by_post_office_type(self, office_type: str) -> List[District]:
        return [
            d for d in self.get_all_districts()
            if any(po.type == office_type for po in d.post_offices)
        ]

    def get_districts_by_province(self) -> Dict[str, List[District]]:
        """
        Districts grouped by province.

        Districts without a known province are grouped under "Unknown".
        """
        grouped: Dict[str, List[District]] = {province: [] for province in PROVINCE_DISTRICTS}
        for district in self.get_all_districts():
            grouped.setdefault(get_province(district.name) or "Unknown", []).append(district)
        return grouped

    def get_district_province(self, district_name: str) -> Optional[str]:
        district = self.get_district_by_name(district_name)
        return get_province(district.name) if district else None

    def export_data(self, fmt: str = "json") -> ExportResult:
        """Export all districts as JSON (full records) or CSV (one summary row each)."""
        districts = self.get_all_districts()
        if isinstance(fmt, str) and fmt.lower() == "csv":
            rows = []
            for district in districts:
                main_office = next((po for po in district.post_offices if po.is_main_office), district.post_offices[0])
                rows.append({
                    "name": district.name,
                    "post_office_count": district.post_office_count,
                    "main_post_office_type": main_office.type,
                })
            return export_records(rows, fmt, csv_columns=DISTRICT_CSV_COLUMNS)

        return export_records([d.to_dict() for d in districts], fmt)
