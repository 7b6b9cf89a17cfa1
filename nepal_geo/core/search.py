"""Search over districts and post offices with ranked, fuzzy matching."""
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union
from nepal_geo.core.export import export_records, flatten_rows
from nepal_geo.core.fuzzy import relevance
from nepal_geo.core.models import (
    ExportResult,
    MatchType,
    PostOffice,
    SearchResult,
    SearchScope,
    SortBy,
)
from nepal_geo.core.normalization import is_postal_code, normalize_text
from nepal_geo.core.store import DatasetStore
from nepal_geo.utils.logging import log_structured


# Engine results must score strictly above this (0-100 scale)
ENGINE_MIN_RELEVANCE = 20
# Score given to a post office whose postal code contains the query
POSTAL_CODE_RELEVANCE = 90

MATCH_TYPE_PRIORITY = {
    MatchType.EXACT: 5,
    MatchType.EXACT_POSTAL: 5,
    MatchType.PREFIX: 4,
    MatchType.CONTAINS: 3,
    MatchType.POSTAL_CODE: 2,
    MatchType.FUZZY: 1,
    MatchType.ADVANCED_SEARCH: 1,
}

RESULT_CSV_COLUMNS = {
    "type": "Type",
    "name": "Name",
    "district": "District",
    "postal_code": "Postal Code",
    "relevance": "Relevance",
    "match_type": "Match Type",
}

DISTRICT_TYPE = "district"
POST_OFFICE_TYPE = "postOffice"

PostalCodeRange = Union[Tuple[Any, Any], Mapping[str, Any]]


def _coerce_enum(enum_cls, value):
    try:
        return enum_cls(value)
    except ValueError:
        return None


def _is_query(query: Any) -> bool:
    return isinstance(query, str) and bool(query.strip())


def _reject(operation: str, reason: str, **fields) -> List:
    log_structured("warning", f"{operation} rejected input", operation=operation, reason=reason, **fields)
    return []


class GeoSearch:
    """Query router over an immutable dataset store."""

    def __init__(self, store: DatasetStore):
        """
        Initialize search.

        Args:
            store: DatasetStore instance
        """
        self.store = store

    # ------------------------------------------------------------------
    # Engine
    # ------------------------------------------------------------------
    def search(self, query: str, scope: Union[SearchScope, str] = SearchScope.ALL) -> List[SearchResult]:
        """
        Score every district and/or post office against the query.

        District relevance comes from the name; post office relevance is the
        better of the name score and a postal code substring hit. Results
        scoring 20 or less are dropped. No match type is assigned here.

        Args:
            query: Search text
            scope: "all", "district" or "postOffice"

        Returns:
            List of SearchResult sorted by relevance descending
        """
        scope = _coerce_enum(SearchScope, scope)
        if scope is None or not _is_query(query):
            return []

        normalized_query = normalize_text(query)
        results: List[SearchResult] = []

        if scope.includes_districts:
            for district in self.store.get_all_districts():
                score = relevance(district.name, normalized_query)
                if score > ENGINE_MIN_RELEVANCE:
                    results.append(SearchResult(
                        type=DISTRICT_TYPE,
                        name=district.name,
                        relevance=score,
                    ))

        if scope.includes_post_offices:
            for po in self.store.get_all_post_offices():
                name_score = relevance(po.name, normalized_query)
                postal_score = POSTAL_CODE_RELEVANCE if query in po.postal_code else 0
                score = max(name_score, postal_score)
                if score > ENGINE_MIN_RELEVANCE:
                    results.append(SearchResult(
                        type=POST_OFFICE_TYPE,
                        name=po.name,
                        district=po.district,
                        postal_code=po.postal_code,
                        relevance=score,
                    ))

        results.sort(key=lambda r: r.relevance, reverse=True)
        return results

    # ------------------------------------------------------------------
    # Public search API
    # ------------------------------------------------------------------
    def search_by_query(
        self,
        query: str,
        limit: int = 10,
        min_relevance: int = 0,
        scope: Union[SearchScope, str] = SearchScope.ALL,
        sort_by: Union[SortBy, str] = SortBy.RELEVANCE
    ) -> List[SearchResult]:
        """
        Search districts, post offices and postal codes in one go.

        A query of exactly five digits is looked up as a postal code first and
        the hit is placed ahead of everything else, whatever the scope.

        Args:
            query: Search text
            limit: Maximum number of results, applied after ranking
            min_relevance: Minimum relevance on the 0-100 scale
            scope: "all", "district" or "postOffice"
            sort_by: "relevance" (match type, then score), "name" or "district"

        Returns:
            List of SearchResult with match types assigned
        """
        if not _is_query(query):
            return _reject("search_by_query", "query must be a non-empty string")

        scope_value = _coerce_enum(SearchScope, scope)
        sort_value = _coerce_enum(SortBy, sort_by)
        if scope_value is None:
            return _reject("search_by_query", "unknown scope", scope=str(scope))
        if sort_value is None:
            return _reject("search_by_query", "unknown sort order", sort_by=str(sort_by))

        results: List[SearchResult] = []

        stripped = query.strip()
        if is_postal_code(stripped):
            po = self.search_by_postal_code(stripped)
            if po:
                results.append(SearchResult(
                    type=POST_OFFICE_TYPE,
                    name=po.name,
                    district=po.district,
                    postal_code=po.postal_code,
                    relevance=100,
                    match_type=MatchType.EXACT_POSTAL,
                ))

        for result in self.search(query, scope_value):
            if result.relevance >= min_relevance:
                result.match_type = self.determine_match_type(query, result)
                results.append(result)

        results = self.remove_duplicates(results)
        results = self.sort_results(results, sort_value)

        return results[:limit]

    def search_districts(self, query: str, limit: int = 5, include_stats: bool = False) -> List[SearchResult]:
        """
        Search districts only.

        Args:
            query: Search text
            limit: Maximum number of results
            include_stats: Attach post office count and main office flag

        Returns:
            List of SearchResult in relevance order
        """
        if not _is_query(query):
            return _reject("search_districts", "query must be a non-empty string")

        results = []
        for result in self.search(query, SearchScope.DISTRICT)[:limit]:
            result.match_type = self.determine_match_type(query, result)
            if include_stats:
                district = self.store.get_district_by_name(result.name)
                if district:
                    result.stats = {
                        "post_office_count": district.post_office_count,
                        "has_main_office": district.has_main_office,
                    }
            results.append(result)

        return results

    def search_post_offices(
        self,
        query: str,
        limit: int = 10,
        district: Optional[str] = None,
        office_type: Optional[str] = None,
        include_details: bool = False
    ) -> List[SearchResult]:
        """
        Search post offices only.

        Args:
            query: Search text
            limit: Maximum number of results
            district: Keep only offices of this district (case-insensitive)
            office_type: Keep only offices of this type, e.g. "D.P.O."
            include_details: Attach office type and main office flag

        Returns:
            List of SearchResult in relevance order
        """
        if not _is_query(query):
            return _reject("search_post_offices", "query must be a non-empty string")

        if district is not None and not isinstance(district, str):
            return _reject("search_post_offices", "district must be a string", district=str(district))

        results = self.search(query, SearchScope.POST_OFFICE)

        if district:
            district_key = normalize_text(district)
            results = [r for r in results if r.district and r.district.lower() == district_key]

        if office_type:
            results = [r for r in results if getattr(self._post_office_for(r), "type", None) == office_type]

        results = results[:limit]
        for result in results:
            result.match_type = self.determine_match_type(query, result)
            if include_details:
                po = self._post_office_for(result)
                if po:
                    result.office_type = po.type
                    result.is_main_office = po.is_main_office

        return results

    def search_by_postal_code(self, postal_code: str) -> Optional[PostOffice]:
        """Exact postal code lookup."""
        return self.store.get_post_office_by_code(postal_code)

    def advanced_search(
        self,
        query: Optional[str] = None,
        district: Optional[str] = None,
        postal_code_range: Optional[PostalCodeRange] = None,
        post_office_type: Optional[str] = None,
        limit: int = 20
    ) -> List[SearchResult]:
        """
        Filter post offices by several criteria at once.

        All given filters must hold. Results are scored against the query
        when one is given (otherwise every survivor scores 100) and sorted by
        score alone.

        Args:
            query: Text found in the office name, district or postal code
            district: Substring of the district name (case-insensitive)
            postal_code_range: Inclusive (start, end) codes, or a mapping with
                "start" and "end"
            post_office_type: Exact post office type
            limit: Maximum number of results

        Returns:
            List of SearchResult with match type "advanced_search"
        """
        if query is not None and not isinstance(query, str):
            return _reject("advanced_search", "query must be a string")
        if district is not None and not isinstance(district, str):
            return _reject("advanced_search", "district must be a string", district=str(district))

        post_offices = self.store.get_all_post_offices()

        if district:
            district_key = district.lower()
            post_offices = [po for po in post_offices if district_key in po.district.lower()]

        if post_office_type:
            post_offices = [po for po in post_offices if po.type == post_office_type]

        if postal_code_range:
            bounds = self._parse_range(postal_code_range)
            if bounds is None:
                return _reject("advanced_search", "postal code range must hold two numeric codes",
                               postal_code_range=str(postal_code_range))
            start, end = bounds
            post_offices = [po for po in post_offices if start <= int(po.postal_code) <= end]

        if query:
            normalized_query = query.lower()
            post_offices = [
                po for po in post_offices
                if normalized_query in po.name.lower()
                or normalized_query in po.district.lower()
                or query in po.postal_code
            ]

        results = [
            SearchResult(
                type=POST_OFFICE_TYPE,
                name=po.name,
                district=po.district,
                postal_code=po.postal_code,
                office_type=po.type,
                relevance=relevance(po.name, query) if query else 100,
                match_type=MatchType.ADVANCED_SEARCH,
            )
            for po in post_offices
        ]
        results.sort(key=lambda r: r.relevance, reverse=True)

        return results[:limit]

    def get_suggestions(
        self,
        partial_query: str,
        limit: int = 5,
        scope: Union[SearchScope, str] = SearchScope.ALL
    ) -> List[str]:
        """
        Names starting with what the user has typed so far.

        Args:
            partial_query: At least two characters
            limit: Maximum number of names
            scope: "all", "district" or "postOffice"

        Returns:
            Distinct names, districts before post offices
        """
        if not isinstance(partial_query, str) or len(partial_query) < 2:
            return []

        scope = _coerce_enum(SearchScope, scope)
        if scope is None:
            return []

        prefix = partial_query.lower()
        names = []
        if scope.includes_districts:
            names.extend(d.name for d in self.store.get_all_districts())
        if scope.includes_post_offices:
            names.extend(po.name for po in self.store.get_all_post_offices())

        suggestions = dict.fromkeys(name for name in names if name.lower().startswith(prefix))
        return list(suggestions)[:limit]

    # ------------------------------------------------------------------
    # Ranking helpers
    # ------------------------------------------------------------------
    @staticmethod
    def determine_match_type(query: str, result: SearchResult) -> MatchType:
        """Classify why a result matched: exact, prefix, contains, postal code or fuzzy."""
        literal_query = query.strip()
        normalized_query = literal_query.lower()
        normalized_name = result.name.lower()

        if normalized_name == normalized_query:
            return MatchType.EXACT
        if normalized_name.startswith(normalized_query):
            return MatchType.PREFIX
        if normalized_query in normalized_name:
            return MatchType.CONTAINS
        if result.postal_code and literal_query in result.postal_code:
            return MatchType.POSTAL_CODE
        return MatchType.FUZZY

    @staticmethod
    def remove_duplicates(results: Sequence[SearchResult]) -> List[SearchResult]:
        """Drop repeated (type, name, district, postal code) entries, keeping the first."""
        seen = set()
        unique = []
        for result in results:
            if result.dedup_key in seen:
                continue
            seen.add(result.dedup_key)
            unique.append(result)
        return unique

    @staticmethod
    def sort_results(results: Sequence[SearchResult], sort_by: Union[SortBy, str] = SortBy.RELEVANCE) -> List[SearchResult]:
        """
        Order results.

        "relevance" ranks by match type priority, then by score; "name" and
        "district" are plain alphabetical orders.
        """
        sort_by = _coerce_enum(SortBy, sort_by) or SortBy.RELEVANCE

        if sort_by == SortBy.NAME:
            return sorted(results, key=lambda r: r.name.casefold())
        if sort_by == SortBy.DISTRICT:
            return sorted(results, key=lambda r: ((r.district or "").casefold(), r.name.casefold()))

        return sorted(
            results,
            key=lambda r: (-MATCH_TYPE_PRIORITY.get(r.match_type, 0), -r.relevance),
        )

    def export_results(self, results: Sequence[SearchResult], fmt: str = "json") -> ExportResult:
        """Export search results as JSON or CSV."""
        return export_records(flatten_rows(results), fmt, csv_columns=RESULT_CSV_COLUMNS)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _post_office_for(self, result: SearchResult) -> Optional[PostOffice]:
        return self.store.get_post_office_by_code(result.postal_code) if result.postal_code else None

    @staticmethod
    def _parse_range(postal_code_range: PostalCodeRange) -> Optional[Tuple[int, int]]:
        if isinstance(postal_code_range, Mapping):
            start, end = postal_code_range.get("start"), postal_code_range.get("end")
        elif isinstance(postal_code_range, (tuple, list)) and len(postal_code_range) == 2:
            start, end = postal_code_range
        else:
            return None

        try:
            return int(start), int(end)
        except (TypeError, ValueError):
            return None
