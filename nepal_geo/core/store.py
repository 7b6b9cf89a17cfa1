"""In-memory store of districts and post offices."""
from dataclasses import replace
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, List, Optional, Tuple
from nepal_geo.core.config import DATA_PATH, CACHE_PATH
from nepal_geo.core.errors import DataIntegrityError
from nepal_geo.core.models import (
    District,
    PostOffice,
    RawRecord,
    Statistics,
    POST_OFFICE_TYPES,
)
from nepal_geo.core.normalization import (
    POSTAL_CODE_PATTERN,
    normalize_district_name,
    normalize_text,
    round_half_up,
)
from nepal_geo.core.provinces import get_province
from nepal_geo.gazetteers.csv_provider import CSVSource
from nepal_geo.gazetteers.json_cache import JSONCacheSource
from nepal_geo.utils.logging import log_error, log_structured
from nepal_geo.utils.timing import Timer


class DatasetStore:
    """
    Read-only store of postal data.

    Built once from raw records; district names are normalized through the
    correction table and every record is checked before anything is stored.
    """

    def __init__(self, records: Iterable[RawRecord]):
        """
        Build the store.

        Args:
            records: (district, post office, postal code, type) tuples

        Raises:
            DataIntegrityError: If a record is malformed, a postal code is
                duplicated, or there are no records at all
        """
        post_offices: List[PostOffice] = []
        grouped: Dict[str, List[PostOffice]] = {}
        by_code: Dict[str, PostOffice] = {}
        district_keys: Dict[str, str] = {}

        for index, record in enumerate(records):
            po = self._parse_record(record, index)
            # Spellings differing only by case share the first-seen name
            canonical = district_keys.setdefault(po.district.lower(), po.district)
            if canonical != po.district:
                po = replace(po, district=canonical)
            if po.postal_code in by_code:
                raise DataIntegrityError(
                    f"Duplicate postal code {po.postal_code} "
                    f"({by_code[po.postal_code].name} and {po.name})",
                    row=index,
                )
            by_code[po.postal_code] = po
            post_offices.append(po)
            grouped.setdefault(po.district, []).append(po)

        if not post_offices:
            raise DataIntegrityError("Postal data contains no records")

        self._post_offices: Tuple[PostOffice, ...] = tuple(post_offices)
        self._districts = MappingProxyType({
            name: District(name=name, post_offices=tuple(offices))
            for name, offices in grouped.items()
        })
        self._district_keys = MappingProxyType(district_keys)
        self._by_code = MappingProxyType(by_code)

    @staticmethod
    def _parse_record(record: RawRecord, index: int) -> PostOffice:
        if not isinstance(record, (tuple, list)) or len(record) < 4:
            raise DataIntegrityError("Record must have four fields", row=index)

        district, name, postal_code, office_type = (
            field.strip() if isinstance(field, str) else field for field in record[:4]
        )
        for label, value in (("district", district), ("post office", name),
                             ("postal code", postal_code), ("post office type", office_type)):
            if not isinstance(value, str) or not value:
                raise DataIntegrityError(f"Missing {label}", row=index)

        if not POSTAL_CODE_PATTERN.fullmatch(postal_code):
            raise DataIntegrityError(f"Malformed postal code '{postal_code}'", row=index)
        if office_type not in POST_OFFICE_TYPES:
            raise DataIntegrityError(f"Unknown post office type '{office_type}'", row=index)

        return PostOffice(
            name=name,
            postal_code=postal_code,
            type=office_type,
            district=normalize_district_name(district),
        )

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    def get_all_districts(self) -> List[District]:
        """All districts in first-seen order."""
        return list(self._districts.values())

    def get_district_by_name(self, name: str) -> Optional[District]:
        """Case-insensitive exact lookup of a canonical district name."""
        if not isinstance(name, str):
            return None
        key = self._district_keys.get(normalize_text(name))
        return self._districts[key] if key else None

    def get_all_post_offices(self) -> List[PostOffice]:
        """All post offices in source order."""
        return list(self._post_offices)

    def get_post_office_by_code(self, postal_code: str) -> Optional[PostOffice]:
        if not isinstance(postal_code, str):
            return None
        return self._by_code.get(postal_code)

    def get_statistics(self) -> Statistics:
        total_districts = len(self._districts)
        total_post_offices = len(self._post_offices)
        return Statistics(
            total_districts=total_districts,
            total_post_offices=total_post_offices,
            average_post_offices_per_district=round_half_up(
                total_post_offices / total_districts, 2
            ),
        )

    def __len__(self) -> int:
        return len(self._post_offices)


def load_store(csv_path: Optional[Path] = None, cache_path: Optional[Path] = None) -> DatasetStore:
    """
    Build the dataset store, preferring the JSON cache when present.

    When the cache is missing the CSV is parsed and, if a cache path is
    configured, the parsed records are written there for the next load.

    Args:
        csv_path: CSV source path (defaults to the configured data path)
        cache_path: JSON cache path (defaults to the configured cache path)

    Returns:
        DatasetStore

    Raises:
        DataIntegrityError: If neither source yields valid data
    """
    csv_source = CSVSource(csv_path or DATA_PATH)
    cache_path = cache_path or CACHE_PATH
    cache = JSONCacheSource(cache_path) if cache_path else None

    with Timer("load_postal_data"):
        try:
            if cache is not None and cache.exists():
                try:
                    store = DatasetStore(cache.load())
                    source_name = cache.get_name()
                except DataIntegrityError as e:
                    log_structured(
                        "warning",
                        "Postal data cache unusable, rebuilding from CSV",
                        cache_path=str(cache.cache_path),
                        reason=str(e),
                    )
                    store, source_name = _load_from_csv(csv_source, cache)
            else:
                store, source_name = _load_from_csv(csv_source, cache)
        except DataIntegrityError as e:
            log_error(e, {
                "module": "store",
                "function": "load_store",
                "csv_path": str(csv_source.csv_path),
            })
            raise

    stats = store.get_statistics()
    log_structured(
        "info",
        "Postal data loaded",
        source=source_name,
        districts=stats.total_districts,
        post_offices=stats.total_post_offices,
    )

    # Unrecognised spellings are kept as districts of their own
    unknown = [d.name for d in store.get_all_districts() if get_province(d.name) is None]
    if unknown:
        log_structured("warning", "Districts not in the province table", districts=unknown)
    return store


def _load_from_csv(csv_source: CSVSource, cache: Optional[JSONCacheSource]) -> Tuple[DatasetStore, str]:
    records = csv_source.load()
    store = DatasetStore(records)
    if cache is not None:
        try:
            cache.write(records, source=csv_source.get_name())
        except OSError as e:
            log_structured(
                "warning",
                "Could not write postal data cache",
                cache_path=str(cache.cache_path),
                reason=str(e),
            )
    return store, csv_source.get_name()
