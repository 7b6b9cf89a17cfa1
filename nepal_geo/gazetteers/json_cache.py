"""JSON cache of parsed postal records."""
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Sequence
from nepal_geo.core.config import SOURCE_COLUMNS
from nepal_geo.core.errors import DataIntegrityError
from nepal_geo.core.models import RawRecord
from nepal_geo.gazetteers.base import DatasetSource


class JSONCacheSource(DatasetSource):
    """
    Postal records serialized as ``{"postal_data": [...], "metadata": {...}}``.

    Each entry of ``postal_data`` is an object keyed by the CSV column names.
    """

    def __init__(self, cache_path: Path):
        self.cache_path = Path(cache_path)

    def exists(self) -> bool:
        return self.cache_path.exists()

    def load(self) -> List[RawRecord]:
        """Load records from the cache file."""
        try:
            with open(self.cache_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise DataIntegrityError(f"Could not read postal data cache {self.cache_path}: {e}") from e

        entries = data.get("postal_data") if isinstance(data, dict) else None
        if not isinstance(entries, list):
            raise DataIntegrityError("Invalid postal data structure: 'postal_data' list missing")

        columns = list(SOURCE_COLUMNS.values())
        records = []
        for index, entry in enumerate(entries):
            if not isinstance(entry, dict) or not all(col in entry for col in columns):
                raise DataIntegrityError("Cache entry is missing required fields", row=index)
            records.append(tuple(str(entry[col]).strip() for col in columns))

        return records

    def write(self, records: Sequence[RawRecord], source: str = "Nepal Postal Service"):
        """
        Serialize records to the cache file.

        Args:
            records: Raw records to store
            source: Description of where the records came from
        """
        columns = list(SOURCE_COLUMNS.values())
        data = {
            "postal_data": [dict(zip(columns, record)) for record in records],
            "metadata": {
                "total_records": len(records),
                "last_updated": datetime.now(timezone.utc).isoformat(),
                "source": source,
            },
        }

        self.cache_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.cache_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def get_name(self) -> str:
        """Get provider name."""
        return f"JSON cache ({self.cache_path.name})"
