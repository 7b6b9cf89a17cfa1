"""CSV-based postal record source."""
import pandas as pd
from pathlib import Path
from typing import List, Optional
from nepal_geo.core.config import DATA_PATH, SOURCE_COLUMNS
from nepal_geo.core.errors import DataIntegrityError
from nepal_geo.core.models import RawRecord
from nepal_geo.gazetteers.base import DatasetSource


class CSVSource(DatasetSource):
    """Postal records stored as a four-column CSV file."""

    def __init__(self, csv_path: Optional[Path] = None):
        """
        Initialize CSV source.

        Args:
            csv_path: Path to CSV file (defaults to the configured data path)
        """
        self.csv_path = Path(csv_path) if csv_path else DATA_PATH

    def load(self) -> List[RawRecord]:
        """Load records from the CSV file."""
        if not self.csv_path.exists():
            raise DataIntegrityError(f"Postal data file not found: {self.csv_path}")

        try:
            # Codes keep their leading zeros; quoted fields may contain commas
            df = pd.read_csv(
                self.csv_path,
                dtype=str,
                keep_default_na=False,
                skipinitialspace=True,
            )
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError, OSError) as e:
            raise DataIntegrityError(f"Could not parse postal data file {self.csv_path}: {e}") from e

        columns = list(SOURCE_COLUMNS.values())
        missing = [col for col in columns if col not in df.columns]
        if missing:
            raise DataIntegrityError(f"CSV missing required columns: {', '.join(missing)}")

        df = df[columns].fillna("").apply(lambda col: col.str.strip())
        return [tuple(row) for row in df.itertuples(index=False, name=None)]

    def get_name(self) -> str:
        """Get provider name."""
        return f"CSV ({self.csv_path.name})"
