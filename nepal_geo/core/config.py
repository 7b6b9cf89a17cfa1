"""Configuration management for the Nepal postal lookup package."""
import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Base paths
PACKAGE_ROOT = Path(__file__).parent.parent
PROJECT_ROOT = PACKAGE_ROOT.parent
BUNDLED_DATA_PATH = PACKAGE_ROOT / "data" / "postal_data.csv"

DATA_PATH = Path(os.getenv("NEPAL_GEO_DATA_PATH", BUNDLED_DATA_PATH))
_cache_path = os.getenv("NEPAL_GEO_CACHE_PATH")
CACHE_PATH: Optional[Path] = Path(_cache_path) if _cache_path else None

# Search settings
SEARCH_LIMIT: int = int(os.getenv("SEARCH_LIMIT", "10"))
SUGGESTION_LIMIT: int = int(os.getenv("SUGGESTION_LIMIT", "5"))
SUGGESTION_THRESHOLD: float = float(os.getenv("SUGGESTION_THRESHOLD", "0.3"))

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# Column names of the flat postal record source
SOURCE_COLUMNS = {
    "district": "District",
    "post_office": "Post Office",
    "postal_code": "Postal/Pin Code",
    "type": "Post Office Type",
}
