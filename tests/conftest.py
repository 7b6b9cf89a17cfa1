"""Pytest configuration and fixtures."""
import pytest
from nepal_geo import NepalGeoHelper
from nepal_geo.core.config import BUNDLED_DATA_PATH
from nepal_geo.core.districts import DistrictUtils
from nepal_geo.core.postal import PostalUtils
from nepal_geo.core.search import GeoSearch
from nepal_geo.core.store import DatasetStore
from nepal_geo.core.validator import LocationValidator
from nepal_geo.gazetteers.csv_provider import CSVSource


SAMPLE_CSV = """District,Post Office,Postal/Pin Code,Post Office Type
Kathmandu,Kathmandu,44600,G.P.O.
Kathmandu,"Tribhuvan Airport, Sinamangal",44615,A.P.O.
Lalitpur,Lalitpur,44700,D.P.O.
Chitawan,Narayangarh,44207,A.P.O.
Chitwan,Bharatpur,44200,D.P.O.
"""


@pytest.fixture
def sample_records():
    """Small raw record set, including a misspelt district."""
    return [
        ("Kathmandu", "Kathmandu", "44600", "G.P.O."),
        ("Kathmandu", "Kalimati", "44614", "A.P.O."),
        ("Lalitpur", "Lalitpur", "44700", "D.P.O."),
        ("Chitawan", "Narayangarh", "44207", "A.P.O."),
        ("Chitwan", "Bharatpur", "44200", "D.P.O."),
    ]


@pytest.fixture
def sample_store(sample_records):
    """Store built from the small record set."""
    return DatasetStore(sample_records)


@pytest.fixture
def sample_csv(tmp_path):
    """Write the sample CSV to a temporary file."""
    csv_path = tmp_path / "postal_data.csv"
    csv_path.write_text(SAMPLE_CSV, encoding="utf-8")
    return csv_path


@pytest.fixture(scope="session")
def store():
    """Store built from the bundled postal data."""
    return DatasetStore(CSVSource(BUNDLED_DATA_PATH).load())


@pytest.fixture
def search(store):
    return GeoSearch(store)


@pytest.fixture
def validator(store):
    return LocationValidator(store)


@pytest.fixture
def district_utils(store, search):
    return DistrictUtils(store, search)


@pytest.fixture
def postal_utils(store, search, validator):
    return PostalUtils(store, search, validator)


@pytest.fixture
def helper(store):
    """Facade over the bundled postal data."""
    return NepalGeoHelper(store=store)
