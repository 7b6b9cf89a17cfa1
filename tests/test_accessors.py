"""Tests for district and postal helpers and the package facade."""
import json
import pytest
from nepal_geo import CAPITAL_DISTRICT, NepalGeoHelper
from nepal_geo.core.errors import DataIntegrityError


def test_district_lookups(district_utils):
    """Test basic district accessors."""
    assert district_utils.get_total_districts() == 75
    names = district_utils.get_district_names()
    assert names == sorted(names)
    assert district_utils.exists("kaski")
    assert not district_utils.exists("Kathmandoo")
    assert district_utils.search_districts("ktm")[0].name == "Kathmandu"


def test_district_stats(district_utils):
    """Test per-district summary."""
    stats = district_utils.get_district_stats("Kathmandu")
    assert stats["total_post_offices"] == 7
    assert stats["post_office_types"] == {"G.P.O.": 1, "A.P.O.": 6}
    assert stats["has_main_post_office"]
    assert stats["postal_code_range"] == {"min": 44600, "max": 44618, "count": 7}
    assert district_utils.get_district_stats("Nowhere") is None


def test_districts_ranked_by_post_offices(district_utils):
    """Most and least served districts."""
    most = district_utils.get_districts_with_most_post_offices(limit=3)
    least = district_utils.get_districts_with_least_post_offices(limit=3)
    assert most[0].name == "Kathmandu"
    assert most[0].post_office_count >= most[-1].post_office_count
    assert least[0].post_office_count <= least[-1].post_office_count


def test_districts_by_province(district_utils):
    """Every district belongs to one of the seven provinces."""
    grouped = district_utils.get_districts_by_province()
    assert "Unknown" not in grouped
    assert len(grouped) == 7
    assert sum(len(districts) for districts in grouped.values()) == 75
    assert district_utils.get_district_province("kathmandu") == "Bagmati"
    assert district_utils.get_district_province("Nowhere") is None


def test_districts_by_post_office_type(district_utils):
    """Test office type filter."""
    districts = district_utils.get_districts_by_post_office_type("W.R.P.D.")
    assert [d.name for d in districts] == ["Kaski"]


def test_district_export(district_utils):
    """Districts export as full JSON records or CSV summaries."""
    exported = district_utils.export_data("json")
    assert len(json.loads(exported.content)) == 75

    lines = district_utils.export_data("csv").content.splitlines()
    assert lines[0] == "District Name,Post Office Count,Main Post Office Type"
    assert len(lines) == 76

    assert not district_utils.export_data("yaml").ok


def test_postal_info(postal_utils):
    """Test postal code details."""
    info = postal_utils.get_postal_info("33700")
    assert info.post_office == "Pokhara"
    assert info.district == "Kaski"
    assert info.is_main_office
    assert postal_utils.get_postal_info("00000") is None
    assert postal_utils.get_postal_info(33700) is None


def test_post_office_accessors(postal_utils):
    """Test post office listings."""
    assert [po.name for po in postal_utils.get_post_offices_by_district("chitwan")] == [
        "Bharatpur", "Narayangarh", "Tandi",
    ]
    assert postal_utils.get_post_offices_by_district("Nowhere") == []
    assert len(postal_utils.get_main_post_offices()) == 75
    assert all(po.type == "A.P.O." for po in postal_utils.get_post_offices_by_type("A.P.O."))
    assert postal_utils.get_total_post_offices() == len(postal_utils.get_all_postal_codes())


def test_postal_codes_in_range(postal_utils):
    """Test numeric code range."""
    codes = [po.postal_code for po in postal_utils.get_postal_codes_in_range("44600", "44601")]
    assert codes == ["44600", "44601"]
    assert postal_utils.get_postal_codes_in_range("44700", "44600") == []
    assert postal_utils.get_postal_codes_in_range("abc", "44600") == []


def test_nearest_postal_codes(postal_utils):
    """Nearest codes exclude the code itself."""
    nearest = postal_utils.get_nearest_postal_codes("44600", limit=1)
    assert nearest[0]["postal_code"] == "44601"
    assert nearest[0]["distance"] == 1


def test_postal_statistics(postal_utils):
    """Test counts by type and code prefix."""
    stats = postal_utils.get_postal_statistics()
    assert stats["unique_districts"] == 75
    assert stats["post_office_types"]["G.P.O."] == 1
    assert "Kathmandu" in stats["code_ranges"]["44"]["districts"]


def test_short_postal_code_suggestions(postal_utils):
    """A four-digit code is reported invalid with a zero-padded suggestion."""
    result = postal_utils.validate_postal_code_with_suggestions("4460")
    assert not result["is_valid"]
    assert result["message"] == "Nepal postal codes must be exactly 5 digits"
    assert result["suggestions"][0] == "04460"
    assert "44600" in result["suggestions"]
    assert len(result["suggestions"]) <= 5


def test_valid_postal_code_with_suggestions(postal_utils):
    """Test a known code."""
    result = postal_utils.validate_postal_code_with_suggestions("44600")
    assert result["is_valid"]
    assert result["info"].district == "Kathmandu"
    assert result["suggestions"] == []


def test_unknown_postal_code_suggestions(postal_utils):
    """Unknown codes get neighbouring codes."""
    result = postal_utils.validate_postal_code_with_suggestions("44602")
    assert not result["is_valid"]
    assert "44600" in result["suggestions"]
    assert "44602" not in result["suggestions"]


def test_postal_export(postal_utils):
    """Post offices export with filters."""
    content = postal_utils.export_data("csv", district="Kaski").content
    lines = content.splitlines()
    assert lines[0] == "Post Office,Postal Code,District,Type"
    assert len(lines) == 4

    records = json.loads(postal_utils.export_data(office_type="G.P.O.").content)
    assert records == [{"name": "Kathmandu", "postal_code": "44600", "type": "G.P.O.", "district": "Kathmandu"}]


def test_helper_search_and_validate(helper):
    """Test the facade."""
    results = helper.search_locations("pokhara")
    assert results[0].name == "Pokhara"
    assert helper.validate_address({"district": "Kathmandu", "postalCode": "44600"}).is_valid
    assert helper.is_valid_postal_code("44600")
    assert not helper.is_valid_postal_code("4460")
    assert helper.get_statistics().total_districts == 75


def test_helper_analytics(helper):
    """Test district analytics."""
    analytics = helper.get_district_analytics("kathmandu")
    assert analytics["name"] == CAPITAL_DISTRICT
    assert analytics["is_capital"]
    assert analytics["province"] == "Bagmati"
    assert analytics["rankings"] == {"post_office_count": 1, "total_districts": 75}
    assert helper.get_district_analytics("Nowhere") is None

    counts = {row["name"]: row for row in helper.get_districts_with_postal_counts()}
    assert counts["Kathmandu"]["main_postal_code"] == "44600"
    assert counts["Kaski"]["postal_code_count"] == 3


def test_helper_loads_csv(sample_csv):
    """The facade loads its own store from a CSV path."""
    helper = NepalGeoHelper(csv_path=sample_csv)
    assert helper.get_district("chitwan").post_office_count == 2


def test_helper_missing_data(tmp_path):
    """Initialization fails when the data cannot be loaded."""
    with pytest.raises(DataIntegrityError):
        NepalGeoHelper(csv_path=tmp_path / "missing.csv")


def test_postal_export_non_string_district(postal_utils):
    """A district filter that is not a string gives an error result."""
    exported = postal_utils.export_data("json", district=5)
    assert not exported.ok
    assert exported.error == "District filter must be a string"
