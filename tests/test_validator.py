"""Tests for address validation."""
import pytest


def test_valid_district_and_postal_code(validator):
    """Test a matching district and postal code."""
    result = validator.validate_address({"district": "Kathmandu", "postalCode": "44600"})
    assert result.is_valid
    assert result.errors == []
    assert result.completeness.score == 45
    assert not result.completeness.is_complete


def test_invalid_district(validator):
    """Unknown districts are errors."""
    result = validator.validate_address({"district": "InvalidDistrict"})
    assert not result.is_valid
    assert result.errors == ["Invalid district: InvalidDistrict"]
    assert "Fix validation errors before using this address" in result.recommendation


def test_district_suggestions(validator):
    """Near misses get "did you mean" suggestions."""
    result = validator.validate_address({"district": "Kathmandoo"})
    assert not result.is_valid
    assert result.suggestions[0].startswith("Did you mean: Kathmandu")

    suggestions = validator.find_similar_districts("Kathmandoo")
    assert suggestions[0] == "Kathmandu"
    assert len(suggestions) <= 3


def test_district_case_insensitive(validator):
    """Test district validation ignores case."""
    assert validator.validate_district("kathmandu").is_valid
    assert validator.validate_district("  LALITPUR ").is_valid
    assert not validator.validate_district("").is_valid
    assert not validator.validate_district(None).is_valid


@pytest.mark.parametrize("postal_code, error", [
    ("4460", "Nepal postal codes must be exactly 5 digits"),
    ("446000", "Nepal postal codes must be exactly 5 digits"),
    ("44a00", "Nepal postal codes must be exactly 5 digits"),
    ("99999", "Postal code does not exist"),
    ("", "Postal code is required and must be a string"),
    (44600, "Postal code is required and must be a string"),
])
def test_invalid_postal_code(validator, postal_code, error):
    """Test postal code format and existence checks."""
    result = validator.validate_postal_code(postal_code)
    assert not result.is_valid
    assert result.error == error
    assert result.suggestions == []


def test_valid_postal_code(validator):
    """Test postal code lookup."""
    result = validator.validate_postal_code(" 44700 ")
    assert result.is_valid
    assert result.value.district == "Lalitpur"
    assert result.value.post_office == "Lalitpur"


def test_postal_code_in_wrong_district(validator):
    """The postal code must belong to the given district."""
    result = validator.validate_address({"district": "Lalitpur", "postal_code": "44600"})
    assert not result.is_valid
    assert "Postal code 44600 does not belong to district Lalitpur" in result.errors
    assert "Postal code 44600 belongs to Kathmandu" in result.suggestions


def test_postal_code_format_error_in_address(validator):
    """Test a malformed code inside an address."""
    result = validator.validate_address({"district": "Kathmandu", "postal_code": "4460"})
    assert result.errors == ["Invalid postal code: 4460"]


def test_post_office(validator):
    """Post offices are matched within the district."""
    assert validator.validate_address({"district": "Kathmandu", "post_office": "kalimati"}).is_valid

    result = validator.validate_address({"district": "Kathmandu", "postOffice": "Kalimatti"})
    assert not result.is_valid
    assert "Invalid post office: Kalimatti" in result.errors
    assert result.suggestions[0].startswith("Similar post offices: Kalimati")

    # Pokhara exists, but not in Lalitpur
    assert not validator.validate_post_office("Pokhara", "Lalitpur").is_valid
    assert validator.validate_post_office("Pokhara").is_valid


@pytest.mark.parametrize("ward, valid", [
    (1, True),
    (35, True),
    (0, False),
    (36, False),
    ("5", False),
    (True, False),
    (4.0, False),
])
def test_ward(validator, ward, valid):
    """Ward must be an integer from 1 to 35."""
    result = validator.validate_address({"district": "Kathmandu", "ward": ward})
    assert result.is_valid == valid
    if not valid:
        assert result.errors == ["Ward number must be an integer between 1 and 35"]


def test_municipality(validator):
    """Municipality must have at least two characters."""
    assert validator.validate_address({"district": "Kathmandu", "municipality": "Kirtipur"}).is_valid

    result = validator.validate_address({"district": "Kathmandu", "municipality": "K"})
    assert result.errors == ["Municipality name must be a valid string"]

    result = validator.validate_address({"district": "Kathmandu", "municipality": 12})
    assert result.errors == ["Municipality name must be a valid string"]


def test_complete_address(validator):
    """A full address scores 100 and needs no further work."""
    result = validator.validate_address({
        "district": "Kathmandu",
        "municipality": "Kathmandu Metropolitan City",
        "ward": 10,
        "post_office": "Baneshwor",
        "postal_code": "44613",
    })
    assert result.is_valid
    assert result.completeness.score == 100
    assert result.completeness.percentage == "100%"
    assert result.completeness.missing == []
    assert result.recommendation == ["Address is complete and valid"]


def test_empty_address(validator):
    """An empty address is valid but incomplete."""
    result = validator.validate_address({})
    assert result.is_valid
    assert result.warnings == ["District not specified"]
    assert result.completeness.score == 0
    assert result.recommendation == [
        "Add district name for better address identification",
        "Include postal code for accurate mail delivery",
        "Add municipality or post office for precise location",
        "Include ward number for local administrative purposes",
        "Address is valid but could be more complete",
    ]


def test_completeness_weights(validator):
    """Test weighted completeness."""
    completeness = validator.calculate_completeness({"district": "Kaski", "ward": 3, "municipality": ""})
    assert completeness.score == 50
    assert completeness.present == ["district", "ward"]
    assert completeness.missing == ["municipality", "post_office", "postal_code"]


@pytest.mark.parametrize("address", [None, "Kathmandu", ["Kathmandu"]])
def test_non_mapping_address(validator, address):
    """Addresses that are not mappings are invalid, not errors."""
    result = validator.validate_address(address)
    assert not result.is_valid
    assert result.errors


def test_validation_is_repeatable(validator):
    """Validating the same address twice gives the same result."""
    address = {"district": "Lalitpur", "postal_code": "44600", "ward": 40}
    assert validator.validate_address(address).to_dict() == validator.validate_address(address).to_dict()


def test_batch_validate(validator):
    """Each address is validated independently, in order."""
    addresses = [
        {"district": "Kathmandu", "postal_code": "44600"},
        {"district": "Nowhere"},
        "not an address",
    ]
    results = validator.batch_validate(addresses)
    assert [r["index"] for r in results] == [0, 1, 2]
    assert [r["validation"].is_valid for r in results] == [True, False, False]
    assert results[1]["address"] == {"district": "Nowhere"}


def test_batch_validate_requires_sequence(validator):
    """Test non-list batch input."""
    assert validator.batch_validate("Kathmandu") == []
    assert validator.batch_validate(None) == []
    assert validator.batch_validate([]) == []


@pytest.mark.parametrize("district", [123, ["Kathmandu"], 4.5])
def test_post_office_with_non_string_district(validator, district):
    """A district filter that is not a string is reported, not raised."""
    result = validator.validate_post_office("Pokhara", district)
    assert not result.is_valid
    assert result.error == "District filter must be a string"


def test_post_office_with_blank_district(validator):
    """A blank district does not restrict the post office."""
    assert validator.validate_post_office("Pokhara", "   ").is_valid
