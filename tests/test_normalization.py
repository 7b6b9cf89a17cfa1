"""Tests for text normalization."""
from nepal_geo.core.normalization import (
    is_postal_code,
    normalize_address,
    normalize_district_name,
    normalize_text,
    round_half_up,
)


def test_normalize_district_name():
    """Raw spellings map to canonical district names."""
    assert normalize_district_name("Chitawan") == "Chitwan"
    assert normalize_district_name(" Kaverpalanchok ") == "Kavrepalanchok"
    assert normalize_district_name("Makabanpur") == "Makawanpur"
    assert normalize_district_name("Kathmandu") == "Kathmandu"
    assert normalize_district_name("Newdistrict") == "Newdistrict"


def test_normalize_text():
    """Test text normalization."""
    assert normalize_text("  KathMandu ") == "kathmandu"
    assert normalize_text("") == ""
    assert normalize_text(None) == ""


def test_is_postal_code():
    """Exactly five ASCII digits."""
    assert is_postal_code("44600")
    assert is_postal_code(" 44600 ")
    assert not is_postal_code("4460")
    assert not is_postal_code("446000")
    assert not is_postal_code("44a00")
    assert not is_postal_code("४४६००")
    assert not is_postal_code(44600)


def test_normalize_address():
    """camelCase keys are folded, snake_case wins on conflict."""
    assert normalize_address({"postalCode": "44600", "postOffice": "Kalimati"}) == {
        "postal_code": "44600",
        "post_office": "Kalimati",
    }
    assert normalize_address({"postal_code": "44600", "postalCode": "44700"}) == {"postal_code": "44600"}
    assert normalize_address({"postalCode": "44700", "postal_code": "44600"}) == {"postal_code": "44600"}


def test_round_half_up():
    """Halves round away from zero for positive values."""
    assert round_half_up(2.5) == 3
    assert round_half_up(44.5) == 45
    assert round_half_up(0.125, 2) == 0.13
    assert round_half_up(163 / 75, 2) == 2.17
