"""Text normalization utilities for district names and search queries."""
import math
import re
from typing import Any, Dict, Mapping


# Raw spellings found in the postal records -> canonical district name
DISTRICT_CORRECTIONS = {
    "Chitawan": "Chitwan",
    "Kaverpalanchok": "Kavrepalanchok",
    "Makabanpur": "Makawanpur",
    "Taplajung": "Taplejung",
    "Kailal": "Kailali",
    "Syanja": "Syangja",
}

# camelCase address keys accepted on input
ADDRESS_KEY_ALIASES = {
    "postOffice": "post_office",
    "postalCode": "postal_code",
}

POSTAL_CODE_PATTERN = re.compile(r"[0-9]{5}")


def normalize_district_name(district: str) -> str:
    """
    Map a raw district spelling to its canonical form.

    Unknown spellings are returned trimmed and otherwise untouched, so they
    become districts of their own.
    """
    normalized = district.strip()
    return DISTRICT_CORRECTIONS.get(normalized, normalized)


def normalize_text(text: str) -> str:
    """Lowercase and trim text for case-insensitive comparison."""
    if not text:
        return ""
    return text.strip().lower()


def is_postal_code(text: str) -> bool:
    """True if text is exactly five ASCII digits after trimming."""
    if not isinstance(text, str):
        return False
    return POSTAL_CODE_PATTERN.fullmatch(text.strip()) is not None


def normalize_address(address: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a copy of the address with camelCase keys folded to snake_case."""
    normalized = {}
    for key, value in address.items():
        canonical = ADDRESS_KEY_ALIASES.get(key, key)
        # An explicit snake_case key wins over its alias
        if canonical in normalized and key != canonical:
            continue
        normalized[canonical] = value
    return normalized


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves upwards instead of to the nearest even number."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor
