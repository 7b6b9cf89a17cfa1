"""Address validation with "did you mean" suggestions."""
from typing import Any, Dict, List, Mapping, Optional, Sequence
from nepal_geo.core.fuzzy import rank_similar
from nepal_geo.core.models import (
    Completeness,
    FieldValidation,
    PostalInfo,
    ValidationResult,
)
from nepal_geo.core.normalization import is_postal_code, normalize_address, normalize_text, round_half_up
from nepal_geo.core.store import DatasetStore
from nepal_geo.utils.logging import log_structured
from nepal_geo.utils.timing import time_function


ADDRESS_FIELDS = ("district", "municipality", "ward", "post_office", "postal_code")

COMPLETENESS_WEIGHTS = {
    "district": 0.3,
    "municipality": 0.2,
    "ward": 0.2,
    "post_office": 0.15,
    "postal_code": 0.15,
}

WARD_MIN = 1
WARD_MAX = 35
MUNICIPALITY_MIN_LENGTH = 2
MAX_SUGGESTIONS = 3
# Post office neighbours gathered before trimming to MAX_SUGGESTIONS
POST_OFFICE_CANDIDATES = 5


class LocationValidator:
    """Validates addresses against the postal dataset."""

    def __init__(self, store: DatasetStore, similarity_threshold: float = 0.3):
        """
        Initialize validator.

        Args:
            store: DatasetStore instance
            similarity_threshold: Minimum similarity (exclusive) for a name
                to be offered as a suggestion
        """
        self.store = store
        self.similarity_threshold = similarity_threshold

    def validate_address(self, address: Mapping[str, Any]) -> ValidationResult:
        """
        Validate every field of an address and score its completeness.

        Recognised keys: district, municipality, ward, post_office,
        postal_code (postOffice and postalCode are accepted too). Problems
        are reported in the result, never raised.

        Args:
            address: Mapping of address fields

        Returns:
            ValidationResult; valid when there are no errors
        """
        if not isinstance(address, Mapping):
            log_structured("warning", "validate_address rejected input",
                           reason="address is not a mapping", input_type=type(address).__name__)
            errors = ["Address must be a mapping of address fields"]
            return ValidationResult(
                is_valid=False,
                errors=errors,
                completeness=self.calculate_completeness({}),
                recommendation=self.get_recommendation({}, errors, []),
            )

        address = normalize_address(address)
        errors: List[str] = []
        warnings: List[str] = []
        suggestions: List[str] = []

        district = address.get("district")
        if district:
            district_result = self.validate_district(district)
            if not district_result.is_valid:
                errors.append(f"Invalid district: {district}")
                if district_result.suggestions:
                    suggestions.append(f"Did you mean: {', '.join(district_result.suggestions)}?")
        else:
            warnings.append("District not specified")

        postal_code = address.get("postal_code")
        if postal_code:
            postal_result = self.validate_postal_code(postal_code)
            if not postal_result.is_valid:
                errors.append(f"Invalid postal code: {postal_code}")
            elif isinstance(district, str) and district.strip():
                owner: PostalInfo = postal_result.value
                if owner.district.lower() != normalize_text(district):
                    errors.append(f"Postal code {owner.postal_code} does not belong to district {district}")
                    suggestions.append(f"Postal code {owner.postal_code} belongs to {owner.district}")

        post_office = address.get("post_office")
        if post_office:
            office_district = district if isinstance(district, str) else None
            office_result = self.validate_post_office(post_office, office_district)
            if not office_result.is_valid:
                errors.append(f"Invalid post office: {post_office}")
                if office_result.suggestions:
                    suggestions.append(f"Similar post offices: {', '.join(office_result.suggestions)}")

        ward = address.get("ward")
        if ward is not None and not self._is_valid_ward(ward):
            errors.append(f"Ward number must be an integer between {WARD_MIN} and {WARD_MAX}")

        municipality = address.get("municipality")
        if municipality:
            if not isinstance(municipality, str) or len(municipality.strip()) < MUNICIPALITY_MIN_LENGTH:
                errors.append("Municipality name must be a valid string")

        return ValidationResult(
            is_valid=not errors,
            errors=errors,
            warnings=warnings,
            suggestions=suggestions,
            completeness=self.calculate_completeness(address),
            recommendation=self.get_recommendation(address, errors, warnings),
        )

    def validate_district(self, district: str) -> FieldValidation:
        """
        Check that a district exists (case-insensitive exact name).

        Near misses are not accepted; up to three similar names are
        suggested instead.
        """
        if not isinstance(district, str) or not district.strip():
            return FieldValidation(is_valid=False, error="District name is required and must be a string")

        district_data = self.store.get_district_by_name(district)
        if district_data:
            return FieldValidation(is_valid=True, value=district_data)

        return FieldValidation(
            is_valid=False,
            error=f"District '{district}' not found",
            suggestions=self.find_similar_districts(district),
        )

    def validate_postal_code(self, postal_code: str) -> FieldValidation:
        """Check that a postal code has five digits and exists."""
        if not isinstance(postal_code, str) or not postal_code.strip():
            return FieldValidation(is_valid=False, error="Postal code is required and must be a string")

        trimmed = postal_code.strip()
        if not is_postal_code(trimmed):
            return FieldValidation(is_valid=False, error="Nepal postal codes must be exactly 5 digits")

        po = self.store.get_post_office_by_code(trimmed)
        if po is None:
            return FieldValidation(is_valid=False, error="Postal code does not exist")

        return FieldValidation(is_valid=True, value=PostalInfo.from_post_office(po))

    def validate_post_office(self, post_office: str, district: Optional[str] = None) -> FieldValidation:
        """
        Check that a post office exists, within the district when one is given.

        Args:
            post_office: Post office name (case-insensitive exact match)
            district: Optional district restricting the candidates

        Returns:
            FieldValidation with up to three similar names when not found
        """
        if not isinstance(post_office, str) or not post_office.strip():
            return FieldValidation(is_valid=False, error="Post office name is required and must be a string")

        if district is not None and not isinstance(district, str):
            return FieldValidation(is_valid=False, error="District filter must be a string")

        candidates = self.store.get_all_post_offices()
        if district and district.strip():
            district_key = normalize_text(district)
            candidates = [po for po in candidates if po.district.lower() == district_key]

        name_key = normalize_text(post_office)
        for po in candidates:
            if po.name.lower() == name_key:
                return FieldValidation(is_valid=True, value=po)

        similar = rank_similar(
            post_office,
            [po.name for po in candidates],
            threshold=self.similarity_threshold,
            limit=POST_OFFICE_CANDIDATES,
        )
        location = f" in {district}" if district else ""
        return FieldValidation(
            is_valid=False,
            error=f"Post office '{post_office}' not found{location}",
            suggestions=[name for name, _ in similar[:MAX_SUGGESTIONS]],
        )

    def find_similar_districts(self, name: str) -> List[str]:
        """Up to three district names most similar to the input."""
        similar = rank_similar(
            name,
            [d.name for d in self.store.get_all_districts()],
            threshold=self.similarity_threshold,
            limit=MAX_SUGGESTIONS,
        )
        return [candidate for candidate, _ in similar]

    def calculate_completeness(self, address: Mapping[str, Any]) -> Completeness:
        """Weighted share of the expected address fields that are filled in."""
        score = 0.0
        present = []
        missing = []

        for field_name in ADDRESS_FIELDS:
            value = address.get(field_name)
            if value is not None and value != "":
                score += COMPLETENESS_WEIGHTS[field_name]
                present.append(field_name)
            else:
                missing.append(field_name)

        return Completeness(score=int(round_half_up(score * 100)), present=present, missing=missing)

    def get_recommendation(self, address: Mapping[str, Any], errors: Sequence[str], warnings: Sequence[str]) -> List[str]:
        """Next steps for improving the address, in a fixed order."""
        recommendations = []

        if errors:
            recommendations.append("Fix validation errors before using this address")

        if not address.get("district"):
            recommendations.append("Add district name for better address identification")

        if not address.get("postal_code"):
            recommendations.append("Include postal code for accurate mail delivery")

        if not address.get("municipality") and not address.get("post_office"):
            recommendations.append("Add municipality or post office for precise location")

        if not address.get("ward"):
            recommendations.append("Include ward number for local administrative purposes")

        if warnings and not errors:
            recommendations.append("Address is valid but could be more complete")

        if not recommendations:
            recommendations.append("Address is complete and valid")

        return recommendations

    @time_function
    def batch_validate(self, addresses: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
        """
        Validate several addresses independently.

        Returns:
            One {"index", "address", "validation"} entry per input, in order;
            an empty list if addresses is not a list or tuple
        """
        if not isinstance(addresses, (list, tuple)):
            log_structured("warning", "batch_validate rejected input",
                           reason="addresses must be a list", input_type=type(addresses).__name__)
            return []

        return [
            {
                "index": index,
                "address": address,
                "validation": self.validate_address(address),
            }
            for index, address in enumerate(addresses)
        ]

    @staticmethod
    def _is_valid_ward(ward: Any) -> bool:
        return isinstance(ward, int) and not isinstance(ward, bool) and WARD_MIN <= ward <= WARD_MAX
