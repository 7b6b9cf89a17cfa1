"""Base class for postal record sources."""
from abc import ABC, abstractmethod
from typing import List
from nepal_geo.core.models import RawRecord


class DatasetSource(ABC):
    """Base class for postal record providers."""

    @abstractmethod
    def load(self) -> List[RawRecord]:
        """
        Read every postal record from the source.

        Returns:
            List of (district, post office, postal code, post office type)
            string tuples, in source order

        Raises:
            DataIntegrityError: If the source is missing or unreadable
        """
        pass

    @abstractmethod
    def get_name(self) -> str:
        """Get provider name."""
        pass
