"""Exceptions raised by the dataset loading layer."""


class NepalGeoError(Exception):
    """Base class for package errors."""


class DataIntegrityError(NepalGeoError):
    """The postal record source is unreadable or malformed.

    Raised while building the dataset store; the store is never constructed
    from partial data.
    """

    def __init__(self, message: str, row: int = None):
        self.row = row
        if row is not None:
            message = f"{message} (row {row})"
        super().__init__(message)
