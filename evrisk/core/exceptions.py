"""Exceptions raised while loading reference data."""

from pathlib import Path


class ReferenceDataError(Exception):
    """A reference data file is missing or malformed.

    Raised at load time only. Scoring never raises for missing data.
    """

    def __init__(self, path: Path | str, message: str) -> None:
        self.path = Path(path)
        self.message = message
        super().__init__(f"{self.path.name}: {message}")
