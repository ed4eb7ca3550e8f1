"""FastAPI dependency injection."""

from datetime import date
from typing import Annotated

from fastapi import Depends
from slowapi import Limiter
from slowapi.util import get_remote_address

from evrisk.core.config import get_settings
from evrisk.services.engine import ScoringEngine
from evrisk.services.reference_data import ReferenceData, get_reference_data

# Rate limiter (attached to app.state in main)
limiter = Limiter(key_func=get_remote_address)


def scoring_rate_limit() -> str:
    """Rate limit string for scoring endpoints, read from settings."""
    return get_settings().rate_limit


def get_reference() -> ReferenceData:
    """Dependency for the shared reference snapshot."""
    return get_reference_data()


def get_engine(
    reference: Annotated[ReferenceData, Depends(get_reference)],
) -> ScoringEngine:
    """Dependency for a scoring engine bound to the shared snapshot."""
    return ScoringEngine(reference)


def get_as_of_year() -> int:
    """Calendar year vehicle age is measured against (read once per request)."""
    return date.today().year
