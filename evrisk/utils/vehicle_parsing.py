"""Centralized vehicle and location key normalization.

This module is the single source of truth for turning free text into the
canonical keys the reference tables are matched on:
- Vehicle keys (lower-cased, trimmed, whitespace collapsed model names)
- ZIP prefixes (first three digits of a ZIP code)
"""

# Number of leading ZIP digits the climate and charger tables are keyed on
ZIP_PREFIX_LENGTH = 3


def normalize_model(model: str) -> str:
    """Canonical vehicle key for substring matching.

    Args:
        model: Free-text vehicle description (e.g., "  Tesla  Model 3 ")

    Returns:
        Lower-cased string with surrounding whitespace stripped and inner
        runs of whitespace collapsed to a single space.

    Examples:
        >>> normalize_model("  Tesla  Model 3 ")
        'tesla model 3'
    """
    return " ".join(model.lower().split())


def zip_prefix(zip_code: str) -> str:
    """Extract the 3-digit prefix a ZIP code is indexed by.

    Examples:
        >>> zip_prefix("85001")
        '850'
    """
    return zip_code.strip()[:ZIP_PREFIX_LENGTH]


def models_cross_match(a: str, b: str) -> bool:
    """True if either normalized model string contains the other."""
    a_norm = normalize_model(a)
    b_norm = normalize_model(b)
    if not a_norm or not b_norm:
        return False
    return a_norm in b_norm or b_norm in a_norm


def match_rank(query: str, candidate: str) -> tuple[int, str]:
    """Sort key for picking among several candidates containing ``query``.

    Tighter matches (fewer extra characters around the query) win, then
    lexicographic order on the normalized candidate breaks remaining ties.
    """
    candidate_norm = normalize_model(candidate)
    return len(candidate_norm) - len(normalize_model(query)), candidate_norm
