"""EV purchase-risk scoring engine."""

from .engine import ScoringEngine, score
from .reference_data import ReferenceData, get_reference_data, load_reference_data
from .resolver import EntityResolver, infer_chemistry

__all__ = [
    "ScoringEngine",
    "score",
    "ReferenceData",
    "get_reference_data",
    "load_reference_data",
    "EntityResolver",
    "infer_chemistry",
]
