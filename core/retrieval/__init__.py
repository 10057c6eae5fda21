# Path: core/retrieval/__init__.py
# Purpose: Package initializer for reference ranking.
# Layer: core/retrieval.
# Details: Exposes the retrieval engine and the tag matching helpers.

from .engine import DEFAULT_LIMIT, RankedReference, RetrievalEngine
from .strategies import ADJACENT_ANGLES, combined_score, tag_match

__all__ = [
    "ADJACENT_ANGLES",
    "DEFAULT_LIMIT",
    "RankedReference",
    "RetrievalEngine",
    "combined_score",
    "tag_match",
]
