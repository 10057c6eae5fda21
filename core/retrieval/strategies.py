# Path: core/retrieval/strategies.py
# Purpose: Define the signals combined into a reference relevance score.
# Layer: core/retrieval.
# Details: Tag matching against the requested angle and the weights applied to tag and content signals.

from __future__ import annotations

from typing import FrozenSet, Iterable

from core.models.domain import AngleTag

TAG_WEIGHT = 0.6
CONTENT_WEIGHT = 0.4

EXACT_MATCH = 1.0
ADJACENT_MATCH = 0.5
NO_MATCH = 0.0

# Symmetric pairs of angles close enough to borrow references from each other.
ADJACENT_ANGLES = {
    AngleTag.FRONT: AngleTag.GENERIC,
    AngleTag.GENERIC: AngleTag.FRONT,
    AngleTag.UPSHOT: AngleTag.DOWNSHOT,
    AngleTag.DOWNSHOT: AngleTag.UPSHOT,
    AngleTag.PROFILE: AngleTag.THREE_QUARTER,
    AngleTag.THREE_QUARTER: AngleTag.PROFILE,
}


def tag_match(tags: Iterable[str], angle_tag: AngleTag) -> float:
    """Score an image's tag set against the requested angle.

    1.0 for an exact tag, 0.5 for the adjacent angle, 0.0 otherwise. Feature
    labels that are not angles are ignored.
    """

    labels: FrozenSet[str] = frozenset(tags)
    if angle_tag.value in labels:
        return EXACT_MATCH
    if ADJACENT_ANGLES[angle_tag].value in labels:
        return ADJACENT_MATCH
    return NO_MATCH


def combined_score(tag_signal: float, content_signal: float) -> float:
    """Weighted sum of both signals, rounded so repeated rankings compare equal."""

    return round(TAG_WEIGHT * tag_signal + CONTENT_WEIGHT * content_signal, 6)
