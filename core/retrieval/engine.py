# Path: core/retrieval/engine.py
# Purpose: Rank reference images by relevance to a source sketch and requested angle.
# Layer: core/retrieval.
# Details: Pure projection over the enabled packs; recomputed on every call, never cached.

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, List, Optional, Tuple

import numpy as np

from core.errors import InvalidImageError
from core.fingerprints.base import Fingerprinter
from core.fingerprints.luminance import LuminanceFingerprinter
from core.imaging import ImagePayload, open_image
from core.models.domain import AngleTag, ReferenceImage, ReferencePack
from .strategies import combined_score, tag_match

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 8

RankedReference = Tuple[ReferenceImage, float]


class RetrievalEngine:
    """High-level service combining tag matching with fingerprint similarity."""

    def __init__(self, fingerprinter: Optional[Fingerprinter] = None, limit: int = DEFAULT_LIMIT) -> None:
        self.fingerprinter = fingerprinter or LuminanceFingerprinter()
        self.limit = limit

    def rank(
        self,
        source_image: ImagePayload,
        enabled_packs: Iterable[ReferencePack],
        angle_tag: AngleTag,
        limit: Optional[int] = None,
    ) -> List[RankedReference]:
        """
        Return up to ``limit`` (image, similarity) pairs, best first.

        Scores are ``0.6 * tag_match + 0.4 * content_similarity``; ties are broken
        by ascending image id. The returned images are copies with ``similarity``
        set, the catalog's own images are left untouched.
        """

        limit = self.limit if limit is None else limit
        candidates = [image for pack in enabled_packs for image in pack.images]
        if not candidates or limit <= 0:
            return []

        source_vector = self._fingerprint_or_none(source_image, "source image")

        scored: List[RankedReference] = []
        for image in candidates:
            content = 0.0
            if source_vector is not None:
                candidate_vector = self._fingerprint_or_none(image.data, f"reference {image.id}")
                if candidate_vector is not None:
                    content = self.fingerprinter.similarity(source_vector, candidate_vector)
            score = combined_score(tag_match(image.tags, angle_tag), content)
            scored.append((image, score))

        scored.sort(key=lambda pair: (-pair[1], pair[0].id))
        return [(replace(image, similarity=score), score) for image, score in scored[:limit]]

    def _fingerprint_or_none(self, payload: ImagePayload, label: str) -> Optional[np.ndarray]:
        try:
            return self.fingerprinter.fingerprint(open_image(payload))
        except InvalidImageError:
            logger.warning("Could not decode %s; content similarity treated as 0", label)
            return None
