# Path: core/providers/base.py
# Purpose: Define the contract of the external image-correction provider.
# Layer: core/providers.
# Details: The provider alone transforms pixels; it returns the corrected image plus raw metrics.

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Protocol, Sequence

from core.models.domain import CorrectionSettings, ImageDimensions, ReferenceImage


class ProviderError(Exception):
    """Transport, quota, or content failure reported by a provider.

    The message is shown to the user, so it should be human readable.
    """


@dataclass
class ProviderResult:
    """Corrected image bytes and the provider's raw metrics."""

    result_image: bytes
    metrics: Dict[str, float] = field(default_factory=dict)


class CorrectionProvider(Protocol):
    """Anything able to pull a drawing on model given settings and references."""

    def correct(
        self,
        source_image: bytes,
        settings: CorrectionSettings,
        references: Sequence[ReferenceImage],
        dimensions: ImageDimensions,
    ) -> ProviderResult:
        """Return the corrected image and raw metrics, or raise ProviderError."""
