# Path: core/providers/local_preview.py
# Purpose: Provide a deterministic offline provider for previews, scripts, and the API default.
# Layer: core/providers.
# Details: Smooths the scope mask with Pillow, blends by strength and line preservation, and measures real diffs with numpy.

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
from PIL import Image, ImageFilter

from core.errors import InvalidImageError
from core.imaging import encode_png, open_image
from core.models.domain import (
    CorrectionMode,
    CorrectionScope,
    CorrectionSettings,
    ImageDimensions,
    ReferenceImage,
)
from .base import ProviderError, ProviderResult

logger = logging.getLogger(__name__)

# Share of the in-mask blend that leaks outside the mask when fidelity is not requested.
OUTSIDE_LEAK = 0.25


def scope_mask(scope: CorrectionScope, height: int, width: int) -> np.ndarray:
    """Boolean mask of the region a scope allows to change."""

    mask = np.zeros((height, width), dtype=bool)
    if scope is CorrectionScope.FACE_PRIORITY:
        mask[: int(height * 0.45), int(width * 0.25) : int(width * 0.75)] = True
    elif scope is CorrectionScope.CLOTHING_PRIORITY:
        mask[int(height * 0.35) : int(height * 0.85), :] = True
    elif scope is CorrectionScope.HANDS_PRIORITY:
        rows = slice(int(height * 0.45), int(height * 0.9))
        mask[rows, : int(width * 0.3)] = True
        mask[rows, int(width * 0.7) :] = True
    else:
        mask[:, :] = True
    return mask


class LocalPreviewProvider:
    """Stub provider that mimics a correction with lightweight, reproducible operations."""

    name = "local-preview"

    def __init__(self, smoothing_radius: float = 1.5) -> None:
        self.smoothing_radius = smoothing_radius

    def blend_factor(self, settings: CorrectionSettings) -> float:
        """Proportion mode scales by strength; conditioned mode also yields to line preservation."""

        alpha = settings.strength / 100.0
        if settings.mode is CorrectionMode.CONDITIONED:
            alpha *= 1.0 - settings.line_preservation / 100.0
        return alpha

    def correct(
        self,
        source_image: bytes,
        settings: CorrectionSettings,
        references: Sequence[ReferenceImage],
        dimensions: ImageDimensions,
    ) -> ProviderResult:
        try:
            source = open_image(source_image).convert("RGB")
        except InvalidImageError as exc:
            raise ProviderError("The source image could not be read.") from exc

        smoothed = source.filter(ImageFilter.GaussianBlur(self.smoothing_radius))
        before = np.asarray(source, dtype=np.float64)
        target = np.asarray(smoothed, dtype=np.float64)

        mask = scope_mask(settings.scope, source.height, source.width)
        alpha = self.blend_factor(settings)
        weights = np.where(mask, alpha, 0.0 if settings.absolute_line_fidelity else alpha * OUTSIDE_LEAK)
        after = before + (target - before) * weights[..., None]
        after = np.clip(np.rint(after), 0, 255).astype(np.uint8)

        diff = np.abs(after.astype(np.float64) - before).mean(axis=2) / 255.0
        metrics = {
            "mask_coverage": float(mask.mean()),
            "denoise_used": round(alpha, 4),
            "diff_in_mask": float(diff[mask].mean()) if mask.any() else 0.0,
            "diff_outside_mask": float(diff[~mask].mean()) if (~mask).any() else 0.0,
        }
        logger.debug(
            "Local preview for %sx%s with %d references: %s",
            dimensions.width,
            dimensions.height,
            len(references),
            metrics,
        )

        return ProviderResult(result_image=encode_png(Image.fromarray(after)), metrics=metrics)
