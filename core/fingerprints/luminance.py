# Path: core/fingerprints/luminance.py
# Purpose: Provide a luminance/structure fingerprint for sketch-to-reference comparison.
# Layer: core/fingerprints.
# Details: Downsamples to a small grayscale grid and appends absolute gradients so line layout counts as much as tone.

from __future__ import annotations

import numpy as np
from PIL import Image

from .base import Fingerprinter


class LuminanceFingerprinter(Fingerprinter):
    """Deterministic fingerprint built from a ``grid x grid`` luminance thumbnail.

    The vector concatenates the normalized luminance grid with the absolute
    horizontal and vertical differences between neighbouring cells. Every
    component lies in [0, 1], so the RMS distance of two fingerprints does too.
    """

    def __init__(self, grid_size: int = 16) -> None:
        if grid_size < 2:
            raise ValueError("grid_size must be at least 2.")
        self.grid_size = grid_size
        self.name = "luminance"
        self.dim = grid_size * grid_size + 2 * grid_size * (grid_size - 1)

    def fingerprint(self, image: Image.Image) -> np.ndarray:
        """Generate the fingerprint; transparent areas are flattened onto white first."""

        if image.mode in ("RGBA", "LA", "P"):
            rgba = image.convert("RGBA")
            background = Image.new("RGBA", rgba.size, (255, 255, 255, 255))
            image = Image.alpha_composite(background, rgba)
        gray = image.convert("L").resize((self.grid_size, self.grid_size), Image.Resampling.BILINEAR)
        luma = np.asarray(gray, dtype=np.float64) / 255.0
        horizontal = np.abs(np.diff(luma, axis=1))
        vertical = np.abs(np.diff(luma, axis=0))
        return np.concatenate([luma.ravel(), horizontal.ravel(), vertical.ravel()]).astype(np.float32)
