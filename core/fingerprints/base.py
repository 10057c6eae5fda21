# Path: core/fingerprints/base.py
# Purpose: Define the Fingerprinter interface for compact perceptual image signatures.
# Layer: core/fingerprints.
# Details: Fingerprints are fixed-size vectors; similarity must be deterministic, symmetric, and within [0, 1].

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np
from PIL import Image


class Fingerprinter(ABC):
    """Abstract base class for fingerprint implementations used by retrieval."""

    name: str
    dim: int

    @abstractmethod
    def fingerprint(self, image: Image.Image) -> np.ndarray:
        """Return a fixed-size float vector with components in [0, 1]."""

    def similarity(self, a: np.ndarray, b: np.ndarray) -> float:
        """Return ``1 - RMS(a - b)``, clipped to [0, 1]."""

        self._check_shapes(a, b)
        rms = float(np.sqrt(np.mean(np.square(a.astype(np.float64) - b.astype(np.float64)))))
        return self._clip(1.0 - rms)

    def _check_shapes(self, a: np.ndarray, b: np.ndarray) -> None:
        if a.shape != (self.dim,) or b.shape != (self.dim,):
            raise ValueError(f"Fingerprint dimensionality must be {self.dim}, got {a.shape} and {b.shape}.")

    @staticmethod
    def _clip(value: float) -> float:
        return min(max(value, 0.0), 1.0)
