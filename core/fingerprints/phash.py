# Path: core/fingerprints/phash.py
# Purpose: Provide a perceptual-hash fingerprint (phash_144) for reference retrieval.
# Layer: core/fingerprints.
# Details: Uses imagehash's DCT hash; similarity is one minus the normalized Hamming distance.

from __future__ import annotations

import imagehash
import numpy as np
from PIL import Image

from .base import Fingerprinter


class PerceptualHashFingerprinter(Fingerprinter):
    """Fingerprint using a ``hash_size x hash_size`` low-frequency DCT region.

    The default of 12 yields the 144-bit hash used for near-duplicate lookups.
    """

    def __init__(self, hash_size: int = 12) -> None:
        self.hash_size = hash_size
        self.name = "phash"
        self.dim = hash_size * hash_size

    def fingerprint(self, image: Image.Image) -> np.ndarray:
        ph = imagehash.phash(image.convert("RGB"), hash_size=self.hash_size)
        # ph.hash is a hash_size x hash_size boolean numpy array.
        return ph.hash.astype(np.float32).flatten()

    def similarity(self, a: np.ndarray, b: np.ndarray) -> float:
        self._check_shapes(a, b)
        distance = float(np.count_nonzero(a != b)) / self.dim
        return self._clip(1.0 - distance)
