# Path: core/fingerprints/__init__.py
# Purpose: Package initializer for fingerprint implementations and interfaces.
# Layer: core/fingerprints.
# Details: Exposes the base interface, both implementations, and a settings-driven factory.

from config.settings import RetrievalSettings

from .base import Fingerprinter
from .luminance import LuminanceFingerprinter
from .phash import PerceptualHashFingerprinter


def build_fingerprinter(settings: RetrievalSettings) -> Fingerprinter:
    """Instantiate the fingerprinter named in the retrieval settings."""

    if settings.fingerprint == "phash":
        return PerceptualHashFingerprinter()
    return LuminanceFingerprinter(grid_size=settings.grid_size)


__all__ = ["Fingerprinter", "LuminanceFingerprinter", "PerceptualHashFingerprinter", "build_fingerprinter"]
