# Path: core/models/__init__.py
# Purpose: Package initializer for domain model definitions.
# Layer: core/models.
# Details: Exposes enumerations and dataclasses used across retrieval, correction, and history layers.

from .domain import (
    AngleTag,
    CorrectionMetrics,
    CorrectionMode,
    CorrectionScope,
    CorrectionSettings,
    EditSession,
    ImageDimensions,
    ReferenceImage,
    ReferencePack,
    ViewMode,
    tag_set,
)

__all__ = [
    "AngleTag",
    "CorrectionMetrics",
    "CorrectionMode",
    "CorrectionScope",
    "CorrectionSettings",
    "EditSession",
    "ImageDimensions",
    "ReferenceImage",
    "ReferencePack",
    "ViewMode",
    "tag_set",
]
