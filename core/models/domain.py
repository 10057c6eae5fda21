# Path: core/models/domain.py
# Purpose: Define domain models shared across retrieval, correction, and history workflows.
# Layer: core/models.
# Details: Closed enumerations plus lightweight dataclasses that serialize to plain dicts for storage and the API.

from __future__ import annotations

import base64
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional


class CorrectionMode(str, Enum):
    """How the provider is asked to pull the drawing back on model."""

    PROPORTION = "Proportion (Mode A)"
    CONDITIONED = "Conditioned (Mode B)"


class AngleTag(str, Enum):
    """Camera/viewing angle of a pose."""

    FRONT = "Front"
    THREE_QUARTER = "3/4 View"
    PROFILE = "Profile"
    UPSHOT = "Upshot"
    DOWNSHOT = "Downshot"
    GENERIC = "Generic"


class CorrectionScope(str, Enum):
    """Region of the image the correction concentrates on."""

    FULL_IMAGE = "Full Image"
    FACE_PRIORITY = "Face Priority"
    CLOTHING_PRIORITY = "Clothing Priority"
    HANDS_PRIORITY = "Hands Priority"


class ViewMode(str, Enum):
    """How the source/result pair is displayed."""

    BEFORE = "Before"
    AFTER = "After"
    OVERLAY = "Overlay"


@dataclass(frozen=True)
class CorrectionSettings:
    """Validated parameters for one correction. Build instances through ``core.corrections.normalize``."""

    strength: int = 50
    line_preservation: int = 85
    mode: CorrectionMode = CorrectionMode.PROPORTION
    angle_tag: AngleTag = AngleTag.THREE_QUARTER
    scope: CorrectionScope = CorrectionScope.FULL_IMAGE
    absolute_line_fidelity: bool = True

    def to_dict(self) -> Dict:
        return {
            "strength": self.strength,
            "line_preservation": self.line_preservation,
            "mode": self.mode.value,
            "angle_tag": self.angle_tag.value,
            "scope": self.scope.value,
            "absolute_line_fidelity": self.absolute_line_fidelity,
        }


@dataclass(frozen=True)
class ImageDimensions:
    width: int = 1024
    height: int = 1024

    def to_dict(self) -> Dict:
        return {"width": self.width, "height": self.height}


@dataclass(frozen=True)
class ReferenceImage:
    """One reference asset inside a pack.

    ``similarity`` is only ever set on copies returned by the retrieval engine.
    """

    id: str
    pack_id: str
    data: bytes
    tags: FrozenSet[str] = frozenset()
    similarity: Optional[float] = None

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "pack_id": self.pack_id,
            "data": base64.b64encode(self.data).decode("ascii"),
            "tags": sorted(self.tags),
        }

    @classmethod
    def from_dict(cls, payload: Dict) -> "ReferenceImage":
        return cls(
            id=str(payload["id"]),
            pack_id=str(payload.get("pack_id", payload.get("packId", ""))),
            data=base64.b64decode(payload["data"]),
            tags=frozenset(str(tag) for tag in payload.get("tags", [])),
        )


@dataclass
class ReferencePack:
    """A named, curated collection of reference images owned by the catalog."""

    id: str
    name: str
    description: str = ""
    images: List[ReferenceImage] = field(default_factory=list)
    created_at: float = field(default_factory=time.time)

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "images": [image.to_dict() for image in self.images],
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, payload: Dict) -> "ReferencePack":
        pack_id = str(payload["id"])
        images = [ReferenceImage.from_dict(item) for item in payload.get("images", [])]
        for image in images:
            if image.pack_id != pack_id:
                raise ValueError(f"Image {image.id} belongs to pack {image.pack_id!r}, not {pack_id!r}")
        return cls(
            id=pack_id,
            name=str(payload["name"]),
            description=str(payload.get("description", "")),
            images=images,
            created_at=float(payload.get("created_at", payload.get("createdAt", time.time()))),
        )


@dataclass(frozen=True)
class CorrectionMetrics:
    """Outcome of one correction as interpreted against its settings."""

    mask_coverage: float
    denoise_used: float
    diff_in_mask: float
    diff_outside_mask: float
    absolute_line_fidelity: bool
    tolerance: float = 0.004

    @property
    def changed(self) -> bool:
        """True when the editable region moved beyond provider noise."""
        return self.diff_in_mask > self.tolerance

    def to_dict(self) -> Dict:
        return {
            "mask_coverage": self.mask_coverage,
            "denoise_used": self.denoise_used,
            "diff_in_mask": self.diff_in_mask,
            "diff_outside_mask": self.diff_outside_mask,
            "absolute_line_fidelity": self.absolute_line_fidelity,
        }


@dataclass(frozen=True)
class EditSession:
    """One completed correction and its recorded outcome."""

    id: str
    original_image: bytes
    result_image: bytes
    settings: CorrectionSettings
    timestamp: datetime
    metrics: CorrectionMetrics
    references: tuple = ()

    def to_dict(self, include_images: bool = False) -> Dict:
        payload = {
            "id": self.id,
            "settings": self.settings.to_dict(),
            "timestamp": self.timestamp.isoformat(),
            "metrics": self.metrics.to_dict(),
            "references": list(self.references),
        }
        if include_images:
            payload["original_image"] = base64.b64encode(self.original_image).decode("ascii")
            payload["result_image"] = base64.b64encode(self.result_image).decode("ascii")
        return payload


def tag_set(tags: Iterable[str]) -> FrozenSet[str]:
    """Normalize tag input (enum members or strings) into a frozen set of strings."""

    return frozenset(tag.value if isinstance(tag, Enum) else str(tag) for tag in tags)
