# Path: core/catalog/catalog.py
# Purpose: Own reference packs, their images, and the set of packs enabled for retrieval.
# Layer: core/catalog.
# Details: Enforces unique pack ids and pack ownership of images; ids come from uuid4.

from __future__ import annotations

import json
import uuid
from dataclasses import replace
from typing import Dict, Iterable, List, Optional

from core.imaging import ImagePayload, to_bytes
from core.models.domain import ReferenceImage, ReferencePack, tag_set

SEED_PACKS = (
    ("seed-anime-eyes", "Standard Anime Eyes", "Clean eye references."),
    ("seed-profile-jawlines", "Profile Jawlines", "Sharp chin silhouettes."),
)


def new_id() -> str:
    return uuid.uuid4().hex


class ReferenceCatalog:
    """Handles pack creation, image storage, and the enabled-pack selection."""

    def __init__(self, packs: Iterable[ReferencePack] = (), enabled: Optional[Iterable[str]] = None) -> None:
        self._packs: Dict[str, ReferencePack] = {}
        for pack in packs:
            self._insert(pack)
        if enabled is None:
            self._enabled: List[str] = list(self._packs)
        else:
            self._enabled = []
            self.set_enabled(enabled, strict=False)

    @classmethod
    def with_seed_packs(cls) -> "ReferenceCatalog":
        """Catalog holding the two built-in seed packs, both enabled."""

        return cls(ReferencePack(id=pack_id, name=name, description=desc) for pack_id, name, desc in SEED_PACKS)

    def _insert(self, pack: ReferencePack) -> None:
        if pack.id in self._packs:
            raise ValueError(f"Duplicate pack id {pack.id}")
        for image in pack.images:
            if image.pack_id != pack.id:
                raise ValueError(f"Image {image.id} does not belong to pack {pack.id}")
        self._packs[pack.id] = pack

    # Pack management
    @property
    def packs(self) -> List[ReferencePack]:
        return list(self._packs.values())

    def get_pack(self, pack_id: str) -> ReferencePack:
        pack = self._packs.get(pack_id)
        if pack is None:
            raise KeyError(f"Pack {pack_id} not found")
        return pack

    def add_pack(self, name: str, description: str = "") -> ReferencePack:
        pack = ReferencePack(id=new_id(), name=name, description=description)
        self._insert(pack)
        return pack

    def update_pack(self, pack_id: str, name: str, description: str) -> ReferencePack:
        pack = self.get_pack(pack_id)
        pack.name = name
        pack.description = description
        return pack

    def delete_pack(self, pack_id: str) -> None:
        self.get_pack(pack_id)
        del self._packs[pack_id]
        if pack_id in self._enabled:
            self._enabled.remove(pack_id)

    # Images
    def add_images(
        self, pack_id: str, images: Iterable[ImagePayload], tags: Iterable[str] = ()
    ) -> List[ReferenceImage]:
        pack = self.get_pack(pack_id)
        labels = tag_set(tags)
        added = [ReferenceImage(id=new_id(), pack_id=pack_id, data=to_bytes(data), tags=labels) for data in images]
        pack.images.extend(added)
        return added

    def delete_image(self, pack_id: str, image_id: str) -> None:
        pack = self.get_pack(pack_id)
        remaining = [image for image in pack.images if image.id != image_id]
        if len(remaining) == len(pack.images):
            raise KeyError(f"Image {image_id} not found in pack {pack_id}")
        pack.images = remaining

    def tag_image(self, pack_id: str, image_id: str, tags: Iterable[str]) -> ReferenceImage:
        pack = self.get_pack(pack_id)
        for index, image in enumerate(pack.images):
            if image.id == image_id:
                pack.images[index] = replace(image, tags=tag_set(tags))
                return pack.images[index]
        raise KeyError(f"Image {image_id} not found in pack {pack_id}")

    # Selection
    @property
    def enabled_pack_ids(self) -> List[str]:
        return list(self._enabled)

    def is_enabled(self, pack_id: str) -> bool:
        return pack_id in self._enabled

    def enable(self, pack_id: str) -> None:
        self.get_pack(pack_id)
        if pack_id not in self._enabled:
            self._enabled.append(pack_id)

    def disable(self, pack_id: str) -> None:
        self.get_pack(pack_id)
        if pack_id in self._enabled:
            self._enabled.remove(pack_id)

    def toggle(self, pack_id: str) -> bool:
        """Flip a pack's selection and return whether it is now enabled."""

        if self.is_enabled(pack_id):
            self.disable(pack_id)
            return False
        self.enable(pack_id)
        return True

    def set_enabled(self, pack_ids: Iterable[str], strict: bool = True) -> None:
        """Replace the selection. With ``strict=False`` unknown ids are dropped instead of raising."""

        selection: List[str] = []
        for pack_id in pack_ids:
            if pack_id not in self._packs:
                if strict:
                    raise KeyError(f"Pack {pack_id} not found")
                continue
            if pack_id not in selection:
                selection.append(pack_id)
        self._enabled = selection

    def enabled_packs(self) -> List[ReferencePack]:
        """Enabled packs in catalog order."""

        return [pack for pack in self._packs.values() if pack.id in self._enabled]

    # Serialization
    def to_list(self) -> List[dict]:
        return [pack.to_dict() for pack in self._packs.values()]

    def storage_usage_mb(self) -> float:
        """Approximate footprint of the serialized catalog, counting two bytes per character."""

        return len(json.dumps(self.to_list())) * 2 / (1024 * 1024)
