# Path: core/storage/stores.py
# Purpose: Load and save the three persisted records: reference catalog, settings, and enabled packs.
# Layer: core/storage.
# Details: Corrupt or unreadable records fall back to built-in defaults; loading never raises.

from __future__ import annotations

import binascii
import json
import logging
from typing import Any, List, Optional

from core.catalog.catalog import ReferenceCatalog
from core.corrections.settings_model import DEFAULT_SETTINGS, canonical_keys, normalize
from core.errors import InvalidSettingError, PersistenceReadError
from core.models.domain import CorrectionSettings, ReferencePack
from .backends import KeyValueStorage

logger = logging.getLogger(__name__)

CATALOG_KEY = "reference_catalog"
SETTINGS_KEY = "correction_settings_v6"
SELECTION_KEY = "selected_packs"


class _JsonRecordStore:
    """Shared read/decode logic for a single JSON record."""

    key: str

    def __init__(self, storage: KeyValueStorage, key: Optional[str] = None) -> None:
        self.storage = storage
        if key is not None:
            self.key = key

    def _read_json(self) -> Any:
        """Return the decoded record, None if absent, or raise PersistenceReadError."""

        try:
            text = self.storage.read(self.key)
        except OSError as exc:
            raise PersistenceReadError(f"Could not read {self.key}: {exc}") from exc
        if text is None:
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise PersistenceReadError(f"Record {self.key} is not valid JSON") from exc

    def _write_json(self, payload: Any) -> None:
        self.storage.write(self.key, json.dumps(payload, indent=2))


class CatalogStore(_JsonRecordStore):
    """Persists packs with their nested images. Falls back to the seed packs."""

    key = CATALOG_KEY

    def read_packs(self) -> Optional[List[ReferencePack]]:
        payload = self._read_json()
        if payload is None:
            return None
        if not isinstance(payload, list):
            raise PersistenceReadError(f"Record {self.key} must be a list of packs")
        try:
            packs = [ReferencePack.from_dict(item) for item in payload]
            ReferenceCatalog(packs)
        except (KeyError, TypeError, ValueError, binascii.Error) as exc:
            raise PersistenceReadError(f"Record {self.key} holds an invalid pack: {exc}") from exc
        return packs

    def load(self) -> List[ReferencePack]:
        try:
            packs = self.read_packs()
        except PersistenceReadError as exc:
            logger.warning("%s; using seed packs", exc)
            packs = None
        if packs is None:
            return ReferenceCatalog.with_seed_packs().packs
        return packs

    def save(self, catalog: ReferenceCatalog) -> None:
        self._write_json(catalog.to_list())


class SettingsStore(_JsonRecordStore):
    """Persists the last used correction settings; invalid fields fall back one by one."""

    key = SETTINGS_KEY

    def load(self) -> CorrectionSettings:
        try:
            payload = self._read_json()
        except PersistenceReadError as exc:
            logger.warning("%s; using default settings", exc)
            return DEFAULT_SETTINGS
        if payload is None:
            return DEFAULT_SETTINGS
        if not isinstance(payload, dict):
            logger.warning("Record %s is not an object; using default settings", self.key)
            return DEFAULT_SETTINGS

        values = canonical_keys(payload)
        while True:
            try:
                return normalize(values)
            except InvalidSettingError as exc:
                logger.warning("Stored setting %s is invalid; using its default", exc.field)
                values.pop(exc.field, None)

    def save(self, settings: CorrectionSettings) -> None:
        self._write_json(settings.to_dict())


class PackSelectionStore(_JsonRecordStore):
    """Persists the ids of packs enabled for retrieval. None means "all packs"."""

    key = SELECTION_KEY

    def load(self) -> Optional[List[str]]:
        try:
            payload = self._read_json()
        except PersistenceReadError as exc:
            logger.warning("%s; enabling all packs", exc)
            return None
        if payload is None:
            return None
        if not isinstance(payload, list) or not all(isinstance(item, str) for item in payload):
            logger.warning("Record %s is not a list of pack ids; enabling all packs", self.key)
            return None
        return payload

    def save(self, catalog: ReferenceCatalog) -> None:
        self._write_json(catalog.enabled_pack_ids)


def load_catalog(catalog_store: CatalogStore, selection_store: PackSelectionStore) -> ReferenceCatalog:
    """Rebuild the catalog and its selection from their independent records."""

    return ReferenceCatalog(catalog_store.load(), enabled=selection_store.load())
