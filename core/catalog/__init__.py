# Path: core/catalog/__init__.py
# Purpose: Package initializer for the reference catalog.
# Layer: core/catalog.
# Details: Exposes the catalog, its seed packs, and the folder scanner used for imports.

from .catalog import SEED_PACKS, ReferenceCatalog, new_id
from .scanner import SUPPORTED_EXTENSIONS, ImageScanner

__all__ = ["SEED_PACKS", "SUPPORTED_EXTENSIONS", "ImageScanner", "ReferenceCatalog", "new_id"]
