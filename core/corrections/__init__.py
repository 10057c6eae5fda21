# Path: core/corrections/__init__.py
# Purpose: Package initializer for correction settings validation.
# Layer: core/corrections.
# Details: Exposes normalize() and the default settings record.

from .settings_model import DEFAULT_SETTINGS, FIELDS, canonical_keys, normalize

__all__ = ["DEFAULT_SETTINGS", "FIELDS", "canonical_keys", "normalize"]
