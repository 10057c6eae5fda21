# Path: core/providers/__init__.py
# Purpose: Package initializer for correction provider contracts and implementations.
# Layer: core/providers.
# Details: Exposes the provider protocol, its result and error types, and the local preview provider.

from .base import CorrectionProvider, ProviderError, ProviderResult
from .local_preview import LocalPreviewProvider, scope_mask

__all__ = ["CorrectionProvider", "LocalPreviewProvider", "ProviderError", "ProviderResult", "scope_mask"]
