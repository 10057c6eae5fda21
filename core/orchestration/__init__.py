# Path: core/orchestration/__init__.py
# Purpose: Package initializer for correction orchestration.
# Layer: core/orchestration.
# Details: Exposes the orchestrator and its user-facing precondition message.

from .orchestrator import NO_IMAGE_MESSAGE, CorrectionOrchestrator

__all__ = ["NO_IMAGE_MESSAGE", "CorrectionOrchestrator"]
