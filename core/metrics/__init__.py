# Path: core/metrics/__init__.py
# Purpose: Package initializer for correction metrics.
# Layer: core/metrics.
# Details: Exposes the evaluator, the fidelity tolerance, and the metric field names.

from .evaluator import FIDELITY_TOLERANCE, NUMERIC_FIELDS, MalformedMetricsError, MetricsEvaluator

__all__ = ["FIDELITY_TOLERANCE", "NUMERIC_FIELDS", "MalformedMetricsError", "MetricsEvaluator"]
