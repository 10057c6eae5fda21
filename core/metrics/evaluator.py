# Path: core/metrics/evaluator.py
# Purpose: Interpret raw provider metrics against the settings a correction ran with.
# Layer: core/metrics.
# Details: Numeric fields are copied verbatim; line fidelity is derived, reported as data and never raised.

from __future__ import annotations

import math
from typing import Any, Dict, Mapping

from core.models.domain import CorrectionMetrics, CorrectionSettings

FIDELITY_TOLERANCE = 0.004

NUMERIC_FIELDS = ("mask_coverage", "denoise_used", "diff_in_mask", "diff_outside_mask")


class MalformedMetricsError(ValueError):
    """Raw metrics are missing a field or hold a non-numeric value."""


class MetricsEvaluator:
    """Derive CorrectionMetrics from a provider's raw numbers."""

    def __init__(self, tolerance: float = FIDELITY_TOLERANCE) -> None:
        self.tolerance = tolerance

    def evaluate(self, raw_metrics: Mapping[str, Any], settings: CorrectionSettings) -> CorrectionMetrics:
        values = {name: self._number(raw_metrics, name) for name in NUMERIC_FIELDS}
        achieved = settings.absolute_line_fidelity and values["diff_outside_mask"] <= self.tolerance
        return CorrectionMetrics(absolute_line_fidelity=achieved, tolerance=self.tolerance, **values)

    @staticmethod
    def _number(raw_metrics: Mapping[str, Any], name: str) -> float:
        if name not in raw_metrics:
            raise MalformedMetricsError(f"Provider metrics are missing {name}")
        value = raw_metrics[name]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise MalformedMetricsError(f"Provider metric {name} is not numeric: {value!r}")
        if not math.isfinite(value):
            raise MalformedMetricsError(f"Provider metric {name} is not finite: {value!r}")
        return float(value)

    def fidelity_shortfall(self, metrics: CorrectionMetrics, settings: CorrectionSettings) -> bool:
        """True when absolute line fidelity was requested but not achieved."""

        return settings.absolute_line_fidelity and not metrics.absolute_line_fidelity

    @staticmethod
    def summarize(metrics: CorrectionMetrics) -> Dict[str, str]:
        """Display strings for the shift analysis panel."""

        return {
            "coverage": f"{round(metrics.mask_coverage * 100)}% Area",
            "correction_lift": f"{metrics.denoise_used:.2f}",
            "pixel_delta": f"{metrics.diff_in_mask * 100:.3f}%",
        }
