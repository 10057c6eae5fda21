# Path: core/orchestration/orchestrator.py
# Purpose: Coordinate a single correction attempt from preconditions to the resulting session record.
# Layer: core/orchestration.
# Details: No retries, no caching; provider failures are wrapped into CorrectionFailedError.

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Mapping, Optional, Sequence

from core.errors import GENERIC_FAILURE_MESSAGE, CorrectionFailedError, PreconditionError
from core.metrics.evaluator import MalformedMetricsError, MetricsEvaluator
from core.models.domain import (
    CorrectionScope,
    CorrectionSettings,
    EditSession,
    ImageDimensions,
    ReferenceImage,
)
from core.providers.base import CorrectionProvider, ProviderError, ProviderResult

logger = logging.getLogger(__name__)

NO_IMAGE_MESSAGE = "Upload an image first."


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CorrectionOrchestrator:
    """Service bridging the workbench with the external provider and the metrics evaluator."""

    def __init__(
        self,
        provider: CorrectionProvider,
        evaluator: Optional[MetricsEvaluator] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.provider = provider
        self.evaluator = evaluator or MetricsEvaluator()
        self.clock = clock

    def run(
        self,
        source_image: Optional[bytes],
        settings: CorrectionSettings,
        ranked_refs: Sequence[ReferenceImage],
        dimensions: ImageDimensions,
    ) -> EditSession:
        """
        Run one correction and return its session record.

        External calls:
        - core/providers/base.py::CorrectionProvider.correct - performs the pixel transformation.
        - core/metrics/evaluator.py::MetricsEvaluator.evaluate - interprets the raw metrics.
        """

        if not source_image:
            raise PreconditionError(NO_IMAGE_MESSAGE)

        if not isinstance(settings.scope, CorrectionScope):
            settings = replace(settings, scope=CorrectionScope.FULL_IMAGE)
        references = list(ranked_refs)

        logger.info(
            "Running correction: mode=%s scope=%s strength=%d references=%d",
            settings.mode.value,
            settings.scope.value,
            settings.strength,
            len(references),
        )
        try:
            response = self.provider.correct(source_image, settings, references, dimensions)
            result = self._coerce(response)
            metrics = self.evaluator.evaluate(result.metrics, settings)
        except ProviderError as exc:
            logger.warning("Provider failed: %s", exc)
            raise CorrectionFailedError(str(exc) or GENERIC_FAILURE_MESSAGE) from exc
        except MalformedMetricsError as exc:
            logger.warning("Provider returned malformed metrics: %s", exc)
            raise CorrectionFailedError(GENERIC_FAILURE_MESSAGE) from exc
        except Exception as exc:  # noqa: BLE001 - any provider-level fault ends the attempt
            logger.exception("Provider raised an unexpected error")
            raise CorrectionFailedError(GENERIC_FAILURE_MESSAGE) from exc

        session = EditSession(
            id=uuid.uuid4().hex,
            original_image=source_image,
            result_image=bytes(result.result_image),
            settings=replace(settings),
            timestamp=self.clock(),
            metrics=metrics,
            references=tuple(image.id for image in references),
        )
        if self.evaluator.fidelity_shortfall(metrics, settings):
            logger.info(
                "Session %s missed absolute line fidelity (diff outside mask %.4f)",
                session.id,
                metrics.diff_outside_mask,
            )
        logger.info("Correction session %s completed", session.id)
        return session

    @staticmethod
    def _coerce(response: object) -> ProviderResult:
        """Accept a ProviderResult or a mapping with result_image/resultImage and metrics."""

        if isinstance(response, ProviderResult):
            result = response
        elif isinstance(response, Mapping):
            image = response.get("result_image", response.get("resultImage"))
            result = ProviderResult(result_image=image, metrics=response.get("metrics"))
        else:
            raise MalformedMetricsError(f"Unexpected provider response type {type(response).__name__}")
        if not isinstance(result.result_image, (bytes, bytearray)) or not result.result_image:
            raise MalformedMetricsError("Provider response carries no result image")
        if not isinstance(result.metrics, Mapping):
            raise MalformedMetricsError("Provider response carries no metrics")
        return result
