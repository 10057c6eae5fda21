import io
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

import numpy as np
import pytest
from PIL import Image

from core.models.domain import CorrectionMetrics, CorrectionSettings, EditSession
from core.providers.base import ProviderResult
from core.storage import MemoryStorage

EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


def png_from_array(array: np.ndarray) -> bytes:
    buffer = io.BytesIO()
    Image.fromarray(array.astype(np.uint8)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def gradient_png() -> bytes:
    """64x64 grayscale ramp, dark on the left."""
    row = np.linspace(0, 255, 64)
    return png_from_array(np.tile(row, (64, 1)))


@pytest.fixture
def reversed_gradient_png() -> bytes:
    """Same ramp mirrored, dark on the right."""
    row = np.linspace(255, 0, 64)
    return png_from_array(np.tile(row, (64, 1)))


@pytest.fixture
def checker_png() -> bytes:
    """64x64 RGB one-pixel checkerboard; any smoothing changes it."""
    grid = (np.indices((64, 64)).sum(axis=0) % 2) * 255
    return png_from_array(np.stack([grid, grid, grid], axis=-1))


@pytest.fixture
def solid_png() -> Callable[[int], bytes]:
    def _make(value: int) -> bytes:
        return png_from_array(np.full((32, 32), value))

    return _make


class StubProvider:
    """Provider double returning fixed metrics and recording every call."""

    def __init__(self, metrics: Optional[Dict[str, float]] = None, result_image: bytes = b"result-bytes") -> None:
        self.metrics = metrics if metrics is not None else {
            "mask_coverage": 0.5,
            "denoise_used": 0.35,
            "diff_in_mask": 0.02,
            "diff_outside_mask": 0.0,
        }
        self.result_image = result_image
        self.calls: List[tuple] = []

    def correct(self, source_image, settings, references, dimensions):
        self.calls.append((source_image, settings, list(references), dimensions))
        return ProviderResult(result_image=self.result_image, metrics=dict(self.metrics))


class FailingProvider:
    def __init__(self, error: Exception) -> None:
        self.error = error
        self.calls = 0

    def correct(self, source_image, settings, references, dimensions):
        self.calls += 1
        raise self.error


@pytest.fixture
def stub_provider() -> StubProvider:
    return StubProvider()


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock advancing one second per call, starting at EPOCH."""
    ticks = iter(range(10_000))
    return lambda: EPOCH + timedelta(seconds=next(ticks))


@pytest.fixture
def make_session() -> Callable[[str], EditSession]:
    def _make(session_id: str) -> EditSession:
        return EditSession(
            id=session_id,
            original_image=f"original-{session_id}".encode(),
            result_image=f"result-{session_id}".encode(),
            settings=CorrectionSettings(),
            timestamp=EPOCH,
            metrics=CorrectionMetrics(
                mask_coverage=1.0,
                denoise_used=0.5,
                diff_in_mask=0.01,
                diff_outside_mask=0.0,
                absolute_line_fidelity=True,
            ),
        )

    return _make
