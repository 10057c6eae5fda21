# Path: core/workbench.py
# Purpose: Serialize every state transition of an editing session around a single source image.
# Layer: core.
# Details: Recomputes retrieval at explicit call sites, guards the single in-flight correction, and persists after each commit.

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Iterable, List, Optional, Tuple

from config.settings import AppSettings
from core.catalog.catalog import ReferenceCatalog
from core.corrections.settings_model import normalize
from core.errors import CorrectionFailedError, CorrectionInProgressError, PreconditionError
from core.fingerprints import build_fingerprinter
from core.history.session_history import SessionHistory
from core.imaging import ImagePayload, dimensions_of, open_image, to_bytes
from core.metrics.evaluator import MetricsEvaluator
from core.models.domain import (
    CorrectionMetrics,
    CorrectionSettings,
    EditSession,
    ImageDimensions,
    ReferenceImage,
    ReferencePack,
    ViewMode,
)
from core.orchestration.orchestrator import NO_IMAGE_MESSAGE, CorrectionOrchestrator
from core.providers.base import CorrectionProvider
from core.retrieval.engine import RankedReference, RetrievalEngine
from core.storage.backends import KeyValueStorage
from core.storage.stores import CatalogStore, PackSelectionStore, SettingsStore
from core.views.view_state import ViewState

logger = logging.getLogger(__name__)


class Workbench:
    """Application controller for one illustrator's refinement loop.

    Holds the source image, the current result, the ranked references, the
    settings and catalog, the refinement log, and the view state.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        provider: CorrectionProvider,
        app_settings: Optional[AppSettings] = None,
        orchestrator: Optional[CorrectionOrchestrator] = None,
    ) -> None:
        self.app_settings = app_settings or AppSettings()
        self.catalog_store = CatalogStore(storage)
        self.settings_store = SettingsStore(storage)
        self.selection_store = PackSelectionStore(storage)

        self.catalog = ReferenceCatalog(self.catalog_store.load(), enabled=self.selection_store.load())
        self.settings: CorrectionSettings = self.settings_store.load()

        retrieval = self.app_settings.retrieval
        self.retrieval = RetrievalEngine(build_fingerprinter(retrieval), limit=retrieval.limit)
        self.evaluator = MetricsEvaluator(tolerance=self.app_settings.fidelity_tolerance)
        self.orchestrator = orchestrator or CorrectionOrchestrator(provider, evaluator=self.evaluator)
        self.history = SessionHistory(capacity=self.app_settings.history.capacity)
        self.view = ViewState()

        self.source_image: Optional[bytes] = None
        self.result_image: Optional[bytes] = None
        self.dimensions = ImageDimensions()
        self.ranked_refs: List[RankedReference] = []
        self.error_message: Optional[str] = None
        self._in_flight = threading.Lock()

    # Source image
    def upload(self, image: ImagePayload) -> ImageDimensions:
        """Make ``image`` the new source, discarding any previous result."""

        data = to_bytes(image)
        self.dimensions = dimensions_of(open_image(data))
        self.source_image = data
        self.result_image = None
        self.error_message = None
        self.view.reset()
        self.refresh_references()
        logger.info("Source image loaded (%dx%d)", self.dimensions.width, self.dimensions.height)
        return self.dimensions

    def promote_result(self) -> bool:
        """Use the current result as the new source for another pass."""

        if self.result_image is None:
            return False
        self.source_image = self.result_image
        self.result_image = None
        self.error_message = None
        self.view.promote()
        self.refresh_references()
        return True

    # Settings
    def update_settings(self, **changes: Any) -> CorrectionSettings:
        """Apply a partial update; raises InvalidSettingError and leaves settings untouched on bad input."""

        updated = normalize(changes, base=self.settings)
        angle_changed = updated.angle_tag is not self.settings.angle_tag
        self.settings = updated
        self._persist(self.settings_store.save, updated)
        if angle_changed:
            self.refresh_references()
        return updated

    # Catalog
    def toggle_pack(self, pack_id: str) -> bool:
        enabled = self.catalog.toggle(pack_id)
        self._catalog_changed(selection=True)
        return enabled

    def set_enabled_packs(self, pack_ids: Iterable[str]) -> None:
        self.catalog.set_enabled(pack_ids)
        self._catalog_changed(selection=True)

    def add_pack(self, name: str, description: str = "") -> ReferencePack:
        pack = self.catalog.add_pack(name, description)
        self._catalog_changed()
        return pack

    def update_pack(self, pack_id: str, name: str, description: str) -> ReferencePack:
        pack = self.catalog.update_pack(pack_id, name, description)
        self._catalog_changed()
        return pack

    def delete_pack(self, pack_id: str) -> None:
        self.catalog.delete_pack(pack_id)
        self._catalog_changed(selection=True)

    def add_images(self, pack_id: str, images: Iterable[ImagePayload], tags: Iterable[str] = ()) -> List[ReferenceImage]:
        added = self.catalog.add_images(pack_id, images, tags)
        self._catalog_changed()
        return added

    def delete_image(self, pack_id: str, image_id: str) -> None:
        self.catalog.delete_image(pack_id, image_id)
        self._catalog_changed()

    def tag_image(self, pack_id: str, image_id: str, tags: Iterable[str]) -> ReferenceImage:
        image = self.catalog.tag_image(pack_id, image_id, tags)
        self._catalog_changed()
        return image

    def _catalog_changed(self, selection: bool = False) -> None:
        self._persist(self.catalog_store.save, self.catalog)
        if selection:
            self._persist(self.selection_store.save, self.catalog)
        self.refresh_references()

    # Retrieval
    def refresh_references(self) -> List[RankedReference]:
        """Recompute the ranked references for the current source, angle, and selection."""

        if self.source_image is None:
            self.ranked_refs = []
        else:
            self.ranked_refs = self.retrieval.rank(
                self.source_image, self.catalog.enabled_packs(), self.settings.angle_tag
            )
        return self.ranked_refs

    # Correction
    @property
    def is_processing(self) -> bool:
        return self._in_flight.locked()

    def run_correction(self) -> EditSession:
        """Run one correction with the current source, settings, and references."""

        if self.source_image is None:
            self.error_message = NO_IMAGE_MESSAGE
            raise PreconditionError(NO_IMAGE_MESSAGE)
        if not self._in_flight.acquire(blocking=False):
            raise CorrectionInProgressError("A correction is already running.")
        try:
            self.error_message = None
            session = self.orchestrator.run(
                self.source_image,
                self.settings,
                [image for image, _ in self.ranked_refs],
                self.dimensions,
            )
        except CorrectionFailedError as exc:
            self.error_message = exc.detail
            raise
        finally:
            self._in_flight.release()

        self.result_image = session.result_image
        self.history.append(session)
        self.view.show_result()
        return session

    @property
    def current_metrics(self) -> Optional[CorrectionMetrics]:
        latest = self.history.latest
        return latest.metrics if latest else None

    # History and view
    def replay(self, session_id: str) -> EditSession:
        """Bring a past session back as the current source/result pair."""

        session = self.history.get(session_id)
        self.source_image, self.result_image = self.history.replay(session_id)
        self.view.show_result()
        self.refresh_references()
        return session

    def clear_history(self, confirm: Callable[[], bool]) -> bool:
        """Clear the refinement log only if ``confirm`` approves."""

        if not confirm():
            return False
        self.history.clear()
        return True

    def select_view(self, mode: ViewMode) -> bool:
        return self.view.select(mode)

    def export_result(self) -> Tuple[str, bytes]:
        """File name and bytes for saving the current result."""

        if self.result_image is None:
            raise PreconditionError("There is no correction to save.")
        return f"on-model-correction-{int(time.time() * 1000)}.png", self.result_image

    # Persistence
    @staticmethod
    def _persist(save: Callable[[Any], None], value: Any) -> None:
        try:
            save(value)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Persisting state failed: %s", exc, exc_info=True)
