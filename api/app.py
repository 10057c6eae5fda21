# Path: api/app.py
# Purpose: Expose a FastAPI application over the refinement workbench.
# Layer: api.
# Details: Thin HTTP layer; images travel as base64 strings or data URIs, errors map onto status codes.

from __future__ import annotations

from typing import Any, Dict, Optional

from core.errors import (
    CorrectionFailedError,
    CorrectionInProgressError,
    InvalidImageError,
    InvalidSettingError,
    PreconditionError,
)
from core.imaging import to_data_uri
from core.metrics.evaluator import MetricsEvaluator
from core.models.domain import ReferencePack, ViewMode
from core.workbench import Workbench


def _pack_summary(pack: ReferencePack, enabled: bool) -> Dict[str, Any]:
    return {
        "id": pack.id,
        "name": pack.name,
        "description": pack.description,
        "image_count": len(pack.images),
        "enabled": enabled,
    }


def create_app(workbench: Optional[Workbench] = None):  # type: ignore[override]
    """Create a FastAPI app instance configured with the provided workbench."""

    from fastapi import FastAPI, HTTPException

    app = FastAPI(title="On-Model Assistant API", version="0.1.0")

    def _workbench() -> Workbench:
        if workbench is None:
            raise HTTPException(status_code=500, detail="Workbench is not configured.")
        return workbench

    def _state(bench: Workbench) -> Dict[str, Any]:
        metrics = bench.current_metrics
        return {
            "has_source": bench.source_image is not None,
            "has_result": bench.result_image is not None,
            "view_mode": bench.view.mode.value,
            "dimensions": bench.dimensions.to_dict(),
            "error": bench.error_message,
            "metrics": metrics.to_dict() if metrics else None,
        }

    @app.get("/health")
    def health() -> Dict[str, str]:
        """Return a simple health status payload."""

        return {"status": "ok"}

    @app.get("/settings")
    def get_settings() -> Dict[str, Any]:
        return _workbench().settings.to_dict()

    @app.patch("/settings")
    def patch_settings(payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            return _workbench().update_settings(**payload).to_dict()
        except InvalidSettingError as exc:
            raise HTTPException(status_code=422, detail={"field": exc.field, "message": str(exc)}) from exc

    @app.get("/packs")
    def list_packs() -> Dict[str, Any]:
        bench = _workbench()
        catalog = bench.catalog
        return {
            "packs": [_pack_summary(pack, catalog.is_enabled(pack.id)) for pack in catalog.packs],
            "storage_mb": round(catalog.storage_usage_mb(), 3),
        }

    @app.post("/packs")
    def create_pack(payload: Dict[str, Any]) -> Dict[str, Any]:
        bench = _workbench()
        name = payload.get("name")
        if not name:
            raise HTTPException(status_code=422, detail="Pack name is required.")
        pack = bench.add_pack(str(name), str(payload.get("description", "")))
        return _pack_summary(pack, bench.catalog.is_enabled(pack.id))

    @app.post("/packs/{pack_id}/toggle")
    def toggle_pack(pack_id: str) -> Dict[str, Any]:
        try:
            enabled = _workbench().toggle_pack(pack_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=f"Pack {pack_id} not found.") from exc
        return {"id": pack_id, "enabled": enabled}

    @app.post("/packs/{pack_id}/images")
    def upload_to_pack(pack_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            added = _workbench().add_images(pack_id, payload.get("images", []), payload.get("tags", []))
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=f"Pack {pack_id} not found.") from exc
        except InvalidImageError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return {"images": [{"id": image.id, "tags": sorted(image.tags)} for image in added]}

    @app.delete("/packs/{pack_id}")
    def delete_pack(pack_id: str) -> Dict[str, str]:
        try:
            _workbench().delete_pack(pack_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=f"Pack {pack_id} not found.") from exc
        return {"status": "deleted"}

    @app.post("/source")
    def upload_source(payload: Dict[str, Any]) -> Dict[str, Any]:
        bench = _workbench()
        try:
            bench.upload(payload.get("image", ""))
        except InvalidImageError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return _state(bench)

    @app.get("/references")
    def references() -> Dict[str, Any]:
        bench = _workbench()
        angle = bench.settings.angle_tag.value
        return {
            "references": [
                {
                    "id": image.id,
                    "pack_id": image.pack_id,
                    "similarity": score,
                    "exact_angle": angle in image.tags,
                }
                for image, score in bench.ranked_refs
            ]
        }

    @app.post("/corrections")
    def run_correction() -> Dict[str, Any]:
        bench = _workbench()
        try:
            session = bench.run_correction()
        except CorrectionInProgressError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        except PreconditionError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except CorrectionFailedError as exc:
            raise HTTPException(status_code=502, detail=exc.detail) from exc
        payload = session.to_dict()
        payload["result_image"] = to_data_uri(session.result_image)
        payload["summary"] = MetricsEvaluator.summarize(session.metrics)
        payload["fidelity_shortfall"] = bench.evaluator.fidelity_shortfall(session.metrics, session.settings)
        return payload

    @app.get("/history")
    def history() -> Dict[str, Any]:
        return {"sessions": [session.to_dict() for session in _workbench().history]}

    @app.post("/history/{session_id}/replay")
    def replay(session_id: str) -> Dict[str, Any]:
        bench = _workbench()
        try:
            bench.replay(session_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=f"Session {session_id} not found.") from exc
        return _state(bench)

    @app.delete("/history")
    def clear_history(confirm: bool = False) -> Dict[str, bool]:
        if not confirm:
            raise HTTPException(status_code=400, detail="Clearing the history requires confirm=true.")
        return {"cleared": _workbench().clear_history(lambda: confirm)}

    @app.post("/view")
    def select_view(payload: Dict[str, Any]) -> Dict[str, Any]:
        bench = _workbench()
        try:
            mode = ViewMode(payload.get("mode"))
        except ValueError as exc:
            raise HTTPException(status_code=422, detail="Unknown view mode.") from exc
        if not bench.select_view(mode):
            raise HTTPException(status_code=409, detail="No result to display yet.")
        return _state(bench)

    @app.post("/promote")
    def promote() -> Dict[str, Any]:
        bench = _workbench()
        if not bench.promote_result():
            raise HTTPException(status_code=409, detail="No result to promote.")
        return _state(bench)

    return app
