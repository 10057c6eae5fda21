# Path: scripts/refine_image.py
# Purpose: CLI to run one on-model correction against the stored catalog and settings.
# Layer: scripts.
# Details: Uses the local preview provider; prints ranked references and the interpreted metrics.

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Ensure project root is on sys.path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import AppSettings
from core.errors import CorrectionFailedError, InvalidSettingError
from core.metrics import MetricsEvaluator
from core.providers import LocalPreviewProvider
from core.storage import JsonFileStorage
from core.workbench import Workbench


def main() -> int:
    """Refine a single image from the command line."""

    parser = argparse.ArgumentParser(description="Pull a sketch back on model")
    parser.add_argument("image", type=Path, help="Source sketch")
    parser.add_argument("--output", type=Path, default=None, help="Where to write the corrected PNG")
    parser.add_argument("--angle", type=str, default=None, help="Angle tag, e.g. 'Profile' or '3/4 View'")
    parser.add_argument("--mode", type=str, default=None, help="'Proportion' or 'Conditioned'")
    parser.add_argument("--scope", type=str, default=None, help="e.g. 'Face Priority'")
    parser.add_argument("--strength", type=int, default=None, help="Change amount, 1-100")
    parser.add_argument("--line-preservation", type=int, default=None, dest="line_preservation")
    args = parser.parse_args()

    settings = AppSettings.from_env()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s")

    bench = Workbench(JsonFileStorage(settings.storage.data_dir), LocalPreviewProvider(), app_settings=settings)
    changes = {
        "angle_tag": args.angle,
        "mode": args.mode,
        "scope": args.scope,
        "strength": args.strength,
        "line_preservation": args.line_preservation,
    }
    try:
        bench.update_settings(**{key: value for key, value in changes.items() if value is not None})
    except InvalidSettingError as exc:
        parser.error(str(exc))

    bench.upload(args.image.read_bytes())
    for image, score in bench.ranked_refs:
        print(f"reference id={image.id} pack={image.pack_id} similarity={score:.4f}")

    try:
        session = bench.run_correction()
    except CorrectionFailedError as exc:
        print(f"Correction failed: {exc.detail}", file=sys.stderr)
        return 1

    for label, value in MetricsEvaluator.summarize(session.metrics).items():
        print(f"{label}: {value}")
    print(f"absolute line fidelity: {session.metrics.absolute_line_fidelity}")

    filename, data = bench.export_result()
    output = args.output or Path(filename)
    output.write_bytes(data)
    print(f"Saved {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
