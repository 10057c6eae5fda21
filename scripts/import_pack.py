# Path: scripts/import_pack.py
# Purpose: CLI tool to import a folder of reference images into a new or existing pack.
# Layer: scripts.
# Details: Demonstrates wiring the scanner, catalog, and stores together.

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from tqdm import tqdm

# Ensure project root is on sys.path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import AppSettings
from core.catalog import ImageScanner
from core.storage import CatalogStore, JsonFileStorage, PackSelectionStore, load_catalog


def main() -> None:
    """Import reference images from a folder."""

    parser = argparse.ArgumentParser(description="Import reference images into a pack")
    parser.add_argument("--folder", type=Path, required=True, help="Folder containing reference images")
    parser.add_argument("--pack", type=str, required=True, help="Name of the pack (created if missing)")
    parser.add_argument("--description", type=str, default="", help="Description for a newly created pack")
    parser.add_argument("--tag", action="append", default=[], help="Angle or feature tag; repeatable")
    parser.add_argument("--enable", action="store_true", help="Enable the pack for retrieval")
    args = parser.parse_args()

    settings = AppSettings.from_env()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s")

    storage = JsonFileStorage(settings.storage.data_dir)
    catalog_store = CatalogStore(storage)
    selection_store = PackSelectionStore(storage)
    catalog = load_catalog(catalog_store, selection_store)

    pack = next((p for p in catalog.packs if p.name == args.pack), None)
    if pack is None:
        pack = catalog.add_pack(args.pack, args.description)

    paths = ImageScanner(args.folder).scan()
    images = [path.read_bytes() for path in tqdm(paths, desc="Reading references", unit="img")]
    added = catalog.add_images(pack.id, images, args.tag)
    if args.enable:
        catalog.enable(pack.id)

    catalog_store.save(catalog)
    selection_store.save(catalog)
    print(f"Imported {len(added)} images into pack '{pack.name}' ({pack.id})")


if __name__ == "__main__":
    main()
