#!/usr/bin/env python3
"""
Seed categories and products from a JSON file.

The file holds a list of entries (or an object with an "items" list); each
entry needs a category, a name and a price (either price_cents or a decimal
price). Without --file the built-in default catalog is used.

Usage:
    python scripts/seed_catalog.py --file catalog.json
"""
import argparse
import json
import os
import sys

# allow running from repo/scripts
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from storefront.db import SessionLocal, init_db
from storefront.db.seed import DEFAULT_CATALOG, normalize_entry, seed_catalog


def load_entries(path: str):
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except ValueError as e:
            raise RuntimeError(f"Failed to parse JSON from {path}: {e}")
    if isinstance(data, dict):
        data = data.get("items", [])
    return [normalize_entry(entry) for entry in data]


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--file", "-f", default=None, help="Path to catalog json")
    args = parser.parse_args()
    if args.file and not os.path.exists(args.file):
        print("File not found:", args.file)
        sys.exit(1)

    entries = load_entries(args.file) if args.file else DEFAULT_CATALOG
    init_db()
    db = SessionLocal()
    try:
        created = seed_catalog(db, entries)
        print("Seeded products:", created)
    finally:
        db.close()
