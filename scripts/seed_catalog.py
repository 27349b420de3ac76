import json
import os
from typing import List

from garage.core.errors import ConflictError
from garage.db.session import Database
from garage.repositories.sql import SqlPartRepository
from garage.services.catalog import CatalogStore

# -----------------------
# Strict env-based config
# -----------------------
DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL is not set.")

# Optional JSON file with a list of {name, category, price, stock, performance}
CATALOG_FILE = os.getenv("CATALOG_FILE")

DEFAULT_CATALOG: List[dict] = [
    {"name": "V6 Hybrid", "category": "Power Unit", "price": 15000, "stock": 4, "performance": {"p": 8, "a": 2, "m": 5}},
    {"name": "V6 Hybrid Lite", "category": "Power Unit", "price": 9000, "stock": 6, "performance": {"p": 6, "a": 1, "m": 6}},
    {"name": "High Downforce Kit", "category": "Aero Package", "price": 7000, "stock": 5, "performance": {"p": 1, "a": 8, "m": 5}},
    {"name": "Low Drag Kit", "category": "Aero Package", "price": 6500, "stock": 5, "performance": {"p": 3, "a": 6, "m": 4}},
    {"name": "Soft Compound Set", "category": "Tires", "price": 1200, "stock": 20, "performance": {"p": 2, "a": 3, "m": 8}},
    {"name": "Hard Compound Set", "category": "Tires", "price": 900, "stock": 20, "performance": {"p": 1, "a": 2, "m": 6}},
    {"name": "Pushrod Suspension", "category": "Suspension", "price": 4000, "stock": 6, "performance": {"p": 0, "a": 4, "m": 8}},
    {"name": "Pullrod Suspension", "category": "Suspension", "price": 4200, "stock": 6, "performance": {"p": 0, "a": 5, "m": 7}},
    {"name": "8-Speed Seamless", "category": "Gearbox", "price": 5000, "stock": 6, "performance": {"p": 4, "a": 0, "m": 7}},
]


def load_catalog() -> List[dict]:
    if CATALOG_FILE:
        with open(CATALOG_FILE, "r", encoding="utf-8") as f:
            return json.load(f)
    return DEFAULT_CATALOG


def seed_catalog():
    db = Database(DATABASE_URL)
    try:
        db.create_all()
        catalog = CatalogStore(SqlPartRepository(db))
        created = skipped = 0
        for entry in load_catalog():
            try:
                catalog.create(
                    entry["name"], entry["category"], entry["price"], entry["stock"], entry.get("performance")
                )
                created += 1
            except ConflictError:
                skipped += 1
                print(f"⚠️  {entry['name']}: already in catalog, skipping")
        print(f"\n✅ Catalog seed complete: {created} created, {skipped} skipped")
    finally:
        db.dispose()

if __name__ == "__main__":
    seed_catalog()
