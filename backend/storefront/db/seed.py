from typing import Dict, Iterable

from sqlalchemy.orm import Session

from storefront.models.category import Category
from storefront.models.product import Product
from storefront.utils.transactions import unit_of_work

DEFAULT_CATALOG = [
    {"category": "Climbing Shoes", "name": "Crag Runner", "price_cents": 12999,
     "description": "All-round lace-up shoe for gym and crag."},
    {"category": "Climbing Shoes", "name": "Edge Master", "price_cents": 17450,
     "description": "Stiff, downturned shoe for technical edging."},
    {"category": "Harnesses", "name": "Summit Harness", "price_cents": 8999,
     "description": "Lightweight harness with four gear loops."},
    {"category": "Chalk", "name": "Loose Chalk 300g", "price_cents": 1199},
    {"category": "Chalk", "name": "Chalk Bag", "price_cents": 2499,
     "description": "Fleece-lined bag with brush holder."},
    {"category": "Ropes", "name": "Dynamic Rope 60m", "price_cents": 21900},
]


def normalize_entry(entry: Dict) -> Dict:
    """Return a normalized dict with keys: category, name, price_cents, description, image"""
    # price parsing: prefer price_cents; if not present, try a decimal price
    if entry.get("price_cents") is not None:
        price_cents = int(entry["price_cents"])
    else:
        raw_price = entry.get("price", 0)
        price_cents = int(round(float(raw_price) * 100))
    if price_cents < 0:
        raise ValueError(f"Negative price for {entry.get('name')!r}")

    image = entry.get("image")
    if not image:
        imgs = entry.get("images") or []
        image = imgs[0] if isinstance(imgs, (list, tuple)) and imgs else None

    return {
        "category": entry.get("category") or "Uncategorized",
        "name": entry.get("name") or entry.get("title"),
        "price_cents": price_cents,
        "description": entry.get("description"),
        "image": image,
    }


def seed_catalog(db: Session, entries: Iterable[Dict]) -> int:
    """
    Upsert categories and products from `entries`.

    Each entry needs `category`, `name` and `price_cents`; `description` and
    `image` are optional. Existing products (matched by name) get their price,
    description, image and category refreshed. Returns the number of products
    created, so re-running the seed is idempotent and returns 0.
    """
    created = 0
    with unit_of_work(db):
        categories = {c.name: c for c in db.query(Category).all()}
        for ent in entries:
            cat_name = ent["category"]
            cat = categories.get(cat_name)
            if cat is None:
                cat = Category(name=cat_name)
                db.add(cat)
                db.flush()
                categories[cat_name] = cat

            p = db.query(Product).filter(Product.name == ent["name"]).first()
            if p is None:
                p = Product(name=ent["name"])
                db.add(p)
                created += 1
            p.price_cents = int(ent["price_cents"])
            p.description = ent.get("description")
            p.image = ent.get("image")
            p.category_id = cat.id
            db.flush()
    return created
