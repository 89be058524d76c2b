from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.db import get_db
from storefront.exceptions import NotFound
from storefront.repositories.catalog_repo import CatalogRepository
from storefront.schemas.product_schema import CategoryOut, ProductOut

router = APIRouter(tags=["catalogue"])


@router.get("/api/categories", summary="List categories")
def list_categories(db: Session = Depends(get_db)):
    repo = CatalogRepository(db)
    return {
        "items": [CategoryOut.model_validate(c).model_dump() for c in repo.list_categories()]
    }


@router.get("/api/categories/{name}/products", summary="Browse products in a category")
def browse_products(name: str, db: Session = Depends(get_db)):
    repo = CatalogRepository(db)
    products = repo.list_products(name)
    return {
        "category": name,
        "items": [ProductOut.model_validate(p).model_dump() for p in products],
    }


@router.get("/api/products/{name}", summary="Get product by name")
def get_product(name: str, db: Session = Depends(get_db)):
    repo = CatalogRepository(db)
    p = repo.get_product_by_name(name)
    if not p:
        raise NotFound("Product not found")
    return ProductOut.model_validate(p).model_dump()
