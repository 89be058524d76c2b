from typing import List, Optional

from sqlalchemy.orm import Session

from storefront.models.category import Category
from storefront.models.product import Product


class CatalogRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_categories(self) -> List[Category]:
        return self.db.query(Category).order_by(Category.name).all()

    def list_products(self, category_name: str) -> List[Product]:
        # unknown categories simply have no products
        return (
            self.db.query(Product)
            .join(Category, Product.category_id == Category.id)
            .filter(Category.name == category_name)
            .order_by(Product.name)
            .all()
        )

    def get_product(self, product_id: int) -> Optional[Product]:
        return self.db.query(Product).filter(Product.id == product_id).first()

    def get_product_by_name(self, name: str) -> Optional[Product]:
        return self.db.query(Product).filter(Product.name == name).first()
