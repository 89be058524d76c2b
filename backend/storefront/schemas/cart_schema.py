from typing import List

from pydantic import BaseModel, ConfigDict

from storefront.schemas.product_schema import ProductOut


class CartLineOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    product_id: int
    quantity: int
    price_cents: int
    product: ProductOut


class CartOut(BaseModel):
    owner: str
    items: List[CartLineOut]
    total_cents: int
