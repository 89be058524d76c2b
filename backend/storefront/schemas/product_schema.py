# backend/storefront/schemas/product_schema.py
from typing import Optional
from pydantic import BaseModel
from pydantic import ConfigDict

class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    name: str

class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    name: str
    description: Optional[str] = None
    price_cents: int
    image: Optional[str] = None
    category_id: int
