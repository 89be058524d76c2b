from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from storefront.db import Base


class CartLine(Base):
    __tablename__ = "cart_lines"
    __table_args__ = (
        UniqueConstraint("owner", "product_id", name="uq_cart_lines_owner_product"),
    )
    id = Column(Integer, primary_key=True, index=True)
    owner = Column(
        String(256), nullable=False, index=True
    )  # anonymous session token or account name
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False, default=1)
    price_cents = Column(
        Integer, nullable=False, default=0
    )  # price at time of add, in cents
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    product = relationship("Product")
