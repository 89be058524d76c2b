from typing import Optional

from sqlalchemy.orm import Session, selectinload

from storefront.models.order import Order


class OrderRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_draft_id(self, draft_id: str) -> Optional[Order]:
        return self.db.query(Order).filter(Order.draft_id == draft_id).first()

    def get_for_owner(self, order_id: int, owner: str) -> Optional[Order]:
        """Order with its details, only when it was placed by `owner`."""
        return (
            self.db.query(Order)
            .options(selectinload(Order.details))
            .filter(Order.id == order_id, Order.user_id == owner)
            .first()
        )
