from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from storefront.models.cart_line import CartLine


@dataclass
class MergeResult:
    moved: int = 0  # lines re-parented to the account owner
    combined: int = 0  # lines folded into an existing account line

    @property
    def changed(self) -> bool:
        return bool(self.moved or self.combined)


class CartRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_line(self, owner: str, product_id: int) -> Optional[CartLine]:
        return (
            self.db.query(CartLine)
            .filter(CartLine.owner == owner, CartLine.product_id == product_id)
            .first()
        )

    def list_by_owner(self, owner: str) -> List[CartLine]:
        return (
            self.db.query(CartLine)
            .options(joinedload(CartLine.product))
            .filter(CartLine.owner == owner)
            .order_by(CartLine.id)
            .all()
        )

    def _increment(self, owner: str, product_id: int, qty: int) -> int:
        # single UPDATE so concurrent adds can't lose an increment
        return (
            self.db.query(CartLine)
            .filter(CartLine.owner == owner, CartLine.product_id == product_id)
            .update(
                {CartLine.quantity: CartLine.quantity + qty},
                synchronize_session="fetch",
            )
        )

    def add_or_increment(
        self, owner: str, product_id: int, qty: int, price_cents: int
    ) -> CartLine:
        if not self._increment(owner, product_id, qty):
            try:
                with self.db.begin_nested():
                    self.db.add(
                        CartLine(
                            owner=owner,
                            product_id=product_id,
                            quantity=qty,
                            price_cents=price_cents,
                        )
                    )
            except IntegrityError:
                # another request inserted the same (owner, product) first
                self._increment(owner, product_id, qty)
        self.db.flush()
        line = self.get_line(owner, product_id)
        self.db.refresh(line)
        return line

    def remove(self, line_id: int, owner: Optional[str] = None) -> bool:
        qry = self.db.query(CartLine).filter(CartLine.id == line_id)
        if owner is not None:
            qry = qry.filter(CartLine.owner == owner)
        it = qry.first()
        if it:
            self.db.delete(it)
            self.db.flush()
            return True
        return False

    def delete_by_owner(self, owner: str) -> int:
        return (
            self.db.query(CartLine)
            .filter(CartLine.owner == owner)
            .delete(synchronize_session="fetch")
        )

    def merge_owner(self, from_owner: str, to_owner: str) -> MergeResult:
        """
        Fold every line of `from_owner` into `to_owner`.

        A product only `from_owner` holds is re-parented in place; a product
        both hold has the quantities summed into `to_owner`'s line and the
        `from_owner` line deleted. Rows are locked FOR UPDATE where the
        backend supports it. Does not commit.
        """
        result = MergeResult()
        if from_owner == to_owner:
            return result
        lines = (
            self.db.query(CartLine)
            .filter(CartLine.owner == from_owner)
            .order_by(CartLine.id)
            .with_for_update()
            .all()
        )
        for line in lines:
            existing = (
                self.db.query(CartLine)
                .filter(
                    CartLine.owner == to_owner,
                    CartLine.product_id == line.product_id,
                )
                .with_for_update()
                .first()
            )
            if existing is None:
                line.owner = to_owner
                result.moved += 1
            else:
                existing.quantity += line.quantity
                self.db.delete(line)
                result.combined += 1
            self.db.flush()
        return result
