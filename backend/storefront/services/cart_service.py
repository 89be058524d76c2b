from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from storefront.exceptions import InvalidArgument, NotFound
from storefront.models.cart_line import CartLine
from storefront.repositories.cart_repo import CartRepository, MergeResult
from storefront.repositories.catalog_repo import CatalogRepository
from storefront.utils.logging import get_logger
from storefront.utils.transactions import unit_of_work

log = get_logger("cart")


def cart_total(lines: Iterable[CartLine]) -> int:
    """Sum of quantity x captured price, in cents."""
    return sum(it.quantity * it.price_cents for it in lines)


class CartService:
    def __init__(self, db: Session):
        self.db = db
        self.cart_repo = CartRepository(db)
        self.catalog_repo = CatalogRepository(db)

    def add_or_increment(self, owner: str, product_id: int, qty: int) -> CartLine:
        # bool is an int subclass; True must not count as quantity 1
        if isinstance(qty, bool) or not isinstance(qty, int) or qty <= 0:
            raise InvalidArgument("Quantity must be a positive integer")
        with unit_of_work(self.db):
            product = self.catalog_repo.get_product(product_id)
            if not product:
                raise NotFound(f"Product not found: {product_id}")
            line = self.cart_repo.add_or_increment(
                owner, product.id, qty, product.price_cents
            )
        log.debug(
            "add owner=%s product=%s qty=%s -> line=%s quantity=%s",
            owner, product_id, qty, line.id, line.quantity,
        )
        return line

    def remove(self, line_id: int, owner: Optional[str] = None) -> bool:
        """Delete a cart line; removing an absent line is a no-op."""
        with unit_of_work(self.db):
            removed = self.cart_repo.remove(line_id, owner=owner)
        if not removed:
            log.debug("remove line=%s owner=%s: already gone", line_id, owner)
        return removed

    def list_by_owner(self, owner: str) -> List[CartLine]:
        return self.cart_repo.list_by_owner(owner)

    def merge_carts(self, anonymous_owner: str, account_owner: str) -> MergeResult:
        with unit_of_work(self.db):
            result = self.cart_repo.merge_owner(anonymous_owner, account_owner)
        if result.changed:
            log.info(
                "merged cart %s into %s: moved=%d combined=%d",
                anonymous_owner, account_owner, result.moved, result.combined,
            )
        return result
