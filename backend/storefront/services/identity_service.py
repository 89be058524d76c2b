import uuid
from typing import MutableMapping, Optional

from storefront.services.cart_service import CartService
from storefront.utils.logging import get_logger

log = get_logger("identity")

OWNER_KEY = "cart_owner"
OWNER_KIND_KEY = "cart_owner_kind"
ANONYMOUS = "anonymous"
ACCOUNT = "account"


class IdentityService:
    """
    Decides which owner token a visitor's cart lives under.

    The session is any mutable mapping (Starlette's `request.session` in the
    app, a plain dict in tests). It holds the owner token and whether that
    token is an anonymous one or an account name.
    """

    def __init__(self, cart_service: Optional[CartService] = None):
        self.cart_service = cart_service

    def resolve_owner(
        self, session: MutableMapping, authenticated_name: Optional[str] = None
    ) -> str:
        owner = session.get(OWNER_KEY)
        if owner:
            return owner
        if authenticated_name:
            owner, kind = authenticated_name, ACCOUNT
        else:
            owner, kind = uuid.uuid4().hex, ANONYMOUS
        session[OWNER_KEY] = owner
        session[OWNER_KIND_KEY] = kind
        log.debug("new %s cart owner %s", kind, owner)
        return owner

    def is_anonymous(self, session: MutableMapping) -> bool:
        return session.get(OWNER_KIND_KEY, ANONYMOUS) == ANONYMOUS

    def sync_owner_on_login(
        self, session: MutableMapping, authenticated_name: str
    ) -> bool:
        """
        Move the session over to `authenticated_name`.

        An anonymous cart is merged into the account's cart first, and the
        session only switches once that merge has committed. A session that
        already belongs to a different account is switched without merging.
        Returns False when the session already belongs to the account.
        """
        current = session.get(OWNER_KEY)
        if current == authenticated_name:
            return False
        if current and self.is_anonymous(session):
            if self.cart_service is None:
                raise RuntimeError("IdentityService needs a CartService to merge carts")
            self.cart_service.merge_carts(current, authenticated_name)
        elif current:
            log.info("session switched accounts %s -> %s", current, authenticated_name)
        session[OWNER_KEY] = authenticated_name
        session[OWNER_KIND_KEY] = ACCOUNT
        return True
