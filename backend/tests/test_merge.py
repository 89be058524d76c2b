from storefront.models.cart_line import CartLine
from storefront.services.cart_service import CartService
from storefront.services.identity_service import (
    ACCOUNT,
    ANONYMOUS,
    OWNER_KEY,
    OWNER_KIND_KEY,
    IdentityService,
)


def _quantities(svc, owner):
    return {it.product_id: it.quantity for it in svc.list_by_owner(owner)}


def test_merge_moves_and_combines(db, products):
    svc = CartService(db)
    svc.add_or_increment("anon", products.a, 2)
    svc.add_or_increment("anon", products.b, 4)
    svc.add_or_increment("u1", products.b, 1)
    svc.add_or_increment("u1", products.c, 3)

    result = svc.merge_carts("anon", "u1")

    assert (result.moved, result.combined) == (1, 1)
    assert _quantities(svc, "u1") == {products.a: 2, products.b: 5, products.c: 3}
    assert db.query(CartLine).filter(CartLine.owner == "anon").count() == 0
    # exactly one line per product for the account
    assert db.query(CartLine).filter(CartLine.owner == "u1").count() == 3


def test_merge_reparents_lines_in_place(db, products):
    svc = CartService(db)
    line_id = svc.add_or_increment("anon", products.a, 2).id
    svc.merge_carts("anon", "u1")
    line = db.query(CartLine).filter(CartLine.id == line_id).first()
    assert line.owner == "u1"
    assert line.price_cents == 1000


def test_merge_of_empty_or_same_owner_is_noop(db, products):
    svc = CartService(db)
    svc.add_or_increment("u1", products.a, 1)
    assert not svc.merge_carts("nobody", "u1").changed
    assert not svc.merge_carts("u1", "u1").changed
    assert _quantities(svc, "u1") == {products.a: 1}


def test_resolve_owner_anonymous_then_stable():
    session = {}
    identity = IdentityService()
    owner = identity.resolve_owner(session, None)
    assert len(owner) == 32
    assert session[OWNER_KIND_KEY] == ANONYMOUS
    # logging in later doesn't change the resolved owner until checkout syncs it
    assert identity.resolve_owner(session, "u1") == owner
    assert identity.resolve_owner(session, None) == owner


def test_resolve_owner_authenticated():
    session = {}
    assert IdentityService().resolve_owner(session, "u1") == "u1"
    assert session == {OWNER_KEY: "u1", OWNER_KIND_KEY: ACCOUNT}


def test_fresh_sessions_get_distinct_tokens():
    identity = IdentityService()
    assert identity.resolve_owner({}, None) != identity.resolve_owner({}, None)


def test_login_sync_merges_once(db, products):
    svc = CartService(db)
    identity = IdentityService(svc)
    session = {}
    anon = identity.resolve_owner(session, None)
    svc.add_or_increment(anon, products.a, 2)
    svc.add_or_increment("u1", products.a, 1)

    assert identity.sync_owner_on_login(session, "u1") is True
    assert session[OWNER_KEY] == "u1"
    assert session[OWNER_KIND_KEY] == ACCOUNT
    assert _quantities(svc, "u1") == {products.a: 3}

    # second sync for the same session changes nothing
    svc.add_or_increment(anon, products.b, 1)  # stray line under the old token
    assert identity.sync_owner_on_login(session, "u1") is False
    assert _quantities(svc, "u1") == {products.a: 3}
    assert _quantities(svc, anon) == {products.b: 1}


def test_account_switch_does_not_merge(db, products):
    svc = CartService(db)
    identity = IdentityService(svc)
    session = {}
    identity.resolve_owner(session, "u1")
    svc.add_or_increment("u1", products.a, 1)

    assert identity.sync_owner_on_login(session, "u2") is True
    assert session[OWNER_KEY] == "u2"
    assert _quantities(svc, "u1") == {products.a: 1}
    assert _quantities(svc, "u2") == {}
