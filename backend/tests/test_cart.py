import pytest

from storefront.exceptions import InvalidArgument, NotFound
from storefront.models.cart_line import CartLine
from storefront.models.product import Product
from storefront.repositories.cart_repo import CartRepository
from storefront.services.cart_service import CartService, cart_total


def test_add_same_product_twice_keeps_one_line(db, products):
    svc = CartService(db)
    svc.add_or_increment("owner-1", products.a, 2)
    line = svc.add_or_increment("owner-1", products.a, 3)
    assert line.quantity == 5

    lines = db.query(CartLine).filter(CartLine.owner == "owner-1").all()
    assert len(lines) == 1
    assert lines[0].quantity == 5


def test_insert_race_falls_back_to_increment(db, products, monkeypatch):
    svc = CartService(db)
    svc.add_or_increment("owner-1", products.a, 2)

    # the first UPDATE misses as if the other request's INSERT landed just after it
    original = CartRepository._increment
    calls = []

    def late_increment(self, owner, product_id, qty):
        calls.append(qty)
        if len(calls) == 1:
            return 0
        return original(self, owner, product_id, qty)

    monkeypatch.setattr(CartRepository, "_increment", late_increment)
    line = svc.add_or_increment("owner-1", products.a, 3)

    assert len(calls) == 2
    assert line.quantity == 5
    lines = db.query(CartLine).filter(CartLine.owner == "owner-1").all()
    assert len(lines) == 1
    assert lines[0].quantity == 5


@pytest.mark.parametrize("q1,q2", [(1, 1), (2, 7), (10, 3)])
def test_repeated_adds_sum(db, products, q1, q2):
    svc = CartService(db)
    svc.add_or_increment("owner-1", products.b, q1)
    svc.add_or_increment("owner-1", products.b, q2)
    [line] = svc.list_by_owner("owner-1")
    assert line.quantity == q1 + q2


def test_price_is_captured_at_add_time(db, products):
    svc = CartService(db)
    svc.add_or_increment("owner-1", products.a, 1)

    prod = db.query(Product).filter(Product.id == products.a).first()
    prod.price_cents = 9999
    db.commit()

    line = svc.add_or_increment("owner-1", products.a, 1)
    assert line.price_cents == 1000
    assert cart_total(svc.list_by_owner("owner-1")) == 2000


@pytest.mark.parametrize("qty", [0, -1, True, 1.5])
def test_non_positive_quantity_rejected(db, products, qty):
    svc = CartService(db)
    svc.add_or_increment("owner-1", products.a, 1)
    with pytest.raises(InvalidArgument):
        svc.add_or_increment("owner-1", products.a, qty)
    [line] = svc.list_by_owner("owner-1")
    assert line.quantity == 1


def test_unknown_product_not_found(db, products):
    with pytest.raises(NotFound):
        CartService(db).add_or_increment("owner-1", 424242, 1)
    assert db.query(CartLine).count() == 0


def test_remove_is_idempotent(db, products):
    svc = CartService(db)
    line = svc.add_or_increment("owner-1", products.a, 1)
    line_id = line.id
    assert svc.remove(line_id) is True
    assert svc.remove(line_id) is False
    assert svc.list_by_owner("owner-1") == []


def test_remove_scoped_to_owner(db, products):
    svc = CartService(db)
    line = svc.add_or_increment("owner-1", products.a, 1)
    assert svc.remove(line.id, owner="someone-else") is False
    assert len(svc.list_by_owner("owner-1")) == 1


def test_list_by_owner_in_insertion_order(db, products):
    svc = CartService(db)
    svc.add_or_increment("owner-1", products.c, 1)
    svc.add_or_increment("owner-1", products.a, 1)
    svc.add_or_increment("owner-2", products.b, 1)
    svc.add_or_increment("owner-1", products.c, 1)
    lines = svc.list_by_owner("owner-1")
    assert [it.product_id for it in lines] == [products.c, products.a]
    assert lines[0].product.name == "Chalk Bag"


def test_add_item_to_cart_via_api(client, products):
    res = client.post("/api/cart/items", json={"product_id": products.a, "quantity": 2})
    assert res.status_code == 200
    body = res.json()
    assert body["quantity"] == 2
    owner = body["owner"]

    # same session cookie -> same anonymous owner
    res = client.post("/api/cart/items", json={"product_id": products.a, "quantity": 1})
    assert res.json()["owner"] == owner
    assert res.json()["quantity"] == 3


def test_get_cart_via_api(client, products):
    client.post("/api/cart/items", json={"product_id": products.a, "quantity": 2})
    client.post("/api/cart/items", json={"product_id": products.b, "quantity": 1})
    res = client.get("/api/cart")
    assert res.status_code == 200
    body = res.json()
    assert body["total_cents"] == 2500
    assert [it["product"]["name"] for it in body["items"]] == ["Product A", "Product B"]


def test_add_item_validation_errors_via_api(client, products):
    res = client.post("/api/cart/items", json={"product_id": products.a, "quantity": 0})
    assert res.status_code == 400
    assert res.json()["error"] == "InvalidArgument"

    res = client.post("/api/cart/items", json={"product_id": 999, "quantity": 1})
    assert res.status_code == 404


def test_remove_item_via_api(client, products):
    line_id = client.post(
        "/api/cart/items", json={"product_id": products.a, "quantity": 1}
    ).json()["line_id"]
    assert client.delete(f"/api/cart/items/{line_id}").json() == {"ok": True, "removed": True}
    # double submit is harmless
    res = client.delete(f"/api/cart/items/{line_id}")
    assert res.status_code == 200
    assert res.json()["removed"] is False
    assert client.get("/api/cart").json()["items"] == []
