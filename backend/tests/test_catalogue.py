def test_list_categories(client, products):
    res = client.get("/api/categories")
    assert res.status_code == 200
    names = [c["name"] for c in res.json()["items"]]
    assert names == ["Chalk", "Gear"]


def test_browse_products_by_category(client, products):
    res = client.get("/api/categories/Gear/products")
    assert res.status_code == 200
    body = res.json()
    assert body["category"] == "Gear"
    assert [p["name"] for p in body["items"]] == ["Product A", "Product B"]
    assert body["items"][0]["price_cents"] == 1000


def test_browse_unknown_category_is_empty(client, products):
    res = client.get("/api/categories/Kayaks/products")
    assert res.status_code == 200
    assert res.json()["items"] == []


def test_product_details(client, products):
    res = client.get("/api/products/Chalk Bag")
    assert res.status_code == 200
    assert res.json()["id"] == products.c

    res = client.get("/api/products/Nope")
    assert res.status_code == 404
    assert res.json()["error"] == "NotFound"
