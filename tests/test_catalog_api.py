from decimal import Decimal

from tests.factories import future_iso


async def test_category_crud(client):
    resp = await client.post("/categories", json={"name": "Garden", "description": "Outdoor"})
    assert resp.status_code == 201
    category = resp.json()["data"]

    assert (await client.post("/categories", json={"name": "Garden"})).status_code == 400

    resp = await client.put(f"/categories/{category['id']}", json={"description": "Plants and tools"})
    assert resp.json()["data"]["description"] == "Plants and tools"

    names = [c["name"] for c in (await client.get("/categories")).json()["data"]]
    assert names == ["Garden"]

    assert (await client.delete(f"/categories/{category['id']}")).status_code == 200
    assert (await client.get(f"/categories/{category['id']}")).status_code == 404


async def test_product_requires_existing_category(client):
    resp = await client.post("/products", json={"name": "Rake", "category_id": 12, "price": "9.99"})
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Category not found"


async def test_product_crud(client):
    category = (await client.post("/categories", json={"name": "Tools"})).json()["data"]

    resp = await client.post("/products", json={"name": "Rake", "category_id": category["id"], "price": "9.99"})
    assert resp.status_code == 201
    product = resp.json()["data"]
    assert Decimal(product["price"]) == Decimal("9.99")
    assert product["stock"] == 0

    resp = await client.put(f"/products/{product['id']}", json={"price": "12.50", "stock": 4})
    assert Decimal(resp.json()["data"]["price"]) == Decimal("12.50")
    assert resp.json()["data"]["stock"] == 4

    # category with products cannot be removed
    resp = await client.delete(f"/categories/{category['id']}")
    assert resp.status_code == 400

    assert (await client.delete(f"/products/{product['id']}")).status_code == 200
    assert (await client.get(f"/products/{product['id']}")).status_code == 404
    assert (await client.delete(f"/categories/{category['id']}")).status_code == 200


async def test_health_check(client):
    resp = await client.get("/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


async def test_category_targeted_by_promotion_cannot_be_removed(client):
    category = (await client.post("/categories", json={"name": "Kitchen"})).json()["data"]
    promotion = (
        await client.post(
            "/promotions/",
            json={
                "code": "KITCHEN5",
                "discount_type": "fixed",
                "discount_value": "5",
                "expiration_date": future_iso(),
                "usage_limit": 10,
                "eligible_categories": [category["id"]],
            },
        )
    ).json()["data"]

    resp = await client.delete(f"/categories/{category['id']}")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Category is still targeted by a promotion"

    assert (await client.delete(f"/promotions/{promotion['id']}")).status_code == 200
    assert (await client.delete(f"/categories/{category['id']}")).status_code == 200
