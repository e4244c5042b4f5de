from tests.factories import future_iso


def promotion_payload(**overrides):
    payload = {
        "discount_type": "fixed",
        "discount_value": "5",
        "expiration_date": future_iso(),
        "usage_limit": 100,
    }
    payload.update(overrides)
    return payload


async def make_catalog(client):
    category = (await client.post("/categories", json={"name": "Books"})).json()["data"]
    product = (
        await client.post("/products", json={"name": "Atlas", "category_id": category["id"], "price": "25.00"})
    ).json()["data"]
    return category, product


async def test_create_promotion_with_eligibility(client):
    category, product = await make_catalog(client)

    resp = await client.post(
        "/promotions/",
        json=promotion_payload(eligible_categories=[category["id"]], eligible_items=[product["id"]]),
    )

    assert resp.status_code == 201, resp.text
    data = resp.json()["data"]
    assert data["code"].startswith("PRM-")
    assert data["used_count"] == 0
    assert data["eligible_categories"] == [category["id"]]
    assert data["eligible_items"] == [product["id"]]


async def test_unrestricted_promotion_has_empty_sets(client):
    data = (await client.post("/promotions/", json=promotion_payload(code="ALL"))).json()["data"]
    assert data["eligible_categories"] == []
    assert data["eligible_items"] == []


async def test_unknown_eligibility_ids_rejected(client):
    resp = await client.post("/promotions/", json=promotion_payload(eligible_categories=[404]))

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Unknown category IDs: [404]"


async def test_duplicate_promotion_code(client):
    await client.post("/promotions/", json=promotion_payload(code="SPRING"))
    resp = await client.post("/promotions/", json=promotion_payload(code="SPRING"))
    assert resp.status_code == 400


async def test_update_replaces_eligibility(client):
    category, product = await make_catalog(client)
    promotion = (
        await client.post("/promotions/", json=promotion_payload(eligible_categories=[category["id"]]))
    ).json()["data"]

    resp = await client.put(
        f"/promotions/{promotion['id']}",
        json={"eligible_categories": [], "eligible_items": [product["id"]], "discount_value": "7.5"},
    )

    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    assert data["eligible_categories"] == []
    assert data["eligible_items"] == [product["id"]]
    assert data["discount_value"] in ("7.5", "7.50")


async def test_list_and_delete_promotions(client):
    kept = (await client.post("/promotions/", json=promotion_payload(code="KEEP"))).json()["data"]
    dropped = (await client.post("/promotions/", json=promotion_payload(code="DROP", is_active=False))).json()["data"]

    active = (await client.get("/promotions/", params={"is_active": True})).json()["data"]
    assert [p["code"] for p in active] == ["KEEP"]

    assert (await client.delete(f"/promotions/{dropped['id']}")).status_code == 200
    assert (await client.get(f"/promotions/{dropped['id']}")).status_code == 404

    remaining = (await client.get("/promotions/")).json()["data"]
    assert [p["id"] for p in remaining] == [kept["id"]]


async def test_targeted_promotion_cannot_drop_every_target(client):
    category, product = await make_catalog(client)
    promotion = (
        await client.post(
            "/promotions/",
            json=promotion_payload(eligible_categories=[category["id"]], eligible_items=[product["id"]]),
        )
    ).json()["data"]

    resp = await client.put(f"/promotions/{promotion['id']}", json={"eligible_categories": []})
    assert resp.status_code == 200
    assert resp.json()["data"]["eligible_items"] == [product["id"]]

    resp = await client.put(f"/promotions/{promotion['id']}", json={"eligible_items": []})
    assert resp.status_code == 400
    assert "at least one eligible category or product" in resp.json()["detail"]

    data = (await client.get(f"/promotions/{promotion['id']}")).json()["data"]
    assert data["eligible_items"] == [product["id"]]


async def test_usage_limit_cannot_drop_below_used_count(client):
    promotion = (await client.post("/promotions/", json=promotion_payload(code="TWICE", usage_limit=3))).json()["data"]
    order = {
        "user_id": 1,
        "items": [{"product_id": 1, "category_id": 1, "price": "50", "quantity": 1}],
        "promotion_codes": ["TWICE"],
    }
    for _ in range(2):
        assert (await client.post("/orders/apply-discount", json=order)).status_code == 201

    resp = await client.put(f"/promotions/{promotion['id']}", json={"usage_limit": 1})
    assert resp.status_code == 400
    assert "cannot be lower than the current usage count" in resp.json()["detail"]

    resp = await client.put(f"/promotions/{promotion['id']}", json={"usage_limit": 2})
    assert resp.status_code == 200
    assert resp.json()["data"]["used_count"] == 2


async def test_promotion_code_length_bounds(client):
    resp = await client.post("/promotions/", json=promotion_payload(code="P" * 51))
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Promotion code must be at most 50 characters"

    resp = await client.post("/promotions/", json=promotion_payload(code="P" * 50))
    assert resp.status_code == 201
