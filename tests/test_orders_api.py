from decimal import Decimal

import pytest

from tests.factories import future_iso


async def create_voucher(client, **overrides):
    payload = {
        "code": "SAVE10",
        "discount_type": "percentage",
        "discount_value": "10",
        "expiration_date": future_iso(),
        "usage_limit": 5,
    }
    payload.update(overrides)
    resp = await client.post("/vouchers/", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


async def create_promotion(client, **overrides):
    payload = {
        "code": "PROMO30",
        "discount_type": "percentage",
        "discount_value": "30",
        "expiration_date": future_iso(),
        "usage_limit": 5,
    }
    payload.update(overrides)
    resp = await client.post("/promotions/", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def order_payload(*items, voucher_code=None, promotion_codes=None, user_id=1):
    payload = {"user_id": user_id, "items": list(items)}
    if voucher_code is not None:
        payload["voucher_code"] = voucher_code
    if promotion_codes is not None:
        payload["promotion_codes"] = promotion_codes
    return payload


def item(price, quantity=1, product_id=1, category_id=1):
    return {"product_id": product_id, "category_id": category_id, "price": price, "quantity": quantity}


async def test_apply_voucher_creates_order(client):
    voucher = await create_voucher(client)

    resp = await client.post("/orders/apply-discount", json=order_payload(item("100", 2), voucher_code="SAVE10"))

    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["message"] == "Order created with discounts applied successfully"
    order = body["data"]
    assert Decimal(order["total_amount"]) == Decimal("200")
    assert Decimal(order["discount_applied"]) == Decimal("20")
    assert Decimal(order["final_amount"]) == Decimal("180")
    assert order["applied_voucher"]["code"] == "SAVE10"
    assert order["applied_voucher"]["voucher_id"] == voucher["id"]
    assert Decimal(order["applied_voucher"]["discount_amount"]) == Decimal("20")
    assert order["items"][0]["quantity"] == 2

    resp = await client.get(f"/vouchers/{voucher['id']}")
    assert resp.json()["data"]["used_count"] == 1


async def test_stacked_promotions_capped(client):
    await create_promotion(client, code="P1")
    await create_promotion(client, code="P2")

    resp = await client.post("/orders/apply-discount", json=order_payload(item("100"), promotion_codes=["P1", "P2"]))

    assert resp.status_code == 201, resp.text
    order = resp.json()["data"]
    assert Decimal(order["discount_applied"]) == Decimal("50")
    assert Decimal(order["final_amount"]) == Decimal("50")
    assert [p["code"] for p in order["applied_promotions"]] == ["P1", "P2"]
    assert [Decimal(p["discount_amount"]) for p in order["applied_promotions"]] == [Decimal("25"), Decimal("25")]


async def test_restricted_promotion(client):
    category = (await client.post("/categories", json={"name": "Shoes"})).json()["data"]
    await create_promotion(client, code="SHOES", discount_value="20", eligible_categories=[category["id"]])

    resp = await client.post(
        "/orders/apply-discount",
        json=order_payload(
            item("50", 2, product_id=1, category_id=category["id"]),
            item("100", 1, product_id=2, category_id=category["id"] + 1),
            promotion_codes=["SHOES"],
        ),
    )

    assert resp.status_code == 201, resp.text
    assert Decimal(resp.json()["data"]["discount_applied"]) == Decimal("20")


async def test_unknown_promotion_rejected_without_side_effects(client):
    voucher = await create_voucher(client)

    resp = await client.post(
        "/orders/apply-discount",
        json=order_payload(item("100"), voucher_code="SAVE10", promotion_codes=["MISSING"]),
    )

    assert resp.status_code == 400
    assert resp.json() == {"detail": "Promotion 'MISSING' not found", "kind": "validation", "reason": "not_found"}

    assert (await client.get(f"/vouchers/{voucher['id']}")).json()["data"]["used_count"] == 0
    assert (await client.get("/orders/")).json()["data"] == []


async def test_below_minimum_order(client):
    await create_voucher(client, min_order_value="200")

    resp = await client.post("/orders/apply-discount", json=order_payload(item("100"), voucher_code="SAVE10"))

    assert resp.status_code == 400
    body = resp.json()
    assert body["reason"] == "below_minimum_order"
    assert "Minimum order value of" in body["detail"]


async def test_inactive_voucher(client):
    await create_voucher(client, is_active=False)

    resp = await client.post("/orders/apply-discount", json=order_payload(item("100"), voucher_code="SAVE10"))

    assert resp.status_code == 400
    assert resp.json()["reason"] == "inactive"


async def test_voucher_usage_limit(client):
    await create_voucher(client, usage_limit=1)
    payload = order_payload(item("100"), voucher_code="SAVE10")

    assert (await client.post("/orders/apply-discount", json=payload)).status_code == 201
    resp = await client.post("/orders/apply-discount", json=payload)

    assert resp.status_code == 400
    assert resp.json()["reason"] == "usage_exceeded"


@pytest.mark.parametrize(
    "payload, detail",
    [
        (order_payload(item("10"), voucher_code="SAME", promotion_codes=["SAME"]), "both a voucher and a promotion"),
        (order_payload(item("10"), promotion_codes=["A1", "A1"]), "Duplicate promotion codes"),
        (order_payload(item("0", 2)), "greater than zero"),
    ],
)
async def test_input_errors(client, payload, detail):
    resp = await client.post("/orders/apply-discount", json=payload)

    assert resp.status_code == 400
    body = resp.json()
    assert body["kind"] == "input"
    assert body["reason"] is None
    assert detail in body["detail"]


@pytest.mark.parametrize(
    "payload",
    [
        order_payload(),
        order_payload(item("10", 0)),
        order_payload(item("-1")),
        order_payload(item("10"), voucher_code="   "),
        order_payload(item("10"), promotion_codes=[""]),
    ],
)
async def test_malformed_requests_fail_schema_validation(client, payload):
    resp = await client.post("/orders/apply-discount", json=payload)
    assert resp.status_code == 422


async def test_order_queries(client):
    await client.post("/orders/apply-discount", json=order_payload(item("10"), user_id=1))
    await client.post("/orders/apply-discount", json=order_payload(item("20"), user_id=2))
    created = (await client.post("/orders/apply-discount", json=order_payload(item("30"), user_id=1))).json()["data"]

    all_orders = (await client.get("/orders/")).json()["data"]
    assert len(all_orders) == 3
    assert all_orders[0]["id"] == created["id"]

    user_orders = (await client.get("/orders/user/1")).json()["data"]
    assert [Decimal(o["total_amount"]) for o in user_orders] == [Decimal("30"), Decimal("10")]

    resp = await client.get(f"/orders/{created['id']}")
    assert resp.status_code == 200
    assert resp.json()["data"]["applied_voucher"] is None

    resp = await client.get("/orders/9999")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Order not found"


async def test_targeted_promotion_stays_targeted_when_its_product_is_deleted(client):
    category = (await client.post("/categories", json={"name": "Lamps"})).json()["data"]
    product = (
        await client.post("/products", json={"name": "Desk lamp", "category_id": category["id"], "price": "40"})
    ).json()["data"]
    await create_promotion(client, code="ONLYP1", discount_value="20", eligible_items=[product["id"]])
    payload = order_payload(item("100", product_id=999, category_id=999), promotion_codes=["ONLYP1"])

    resp = await client.post("/orders/apply-discount", json=payload)
    assert resp.status_code == 400
    assert resp.json()["reason"] == "no_eligible_items"

    resp = await client.delete(f"/products/{product['id']}")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Product is still targeted by a promotion"

    resp = await client.post("/orders/apply-discount", json=payload)
    assert resp.status_code == 400
    assert resp.json()["reason"] == "no_eligible_items"


async def test_sub_cent_discount_kept_in_components(client):
    await create_voucher(client, code="EIGHTH", discount_value="12.5")

    resp = await client.post("/orders/apply-discount", json=order_payload(item("1.00"), voucher_code="EIGHTH"))

    assert resp.status_code == 201, resp.text
    order = resp.json()["data"]
    assert Decimal(order["discount_applied"]) == Decimal("0.125")
    assert Decimal(order["final_amount"]) == Decimal("0.875")
    assert Decimal(order["applied_voucher"]["discount_amount"]) == Decimal(order["discount_applied"])


async def test_uncapped_promotion_components_sum_to_discount(client):
    await create_promotion(client, code="EIGHTH", discount_value="12.5")
    await create_promotion(client, code="FORTIETH", discount_value="2.5")

    resp = await client.post(
        "/orders/apply-discount", json=order_payload(item("1.00"), promotion_codes=["EIGHTH", "FORTIETH"])
    )

    assert resp.status_code == 201, resp.text
    order = resp.json()["data"]
    components = [Decimal(p["discount_amount"]) for p in order["applied_promotions"]]
    assert components == [Decimal("0.125"), Decimal("0.025")]
    assert sum(components) == Decimal(order["discount_applied"])
