from conftest import ADDRESS
from models.catalog import Product


def _order(product_id, quantity=2, **overrides):
    data = {
        "items": [{"product_id": product_id, "quantity": quantity, "title": "Trail Runner", "price": 850}],
        "total_amount": 850 * quantity,
        "total_items": quantity,
        "payment_method": "card",
        "selected_address": ADDRESS,
    }
    data.update(overrides)
    return data


def _stock(context, product_id):
    db = context.db.SessionLocal()
    try:
        return db.query(Product).filter(Product.id == product_id).one().stock
    finally:
        db.close()


def test_create_order_decrements_stock(user_client, context, product):
    resp = user_client.post("/orders", json=_order(product, quantity=3))
    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "pending"
    assert body["payment_status"] == "pending"
    assert body["user_id"] == user_client.user_id
    assert _stock(context, product) == 7


def test_order_for_unknown_product_changes_nothing(user_client, context, product):
    payload = _order(product)
    payload["items"].append({"product_id": 999, "quantity": 1})
    assert user_client.post("/orders", json=payload).status_code == 404
    assert _stock(context, product) == 10
    assert user_client.get("/orders/own").json() == []


def test_invalid_payment_method(user_client, product):
    assert user_client.post("/orders", json=_order(product, payment_method="iou")).status_code == 422


def test_own_orders_only(user_client, other_client, product):
    user_client.post("/orders", json=_order(product))
    assert len(user_client.get("/orders/own").json()) == 1
    assert other_client.get("/orders/own").json() == []


def test_admin_lists_all_orders(admin_client, user_client, other_client, product):
    user_client.post("/orders", json=_order(product, quantity=1))
    other_client.post("/orders", json=_order(product, quantity=2))

    resp = admin_client.get("/orders", params={"_sort": "total_amount", "_order": "desc", "_limit": 1})
    assert resp.status_code == 200
    assert resp.headers["X-Total-Count"] == "2"
    assert [o["total_amount"] for o in resp.json()] == [1700]


def test_admin_updates_status(admin_client, user_client, product):
    order_id = user_client.post("/orders", json=_order(product)).json()["id"]
    resp = admin_client.patch(f"/orders/{order_id}", json={"status": "dispatched"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "dispatched"
    assert admin_client.patch(f"/orders/{order_id}", json={"status": "lost"}).status_code == 422
    assert user_client.patch(f"/orders/{order_id}", json={"status": "delivered"}).status_code == 403


def test_delete_order(user_client, other_client, admin_client, product):
    first = user_client.post("/orders", json=_order(product)).json()["id"]
    second = user_client.post("/orders", json=_order(product)).json()["id"]

    assert other_client.delete(f"/orders/{first}").status_code == 403
    assert user_client.delete(f"/orders/{first}").status_code == 200
    assert admin_client.delete(f"/orders/{second}").status_code == 200
    assert user_client.delete(f"/orders/{second}").status_code == 404
