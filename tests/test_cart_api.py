"""Integration tests for cart endpoints via TestClient."""

from sqlalchemy import select

from storefront.db.models import CartItem, User
from storefront.services import cart as cart_service


def _add(client, headers, product_id, quantity=1):
    response = client.post("/v1/cart/items", json={"product_id": product_id, "quantity": quantity}, headers=headers)
    assert response.status_code == 200
    return response.json()


def _lines(db, user_id):
    db.expire_all()
    return db.execute(select(CartItem).where(CartItem.user_id == user_id)).scalars().all()


class TestAddToCart:
    def test_new_product_creates_line(self, client, db, customer, customer_headers, make_product):
        product = make_product()
        body = _add(client, customer_headers, product.id)

        assert body == {"success": True, "message": "Item added to cart"}
        lines = _lines(db, customer.id)
        assert len(lines) == 1
        assert lines[0].quantity == 1

    def test_repeated_adds_increment_single_line(self, client, db, customer, customer_headers, make_product):
        product = make_product()
        _add(client, customer_headers, product.id)
        _add(client, customer_headers, product.id, quantity=2)
        _add(client, customer_headers, product.id)

        lines = _lines(db, customer.id)
        assert len(lines) == 1
        assert lines[0].quantity == 4

    def test_empty_product_id_is_rejected_without_write(self, client, db, customer, customer_headers):
        body = _add(client, customer_headers, "")

        assert body == {"success": False, "message": "Invalid product ID"}
        assert _lines(db, customer.id) == []

    def test_unauthenticated_caller_is_sent_to_login(self, client, make_product):
        product = make_product()
        response = client.post("/v1/cart/items", json={"product_id": product.id})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is False
        assert body["requiresAuth"] is True
        assert body["redirectUrl"] == "/auth/login?redirect=/products"

    def test_invalid_token_counts_as_no_session(self, client, make_product):
        product = make_product()
        response = client.post("/v1/cart/items", json={"product_id": product.id},
                               headers={"Authorization": "Bearer not-a-token"})

        assert response.json()["requiresAuth"] is True

    def test_missing_product(self, client, db, customer, customer_headers):
        body = _add(client, customer_headers, "no-such-product")

        assert body == {"success": False, "message": "Product not found"}
        assert _lines(db, customer.id) == []

    def test_user_row_created_on_first_add(self, client, db, make_product, headers_for):
        product = make_product()
        headers = headers_for("fresh-user", email="fresh@example.com")
        body = _add(client, headers, product.id)

        assert body["success"] is True
        db.expire_all()
        user = db.get(User, "fresh-user")
        assert user is not None
        assert user.email == "fresh@example.com"
        assert user.role == "customer"

    def test_add_drops_cached_cart_views(self, client, customer, customer_headers, make_product, cache, redis_client):
        product = make_product()
        cache.set(f"/cart:{customer.id}", 0)
        cache.set("/cart", {"stale": True})

        _add(client, customer_headers, product.id)

        assert "view:/cart" not in redis_client.data
        assert f"view:/cart:{customer.id}" not in redis_client.data

    def test_unexpected_failure_becomes_failed_result(self, client, db, customer, customer_headers, make_product,
                                                       monkeypatch):
        product = make_product()

        def broken_add(session, user_id, product_id, quantity):
            raise RuntimeError("boom")

        monkeypatch.setattr(cart_service, "add_line", broken_add)

        body = _add(client, customer_headers, product.id)

        assert body == {"success": False, "message": "Failed to add item to cart"}
        assert _lines(db, customer.id) == []


class TestCartView:
    def test_totals_include_ten_percent_tax(self, client, customer_headers, make_product):
        a = make_product(name="A", price="10.00")
        b = make_product(name="B", price="5.00")
        _add(client, customer_headers, a.id, quantity=2)
        _add(client, customer_headers, b.id)

        body = client.get("/v1/cart", headers=customer_headers).json()

        assert len(body["items"]) == 2
        assert body["subtotal"] == "25.00"
        assert body["tax"] == "2.50"
        assert body["shipping"] == "0.00"
        assert body["total"] == "27.50"

    def test_cart_requires_login(self, client):
        response = client.get("/v1/cart")

        assert response.status_code == 401
        assert response.json()["redirectUrl"] == "/auth/login"

    def test_count(self, client, customer_headers, make_product):
        assert client.get("/v1/cart/count").json() == {"count": 0}
        _add(client, customer_headers, make_product(name="A").id)
        _add(client, customer_headers, make_product(name="B").id)

        assert client.get("/v1/cart/count", headers=customer_headers).json() == {"count": 2}

    def test_update_and_remove_line(self, client, db, customer, customer_headers, make_product):
        product = make_product(price="4.00")
        _add(client, customer_headers, product.id)
        item_id = _lines(db, customer.id)[0].id

        response = client.patch(f"/v1/cart/items/{item_id}", json={"quantity": 3}, headers=customer_headers)
        assert response.status_code == 200
        assert response.json()["subtotal"] == "12.00"

        response = client.patch(f"/v1/cart/items/{item_id}", json={"quantity": 0}, headers=customer_headers)
        assert response.status_code == 400

        response = client.delete(f"/v1/cart/items/{item_id}", headers=customer_headers)
        assert response.status_code == 200
        assert response.json()["items"] == []

    def test_cannot_touch_another_users_line(self, client, db, customer, customer_headers, make_product, headers_for):
        _add(client, customer_headers, make_product().id)
        item_id = _lines(db, customer.id)[0].id

        response = client.delete(f"/v1/cart/items/{item_id}", headers=headers_for("someone-else"))

        assert response.status_code == 404
        assert len(_lines(db, customer.id)) == 1
