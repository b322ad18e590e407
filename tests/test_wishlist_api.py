"""Integration tests for wishlist endpoints."""

from sqlalchemy import select

from storefront.db.models import CartItem, WishlistItem


def _add(client, headers, product_id):
    response = client.post("/v1/wishlist", json={"product_id": product_id}, headers=headers)
    assert response.status_code == 201
    return response.json()


class TestWishlist:
    def test_add_is_idempotent(self, client, db, customer, customer_headers, make_product):
        product = make_product()
        first = _add(client, customer_headers, product.id)
        second = _add(client, customer_headers, product.id)

        assert first["id"] == second["id"]
        listed = client.get("/v1/wishlist", headers=customer_headers).json()
        assert [w["product_id"] for w in listed] == [product.id]

    def test_unknown_product(self, client, customer_headers):
        response = client.post("/v1/wishlist", json={"product_id": "missing"}, headers=customer_headers)

        assert response.status_code == 404

    def test_remove(self, client, db, customer, customer_headers, make_product):
        entry = _add(client, customer_headers, make_product().id)

        assert client.delete(f"/v1/wishlist/{entry['id']}", headers=customer_headers).status_code == 204
        db.expire_all()
        assert db.execute(select(WishlistItem).where(WishlistItem.user_id == customer.id)).first() is None

    def test_move_to_cart_adds_one_unit(self, client, db, customer, customer_headers, make_product):
        product = make_product()
        entry = _add(client, customer_headers, product.id)

        client.post(f"/v1/wishlist/{entry['id']}/move-to-cart", headers=customer_headers)
        response = client.post(f"/v1/wishlist/{entry['id']}/move-to-cart", headers=customer_headers)

        assert response.status_code == 204
        db.expire_all()
        lines = db.execute(select(CartItem).where(CartItem.user_id == customer.id)).scalars().all()
        assert len(lines) == 1
        assert lines[0].quantity == 2

    def test_other_users_entry_is_not_found(self, client, customer_headers, make_product, headers_for):
        entry = _add(client, customer_headers, make_product().id)

        response = client.delete(f"/v1/wishlist/{entry['id']}", headers=headers_for("someone-else"))

        assert response.status_code == 404
