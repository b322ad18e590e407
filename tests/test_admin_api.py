"""Integration tests for the admin dashboard and user management."""

from datetime import datetime, timedelta
from decimal import Decimal

from storefront.db.models import Order


def _order(db, user, total, days_ago=0, status="pending"):
    created = datetime.utcnow() - timedelta(days=days_ago)
    order = Order(user_id=user.id, total=Decimal(total), status=status, shipping_address={"city": "X"},
                  created_at=created, updated_at=created)
    db.add(order); db.commit()
    return order


class TestDashboard:
    def test_totals_and_recent_orders(self, client, db, customer, admin_headers):
        _order(db, customer, "10.00", days_ago=2)
        _order(db, customer, "20.00", days_ago=1)
        latest = _order(db, customer, "30.00")

        body = client.get("/v1/admin/dashboard", headers=admin_headers).json()

        assert body["total_sales"] == "60.00"
        assert body["total_orders"] == 3
        assert body["total_customers"] == 1
        assert body["average_order_value"] == "20.00"
        assert body["recent_orders"][0]["id"] == latest.id
        assert body["recent_orders"][0]["customer_name"] == "Sam Shopper"

    def test_sales_by_day_covers_thirty_days(self, client, db, customer, admin_headers):
        _order(db, customer, "15.00")
        _order(db, customer, "5.00")
        _order(db, customer, "99.00", days_ago=45)

        days = client.get("/v1/admin/dashboard", headers=admin_headers).json()["sales_by_day"]

        assert len(days) == 30
        assert days[-1]["day"] == datetime.utcnow().date().isoformat()
        assert days[-1]["sales"] == "20.00"
        assert sum(Decimal(d["sales"]) for d in days) == Decimal("20.00")

    def test_empty_store(self, client, admin_headers):
        body = client.get("/v1/admin/dashboard", headers=admin_headers).json()

        assert body["total_orders"] == 0
        assert body["average_order_value"] == "0.00"

    def test_requires_admin_row(self, client, customer, headers_for):
        # a forged role claim is not enough, the users row decides
        response = client.get("/v1/admin/dashboard", headers=headers_for(customer.id, role="admin"))

        assert response.status_code == 403


class TestUsers:
    def test_list_filters_by_role_and_search(self, client, admin, customer, make_user, admin_headers):
        make_user(email="jo@example.com", first_name="Jo", last_name="Buyer")

        customers = client.get("/v1/admin/users", params={"role": "customer"}, headers=admin_headers).json()
        assert sorted(u["email"] for u in customers) == ["jo@example.com", "shopper@example.com"]

        found = client.get("/v1/admin/users", params={"q": "BUYER"}, headers=admin_headers).json()
        assert [u["email"] for u in found] == ["jo@example.com"]

        everyone = client.get("/v1/admin/users", params={"role": "all"}, headers=admin_headers).json()
        assert len(everyone) == 3

    def test_change_role(self, client, customer, admin_headers):
        response = client.patch(f"/v1/admin/users/{customer.id}/role", json={"role": "admin"}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["role"] == "admin"

    def test_change_role_unknown_user(self, client, admin_headers):
        response = client.patch("/v1/admin/users/nobody/role", json={"role": "admin"}, headers=admin_headers)

        assert response.status_code == 404

    def test_add_user(self, client, admin_headers):
        response = client.post("/v1/admin/users", json={"email": "new@example.com"}, headers=admin_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["id"].startswith("user_")
        assert len(body["id"]) == len("user_") + 8
        assert body["role"] == "customer"

        duplicate = client.post("/v1/admin/users", json={"email": "new@example.com"}, headers=admin_headers)
        assert duplicate.status_code == 409
