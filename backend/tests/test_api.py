"""
HTTP flows through the JSON API: login, product CRUD, sales, expenses,
staff accounts and reports.
"""

from stockdesk.models import Product


class TestAuthFlow:

    def test_login_returns_token(self, client, admin_user):
        resp = client.post("/api/auth/login", json={"email": "admin@inventory.com", "password": "Password123!"})

        assert resp.status_code == 200
        body = resp.get_json()
        assert body["user"]["email"] == "admin@inventory.com"
        assert body["user"]["role"] == "admin"
        assert "password_hash" not in body["user"]
        assert len(body["token"]) == 64
        assert body["expires_at"].endswith("Z")

    def test_bad_password(self, client, admin_user):
        resp = client.post("/api/auth/login", json={"email": "admin@inventory.com", "password": "nope"})
        assert resp.status_code == 401
        assert resp.get_json()["error"] == "Invalid credentials"

    def test_unknown_email_looks_the_same(self, client, db_session):
        resp = client.post("/api/auth/login", json={"email": "ghost@inventory.com", "password": "nope"})
        assert resp.status_code == 401
        assert resp.get_json()["error"] == "Invalid credentials"

    def test_missing_fields(self, client, db_session):
        resp = client.post("/api/auth/login", json={"email": "admin@inventory.com"})
        assert resp.status_code == 400

    def test_non_object_body(self, client, db_session):
        resp = client.post("/api/auth/login", json=["admin@inventory.com", "Password123!"])
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Invalid JSON payload"

    def test_me(self, client, manager_headers):
        resp = client.get("/api/auth/me", headers=manager_headers)

        assert resp.status_code == 200
        body = resp.get_json()
        assert body["role"] == "manager"
        assert "REVERSE_SALE" in body["permissions"]
        assert "MANAGE_USERS" not in body["permissions"]

    def test_logout_revokes_token(self, client, admin_headers):
        resp = client.post("/api/auth/logout", headers=admin_headers)
        assert resp.status_code == 200

        resp = client.get("/api/auth/me", headers=admin_headers)
        assert resp.status_code == 401

        resp = client.post("/api/auth/logout", headers=admin_headers)
        assert resp.status_code == 401


class TestProductsApi:

    def test_crud(self, client, manager_headers):
        resp = client.post("/api/products", json={
            "name": "Monitor",
            "sku": "MON-001",
            "category": "Electronics",
            "quantity": 7,
            "reorder_level": 2,
            "price_cents": 30000,
            "cost_cents": 21000,
        }, headers=manager_headers)
        assert resp.status_code == 201
        product_id = resp.get_json()["id"]

        resp = client.put(f"/api/products/{product_id}", json={"price_cents": 28000}, headers=manager_headers)
        assert resp.status_code == 200
        assert resp.get_json()["price_cents"] == 28000
        assert resp.get_json()["quantity"] == 7

        resp = client.get(f"/api/products/{product_id}", headers=manager_headers)
        assert resp.get_json()["sku"] == "MON-001"

        resp = client.delete(f"/api/products/{product_id}", headers=manager_headers)
        assert resp.status_code == 200
        assert resp.get_json() == {"ok": True, "orphaned_sales": 0}

        resp = client.get(f"/api/products/{product_id}", headers=manager_headers)
        assert resp.status_code == 404

    def test_list(self, client, manager_headers, laptop, mouse):
        body = client.get("/api/products", headers=manager_headers).get_json()

        assert body["count"] == 2
        assert [p["sku"] for p in body["items"]] == ["LAP-001", "MOU-001"]
        assert [p["is_low_stock"] for p in body["items"]] == [False, True]

    def test_duplicate_sku_conflict(self, client, manager_headers, laptop):
        resp = client.post("/api/products", json={
            "name": "Laptop Copy",
            "sku": "LAP-001",
            "category": "Electronics",
            "quantity": 1,
            "reorder_level": 0,
            "price_cents": 1,
            "cost_cents": 1,
        }, headers=manager_headers)

        assert resp.status_code == 409

    def test_oversized_quantity(self, client, manager_headers):
        resp = client.post("/api/products", json={
            "name": "Bolt",
            "sku": "BLT-001",
            "category": "Hardware",
            "quantity": 10**20,
            "reorder_level": 0,
            "price_cents": 10,
            "cost_cents": 5,
        }, headers=manager_headers)

        assert resp.status_code == 400
        assert "quantity" in resp.get_json()["error"]

    def test_out_of_range_id(self, client, manager_headers):
        resp = client.delete(f"/api/products/{2**70}", headers=manager_headers)
        assert resp.status_code == 404

    def test_validation_error(self, client, manager_headers):
        resp = client.post("/api/products", json={"name": "Half"}, headers=manager_headers)

        assert resp.status_code == 400
        assert "Missing required fields" in resp.get_json()["error"]


class TestSalesApi:

    def test_sale_and_reversal(self, client, db_session, manager_headers, manager_user, laptop):
        resp = client.post("/api/sales", json={
            "product_id": laptop.id, "quantity": 2, "payment_mode": "cash",
        }, headers=manager_headers)

        assert resp.status_code == 201
        sale = resp.get_json()["sale"]
        assert sale["total_cents"] == 240000
        assert sale["salesperson_id"] == manager_user.id
        assert sale["salesperson_name"] == "Manager User"

        listing = client.get("/api/sales", headers=manager_headers).get_json()
        assert listing["count"] == 1
        assert listing["summary"]["total_revenue_cents"] == 240000

        resp = client.delete(f"/api/sales/{sale['id']}", headers=manager_headers)
        assert resp.status_code == 200
        assert resp.get_json()["reversed"] is True

        resp = client.delete(f"/api/sales/{sale['id']}", headers=manager_headers)
        assert resp.status_code == 404

        db_session.expire_all()
        assert db_session.get(Product, laptop.id).quantity == 15

    def test_insufficient_stock(self, client, db_session, salesgirl_headers, mouse):
        resp = client.post("/api/sales", json={
            "product_id": mouse.id, "quantity": 5, "payment_mode": "POS",
        }, headers=salesgirl_headers)

        assert resp.status_code == 409
        body = resp.get_json()
        assert body["error"] == "Insufficient stock"
        assert body["details"]["on_hand"] == 3

        db_session.expire_all()
        assert db_session.get(Product, mouse.id).quantity == 3

    def test_missing_fields(self, client, salesgirl_headers, laptop):
        resp = client.post("/api/sales", json={"product_id": laptop.id}, headers=salesgirl_headers)
        assert resp.status_code == 400

    def test_non_object_body(self, client, salesgirl_headers):
        resp = client.post("/api/sales", json=[1, 2], headers=salesgirl_headers)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Invalid JSON payload"

    def test_out_of_range_product_id(self, client, salesgirl_headers):
        resp = client.post("/api/sales", json={
            "product_id": 2**70, "quantity": 1, "payment_mode": "cash",
        }, headers=salesgirl_headers)
        assert resp.status_code == 404

    def test_bad_payment_mode(self, client, salesgirl_headers, laptop):
        resp = client.post("/api/sales", json={
            "product_id": laptop.id, "quantity": 1, "payment_mode": "barter",
        }, headers=salesgirl_headers)
        assert resp.status_code == 400

    def test_unknown_product(self, client, salesgirl_headers):
        resp = client.post("/api/sales", json={
            "product_id": 4242, "quantity": 1, "payment_mode": "cash",
        }, headers=salesgirl_headers)
        assert resp.status_code == 404

    def test_salesgirl_always_sells_as_herself(self, client, salesgirl_headers, salesgirl_user, admin_user, laptop):
        resp = client.post("/api/sales", json={
            "product_id": laptop.id, "quantity": 1, "payment_mode": "cash", "salesperson_id": admin_user.id,
        }, headers=salesgirl_headers)

        assert resp.status_code == 201
        assert resp.get_json()["sale"]["salesperson_id"] == salesgirl_user.id

    def test_admin_can_record_for_salesperson(self, client, admin_headers, salesgirl_user, laptop):
        resp = client.post("/api/sales", json={
            "product_id": laptop.id, "quantity": 1, "payment_mode": "transfer", "salesperson_id": salesgirl_user.id,
        }, headers=admin_headers)

        assert resp.status_code == 201
        assert resp.get_json()["sale"]["salesperson_id"] == salesgirl_user.id


class TestExpensesApi:

    def test_create_list_delete(self, client, manager_headers, manager_user):
        resp = client.post("/api/expenses", json={
            "description": "Light bill", "amount_cents": 15000, "category": "Utilities",
        }, headers=manager_headers)
        assert resp.status_code == 201
        expense = resp.get_json()
        assert expense["created_by_user_id"] == manager_user.id

        body = client.get("/api/expenses", headers=manager_headers).get_json()
        assert body["count"] == 1
        assert "Utilities" in body["categories"]

        resp = client.delete(f"/api/expenses/{expense['id']}", headers=manager_headers)
        assert resp.status_code == 200

        resp = client.delete(f"/api/expenses/{expense['id']}", headers=manager_headers)
        assert resp.status_code == 404

    def test_non_positive_amount(self, client, manager_headers):
        resp = client.post("/api/expenses", json={
            "description": "Oops", "amount_cents": 0, "category": "Other",
        }, headers=manager_headers)
        assert resp.status_code == 400


class TestUsersApi:

    def test_duplicate_email(self, client, admin_headers, manager_user):
        resp = client.post("/api/users", json={
            "email": "manager@inventory.com", "name": "Copy", "role": "manager", "password": "secret1",
        }, headers=admin_headers)
        assert resp.status_code == 409

    def test_non_object_body(self, client, admin_headers):
        resp = client.post("/api/users", json=["new@shop.local", "secret1"], headers=admin_headers)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Invalid JSON payload"

    def test_cannot_delete_self(self, client, admin_headers, admin_user):
        resp = client.delete(f"/api/users/{admin_user.id}", headers=admin_headers)
        assert resp.status_code == 400

    def test_delete_user_ends_their_sessions(self, client, admin_headers, salesgirl_headers, salesgirl_user):
        resp = client.delete(f"/api/users/{salesgirl_user.id}", headers=admin_headers)
        assert resp.status_code == 200

        resp = client.get("/api/sales", headers=salesgirl_headers)
        assert resp.status_code == 401

    def test_new_user_can_log_in(self, client, admin_headers):
        client.post("/api/users", json={
            "email": "Temp@Shop.Local", "name": "Temp", "role": "salesgirl", "password": "secret1",
        }, headers=admin_headers)

        resp = client.post("/api/auth/login", json={"email": "temp@shop.local", "password": "secret1"})
        assert resp.status_code == 200


class TestReportsApi:

    def test_dashboard(self, client, manager_headers, manager_user, laptop, mouse, rent_expense):
        client.post("/api/sales", json={
            "product_id": laptop.id, "quantity": 2, "payment_mode": "cash",
        }, headers=manager_headers)

        body = client.get("/api/reports/dashboard", headers=manager_headers).get_json()

        assert body["stats"] == {
            "total_products": 2,
            "total_revenue_cents": 240000,
            "total_expenses_cents": 50000,
            "profit_cents": 190000,
            "low_stock": 1,
        }
        assert [p["sku"] for p in body["low_stock_products"]] == ["MOU-001"]
        assert len(body["recent_sales"]) == 1

    def test_summary(self, client, manager_headers, laptop, rent_expense):
        body = client.get("/api/reports/summary", headers=manager_headers).get_json()

        assert body["total_sales"] == 0
        assert body["profit_margin_percent"] == 0.0
        assert body["net_profit_cents"] == -50000
        assert body["inventory_value_cents"] == 15 * 80000
        assert body["expenses_by_category"] == [{"category": "Rent", "amount_cents": 50000}]
        assert body["sales_by_product"][0]["sales_count"] == 0
