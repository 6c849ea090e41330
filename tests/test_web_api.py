"""End-to-end tests of the web app, with checkout going through the functions app."""
import json
from datetime import datetime, timedelta

import httpx
import pytest

from models.customer import CustomerProfile, CUSTOMERS_PARTITION
from models.order import Order
from models.session import ShopperSession
from utils.activity_log import read_activity_log
from utils.functions_client import functions_client
from utils.storage import BlobContainer, ShareDirectory


def _register(client, email="jane@example.com", password="secret", files=None):
    return client.post(
        "/customers",
        data={"name": "Jane", "surname": "Doe", "email": email,
              "password": password, "phone_number": "0123456789"},
        files=files,
    )


class TestCustomerProfiles:
    def test_register_stores_profile_image_and_backup(self, client, db):
        response = _register(client, files={"file": ("me.png", b"png-bytes", "image/png")})

        assert response.status_code == 201
        body = response.json()
        assert body["email"] == "jane@example.com"
        assert body["role"] == "Customer"
        assert "password_hash" not in body
        assert body["image_url"].endswith("/customerimages/jane%40example.com_profileimage")

        profile = db.get(CustomerProfile, (CUSTOMERS_PARTITION, "jane@example.com"))
        assert profile.password_hash != "secret"
        assert BlobContainer("customerimages").download("jane@example.com_profileimage") == b"png-bytes"

        backup = json.loads(ShareDirectory("customerfiles", "profiles").read_text("jane@example.com.json"))
        assert backup["name"] == "Jane"
        assert "password_hash" not in backup

    def test_duplicate_email_is_rejected(self, client):
        assert _register(client).status_code == 201
        response = _register(client)
        assert response.status_code == 400
        assert response.json()["detail"] == "Email already registered"

    def test_invalid_email_is_rejected(self, client, db):
        response = _register(client, email="not-an-email")
        assert response.status_code == 400
        assert db.query(CustomerProfile).count() == 0

    def test_admin_lists_profiles(self, client, make_customer, admin_headers):
        make_customer()
        response = client.get("/customers", headers=admin_headers)

        assert response.status_code == 200
        assert sorted(p["email"] for p in response.json()) == ["admin@example.com", "jane@example.com"]

    def test_customers_cannot_list_profiles(self, client, make_customer, login):
        make_customer()
        response = client.get("/customers", headers=login())
        assert response.status_code == 403


class TestSessions:
    def test_wrong_password(self, client, make_customer):
        make_customer()
        response = client.post("/login", json={"email": "jane@example.com", "password": "nope"})
        assert response.status_code == 401

    def test_login_logs_activity_and_opens_session(self, client, make_customer, login):
        make_customer()
        headers = login()

        me = client.get("/me", headers=headers).json()
        assert me["user_name"] == "Jane Doe"
        assert me["role"] == "Customer"
        assert me["cart_count"] == 0
        assert read_activity_log("jane@example.com").startswith("Action: Login\n")

    def test_logout_logs_duration_and_ends_session(self, client, db, make_customer, login):
        make_customer()
        headers = login()

        response = client.get("/logout", headers=headers)

        assert response.status_code == 200
        log = read_activity_log("jane@example.com")
        assert "Action: Logout" in log
        assert "Session Duration:" in log
        assert db.query(ShopperSession).count() == 0
        assert client.get("/me", headers=headers).status_code == 401

    def test_unreadable_activity_log_does_not_block_login_or_logout(self, client, make_customer, login):
        make_customer()
        directory = ShareDirectory("customerlogs", "logs")
        directory.create_if_not_exists()
        (directory.path / "jane@example.com_log.txt").write_bytes(b"Action: Login\n\xff\xfe broken\n")

        headers = login()
        assert client.get("/me", headers=headers).status_code == 200
        assert client.get("/logout", headers=headers).status_code == 200

    def test_login_purges_expired_sessions(self, client, db, make_customer, make_shopper, login):
        make_customer()
        stale = make_shopper(cart=[{"product_id": "p1", "product_name": "Scarf", "price": 10.0, "quantity": 1}])
        stale.login_time = datetime.utcnow() - timedelta(days=2)
        db.commit()
        stale_id, fresh_id = stale.id, make_shopper().id

        headers = login()

        db.expire_all()
        remaining = {s.id for s in db.query(ShopperSession).all()}
        assert stale_id not in remaining
        assert fresh_id in remaining
        assert len(remaining) == 2
        assert client.get("/me", headers=headers).status_code == 200

    def test_requests_without_token_are_refused(self, client):
        assert client.get("/cart").status_code in (401, 403)


class TestProducts:
    def test_list_and_get(self, client, make_product):
        product = make_product(name="Scarf", price=4.5)

        listing = client.get("/products").json()
        assert listing["total"] == 1
        assert listing["items"][0]["product_name"] == "Scarf"

        assert client.get(f"/products/{product.row_key}").json()["price"] == 4.5
        assert client.get("/products/missing").status_code == 404

    def test_admin_adds_product_through_store_function(self, client, admin_headers):
        response = client.post(
            "/products",
            data={"product_name": "Boots", "price": "89", "quantity": "4"},
            files={"file": ("boots.png", b"boots-image", "image/png")},
            headers=admin_headers,
        )

        assert response.status_code == 201
        assert "has been stored successfully" in response.json()["message"]

        items = client.get("/products").json()["items"]
        assert items[0]["product_name"] == "Boots"
        assert items[0]["image_url"].endswith("/productimages/Boots_productimage")
        assert BlobContainer("productimages").download("Boots_productimage") == b"boots-image"

    def test_customers_cannot_add_products(self, client, make_customer, login):
        make_customer()
        response = client.post("/products", data={"product_name": "Boots", "price": "1", "quantity": "1"},
                               headers=login())
        assert response.status_code == 403


class TestCartAndCheckout:
    @pytest.fixture
    def shopper_headers(self, make_customer, login):
        make_customer()
        return login()

    def test_cart_mutations(self, client, make_product, shopper_headers):
        scarf = make_product(name="Scarf", price=10)
        boots = make_product(name="Boots", price=5)

        client.post("/cart/add", json={"product_id": scarf.row_key}, headers=shopper_headers)
        cart = client.post("/cart/add", json={"product_id": scarf.row_key}, headers=shopper_headers).json()
        assert len(cart["items"]) == 1
        assert cart["count"] == 2

        client.post("/cart/add", json={"product_id": boots.row_key}, headers=shopper_headers)
        cart = client.post("/cart/update", json={"quantities": {boots.row_key: 3}}, headers=shopper_headers).json()
        assert cart["total"] == 35
        assert cart["count"] == 5

        cart = client.delete(f"/cart/items/{scarf.row_key}", headers=shopper_headers).json()
        assert [item["product_name"] for item in cart["items"]] == ["Boots"]

        assert client.get("/me", headers=shopper_headers).json()["cart_count"] == 3

    def test_adding_unknown_product_is_not_found(self, client, shopper_headers):
        response = client.post("/cart/add", json={"product_id": "missing"}, headers=shopper_headers)
        assert response.status_code == 404

    def test_checkout_of_empty_cart(self, client, db, shopper_headers):
        response = client.post("/cart/checkout", headers=shopper_headers)
        assert response.status_code == 400
        assert db.query(Order).count() == 0

    def test_checkout_stores_order_and_admin_marks_it_sent(self, client, db, make_product, shopper_headers, admin_headers):
        scarf = make_product(name="Scarf", price=10)
        client.post("/cart/add", json={"product_id": scarf.row_key}, headers=shopper_headers)
        client.post("/cart/add", json={"product_id": scarf.row_key}, headers=shopper_headers)

        response = client.post("/cart/checkout", headers=shopper_headers)

        assert response.status_code == 200
        checkout = response.json()
        assert checkout["total_amount"] == 20
        assert checkout["order_status"] == "Processing"
        assert client.get("/cart", headers=shopper_headers).json()["items"] == []

        orders = client.get("/orders", params={"customer_id": "jane@example.com"}, headers=admin_headers).json()
        assert [o["order_id"] for o in orders] == [checkout["order_id"]]
        assert orders[0]["customer_name"] == "Jane Doe"
        assert orders[0]["products"][0]["quantity"] == 2

        updated = client.post(f"/orders/{checkout['order_id']}/status", headers=admin_headers).json()
        assert updated["order_status"] == "Sent"

        files = client.get("/customers/jane@example.com/files", headers=admin_headers).json()
        assert checkout["order_id"] in files["customer_files_content"]
        assert "Action: Login" in files["customer_logs_content"]

    def test_failed_order_submission_keeps_the_cart(self, client, db, make_product, shopper_headers, monkeypatch):
        scarf = make_product(name="Scarf", price=10)
        client.post("/cart/add", json={"product_id": scarf.row_key}, headers=shopper_headers)
        monkeypatch.setattr(functions_client, "transport", httpx.MockTransport(lambda request: httpx.Response(500)))

        response = client.post("/cart/checkout", headers=shopper_headers)

        assert response.status_code == 500
        assert response.json()["detail"] == "An error occurred while processing your request."
        cart = client.get("/cart", headers=shopper_headers).json()
        assert cart["count"] == 1
        assert db.query(Order).count() == 0


class TestAdminOrders:
    def test_status_update_of_unknown_order(self, client, admin_headers):
        response = client.post("/orders/unknown/status", headers=admin_headers)
        assert response.status_code == 404

    def test_customers_cannot_see_orders(self, client, make_customer, login):
        make_customer()
        response = client.get("/orders", params={"customer_id": "jane@example.com"}, headers=login())
        assert response.status_code == 403

    def test_files_view_without_logs(self, client, admin_headers):
        files = client.get("/customers/ghost@example.com/files", headers=admin_headers).json()
        assert files["customer_files_content"] == ""
        assert files["customer_logs_content"] == "No logs available."
