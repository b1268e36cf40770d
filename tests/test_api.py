"""
HTTP tests for the storefront API.

They drive the whole stack (routers, services, cart aggregate, database)
through FastAPI's TestClient; the guest cart token travels in the
``cart_token`` cookie exactly as a browser would send it.
"""
import pytest
from fastapi.testclient import TestClient

from storefront.utils.settings import CART_COOKIE_NAME


@pytest.fixture()
def catalog(products):
    return {name: p.id for name, p in products.items()}


class TestGuestCart:
    def test_first_visit_sets_cookie(self, client: TestClient):
        response = client.get("/cart")

        assert response.status_code == 200
        assert CART_COOKIE_NAME in response.cookies
        data = response.json()
        assert data["user_id"] is None
        assert data["items"] == []
        assert data["total_items"] == 0
        assert data["cart_id"] == response.cookies[CART_COOKIE_NAME]

    def test_cookie_keeps_the_same_cart(self, client: TestClient, catalog):
        first = client.post("/cart/items", json={"product_id": catalog["mouse"], "quantity": 2})
        second = client.post("/cart/items", json={"product_id": catalog["mouse"], "quantity": 1})

        assert first.json()["cart_count"] == 2
        assert second.json()["cart_count"] == 3
        assert CART_COOKIE_NAME not in second.cookies

        cart = client.get("/cart").json()
        assert len(cart["items"]) == 1
        assert cart["items"][0]["quantity"] == 3

    def test_add_item_reply_shape(self, client: TestClient, catalog):
        response = client.post("/cart/items", json={"product_id": catalog["keyboard"], "quantity": 2})

        assert response.status_code == 200
        assert response.json() == {
            "status": "success",
            "cart_count": 2,
            "cart_total": "399.98",
            "message": "Item added to cart",
        }

    def test_add_unknown_product(self, client: TestClient):
        response = client.post("/cart/items", json={"product_id": 999, "quantity": 1})

        assert response.status_code == 404
        data = response.json()
        assert data["status"] == "error"
        assert data["message"] == "Product not found"
        assert data["cart_count"] == 0
        # the fresh guest cart is still handed out
        assert CART_COOKIE_NAME in response.cookies

    @pytest.mark.parametrize("quantity", ["abc", 0, -2])
    def test_add_rejects_bad_quantity(self, client: TestClient, catalog, quantity):
        response = client.post("/cart/items", json={"product_id": catalog["mouse"], "quantity": quantity})
        assert response.status_code == 422

    def test_update_quantity(self, client: TestClient, catalog):
        client.post("/cart/items", json={"product_id": catalog["mouse"], "quantity": 2})

        response = client.patch(f"/cart/items/{catalog['mouse']}", json={"quantity": 5})

        assert response.status_code == 200
        assert response.json()["message"] == "Cart updated"
        assert response.json()["cart_count"] == 5

    def test_update_to_zero_removes(self, client: TestClient, catalog):
        client.post("/cart/items", json={"product_id": catalog["mouse"], "quantity": 2})

        response = client.patch(f"/cart/items/{catalog['mouse']}", json={"quantity": 0})

        assert response.json()["cart_count"] == 0
        assert client.get("/cart").json()["items"] == []

    def test_update_garbage_is_rejected_not_zeroed(self, client: TestClient, catalog):
        client.post("/cart/items", json={"product_id": catalog["mouse"], "quantity": 2})

        response = client.patch(f"/cart/items/{catalog['mouse']}", json={"quantity": "lots"})

        assert response.status_code == 422
        assert client.get("/cart").json()["total_items"] == 2

    def test_update_item_not_in_cart(self, client: TestClient, catalog):
        response = client.patch(f"/cart/items/{catalog['mouse']}", json={"quantity": 3})

        assert response.status_code == 404
        assert response.json()["message"] == "Unable to update cart"

    def test_decrement_until_gone(self, client: TestClient, catalog):
        client.post("/cart/items", json={"product_id": catalog["mouse"], "quantity": 1})

        first = client.post(f"/cart/items/{catalog['mouse']}/decrement")
        second = client.post(f"/cart/items/{catalog['mouse']}/decrement", json={"quantity": 1})

        assert first.status_code == 200
        assert first.json()["cart_count"] == 0
        assert second.status_code == 404
        assert second.json()["status"] == "error"

    def test_remove_item(self, client: TestClient, catalog):
        client.post("/cart/items", json={"product_id": catalog["mouse"], "quantity": 2})
        client.post("/cart/items", json={"product_id": catalog["keyboard"], "quantity": 1})

        response = client.delete(f"/cart/items/{catalog['mouse']}")

        assert response.json() == {
            "status": "success",
            "cart_count": 1,
            "cart_total": "199.99",
            "message": "Item removed from cart",
        }

    def test_remove_item_not_in_cart(self, client: TestClient, catalog):
        response = client.delete(f"/cart/items/{catalog['mouse']}")

        assert response.status_code == 404
        assert response.json()["message"] == "Product not found in cart"

    def test_empty_cart(self, client: TestClient, catalog):
        client.post("/cart/items", json={"product_id": catalog["mouse"], "quantity": 2})

        response = client.delete("/cart")

        assert response.json()["cart_count"] == 0
        assert response.json()["message"] == "Cart emptied"
        assert client.get("/cart").json()["total_items"] == 0


class TestAuthenticatedCart:
    def test_user_cart_ignores_cookie(self, client: TestClient, user, catalog):
        client.post("/cart/items", json={"product_id": catalog["mouse"], "quantity": 2})

        response = client.get("/cart", params={"user_id": user.id})

        assert response.json()["user_id"] == user.id
        assert response.json()["total_items"] == 0

    def test_unknown_user(self, client: TestClient):
        response = client.get("/cart", params={"user_id": 404})
        assert response.status_code == 401


class TestLoginMerge:
    def test_guest_items_follow_the_user(self, client: TestClient, user, catalog):
        client.post("/cart/items", json={"product_id": catalog["mouse"], "quantity": 2})
        guest_token = client.cookies[CART_COOKIE_NAME]

        response = client.post("/auth/login", json={"user_id": user.id})

        assert response.status_code == 200
        body = response.json()
        assert body["user"] == {"id": user.id, "name": "Alice"}
        assert body["cart_count"] == 2
        assert body["merge"] == {"status": "merged", "merged_items": 2}
        assert CART_COOKIE_NAME not in client.cookies

        cart = client.get("/cart", params={"user_id": user.id}).json()
        assert cart["total_items"] == 2

        # the old token now names nothing, a guest gets a brand new cart
        client.cookies.set(CART_COOKIE_NAME, guest_token)
        guest = client.get("/cart").json()
        assert guest["cart_id"] != guest_token
        assert guest["total_items"] == 0

    def test_merge_adds_to_existing_user_cart(self, client: TestClient, user, catalog):
        client.post("/cart/items", params={"user_id": user.id}, json={"product_id": catalog["keyboard"], "quantity": 2})
        client.post("/cart/items", json={"product_id": catalog["keyboard"], "quantity": 3})
        client.post("/cart/items", json={"product_id": catalog["mouse"], "quantity": 1})

        client.post("/auth/login", json={"user_id": user.id})

        cart = client.get("/cart", params={"user_id": user.id}).json()
        by_product = {i["product_id"]: i["quantity"] for i in cart["items"]}
        assert by_product == {catalog["keyboard"]: 5, catalog["mouse"]: 1}

    def test_login_without_guest_cart(self, client: TestClient, user):
        response = client.post("/auth/login", json={"user_id": user.id})

        assert response.status_code == 200
        assert response.json()["merge"] == {"status": "skipped", "merged_items": 0}
        assert response.json()["cart_count"] == 0

    def test_login_unknown_user(self, client: TestClient):
        response = client.post("/auth/login", json={"user_id": 77})
        assert response.status_code == 404

    def test_registration_merges_guest_cart(self, client: TestClient, catalog):
        client.post("/cart/items", json={"product_id": catalog["monitor"], "quantity": 1})

        response = client.post("/users/", json={"id": 10, "name": "Carol"})

        assert response.status_code == 200
        assert response.json() == {"id": 10, "name": "Carol"}
        assert CART_COOKIE_NAME not in client.cookies
        cart = client.get("/cart", params={"user_id": 10}).json()
        assert cart["total_items"] == 1


class TestUsersAndProducts:
    def test_deleting_user_removes_their_cart(self, client: TestClient, user, catalog, db):
        from storefront.data.models import CartItemModel, CartModel

        user_id = user.id
        client.post("/cart/items", params={"user_id": user_id}, json={"product_id": catalog["mouse"], "quantity": 2})

        response = client.delete(f"/users/{user_id}")

        assert response.status_code == 204
        db.expire_all()
        assert db.query(CartModel).filter_by(user_id=user_id).count() == 0
        assert db.query(CartItemModel).count() == 0
        assert client.get(f"/users/{user_id}").status_code == 404

    def test_delete_product_in_cart_conflicts(self, client: TestClient, user, catalog):
        client.post("/cart/items", json={"product_id": catalog["mouse"], "quantity": 1})

        response = client.delete(f"/products/{catalog['mouse']}", params={"user_id": user.id})

        assert response.status_code == 409
        assert client.get(f"/products/{catalog['mouse']}").status_code == 200

    def test_delete_unreferenced_product(self, client: TestClient, user, catalog):
        response = client.delete(f"/products/{catalog['monitor']}", params={"user_id": user.id})

        assert response.status_code == 204
        assert client.get(f"/products/{catalog['monitor']}").status_code == 404

    def test_only_owner_may_update(self, client: TestClient, other_user, catalog):
        response = client.patch(
            f"/products/{catalog['mouse']}",
            params={"user_id": other_user.id},
            json={"price": "1.00"},
        )
        assert response.status_code == 403

    def test_create_product_validates_listing(self, client: TestClient, user):
        ok = client.post(
            "/products/",
            params={"user_id": user.id},
            json={"title": "Watch", "brand": "Fossil", "model": "FH256", "price": "100.00", "finish": "Black"},
        )
        bad = client.post(
            "/products/",
            params={"user_id": user.id},
            json={"title": "x" * 141, "brand": "Acme", "model": "Z", "price": "1.00"},
        )

        assert ok.status_code == 201
        assert ok.json()["user_id"] == user.id
        assert bad.status_code == 422

    def test_health(self, client: TestClient):
        assert client.get("/health").json() == {"status": "ok"}
