import pytest

API = "/api/v1"


def error_code(resp):
    return resp.get_json()["error"]["code"]


@pytest.fixture
def product_id(client, register):
    _, headers = register()
    resp = client.post(f"{API}/products", json={"name": "Notebook", "price_cents": 1000, "stock": 5},
                       headers=headers)
    assert resp.status_code == 201
    return resp.get_json()["data"]["product_id"]


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.get_json()["database"] == "reachable"


def test_register_and_login(client):
    resp = client.post(f"{API}/auth/register", json={"email": "ivan@mail.com", "password": "s3cret-pass"})
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["success"] is True
    assert body["data"]["user"]["email"] == "ivan@mail.com"
    assert "hashed_password" not in body["data"]["user"]
    assert "timestamp" in body

    resp = client.post(f"{API}/auth/login", json={"email": "ivan@mail.com", "password": "s3cret-pass"})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["token"]


def test_register_duplicate_email_is_conflict(client, register):
    register("judy@mail.com")

    resp = client.post(f"{API}/auth/register", json={"email": "judy@mail.com", "password": "s3cret-pass"})

    assert resp.status_code == 409
    assert error_code(resp) == "CONFLICT"


def test_register_invalid_email(client):
    resp = client.post(f"{API}/auth/register", json={"email": "nope", "password": "s3cret-pass"})

    assert resp.status_code == 400
    assert error_code(resp) == "VALIDATION_ERROR"


def test_login_wrong_password(client, register):
    register("ken@mail.com")

    resp = client.post(f"{API}/auth/login", json={"email": "ken@mail.com", "password": "wrong-pass"})

    assert resp.status_code == 401
    assert error_code(resp) == "UNAUTHORIZED"


@pytest.mark.parametrize("headers", [
    {},
    {"Authorization": "Bearer"},
    {"Authorization": "Basic abc"},
    {"Authorization": "Bearer not.a.jwt"},
])
def test_cart_requires_valid_token(client, headers):
    resp = client.get(f"{API}/cart", headers=headers)

    assert resp.status_code == 401
    assert error_code(resp) == "UNAUTHORIZED"


def test_user_profile_is_self_only(client, register):
    me, headers = register()
    other, _ = register()

    assert client.get(f"{API}/users/{me}", headers=headers).status_code == 200
    resp = client.get(f"{API}/users/{other}", headers=headers)
    assert resp.status_code == 403
    assert error_code(resp) == "FORBIDDEN"


def test_user_update_rejects_unknown_fields(client, register):
    me, headers = register()

    resp = client.patch(f"{API}/users/{me}", json={"is_admin": True}, headers=headers)

    assert resp.status_code == 400
    assert error_code(resp) == "VALIDATION_ERROR"


def test_delete_user(client, register):
    me, headers = register()

    assert client.delete(f"{API}/users/{me}", headers=headers).status_code == 204
    assert client.get(f"{API}/cart", headers=headers).status_code == 401


def test_category_crud(client, register):
    _, headers = register()

    resp = client.post(f"{API}/categories", json={"name": "Books"}, headers=headers)
    assert resp.status_code == 201
    category_id = resp.get_json()["data"]["category_id"]

    assert client.post(f"{API}/categories", json={"name": "Books"}, headers=headers).status_code == 409
    resp = client.put(f"{API}/categories/{category_id}", json={"name": "Novels"}, headers=headers)
    assert resp.get_json()["data"]["name"] == "Novels"
    assert [c["name"] for c in client.get(f"{API}/categories").get_json()["data"]] == ["Novels"]
    assert client.delete(f"{API}/categories/{category_id}", headers=headers).status_code == 204
    assert client.get(f"{API}/categories/{category_id}").status_code == 404


def test_product_crud(client, register, product_id):
    _, headers = register()

    resp = client.get(f"{API}/products/{product_id}")
    assert resp.status_code == 200
    assert resp.get_json()["data"]["price"] == "$10.00"

    resp = client.patch(f"{API}/products/{product_id}", json={"price_cents": 1250}, headers=headers)
    assert resp.get_json()["data"]["price_cents"] == 1250

    listing = client.get(f"{API}/products").get_json()["data"]
    assert [p["product_id"] for p in listing["products"]] == [product_id]
    assert listing["pagination"]["has_more"] is False

    assert client.delete(f"{API}/products/{product_id}", headers=headers).status_code == 204
    assert error_code(client.get(f"{API}/products/{product_id}")) == "NOT_FOUND"


def test_product_create_requires_auth(client):
    resp = client.post(f"{API}/products", json={"name": "Pen", "price_cents": 100})

    assert resp.status_code == 401


@pytest.mark.parametrize("payload", [
    {"name": "Pen", "price_cents": 0},
    {"name": "Pen", "price_cents": "100"},
    {"name": "Pen"},
    {"name": "Pen", "price_cents": 100, "sku": "PEN-1"},
])
def test_product_create_validation(client, register, payload):
    _, headers = register()

    resp = client.post(f"{API}/products", json=payload, headers=headers)

    assert resp.status_code == 400
    assert error_code(resp) == "VALIDATION_ERROR"


def test_product_update_rejects_unknown_fields(client, register, product_id):
    _, headers = register()

    resp = client.patch(f"{API}/products/{product_id}", json={"owner_id": 1}, headers=headers)

    assert resp.status_code == 400
    assert "owner_id" in str(resp.get_json()["error"]["details"])


def test_list_products_rejects_bad_limit(client):
    resp = client.get(f"{API}/products?limit=abc")

    assert resp.status_code == 400
    assert error_code(resp) == "VALIDATION_ERROR"


def test_cart_and_order_flow(client, register, product_id):
    _, headers = register()

    resp = client.post(f"{API}/cart/items", json={"product_id": product_id, "quantity": 2}, headers=headers)
    assert resp.status_code == 200
    resp = client.post(f"{API}/cart/items", json={"product_id": product_id, "quantity": 1}, headers=headers)
    cart = resp.get_json()["data"]
    assert cart["items"][0]["quantity"] == 3
    assert cart["total_cents"] == 3000

    resp = client.delete(f"{API}/cart/items/{product_id}?quantity=1", headers=headers)
    assert resp.get_json()["data"]["items"][0]["quantity"] == 2

    resp = client.post(f"{API}/orders", headers=headers)
    assert resp.status_code == 201
    order = resp.get_json()["data"]
    assert order["status"] == "pending"
    assert order["total_cents"] == 2000
    assert order["items"][0]["price_at_order_cents"] == 1000

    assert client.get(f"{API}/cart", headers=headers).get_json()["data"]["is_empty"] is True
    orders = client.get(f"{API}/orders", headers=headers).get_json()["data"]
    assert [o["order_id"] for o in orders] == [order["order_id"]]

    resp = client.patch(f"{API}/orders/{order['order_id']}/status", json={"status": "shipped"}, headers=headers)
    assert resp.get_json()["data"]["status"] == "shipped"

    resp = client.patch(f"{API}/orders/{order['order_id']}/status", json={"status": "pending"}, headers=headers)
    assert resp.status_code == 409
    assert error_code(resp) == "INVALID_STATUS_TRANSITION"


def test_order_with_empty_cart(client, register):
    _, headers = register()

    resp = client.post(f"{API}/orders", headers=headers)

    assert resp.status_code == 400
    assert error_code(resp) == "EMPTY_CART"


@pytest.mark.parametrize("payload", [
    {"product_id": 1, "quantity": 0},
    {"product_id": 1, "quantity": -3},
    {"product_id": "1", "quantity": 1},
    {"quantity": 1},
])
def test_add_to_cart_validation(client, register, payload):
    _, headers = register()

    resp = client.post(f"{API}/cart/items", json=payload, headers=headers)

    assert resp.status_code == 400
    assert error_code(resp) == "VALIDATION_ERROR"


def test_add_unknown_product_to_cart(client, register):
    _, headers = register()

    resp = client.post(f"{API}/cart/items", json={"product_id": 999, "quantity": 1}, headers=headers)

    assert resp.status_code == 404


def test_remove_line_not_in_cart(client, register, product_id):
    _, headers = register()

    assert client.delete(f"{API}/cart/items/{product_id}", headers=headers).status_code == 404
    assert client.delete(f"{API}/cart", headers=headers).status_code == 404


def test_remove_with_invalid_quantity(client, register, product_id):
    _, headers = register()
    client.post(f"{API}/cart/items", json={"product_id": product_id, "quantity": 2}, headers=headers)

    resp = client.delete(f"{API}/cart/items/{product_id}?quantity=0", headers=headers)

    assert resp.status_code == 400


def test_order_of_other_user_is_not_found(client, register, product_id):
    _, owner = register()
    _, stranger = register()
    client.post(f"{API}/cart/items", json={"product_id": product_id, "quantity": 1}, headers=owner)
    order_id = client.post(f"{API}/orders", headers=owner).get_json()["data"]["order_id"]

    assert client.get(f"{API}/orders/{order_id}", headers=owner).status_code == 200
    assert client.get(f"{API}/orders/{order_id}", headers=stranger).status_code == 404


def test_unknown_route_returns_json(client):
    resp = client.get(f"{API}/nothing-here")

    assert resp.status_code == 404
    assert resp.get_json()["success"] is False


def test_storage_error_is_generic(client, register, container, monkeypatch):
    from storefront.core.exceptions import StorageError
    from storefront.services import CartService

    _, headers = register()

    def broken(user_id):
        raise StorageError("relation \"carts\" does not exist", "SELECT")

    monkeypatch.setattr(container.get(CartService), "get_cart_detail", broken)

    resp = client.get(f"{API}/cart", headers=headers)

    assert resp.status_code == 500
    assert error_code(resp) == "STORAGE_ERROR"
    assert "carts" not in resp.get_json()["error"]["message"]


@pytest.mark.parametrize("password, status", [
    ("x" * 72, 201),
    ("x" * 100, 400),
    ("ü" * 40, 400),
])
def test_register_password_byte_limit(client, password, status):
    resp = client.post(f"{API}/auth/register", json={"email": "lena@mail.com", "password": password})

    assert resp.status_code == status
    if status == 400:
        assert error_code(resp) == "VALIDATION_ERROR"


@pytest.mark.parametrize("method, path", [
    ("delete", "/cart/items/abc"),
    ("get", "/orders/abc"),
    ("patch", "/orders/abc/status"),
    ("get", "/products/abc"),
    ("get", "/categories/1x"),
    ("get", "/users/abc"),
])
def test_non_numeric_id_is_validation_error(client, register, method, path):
    _, headers = register()

    resp = getattr(client, method)(f"{API}{path}", json={"status": "shipped"}, headers=headers)

    assert resp.status_code == 400
    assert error_code(resp) == "VALIDATION_ERROR"


def test_remove_from_cart_with_non_numeric_id_leaves_cart(client, register, product_id):
    _, headers = register()
    client.post(f"{API}/cart/items", json={"product_id": product_id, "quantity": 2}, headers=headers)

    assert client.delete(f"{API}/cart/items/abc", headers=headers).status_code == 400

    items = client.get(f"{API}/cart", headers=headers).get_json()["data"]["items"]
    assert [i["quantity"] for i in items] == [2]
