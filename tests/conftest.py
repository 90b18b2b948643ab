import itertools

import pytest
from sqlalchemy import text

from storefront.app import create_app
from storefront.core.config import Config
from storefront.core.dependencies import EXTENSION_KEY
from storefront.db.database import Database
from storefront.repositories import CartRepository, OrderRepository
from storefront.schemas.product_schemas import CategoryRequest, ProductCreateRequest
from storefront.schemas.user_schemas import RegisterRequest
from storefront.services import (
    CartService, CategoryService, OrderService, ProductService, UserService
)

TEST_ENV = {
    "DATABASE_URL": "sqlite://",
    "JWT_SECRET_KEY": "test-secret",
    "PASSWORD_HASH_ROUNDS": "4",
    "ENVIRONMENT": "testing",
    "LOG_LEVEL": "WARNING",
}

DEFAULT_PASSWORD = "s3cret-pass"


@pytest.fixture
def config():
    return Config(dict(TEST_ENV))


@pytest.fixture
def app(config):
    """Fresh application backed by its own in-memory database"""
    app = create_app(config)
    app.config["TESTING"] = True
    yield app
    app.extensions[EXTENSION_KEY].get(Database).dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def container(app):
    return app.extensions[EXTENSION_KEY]


@pytest.fixture
def db(container):
    return container.get(Database)


@pytest.fixture
def cart_service(container) -> CartService:
    return container.get(CartService)


@pytest.fixture
def order_service(container) -> OrderService:
    return container.get(OrderService)


@pytest.fixture
def product_service(container) -> ProductService:
    return container.get(ProductService)


@pytest.fixture
def category_service(container) -> CategoryService:
    return container.get(CategoryService)


@pytest.fixture
def user_service(container) -> UserService:
    return container.get(UserService)


@pytest.fixture
def cart_repo(container) -> CartRepository:
    return container.get(CartRepository)


@pytest.fixture
def order_repo(container) -> OrderRepository:
    return container.get(OrderRepository)


@pytest.fixture
def make_user(user_service):
    counter = itertools.count(1)

    def _make(email=None, password=DEFAULT_PASSWORD):
        email = email or f"user{next(counter)}@mail.com"
        user, _ = user_service.register(RegisterRequest(email=email, password=password))
        return user

    return _make


@pytest.fixture
def make_category(category_service):
    def _make(name="Electronics"):
        return category_service.create_category(CategoryRequest(name=name))

    return _make


@pytest.fixture
def make_product(product_service):
    counter = itertools.count(1)

    def _make(price_cents=1000, name=None, stock=10, category_id=None):
        return product_service.create_product(ProductCreateRequest(
            name=name or f"Product {next(counter)}",
            price_cents=price_cents,
            stock=stock,
            category_id=category_id,
        ))

    return _make


def count_rows(db, table):
    with db.connect() as conn:
        return conn.execute(text(f"SELECT COUNT(*) FROM {table}")).scalar()


@pytest.fixture
def rows(db):
    """rows("orders") -> current row count of a table"""
    return lambda table: count_rows(db, table)


@pytest.fixture
def register(client):
    """Register through the API and return (user_id, auth headers)"""
    counter = itertools.count(1)

    def _register(email=None, password=DEFAULT_PASSWORD):
        email = email or f"client{next(counter)}@mail.com"
        resp = client.post("/api/v1/auth/register", json={"email": email, "password": password})
        assert resp.status_code == 201, resp.get_json()
        data = resp.get_json()["data"]
        return data["user"]["user_id"], {"Authorization": f"Bearer {data['token']}"}

    return _register
