import pytest
from pydantic import ValidationError as PydanticValidationError

from storefront.core.exceptions import ConflictError, NotFoundError, ValidationError
from storefront.schemas.product_schemas import (
    CategoryRequest, ProductCreateRequest, ProductListRequest, ProductUpdateRequest
)


def test_create_and_get_product(product_service, make_category):
    category = make_category()

    product = product_service.create_product(ProductCreateRequest(
        name="  Wireless   Mouse ",
        price_cents=2499,
        stock=50,
        description="2.4GHz",
        image_url="https://cdn.example.com/mouse.jpg",
        category_id=category.id,
    ))

    fetched = product_service.get_product_by_id(product.id)
    assert fetched.name == "Wireless Mouse"
    assert fetched.price_cents == 2499
    assert fetched.stock == 50
    assert fetched.category_id == category.id
    assert fetched.created_at is not None


def test_create_product_with_unknown_category(product_service, rows):
    with pytest.raises(ValidationError):
        product_service.create_product(ProductCreateRequest(name="Orphan", price_cents=100, category_id=77))

    assert rows("products") == 0


def test_get_unknown_product(product_service):
    with pytest.raises(NotFoundError):
        product_service.get_product_by_id(123)


def test_list_products_filters_by_category(product_service, make_category, make_product):
    books = make_category("Books")
    toys = make_category("Toys")
    novel = make_product(category_id=books.id)
    make_product(category_id=toys.id)
    make_product()

    products, next_cursor = product_service.list_products(ProductListRequest(category_id=books.id))

    assert [p.id for p in products] == [novel.id]
    assert next_cursor is None


def test_list_products_paginates(product_service, make_product):
    created = [make_product() for _ in range(5)]

    page, cursor = product_service.list_products(ProductListRequest(limit=2))
    rest, last_cursor = product_service.list_products(ProductListRequest(limit=10, after=cursor))

    assert [p.id for p in page] == [p.id for p in created[:2]]
    assert cursor == created[1].id
    assert [p.id for p in rest] == [p.id for p in created[2:]]
    assert last_cursor is None


def test_update_product_changes_only_given_fields(product_service, make_product):
    product = make_product(price_cents=1000, stock=3, name="Kettle")

    updated = product_service.update_product(product.id, ProductUpdateRequest(stock=9))

    assert updated.stock == 9
    assert updated.price_cents == 1000
    assert updated.name == "Kettle"


def test_update_product_rejects_unknown_fields():
    with pytest.raises(PydanticValidationError) as exc:
        ProductUpdateRequest(sku="ABC")

    assert "sku" in str(exc.value)


def test_update_product_requires_a_field(product_service, make_product):
    product = make_product()

    with pytest.raises(ValidationError):
        product_service.update_product(product.id, ProductUpdateRequest())


def test_update_product_cannot_null_price(product_service, make_product):
    product = make_product()

    with pytest.raises(ValidationError):
        product_service.update_product(product.id, ProductUpdateRequest(price_cents=None))


def test_update_unknown_product(product_service):
    with pytest.raises(NotFoundError):
        product_service.update_product(404, ProductUpdateRequest(stock=1))


def test_delete_product(product_service, make_product):
    product = make_product()

    product_service.delete_product(product.id)

    with pytest.raises(NotFoundError):
        product_service.get_product_by_id(product.id)
    with pytest.raises(NotFoundError):
        product_service.delete_product(product.id)


def test_category_names_are_unique(category_service, make_category):
    make_category("Garden")

    with pytest.raises(ConflictError):
        category_service.create_category(CategoryRequest(name="Garden"))


def test_rename_category(category_service, make_category):
    category = make_category("Garden")
    make_category("Kitchen")

    renamed = category_service.rename_category(category.id, CategoryRequest(name="Outdoor"))
    assert renamed.name == "Outdoor"

    with pytest.raises(ConflictError):
        category_service.rename_category(category.id, CategoryRequest(name="Kitchen"))


def test_list_categories_sorted_by_name(category_service, make_category):
    for name in ["Toys", "Books", "Music"]:
        make_category(name)

    assert [c.name for c in category_service.list_categories()] == ["Books", "Music", "Toys"]


def test_deleting_category_keeps_products(category_service, product_service, make_category, make_product):
    category = make_category()
    product = make_product(category_id=category.id)

    category_service.delete_category(category.id)

    assert product_service.get_product_by_id(product.id).category_id is None
    with pytest.raises(NotFoundError):
        category_service.get_category(category.id)
