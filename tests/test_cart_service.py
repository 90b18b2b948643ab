import pytest

from storefront.core.exceptions import NotFoundError, ValidationError


def test_cart_detail_without_cart_is_empty(cart_service, make_user, rows):
    user = make_user()

    cart = cart_service.get_cart_detail(user.id)

    assert cart.cart_id is None
    assert cart.items == []
    assert cart.is_empty
    assert rows("carts") == 0


def test_get_or_create_cart_is_idempotent(cart_service, make_user, rows):
    user = make_user()

    first = cart_service.get_or_create_cart(user.id)
    second = cart_service.get_or_create_cart(user.id)

    assert first.cart_id == second.cart_id
    assert rows("carts") == 1


def test_get_or_create_cart_rereads_concurrently_created_cart(cart_service, cart_repo, make_user, monkeypatch):
    user = make_user()
    winner_id = cart_repo.create_cart(user.id)

    real_find = cart_repo.find_cart_by_user_id
    calls = []

    def find_missing_first_time(user_id, conn=None):
        calls.append(user_id)
        if len(calls) == 1:
            return None
        return real_find(user_id, conn=conn)

    monkeypatch.setattr(cart_repo, "find_cart_by_user_id", find_missing_first_time)

    cart = cart_service.get_or_create_cart(user.id)

    assert cart.cart_id == winner_id
    assert len(calls) == 2


def test_get_or_create_cart_for_unknown_user(cart_service):
    with pytest.raises(NotFoundError):
        cart_service.get_or_create_cart(9999)


def test_add_item_returns_cart_detail(cart_service, make_user, make_product):
    user = make_user()
    product = make_product(price_cents=1299, name="Mouse")

    cart = cart_service.add_item(user.id, product.id, 2)

    assert cart.cart_id is not None
    assert len(cart.items) == 1
    item = cart.items[0]
    assert item.product_id == product.id
    assert item.product_name == "Mouse"
    assert item.product_price_cents == 1299
    assert item.quantity == 2
    assert cart.total_cents == 2598


def test_add_same_product_twice_merges_lines(cart_service, make_user, make_product, rows):
    user = make_user()
    product = make_product()

    cart_service.add_item(user.id, product.id, 2)
    cart = cart_service.add_item(user.id, product.id, 3)

    assert rows("cart_items") == 1
    assert cart.get_item_by_product(product.id).quantity == 5


@pytest.mark.parametrize("quantity", [0, -1])
def test_add_item_rejects_non_positive_quantity(cart_service, make_user, make_product, rows, quantity):
    user = make_user()
    product = make_product()

    with pytest.raises(ValidationError):
        cart_service.add_item(user.id, product.id, quantity)

    assert rows("carts") == 0


def test_add_item_unknown_product(cart_service, make_user, rows):
    user = make_user()

    with pytest.raises(NotFoundError) as exc:
        cart_service.add_item(user.id, 4242, 1)

    assert exc.value.resource == "Product"
    assert rows("cart_items") == 0


def test_remove_item_without_quantity_deletes_line(cart_service, make_user, make_product):
    user = make_user()
    keep, drop = make_product(), make_product()
    cart_service.add_item(user.id, keep.id, 1)
    cart_service.add_item(user.id, drop.id, 4)

    cart = cart_service.remove_item(user.id, drop.id)

    assert [i.product_id for i in cart.items] == [keep.id]


def test_remove_item_partial_quantity_decrements(cart_service, make_user, make_product):
    user = make_user()
    product = make_product()
    cart_service.add_item(user.id, product.id, 5)

    cart = cart_service.remove_item(user.id, product.id, 2)

    assert cart.get_item_by_product(product.id).quantity == 3


@pytest.mark.parametrize("quantity", [5, 12])
def test_remove_item_at_or_above_quantity_deletes_line(cart_service, make_user, make_product, quantity):
    user = make_user()
    product = make_product()
    cart_service.add_item(user.id, product.id, 5)

    cart = cart_service.remove_item(user.id, product.id, quantity)

    assert cart.is_empty


def test_remove_item_rejects_non_positive_quantity(cart_service, make_user, make_product):
    user = make_user()
    product = make_product()
    cart_service.add_item(user.id, product.id, 5)

    with pytest.raises(ValidationError):
        cart_service.remove_item(user.id, product.id, 0)

    assert cart_service.get_cart_detail(user.id).get_item_by_product(product.id).quantity == 5


def test_remove_item_missing_line_leaves_cart_unchanged(cart_service, make_user, make_product, rows):
    user = make_user()
    in_cart, not_in_cart = make_product(), make_product()
    cart_service.add_item(user.id, in_cart.id, 2)

    with pytest.raises(NotFoundError):
        cart_service.remove_item(user.id, not_in_cart.id)

    assert rows("cart_items") == 1
    assert cart_service.get_cart_detail(user.id).get_item_by_product(in_cart.id).quantity == 2


def test_remove_item_without_cart(cart_service, make_user, make_product):
    user = make_user()
    product = make_product()

    with pytest.raises(NotFoundError):
        cart_service.remove_item(user.id, product.id)


def test_clear_removes_all_lines(cart_service, make_user, make_product):
    user = make_user()
    for _ in range(3):
        cart_service.add_item(user.id, make_product().id, 1)

    removed = cart_service.clear(user.id)

    assert removed == 3
    assert cart_service.get_cart_detail(user.id).is_empty


def test_clear_empty_cart_is_noop(cart_service, make_user):
    user = make_user()
    cart_service.get_or_create_cart(user.id)

    assert cart_service.clear(user.id) == 0


def test_clear_without_cart(cart_service, make_user):
    user = make_user()

    with pytest.raises(NotFoundError):
        cart_service.clear(user.id)


def test_deleting_product_removes_it_from_carts(cart_service, product_service, make_user, make_product):
    user = make_user()
    product = make_product()
    cart_service.add_item(user.id, product.id, 1)

    product_service.delete_product(product.id)

    assert cart_service.get_cart_detail(user.id).is_empty
